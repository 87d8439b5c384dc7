users = [
    {'id': '23', 'firstName': 'Bill', 'age': 20, 'companyId': '1'},
    {'id': '40', 'firstName': 'Alex', 'age': 40, 'companyId': '2'},
    {'id': '41', 'firstName': 'Nick', 'age': 26, 'companyId': '2'},
]
companies = [
    {'id': '1', 'name': 'Apple', 'description': 'iphone'},
    {'id': '2', 'name': 'Google', 'description': 'search'},
]


def find_one(dict_list, key, value):
    for item in dict_list:
        if item.get(key) == value:
            return item

    return None


def find_many(dict_list, key, value):
    return [item for item in dict_list if item.get(key) == value]


def next_user_id():
    return str(max((int(u['id']) for u in users), default=0) + 1)

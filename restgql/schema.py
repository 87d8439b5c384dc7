"""The type graph: User and Company nodes, their edges, entry points and mutations.

User and Company reference each other, so their field maps are thunks that
graphql-core evaluates only once both types exist.
"""
from graphql import (
    GraphQLArgument,
    GraphQLField,
    GraphQLInt,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLSchema,
    GraphQLString,
)


def get_store(info):
    return info.context['store']


async def resolve_company_users(company, info):
    return await get_store(info).get_company_users(company['id'])


async def resolve_user_company(user, info):
    company_id = user.get('companyId')
    # Users without a company resolve to null instead of looking up an undefined id.
    if company_id is None:
        return None
    return await get_store(info).get_company(company_id)


CompanyType = GraphQLObjectType(
    'Company',
    fields=lambda: {
        'id': GraphQLField(GraphQLString),
        'name': GraphQLField(GraphQLString),
        'description': GraphQLField(GraphQLString),
        'users': GraphQLField(GraphQLList(UserType), resolve=resolve_company_users),
    },
)

UserType = GraphQLObjectType(
    'User',
    fields=lambda: {
        'id': GraphQLField(GraphQLString),
        'firstName': GraphQLField(GraphQLString),
        'age': GraphQLField(GraphQLInt),
        'company': GraphQLField(CompanyType, resolve=resolve_user_company),
    },
)


async def resolve_user(_, info, id=None):
    return await get_store(info).get_user(id)


async def resolve_company(_, info, id=None):
    return await get_store(info).get_company(id)


RootQuery = GraphQLObjectType(
    'RootQueryType',
    fields={
        'user': GraphQLField(
            UserType, args={'id': GraphQLArgument(GraphQLString)}, resolve=resolve_user,
        ),
        'company': GraphQLField(
            CompanyType, args={'id': GraphQLArgument(GraphQLString)}, resolve=resolve_company,
        ),
    },
)


async def add_user(_, info, firstName, age, companyId=None):
    # companyId is accepted but the store's create endpoint only takes these two.
    return await get_store(info).create_user({'firstName': firstName, 'age': age})


async def delete_user(_, info, id):
    return await get_store(info).delete_user(id)


async def edit_user(_, info, **args):
    # Arguments the caller left out are absent from ``args`` and so from the body.
    return await get_store(info).update_user(args['id'], args)


Mutation = GraphQLObjectType(
    'Mutation',
    fields={
        'addUser': GraphQLField(
            UserType,
            args={
                'firstName': GraphQLArgument(GraphQLNonNull(GraphQLString)),
                'age': GraphQLArgument(GraphQLNonNull(GraphQLInt)),
                'companyId': GraphQLArgument(GraphQLString),
            },
            resolve=add_user,
        ),
        'deleteUser': GraphQLField(
            UserType,
            args={'id': GraphQLArgument(GraphQLNonNull(GraphQLString))},
            resolve=delete_user,
        ),
        'editUser': GraphQLField(
            UserType,
            args={
                'id': GraphQLArgument(GraphQLNonNull(GraphQLString)),
                'firstName': GraphQLArgument(GraphQLString),
                'age': GraphQLArgument(GraphQLInt),
                'companyId': GraphQLArgument(GraphQLString),
            },
            resolve=edit_user,
        ),
    },
)

schema = GraphQLSchema(query=RootQuery, mutation=Mutation)

import uvicorn

from restgql import GraphQL
from restgql.logging import configure_logging

configure_logging(debug=True)

app = GraphQL(store_url='http://localhost:3000', debug=True)

if __name__ == '__main__':
    uvicorn.run(app, port=4000)
    # mutation { addUser(firstName: "Dan", age: 33) { id } }
    # query { company(id: "2") { name users { firstName company { id } } } }

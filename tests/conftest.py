"""
Shared fixtures: an in-memory REST store behind httpx.MockTransport and the
gateway app wired to it.
"""

import copy
import json
import re

import httpx
import pytest
import pytest_asyncio

from restgql.applications import GraphQL
from restgql.store import RestStore

USERS = {
    '23': {'id': '23', 'firstName': 'Bill', 'age': 20, 'companyId': '1'},
    '40': {'id': '40', 'firstName': 'Alex', 'age': 40, 'companyId': '2'},
    '41': {'id': '41', 'firstName': 'Nick', 'age': 26, 'companyId': '2'},
    '47': {'id': '47', 'firstName': 'Samantha', 'age': 21},
}
COMPANIES = {
    '1': {'id': '1', 'name': 'Apple', 'description': 'iphone'},
    '2': {'id': '2', 'name': 'Google', 'description': 'search'},
}


class FakeStore:
    """json-server lookalike for /users and /companies."""

    def __init__(self):
        self.users = copy.deepcopy(USERS)
        self.companies = copy.deepcopy(COMPANIES)
        self.requests = []
        self.broken_paths = set()
        self.next_id = 100

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        path = request.url.path
        self.requests.append((request.method, path, body))

        if path in self.broken_paths:
            return httpx.Response(500, json={'error': 'boom'})

        match = re.fullmatch(r'/companies/([^/]+)/users', path)
        if match and request.method == 'GET':
            company_id = match.group(1)
            return httpx.Response(
                200, json=[u for u in self.users.values() if u.get('companyId') == company_id]
            )

        match = re.fullmatch(r'/companies/([^/]+)', path)
        if match and request.method == 'GET':
            return self.lookup(self.companies, match.group(1))

        if path == '/users' and request.method == 'POST':
            user = dict(body, id=str(self.next_id))
            self.next_id += 1
            self.users[user['id']] = user
            return httpx.Response(201, json=user)

        match = re.fullmatch(r'/users/([^/]+)', path)
        if match:
            user_id = match.group(1)
            if request.method == 'GET':
                return self.lookup(self.users, user_id)
            if user_id not in self.users:
                return httpx.Response(404, json={})
            if request.method == 'PATCH':
                self.users[user_id].update(body)
                return httpx.Response(200, json=self.users[user_id])
            if request.method == 'DELETE':
                del self.users[user_id]
                return httpx.Response(200, json={})

        return httpx.Response(404, json={})

    def lookup(self, table, key):
        if key not in table:
            return httpx.Response(404, json={})
        return httpx.Response(200, json=table[key])


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest_asyncio.fixture
async def store(fake_store):
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(fake_store.handler), base_url='http://store.test'
    )
    yield RestStore('http://store.test', client=client)
    await client.aclose()


@pytest.fixture
def app(store):
    return GraphQL(store=store)


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac


@pytest.fixture
def execute(client):
    """POST a GraphQL document to the gateway and return the decoded envelope."""

    async def _execute(query, variables=None, operation_name=None):
        payload = {'query': query}
        if variables is not None:
            payload['variables'] = variables
        if operation_name is not None:
            payload['operationName'] = operation_name
        response = await client.post('/graphql', json=payload)
        assert response.status_code == 200
        return response.json()

    return _execute

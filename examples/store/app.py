"""In-memory stand-in for the json-server store the gateway talks to."""
import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from helper import companies, find_many, find_one, next_user_id, users


def not_found():
    return JSONResponse({}, status_code=404)


async def company(request: Request):
    found = find_one(companies, 'id', request.path_params['id'])
    return JSONResponse(found) if found else not_found()


async def company_users(request: Request):
    return JSONResponse(find_many(users, 'companyId', request.path_params['id']))


async def create_user(request: Request):
    user = await request.json()
    user['id'] = next_user_id()
    users.append(user)
    return JSONResponse(user, status_code=201)


async def user(request: Request):
    found = find_one(users, 'id', request.path_params['id'])
    if not found:
        return not_found()
    if request.method == 'PATCH':
        found.update(await request.json())
    elif request.method == 'DELETE':
        users.remove(found)
        return JSONResponse({})
    return JSONResponse(found)


app = Starlette(
    routes=[
        Route('/users', create_user, methods=['POST']),
        Route('/users/{id}', user, methods=['GET', 'PATCH', 'DELETE']),
        Route('/companies/{id}', company),
        Route('/companies/{id}/users', company_users),
    ]
)

if __name__ == '__main__':
    uvicorn.run(app, port=3000)

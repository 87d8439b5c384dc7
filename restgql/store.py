import typing
from urllib.parse import quote

import httpx

from .logging import get_logger

logger = get_logger(__name__)

Record = typing.Dict[str, typing.Any]


def segment(identifier: typing.Any) -> str:
    """Escape an identifier so it stays a single path segment."""
    quoted = quote(str(identifier), safe='')
    # Bare dot segments would be collapsed by URL normalisation.
    if quoted in ('.', '..'):
        quoted = quoted.replace('.', '%2E')
    return quoted


class RestStore:
    """Async client for the REST resource store behind the graph.

    Every method issues exactly one request and hands back the decoded body
    as-is. Non-2xx responses raise ``httpx.HTTPStatusError``; transport
    failures raise ``httpx.RequestError``.
    """

    def __init__(self, base_url: str = 'http://localhost:3000', client: httpx.AsyncClient = None) -> None:
        self.base_url = base_url
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=base_url)

    async def request(self, method: str, path: str, json: typing.Any = None) -> httpx.Response:
        try:
            response = await self.client.request(method, path, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                'Store request failed', method=method, path=path, status=exc.response.status_code,
            )
            raise
        except httpx.RequestError as exc:
            logger.warning('Store unreachable', method=method, path=path, error=str(exc))
            raise
        logger.debug('Store request', method=method, path=path, status=response.status_code)
        return response

    async def get_user(self, user_id: str) -> Record:
        response = await self.request('GET', f'/users/{segment(user_id)}')
        return response.json()

    async def get_company(self, company_id: str) -> Record:
        response = await self.request('GET', f'/companies/{segment(company_id)}')
        return response.json()

    async def get_company_users(self, company_id: str) -> typing.List[Record]:
        response = await self.request('GET', f'/companies/{segment(company_id)}/users')
        return response.json()

    async def create_user(self, data: Record) -> Record:
        response = await self.request('POST', '/users', json=data)
        return response.json()

    async def update_user(self, user_id: str, data: Record) -> Record:
        response = await self.request('PATCH', f'/users/{segment(user_id)}', json=data)
        return response.json()

    async def delete_user(self, user_id: str) -> None:
        # The store answers a delete with an empty body.
        await self.request('DELETE', f'/users/{segment(user_id)}')
        return None

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

import contextlib
import inspect
import json
import traceback
import typing

from gql import make_schema, make_schema_from_file
from gql.playground import PLAYGROUND_HTML
from gql.resolver import default_field_resolver, register_resolvers
from graphql import (
    GraphQLError,
    GraphQLFieldResolver,
    GraphQLSchema,
    Middleware,
    OperationType,
    get_operation_ast,
    graphql,
    parse,
)
from starlette import status
from starlette.applications import Starlette
from starlette.background import BackgroundTasks
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from starlette.routing import BaseRoute, Route
from starlette.types import Receive, Scope, Send

from .config import Settings
from .logging import clear_request_context, get_logger, set_request_context
from .schema import schema as default_schema
from .store import RestStore

ERROR_FORMATER = typing.Callable[[GraphQLError], typing.Dict[str, typing.Any]]

logger = get_logger(__name__)


async def run_handler(handler: typing.Callable) -> None:
    result = handler()
    if inspect.isawaitable(result):
        await result


class GraphQL(Starlette):
    def __init__(
        self,
        schema: GraphQLSchema = None,
        *,
        type_defs: str = None,
        schema_file: str = None,
        store: RestStore = None,
        store_url: str = 'http://localhost:3000',
        playground: bool = True,
        debug: bool = False,
        routes: typing.List[BaseRoute] = None,
        path: str = '/graphql',
        error_formater: ERROR_FORMATER = None,
        graphql_middleware: Middleware = None,
        context_builder: typing.Callable = None,
        **kwargs,
    ):
        routes = routes or []
        field_resolver = None
        if schema:
            self.schema = schema
        elif type_defs or schema_file:
            # SDL schemas get their resolvers from python-gql's decorators.
            if type_defs:
                self.schema = make_schema(type_defs)
            else:
                self.schema = make_schema_from_file(schema_file)
            register_resolvers(self.schema)
            field_resolver = default_field_resolver
        else:
            self.schema = default_schema
        self.store = store or RestStore(store_url)
        owns_store = store is None

        on_startup = kwargs.pop('on_startup', None) or []
        on_shutdown = kwargs.pop('on_shutdown', None) or []
        app_lifespan = kwargs.pop('lifespan', None)

        @contextlib.asynccontextmanager
        async def lifespan(app):
            try:
                async with contextlib.AsyncExitStack() as stack:
                    for handler in on_startup:
                        await run_handler(handler)
                    state = None
                    if app_lifespan:
                        state = await stack.enter_async_context(app_lifespan(app))
                    try:
                        yield state
                    finally:
                        for handler in on_shutdown:
                            await run_handler(handler)
            finally:
                if owns_store:
                    await self.store.aclose()

        routes.append(
            Route(
                path,
                ASGIApp(
                    self.schema,
                    self.store,
                    debug=debug,
                    playground=playground,
                    error_formater=error_formater,
                    graphql_middleware=graphql_middleware,
                    context_builder=context_builder,
                    field_resolver=field_resolver,
                ),
            )
        )
        super().__init__(debug=debug, routes=routes, lifespan=lifespan, **kwargs)


class ASGIApp:
    def __init__(
        self,
        schema: GraphQLSchema,
        store: RestStore,
        debug: bool = False,
        playground: bool = True,
        error_formater: ERROR_FORMATER = None,
        graphql_middleware: Middleware = None,
        context_builder: typing.Callable = None,
        field_resolver: GraphQLFieldResolver = None,
    ) -> None:
        self.schema = schema
        self.store = store
        self.playground = playground
        self.error_formater = error_formater or self.format_error
        self.debug = debug
        self.middleware = graphql_middleware
        self.context_builder = context_builder
        self.field_resolver = field_resolver

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive=receive, send=send)
        set_request_context()
        try:
            response = await self.handle_graphql(request)
        finally:
            clear_request_context()
        await response(scope, receive, send)

    def format_error(self, error: GraphQLError) -> typing.Dict[str, typing.Any]:
        if not error:
            raise ValueError('Received null or undefined error.')
        formatted = dict(
            message=error.message or 'An unknown error occurred.',
            locations=[loc._asdict() for loc in error.locations] if error.locations else None,
            path=error.path,
        )
        extensions = dict(error.extensions or {})
        if self.debug and error.original_error:
            original_error = error.original_error
            exception = dict(extensions.get('exception', {}))
            exception['traceback'] = traceback.format_exception(
                type(original_error), original_error, original_error.__traceback__
            )
            extensions['exception'] = exception
        if extensions:
            formatted.update(extensions=extensions)
        return formatted

    @staticmethod
    def is_query(query: str, operation_name: typing.Optional[str]) -> bool:
        try:
            document = parse(query)
        except GraphQLError:
            # Let execution report the syntax error.
            return True
        operation = get_operation_ast(document, operation_name)
        return operation is None or operation.operation == OperationType.QUERY

    async def handle_graphql(self, request: Request) -> Response:
        if request.method in ('GET', 'HEAD'):
            if 'text/html' in request.headers.get('Accept', ''):
                if not self.playground:
                    return PlainTextResponse('Not Found', status_code=status.HTTP_404_NOT_FOUND)
                return HTMLResponse(PLAYGROUND_HTML)

            data = dict(request.query_params)  # type: typing.Dict[str, typing.Any]

        elif request.method == 'POST':
            content_type = request.headers.get('Content-Type', '')

            if 'application/json' in content_type:
                try:
                    data = await request.json()
                except ValueError:
                    return PlainTextResponse(
                        'Request body is not valid JSON', status_code=status.HTTP_400_BAD_REQUEST,
                    )
                if not isinstance(data, dict):
                    return PlainTextResponse(
                        'Request body must be a JSON object', status_code=status.HTTP_400_BAD_REQUEST,
                    )
            elif 'application/graphql' in content_type:
                body = await request.body()
                data = {'query': body.decode()}
            elif 'query' in request.query_params:
                data = dict(request.query_params)
            else:
                return PlainTextResponse(
                    'Unsupported Media Type', status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                )
        else:
            return PlainTextResponse(
                'Method Not Allowed', status_code=status.HTTP_405_METHOD_NOT_ALLOWED
            )

        try:
            query = data['query']
            variables = data.get('variables')
            operation_name = data.get('operationName')
        except KeyError:
            return PlainTextResponse(
                'No GraphQL query found in the request', status_code=status.HTTP_400_BAD_REQUEST,
            )

        # Query-string variables arrive JSON encoded.
        if isinstance(variables, str):
            try:
                variables = json.loads(variables) if variables else None
            except ValueError:
                return PlainTextResponse(
                    'Variables are invalid JSON', status_code=status.HTTP_400_BAD_REQUEST,
                )

        if not isinstance(query, str):
            return PlainTextResponse(
                'GraphQL query must be a string', status_code=status.HTTP_400_BAD_REQUEST,
            )
        if variables is not None and not isinstance(variables, dict):
            return PlainTextResponse(
                'Variables must be a JSON object', status_code=status.HTTP_400_BAD_REQUEST,
            )
        if operation_name is not None and not isinstance(operation_name, str):
            return PlainTextResponse(
                'Operation name must be a string', status_code=status.HTTP_400_BAD_REQUEST,
            )

        if request.method in ('GET', 'HEAD') and not self.is_query(query, operation_name):
            return PlainTextResponse(
                'Can only perform a mutation operation from a POST request.',
                status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
                headers={'Allow': 'POST'},
            )

        background = BackgroundTasks()
        context = self.context_builder() if self.context_builder else {}
        context.update(request=request, background=background, store=self.store)

        result = await graphql(
            self.schema,
            query,
            variable_values=variables,
            operation_name=operation_name,
            context_value=context,
            field_resolver=self.field_resolver,
            middleware=self.middleware,
        )
        if result.errors:
            logger.info(
                'GraphQL operation finished with errors',
                operation_name=operation_name,
                errors=len(result.errors),
            )
        else:
            logger.debug('GraphQL operation finished', operation_name=operation_name)

        error_data = [self.error_formater(err) for err in result.errors] if result.errors else None
        response_data = {'data': result.data, 'errors': error_data}

        return JSONResponse(response_data, status_code=status.HTTP_200_OK, background=background)


def create_app(settings: Settings) -> GraphQL:
    return GraphQL(
        store_url=settings.store_url,
        path=settings.path,
        playground=settings.playground,
        debug=settings.debug,
    )

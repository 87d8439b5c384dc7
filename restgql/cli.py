"""
Command line entry point for the restgql gateway.
"""

import os

import click
import uvicorn
from graphql import print_schema

from . import __version__
from .config import settings
from .logging import configure_logging, get_logger
from .schema import schema

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name='restgql')
def cli() -> None:
    """restgql - GraphQL gateway over a REST user/company store."""
    pass


@cli.command()
@click.option('--host', default=settings.host, help='Host to bind to')
@click.option('--port', default=settings.port, type=int, help='Port to bind to')
@click.option('--store-url', default=settings.store_url, help='Base URL of the REST store')
@click.option('--reload', is_flag=True, default=False, help='Enable auto-reload for development')
@click.option(
    '--log-level',
    default=settings.log_level,
    type=click.Choice(['debug', 'info', 'warning', 'error']),
    help='Log level',
)
def serve(host: str, port: int, store_url: str, reload: bool, log_level: str) -> None:
    """Start the GraphQL server."""
    configure_logging(debug=(log_level == 'debug'), log_level=log_level)

    # restgql.app reads its settings from the environment on import.
    os.environ['RESTGQL_STORE_URL'] = store_url
    os.environ['RESTGQL_LOG_LEVEL'] = log_level
    if log_level == 'debug':
        os.environ['RESTGQL_DEBUG'] = 'true'

    logger.info('Starting restgql server', host=host, port=port, store_url=store_url, reload=reload)

    uvicorn.run('restgql.app:app', host=host, port=port, reload=reload, log_level=log_level)


@cli.command('schema')
def print_type_graph() -> None:
    """Print the GraphQL schema in SDL form."""
    click.echo(print_schema(schema))


def main() -> None:
    cli()


if __name__ == '__main__':
    main()

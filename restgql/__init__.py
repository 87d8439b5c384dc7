from .applications import GraphQL, create_app
from .schema import schema
from .store import RestStore

__version__ = '0.1.0'

__all__ = ['GraphQL', 'RestStore', 'create_app', 'schema']

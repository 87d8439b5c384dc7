"""
Configuration for the restgql gateway
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Gateway settings loaded from RESTGQL_* environment variables."""

    model_config = SettingsConfigDict(env_prefix='RESTGQL_')

    # REST store the resolvers proxy to
    store_url: str = 'http://localhost:3000'

    # HTTP server
    host: str = '0.0.0.0'
    port: int = 4000
    path: str = '/graphql'
    playground: bool = True

    debug: bool = False
    log_level: str = 'info'


settings = Settings()

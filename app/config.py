"""Configuration settings for the client/project API."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # MongoDB configuration
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "clientprojects"
    # Only replica sets / sharded clusters support multi-document transactions
    mongo_transactions: bool = False

    # Application configuration
    app_env: str = "dev"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    @property
    def graphiql_enabled(self) -> bool:
        return self.app_env.lower() in ("dev", "development")


settings = Settings()

"""
Runtime configuration.

Settings are loaded from environment variables (and a local .env file) so the
agent servers and the aggregator API share one source of truth for database,
model endpoint and port configuration.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuration loaded from environment variables."""

    # SQL Server connection
    DB_SERVER: str = ""
    DB_DATABASE: str = ""
    DB_USER: str = ""
    DB_PASSWORD: str = ""
    DB_DRIVER: str = "ODBC Driver 18 for SQL Server"
    DB_SCHEMA: str = "dbo"
    DB_TRUST_SERVER_CERTIFICATE: bool = False

    # Local model-serving endpoint (Ollama chat API)
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    OLLAMA_MODEL: str = "llama3:8b"
    # Unset means no timeout on model calls
    OLLAMA_TIMEOUT_SECONDS: float | None = None
    OPTIMIZE_TEMPERATURE: float = 0.3

    # Servers
    AGENT_HOST: str = "localhost"
    MS_SQL_AGENT_PORT: int = 41242
    MS_SQL_OPTIMIZE_QUERY_AGENT_PORT: int = 41243
    API_PORT: int = 3000
    CORS_ALLOW_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def odbc_dsn(self) -> str:
        """ODBC connection string for the configured SQL Server database."""
        dsn = (
            f"DRIVER={{{self.DB_DRIVER}}};"
            f"SERVER={self.DB_SERVER};"
            f"DATABASE={self.DB_DATABASE};"
            f"UID={self.DB_USER};"
            f"PWD={self.DB_PASSWORD};"
        )
        if self.DB_TRUST_SERVER_CERTIFICATE:
            dsn += "TrustServerCertificate=yes;"
        return dsn


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()

from __future__ import annotations

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_DB: str
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 300

    # Connection identity is trusted from the handshake query unless a signed
    # token is required.
    SOCKET_REQUIRE_TOKEN: bool = False
    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"

    CORS_ORIGINS: list[str] = ["*"]

    SOCKETIO_PATH: str = "socket.io"
    SOCKETIO_PING_INTERVAL: int = 25
    SOCKETIO_PING_TIMEOUT: int = 20

    PUSH_CONVERSATION_UPDATES: bool = True

    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def socketio_cors_origins(self) -> str | list[str]:
        if "*" in self.CORS_ORIGINS:
            return "*"
        return self.CORS_ORIGINS

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]

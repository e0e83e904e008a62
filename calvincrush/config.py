import os
from functools import lru_cache
from pathlib import Path as _Path

from dotenv import load_dotenv as _load_dotenv
from pydantic import BaseModel, Field

_load_dotenv(dotenv_path=_Path(__file__).resolve().parent.parent / ".env", override=False)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings(BaseModel):
    # Support multiple common env var names for Mongo connection string
    mongo_uri: str = Field(
        default_factory=lambda: (
            os.getenv("MONGO_URI")
            or os.getenv("MONGODB_URI")
            or os.getenv("MONGO_URL")
            or ""
        )
    )
    mongo_db: str = Field(default_factory=lambda: os.getenv("MONGO_DB_NAME", "calvincrush"))
    # Optional: provide a non-SRV fallback URI (e.g., mongodb://127.0.0.1:27017)
    mongo_alt_uri: str = Field(default_factory=lambda: os.getenv("MONGO_ALT_URI", ""))
    mongo_direct: bool = Field(default_factory=lambda: _env_flag("MONGO_DIRECT"))
    mongo_server_selection_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "3000"))
    )
    mongo_connect_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("MONGO_CONNECT_TIMEOUT_MS", "3000"))
    )
    mongo_socket_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("MONGO_SOCKET_TIMEOUT_MS", "5000"))
    )
    cors_origins: str = Field(
        default_factory=lambda: (
            os.getenv("CORS_ORIGINS")
            or os.getenv("CORS_ORIGIN")
            or "http://localhost:5173,http://127.0.0.1:5173"
        )
    )
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "5000")))
    slow_request_ms: int = Field(default_factory=lambda: int(os.getenv("SLOW_REQUEST_MS", "800")))

    @property
    def allow_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()

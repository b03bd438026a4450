import warnings
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BeforeValidator, HttpUrl, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self


def parse_cors(v: Any) -> Union[List[str], str]:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, (list, str)):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_ignore_empty=True, extra="ignore"
    )

    PROJECT_NAME: str = "Bruce"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: Optional[HttpUrl] = None

    HOST: str = "0.0.0.0"
    PORT: int = 4000

    BACKEND_CORS_ORIGINS: Annotated[
        Union[List[str], str], BeforeValidator(parse_cors)
    ] = ["*"]

    # Database - SQLite unless a Postgres connection string is given
    POSTGRES_URI: Optional[str] = None
    SQLITE_DB_PATH: str = "bruce.db"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.POSTGRES_URI:
            uri = self.POSTGRES_URI
            for prefix in ("postgres://", "postgresql://"):
                if uri.startswith(prefix):
                    return "postgresql+psycopg://" + uri[len(prefix):]
            return uri
        return f"sqlite:///{self.SQLITE_DB_PATH}"

    # Spotify OAuth
    SPOTIFY_CLIENT_ID: Optional[str] = None
    SPOTIFY_CLIENT_SECRET: Optional[str] = None
    REDIRECT_URI: str = "http://localhost:4000/callback"
    SPOTIFY_ACCOUNTS_URL: str = "https://accounts.spotify.com"
    SPOTIFY_API_URL: str = "https://api.spotify.com/v1"
    POST_LOGIN_REDIRECT: str = "/index.html"

    # Completion API
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: Optional[str] = None
    COMPLETION_MODEL: str = "gpt-4"

    # None means outbound calls never time out
    OUTBOUND_TIMEOUT_SECONDS: Optional[float] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def spotify_configured(self) -> bool:
        return bool(self.SPOTIFY_CLIENT_ID and self.SPOTIFY_CLIENT_SECRET)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def openai_configured(self) -> bool:
        return bool(self.OPENAI_API_KEY)

    @model_validator(mode="after")
    def _check_spotify_credentials(self) -> Self:
        if not self.spotify_configured:
            message = (
                "SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET are not set, "
                "the login flow will be rejected by the provider."
            )
            if self.ENVIRONMENT == "local":
                warnings.warn(message, stacklevel=1)
            else:
                raise ValueError(message)
        return self

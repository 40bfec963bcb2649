from datetime import timedelta
from pydantic_settings import BaseSettings
from typing import Literal, Optional, Union

# Fallback signing secret for local development only
# Anyone who knows it can forge tokens for any user
DEV_JWT_SECRET = "dev-secret"


class Settings(BaseSettings):
    APP_NAME: str = "Kanban API"

    # Every public route is mounted under this prefix (health check excluded)
    API_PREFIX: str = "/api/v1"

    # Storage backend selected once at startup
    # "sql" uses DATABASE_URL, "memory" keeps everything in process (lost on restart)
    STORAGE_BACKEND: Literal["sql", "memory"] = "sql"
    DATABASE_URL: str = "sqlite:///./kanban.db"

    # Security settings
    # JWT_SECRET must be set in production - used to sign and verify tokens
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "kanban_api"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # CORS origins - string (comma-separated) or list
    CORS_ORIGINS: Union[str, list[str]
                        ] = "http://localhost:5173,http://localhost:3000"

    LOG_LEVEL: str = "INFO"

    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8080

    @property
    def jwt_secret(self) -> str:
        """Configured signing secret, or the development fallback"""
        return self.JWT_SECRET or DEV_JWT_SECRET

    @property
    def uses_insecure_secret(self) -> bool:
        return not self.JWT_SECRET

    @property
    def access_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES)

    def get_cors_origins(self) -> list[str]:
        """Parse CORS_ORIGINS string into list"""
        if isinstance(self.CORS_ORIGINS, str):
            return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
        return self.CORS_ORIGINS if isinstance(self.CORS_ORIGINS, list) else []

    class Config:
        # Environment variables override .env, which overrides defaults
        env_file = ".env"
        case_sensitive = True


settings = Settings()

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "your-secret-key-here"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    SECRET_KEY: str = DEFAULT_SECRET_KEY
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "exam_admin"
    # Multi-document transactions need a replica set (Atlas, or mongod --replSet)
    MONGODB_USE_TRANSACTIONS: bool = True

    CORS_ORIGINS: List[str] = ["*"]
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    DEFAULT_ADMIN_EMAIL: Optional[str] = None
    DEFAULT_ADMIN_PASSWORD: Optional[str] = None

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def has_custom_secret(self) -> bool:
        return bool(self.SECRET_KEY) and self.SECRET_KEY != DEFAULT_SECRET_KEY

    def check_startup(self):
        """
        Refuse to serve production traffic while signing tokens with the
        built-in development secret.
        """
        if self.is_production and not self.has_custom_secret:
            raise RuntimeError("SECRET_KEY must be set in production")


settings = Settings()

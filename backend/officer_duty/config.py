from typing import Literal

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Either a full URL, or the parts below for one of the three dialects
    DATABASE_URL: str | None = None
    DB_DIALECT: Literal["sqlite", "mysql", "postgresql"] = "sqlite"
    DB_HOST: str = "127.0.0.1"
    DB_PORT: int | None = None
    DB_NAME: str = "officer_duty_db"
    DB_USER: str | None = None
    DB_PASSWORD: str | None = None
    SQLITE_PATH: str = "officer_duty.db"
    DATABASE_SSL: bool = False
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_POOL_OVERFLOW: int = 10

    API_PREFIX: str = "/api"
    CORS_ORIGINS: list[str] = ["*"]

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["standard", "json"] = "standard"

    class Config:
        env_file = ".env"

    def get_database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.DB_DIALECT == "sqlite":
            return f"sqlite:///{self.SQLITE_PATH}"

        driver = "mysql+pymysql" if self.DB_DIALECT == "mysql" else "postgresql+psycopg2"
        default_port = 3306 if self.DB_DIALECT == "mysql" else 5432
        url = URL.create(
            driver,
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT or default_port,
            database=self.DB_NAME,
        )
        return url.render_as_string(hide_password=False)

    def get_connect_args(self) -> dict:
        url = self.get_database_url()
        if url.startswith("sqlite"):
            return {"check_same_thread": False}
        if url.startswith("postgresql") and self.DATABASE_SSL:
            return {"sslmode": "require"}
        return {}


settings = Settings()

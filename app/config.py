from typing import List, Optional
from pydantic_settings import BaseSettings
from urllib.parse import quote_plus

class Settings(BaseSettings):
    env: str = "local"

    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_db: str = "laundry"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"

    # full URL, wins over the postgres_* parts (sqlite for local runs and tests)
    database_uri: Optional[str] = None

    secret_key: str = "change-me"
    algorithm: str = "HS256"

    timer_expiry_minutes: int = 30

    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    @property
    def database_url(self):
        if self.database_uri:
            return self.database_uri
        encoded_password = quote_plus(self.postgres_password)
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"

settings = Settings()

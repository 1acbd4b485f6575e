from typing import Optional
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENV: str = "production"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: Optional[str] = None
    postgres_user: str = "postgres"
    postgres_password: str = ""
    postgres_db: str = "memorycraver"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"

    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # Bearer value accepted by the service-role endpoints
    SERVICE_ROLE_KEY: str

    RAZORPAY_KEY_ID: str
    RAZORPAY_KEY_SECRET: str
    CURRENCY: str = "INR"

    BREVO_API_KEY: Optional[str] = None
    MAIL_FROM: str = "notifications@memorycraver-app.com"
    STORE_NAME: str = "MemoryCraver"
    SITE_URL: str = "https://memorycraver.vercel.app"

    @property
    def database_url(self):
        if self.DATABASE_URL:
            return self.DATABASE_URL

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

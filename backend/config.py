# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    DATABASE_URL: str = "sqlite:///./cake_shop.db"

    # Connection pool bounds (ignored for SQLite)
    DB_POOL_SIZE: int = 10
    DB_POOL_TIMEOUT: int = 30

    FRONTEND_URL: str = "http://localhost:3000"
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Account created by populate_db.py
    ADMIN_USERNAME: str = "admin"
    ADMIN_EMAIL: str = "admin@cakeshop.com"
    ADMIN_PASSWORD: str = "change-me-admin"

    # Re-validate stock when a cart line quantity is set directly
    CART_UPDATE_CHECKS_STOCK: bool = True
    # Admin status change to "cancelled" puts the ordered stock back
    ADMIN_CANCEL_RESTORES_STOCK: bool = False

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()

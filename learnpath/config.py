from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
import logging

load_dotenv()


class Settings(BaseSettings):
    """Runtime settings loaded from the environment or a local .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./learnpath.db"

    # Tokens are issued by the hosted auth provider; we only verify them.
    JWT_SECRET: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: Optional[str] = None

    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILE: str = "learnpath.log"
    LOG_CONSOLE: bool = False

    WEEKLY_WINDOW_DAYS: int = 7
    SESSION_IDLE_MINUTES: int = 60


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
logger = logging.getLogger("learnpath")

_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def reset_db():
    Base.metadata.drop_all(bind=engine)
    logger.info("Database dropped")
    create_db()


def create_db():
    # Tables are registered on Base when the models module is imported.
    import learnpath.models.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database created url=%s", engine.url.render_as_string(hide_password=True))


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> sessionmaker:
    return SessionLocal

"""Simple database connection management."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from cgnbench.database.models import Base

# Load environment variables from .env file
load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///cgnbench_results.db"


@dataclass
class DatabaseConfig:
    """Database connection configuration."""
    url: str = DEFAULT_DATABASE_URL
    echo: bool = False

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Create config from environment variables or .env file."""
        return cls(
            url=os.getenv("CGNBENCH_DATABASE_URL", DEFAULT_DATABASE_URL),
            echo=os.getenv("CGNBENCH_DATABASE_ECHO", "").lower() in ("1", "true", "yes"),
        )


class DatabaseManager:
    """Simple database connection manager."""

    def __init__(self, config: DatabaseConfig | None = None):
        self.config = config or DatabaseConfig.from_env()
        self._engine = None
        self._session_maker = None

    @property
    def url(self) -> str:
        return self.config.url

    def get_engine(self):
        """Get SQLAlchemy engine (creates it and the schema if needed)."""
        if self._engine is None:
            self._engine = create_engine(self.config.url, echo=self.config.echo)
            Base.metadata.create_all(self._engine)
        return self._engine

    def get_session(self):
        """Get SQLAlchemy session."""
        if self._session_maker is None:
            self._session_maker = sessionmaker(bind=self.get_engine())
        return self._session_maker()

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_maker = None

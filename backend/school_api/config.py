"""Application settings and validation."""

import logging
import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent


class Settings:
    ENV: str
    DATABASE_URL: str
    LOG_LEVEL: str
    SQL_ECHO: bool
    ALLOW_DEV_CORS: bool
    MAX_PAGE_SIZE: int

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'app.db'}")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        self.MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "2000"))
        self._validate()

    def _validate(self):
        if self.MAX_PAGE_SIZE < 1:
            raise RuntimeError("MAX_PAGE_SIZE must be a positive integer")
        if not isinstance(logging.getLevelName(self.LOG_LEVEL), int):
            raise RuntimeError(f"unknown LOG_LEVEL: {self.LOG_LEVEL}")
        if self.ENV != "dev" and self.ALLOW_DEV_CORS:
            raise RuntimeError("ALLOW_DEV_CORS must be disabled in non-dev environments")


settings = Settings()

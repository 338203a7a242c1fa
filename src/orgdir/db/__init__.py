# src/orgdir/db/__init__.py
from .base import Base
from .session import build_engine, build_sessionmaker

__all__ = ["Base", "build_engine", "build_sessionmaker"]

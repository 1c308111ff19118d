"""Persistence layer for users and packages."""

from .base import CatalogStore, PackageQuery, UserAlreadyExistsError
from .sql import SqlAlchemyCatalogStore

__all__ = ["CatalogStore", "PackageQuery", "SqlAlchemyCatalogStore", "UserAlreadyExistsError"]

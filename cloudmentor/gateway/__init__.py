"""
CloudMentor Gateway - Record access for every component.

This module provides:
- DataGateway: abstract create/read/update/query interface
- InMemoryGateway: substitutable fake used by tests and demos
- SQLiteGateway: persistent local store
- Table / Tables: typed collection views over a gateway
"""

from .base import (
    DataGateway,
    DEFAULT_UNIQUE_KEYS,
    validate_name,
)

from .memory import InMemoryGateway

from .sqlite import SQLiteGateway

from .table import (
    Table,
    Tables,
)

__all__ = [
    "DataGateway",
    "DEFAULT_UNIQUE_KEYS",
    "validate_name",
    "InMemoryGateway",
    "SQLiteGateway",
    "Table",
    "Tables",
]

"""Position sources."""

from .base import PositionsSource
from .memory import MemorySource
from .mongo import MongoSource
from .table import TableSource, TableSummary

__all__ = [
    "PositionsSource",
    "MemorySource",
    "MongoSource",
    "TableSource",
    "TableSummary",
]

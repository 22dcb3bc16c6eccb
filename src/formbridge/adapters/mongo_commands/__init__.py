"""Document-database commands (one module per command)."""

from formbridge.adapters.mongo_commands.aggregate import Aggregate
from formbridge.adapters.mongo_commands.base import MongoCommand
from formbridge.adapters.mongo_commands.count import Count
from formbridge.adapters.mongo_commands.delete import Delete
from formbridge.adapters.mongo_commands.distinct import Distinct
from formbridge.adapters.mongo_commands.find import Find
from formbridge.adapters.mongo_commands.insert import Insert
from formbridge.adapters.mongo_commands.raw import Raw
from formbridge.adapters.mongo_commands.update import Update

__all__ = [
    "Aggregate",
    "Count",
    "Delete",
    "Distinct",
    "Find",
    "Insert",
    "MongoCommand",
    "Raw",
    "Update",
]

"""Closed enumerations of operation keys.

Resolution is exact: no case normalization, no partial matching and no
fallback handler. A value outside these enums is an `UnknownOperationError`.
"""

from __future__ import annotations

from enum import Enum

from formbridge.core.errors import UnknownOperationError

KEY_SEPARATOR = "_"


class OperationKey(str, Enum):
    """`<entity>_<command>` keys of the spreadsheet family."""

    ROW_INSERT_ONE = "ROW_INSERT_ONE"
    ROW_INSERT_MANY = "ROW_INSERT_MANY"
    ROW_UPDATE_ONE = "ROW_UPDATE_ONE"
    ROW_UPDATE_MANY = "ROW_UPDATE_MANY"
    ROW_DELETE_ONE = "ROW_DELETE_ONE"
    ROW_FETCH_MANY = "ROW_FETCH_MANY"
    SHEET_CLEAR = "SHEET_CLEAR"
    SHEET_COPY = "SHEET_COPY"
    SHEET_DELETE_ONE = "SHEET_DELETE_ONE"
    SHEET_FETCH_STRUCTURE = "SHEET_FETCH_STRUCTURE"
    SPREADSHEET_INSERT_ONE = "SPREADSHEET_INSERT_ONE"
    SPREADSHEET_DELETE_ONE = "SPREADSHEET_DELETE_ONE"
    SPREADSHEET_FETCH_DETAILS = "SPREADSHEET_FETCH_DETAILS"
    SPREADSHEET_FETCH_MANY = "SPREADSHEET_FETCH_MANY"

    @classmethod
    def compose(cls, entity: str | None, command: str | None) -> "OperationKey":
        key = f"{entity}{KEY_SEPARATOR}{command}"
        try:
            return cls(key)
        except ValueError:
            raise UnknownOperationError(key, (k.value for k in cls)) from None


class TriggerKind(str, Enum):
    """Lookup-only requests issued by builder widgets."""

    SPREADSHEET_SELECTOR = "SPREADSHEET_SELECTOR"
    SHEET_SELECTOR = "SHEET_SELECTOR"
    COLUMNS_SELECTOR = "COLUMNS_SELECTOR"

    @classmethod
    def parse(cls, value: str | None) -> "TriggerKind":
        try:
            return cls(value)
        except ValueError:
            raise UnknownOperationError(str(value), (k.value for k in cls)) from None


class MongoCommandKind(str, Enum):
    """Commands of the document-database family."""

    FIND = "FIND"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    COUNT = "COUNT"
    DISTINCT = "DISTINCT"
    AGGREGATE = "AGGREGATE"
    RAW = "RAW"

    @classmethod
    def parse(cls, value: str | None) -> "MongoCommandKind":
        try:
            return cls(value)
        except ValueError:
            raise UnknownOperationError(str(value), (k.value for k in cls)) from None

"""Spreadsheet REST methods.

Each module implements `core.interfaces.method.ExecutionMethod` (and, for the
lookup-capable ones, `TriggerMethod`).
"""

from formbridge.adapters.sheets_methods.clear import ClearMethod
from formbridge.adapters.sheets_methods.copy import CopyMethod
from formbridge.adapters.sheets_methods.file_create import FileCreateMethod
from formbridge.adapters.sheets_methods.file_delete import FileDeleteMethod
from formbridge.adapters.sheets_methods.file_info import FileInfoMethod
from formbridge.adapters.sheets_methods.file_list import FileListMethod
from formbridge.adapters.sheets_methods.rows_append import RowsAppendMethod, RowsBulkAppendMethod
from formbridge.adapters.sheets_methods.rows_delete import RowsDeleteMethod
from formbridge.adapters.sheets_methods.rows_get import RowsGetMethod
from formbridge.adapters.sheets_methods.rows_update import RowsBulkUpdateMethod, RowsUpdateMethod
from formbridge.adapters.sheets_methods.sheet_delete import SheetDeleteMethod
from formbridge.adapters.sheets_methods.structure import GetStructureMethod

__all__ = [
    "ClearMethod",
    "CopyMethod",
    "FileCreateMethod",
    "FileDeleteMethod",
    "FileInfoMethod",
    "FileListMethod",
    "GetStructureMethod",
    "RowsAppendMethod",
    "RowsBulkAppendMethod",
    "RowsBulkUpdateMethod",
    "RowsDeleteMethod",
    "RowsGetMethod",
    "RowsUpdateMethod",
    "SheetDeleteMethod",
]

"""Generic tabular data engine shared by every list screen."""

from .columns import Column, display_value, sort_value
from .engine import DataTable, HeaderView, RowView, TableActions, TableView
from .filtering import filter_records, matches
from .pagination import PageButton, PageControls, PaginationInfo, page_window, paginate
from .sorting import SortDirection, compare, sort_records
from .state import UNSET, SortState, TableControls, resolve_ownership

__all__ = [
    "UNSET",
    "Column",
    "DataTable",
    "HeaderView",
    "PageButton",
    "PageControls",
    "PaginationInfo",
    "RowView",
    "SortDirection",
    "SortState",
    "TableActions",
    "TableControls",
    "TableView",
    "compare",
    "display_value",
    "filter_records",
    "matches",
    "page_window",
    "paginate",
    "resolve_ownership",
    "sort_records",
    "sort_value",
]

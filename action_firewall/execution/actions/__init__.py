"""Per-verb strategy pipelines."""

from .click import CLICK_METHOD_COUNT, execute_click
from .fill import FILL_METHOD_COUNT, execute_fill
from .navigate import NAVIGATE_METHOD_COUNT, execute_navigate
from .select import SELECT_METHOD_COUNT, execute_select

__all__ = [
    "execute_click",
    "execute_fill",
    "execute_navigate",
    "execute_select",
    "CLICK_METHOD_COUNT",
    "FILL_METHOD_COUNT",
    "NAVIGATE_METHOD_COUNT",
    "SELECT_METHOD_COUNT",
]

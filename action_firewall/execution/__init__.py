"""
Execution layer: ranked strategy pipelines and the dispatcher.
"""

from .actions import (
    CLICK_METHOD_COUNT,
    FILL_METHOD_COUNT,
    NAVIGATE_METHOD_COUNT,
    SELECT_METHOD_COUNT,
    execute_click,
    execute_fill,
    execute_navigate,
    execute_select,
)
from .base import FunctionStrategy, Strategy, StrategyPipeline
from .dispatcher import ActionDispatcher

__all__ = [
    "ActionDispatcher",
    "Strategy",
    "FunctionStrategy",
    "StrategyPipeline",
    "execute_click",
    "execute_fill",
    "execute_navigate",
    "execute_select",
    "CLICK_METHOD_COUNT",
    "FILL_METHOD_COUNT",
    "NAVIGATE_METHOD_COUNT",
    "SELECT_METHOD_COUNT",
]

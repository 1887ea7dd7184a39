"""Утилиты для генератора"""

from .naming import (
    pluralize,
    singularize,
    snake_case,
    table_name,
)

__all__ = [
    "pluralize",
    "singularize",
    "snake_case",
    "table_name",
]

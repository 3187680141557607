"""Common utility functions used across the application."""

from typing import Any


def _clean_text(value: Any) -> str:
    """Coerce a loosely-typed payload field to a stripped display string."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def table(app_prefix: str, table_name: str) -> str:
    """Shared database table naming helper.

    Convention: <appName>__<table>. The caller is responsible for passing a
    non-empty prefix.
    """
    return app_prefix + "__" + table_name

# moodlog/utils/error_handler.py
"""
Centralized error handling and validation for moodlog.
"""
import logging
from functools import wraps
from typing import Any, Optional

import typer
from rich.console import Console

console = Console()
logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Raised when a record in a snapshot cannot be interpreted."""
    pass


class SnapshotError(Exception):
    """Raised when a snapshot file cannot be read or parsed."""
    pass


def handle_cli_errors(operation_name: str):
    """Decorator for consistent error handling around CLI commands."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except SnapshotError as e:
                logger.error(f"{operation_name} - Snapshot error: {e}")
                console.print(f"[red]Could not load snapshot: {e}[/red]")
                raise typer.Exit(code=1)
            except ValidationError as e:
                logger.warning(f"{operation_name} - Validation error: {e}")
                console.print(f"[red]Validation error: {e}[/red]")
                raise typer.Exit(code=1)
        return wrapper
    return decorator


def safe_convert_to_float(value: Any, field_name: str, default: Optional[float] = None) -> Optional[float]:
    """Safely convert a value to float; None stays None."""
    if value is None:
        return default
    try:
        return float(value)
    except (ValueError, TypeError):
        if default is not None:
            logger.warning(f"Could not convert {field_name} '{value}' to float, using default {default}")
            return default
        raise ValidationError(f"Invalid {field_name}: must be a number")


def require(data: dict, key: str, what: str) -> Any:
    """Return data[key] or raise ValidationError naming the record kind."""
    value = data.get(key)
    if value is None or value == "":
        raise ValidationError(f"{what} is missing '{key}'")
    return value

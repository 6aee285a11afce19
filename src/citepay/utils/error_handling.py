"""Error handling utilities."""
import logging
from functools import wraps
from typing import Callable, Any

logger = logging.getLogger(__name__)


def sink_error_handler(func: Callable) -> Callable:
    """Decorator for fire-and-forget collaborator calls (clipboard, share)."""
    @wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except Exception as e:
            logger.error(f"Collaborator error in {func.__name__}: {str(e)}")
            return None
    return wrapper


def user_input_handler(func: Callable) -> Callable:
    """Decorator for handling user input errors."""
    @wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            print("\nOperation cancelled by user.")
            return None
        except Exception as e:
            logger.error(f"Input error in {func.__name__}: {str(e)}")
            return None
    return wrapper

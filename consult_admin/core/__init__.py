"""
Core application modules.
"""

from .config import get_settings, settings
from .database import close_database_connections, create_tables, get_db_session
from .logger import get_logger, log_function_call
from .results import IdentityError, IdentityResult

__all__ = [
    "IdentityError",
    "IdentityResult",
    "close_database_connections",
    "create_tables",
    "get_db_session",
    "get_logger",
    "get_settings",
    "log_function_call",
    "settings",
]

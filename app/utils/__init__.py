"""
Common utilities package for the Shadow Ledger application.

Logging setup lives here; password hashing and session tokens are in
``app.utils.auth``, which depends on ``app.config`` and is imported directly.
"""

from app.utils.logger import cleanup_old_logs, setup_logger

__all__ = [
    "setup_logger",
    "cleanup_old_logs",
]

from app.dependencies.auth import get_current_identity

__all__ = [
    "get_current_identity",
]

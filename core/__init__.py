# core/__init__.py
from .config import settings, get_settings

__all__ = [
    "settings",
    "get_settings",
]

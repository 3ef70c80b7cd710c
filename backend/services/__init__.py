"""Services module - Business logic layer"""

from .config_manager import ConfigManager
from .diff_generator import DiffGenerator, reconcile
from .diff_service import DiffService

__all__ = [
    "ConfigManager",
    "DiffGenerator",
    "DiffService",
    "reconcile",
]

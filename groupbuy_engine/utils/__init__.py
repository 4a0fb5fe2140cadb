from .logger import setup_logging
from .formatting import format_currency, format_percent

__all__ = ["setup_logging", "format_currency", "format_percent"]

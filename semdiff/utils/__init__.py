"""
Utilities package.
"""

from semdiff.utils.logging_config import configure_logging
from semdiff.utils.text import strip_html

__all__ = [
    "configure_logging",
    "strip_html",
]

"""
Utility functions for the feedback controls
"""

from .logger import get_logger, configure_logger

__all__ = [
    'get_logger',
    'configure_logger',
]

"""
Utility modules for the scraper.
"""

from scraper.utils.config import Config
from scraper.utils.logging import setup_logging, log_exception, PerformanceLogger

__all__ = [
    'Config',
    'setup_logging',
    'log_exception',
    'PerformanceLogger',
]

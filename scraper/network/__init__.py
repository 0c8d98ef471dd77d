"""
Network access for loading pages.
"""

from .fetcher import FetchResult, PageFetcher

__all__ = ['FetchResult', 'PageFetcher']

"""
S3 result location parsing and download
"""

from .locator import ResultAddress, ResultLocator, resolve
from .fetcher import ObjectFetcher

__all__ = ['ResultAddress', 'ResultLocator', 'resolve', 'ObjectFetcher']

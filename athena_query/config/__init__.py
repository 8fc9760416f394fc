"""
Configuration module
"""

from .config import Config, Settings, parse_duration, DEFAULT_CONFIG

__all__ = ['Config', 'Settings', 'parse_duration', 'DEFAULT_CONFIG']

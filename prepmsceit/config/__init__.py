"""
Configuration for prepMSCEIT
"""

from prepmsceit.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]

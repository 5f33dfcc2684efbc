"""
API endpoint modules for prepMSCEIT
"""

from prepmsceit.api.endpoints import account, admin, assessment, functions, landing, progress

__all__ = ["account", "admin", "assessment", "functions", "landing", "progress"]

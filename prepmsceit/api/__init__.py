"""
API layer for prepMSCEIT

Contains FastAPI routers for:
- Assessments
- Progress, analytics and training
- Onboarding and profile
- Landing page
- Function handlers (activate-user, invite-user, parse-questions)
"""

from prepmsceit.api.router import api_router, functions_router

__all__ = ["api_router", "functions_router"]

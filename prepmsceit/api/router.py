"""
Main API router for prepMSCEIT

Aggregates the learner-facing routes under /api and the function
handlers under /functions.
"""

from fastapi import APIRouter

from prepmsceit.api.endpoints import account, admin, assessment, functions, landing, progress

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    assessment.router,
    prefix="/assessment",
    tags=["Assessment"]
)

api_router.include_router(
    progress.router,
    prefix="/progress",
    tags=["Progress"]
)

api_router.include_router(
    account.router,
    tags=["Account"]
)

api_router.include_router(
    landing.router,
    prefix="/landing",
    tags=["Landing"]
)

api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["Admin"]
)

functions_router = APIRouter()

functions_router.include_router(
    functions.router,
    tags=["Functions"]
)

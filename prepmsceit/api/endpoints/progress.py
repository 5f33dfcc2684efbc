"""
Progress API endpoints

Learner stats, analytics, training catalogue and display preferences.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from prepmsceit.api.dependencies import (
    AuthContext,
    get_auth_context,
    get_sessions,
    get_training_catalogue,
)
from prepmsceit.core.analytics import AnalyticsSummary, summarize
from prepmsceit.core.progress import SessionRegistry
from prepmsceit.core.training import TrainingCatalogue, catalogue_for
from prepmsceit.models.branch import Branch
from prepmsceit.models.training import CatalogueEntry

router = APIRouter()


class ProgressResponse(BaseModel):
    """Learner state as the dashboard reads it."""
    stats: dict[str, Any]
    theme: str
    remote_sync_enabled: bool


class ThemeResponse(BaseModel):
    theme: str


@router.get("", response_model=ProgressResponse)
async def get_progress(
    auth: AuthContext = Depends(get_auth_context),
    sessions: SessionRegistry = Depends(get_sessions),
) -> ProgressResponse:
    """Get the learner's current stats."""
    session = await sessions.get(auth.identity.id)
    return ProgressResponse(
        stats=session.stats.to_document(),
        theme=session.theme,
        remote_sync_enabled=session.remote_sync_enabled,
    )


@router.post("/theme", response_model=ThemeResponse)
async def toggle_theme(
    auth: AuthContext = Depends(get_auth_context),
    sessions: SessionRegistry = Depends(get_sessions),
) -> ThemeResponse:
    """Switch between light and dark mode."""
    session = await sessions.get(auth.identity.id)
    return ThemeResponse(theme=session.toggle_theme())


@router.get("/analytics", response_model=AnalyticsSummary)
async def get_analytics(
    auth: AuthContext = Depends(get_auth_context),
    sessions: SessionRegistry = Depends(get_sessions),
) -> AnalyticsSummary:
    """Get per-branch analytics and recent history."""
    session = await sessions.get(auth.identity.id)
    return summarize(session.stats)


@router.get("/training")
async def get_training(
    branch: str | None = Query(default=None),
    search: str = Query(default=""),
    auth: AuthContext = Depends(get_auth_context),
    sessions: SessionRegistry = Depends(get_sessions),
    catalogue: TrainingCatalogue = Depends(get_training_catalogue),
) -> list[CatalogueEntry]:
    """Get the training catalogue with lock status for this learner."""
    try:
        selected = Branch.parse(branch) if branch else None
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    session = await sessions.get(auth.identity.id)
    modules = await catalogue.list_modules()
    return catalogue_for(session.stats, branch=selected, search=search, modules=modules)

"""
Admin API endpoints

Training module management. Listing and creation both require the
admin role on the caller's profile.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from prepmsceit.api.dependencies import AuthContext, get_auth_context, get_training_catalogue
from prepmsceit.core.training import AdminRequiredError, TrainingCatalogue, TrainingCatalogueError
from prepmsceit.models.branch import Branch
from prepmsceit.models.training import DEFAULT_MODULE_DURATION, TrainingModule

router = APIRouter()


class ModuleCreateRequest(BaseModel):
    """Request model for a new training module."""
    title: str
    branch: str
    duration: str = DEFAULT_MODULE_DURATION
    description: str = ""
    required_level: int = Field(default=1, ge=1, le=10)


@router.get("/modules")
async def list_modules(
    auth: AuthContext = Depends(get_auth_context),
    catalogue: TrainingCatalogue = Depends(get_training_catalogue),
) -> list[TrainingModule]:
    """List training modules, newest first."""
    try:
        await catalogue.require_admin(auth.identity)
    except AdminRequiredError as e:
        raise HTTPException(status_code=403, detail=str(e))

    return await catalogue.list_modules()


@router.post("/modules", status_code=201)
async def create_module(
    request: ModuleCreateRequest,
    auth: AuthContext = Depends(get_auth_context),
    catalogue: TrainingCatalogue = Depends(get_training_catalogue),
) -> TrainingModule:
    """Add a training module to the catalogue."""
    try:
        branch = Branch.parse(request.branch)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        return await catalogue.create_module(
            auth.identity,
            title=request.title,
            branch=branch,
            duration=request.duration,
            description=request.description,
            required_level=request.required_level,
        )
    except AdminRequiredError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except TrainingCatalogueError as e:
        raise HTTPException(status_code=400, detail=str(e))

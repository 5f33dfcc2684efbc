"""
Training catalogue for prepMSCEIT

- TrainingCatalogue: modules stored in the training_modules table, with the
  built-in catalogue as the fallback, and admin module creation
- catalogue_for: filtering and locking for one learner
"""

import logging
from uuid import uuid4

from pydantic import ValidationError

from prepmsceit.core.profiles import ProfileService
from prepmsceit.core.supabase_client import SupabaseClient, SupabaseError
from prepmsceit.models.branch import Branch
from prepmsceit.models.profile import Identity, UserRole
from prepmsceit.models.stats import UserStats
from prepmsceit.models.training import (
    DEFAULT_MODULE_DURATION,
    CatalogueEntry,
    TrainingModule,
    TRAINING_MODULES,
)

logger = logging.getLogger(__name__)


MODULES_TABLE = "training_modules"


class TrainingCatalogueError(Exception):
    """Raised when a module cannot be created."""
    pass


class AdminRequiredError(TrainingCatalogueError):
    """Raised when a non-admin caller tries to manage modules."""
    pass


class TrainingCatalogue:
    """
    Training modules backed by the hosted store.

    Usage:
        catalogue = TrainingCatalogue(supabase)
        modules = await catalogue.list_modules()
        entries = catalogue_for(stats, modules=modules)
    """

    def __init__(self, supabase: SupabaseClient, profiles: ProfileService | None = None):
        self.supabase = supabase
        self.profiles = profiles or ProfileService(supabase)

    async def list_modules(self) -> list[TrainingModule]:
        """
        Stored modules, newest first.

        Falls back to the built-in catalogue when the store fails or holds
        no modules. Rows that do not describe a valid module are skipped.
        """
        try:
            rows = await self.supabase.select(MODULES_TABLE, order="created_at.desc")
        except SupabaseError as e:
            logger.warning(f"Error fetching modules, using built-in catalogue: {e}")
            return list(TRAINING_MODULES)

        modules = []
        for row in rows:
            try:
                modules.append(TrainingModule.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping malformed training module {row.get('id')}: {e}")

        if not modules:
            logger.info("No stored training modules, using built-in catalogue")
            return list(TRAINING_MODULES)

        return modules

    async def create_module(
        self,
        caller: Identity,
        title: str,
        branch: Branch,
        duration: str = DEFAULT_MODULE_DURATION,
        description: str = "",
        required_level: int = 1,
    ) -> TrainingModule:
        """
        Add a module to the store.

        Raises:
            AdminRequiredError: If the caller is not an admin
            TrainingCatalogueError: If the module is invalid or the insert fails
        """
        await self.require_admin(caller)

        try:
            module = TrainingModule(
                id=str(uuid4()),
                title=title.strip(),
                branch=branch,
                duration=duration or DEFAULT_MODULE_DURATION,
                description=description,
                required_level=required_level,
            )
        except ValidationError as e:
            raise TrainingCatalogueError(f"Invalid module: {e.errors()[0]['msg']}") from e

        try:
            await self.supabase.insert(MODULES_TABLE, module.model_dump(mode="json"))
        except SupabaseError as e:
            logger.error(f"Error creating module: {e}")
            raise TrainingCatalogueError("Failed to create module") from e

        logger.info(f"{caller.id} created training module {module.id} ({module.title})")
        return module

    async def require_admin(self, caller: Identity) -> None:
        try:
            role = await self.profiles.role_for(caller)
        except SupabaseError as e:
            logger.error(f"Role lookup failed for {caller.id}: {e}")
            raise AdminRequiredError("Could not verify admin access") from e

        if role != UserRole.ADMIN.value:
            raise AdminRequiredError("Admin access required")


def catalogue_for(
    stats: UserStats,
    branch: Branch | None = None,
    search: str = "",
    modules: list[TrainingModule] | None = None,
) -> list[CatalogueEntry]:
    """
    Training modules visible to a learner.

    Args:
        stats: Learner stats providing per-branch mastery levels
        branch: Only modules for this branch, when given
        search: Case-insensitive match on title or description
        modules: Catalogue to filter, defaults to the built-in catalogue

    Returns:
        Matching modules, each flagged locked when its required level is
        above the learner's mastery level for that branch
    """
    term = search.strip().lower()
    entries = []

    for module in modules if modules is not None else TRAINING_MODULES:
        if branch is not None and module.branch != branch:
            continue
        if term and term not in module.title.lower() and term not in module.description.lower():
            continue

        mastery = stats.mastery_levels[module.branch]
        entries.append(CatalogueEntry(module=module, locked=module.required_level > mastery))

    return entries

"""
Profile maintenance for prepMSCEIT

Self-service profile updates and account activation.
"""

import logging
from datetime import datetime, timezone

from prepmsceit.core.supabase_client import SupabaseClient, SupabaseError
from prepmsceit.models.profile import Identity, ProfileStatus

logger = logging.getLogger(__name__)


PROFILE_UPDATE_FAILED = "Failed to update profile. Please try again."


class ProfileUpdateError(Exception):
    """User-visible failure of a profile update."""
    pass


class ProfileService:
    """Keeps identity metadata and the profiles table in step."""

    def __init__(self, supabase: SupabaseClient):
        self.supabase = supabase

    async def update_profile(self, access_token: str, full_name: str) -> Identity:
        """
        Update the display name on the identity, then on the profile row.

        Raises:
            ProfileUpdateError: If either write fails
        """
        try:
            identity = await self.supabase.update_user_metadata(
                access_token, {"full_name": full_name}
            )
            await self.supabase.upsert("profiles", {
                "id": identity.id,
                "full_name": full_name,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            })
        except SupabaseError as e:
            logger.error(f"Error updating profile: {e}")
            raise ProfileUpdateError(PROFILE_UPDATE_FAILED) from e

        return identity

    async def role_for(self, identity: Identity) -> str | None:
        """
        The identity's role: the profile row's role, else the metadata role.

        Raises:
            SupabaseError: If the profile lookup fails
        """
        row = await self.supabase.select_one("profiles", {"id": identity.id}, columns="role")
        role = (row or {}).get("role") or identity.user_metadata.get("role")
        return role or None

    async def activate(self, identity: Identity) -> None:
        """Mark the identity's profile active."""
        try:
            await self.supabase.update(
                "profiles",
                {
                    "status": ProfileStatus.ACTIVE.value,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                },
                {"id": identity.id},
            )
        except SupabaseError as e:
            logger.error(f"Failed to update profile status for {identity.id}: {e}")
            raise

        logger.info(f"Activated {identity.id}")

"""
Invitation Service for prepMSCEIT

Handles admin-issued invitations and login links:
- Resolves the target identity by email or by id
- Delivers a reusable login link, or an invitation through an ordered
  chain of delivery strategies
- Records the invited profile (best-effort)

Invitation chain, tried in order until one delivers:
    DirectInvite → MagicLinkEmail → ProviderOtpEmail

A strategy returns a delivery on success, None to hand over to the next
strategy, or raises to fail the whole request.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from prepmsceit.core.mailer import Mailer
from prepmsceit.core.supabase_client import SupabaseClient, SupabaseError
from prepmsceit.models.profile import Identity, ProfileStatus, UserRole
from prepmsceit.prompts.emails import EmailTemplates

logger = logging.getLogger(__name__)


LOGIN_LINK_TYPE = "magiclink"
INVITE_TYPE = "invite"


class InvitationError(Exception):
    """Raised when an invitation cannot be delivered."""
    pass


# ============================================================================
# REQUEST / RESULT MODELS
# ============================================================================

class InviteRequest(BaseModel):
    """Body of an invite-user call."""

    email: str | None = None
    user_id: str | None = None
    full_name: str | None = None
    role: str | None = Field(default=None, validate_default=True)
    redirect_to: str | None = None
    type: str | None = Field(
        default=None,
        validate_default=True,
        description='"magiclink" for a login link',
    )

    @field_validator("role", mode="after")
    @classmethod
    def _default_role(cls, value: str | None) -> str:
        return value or UserRole.STUDENT.value

    @field_validator("type", mode="after")
    @classmethod
    def _default_type(cls, value: str | None) -> str:
        return value or INVITE_TYPE

    @model_validator(mode="after")
    def _require_target(self) -> "InviteRequest":
        if not self.email and not self.user_id:
            raise ValueError("Email or user_id is required")
        return self

    @property
    def wants_login_link(self) -> bool:
        return self.type == LOGIN_LINK_TYPE


class InviteTarget(BaseModel):
    """Resolved recipient of an invitation."""

    email: str
    identity: Identity | None = None
    request: InviteRequest

    @property
    def user_id(self) -> str | None:
        return self.identity.id if self.identity else None


class InviteDelivery(BaseModel):
    """Outcome of a strategy that delivered the invitation."""

    strategy: str
    user_id: str | None = None
    detail: dict[str, Any] = Field(default_factory=dict)


class InviteResult(BaseModel):
    """Response body of a successful invite-user call."""

    strategy: str
    email: str
    user_id: str | None = None
    profile_synced: bool = False


# ============================================================================
# STRATEGIES
# ============================================================================

class InviteStrategy:
    """Base class for one way of delivering an invitation."""

    name = "base"

    async def attempt(self, target: InviteTarget) -> InviteDelivery | None:
        raise NotImplementedError


class DirectInvite(InviteStrategy):
    """Provider invitation email; hands over when the identity already exists."""

    name = "invite"

    def __init__(self, supabase: SupabaseClient):
        self.supabase = supabase

    async def attempt(self, target: InviteTarget) -> InviteDelivery | None:
        request = target.request
        try:
            identity = await self.supabase.admin_invite_user(
                target.email,
                metadata={
                    "full_name": request.full_name,
                    "role": request.role,
                    "onboarding_complete": False,
                },
                redirect_to=request.redirect_to,
            )
        except SupabaseError as e:
            if e.is_already_registered:
                logger.info(f"{target.email} is already registered, trying next strategy")
                return None
            raise

        return InviteDelivery(strategy=self.name, user_id=identity.id)


class MagicLinkEmail(InviteStrategy):
    """Generated login link sent as a custom email; skipped without a mail key."""

    name = "magiclink_email"

    def __init__(self, supabase: SupabaseClient, mailer: Mailer, templates: EmailTemplates):
        self.supabase = supabase
        self.mailer = mailer
        self.templates = templates

    async def attempt(self, target: InviteTarget) -> InviteDelivery | None:
        if not self.mailer.configured:
            logger.info("No mail API key configured, skipping custom invitation email")
            return None

        link = await self.supabase.admin_generate_link(
            target.email,
            link_type=LOGIN_LINK_TYPE,
            redirect_to=target.request.redirect_to,
        )
        subject, html = self.templates.invitation(link.action_link, target.request.full_name)
        message_id = await self.mailer.send(target.email, subject, html)

        return InviteDelivery(
            strategy=self.name,
            user_id=link.user_id,
            detail={"message_id": message_id},
        )


class ProviderOtpEmail(InviteStrategy):
    """The auth provider's built-in one-time-passcode email."""

    name = "otp_email"

    def __init__(self, supabase: SupabaseClient):
        self.supabase = supabase

    async def attempt(self, target: InviteTarget) -> InviteDelivery | None:
        await self.supabase.send_otp(target.email, redirect_to=target.request.redirect_to)
        return InviteDelivery(strategy=self.name)


# ============================================================================
# SERVICE
# ============================================================================

class InviteService:
    """Resolves, delivers and records invitations."""

    def __init__(
        self,
        supabase: SupabaseClient,
        mailer: Mailer,
        templates: EmailTemplates | None = None,
        strategies: list[InviteStrategy] | None = None,
    ):
        self.supabase = supabase
        self.mailer = mailer
        self.templates = templates or EmailTemplates()
        self.strategies = strategies or [
            DirectInvite(supabase),
            MagicLinkEmail(supabase, mailer, self.templates),
            ProviderOtpEmail(supabase),
        ]

    async def handle(self, request: InviteRequest) -> InviteResult:
        """
        Deliver an invitation or login link and record the profile.

        Raises:
            InvitationError: If no target email can be determined or no
                strategy delivers
            SupabaseError, MailerError: On fatal upstream failures
        """
        target = await self.resolve_target(request)

        if request.wants_login_link:
            delivery = await self.send_login_link(target)
        else:
            delivery = await self.run_chain(target)

        user_id = target.user_id or delivery.user_id
        profile_synced = await self.sync_profile(user_id, request)

        return InviteResult(
            strategy=delivery.strategy,
            email=target.email,
            user_id=user_id,
            profile_synced=profile_synced,
        )

    async def resolve_target(self, request: InviteRequest) -> InviteTarget:
        """Look up the identity by id, or by email when no id is given."""
        identity = None
        if request.user_id:
            identity = await self.supabase.admin_get_user(request.user_id)
        elif request.email:
            identity = await self.supabase.admin_find_user_by_email(request.email)

        email = request.email or (identity.email if identity else None)
        if not email:
            raise InvitationError("Could not determine an email address for this user")

        return InviteTarget(email=email, identity=identity, request=request)

    async def send_login_link(self, target: InviteTarget) -> InviteDelivery:
        """Email a reusable login link; requires the mail API key."""
        if not self.mailer.configured:
            raise InvitationError("RESEND_API_KEY is not configured, cannot send login link")

        link = await self.supabase.admin_generate_link(
            target.email,
            link_type=LOGIN_LINK_TYPE,
            redirect_to=target.request.redirect_to,
        )
        subject, html = self.templates.login_link(link.action_link, target.request.full_name)
        await self.mailer.send(target.email, subject, html)

        logger.info(f"Sent login link to {target.email}")
        return InviteDelivery(strategy=LOGIN_LINK_TYPE, user_id=link.user_id)

    async def run_chain(self, target: InviteTarget) -> InviteDelivery:
        """Try each strategy in order until one delivers."""
        for strategy in self.strategies:
            delivery = await strategy.attempt(target)
            if delivery is not None:
                logger.info(f"Invitation for {target.email} delivered via {strategy.name}")
                return delivery

        raise InvitationError(f"No invitation strategy could reach {target.email}")

    async def sync_profile(self, user_id: str | None, request: InviteRequest) -> bool:
        """Upsert the invited profile row. Never raises."""
        if not user_id:
            logger.warning(
                "Invitation delivered but no identity was resolved; profile row not written"
            )
            return False

        try:
            await self.supabase.upsert("profiles", {
                "id": user_id,
                "full_name": request.full_name,
                "role": request.role,
                "status": ProfileStatus.INVITED.value,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            })
        except SupabaseError as e:
            logger.error(f"Profile upsert failed for {user_id}: {e}")
            return False

        return True

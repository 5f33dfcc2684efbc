"""
API Dependencies

Provides dependency injection for API endpoints.
Manages singleton instances of the upstream clients.
"""

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException
from pydantic import ValidationError

from prepmsceit.config.settings import get_settings
from prepmsceit.core.invitations import InviteService
from prepmsceit.core.lead_capture import LeadCaptureClient
from prepmsceit.core.mailer import Mailer
from prepmsceit.core.profiles import ProfileService
from prepmsceit.core.progress import SessionRegistry
from prepmsceit.core.question_generator import QuestionGenerator
from prepmsceit.core.question_parser import QuestionParser
from prepmsceit.core.supabase_client import SupabaseClient, SupabaseError
from prepmsceit.core.training import TrainingCatalogue
from prepmsceit.models.profile import Identity


# ============================================================================
# SINGLETON INSTANCES
# ============================================================================

_supabase: SupabaseClient | None = None
_mailer: Mailer | None = None
_generator: QuestionGenerator | None = None
_parser: QuestionParser | None = None
_lead_client: LeadCaptureClient | None = None
_sessions: SessionRegistry | None = None


def get_supabase() -> SupabaseClient:
    """Get the service-role Supabase client singleton."""
    global _supabase

    if _supabase is None:
        _supabase = SupabaseClient()

    return _supabase


def get_mailer() -> Mailer:
    """Get the mailer singleton."""
    global _mailer

    if _mailer is None:
        _mailer = Mailer()

    return _mailer


def get_generator() -> QuestionGenerator:
    """Get the AI item generator singleton."""
    global _generator

    if _generator is None:
        _generator = QuestionGenerator()

    return _generator


def get_parser() -> QuestionParser:
    """Get the free-text question parser singleton."""
    global _parser

    if _parser is None:
        _parser = QuestionParser()

    return _parser


def get_lead_client() -> LeadCaptureClient:
    """Get the lead capture client singleton."""
    global _lead_client

    if _lead_client is None:
        _lead_client = LeadCaptureClient()

    return _lead_client


def get_sessions(supabase: SupabaseClient = Depends(get_supabase)) -> SessionRegistry:
    """Get the learner session registry singleton."""
    global _sessions

    if _sessions is None:
        _sessions = SessionRegistry(supabase, get_settings().cache_dir)

    return _sessions


def get_invite_service(
    supabase: SupabaseClient = Depends(get_supabase),
    mailer: Mailer = Depends(get_mailer),
) -> InviteService:
    return InviteService(supabase, mailer)


def get_profile_service(supabase: SupabaseClient = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


def get_training_catalogue(supabase: SupabaseClient = Depends(get_supabase)) -> TrainingCatalogue:
    return TrainingCatalogue(supabase)


# ============================================================================
# AUTHENTICATION
# ============================================================================

@dataclass
class AuthContext:
    """The caller's identity and the token it was resolved from."""

    identity: Identity
    access_token: str


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an Authorization header value."""
    if not authorization:
        return None
    token = authorization.removeprefix("Bearer ").strip()
    return token or None


async def get_auth_context(
    authorization: str | None = Header(default=None),
    supabase: SupabaseClient = Depends(get_supabase),
) -> AuthContext:
    """Resolve the caller from the bearer token, 401 when that fails."""
    token = bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    try:
        identity = await supabase.get_user(token)
    except (SupabaseError, ValidationError):
        raise HTTPException(status_code=401, detail="Unauthorized")

    return AuthContext(identity=identity, access_token=token)


async def cleanup():
    """Cleanup resources on shutdown."""
    global _supabase, _mailer, _generator, _parser, _lead_client, _sessions

    for client in (_supabase, _mailer, _generator, _parser, _lead_client):
        if client:
            await client.close()

    _supabase = None
    _mailer = None
    _generator = None
    _parser = None
    _lead_client = None
    _sessions = None

"""
Supabase client for prepMSCEIT

Thin async wrapper over the two Supabase REST surfaces the backend uses:
- PostgREST (/rest/v1) for the profiles, user_progress and
  assessment_history tables
- GoTrue (/auth/v1) for identities, invitations and login links

All calls use the service-role key. Non-2xx responses raise SupabaseError.
"""

import logging
from typing import Any

import httpx
from pydantic import BaseModel

from prepmsceit.config.settings import get_settings
from prepmsceit.models.profile import Identity

logger = logging.getLogger(__name__)


ALREADY_REGISTERED_CODES = {"email_exists", "user_already_exists"}
ALREADY_REGISTERED_PHRASES = ("already registered", "already been registered", "already exists")


class SupabaseError(Exception):
    """Raised when a Supabase API call fails."""

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code

    @property
    def is_already_registered(self) -> bool:
        """Whether the error means the identity already exists."""
        if self.code in ALREADY_REGISTERED_CODES:
            return True
        lowered = self.message.lower()
        return any(phrase in lowered for phrase in ALREADY_REGISTERED_PHRASES)


class GeneratedLink(BaseModel):
    """A login link generated by the auth admin API."""

    action_link: str
    user_id: str | None = None
    email: str | None = None


class SupabaseClient:
    """
    Service-role client for the hosted database and auth APIs.

    The client is optional: when the URL or key is missing every call
    raises SupabaseError, which callers treat per their own failure tier.
    """

    def __init__(
        self,
        url: str | None = None,
        service_role_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.url = (url if url is not None else settings.supabase_url).rstrip("/")
        self.service_role_key = (
            service_role_key if service_role_key is not None
            else settings.supabase_service_role_key
        )

        self.client = httpx.AsyncClient(
            base_url=self.url or "http://supabase.invalid",
            headers={
                "apikey": self.service_role_key,
                "Authorization": f"Bearer {self.service_role_key}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    @property
    def configured(self) -> bool:
        return bool(self.url and self.service_role_key)

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        if not self.configured:
            raise SupabaseError("Supabase is not configured (missing SUPABASE_URL or service role key)")

        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Supabase request {method} {path} failed: {e}")
            raise SupabaseError(f"Supabase request failed: {e}") from e

        if response.is_error:
            raise self._error_from_response(response)

        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _error_from_response(response: httpx.Response) -> SupabaseError:
        message = response.text or response.reason_phrase
        code = None
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            message = (
                body.get("msg")
                or body.get("message")
                or body.get("error_description")
                or body.get("error")
                or message
            )
            code = body.get("error_code") or body.get("code")

        return SupabaseError(str(message), status_code=response.status_code, code=code)

    @staticmethod
    def _eq_filters(filters: dict[str, Any]) -> dict[str, str]:
        return {column: f"eq.{value}" for column, value in filters.items()}

    # =========================================================================
    # TABLES
    # =========================================================================

    async def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        columns: str = "*",
        order: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch all rows matching the equality filters.

        Args:
            order: PostgREST ordering, e.g. "created_at.desc"
        """
        params = {"select": columns, **self._eq_filters(filters or {})}
        if order:
            params["order"] = order
        rows = await self._request("GET", f"/rest/v1/{table}", params=params)
        return rows or []

    async def select_one(
        self,
        table: str,
        filters: dict[str, Any],
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """Fetch the first row matching all equality filters, or None."""
        params = {"select": columns, "limit": "1", **self._eq_filters(filters)}
        rows = await self._request("GET", f"/rest/v1/{table}", params=params)
        if not rows:
            return None
        return rows[0]

    async def insert(self, table: str, row: dict[str, Any]) -> None:
        """Insert one row."""
        await self._request(
            "POST",
            f"/rest/v1/{table}",
            json=row,
            headers={"Prefer": "return=minimal"},
        )

    async def upsert(
        self,
        table: str,
        row: dict[str, Any],
        on_conflict: str | None = None,
    ) -> None:
        """Insert or merge one row on its primary key or the given conflict column."""
        params = {"on_conflict": on_conflict} if on_conflict else None
        await self._request(
            "POST",
            f"/rest/v1/{table}",
            json=row,
            params=params,
            headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
        )

    async def update(
        self,
        table: str,
        values: dict[str, Any],
        filters: dict[str, Any],
    ) -> None:
        """Update rows matching all equality filters."""
        await self._request(
            "PATCH",
            f"/rest/v1/{table}",
            json=values,
            params=self._eq_filters(filters),
            headers={"Prefer": "return=minimal"},
        )

    # =========================================================================
    # AUTH
    # =========================================================================

    async def get_user(self, access_token: str) -> Identity:
        """Resolve the identity behind a user access token."""
        data = await self._request(
            "GET",
            "/auth/v1/user",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        return Identity.model_validate(data)

    async def update_user_metadata(self, access_token: str, metadata: dict[str, Any]) -> Identity:
        """Merge metadata into the identity behind a user access token."""
        data = await self._request(
            "PUT",
            "/auth/v1/user",
            json={"data": metadata},
            headers={"Authorization": f"Bearer {access_token}"},
        )
        return Identity.model_validate(data)

    async def admin_get_user(self, user_id: str) -> Identity:
        """Fetch an identity by id."""
        data = await self._request("GET", f"/auth/v1/admin/users/{user_id}")
        return Identity.model_validate(data)

    async def admin_find_user_by_email(self, email: str, per_page: int = 1000) -> Identity | None:
        """Scan the identity list for an email address."""
        target = email.strip().lower()
        page = 1
        while True:
            data = await self._request(
                "GET",
                "/auth/v1/admin/users",
                params={"page": page, "per_page": per_page},
            )
            users = data.get("users", []) if isinstance(data, dict) else []
            for user in users:
                if (user.get("email") or "").lower() == target:
                    return Identity.model_validate(user)
            if len(users) < per_page:
                return None
            page += 1

    async def admin_invite_user(
        self,
        email: str,
        metadata: dict[str, Any],
        redirect_to: str | None = None,
    ) -> Identity:
        """Create an identity and send the provider's invitation email."""
        params = {"redirect_to": redirect_to} if redirect_to else None
        data = await self._request(
            "POST",
            "/auth/v1/invite",
            json={"email": email, "data": metadata},
            params=params,
        )
        return Identity.model_validate(data)

    async def admin_generate_link(
        self,
        email: str,
        link_type: str = "magiclink",
        redirect_to: str | None = None,
    ) -> GeneratedLink:
        """Generate a login link without sending any email."""
        payload: dict[str, Any] = {"type": link_type, "email": email}
        if redirect_to:
            payload["redirect_to"] = redirect_to

        data = await self._request("POST", "/auth/v1/admin/generate_link", json=payload)

        properties = data.get("properties") or {}
        user = data.get("user") or data
        action_link = data.get("action_link") or properties.get("action_link")
        if not action_link:
            raise SupabaseError("Auth provider returned no action link")

        return GeneratedLink(
            action_link=action_link,
            user_id=user.get("id"),
            email=user.get("email", email),
        )

    async def send_otp(self, email: str, redirect_to: str | None = None) -> None:
        """Send the provider's one-time-passcode email to an existing identity."""
        params = {"redirect_to": redirect_to} if redirect_to else None
        await self._request(
            "POST",
            "/auth/v1/otp",
            json={"email": email, "create_user": False},
            params=params,
        )

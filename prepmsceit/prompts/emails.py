"""
Email templates for invitations and login links.
"""

from html import escape


class EmailTemplates:
    """Subject lines and HTML bodies for transactional email."""

    BRAND = "prepMSCEIT"

    def login_link(self, action_link: str, full_name: str | None = None) -> tuple[str, str]:
        """Reusable login link for an existing account."""
        greeting = f"Hi {escape(full_name)}," if full_name else "Hi,"
        subject = f"Your {self.BRAND} login link"
        html = (
            f"<p>{greeting}</p>"
            f"<p>Use the button below to sign in to {self.BRAND}.</p>"
            f'<p><a href="{escape(action_link, quote=True)}">Sign in</a></p>'
            "<p>If you did not request this link you can ignore this email.</p>"
        )
        return subject, html

    def invitation(self, action_link: str, full_name: str | None = None) -> tuple[str, str]:
        """Invitation for an account that already exists with the auth provider."""
        greeting = f"Hi {escape(full_name)}," if full_name else "Hi,"
        subject = f"You're invited to {self.BRAND}"
        html = (
            f"<p>{greeting}</p>"
            f"<p>You have been invited to {self.BRAND}, the emotional intelligence "
            "training platform.</p>"
            f'<p><a href="{escape(action_link, quote=True)}">Accept invitation</a></p>'
        )
        return subject, html

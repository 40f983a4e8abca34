"""Sign-in and admin user management backed by Supabase.

The budget tracker never stores credentials itself.  Everything here is a
thin call into the hosted service; failures are re-raised as
:class:`IdentityServiceError` carrying the service's message, and nothing
is retried because every call is a one-shot user action.
"""

from __future__ import annotations

import secrets
import string
import time
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from .config import CREDENTIALS_FUNCTION, SUPABASE_KEY, SUPABASE_URL, USERS_TABLE
from .errors import IdentityServiceError
from .log_utils import get_logger

logger = get_logger(__name__)

PASSWORD_LENGTH = 12
PASSWORD_ALPHABET = string.ascii_letters + string.digits + '!@#$%^&*'
ROLES = ('user', 'admin')


def generate_password(length: int = PASSWORD_LENGTH) -> str:
    return ''.join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


def _message(exc: Exception) -> str:
    return getattr(exc, 'message', None) or str(exc)


class IdentityService:
    """Authentication and user CRUD through a Supabase client."""

    def __init__(self, client: Client, users_table: str = USERS_TABLE):
        self.client = client
        self.users_table = users_table

    @classmethod
    def from_settings(cls) -> 'IdentityService':
        if not (SUPABASE_URL and SUPABASE_KEY):
            raise IdentityServiceError("SUPABASE_URL and SUPABASE_KEY must be set")
        return cls(create_client(SUPABASE_URL, SUPABASE_KEY))

    def _call(self, action: str, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except IdentityServiceError:
            raise
        except Exception as exc:
            logger.error("%s failed: %s", action, _message(exc))
            raise IdentityServiceError(_message(exc)) from exc

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def sign_in(self, email: str, password: str):
        """Sign in with email and password and return the new session."""
        response = self._call(
            'Sign-in',
            self.client.auth.sign_in_with_password,
            {'email': email.strip(), 'password': password},
        )
        return response.session

    def current_session(self):
        """The active session, or None when nobody is signed in."""
        return self._call('Session lookup', self.client.auth.get_session)

    def sign_out(self) -> None:
        self._call('Sign-out', self.client.auth.sign_out)

    def fetch_profile(self, auth_id: str) -> Optional[Dict[str, Any]]:
        """Profile row for an auth user, or None when no profile exists."""
        response = self._call(
            'Profile lookup',
            lambda: self.client.table(self.users_table).select('*').eq('auth_id', auth_id).limit(1).execute(),
        )
        rows = response.data or []
        return rows[0] if rows else None

    # ------------------------------------------------------------------
    # Admin user management
    # ------------------------------------------------------------------

    def list_users(self) -> List[Dict[str, Any]]:
        response = self._call(
            'User listing',
            lambda: self.client.table(self.users_table).select('*').order('created_at', desc=True).execute(),
        )
        return list(response.data or [])

    def create_user(self, email: str, full_name: str, role: str = 'user') -> Dict[str, Any]:
        """Create an auth user and profile, then email the generated credentials.

        Returns the inserted profile row.
        """
        email = email.strip()
        if not email:
            raise IdentityServiceError("Email is required")
        if role not in ROLES:
            raise IdentityServiceError(f"Role must be one of: {', '.join(ROLES)}")

        password = generate_password()
        auth_response = self._call(
            'Auth user creation',
            self.client.auth.admin.create_user,
            {'email': email, 'password': password, 'email_confirm': True},
        )
        profile = {
            'id': f"USER{int(time.time() * 1000)}",
            'auth_id': auth_response.user.id,
            'email': email,
            'full_name': full_name.strip(),
            'role': role,
        }
        self._call(
            'Profile creation',
            lambda: self.client.table(self.users_table).insert([profile]).execute(),
        )
        self._call(
            'Credential email',
            self.client.functions.invoke,
            CREDENTIALS_FUNCTION,
            invoke_options={'body': {'email': email, 'password': password, 'fullName': profile['full_name']}},
        )
        logger.info("Created user %s (%s)", profile['id'], email)
        return profile

    def delete_user(self, user_id: str, auth_id: str) -> None:
        """Remove the profile row and then the auth user."""
        self._call(
            'Profile deletion',
            lambda: self.client.table(self.users_table).delete().eq('id', user_id).execute(),
        )
        self._call('Auth user deletion', self.client.auth.admin.delete_user, auth_id)
        logger.info("Deleted user %s", user_id)

"""Shared session and sidebar components for the multi-page app.

Every page calls :func:`page_setup`, which enforces sign-in when the
identity service is configured, loads the :class:`BudgetState` for this
browser session and renders the shared sidebar.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import streamlit as st

from .config import identity_configured
from .errors import IdentityServiceError
from .formatting import format_currency
from .identity import IdentityService
from .log_utils import get_logger
from .state import BudgetState

logger = get_logger(__name__)

STATE_KEY = 'budget_state'
IDENTITY_KEY = 'identity_service'
AUTH_KEY = 'auth_user'
PROFILE_KEY = 'user_profile'


def get_state() -> BudgetState:
    """Return the session's budget state, loading it from disk on first use."""
    if STATE_KEY not in st.session_state:
        st.session_state[STATE_KEY] = BudgetState.load()
    return st.session_state[STATE_KEY]


def get_identity() -> Optional[IdentityService]:
    """Return the session's identity service, or None when it isn't configured."""
    if not identity_configured():
        return None
    if IDENTITY_KEY not in st.session_state:
        st.session_state[IDENTITY_KEY] = IdentityService.from_settings()
    return st.session_state[IDENTITY_KEY]


def current_profile() -> Optional[Dict[str, Any]]:
    return st.session_state.get(PROFILE_KEY)


def is_signed_in() -> bool:
    return st.session_state.get(AUTH_KEY) is not None


def is_admin(profile: Optional[Dict[str, Any]]) -> bool:
    return bool(profile) and profile.get('role') == 'admin'


def _remember_user(identity: IdentityService, user) -> Optional[Dict[str, Any]]:
    """Record the signed-in auth user and their profile row (which may be missing)."""
    profile = identity.fetch_profile(user.id)
    if profile is None:
        logger.warning("Auth user %s has no profile row; continuing without admin access", user.id)
    st.session_state[AUTH_KEY] = {'id': user.id, 'email': getattr(user, 'email', None)}
    st.session_state[PROFILE_KEY] = profile
    return profile


def _restore_session(identity: IdentityService) -> bool:
    session = identity.current_session()
    if session is None or session.user is None:
        return False
    _remember_user(identity, session.user)
    return True


def render_login_form(identity: IdentityService) -> None:
    st.title("💰 Budget Tracker")
    st.subheader("Sign in")
    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign In")
    if not submitted:
        return
    if not email or not password:
        st.error("Please enter your email and password.")
        return
    try:
        session = identity.sign_in(email, password)
        _remember_user(identity, session.user)
    except IdentityServiceError as exc:
        st.error(f"Sign-in failed: {exc}")
        return
    logger.info("Signed in %s", email.strip())
    st.rerun()


def require_login() -> Optional[Dict[str, Any]]:
    """Block the page until a user is signed in.

    Returns the signed-in user's profile.  This is None when running without
    an identity service (local single-user mode) and also when the signed-in
    user has no profile row, in which case they get regular user access.
    """
    identity = get_identity()
    if identity is None:
        return None
    if not is_signed_in():
        try:
            _restore_session(identity)
        except IdentityServiceError as exc:
            st.warning(f"Could not restore your session: {exc}")
    if not is_signed_in():
        render_login_form(identity)
        st.stop()
    return current_profile()


def require_admin(profile: Optional[Dict[str, Any]]) -> None:
    if not is_admin(profile):
        st.error("🔒 Admin access required.")
        st.stop()


def sign_out() -> None:
    identity = get_identity()
    if identity is not None:
        try:
            identity.sign_out()
        except IdentityServiceError as exc:
            st.sidebar.error(f"Sign-out failed: {exc}")
            return
    st.session_state.pop(AUTH_KEY, None)
    st.session_state.pop(PROFILE_KEY, None)
    st.rerun()


def render_shared_sidebar(state: BudgetState, profile: Optional[Dict[str, Any]] = None) -> str:
    """Render sidebar elements available on all pages.

    Returns:
        The selected financial-year label.
    """
    st.sidebar.title("💰 Budget Tracker")

    years = state.available_financial_years()
    selected = st.sidebar.selectbox(
        "📅 Financial Year",
        options=years,
        index=years.index(state.financial_year),
        format_func=lambda label: f"FY {label}",
        help="July 1 to June 30",
    )
    if selected != state.financial_year:
        state.set_financial_year(selected)

    st.sidebar.caption(
        f"Income {format_currency(state.total_income())} · "
        f"Expenses {format_currency(state.total_expenses())}"
    )

    if is_signed_in():
        account = st.session_state[AUTH_KEY]
        profile = profile or {}
        st.sidebar.divider()
        st.sidebar.write(f"👤 **{profile.get('full_name') or profile.get('email') or account.get('email')}**")
        st.sidebar.caption(profile.get('role', 'user').title())
        if st.sidebar.button("Sign Out"):
            sign_out()
    return selected


def page_setup(page_title: str, page_icon: str, admin_only: bool = False) -> BudgetState:
    """Configure the page, gate access and render the shared sidebar."""
    st.set_page_config(page_title=page_title, page_icon=page_icon, layout="wide")
    profile = require_login()
    if admin_only:
        require_admin(profile)
    state = get_state()
    render_shared_sidebar(state, profile)
    return state

# sales_admin/auth.py
"""
Authentication Manager for the admin console

Version: 1.0.0
Features:
- Hosted password sign-in (Supabase auth)
- Role lookup from user_roles, profile name from profiles
- Session management with timeout
- Role-based page access
"""

import streamlit as st
from datetime import datetime, timedelta
from typing import Dict, List, MutableMapping, Optional, Tuple
import logging

from .config import config
from .gateway import (
    DataGateway,
    GatewayError,
    drop_session_client,
    get_gateway,
    get_session_client,
)
from .management.constants import PROFILES_TABLE, USER_ROLES_TABLE
from .roles import DEFAULT_ROLE, role_label

logger = logging.getLogger(__name__)

ADMIN_ROLES = ['admin']
DASHBOARD_ROLES = ['admin', 'manager']


class AuthManager:
    """Authentication manager for the admin console"""

    def __init__(self, gateway: DataGateway = None, auth_client=None, state: MutableMapping = None):
        """
        Args:
            gateway: Data gateway (defaults to the session's gateway)
            auth_client: Hosted auth client (defaults to the session's own client)
            state: Session state (defaults to st.session_state)
        """
        self.session_timeout = timedelta(
            hours=config.get_app_setting("SESSION_TIMEOUT_HOURS", 8)
        )
        self._gateway = gateway
        self._auth_client = auth_client
        self.state = state if state is not None else st.session_state

    @property
    def gateway(self) -> DataGateway:
        if self._gateway is None:
            self._gateway = get_gateway(self.state)
        return self._gateway

    @property
    def auth_client(self):
        if self._auth_client is None:
            self._auth_client = get_session_client(self.state)
        return self._auth_client

    # ==================== AUTHENTICATION ====================

    def authenticate(self, email: str, password: str) -> Tuple[bool, Dict]:
        """
        Sign in against the hosted auth service

        Args:
            email: User's email
            password: Plain text password

        Returns:
            Tuple of (success: bool, user_info: dict or error: dict)
        """
        try:
            response = self.auth_client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            logger.warning(f"Sign-in failed for {email}: {e}")
            return False, {"error": "Invalid email or password"}

        user = getattr(response, 'user', None)
        if user is None:
            logger.warning(f"Sign-in returned no user for {email}")
            return False, {"error": "Invalid email or password"}

        try:
            role_row = self.gateway.select_single(USER_ROLES_TABLE, 'role', eq={'user_id': user.id})
            profile = self.gateway.select_single(
                PROFILES_TABLE, 'full_name, is_approved', eq={'id': user.id}
            )
        except GatewayError as e:
            logger.error(f"Could not load role/profile for {email}: {e}")
            return False, {"error": "Authentication failed. Please try again."}

        if profile is None:
            # Deleted from the console: identity still signs in, but has no profile
            logger.warning(f"Sign-in for {email} has no profile")
            return False, {"error": "Account has been removed. Please contact an administrator."}

        if not profile.get('is_approved'):
            logger.warning(f"Sign-in for unapproved user: {email}")
            return False, {"error": "Account is pending approval."}

        role = (role_row or {}).get('role') or DEFAULT_ROLE.value

        logger.info(f"User {email} authenticated successfully")

        return True, {
            'id': user.id,
            'email': user.email or email,
            'role': role,
            'full_name': profile.get('full_name') or email,
            'login_time': datetime.now()
        }

    # ==================== SESSION MANAGEMENT ====================

    def check_session(self) -> bool:
        """Check if user session is valid and not expired"""
        if 'authenticated' not in self.state:
            return False

        if not self.state['authenticated']:
            return False

        # Check session timeout
        login_time = self.state.get('login_time')
        if login_time:
            elapsed = datetime.now() - login_time
            if elapsed > self.session_timeout:
                logger.info(f"Session expired for user: {self.state.get('user_email')}")
                self.logout()
                return False

        return True

    def login(self, user_info: Dict):
        """Initialize user session after successful authentication"""
        self.state['authenticated'] = True
        self.state['user_id'] = user_info['id']
        self.state['user_email'] = user_info['email']
        self.state['user_role'] = user_info['role']
        self.state['user_fullname'] = user_info['full_name']
        self.state['login_time'] = user_info['login_time']

        logger.info(f"User {user_info['email']} ({user_info['role']}) logged in")

    def logout(self):
        """Sign out this session's client, then clear user session and cache"""
        email = self.state.get('user_email', 'Unknown')

        try:
            self.auth_client.auth.sign_out()
        except Exception as e:
            logger.warning(f"Hosted sign-out failed: {e}")

        drop_session_client(self.state)
        self._auth_client = None
        self._gateway = None

        auth_keys = [
            'authenticated', 'user_id', 'user_email', 'user_role',
            'user_fullname', 'login_time'
        ]

        for key in auth_keys:
            if key in self.state:
                del self.state[key]

        # Clear cache
        st.cache_data.clear()

        logger.info(f"User {email} logged out")

    # ==================== ACCESS CONTROL ====================

    def require_auth(self) -> bool:
        """
        Require authentication to access a page
        Use at the beginning of each protected page
        """
        if not self.check_session():
            st.warning("⚠️ Please login to access this page")
            st.info("Go to the main page to login")
            st.stop()
            return False
        return True

    def require_role(self, allowed_roles: List[str]) -> bool:
        """
        Require specific role(s) to access a page

        Usage:
            auth.require_role(['admin', 'manager'])
        """
        if not self.require_auth():
            return False

        current_role = self.state.get('user_role', '')

        if current_role not in allowed_roles:
            labels = ', '.join(role_label(r) for r in allowed_roles)
            st.error(f"🚫 Access denied. Required role: {labels}")
            st.stop()
            return False

        return True

    def has_role(self, role: str) -> bool:
        return self.state.get('user_role', '') == role

    def is_admin(self) -> bool:
        return self.has_role('admin')

    # ==================== USER INFO HELPERS ====================

    def get_user_display_name(self) -> str:
        """Get user's display name for UI"""
        if self.state.get('user_fullname'):
            return self.state['user_fullname']
        return self.state.get('user_email', 'User')

    def get_user_id(self) -> Optional[str]:
        return self.state.get('user_id')


# ==================== MODULE EXPORTS ====================

__all__ = [
    'AuthManager',
    'ADMIN_ROLES',
    'DASHBOARD_ROLES',
]

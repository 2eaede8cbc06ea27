# sales_admin/management/editor.py
"""
Role & Approval Editor

One field-set per call:
- set_role: user_roles.role for a user
- set_approval: profiles.is_approved for a user
- set_target: monthly target of a team leader or distribution executive

On success each operation invalidates exactly the cached queries whose
data it changed and clears the matching edit state. On failure nothing
is invalidated or cleared and the result carries the gateway message.
"""

import logging
from typing import Any, MutableMapping, Optional, Union

from ..cache import (
    QueryCache,
    query_cache,
    SIGNUPS_QUERY,
    TEAM_LEADERS_QUERY,
    DISTRIBUTION_EXECUTIVES_QUERY,
)
from ..gateway import DataGateway, GatewayError, get_gateway
from ..results import MutationResult
from ..roles import Role, role_token
from .constants import (
    PROFILES_TABLE,
    USER_ROLES_TABLE,
    TEAM_LEADERS_TABLE,
    EDITING_USER_KEY,
    EDIT_ROLE_KEY,
    SELECTED_TL_KEY,
    TL_TARGET_KEY,
    SELECTED_DE_KEY,
    DE_TARGET_KEY,
)

logger = logging.getLogger(__name__)

TEAM_LEADER = 'tl'
DISTRIBUTION_EXECUTIVE = 'de'
TARGET_KINDS = (TEAM_LEADER, DISTRIBUTION_EXECUTIVE)


class TargetInputError(ValueError):
    """Target text that can't be read as a number"""


def parse_target(text: Any) -> Optional[float]:
    """
    Target input -> float.

    Blank input returns None (nothing to save). Raises TargetInputError
    for text that isn't a number.
    """
    if text is None:
        return None
    if isinstance(text, (int, float)):
        return float(text)
    text = str(text).strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        raise TargetInputError(f"'{text}' is not a valid target") from None


class RoleApprovalEditor:
    """
    Write side of the signup and DE / TL screens.

    Usage:
        editor = RoleApprovalEditor(state=st.session_state)

        result = editor.set_role(user_id, Role.TEAM_LEADER)
        result = editor.set_target('tl', tl_id, 1500)
        if result.succeeded:
            st.toast(result.message)
    """

    def __init__(
        self,
        gateway: DataGateway = None,
        cache: QueryCache = None,
        state: MutableMapping = None
    ):
        """
        Args:
            gateway: Data gateway (defaults to the configured singleton)
            cache: Query cache registry to invalidate
            state: Edit-mode state (st.session_state on the pages)
        """
        self._gateway = gateway
        self.cache = cache or query_cache
        self.state = state if state is not None else {}

    @property
    def gateway(self) -> DataGateway:
        """Lazy load data gateway."""
        if self._gateway is None:
            self._gateway = get_gateway()
        return self._gateway

    # =========================================================================
    # ROLE
    # =========================================================================

    def set_role(self, user_id: str, role: Union[Role, str]) -> MutationResult:
        """
        Write the role assignment for a user.

        Membership in the editable set is not checked here; the data store
        rejects tokens outside its role type.
        """
        token = role_token(role)
        try:
            updated = self.gateway.update(USER_ROLES_TABLE, {'role': token}, eq={'user_id': user_id})
        except GatewayError as e:
            logger.error(f"Error updating role for {user_id}: {e}")
            return MutationResult.failed(e.message, 'Failed to update role')

        if not updated:
            logger.warning(f"No role assignment found for user {user_id}")
            return MutationResult.failed(None, 'No role assignment found for this user')

        logger.info(f"Role for user {user_id} set to {token}")
        self.cache.invalidate(SIGNUPS_QUERY)
        self._clear_state(EDITING_USER_KEY, EDIT_ROLE_KEY)
        return MutationResult.success('Role updated successfully')

    # =========================================================================
    # APPROVAL
    # =========================================================================

    def set_approval(self, user_id: str, approved: bool) -> MutationResult:
        """Approve or revoke approval of a user profile."""
        try:
            updated = self.gateway.update(
                PROFILES_TABLE, {'is_approved': bool(approved)}, eq={'id': user_id}
            )
        except GatewayError as e:
            logger.error(f"Error updating approval for {user_id}: {e}")
            return MutationResult.failed(e.message, 'Failed to update approval')

        if not updated:
            return MutationResult.failed(None, 'User not found')

        logger.info(f"User {user_id} {'approved' if approved else 'set to pending'}")
        self.cache.invalidate(SIGNUPS_QUERY)
        self.cache.invalidate(TEAM_LEADERS_QUERY)
        return MutationResult.success('User approved' if approved else 'User set to pending')

    # =========================================================================
    # TARGETS
    # =========================================================================

    def set_target(self, kind: str, entity_id: str, target: float) -> MutationResult:
        """
        Overwrite the monthly target of a team leader ('tl') or a
        distribution executive ('de').

        'de' targets are reported as saved but not written anywhere
        (NOT_PERSISTED) until the distribution_executives store exists.
        """
        if kind == TEAM_LEADER:
            return self._set_team_leader_target(entity_id, target)
        if kind == DISTRIBUTION_EXECUTIVE:
            return self._set_distribution_executive_target(entity_id, target)
        raise ValueError(f"Unknown target kind '{kind}', expected one of {TARGET_KINDS}")

    def set_target_from_input(self, kind: str, entity_id: str, text: Any) -> Optional[MutationResult]:
        """
        Parse target text from the inline editor and save it.

        Returns None for blank input (no call made).
        """
        try:
            target = parse_target(text)
        except TargetInputError as e:
            return MutationResult.failed(str(e))
        if target is None:
            return None
        return self.set_target(kind, entity_id, target)

    def _set_team_leader_target(self, tl_id: str, target: float) -> MutationResult:
        try:
            updated = self.gateway.update(
                TEAM_LEADERS_TABLE, {'monthly_target': target}, eq={'id': tl_id}
            )
        except GatewayError as e:
            logger.error(f"Error setting target for TL {tl_id}: {e}")
            return MutationResult.failed(e.message, 'Failed to set target')

        if not updated:
            return MutationResult.failed(None, 'Team leader not found')

        logger.info(f"TL {tl_id} monthly target set to {target}")
        self.cache.invalidate(TEAM_LEADERS_QUERY)
        self._clear_state(SELECTED_TL_KEY, TL_TARGET_KEY)
        return MutationResult.success('TL target updated')

    def _set_distribution_executive_target(self, de_id: str, target: float) -> MutationResult:
        # distribution_executives is not provisioned; the target is accepted without a write
        logger.warning(f"DE {de_id} target {target} accepted but not persisted (store not provisioned)")
        self.cache.invalidate(DISTRIBUTION_EXECUTIVES_QUERY)
        self._clear_state(SELECTED_DE_KEY, DE_TARGET_KEY)
        return MutationResult.not_persisted('DE target updated')

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    def _clear_state(self, *keys: str):
        for key in keys:
            if key in self.state:
                del self.state[key]

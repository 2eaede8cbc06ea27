# sales_admin/management/deletion.py
"""
Deletion Workflow

Idle -> ConfirmPending (target selected) -> Deleting -> Idle

Deleting a user removes the role assignment, then the profile row. The
hosted auth identity is left in place: the client key has no privilege to
remove it, so the account can still sign in but has no profile or role.

If removing the role fails the profile delete is not attempted. If the
profile delete fails after the role is gone, the result is PARTIAL and
says so.
"""

import logging
from enum import Enum
from typing import MutableMapping, Optional

from ..cache import QueryCache, query_cache, SIGNUPS_QUERY
from ..gateway import DataGateway, GatewayError, get_gateway
from ..results import MutationResult
from .constants import (
    PROFILES_TABLE,
    USER_ROLES_TABLE,
    DELETE_STATE_KEY,
    DELETE_TARGET_KEY,
)

logger = logging.getLogger(__name__)


class DeletionState(str, Enum):
    IDLE = 'idle'
    CONFIRM_PENDING = 'confirm_pending'
    DELETING = 'deleting'


class DeletionError(RuntimeError):
    """Workflow used out of order"""


class DeletionWorkflow:
    """
    Confirm-then-delete flow for the signup screen.

    State lives in `state` (st.session_state on the page) so it survives
    reruns.

    Usage:
        workflow = DeletionWorkflow(state=st.session_state)

        workflow.request(user_id)       # trash button
        workflow.cancel()               # dialog cancel
        result = workflow.confirm()     # dialog delete
    """

    def __init__(
        self,
        gateway: DataGateway = None,
        cache: QueryCache = None,
        state: MutableMapping = None,
        current_user_id: str = None
    ):
        """
        Args:
            gateway: Data gateway (defaults to the configured singleton)
            cache: Query cache registry to invalidate
            state: Where workflow state is kept
            current_user_id: Signed-in admin, who can't delete themselves
        """
        self._gateway = gateway
        self.cache = cache or query_cache
        self.state = state if state is not None else {}
        self.current_user_id = current_user_id

    @property
    def gateway(self) -> DataGateway:
        """Lazy load data gateway."""
        if self._gateway is None:
            self._gateway = get_gateway()
        return self._gateway

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def status(self) -> DeletionState:
        return DeletionState(self.state.get(DELETE_STATE_KEY, DeletionState.IDLE.value))

    @property
    def target(self) -> Optional[str]:
        return self.state.get(DELETE_TARGET_KEY)

    def _set(self, status: DeletionState, target: Optional[str]):
        self.state[DELETE_STATE_KEY] = status.value
        self.state[DELETE_TARGET_KEY] = target

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def request(self, user_id: str) -> bool:
        """
        Select a user for deletion. Returns False (and stays put) for the
        signed-in admin's own account or while a delete is in flight.
        """
        if self.status is DeletionState.DELETING:
            logger.warning("Delete already in progress, ignoring request")
            return False
        if self.current_user_id is not None and user_id == self.current_user_id:
            logger.warning(f"User {user_id} tried to delete their own account")
            return False

        self._set(DeletionState.CONFIRM_PENDING, user_id)
        return True

    def cancel(self):
        if self.status is DeletionState.DELETING:
            raise DeletionError("Cannot cancel a delete in progress")
        self._set(DeletionState.IDLE, None)

    def confirm(self) -> MutationResult:
        """Run the delete for the pending target. Always ends Idle."""
        if self.status is not DeletionState.CONFIRM_PENDING or not self.target:
            raise DeletionError("No deletion pending confirmation")

        user_id = self.target
        self._set(DeletionState.DELETING, user_id)
        try:
            result = self._delete_user(user_id)
        finally:
            self._set(DeletionState.IDLE, None)

        if result.persisted:
            self.cache.invalidate(SIGNUPS_QUERY)
        return result

    # =========================================================================
    # DELETE
    # =========================================================================

    def _delete_user(self, user_id: str) -> MutationResult:
        try:
            self.gateway.delete(USER_ROLES_TABLE, eq={'user_id': user_id})
        except GatewayError as e:
            logger.error(f"Error deleting role for {user_id}: {e}")
            return MutationResult.failed(e.message, 'Failed to delete user')

        try:
            self.gateway.delete(PROFILES_TABLE, eq={'id': user_id})
        except GatewayError as e:
            logger.error(f"Role removed but profile delete failed for {user_id}: {e}")
            return MutationResult.partial(
                f"Role removed but profile could not be deleted: {e.message}", e.message
            )

        logger.info(f"User {user_id} deleted (role + profile); auth identity kept")
        return MutationResult.success('User deleted successfully')

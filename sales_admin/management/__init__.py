# sales_admin/management/__init__.py
"""
Management Module

User/role management and DE / TL oversight.

Components:
- queries: Aggregation Reader (signups, team leaders, distribution executives)
- editor: Role & Approval Editor (role, approval, targets)
- deletion: Deletion Workflow (confirm, then role + profile delete)
- filters: Signup list filters and statistics

Usage:
    from sales_admin.management import (
        AggregationReader,
        RoleApprovalEditor,
        DeletionWorkflow,
        SignupFilters,
    )
"""

from .queries import AggregationReader
from .editor import (
    RoleApprovalEditor,
    TargetInputError,
    parse_target,
    TEAM_LEADER,
    DISTRIBUTION_EXECUTIVE,
)
from .deletion import DeletionWorkflow, DeletionState, DeletionError
from .filters import SignupFilters

# Constants
from .constants import (
    SIGNUP_COLUMNS,
    TEAM_LEADER_COLUMNS,
    DISTRIBUTION_EXECUTIVE_COLUMNS,
    STATUS_FILTERS,
    EDITING_USER_KEY,
    EDIT_ROLE_KEY,
    SELECTED_TL_KEY,
    TL_TARGET_KEY,
    SELECTED_DE_KEY,
    DE_TARGET_KEY,
)

__all__ = [
    # Classes
    'AggregationReader',
    'RoleApprovalEditor',
    'DeletionWorkflow',
    'DeletionState',
    'DeletionError',
    'SignupFilters',
    'TargetInputError',

    # Helpers
    'parse_target',
    'TEAM_LEADER',
    'DISTRIBUTION_EXECUTIVE',

    # Constants
    'SIGNUP_COLUMNS',
    'TEAM_LEADER_COLUMNS',
    'DISTRIBUTION_EXECUTIVE_COLUMNS',
    'STATUS_FILTERS',
    'EDITING_USER_KEY',
    'EDIT_ROLE_KEY',
    'SELECTED_TL_KEY',
    'TL_TARGET_KEY',
    'SELECTED_DE_KEY',
    'DE_TARGET_KEY',
]

# sales_admin/roles.py
"""
Role definitions

Closed set of role tokens stored in `user_roles.role`, with the display
table used by every screen (label, badge colour, icon).
"""

from enum import Enum
from typing import Dict, List, NamedTuple, Optional


class Role(str, Enum):
    ADMIN = 'admin'
    MANAGER = 'manager'
    TEAM_LEADER = 'tl'
    DISTRIBUTION_EXECUTIVE = 'de'
    DIRECT_SALES_REP = 'dsr'


class RoleDisplay(NamedTuple):
    label: str
    color: str   # Streamlit markdown colour name
    icon: str


DEFAULT_ROLE = Role.DIRECT_SALES_REP

# Roles an admin can assign from the signup screen. `de` is display-only.
EDITABLE_ROLES: List[Role] = [
    Role.ADMIN,
    Role.MANAGER,
    Role.TEAM_LEADER,
    Role.DIRECT_SALES_REP,
]

ROLE_DISPLAY: Dict[Role, RoleDisplay] = {
    Role.ADMIN: RoleDisplay('Admin', 'red', '🔴'),
    Role.MANAGER: RoleDisplay('Manager', 'blue', '🔵'),
    Role.TEAM_LEADER: RoleDisplay('Team Leader', 'green', '🟢'),
    Role.DISTRIBUTION_EXECUTIVE: RoleDisplay('Distribution Executive', 'violet', '🟣'),
    Role.DIRECT_SALES_REP: RoleDisplay('Direct Sales Rep', 'orange', '🟠'),
}


def parse_role(value: Optional[str]) -> Role:
    """Stored token -> Role. Unset or unknown tokens fall back to dsr."""
    try:
        return Role(value)
    except ValueError:
        return DEFAULT_ROLE


def role_label(value: Optional[str]) -> str:
    return ROLE_DISPLAY[parse_role(value)].label


def role_badge(value: Optional[str]) -> str:
    """Markdown badge, e.g. ':green-background[Team Leader]'"""
    display = ROLE_DISPLAY[parse_role(value)]
    return f":{display.color}-background[{display.label}]"


def role_token(role) -> str:
    """Role or raw string -> stored token, without validating membership"""
    return role.value if isinstance(role, Role) else str(role)

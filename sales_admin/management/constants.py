# sales_admin/management/constants.py
"""
Constants for the management screens

Centralized configuration for:
- Table names
- View-model column layouts
- Session state keys for edit/confirm state
"""

# =====================================================================
# TABLES
# =====================================================================

PROFILES_TABLE = 'profiles'
USER_ROLES_TABLE = 'user_roles'
REGIONS_TABLE = 'regions'
TEAM_LEADERS_TABLE = 'team_leaders'
TEAMS_TABLE = 'teams'
DSRS_TABLE = 'dsrs'
SALES_TABLE = 'sales'
STOCK_TABLE = 'stock'

# =====================================================================
# VIEW-MODEL COLUMNS
# =====================================================================

SIGNUP_COLUMNS = [
    'id',
    'full_name',
    'email',
    'phone',
    'role',
    'region_id',
    'region_name',
    'created_at',
    'is_approved',
]

TEAM_LEADER_COLUMNS = [
    'id',
    'user_id',
    'full_name',
    'email',
    'phone',
    'is_approved',
    'region_name',
    'monthly_target',
    'team_count',
    'dsr_count',
    'sales_count',
    'created_at',
]

DISTRIBUTION_EXECUTIVE_COLUMNS = [
    'id',
    'user_id',
    'region_id',
    'full_name',
    'email',
    'phone',
    'is_approved',
    'region_name',
    'target',
    'agent_count',
    'sales_count',
    'created_at',
]

# Profile fields merged into entity rows, with their missing-profile defaults
PROFILE_DEFAULTS = {
    'full_name': '',
    'email': '',
    'phone': '',
    'is_approved': False,
}

# Counts scoped by team leader id: output column -> table
TEAM_LEADER_COUNTS = {
    'team_count': TEAMS_TABLE,
    'dsr_count': DSRS_TABLE,
    'sales_count': SALES_TABLE,
}

# =====================================================================
# SESSION STATE KEYS
# =====================================================================

# Signup screen: role edit
EDITING_USER_KEY = 'signup_editing_id'
EDIT_ROLE_KEY = 'signup_edit_role'

# DE/TL screen: target edit
SELECTED_TL_KEY = 'selected_tl'
TL_TARGET_KEY = 'tl_target'
SELECTED_DE_KEY = 'selected_de'
DE_TARGET_KEY = 'de_target'

# Deletion workflow
DELETE_STATE_KEY = 'delete_state'
DELETE_TARGET_KEY = 'delete_id'

# =====================================================================
# FILTERS
# =====================================================================

STATUS_FILTERS = ['All', 'Approved', 'Pending']

# =====================================================================
# READS
# =====================================================================

# Ids per IN lookup request
LOOKUP_CHUNK_SIZE = 100

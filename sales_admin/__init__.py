# sales_admin/__init__.py
"""
Sales Admin Console - shared package

Admin screens for the sales-tracking app (signups and roles, DE / TL
oversight, overview dashboard) over the hosted data store:
- config: Configuration management (local .env + Streamlit Cloud)
- gateway: Data gateway (Supabase REST or direct SQL)
- db: SQLAlchemy engine for the direct SQL backend
- auth: Authentication and session management
- roles: Role enum and display table
- cache: Query cache registry for invalidation
- management: Signup / DE / TL reads and mutations
- dashboard: Overview metrics and charts

Usage:
    from sales_admin import AuthManager, get_gateway, config
    from sales_admin.management import AggregationReader, RoleApprovalEditor
"""

# Configuration
from .config import (
    config,
    Config,
    ConfigurationError,
)

# Data access
from .gateway import (
    GatewayError,
    DataGateway,
    SupabaseGateway,
    SqlGateway,
    get_gateway,
    set_gateway,
    get_supabase_client,
    check_gateway_connection,
)

# Authentication
from .auth import (
    AuthManager,
    ADMIN_ROLES,
    DASHBOARD_ROLES,
)

# Roles, results, cache
from .roles import Role, EDITABLE_ROLES, ROLE_DISPLAY, role_label, role_badge
from .results import MutationResult, MutationStatus
from .cache import query_cache, QueryCache

__all__ = [
    # Config
    'config',
    'Config',
    'ConfigurationError',

    # Data access
    'GatewayError',
    'DataGateway',
    'SupabaseGateway',
    'SqlGateway',
    'get_gateway',
    'set_gateway',
    'get_supabase_client',
    'check_gateway_connection',

    # Auth
    'AuthManager',
    'ADMIN_ROLES',
    'DASHBOARD_ROLES',

    # Roles / results / cache
    'Role',
    'EDITABLE_ROLES',
    'ROLE_DISPLAY',
    'role_label',
    'role_badge',
    'MutationResult',
    'MutationStatus',
    'query_cache',
    'QueryCache',
]

__version__ = '1.0.0'

# sales_admin/dashboard/constants.py
"""
Constants for the Overview Dashboard

- Color scheme
- Chart settings
- Derivation rules
"""

# =====================================================================
# COLOR SCHEME
# =====================================================================

COLORS = {
    "primary": "#3b82f6",     # Blue
    "success": "#22c55e",     # Green
    "warning": "#f59e0b",     # Amber
    "danger": "#ef4444",      # Red
    "text_light": "#666666",
}

PIE_COLORS = [
    COLORS["primary"],
    COLORS["success"],
    COLORS["warning"],
    COLORS["danger"],
]

# =====================================================================
# DERIVATION RULES
# =====================================================================

# Stock whose status starts with this prefix has left the warehouse
SOLD_STATUS_PREFIX = 'sold'

# Placeholder category when there is no stock at all
EMPTY_STOCK_LABEL = 'No Stock'

# Label for stock rows without a type
UNKNOWN_STOCK_TYPE = 'Unknown'

# Regions shown on the sales-by-region chart
REGION_CHART_LIMIT = 6

# =====================================================================
# CHART DIMENSIONS
# =====================================================================

CHART_HEIGHT = 256
PIE_INNER_RADIUS = 50
PIE_OUTER_RADIUS = 90

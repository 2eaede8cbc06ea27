# sales_admin/dashboard/__init__.py
"""
Overview Dashboard Module

Components:
- queries: Concurrent best-effort reads (sales, DSR count, stock, regions)
- metrics: Summary metrics and chart series
- charts: Altair visualizations and KPI cards

Usage:
    from sales_admin.dashboard import DashboardQueries, DashboardMetrics, DashboardCharts

    metrics = DashboardMetrics(**DashboardQueries().load())
"""

from .queries import DashboardQueries
from .metrics import DashboardMetrics
from .charts import DashboardCharts

from .constants import (
    COLORS,
    SOLD_STATUS_PREFIX,
    EMPTY_STOCK_LABEL,
    REGION_CHART_LIMIT,
)

__all__ = [
    'DashboardQueries',
    'DashboardMetrics',
    'DashboardCharts',
    'COLORS',
    'SOLD_STATUS_PREFIX',
    'EMPTY_STOCK_LABEL',
    'REGION_CHART_LIMIT',
]

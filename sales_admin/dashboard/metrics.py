# sales_admin/dashboard/metrics.py
"""
Metric reductions for the Overview Dashboard

Handles:
- Sales totals, revenue and approval split
- Stock in hand vs total
- Stock by type histogram
- Sales by region series
"""

import logging
from typing import Any, Dict, List

import pandas as pd

from .constants import (
    SOLD_STATUS_PREFIX,
    EMPTY_STOCK_LABEL,
    UNKNOWN_STOCK_TYPE,
    REGION_CHART_LIMIT,
)

logger = logging.getLogger(__name__)


class DashboardMetrics:
    """
    Usage:
        metrics = DashboardMetrics(sales_df, stock_df, regions_df, dsr_count, tl_regions)

        overview = metrics.calculate_overview()
        stock_types = metrics.stock_by_type()
        regions = metrics.region_sales()
    """

    def __init__(
        self,
        sales_df: pd.DataFrame = None,
        stock_df: pd.DataFrame = None,
        regions_df: pd.DataFrame = None,
        dsr_count: int = 0,
        tl_regions: Dict[Any, Any] = None
    ):
        """
        Args:
            sales_df: Sales rows (sale_price, admin_approved, tl_id)
            stock_df: Stock rows (status, type)
            regions_df: Regions (id, name, code), in display order
            dsr_count: Number of field reps
            tl_regions: Team leader id -> region id
        """
        self.sales_df = sales_df if sales_df is not None else pd.DataFrame()
        self.stock_df = stock_df if stock_df is not None else pd.DataFrame()
        self.regions_df = regions_df if regions_df is not None else pd.DataFrame()
        self.dsr_count = dsr_count or 0
        self.tl_regions = tl_regions or {}

    # =========================================================================
    # OVERVIEW
    # =========================================================================

    def calculate_overview(self) -> Dict:
        """
        Returns:
            Dict with total_sales, total_revenue, total_dsrs,
            stock_in_hand, total_stock, approved_sales, pending_sales
        """
        total_sales = len(self.sales_df)
        approved_sales = self.approved_sales()

        return {
            'total_sales': total_sales,
            'total_revenue': self.total_revenue(),
            'total_dsrs': int(self.dsr_count),
            'stock_in_hand': self.stock_in_hand(),
            'total_stock': len(self.stock_df),
            'approved_sales': approved_sales,
            'pending_sales': total_sales - approved_sales,
        }

    def total_revenue(self) -> float:
        """Sum of sale_price; missing or non-numeric prices count as 0."""
        if self.sales_df.empty or 'sale_price' not in self.sales_df:
            return 0.0
        prices = pd.to_numeric(self.sales_df['sale_price'], errors='coerce').fillna(0)
        return float(prices.sum())

    def approved_sales(self) -> int:
        if self.sales_df.empty or 'admin_approved' not in self.sales_df:
            return 0
        return int(self.sales_df['admin_approved'].eq(True).sum())

    def stock_in_hand(self) -> int:
        """Stock rows whose status does not begin with 'sold'."""
        if self.stock_df.empty:
            return 0
        status = self.stock_df.get('status', pd.Series(index=self.stock_df.index, dtype=object))
        sold = status.fillna('').astype(str).str.startswith(SOLD_STATUS_PREFIX)
        return int((~sold).sum())

    # =========================================================================
    # CHART SERIES
    # =========================================================================

    def stock_by_type(self) -> List[Dict]:
        """
        Histogram over stock type as [{'name', 'value'}], in first-seen
        order. A single zero placeholder when there is no stock.
        """
        if self.stock_df.empty or 'type' not in self.stock_df:
            return [{'name': EMPTY_STOCK_LABEL, 'value': 0}]

        types = self.stock_df['type'].fillna(UNKNOWN_STOCK_TYPE).astype(str)
        counts = types.value_counts(sort=False)
        return [{'name': name, 'value': int(value)} for name, value in counts.items()]

    def region_sales(self, limit: int = REGION_CHART_LIMIT) -> List[Dict]:
        """
        Sales per region through each sale's team leader, for the first
        `limit` regions as [{'name': region code, 'sales': count}].

        Sales without a team leader, or whose leader has no region, are
        not attributed to any region.
        """
        if self.regions_df.empty:
            return []

        counts: Dict[Any, int] = {}
        if not self.sales_df.empty and 'tl_id' in self.sales_df:
            region_ids = self.sales_df['tl_id'].map(self.tl_regions).dropna()
            counts = {k: int(v) for k, v in region_ids.value_counts().items()}

        series = []
        for _, region in self.regions_df.head(limit).iterrows():
            label = region.get('code') or region.get('name') or ''
            series.append({'name': label, 'sales': counts.get(region['id'], 0)})
        return series

    def to_dict(self) -> Dict:
        """Everything the page renders, in one snapshot."""
        return {
            'overview': self.calculate_overview(),
            'stock_by_type': self.stock_by_type(),
            'region_sales': self.region_sales(),
        }

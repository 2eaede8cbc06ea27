# sales_admin/dashboard/queries.py
"""
Data loading for the Overview Dashboard

Independent reads issued concurrently, best-effort:
- sales rows
- field rep (DSR) count
- stock rows
- regions
- team leader -> region map (for the sales-by-region join)

There is no cross-table consistency; each read that fails is logged and
replaced with an empty input so the rest of the dashboard still renders.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict

import pandas as pd

from ..config import config
from ..gateway import DataGateway, get_gateway
from ..management.constants import (
    SALES_TABLE,
    DSRS_TABLE,
    STOCK_TABLE,
    REGIONS_TABLE,
    TEAM_LEADERS_TABLE,
    PROFILES_TABLE,
)

logger = logging.getLogger(__name__)

SALES_COLUMNS = ['tl_id', 'sale_type', 'payment_status', 'admin_approved', 'sale_price']
STOCK_COLUMNS = ['status', 'type']
REGION_COLUMNS = ['id', 'name', 'code']


class DashboardQueries:
    """
    Usage:
        inputs = DashboardQueries().load()
        metrics = DashboardMetrics(**inputs)
    """

    def __init__(self, gateway: DataGateway = None, max_workers: int = None):
        self._gateway = gateway
        self.max_workers = max_workers or config.get_app_setting("QUERY_WORKERS", 4)

    @property
    def gateway(self) -> DataGateway:
        """Lazy load data gateway."""
        if self._gateway is None:
            self._gateway = get_gateway()
        return self._gateway

    def load(self) -> Dict[str, Any]:
        """
        Returns:
            Dict with keys sales_df, dsr_count, stock_df, regions_df,
            tl_regions - the keyword arguments of DashboardMetrics
        """
        # The session's gateway is not visible from worker threads
        if self._gateway is None:
            self._gateway = get_gateway()

        tasks = {
            'sales_df': lambda: self._frame(SALES_TABLE, SALES_COLUMNS),
            'dsr_count': self._dsr_count,
            'stock_df': lambda: self._frame(STOCK_TABLE, STOCK_COLUMNS),
            'regions_df': lambda: self._frame(REGIONS_TABLE, REGION_COLUMNS, order='code'),
            'tl_regions': self._team_leader_regions,
        }

        with ThreadPoolExecutor(max_workers=max(1, self.max_workers), thread_name_prefix="dashboard") as executor:
            futures = {name: executor.submit(task) for name, task in tasks.items()}
            inputs = {name: future.result() for name, future in futures.items()}

        logger.info(
            f"Dashboard inputs: {len(inputs['sales_df'])} sales, "
            f"{len(inputs['stock_df'])} stock, {len(inputs['regions_df'])} regions"
        )
        return inputs

    # =========================================================================
    # READS
    # =========================================================================

    def _frame(self, table: str, columns: list, order: str = None) -> pd.DataFrame:
        try:
            rows = self.gateway.select(table, ', '.join(columns), order=order)
        except Exception as e:
            logger.error(f"Error fetching {table} for dashboard: {e}")
            rows = []
        return pd.DataFrame(rows, columns=columns)

    def _dsr_count(self) -> int:
        try:
            return self.gateway.count(DSRS_TABLE)
        except Exception as e:
            logger.error(f"Error counting {DSRS_TABLE}: {e}")
            return 0

    def _team_leader_regions(self) -> Dict[Any, Any]:
        """{team leader id: region id} through the leader's profile"""
        try:
            leaders = self.gateway.select(TEAM_LEADERS_TABLE, 'id, user_id')
            user_ids = list(dict.fromkeys(tl['user_id'] for tl in leaders if tl.get('user_id')))
            if not user_ids:
                return {}
            profiles = self.gateway.select(PROFILES_TABLE, 'id, region_id', in_={'id': user_ids})
        except Exception as e:
            logger.error(f"Error resolving team leader regions: {e}")
            return {}

        region_by_user = {p['id']: p.get('region_id') for p in profiles if p.get('region_id')}
        return {
            tl['id']: region_by_user[tl['user_id']]
            for tl in leaders
            if tl.get('user_id') in region_by_user
        }

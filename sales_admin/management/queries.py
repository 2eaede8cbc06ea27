# sales_admin/management/queries.py
"""
Aggregation Reader for the management screens

Builds the flattened view models behind the signup list and the
DE / TL lists:
- Signups: profiles + role + region name
- Team leaders: team_leaders + owning profile + team/DSR/sales counts
- Distribution executives: store not provisioned yet, always empty

Related rows are fetched with batched IN queries per table and counts
with one exact count per team leader, issued concurrently, then merged
in memory. Any join or count that fails falls
back to defaults; only a failed base fetch empties the list.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, List

import pandas as pd

from ..config import config
from ..gateway import DataGateway, Row, get_gateway
from ..roles import DEFAULT_ROLE
from .constants import (
    PROFILES_TABLE,
    USER_ROLES_TABLE,
    REGIONS_TABLE,
    TEAM_LEADERS_TABLE,
    SIGNUP_COLUMNS,
    TEAM_LEADER_COLUMNS,
    DISTRIBUTION_EXECUTIVE_COLUMNS,
    PROFILE_DEFAULTS,
    TEAM_LEADER_COUNTS,
    LOOKUP_CHUNK_SIZE,
)

logger = logging.getLogger(__name__)


class AggregationReader:
    """
    Read side of the management screens.

    Usage:
        reader = AggregationReader()

        signups_df = reader.get_signups()
        tls_df = reader.get_team_leaders()
        des_df = reader.get_distribution_executives()
    """

    def __init__(self, gateway: DataGateway = None, max_workers: int = None):
        """
        Args:
            gateway: Data gateway (defaults to the configured singleton)
            max_workers: Concurrent lookups per read
        """
        self._gateway = gateway
        self.max_workers = max_workers or config.get_app_setting("QUERY_WORKERS", 4)

    @property
    def gateway(self) -> DataGateway:
        """Lazy load data gateway."""
        if self._gateway is None:
            self._gateway = get_gateway()
        return self._gateway

    # =========================================================================
    # SIGNUPS
    # =========================================================================

    def get_signups(self) -> pd.DataFrame:
        """
        All user profiles, newest first, with role and region name.

        Missing role defaults to 'dsr', missing region to ''.
        """
        profiles = self._fetch_base(
            PROFILES_TABLE,
            'id, full_name, email, phone, region_id, created_at, is_approved'
        )
        if not profiles:
            return pd.DataFrame(columns=SIGNUP_COLUMNS)

        user_ids = [p['id'] for p in profiles]
        region_ids = _distinct(p.get('region_id') for p in profiles)

        related = self._run_parallel({
            'roles': lambda: self._lookup(USER_ROLES_TABLE, 'user_id', 'user_id, role', user_ids),
            'regions': lambda: self._lookup(REGIONS_TABLE, 'id', 'id, name', region_ids),
        })

        rows = []
        for profile in profiles:
            role_row = related['roles'].get(profile['id'], {})
            region_row = related['regions'].get(profile.get('region_id'), {})
            rows.append({
                'id': profile['id'],
                'full_name': profile.get('full_name'),
                'email': profile.get('email'),
                'phone': profile.get('phone') or '',
                'role': role_row.get('role') or DEFAULT_ROLE.value,
                'region_id': profile.get('region_id'),
                'region_name': region_row.get('name') or '',
                'created_at': profile.get('created_at'),
                'is_approved': bool(profile.get('is_approved')),
            })

        logger.info(f"Loaded {len(rows)} signups")
        return pd.DataFrame(rows, columns=SIGNUP_COLUMNS)

    # =========================================================================
    # TEAM LEADERS
    # =========================================================================

    def get_team_leaders(self, profiled_only: bool = False) -> pd.DataFrame:
        """
        Team leaders, newest first, merged with their profile and
        team / DSR / sales counts.

        Args:
            profiled_only: Drop leaders whose profile is missing instead
                of listing them with blank profile fields
        """
        leaders = self._fetch_base(TEAM_LEADERS_TABLE, 'id, user_id, monthly_target, created_at')
        if not leaders:
            return pd.DataFrame(columns=TEAM_LEADER_COLUMNS)

        tl_ids = [tl['id'] for tl in leaders]
        user_ids = _distinct(tl.get('user_id') for tl in leaders)

        tasks: Dict[Any, Callable[[], Any]] = {
            'profiles': lambda: self._lookup(
                PROFILES_TABLE, 'id', 'id, full_name, email, phone, is_approved, region_id', user_ids
            ),
        }
        for column, table in TEAM_LEADER_COUNTS.items():
            for tl_id in tl_ids:
                tasks[(column, tl_id)] = (lambda t=table, i=tl_id: self._count(t, 'tl_id', i))
        related = self._run_parallel(tasks)

        profiles = related['profiles']
        regions = self._lookup(
            REGIONS_TABLE, 'id', 'id, name',
            _distinct(p.get('region_id') for p in profiles.values())
        )

        rows = []
        for tl in leaders:
            profile = profiles.get(tl.get('user_id'))
            if profile is None and profiled_only:
                continue
            row = {'id': tl['id'], 'user_id': tl.get('user_id')}
            row.update(_profile_fields(profile))
            row['region_name'] = regions.get((profile or {}).get('region_id'), {}).get('name') or ''
            row['monthly_target'] = tl.get('monthly_target')
            for column in TEAM_LEADER_COUNTS:
                row[column] = related[(column, tl['id'])]
            row['created_at'] = tl.get('created_at')
            rows.append(row)

        logger.info(f"Loaded {len(rows)} team leaders")
        return pd.DataFrame(rows, columns=TEAM_LEADER_COLUMNS)

    # =========================================================================
    # DISTRIBUTION EXECUTIVES
    # =========================================================================

    def get_distribution_executives(self) -> pd.DataFrame:
        """
        Distribution executives with agent / sales counts.

        The backing table is not provisioned in the hosted project yet,
        so this is always empty. No query is issued.
        """
        logger.debug("distribution_executives store not provisioned, returning empty list")
        return pd.DataFrame(columns=DISTRIBUTION_EXECUTIVE_COLUMNS)

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    def _fetch_base(self, table: str, columns: str) -> List[Row]:
        """Base rows newest first; [] on failure."""
        try:
            return self.gateway.select(table, columns, order='created_at', descending=True)
        except Exception as e:
            logger.error(f"Error fetching {table}: {e}")
            return []

    def _lookup(self, table: str, key: str, columns: str, ids: List[Any]) -> Dict[Any, Row]:
        """
        Batched join: {key value: row} for rows whose `key` is in `ids`.

        `ids` are sent LOOKUP_CHUNK_SIZE at a time to keep request URLs
        short. A key matching more than one row is dropped, as a
        single-row lookup would fail for it. Returns {} on failure.
        """
        if not ids:
            return {}
        rows: List[Row] = []
        try:
            for start in range(0, len(ids), LOOKUP_CHUNK_SIZE):
                chunk = ids[start:start + LOOKUP_CHUNK_SIZE]
                rows.extend(self.gateway.select(table, columns, in_={key: chunk}))
        except Exception as e:
            logger.warning(f"Join on {table}.{key} failed, using defaults: {e}")
            return {}

        by_key: Dict[Any, Row] = {}
        duplicates = set()
        for row in rows:
            value = row.get(key)
            if value in by_key:
                duplicates.add(value)
            by_key[value] = row

        for value in duplicates:
            logger.warning(f"Multiple {table} rows for {key}={value}, ignoring")
            del by_key[value]
        return by_key

    def _count(self, table: str, key: str, value: Any) -> int:
        """Exact row count of `table` where `key` = `value`; 0 on failure."""
        try:
            return self.gateway.count(table, eq={key: value})
        except Exception as e:
            logger.warning(f"Count on {table}.{key}={value} failed, using 0: {e}")
            return 0

    def _run_parallel(self, tasks: Dict[Any, Callable[[], Any]]) -> Dict[Any, Any]:
        """
        Run independent lookups concurrently; each result is keyed by task name.

        The gateway is resolved here, on the calling thread, since the
        session it belongs to is not visible from worker threads.
        """
        if self._gateway is None:
            self._gateway = get_gateway()
        workers = max(1, min(self.max_workers, len(tasks)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="reader") as executor:
            futures = {name: executor.submit(task) for name, task in tasks.items()}
            return {name: future.result() for name, future in futures.items()}


# =============================================================================
# MODULE HELPERS
# =============================================================================

def _distinct(values: Iterable[Any]) -> List[Any]:
    """Non-empty values, deduplicated, first-seen order."""
    return list(dict.fromkeys(v for v in values if v is not None and v != ''))


def _profile_fields(profile: Row = None) -> Dict[str, Any]:
    """Profile fields for an entity row, defaulted when the profile is missing."""
    profile = profile or {}
    fields = {}
    for column, default in PROFILE_DEFAULTS.items():
        value = profile.get(column)
        fields[column] = bool(value) if isinstance(default, bool) else (value or default)
    return fields

# sales_admin/management/filters.py
"""
Client-side filters and statistics for the signup list

Works on the DataFrame returned by AggregationReader.get_signups().
"""

import logging
from typing import Dict

import pandas as pd

from ..roles import ROLE_DISPLAY, parse_role

logger = logging.getLogger(__name__)


class SignupFilters:
    """
    Usage:
        filtered = SignupFilters.apply(signups_df, search='anna', role='tl', status='Pending')
        stats = SignupFilters.statistics(signups_df)
    """

    @staticmethod
    def apply(
        df: pd.DataFrame,
        search: str = None,
        role: str = None,
        status: str = None
    ) -> pd.DataFrame:
        """
        Args:
            df: Signup list
            search: Case-insensitive match on name, email or phone
            role: Role token, or 'All' / None for every role
            status: 'Approved', 'Pending', or 'All' / None
        """
        if df.empty:
            return df

        mask = pd.Series(True, index=df.index)

        if search:
            term = search.strip().lower()
            haystack = (
                df['full_name'].fillna('').astype(str) + ' '
                + df['email'].fillna('').astype(str) + ' '
                + df['phone'].fillna('').astype(str)
            ).str.lower()
            mask &= haystack.str.contains(term, regex=False)

        if role and role != 'All':
            mask &= df['role'] == role

        if status == 'Approved':
            mask &= df['is_approved'].astype(bool)
        elif status == 'Pending':
            mask &= ~df['is_approved'].astype(bool)

        return df[mask]

    @staticmethod
    def statistics(df: pd.DataFrame) -> Dict:
        """Totals and role distribution for the statistics panel."""
        if df.empty:
            return {
                'total': 0,
                'approved': 0,
                'pending': 0,
                'role_counts': pd.DataFrame(columns=['Role', 'Count']),
            }

        approved = int(df['is_approved'].astype(bool).sum())
        labels = df['role'].map(lambda r: ROLE_DISPLAY[parse_role(r)].label)
        role_counts = labels.value_counts().reset_index()
        role_counts.columns = ['Role', 'Count']

        return {
            'total': len(df),
            'approved': approved,
            'pending': len(df) - approved,
            'role_counts': role_counts,
        }

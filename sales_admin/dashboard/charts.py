# sales_admin/dashboard/charts.py
"""
Altair Chart Builders for the Overview Dashboard

- KPI summary cards (using st.metric)
- Sales by region bar chart
- Stock distribution donut chart
"""

import logging
from typing import Dict, List

import altair as alt
import pandas as pd
import streamlit as st

from .constants import (
    COLORS,
    PIE_COLORS,
    CHART_HEIGHT,
    PIE_INNER_RADIUS,
    PIE_OUTER_RADIUS,
)

logger = logging.getLogger(__name__)


class DashboardCharts:
    """
    Chart builders for the overview dashboard.

    All methods are static - can be called without instantiation.

    Usage:
        DashboardCharts.render_kpi_cards(overview, currency='TZS')
        chart = DashboardCharts.build_region_chart(region_sales)
        st.altair_chart(chart, use_container_width=True)
    """

    # =========================================================================
    # KPI CARDS (Using st.metric)
    # =========================================================================

    @staticmethod
    def render_kpi_cards(overview: Dict, currency: str = 'TZS'):
        """
        Layout:
        - Row 1: Total Sales, Total Revenue, Active DSRs, Stock In Hand
        - Row 2: Approved Sales, Pending Verification
        """
        with st.container(border=True):
            col1, col2, col3, col4 = st.columns(4)

            with col1:
                st.metric(label="🛒 Total Sales", value=f"{overview['total_sales']:,}")

            with col2:
                st.metric(
                    label="💵 Total Revenue",
                    value=f"{currency} {overview['total_revenue']:,.0f}",
                    help="Sum of sale prices. Missing or invalid prices count as 0."
                )

            with col3:
                st.metric(label="👥 Active DSRs", value=f"{overview['total_dsrs']:,}")

            with col4:
                st.metric(
                    label="📦 Stock In Hand",
                    value=f"{overview['stock_in_hand']:,}/{overview['total_stock']:,}",
                    help="Stock items whose status is not sold"
                )

        col1, col2 = st.columns(2)

        with col1:
            with st.container(border=True):
                st.metric(label="✅ Approved Sales", value=f"{overview['approved_sales']:,}")
                st.caption("Admin verified")

        with col2:
            with st.container(border=True):
                st.metric(label="⏳ Pending Verification", value=f"{overview['pending_sales']:,}")
                st.caption("Awaiting approval")

    # =========================================================================
    # CHARTS
    # =========================================================================

    @staticmethod
    def build_region_chart(region_sales: List[Dict]) -> alt.Chart:
        """Bar chart of sales count per region code."""
        df = pd.DataFrame(region_sales, columns=['name', 'sales'])

        return alt.Chart(df).mark_bar(
            color=COLORS['primary'],
            cornerRadiusTopLeft=4,
            cornerRadiusTopRight=4
        ).encode(
            x=alt.X('name:N', title=None, sort=None),
            y=alt.Y('sales:Q', title='Sales'),
            tooltip=[
                alt.Tooltip('name:N', title='Region'),
                alt.Tooltip('sales:Q', title='Sales', format=',')
            ]
        ).properties(height=CHART_HEIGHT)

    @staticmethod
    def build_stock_chart(stock_by_type: List[Dict]) -> alt.Chart:
        """Donut chart of stock items per type."""
        df = pd.DataFrame(stock_by_type, columns=['name', 'value'])

        return alt.Chart(df).mark_arc(
            innerRadius=PIE_INNER_RADIUS,
            outerRadius=PIE_OUTER_RADIUS
        ).encode(
            theta=alt.Theta('value:Q', stack=True),
            color=alt.Color(
                'name:N',
                title='Type',
                scale=alt.Scale(range=PIE_COLORS)
            ),
            tooltip=[
                alt.Tooltip('name:N', title='Type'),
                alt.Tooltip('value:Q', title='Items', format=',')
            ]
        ).properties(height=CHART_HEIGHT)

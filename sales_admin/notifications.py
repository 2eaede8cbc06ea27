# sales_admin/notifications.py
"""
Toast notifications for mutation results

Mutations run in button callbacks and are followed by a rerun, so a toast
raised directly would be lost. `flash` parks the result in session state
and `show_flash` raises it at the top of the next run.
"""

import logging
from typing import Optional

import streamlit as st

from .results import MutationResult, MutationStatus

logger = logging.getLogger(__name__)

FLASH_KEY = '_flash_result'

TOAST_ICONS = {
    MutationStatus.SUCCESS: '✅',
    MutationStatus.NOT_PERSISTED: '✅',
    MutationStatus.PARTIAL: '⚠️',
    MutationStatus.FAILED: '❌',
}


def flash(result: Optional[MutationResult]):
    """Queue a result for the next run. None (nothing saved) is ignored."""
    if result is None:
        return
    st.session_state[FLASH_KEY] = result


def show_flash():
    result = st.session_state.pop(FLASH_KEY, None)
    if result is None:
        return
    if not result.succeeded:
        logger.warning(f"Mutation {result.status.value}: {result.message}")
    st.toast(result.message, icon=TOAST_ICONS[result.status])

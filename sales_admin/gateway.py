# sales_admin/gateway.py
"""
Remote Data Gateway

Thin row-level interface over the hosted data store. Every screen reads
and writes through a `DataGateway`; two backends implement it:

- SupabaseGateway: supabase-py client against the project REST API
- SqlGateway: SQLAlchemy Core against a direct connection string

Contract shared by both backends:
- select / select_single / count / insert / update / delete
- equality filters (`eq`) and membership filters (`in_`)
- any store-side failure raises GatewayError
- an empty or absent payload means "no rows"

Version: 1.0.0
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, MutableMapping, Optional

from postgrest.exceptions import APIError
from sqlalchemy import MetaData, Table, delete, insert, select, update, func
from sqlalchemy.exc import NoSuchTableError, SQLAlchemyError

from .config import config

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

# Rows per REST response (the hosted max-rows setting)
PAGE_SIZE = 1000


class GatewayError(Exception):
    """Raised when the data store rejects or fails a call"""

    def __init__(self, message: str, table: str = None, operation: str = None):
        super().__init__(message)
        self.message = message
        self.table = table
        self.operation = operation

    def __str__(self):
        return self.message


def _parse_columns(columns: str) -> List[str]:
    """'id, full_name' -> ['id', 'full_name']; '*' -> []"""
    if not columns or columns.strip() == '*':
        return []
    return [c.strip() for c in columns.split(',') if c.strip()]


def _sql_message(error: SQLAlchemyError) -> str:
    """Driver message without the SQLAlchemy statement dump"""
    orig = getattr(error, 'orig', None)
    return str(orig) if orig is not None else str(error)


class DataGateway(ABC):
    """
    Base interface for table access.

    Usage:
        gateway = get_gateway()

        rows = gateway.select('profiles', 'id, full_name', order='created_at', descending=True)
        role = gateway.select_single('user_roles', 'role', eq={'user_id': user_id})
        n = gateway.count('dsrs')
        gateway.update('user_roles', {'role': 'tl'}, eq={'user_id': user_id})
    """

    @abstractmethod
    def select(
        self,
        table: str,
        columns: str = '*',
        eq: Dict[str, Any] = None,
        in_: Dict[str, Iterable] = None,
        order: str = None,
        descending: bool = False,
        limit: int = None
    ) -> List[Row]:
        raise NotImplementedError

    def select_single(
        self,
        table: str,
        columns: str = '*',
        eq: Dict[str, Any] = None
    ) -> Optional[Row]:
        """
        Fetch the single row matching `eq`.

        Returns None when no row or more than one row matches.
        """
        rows = self.select(table, columns, eq=eq, limit=2)
        if len(rows) != 1:
            if rows:
                logger.warning(f"Expected one row from {table} for {eq}, got several")
            return None
        return rows[0]

    @abstractmethod
    def count(self, table: str, eq: Dict[str, Any] = None) -> int:
        raise NotImplementedError

    @abstractmethod
    def insert(self, table: str, rows: List[Row]) -> List[Row]:
        raise NotImplementedError

    @abstractmethod
    def update(self, table: str, values: Row, eq: Dict[str, Any]) -> List[Row]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, table: str, eq: Dict[str, Any]) -> List[Row]:
        raise NotImplementedError

    @staticmethod
    def _require_filter(eq: Dict[str, Any], table: str, operation: str):
        if not eq:
            raise GatewayError(f"{operation} on {table} requires a filter", table, operation)


# =============================================================================
# SUPABASE (REST) BACKEND
# =============================================================================

class SupabaseGateway(DataGateway):
    """
    Gateway over a supabase-py client.

    Selects without a limit are read in pages of PAGE_SIZE rows.
    """

    def __init__(self, client):
        self.client = client

    def _execute(self, request, table: str, operation: str):
        try:
            return request.execute()
        except APIError as e:
            logger.error(f"❌ {operation} on {table} rejected: {e.message}")
            raise GatewayError(e.message or f"{operation} on {table} failed", table, operation) from e
        except Exception as e:
            logger.error(f"❌ {operation} on {table} failed: {e}")
            raise GatewayError(str(e) or f"{operation} on {table} failed", table, operation) from e

    @staticmethod
    def _apply_filters(request, eq: Dict[str, Any] = None, in_: Dict[str, Iterable] = None):
        for column, value in (eq or {}).items():
            request = request.eq(column, value)
        for column, values in (in_ or {}).items():
            request = request.in_(column, list(values))
        return request

    def select(self, table, columns='*', eq=None, in_=None, order=None, descending=False, limit=None):
        if in_ and any(not list(v) for v in in_.values()):
            return []

        def build():
            request = self._apply_filters(self.client.table(table).select(columns), eq, in_)
            if order:
                request = request.order(order, desc=descending)
            return request

        if limit:
            response = self._execute(build().limit(limit), table, 'select')
            return response.data or []

        # The REST API caps each response, so read unlimited selects page by page
        rows: List[Row] = []
        while True:
            start = len(rows)
            response = self._execute(build().range(start, start + PAGE_SIZE - 1), table, 'select')
            page = response.data or []
            rows.extend(page)
            if len(page) < PAGE_SIZE:
                return rows

    def count(self, table, eq=None):
        request = self._apply_filters(
            self.client.table(table).select('*', count='exact', head=True), eq
        )
        response = self._execute(request, table, 'count')
        return response.count or 0

    def insert(self, table, rows):
        response = self._execute(self.client.table(table).insert(rows), table, 'insert')
        return response.data or []

    def update(self, table, values, eq):
        self._require_filter(eq, table, 'update')
        request = self._apply_filters(self.client.table(table).update(values), eq)
        response = self._execute(request, table, 'update')
        return response.data or []

    def delete(self, table, eq):
        self._require_filter(eq, table, 'delete')
        request = self._apply_filters(self.client.table(table).delete(), eq)
        response = self._execute(request, table, 'delete')
        return response.data or []


# =============================================================================
# DIRECT SQL BACKEND
# =============================================================================

class SqlGateway(DataGateway):
    """
    Gateway over a SQLAlchemy engine.

    Tables are reflected on first use and cached.
    """

    def __init__(self, engine):
        self.engine = engine
        self._metadata = MetaData()
        self._tables: Dict[str, Table] = {}
        self._lock = threading.Lock()

    def _table(self, name: str) -> Table:
        if name not in self._tables:
            with self._lock:
                if name not in self._tables:
                    try:
                        self._tables[name] = Table(name, self._metadata, autoload_with=self.engine)
                    except NoSuchTableError as e:
                        raise GatewayError(f'relation "{name}" does not exist', name, 'reflect') from e
                    except SQLAlchemyError as e:
                        raise GatewayError(str(e), name, 'reflect') from e
        return self._tables[name]

    @staticmethod
    def _column(table: Table, name: str):
        try:
            return table.c[name]
        except KeyError:
            raise GatewayError(
                f'column {table.name}.{name} does not exist', table.name, 'select'
            ) from None

    def _where(self, stmt, table: Table, eq=None, in_=None):
        for column, value in (eq or {}).items():
            stmt = stmt.where(self._column(table, column) == value)
        for column, values in (in_ or {}).items():
            stmt = stmt.where(self._column(table, column).in_(list(values)))
        return stmt

    def _projection(self, table: Table, columns: str):
        names = _parse_columns(columns)
        if not names:
            return [table]
        return [self._column(table, name) for name in names]

    def select(self, table, columns='*', eq=None, in_=None, order=None, descending=False, limit=None):
        tbl = self._table(table)
        stmt = self._where(select(*self._projection(tbl, columns)), tbl, eq, in_)
        if order:
            column = self._column(tbl, order)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit:
            stmt = stmt.limit(limit)

        try:
            with self.engine.connect() as conn:
                return [dict(row._mapping) for row in conn.execute(stmt)]
        except SQLAlchemyError as e:
            logger.error(f"❌ select on {table} failed: {e}")
            raise GatewayError(_sql_message(e), table, 'select') from e

    def count(self, table, eq=None):
        tbl = self._table(table)
        stmt = self._where(select(func.count()).select_from(tbl), tbl, eq)
        try:
            with self.engine.connect() as conn:
                return int(conn.execute(stmt).scalar() or 0)
        except SQLAlchemyError as e:
            logger.error(f"❌ count on {table} failed: {e}")
            raise GatewayError(_sql_message(e), table, 'count') from e

    def insert(self, table, rows):
        if not rows:
            return []
        tbl = self._table(table)
        try:
            with self.engine.begin() as conn:
                conn.execute(insert(tbl), rows)
        except SQLAlchemyError as e:
            logger.error(f"❌ insert on {table} failed: {e}")
            raise GatewayError(_sql_message(e), table, 'insert') from e
        return [dict(row) for row in rows]

    def update(self, table, values, eq):
        self._require_filter(eq, table, 'update')
        tbl = self._table(table)
        try:
            with self.engine.begin() as conn:
                matched = [
                    dict(row._mapping)
                    for row in conn.execute(self._where(select(tbl), tbl, eq))
                ]
                if matched:
                    conn.execute(self._where(update(tbl), tbl, eq).values(**values))
        except SQLAlchemyError as e:
            logger.error(f"❌ update on {table} failed: {e}")
            raise GatewayError(_sql_message(e), table, 'update') from e
        return [{**row, **values} for row in matched]

    def delete(self, table, eq):
        self._require_filter(eq, table, 'delete')
        tbl = self._table(table)
        try:
            with self.engine.begin() as conn:
                matched = [
                    dict(row._mapping)
                    for row in conn.execute(self._where(select(tbl), tbl, eq))
                ]
                if matched:
                    conn.execute(self._where(delete(tbl), tbl, eq))
        except SQLAlchemyError as e:
            logger.error(f"❌ delete on {table} failed: {e}")
            raise GatewayError(_sql_message(e), table, 'delete') from e
        return matched


# =============================================================================
# SINGLETONS
# =============================================================================

_client = None
_gateway: Optional[DataGateway] = None
_installed = False
_singleton_lock = threading.Lock()

# Session state keys for the signed-in client of one browser session
SESSION_CLIENT_KEY = '_supabase_client'
SESSION_GATEWAY_KEY = '_supabase_gateway'


def new_supabase_client():
    """Create a fresh supabase-py client from the configured project"""
    from supabase import create_client

    supabase_config = config.get_supabase_config()
    return create_client(supabase_config['url'], supabase_config['key'])


def get_supabase_client():
    """
    Get the shared supabase-py client (singleton).

    Never signed in: sign-in happens on the per-session client from
    get_session_client(), so one user's token or logout cannot leak
    into another session.
    """
    global _client

    if _client is None:
        with _singleton_lock:
            if _client is None:
                _client = new_supabase_client()
                logger.info("🔌 Supabase client created")

    return _client


def _session_state(state: MutableMapping = None) -> Optional[MutableMapping]:
    """`state`, or st.session_state when running inside a Streamlit script"""
    if state is not None:
        return state

    from streamlit.runtime.scriptrunner import get_script_run_ctx

    if get_script_run_ctx() is None:
        return None

    import streamlit as st
    return st.session_state


def get_session_client(state: MutableMapping = None):
    """
    Get the auth client of the current session, creating it on first use.

    Each session signs in and out on its own client.
    """
    session = _session_state(state)
    if session is None:
        raise RuntimeError("No session to hold a Supabase client")

    client = session.get(SESSION_CLIENT_KEY)
    if client is None:
        client = new_supabase_client()
        session[SESSION_CLIENT_KEY] = client
        logger.info("🔌 Session Supabase client created")
    return client


def drop_session_client(state: MutableMapping = None):
    """Forget the session's client and the gateway built on it"""
    session = _session_state(state)
    if session is None:
        return
    for key in (SESSION_CLIENT_KEY, SESSION_GATEWAY_KEY):
        if key in session:
            del session[key]


def _shared_gateway() -> DataGateway:
    global _gateway

    if _gateway is None:
        backend = config.data_backend
        if backend == 'sql':
            from .db import get_db_engine
            gateway = SqlGateway(get_db_engine())
        else:
            gateway = SupabaseGateway(get_supabase_client())

        with _singleton_lock:
            if _gateway is None:
                _gateway = gateway
                logger.info(f"✅ Data gateway ready ({backend})")

    return _gateway


def get_gateway(state: MutableMapping = None) -> DataGateway:
    """
    Get the data gateway for the current session.

    On the supabase backend a session with its own client reads and
    writes through it, so requests carry that user's token. Otherwise
    the shared gateway is returned. Call from the script thread: worker
    threads have no session and always get the shared gateway.
    """
    if not _installed and config.data_backend != 'sql':
        session = _session_state(state)
        if session is not None and session.get(SESSION_CLIENT_KEY) is not None:
            gateway = session.get(SESSION_GATEWAY_KEY)
            if gateway is None:
                gateway = SupabaseGateway(session[SESSION_CLIENT_KEY])
                session[SESSION_GATEWAY_KEY] = gateway
            return gateway

    return _shared_gateway()


def set_gateway(gateway: Optional[DataGateway]):
    """Install a gateway for every session (local runs, tests). None resets."""
    global _gateway, _installed
    with _singleton_lock:
        _gateway = gateway
        _installed = gateway is not None


def check_gateway_connection(gateway: DataGateway = None):
    """
    Check that the data store answers a trivial read.

    Returns:
        Tuple of (is_connected: bool, error_message: str or None)
    """
    try:
        (gateway or get_gateway()).count('regions')
        return True, None
    except GatewayError as e:
        logger.error(f"❌ Data store check failed: {e}")
        return False, f"Data store error: {e.message}"
    except Exception as e:
        logger.error(f"❌ Data store unavailable: {e}")
        return False, "Cannot reach the data store. Please check your network connection."


__all__ = [
    'Row',
    'GatewayError',
    'DataGateway',
    'SupabaseGateway',
    'SqlGateway',
    'PAGE_SIZE',
    'SESSION_CLIENT_KEY',
    'new_supabase_client',
    'get_supabase_client',
    'get_session_client',
    'drop_session_client',
    'get_gateway',
    'set_gateway',
    'check_gateway_connection',
]

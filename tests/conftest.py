"""
Test configuration and fixtures.

A file-backed SQLite database stands in for the hosted store; the reader
runs lookups on worker threads, so an in-memory database won't do.
"""
import pytest
from sqlalchemy import create_engine, text

from sales_admin.cache import QueryCache
from sales_admin.gateway import DataGateway, GatewayError, SqlGateway

SCHEMA = [
    """
    CREATE TABLE regions (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        code TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE profiles (
        id TEXT PRIMARY KEY,
        full_name TEXT,
        email TEXT,
        phone TEXT,
        region_id TEXT,
        is_approved BOOLEAN NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE user_roles (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        role TEXT NOT NULL CHECK (role IN ('admin', 'manager', 'tl', 'de', 'dsr'))
    )
    """,
    """
    CREATE TABLE team_leaders (
        id TEXT PRIMARY KEY,
        user_id TEXT,
        monthly_target REAL,
        created_at TEXT NOT NULL
    )
    """,
    "CREATE TABLE teams (id TEXT PRIMARY KEY, tl_id TEXT)",
    "CREATE TABLE dsrs (id TEXT PRIMARY KEY, tl_id TEXT)",
    """
    CREATE TABLE sales (
        id TEXT PRIMARY KEY,
        tl_id TEXT,
        sale_type TEXT,
        payment_status TEXT,
        admin_approved BOOLEAN,
        sale_price REAL
    )
    """,
    "CREATE TABLE stock (id TEXT PRIMARY KEY, status TEXT, type TEXT)",
]

SEED = {
    'regions': [
        {'id': 'r-dar', 'name': 'Dar es Salaam', 'code': 'DAR'},
        {'id': 'r-aru', 'name': 'Arusha', 'code': 'ARU'},
        {'id': 'r-mwz', 'name': 'Mwanza', 'code': 'MWZ'},
    ],
    'profiles': [
        {'id': 'u-admin', 'full_name': 'Alice Admin', 'email': 'alice@example.com', 'phone': '0700000001',
         'region_id': 'r-dar', 'is_approved': True, 'created_at': '2024-01-01T08:00:00'},
        {'id': 'u-tl1', 'full_name': 'Tom Leader', 'email': 'tom@example.com', 'phone': '0700000002',
         'region_id': 'r-aru', 'is_approved': True, 'created_at': '2024-02-01T08:00:00'},
        {'id': 'u-tl2', 'full_name': 'Tina Leader', 'email': 'tina@example.com', 'phone': None,
         'region_id': None, 'is_approved': False, 'created_at': '2024-03-01T08:00:00'},
        {'id': 'u-dsr', 'full_name': 'Dan Rep', 'email': 'dan@example.com', 'phone': '0700000004',
         'region_id': 'r-mwz', 'is_approved': False, 'created_at': '2024-04-01T08:00:00'},
        {'id': 'u-norole', 'full_name': 'Nora None', 'email': 'nora@example.com', 'phone': '0700000005',
         'region_id': 'r-missing', 'is_approved': False, 'created_at': '2024-05-01T08:00:00'},
    ],
    'user_roles': [
        {'id': 'ur-1', 'user_id': 'u-admin', 'role': 'admin'},
        {'id': 'ur-2', 'user_id': 'u-tl1', 'role': 'tl'},
        {'id': 'ur-3', 'user_id': 'u-tl2', 'role': 'tl'},
        {'id': 'ur-4', 'user_id': 'u-dsr', 'role': 'dsr'},
    ],
    'team_leaders': [
        {'id': 'tl-1', 'user_id': 'u-tl1', 'monthly_target': 1000.0, 'created_at': '2024-02-02T08:00:00'},
        {'id': 'tl-2', 'user_id': 'u-tl2', 'monthly_target': None, 'created_at': '2024-03-02T08:00:00'},
        {'id': 'tl-3', 'user_id': 'u-ghost', 'monthly_target': 500.0, 'created_at': '2024-01-15T08:00:00'},
    ],
    'teams': [
        {'id': 't-1', 'tl_id': 'tl-1'},
        {'id': 't-2', 'tl_id': 'tl-1'},
        {'id': 't-3', 'tl_id': 'tl-2'},
    ],
    'dsrs': [
        {'id': 'd-1', 'tl_id': 'tl-1'},
        {'id': 'd-2', 'tl_id': 'tl-1'},
        {'id': 'd-3', 'tl_id': 'tl-2'},
    ],
    'sales': [
        {'id': 's-1', 'tl_id': 'tl-1', 'sale_type': 'cash', 'payment_status': 'paid',
         'admin_approved': True, 'sale_price': 100.0},
        {'id': 's-2', 'tl_id': 'tl-1', 'sale_type': 'credit', 'payment_status': 'pending',
         'admin_approved': False, 'sale_price': None},
        {'id': 's-3', 'tl_id': 'tl-2', 'sale_type': 'cash', 'payment_status': 'paid',
         'admin_approved': True, 'sale_price': 50.0},
        {'id': 's-4', 'tl_id': None, 'sale_type': 'cash', 'payment_status': 'paid',
         'admin_approved': None, 'sale_price': 25.0},
    ],
    'stock': [
        {'id': 'st-1', 'status': 'sold', 'type': 'phone'},
        {'id': 'st-2', 'status': 'in_stock', 'type': 'phone'},
        {'id': 'st-3', 'status': 'reserved', 'type': 'sim'},
        {'id': 'st-4', 'status': 'sold_out', 'type': 'sim'},
        {'id': 'st-5', 'status': None, 'type': 'router'},
    ],
}


class RecordingCache(QueryCache):
    """QueryCache that remembers which keys were invalidated"""

    def __init__(self):
        super().__init__()
        self.invalidated = []

    def invalidate(self, key):
        self.invalidated.append(key)
        return super().invalidate(key)


class FailingGateway(DataGateway):
    """Delegates to a real gateway, raising for chosen (table, operation) pairs"""

    def __init__(self, inner, failures):
        self.inner = inner
        self.failures = set(failures)

    def _check(self, table, operation):
        if (table, operation) in self.failures:
            raise GatewayError(f"{operation} on {table} unavailable", table, operation)

    def select(self, table, columns='*', eq=None, in_=None, order=None, descending=False, limit=None):
        self._check(table, 'select')
        return self.inner.select(table, columns, eq=eq, in_=in_, order=order,
                                 descending=descending, limit=limit)

    def count(self, table, eq=None):
        self._check(table, 'count')
        return self.inner.count(table, eq)

    def insert(self, table, rows):
        self._check(table, 'insert')
        return self.inner.insert(table, rows)

    def update(self, table, values, eq):
        self._check(table, 'update')
        return self.inner.update(table, values, eq)

    def delete(self, table, eq):
        self._check(table, 'delete')
        return self.inner.delete(table, eq)


class CappedGateway(FailingGateway):
    """
    Returns at most `max_rows` rows per select, like the hosted REST
    max-rows setting, and records the size of every IN list it is sent.
    """

    def __init__(self, inner, max_rows=1000):
        super().__init__(inner, ())
        self.max_rows = max_rows
        self.in_sizes = []

    def select(self, table, columns='*', eq=None, in_=None, order=None, descending=False, limit=None):
        for values in (in_ or {}).values():
            self.in_sizes.append(len(list(values)))
        rows = super().select(table, columns, eq=eq, in_=in_, order=order,
                              descending=descending, limit=limit)
        return rows[:self.max_rows]


@pytest.fixture
def engine(tmp_path):
    """SQLite engine with the admin schema and seed rows"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'admin.db'}",
        connect_args={"check_same_thread": False}
    )
    with engine.begin() as conn:
        for ddl in SCHEMA:
            conn.execute(text(ddl))
    yield engine
    engine.dispose()


@pytest.fixture
def gateway(engine):
    gateway = SqlGateway(engine)
    for table, rows in SEED.items():
        gateway.insert(table, rows)
    return gateway


@pytest.fixture
def cache():
    return RecordingCache()


@pytest.fixture
def state():
    """Stand-in for st.session_state"""
    return {}


@pytest.fixture
def failing_gateway(gateway):
    """Factory: failing_gateway(('profiles', 'delete'), ...)"""
    def make(*failures):
        return FailingGateway(gateway, failures)
    return make


@pytest.fixture
def capped_gateway(gateway):
    return CappedGateway(gateway)

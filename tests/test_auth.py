"""
Tests for sign-in against the hosted auth service (mocked client).
"""
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from sales_admin.auth import AuthManager
from sales_admin.config import config
from sales_admin.gateway import SESSION_CLIENT_KEY, SupabaseGateway, get_gateway, get_session_client


def make_auth_client(user_id='u-admin', email='alice@example.com', error=None):
    client = MagicMock()
    if error is not None:
        client.auth.sign_in_with_password.side_effect = error
    else:
        user = SimpleNamespace(id=user_id, email=email)
        client.auth.sign_in_with_password.return_value = SimpleNamespace(user=user)
    return client


def test_approved_user_signs_in(gateway):
    auth = AuthManager(gateway=gateway, auth_client=make_auth_client())

    ok, info = auth.authenticate('alice@example.com', 'secret')

    assert ok
    assert info['id'] == 'u-admin'
    assert info['role'] == 'admin'
    assert info['full_name'] == 'Alice Admin'


def test_missing_role_defaults_to_dsr(gateway):
    gateway.update('profiles', {'is_approved': True}, eq={'id': 'u-norole'})
    auth = AuthManager(gateway=gateway, auth_client=make_auth_client('u-norole', 'nora@example.com'))

    ok, info = auth.authenticate('nora@example.com', 'secret')

    assert ok
    assert info['role'] == 'dsr'


@pytest.mark.parametrize('user_id, message', [
    ('u-dsr', 'Account is pending approval.'),
    ('u-deleted', 'Account has been removed. Please contact an administrator.'),
])
def test_refused(gateway, user_id, message):
    auth = AuthManager(gateway=gateway, auth_client=make_auth_client(user_id))

    ok, info = auth.authenticate('x@example.com', 'secret')

    assert not ok
    assert info['error'] == message


def test_bad_credentials(gateway):
    auth = AuthManager(gateway=gateway, auth_client=make_auth_client(error=RuntimeError('Invalid login')))

    ok, info = auth.authenticate('alice@example.com', 'wrong')

    assert not ok
    assert info['error'] == 'Invalid email or password'


def test_store_failure(failing_gateway):
    auth = AuthManager(gateway=failing_gateway(('user_roles', 'select')), auth_client=make_auth_client())

    ok, info = auth.authenticate('alice@example.com', 'secret')

    assert not ok
    assert info['error'] == 'Authentication failed. Please try again.'


@pytest.fixture
def session_clients(monkeypatch):
    """Every session client created is a fresh mocked auth client, in creation order"""
    created = []

    def new_client():
        client = make_auth_client()
        created.append(client)
        return client

    monkeypatch.setattr('sales_admin.gateway.new_supabase_client', new_client)
    monkeypatch.setattr(config, '_data_backend', 'supabase')
    return created


def signed_in_session(gateway, state):
    auth = AuthManager(gateway=gateway, state=state)
    ok, info = auth.authenticate('alice@example.com', 'secret')
    assert ok
    auth.login(info)
    return auth


def test_sessions_sign_in_on_separate_clients(gateway, session_clients):
    state_a, state_b = {}, {}
    signed_in_session(gateway, state_a)
    signed_in_session(gateway, state_b)

    client_a, client_b = session_clients
    assert client_a is not client_b
    assert state_a[SESSION_CLIENT_KEY] is client_a
    assert state_b[SESSION_CLIENT_KEY] is client_b
    client_a.auth.sign_in_with_password.assert_called_once()
    client_b.auth.sign_in_with_password.assert_called_once()


def test_logout_leaves_other_session_signed_in(gateway, session_clients):
    state_a, state_b = {}, {}
    session_a = signed_in_session(gateway, state_a)
    session_b = signed_in_session(gateway, state_b)
    client_a, client_b = session_clients

    session_b.logout()

    client_b.auth.sign_out.assert_called_once_with()
    client_a.auth.sign_out.assert_not_called()
    assert state_a[SESSION_CLIENT_KEY] is client_a
    assert SESSION_CLIENT_KEY not in state_b
    assert session_a.check_session()
    assert not session_b.check_session()


def test_session_gateway_uses_session_client(session_clients):
    state = {}
    client = get_session_client(state)

    gateway = get_gateway(state)

    assert isinstance(gateway, SupabaseGateway)
    assert gateway.client is client
    assert get_gateway(state) is gateway

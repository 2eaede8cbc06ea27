"""
Tests for the Role & Approval Editor.
"""
import pytest

from sales_admin.cache import SIGNUPS_QUERY, TEAM_LEADERS_QUERY, DISTRIBUTION_EXECUTIVES_QUERY
from sales_admin.management import (
    AggregationReader,
    RoleApprovalEditor,
    TargetInputError,
    parse_target,
    TEAM_LEADER,
    DISTRIBUTION_EXECUTIVE,
    EDITING_USER_KEY,
    EDIT_ROLE_KEY,
    SELECTED_TL_KEY,
    TL_TARGET_KEY,
    SELECTED_DE_KEY,
    DE_TARGET_KEY,
)
from sales_admin.results import MutationStatus
from sales_admin.roles import Role


@pytest.fixture
def editor(gateway, cache, state):
    return RoleApprovalEditor(gateway=gateway, cache=cache, state=state)


class TestSetRole:

    def test_success(self, editor, gateway, cache, state):
        state[EDITING_USER_KEY] = 'u-dsr'
        state[EDIT_ROLE_KEY] = 'tl'

        result = editor.set_role('u-dsr', Role.TEAM_LEADER)

        assert result.status is MutationStatus.SUCCESS
        assert result.message == 'Role updated successfully'
        assert gateway.select_single('user_roles', 'role', eq={'user_id': 'u-dsr'}) == {'role': 'tl'}
        assert cache.invalidated == [SIGNUPS_QUERY]
        assert EDITING_USER_KEY not in state
        assert EDIT_ROLE_KEY not in state

    @pytest.mark.parametrize('role', ['admin', 'manager', 'tl', 'dsr'])
    def test_signup_list_shows_new_role(self, editor, gateway, role):
        assert editor.set_role('u-dsr', role).persisted

        signups = AggregationReader(gateway).get_signups()
        row = signups[signups['id'] == 'u-dsr'].iloc[0]

        assert row['role'] == role
        assert (signups['id'] == 'u-dsr').sum() == 1

    def test_accepts_raw_token(self, editor, gateway):
        assert editor.set_role('u-tl1', 'manager').persisted
        assert gateway.select_single('user_roles', 'role', eq={'user_id': 'u-tl1'}) == {'role': 'manager'}

    def test_rejected_token_leaves_state(self, editor, gateway, cache, state):
        state[EDITING_USER_KEY] = 'u-dsr'

        result = editor.set_role('u-dsr', 'superuser')

        assert result.status is MutationStatus.FAILED
        assert result.error
        assert gateway.select_single('user_roles', 'role', eq={'user_id': 'u-dsr'}) == {'role': 'dsr'}
        assert cache.invalidated == []
        assert state[EDITING_USER_KEY] == 'u-dsr'

    def test_no_role_row(self, editor, cache):
        result = editor.set_role('u-norole', Role.ADMIN)

        assert not result.succeeded
        assert result.message == 'No role assignment found for this user'
        assert cache.invalidated == []

    def test_store_failure_message_surfaced(self, failing_gateway, cache, state):
        editor = RoleApprovalEditor(failing_gateway(('user_roles', 'update')), cache, state)
        result = editor.set_role('u-dsr', Role.MANAGER)

        assert result.status is MutationStatus.FAILED
        assert result.message == 'update on user_roles unavailable'


class TestSetApproval:

    def test_approve(self, editor, gateway, cache):
        result = editor.set_approval('u-dsr', True)

        assert result.persisted
        assert result.message == 'User approved'
        assert gateway.select_single('profiles', 'is_approved', eq={'id': 'u-dsr'}) == {'is_approved': True}
        assert cache.invalidated == [SIGNUPS_QUERY, TEAM_LEADERS_QUERY]

    def test_revoke(self, editor, gateway):
        result = editor.set_approval('u-tl1', False)

        assert result.message == 'User set to pending'
        assert gateway.select_single('profiles', 'is_approved', eq={'id': 'u-tl1'}) == {'is_approved': False}

    def test_unknown_user(self, editor, cache):
        result = editor.set_approval('nobody', True)
        assert result.message == 'User not found'
        assert cache.invalidated == []


class TestSetTarget:

    def test_team_leader_target(self, editor, gateway, cache, state):
        state[SELECTED_TL_KEY] = 'tl-2'
        state[TL_TARGET_KEY] = '2500'

        result = editor.set_target(TEAM_LEADER, 'tl-2', 2500)

        assert result.status is MutationStatus.SUCCESS
        assert result.message == 'TL target updated'
        row = gateway.select_single('team_leaders', 'monthly_target', eq={'id': 'tl-2'})
        assert row == {'monthly_target': 2500.0}
        assert cache.invalidated == [TEAM_LEADERS_QUERY]
        assert SELECTED_TL_KEY not in state
        assert TL_TARGET_KEY not in state

    def test_team_leader_not_found(self, editor, cache, state):
        state[SELECTED_TL_KEY] = 'tl-x'

        result = editor.set_target(TEAM_LEADER, 'tl-x', 100)

        assert result.status is MutationStatus.FAILED
        assert result.message == 'Team leader not found'
        assert cache.invalidated == []
        assert state[SELECTED_TL_KEY] == 'tl-x'

    def test_team_leader_store_failure(self, failing_gateway, cache, state):
        state[SELECTED_TL_KEY] = 'tl-1'
        editor = RoleApprovalEditor(failing_gateway(('team_leaders', 'update')), cache, state)

        result = editor.set_target(TEAM_LEADER, 'tl-1', 100)

        assert result.status is MutationStatus.FAILED
        assert cache.invalidated == []
        assert state[SELECTED_TL_KEY] == 'tl-1'

    def test_distribution_executive_not_persisted(self, editor, cache, state):
        state[SELECTED_DE_KEY] = 'de-1'
        state[DE_TARGET_KEY] = '900'

        result = editor.set_target(DISTRIBUTION_EXECUTIVE, 'de-1', 900)

        assert result.status is MutationStatus.NOT_PERSISTED
        assert result.succeeded
        assert not result.persisted
        assert result.message == 'DE target updated'
        assert cache.invalidated == [DISTRIBUTION_EXECUTIVES_QUERY]
        assert SELECTED_DE_KEY not in state
        assert DE_TARGET_KEY not in state

    def test_distribution_executive_target_never_listed(self, editor, gateway):
        editor.set_target(DISTRIBUTION_EXECUTIVE, 'de-1', 900)

        des = AggregationReader(gateway).get_distribution_executives()

        assert des.empty
        assert 900 not in des['target'].tolist()

    def test_unknown_kind(self, editor):
        with pytest.raises(ValueError):
            editor.set_target('manager', 'x', 1)


class TestTargetInput:

    @pytest.mark.parametrize('text, expected', [
        ('1500', 1500.0),
        (' 12.5 ', 12.5),
        ('0', 0.0),
        (300, 300.0),
        ('', None),
        ('   ', None),
        (None, None),
    ])
    def test_parse_target(self, text, expected):
        assert parse_target(text) == expected

    def test_parse_target_rejects_text(self):
        with pytest.raises(TargetInputError):
            parse_target('lots')

    def test_blank_input_makes_no_call(self, editor, gateway, cache):
        assert editor.set_target_from_input(TEAM_LEADER, 'tl-1', '  ') is None
        assert gateway.select_single('team_leaders', 'monthly_target', eq={'id': 'tl-1'}) == {'monthly_target': 1000.0}
        assert cache.invalidated == []

    def test_bad_input_fails_without_call(self, editor, cache):
        result = editor.set_target_from_input(TEAM_LEADER, 'tl-1', '12k')
        assert result.status is MutationStatus.FAILED
        assert "'12k'" in result.message
        assert cache.invalidated == []

    def test_valid_input_saves(self, editor, gateway):
        result = editor.set_target_from_input(TEAM_LEADER, 'tl-1', '750')
        assert result.persisted
        assert gateway.select_single('team_leaders', 'monthly_target', eq={'id': 'tl-1'}) == {'monthly_target': 750.0}

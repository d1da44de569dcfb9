"""
Tests for the RuleBuilder base class.
"""

import pytest

from src.shared.abilities.builders import ROLE_HANDLERS, RuleBuilder
from src.shared.abilities.models import Action, Role, Rule, Session, Subject


class VolunteerOnlyBuilder(RuleBuilder):
    subject = Subject.ORGANISATION

    async def volunteer_rules(self, session):
        return self.allow(Action.READ)


class TestRuleBuilder:
    """Test role dispatch and the rule helpers."""

    def test_every_role_has_a_handler_name(self):
        assert set(ROLE_HANDLERS) == set(Role)

    def test_defines(self):
        builder = VolunteerOnlyBuilder()

        assert builder.defines(Role.VOLUNTEER)
        assert not builder.defines(Role.ADMIN)

    @pytest.mark.asyncio
    async def test_build_dispatches_to_role_method(self):
        rules = await VolunteerOnlyBuilder().build(Role.VOLUNTEER, Session.anonymous())

        assert rules == [Rule(Subject.ORGANISATION, Action.READ)]

    @pytest.mark.asyncio
    async def test_build_for_undefined_role_is_empty(self):
        assert await VolunteerOnlyBuilder().build(Role.ADMIN, Session.anonymous()) == []

    def test_helpers_stamp_the_builder_subject(self):
        builder = VolunteerOnlyBuilder()

        assert builder.allow(Action.LIST, Action.READ, conditions={"id": "org-0"}) == [
            Rule(Subject.ORGANISATION, Action.LIST, {"id": "org-0"}),
            Rule(Subject.ORGANISATION, Action.READ, {"id": "org-0"}),
        ]
        assert builder.deny(Action.DELETE) == [
            Rule(Subject.ORGANISATION, Action.DELETE, inverted=True)
        ]

    def test_allow_all_and_deny_all_cover_every_action(self):
        builder = VolunteerOnlyBuilder()

        assert [rule.action for rule in builder.allow_all()] == list(Action)
        assert all(rule.inverted for rule in builder.deny_all())
        assert all(rule.conditions is None for rule in builder.deny_all())

    def test_helpers_validate_condition_fields(self):
        with pytest.raises(ValueError):
            VolunteerOnlyBuilder().rule(Action.UPDATE, {"person": "p"})

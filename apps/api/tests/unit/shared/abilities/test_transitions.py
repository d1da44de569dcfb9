"""
Tests for the status transition guard.
"""

import pytest

from src.domains.interests.constants import InterestStatus
from src.shared.abilities.models import Role, Subject
from src.shared.abilities.transitions import (
    INTEREST_STATUS_TRANSITIONS,
    TRANSITION_TABLES,
    allowed_transition,
    guard_applies,
)


class TestInterestStatusTransitions:
    """Test the volunteer's interest status table."""

    @pytest.mark.parametrize(
        "current,requested",
        [
            ("invited", "committed"),
            ("committed", "interested"),
        ],
    )
    def test_allowed_volunteer_transitions(self, current, requested):
        assert allowed_transition(Subject.INTEREST, current, requested, Role.VOLUNTEER)

    @pytest.mark.parametrize(
        "current,requested",
        [
            ("interested", "committed"),
            ("interested", "invited"),
            ("invited", "interested"),
            ("committed", "completed"),
            ("declined", "interested"),
            ("invited", "invited"),
        ],
    )
    def test_rejected_volunteer_transitions(self, current, requested):
        """Test that anything outside the table is rejected, including no-op moves."""
        assert not allowed_transition(
            Subject.INTEREST, current, requested, Role.VOLUNTEER
        )

    def test_accepts_enum_members(self):
        assert allowed_transition(
            Subject.INTEREST,
            InterestStatus.INVITED,
            InterestStatus.COMMITTED,
            Role.VOLUNTEER,
        )
        assert not allowed_transition(
            Subject.INTEREST,
            InterestStatus.INTERESTED,
            InterestStatus.COMMITTED,
            Role.VOLUNTEER,
        )

    @pytest.mark.parametrize(
        "actor_role",
        [None, Role.OPPORTUNITY_PROVIDER, Role.ORG_ADMIN, Role.ADMIN],
    )
    def test_other_actors_bypass_the_guard(self, actor_role):
        assert allowed_transition(Subject.INTEREST, "interested", "committed", actor_role)
        assert allowed_transition(Subject.INTEREST, "declined", "completed", actor_role)


class TestTransitionTables:
    def test_guard_applies_only_to_listed_subject_and_role(self):
        assert guard_applies(Subject.INTEREST, Role.VOLUNTEER)
        assert not guard_applies(Subject.INTEREST, Role.ADMIN)
        assert not guard_applies(Subject.ORGANISATION, Role.VOLUNTEER)
        assert not guard_applies(Subject.ARCHIVED_INTEREST, Role.VOLUNTEER)

    def test_subjects_without_a_table_are_unrestricted(self):
        assert allowed_transition(
            Subject.ARCHIVED_INTEREST, "completed", "interested", Role.VOLUNTEER
        )

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            TRANSITION_TABLES[Subject.ORGANISATION] = INTEREST_STATUS_TRANSITIONS  # type: ignore[index]
        with pytest.raises(TypeError):
            INTEREST_STATUS_TRANSITIONS.transitions["interested"] = frozenset(  # type: ignore[index]
                {"committed"}
            )

    def test_interest_table_describes_status_field(self):
        assert INTEREST_STATUS_TRANSITIONS.field == "status"
        assert INTEREST_STATUS_TRANSITIONS.applies_to == Role.VOLUNTEER

"""
Status transition guard.

A narrower check than the ability rules: for one actor role it restricts
which status a record may move to from its current status. Tables are
static and shared by every request.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from src.domains.interests.constants import InterestStatus

from .models import Role, Subject


@dataclass(frozen=True)
class TransitionTable:
    subject: Subject
    field: str
    applies_to: Role
    transitions: Mapping[str, frozenset[str]]

    def allows(self, current: str, requested: str) -> bool:
        return requested in self.transitions.get(current, frozenset())


INTEREST_STATUS_TRANSITIONS = TransitionTable(
    subject=Subject.INTEREST,
    field="status",
    applies_to=Role.VOLUNTEER,
    transitions=MappingProxyType(
        {
            InterestStatus.INVITED.value: frozenset({InterestStatus.COMMITTED.value}),
            InterestStatus.COMMITTED.value: frozenset(
                {InterestStatus.INTERESTED.value}
            ),
        }
    ),
)

TRANSITION_TABLES: Mapping[Subject, TransitionTable] = MappingProxyType(
    {INTEREST_STATUS_TRANSITIONS.subject: INTEREST_STATUS_TRANSITIONS}
)


def guard_applies(subject: Subject, actor_role: Role | None) -> bool:
    table = TRANSITION_TABLES.get(subject)
    return table is not None and table.applies_to == actor_role


def allowed_transition(
    subject: Subject, current: str, requested: str, actor_role: Role | None
) -> bool:
    """
    Check a proposed status change for an actor role.

    Roles the subject's table does not restrict bypass the guard and are
    always allowed here; their UPDATE rules still apply.
    """
    if not guard_applies(subject, actor_role):
        return True
    return TRANSITION_TABLES[subject].allows(_value(current), _value(requested))


def _value(status: str) -> str:
    # Accept enum members as well as raw strings
    return getattr(status, "value", status)

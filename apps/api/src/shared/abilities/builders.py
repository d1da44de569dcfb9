from abc import ABC
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, Protocol

from .models import Action, Role, Rule, Session, Subject

RuleSet = list[Rule]

# Name of the coroutine method a builder defines for each role it supports
ROLE_HANDLERS: dict[Role, str] = {
    Role.ANONYMOUS: "anonymous_rules",
    Role.VOLUNTEER: "volunteer_rules",
    Role.OPPORTUNITY_PROVIDER: "opportunity_provider_rules",
    Role.ORG_ADMIN: "org_admin_rules",
    Role.ADMIN: "admin_rules",
}


class OpportunityLookup(Protocol):
    """Read-only ownership queries used to materialise rule conditions."""

    async def requested_by(self, person_id: str) -> list[str]:
        """IDs of opportunities whose requestor is ``person_id``."""
        ...

    async def offered_by(self, organisation_ids: Sequence[str]) -> list[str]:
        """IDs of opportunities offered by any of ``organisation_ids``."""
        ...


class RuleBuilder(ABC):
    """
    Produces the rule set of one subject for each role.

    Subclasses set ``subject`` and implement an async ``<role>_rules(session)``
    method (see ROLE_HANDLERS) for every role they grant or deny anything
    to. Roles without a method contribute no rules.
    """

    subject: Subject

    def defines(self, role: Role) -> bool:
        return self._handler(role) is not None

    async def build(self, role: Role, session: Session) -> RuleSet:
        handler = self._handler(role)
        if handler is None:
            return []
        return list(await handler(session))

    def _handler(self, role: Role) -> Callable[[Session], Awaitable[RuleSet]] | None:
        return getattr(self, ROLE_HANDLERS[role], None)

    def rule(
        self,
        action: Action,
        conditions: Mapping[str, Any] | None = None,
        inverted: bool = False,
    ) -> Rule:
        return Rule(self.subject, action, conditions, inverted)

    def allow(self, *actions: Action, conditions: Mapping[str, Any] | None = None) -> RuleSet:
        return [self.rule(action, conditions) for action in actions]

    def deny(self, *actions: Action) -> RuleSet:
        return [self.rule(action, inverted=True) for action in actions]

    def deny_all(self) -> RuleSet:
        return self.deny(*Action)

    def allow_all(self) -> RuleSet:
        return self.allow(*Action)

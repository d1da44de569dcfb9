from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    """
    Capability classes a session may hold.

    Values match the role strings stored on person records.
    """

    ANONYMOUS = "anon"
    VOLUNTEER = "volunteer"
    OPPORTUNITY_PROVIDER = "opportunityProvider"
    ORG_ADMIN = "orgAdmin"
    ADMIN = "admin"


# Rule sets are concatenated in this order; later roles win a `can` check.
ROLE_PRIORITY: tuple[Role, ...] = (
    Role.ANONYMOUS,
    Role.VOLUNTEER,
    Role.OPPORTUNITY_PROVIDER,
    Role.ORG_ADMIN,
    Role.ADMIN,
)


class Action(str, Enum):
    LIST = "list"
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class Subject(str, Enum):
    """Protected resource types."""

    INTEREST = "Interest"
    ARCHIVED_INTEREST = "ArchivedInterest"
    ORGANISATION = "Organisation"


SUBJECT_FIELDS: dict[Subject, frozenset[str]] = {
    Subject.INTEREST: frozenset(
        {"id", "person", "opportunity", "status", "termsAccepted", "dateAdded"}
    ),
    Subject.ARCHIVED_INTEREST: frozenset(
        {"id", "person", "opportunity", "status", "termsAccepted", "dateAdded"}
    ),
    Subject.ORGANISATION: frozenset({"id", "name", "slug", "category"}),
}

# Condition fields stored in nullable columns
NULLABLE_FIELDS: dict[Subject, frozenset[str]] = {
    Subject.INTEREST: frozenset({"person"}),
    Subject.ARCHIVED_INTEREST: frozenset({"person"}),
    Subject.ORGANISATION: frozenset({"slug"}),
}


@dataclass(frozen=True)
class In:
    """Set-membership condition value: ``field ∈ values``."""

    values: frozenset[Any]

    def __init__(self, values: Iterable[Any]) -> None:
        object.__setattr__(self, "values", frozenset(values))

    def __contains__(self, item: Any) -> bool:
        return item in self.values


@dataclass(frozen=True)
class Rule:
    """
    A grant (or, when inverted, a denial) of one action on one subject.

    Conditions map field names to a literal (equality) or an ``In`` value
    (membership); all of them must hold. ``None`` matches every instance.
    """

    subject: Subject
    action: Action
    conditions: Mapping[str, Any] | None = None
    inverted: bool = False

    def __post_init__(self) -> None:
        if self.conditions is None:
            return
        unknown = set(self.conditions) - SUBJECT_FIELDS[self.subject]
        if unknown:
            raise ValueError(
                f"Unknown field(s) for {self.subject.value}: {', '.join(sorted(unknown))}"
            )
        object.__setattr__(
            self, "conditions", MappingProxyType(dict(self.conditions))
        )

    def __hash__(self) -> int:
        conditions = (
            None if self.conditions is None else frozenset(self.conditions.items())
        )
        return hash((self.subject, self.action, conditions, self.inverted))


@dataclass(frozen=True)
class Ability:
    """Compiled, request-scoped rule list for one subject."""

    subject: Subject
    rules: tuple[Rule, ...] = field(default_factory=tuple)

    def rules_for(self, action: Action) -> tuple[Rule, ...]:
        return tuple(
            rule
            for rule in self.rules
            if rule.subject == self.subject and rule.action == action
        )


class Session(BaseModel):
    """Identity and role set of the requesting actor."""

    model_config = ConfigDict(frozen=True)

    identity: str | None = None
    roles: frozenset[Role] = frozenset({Role.ANONYMOUS})
    org_admin_for: tuple[str, ...] = ()

    @classmethod
    def anonymous(cls) -> "Session":
        return cls()

    def holds(self, role: Role) -> bool:
        return role in self.roles

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

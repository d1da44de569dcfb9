"""
Exceptions raised by the ability engine.

These are service failures, not permission decisions; the HTTP layer maps
them to AbilityUnavailableError.
"""

from .models import Role, Subject


class RuleBuildError(Exception):
    """A rule builder could not produce its rules (e.g. a lookup failed)."""

    def __init__(self, subject: Subject, role: Role, message: str = "") -> None:
        self.subject = subject
        self.role = role
        super().__init__(
            message or f"Failed to build {role.value} rules for {subject.value}"
        )

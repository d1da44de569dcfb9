import logging
from typing import Any

from src.shared.abilities.models import Role, Session

logger = logging.getLogger(__name__)

ROLE_VALUES = {role.value: role for role in Role}


def session_for_person(person: Any) -> Session:
    """
    Build a session from a stored person record.

    Role strings that are not known to the ability engine are ignored. A
    person without any known role holds the anonymous role only.
    """
    roles = set()
    for value in getattr(person, "role", None) or []:
        role = ROLE_VALUES.get(value)
        if role is None:
            logger.debug(f"Ignoring unknown role {value!r} for person {person.id}")
            continue
        roles.add(role)

    return Session(
        identity=str(person.id),
        roles=frozenset(roles or {Role.ANONYMOUS}),
        org_admin_for=tuple(str(org) for org in getattr(person, "orgAdminFor", None) or []),
    )

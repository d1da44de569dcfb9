import asyncio
import logging
from collections.abc import Mapping
from itertools import chain
from typing import Any

from .builders import RuleBuilder, RuleSet
from .exceptions import RuleBuildError
from .filters import (
    MATCH_NONE,
    Filter,
    all_of,
    any_of,
    field_value,
    from_conditions,
    negate,
)
from .models import ROLE_PRIORITY, Ability, Action, In, Role, Rule, Session

logger = logging.getLogger(__name__)


async def _build_role(builder: RuleBuilder, role: Role, session: Session) -> RuleSet:
    try:
        return await builder.build(role, session)
    except RuleBuildError:
        raise
    except Exception as e:
        raise RuleBuildError(builder.subject, role, f"{role.value} rules: {e}") from e


async def build_ability(session: Session, builder: RuleBuilder) -> Ability:
    """
    Compile the ability of a session for the builder's subject.

    Every role the session holds is built concurrently, then the rule sets
    are concatenated in ROLE_PRIORITY order. Any failure fails the whole
    compilation; no partial ability is returned.

    Args:
        session: Requesting session
        builder: Rule builder of the subject being accessed

    Returns:
        Ability holding the concatenated rules

    Raises:
        RuleBuildError: If any role's rules could not be built
    """
    roles = [
        role
        for role in ROLE_PRIORITY
        if session.holds(role) and builder.defines(role)
    ]
    tasks = [asyncio.ensure_future(_build_role(builder, role, session)) for role in roles]

    try:
        rule_sets = await asyncio.gather(*tasks)
    except RuleBuildError as e:
        for task in tasks:
            task.cancel()
        logger.error(
            f"Rule build failed for {e.subject.value} ({e.role.value}): {e}"
        )
        raise

    ability = Ability(builder.subject, tuple(chain.from_iterable(rule_sets)))
    logger.debug(
        f"Compiled {len(ability.rules)} {builder.subject.value} rules "
        f"for roles {[role.value for role in roles]}"
    )
    return ability


def conditions_match(conditions: Mapping[str, Any] | None, instance: Any) -> bool:
    """Check every condition of a rule against an instance's field values."""
    if conditions is None:
        return True
    for name, expected in conditions.items():
        actual = field_value(instance, name)
        if isinstance(expected, In):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


def relevant_rule(ability: Ability, action: Action, instance: Any) -> Rule | None:
    """The last rule for ``action`` whose conditions match ``instance``."""
    for rule in reversed(ability.rules_for(action)):
        if conditions_match(rule.conditions, instance):
            return rule
    return None


def can(ability: Ability, action: Action, instance: Any) -> bool:
    """
    Check whether the ability allows ``action`` on a concrete instance.

    The last matching rule wins; no matching rule means deny.
    """
    rule = relevant_rule(ability, action, instance)
    return rule is not None and not rule.inverted


def filter_for(ability: Ability, action: Action) -> Filter:
    """
    Compile the rules for ``action`` into a query filter.

    Rules are folded in list order starting from "match nothing": a grant
    ORs its conditions in, a denial ANDs the negation of its conditions.
    """
    result: Filter = MATCH_NONE
    for rule in ability.rules_for(action):
        condition = from_conditions(rule.conditions)
        if rule.inverted:
            result = all_of(result, negate(condition))
        else:
            result = any_of(result, condition)
    return result


def permits_any(ability: Ability, action: Action) -> bool:
    """
    Whether ``action`` is available to the session for at least some target.

    Conditions are not evaluated: a grant makes the action possible, an
    unconditional denial revokes everything granted before it, and a
    conditional denial leaves the outcome unchanged. False means the
    action is categorically unavailable.
    """
    possible = False
    for rule in ability.rules_for(action):
        if not rule.inverted:
            possible = True
        elif rule.conditions is None:
            possible = False
    return possible

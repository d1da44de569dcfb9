"""
Attribute-based ability engine.

Rule builders turn a session into per-role rule lists, the compiler
concatenates them in role priority order, and the evaluator answers
instance checks (``can``) or compiles query filters (``filter_for``).

Usage:
    from src.shared.abilities import Ability, Action, Subject, filter_for
    from src.shared.abilities.dependencies import require_ability

    @router.get("/interests")
    async def list_interests(
        ability: Ability = Depends(require_ability(Subject.INTEREST)),
    ):
        where = to_prisma_where(filter_for(ability, Action.LIST))
"""

from .builders import OpportunityLookup, RuleBuilder
from .exceptions import RuleBuildError
from .filters import Filter, merge_where, to_prisma_where
from .models import ROLE_PRIORITY, Ability, Action, In, Role, Rule, Session, Subject
from .services import build_ability, can, filter_for, permits_any
from .transitions import TRANSITION_TABLES, allowed_transition, guard_applies

__all__ = [
    "Ability",
    "Action",
    "Filter",
    "In",
    "OpportunityLookup",
    "ROLE_PRIORITY",
    "Role",
    "Rule",
    "RuleBuildError",
    "RuleBuilder",
    "Session",
    "Subject",
    "TRANSITION_TABLES",
    "allowed_transition",
    "build_ability",
    "can",
    "filter_for",
    "guard_applies",
    "merge_where",
    "permits_any",
    "to_prisma_where",
]

import logging
from typing import Awaitable, Callable

from fastapi import Depends

from src.core.database import Database, get_db
from src.domains.auth.dependencies import get_session
from src.domains.interests.abilities import (
    ArchivedInterestRuleBuilder,
    InterestRuleBuilder,
)
from src.domains.opportunities.lookups import PrismaOpportunityLookup
from src.domains.organisations.abilities import OrganisationRuleBuilder
from src.shared.exceptions import AbilityUnavailableError

from .builders import RuleBuilder
from .exceptions import RuleBuildError
from .models import Ability, Session, Subject
from .services import build_ability

logger = logging.getLogger(__name__)

RULE_BUILDERS: dict[Subject, Callable[[Database], RuleBuilder]] = {
    Subject.INTEREST: lambda db: InterestRuleBuilder(
        PrismaOpportunityLookup(db, "opportunity")
    ),
    Subject.ARCHIVED_INTEREST: lambda db: ArchivedInterestRuleBuilder(
        PrismaOpportunityLookup(db, "archivedopportunity")
    ),
    Subject.ORGANISATION: lambda db: OrganisationRuleBuilder(),
}


def get_rule_builder(subject: Subject, db: Database) -> RuleBuilder:
    return RULE_BUILDERS[subject](db)


def require_ability(subject: Subject) -> Callable[..., Awaitable[Ability]]:
    """
    Dependency factory compiling the request's ability for a subject.

    Args:
        subject: Resource type the endpoint works on

    Returns:
        Async dependency function returning a fresh Ability per request
    """

    async def compile_ability(
        session: Session = Depends(get_session),
        db: Database = Depends(get_db),
    ) -> Ability:
        """
        Build the session's rules for the subject.

        Raises:
            AbilityUnavailableError: If any rule builder failed
        """
        try:
            return await build_ability(session, get_rule_builder(subject, db))
        except RuleBuildError as e:
            raise AbilityUnavailableError() from e

    return compile_ability

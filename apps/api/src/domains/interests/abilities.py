from src.shared.abilities.builders import OpportunityLookup, RuleBuilder, RuleSet
from src.shared.abilities.models import Action, In, Session, Subject

from .constants import InterestStatus


class InterestRuleBuilder(RuleBuilder):
    """Rules for live interests."""

    subject = Subject.INTEREST

    def __init__(self, opportunities: OpportunityLookup):
        self.opportunities = opportunities

    async def anonymous_rules(self, session: Session) -> RuleSet:
        return self.deny_all()

    async def volunteer_rules(self, session: Session) -> RuleSet:
        if session.identity is None:
            return []
        mine = {"person": session.identity}
        return [
            *self.allow(Action.LIST, Action.READ, conditions=mine),
            # New interests start as "interested" and only for oneself
            self.rule(
                Action.CREATE,
                {"person": session.identity, "status": InterestStatus.INTERESTED.value},
            ),
            # Status changes are further restricted by the transition guard
            self.rule(Action.UPDATE),
            self.rule(Action.DELETE, mine),
        ]

    async def opportunity_provider_rules(self, session: Session) -> RuleSet:
        if session.identity is None:
            return []
        owned = await self.opportunities.requested_by(session.identity)
        return self._owned_opportunity_rules(owned)

    async def org_admin_rules(self, session: Session) -> RuleSet:
        owned = await self.opportunities.offered_by(session.org_admin_for)
        return self._owned_opportunity_rules(owned)

    async def admin_rules(self, session: Session) -> RuleSet:
        return self.allow_all()

    def _owned_opportunity_rules(self, opportunity_ids: list[str]) -> RuleSet:
        owned = {"opportunity": In(opportunity_ids)}
        return [
            *self.allow(Action.LIST, Action.READ, conditions=owned),
            self.rule(Action.CREATE, inverted=True),
            self.rule(Action.UPDATE, owned),
            self.rule(Action.DELETE, inverted=True),
        ]


class ArchivedInterestRuleBuilder(InterestRuleBuilder):
    """Rules for interests of archived opportunities; nobody creates or deletes them."""

    subject = Subject.ARCHIVED_INTEREST

    async def volunteer_rules(self, session: Session) -> RuleSet:
        if session.identity is None:
            return []
        return [
            *self.allow(Action.LIST, Action.READ, conditions={"person": session.identity}),
            *self.deny(Action.CREATE, Action.UPDATE, Action.DELETE),
        ]

    async def admin_rules(self, session: Session) -> RuleSet:
        return [
            *self.allow(Action.READ, Action.LIST, Action.UPDATE),
            *self.deny(Action.DELETE, Action.CREATE),
        ]

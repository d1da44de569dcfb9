from src.shared.abilities.builders import RuleBuilder, RuleSet
from src.shared.abilities.models import Action, In, Session, Subject


class OrganisationRuleBuilder(RuleBuilder):
    """
    Organisations are public to read. Org admins may edit the organisations
    they administer; only administrators create or delete them.
    """

    subject = Subject.ORGANISATION

    async def anonymous_rules(self, session: Session) -> RuleSet:
        return self._public_rules()

    async def volunteer_rules(self, session: Session) -> RuleSet:
        return self._public_rules()

    async def opportunity_provider_rules(self, session: Session) -> RuleSet:
        return self._public_rules()

    async def org_admin_rules(self, session: Session) -> RuleSet:
        return [
            *self.allow(Action.LIST, Action.READ),
            self.rule(Action.UPDATE, {"id": In(session.org_admin_for)}),
            *self.deny(Action.CREATE, Action.DELETE),
        ]

    async def admin_rules(self, session: Session) -> RuleSet:
        return self.allow_all()

    def _public_rules(self) -> RuleSet:
        return [
            *self.allow(Action.LIST, Action.READ),
            *self.deny(Action.CREATE, Action.UPDATE, Action.DELETE),
        ]

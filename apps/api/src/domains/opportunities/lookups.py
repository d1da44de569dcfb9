from collections.abc import Sequence
from typing import Literal

from src.core.database import Database

OpportunityModel = Literal["opportunity", "archivedopportunity"]


class PrismaOpportunityLookup:
    """
    Ownership lookups over live or archived opportunities.

    Satisfies the OpportunityLookup protocol used by rule builders.
    """

    def __init__(self, db: Database, model: OpportunityModel = "opportunity"):
        self.db = db
        self.model = model

    async def requested_by(self, person_id: str) -> list[str]:
        return await self._ids({"requestor": person_id})

    async def offered_by(self, organisation_ids: Sequence[str]) -> list[str]:
        if not organisation_ids:
            return []
        return await self._ids({"offerOrg": {"in": list(organisation_ids)}})

    async def _ids(self, where: dict) -> list[str]:
        actions = getattr(self.db, self.model)
        opportunities = await actions.find_many(where=where)
        return [str(opportunity.id) for opportunity in opportunities]

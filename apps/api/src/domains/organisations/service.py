import json
import logging
from typing import Any, Dict, List, Optional

from src.core.database import Database
from src.shared.abilities.filters import merge_where
from src.shared.abilities.models import (
    NULLABLE_FIELDS,
    Ability,
    Action,
    Role,
    Session,
    Subject,
)
from src.shared.abilities.services import can, filter_for, permits_any
from src.shared.exceptions import (
    InvalidDataError,
    PermissionDeniedError,
    ResourceNotFoundError,
)

from .models import (
    ORGANISATION_FIELDS,
    OrganisationCreate,
    OrganisationResponse,
    OrganisationUpdate,
)

logger = logging.getLogger(__name__)


class OrganisationService:
    def __init__(self, db: Database):
        self.db = db

    async def list_organisations(
        self,
        ability: Ability,
        query: Optional[str] = None,
        sort: Optional[str] = None,
        projection: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        List organisations visible to the session.

        Args:
            ability: Compiled ability of the requesting session
            query: JSON encoded where clause
            sort: Field name, or JSON object of field -> 1 / -1
            projection: Comma or space separated fields to return

        Returns:
            Organisation dictionaries, restricted to the projection if given

        Raises:
            InvalidDataError: If the query or sort is not valid JSON
            PermissionDeniedError: If listing is unavailable to the session
        """
        where = _parse_query(query)
        order = _parse_sort(sort)

        if not permits_any(ability, Action.LIST):
            raise PermissionDeniedError()

        organisations = await self.db.organisation.find_many(
            where=merge_where(
                where,
                filter_for(ability, Action.LIST),
                NULLABLE_FIELDS[Subject.ORGANISATION],
            ),
            order=order,
        )

        fields = _parse_projection(projection)
        return [
            OrganisationResponse.from_prisma(organisation).model_dump(include=fields)
            for organisation in organisations
        ]

    async def get_organisation(
        self, ability: Ability, organisation_id: str
    ) -> OrganisationResponse:
        organisation = await self._find_visible(ability, Action.READ, organisation_id)
        return OrganisationResponse.from_prisma(organisation)

    async def create_organisation(
        self, ability: Ability, request: OrganisationCreate
    ) -> OrganisationResponse:
        data = request.model_dump(exclude_none=True)
        if not can(ability, Action.CREATE, data):
            raise PermissionDeniedError("Must be admin to create an organisation")

        organisation = await self.db.organisation.create(data=data)
        logger.info(f"Created organisation {organisation.id}")
        return OrganisationResponse.from_prisma(organisation)

    async def update_organisation(
        self,
        session: Session,
        ability: Ability,
        organisation_id: str,
        request: OrganisationUpdate,
    ) -> OrganisationResponse:
        """
        Update an organisation's profile.

        Only administrators may change the category; for everyone else the
        field is dropped from the update.

        Raises:
            PermissionDeniedError: If the session may not update the organisation
            ResourceNotFoundError: If the organisation does not exist
        """
        organisation = await self._find_visible(ability, Action.UPDATE, organisation_id)
        if not can(ability, Action.UPDATE, organisation):
            raise PermissionDeniedError("Must be admin or org admin")

        data = request.model_dump(exclude_none=True)
        if not session.holds(Role.ADMIN):
            data.pop("category", None)

        updated = await self.db.organisation.update(
            where={"id": organisation_id}, data=data
        )
        logger.info(f"Updated organisation {organisation_id}: {sorted(data)}")
        return OrganisationResponse.from_prisma(updated)

    async def delete_organisation(self, ability: Ability, organisation_id: str) -> None:
        if not permits_any(ability, Action.DELETE):
            raise PermissionDeniedError("Must be admin to delete an organisation")

        deleted = await self.db.organisation.delete_many(
            where=merge_where(
                {"id": organisation_id},
                filter_for(ability, Action.DELETE),
                NULLABLE_FIELDS[Subject.ORGANISATION],
            )
        )
        if deleted == 0:
            raise ResourceNotFoundError()
        logger.info(f"Deleted organisation {organisation_id}")

    async def _find_visible(
        self, ability: Ability, action: Action, organisation_id: str
    ) -> Any:
        if not permits_any(ability, action):
            raise PermissionDeniedError()

        # Existence is public; visibility is decided by READ rules
        organisation = await self.db.organisation.find_first(
            where=merge_where(
                {"id": organisation_id},
                filter_for(ability, Action.READ),
                NULLABLE_FIELDS[Subject.ORGANISATION],
            )
        )
        if organisation is None:
            raise ResourceNotFoundError()
        return organisation


def _parse_query(query: Optional[str]) -> Dict[str, Any]:
    if not query:
        return {}
    try:
        where = json.loads(query)
    except json.JSONDecodeError as e:
        raise InvalidDataError(f"Invalid query: {e}")
    if not isinstance(where, dict):
        raise InvalidDataError("Invalid query: expected a JSON object")
    return where


def _parse_sort(sort: Optional[str]) -> Dict[str, str]:
    if not sort:
        return {"name": "asc"}
    if not sort.lstrip().startswith("{"):
        name = sort.strip()
        if name.startswith("-"):
            return {name[1:]: "desc"}
        return {name: "asc"}
    try:
        spec = json.loads(sort)
    except json.JSONDecodeError as e:
        raise InvalidDataError(f"Invalid sort: {e}")
    if not isinstance(spec, dict) or len(spec) != 1:
        raise InvalidDataError("Invalid sort: expected a single field")
    ((name, direction),) = spec.items()
    return {name: "desc" if direction in (-1, "-1", "desc") else "asc"}


def _parse_projection(projection: Optional[str]) -> Optional[set[str]]:
    if not projection:
        return None
    fields = {
        name for name in projection.replace(",", " ").split() if name in ORGANISATION_FIELDS
    }
    fields.add("id")
    return fields

import logging
from typing import Any, Dict, List, Optional

from src.core.database import Database
from src.shared.abilities.filters import field_value, merge_where
from src.shared.abilities.models import (
    NULLABLE_FIELDS,
    SUBJECT_FIELDS,
    Ability,
    Action,
    Role,
    Session,
    Subject,
)
from src.shared.abilities.services import can, filter_for, permits_any
from src.shared.abilities.transitions import allowed_transition
from src.shared.events import EventBus
from src.shared.exceptions import (
    InvalidTransitionError,
    InvalidUpdateError,
    PermissionDeniedError,
    ResourceNotFoundError,
)

from .constants import (
    TOPIC_INTEREST_DELETE,
    TOPIC_INTEREST_MESSAGE,
    TOPIC_INTEREST_UPDATE,
    InterestUpdateType,
)
from .models import (
    InterestCreateRequest,
    InterestDeleteResponse,
    InterestDetailResponse,
    InterestMessage,
    InterestResponse,
    InterestUpdateRequest,
)

logger = logging.getLogger(__name__)

INCLUDE_MESSAGES = {"messages": True}
INCLUDE_DETAIL = {"messages": True, "personDetail": True, "opportunityDetail": True}


class InterestService:
    """Interest reads and writes, constrained by the caller's ability."""

    model = "interest"
    subject = Subject.INTEREST

    def __init__(self, db: Database, events: EventBus):
        self.db = db
        self.events = events

    @property
    def actions(self) -> Any:
        return getattr(self.db, self.model)

    def _ensure_permitted(self, ability: Ability, action: Action) -> None:
        if not permits_any(ability, action):
            logger.info(f"Denied {action.value} on {self.subject.value}")
            raise PermissionDeniedError()

    async def list_interests(
        self,
        ability: Ability,
        opportunity_id: Optional[str] = None,
        person_id: Optional[str] = None,
    ) -> List[InterestResponse]:
        """
        List the interests visible to the session.

        Args:
            ability: Compiled ability of the requesting session
            opportunity_id: Only interests in this opportunity
            person_id: Only interests of this person

        Returns:
            Visible interests ordered by date added; empty when none are visible.
            The volunteer is populated when filtering by opportunity and the
            opportunity when filtering by person.

        Raises:
            PermissionDeniedError: If listing is unavailable to the session
        """
        self._ensure_permitted(ability, Action.LIST)

        query: Dict[str, Any] = {}
        include: Dict[str, bool] = dict(INCLUDE_MESSAGES)
        if opportunity_id:
            query["opportunity"] = opportunity_id
            include["personDetail"] = True
        if person_id:
            query["person"] = person_id
            include["opportunityDetail"] = True

        interests = await self.actions.find_many(
            where=merge_where(
                query, filter_for(ability, Action.LIST), NULLABLE_FIELDS[self.subject]
            ),
            include=include,
            order={"dateAdded": "asc"},
        )
        return [
            InterestResponse.from_prisma(interest)
            for interest in interests
            if interest.person is not None
        ]

    async def get_interest(self, ability: Ability, interest_id: str) -> InterestResponse:
        """
        Read one interest.

        Raises:
            PermissionDeniedError: If reading is unavailable to the session
            ResourceNotFoundError: If the interest is missing or not visible
        """
        interest = await self._find_visible(ability, interest_id)
        return InterestResponse.from_prisma(interest)

    async def create_interest(
        self, session: Session, ability: Ability, request: InterestCreateRequest
    ) -> InterestDetailResponse:
        """
        Register interest in an opportunity.

        The person defaults to the session's identity.

        Raises:
            PermissionDeniedError: If the session may not create this interest
        """
        data: Dict[str, Any] = {
            "person": request.person or session.identity,
            "opportunity": request.opportunity,
            "status": request.status.value,
            "termsAccepted": request.termsAccepted,
        }

        if not can(ability, Action.CREATE, data):
            logger.info(f"Denied create on {self.subject.value} for {session.identity}")
            raise PermissionDeniedError()

        if request.messages:
            data["messages"] = {"create": _message_rows(request.messages)}

        created = await self.actions.create(data=data, include=INCLUDE_DETAIL)
        logger.info(f"Created interest {created.id} for person {data['person']}")

        detail = InterestDetailResponse.from_prisma(created, type=InterestUpdateType.ACCEPT)
        await self.events.publish(TOPIC_INTEREST_UPDATE, detail)
        return detail

    async def update_interest(
        self,
        session: Session,
        ability: Ability,
        interest_id: str,
        request: InterestUpdateRequest,
    ) -> InterestDetailResponse:
        """
        Change the status of an interest and/or append messages.

        A volunteer changing the status of their own interest is limited to
        the transitions of the interest status table.

        Raises:
            PermissionDeniedError: If reading is unavailable to the session
            ResourceNotFoundError: If the interest is missing, not visible or
                deleted before the write
            InvalidTransitionError: If the status change is not allowed
            InvalidUpdateError: If the updated interest fails the UPDATE rules
        """
        existing = await self._find_visible(ability, interest_id)

        if request.status is not None:
            actor_role = (
                Role.VOLUNTEER
                if session.holds(Role.VOLUNTEER) and existing.person == session.identity
                else None
            )
            if not allowed_transition(
                self.subject, existing.status, request.status, actor_role
            ):
                logger.info(
                    f"Rejected transition {existing.status} -> {request.status.value} "
                    f"on interest {interest_id}"
                )
                raise InvalidTransitionError()

        candidate = {
            name: field_value(existing, name) for name in SUBJECT_FIELDS[self.subject]
        }
        if request.status is not None:
            candidate["status"] = request.status.value

        if not can(ability, Action.UPDATE, candidate):
            raise InvalidUpdateError()

        data: Dict[str, Any] = {}
        if request.status is not None:
            data["status"] = request.status.value
        if request.messages:
            data["messages"] = {"create": _message_rows(request.messages)}

        if data:
            updated = await self.actions.update(
                where={"id": interest_id}, data=data, include=INCLUDE_DETAIL
            )
        else:
            updated = await self.actions.find_unique(
                where={"id": interest_id}, include=INCLUDE_DETAIL
            )

        # Deleted by a concurrent request since it was read
        if updated is None:
            logger.info(f"Interest {interest_id} disappeared during update")
            raise ResourceNotFoundError()
        if data:
            logger.info(f"Updated interest {interest_id}: {sorted(data)}")

        detail = InterestDetailResponse.from_prisma(updated, type=request.type)

        topic = (
            TOPIC_INTEREST_MESSAGE
            if request.type == InterestUpdateType.MESSAGE
            else TOPIC_INTEREST_UPDATE
        )
        await self.events.publish(topic, detail)
        return detail

    async def delete_interest(
        self, ability: Ability, interest_id: str
    ) -> InterestDeleteResponse:
        """
        Delete one interest.

        Raises:
            PermissionDeniedError: If deleting is unavailable to the session
            ResourceNotFoundError: If nothing visible was deleted
        """
        self._ensure_permitted(ability, Action.DELETE)

        deleted = await self.actions.delete_many(
            where=merge_where(
                {"id": interest_id},
                filter_for(ability, Action.DELETE),
                NULLABLE_FIELDS[self.subject],
            )
        )
        if deleted == 0:
            raise ResourceNotFoundError()

        logger.info(f"Deleted interest {interest_id}")
        response = InterestDeleteResponse(id=interest_id)
        await self.events.publish(TOPIC_INTEREST_DELETE, response)
        return response

    async def _find_visible(self, ability: Ability, interest_id: str) -> Any:
        self._ensure_permitted(ability, Action.READ)

        interest = await self.actions.find_first(
            where=merge_where(
                {"id": interest_id},
                filter_for(ability, Action.READ),
                NULLABLE_FIELDS[self.subject],
            ),
            include=INCLUDE_MESSAGES,
        )
        if interest is None:
            raise ResourceNotFoundError()
        return interest


class ArchivedInterestService(InterestService):
    """Read access to interests of archived opportunities."""

    model = "archivedinterest"
    subject = Subject.ARCHIVED_INTEREST


def _message_rows(messages: List[InterestMessage]) -> List[Dict[str, Any]]:
    return [message.model_dump(exclude_none=True) for message in messages]

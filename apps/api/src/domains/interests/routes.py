# apps/api/src/domains/interests/routes.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.core.database import Database, get_db
from src.domains.auth.dependencies import get_session
from src.domains.interests.models import (
    InterestCreateRequest,
    InterestDeleteResponse,
    InterestDetailResponse,
    InterestResponse,
    InterestUpdateRequest,
)
from src.domains.interests.service import ArchivedInterestService, InterestService
from src.shared.abilities.dependencies import require_ability
from src.shared.abilities.models import Ability, Session, Subject
from src.shared.events import EventBus, get_event_bus

router = APIRouter(prefix="/interests", tags=["Interests"])
archive_router = APIRouter(prefix="/interestArchives", tags=["Interests"])


@router.get(
    "",
    response_model=List[InterestResponse],
    operation_id="listInterests",
)
async def list_interests(
    op: Optional[str] = Query(None, description="Opportunity ID"),
    me: Optional[str] = Query(None, description="Person ID"),
    ability: Ability = Depends(require_ability(Subject.INTEREST)),
    db: Database = Depends(get_db),
    events: EventBus = Depends(get_event_bus),
) -> List[InterestResponse]:
    """
    List interests visible to the caller.

    Filter by opportunity (`op`) and/or person (`me`). Interests outside the
    caller's LIST rules are never fetched.
    """
    service = InterestService(db, events)
    return await service.list_interests(ability, op, me)


@router.get(
    "/{interest_id}",
    response_model=InterestResponse,
    operation_id="getInterest",
)
async def get_interest(
    interest_id: str,
    ability: Ability = Depends(require_ability(Subject.INTEREST)),
    db: Database = Depends(get_db),
    events: EventBus = Depends(get_event_bus),
) -> InterestResponse:
    """Get one interest; 404 when it is not visible to the caller."""
    service = InterestService(db, events)
    return await service.get_interest(ability, interest_id)


@router.post(
    "",
    response_model=InterestDetailResponse,
    operation_id="createInterest",
)
async def create_interest(
    request: InterestCreateRequest,
    session: Session = Depends(get_session),
    ability: Ability = Depends(require_ability(Subject.INTEREST)),
    db: Database = Depends(get_db),
    events: EventBus = Depends(get_event_bus),
) -> InterestDetailResponse:
    """
    Register interest in an opportunity.

    The person defaults to the caller.
    """
    service = InterestService(db, events)
    return await service.create_interest(session, ability, request)


@router.put(
    "/{interest_id}",
    response_model=InterestDetailResponse,
    operation_id="updateInterest",
)
async def update_interest(
    interest_id: str,
    request: InterestUpdateRequest,
    session: Session = Depends(get_session),
    ability: Ability = Depends(require_ability(Subject.INTEREST)),
    db: Database = Depends(get_db),
    events: EventBus = Depends(get_event_bus),
) -> InterestDetailResponse:
    """
    Change an interest's status and/or append messages.

    Volunteers moving their own interest are limited to the allowed status
    transitions.
    """
    service = InterestService(db, events)
    return await service.update_interest(session, ability, interest_id, request)


@router.delete(
    "/{interest_id}",
    response_model=InterestDeleteResponse,
    operation_id="deleteInterest",
)
async def delete_interest(
    interest_id: str,
    ability: Ability = Depends(require_ability(Subject.INTEREST)),
    db: Database = Depends(get_db),
    events: EventBus = Depends(get_event_bus),
) -> InterestDeleteResponse:
    """Delete an interest; 404 when it is not visible to the caller."""
    service = InterestService(db, events)
    return await service.delete_interest(ability, interest_id)


@archive_router.get(
    "",
    response_model=List[InterestResponse],
    operation_id="listArchivedInterests",
)
async def list_archived_interests(
    op: Optional[str] = Query(None, description="Archived opportunity ID"),
    me: Optional[str] = Query(None, description="Person ID"),
    ability: Ability = Depends(require_ability(Subject.ARCHIVED_INTEREST)),
    db: Database = Depends(get_db),
    events: EventBus = Depends(get_event_bus),
) -> List[InterestResponse]:
    """List interests of archived opportunities visible to the caller."""
    service = ArchivedInterestService(db, events)
    return await service.list_interests(ability, op, me)


@archive_router.get(
    "/{interest_id}",
    response_model=InterestResponse,
    operation_id="getArchivedInterest",
)
async def get_archived_interest(
    interest_id: str,
    ability: Ability = Depends(require_ability(Subject.ARCHIVED_INTEREST)),
    db: Database = Depends(get_db),
    events: EventBus = Depends(get_event_bus),
) -> InterestResponse:
    """Get one archived interest; 404 when it is not visible to the caller."""
    service = ArchivedInterestService(db, events)
    return await service.get_interest(ability, interest_id)

# apps/api/src/domains/organisations/routes.py
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from src.core.database import Database, get_db
from src.domains.auth.dependencies import get_session
from src.domains.organisations.models import (
    OrganisationCreate,
    OrganisationResponse,
    OrganisationUpdate,
)
from src.domains.organisations.service import OrganisationService
from src.shared.abilities.dependencies import require_ability
from src.shared.abilities.models import Ability, Session, Subject

router = APIRouter(prefix="/organisations", tags=["Organisations"])


@router.get(
    "",
    response_model=List[Dict[str, Any]],
    operation_id="listOrganisations",
)
async def list_organisations(
    q: Optional[str] = Query(None, description="JSON where clause"),
    s: Optional[str] = Query(None, description="Sort field or JSON sort"),
    p: Optional[str] = Query(None, description="Fields to return"),
    ability: Ability = Depends(require_ability(Subject.ORGANISATION)),
    db: Database = Depends(get_db),
) -> List[Dict[str, Any]]:
    """Get all organisations matching the query."""
    service = OrganisationService(db)
    return await service.list_organisations(ability, q, s, p)


@router.get(
    "/{organisation_id}",
    response_model=OrganisationResponse,
    operation_id="getOrganisation",
)
async def get_organisation(
    organisation_id: str,
    ability: Ability = Depends(require_ability(Subject.ORGANISATION)),
    db: Database = Depends(get_db),
) -> OrganisationResponse:
    service = OrganisationService(db)
    return await service.get_organisation(ability, organisation_id)


@router.post(
    "",
    response_model=OrganisationResponse,
    operation_id="createOrganisation",
)
async def create_organisation(
    request: OrganisationCreate,
    ability: Ability = Depends(require_ability(Subject.ORGANISATION)),
    db: Database = Depends(get_db),
) -> OrganisationResponse:
    """Create an organisation. Administrators only."""
    service = OrganisationService(db)
    return await service.create_organisation(ability, request)


@router.put(
    "/{organisation_id}",
    response_model=OrganisationResponse,
    operation_id="updateOrganisation",
)
async def update_organisation(
    organisation_id: str,
    request: OrganisationUpdate,
    session: Session = Depends(get_session),
    ability: Ability = Depends(require_ability(Subject.ORGANISATION)),
    db: Database = Depends(get_db),
) -> OrganisationResponse:
    """
    Update an organisation.

    The caller must be an administrator or an org admin of the organisation.
    Only administrators may change the category.
    """
    service = OrganisationService(db)
    return await service.update_organisation(session, ability, organisation_id, request)


@router.delete(
    "/{organisation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    operation_id="deleteOrganisation",
)
async def delete_organisation(
    organisation_id: str,
    ability: Ability = Depends(require_ability(Subject.ORGANISATION)),
    db: Database = Depends(get_db),
) -> Response:
    """Delete an organisation. Administrators only."""
    service = OrganisationService(db)
    await service.delete_organisation(ability, organisation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

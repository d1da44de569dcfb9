# apps/api/src/domains/organisations/models.py
from typing import Any, List, Optional

from pydantic import BaseModel, Field

ORGANISATION_FIELDS = (
    "id",
    "name",
    "slug",
    "category",
    "imgUrl",
    "website",
    "contactEmail",
    "info",
)


class OrganisationCreate(BaseModel):
    name: str
    slug: Optional[str] = None
    category: List[str] = Field(default_factory=list)
    imgUrl: Optional[str] = None
    website: Optional[str] = None
    contactEmail: Optional[str] = None
    info: Optional[str] = None


class OrganisationUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    category: Optional[List[str]] = None
    imgUrl: Optional[str] = None
    website: Optional[str] = None
    contactEmail: Optional[str] = None
    info: Optional[str] = None


class OrganisationResponse(BaseModel):
    id: str
    name: str
    slug: Optional[str] = None
    category: List[str] = []
    imgUrl: Optional[str] = None
    website: Optional[str] = None
    contactEmail: Optional[str] = None
    info: Optional[str] = None

    @classmethod
    def from_prisma(cls, organisation: Any) -> "OrganisationResponse":
        return cls(
            id=str(organisation.id),
            name=organisation.name,
            slug=getattr(organisation, "slug", None),
            category=list(getattr(organisation, "category", None) or []),
            imgUrl=getattr(organisation, "imgUrl", None),
            website=getattr(organisation, "website", None),
            contactEmail=getattr(organisation, "contactEmail", None),
            info=getattr(organisation, "info", None),
        )

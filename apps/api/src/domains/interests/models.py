from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from .constants import InterestStatus, InterestUpdateType


class InterestMessage(BaseModel):
    """A message attached to an interest."""

    body: str
    author: Optional[str] = None
    date: Optional[datetime] = None

    @classmethod
    def from_prisma(cls, message: Any) -> "InterestMessage":
        return cls(
            body=message.body,
            author=getattr(message, "author", None),
            date=getattr(message, "date", None),
        )


class PersonSummary(BaseModel):
    """Public card of the volunteer behind an interest."""

    id: str
    name: str
    nickname: Optional[str] = None
    imgUrl: Optional[str] = None

    @classmethod
    def from_prisma(cls, person: Any) -> "PersonSummary":
        return cls(
            id=str(person.id),
            name=person.name,
            nickname=getattr(person, "nickname", None),
            imgUrl=getattr(person, "imgUrl", None),
        )


class OpportunitySummary(BaseModel):
    id: str
    name: str
    requestor: Optional[str] = None
    offerOrg: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def from_prisma(cls, opportunity: Any) -> "OpportunitySummary":
        return cls(
            id=str(opportunity.id),
            name=opportunity.name,
            requestor=getattr(opportunity, "requestor", None),
            offerOrg=getattr(opportunity, "offerOrg", None),
            status=getattr(opportunity, "status", None),
        )


class InterestResponse(BaseModel):
    """
    Response model for interest data.

    ``person`` and ``opportunity`` are ids unless the related record was
    loaded, in which case they carry its summary instead.
    """

    id: str
    person: Union[PersonSummary, str, None] = None
    opportunity: Union[OpportunitySummary, str]
    status: InterestStatus
    termsAccepted: bool = False
    dateAdded: Optional[datetime] = None
    messages: List[InterestMessage] = []

    @classmethod
    def from_prisma(cls, interest: Any, **extra: Any) -> "InterestResponse":
        person = getattr(interest, "personDetail", None)
        opportunity = getattr(interest, "opportunityDetail", None)
        return cls(
            id=str(interest.id),
            person=PersonSummary.from_prisma(person) if person else interest.person,
            opportunity=(
                OpportunitySummary.from_prisma(opportunity)
                if opportunity
                else interest.opportunity
            ),
            status=interest.status,
            termsAccepted=bool(getattr(interest, "termsAccepted", False)),
            dateAdded=getattr(interest, "dateAdded", None),
            messages=[
                InterestMessage.from_prisma(message)
                for message in (getattr(interest, "messages", None) or [])
            ],
            **extra,
        )


class InterestDetailResponse(InterestResponse):
    """Interest as published to subscribers, tagged with the update type."""

    type: Optional[InterestUpdateType] = None


class InterestCreateRequest(BaseModel):
    """Request model for registering interest in an opportunity"""

    opportunity: str
    person: Optional[str] = None
    status: InterestStatus = InterestStatus.INTERESTED
    termsAccepted: bool = False
    messages: List[InterestMessage] = Field(default_factory=list)
    type: InterestUpdateType = InterestUpdateType.ACCEPT


class InterestUpdateRequest(BaseModel):
    """Request model for changing status and/or appending messages"""

    status: Optional[InterestStatus] = None
    messages: List[InterestMessage] = Field(default_factory=list)
    type: Optional[InterestUpdateType] = None

    @field_validator("messages", mode="before")
    @classmethod
    def wrap_single_message(cls, value: Any) -> Any:
        # A single message object is accepted as well as a list
        if isinstance(value, dict):
            return [value]
        return value


class InterestDeleteResponse(BaseModel):
    id: str

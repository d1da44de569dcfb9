from enum import Enum


class InterestStatus(str, Enum):
    """Lifecycle of a person's interest in an opportunity."""

    INTERESTED = "interested"
    INVITED = "invited"
    COMMITTED = "committed"
    DECLINED = "declined"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class InterestUpdateType(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    MESSAGE = "message"


# Topics published after a successful write
TOPIC_INTEREST_UPDATE = "interest.update"
TOPIC_INTEREST_MESSAGE = "interest.message"
TOPIC_INTEREST_DELETE = "interest.delete"

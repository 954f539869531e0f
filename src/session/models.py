"""Data models for the save, create and submit boundary."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class ActorRole(str, Enum):
    """Role of the signed-in user."""

    HOST = "HOST"  # Organizes events and edits forms
    REGISTRANT = "REGISTRANT"  # Fills in forms


@dataclass(frozen=True)
class Actor:
    """The current user as reported by the identity provider."""

    id: str
    role: ActorRole = ActorRole.HOST


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Notice:
    """A user-facing message produced by a save, create or submit.

    Attributes:
        level: Whether the operation succeeded.
        message: Text to show the user.
        details: Extra lines explaining a failure (validation messages).
        created_at: When the notice was raised.
    """

    level: NoticeLevel
    message: str
    details: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class EditorMode(str, Enum):
    """Whether a form is being viewed or edited."""

    VIEW = "view"
    EDIT = "edit"


class WizardStep(int, Enum):
    """Steps of the new-event flow."""

    GENERAL_INFO = 1
    FORM = 2


class EventInfo(BaseModel):
    """General information about an event, collected before its form.

    Attributes:
        id: Event identifier.
        name: Event name.
        description: Free text description.
        location: Venue.
        start_date: When the event starts.
        end_date: When the event ends.
        regist: Registration close date.
        price: Ticket price.
        profile_url: Cover image URL.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = ""
    description: str = ""
    location: str = ""
    start_date: datetime | None = Field(default=None, alias="startDate")
    end_date: datetime | None = Field(default=None, alias="endDate")
    regist: datetime | None = None
    price: int = 100
    profile_url: str | None = Field(default=None, alias="profileURL")

    def set_start_date(self, value: datetime) -> None:
        """Set the start date, moving the end date along when it would
        otherwise fall before the start."""
        self.start_date = value
        if self.end_date is None or self.end_date < value:
            self.end_date = value

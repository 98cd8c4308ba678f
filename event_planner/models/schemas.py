from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import datetime, timezone
from typing import Optional, List, Union, Literal, Any, Dict, Annotated
from enum import Enum


def _as_utc(value):
    """Treat naive timestamps coming back from the database as UTC."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class RecommendationKind(str, Enum):
    BUDGET = "budget"
    VENDOR = "vendor"
    TIMELINE = "timeline"
    GUEST = "guest"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RSVPStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"


class BudgetSensitivity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class UserFeedback(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


class LeadStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"


class SentimentLabel(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


# ---------------------------------------------------------------------------
# Entities read by the engines
# ---------------------------------------------------------------------------

class Event(BaseModel):
    """Event row. Never mutated by the engines."""
    id: str
    title: str = ""
    event_type: Optional[str] = None
    budget: float = 0.0
    estimated_guests: int = 0
    start_date: datetime
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    city: Optional[str] = None
    state: Optional[str] = None
    venue_name: Optional[str] = None
    status: Optional[str] = None
    user_id: Optional[str] = None

    @field_validator("start_date", "end_date", "created_at")
    @classmethod
    def _utc(cls, v):
        return _as_utc(v)

    @field_validator("budget", "estimated_guests", mode="before")
    @classmethod
    def _none_is_zero(cls, v):
        return 0 if v is None else v

    @property
    def location(self) -> str:
        return ", ".join(part for part in (self.city, self.state) if part)


class Task(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: Optional[str] = None
    event_id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("due_date", "updated_at")
    @classmethod
    def _utc(cls, v):
        return _as_utc(v)


class BudgetItem(BaseModel):
    id: Optional[str] = None
    event_id: str
    category: str
    item_name: str
    estimated_cost: float = 0.0
    actual_cost: Optional[float] = None
    is_paid: bool = False
    vendor_id: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("estimated_cost", mode="before")
    @classmethod
    def _none_is_zero(cls, v):
        return 0.0 if v is None else v


class Guest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: Optional[str] = None
    event_id: str
    name: str
    # Stored values may be capitalized ("Confirmed"); unrecognized ones such as "maybe" pass through
    rsvp_status: Optional[str] = RSVPStatus.PENDING.value
    plus_ones: int = 0

    @field_validator("rsvp_status", mode="before")
    @classmethod
    def _lowercase_rsvp(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class VendorBooking(BaseModel):
    """A vendor attached to an event; only the status is read."""
    id: Optional[str] = None
    event_id: str
    vendor_id: Optional[str] = None
    status: Optional[str] = None


class UserPreferences(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    user_id: Optional[str] = None
    budget_sensitivity: BudgetSensitivity = BudgetSensitivity.MEDIUM
    style_preferences: List[str] = Field(default_factory=list)
    vendor_preferences: List[str] = Field(default_factory=list)
    color_scheme: List[str] = Field(default_factory=list)
    cuisine_preferences: List[str] = Field(default_factory=list)
    music_preferences: List[str] = Field(default_factory=list)
    priority_factors: List[str] = Field(default_factory=lambda: ["budget", "quality", "convenience"])

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "UserPreferences":
        return cls(user_id=row.get("user_id"), **(row.get("preferences") or {}))

    def to_row(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "preferences": self.model_dump(exclude={"user_id"}),
        }


# ---------------------------------------------------------------------------
# Recommendations: details are a tagged union keyed by kind
# ---------------------------------------------------------------------------

class BudgetAllocation(BaseModel):
    category: str
    percentage: float
    amount: float
    allocated: float


class VendorSuggestion(BaseModel):
    name: str
    category: str
    rating: float
    price: str
    description: str


class TimelineTask(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: str
    deadline: str
    priority: Priority


class GuestIdea(BaseModel):
    title: str
    description: str


class BudgetRecommendation(BaseModel):
    kind: Literal["budget"] = "budget"
    title: str
    description: str
    details: List[BudgetAllocation]
    confidence: int = Field(85, ge=0, le=100)


class VendorRecommendation(BaseModel):
    kind: Literal["vendor"] = "vendor"
    title: str
    description: str
    details: List[VendorSuggestion]
    confidence: int = Field(80, ge=0, le=100)


class TimelineRecommendation(BaseModel):
    kind: Literal["timeline"] = "timeline"
    title: str
    description: str
    details: List[TimelineTask]
    confidence: int = Field(90, ge=0, le=100)


class GuestRecommendation(BaseModel):
    kind: Literal["guest"] = "guest"
    title: str
    description: str
    details: List[GuestIdea]
    confidence: int = Field(75, ge=0, le=100)


RecommendationContent = Annotated[
    Union[BudgetRecommendation, VendorRecommendation, TimelineRecommendation, GuestRecommendation],
    Field(discriminator="kind"),
]


class Recommendation(BaseModel):
    """Stored recommendation tied to one event."""
    model_config = ConfigDict(use_enum_values=True)

    id: Optional[str] = None
    event_id: str
    user_id: Optional[str] = None
    content: RecommendationContent
    is_applied: bool = False
    user_feedback: Optional[UserFeedback] = None
    created_at: Optional[datetime] = None

    @property
    def kind(self) -> str:
        return self.content.kind

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Recommendation":
        content = dict(row["content"])
        content["kind"] = row["recommendation_type"]
        return cls(
            id=row.get("id"),
            event_id=row["event_id"],
            user_id=row.get("user_id"),
            content=content,
            is_applied=row.get("is_applied", False),
            user_feedback=row.get("user_feedback"),
            created_at=row.get("created_at"),
        )

    def to_row(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "event_id": self.event_id,
            "recommendation_type": self.content.kind,
            "content": self.content.model_dump(mode="json", exclude={"kind"}),
            "is_applied": self.is_applied,
        }


# ---------------------------------------------------------------------------
# Vendor leads
# ---------------------------------------------------------------------------

class LeadMatch(BaseModel):
    """One entry of the `matches` array returned by the completion endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    event_id: str = Field(alias="eventId")
    match_score: float = Field(alias="matchScore", ge=0, le=100)
    explanation: str = ""
    approach: str = ""

    @field_validator("event_id", mode="before")
    @classmethod
    def _id_as_str(cls, v):
        return str(v) if v is not None else v


class VendorLead(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    vendor_id: str
    event_id: str
    match_score: float = Field(..., ge=0, le=100)
    match_reason: str
    suggested_approach: str
    status: LeadStatus = LeadStatus.NEW
    event: Optional[Event] = None


# ---------------------------------------------------------------------------
# Feedback analysis
# ---------------------------------------------------------------------------

class FeedbackEntry(BaseModel):
    id: Optional[str] = None
    event_id: Optional[str] = None
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


class SentimentResult(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    score: float
    label: SentimentLabel


class SentimentDistribution(BaseModel):
    positive: float
    neutral: float
    negative: float


class TopicSummary(BaseModel):
    name: str
    mentions: int
    sentiment: float


class ImprovementRecommendation(BaseModel):
    area: str
    sentiment: float
    recommendation: str


class FeedbackAnalysis(BaseModel):
    """Analysis row; one per event, overwritten on every run."""
    event_id: str
    average_rating: float
    total_feedback: int
    positive_count: int
    neutral_count: int
    negative_count: int
    sentiment_scores: SentimentDistribution
    key_topics: List[TopicSummary]
    recommendations: List[ImprovementRecommendation]
    analyzed_at: Optional[datetime] = None

    def to_row(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "average_rating": self.average_rating,
            "sentiment_scores": self.sentiment_scores.model_dump(),
            "key_topics": [t.model_dump() for t in self.key_topics],
            "recommendations": [r.model_dump() for r in self.recommendations],
            "analyzed_at": self.analyzed_at,
        }


# ---------------------------------------------------------------------------
# Notifications and change events
# ---------------------------------------------------------------------------

class Notification(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: Optional[str] = None
    user_id: Optional[str] = None
    message: str
    type: str
    entity_id: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    is_read: bool = False
    created_at: Optional[datetime] = None


class ChangeEvent(BaseModel):
    """A row change pushed by the database."""
    table: str
    type: Literal["INSERT", "UPDATE", "DELETE"]
    new: Dict[str, Any] = Field(default_factory=dict)
    old: Dict[str, Any] = Field(default_factory=dict)

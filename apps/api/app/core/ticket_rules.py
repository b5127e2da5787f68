from enum import Enum


class TicketStatus(str, Enum):
    UNRESOLVED = "Unresolved"
    RESOLVED = "Resolved"


class Urgency(str, Enum):
    FIRE = "Fire"
    FLOOD = "Flood"
    CRITICAL_INFRASTRUCTURE = "Critical infrastructure"
    STANDARD = "Standard"


class IssueType(str, Enum):
    WIFI = "WI-FI"
    LAUNDRY = "Laundry"
    PLUMBING = "Plumbing"
    ELECTRICAL = "Electrical"
    CLEANING_SERVICES = "Cleaning Services"
    FURNITURE = "Furniture"
    OTHER = "Other"


# Triage display order.
URGENCY_ORDER: tuple[Urgency, ...] = (
    Urgency.FIRE,
    Urgency.FLOOD,
    Urgency.CRITICAL_INFRASTRUCTURE,
    Urgency.STANDARD,
)

ISSUE_TYPE_ORDER: tuple[IssueType, ...] = tuple(IssueType)

LEGACY_STATUS_SYNONYMS: dict[str, TicketStatus] = {
    "Complete": TicketStatus.RESOLVED,
    "In Progress": TicketStatus.UNRESOLVED,
}

ALLOWED_TRANSITIONS: dict[TicketStatus, set[TicketStatus]] = {
    TicketStatus.UNRESOLVED: {TicketStatus.RESOLVED},
    TicketStatus.RESOLVED: set(),
}


class LifecycleError(Exception):
    """Base class for rejections produced by the ticket lifecycle."""


class TicketValidationError(LifecycleError):
    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"{field} is required")


class AlreadyResolved(LifecycleError):
    def __init__(self, ticket_id: int | None = None):
        self.ticket_id = ticket_id
        super().__init__(f"Ticket {ticket_id} is already resolved" if ticket_id is not None else "Ticket is already resolved")


def normalize_status(value: str | TicketStatus | None) -> TicketStatus:
    """
    Map a stored status string to the canonical two-value model.

    "Complete" is a legacy spelling of Resolved and "In Progress" of
    Unresolved. Anything missing or unrecognised is treated as Unresolved so
    the ticket stays visible for triage.
    """
    if isinstance(value, TicketStatus):
        return value
    if not value:
        return TicketStatus.UNRESOLVED
    if value in LEGACY_STATUS_SYNONYMS:
        return LEGACY_STATUS_SYNONYMS[value]
    try:
        return TicketStatus(value)
    except ValueError:
        return TicketStatus.UNRESOLVED


def normalize_urgency(value: str | Urgency | None) -> Urgency:
    if isinstance(value, Urgency):
        return value
    try:
        return Urgency(value)
    except ValueError:
        return Urgency.STANDARD


def parse_issue_type(value: str | None) -> IssueType | None:
    if not value:
        return None
    try:
        return IssueType(value)
    except ValueError:
        return None


def parse_urgency(value: str | None) -> Urgency | None:
    """Strict variant of normalize_urgency used on the write path."""
    try:
        return Urgency(value)
    except ValueError:
        return None


def is_resolved(status: str | TicketStatus | None) -> bool:
    return normalize_status(status) is TicketStatus.RESOLVED


def can_transition(old: str | TicketStatus | None, new: str | TicketStatus | None) -> bool:
    return normalize_status(new) in ALLOWED_TRANSITIONS[normalize_status(old)]

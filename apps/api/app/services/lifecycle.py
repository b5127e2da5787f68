"""
Ticket lifecycle: creation, resolution and the derived triage/history views.

Everything here is a pure function over immutable TicketRecord values. The
callers own the session, the clock and the identity; nothing in this module
touches the database.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Iterable

from ..core.ticket_rules import (
    ISSUE_TYPE_ORDER,
    URGENCY_ORDER,
    AlreadyResolved,
    TicketStatus,
    TicketValidationError,
    Urgency,
    can_transition,
    is_resolved,
    normalize_urgency,
    parse_issue_type,
    parse_urgency,
)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class TicketRecord:
    id: int | None
    room_number: str
    issue_type: str
    urgency: Urgency
    description: str
    reporter_email: str
    status: TicketStatus
    date_reported: datetime | None
    resolved_by: str | None = None
    resolved_at: datetime | None = None

    @property
    def is_resolved(self) -> bool:
        return is_resolved(self.status)


@dataclass(frozen=True)
class TicketDraft:
    room_number: str | None = None
    issue_type: str | None = None
    description: str | None = None
    urgency: str | None = None


@dataclass(frozen=True)
class UrgencyBucket:
    urgency: Urgency
    tickets: tuple[TicketRecord, ...]

    @property
    def empty(self) -> bool:
        return not self.tickets


@dataclass(frozen=True)
class TriageView:
    buckets: tuple[UrgencyBucket, ...]
    resolved: tuple[TicketRecord, ...]

    @property
    def unresolved_count(self) -> int:
        return sum(len(b.tickets) for b in self.buckets)

    @property
    def resolved_count(self) -> int:
        return len(self.resolved)

    def bucket(self, urgency: Urgency) -> UrgencyBucket:
        for b in self.buckets:
            if b.urgency is urgency:
                return b
        raise KeyError(urgency)


@dataclass(frozen=True)
class TicketSummary:
    total: int
    resolved: int
    unresolved: int
    by_issue_type: dict[str, int] = field(default_factory=dict)


def as_utc(dt: datetime | None) -> datetime | None:
    # Naive timestamps come back from SQLite; they were written as UTC.
    if dt is None or dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=timezone.utc)


def _reported_key(t: TicketRecord) -> datetime:
    return as_utc(t.date_reported) or _OLDEST


def newest_first(tickets: Iterable[TicketRecord]) -> tuple[TicketRecord, ...]:
    # sorted() is stable under reverse=True, so equal timestamps keep input order.
    return tuple(sorted(tickets, key=_reported_key, reverse=True))


def create_ticket(draft: TicketDraft, reporter_email: str, now: datetime) -> TicketRecord:
    room_number = (draft.room_number or "").strip()
    if not room_number:
        raise TicketValidationError("room_number", "Room number is required")

    issue_type = parse_issue_type(draft.issue_type)
    if issue_type is None:
        raise TicketValidationError("issue_type", "Issue type must be one of the listed categories")

    description = (draft.description or "").strip()
    if not description:
        raise TicketValidationError("description", "Description is required")

    urgency = Urgency.STANDARD
    if draft.urgency and draft.urgency.strip():
        urgency = parse_urgency(draft.urgency.strip())
        if urgency is None:
            raise TicketValidationError("urgency", f"Unknown urgency: {draft.urgency}")

    return TicketRecord(
        id=None,
        room_number=room_number,
        issue_type=issue_type.value,
        urgency=urgency,
        description=description,
        reporter_email=reporter_email,
        status=TicketStatus.UNRESOLVED,
        date_reported=now,
        resolved_by=None,
        resolved_at=None,
    )


def resolve_ticket(ticket: TicketRecord, resolving_actor_email: str, now: datetime) -> TicketRecord:
    if not can_transition(ticket.status, TicketStatus.RESOLVED):
        raise AlreadyResolved(ticket.id)
    return replace(
        ticket,
        status=TicketStatus.RESOLVED,
        resolved_by=resolving_actor_email,
        resolved_at=now,
    )


def derive_triage_view(tickets: Iterable[TicketRecord]) -> TriageView:
    resolved: list[TicketRecord] = []
    grouped: dict[Urgency, list[TicketRecord]] = {u: [] for u in URGENCY_ORDER}

    for t in tickets:
        if t.is_resolved:
            resolved.append(t)
        else:
            grouped[normalize_urgency(t.urgency)].append(t)

    return TriageView(
        buckets=tuple(UrgencyBucket(urgency=u, tickets=newest_first(grouped[u])) for u in URGENCY_ORDER),
        resolved=newest_first(resolved),
    )


def derive_history_view(tickets: Iterable[TicketRecord], actor_email: str) -> tuple[TicketRecord, ...]:
    return newest_first(t for t in tickets if t.reporter_email == actor_email)


def summarize(tickets: Iterable[TicketRecord]) -> TicketSummary:
    by_issue_type: dict[str, int] = {c.value: 0 for c in ISSUE_TYPE_ORDER}
    total = resolved = 0
    for t in tickets:
        total += 1
        if t.is_resolved:
            resolved += 1
        # Legacy categories are appended after the known ones.
        key = t.issue_type or "Other"
        by_issue_type[key] = by_issue_type.get(key, 0) + 1
    return TicketSummary(
        total=total,
        resolved=resolved,
        unresolved=total - resolved,
        by_issue_type=by_issue_type,
    )

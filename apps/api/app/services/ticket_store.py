from __future__ import annotations

import logging

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.ticket_rules import TicketStatus, normalize_status, normalize_urgency
from ..models.event import TicketEvent
from ..models.ticket import Ticket
from .lifecycle import TicketRecord, as_utc

logger = logging.getLogger(__name__)


class TicketStoreError(Exception):
    """Any failure of the underlying store, surfaced without detail to callers."""


def to_record(t: Ticket) -> TicketRecord:
    # Legacy status/urgency spellings are folded here and nowhere else.
    return TicketRecord(
        id=t.id,
        room_number=t.room_number,
        issue_type=t.issue_type,
        urgency=normalize_urgency(t.urgency),
        description=t.description,
        reporter_email=t.reporter_email,
        status=normalize_status(t.status),
        date_reported=as_utc(t.date_reported),
        resolved_by=t.resolved_by,
        resolved_at=as_utc(t.resolved_at),
    )


def load_snapshot(session: Session) -> list[TicketRecord]:
    try:
        rows = session.scalars(select(Ticket).order_by(Ticket.id)).all()
    except SQLAlchemyError as exc:
        logger.exception("failed to load ticket snapshot")
        raise TicketStoreError("Ticket store unavailable") from exc
    return [to_record(t) for t in rows]


def load_reporter_tickets(session: Session, reporter_email: str) -> list[TicketRecord]:
    stmt = (
        select(Ticket)
        .where(Ticket.reporter_email == reporter_email)
        .order_by(desc(Ticket.date_reported), desc(Ticket.id))
    )
    try:
        rows = session.scalars(stmt).all()
    except SQLAlchemyError as exc:
        logger.exception("failed to load tickets for reporter")
        raise TicketStoreError("Ticket store unavailable") from exc
    return [to_record(t) for t in rows]


def get_ticket_row(session: Session, ticket_id: int) -> Ticket | None:
    try:
        return session.get(Ticket, ticket_id)
    except SQLAlchemyError as exc:
        logger.exception("failed to load ticket (ticket_id=%s)", ticket_id)
        raise TicketStoreError("Ticket store unavailable") from exc


def load_events(session: Session, ticket_id: int) -> list[TicketEvent]:
    stmt = (
        select(TicketEvent)
        .where(TicketEvent.ticket_id == ticket_id)
        .order_by(desc(TicketEvent.created_at), desc(TicketEvent.id))
    )
    try:
        return list(session.scalars(stmt).all())
    except SQLAlchemyError as exc:
        logger.exception("failed to load ticket events (ticket_id=%s)", ticket_id)
        raise TicketStoreError("Ticket store unavailable") from exc


def add_ticket(session: Session, record: TicketRecord, actor_email: str) -> TicketRecord:
    t = Ticket(
        room_number=record.room_number,
        issue_type=record.issue_type,
        urgency=record.urgency.value,
        description=record.description,
        reporter_email=record.reporter_email,
        status=record.status.value,
        date_reported=record.date_reported,
        resolved_by=None,
        resolved_at=None,
    )
    try:
        session.add(t)
        session.flush()
        session.add(
            TicketEvent(
                ticket_id=t.id,
                actor_email=actor_email,
                type="ticket_created",
                from_value=None,
                to_value=record.status.value,
                note=None,
            )
        )
        session.commit()
        session.refresh(t)
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("failed to store new ticket (reporter=%s)", record.reporter_email)
        raise TicketStoreError("Ticket store unavailable") from exc
    logger.info("ticket created (ticket_id=%s, urgency=%s)", t.id, t.urgency)
    return to_record(t)


def save_resolution(session: Session, t: Ticket, record: TicketRecord, actor_email: str) -> TicketRecord:
    """
    Write the resolve transition. Only status and the audit pair change.

    There is no version check: if two staff members resolve the same ticket
    concurrently the later write wins.
    """
    old = normalize_status(t.status)
    t.status = record.status.value
    t.resolved_by = record.resolved_by
    t.resolved_at = record.resolved_at
    try:
        session.add(
            TicketEvent(
                ticket_id=t.id,
                actor_email=actor_email,
                type="status_changed",
                from_value=old.value,
                to_value=TicketStatus.RESOLVED.value,
                note=f"{old.value} -> {record.status.value}",
            )
        )
        session.commit()
        session.refresh(t)
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("failed to store resolution (ticket_id=%s)", t.id)
        raise TicketStoreError("Ticket store unavailable") from exc
    logger.info("ticket resolved (ticket_id=%s, by=%s)", t.id, actor_email)
    return to_record(t)

from datetime import datetime, timezone
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from ..db import get_session
from ..models.user import User
from ..core.current_user import get_current_user
from ..core.roles import is_staff, require_staff
from ..core.settings import settings
from ..core.ticket_rules import (
    LEGACY_STATUS_SYNONYMS,
    AlreadyResolved,
    TicketStatus,
    TicketValidationError,
    normalize_status,
)
from ..schemas.event import EventOut
from ..schemas.ticket import ResolveOut, TicketCreateIn, TicketOut, TicketSummaryOut, TriageOut
from ..services.export_service import XLSX_MEDIA_TYPE, render_workbook
from ..services.lifecycle import (
    TicketDraft,
    TicketRecord,
    TicketSummary,
    TriageView,
    create_ticket as create_ticket_record,
    derive_history_view,
    derive_triage_view,
    newest_first,
    resolve_ticket as resolve_ticket_record,
    summarize,
)
from ..services.ticket_feed import ticket_feed
from ..services.ticket_store import (
    TicketStoreError,
    add_ticket,
    get_ticket_row,
    load_events,
    load_reporter_tickets,
    load_snapshot,
    save_resolution,
    to_record,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tickets", tags=["tickets"])


def serialize_ticket(t: TicketRecord) -> dict:
    return {
        "id": t.id,
        "room_number": t.room_number,
        "issue_type": t.issue_type,
        "urgency": t.urgency.value,
        "description": t.description,
        "reporter_email": t.reporter_email,
        "status": t.status.value,
        "date_reported": t.date_reported,
        "resolved_by": t.resolved_by,
        "resolved_at": t.resolved_at,
    }


def serialize_triage(view: TriageView) -> dict:
    return {
        "buckets": [
            {
                "urgency": b.urgency.value,
                "empty": b.empty,
                "tickets": [serialize_ticket(t) for t in b.tickets],
            }
            for b in view.buckets
        ],
        "resolved": [serialize_ticket(t) for t in view.resolved],
        "unresolved_count": view.unresolved_count,
        "resolved_count": view.resolved_count,
    }


def serialize_summary(summary: TicketSummary) -> dict:
    return {
        "total": summary.total,
        "resolved": summary.resolved,
        "unresolved": summary.unresolved,
        "by_issue_type": dict(summary.by_issue_type),
    }


def store_unavailable(exc: TicketStoreError) -> HTTPException:
    return HTTPException(status_code=503, detail=str(exc) or "Ticket store unavailable")


def assert_access(user: User, t: TicketRecord) -> None:
    if is_staff(user):
        return
    if t.reporter_email != user.email:
        raise HTTPException(status_code=403, detail="Forbidden")


def load_all(session: Session) -> list[TicketRecord]:
    try:
        return load_snapshot(session)
    except TicketStoreError as exc:
        raise store_unavailable(exc)


@router.post("", response_model=TicketOut)
def create_ticket(
    payload: TicketCreateIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    draft = TicketDraft(
        room_number=payload.room_number,
        issue_type=payload.issue_type,
        description=payload.description,
        urgency=payload.urgency,
    )
    try:
        record = create_ticket_record(draft, reporter_email=user.email, now=datetime.now(timezone.utc))
    except TicketValidationError as exc:
        raise HTTPException(status_code=422, detail={"field": exc.field, "message": str(exc)})

    try:
        stored = add_ticket(session, record, actor_email=user.email)
    except TicketStoreError as exc:
        raise store_unavailable(exc)

    ticket_feed.publish_from_thread()
    return serialize_ticket(stored)


@router.get("/mine", response_model=list[TicketOut])
def list_my_tickets(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    try:
        rows = load_reporter_tickets(session, user.email)
    except TicketStoreError as exc:
        raise store_unavailable(exc)
    # The query already filters by reporter; the view filters again.
    return [serialize_ticket(t) for t in derive_history_view(rows, user.email)]


@router.get("/triage", response_model=TriageOut)
def get_triage(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    require_staff(user)
    tickets = load_all(session)
    return {
        "triage": serialize_triage(derive_triage_view(tickets)),
        "summary": serialize_summary(summarize(tickets)),
    }


@router.get("/summary", response_model=TicketSummaryOut)
def get_summary(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    require_staff(user)
    return serialize_summary(summarize(load_all(session)))


@router.get("/export")
def export_tickets(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    require_staff(user)
    tickets = load_all(session)
    content = render_workbook(tickets)
    logger.info("audit report exported (rows=%s, by=%s)", len(tickets), user.email)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{settings.EXPORT_FILENAME}"'},
    )


@router.get("", response_model=list[TicketOut])
def list_tickets(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
    status: str | None = Query(default=None),
    limit: int = Query(default=500, ge=1, le=5000),
    offset: int = Query(default=0, ge=0),
):
    require_staff(user)

    wanted: TicketStatus | None = None
    if status is not None:
        wanted = normalize_status(status)
        if wanted.value != status and status not in LEGACY_STATUS_SYNONYMS:
            raise HTTPException(status_code=422, detail=f"Invalid status: {status}")

    tickets = load_all(session)
    if wanted is not None:
        tickets = [t for t in tickets if t.status is wanted]
    page = newest_first(tickets)[offset:offset + limit]
    return [serialize_ticket(t) for t in page]


@router.get("/{ticket_id}", response_model=TicketOut)
def get_ticket(
    ticket_id: int,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    try:
        row = get_ticket_row(session, ticket_id)
    except TicketStoreError as exc:
        raise store_unavailable(exc)
    if not row:
        raise HTTPException(status_code=404, detail="Not found")
    record = to_record(row)
    assert_access(user, record)
    return serialize_ticket(record)


@router.post("/{ticket_id}/resolve", response_model=ResolveOut)
def resolve_ticket(
    ticket_id: int,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    require_staff(user)

    try:
        row = get_ticket_row(session, ticket_id)
    except TicketStoreError as exc:
        raise store_unavailable(exc)
    if not row:
        raise HTTPException(status_code=404, detail="Ticket not found")

    try:
        resolved = resolve_ticket_record(to_record(row), user.email, datetime.now(timezone.utc))
    except AlreadyResolved as exc:
        raise HTTPException(status_code=409, detail=str(exc))

    try:
        stored = save_resolution(session, row, resolved, actor_email=user.email)
    except TicketStoreError as exc:
        raise store_unavailable(exc)

    ticket_feed.publish_from_thread()
    return {"ok": True, "ticket": serialize_ticket(stored)}


@router.get("/{ticket_id}/events", response_model=list[EventOut])
def list_events(
    ticket_id: int,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    try:
        row = get_ticket_row(session, ticket_id)
        if not row:
            raise HTTPException(status_code=404, detail="Ticket not found")
        assert_access(user, to_record(row))
        return load_events(session, ticket_id)
    except TicketStoreError as exc:
        raise store_unavailable(exc)

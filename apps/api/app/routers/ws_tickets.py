import logging

import anyio
import anyio.to_thread
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query
from fastapi.encoders import jsonable_encoder
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.current_user import load_token_user
from ..core.roles import Role, role_for_email
from ..db import SessionLocal
from ..models.user import ACCOUNT_PAUSED, User
from ..services.lifecycle import derive_history_view, derive_triage_view, summarize
from ..services.ticket_feed import ticket_feed
from ..services.ticket_store import TicketStoreError, load_reporter_tickets, load_snapshot
from .tickets import serialize_summary, serialize_ticket, serialize_triage

logger = logging.getLogger(__name__)

router = APIRouter()


def account_is_active(session: Session, email: str) -> bool:
    try:
        user = session.scalar(select(User).where(User.email == email))
    except SQLAlchemyError as exc:
        logger.exception("failed to re-check subscriber (email=%s)", email)
        raise TicketStoreError("Ticket store unavailable") from exc
    return user is not None and user.status != ACCOUNT_PAUSED


def resolve_subscriber(token: str) -> str | None:
    with SessionLocal() as session:
        user = load_token_user(session, token)
        if not user or user.status == ACCOUNT_PAUSED:
            return None
        return user.email


def build_snapshot(email: str) -> dict | None:
    # Fresh session per snapshot; views are re-derived from scratch each time.
    with SessionLocal() as session:
        if not account_is_active(session, email):
            return None
        if role_for_email(email) is Role.STAFF:
            tickets = load_snapshot(session)
            return {
                "view": "triage",
                "triage": serialize_triage(derive_triage_view(tickets)),
                "summary": serialize_summary(summarize(tickets)),
            }
        tickets = load_reporter_tickets(session, email)
        return {
            "view": "history",
            "tickets": [serialize_ticket(t) for t in derive_history_view(tickets, email)],
        }


async def _wait_for_disconnect(websocket: WebSocket, scope: anyio.CancelScope) -> None:
    # Client messages carry nothing; only the disconnect matters.
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            break
    scope.cancel()


@router.websocket("/ws/tickets")
async def ticket_snapshots(websocket: WebSocket, token: str = Query(...)):
    email = await anyio.to_thread.run_sync(resolve_subscriber, token)
    if not email:
        await websocket.close(code=1008)
        return

    await websocket.accept()
    logger.info("ticket feed subscribed (email=%s)", email)

    with ticket_feed.subscribe() as changes:
        async with anyio.create_task_group() as tg:
            tg.start_soon(_wait_for_disconnect, websocket, tg.cancel_scope)
            try:
                while True:
                    payload = await anyio.to_thread.run_sync(build_snapshot, email)
                    if payload is None:
                        logger.info("ticket feed revoked (email=%s)", email)
                        await websocket.close(code=1008)
                        break
                    await websocket.send_json(jsonable_encoder(payload))
                    await changes.receive()
            except WebSocketDisconnect:
                pass
            except TicketStoreError:
                logger.warning("ticket feed closed on store failure (email=%s)", email)
                await websocket.close(code=1011)
            tg.cancel_scope.cancel()

    logger.info("ticket feed closed (email=%s)", email)

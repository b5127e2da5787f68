# tests/test_ws_tickets.py
import pytest
from fastapi import WebSocketDisconnect
from fastapi.testclient import TestClient

from app.main import app
from app.models.user import ACCOUNT_PAUSED
from tests.conftest import OTHER_STUDENT_EMAIL, auth_headers


def token_for(email: str) -> str:
    return auth_headers(email)["Authorization"].removeprefix("Bearer ")


def test_staff_receive_triage_snapshot(client, staff_user, stored_ticket_factory):
    fire = stored_ticket_factory(urgency="Fire")
    stored_ticket_factory(status="Complete")

    with client.websocket_connect(f"/ws/tickets?token={token_for(staff_user.email)}") as ws:
        snapshot = ws.receive_json()

    assert snapshot["view"] == "triage"
    buckets = {b["urgency"]: b for b in snapshot["triage"]["buckets"]}
    assert [t["id"] for t in buckets["Fire"]["tickets"]] == [fire.id]
    assert snapshot["triage"]["resolved_count"] == 1
    assert snapshot["summary"]["total"] == 2


def test_student_receive_own_history(client, student_user, stored_ticket_factory):
    mine = stored_ticket_factory()
    stored_ticket_factory(reporter_email=OTHER_STUDENT_EMAIL)

    with client.websocket_connect(f"/ws/tickets?token={token_for(student_user.email)}") as ws:
        snapshot = ws.receive_json()

    assert snapshot["view"] == "history"
    assert [t["id"] for t in snapshot["tickets"]] == [mine.id]


def test_invalid_token_is_refused(client, session):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/ws/tickets?token=not-a-jwt") as ws:
            ws.receive_json()
    assert exc.value.code == 1008


def test_paused_account_is_refused(client, account_factory):
    account_factory("paused@student.spu.ac.za", status=ACCOUNT_PAUSED)
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect(f"/ws/tickets?token={token_for('paused@student.spu.ac.za')}") as ws:
            ws.receive_json()
    assert exc.value.code == 1008


# ───────────────────────────── live updates ───────────────────────────── #

@pytest.fixture
def live_client(session):
    # Entering the client keeps one portal, so HTTP writes reach open sockets.
    with TestClient(app) as c:
        yield c


class TestLiveUpdates:
    def test_each_write_pushes_a_fresh_snapshot(
        self, live_client, staff_user, staff_headers, student_headers
    ):
        with live_client.websocket_connect(f"/ws/tickets?token={token_for(staff_user.email)}") as ws:
            assert ws.receive_json()["summary"]["total"] == 0

            created = live_client.post(
                "/tickets",
                json={"room_number": "A104", "issue_type": "Electrical", "urgency": "Fire", "description": "Sparks"},
                headers=student_headers,
            ).json()
            after_create = ws.receive_json()
            assert after_create["summary"]["total"] == 1
            buckets = {b["urgency"]: b for b in after_create["triage"]["buckets"]}
            assert [t["id"] for t in buckets["Fire"]["tickets"]] == [created["id"]]

            live_client.post(f"/tickets/{created['id']}/resolve", headers=staff_headers)
            after_resolve = ws.receive_json()
            assert after_resolve["triage"]["resolved_count"] == 1
            assert after_resolve["triage"]["unresolved_count"] == 0

    def test_student_history_follows_own_writes(self, live_client, student_user, student_headers):
        with live_client.websocket_connect(f"/ws/tickets?token={token_for(student_user.email)}") as ws:
            assert ws.receive_json()["tickets"] == []

            live_client.post(
                "/tickets",
                json={"room_number": "A104", "issue_type": "Laundry", "description": "Dryer broken"},
                headers=student_headers,
            )

            snapshot = ws.receive_json()
            assert [t["description"] for t in snapshot["tickets"]] == ["Dryer broken"]

    def test_pausing_an_account_closes_its_feed(
        self, live_client, student_user, staff_headers
    ):
        with live_client.websocket_connect(f"/ws/tickets?token={token_for(student_user.email)}") as ws:
            ws.receive_json()

            resp = live_client.patch(f"/admin/accounts/{student_user.id}/status", headers=staff_headers)
            assert resp.json()["status"] == "Paused"

            with pytest.raises(WebSocketDisconnect) as exc:
                ws.receive_json()
            assert exc.value.code == 1008

    def test_removing_an_account_closes_its_feed(
        self, live_client, student_user, staff_headers
    ):
        with live_client.websocket_connect(f"/ws/tickets?token={token_for(student_user.email)}") as ws:
            ws.receive_json()

            live_client.delete(f"/admin/accounts/{student_user.id}", headers=staff_headers)

            with pytest.raises(WebSocketDisconnect) as exc:
                ws.receive_json()
            assert exc.value.code == 1008

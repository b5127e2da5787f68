# tests/test_ticket_rules.py
import pytest

from app.core.ticket_rules import (
    URGENCY_ORDER,
    AlreadyResolved,
    IssueType,
    TicketStatus,
    TicketValidationError,
    Urgency,
    can_transition,
    is_resolved,
    normalize_status,
    normalize_urgency,
    parse_issue_type,
    parse_urgency,
)


class TestNormalizeStatus:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Resolved", TicketStatus.RESOLVED),
            ("Complete", TicketStatus.RESOLVED),
            ("Unresolved", TicketStatus.UNRESOLVED),
            ("In Progress", TicketStatus.UNRESOLVED),
            (None, TicketStatus.UNRESOLVED),
            ("", TicketStatus.UNRESOLVED),
            ("Open", TicketStatus.UNRESOLVED),
        ],
    )
    def test_maps_stored_values_to_canonical(self, raw, expected):
        assert normalize_status(raw) is expected

    def test_canonical_member_passes_through(self):
        assert normalize_status(TicketStatus.RESOLVED) is TicketStatus.RESOLVED

    def test_is_resolved_uses_synonyms(self):
        assert is_resolved("Complete")
        assert not is_resolved("In Progress")


class TestUrgency:
    def test_display_order_is_fixed(self):
        assert [u.value for u in URGENCY_ORDER] == ["Fire", "Flood", "Critical infrastructure", "Standard"]

    @pytest.mark.parametrize("raw", [None, "", "Earthquake", "fire"])
    def test_unknown_or_missing_reads_as_standard(self, raw):
        assert normalize_urgency(raw) is Urgency.STANDARD

    def test_known_value_kept(self):
        assert normalize_urgency("Flood") is Urgency.FLOOD

    def test_strict_parse_rejects_unknown(self):
        assert parse_urgency("Critical infrastructure") is Urgency.CRITICAL_INFRASTRUCTURE
        assert parse_urgency("Meteor") is None


class TestIssueType:
    def test_category_set(self):
        assert [c.value for c in IssueType] == [
            "WI-FI", "Laundry", "Plumbing", "Electrical", "Cleaning Services", "Furniture", "Other",
        ]

    def test_parse(self):
        assert parse_issue_type("WI-FI") is IssueType.WIFI
        assert parse_issue_type("Construction") is None
        assert parse_issue_type("") is None


class TestTransitions:
    def test_only_unresolved_to_resolved(self):
        assert can_transition("Unresolved", "Resolved")
        assert can_transition("In Progress", "Complete")

    def test_no_reopen(self):
        assert not can_transition("Resolved", "Unresolved")
        assert not can_transition("Complete", "In Progress")
        assert not can_transition("Resolved", "Resolved")


class TestErrors:
    def test_validation_error_names_field(self):
        err = TicketValidationError("description")
        assert err.field == "description"
        assert "description" in str(err)

    def test_already_resolved_carries_id(self):
        assert AlreadyResolved(7).ticket_id == 7

from pydantic import BaseModel, Field
from datetime import datetime


class TicketCreateIn(BaseModel):
    room_number: str = Field(default="", max_length=20)
    issue_type: str = Field(default="", max_length=50)
    urgency: str | None = Field(default=None, max_length=32)
    description: str = Field(default="", max_length=4000)


class TicketOut(BaseModel):
    id: int
    room_number: str
    issue_type: str
    urgency: str
    description: str
    reporter_email: str
    status: str
    date_reported: datetime | None = None
    resolved_by: str | None = None
    resolved_at: datetime | None = None

    class Config:
        from_attributes = True


class UrgencyBucketOut(BaseModel):
    urgency: str
    empty: bool
    tickets: list[TicketOut]

    class Config:
        from_attributes = True


class TriageViewOut(BaseModel):
    buckets: list[UrgencyBucketOut]
    resolved: list[TicketOut]
    unresolved_count: int
    resolved_count: int

    class Config:
        from_attributes = True


class TicketSummaryOut(BaseModel):
    total: int
    resolved: int
    unresolved: int
    by_issue_type: dict[str, int]

    class Config:
        from_attributes = True


class TriageOut(BaseModel):
    triage: TriageViewOut
    summary: TicketSummaryOut


class ResolveOut(BaseModel):
    ok: bool = True
    ticket: TicketOut

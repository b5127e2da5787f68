from pydantic import BaseModel
import os


def _split_domains(raw: str) -> list[str]:
    return [d.strip().lower().lstrip("@") for d in raw.split(",") if d.strip()]


class Settings(BaseModel):
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./residence_desk.db")
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret")
    jwt_expires_min: int = int(os.getenv("JWT_EXPIRES_MIN", "120"))
    # Accounts under these domains are routed to the staff portal.
    staff_email_domains: list[str] = _split_domains(os.getenv("STAFF_EMAIL_DOMAINS", "risestudentliving.com"))
    # Student onboarding is restricted to these domains when set.
    allowed_email_domains: list[str] = _split_domains(os.getenv("ALLOWED_EMAIL_DOMAINS", ""))
    report_timezone: str = os.getenv("REPORT_TIMEZONE", "Africa/Johannesburg")

settings = Settings()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import os

from .routers import auth, health, me, tickets, accounts, ws_tickets
from .models.user import Base
from .db import engine, SessionLocal
from .core.seed import seed_admin
from .core.settings import settings

import app.models.ticket  # noqa: F401
import app.models.event  # noqa: F401


app = FastAPI(title="Residence Maintenance Desk API")


@app.on_event("startup")
def on_startup():
    if settings.AUTO_DB_BOOTSTRAP:
        # Create tables in dev if missing.
        Base.metadata.create_all(bind=engine)

        with SessionLocal() as session:
            seed_admin(session)


app.include_router(health.router)
app.include_router(auth.router)
app.include_router(me.router)
app.include_router(tickets.router)
app.include_router(accounts.router)
app.include_router(ws_tickets.router)

# CORS: allow local dev origins by default.
raw_origins = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000",
)
allow_origins = [o.strip() for o in raw_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

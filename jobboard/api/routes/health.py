from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from sqlalchemy import text

from jobboard.config import build_sqlalchemy_db_url, settings
from jobboard.database import engine, mask_db_url
from jobboard.routers.dependencies import get_context
from jobboard.services.context import AppContext


router = APIRouter(prefix="/health", tags=["health"])


class HealthStatus(BaseModel):
    status: str
    session: str
    timestamp: datetime


class DBHealthStatus(BaseModel):
    documents: str
    db_url: str
    active_subscriptions: int
    timestamp: datetime


@router.get("/", response_model=HealthStatus, summary="API heartbeat")
async def health_check(context: AppContext = Depends(get_context)) -> HealthStatus:
    state = context.store.state
    return HealthStatus(
        status="degraded" if state.degraded else "ok",
        session=state.phase,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/db", response_model=DBHealthStatus, summary="Document store connectivity")
def db_health_check(context: AppContext = Depends(get_context)) -> DBHealthStatus:
    documents_status = "ok"
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        documents_status = "error"

    return DBHealthStatus(
        documents=documents_status,
        db_url=mask_db_url(build_sqlalchemy_db_url(settings)),
        active_subscriptions=context.gateway.active_subscriptions(),
        timestamp=datetime.now(timezone.utc),
    )

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlmodel import Session
from datetime import datetime

from app.config import settings
from app.database import get_session

router = APIRouter()

@router.get("/check")
def health_check(session: Session = Depends(get_session)):
    db_status = "ok"

    try:
        session.exec(text("SELECT 1"))
    except Exception:
        db_status = "failed"

    return {
        "status": "ok",
        "database": db_status,
        "env": settings.env,
        "timer_expiry_minutes": settings.timer_expiry_minutes,
        "timestamp": datetime.utcnow().isoformat()
    }

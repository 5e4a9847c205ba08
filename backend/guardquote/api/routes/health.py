from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from guardquote.db.session import get_db
from guardquote.repositories.base import storage_guard

router = APIRouter()

@router.get("")
@router.get("/")
def health(db: Session = Depends(get_db)):
    with storage_guard(db, "health check"):
        db.execute(text("SELECT 1"))
    return {"status": "ok"}

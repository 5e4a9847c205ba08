import logging

from guardquote.db.session import engine, SessionLocal
from guardquote.models import user  # noqa: F401
from guardquote.models import quote  # noqa: F401
from guardquote.models.base import Base
from guardquote.models.user import User
from guardquote.core.config import settings
from guardquote.core.security import get_password_hash

logger = logging.getLogger(__name__)

def create_tables():
    """Create missing tables directly from the models (dev/SQLite; prod uses Alembic)."""
    Base.metadata.create_all(bind=engine)

def seed_demo_data():
    db = SessionLocal()
    try:
        # Seed a demo applicant (idempotent)
        demo_email = (settings.seed_demo_email or "demo@example.com").lower()
        demo_pwd = settings.seed_demo_password or "Demo12345!"
        demo = db.query(User).filter(User.email == demo_email).first()
        if not demo:
            demo = User(
                email=demo_email,
                first_name="Demo",
                last_name="Applicant",
                password_hash=get_password_hash(demo_pwd),
                user_type="individual",
            )
            db.add(demo)
            db.commit()
            logger.info("[seed] created demo user %s", demo_email)
    finally:
        db.close()

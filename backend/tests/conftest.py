import os

# Must be set before guardquote reads its settings: one shared in-memory SQLite database.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"
os.environ["QUOTE_OWNERSHIP_POLICY"] = "forbidden"

import pytest

from guardquote.core.security import create_access_token, get_password_hash
from guardquote.db.session import SessionLocal, engine
from guardquote.models import quote  # noqa: F401
from guardquote.models.base import Base
from guardquote.models.user import User

_PASSWORD_HASH = get_password_hash("testpass1")


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    def _make(email: str = "user1@example.com", user_type: str = "individual") -> User:
        u = User(
            email=email.lower(),
            first_name=email.split("@")[0],
            last_name="Tester",
            password_hash=_PASSWORD_HASH,
            user_type=user_type,
            company_name="Acme Corp" if user_type == "business" else None,
        )
        db.add(u)
        db.commit()
        db.refresh(u)
        return u
    return _make


@pytest.fixture
def auth_headers():
    def _headers(u: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(u.id)}"}
    return _headers


@pytest.fixture
def individual_payload() -> dict:
    return {
        "quote_type": "individual",
        "description": "Family cover",
        "coverage_type": "health",
        "coverage_level": "premium",
        "employment_status": "employed",
        "health_info": {
            "age": 41,
            "smoker": False,
            "pre_existing_conditions": ["asthma"],
            "current_medications": [],
            "notes": None,
        },
    }


@pytest.fixture
def business_payload() -> dict:
    return {
        "quote_type": "business",
        "description": "Security assessment",
        "industry": "Healthcare",
        "num_employees": 42,
        "annual_revenue": "2500000.00",
        "business_info": {
            "company_size": "11-50",
            "industry_other": None,
            "has_compliance": "yes",
            "compliance_types": ["HIPAA", "SOX"],
            "compliance_other": None,
            "remote_workforce": True,
            "current_solutions": "Cisco Firewall",
            "budget": "1500",
            "security_requirements": "Protect patient data",
        },
    }

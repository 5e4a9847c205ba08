from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional
from pathlib import Path

OWNERSHIP_POLICIES = ("forbidden", "not_found")

class Settings(BaseSettings):
    app_name: str = Field(default="GuardQuote API", alias="APP_NAME")
    env: str = Field(default="dev", alias="ENV")
    secret_key: str = Field(default="devsecret", alias="SECRET_KEY")
    algorithm: str = Field(default="HS256", alias="ALGORITHM")
    access_token_expire_minutes: int = Field(default=60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    # Postgres in deployments; local runs fall back to a SQLite file (see db/session.py)
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    cors_origins_raw: Optional[str] = Field(default=None, alias="CORS_ORIGINS", description="Comma or space separated list of allowed CORS origins")
    # What a requester sees for somebody else's quote: 403 (forbidden) or 404 (not_found)
    quote_ownership_policy: str = Field(default="forbidden", alias="QUOTE_OWNERSHIP_POLICY")
    quote_list_newest_first: bool = Field(default=False, alias="QUOTE_LIST_NEWEST_FIRST")
    # Seed user (dev/demo convenience)
    seed_demo_email: Optional[str] = Field(default=None, alias="SEED_DEMO_EMAIL")
    seed_demo_password: Optional[str] = Field(default=None, alias="SEED_DEMO_PASSWORD")

    class Config:
        # Load env from backend/.env regardless of CWD
        env_file = str(Path(__file__).resolve().parents[2] / ".env")
        case_sensitive = False

    def _parse_list(self, v: Optional[str]) -> List[str]:
        if v is None:
            return []
        s = v.strip()
        if not s:
            return []
        if s.startswith("[") and s.endswith("]"):
            try:
                import json
                loaded = json.loads(s)
                if isinstance(loaded, list):
                    return [str(e).strip() for e in loaded if str(e).strip()]
            except ValueError:
                pass
        return [e.strip() for e in s.replace(" ", ",").split(",") if e.strip()]

    @property
    def cors_origins(self) -> List[str]:
        items = self._parse_list(self.cors_origins_raw)
        # Fallback dev defaults if none provided
        if not items:
            return ["http://localhost:5173", "http://127.0.0.1:5173"]
        augmented = set(items)
        for origin in list(items):
            if origin.startswith("http://localhost:"):
                augmented.add(origin.replace("http://localhost:", "http://127.0.0.1:", 1))
            if origin.startswith("http://127.0.0.1:"):
                augmented.add(origin.replace("http://127.0.0.1:", "http://localhost:", 1))
        return sorted(augmented)

    @property
    def ownership_policy(self) -> str:
        policy = self.quote_ownership_policy.strip().lower()
        if policy not in OWNERSHIP_POLICIES:
            raise ValueError(f"QUOTE_OWNERSHIP_POLICY must be one of {OWNERSHIP_POLICIES}, got {policy!r}")
        return policy

settings = Settings()  # type: ignore

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
import jwt

from guardquote.core.config import settings
from guardquote.core.errors import Unauthorized
from guardquote.core.security import decode_access_token
from guardquote.db.session import get_db
from guardquote.repositories.quotes import QuoteRepository
from guardquote.repositories.users import UserRepository
from guardquote.services.quote_service import QuoteService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

def get_current_user_id(token: str = Depends(oauth2_scheme)) -> int:
    """Access gate: resolve the bearer token to the authenticated user id.

    Everything downstream trusts this id and never re-derives it.
    """
    try:
        payload = decode_access_token(token)
        return int(payload["sub"])
    except (jwt.PyJWTError, KeyError, TypeError, ValueError):
        raise Unauthorized("Invalid token")

def get_quote_service(db: Session = Depends(get_db)) -> QuoteService:
    return QuoteService(
        QuoteRepository(db),
        UserRepository(db),
        ownership_policy=settings.ownership_policy,
        newest_first=settings.quote_list_newest_first,
    )

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from guardquote.api.deps import get_current_user_id
from guardquote.core.security import create_access_token, get_password_hash, verify_password
from guardquote.db.session import get_db
from guardquote.repositories.users import UserRepository
from guardquote.schemas.auth import Token, UserRegister, UserOut, UserLogin

router = APIRouter()

def _issue_token(db: Session, email: str, password: str) -> dict:
    user = UserRepository(db).get_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {"access_token": create_access_token(user.id), "token_type": "bearer"}

@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """OAuth2 form login, ``username`` carries the email."""
    return _issue_token(db, form_data.username, form_data.password)

@router.post("/login-json", response_model=Token)
def login_json(payload: UserLogin, db: Session = Depends(get_db)):
    return _issue_token(db, payload.email, payload.password)

@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    users = UserRepository(db)
    if users.get_by_email(payload.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    return users.insert({
        "email": payload.email,
        "password_hash": get_password_hash(payload.password),
        "first_name": payload.first_name.strip(),
        "last_name": payload.last_name.strip(),
        "user_type": payload.user_type,
        "company_name": payload.company_name,
        "phone": payload.phone,
    })

@router.get("/me", response_model=UserOut)
def me(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    user = UserRepository(db).get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user

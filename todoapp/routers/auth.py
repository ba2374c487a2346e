import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy.orm import Session
from todoapp.schemas.user import UserCreate, UserOut, SessionOut
from todoapp.models.user import User
from todoapp.utils.auth import hash_password, verify_password, create_token, get_current_user, revoke_token
from todoapp.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=UserOut)
def register(user: UserCreate, db: Session = Depends(get_db)):
    email = user.email.lower()
    exists = db.query(User).filter(User.email == email).first()
    if exists:
        raise HTTPException(status_code=400, detail="Email already exists")

    try:
        hashed = hash_password(user.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    new_user = User(email=email, password=hashed)
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info("user registered id=%s", new_user.id)
    return new_user

@router.post("/login", response_model=SessionOut)
def login(user: UserCreate, db: Session = Depends(get_db)):
    db_user = db.query(User).filter(User.email == user.email.lower()).first()
    if not db_user or not verify_password(user.password, db_user.password):
        logger.info("login rejected")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token, expires_at = create_token(db_user)
    logger.info("login ok id=%s", db_user.id)
    return {"token": token, "expires_at": expires_at, "user": db_user}

@router.get("/session", response_model=UserOut)
def current_session(db: Session = Depends(get_db), authorization: Optional[str] = Header(None), token: Optional[str] = None):
    user, _ = get_current_user(db, authorization, token)
    return user

@router.post("/logout")
def logout(db: Session = Depends(get_db), authorization: Optional[str] = Header(None), token: Optional[str] = None):
    _, payload = get_current_user(db, authorization, token)
    revoke_token(db, payload)
    return {"detail": "signed out"}

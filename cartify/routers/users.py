from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from cartify.models.user import UserAccount, get_db
from cartify.schemas.user import UserCreate, UserOut

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_out(user: UserAccount) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        username=user.username,
        firstName=user.first_name,
        lastName=user.last_name,
        phoneNumber=user.phone_number,
        userRole=user.user_role,
        isAccountActive=user.is_account_active,
    )


@router.post("/", response_model=UserOut, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    user = UserAccount(
        email=payload.email.lower(),
        username=payload.username.strip(),
        first_name=payload.firstName,
        last_name=payload.lastName,
        phone_number=(payload.phoneNumber or "").strip() or None,
        user_role=payload.userRole,
    )
    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email, username or phone number already registered")
    db.refresh(user)
    logger.info("Created user %s", user.id)
    return _to_out(user)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: Session = Depends(get_db)):
    user = db.query(UserAccount).filter(UserAccount.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return _to_out(user)

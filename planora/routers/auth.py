from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from planora.schemas.user import UserCreate, UserLogin, ProfileOut, ProfileUpdate
from planora.models.user import Profile
from planora.utils.auth import hash_password, verify_password, create_token, get_current_user
from planora.database import get_db

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=ProfileOut)
def register(user: UserCreate, db: Session = Depends(get_db)):
    exists = db.query(Profile).filter(Profile.email == user.email).first()
    if exists:
        raise HTTPException(status_code=400, detail="Email already exists")

    # signing up creates the profile row every other table hangs off
    profile = Profile(email=user.email, password=hash_password(user.password), full_name=user.full_name)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


@router.post("/login")
def login(user: UserLogin, db: Session = Depends(get_db)):
    profile = db.query(Profile).filter(Profile.email == user.email).first()
    if not profile or not verify_password(user.password, profile.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_token({"sub": profile.id})
    return {"token": token}


def _current_profile(db: Session, user_id: str) -> Profile:
    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if not profile:
        raise HTTPException(status_code=401, detail="Unknown user")
    return profile


@router.get("/me", response_model=ProfileOut)
def me(db: Session = Depends(get_db), user_id: str = Depends(get_current_user)):
    return _current_profile(db, user_id)


@router.patch("/me", response_model=ProfileOut)
def update_me(changes: ProfileUpdate, db: Session = Depends(get_db), user_id: str = Depends(get_current_user)):
    profile = _current_profile(db, user_id)
    for field, value in changes.dict(exclude_unset=True).items():
        setattr(profile, field, value)
    db.commit()
    db.refresh(profile)
    return profile

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from flashstudy.auth.jwt import create_access_token
from flashstudy.core.security import get_current_user, hash_password, verify_password
from flashstudy.db.session import get_db
from flashstudy.models.user import User
from flashstudy.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse

router = APIRouter(tags=["auth"])


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/register", response_model=TokenResponse)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
):
    lower_email = data.email.lower()
    existing_user = db.query(User).filter(User.email == lower_email).first()
    if existing_user:
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(
        username=data.username or lower_email.split("@")[0],
        email=lower_email,
        password_hash=hash_password(data.password),
    )

    db.add(user)
    db.commit()
    db.refresh(user)

    token = create_access_token(data={"sub": str(user.id)})

    return {
        "access_token": token,
        "token_type": "bearer",
    }


@router.post("/login", response_model=TokenResponse)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
):
    lower_email = data.email.lower()
    user = db.query(User).filter(User.email == lower_email).first()

    if not user or not verify_password(data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token(data={"sub": str(user.id)})

    return {
        "access_token": token,
        "token_type": "bearer",
    }

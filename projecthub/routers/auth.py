from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.orm import Session

from projecthub.database import get_db
from projecthub.models.user import User
from projecthub.schemas.user import UserRegister, UserLogin
from projecthub.schemas.tokens import Token
from projecthub.services.users import UserService
from projecthub.utils.security import create_access_token

router = APIRouter()


def _token_for(user: User) -> dict:
    token = create_access_token(data={"sub": user.email})
    return {
        "access_token": token,
        "token_type": "bearer",
        "user": user,
    }


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(user: UserRegister, db: Session = Depends(get_db)):
    new_user = UserService(db).register(user)
    return _token_for(new_user)


@router.post("/login", response_model=Token)
def login(user: UserLogin, db: Session = Depends(get_db)):
    db_user = UserService(db).authenticate(user.email, user.password)
    if not db_user:
        raise HTTPException(status_code=400, detail="Invalid credentials")
    return _token_for(db_user)

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from relief_api import models, schemas
from relief_api.auth import utils_auth as auth_utils
from relief_api.auth.dependencies import get_current_user
from relief_api.crud import users as crud
from relief_api.database import get_db

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(message: str, user: models.User) -> dict:
    return {
        "message": message,
        "token": auth_utils.create_access_token(user.user_id, user.email),
        "user": schemas.UserOut.model_validate(user),
    }


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=schemas.AuthResponse)
def register(payload: schemas.RegisterRequest, db: Session = Depends(get_db)):
    user = crud.create_user(db, payload)
    return _auth_response("User registered successfully", user)


@router.post("/login", response_model=schemas.AuthResponse)
def login(payload: schemas.LoginRequest, db: Session = Depends(get_db)):
    user = crud.authenticate_user(db, payload.email, payload.password)
    return _auth_response("Login successful", user)


@router.get("/profile")
def profile(user: models.User = Depends(get_current_user)):
    return {"user": schemas.UserOut.model_validate(user)}

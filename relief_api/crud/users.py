import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from relief_api import models, schemas
from relief_api.auth import utils_auth as auth_utils
from relief_api.errors import BadRequest, Conflict, ServerError, Unauthorized

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.get(models.User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email).first()


def _resolve_role(db: Session, role_id: Optional[int]) -> models.Role:
    if role_id is not None:
        role = db.get(models.Role, role_id)
        if not role:
            raise BadRequest(f"Role with ID {role_id} does not exist")
        return role

    role = db.query(models.Role).filter(models.Role.role_name == models.RoleName.CITIZEN.value).first()
    if role:
        return role
    role = db.query(models.Role).order_by(models.Role.role_id).first()
    if not role:
        raise ServerError("No roles found in database. Please initialize roles first.")
    return role


def create_user(db: Session, data: schemas.RegisterRequest) -> models.User:
    if get_user_by_email(db, data.email):
        raise Conflict("Email already registered")

    role = _resolve_role(db, data.role_id)
    user = models.User(
        name=data.name,
        email=data.email,
        password_hash=auth_utils.hash_password(data.password),
        address=data.address,
        phone_number=data.phone_number,
    )
    user.roles.append(role)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Email already registered")
    db.refresh(user)
    logger.info(f"Registered user {user.user_id} with role {role.role_name}")
    return user


def authenticate_user(db: Session, email: str, password: str) -> models.User:
    user = get_user_by_email(db, email)
    # same failure for unknown email and wrong password
    if not user or not auth_utils.verify_password(password, user.password_hash):
        raise Unauthorized(INVALID_CREDENTIALS)
    return user

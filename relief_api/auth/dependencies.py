from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from relief_api import models
from relief_api.auth import utils_auth as auth_utils
from relief_api.auth.permissions import Capability, require
from relief_api.crud import users as users_crud
from relief_api.database import get_db
from relief_api.errors import Forbidden, Unauthorized


def get_current_user(authorization: Optional[str] = Header(None), db: Session = Depends(get_db)) -> models.User:
    if not authorization:
        raise Unauthorized("Access token required")
    parts = authorization.split(" ")
    token = parts[1] if len(parts) > 1 else None
    if not token:
        raise Unauthorized("Access token required")

    payload = auth_utils.decode_token(token)
    if not payload:
        raise Forbidden("Invalid or expired token")
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise Forbidden("Invalid or expired token")

    user = users_crud.get_user(db, user_id)
    if not user:
        raise Forbidden("Invalid or expired token")
    return user


def require_capability(capability: Capability):
    def dependency(user: models.User = Depends(get_current_user)) -> models.User:
        require(user.role_names, capability)
        return user
    return dependency

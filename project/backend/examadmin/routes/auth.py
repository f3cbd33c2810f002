import logging

from fastapi import APIRouter, Depends

from ..errors import Unauthorized
from ..models.admin import LoginRequest, TokenResponse
from ..services.store import TestStore, get_store
from ..utils.security import create_access_token, normalize_email, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["authentication"])


async def authenticate_admin(store: TestStore, email: str, password: str):
    admin = await store.find_admin_by_email(normalize_email(email))
    if not admin:
        return None
    if not verify_password(password, admin.get("password", "")):
        return None
    return admin


@router.post("/login", response_model=TokenResponse)
async def login(credentials: LoginRequest, store: TestStore = Depends(get_store)):
    """
    Authenticate an admin and return a bearer token
    """
    admin = await authenticate_admin(store, credentials.email, credentials.password)
    if not admin:
        logger.warning(f"Failed admin login for {normalize_email(credentials.email)}")
        raise Unauthorized("Invalid credentials")

    token = create_access_token({"sub": str(admin["_id"]), "email": admin["email"]})
    logger.info(f"Admin {admin['email']} logged in")
    return {"success": True, "token": token}

# boxoffice/utils/auth_utils.py
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from fastapi import HTTPException, status, Depends, Request
from decouple import config
from passlib.context import CryptContext

from boxoffice.models.admin import TokenData
from boxoffice.database import ADMINS, get_database

SECRET_KEY = config("JWT_SECRET", default="change-me-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = config("ACCESS_TOKEN_EXPIRE_MINUTES", default=60, cast=int)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password):
    return pwd_context.hash(password)


def verify_password(password, hashed):
    return pwd_context.verify(password, hashed)


def create_access_token(data: dict, expires_delta: timedelta = None):
    """Generate JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta if expires_delta else timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


async def get_admin(db, email: str):
    """Fetch an active admin by email."""
    return await db[ADMINS].find_one({"email": email, "isActive": True})


def _unauthorized(detail: str):
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _admin_from_header(auth_header: str, db):
    if not auth_header.startswith("Bearer "):
        raise _unauthorized("Invalid authorization header")

    token = auth_header.split(" ")[1]  # Extract token after "Bearer"

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        email: str = payload.get("sub")
        if email is None:
            raise _unauthorized("Invalid token")
        token_data = TokenData(email=email)
    except JWTError:
        raise _unauthorized("Invalid credentials")

    admin = await get_admin(db, token_data.email)
    if admin is None:
        raise _unauthorized("Admin not found")
    return admin


async def get_current_admin(request: Request, db=Depends(get_database)):
    """Extract JWT token from Authorization header and validate the admin."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise _unauthorized("Not authenticated")
    return await _admin_from_header(auth_header, db)


async def get_optional_admin(request: Request, db=Depends(get_database)):
    """Like get_current_admin, but anonymous requests resolve to None."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    return await _admin_from_header(auth_header, db)

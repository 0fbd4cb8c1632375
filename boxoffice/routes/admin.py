# boxoffice/routes/admin.py
import logging
from datetime import datetime, timedelta, timezone

from bson import ObjectId
from fastapi import APIRouter, HTTPException, status, Depends

from boxoffice.database import ADMINS, get_database
from boxoffice.models.admin import Admin, AdminCreate, LoginRequest, PasswordChange, Token
from boxoffice.utils.auth_utils import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    create_access_token,
    get_current_admin,
    get_password_hash,
    verify_password,
)
from boxoffice.utils.documents import convert_objectid_to_str

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/signup", response_model=Admin, status_code=status.HTTP_201_CREATED)
async def signup(admin: AdminCreate, db=Depends(get_database)):
    # Check if username or email already exists
    existing_admin = await db[ADMINS].find_one({"$or": [{"username": admin.username}, {"email": admin.email}]})

    if existing_admin:
        if existing_admin["username"] == admin.username:
            raise HTTPException(status_code=409, detail="Username already exists")
        raise HTTPException(status_code=409, detail="Email already exists")

    admin_data = {
        "_id": ObjectId(),
        "username": admin.username,
        "email": admin.email,
        "password": get_password_hash(admin.password),
        "role": "admin",
        "isActive": True,
        "createdAt": datetime.now(timezone.utc),
    }
    await db[ADMINS].insert_one(admin_data)
    logger.info("Admin account %s created", admin.email)

    return Admin(**convert_objectid_to_str(admin_data))


@router.post("/login", response_model=Token)
async def login(credentials: LoginRequest, db=Depends(get_database)):
    # Fetch admin from DB and verify password
    admin = await db[ADMINS].find_one({"email": credentials.email.strip().lower(), "isActive": True})
    if not admin or not verify_password(credentials.password, admin["password"]):
        logger.info("Failed admin login for %s", credentials.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    access_token_expires = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(data={"sub": admin["email"]}, expires_delta=access_token_expires)
    return {"access_token": access_token, "token_type": "bearer"}


@router.post("/change-password")
async def change_password(request: PasswordChange, admin=Depends(get_current_admin), db=Depends(get_database)):
    if not verify_password(request.currentPassword, admin["password"]):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    await db[ADMINS].update_one(
        {"_id": admin["_id"]},
        {"$set": {"password": get_password_hash(request.newPassword), "updatedAt": datetime.now(timezone.utc)}},
    )
    logger.info("Admin %s changed password", admin["email"])
    return {"message": "Password changed successfully"}

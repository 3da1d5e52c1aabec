import os
import json
from typing import Optional
from fastapi import Request, HTTPException
import firebase_admin
from firebase_admin import auth as fb_auth, credentials as fb_credentials
from core.config import logger, ADMIN_EMAILS


firebase_enabled = False
try:
    FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "")
    FIREBASE_SERVICE_ACCOUNT_JSON = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON", "")
    FIREBASE_SERVICE_ACCOUNT_JSON_PATH = (os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON_PATH", "") or "").strip().strip('"').strip("'")

    if not getattr(firebase_admin, "_apps", []):
        options = {"projectId": FIREBASE_PROJECT_ID} if FIREBASE_PROJECT_ID else None
        if FIREBASE_SERVICE_ACCOUNT_JSON:
            cred = fb_credentials.Certificate(json.loads(FIREBASE_SERVICE_ACCOUNT_JSON))
            firebase_admin.initialize_app(cred, options)
        elif FIREBASE_SERVICE_ACCOUNT_JSON_PATH and os.path.isfile(FIREBASE_SERVICE_ACCOUNT_JSON_PATH):
            cred = fb_credentials.Certificate(FIREBASE_SERVICE_ACCOUNT_JSON_PATH)
            firebase_admin.initialize_app(cred, options)
        else:
            firebase_admin.initialize_app(options=options)
    firebase_enabled = True
    logger.info("Firebase Admin initialized")
except Exception as ex:
    logger.warning(f"Firebase Admin not initialized: {ex}")


def get_uid_from_request(request: Request) -> Optional[str]:
    auth_header = request.headers.get("authorization") or request.headers.get("Authorization")
    if not auth_header or not auth_header.lower().startswith("bearer "):
        return None
    token = auth_header.split(" ", 1)[1].strip()
    if not token or not firebase_enabled:
        return None
    try:
        decoded = fb_auth.verify_id_token(token)
        return decoded.get("uid")
    except Exception as ex:
        logger.warning(f"Token verification failed: {ex}")
        return None


def get_user_email_from_uid(uid: str) -> Optional[str]:
    try:
        if not firebase_enabled:
            return None
        user = fb_auth.get_user(uid)
        return (getattr(user, "email", None) or "").lower()
    except Exception as ex:
        logger.warning(f"get_user_email_from_uid failed: {ex}")
        return None


def has_admin_role(uid: str) -> bool:
    from core.stores import get_store

    for row in get_store("user_roles").load(where={"user_id": uid}):
        if row.get("role") == "admin":
            return True
    return False


def is_admin(uid: Optional[str]) -> bool:
    if not uid:
        return False
    email = get_user_email_from_uid(uid) or ""
    if email and email in ADMIN_EMAILS:
        return True
    return has_admin_role(uid)


# FastAPI dependencies

def optional_uid(request: Request) -> Optional[str]:
    return get_uid_from_request(request)


def require_uid(request: Request) -> str:
    uid = get_uid_from_request(request)
    if not uid:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return uid


def require_admin_user(request: Request) -> str:
    uid = require_uid(request)
    if not is_admin(uid):
        raise HTTPException(status_code=403, detail="Admin access required")
    return uid

import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .config import SUPABASE_JWT_AUDIENCE, SUPABASE_JWT_SECRET
from .database import get_db
from .models import Profile

logger = logging.getLogger(__name__)

security = HTTPBearer()

ALGORITHM = "HS256"


def verify_access_token(token: str) -> dict:
    """
    Verify a Supabase access token (HS256 JWT signed with the project secret).
    Checks signature, expiry and audience and returns the decoded claims.
    """
    if not SUPABASE_JWT_SECRET:
        logger.error("❌ SUPABASE_JWT_SECRET not configured")
        raise HTTPException(status_code=500, detail="Authentication not configured")

    try:
        claims = jwt.decode(
            token,
            SUPABASE_JWT_SECRET,
            algorithms=[ALGORITHM],
            audience=SUPABASE_JWT_AUDIENCE,
        )
    except ExpiredSignatureError as e:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.warning(f"⚠️ Token verification failed: {e}")
        raise HTTPException(status_code=401, detail="Invalid authentication token") from e

    if not claims.get("sub"):
        logger.error(f"❌ Token missing subject claim. Available claims: {list(claims.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    return claims


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Profile:
    """Get the caller's profile from the bearer token, creating it on first sight"""

    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    claims = verify_access_token(credentials.credentials)
    user_id = claims["sub"]
    email = claims.get("email")
    metadata = claims.get("user_metadata") or {}

    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if profile:
        return profile

    logger.info(f"🆕 Creating profile for {email or user_id}")
    profile = Profile(
        id=user_id,
        email=email,
        full_name=metadata.get("full_name"),
        verification_status="pending",
    )
    db.add(profile)
    try:
        db.commit()
        db.refresh(profile)
    except IntegrityError:
        # Another request for the same user created the row first
        db.rollback()
        profile = db.query(Profile).filter(Profile.id == user_id).first()
        if not profile:
            raise HTTPException(
                status_code=409,
                detail="This email is already registered. Please sign in with your existing account.",
            )
    return profile


async def get_current_admin(user: Profile = Depends(get_current_user)) -> Profile:
    """Use this dependency for admin-only routes"""
    if not user.is_admin:
        logger.warning(f"⚠️ User {user.id} attempted to access an admin route")
        raise HTTPException(status_code=403, detail="Admin access required")
    return user

import logging
from datetime import datetime, timedelta

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from jobplatform import config
from jobplatform.database import get_db
from jobplatform.utils.identifiers import to_object_id

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is a 401, not the scheme's default error
security = HTTPBearer(auto_error=False)


def create_access_token(user_id, expires_delta: timedelta = None):
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db=Depends(get_db),
):
    """Resolve the bearer token to a fresh user record (password removed)."""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("No token provided")

    token = credentials.credentials
    if token.count(".") != 2:
        raise _unauthorized("Invalid / malformed token")

    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError as e:
        logger.info("JWT verification failed: %s", e)
        raise _unauthorized("Invalid or expired token")

    user_id = to_object_id(payload.get("sub") or payload.get("userId"))
    if user_id is None:
        raise _unauthorized("Token missing userId field")

    user = await db.users.find_one({"_id": user_id}, {"password": 0})
    if user is None:
        raise _unauthorized("User not found")

    # Employers carry their company's logo for job snapshots
    if user.get("role") == "employer" and user.get("companyId"):
        company = await db.companies.find_one({"companyId": user["companyId"]}) or {}
        user["companyName"] = user.get("companyName") or company.get("companyName", "")
        user["companyLogo"] = company.get("logo") or config.DEFAULT_COMPANY_LOGO

    return user


async def require_employer(current_user: dict = Depends(get_current_user)):
    if current_user.get("role") != "employer":
        raise HTTPException(status_code=403, detail="Only employers can perform this action")
    return current_user


async def require_jobseeker(current_user: dict = Depends(get_current_user)):
    if current_user.get("role") != "jobseeker":
        raise HTTPException(status_code=403, detail="Only jobseekers can perform this action")
    return current_user

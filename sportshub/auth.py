import uuid
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sportshub.db.session import get_session
from sqlalchemy.ext.asyncio import AsyncSession
from sportshub.db.repositories import get_user
from sportshub.db.models.user import User, RoleEnum
from sportshub.core.security import decode_token

# Use HTTPBearer so Swagger UI shows a simple "Authorize" button for the token
security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session: AsyncSession = Depends(get_session)
) -> User:
    """
    Resolve the bearer token to a user.

    Args:
        credentials: HTTP Bearer credentials containing the JWT token
        session: Database session (injected)

    Returns:
        User object

    Raises:
        HTTPException: 401 if the token is invalid or the user is unknown
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authorized to access this route",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_token(credentials.credentials)
    except ValueError:
        raise credentials_exception

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_id = uuid.UUID(str(payload["sub"]))
    except ValueError:
        raise credentials_exception

    user = await get_user(session, user_id)
    if not user:
        raise credentials_exception
    return user


def role_required(*roles: str):
    """
    Dependency restricting an endpoint to the given roles; admins always pass.

    Args:
        roles: Role names allowed (e.g. 'publisher')

    Returns:
        Dependency function
    """
    allowed = set(roles) | {RoleEnum.admin.value}

    async def role_checker(user: User = Depends(get_current_user)) -> User:
        if user.role.value not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"User role {user.role.value} is not authorized to access this route",
            )
        return user
    return role_checker

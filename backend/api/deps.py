from typing import Annotated
from sqlmodel import Session
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from db.session import get_db
from core.security import get_staff_name_from_token

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

SessionDep = Annotated[Session, Depends(get_db)]


def get_current_staff(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """Get the staff member behind a bearer token."""
    staff_name = get_staff_name_from_token(credentials.credentials)

    if staff_name is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid staff credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return staff_name


def get_optional_staff(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_security),
) -> str | None:
    """Staff name when a valid staff token is sent, None for anonymous guests."""
    if credentials is None:
        return None
    return get_staff_name_from_token(credentials.credentials)


CurrentStaff = Annotated[str, Depends(get_current_staff)]
OptionalStaff = Annotated[str | None, Depends(get_optional_staff)]

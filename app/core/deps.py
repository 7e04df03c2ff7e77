"""
FastAPI dependencies for authentication and authorization.

These dependencies are used to protect endpoints and resolve the Actor
that the lifecycle orchestrator authorizes against.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import decode_token
from app.core.storage import StorageBackend, get_storage
from app.crud.store import RecordStore, SqlAlchemyRecordStore
from app.models.account import Account
from app.services.authorization import Actor, parse_role

# HTTP Bearer token scheme (Authorization: Bearer <token>)
security = HTTPBearer()


async def get_current_account(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> Account:
    """
    Extract and validate the current account from JWT token.

    This dependency:
    1. Extracts the Bearer token from Authorization header
    2. Decodes and validates the JWT
    3. Fetches the account from the database
    4. Ensures the account is active and its role is recognised

    Raises:
        HTTPException 401: If token is invalid or account not found
        HTTPException 403: If the account is inactive or has an unknown role
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_token(credentials.credentials)
        account_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise credentials_exception

    account = db.query(Account).filter(Account.id == account_id).first()
    if account is None:
        raise credentials_exception

    if not account.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )

    # Role is checked against the closed enum, never defaulted
    if parse_role(account.role) is None or parse_role(payload.get("role")) != parse_role(account.role):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Role not recognised"
        )

    return account


def get_actor(account: Account = Depends(get_current_account)) -> Actor:
    """The authenticated Actor (role, account id, owned person id)."""
    return Actor.from_account(account)


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    """Record store bound to the request's database session."""
    return SqlAlchemyRecordStore(db)


def get_file_storage() -> StorageBackend:
    """Upload storage backend (local filesystem or S3, per USE_S3)."""
    return get_storage()

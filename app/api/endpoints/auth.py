"""
Authentication endpoints.

Implements JWT-based stateless authentication:
- POST /login: Authenticate with username or email and receive an access token
- GET /me: Get current account profile
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_account
from app.core.security import verify_password, create_access_token
from app.crud import account as account_crud
from app.models.account import Account
from app.schemas.account import LoginRequest, TokenResponse, AccountResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/login", response_model=TokenResponse)
def login(
    request: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate an account and return a JWT access token.

    The token carries the account id (`sub`), its role and the linked
    person id, so ownership checks need no extra lookup per request.
    """
    account = account_crud.get_by_login(db, request.username)
    if not account or not verify_password(request.password, account.hashed_password):
        logger.info(f"Failed login attempt for '{request.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not account.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive. Please contact an administrator."
        )

    access_token = create_access_token(data={
        "sub": str(account.id),
        "role": account.role.value,
        "person_id": account.person_id,
    })

    logger.info(f"Account logged in: {account.username} (role: {account.role.value})")

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        account=AccountResponse.model_validate(account)
    )


@router.get("/me", response_model=AccountResponse)
def get_current_account_profile(
    current_account: Account = Depends(get_current_account)
):
    """Get the current authenticated account's profile."""
    return current_account

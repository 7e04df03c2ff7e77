"""
CRUD operations for Account model.

Functions flush but never commit; the caller owns the transaction.
"""

from typing import Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from app.core.security import get_password_hash
from app.models.account import Account, AccountRole


def create(
    db: Session,
    username: str,
    email: str,
    password: str,
    role: AccountRole = AccountRole.ALUMNI,
) -> Account:
    """
    Create a new account with a bcrypt-hashed password.

    Args:
        db: Database session
        username: Unique login name
        email: Unique email address
        password: Plain-text password (hashed before storage)
        role: Account role

    Returns:
        Created Account instance with id
    """
    account = Account(
        username=username,
        email=email,
        hashed_password=get_password_hash(password),
        role=role,
        is_active=True,
    )
    db.add(account)
    db.flush()
    return account


def get_by_id(db: Session, account_id: int, lock: bool = False) -> Optional[Account]:
    query = db.query(Account).filter(Account.id == account_id)
    if lock:
        query = query.with_for_update()
    return query.first()


def get_by_login(db: Session, login: str) -> Optional[Account]:
    """Find an account by username or email."""
    return db.query(Account).filter(
        or_(Account.username == login, Account.email == login)
    ).first()


def set_active(db: Session, account: Account, active: bool) -> Account:
    account.is_active = active
    db.flush()
    return account

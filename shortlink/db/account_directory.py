"""
SQL Account Directory

SQLAlchemy implementation of the AccountDirectory interface. Accounts are
owner identities only; credentials are handled by the token issuer.
"""

import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.exceptions import DatabaseError
from shortlink.db.interface import AccountDirectory
from shortlink.db.models import Account, utcnow

logger = logging.getLogger(__name__)


class SQLAccountDirectory(AccountDirectory):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_email(self, email: str) -> Optional[Account]:
        statement = select(Account).where(
            Account.email == email.lower(),
            Account.deleted_at.is_(None),
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        statement = select(Account).where(
            Account.id == account_id,
            Account.deleted_at.is_(None),
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def create(self, email: str) -> Account:
        account = Account(email=email.lower())
        self.session.add(account)
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(f"Account creation failed, email already in use: {email}")
            raise DatabaseError(f"email '{email}' already in use", original_error=e)
        logger.info(f"Account {account.id} created")
        return account

    async def update(self, account_id: str, email: Optional[str] = None) -> Optional[Account]:
        account = await self.find_by_id(account_id)
        if account is None:
            logger.warning(f"Account {account_id} not found")
            return None
        if email is not None:
            account.email = email.lower()
        account.updated_at = utcnow()
        self.session.add(account)
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            raise DatabaseError(f"email '{email}' already in use", original_error=e)
        return account

    async def delete(self, account_id: str) -> int:
        statement = (
            update(Account)
            .where(Account.id == account_id, Account.deleted_at.is_(None))
            .values(deleted_at=utcnow())
        )
        result = await self.session.execute(statement)
        if result.rowcount == 0:
            logger.warning(f"Account {account_id} could not be deleted")
        return result.rowcount

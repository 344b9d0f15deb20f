"""Administrator credential lookups."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Admin
from ..security import hash_password, verify_password


class CredentialStore:
    """Holds the administrator record(s) and checks passwords against them."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_email(self, email: str) -> Optional[Admin]:
        result = await self.session.execute(
            select(Admin).where(Admin.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get(self, admin_id: int) -> Optional[Admin]:
        return await self.session.get(Admin, admin_id)

    async def authenticate(self, email: str, password: str) -> Optional[Admin]:
        """Return the admin when the credentials match, otherwise None."""

        admin = await self.find_by_email(email)
        if admin is None or not verify_password(password, admin.password_hash):
            return None
        return admin

    async def verify(self, email: str, password: str) -> bool:
        return await self.authenticate(email, password) is not None

    async def create(self, email: str, password: str) -> Admin:
        admin = Admin(email=email.strip().lower(), password_hash=hash_password(password))
        self.session.add(admin)
        await self.session.commit()
        return admin

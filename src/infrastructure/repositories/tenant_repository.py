"""PostgreSQL implementation of TenantRepository."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Tenant
from src.domain.interfaces import TenantRepository
from src.infrastructure.database.models import BusinessModel


class PostgresTenantRepository(TenantRepository):
    """
    PostgreSQL implementation of the Tenant repository.

    Uses SQLAlchemy async session for database operations. SQLite is
    supported for tests through its matching ON CONFLICT insert.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    def _insert(self):
        """Dialect-specific INSERT supporting ON CONFLICT."""
        if self._session.get_bind().dialect.name == "sqlite":
            return sqlite_insert(BusinessModel)
        return postgresql_insert(BusinessModel)

    async def upsert(self, tenant: Tenant) -> Tenant:
        """Insert the tenant, or overwrite the row with the same shortcode in one statement."""
        updated_at = tenant.updated_at or datetime.now(timezone.utc)

        stmt = self._insert().values(
            shortcode=tenant.shortcode,
            business_name=tenant.business_name,
            consumer_key=tenant.consumer_key,
            consumer_secret=tenant.consumer_secret,
            passkey=tenant.passkey,
            updated_at=updated_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[BusinessModel.shortcode],
            set_={
                "business_name": stmt.excluded.business_name,
                "consumer_key": stmt.excluded.consumer_key,
                "consumer_secret": stmt.excluded.consumer_secret,
                "passkey": stmt.excluded.passkey,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await self._session.execute(stmt)

        return tenant

    async def get_by_shortcode(self, shortcode: str) -> Optional[Tenant]:
        """Retrieve a tenant by shortcode."""
        stmt = select(BusinessModel).where(BusinessModel.shortcode == shortcode)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    def _to_entity(self, model: BusinessModel) -> Tenant:
        """Convert database model to domain entity."""
        return Tenant(
            shortcode=model.shortcode,
            business_name=model.business_name,
            consumer_key=model.consumer_key,
            consumer_secret=model.consumer_secret,
            passkey=model.passkey,
            updated_at=model.updated_at,
        )

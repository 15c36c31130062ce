"""
Database seeding for local development.

Seeds:
- Demo tenant (SEED_TENANT_CODE)
- Admin user of that tenant (SEED_ADMIN_USERNAME / SEED_ADMIN_PASSWORD)

Seeding is idempotent: existing rows are detected by tenant code and username.

Usage:
  python -m saas_platform.db.run_migrations upgrade head
  python -m saas_platform.db.seed
"""

from __future__ import annotations

import asyncio
import logging
from uuid import UUID

from saas_platform.core.settings import AppSettings, get_app_settings
from saas_platform.db.session import get_async_session
from saas_platform.repositories.unit_of_work import UnitOfWork
from saas_platform.schemas.tenant import TenantCreate
from saas_platform.schemas.user import UserCreate
from saas_platform.services.tenant import TenantService
from saas_platform.services.user import UserService

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
async def seed_all() -> None:
    """
    Seed the database with a demo tenant and its administrator.

    Uses a standalone session from the regular session factory and goes through
    the same services as the HTTP API, so validation rules apply to seed data.
    """
    settings = get_app_settings()
    async for session in get_async_session():
        async with UnitOfWork(session) as uow:
            tenant_id = await _ensure_tenant(uow, settings)
            await _ensure_admin(uow, settings, tenant_id)


async def _ensure_tenant(uow: UnitOfWork, settings: AppSettings) -> UUID:
    existing = await uow.tenants.get_by_code(settings.SEED_TENANT_CODE)
    if existing:
        return existing.id
    tenant = await TenantService(uow).create(
        TenantCreate(
            tenant_name="Demo Tenant",
            tenant_code=settings.SEED_TENANT_CODE,
            subscription_plan_id="STANDARD",
            contact_email=settings.SEED_ADMIN_EMAIL,
            max_users=25,
            max_storage_gb=10,
        )
    )
    logger.info("Seeded tenant %s", tenant.tenant_code)
    return tenant.id


async def _ensure_admin(uow: UnitOfWork, settings: AppSettings, tenant_id: UUID) -> None:
    if await uow.users.get_by_username(tenant_id, settings.SEED_ADMIN_USERNAME):
        return
    user = await UserService(uow, tenant_id).create(
        UserCreate(
            username=settings.SEED_ADMIN_USERNAME,
            email=settings.SEED_ADMIN_EMAIL,
            password=settings.SEED_ADMIN_PASSWORD,
            first_name="Admin",
            last_name="User",
        )
    )
    logger.info("Seeded admin user %s for tenant %s", user.username, tenant_id)


if __name__ == "__main__":
    from saas_platform.core.logging import configure_logging

    configure_logging()
    asyncio.run(seed_all())

from __future__ import annotations

import re
from datetime import datetime, timezone

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.campaigns.errors import BrandInUseError, BrandNotFoundError, BrandSlugConflictError
from app.db.models.brands import Brand
from app.db.repo.brands_repo import BrandsRepo
from app.db.repo.vouchers_repo import VouchersRepo

logger = structlog.get_logger(__name__)

_SLUG_SPACES = re.compile(r"\s+")
_SLUG_DISALLOWED = re.compile(r"[^\w-]+")


def slugify(name: str) -> str:
    slug = _SLUG_SPACES.sub("-", name.strip().lower())
    return _SLUG_DISALLOWED.sub("", slug).strip("-")


class BrandService:
    @staticmethod
    async def create_brand(
        session: AsyncSession,
        *,
        name: str,
        slug: str | None = None,
        now_utc: datetime | None = None,
    ) -> Brand:
        resolved_slug = slugify(slug or name)
        if not resolved_slug:
            raise ValueError("brand slug is empty")
        if await BrandsRepo.get_by_slug(session, resolved_slug) is not None:
            raise BrandSlugConflictError(resolved_slug)

        brand = await BrandsRepo.create(
            session,
            brand=Brand(
                name=name.strip(),
                slug=resolved_slug,
                created_at=now_utc or datetime.now(timezone.utc),
            ),
        )
        logger.info("brand_created", brand_id=brand.id, slug=brand.slug)
        return brand

    @staticmethod
    async def rename_brand(
        session: AsyncSession,
        *,
        brand_id: int,
        name: str | None = None,
        slug: str | None = None,
    ) -> Brand:
        brand = await BrandsRepo.get_by_id_for_update(session, brand_id)
        if brand is None:
            raise BrandNotFoundError(brand_id)

        if slug is not None:
            resolved_slug = slugify(slug)
            if not resolved_slug:
                raise ValueError("brand slug is empty")
            existing = await BrandsRepo.get_by_slug(session, resolved_slug)
            if existing is not None and existing.id != brand.id:
                raise BrandSlugConflictError(resolved_slug)
            brand.slug = resolved_slug
        if name is not None:
            brand.name = name.strip()
        await session.flush()
        return brand

    @staticmethod
    async def delete_brand(session: AsyncSession, *, brand_id: int) -> None:
        brand = await BrandsRepo.get_by_id_for_update(session, brand_id)
        if brand is None:
            raise BrandNotFoundError(brand_id)

        referenced = await VouchersRepo.count_by_brand(session, brand_id)
        if referenced > 0:
            raise BrandInUseError(f"{referenced} vouchers reference brand {brand_id}")

        await BrandsRepo.delete_by_id(session, brand_id)
        logger.info("brand_deleted", brand_id=brand_id)

    @staticmethod
    async def list_brands(session: AsyncSession) -> list[Brand]:
        return await BrandsRepo.list_all(session)

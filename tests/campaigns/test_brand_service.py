from __future__ import annotations

from types import SimpleNamespace

import pytest

from app.campaigns import brands
from app.campaigns.brands import BrandService, slugify
from app.campaigns.errors import BrandInUseError, BrandNotFoundError, BrandSlugConflictError


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Coca Cola", "coca-cola"),
        ("  Mega   Store! ", "mega-store"),
        ("Ярче", "ярче"),
    ],
)
def test_slugify(name: str, expected: str) -> None:
    assert slugify(name) == expected


@pytest.mark.asyncio
async def test_create_brand_rejects_taken_slug(monkeypatch) -> None:
    async def _fake_get_by_slug(session, slug: str):
        return SimpleNamespace(id=1, slug=slug)

    monkeypatch.setattr(brands.BrandsRepo, "get_by_slug", _fake_get_by_slug)

    with pytest.raises(BrandSlugConflictError):
        await BrandService.create_brand(object(), name="Coca Cola")


@pytest.mark.asyncio
async def test_create_brand_derives_slug_from_name(monkeypatch) -> None:
    async def _fake_get_by_slug(session, slug: str):
        return None

    async def _fake_create(session, *, brand):
        brand.id = 5
        return brand

    monkeypatch.setattr(brands.BrandsRepo, "get_by_slug", _fake_get_by_slug)
    monkeypatch.setattr(brands.BrandsRepo, "create", _fake_create)

    brand = await BrandService.create_brand(object(), name=" Coca Cola ")

    assert (brand.id, brand.name, brand.slug) == (5, "Coca Cola", "coca-cola")


@pytest.mark.asyncio
async def test_delete_brand_blocked_while_vouchers_reference_it(monkeypatch) -> None:
    deleted: list[int] = []

    async def _fake_get_for_update(session, brand_id: int):
        return SimpleNamespace(id=brand_id)

    async def _fake_count_by_brand(session, brand_id: int) -> int:
        return 12

    async def _fake_delete(session, brand_id: int) -> None:
        deleted.append(brand_id)

    monkeypatch.setattr(brands.BrandsRepo, "get_by_id_for_update", _fake_get_for_update)
    monkeypatch.setattr(brands.VouchersRepo, "count_by_brand", _fake_count_by_brand)
    monkeypatch.setattr(brands.BrandsRepo, "delete_by_id", _fake_delete)

    with pytest.raises(BrandInUseError):
        await BrandService.delete_brand(object(), brand_id=4)

    assert deleted == []


@pytest.mark.asyncio
async def test_delete_unreferenced_brand(monkeypatch) -> None:
    deleted: list[int] = []

    async def _fake_get_for_update(session, brand_id: int):
        return SimpleNamespace(id=brand_id)

    async def _fake_count_by_brand(session, brand_id: int) -> int:
        return 0

    async def _fake_delete(session, brand_id: int) -> None:
        deleted.append(brand_id)

    monkeypatch.setattr(brands.BrandsRepo, "get_by_id_for_update", _fake_get_for_update)
    monkeypatch.setattr(brands.VouchersRepo, "count_by_brand", _fake_count_by_brand)
    monkeypatch.setattr(brands.BrandsRepo, "delete_by_id", _fake_delete)

    await BrandService.delete_brand(object(), brand_id=4)

    assert deleted == [4]


@pytest.mark.asyncio
async def test_delete_missing_brand(monkeypatch) -> None:
    async def _fake_get_for_update(session, brand_id: int):
        return None

    monkeypatch.setattr(brands.BrandsRepo, "get_by_id_for_update", _fake_get_for_update)

    with pytest.raises(BrandNotFoundError):
        await BrandService.delete_brand(object(), brand_id=4)


@pytest.mark.asyncio
async def test_rename_brand_rejects_slug_owned_by_another_brand(monkeypatch) -> None:
    brand = SimpleNamespace(id=4, name="Alfa", slug="alfa")

    async def _fake_get_for_update(session, brand_id: int):
        return brand

    async def _fake_get_by_slug(session, slug: str):
        return SimpleNamespace(id=9, slug=slug)

    monkeypatch.setattr(brands.BrandsRepo, "get_by_id_for_update", _fake_get_for_update)
    monkeypatch.setattr(brands.BrandsRepo, "get_by_slug", _fake_get_by_slug)

    with pytest.raises(BrandSlugConflictError):
        await BrandService.rename_brand(object(), brand_id=4, slug="Beta")

    assert brand.slug == "alfa"


@pytest.mark.asyncio
@pytest.mark.parametrize("slug", ["", "  ", "!!!"])
async def test_rename_brand_rejects_slug_that_normalizes_to_empty(monkeypatch, slug: str) -> None:
    brand = SimpleNamespace(id=4, name="Alfa", slug="alfa")

    async def _fake_get_for_update(session, brand_id: int):
        return brand

    async def _unexpected_get_by_slug(session, slug: str):
        raise AssertionError("empty slug must be rejected before lookup")

    monkeypatch.setattr(brands.BrandsRepo, "get_by_id_for_update", _fake_get_for_update)
    monkeypatch.setattr(brands.BrandsRepo, "get_by_slug", _unexpected_get_by_slug)

    with pytest.raises(ValueError):
        await BrandService.rename_brand(object(), brand_id=4, slug=slug)

    assert brand.slug == "alfa"

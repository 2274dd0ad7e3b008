import pytest
from unittest.mock import patch
from storefront.core.exceptions import (
    CatalogValidationError,
    StoreNotFoundError,
    StorefrontError,
)
from storefront.models.store import Store
from storefront.services.store_service import StoreService


async def register(svc, name="بقالة الحي", city="الرباط", currency="MAD"):
    return await svc.register_store(name, city, "أكدال", "0612345678", currency)


@pytest.mark.asyncio
async def test_register_store(session):
    svc = StoreService(session)

    assert await svc.list_stores() == []

    store = await register(svc)
    assert isinstance(store, Store)
    assert store.id is not None
    assert store.merchant_id.startswith("M") and len(store.merchant_id) == 9
    assert store.store_id.startswith("S") and len(store.store_id) == 9
    assert store.store_name == "بقالة الحي"
    assert store.currency == "MAD"
    assert store.is_active is True
    assert store.created_at is not None

    stores = await svc.list_stores()
    assert len(stores) == 1


@pytest.mark.asyncio
async def test_codes_unique_across_stores(session):
    """merchant_id и store_id уникальны для всех созданных магазинов"""
    svc = StoreService(session)

    stores = [await register(svc, name=f"Store {i}") for i in range(15)]

    merchant_ids = {s.merchant_id for s in stores}
    store_ids = {s.store_id for s in stores}
    assert len(merchant_ids) == 15
    assert len(store_ids) == 15
    assert all(merchant_ids) and all(store_ids)


@pytest.mark.asyncio
async def test_code_collision_is_redrawn(session):
    svc = StoreService(session)
    first = await register(svc)

    codes = iter([first.merchant_id, "MNEW00001"])
    with patch(
        "storefront.services.store_service.generate_merchant_id",
        side_effect=lambda: next(codes),
    ):
        second = await register(svc, name="Second")

    assert second.merchant_id == "MNEW00001"


@pytest.mark.asyncio
async def test_code_collision_gives_up(session):
    svc = StoreService(session)
    first = await register(svc)

    with patch(
        "storefront.services.store_service.generate_store_id",
        return_value=first.store_id,
    ):
        with pytest.raises(StorefrontError):
            await register(svc, name="Second")

    assert len(await svc.list_stores()) == 1


@pytest.mark.asyncio
async def test_register_validation(session):
    svc = StoreService(session)

    with pytest.raises(CatalogValidationError):
        await svc.register_store("  ", "الرباط", "أكدال", "0612345678")
    with pytest.raises(CatalogValidationError):
        await svc.register_store("بقالة", "الرباط", "", "0612345678")
    with pytest.raises(CatalogValidationError):
        await register(svc, currency="EUR")

    assert await svc.list_stores() == []


@pytest.mark.asyncio
async def test_register_supported_currencies(session):
    svc = StoreService(session)

    assert (await register(svc, currency="XOF")).currency == "XOF"
    assert (await register(svc, currency="mru")).currency == "MRU"


@pytest.mark.asyncio
async def test_lookup_by_codes(session):
    svc = StoreService(session)
    store = await register(svc)

    by_merchant = await svc.get_by_merchant_id(store.merchant_id)
    assert by_merchant.id == store.id

    by_code = await svc.get_by_store_code(store.store_id)
    assert by_code.id == store.id

    # коды из разных пространств не взаимозаменяемы
    with pytest.raises(StoreNotFoundError):
        await svc.get_by_merchant_id(store.store_id)
    assert await svc.get_by_store_code(store.merchant_id) is None


@pytest.mark.asyncio
async def test_toggle_active_is_involution(session):
    svc = StoreService(session)
    store = await register(svc)

    store = await svc.toggle_active(store)
    assert store.is_active is False

    store = await svc.toggle_active(store)
    assert store.is_active is True

    from_db = await svc.get_by_id(store.id)
    assert from_db.is_active is True

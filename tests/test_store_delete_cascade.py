import pytest
from unittest.mock import patch
from sqlalchemy.exc import SQLAlchemyError
from storefront.repositories.category_repository import CategoryRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.store_repository import StoreRepository
from storefront.services.catalog_service import CatalogService
from storefront.services.store_service import StoreService


async def build_store(session, name):
    store = await StoreService(session).register_store(
        name, "الرباط", "أكدال", "0612345678"
    )
    catalog = CatalogService(session)
    snapshot = await catalog.load_dashboard(store.merchant_id)
    dairy = await catalog.create_category(snapshot, "ألبان")
    drinks = await catalog.create_category(snapshot, "مشروبات")
    await catalog.create_product(snapshot, "حليب أطلس", dairy.id, "7")
    await catalog.create_product(snapshot, "عصير برتقال", drinks.id, "12.50")
    return store


@pytest.mark.asyncio
async def test_delete_store_cascade(session):
    store_svc = StoreService(session)

    # Два магазина с каталогами
    doomed = await build_store(session, "CascadeStore")
    kept = await build_store(session, "KeptStore")

    await store_svc.delete_store(doomed)

    assert await store_svc.get_by_id(doomed.id) is None
    assert await store_svc.get_by_store_code(doomed.store_id) is None

    # После удаления не осталось ни категорий, ни товаров со store_id магазина
    assert await CategoryRepository(session).count(store_id=doomed.store_id) == 0
    assert await ProductRepository(session).count(store_id=doomed.store_id) == 0

    # Каталог другого магазина не тронут
    assert await CategoryRepository(session).count(store_id=kept.store_id) == 2
    assert await ProductRepository(session).count(store_id=kept.store_id) == 2


@pytest.mark.asyncio
async def test_delete_store_partial_failure_surfaces_error(session):
    """Сбой на последнем шаге не откатывает удалённый каталог"""
    store_svc = StoreService(session)
    store = await build_store(session, "BrokenStore")

    with patch.object(StoreRepository, "delete", side_effect=SQLAlchemyError("DB Error")):
        with pytest.raises(SQLAlchemyError):
            await store_svc.delete_store(store)

    assert await store_svc.get_by_store_code(store.store_id) is not None
    assert await ProductRepository(session).count(store_id=store.store_id) == 0
    assert await CategoryRepository(session).count(store_id=store.store_id) == 0


@pytest.mark.asyncio
async def test_delete_store_catalog_commit_failure_rolls_back(session):
    """Сбой коммита каталога откатывает удаление товаров и категорий"""
    store_svc = StoreService(session)
    store = await build_store(session, "CommitFails")
    store_code = store.store_id

    with patch.object(
        type(session), "commit", side_effect=SQLAlchemyError("commit failed")
    ):
        with pytest.raises(SQLAlchemyError):
            await store_svc.delete_store(store)

    assert await CategoryRepository(session).count(store_id=store_code) == 2
    assert await ProductRepository(session).count(store_id=store_code) == 2
    assert await StoreRepository(session).count(store_id=store_code) == 1

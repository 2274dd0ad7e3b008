import pytest
from storefront.services.catalog_service import CatalogService
from storefront.services.projections import UNSPECIFIED_CATEGORY
from storefront.services.store_service import StoreService
from storefront.services.storefront_service import StorefrontService, StorefrontStatus


async def register(session, name="بقالة الحي"):
    return await StoreService(session).register_store(
        name, "الرباط", "أكدال", "0612345678"
    )


@pytest.mark.asyncio
async def test_storefront_not_found(session):
    view = await StorefrontService(session).load_storefront("SNOTEXIST")

    assert view.status == StorefrontStatus.NOT_FOUND
    assert view.is_blocked
    assert view.store is None
    assert view.products == []


@pytest.mark.asyncio
async def test_storefront_inactive(session):
    """Неактивный магазин блокируется так же, как несуществующий, но статус свой"""
    store = await register(session)
    catalog = CatalogService(session)
    snapshot = await catalog.load_dashboard(store.merchant_id)
    category = await catalog.create_category(snapshot, "ألبان")
    await catalog.create_product(snapshot, "حليب", category.id, "7")
    await StoreService(session).toggle_active(store)

    view = await StorefrontService(session).load_storefront(store.store_id)

    assert view.status == StorefrontStatus.INACTIVE
    assert view.is_blocked
    assert view.categories == []
    assert view.products == []


@pytest.mark.asyncio
async def test_storefront_not_reachable_by_merchant_id(session):
    store = await register(session)

    view = await StorefrontService(session).load_storefront(store.merchant_id)

    assert view.status == StorefrontStatus.NOT_FOUND


@pytest.mark.asyncio
async def test_hidden_category_does_not_hide_its_products(session):
    """
    C1 видима, C2 скрыта; P1 в C1 и P2 в C2 видимы.
    В категориях только C1, в товарах и P1, и P2:
    видимость товара не наследуется от категории.
    """
    store = await register(session)
    catalog = CatalogService(session)
    snapshot = await catalog.load_dashboard(store.merchant_id)
    c1 = await catalog.create_category(snapshot, "C1")
    c2 = await catalog.create_category(snapshot, "C2")
    p1 = await catalog.create_product(snapshot, "P1", c1.id, "10")
    p2 = await catalog.create_product(snapshot, "P2", c2.id, "20")
    await catalog.toggle_category_visibility(snapshot, c2.id)

    view = await StorefrontService(session).load_storefront(store.store_id)

    assert view.status == StorefrontStatus.READY
    assert [c.id for c in view.categories] == [c1.id]
    assert [p.id for p in view.products] == [p1.id, p2.id]

    names = {p.name: p.category_name for p in view.products}
    assert names["P1"] == "C1"
    assert names["P2"] == UNSPECIFIED_CATEGORY


@pytest.mark.asyncio
async def test_hidden_products_are_filtered(session):
    store = await register(session)
    catalog = CatalogService(session)
    snapshot = await catalog.load_dashboard(store.merchant_id)
    category = await catalog.create_category(snapshot, "ألبان")
    shown = await catalog.create_product(snapshot, "حليب", category.id, "7")
    hidden = await catalog.create_product(snapshot, "لبن", category.id, "5")
    await catalog.toggle_product_visibility(snapshot, hidden.id)

    view = await StorefrontService(session).load_storefront(store.store_id)

    assert [p.id for p in view.products] == [shown.id]
    # счётчик категории на витрине учитывает только видимые товары
    assert view.categories[0].products_count == 1


@pytest.mark.asyncio
async def test_storefront_only_shows_own_catalog(session):
    store_a = await register(session, "A")
    store_b = await register(session, "B")
    catalog = CatalogService(session)

    snapshot_b = await catalog.load_dashboard(store_b.merchant_id)
    category = await catalog.create_category(snapshot_b, "ألبان")
    await catalog.create_product(snapshot_b, "حليب", category.id, "7")

    view = await StorefrontService(session).load_storefront(store_a.store_id)

    assert view.status == StorefrontStatus.READY
    assert view.categories == []
    assert view.products == []


@pytest.mark.asyncio
async def test_search_arabic_product_name(session):
    store = await register(session)
    catalog = CatalogService(session)
    snapshot = await catalog.load_dashboard(store.merchant_id)
    category = await catalog.create_category(snapshot, "مواد غذائية")
    await catalog.create_product(snapshot, "حليب أطلس", category.id, "7")
    await catalog.create_product(snapshot, "عصير برتقال", category.id, "12.50")

    view = await StorefrontService(session).load_storefront(store.store_id)

    assert [p.name for p in view.narrow(query="حليب")] == ["حليب أطلس"]


@pytest.mark.asyncio
async def test_category_and_search_compose(session):
    store = await register(session)
    catalog = CatalogService(session)
    snapshot = await catalog.load_dashboard(store.merchant_id)
    dairy = await catalog.create_category(snapshot, "ألبان")
    drinks = await catalog.create_category(snapshot, "مشروبات")
    await catalog.create_product(snapshot, "حليب أطلس", dairy.id, "7")
    await catalog.create_product(snapshot, "لبن", dairy.id, "5")
    await catalog.create_product(snapshot, "حليب بالشوكولاتة", drinks.id, "9")

    view = await StorefrontService(session).load_storefront(store.store_id)

    assert len(view.narrow()) == 3
    assert [p.name for p in view.narrow(category_id=dairy.id)] == ["حليب أطلس", "لبن"]
    assert [p.name for p in view.narrow(query="حليب")] == [
        "حليب أطلس",
        "حليب بالشوكولاتة",
    ]
    assert [p.name for p in view.narrow(category_id=drinks.id, query="حليب")] == [
        "حليب بالشوكولاتة"
    ]
    assert view.narrow(category_id=dairy.id, query="عصير") == []


@pytest.mark.asyncio
async def test_hidden_category_cannot_be_selected(session):
    store = await register(session)
    catalog = CatalogService(session)
    snapshot = await catalog.load_dashboard(store.merchant_id)
    category = await catalog.create_category(snapshot, "ألبان")
    await catalog.create_product(snapshot, "حليب", category.id, "7")
    await catalog.toggle_category_visibility(snapshot, category.id)

    view = await StorefrontService(session).load_storefront(store.store_id)

    assert len(view.products) == 1
    assert view.narrow(category_id=category.id) == []

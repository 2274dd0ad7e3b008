import pytest
from storefront.core.exceptions import AdminNotFoundError
from storefront.repositories.admin_repository import AdminPanelRepository
from storefront.services.admin_service import AdminService
from storefront.services.catalog_service import CatalogService
from storefront.services.image_library_service import ImageLibraryService
from storefront.services.store_service import StoreService


@pytest.mark.asyncio
async def test_get_admin(session):
    await AdminPanelRepository(session).create(
        admin_id="A1B2C3", name="Admin", email="admin@example.com"
    )
    svc = AdminService(session)

    admin = await svc.get_admin("A1B2C3")
    assert admin.name == "Admin"

    with pytest.raises(AdminNotFoundError):
        await svc.get_admin("NOPE")


@pytest.mark.asyncio
async def test_load_overview(session):
    store_svc = StoreService(session)
    catalog = CatalogService(session)

    stores = []
    for name in ("Atlas", "Baraka", "Casa", "Dakhla"):
        stores.append(
            await store_svc.register_store(name, "الرباط", "أكدال", "0612345678")
        )
    await store_svc.toggle_active(stores[3])

    snapshot = await catalog.load_dashboard(stores[0].merchant_id)
    category = await catalog.create_category(snapshot, "ألبان")
    await catalog.create_product(snapshot, "حليب", category.id, "7")
    await catalog.create_product(snapshot, "لبن", category.id, "5")

    images = ImageLibraryService(session)
    image = await images.add_image("حليب", "ألبان", "https://img.example/milk.png")
    await images.add_image("عصير", "مشروبات", "https://img.example/juice.png")
    await images.toggle_image(image.id)

    overview = await AdminService(session).load_overview()
    stats = overview.stats

    assert stats.total_stores == 4
    assert stats.active_stores == 3
    assert stats.activity_rate == 75
    assert stats.total_categories == 1
    assert stats.total_products == 2
    assert stats.total_images == 2
    assert stats.active_images == 1

    assert overview.store_catalog_size(stores[0]) == (1, 2)
    assert overview.store_catalog_size(stores[1]) == (0, 0)
    assert [s.store_name for s in overview.search("atlas")] == ["Atlas"]


@pytest.mark.asyncio
async def test_overview_after_delete(session):
    store_svc = StoreService(session)
    store = await store_svc.register_store("A", "الرباط", "أكدال", "0612345678")
    catalog = CatalogService(session)
    snapshot = await catalog.load_dashboard(store.merchant_id)
    category = await catalog.create_category(snapshot, "ألبان")
    await catalog.create_product(snapshot, "حليب", category.id, "7")

    await store_svc.delete_store(store)

    stats = (await AdminService(session).load_overview()).stats
    assert stats.total_stores == 0
    assert stats.total_categories == 0
    assert stats.total_products == 0
    assert stats.activity_rate == 0

from aiogram.fsm.state import State, StatesGroup


class RegisterStates(StatesGroup):
    waiting_store_name = State()
    waiting_city = State()
    waiting_district = State()
    waiting_phone = State()
    waiting_currency = State()


class DashboardStates(StatesGroup):
    waiting_merchant_id = State()


class CreateCategoryStates(StatesGroup):
    waiting_name = State()


class CreateProductStates(StatesGroup):
    waiting_category = State()
    waiting_name = State()
    waiting_price = State()
    waiting_image = State()


class ToggleCategoryStates(StatesGroup):
    waiting_category = State()


class ToggleProductStates(StatesGroup):
    waiting_product = State()


class StorefrontStates(StatesGroup):
    waiting_store_id = State()
    browsing = State()


class AdminAuthStates(StatesGroup):
    waiting_admin_id = State()


class DeleteStoreStates(StatesGroup):
    waiting_confirmation = State()


class AddImageStates(StatesGroup):
    waiting_name = State()
    waiting_category = State()
    waiting_url = State()

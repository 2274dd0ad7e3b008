"""
Доменные ошибки витрины.

Отсутствие записи по бизнес-коду (store_id, merchant_id, admin_id) и ошибки
валидации отделены от сбоев хранилища: последние приходят как
sqlalchemy.exc.SQLAlchemyError и обрабатываются в хендлерах.
"""


class StorefrontError(Exception):
    """Базовое исключение для всех ошибок витрины."""


class StoreNotFoundError(StorefrontError, LookupError):
    """Магазин с указанным кодом не найден."""

    def __init__(self, code: str):
        super().__init__(f"Store not found: {code}")
        self.code = code


class AdminNotFoundError(StorefrontError, LookupError):
    """Панель администратора с указанным admin_id не найдена."""

    def __init__(self, admin_id: str):
        super().__init__(f"Admin panel not found: {admin_id}")
        self.admin_id = admin_id


class RecordNotFoundError(StorefrontError, LookupError):
    """Запись с указанным id отсутствует в коллекции."""

    def __init__(self, collection: str, row_id):
        super().__init__(f"{collection}: record {row_id} not found")
        self.collection = collection
        self.row_id = row_id


class CatalogValidationError(StorefrontError, ValueError):
    """Входные данные не прошли проверку, запись не выполнялась."""

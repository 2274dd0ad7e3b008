import pytest
from storefront.core.exceptions import CatalogValidationError
from storefront.utils.validators import require_text, validate_currency, validate_price


def test_price_validation():
    """Тест валидации цены товара"""

    assert validate_price("12.50") == 12.5
    assert validate_price("12,50") == 12.5
    assert validate_price("0") == 0.0
    assert validate_price(" 100 ") == 100.0
    assert validate_price(7) == 7.0
    assert isinstance(validate_price(7), float)

    with pytest.raises(CatalogValidationError):
        validate_price("")
    with pytest.raises(CatalogValidationError):
        validate_price(None)
    with pytest.raises(CatalogValidationError):
        validate_price("-5")
    with pytest.raises(CatalogValidationError):
        validate_price(-0.5)
    with pytest.raises(CatalogValidationError):
        validate_price("عشرة دراهم")
    with pytest.raises(CatalogValidationError):
        validate_price("1.2.3")


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        validate_price("abc")


def test_required_text():
    assert require_text("  بقالة الحي ", "store_name") == "بقالة الحي"

    with pytest.raises(CatalogValidationError):
        require_text("   ", "store_name")
    with pytest.raises(CatalogValidationError):
        require_text(None, "store_name")


def test_currency_validation():
    assert validate_currency("MAD") == "MAD"
    assert validate_currency("xof") == "XOF"
    assert validate_currency("MRU") == "MRU"

    with pytest.raises(CatalogValidationError):
        validate_currency("EUR")
    with pytest.raises(CatalogValidationError):
        validate_currency("")


def test_price_must_be_finite():
    """NaN и бесконечность не являются ценой"""
    for value in (float("nan"), float("inf"), float("-inf")):
        with pytest.raises(CatalogValidationError):
            validate_price(value)

    with pytest.raises(CatalogValidationError):
        validate_price("inf")
    with pytest.raises(CatalogValidationError):
        validate_price("nan")
    with pytest.raises(CatalogValidationError):
        validate_price("9" * 400)

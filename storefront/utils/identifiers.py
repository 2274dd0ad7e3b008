import random
import string

CODE_ALPHABET = string.digits + string.ascii_uppercase
CODE_LENGTH = 8

MERCHANT_PREFIX = "M"
STORE_PREFIX = "S"


def generate_code(prefix: str, length: int = CODE_LENGTH) -> str:
    """
    Генерирует короткий код вида <prefix><8 символов base-36 в верхнем регистре>.

    Уникальность не проверяется, это делает вызывающий код.
    """
    return prefix + "".join(random.choices(CODE_ALPHABET, k=length))


def generate_merchant_id() -> str:
    return generate_code(MERCHANT_PREFIX)


def generate_store_id() -> str:
    return generate_code(STORE_PREFIX)

import re
import secrets
import string

PRODUCT_IDENTIFIER_PREFIX = "BL"
_IDENTIFIER_ALPHABET = string.ascii_uppercase + string.digits
_IDENTIFIER_LENGTH = 8
_WHITESPACE = re.compile(r"\s")


def generate_product_identifier() -> str:
    """Human-readable listing identifier, e.g. ``BL7Q2KD9XA``. Not guaranteed unique."""
    suffix = "".join(secrets.choice(_IDENTIFIER_ALPHABET) for _ in range(_IDENTIFIER_LENGTH))
    return f"{PRODUCT_IDENTIFIER_PREFIX}{suffix}"


def derive_variation_sku(product_identifier: str, color: str | None, size: str | None) -> str:
    """
    Default SKU for a variation without one: ``{product}-{color}-{size}``.

    Upper-cased, every whitespace character replaced by a hyphen; a missing axis
    contributes an empty segment.
    """
    raw = f"{product_identifier}-{color or ''}-{size or ''}".upper()
    return _WHITESPACE.sub("-", raw)

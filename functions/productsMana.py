from hashids import Hashids
from typing import Any, Dict
from functions.settings import get_settings
from models.Products import COMMON_FIELDS, VARIANT_FIELDS, ALL_VARIANT_FIELDS

hashids = Hashids(salt=get_settings().hashids_salt, min_length=8, alphabet="ABCDEFGHJKLMNPQRSTUVWXYZ23456789")


# Encode number
def encode_id(value: int) -> str:
    return hashids.encode(value)


# Decode
def decode_id(hash_str: str):
    decoded = hashids.decode(hash_str)
    return decoded[0] if len(decoded) == 1 else None


def order_code_for(order_id: int) -> str:
    """Public order reference, e.g. GLX7K2M9QA"""
    return f"GL{encode_id(order_id)}"


def applicable_fields(product_type: str):
    return VARIANT_FIELDS.get(product_type, ())


def strip_inapplicable(product_type: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop variant attributes that mean nothing for this product type."""
    allowed = set(applicable_fields(product_type))
    return {
        key: value for key, value in data.items()
        if key not in ALL_VARIANT_FIELDS or key in allowed
    }


def serialize_product(product) -> Dict[str, Any]:
    """Common fields plus the attributes of the entry's own variant."""
    data = {name: getattr(product, name) for name in COMMON_FIELDS}
    data["keywords"] = product.keywords or []
    data["images"] = product.images or []
    for name in applicable_fields(product.type):
        value = getattr(product, name)
        if value is not None:
            data[name] = value
    return data

"""Value objects carried by AxiTrace events: Money, Product, ClientIdentity.

All three are plain dataclasses.  ``serialize()`` returns the wire dict,
``from_dict()`` builds an instance from a loosely-keyed mapping (snake_case
or camelCase, whichever the caller has at hand).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the value of the first key that is present and not None."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _as_float(value: Any) -> float:
    """Lenient float: anything that does not parse counts as 0.0."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _as_int(value: Any) -> int:
    """Lenient int: accepts "7" and "7.9", anything else counts as 0."""
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


# ---------------------------------------------------------------------------
# Money
# ---------------------------------------------------------------------------


@dataclass
class Money:
    """An amount in a given currency.

    The amount is kept as a raw float; no currency-specific rounding is
    applied (JPY and friends are sent exactly as given).
    """

    amount: float
    currency: str

    def __post_init__(self) -> None:
        self.amount = float(self.amount)
        self.currency = self.currency.upper()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Money:
        """Never raises: a missing or unparsable amount is 0, missing currency is USD."""
        amount = data.get("amount")
        currency = data.get("currency")
        return cls(
            _as_float(amount) if amount is not None else 0.0,
            str(currency) if currency is not None else "USD",
        )

    def serialize(self) -> Dict[str, Any]:
        return {"amount": self.amount, "currency": self.currency}

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"


# ---------------------------------------------------------------------------
# Product
# ---------------------------------------------------------------------------

# (attribute, primary key, fallback key, coercion)
_PRODUCT_ALIASES = (
    ("item_name", "item_name", "name", str),
    ("price", "price", None, _as_float),
    ("quantity", "quantity", None, _as_int),
    ("item_category", "item_category", "category", str),
    ("item_brand", "item_brand", "brand", str),
    ("item_variant", "item_variant", "variant", str),
    ("index", "index", None, _as_int),
    ("currency", "currency", None, str),
    ("sku", "sku", None, str),
    ("url", "url", None, str),
    ("image", "image", None, str),
    ("in_stock", "in_stock", "inStock", bool),
    ("stock_quantity", "stock_quantity", "stockQuantity", _as_int),
)

# (attribute, wire key) in wire order
_PRODUCT_WIRE_KEYS = (
    ("item_name", "item_name"),
    ("price", "price"),
    ("quantity", "quantity"),
    ("item_category", "item_category"),
    ("item_brand", "item_brand"),
    ("item_variant", "item_variant"),
    ("index", "index"),
    ("currency", "currency"),
    ("sku", "sku"),
    ("url", "url"),
    ("image", "image"),
    ("in_stock", "inStock"),
    ("stock_quantity", "stockQuantity"),
)


@dataclass
class Product:
    """A catalog item as used by cart, checkout and catalog events.

    Custom attributes are written after the known fields in ``serialize()``,
    so a custom attribute named like a known field (``price``) overrides it.
    """

    item_id: str
    item_name: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[int] = None
    item_category: Optional[str] = None
    item_brand: Optional[str] = None
    item_variant: Optional[str] = None
    index: Optional[int] = None
    currency: Optional[str] = None
    sku: Optional[str] = None
    url: Optional[str] = None
    image: Optional[str] = None
    in_stock: Optional[bool] = None
    stock_quantity: Optional[int] = None
    custom_attributes: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.currency is not None:
            self.currency = self.currency.upper()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Product:
        """Build a product from a loose mapping.

        The id is the first non-empty of ``item_id``, ``sku`` and ``id``.
        For every other field the primary key wins over its alias
        (``item_category`` over ``category``, ``in_stock`` over ``inStock``).
        """
        item_id = data.get("item_id") or data.get("sku") or data.get("id") or ""
        kwargs: Dict[str, Any] = {}
        for attr, primary, fallback, coerce in _PRODUCT_ALIASES:
            keys = (primary, fallback) if fallback else (primary,)
            value = _first_present(data, *keys)
            if value is not None:
                kwargs[attr] = coerce(value)
        return cls(item_id=str(item_id), **kwargs)

    def set_custom_attribute(self, key: str, value: Any) -> Product:
        self.custom_attributes[key] = value
        return self

    def serialize(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"item_id": self.item_id}
        for attr, wire_key in _PRODUCT_WIRE_KEYS:
            value = getattr(self, attr)
            if value is not None:
                data[wire_key] = value
        data.update(self.custom_attributes)
        return data


# ---------------------------------------------------------------------------
# ClientIdentity
# ---------------------------------------------------------------------------


@dataclass
class ClientIdentity:
    """Visitor identity used by the form-submit and transaction endpoints."""

    custom_id: Optional[str] = None
    numeric_id: Optional[int] = None
    uuid: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ClientIdentity:
        numeric_id = data.get("id")
        return cls(
            custom_id=data.get("customId"),
            numeric_id=_as_int(numeric_id) if numeric_id is not None else None,
            uuid=data.get("uuid"),
            email=data.get("email"),
        )

    def has_identifier(self) -> bool:
        return any(
            v is not None
            for v in (self.custom_id, self.numeric_id, self.uuid, self.email)
        )

    def serialize(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.custom_id is not None:
            data["customId"] = self.custom_id
        if self.numeric_id is not None:
            data["id"] = self.numeric_id
        if self.uuid is not None:
            data["uuid"] = self.uuid
        if self.email is not None:
            data["email"] = self.email
        return data

"""AxiTrace event types and their wire payloads.

Every event knows its API ``endpoint``, its ``action`` name, how to
``validate()`` itself and how to ``serialize()`` itself into the exact
payload its endpoint accepts.  The endpoints do not share one envelope:

- page/product views and add-to-cart nest identity under ``client``
  (``customId``/``uuid``) and put everything else into ``params``;
- cart removal and the checkout steps are flat, with snake_case identity
  (``client_id``/``user_id``/``session_id``) at the root;
- transactions and form submits carry a :class:`ClientIdentity` under
  ``client``;
- subscribe, trial, search and catalog events are flat like the checkout
  steps, with leftover params nested under ``params`` only when non-empty.

Identity and the free-form params bag are plain values (:class:`Identity`
and a dict) embedded in every event; the fluent setters on :class:`Event`
only forward to them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, List, Mapping, Optional, Union

from axitrace.exceptions import ValidationError
from axitrace.models import ClientIdentity, Money, Product
from axitrace.validators import is_positive, is_valid_email

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class EventAction(str, Enum):
    """Action names, one per tracked event type."""

    PAGE_VIEW = "page_view"
    PRODUCT_VIEW = "product_view"
    ADD_TO_CART = "add_to_cart"
    REMOVE_FROM_CART = "remove_from_cart"
    BEGIN_CHECKOUT = "begin_checkout"
    ADD_SHIPPING_INFO = "add_shipping_info"
    ADD_PAYMENT_INFO = "add_payment_info"
    TRANSACTION = "transaction"
    SUBSCRIBE = "subscribe"
    START_TRIAL = "start_trial"
    SEARCH = "search"
    FORM_SUBMIT = "form.submit"
    VIEW_ITEM_LIST = "view_item_list"
    SELECT_ITEM = "select_item"


class TransactionSource(str, Enum):
    """Sales channels accepted by the transaction endpoint."""

    WEB_DESKTOP = "WEB_DESKTOP"
    WEB_MOBILE = "WEB_MOBILE"
    MOBILE_APP = "MOBILE_APP"
    POS = "POS"
    MOBILE = "MOBILE"
    DESKTOP = "DESKTOP"


# ---------------------------------------------------------------------------
# Shared identity
# ---------------------------------------------------------------------------


@dataclass
class Identity:
    """Visitor identifiers shared by most events."""

    client_id: Optional[str] = None
    user_id: Optional[str] = None
    session_id: Optional[str] = None

    def has_identifier(self) -> bool:
        return any(
            v is not None for v in (self.client_id, self.user_id, self.session_id)
        )

    def root_fields(self) -> Dict[str, Any]:
        """snake_case identity for the flat payloads."""
        data: Dict[str, Any] = {}
        if self.client_id is not None:
            data["client_id"] = self.client_id
        if self.user_id is not None:
            data["user_id"] = self.user_id
        if self.session_id is not None:
            data["session_id"] = self.session_id
        return data

    def client_object(self) -> Dict[str, Any]:
        """Nested ``client`` object for the label/params payloads."""
        data: Dict[str, Any] = {}
        if self.client_id is not None:
            data["customId"] = self.client_id
        if self.user_id is not None:
            data["uuid"] = self.user_id
        return data


def _coerce_items(items: Iterable[Union[Product, Mapping[str, Any]]]) -> List[Product]:
    return [i if isinstance(i, Product) else Product.from_dict(i) for i in items]


# ---------------------------------------------------------------------------
# Base event
# ---------------------------------------------------------------------------


@dataclass
class Event:
    """Common behaviour of every AxiTrace event.

    Subclasses set ``endpoint`` and ``action`` and implement
    ``_check_fields()`` and ``serialize()``.  ``validate()`` always checks
    identity first, then the event's own fields, and stops at the first
    problem.
    """

    endpoint: ClassVar[str] = ""
    action: ClassVar[EventAction]

    identity: Identity = field(default_factory=Identity, kw_only=True)
    params: Dict[str, Any] = field(default_factory=dict, kw_only=True)

    # -- identity accessors --

    @property
    def client_id(self) -> Optional[str]:
        return self.identity.client_id

    @property
    def user_id(self) -> Optional[str]:
        return self.identity.user_id

    @property
    def session_id(self) -> Optional[str]:
        return self.identity.session_id

    # -- fluent setters --

    def set_client_id(self, client_id: str):
        """Visitor id, normally the ``vt_vid`` cookie."""
        self.identity.client_id = client_id
        return self

    def set_user_id(self, user_id: str):
        self.identity.user_id = user_id
        return self

    def set_session_id(self, session_id: str):
        """Session id, normally the ``vt_sid`` cookie."""
        self.identity.session_id = session_id
        return self

    def set_params(self, params: Mapping[str, Any]):
        """Merge ``params`` into the free-form params bag."""
        self.params.update(params)
        return self

    def add_param(self, key: str, value: Any):
        self.params[key] = value
        return self

    def set_fbp(self, fbp: str):
        return self.add_param("fbp", fbp)

    def set_fbc(self, fbc: str):
        return self.add_param("fbc", fbc)

    # Customer data used for ad-platform matching
    def set_phone(self, phone: str):
        return self.add_param("phone", phone)

    def set_first_name(self, first_name: str):
        return self.add_param("first_name", first_name)

    def set_last_name(self, last_name: str):
        return self.add_param("last_name", last_name)

    def set_city(self, city: str):
        return self.add_param("city", city)

    def set_state(self, state: str):
        return self.add_param("state", state)

    def set_zip(self, zip_code: str):
        return self.add_param("zip", zip_code)

    def set_country(self, country: str):
        return self.add_param("country", country)

    # -- contract --

    def has_identifier(self) -> bool:
        return self.identity.has_identifier()

    def validate(self) -> None:
        """Raise :class:`ValidationError` on the first broken rule."""
        if not self.has_identifier():
            raise ValidationError.missing_user_identifier()
        self._check_fields()

    def _check_fields(self) -> None:
        pass

    def serialize(self) -> Dict[str, Any]:
        raise NotImplementedError

    # -- payload helpers --

    def _flat_base(self) -> Dict[str, Any]:
        return self.identity.root_fields()

    def _with_params(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if self.params:
            data["params"] = dict(self.params)
        return data

    def _labelled_base(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "label": self.action.value,
            "client": self.identity.client_object(),
        }
        if self.identity.session_id is not None:
            data["sessionId"] = self.identity.session_id
        return data


@dataclass
class ClientIdentityEvent(Event):
    """Base for events identified by a :class:`ClientIdentity`.

    Only ``client`` satisfies the identity rule here; ``identity`` still
    carries the session id.
    """

    client: ClientIdentity = field(default_factory=ClientIdentity, kw_only=True)

    def set_client(self, client: ClientIdentity):
        self.client = client
        return self

    def set_client_custom_id(self, custom_id: str):
        self.client.custom_id = custom_id
        return self

    def set_client_email(self, email: str):
        self.client.email = email
        return self

    def has_identifier(self) -> bool:
        return self.client.has_identifier()


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


@dataclass
class PageView(Event):
    endpoint: ClassVar[str] = "/v1/page/view"
    action: ClassVar[EventAction] = EventAction.PAGE_VIEW

    url: str
    title: Optional[str] = None
    referrer: Optional[str] = None
    event_salt: Optional[str] = None  # deduplication key

    def _check_fields(self) -> None:
        if not self.url:
            raise ValidationError.missing_required_field("url", self.action.value)

    def serialize(self) -> Dict[str, Any]:
        data = self._labelled_base()
        if self.event_salt is not None:
            data["eventSalt"] = self.event_salt

        params: Dict[str, Any] = {"url": self.url}
        if self.title is not None:
            params["title"] = self.title
        if self.referrer is not None:
            params["referrer"] = self.referrer
        params.update(self.params)
        data["params"] = params
        return data


@dataclass
class ProductView(Event):
    endpoint: ClassVar[str] = "/v1/product/view"
    action: ClassVar[EventAction] = EventAction.PRODUCT_VIEW

    product: Product

    @classmethod
    def from_dict(cls, product: Mapping[str, Any]) -> ProductView:
        return cls(Product.from_dict(product))

    def _check_fields(self) -> None:
        if not self.product.item_id:
            raise ValidationError.missing_required_field(
                "product.item_id", self.action.value
            )

    def serialize(self) -> Dict[str, Any]:
        data = self._labelled_base()
        p = self.product
        params: Dict[str, Any] = {"sku": p.item_id}
        if p.item_name is not None:
            params["name"] = p.item_name
        if p.price is not None:
            params["price"] = p.price
        if p.currency is not None:
            params["currency"] = p.currency
        if p.item_category is not None:
            params["category"] = p.item_category
        if p.item_brand is not None:
            params["brand"] = p.item_brand
        params.update(self.params)
        data["params"] = params
        return data


# ---------------------------------------------------------------------------
# Cart & checkout
# ---------------------------------------------------------------------------


@dataclass
class CartEvent(Event):
    """Events carrying a currency, a positive value and at least one item."""

    currency: str
    value: float
    items: List[Product] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.currency = self.currency.upper()

    def add_item(self, product: Product):
        self.items.append(product)
        return self

    def set_items(self, items: Iterable[Union[Product, Mapping[str, Any]]]):
        """Replace the items; loose dicts are turned into :class:`Product`."""
        self.items = _coerce_items(items)
        return self

    def _check_fields(self) -> None:
        if not self.currency:
            raise ValidationError.missing_required_field(
                "currency", self.action.value
            )
        if not is_positive(self.value):
            raise ValidationError.value_must_be_positive("value", self.value)
        if not self.items:
            raise ValidationError.empty_items()

    def _extra_fields(self) -> Dict[str, Any]:
        return {}

    def serialize(self) -> Dict[str, Any]:
        data = self._flat_base()
        data["currency"] = self.currency
        data["value"] = self.value
        data["items"] = [item.serialize() for item in self.items]
        data.update(self._extra_fields())
        return self._with_params(data)


@dataclass
class AddToCart(CartEvent):
    endpoint: ClassVar[str] = "/v1/product/addToCart"
    action: ClassVar[EventAction] = EventAction.ADD_TO_CART

    def serialize(self) -> Dict[str, Any]:
        data = self._labelled_base()

        # A single item is described inline; several go out as a list.
        if len(self.items) == 1:
            item = self.items[0]
            params: Dict[str, Any] = {
                "sku": item.item_id,
                "quantity": item.quantity if item.quantity is not None else 1,
            }
            if item.item_name is not None:
                params["name"] = item.item_name
            if item.price is not None:
                params["finalUnitPrice"] = {
                    "amount": item.price,
                    "currency": item.currency or self.currency,
                }
        else:
            params = {
                "currency": self.currency,
                "value": self.value,
                "items": [item.serialize() for item in self.items],
            }

        params.update(self.params)
        data["params"] = params
        return data


@dataclass
class RemoveFromCart(CartEvent):
    endpoint: ClassVar[str] = "/v1/cart/remove"
    action: ClassVar[EventAction] = EventAction.REMOVE_FROM_CART


@dataclass
class BeginCheckout(CartEvent):
    endpoint: ClassVar[str] = "/v1/checkout/begin"
    action: ClassVar[EventAction] = EventAction.BEGIN_CHECKOUT

    coupon: Optional[str] = None

    def _extra_fields(self) -> Dict[str, Any]:
        return {"coupon": self.coupon} if self.coupon is not None else {}


@dataclass
class AddShippingInfo(CartEvent):
    endpoint: ClassVar[str] = "/v1/checkout/add_shipping_info"
    action: ClassVar[EventAction] = EventAction.ADD_SHIPPING_INFO

    shipping_tier: Optional[str] = None
    coupon: Optional[str] = None

    def _extra_fields(self) -> Dict[str, Any]:
        extra: Dict[str, Any] = {}
        if self.shipping_tier is not None:
            extra["shipping_tier"] = self.shipping_tier
        if self.coupon is not None:
            extra["coupon"] = self.coupon
        return extra


@dataclass
class AddPaymentInfo(CartEvent):
    endpoint: ClassVar[str] = "/v1/checkout/add_payment_info"
    action: ClassVar[EventAction] = EventAction.ADD_PAYMENT_INFO

    payment_type: Optional[str] = None
    coupon: Optional[str] = None

    def _extra_fields(self) -> Dict[str, Any]:
        extra: Dict[str, Any] = {}
        if self.payment_type is not None:
            extra["payment_type"] = self.payment_type
        if self.coupon is not None:
            extra["coupon"] = self.coupon
        return extra


# ---------------------------------------------------------------------------
# Transaction & form submit
# ---------------------------------------------------------------------------


@dataclass
class Transaction(ClientIdentityEvent):
    """A completed purchase.

    Products are loose dicts sent as-is; each needs ``sku`` and ``name``.
    The payload has no ``params`` member, so free-form params set on a
    transaction are not transmitted.
    """

    endpoint: ClassVar[str] = "/v1/transaction"
    action: ClassVar[EventAction] = EventAction.TRANSACTION

    order_id: str
    source: Union[TransactionSource, str]
    revenue: Money
    value: Money
    payment_method: str
    products: List[Dict[str, Any]] = field(default_factory=list)
    discount_amount: Optional[Money] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    event_salt: Optional[str] = None

    @classmethod
    def create(
        cls,
        order_id: str,
        revenue: float,
        value: float,
        currency: str,
        payment_method: str,
        source: Union[TransactionSource, str] = TransactionSource.WEB_DESKTOP,
    ) -> Transaction:
        return cls(
            order_id,
            source,
            Money(revenue, currency),
            Money(value, currency),
            payment_method,
        )

    @property
    def source_value(self) -> str:
        if isinstance(self.source, TransactionSource):
            return self.source.value
        return str(self.source)

    def add_product(self, product: Mapping[str, Any]) -> Transaction:
        self.products.append(dict(product))
        return self

    def set_products(self, products: Iterable[Mapping[str, Any]]) -> Transaction:
        self.products = [dict(p) for p in products]
        return self

    def _check_fields(self) -> None:
        """Required fields first, then constraints.

        Order: ``orderId``, ``paymentInfo.method``, non-empty products, each
        product's ``sku`` then ``name``, and only then ``source``.  A
        transaction with both an unknown source and no products reports
        the products.
        """
        event_type = self.action.value
        if not self.order_id:
            raise ValidationError.missing_required_field("orderId", event_type)
        if not self.payment_method:
            raise ValidationError.missing_required_field(
                "paymentInfo.method", event_type
            )
        if not self.products:
            raise ValidationError.empty_items("products")
        for i, product in enumerate(self.products):
            if not product.get("sku"):
                raise ValidationError.missing_required_field(
                    f"products[{i}].sku", event_type
                )
            if not product.get("name"):
                raise ValidationError.missing_required_field(
                    f"products[{i}].name", event_type
                )
        valid_sources = [s.value for s in TransactionSource]
        if self.source_value not in valid_sources:
            raise ValidationError.invalid_value(
                "source", self.source_value, valid_sources
            )

    def serialize(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "client": self.client.serialize(),
            "orderId": self.order_id,
            "source": self.source_value,
            "revenue": self.revenue.serialize(),
            "value": self.value.serialize(),
            "paymentInfo": {"method": self.payment_method},
            "products": [dict(p) for p in self.products],
        }
        if self.discount_amount is not None:
            data["discountAmount"] = self.discount_amount.serialize()
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        if self.event_salt is not None:
            data["eventSalt"] = self.event_salt
        return data


@dataclass
class FormSubmit(ClientIdentityEvent):
    """A submitted form (contact, lead generation, newsletter...)."""

    endpoint: ClassVar[str] = "/v1/form/submit"
    action: ClassVar[EventAction] = EventAction.FORM_SUBMIT

    label: str  # form identifier, e.g. "contact-form"
    form_params: Dict[str, Any] = field(default_factory=dict)
    event_salt: Optional[str] = None

    def set_email(self, email: str) -> FormSubmit:
        self.form_params["email"] = email
        return self

    def set_form_params(self, params: Mapping[str, Any]) -> FormSubmit:
        self.form_params.update(params)
        return self

    def add_form_param(self, key: str, value: Any) -> FormSubmit:
        self.form_params[key] = value
        return self

    def _check_fields(self) -> None:
        event_type = self.action.value
        if not self.label:
            raise ValidationError.missing_required_field("label", event_type)
        if not self.form_params:
            raise ValidationError.missing_required_field("params", event_type)
        email = self.form_params.get("email")
        if email and not is_valid_email(email):
            raise ValidationError.invalid_email(email, "params.email")

    def serialize(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "label": self.label,
            "client": self.client.serialize(),
            "params": {**self.form_params, **self.params},
        }
        if self.identity.session_id is not None:
            data["sessionId"] = self.identity.session_id
        if self.event_salt is not None:
            data["eventSalt"] = self.event_salt
        return data


# ---------------------------------------------------------------------------
# Engagement
# ---------------------------------------------------------------------------


@dataclass
class Subscribe(Event):
    endpoint: ClassVar[str] = "/v1/subscribe"
    action: ClassVar[EventAction] = EventAction.SUBSCRIBE

    email: str
    subscription_type: Optional[str] = None

    def _check_fields(self) -> None:
        if not self.email:
            raise ValidationError.missing_required_field("email", self.action.value)
        if not is_valid_email(self.email):
            raise ValidationError.invalid_email(self.email)

    def serialize(self) -> Dict[str, Any]:
        data = self._flat_base()
        data["email"] = self.email
        if self.subscription_type is not None:
            data["subscription_type"] = self.subscription_type
        return self._with_params(data)


@dataclass
class StartTrial(Event):
    endpoint: ClassVar[str] = "/v1/start_trial"
    action: ClassVar[EventAction] = EventAction.START_TRIAL

    plan_name: str
    trial_period_days: Optional[int] = None
    trial_value: Optional[float] = None
    trial_currency: Optional[str] = None
    predicted_ltv: Optional[float] = None
    email: Optional[str] = None

    def __post_init__(self) -> None:
        if self.trial_currency is not None:
            self.trial_currency = self.trial_currency.upper()

    def set_trial_value(self, value: float, currency: str) -> StartTrial:
        self.trial_value = value
        self.trial_currency = currency.upper()
        return self

    def _check_fields(self) -> None:
        if not self.plan_name:
            raise ValidationError.missing_required_field(
                "plan_name", self.action.value
            )

    def serialize(self) -> Dict[str, Any]:
        data = self._flat_base()
        data["plan_name"] = self.plan_name
        optional = (
            ("trial_period_days", self.trial_period_days),
            ("trial_value", self.trial_value),
            ("trial_currency", self.trial_currency),
            ("predicted_ltv", self.predicted_ltv),
            ("email", self.email),
        )
        for key, value in optional:
            if value is not None:
                data[key] = value
        return self._with_params(data)


@dataclass
class Search(Event):
    endpoint: ClassVar[str] = "/v1/search"
    action: ClassVar[EventAction] = EventAction.SEARCH

    search_term: str
    results_count: Optional[int] = None
    category: Optional[str] = None
    filters: Optional[Dict[str, Any]] = None
    sort_by: Optional[str] = None
    page: Optional[int] = None

    def _check_fields(self) -> None:
        if not self.search_term:
            raise ValidationError.missing_required_field(
                "search_term", self.action.value
            )

    def serialize(self) -> Dict[str, Any]:
        data = self._flat_base()
        data["search_term"] = self.search_term

        # Search refinements travel inside params, after the free-form ones.
        params = dict(self.params)
        refinements = (
            ("results_count", self.results_count),
            ("category", self.category),
            ("filters", self.filters),
            ("sort_by", self.sort_by),
            ("page", self.page),
        )
        for key, value in refinements:
            if value is not None:
                params[key] = value
        if params:
            data["params"] = params
        return data


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@dataclass
class ViewItemList(Event):
    """A product list was shown (category page, search results...)."""

    endpoint: ClassVar[str] = "/v1/catalog/view_list"
    action: ClassVar[EventAction] = EventAction.VIEW_ITEM_LIST

    item_list_id: Optional[str] = None
    item_list_name: Optional[str] = None
    items: List[Product] = field(default_factory=list)

    def add_item(self, product: Product) -> ViewItemList:
        self.items.append(product)
        return self

    def set_items(
        self, items: Iterable[Union[Product, Mapping[str, Any]]]
    ) -> ViewItemList:
        self.items = _coerce_items(items)
        return self

    def serialize(self) -> Dict[str, Any]:
        data = self._flat_base()
        if self.item_list_id is not None:
            data["item_list_id"] = self.item_list_id
        if self.item_list_name is not None:
            data["item_list_name"] = self.item_list_name
        if self.items:
            data["items"] = [item.serialize() for item in self.items]
        return self._with_params(data)


@dataclass
class SelectItem(Event):
    """A product was picked from a list; exactly one item is sent."""

    endpoint: ClassVar[str] = "/v1/catalog/select_item"
    action: ClassVar[EventAction] = EventAction.SELECT_ITEM

    item: Optional[Product] = None
    item_list_id: Optional[str] = None
    item_list_name: Optional[str] = None

    @classmethod
    def from_dict(cls, item: Mapping[str, Any]) -> SelectItem:
        return cls(Product.from_dict(item))

    def set_item(self, item: Product) -> SelectItem:
        self.item = item
        return self

    def _check_fields(self) -> None:
        if self.item is None:
            raise ValidationError.missing_required_field("items", self.action.value)

    def serialize(self) -> Dict[str, Any]:
        data = self._flat_base()
        if self.item_list_id is not None:
            data["item_list_id"] = self.item_list_id
        if self.item_list_name is not None:
            data["item_list_name"] = self.item_list_name
        if self.item is not None:
            data["items"] = [self.item.serialize()]
        return self._with_params(data)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

AnyEvent = Union[
    PageView,
    ProductView,
    AddToCart,
    RemoveFromCart,
    BeginCheckout,
    AddShippingInfo,
    AddPaymentInfo,
    Transaction,
    Subscribe,
    StartTrial,
    Search,
    FormSubmit,
    ViewItemList,
    SelectItem,
]

EVENT_TYPES = (
    PageView,
    ProductView,
    AddToCart,
    RemoveFromCart,
    BeginCheckout,
    AddShippingInfo,
    AddPaymentInfo,
    Transaction,
    Subscribe,
    StartTrial,
    Search,
    FormSubmit,
    ViewItemList,
    SelectItem,
)

"""AxiTrace — the main entry point for server-side tracking.

Usage::

    axitrace = AxiTrace.init("sk_live_...")
    axitrace.page_view("https://shop.example.com/", {"title": "Home"})
    axitrace.transaction(
        "ORDER-123", 99.99, 89.99, "USD", "CARD",
        [{"sku": "SKU-1", "name": "Blue Shirt", "price": 89.99, "quantity": 1}],
    )
    axitrace.close()

Each convenience method takes primitive arguments plus an options dict; the
options it recognises are lifted onto the event, everything else becomes
free-form ``params``.  Visitor identity is filled in when the event lacks
it: first from ids set on this client, then from the AxiTrace cookies of
the current request (unless cookie reading is disabled).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import httpx

from axitrace.config import Config
from axitrace.cookies import CookieReader
from axitrace.dispatch import EventsApi
from axitrace.events import (
    AddPaymentInfo,
    AddShippingInfo,
    AddToCart,
    BeginCheckout,
    ClientIdentityEvent,
    Event,
    FormSubmit,
    PageView,
    ProductView,
    RemoveFromCart,
    Search,
    SelectItem,
    StartTrial,
    Subscribe,
    Transaction,
    TransactionSource,
    ViewItemList,
)
from axitrace.models import Money, Product
from axitrace.response import Response
from axitrace.transport import HttpClient

logger = logging.getLogger(__name__)

ItemLike = Union[Product, Mapping[str, Any]]


def _as_product(item: ItemLike) -> Product:
    return item if isinstance(item, Product) else Product.from_dict(item)


class AxiTrace:
    def __init__(
        self,
        config: Config,
        http_client: Optional[httpx.Client] = None,
        cookies: Optional[CookieReader] = None,
    ):
        self.config = config
        self._http = HttpClient(config, http_client)
        self.events = EventsApi(self._http)
        self.cookies = cookies if cookies is not None else CookieReader()
        self.auto_read_cookies = True

        self.client_id: Optional[str] = None
        self.user_id: Optional[str] = None
        self.session_id: Optional[str] = None

    @classmethod
    def init(cls, secret_key: str, **options: Any) -> AxiTrace:
        return cls(Config(secret_key, **options))

    @classmethod
    def from_env(cls, **overrides: Any) -> AxiTrace:
        return cls(Config.from_env(**overrides))

    # ------------------------------------------------------------------ #
    # Identity defaults
    # ------------------------------------------------------------------ #

    def set_client_id(self, client_id: str) -> AxiTrace:
        self.client_id = client_id
        return self

    def set_user_id(self, user_id: str) -> AxiTrace:
        self.user_id = user_id
        return self

    def set_session_id(self, session_id: str) -> AxiTrace:
        self.session_id = session_id
        return self

    def disable_auto_read_cookies(self) -> AxiTrace:
        self.auto_read_cookies = False
        return self

    def enable_auto_read_cookies(self) -> AxiTrace:
        self.auto_read_cookies = True
        return self

    def default_client_id(self) -> Optional[str]:
        if self.client_id is not None:
            return self.client_id
        return self.cookies.visitor_id if self.auto_read_cookies else None

    def default_user_id(self) -> Optional[str]:
        if self.user_id is not None:
            return self.user_id
        return self.cookies.user_id if self.auto_read_cookies else None

    def default_session_id(self) -> Optional[str]:
        if self.session_id is not None:
            return self.session_id
        return self.cookies.session_id if self.auto_read_cookies else None

    def _apply_identity(self, event: Event) -> None:
        """Fill identity the event does not already carry."""
        if isinstance(event, ClientIdentityEvent):
            if event.client.custom_id is None:
                client_id = self.default_client_id()
                if client_id is not None:
                    event.set_client_custom_id(client_id)
        else:
            if event.identity.client_id is None:
                client_id = self.default_client_id()
                if client_id is not None:
                    event.set_client_id(client_id)
            if event.identity.user_id is None:
                user_id = self.default_user_id()
                if user_id is not None:
                    event.set_user_id(user_id)

        if event.identity.session_id is None:
            session_id = self.default_session_id()
            if session_id is not None:
                event.set_session_id(session_id)

        if self.auto_read_cookies:
            fbp, fbc = self.cookies.fbp, self.cookies.fbc
            if fbp is not None and "fbp" not in event.params:
                event.set_fbp(fbp)
            if fbc is not None and "fbc" not in event.params:
                event.set_fbc(fbc)

    # ------------------------------------------------------------------ #
    # Primary API
    # ------------------------------------------------------------------ #

    def track(self, event: Event) -> Response:
        """Fill in default identity, then validate and send ``event``."""
        self._apply_identity(event)
        return self.events.send(event)

    def _finish(self, event: Event, options: Dict[str, Any]) -> Response:
        if options:
            event.set_params(options)
        return self.track(event)

    def page_view(self, url: str, params: Optional[Mapping[str, Any]] = None) -> Response:
        options = dict(params or {})
        event = PageView(
            url,
            title=options.pop("title", None),
            referrer=options.pop("referrer", None),
            event_salt=options.pop("event_salt", None),
        )
        return self._finish(event, options)

    def product_view(
        self, product: ItemLike, params: Optional[Mapping[str, Any]] = None
    ) -> Response:
        return self._finish(ProductView(_as_product(product)), dict(params or {}))

    def add_to_cart(
        self,
        value: float,
        currency: str,
        items: Iterable[ItemLike],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Response:
        event = AddToCart(currency, value).set_items(items)
        return self._finish(event, dict(params or {}))

    def remove_from_cart(
        self,
        value: float,
        currency: str,
        items: Iterable[ItemLike],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Response:
        event = RemoveFromCart(currency, value).set_items(items)
        return self._finish(event, dict(params or {}))

    def begin_checkout(
        self,
        value: float,
        currency: str,
        items: Iterable[ItemLike],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Response:
        options = dict(params or {})
        event = BeginCheckout(currency, value, coupon=options.pop("coupon", None))
        event.set_items(items)
        return self._finish(event, options)

    def add_shipping_info(
        self,
        value: float,
        currency: str,
        items: Iterable[ItemLike],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Response:
        options = dict(params or {})
        event = AddShippingInfo(
            currency,
            value,
            shipping_tier=options.pop("shipping_tier", None),
            coupon=options.pop("coupon", None),
        )
        event.set_items(items)
        return self._finish(event, options)

    def add_payment_info(
        self,
        value: float,
        currency: str,
        items: Iterable[ItemLike],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Response:
        options = dict(params or {})
        event = AddPaymentInfo(
            currency,
            value,
            payment_type=options.pop("payment_type", None),
            coupon=options.pop("coupon", None),
        )
        event.set_items(items)
        return self._finish(event, options)

    def transaction(
        self,
        order_id: str,
        revenue: float,
        value: float,
        currency: str,
        payment_method: str,
        products: Iterable[Mapping[str, Any]],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Response:
        """Track a completed purchase.

        Recognised options: ``source`` (default WEB_DESKTOP), ``email``,
        ``discount_amount`` together with ``discount_currency``,
        ``metadata`` and ``event_salt``.
        """
        options = dict(params or {})
        event = Transaction.create(
            order_id,
            revenue,
            value,
            currency,
            payment_method,
            options.pop("source", TransactionSource.WEB_DESKTOP),
        )
        event.set_products(products)

        email = options.pop("email", None)
        if email is not None:
            event.set_client_email(email)

        discount = options.pop("discount_amount", None)
        discount_currency = options.pop("discount_currency", None)
        if discount is not None and discount_currency is not None:
            event.discount_amount = Money(discount, discount_currency)

        metadata = options.pop("metadata", None)
        if metadata:
            event.metadata = dict(metadata)

        event.event_salt = options.pop("event_salt", None)
        return self._finish(event, options)

    def subscribe(self, email: str, params: Optional[Mapping[str, Any]] = None) -> Response:
        options = dict(params or {})
        event = Subscribe(email, subscription_type=options.pop("subscription_type", None))
        return self._finish(event, options)

    def start_trial(
        self, plan_name: str, params: Optional[Mapping[str, Any]] = None
    ) -> Response:
        options = dict(params or {})
        event = StartTrial(plan_name)

        days = options.pop("trial_period_days", None)
        if days is not None:
            event.trial_period_days = int(days)

        trial_value = options.pop("trial_value", None)
        trial_currency = options.pop("trial_currency", None)
        if trial_value is not None and trial_currency is not None:
            event.set_trial_value(float(trial_value), trial_currency)

        ltv = options.pop("predicted_ltv", None)
        if ltv is not None:
            event.predicted_ltv = float(ltv)

        event.email = options.pop("email", None)
        return self._finish(event, options)

    def search(self, search_term: str, params: Optional[Mapping[str, Any]] = None) -> Response:
        options = dict(params or {})
        results_count = options.pop("results_count", None)
        page = options.pop("page", None)
        event = Search(
            search_term,
            results_count=int(results_count) if results_count is not None else None,
            category=options.pop("category", None),
            filters=options.pop("filters", None),
            sort_by=options.pop("sort_by", None),
            page=int(page) if page is not None else None,
        )
        return self._finish(event, options)

    def form_submit(
        self,
        label: str,
        form_data: Mapping[str, Any],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Response:
        """Track a form submission; a form ``email`` also identifies the client."""
        event = FormSubmit(label).set_form_params(form_data)
        email = form_data.get("email")
        if email:
            event.set_client_email(email)
        return self._finish(event, dict(params or {}))

    def view_item_list(self, params: Optional[Mapping[str, Any]] = None) -> Response:
        options = dict(params or {})
        event = ViewItemList(
            item_list_id=options.pop("item_list_id", None),
            item_list_name=options.pop("item_list_name", None),
        )
        items = options.pop("items", None)
        if items:
            event.set_items(items)
        return self._finish(event, options)

    def select_item(
        self, item: ItemLike, params: Optional[Mapping[str, Any]] = None
    ) -> Response:
        options = dict(params or {})
        event = SelectItem(
            _as_product(item),
            item_list_id=options.pop("item_list_id", None),
            item_list_name=options.pop("item_list_name", None),
        )
        return self._finish(event, options)

    def send_batch(self, events: Iterable[Event]) -> List[Response]:
        """Apply default identity to each event and send them in order."""
        events = list(events)
        for event in events:
            self._apply_identity(event)
        return self.events.send_batch(events)

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def close(self) -> None:
        self._http.close()
        logger.info("AxiTrace client closed")

    def __enter__(self) -> AxiTrace:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

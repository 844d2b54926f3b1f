"""AxiTrace — server-side event tracking client.

Builds typed commerce and engagement events (page views, cart actions,
checkout steps, transactions, subscriptions, searches, form submits,
catalog interactions), validates them locally and sends them to the
AxiTrace tracking API.

Integration points (pick any or combine):
    1. AxiTrace client     — one convenience method per event type
    2. EventsApi           — send hand-built event objects
    3. Starlette middleware — lets the client read visitor cookies
"""

from axitrace.client import AxiTrace
from axitrace.config import Config
from axitrace.cookies import CookieReader
from axitrace.dispatch import EventsApi
from axitrace.events import (
    AddPaymentInfo,
    AddShippingInfo,
    AddToCart,
    AnyEvent,
    BeginCheckout,
    Event,
    EventAction,
    FormSubmit,
    Identity,
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
from axitrace.exceptions import (
    ApiError,
    AuthenticationError,
    AxiTraceError,
    ConfigurationError,
    ValidationError,
    ValidationReason,
)
from axitrace.models import ClientIdentity, Money, Product
from axitrace.response import Response
from axitrace.transport import HttpClient


def __getattr__(name: str):
    if name == "AxiTraceCookieMiddleware":
        from axitrace.middleware import AxiTraceCookieMiddleware

        return AxiTraceCookieMiddleware
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "AxiTrace",
    "Config",
    "CookieReader",
    "EventsApi",
    "HttpClient",
    "Response",
    "AxiTraceCookieMiddleware",
    # models
    "Money",
    "Product",
    "ClientIdentity",
    # events
    "Event",
    "AnyEvent",
    "EventAction",
    "Identity",
    "TransactionSource",
    "PageView",
    "ProductView",
    "AddToCart",
    "RemoveFromCart",
    "BeginCheckout",
    "AddShippingInfo",
    "AddPaymentInfo",
    "Transaction",
    "Subscribe",
    "StartTrial",
    "Search",
    "FormSubmit",
    "ViewItemList",
    "SelectItem",
    # errors
    "AxiTraceError",
    "ConfigurationError",
    "ValidationError",
    "ValidationReason",
    "AuthenticationError",
    "ApiError",
]

__version__ = "0.1.0"

"""Global enums shared by the offer domain and the API layer."""

from enum import Enum


class Direction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class OfferState(str, Enum):
    """Network-visible lifecycle of an Offer."""
    UNKNOWN = "UNKNOWN"
    OFFER_FEE_PAID = "OFFER_FEE_PAID"
    AVAILABLE = "AVAILABLE"
    NOT_AVAILABLE = "NOT_AVAILABLE"
    REMOVED = "REMOVED"


class OpenOfferState(str, Enum):
    """Local-only state of an OpenOffer; never shared over the network."""
    AVAILABLE = "AVAILABLE"
    RESERVED = "RESERVED"
    CLOSED = "CLOSED"
    CANCELED = "CANCELED"
    DEACTIVATED = "DEACTIVATED"


class EditType(str, Enum):
    """Which subset of an offer's mutable fields an edit touches."""
    ACTIVATION_STATE_ONLY = "ACTIVATION_STATE_ONLY"
    FIXED_PRICE_ONLY = "FIXED_PRICE_ONLY"
    FIXED_PRICE_AND_ACTIVATION_STATE = "FIXED_PRICE_AND_ACTIVATION_STATE"
    MKT_PRICE_MARGIN_ONLY = "MKT_PRICE_MARGIN_ONLY"
    MKT_PRICE_MARGIN_AND_ACTIVATION_STATE = "MKT_PRICE_MARGIN_AND_ACTIVATION_STATE"
    TRIGGER_PRICE_ONLY = "TRIGGER_PRICE_ONLY"
    TRIGGER_PRICE_AND_ACTIVATION_STATE = "TRIGGER_PRICE_AND_ACTIVATION_STATE"
    MKT_PRICE_MARGIN_AND_TRIGGER_PRICE = "MKT_PRICE_MARGIN_AND_TRIGGER_PRICE"
    MKT_PRICE_MARGIN_AND_TRIGGER_PRICE_AND_ACTIVATION_STATE = (
        "MKT_PRICE_MARGIN_AND_TRIGGER_PRICE_AND_ACTIVATION_STATE"
    )


class ActivationChange(int, Enum):
    """Tri-state activation request sent by clients as a signed int.

    -1 keeps the current state, 1 enables (AVAILABLE), 0 disables (DEACTIVATED).
    """
    UNSPECIFIED = -1
    DISABLE = 0
    ENABLE = 1


class FeeCurrency(str, Enum):
    BTC = "BTC"
    BSQ = "BSQ"

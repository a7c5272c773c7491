"""Edit-type decision table.

Every EditType maps to the set of things it changes. Adding an EditType
without a row here fails at import time.
"""
from dataclasses import dataclass

from src.pm_common.enums import EditType


@dataclass(frozen=True)
class EditScope:
    fixed_price: bool = False
    market_price_margin: bool = False
    trigger_price: bool = False
    activation_state: bool = False

    @property
    def uses_market_price_margin(self) -> bool:
        """Margin or trigger edits; the group that may touch margin fields."""
        return self.market_price_margin or self.trigger_price


EDIT_SCOPES: dict[EditType, EditScope] = {
    EditType.ACTIVATION_STATE_ONLY: EditScope(activation_state=True),
    EditType.FIXED_PRICE_ONLY: EditScope(fixed_price=True),
    EditType.FIXED_PRICE_AND_ACTIVATION_STATE: EditScope(fixed_price=True, activation_state=True),
    EditType.MKT_PRICE_MARGIN_ONLY: EditScope(market_price_margin=True),
    EditType.MKT_PRICE_MARGIN_AND_ACTIVATION_STATE: EditScope(
        market_price_margin=True, activation_state=True
    ),
    EditType.TRIGGER_PRICE_ONLY: EditScope(trigger_price=True),
    EditType.TRIGGER_PRICE_AND_ACTIVATION_STATE: EditScope(
        trigger_price=True, activation_state=True
    ),
    EditType.MKT_PRICE_MARGIN_AND_TRIGGER_PRICE: EditScope(
        market_price_margin=True, trigger_price=True
    ),
    EditType.MKT_PRICE_MARGIN_AND_TRIGGER_PRICE_AND_ACTIVATION_STATE: EditScope(
        market_price_margin=True, trigger_price=True, activation_state=True
    ),
}

_missing = set(EditType) - EDIT_SCOPES.keys()
if _missing:
    raise RuntimeError(f"EditType without EditScope: {sorted(m.value for m in _missing)}")


def scope_of(edit_type: EditType) -> EditScope:
    return EDIT_SCOPES[edit_type]

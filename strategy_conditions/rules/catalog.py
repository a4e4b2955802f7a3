"""
Factor, operator and value-type catalog.

The catalog is configuration handed to the builder and the presentation
layer. The core never checks rules against it; it only uses it to pick
defaults for new rules and to look up display labels.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from .models import Operator, ValueType

if TYPE_CHECKING:
    from strategy_conditions.config.settings import Settings


# Reference entries offered by the strategy editor: signal, indicator,
# bar, live price and position-state factors.
REFERENCE_FACTORS: Dict[str, str] = {
    "SIG.DIRECTION": "Signal direction",
    "SIG.INTENT_ID": "Signal intent",
    "IND.RSI_14": "RSI(14)",
    "IND.MACD": "MACD",
    "IND.MACD.SIGNAL": "MACD signal line",
    "BAR.OPEN": "Bar open",
    "BAR.HIGH": "Bar high",
    "BAR.LOW": "Bar low",
    "BAR.CLOSE": "Bar close",
    "BAR.VOLUME": "Bar volume",
    "PX.LAST": "Last price",
    "STATE.POSITION_SIDE": "Position side",
    "STATE.POSITION_QTY": "Position quantity",
    "STATE.STOP_LOSS_PRICE": "Stop-loss price",
}

OPERATOR_LABELS: Dict[str, str] = {
    Operator.GT.value: ">",
    Operator.LT.value: "<",
    Operator.GTE.value: ">=",
    Operator.LTE.value: "<=",
    Operator.EQ.value: "=",
    Operator.NEQ.value: "!=",
    Operator.CONTAINS.value: "contains",
    Operator.STARTS_WITH.value: "starts with",
    Operator.ENDS_WITH.value: "ends with",
}


@dataclass(frozen=True)
class ConditionCatalog:
    """Valid factor keys (with labels), operators and value types."""
    factors: Dict[str, str] = field(default_factory=lambda: dict(REFERENCE_FACTORS))
    operators: Tuple[str, ...] = tuple(op.value for op in Operator)
    value_types: Tuple[str, ...] = tuple(t.value for t in ValueType)
    default_operator: str = Operator.LT.value
    default_value_type: str = ValueType.NUMBER.value

    @property
    def default_factor(self) -> str:
        """First factor key, or an empty string for an empty catalog."""
        return next(iter(self.factors), "")

    def label_for(self, factor: str) -> str:
        return self.factors.get(factor, factor)

    def operator_label(self, operator: str) -> str:
        return OPERATOR_LABELS.get(operator, operator)

    def has_factor(self, factor: str) -> bool:
        return factor in self.factors


REFERENCE_CATALOG = ConditionCatalog()


def catalog_from_settings(settings: Optional["Settings"] = None) -> ConditionCatalog:
    """
    Build a catalog from the ``catalog`` settings section.

    Falls back to the reference catalog when no factors are configured.

    Args:
        settings: Settings to read; the global settings when None

    Returns:
        ConditionCatalog instance
    """
    if settings is None:
        from strategy_conditions.config.settings import get_settings
        settings = get_settings()

    cfg = settings.catalog
    if not cfg.factors:
        return REFERENCE_CATALOG

    return ConditionCatalog(
        factors=dict(cfg.factors),
        default_operator=cfg.default_operator,
        default_value_type=cfg.default_value_type,
    )

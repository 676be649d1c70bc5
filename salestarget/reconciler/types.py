# ==============================================================================
# salestarget/reconciler/types.py
# ------------------------------------------------------------------------------
# Transient records built while reconciling one sales file.
# ==============================================================================

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class LineItem:
    model: str = ''
    brand: str = ''
    net_amount: float = 0.0


@dataclass
class Invoice:
    """All rows of one canonical invoice number within a salesperson block."""
    invoice_no: str
    customer: str = ''
    net_invoice: float = 0.0
    amount_realised: float = 0.0
    invoice_value: float = 0.0
    credit_card_charges: float = 0.0
    negative_round_off: float = 0.0
    positive_round_off: float = 0.0
    cash_discount: float = 0.0
    items: List[LineItem] = field(default_factory=list)

    @property
    def final_invoice_value(self):
        return (self.invoice_value
                - self.credit_card_charges
                - self.negative_round_off
                + self.positive_round_off
                - self.cash_discount)


@dataclass
class AchievementDelta:
    own: float = 0.0
    other: float = 0.0

    @property
    def total(self):
        return self.own + self.other

    def scaled(self, factor):
        return AchievementDelta(own=self.own * factor, other=self.other * factor)

    def __add__(self, other):
        return AchievementDelta(own=self.own + other.own, other=self.other + other.other)

    def to_dict(self):
        return {'own': self.own, 'other': self.other, 'total': self.total}


@dataclass
class BlockResult:
    salesperson: Any
    delta: AchievementDelta


@dataclass
class ReconciliationReport:
    """Outcome of one sales sheet: deltas per salesperson and the blocks that were dropped."""
    year: int
    month: int
    deltas: Dict[str, AchievementDelta] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)
    returned_invoice_count: int = 0

    def to_dict(self):
        return {
            'year': self.year,
            'month': self.month,
            'results': {name: delta.to_dict() for name, delta in self.deltas.items()},
            'skipped': list(self.skipped),
            'returnedInvoiceCount': self.returned_invoice_count,
        }

"""
Pydantic schemas for GST calculations.

A calculation holds exact values. Rounding to the currency's
minor unit happens only when rounded() is called, never while
the split is being computed.
"""

import decimal
from decimal import Decimal

from pydantic import BaseModel, Field

from accounting_core.config import get_settings
from accounting_core.models.enums import GstCategory


def round_money(
    value: Decimal,
    places: int | None = None,
    rounding: str | None = None,
) -> Decimal:
    """
    Round a monetary value for display.

    Defaults come from MONEY_DECIMAL_PLACES and MONEY_ROUNDING,
    i.e. two places with ROUND_HALF_UP (nearest paisa, halves
    away from zero).
    """
    settings = get_settings()
    if places is None:
        places = settings.MONEY_DECIMAL_PLACES
    if rounding is None:
        rounding = settings.MONEY_ROUNDING
    mode = getattr(decimal, rounding)
    return value.quantize(Decimal(1).scaleb(-places), rounding=mode)


class GstCalculation(BaseModel):
    """Breakdown of the tax on a single base amount."""
    base_amount: Decimal
    rate: Decimal
    is_inter_state: bool
    cgst_amount: Decimal
    sgst_amount: Decimal
    igst_amount: Decimal
    total_gst_amount: Decimal
    total_amount: Decimal

    model_config = {"frozen": True}

    def rounded(self, places: int | None = None) -> "GstCalculation":
        """Return a copy with every amount rounded for display."""
        return self.model_copy(update={
            "base_amount": round_money(self.base_amount, places),
            "cgst_amount": round_money(self.cgst_amount, places),
            "sgst_amount": round_money(self.sgst_amount, places),
            "igst_amount": round_money(self.igst_amount, places),
            "total_gst_amount": round_money(self.total_gst_amount, places),
            "total_amount": round_money(self.total_amount, places),
        })


class InvoiceLine(BaseModel):
    """
    An invoice line as supplied by the caller.

    Either rate or category must be set. The taxable base of the
    line is unit_price * quantity.
    """
    description: str
    unit_price: Decimal
    quantity: Decimal = Decimal("1")
    rate: Decimal | None = None
    category: GstCategory | None = None

    @property
    def base_amount(self) -> Decimal:
        return self.unit_price * self.quantity


class GstLineItem(BaseModel):
    """A calculated invoice line."""
    description: str
    quantity: Decimal
    unit_price: Decimal
    calculation: GstCalculation


class GstInvoice(BaseModel):
    """Per-line calculations and their component-wise totals."""
    line_items: list[GstLineItem]
    total_before_gst: Decimal
    total_cgst: Decimal
    total_sgst: Decimal
    total_igst: Decimal
    total_gst: Decimal
    grand_total: Decimal

    def rounded(self, places: int | None = None) -> "GstInvoice":
        return self.model_copy(update={
            "line_items": [
                item.model_copy(update={
                    "calculation": item.calculation.rounded(places),
                })
                for item in self.line_items
            ],
            "total_before_gst": round_money(self.total_before_gst, places),
            "total_cgst": round_money(self.total_cgst, places),
            "total_sgst": round_money(self.total_sgst, places),
            "total_igst": round_money(self.total_igst, places),
            "total_gst": round_money(self.total_gst, places),
            "grand_total": round_money(self.grand_total, places),
        })


# --- Request Schemas ---

class GstCalculateRequest(BaseModel):
    """
    Forward calculation request. Supply rate or category;
    when both are given the rate overrides the category.
    """
    base_amount: Decimal
    rate: Decimal | None = None
    category: GstCategory | None = None
    is_inter_state: bool | None = None


class GstReverseRequest(BaseModel):
    """Reverse calculation request. Supply rate or category."""
    total_amount: Decimal
    rate: Decimal | None = None
    category: GstCategory | None = None
    is_inter_state: bool | None = None


class GstInvoiceRequest(BaseModel):
    line_items: list[InvoiceLine] = Field(min_length=1)
    is_inter_state: bool | None = None

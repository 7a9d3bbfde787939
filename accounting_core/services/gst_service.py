"""
GST calculation engine.

Pure arithmetic, no storage. Rates are fractions of the base
amount (Decimal("0.18") is 18%).

Intra-state supply splits the tax evenly into CGST (central)
and SGST (state). Inter-state supply charges the whole tax as
IGST. All arithmetic is exact Decimal; results are only rounded
when the caller asks for rounded() output.
"""

import logging
from decimal import Decimal, InvalidOperation

from accounting_core.config import get_settings
from accounting_core.errors import (
    InvalidCategoryError,
    InvalidRateError,
    NonPositiveAmountError,
)
from accounting_core.models.enums import GstCategory
from accounting_core.schemas.gst import (
    GstCalculation,
    GstInvoice,
    GstLineItem,
    InvoiceLine,
)
from accounting_core.services.transaction_service import to_amount, to_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
TWO = Decimal("2")


class GstCalculator:

    def __init__(self, is_inter_state: bool | None = None):
        if is_inter_state is None:
            is_inter_state = get_settings().GST_INTER_STATE
        self.is_inter_state = is_inter_state
        self.custom_rates: dict[str, Decimal] = {}

    def _inter_state(self, override: bool | None) -> bool:
        return self.is_inter_state if override is None else override

    @staticmethod
    def _check_rate(rate) -> Decimal:
        try:
            rate = to_decimal(rate)
        except ValueError as e:
            raise InvalidRateError(
                f"GST rate must be a finite number: {rate!r}"
            ) from e
        if rate < 0:
            raise InvalidRateError(f"GST rate cannot be negative: {rate}")
        return rate

    def calculate(
        self,
        base_amount,
        rate,
        is_inter_state: bool | None = None,
    ) -> GstCalculation:
        """
        Split the tax on base_amount at the given rate.

        Intra-state: cgst = sgst = base * rate / 2, igst = 0
        Inter-state: igst = base * rate, cgst = sgst = 0
        """
        rate = self._check_rate(rate)
        base_amount = to_amount(base_amount)
        if base_amount <= 0:
            raise NonPositiveAmountError(
                f"Base amount must be positive: {base_amount}"
            )

        tax = base_amount * rate
        if self._inter_state(is_inter_state):
            cgst = sgst = ZERO
            igst = tax
        else:
            cgst = sgst = tax / TWO
            igst = ZERO

        total_gst = cgst + sgst + igst
        logger.debug("GST on %s at %s: %s", base_amount, rate, total_gst)
        return GstCalculation(
            base_amount=base_amount,
            rate=rate,
            is_inter_state=self._inter_state(is_inter_state),
            cgst_amount=cgst,
            sgst_amount=sgst,
            igst_amount=igst,
            total_gst_amount=total_gst,
            total_amount=base_amount + total_gst,
        )

    @staticmethod
    def _category(category) -> GstCategory:
        try:
            return GstCategory(category)
        except ValueError:
            raise InvalidCategoryError(
                f"Unknown GST category: {category!r}"
            ) from None

    def rate_for_category(self, category: GstCategory) -> Decimal:
        return self._category(category).rate

    def calculate_by_category(
        self,
        base_amount,
        category: GstCategory,
        override_rate=None,
        is_inter_state: bool | None = None,
    ) -> GstCalculation:
        """Calculate at the category's standard rate, or override_rate if given."""
        if override_rate is not None:
            rate = override_rate
        else:
            rate = self.rate_for_category(category)
        return self.calculate(base_amount, rate, is_inter_state)

    def reverse_calculate(
        self,
        total_amount,
        rate,
        is_inter_state: bool | None = None,
    ) -> GstCalculation:
        """
        Work back from a tax-inclusive total.

        base = total / (1 + rate), then the forward split is
        recomputed from that base.
        """
        rate = self._check_rate(rate)
        total_amount = to_amount(total_amount)
        if total_amount <= 0:
            raise NonPositiveAmountError(
                f"Total amount must be positive: {total_amount}"
            )
        base_amount = total_amount / (1 + rate)
        return self.calculate(base_amount, rate, is_inter_state)

    def reverse_calculate_by_category(
        self,
        total_amount,
        category: GstCategory,
        is_inter_state: bool | None = None,
    ) -> GstCalculation:
        """Work back from a total taxed at the category's standard rate."""
        rate = self.rate_for_category(category)
        return self.reverse_calculate(total_amount, rate, is_inter_state)

    # --- Custom product rates ---

    def set_custom_rate(self, product_code: str, rate) -> None:
        """Register a rate for a product outside the standard slabs."""
        self.custom_rates[product_code] = self._check_rate(rate)

    def calculate_by_product(
        self,
        base_amount,
        product_code: str,
        is_inter_state: bool | None = None,
    ) -> GstCalculation:
        rate = self.custom_rates.get(product_code)
        if rate is None:
            raise InvalidCategoryError(
                f"No GST rate registered for product '{product_code}'"
            )
        return self.calculate(base_amount, rate, is_inter_state)

    # --- Invoices ---

    def _to_line(self, item) -> InvoiceLine:
        """
        Accept an InvoiceLine or a (description, base_amount, tax) tuple.

        tax is a rate, a GstCategory, or a string holding either
        ("0.18" or "HIGHER").
        """
        if isinstance(item, InvoiceLine):
            return item
        description, base_amount, tax = item
        if isinstance(tax, str):
            try:
                tax = Decimal(tax)
            except InvalidOperation:
                tax = self._category(tax)
        if isinstance(tax, GstCategory):
            return InvoiceLine(
                description=description,
                unit_price=to_amount(base_amount),
                category=tax,
            )
        return InvoiceLine(
            description=description,
            unit_price=to_amount(base_amount),
            rate=self._check_rate(tax),
        )

    def calculate_invoice(
        self,
        line_items,
        is_inter_state: bool | None = None,
    ) -> GstInvoice:
        """
        Calculate every line, then total each tax component.

        Stops at the first line that fails; no partial invoice
        is returned.
        """
        items = []
        for item in line_items:
            line = self._to_line(item)
            if line.rate is not None:
                calculation = self.calculate(
                    line.base_amount, line.rate, is_inter_state
                )
            elif line.category is not None:
                calculation = self.calculate_by_category(
                    line.base_amount, line.category,
                    is_inter_state=is_inter_state,
                )
            else:
                raise InvalidCategoryError(
                    f"Line '{line.description}' has neither a rate nor a category"
                )
            items.append(GstLineItem(
                description=line.description,
                quantity=line.quantity,
                unit_price=line.unit_price,
                calculation=calculation,
            ))

        total_before_gst = sum((i.calculation.base_amount for i in items), ZERO)
        total_cgst = sum((i.calculation.cgst_amount for i in items), ZERO)
        total_sgst = sum((i.calculation.sgst_amount for i in items), ZERO)
        total_igst = sum((i.calculation.igst_amount for i in items), ZERO)
        total_gst = total_cgst + total_sgst + total_igst

        return GstInvoice(
            line_items=items,
            total_before_gst=total_before_gst,
            total_cgst=total_cgst,
            total_sgst=total_sgst,
            total_igst=total_igst,
            total_gst=total_gst,
            grand_total=total_before_gst + total_gst,
        )

"""
GST API endpoints.

Responses are rounded to the configured minor unit; the
calculator itself works with exact values.
"""

from fastapi import APIRouter, Depends, HTTPException

from accounting_core.api.dependencies import get_gst_calculator, http_error
from accounting_core.errors import LedgerError
from accounting_core.schemas.gst import (
    GstCalculateRequest,
    GstCalculation,
    GstInvoice,
    GstInvoiceRequest,
    GstReverseRequest,
)
from accounting_core.services.gst_service import GstCalculator

router = APIRouter(prefix="/gst", tags=["GST"])


@router.post("/calculate", response_model=GstCalculation)
def calculate(
    request: GstCalculateRequest,
    calculator: GstCalculator = Depends(get_gst_calculator),
):
    """Forward calculation from a base amount and a rate or category."""
    if request.rate is None and request.category is None:
        raise HTTPException(
            status_code=400, detail="Either rate or category is required"
        )
    try:
        if request.category is not None:
            result = calculator.calculate_by_category(
                request.base_amount,
                request.category,
                override_rate=request.rate,
                is_inter_state=request.is_inter_state,
            )
        else:
            result = calculator.calculate(
                request.base_amount, request.rate, request.is_inter_state
            )
    except LedgerError as e:
        raise http_error(e)
    return result.rounded()


@router.post("/reverse", response_model=GstCalculation)
def reverse(
    request: GstReverseRequest,
    calculator: GstCalculator = Depends(get_gst_calculator),
):
    """Work back from a tax-inclusive total to its base and tax."""
    if request.rate is None and request.category is None:
        raise HTTPException(
            status_code=400, detail="Either rate or category is required"
        )
    try:
        if request.rate is not None:
            result = calculator.reverse_calculate(
                request.total_amount, request.rate, request.is_inter_state
            )
        else:
            result = calculator.reverse_calculate_by_category(
                request.total_amount, request.category, request.is_inter_state
            )
    except LedgerError as e:
        raise http_error(e)
    return result.rounded()


@router.post("/invoice", response_model=GstInvoice)
def invoice(
    request: GstInvoiceRequest,
    calculator: GstCalculator = Depends(get_gst_calculator),
):
    try:
        result = calculator.calculate_invoice(
            request.line_items, request.is_inter_state
        )
    except LedgerError as e:
        raise http_error(e)
    return result.rounded()

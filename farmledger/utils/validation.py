"""Input validation for loan commands and calculator entries."""
import math
from typing import Sequence

from farmledger.models.computation import MolassesEntry, SugarcaneEntry


class LedgerValidationError(Exception):
    """Base error for rejected bookkeeping input."""
    pass


class LoanValidationError(LedgerValidationError):
    pass


class CalculatorValidationError(LedgerValidationError):
    pass


class LoanConflictError(Exception):
    """The loan kept changing underneath a read-modify-write update."""
    pass


def _is_number(value) -> bool:
    """Finite number; NaN and infinity are rejected."""
    return value is not None and math.isfinite(value)


def validate_loan_amount(amount: float) -> None:
    """Principal must be positive."""
    if not _is_number(amount) or amount <= 0:
        raise LoanValidationError(f"Loan amount must be positive: {amount}")


def validate_payment_amount(amount: float) -> None:
    if not _is_number(amount) or amount <= 0:
        raise LoanValidationError(f"Payment amount must be positive: {amount}")


def validate_usage_amount(amount: float) -> None:
    if not _is_number(amount) or amount <= 0:
        raise LoanValidationError(f"Usage amount must be positive: {amount}")


def validate_renewal_payment(amount: float) -> None:
    """A renewal may be made without paying anything."""
    if not _is_number(amount) or amount < 0:
        raise LoanValidationError(f"Renewal payment cannot be negative: {amount}")


def validate_due_date(loan_date: str, due_date: str) -> None:
    # ISO dates compare correctly as strings
    if loan_date and due_date and due_date < loan_date:
        raise LoanValidationError(
            f"Due date {due_date} is before loan date {loan_date}"
        )


def validate_entries(
    sugarcane_entries: Sequence[SugarcaneEntry],
    molasses_entries: Sequence[MolassesEntry]
) -> None:
    """
    Validate calculator line items.

    Rules:
    - prices must be non-negative
    - bags and kilos must be non-negative
    - at least one line item overall
    """
    if not sugarcane_entries and not molasses_entries:
        raise CalculatorValidationError("Computation needs at least one entry")

    for entry in sugarcane_entries:
        if entry.price < 0 or entry.bags < 0:
            raise CalculatorValidationError(
                f"Sugarcane entry has negative value: {entry.bags} bags at {entry.price}"
            )

    for entry in molasses_entries:
        if entry.price < 0 or entry.kilos < 0:
            raise CalculatorValidationError(
                f"Molasses entry has negative value: {entry.kilos} kilos at {entry.price}"
            )


def validate_debt_amount(amount: float) -> None:
    if not _is_number(amount) or amount <= 0:
        raise LedgerValidationError(f"Debt amount must be positive: {amount}")

"""
Loan lifecycle - balances, payments, usages and renewals.

The transitions (``open_loan``, ``apply_payment``, ``apply_usage``,
``apply_renewal``) are pure: they take a loan and return the next loan.
``LoanService`` persists them as a compare-and-set on the loan's version,
re-reading and retrying when another writer changed the loan in between.

Payments and renewal payments are mirrored into the expenses collection so
they show up in expense reports. Mirroring is best effort: a failure is
logged and the loan update stands.
"""

from datetime import date
from typing import Callable, List, Optional

from farmledger.core.config import settings
from farmledger.core.logging import get_logger
from farmledger.db.session import get_database
from farmledger.models.expense import ExpenseCategory, OtherExpense
from farmledger.models.loan import Loan, LoanPayment, LoanRenewal, LoanUsage
from farmledger.repositories.farm_store import FarmStore
from farmledger.schemas.loan import (
    LoanCreate,
    LoanPaymentCreate,
    LoanRenewRequest,
    LoanUpdate,
    LoanUsageCreate,
)
from farmledger.utils.validation import (
    LoanConflictError,
    validate_due_date,
    validate_loan_amount,
    validate_payment_amount,
    validate_renewal_payment,
    validate_usage_amount,
)

log = get_logger("loans")

# Fields a transition may change; everything else is left to update_details
STATE_FIELDS = (
    "due_date",
    "remaining_balance",
    "total_paid_current",
    "total_paid_lifetime",
    "paid",
    "payments",
    "usages",
    "renewals",
)


# --- Transitions -----------------------------------------------------------

def open_loan(description: str, total_amount: float, loan_date: str, due_date: str) -> Loan:
    validate_loan_amount(total_amount)
    validate_due_date(loan_date, due_date)
    return Loan(
        description=description,
        loan_date=loan_date,
        due_date=due_date,
        total_amount=total_amount,
        remaining_balance=total_amount,
        total_paid_current=0,
        total_paid_lifetime=0,
        paid=False,
        payments=[],
        usages=[],
        renewals=[],
    )


def apply_payment(loan: Loan, payment: LoanPayment) -> Loan:
    validate_payment_amount(payment.amount)
    total_paid_current = loan.total_paid_current + payment.amount
    remaining = max(0, loan.total_amount - total_paid_current)
    return loan.model_copy(update={
        "payments": [*loan.payments, payment],
        "total_paid_current": total_paid_current,
        "total_paid_lifetime": loan.total_paid_lifetime + payment.amount,
        "remaining_balance": remaining,
        "paid": remaining <= 0,
    })


def apply_usage(loan: Loan, usage: LoanUsage) -> Loan:
    """Log a drawdown. Balances are untouched."""
    validate_usage_amount(usage.amount)
    return loan.model_copy(update={"usages": [*loan.usages, usage]})


def apply_renewal(loan: Loan, renewal: LoanRenewal) -> Loan:
    """
    Start a new cycle.

    The renewal payment lowers the new cycle's opening balance. Current-cycle
    payments are cleared; the lifetime total and the principal are kept.
    """
    validate_renewal_payment(renewal.renewal_payment)
    remaining = max(0, loan.total_amount - renewal.renewal_payment)
    record = renewal.model_copy(update={
        "previous_due_date": loan.due_date,
        "previous_remaining_balance": loan.remaining_balance,
        "new_remaining_balance": remaining,
    })
    return loan.model_copy(update={
        "due_date": renewal.new_due_date,
        "remaining_balance": remaining,
        "total_paid_current": 0,
        "payments": [],
        "paid": remaining <= 0,
        "renewals": [*loan.renewals, record],
    })


def _state_of(loan: Loan) -> dict:
    doc = loan.to_document()
    return {field: doc[field] for field in STATE_FIELDS}


def _today() -> str:
    return date.today().isoformat()


class LoanService:
    @staticmethod
    async def _store(farm_id: Optional[str]) -> FarmStore:
        db = await get_database()
        return FarmStore(db, farm_id)

    @staticmethod
    async def list(farm_id: Optional[str] = None) -> List[Loan]:
        store = await LoanService._store(farm_id)
        return await store.loans.list_newest_first()

    @staticmethod
    async def get(loan_id: str, farm_id: Optional[str] = None) -> Optional[Loan]:
        store = await LoanService._store(farm_id)
        return await store.loans.get(loan_id)

    @staticmethod
    async def create(loan_in: LoanCreate, farm_id: Optional[str] = None) -> Loan:
        loan = open_loan(loan_in.description, loan_in.total_amount, loan_in.loan_date, loan_in.due_date)
        store = await LoanService._store(farm_id)
        loan = await store.loans.create(loan)
        log.info("Created loan %s for %.2f", loan.id, loan.total_amount)
        return loan

    @staticmethod
    async def update_details(loan_id: str, loan_in: LoanUpdate, farm_id: Optional[str] = None) -> Optional[Loan]:
        store = await LoanService._store(farm_id)
        updates = loan_in.model_dump(exclude_unset=True, exclude_none=True)
        if "loan_date" in updates or "due_date" in updates:
            existing = await store.loans.get(loan_id)
            if existing is None:
                return None
            validate_due_date(
                updates.get("loan_date", existing.loan_date),
                updates.get("due_date", existing.due_date),
            )
        return await store.loans.update(loan_id, updates)

    @staticmethod
    async def _transition(store: FarmStore, loan_id: str, transition: Callable[[Loan], Loan]) -> Optional[Loan]:
        """Read the latest loan, compute the next state, write it if unchanged meanwhile."""
        for attempt in range(1, settings.LOAN_UPDATE_MAX_RETRIES + 1):
            current = await store.loans.get(loan_id)
            if current is None:
                return None
            updated = await store.loans.compare_and_set(loan_id, current.version, _state_of(transition(current)))
            if updated is not None:
                return updated
            log.warning("Loan %s changed during update (attempt %d), retrying", loan_id, attempt)
        raise LoanConflictError(f"Loan {loan_id} is being modified concurrently, try again")

    @staticmethod
    async def _mirror_expense(
        store: FarmStore,
        loan: Loan,
        name: str,
        description: str,
        amount: float,
        expense_date: str,
        category: str
    ) -> Optional[str]:
        try:
            expense = await store.expenses.create(OtherExpense(
                name=name,
                description=description,
                amount=amount,
                date=expense_date,
                category=category,
                related_loan_id=loan.id,
            ))
            return expense.id
        except Exception:
            log.exception("Failed to create linked expense for loan %s", loan.id)
            return None

    @staticmethod
    async def add_payment(loan_id: str, payment_in: LoanPaymentCreate, farm_id: Optional[str] = None) -> Optional[Loan]:
        validate_payment_amount(payment_in.amount)
        store = await LoanService._store(farm_id)
        payment = LoanPayment(loan_id=loan_id, amount=payment_in.amount, payment_date=payment_in.payment_date)

        loan = await LoanService._transition(store, loan_id, lambda current: apply_payment(current, payment))
        if loan is None:
            return None
        log.info("Loan %s paid %.2f, remaining %.2f", loan_id, payment.amount, loan.remaining_balance)

        expense_id = await LoanService._mirror_expense(
            store, loan,
            name="Loan Payment",
            description=f"Payment for loan: {loan.description}",
            amount=payment.amount,
            expense_date=payment.payment_date,
            category=ExpenseCategory.LOAN_REPAYMENT,
        )
        if expense_id is not None:
            await LoanService._link(store.loans.link_payment_expense, loan, loan.payments, payment.id, expense_id)
        return loan

    @staticmethod
    async def add_usage(loan_id: str, usage_in: LoanUsageCreate, farm_id: Optional[str] = None) -> Optional[Loan]:
        validate_usage_amount(usage_in.amount)
        store = await LoanService._store(farm_id)
        usage = LoanUsage(
            loan_id=loan_id,
            description=usage_in.description,
            amount=usage_in.amount,
            usage_date=usage_in.usage_date,
        )
        loan = await LoanService._transition(store, loan_id, lambda current: apply_usage(current, usage))
        if loan is not None:
            log.info("Loan %s used %.2f for %s", loan_id, usage.amount, usage.description)
        return loan

    @staticmethod
    async def renew(loan_id: str, renew_in: LoanRenewRequest, farm_id: Optional[str] = None) -> Optional[Loan]:
        validate_renewal_payment(renew_in.renewal_payment)
        store = await LoanService._store(farm_id)
        renewal = LoanRenewal(
            loan_id=loan_id,
            previous_due_date="",
            new_due_date=renew_in.new_due_date,
            renewal_payment=renew_in.renewal_payment,
        )

        loan = await LoanService._transition(store, loan_id, lambda current: apply_renewal(current, renewal))
        if loan is None:
            return None
        log.info("Loan %s renewed until %s, balance %.2f", loan_id, loan.due_date, loan.remaining_balance)

        if renewal.renewal_payment > 0:
            expense_id = await LoanService._mirror_expense(
                store, loan,
                name="Loan Renewal Payment",
                description=f"Renewal payment for loan: {loan.description}",
                amount=renewal.renewal_payment,
                expense_date=renew_in.renewal_date or _today(),
                category=ExpenseCategory.LOAN_RENEWAL,
            )
            if expense_id is not None:
                await LoanService._link(store.loans.link_renewal_expense, loan, loan.renewals, renewal.id, expense_id)
        return loan

    @staticmethod
    async def _link(link, loan: Loan, entries: List, entry_id: str, expense_id: str) -> None:
        """Record the mirrored expense id on the embedded entry, best effort."""
        try:
            await link(loan.id, entry_id, expense_id)
        except Exception:
            log.exception("Failed to link expense %s to loan %s", expense_id, loan.id)
            return
        for entry in entries:
            if entry.id == entry_id:
                entry.other_expense_id = expense_id

    @staticmethod
    async def delete(loan_id: str, farm_id: Optional[str] = None) -> bool:
        """Delete a loan and the expenses mirrored from it.

        Expense cleanup failures are logged; the loan is deleted regardless.
        """
        store = await LoanService._store(farm_id)
        try:
            removed = await store.expenses.delete_many({"related_loan_id": loan_id})
            log.info("Removed %d expenses linked to loan %s", removed, loan_id)
        except Exception:
            log.warning("Failed to clean up expenses linked to loan %s", loan_id, exc_info=True)
        return await store.loans.delete(loan_id)

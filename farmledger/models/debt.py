from farmledger.models.base import FarmDocument, Number


class Debt(FarmDocument):
    """Money an employee owes the farm. Only ``paid`` ever changes."""
    employee_id: str
    amount: Number = 0
    description: str = ""
    date: str = ""
    paid: bool = False

from typing import List
from farmledger.models.base import FarmDocument, Number


class Group(FarmDocument):
    """A crew sharing one per-ton wage pot on every travel it works."""
    name: str
    wage: Number = 0  # rate per ton
    employees: List[str] = []  # may hold ids of deleted employees

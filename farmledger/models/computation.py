from typing import List
from pydantic import BaseModel
from farmledger.models.base import FarmDocument, Number


class SugarcaneEntry(BaseModel):
    bags: Number = 0
    price: Number = 0


class MolassesEntry(BaseModel):
    kilos: Number = 0
    price: Number = 0


class CalculatorComputation(FarmDocument):
    """Saved receipt calculation. Created and deleted, never updated."""
    receipt_title: str
    signature_name: str = ""
    sugarcane_entries: List[SugarcaneEntry] = []
    molasses_entries: List[MolassesEntry] = []
    total_sugarcane: float = 0
    total_molasses: float = 0
    grand_total: float = 0

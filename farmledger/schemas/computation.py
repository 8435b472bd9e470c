from typing import List
from pydantic import BaseModel
from farmledger.models.computation import MolassesEntry, SugarcaneEntry


class ComputationCreate(BaseModel):
    receipt_title: str
    signature_name: str = ""
    sugarcane_entries: List[SugarcaneEntry] = []
    molasses_entries: List[MolassesEntry] = []


class ComputationTotals(BaseModel):
    total_sugarcane: float = 0
    total_molasses: float = 0
    grand_total: float = 0

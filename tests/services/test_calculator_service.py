import pytest
from unittest.mock import AsyncMock, patch
from bson import ObjectId
from farmledger.models.computation import MolassesEntry, SugarcaneEntry
from farmledger.schemas.computation import ComputationCreate
from farmledger.services.calculator_service import CalculatorService, compute_total, compute_totals
from farmledger.utils.validation import CalculatorValidationError


def test_compute_total_by_quantity_field():
    entries = [SugarcaneEntry(bags=10, price=50), SugarcaneEntry(bags=3, price=45.5)]

    assert compute_total(entries, "bags") == pytest.approx(636.5)


def test_compute_totals():
    totals = compute_totals(
        [SugarcaneEntry(bags=100, price=50)],
        [MolassesEntry(kilos=250, price=8), MolassesEntry(kilos=None, price=8)],
    )

    assert totals.total_sugarcane == 5000
    assert totals.total_molasses == 2000
    assert totals.grand_total == 7000


def test_no_entries_total_zero():
    assert compute_total([], "kilos") == 0


@pytest.mark.asyncio
async def test_create_saves_totals(mock_db):
    with patch("farmledger.services.calculator_service.get_database", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = mock_db

        computation = await CalculatorService.create(ComputationCreate(
            receipt_title="Mill receipt #12",
            signature_name="J. Cruz",
            sugarcane_entries=[SugarcaneEntry(bags=20, price=55)],
            molasses_entries=[MolassesEntry(kilos=100, price=9)],
        ))

    assert computation.id is not None
    assert computation.grand_total == 2000
    saved = mock_db["computations"].insert_one.call_args.args[0]
    assert saved["total_sugarcane"] == 1100
    assert saved["total_molasses"] == 900


@pytest.mark.asyncio
async def test_create_rejects_empty_receipt(mock_db):
    with patch("farmledger.services.calculator_service.get_database", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = mock_db

        with pytest.raises(CalculatorValidationError):
            await CalculatorService.create(ComputationCreate(receipt_title="Empty"))

    mock_db["computations"].insert_one.assert_not_called()


@pytest.mark.asyncio
async def test_create_rejects_negative_price(mock_db):
    with patch("farmledger.services.calculator_service.get_database", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = mock_db

        with pytest.raises(CalculatorValidationError):
            await CalculatorService.create(ComputationCreate(
                receipt_title="Bad",
                sugarcane_entries=[SugarcaneEntry(bags=1, price=-5)],
            ))


@pytest.mark.asyncio
async def test_list_newest_first(mock_db, collections):
    docs = [{"_id": ObjectId(), "receipt_title": "Second"}, {"_id": ObjectId(), "receipt_title": "First"}]
    mock_db["computations"].find.return_value.to_list.return_value = docs

    with patch("farmledger.services.calculator_service.get_database", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = mock_db
        computations = await CalculatorService.list(farm_id="farm-1")

    assert [c.receipt_title for c in computations] == ["Second", "First"]
    collections["computations"].find.assert_called_once_with({"farm_id": "farm-1"})
    collections["computations"].find.return_value.sort.assert_called_once_with([("created_at", -1)])

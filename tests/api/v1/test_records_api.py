import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, patch
from httpx import ASGITransport, AsyncClient
from farmledger.main import app
from farmledger.models.debt import Debt
from farmledger.models.travel import Travel
from farmledger.services import record_service

DEBT_ID = "507f1f77bcf86cd799439012"


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
async def test_debt_update_only_accepts_paid(client):
    debt = Debt(id=DEBT_ID, employee_id="emp-1", amount=250, paid=True)

    with patch.object(record_service.debts, "update", new_callable=AsyncMock) as mock_update:
        mock_update.return_value = debt

        response = await client.patch(f"/api/v1/debts/{DEBT_ID}", json={"paid": True, "amount": 1})

    assert response.status_code == 200
    assert response.json()["amount"] == 250
    debt_in = mock_update.call_args.args[1]
    assert debt_in.model_dump() == {"paid": True}


@pytest.mark.asyncio
async def test_create_debt_requires_positive_amount(client, mock_db):
    with patch("farmledger.services.record_service.get_database", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = mock_db

        response = await client.post("/api/v1/debts/", json={"employee_id": "emp-1", "amount": 0})

    assert response.status_code == 400
    mock_db["debts"].insert_one.assert_not_called()


@pytest.mark.asyncio
async def test_create_travel_is_scoped(client, mock_db):
    with patch("farmledger.services.record_service.get_database", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = mock_db

        response = await client.post(
            "/api/v1/travels/",
            json={
                "name": "November 17, 2025",
                "date": "2025-11-17",
                "tons": 10,
                "group_id": "grp-1",
                "attendance": [{"employee_id": "emp-ana", "present": True}],
            },
            headers={"X-Farm-Id": "farm-2"},
        )

    assert response.status_code == 200
    data = response.json()
    assert data["farm_id"] == "farm-2"
    assert data["attendance"] == [{"employee_id": "emp-ana", "present": True}]
    assert data["bags"] == 0


@pytest.mark.asyncio
async def test_negative_tons_rejected(client):
    response = await client.post("/api/v1/travels/", json={"name": "Bad", "tons": -1})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_missing_travel(client):
    with patch.object(record_service.travels, "get", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = None

        response = await client.get("/api/v1/travels/507f1f77bcf86cd799439013")

    assert response.status_code == 404
    assert response.json()["detail"] == "Travel not found"


@pytest.mark.asyncio
async def test_list_travels(client):
    travels = [Travel(id="t1", name="Trip one"), Travel(id="t2", name="Trip two")]

    with patch.object(record_service.travels, "list", new_callable=AsyncMock) as mock_list:
        mock_list.return_value = travels

        response = await client.get("/api/v1/travels/", headers={"X-Farm-Id": "farm-2"})

    assert response.status_code == 200
    assert [t["id"] for t in response.json()] == ["t1", "t2"]
    mock_list.assert_called_once_with("farm-2")


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["tons", "bags", "driver_tip"])
@pytest.mark.parametrize("value", ["NaN", "Infinity"])
async def test_non_finite_travel_numbers_rejected(client, field, value):
    response = await client.post("/api/v1/travels/", json={"name": "Bad", field: value})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_non_finite_debt_amount_rejected(client):
    response = await client.post("/api/v1/debts/", json={"employee_id": "emp-1", "amount": "NaN"})

    assert response.status_code == 422

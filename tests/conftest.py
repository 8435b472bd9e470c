import pytest
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId
from farmledger.models.debt import Debt
from farmledger.models.employee import Driver, Employee, EmployeeType
from farmledger.models.group import Group


def make_collection(docs=None):
    """Motor collection double; ``find`` yields ``docs``."""
    collection = MagicMock()
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=list(docs or []))
    collection.find.return_value = cursor
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.update_one = AsyncMock(return_value=MagicMock(modified_count=1))
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=0))
    return collection


@pytest.fixture
def collections():
    return {}


@pytest.fixture
def mock_db(collections):
    """Database double; ``collections`` holds the collection doubles by name."""
    db = MagicMock()

    def get_collection(name):
        if name not in collections:
            collections[name] = make_collection()
        return collections[name]

    db.__getitem__.side_effect = get_collection
    return db


@pytest.fixture
def crew():
    """Two staff, a helper and a driver working for one group at 300/ton."""
    ana = Employee(id="emp-ana", name="Ana", type=EmployeeType.STAFF)
    ben = Employee(id="emp-ben", name="Ben", type=EmployeeType.STAFF)
    hal = Employee(id="emp-hal", name="Hal", type=EmployeeType.HELPER)
    dan = Employee(id="emp-dan", name="Dan", type=EmployeeType.DRIVER)
    group = Group(id="grp-1", name="North Crew", wage=300, employees=[ana.id, ben.id, hal.id])
    driver = Driver(id="drv-1", employee_id=dan.id, wage=500)
    return {
        "employees": [ana, ben, hal, dan],
        "group": group,
        "driver": driver,
        "debts": [
            Debt(id="debt-1", employee_id=ana.id, amount=200, paid=False),
            Debt(id="debt-2", employee_id=ana.id, amount=100, paid=True),
        ],
    }


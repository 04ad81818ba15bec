# tests/conftest.py
import pytest

from data_io import records_to_frame
from features import derive_features
from store import MemoryStore


def _rec(id, ref, client, ship_date, city, state, company, charge, agent="J.HOLLAND"):
    return {
        "id": id,
        "refNum": ref,
        "client": client,
        "shipDate": ship_date,
        "returnDate": "",
        "location": "Rentex Chicago",
        "returnLocation": "",
        "city": city,
        "state": state,
        "company": company,
        "shipMethod": "Round Trip",
        "vehicleType": "Box Truck",
        "shippingCharge": charge,
        "po": "",
        "agent": agent,
    }


@pytest.fixture
def records():
    # KOL 1500 (2 rows), CRANE 300, COWBOYS 200, unassigned 100 -> total 2100 over 5 rows
    return [
        _rec(1, "R1", "Acme", "2025-01-05", "Chicago", "IL", "KOL", 1000.0),
        _rec(2, "R2", "blue sky", "2025-01-09", "New York", "NY", "CRANE", 300.0, agent="M.KAIGLER"),
        _rec(3, "R3", "Acme", "2025-01-12", "Boston", "MA", "COWBOYS", 200.0),
        _rec(4, "R4", "Zephyr", "2025-02-02", "Chicago", "IL", "KOL", "$500.00"),
        _rec(5, "", "", "", "", "", "", 100),
    ]


@pytest.fixture
def shipments(records):
    return derive_features(records_to_frame(records))


@pytest.fixture
def store():
    return MemoryStore()

import math

import pandas as pd

from features import derive_features, parse_charge


def test_parse_charge_accepts_numbers_and_currency_strings():
    assert parse_charge(12) == 12.0
    assert parse_charge("$1,250.00") == 1250.0
    assert parse_charge(" 99.5 ") == 99.5


def test_parse_charge_falls_back_to_zero():
    assert parse_charge(None) == 0.0
    assert parse_charge("") == 0.0
    assert parse_charge("n/a") == 0.0
    assert parse_charge(float("nan")) == 0.0


def test_derive_features_fills_missing_columns():
    df = derive_features(pd.DataFrame({"company": [" KOL "], "shipping_charge": ["$10"]}))
    assert df.loc[0, "company"] == "KOL"
    assert df.loc[0, "shipping_charge"] == 10.0
    assert df.loc[0, "agent"] == ""
    assert df.loc[0, "ship_month"] == "Unknown"


def test_derive_features_ship_month(shipments):
    assert list(shipments["ship_month"]) == ["Jan", "Jan", "Jan", "Feb", "Unknown"]
    assert math.isclose(shipments["shipping_charge"].sum(), 2100.0)

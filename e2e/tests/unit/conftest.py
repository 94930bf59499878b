"""Fixtures for engine unit tests: temp catalogs and an in-memory shop."""

import csv
from pathlib import Path

import pytest

from casebook.core.catalog_loader import (
    CASE_COLUMNS,
    CASES_FILE,
    DATA_COLUMNS,
    DATA_FILE,
    SCENARIO_COLUMNS,
    SCENARIOS_FILE,
)
from casebook.core.config import RunConfig


class FakeShop:
    """In-memory ApplicationActions; records every verb call in ``calls``."""

    def __init__(
        self,
        results_shown=True,
        count=3,
        cart_confirmed=True,
        cart=1,
        no_results=False,
        message="",
    ):
        self.results_shown = results_shown
        self.count = count
        self.cart_confirmed = cart_confirmed
        self.cart = cart
        self.no_results = no_results
        self.message = message
        self.calls = []

    def open(self):
        self.calls.append(("open",))

    def search(self, value):
        self.calls.append(("search", value))

    def is_results_displayed(self):
        self.calls.append(("is_results_displayed",))
        return self.results_shown

    def result_count(self):
        self.calls.append(("result_count",))
        return self.count

    def add_random_result_to_cart(self):
        self.calls.append(("add_random_result_to_cart",))

    def is_cart_confirmed(self):
        self.calls.append(("is_cart_confirmed",))
        return self.cart_confirmed

    def cart_count(self):
        self.calls.append(("cart_count",))
        return self.cart

    def is_no_results_shown(self):
        self.calls.append(("is_no_results_shown",))
        return self.no_results

    def validation_message(self):
        self.calls.append(("validation_message",))
        return self.message

    @property
    def verbs(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def fake_shop():
    return FakeShop()


def _write(path: Path, columns, rows):
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=columns)
        w.writeheader()
        for r in rows:
            w.writerow({c: r.get(c, "") for c in columns})


def case_row(case_id, steps, data_id, automated=True, scenario_id="TS001", name=None):
    return {
        "Test Case ID": case_id,
        "Test Scenario ID": scenario_id,
        "Test Case Name": name or f"Case {case_id}",
        "Test Steps": steps,
        "Test Data": data_id,
        "Automation Status": "Automated" if automated else "Manual",
    }


def data_row(data_id, values, message=""):
    return {
        "Data Set ID": data_id,
        "Data Set Name": f"Data {data_id}",
        "Data Values": values,
        "Expected Validation Message": message,
    }


@pytest.fixture
def write_catalog(tmp_path):
    """
    write_catalog(cases=[...], data=[...], scenarios=[...]) -> catalog dir
    """

    def _write_catalog(cases=(), data=(), scenarios=()):
        _write(tmp_path / SCENARIOS_FILE, SCENARIO_COLUMNS, scenarios)
        _write(tmp_path / CASES_FILE, CASE_COLUMNS, cases)
        _write(tmp_path / DATA_FILE, DATA_COLUMNS, data)
        return tmp_path

    return _write_catalog


@pytest.fixture
def test_config(tmp_path) -> RunConfig:
    return RunConfig(
        catalog_dir=tmp_path,
        results_file=tmp_path / "results.csv",
        artifact_dir=tmp_path / "artifacts",
        browsers=("chromium", "firefox"),
        environment="qa",
        executed_by="ci-bot",
    )


@pytest.fixture
def make_case():
    return case_row


@pytest.fixture
def make_data():
    return data_row

from pathlib import Path

import pytest

from casebook.core.catalog_loader import CatalogLoader
from casebook.core.errors import CatalogMalformed
from casebook.core.params import ParameterResolver
from casebook.core.types import Environment, Record, StepKind
from casebook.flows.materializer import CaseMaterializer, environments_from

STEPS = "Navigate to homepage|Enter value in search box|Verify search results are displayed"
ENVS = [Environment("chromium", "qa"), Environment("firefox", "qa"), Environment("webkit", "qa")]


def _materialize(catalog, envs=ENVS, lenient=False):
    loader = CatalogLoader(catalog)
    return CaseMaterializer(ParameterResolver(loader), lenient_steps=lenient).materialize(loader.load_cases(), envs)


def test_cross_product(write_catalog, make_case, make_data):
    catalog = write_catalog(
        cases=[make_case("TC001", STEPS, "TD001", name="Search")],
        data=[make_data("TD001", "dress|blouse")],
    )

    units = _materialize(catalog)

    assert len(units) == 2 * 3
    assert [u.node_id for u in units] == [
        "TC001[dress]-chromium",
        "TC001[dress]-firefox",
        "TC001[dress]-webkit",
        "TC001[blouse]-chromium",
        "TC001[blouse]-firefox",
        "TC001[blouse]-webkit",
    ]
    assert units[0].display_name == "Search - dress"
    assert [i.kind for i in units[0].intents] == [
        StepKind.NAVIGATE_HOME,
        StepKind.ENTER_SEARCH,
        StepKind.VERIFY_RESULTS_DISPLAYED,
    ]


def test_manual_cases_yield_nothing(write_catalog, make_case, make_data):
    catalog = write_catalog(
        cases=[make_case("TC001", "Do something by hand", "TD001", automated=False)],
        data=[make_data("TD001", "dress")],
    )

    assert _materialize(catalog) == []


def test_missing_data_set_skips_case(write_catalog, make_case, make_data):
    catalog = write_catalog(
        cases=[make_case("TC001", STEPS, "TD404"), make_case("TC002", STEPS, "TD001")],
        data=[make_data("TD001", "dress")],
    )

    units = _materialize(catalog, envs=ENVS[:1])

    assert [u.case.id for u in units] == ["TC002"]


def test_unknown_step_in_case_without_data_is_skipped(write_catalog, make_case, make_data):
    catalog = write_catalog(
        cases=[make_case("TC001", "Wave at the screen", "TD404"), make_case("TC002", STEPS, "TD001")],
        data=[make_data("TD001", "dress")],
    )

    units = _materialize(catalog, envs=ENVS[:1])

    assert [u.case.id for u in units] == ["TC002"]


def test_expected_message_and_record_naming(write_catalog, make_case, make_data):
    catalog = write_catalog(
        cases=[make_case("TC001", "Verify error message text", "TD001", name="Errors")],
        data=[make_data("TD001", "color:red", message="No results")],
    )

    (unit,) = _materialize(catalog, envs=ENVS[:1])

    assert unit.value == Record("color", "red")
    assert unit.display_name == "Errors - color:red"
    assert unit.expected_message == "No results"


def test_unknown_step_fails_run(write_catalog, make_case, make_data):
    catalog = write_catalog(
        cases=[make_case("TC001", "Navigate to homepage|Wave at the screen", "TD001")],
        data=[make_data("TD001", "dress")],
    )

    with pytest.raises(CatalogMalformed, match="TC001"):
        _materialize(catalog)


def test_unknown_step_lenient(write_catalog, make_case, make_data):
    catalog = write_catalog(
        cases=[make_case("TC001", "Navigate to homepage|Wave at the screen", "TD001")],
        data=[make_data("TD001", "dress")],
    )

    (unit,) = _materialize(catalog, envs=ENVS[:1], lenient=True)

    assert [i.kind for i in unit.intents] == [StepKind.NAVIGATE_HOME]


def test_automated_case_without_steps(write_catalog, make_case, make_data):
    catalog = write_catalog(
        cases=[make_case("TC001", "", "TD001")],
        data=[make_data("TD001", "dress")],
    )

    with pytest.raises(CatalogMalformed, match="no test steps"):
        _materialize(catalog)


def test_naming_is_stable_across_runs(write_catalog, make_case, make_data):
    catalog = write_catalog(
        cases=[make_case("TC001", STEPS, "TD001"), make_case("TC002", STEPS, "TD002")],
        data=[make_data("TD001", "a|b:c|d"), make_data("TD002", "x")],
    )

    first = [u.node_id for u in _materialize(catalog)]
    second = [u.node_id for u in _materialize(catalog)]

    assert first == second
    assert len(first) == (3 + 1) * len(ENVS)


def test_environments_from(test_config):
    assert environments_from(test_config) == [Environment("chromium", "qa"), Environment("firefox", "qa")]


def test_shipped_catalog_materializes():
    catalog = Path(__file__).resolve().parents[2] / "test-management"

    units = _materialize(catalog, envs=ENVS[:2])

    # TC005 is manual; TD001 feeds TC001/TC002 with 3 values, TD002 1, TD003 3
    assert len(units) == (3 + 3 + 1 + 3) * 2
    assert {u.case.id for u in units} == {"TC001", "TC002", "TC003", "TC004"}
    special = [u for u in units if u.case.id == "TC004"]
    assert all(u.expected_message == "No results were found for your search" for u in special)

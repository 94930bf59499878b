from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .errors import CatalogMalformed, CatalogUnavailable
from .logs import get_logger
from .text import split_list
from .types import ParameterSet, Scenario, TestCase

log = get_logger(__name__)

SCENARIOS_FILE = "Test_Scenarios.csv"
CASES_FILE = "Test_Cases.csv"
DATA_FILE = "Test_Data.csv"

SCENARIO_COLUMNS = ["Test Scenario ID", "Test Scenario Name", "Description", "Priority", "Status", "Tags"]
CASE_COLUMNS = [
    "Test Case ID",
    "Test Scenario ID",
    "Test Case Name",
    "Description",
    "Preconditions",
    "Test Steps",
    "Expected Result",
    "Test Data",
    "Priority",
    "Severity",
    "Status",
    "Automation Status",
]
DATA_COLUMNS = [
    "Data Set ID",
    "Data Set Name",
    "Description",
    "Test Case IDs",
    "Data Type",
    "Data Values",
    "Expected Validation Message",
]


def parse_steps_field(s: str) -> tuple:
    return split_list(s, "|")


def read_table(path: Path, required: Sequence[str]) -> List[Dict[str, str]]:
    """
    Read one CSV table into header->value dicts. Blank lines are skipped.
    """
    try:
        with path.open(newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f, skipinitialspace=True)
            header = [h.strip() for h in (reader.fieldnames or [])]
            missing = [c for c in required if c not in header]
            if missing:
                raise CatalogMalformed(f"{path.name}: missing column(s) {missing}")
            reader.fieldnames = header
            rows = []
            for row in reader:
                if not any((v or "").strip() for k, v in row.items() if k is not None):
                    continue
                rows.append({k: (v or "").strip() for k, v in row.items() if k is not None})
            return rows
    except UnicodeDecodeError as e:
        raise CatalogMalformed(f"{path}: not UTF-8 encoded ({e})") from e
    except csv.Error as e:
        raise CatalogMalformed(f"{path}: unreadable CSV ({e})") from e
    except OSError as e:
        raise CatalogUnavailable(f"Cannot read catalog table {path}: {e}") from e


class CatalogLoader:
    """
    Reads the three test-management tables. Every call goes back to disk;
    the tables are hand-edited between runs.
    """

    def __init__(self, catalog_dir: str | Path):
        self.catalog_dir = Path(catalog_dir)

    def _table(self, filename: str, required: Sequence[str]) -> List[Dict[str, str]]:
        path = self.catalog_dir / filename
        rows = read_table(path, required)
        log.debug("catalog table loaded", table=filename, rows=len(rows))
        return rows

    def load_scenarios(self) -> List[Scenario]:
        return [
            Scenario(
                id=r["Test Scenario ID"],
                name=r["Test Scenario Name"],
                description=r["Description"],
                priority=r["Priority"],
                status=r["Status"],
                tags=split_list(r["Tags"]),
            )
            for r in self._table(SCENARIOS_FILE, SCENARIO_COLUMNS)
        ]

    def load_cases(self) -> List[TestCase]:
        return [_to_case(r) for r in self._table(CASES_FILE, CASE_COLUMNS)]

    def load_parameter_sets(self) -> List[ParameterSet]:
        return [
            ParameterSet(
                id=r["Data Set ID"],
                name=r["Data Set Name"],
                description=r["Description"],
                case_ids=split_list(r["Test Case IDs"]),
                data_type=r["Data Type"],
                raw_values=r["Data Values"],
                expected_message=r["Expected Validation Message"],
            )
            for r in self._table(DATA_FILE, DATA_COLUMNS)
        ]

    def cases_for_scenario(self, scenario_id: str) -> List[TestCase]:
        return [c for c in self.load_cases() if c.scenario_id == scenario_id]

    def parameter_set(self, set_id: str) -> Optional[ParameterSet]:
        for ps in self.load_parameter_sets():
            if ps.id == set_id:
                return ps
        return None


def _to_case(r: Dict[str, str]) -> TestCase:
    return TestCase(
        id=r["Test Case ID"],
        scenario_id=r["Test Scenario ID"],
        name=r["Test Case Name"],
        description=r["Description"],
        preconditions=r["Preconditions"],
        steps=parse_steps_field(r["Test Steps"]),
        expected_result=r["Expected Result"],
        data_set_id=r["Test Data"],
        priority=r["Priority"],
        severity=r["Severity"],
        status=r["Status"],
        automation_status=r["Automation Status"],
    )

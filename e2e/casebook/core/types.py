from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Protocol, Tuple, Union


@dataclass(frozen=True)
class Scenario:
    id: str
    name: str
    description: str = ""
    priority: str = ""
    status: str = ""
    tags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TestCase:
    id: str
    scenario_id: str
    name: str
    description: str = ""
    preconditions: str = ""
    steps: Tuple[str, ...] = ()
    expected_result: str = ""
    data_set_id: str = ""
    priority: str = ""
    severity: str = ""
    status: str = ""
    automation_status: str = ""

    # keep pytest from collecting this as a test class
    __test__ = False

    @property
    def is_automated(self) -> bool:
        return self.automation_status.strip().lower() == "automated"


@dataclass(frozen=True)
class ParameterSet:
    id: str
    name: str = ""
    description: str = ""
    case_ids: Tuple[str, ...] = ()
    data_type: str = ""
    raw_values: str = ""
    expected_message: str = ""


@dataclass(frozen=True)
class Scalar:
    value: str

    @property
    def text(self) -> str:
        return self.value


@dataclass(frozen=True)
class Record:
    """A ``key:value`` token from a data set, kept as a one-entry mapping."""

    key: str
    value: str

    @property
    def text(self) -> str:
        return f"{self.key}:{self.value}"

    def as_dict(self) -> Dict[str, str]:
        return {self.key: self.value}


DataValue = Union[Scalar, Record]


@dataclass(frozen=True)
class Environment:
    browser: str
    name: str = "staging"


class StepKind(str, Enum):
    NAVIGATE_HOME = "navigate_home"
    ENTER_SEARCH = "enter_search"
    VERIFY_RESULTS_DISPLAYED = "verify_results_displayed"
    COUNT_RESULTS = "count_results"
    SELECT_RESULT = "select_result"
    ADD_TO_CART = "add_to_cart"
    VERIFY_SPECIAL_CHARACTERS = "verify_special_characters"
    VERIFY_ERROR_MESSAGE = "verify_error_message"


@dataclass(frozen=True)
class StepIntent:
    kind: StepKind
    text: str


@dataclass(frozen=True)
class ExecutableUnit:
    case: TestCase
    value: DataValue
    environment: Environment
    intents: Tuple[StepIntent, ...] = ()
    expected_message: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.case.name} - {self.value.text}"

    @property
    def node_id(self) -> str:
        return f"{self.case.id}[{self.value.text}]-{self.environment.browser}"


class Status(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    UNKNOWN = "UNKNOWN"


# persisted column order of the execution log
EXECUTION_COLUMNS: Tuple[str, ...] = (
    "Execution ID",
    "Test Case ID",
    "Browser",
    "Environment",
    "Executed By",
    "Execution Date",
    "Start Time",
    "End Time",
    "Status",
    "Error Message",
    "Screenshot Path",
    "Video Path",
    "Execution Time (seconds)",
    "Notes",
)


@dataclass
class ExecutionRecord:
    """
    One row of the execution log. Empty strings mean "fill with the default"
    when handed to the recorder.
    """

    execution_id: str = ""
    test_case_id: str = ""
    browser: str = ""
    environment: str = ""
    executed_by: str = ""
    execution_date: str = ""
    start_time: str = ""
    end_time: str = ""
    status: str = ""
    error_message: str = ""
    screenshot_path: str = ""
    video_path: str = ""
    duration_seconds: str = ""
    notes: str = ""

    def to_row(self) -> Tuple[str, ...]:
        return (
            self.execution_id,
            self.test_case_id,
            self.browser,
            self.environment,
            self.executed_by,
            self.execution_date,
            self.start_time,
            self.end_time,
            self.status,
            self.error_message,
            self.screenshot_path,
            self.video_path,
            self.duration_seconds,
            self.notes,
        )

    @classmethod
    def from_row(cls, row: Dict[str, Optional[str]]) -> "ExecutionRecord":
        values = [str(row.get(c) or "") for c in EXECUTION_COLUMNS]
        return cls(*values)


class ApplicationActions(Protocol):
    """Verbs the step interpreter needs from a page object."""

    def open(self) -> None: ...

    def search(self, value: str) -> None: ...

    def is_results_displayed(self) -> bool: ...

    def result_count(self) -> int: ...

    def add_random_result_to_cart(self) -> None: ...

    def is_cart_confirmed(self) -> bool: ...

    def cart_count(self) -> int: ...

    def is_no_results_shown(self) -> bool: ...

    def validation_message(self) -> str: ...

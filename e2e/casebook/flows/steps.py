# e2e/casebook/flows/steps.py
from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from casebook.core.errors import CatalogMalformed, StepAssertionFailed
from casebook.core.logs import get_logger
from casebook.core.types import ApplicationActions, DataValue, StepIntent, StepKind

log = get_logger(__name__)

DEFAULT_NO_RESULTS_MESSAGE = "No results were found for your search"


# First match wins.
STEP_PATTERNS: List[Tuple[StepKind, Callable[[str], bool]]] = [
    (StepKind.NAVIGATE_HOME, lambda t: "Navigate to homepage" in t),
    (StepKind.ENTER_SEARCH, lambda t: "Enter" in t and "search box" in t),
    (StepKind.VERIFY_RESULTS_DISPLAYED, lambda t: "Verify search results are displayed" in t),
    (StepKind.COUNT_RESULTS, lambda t: "Count the number of search results" in t),
    (StepKind.SELECT_RESULT, lambda t: "Select any item from results" in t),
    (StepKind.ADD_TO_CART, lambda t: "Click on add to cart" in t),
    (StepKind.VERIFY_SPECIAL_CHARACTERS, lambda t: "Verify appropriate handling of special characters" in t),
    (StepKind.VERIFY_ERROR_MESSAGE, lambda t: "Verify error message text" in t),
]


def match_step(text: str) -> Optional[StepKind]:
    for kind, matches in STEP_PATTERNS:
        if matches(text):
            return kind
    return None


def parse_step(text: str) -> StepIntent:
    kind = match_step(text)
    if kind is None:
        raise CatalogMalformed(f"Unrecognized test step: '{text}'")
    return StepIntent(kind=kind, text=text.strip())


def parse_steps(texts: Iterable[str], lenient: bool = False, case_id: str = "") -> Tuple[StepIntent, ...]:
    """
    lenient=True keeps the old behavior for hand-written catalogs:
    unrecognized steps are logged and dropped instead of failing the run.
    """
    out: List[StepIntent] = []
    for t in texts:
        t = t.strip()
        if not t:
            continue
        try:
            out.append(parse_step(t))
        except CatalogMalformed:
            if not lenient:
                raise CatalogMalformed(f"{case_id or 'test case'}: unrecognized test step '{t}'") from None
            log.warning("unrecognized step skipped", case_id=case_id, step=t)
    return tuple(out)


def _check(step: str, ok: bool, expected, actual) -> None:
    if not ok:
        raise StepAssertionFailed(step, expected, actual)


class StepInterpreter:
    """
    Runs parsed steps one by one against an ApplicationActions object.
    The first failing action/assertion propagates; later steps do not run.
    """

    def __init__(self, actions: ApplicationActions, lenient: bool = False):
        self.actions = actions
        self.lenient = lenient
        self._handlers = {
            StepKind.NAVIGATE_HOME: self._navigate_home,
            StepKind.ENTER_SEARCH: self._enter_search,
            StepKind.VERIFY_RESULTS_DISPLAYED: self._verify_results_displayed,
            StepKind.COUNT_RESULTS: self._count_results,
            StepKind.SELECT_RESULT: self._select_result,
            StepKind.ADD_TO_CART: self._add_to_cart,
            StepKind.VERIFY_SPECIAL_CHARACTERS: self._verify_special_characters,
            StepKind.VERIFY_ERROR_MESSAGE: self._verify_error_message,
        }

    def execute(
        self,
        steps: Sequence[Union[StepIntent, str]],
        value: DataValue,
        expected_message: str = "",
    ) -> None:
        if all(isinstance(s, StepIntent) for s in steps):
            intents = list(steps)
        else:
            texts = [s.text if isinstance(s, StepIntent) else s for s in steps]
            intents = list(parse_steps(texts, lenient=self.lenient))

        for n, intent in enumerate(intents, start=1):
            log.info("step", n=n, kind=intent.kind.value, text=intent.text)
            self._handlers[intent.kind](intent, value, expected_message or "")

    def _navigate_home(self, intent: StepIntent, value: DataValue, expected_message: str) -> None:
        self.actions.open()

    def _enter_search(self, intent: StepIntent, value: DataValue, expected_message: str) -> None:
        self.actions.search(value.text)

    def _verify_results_displayed(self, intent: StepIntent, value: DataValue, expected_message: str) -> None:
        shown = self.actions.is_results_displayed()
        _check(intent.text, bool(shown), "results displayed", shown)
        log.info("search results", query=value.text, count=self.actions.result_count())

    def _count_results(self, intent: StepIntent, value: DataValue, expected_message: str) -> None:
        count = self.actions.result_count()
        log.info("search results", query=value.text, count=count)
        _check(intent.text, count > 0, "result count > 0", count)

    def _select_result(self, intent: StepIntent, value: DataValue, expected_message: str) -> None:
        # the pick happens in the add-to-cart step
        log.debug("select result deferred to add-to-cart")

    def _add_to_cart(self, intent: StepIntent, value: DataValue, expected_message: str) -> None:
        self.actions.add_random_result_to_cart()

        confirmed = self.actions.is_cart_confirmed()
        _check(intent.text, bool(confirmed), "cart confirmation shown", confirmed)

        count = self.actions.cart_count()
        _check(intent.text, count > 0, "cart count > 0", count)

    def _verify_special_characters(self, intent: StepIntent, value: DataValue, expected_message: str) -> None:
        has_results = self.actions.is_results_displayed()
        no_results = self.actions.is_no_results_shown()
        _check(
            intent.text,
            has_results or no_results,
            "results or no-results message",
            {"results": has_results, "no_results": no_results},
        )

        if no_results and expected_message:
            msg = self.actions.validation_message()
            _check(intent.text, expected_message in msg, f"message containing {expected_message!r}", msg)

    def _verify_error_message(self, intent: StepIntent, value: DataValue, expected_message: str) -> None:
        msg = self.actions.validation_message()
        want = expected_message or DEFAULT_NO_RESULTS_MESSAGE
        _check(intent.text, want in msg, f"message containing {want!r}", msg)
        _check(intent.text, value.text in msg, f"message containing {value.text!r}", msg)

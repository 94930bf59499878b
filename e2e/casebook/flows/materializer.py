# e2e/casebook/flows/materializer.py
from __future__ import annotations

from typing import Iterable, List, Sequence

from casebook.core.config import RunConfig
from casebook.core.errors import CatalogMalformed
from casebook.core.logs import get_logger
from casebook.core.params import ParameterResolver
from casebook.core.types import Environment, ExecutableUnit, TestCase
from casebook.flows.steps import parse_steps

log = get_logger(__name__)


def environments_from(config: RunConfig) -> List[Environment]:
    return [Environment(browser=b, name=config.environment) for b in config.browsers]


class CaseMaterializer:
    def __init__(self, resolver: ParameterResolver, lenient_steps: bool = False):
        self.resolver = resolver
        self.lenient_steps = lenient_steps

    def materialize(self, cases: Iterable[TestCase], environments: Sequence[Environment]) -> List[ExecutableUnit]:
        """
        automated case x data value x environment -> one unit each, in that
        nesting order. Cases without data values are skipped. Step text of the
        rest is parsed once per case here, so a bad step fails the run before
        anything executes.
        """
        units: List[ExecutableUnit] = []
        for case in cases:
            if not case.is_automated:
                continue

            res = self.resolver.resolve(case.data_set_id)
            if not res:
                log.info("no data values, case skipped", case_id=case.id, data_set_id=case.data_set_id)
                continue

            intents = parse_steps(case.steps, lenient=self.lenient_steps, case_id=case.id)
            if not intents:
                raise CatalogMalformed(f"{case.id}: automated test case has no test steps")

            for value in res.values:
                for env in environments:
                    units.append(
                        ExecutableUnit(
                            case=case,
                            value=value,
                            environment=env,
                            intents=intents,
                            expected_message=res.expected_message,
                        )
                    )

        log.info("units materialized", units=len(units), environments=len(environments))
        return units

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .catalog_loader import CatalogLoader
from .errors import ParameterSetMissing
from .logs import get_logger
from .types import DataValue, ParameterSet, Record, Scalar

log = get_logger(__name__)


@dataclass(frozen=True)
class Resolution:
    values: Tuple[DataValue, ...] = ()
    expected_message: str = ""

    def __bool__(self) -> bool:
        return bool(self.values)


def parse_value(token: str) -> DataValue:
    if ":" in token:
        key, _, val = token.partition(":")
        return Record(key=key.strip(), value=val.strip())
    return Scalar(token.strip())


def parse_values(raw: str) -> List[DataValue]:
    """
    'a|b:c|d' -> [Scalar('a'), Record('b', 'c'), Scalar('d')]
    Order is kept as authored; it drives test naming.
    """
    if not (raw or "").strip():
        return []
    return [parse_value(t) for t in raw.split("|")]


class ParameterResolver:
    def __init__(self, loader: CatalogLoader):
        self.loader = loader

    def require(self, set_id: str) -> ParameterSet:
        ps = self.loader.parameter_set(set_id)
        if ps is None:
            raise ParameterSetMissing(set_id)
        return ps

    def resolve(self, set_id: str) -> Resolution:
        """
        Unknown data set -> empty Resolution (the case generates no tests)
        instead of failing the whole run.
        """
        try:
            ps = self.require(set_id)
        except ParameterSetMissing as e:
            log.warning("data set missing, case skipped", data_set_id=set_id, error=str(e))
            return Resolution()

        return Resolution(
            values=tuple(parse_values(ps.raw_values)),
            expected_message=ps.expected_message or "",
        )

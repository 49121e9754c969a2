"""
Catalog runner: executes descriptors strictly in declaration order and
writes a heading plus result (or failure) lines for each one.

A failing descriptor never stops the run; only ``StoreConnectionError``
does, since nothing after it could reach the store either.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from pymongo.collection import Collection

from config import QUERY_TIMEOUT_MS
from db_executor import QueryExecutor
from descriptors import QueryDescriptor
from errors import MalformedDescriptorError, QueryExecutionError
from logger import logger
from response_formatter import red

Sink = Callable[[str], None]


@dataclass
class DescriptorOutcome:
    position: int
    name: str
    ok: bool
    lines: List[str] = field(default_factory=list)
    error: Optional[QueryExecutionError] = None


class QueryCatalogRunner:

    def __init__(
        self,
        collection: Collection,
        descriptors: Sequence[QueryDescriptor],
        sink: Sink = print,
        timeout_ms: Optional[int] = QUERY_TIMEOUT_MS,
        colour: bool = False,
    ):
        self.executor = QueryExecutor(collection, timeout_ms)
        self.descriptors = tuple(descriptors)
        self.sink = sink
        self.colour = colour
        self.position = 0

    def run(self) -> List[DescriptorOutcome]:
        """Run every descriptor once, in order, and return their outcomes."""
        outcomes: List[DescriptorOutcome] = []
        for position, descriptor in enumerate(self.descriptors, 1):
            self.position = position
            outcomes.append(self.run_one(position, descriptor))

        succeeded = sum(1 for o in outcomes if o.ok)
        self.sink("")
        self.sink(f"{succeeded} succeeded, {len(outcomes) - succeeded} failed")
        return outcomes

    def run_one(self, position: int, descriptor: QueryDescriptor) -> DescriptorOutcome:
        self.sink("")
        self.sink(f"{position}) {descriptor.name}:")

        try:
            result = self.executor.execute(descriptor)
            try:
                lines = descriptor.formatter(result)
            except (KeyError, TypeError, ValueError) as e:
                raise QueryExecutionError(descriptor.name, f"could not format result: {e}") from e
        except MalformedDescriptorError as e:
            logger.warning("[RUNNER] Skipping malformed descriptor '%s': %s", descriptor.name, e.cause)
            return self._failed(position, descriptor, e)
        except QueryExecutionError as e:
            logger.error("[RUNNER] '%s' failed: %s", descriptor.name, e.cause)
            return self._failed(position, descriptor, e)

        for line in lines:
            self.sink(f"  {line}")
        return DescriptorOutcome(position, descriptor.name, True, lines)

    def _failed(
        self,
        position: int,
        descriptor: QueryDescriptor,
        error: QueryExecutionError,
    ) -> DescriptorOutcome:
        notice = f"FAILED: {error.cause}"
        self.sink(f"  {red(notice) if self.colour else notice}")
        return DescriptorOutcome(position, descriptor.name, False, [notice], error)


def exit_code(outcomes: Sequence[DescriptorOutcome]) -> int:
    """0 unless there were descriptors and every one of them failed."""
    if outcomes and not any(o.ok for o in outcomes):
        return 1
    return 0

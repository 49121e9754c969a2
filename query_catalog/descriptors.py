"""
Query descriptors: static declarations of one store operation plus the
formatter that turns its result into console lines.

``QueryDescriptor.params`` holds the raw, kind-specific payload exactly as
declared in the catalog. It is parsed into one of the ``*Params`` models
below by ``descriptor_validator`` right before execution, so a malformed
entry only fails its own descriptor.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field

Result = Dict[str, Any]
Formatter = Callable[[Result], List[str]]

Direction = Literal[1, -1]
ASCENDING: Direction = 1
DESCENDING: Direction = -1

MAX_INT64 = 2 ** 63 - 1


class QueryKind(str, Enum):
    FIND = "find"
    UPDATE_ONE = "update_one"
    DELETE_ONE = "delete_one"
    AGGREGATE = "aggregate"
    CREATE_INDEX = "create_index"
    EXPLAIN = "explain"


@dataclass(frozen=True)
class QueryDescriptor:
    name: str
    kind: QueryKind
    formatter: Formatter
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))


# ---------------------- PARAMETER MODELS ----------------------


class _Params(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class FindParams(_Params):
    filter: Dict[str, Any] = Field(default_factory=dict)
    projection: Optional[Dict[str, Literal[0, 1]]] = None
    sort: Optional[List[Tuple[str, Direction]]] = None
    skip: int = Field(default=0, ge=0, le=MAX_INT64)
    limit: int = Field(default=0, ge=0, le=MAX_INT64, description="0 means no limit")


class UpdateOneParams(_Params):
    filter: Dict[str, Any]
    update: Dict[str, Any]


class DeleteOneParams(_Params):
    filter: Dict[str, Any]


class AggregateParams(_Params):
    pipeline: List[Dict[str, Any]]


class CreateIndexParams(_Params):
    keys: List[Tuple[str, Direction]]
    unique: bool = False


class ExplainParams(_Params):
    filter: Dict[str, Any] = Field(default_factory=dict)


PARAMS_MODELS: Dict[QueryKind, Type[_Params]] = {
    QueryKind.FIND: FindParams,
    QueryKind.UPDATE_ONE: UpdateOneParams,
    QueryKind.DELETE_ONE: DeleteOneParams,
    QueryKind.AGGREGATE: AggregateParams,
    QueryKind.CREATE_INDEX: CreateIndexParams,
    QueryKind.EXPLAIN: ExplainParams,
}

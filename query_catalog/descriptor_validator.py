"""
Descriptor validator: checks a descriptor's parameters before anything is
sent to the store.

Supports:
- Kind-specific parameter models (unknown keys, wrong types, negative
  skip/limit are rejected)
- Update-operator check (``$set``-style documents only)
- Non-empty filter for deletes
- Aggregation stage allow-list, one operator per stage
- Non-empty, duplicate-free index key lists
"""

from typing import Any, Dict, List, Sequence, Tuple

from pydantic import ValidationError

from descriptors import (
    PARAMS_MODELS,
    AggregateParams,
    CreateIndexParams,
    DeleteOneParams,
    FindParams,
    QueryDescriptor,
    QueryKind,
    UpdateOneParams,
)
from errors import MalformedDescriptorError
from logger import logger

ALLOWED_STAGES = [
    "$match", "$group", "$project", "$sort", "$limit",
    "$skip", "$count", "$unwind", "$addFields",
]


# ---------------------- HELPERS ----------------------


def _check_unique_fields(name: str, keys: Sequence[Tuple[str, int]], what: str) -> None:
    seen: List[str] = []
    for field, _ in keys:
        if field in seen:
            raise MalformedDescriptorError(name, f"{what} field '{field}' listed twice")
        seen.append(field)


def _check_pipeline(name: str, pipeline: List[Dict[str, Any]]) -> None:
    if not pipeline:
        raise MalformedDescriptorError(name, "aggregation pipeline is empty")

    for position, stage in enumerate(pipeline, 1):
        if len(stage) != 1:
            raise MalformedDescriptorError(
                name,
                f"stage {position} must have exactly one operator, got {sorted(stage)}",
            )
        operator = next(iter(stage))
        if operator not in ALLOWED_STAGES:
            raise MalformedDescriptorError(
                name, f"stage {position} operator '{operator}' not allowed",
            )


# ---------------------- MAIN VALIDATOR ----------------------


def validate_descriptor(descriptor: QueryDescriptor):
    """Parse ``descriptor.params`` into its kind's model and run the
    kind-specific checks.

    Returns the parsed parameter model. Raises ``MalformedDescriptorError``
    carrying the descriptor name on any problem.
    """
    name = descriptor.name

    try:
        kind = QueryKind(descriptor.kind)
    except ValueError:
        raise MalformedDescriptorError(name, f"unknown query kind '{descriptor.kind}'")

    model = PARAMS_MODELS[kind]
    try:
        params = model.model_validate(dict(descriptor.params))
    except ValidationError as e:
        logger.warning("[VALIDATOR] %s: invalid %s parameters", name, kind.value)
        raise MalformedDescriptorError(name, e) from e

    if isinstance(params, FindParams):
        if params.sort is not None:
            if not params.sort:
                raise MalformedDescriptorError(name, "sort specification is empty")
            _check_unique_fields(name, params.sort, "sort")

    elif isinstance(params, UpdateOneParams):
        if not params.update:
            raise MalformedDescriptorError(name, "update document is empty")
        plain_keys = [k for k in params.update if not k.startswith("$")]
        if plain_keys:
            raise MalformedDescriptorError(
                name, f"update keys must be operators like $set, got {plain_keys}",
            )

    elif isinstance(params, DeleteOneParams):
        if not params.filter:
            raise MalformedDescriptorError(name, "refusing to delete with an empty filter")

    elif isinstance(params, AggregateParams):
        _check_pipeline(name, params.pipeline)

    elif isinstance(params, CreateIndexParams):
        if not params.keys:
            raise MalformedDescriptorError(name, "index key specification is empty")
        _check_unique_fields(name, params.keys, "index")

    return params

"""
Database executor: runs one validated descriptor against a collection
with timeout protection, error wrapping and ObjectId stringification.
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import BSONError
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure, ExecutionTimeout, PyMongoError

from config import QUERY_TIMEOUT_MS
from descriptor_validator import validate_descriptor
from descriptors import (
    AggregateParams,
    CreateIndexParams,
    DeleteOneParams,
    ExplainParams,
    FindParams,
    QueryDescriptor,
    QueryKind,
    Result,
    UpdateOneParams,
)
from errors import MalformedDescriptorError, QueryExecutionError, StoreConnectionError
from logger import logger


# ---------------------- HELPERS ----------------------

def _stringify_ids(docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Convert ObjectId ``_id`` values to strings; group keys are left alone."""
    for doc in docs:
        if isinstance(doc.get("_id"), ObjectId):
            doc["_id"] = str(doc["_id"])
    return docs


# ---------------------- EXECUTOR ----------------------

class QueryExecutor:
    """Executes descriptors against one collection handle.

    ``timeout_ms`` is applied server-side to find and aggregate; ``None`` or
    0 runs without a limit.
    """

    def __init__(self, collection: Collection, timeout_ms: Optional[int] = QUERY_TIMEOUT_MS):
        self.collection = collection
        self.timeout_ms = timeout_ms or None

    def execute(self, descriptor: QueryDescriptor) -> Result:
        params = validate_descriptor(descriptor)
        kind = QueryKind(descriptor.kind)
        logger.debug("[EXECUTOR] %s (%s): %s", descriptor.name, kind.value, params)

        handler = getattr(self, f"_{kind.value}")
        try:
            return handler(params)
        except ExecutionTimeout:
            raise QueryExecutionError(
                descriptor.name,
                f"query timed out after exceeding the {self.timeout_ms} ms limit",
            )
        except ConnectionFailure as e:
            raise StoreConnectionError(f"Lost connection while running '{descriptor.name}': {e}")
        except PyMongoError as e:
            raise QueryExecutionError(descriptor.name, e) from e
        except (BSONError, OverflowError) as e:
            # parameters the driver cannot encode (sets, oversized ints)
            raise MalformedDescriptorError(descriptor.name, e) from e

    # ---- per-kind handlers ----

    def _find(self, params: FindParams) -> Result:
        cursor = self.collection.find(params.filter, params.projection)
        if params.sort:
            cursor = cursor.sort(list(params.sort))
        if params.skip:
            cursor = cursor.skip(params.skip)
        if params.limit:
            cursor = cursor.limit(params.limit)
        if self.timeout_ms:
            cursor = cursor.max_time_ms(self.timeout_ms)

        results = _stringify_ids(list(cursor))
        return {"data": results, "total_count": len(results)}

    def _update_one(self, params: UpdateOneParams) -> Result:
        outcome = self.collection.update_one(params.filter, params.update)
        return {
            "matched_count": outcome.matched_count,
            "modified_count": outcome.modified_count,
        }

    def _delete_one(self, params: DeleteOneParams) -> Result:
        outcome = self.collection.delete_one(params.filter)
        return {"deleted_count": outcome.deleted_count}

    def _aggregate(self, params: AggregateParams) -> Result:
        pipeline = list(params.pipeline)
        if self.timeout_ms:
            cursor = self.collection.aggregate(pipeline, maxTimeMS=self.timeout_ms)
        else:
            cursor = self.collection.aggregate(pipeline)

        results = _stringify_ids(list(cursor))
        return {"data": results, "total_count": len(results)}

    def _create_index(self, params: CreateIndexParams) -> Result:
        # create_index is a no-op returning the same name when an
        # equivalent index already exists
        keys = list(params.keys)
        if params.unique:
            name = self.collection.create_index(keys, unique=True)
        else:
            name = self.collection.create_index(keys)
        return {"index_name": name}

    def _explain(self, params: ExplainParams) -> Result:
        explanation = self.collection.database.command(
            "explain",
            {"find": self.collection.name, "filter": params.filter},
            verbosity="executionStats",
        )
        stats = explanation.get("executionStats") or {}
        return {
            "execution_time_ms": stats.get("executionTimeMillis"),
            "total_docs_examined": stats.get("totalDocsExamined"),
        }

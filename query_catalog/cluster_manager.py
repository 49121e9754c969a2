from contextlib import contextmanager
from typing import Iterator

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import (
    ConfigurationError,
    ConnectionFailure,
    OperationFailure,
    ServerSelectionTimeoutError,
)

from config import SERVER_SELECTION_TIMEOUT_MS
from errors import StoreConnectionError
from logger import logger


def connect_to_cluster(mongo_uri: str, timeout_ms: int = SERVER_SELECTION_TIMEOUT_MS) -> MongoClient:
    """Create a MongoClient and force a round-trip so failures surface here."""
    try:
        client = MongoClient(mongo_uri, serverSelectionTimeoutMS=timeout_ms)
    except (ConfigurationError, ValueError) as e:
        raise StoreConnectionError(f"Invalid MongoDB URI: {e}")

    try:
        client.admin.command("ping")
        return client
    except ServerSelectionTimeoutError:
        client.close()
        raise StoreConnectionError(
            "Connection timed out. Check your MongoDB URI and network."
        )
    except ConnectionFailure as e:
        client.close()
        raise StoreConnectionError(f"Failed to connect to MongoDB cluster: {e}")
    except OperationFailure as e:
        # e.g. authentication failed (code 18)
        client.close()
        raise StoreConnectionError(f"MongoDB refused the connection: {e}")


@contextmanager
def open_collection(
    mongo_uri: str,
    database_name: str,
    collection_name: str,
) -> Iterator[Collection]:
    """Yield a handle on ``database_name.collection_name``.

    The underlying client is closed on every exit path, including when the
    body raises.
    """
    client = connect_to_cluster(mongo_uri)
    logger.info("[CLUSTER] Connected to %s (%s.%s)", mongo_uri, database_name, collection_name)
    try:
        yield client[database_name][collection_name]
    finally:
        client.close()
        logger.info("[CLUSTER] Connection closed")

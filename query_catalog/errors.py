"""
Error taxonomy for catalog runs.

- ``StoreConnectionError``: the store cannot be reached; fatal.
- ``QueryExecutionError``: one descriptor's operation failed; isolated.
- ``MalformedDescriptorError``: one descriptor's parameters are invalid,
  detected before anything is sent to the store; isolated.
"""


class StoreConnectionError(ConnectionError):
    """Cannot establish or keep connectivity with the document store."""


class QueryExecutionError(Exception):
    """A single descriptor's operation failed."""

    def __init__(self, descriptor_name: str, cause: object):
        self.descriptor_name = descriptor_name
        self.cause = cause
        super().__init__(f"{descriptor_name}: {cause}")


class MalformedDescriptorError(QueryExecutionError):
    """A descriptor's parameters are invalid for its kind."""

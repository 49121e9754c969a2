"""
Response formatter: turns execution results into console lines.

Each factory returns a ``Formatter`` (``result dict -> list[str]``) that a
descriptor carries. Document templates use ``str.format`` syntax against
the document's fields; missing or null fields render as ``N/A`` and a
value that does not fit its format spec falls back to ``str(value)``.
"""

import string
from typing import Any, Dict, List

from descriptors import Formatter, Result

MISSING = "N/A"
NO_DOCUMENTS = "(no documents)"
NO_RESULTS = "(no results)"


# ---------------------- CONSOLE COLOURS ----------------------

def colour(text, code):
    """ANSI colour wrapper."""
    return f"\033[{code}m{text}\033[0m"


def green(t):  return colour(t, 32)
def red(t):    return colour(t, 31)
def bold(t):   return colour(t, 1)


# ---------------------- VALUE RENDERING ----------------------

def _sanitise_value(obj: Any) -> Any:
    """Recursively convert non-primitive types to printable representations."""
    if isinstance(obj, dict):
        return {k: _sanitise_value(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_sanitise_value(item) for item in obj]
    if isinstance(obj, bytes):
        return f"[binary {len(obj)} bytes]"
    if isinstance(obj, float) and obj.is_integer():
        # server-side arithmetic yields doubles (e.g. decade 1940.0)
        return int(obj)
    if isinstance(obj, (int, float, str, bool, type(None))):
        return obj
    # datetime, ObjectId, Decimal128, etc.
    return str(obj)


class _DocumentFormatter(string.Formatter):

    def get_value(self, key, args, kwargs):
        if isinstance(key, str):
            value = kwargs.get(key)
            return MISSING if value is None else value
        return super().get_value(key, args, kwargs)

    def format_field(self, value, format_spec):
        try:
            return super().format_field(value, format_spec)
        except (TypeError, ValueError):
            return str(value)


_formatter = _DocumentFormatter()


def render_document(template: str, doc: Dict[str, Any]) -> str:
    return _formatter.vformat(template, (), _sanitise_value(doc))


def short(doc: Dict[str, Any]) -> str:
    """One-line rendering of a whole document: ``{title: '1984', price: 12}``."""
    fields = ", ".join(f"{k}: {v!r}" for k, v in _sanitise_value(doc).items())
    return "{" + fields + "}"


def _numbered(lines: List[str]) -> List[str]:
    return [f"{i}. {line}" for i, line in enumerate(lines, 1)]


# ---------------------- FORMATTER FACTORIES ----------------------

def document_lines(template: str) -> Formatter:
    """Numbered line per document, or a single ``(no documents)`` line."""
    def format_documents(result: Result) -> List[str]:
        docs = result.get("data", [])
        if not docs:
            return [NO_DOCUMENTS]
        return _numbered([render_document(template, d) for d in docs])
    return format_documents


def compact_document_lines() -> Formatter:
    """Numbered one-line rendering of each whole document."""
    def format_compact(result: Result) -> List[str]:
        docs = result.get("data", [])
        if not docs:
            return [NO_DOCUMENTS]
        return _numbered([short(d) for d in docs])
    return format_compact


def group_lines(template: str) -> Formatter:
    """Unnumbered line per aggregation group, or ``(no results)``."""
    def format_groups(result: Result) -> List[str]:
        groups = result.get("data", [])
        if not groups:
            return [NO_RESULTS]
        return [render_document(template, g) for g in groups]
    return format_groups


def update_summary(result: Result) -> List[str]:
    return [f"Matched: {result['matched_count']}, Modified: {result['modified_count']}"]


def delete_summary(result: Result) -> List[str]:
    return [f"Deleted count: {result['deleted_count']}"]


def index_summary(result: Result) -> List[str]:
    return [f"Created index: {result['index_name']}"]


def explain_summary(result: Result) -> List[str]:
    """Explain statistics are store-dependent; shown for information only."""
    elapsed = result.get("execution_time_ms")
    examined = result.get("total_docs_examined")
    return [
        f"Execution time (ms): {MISSING if elapsed is None else elapsed}",
        f"Total docs examined: {MISSING if examined is None else examined}",
    ]

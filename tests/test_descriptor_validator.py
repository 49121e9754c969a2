"""Tests for descriptor parameter validation."""

import pytest

from catalog import BOOKSTORE_CATALOG
from descriptor_validator import validate_descriptor
from descriptors import (
    AggregateParams,
    FindParams,
    QueryDescriptor,
    QueryKind,
)
from errors import MalformedDescriptorError, QueryExecutionError
from response_formatter import document_lines, index_summary


def _descriptor(kind, params, name="sample"):
    return QueryDescriptor(name=name, kind=kind, params=params, formatter=document_lines("{title}"))


class TestFindParams:
    """Tests for find parameter parsing."""

    def test_defaults_match_all(self):
        """An empty payload is a match-all find with no paging."""
        params = validate_descriptor(_descriptor(QueryKind.FIND, {}))

        assert isinstance(params, FindParams)
        assert params.filter == {}
        assert params.projection is None
        assert params.sort is None
        assert params.skip == 0
        assert params.limit == 0

    def test_sort_is_kept_in_declared_order(self):
        params = validate_descriptor(_descriptor(
            QueryKind.FIND, {"sort": [("price", 1), ("title", -1)]},
        ))
        assert list(params.sort) == [("price", 1), ("title", -1)]

    @pytest.mark.parametrize("params", [
        {"limit": -1},
        {"skip": -5},
        {"sort": [("price", 2)]},
        {"projection": {"title": 3}},
        {"filter": {}, "colour": "blue"},
        {"limit": 2 ** 63},
        {"skip": 2 ** 64},
    ])
    def test_invalid_values_rejected(self, params):
        with pytest.raises(MalformedDescriptorError):
            validate_descriptor(_descriptor(QueryKind.FIND, params))

    def test_empty_sort_rejected(self):
        with pytest.raises(MalformedDescriptorError, match="sort specification is empty"):
            validate_descriptor(_descriptor(QueryKind.FIND, {"sort": []}))


class TestWriteParams:
    """Tests for update and delete parameters."""

    def test_update_requires_operators(self):
        with pytest.raises(MalformedDescriptorError, match=r"\$set"):
            validate_descriptor(_descriptor(
                QueryKind.UPDATE_ONE, {"filter": {"title": "1984"}, "update": {"price": 12.0}},
            ))

    def test_update_requires_non_empty_document(self):
        with pytest.raises(MalformedDescriptorError, match="update document is empty"):
            validate_descriptor(_descriptor(
                QueryKind.UPDATE_ONE, {"filter": {"title": "1984"}, "update": {}},
            ))

    def test_update_requires_filter(self):
        with pytest.raises(MalformedDescriptorError):
            validate_descriptor(_descriptor(
                QueryKind.UPDATE_ONE, {"update": {"$set": {"price": 1}}},
            ))

    def test_delete_with_empty_filter_rejected(self):
        with pytest.raises(MalformedDescriptorError, match="empty filter"):
            validate_descriptor(_descriptor(QueryKind.DELETE_ONE, {"filter": {}}))


class TestAggregateParams:
    """Tests for aggregation pipelines."""

    def test_valid_pipeline(self):
        pipeline = [{"$group": {"_id": "$genre"}}, {"$sort": {"_id": 1}}]
        params = validate_descriptor(_descriptor(QueryKind.AGGREGATE, {"pipeline": pipeline}))

        assert isinstance(params, AggregateParams)
        assert params.pipeline == pipeline

    def test_empty_pipeline_rejected(self):
        with pytest.raises(MalformedDescriptorError, match="pipeline is empty") as exc:
            validate_descriptor(_descriptor(QueryKind.AGGREGATE, {"pipeline": []}, name="empty"))
        assert exc.value.descriptor_name == "empty"

    def test_stage_not_in_allow_list(self):
        with pytest.raises(MalformedDescriptorError, match=r"\$out"):
            validate_descriptor(_descriptor(
                QueryKind.AGGREGATE, {"pipeline": [{"$out": "elsewhere"}]},
            ))

    def test_stage_with_two_operators(self):
        with pytest.raises(MalformedDescriptorError, match="exactly one operator"):
            validate_descriptor(_descriptor(
                QueryKind.AGGREGATE,
                {"pipeline": [{"$sort": {"price": 1}, "$limit": 1}]},
            ))


class TestCreateIndexParams:
    """Tests for index key specifications."""

    def _index(self, params):
        return QueryDescriptor(
            name="index", kind=QueryKind.CREATE_INDEX, params=params, formatter=index_summary,
        )

    def test_compound_keys(self):
        params = validate_descriptor(self._index(
            {"keys": [("author", 1), ("published_year", -1)]},
        ))
        assert list(params.keys) == [("author", 1), ("published_year", -1)]
        assert params.unique is False

    def test_empty_keys_rejected(self):
        with pytest.raises(MalformedDescriptorError, match="empty"):
            validate_descriptor(self._index({"keys": []}))

    def test_duplicate_field_rejected(self):
        with pytest.raises(MalformedDescriptorError, match="listed twice"):
            validate_descriptor(self._index({"keys": [("title", 1), ("title", -1)]}))

    def test_bad_direction_rejected(self):
        with pytest.raises(MalformedDescriptorError):
            validate_descriptor(self._index({"keys": [("title", "up")]}))


class TestCatalog:
    """The shipped catalog must be well-formed."""

    def test_every_descriptor_validates(self):
        for descriptor in BOOKSTORE_CATALOG:
            validate_descriptor(descriptor)

    def test_unknown_kind_rejected(self):
        with pytest.raises(MalformedDescriptorError, match="unknown query kind"):
            validate_descriptor(_descriptor("drop_everything", {}))

    def test_malformed_is_an_execution_error(self):
        """Malformed descriptors are isolated the same way as failed queries."""
        assert issubclass(MalformedDescriptorError, QueryExecutionError)


class TestImmutability:
    """Descriptors cannot change once declared."""

    def test_params_are_read_only(self):
        descriptor = _descriptor(QueryKind.FIND, {"filter": {"title": "1984"}})

        with pytest.raises(TypeError):
            descriptor.params["limit"] = 1

    def test_declared_dict_is_copied(self):
        declared = {"filter": {"title": "1984"}}
        descriptor = _descriptor(QueryKind.FIND, declared)

        declared["limit"] = 1

        assert "limit" not in descriptor.params

    def test_catalog_is_a_tuple(self):
        assert isinstance(BOOKSTORE_CATALOG, tuple)

"""
Unit tests for the code/message/details error bridge.
"""

import logging

import pytest
from graphql.language import OperationType

from graphql_shorts import ErrorMessage, TopLevelError, UserError, translate_error
from graphql_shorts.bridges import build_error_message_user_errors
from graphql_shorts.bridges.error_message import params_error_tree

pytestmark = pytest.mark.unit


class TestTranslateMutationErrors:
    @pytest.mark.parametrize(
        "code",
        ["bad_request", "conflict", "forbidden", "gone", "not_found", "precondition_failed", "unprocessable_entity"],
    )
    def test_user_error_codes(self, code):
        records = translate_error(ErrorMessage(code, "went wrong"), "mutation")
        assert records == [UserError(field=("unknown",), message="went wrong")]

    @pytest.mark.parametrize(
        "code", ["internal_server_error", "service_unavailable", "too_many_requests", "unauthorized"]
    )
    def test_top_level_codes(self, code):
        records = translate_error(ErrorMessage(code, "went wrong", {"retry": 1}), "mutation")
        assert records == [TopLevelError(code=code, message="went wrong", extensions={"retry": 1})]

    def test_field_is_used_for_user_errors(self):
        records = translate_error(
            ErrorMessage("not_found", "no such author"), OperationType.MUTATION, field=["input", "author"]
        )
        assert records == [UserError(field=("input", "author"), message="no such author")]

    def test_resolve_can_expand_params(self):
        def resolve(params):
            return [dict(params, field=("input", "a")), dict(params, field=("input", "b"))]

        records = translate_error(ErrorMessage("conflict", "duplicate"), "mutation", resolve=resolve)
        assert [record.field for record in records] == [("input", "a"), ("input", "b")]

    def test_mapping_error(self):
        records = translate_error({"code": "gone", "message": "deleted"}, "mutation")
        assert records == [UserError(field=("unknown",), message="deleted")]

    def test_list_of_errors(self):
        records = translate_error(
            [ErrorMessage("gone", "deleted"), ErrorMessage("unauthorized", "log in")], "mutation"
        )
        assert [type(record) for record in records] == [UserError, TopLevelError]


class TestTranslateQueryErrors:
    @pytest.mark.parametrize(
        "code",
        ["conflict", "forbidden", "gone", "not_found", "unprocessable_entity", "unauthorized"],
    )
    def test_codes_become_top_level_errors(self, code):
        records = translate_error(ErrorMessage(code, "nope", {"id": 1}), "query")
        assert records == [TopLevelError(code=code, message="nope", extensions={"id": 1})]

    def test_mutation_only_code_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="graphql_shorts.bridges.error_message"):
            records = translate_error(ErrorMessage("bad_request", "nope"), "query")
        assert records[0].code == "internal_server_error"
        assert "bad_request" in caplog.text


class TestTranslateErrorEdgeCases:
    def test_unknown_code_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="graphql_shorts.bridges.error_message"):
            records = translate_error(ErrorMessage("im_a_teapot", "short and stout"), "mutation")
        assert len(records) == 1
        assert records[0].code == "internal_server_error"
        assert "im_a_teapot" in caplog.text

    def test_subscriptions_are_not_supported(self):
        with pytest.raises(NotImplementedError):
            translate_error(ErrorMessage("not_found", "nope"), "subscription")

    def test_unknown_operation_raises(self):
        with pytest.raises(ValueError):
            translate_error(ErrorMessage("not_found", "nope"), "fragment")


class TestBuildUserErrors:
    def test_params_are_mapped_onto_input(self):
        error = ErrorMessage(
            "unprocessable_entity",
            "is invalid",
            {"params": {"title": "x", "comments": [{"body": "y"}], "internal": 1}},
        )
        arguments = {"input": {"title": "x", "comments": [{"body": "y"}]}}
        definition = {"keys": ["title", ("comments", {"keys": ["body"]})]}

        assert build_error_message_user_errors(error, arguments, definition) == [
            UserError(field=("input", "title"), message="is invalid"),
            UserError(field=("input", "comments", "body"), message="is invalid"),
        ]

    def test_top_level_code_is_kept(self):
        error = ErrorMessage("service_unavailable", "try later", {"retry_after": 5})
        records = build_error_message_user_errors(error, {"input": {}}, {"keys": []})
        assert records == [
            TopLevelError(code="service_unavailable", message="try later", extensions={"retry_after": 5})
        ]

    def test_params_error_tree(self):
        tree = params_error_tree({"a": 1, "b": {"c": 2}, "d": [{"e": 3}], "f": [1, 2]}, "bad")
        assert tree == {"a": ["bad"], "b": {"c": ["bad"]}, "d": [{"e": ["bad"]}], "f": ["bad"]}

    def test_scalars_keep_list_positions(self):
        assert params_error_tree({"tags": ["x", {"name": 1}]}, "bad") == {"tags": [{}, {"name": ["bad"]}]}

    def test_mixed_list_params_map_onto_matching_input(self):
        error = ErrorMessage("unprocessable_entity", "is invalid", {"params": {"tags": ["x", {"name": "y"}]}})
        arguments = {"input": {"tags": [{"label": "x"}, {"name": "y"}]}}
        records = build_error_message_user_errors(error, arguments, {"keys": [("tags", {"keys": ["name"]})]})
        assert records == [UserError(field=("input", "tags", "name"), message="is invalid")]

"""
Unit tests for the resolution middleware and the handle_errors decorator.
"""

import logging
from types import SimpleNamespace

import graphene
import pytest
from django.core.exceptions import ValidationError
from graphql.language import OperationType

from graphql_shorts import (
    ANY,
    ErrorMessage,
    ErrorResolutionMiddleware,
    IsInstance,
    MappingDefinitionError,
    ResolutionErrors,
    ResolveContractError,
    Selector,
    SelectorContractError,
    TopLevelError,
    UnrecognizedErrorRecord,
    UserError,
    build_user_errors,
    handle_errors,
    translate_error,
    translate_validation_errors,
)
from graphql_shorts.middleware import operation_type
from graphql_shorts.types import success_field, user_errors_field

pytestmark = pytest.mark.unit

POST_DEFINITION = {"keys": ["title", ("comments", {"keys": ["body"]})]}


def post_selectors(root, info, **kwargs):
    return [
        Selector(
            IsInstance(ValidationError),
            lambda error: translate_validation_errors(error, kwargs, POST_DEFINITION),
        ),
        Selector(IsInstance(ErrorMessage), lambda error: translate_error(error, "mutation")),
    ]


class CommentInput(graphene.InputObjectType):
    body = graphene.String()


class PostInput(graphene.InputObjectType):
    title = graphene.String()
    comments = graphene.List(CommentInput)


class PostPayload(graphene.ObjectType):
    title = graphene.String()
    user_errors = user_errors_field()
    success = success_field()


@handle_errors(post_selectors)
def resolve_create_post(root, info, input):
    title = input.get("title")
    if title == "":
        raise ValidationError({"title": ["can't be blank"]})
    if title == "unavailable":
        raise ErrorMessage("service_unavailable", "Try again later", {"retry_after": 5})
    if title == "missing":
        raise ErrorMessage("not_found", "Author not found")
    if title == "boom":
        raise RuntimeError("boom")
    if title == "partial":
        raise ResolutionErrors([UserError(("input", "title"), "is reserved")], value={"title": "partial"})
    if title == "weird":
        raise ResolutionErrors(["not a record"])
    if title == "object":
        return PostPayload(title=title)
    return {"title": title}


def resolve_post(root, info, id):
    if id == "user":
        raise ResolutionErrors([UserError(("id",), "is invalid")])
    if id == "both":
        raise ResolutionErrors(
            [UserError(("id",), "is invalid"), TopLevelError("forbidden", "Not allowed")]
        )
    return resolve_post_by_id(root, info, id=id)


@handle_errors(Selector(IsInstance(ErrorMessage), lambda error: translate_error(error, "query")))
def resolve_post_by_id(root, info, id):
    if id == "404":
        raise ErrorMessage("not_found", "Post not found", {"id": id})
    return {"title": f"Post {id}"}


class Query(graphene.ObjectType):
    post = graphene.Field(PostPayload, id=graphene.ID(required=True), resolver=resolve_post)


class Mutation(graphene.ObjectType):
    create_post = graphene.Field(
        PostPayload, input=PostInput(required=True), resolver=resolve_create_post
    )


schema = graphene.Schema(query=Query, mutation=Mutation)

CREATE_POST = """
mutation CreatePost($input: PostInput!) {
  createPost(input: $input) {
    title
    success
    userErrors { field message }
  }
}
"""

GET_POST = """
query GetPost($id: ID!) {
  post(id: $id) { title }
}
"""


def execute(query, variables, middleware=None, context=None):
    return schema.execute(
        query,
        variables=variables,
        context_value=context or SimpleNamespace(META={"HTTP_X_REQUEST_ID": "req-1"}),
        middleware=[middleware or ErrorResolutionMiddleware()],
    )


def create_post(title, **kwargs):
    return execute(CREATE_POST, {"input": {"title": title}}, **kwargs)


class TestMutations:
    def test_success_flag_is_set(self):
        result = create_post("Hello")
        assert result.errors is None
        assert result.data == {"createPost": {"title": "Hello", "success": True, "userErrors": None}}

    def test_success_flag_on_object_payload(self):
        result = create_post("object")
        assert result.errors is None
        assert result.data["createPost"]["success"] is True

    def test_user_errors_are_added_to_payload(self):
        result = create_post("")
        assert result.errors is None
        assert result.data == {
            "createPost": {
                "title": None,
                "success": False,
                "userErrors": [{"field": ["input", "title"], "message": "can't be blank"}],
            }
        }

    def test_partial_value_is_kept(self):
        result = create_post("partial")
        assert result.data["createPost"] == {
            "title": "partial",
            "success": False,
            "userErrors": [{"field": ["input", "title"], "message": "is reserved"}],
        }

    def test_user_error_codes_from_error_messages(self):
        result = create_post("missing")
        assert result.data["createPost"]["userErrors"] == [
            {"field": ["unknown"], "message": "Author not found"}
        ]

    def test_top_level_errors_null_the_field(self):
        result = create_post("unavailable")
        assert result.data == {"createPost": None}
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.message == "Try again later"
        assert error.path == ["createPost"]
        assert error.extensions["code"] == "SERVICE_UNAVAILABLE"
        assert error.extensions["retryAfter"] == 5
        assert error.extensions["requestId"] == "req-1"
        assert "timestamp" in error.extensions

    def test_unmatched_errors_fall_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="graphql_shorts.handler"):
            result = create_post("boom")
        assert result.data == {"createPost": None}
        assert result.errors[0].extensions["code"] == "INTERNAL_SERVER_ERROR"
        assert "Selectors did not match" in caplog.text

    def test_custom_payload_keys(self):
        query = """
        mutation CreatePost($input: PostInput!) {
          createPost(input: $input) { title }
        }
        """
        middleware = ErrorResolutionMiddleware(success_key="ok", user_error_key="problems")
        value = middleware.resolve_mutation(None, [UserError(("input", "title"), "x")], None)
        assert value == {"problems": [{"field": ["input", "title"], "message": "x"}], "ok": False}
        assert execute(query, {"input": {"title": "Hi"}}, middleware=middleware).errors is None

    def test_missing_request_id(self):
        result = create_post("unavailable", context=SimpleNamespace(META={}))
        assert result.errors[0].extensions["requestId"] is None


class TestUnrecognizedErrors:
    def test_warn_policy(self, caplog):
        with caplog.at_level(logging.WARNING, logger="graphql_shorts.middleware"):
            result = create_post("weird")
        assert result.errors[0].extensions["code"] == "INTERNAL_SERVER_ERROR"
        assert result.errors[0].message == "An unexpected error occurred, please try again later."
        assert "unrecognized error" in caplog.text

    def test_ignore_policy(self, caplog):
        middleware = ErrorResolutionMiddleware(on_unrecognized_error="ignore")
        with caplog.at_level(logging.WARNING, logger="graphql_shorts.middleware"):
            result = create_post("weird", middleware=middleware)
        assert result.errors[0].extensions["code"] == "INTERNAL_SERVER_ERROR"
        assert caplog.text == ""

    def test_raise_policy(self):
        middleware = ErrorResolutionMiddleware(on_unrecognized_error="raise")
        result = create_post("weird", middleware=middleware)
        assert isinstance(result.errors[0].original_error, UnrecognizedErrorRecord)
        assert result.errors[0].original_error.value == "not a record"


class TestQueries:
    def test_plain_value(self):
        result = execute(GET_POST, {"id": "1"})
        assert result.errors is None
        assert result.data == {"post": {"title": "Post 1"}}

    def test_field_errors_are_top_level(self):
        result = execute(GET_POST, {"id": "404"})
        assert result.data == {"post": None}
        assert result.errors[0].extensions["code"] == "NOT_FOUND"
        assert result.errors[0].extensions["id"] == "404"

    def test_user_errors_alone_are_rejected(self, caplog):
        with caplog.at_level(logging.WARNING, logger="graphql_shorts.middleware"):
            result = execute(GET_POST, {"id": "user"})
        assert result.data == {"post": None}
        assert "did not return a `TopLevelError`" in result.errors[0].message
        assert "not allowed on queries" in caplog.text

    def test_user_errors_are_dropped_next_to_top_level_errors(self):
        result = execute(GET_POST, {"id": "both"})
        assert len(result.errors) == 1
        assert result.errors[0].extensions["code"] == "FORBIDDEN"


class TestHandleErrors:
    def test_errors_are_wrapped(self):
        @handle_errors(Selector(IsInstance(KeyError), lambda e: TopLevelError("not_found", "gone")))
        def resolver(root, info):
            raise KeyError("post")

        with pytest.raises(ResolutionErrors) as excinfo:
            resolver(None, None)

        assert excinfo.value.errors == [TopLevelError("not_found", "gone")]
        assert isinstance(excinfo.value.__cause__, KeyError)

    def test_selector_factory_receives_arguments(self):
        seen = {}

        def selectors(root, info, **kwargs):
            seen.update(kwargs)
            return [Selector(IsInstance(ValueError), lambda e: UserError(("input", "id"), str(e)))]

        @handle_errors(selectors)
        def resolver(root, info, **kwargs):
            raise ValueError("bad id")

        with pytest.raises(ResolutionErrors) as excinfo:
            resolver(None, None, id="1")

        assert seen == {"id": "1"}
        assert excinfo.value.errors == [UserError(("input", "id"), "bad id")]

    def test_resolution_errors_pass_through(self):
        original = ResolutionErrors([TopLevelError("gone", "deleted")])

        @handle_errors([])
        def resolver():
            raise original

        with pytest.raises(ResolutionErrors) as excinfo:
            resolver()

        assert excinfo.value is original

    @pytest.mark.parametrize(
        "error",
        [
            SelectorContractError("bad transform"),
            ResolveContractError("bad resolve"),
            MappingDefinitionError("bad definition"),
        ],
    )
    def test_contract_errors_propagate(self, error):
        @handle_errors(Selector(ANY, lambda e: TopLevelError("internal_server_error", "oops")))
        def resolver():
            raise error

        with pytest.raises(type(error)) as excinfo:
            resolver()

        assert excinfo.value is error

    def test_broken_resolve_callback_is_not_classified(self):
        @handle_errors(Selector(ANY, lambda e: TopLevelError("internal_server_error", "oops")))
        def resolver(root, info, input):
            return build_user_errors(
                {"title": ["x"]}, input, {"keys": [("title", {"resolve": lambda m, f: None})]}
            )

        with pytest.raises(ResolveContractError):
            resolver(None, None, input={"title": ""})

    def test_return_value_is_untouched(self):
        @handle_errors([])
        def resolver(value):
            return value

        assert resolver(3) == 3


class TestOperationType:
    def test_from_operation(self):
        info = SimpleNamespace(operation=SimpleNamespace(operation=OperationType.MUTATION))
        assert operation_type(info) == "mutation"

    def test_from_parent_type(self):
        info = SimpleNamespace(operation=None, parent_type=SimpleNamespace(name="RootQueryType"))
        assert operation_type(info) == "query"

    def test_unknown(self):
        with pytest.raises(ValueError):
            operation_type(SimpleNamespace(operation=None, parent_type=SimpleNamespace(name="Post")))


class TestTypes:
    def test_user_error_type_in_schema(self):
        sdl = str(schema)
        assert "type UserError" in sdl
        assert "userErrors: [UserError!]" in sdl

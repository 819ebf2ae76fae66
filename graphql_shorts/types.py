"""
Graphene types for user errors.

Mutation payloads expose user errors next to their data::

    class CreatePostPayload(graphene.ObjectType):
        post = graphene.Field(PostType)
        user_errors = user_errors_field()
        success = success_field()
"""

import graphene


class UserErrorType(graphene.ObjectType):
    """
    Field-scoped error returned inside a mutation payload.

    Attributes:
        field: Path from the input root to the offending value
        message: The error message describing what went wrong
    """

    class Meta:
        name = "UserError"

    field = graphene.List(
        graphene.NonNull(graphene.String),
        description="Path from the input root to the offending value",
    )
    message = graphene.String(
        required=True,
        description="The error message describing what went wrong",
    )


def user_errors_field(**kwargs) -> graphene.List:
    kwargs.setdefault("description", "Field-scoped errors raised by the mutation")
    return graphene.List(graphene.NonNull(UserErrorType), **kwargs)


def success_field(**kwargs) -> graphene.Boolean:
    kwargs.setdefault("description", "Whether the mutation succeeded")
    return graphene.Boolean(**kwargs)


__all__ = ["UserErrorType", "success_field", "user_errors_field"]

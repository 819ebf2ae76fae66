"""
Bridges from application error shapes to the structural mapper.

- ``validation``: Django ``ValidationError``, forms and formsets.
- ``error_message``: ``code``/``message``/``details`` errors.
"""

from .error_message import ErrorMessage, translate_error
from .error_message import build_user_errors as build_error_message_user_errors
from .validation import error_tree, translate_validation_errors

__all__ = [
    "ErrorMessage",
    "build_error_message_user_errors",
    "error_tree",
    "translate_error",
    "translate_validation_errors",
]

from __future__ import annotations

import functools
import logging
import warnings
from typing import Any, Callable, TypeVar

from config import settings
from core.tracking.errors import IncompleteObjectError, UntrackedReturnWarning
from core.tracking.instrument import completeness_of

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _check_result(function_name: str, result: Any) -> Any:
    report = completeness_of(result)

    if report is None:
        message = (
            f"The function {function_name} did not return an object that tracks its fields "
            f"(got {type(result).__name__}). You probably forgot to apply @track_props to the class."
        )
        if settings.WARN_ON_UNTRACKED_RETURN:
            # stacklevel points at the caller of the wrapped function
            warnings.warn(message, UntrackedReturnWarning, stacklevel=3)
        else:
            logger.debug(message)
        return result

    if not report.is_complete:
        logger.warning("Rejected result of %s, unset: %s", function_name, report.describe())
        raise IncompleteObjectError(function_name, report.missing_fields)

    return result


def enforce_all_props_set(fn: F) -> F:
    """
    Decorator: the returned object must have every declared field set.

    Raises IncompleteObjectError naming the unset fields; warns with
    UntrackedReturnWarning when the result is not an instrumented object.
    Apply beneath @staticmethod / @classmethod.
    """
    function_name = getattr(fn, "__qualname__", None) or getattr(fn, "__name__", repr(fn))

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        return _check_result(function_name, fn(*args, **kwargs))

    return wrapper  # type: ignore[return-value]


def checked_call(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Call fn once with the same check enforce_all_props_set applies."""
    function_name = getattr(fn, "__qualname__", None) or getattr(fn, "__name__", repr(fn))
    return _check_result(function_name, fn(*args, **kwargs))

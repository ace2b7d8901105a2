"""
Validation decorators for ndfilter entry points.

Provides reusable validation logic for parameter checking across the public
filter functions. Checks run before the wrapped function, so an invalid
argument never reaches a numeric pass.
"""

from __future__ import annotations

import numbers
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeAlias

F: TypeAlias = Callable[..., Any]


def _lookup(args: tuple, kwargs: dict, param_name: str, param_index: int) -> tuple[bool, Any]:
    if len(args) > param_index:
        return True, args[param_index]
    if param_name in kwargs:
        return True, kwargs[param_name]
    return False, None


def _require_number(param_name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(
            f"{param_name} must be a number, got {type(value).__name__}. "
            f"Provide a numeric value (int or float)."
        )


def validate_range(
    min_val: float,
    max_val: float,
    param_name: str = "value",
    param_index: int = 1,
) -> Callable[[F], F]:
    """
    Decorator for validating numeric parameter ranges.

    Args:
        min_val: Minimum allowed value (inclusive)
        max_val: Maximum allowed value (inclusive)
        param_name: Name of parameter for error messages
        param_index: Position of parameter in function signature (default: 1 = first arg after data)

    Returns:
        Decorated function with range validation

    Example:
        >>> @validate_range(0, 5, "order")
        ... def spline_filter(data, order=3):
        ...     ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            found, value = _lookup(args, kwargs, param_name, param_index)
            if not found:
                # No value provided, let function handle its default
                return func(*args, **kwargs)

            _require_number(param_name, value)

            if not min_val <= value <= max_val:
                suggestion = ""
                if param_name == "order":
                    suggestion = " Use 3 (cubic) for the usual spline pre-filter."
                elif param_name == "sigma":
                    suggestion = " Use 0 to leave an axis unfiltered."

                raise ValueError(
                    f"{param_name}={value} is outside valid range [{min_val}, {max_val}].{suggestion}"
                )

            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator


def validate_positive(param_name: str = "value", param_index: int = 1) -> Callable[[F], F]:
    """
    Decorator for validating positive numeric parameters.

    Args:
        param_name: Name of parameter for error messages
        param_index: Position of parameter in function signature

    Returns:
        Decorated function with positive validation

    Example:
        >>> @validate_positive("size")
        ... def uniform_filter1d(data, size, axis=-1):
        ...     ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            found, value = _lookup(args, kwargs, param_name, param_index)
            if not found:
                return func(*args, **kwargs)

            _require_number(param_name, value)

            if value <= 0:
                suggestion = ""
                if "size" in param_name:
                    suggestion = " A window needs at least one sample; size=1 is the identity."

                raise ValueError(f"{param_name}={value} must be positive (> 0).{suggestion}")

            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator


def validate_choices(
    valid_choices: set[str],
    param_name: str = "value",
    param_index: int = 1,
) -> Callable[[F], F]:
    """
    Decorator for validating string choices (case-insensitive).

    Args:
        valid_choices: Set of valid lower-case string choices
        param_name: Name of parameter for error messages
        param_index: Position of parameter in function signature

    Returns:
        Decorated function with choice validation

    Example:
        >>> @validate_choices({"constant", "nearest", "mirror", "reflect", "wrap"}, "mode", 3)
        ... def correlate1d(data, weights, axis=-1, mode="reflect"):
        ...     ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            found, value = _lookup(args, kwargs, param_name, param_index)
            if not found:
                return func(*args, **kwargs)

            if not isinstance(value, str):
                raise TypeError(f"{param_name} must be str, got {type(value).__name__}")

            if str(value).lower() not in valid_choices:
                choices_str = ", ".join(sorted(valid_choices))
                raise ValueError(
                    f"{param_name}='{value}' is not valid. Valid options are: {choices_str}"
                )

            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator

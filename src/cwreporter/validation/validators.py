"""
Validation functions for reporter options.
"""

import math
from typing import Any, Iterable, List, Optional, Tuple

from .exceptions import ValidationError

# CloudWatch namespaces are limited to 255 characters.
MAX_NAMESPACE_LENGTH = 255


def validate_namespace(namespace: Any, field_name: str = "namespace") -> str:
    """
    Validate a CloudWatch namespace.

    Args:
        namespace: Namespace to validate
        field_name: Name of the field being validated

    Returns:
        Validated namespace

    Raises:
        ValidationError: If the namespace is missing, empty or too long
    """
    if not isinstance(namespace, str) or not namespace.strip():
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=namespace
        )
    if len(namespace) > MAX_NAMESPACE_LENGTH:
        raise ValidationError(
            f"{field_name} must be at most {MAX_NAMESPACE_LENGTH} characters, got {len(namespace)}",
            field_name=field_name,
            value=namespace
        )
    return namespace


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a number within bounds.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated float value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    if math.isnan(float_value) or float_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and float_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    return float_value


def validate_percentiles(
    percentiles: Iterable[Any],
    field_name: str = "percentiles"
) -> Tuple[float, ...]:
    """
    Validate the quantiles to send for histograms and timers.

    Order is preserved and duplicates are dropped. An empty collection is
    allowed and disables percentile points.

    Raises:
        ValidationError: If any entry is not a number in [0, 1]
    """
    if isinstance(percentiles, (str, bytes)):
        raise ValidationError(
            f"{field_name} must be a list of numbers",
            field_name=field_name,
            value=percentiles
        )
    try:
        items = list(percentiles)
    except TypeError:
        raise ValidationError(
            f"{field_name} must be a list of numbers",
            field_name=field_name,
            value=percentiles
        )

    validated: List[float] = []
    for i, item in enumerate(items):
        quantile = validate_positive_float(
            item, min_value=0.0, max_value=1.0, field_name=f"{field_name} item {i}"
        )
        if quantile not in validated:
            validated.append(quantile)
    return tuple(validated)


def validate_enum_choice(
    value: Any,
    choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Args:
        value: Value to validate
        choices: List of allowed choices
        field_name: Name of the field being validated
        case_sensitive: Whether the comparison should be case-sensitive

    Returns:
        The matching choice, in the spelling used by `choices`

    Raises:
        ValidationError: If value is not in choices
    """
    str_value = str(value)

    if case_sensitive:
        if str_value not in choices:
            raise ValidationError(
                f"{field_name} must be one of {choices}, got {value}",
                field_name=field_name,
                value=value
            )
        return str_value

    lower_choices = [choice.lower() for choice in choices]
    lower_value = str_value.lower()
    if lower_value not in lower_choices:
        raise ValidationError(
            f"{field_name} must be one of {choices}, got {value}",
            field_name=field_name,
            value=value
        )
    return choices[lower_choices.index(lower_value)]

"""
Configuration validation utilities.

Turns the raw ``[reporter]`` table of a TOML file into a ReportConfiguration,
building the dimension providers it describes:

    [reporter]
    namespace = "my-service"
    percentiles = [0.5, 0.99]
    duration_unit = "milliseconds"
    instance_id = "ec2"            # or a fixed id, e.g. "web-1"

    [reporter.dimensions]
    Environment = "production"
"""

import logging
from typing import Any, Dict, List

from ..dimensions import DimensionProvider, InstanceIdProvider, StaticDimensionProvider
from ..validation import ValidationError, validate_enum_choice, validate_positive_float
from .reporter_config import ReportConfiguration

logger = logging.getLogger(__name__)

EC2_INSTANCE_ID = "ec2"

DURATION_UNITS = ["seconds", "milliseconds", "microseconds"]
RATE_UNITS = ["nanoseconds", "microseconds", "milliseconds", "seconds", "minutes", "hours", "days"]

_PROVIDER_KEYS = {"instance_id", "instance_id_url", "instance_id_timeout", "dimensions"}


def validate_reporter_config(reporter_data: Dict[str, Any]) -> ReportConfiguration:
    """
    Validate and create a ReportConfiguration from raw configuration data.

    Args:
        reporter_data: Raw ``[reporter]`` table from TOML

    Returns:
        Validated ReportConfiguration instance

    Raises:
        ValidationError: If validation fails
    """
    known = set(ReportConfiguration._BOOL_KEYS) | _PROVIDER_KEYS | {
        "namespace", "percentiles", "duration_unit", "rate_unit", "period_seconds",
    }
    for key in sorted(set(reporter_data) - known):
        logger.warning(f"Ignoring unknown option reporter.{key}")

    try:
        options = dict((k, v) for k, v in reporter_data.items() if k not in _PROVIDER_KEYS)

        if "duration_unit" in options:
            options["duration_unit"] = validate_enum_choice(
                options["duration_unit"], DURATION_UNITS,
                field_name="reporter.duration_unit", case_sensitive=False,
            )
        if "rate_unit" in options:
            options["rate_unit"] = validate_enum_choice(
                options["rate_unit"], RATE_UNITS,
                field_name="reporter.rate_unit", case_sensitive=False,
            )

        return ReportConfiguration.from_dict(
            options, dimension_providers=_dimension_providers(reporter_data)
        )

    except ValidationError as e:
        logger.error(f"Reporter configuration validation failed: {e}")
        raise


def _dimension_providers(reporter_data: Dict[str, Any]) -> List[DimensionProvider]:
    providers: List[DimensionProvider] = []

    instance_id = reporter_data.get("instance_id")
    if instance_id is not None:
        if not isinstance(instance_id, str) or not instance_id.strip():
            raise ValidationError(
                "reporter.instance_id must be a non-empty string",
                field_name="reporter.instance_id",
                value=instance_id,
            )
        kwargs: Dict[str, Any] = {}
        if "instance_id_url" in reporter_data:
            kwargs["url"] = str(reporter_data["instance_id_url"])
        if "instance_id_timeout" in reporter_data:
            kwargs["timeout"] = validate_positive_float(
                reporter_data["instance_id_timeout"],
                min_value=0.001,
                max_value=60.0,
                field_name="reporter.instance_id_timeout",
            )
        if instance_id.strip().lower() == EC2_INSTANCE_ID:
            providers.append(InstanceIdProvider(**kwargs))
        else:
            providers.append(InstanceIdProvider(instance_id=instance_id.strip(), **kwargs))

    dimensions = reporter_data.get("dimensions")
    if dimensions is not None:
        if not isinstance(dimensions, dict):
            raise ValidationError(
                "reporter.dimensions must be a table of name = value pairs",
                field_name="reporter.dimensions",
                value=dimensions,
            )
        for name, value in dimensions.items():
            if not isinstance(value, str) or not value:
                raise ValidationError(
                    f"reporter.dimensions.{name} must be a non-empty string",
                    field_name=f"reporter.dimensions.{name}",
                    value=value,
                )
        if dimensions:
            providers.append(StaticDimensionProvider(dimensions))

    return providers

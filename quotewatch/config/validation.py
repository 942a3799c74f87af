"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from ..data.resolution import Resolution

_POSITIVE_INT_FIELDS = (
    "draw_amount",
    "max_attempts",
    "widen_factor",
    "week_window_step",
    "week_min_entries",
    "month_window_step",
    "month_min_entries",
)


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_backfill_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate backfill parameters."""
        errors = []

        for field_name in _POSITIVE_INT_FIELDS:
            if field_name in params:
                value = params[field_name]
                if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                    errors.append(ValidationError(
                        field=field_name,
                        message="Must be a positive integer",
                        value=value
                    ))

        if "backlog_amount" in params:
            value = params["backlog_amount"]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                errors.append(ValidationError(
                    field="backlog_amount",
                    message="Must be a non-negative integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_indicator_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate indicator parameters."""
        errors = []

        for field_name in ("sma_period", "bollinger_period"):
            if field_name in params:
                value = params[field_name]
                if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                    errors.append(ValidationError(
                        field=field_name,
                        message="Must be an integer >= 1",
                        value=value
                    ))

        if "bollinger_factor" in params:
            value = params["bollinger_factor"]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                errors.append(ValidationError(
                    field="bollinger_factor",
                    message="Must be a non-negative number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_registry_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate registry parameters."""
        errors = []

        if "default_resolution" in params:
            value = params["default_resolution"]
            try:
                Resolution.from_code(value)
            except ValueError:
                errors.append(ValidationError(
                    field="default_resolution",
                    message="Must be one of 1, 5, 15, 30, 60, D, W, M",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_presenter_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate alert presenter parameters."""
        errors = []

        if "format" in params and params["format"] not in ("json", "pretty"):
            errors.append(ValidationError(
                field="format",
                message="Must be 'json' or 'pretty'",
                value=params["format"]
            ))

        return errors

    @classmethod
    def validate_config(cls, config: dict[str, Any]) -> list[ValidationError]:
        """Validate a merged configuration dictionary."""
        errors = []
        errors.extend(cls.validate_registry_params(config.get("registry", {})))
        errors.extend(cls.validate_backfill_params(config.get("backfill", {})))
        errors.extend(cls.validate_indicator_params(config.get("indicators", {})))
        errors.extend(cls.validate_presenter_params(config.get("presenter", {})))
        return errors

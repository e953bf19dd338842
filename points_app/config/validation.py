"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from eth_utils import is_address

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_positive_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_contract_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate fixed contract addresses."""
        errors = []

        for field in ("universal_points_address", "points_exchange_address"):
            if field in params:
                value = params[field]
                if not isinstance(value, str) or not is_address(value):
                    errors.append(ValidationError(
                        field=field,
                        message="Must be a valid contract address",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_token_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate token unit parameters."""
        errors = []

        if "decimals" in params:
            value = params["decimals"]
            if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= 36:
                errors.append(ValidationError(
                    field="decimals",
                    message="Must be an integer between 0 and 36",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_confirmation_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate confirmation wait parameters."""
        errors = []

        if "confirmations" in params:
            value = params["confirmations"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                errors.append(ValidationError(
                    field="confirmations",
                    message="Must be a positive integer",
                    value=value
                ))

        if "timeout_seconds" in params:
            value = params["timeout_seconds"]
            if not _is_positive_number(value):
                errors.append(ValidationError(
                    field="timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        if "poll_latency_seconds" in params:
            value = params["poll_latency_seconds"]
            if not _is_positive_number(value):
                errors.append(ValidationError(
                    field="poll_latency_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in VALID_LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {sorted(VALID_LOG_LEVELS)}",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "contracts" in config:
            errors.extend(ConfigValidator.validate_contract_params(config["contracts"]))

        if "token" in config:
            errors.extend(ConfigValidator.validate_token_params(config["token"]))

        if "confirmation" in config:
            errors.extend(ConfigValidator.validate_confirmation_params(config["confirmation"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors

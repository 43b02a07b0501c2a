"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_STORAGE_BACKENDS = ("sqlite", "memory")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_api_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate API parameters."""
        errors = []

        if "base_url" in params:
            value = params["base_url"]
            parsed = urlparse(value) if isinstance(value, str) else None
            if parsed is None or parsed.scheme not in ("http", "https") or not parsed.netloc:
                errors.append(ValidationError(
                    field="base_url",
                    message="Must be an absolute http(s) URL",
                    value=value
                ))

        if "timeout_seconds" in params:
            value = params["timeout_seconds"]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                errors.append(ValidationError(
                    field="timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        if "health_path" in params:
            value = params["health_path"]
            if not isinstance(value, str) or not value.startswith("/"):
                errors.append(ValidationError(
                    field="health_path",
                    message="Must be a path starting with '/'",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_session_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate session parameters."""
        errors = []

        if "token_key" in params:
            value = params["token_key"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="token_key",
                    message="Must be a non-empty string",
                    value=value
                ))

        if "clear_token_on_transient_error" in params:
            value = params["clear_token_on_transient_error"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="clear_token_on_transient_error",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_market_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate market listing parameters."""
        errors = []

        if "page_limit" in params:
            value = params["page_limit"]
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                errors.append(ValidationError(
                    field="page_limit",
                    message="Must be a positive integer",
                    value=value
                ))

        if "default_sort" in params:
            value = params["default_sort"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="default_sort",
                    message="Must be a non-empty string",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_storage_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate storage parameters."""
        errors = []

        if "backend" in params and params["backend"] not in _STORAGE_BACKENDS:
            errors.append(ValidationError(
                field="backend",
                message=f"Must be one of {', '.join(_STORAGE_BACKENDS)}",
                value=params["backend"]
            ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in _LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {', '.join(_LOG_LEVELS)}",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "api" in config:
            errors.extend(ConfigValidator.validate_api_params(config["api"]))

        if "session" in config:
            errors.extend(ConfigValidator.validate_session_params(config["session"]))

        if "markets" in config:
            errors.extend(ConfigValidator.validate_market_params(config["markets"]))

        if "storage" in config:
            errors.extend(ConfigValidator.validate_storage_params(config["storage"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors

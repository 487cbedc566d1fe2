"""
Validation and error handling for the webpack_live package.
"""

from .exceptions import (
    ArtifactNotFound,
    ConfigLoadFailure,
    EngineFailure,
    ErrorSeverity,
    LiveServerError,
    StoreReadFailure,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_subprocess_error,
)
from .validators import (
    validate_command_argv,
    validate_non_empty_string,
    validate_optional_string,
    validate_positive_float,
    validate_string_list,
)

__all__ = [
    # Exceptions
    "ArtifactNotFound",
    "ConfigLoadFailure",
    "EngineFailure",
    "ErrorSeverity",
    "LiveServerError",
    "StoreReadFailure",
    "ValidationError",
    # Handlers
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    "handle_subprocess_error",
    # Validators
    "validate_command_argv",
    "validate_non_empty_string",
    "validate_optional_string",
    "validate_positive_float",
    "validate_string_list",
]

"""Public façade for the opus_api.core package.

This module exposes logging helpers, errors, row models and the class code
normalizer. Callers should import these cross-cutting concerns from this
façade instead of the internal submodules.
"""

from .errors import (
    ApiError,
    ConfigError,
    DomainValidationError,
    RequestShapeError,
    StoreError,
    StoreOperationError,
    UnauthorizedError,
    store_errors,
)
from .fs_utils import read_json
from .logging_config import configure_logging
from .logging_utils import (
    log_error,
    log_info,
    log_step,
    log_success,
    log_warning,
)
from .models import ClassAssignment, ClassWeight, Style, StyleTrack
from .normalize import (
    CLASS_CODES,
    CLASS_REST,
    WEIGHTED_CLASSES,
    normalize_class_code,
    normalize_style_id,
    parse_bool_param,
)

__all__ = [
    "configure_logging",
    "log_info",
    "log_step",
    "log_success",
    "log_warning",
    "log_error",
    "read_json",
    "ApiError",
    "ConfigError",
    "DomainValidationError",
    "RequestShapeError",
    "StoreError",
    "StoreOperationError",
    "UnauthorizedError",
    "store_errors",
    "Style",
    "StyleTrack",
    "ClassAssignment",
    "ClassWeight",
    "CLASS_CODES",
    "CLASS_REST",
    "WEIGHTED_CLASSES",
    "normalize_class_code",
    "normalize_style_id",
    "parse_bool_param",
]

"""
Validation Package - Request Parameter Coercion.

Filters are lenient by contract: absent or blank parameters are skipped
and out-of-range numbers are clamped. This package holds the helpers
that turn raw request values into typed ones.
"""

from query_composer.validation.param_parser import (
    coerce_bool,
    coerce_int,
    get_param,
    is_blank,
    log_ignored_params,
    unknown_params,
)

__all__ = [
    "coerce_bool",
    "coerce_int",
    "get_param",
    "is_blank",
    "log_ignored_params",
    "unknown_params",
]

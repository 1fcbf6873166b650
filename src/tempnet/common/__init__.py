"""
Common utilities for the tempnet library.

This module provides shared functionality used across all other modules:
- Custom exception hierarchy
- Logging configuration and timing helpers
- ID mapping between graph vertices and NetworkIt node indices
- Rational approximation used by the null-model sampler
"""

from .exceptions import (
    TempNetError,
    ValidationError,
    GraphConstructionError,
    GraphNotIrreducibleError,
    ConfigurationError,
    ComputationError,
    SamplingError,
    EmptyPoolError,
    SamplingInvariantError,
    DataFormatError,
    validate_parameter,
    require_positive
)

from .id_mapper import IDMapper

from .rational import (
    MixedFraction,
    round_to_mixed_fraction,
    gcd,
    lcm,
    lcm_of
)

from .logging_config import (
    setup_logging,
    get_logger,
    log_function_entry,
    log_performance_metric,
    LoggingTimer,
    JSONFormatter
)

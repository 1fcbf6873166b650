"""
Null models (randomized reference networks) for temporal networks.
"""

from .ensemble import (
    DEFAULT_PRECISION,
    DEFAULT_MAX_ATTEMPTS,
    SHUFFLE_MODES,
    NullModelSampler
)

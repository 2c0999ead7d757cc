"""
Domain models and value objects.

Contains the commission error taxonomy, rate table configuration and
request models.
"""

from src.core.domain.errors import (
    CommissionError,
    CommissionErrorKind,
    InvalidAmount,
    InvalidPartnerCount,
    InvalidProbability,
    InvalidRate,
    InvalidWeights,
)
from src.core.domain.requests import CommissionOperation, CommissionRequest
from src.core.domain.schemes import (
    CommissionConfig,
    CommissionScheme,
    SchemeTerms,
    TierBracket,
    default_commission_config,
)

__all__ = [
    # Errors
    "CommissionError",
    "CommissionErrorKind",
    "InvalidAmount",
    "InvalidRate",
    "InvalidProbability",
    "InvalidPartnerCount",
    "InvalidWeights",
    # Configuration
    "CommissionConfig",
    "CommissionScheme",
    "SchemeTerms",
    "TierBracket",
    "default_commission_config",
    # Requests
    "CommissionOperation",
    "CommissionRequest",
]

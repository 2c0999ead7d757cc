"""
Contract Validation Module

Модуль для валидации JSON контрактов commission engine.
"""

from .validators import (
    CommissionConfigValidator,
    CommissionRequestValidator,
    ContractValidator,
    SchemaLoader,
    validate_commission_config,
    validate_commission_request,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "CommissionConfigValidator",
    "CommissionRequestValidator",
    # Functions
    "validate_commission_config",
    "validate_commission_request",
]

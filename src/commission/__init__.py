"""
Commission subsystem — CommissionEngine и его настройки.
"""

from src.commission.engine import (
    CommissionEngine,
    TierSlice,
    TieredCommissionBreakdown,
)
from src.commission.settings import (
    CommissionSettings,
    build_engine,
    get_settings,
    load_commission_config,
)

__all__ = [
    "CommissionEngine",
    "TierSlice",
    "TieredCommissionBreakdown",
    "CommissionSettings",
    "build_engine",
    "get_settings",
    "load_commission_config",
]

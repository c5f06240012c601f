"""Common reusable utility exports."""

from .common_functions import percentage, round_half_up, to_decimal
from .threshold_catalog import (
    CATEGORY_INFO,
    DEFAULT_THRESHOLD_CATALOG,
    CategoryInfo,
    category_info,
    get_default_threshold_catalog,
)
from .weight_presets import (
    LOAN_TYPE_WEIGHT_PRESETS,
    normalize_weights,
    preset_weights,
    rebalance_weights,
    weights_total,
)

__all__ = [
    "percentage",
    "round_half_up",
    "to_decimal",
    "CATEGORY_INFO",
    "DEFAULT_THRESHOLD_CATALOG",
    "CategoryInfo",
    "category_info",
    "get_default_threshold_catalog",
    "LOAN_TYPE_WEIGHT_PRESETS",
    "normalize_weights",
    "preset_weights",
    "rebalance_weights",
    "weights_total",
]

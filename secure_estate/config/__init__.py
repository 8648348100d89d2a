"""Configuration module for Secure Estate.

Available Configurations:
- WellbeingConfig: Record defaults, sweep pacing and I/O bounds
"""

from secure_estate.config.wellbeing_config import (
    DEFAULT_WELLBEING_CONFIG,
    MAX_SWEEP_TICK_SECONDS,
    TEST_WELLBEING_CONFIG,
    WellbeingConfig,
)

__all__ = [
    "WellbeingConfig",
    "DEFAULT_WELLBEING_CONFIG",
    "TEST_WELLBEING_CONFIG",
    "MAX_SWEEP_TICK_SECONDS",
]

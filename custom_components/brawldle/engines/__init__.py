"""Engine modules for Brawldle integration.

Contains pure computation engines:
- daily_engine: Daily sub-mode progress, rollover and payload parsing
- streak_engine: Streak expiry, completion and reconciliation
- survival_engine: Round quota, character/mode selection and scoring
"""

# Use relative imports within package to avoid mypy module resolution issues
from .daily_engine import DailyEngine
from .streak_engine import (
    RECONCILE_WRITE_LOCAL,
    RECONCILE_WRITE_REMOTE,
    StreakEngine,
)
from .survival_engine import (
    EmptyRosterError,
    InvalidConfigurationError,
    Selection,
    SelectionOutcome,
    SurvivalEngine,
)

__all__ = [
    "RECONCILE_WRITE_LOCAL",
    "RECONCILE_WRITE_REMOTE",
    "DailyEngine",
    "EmptyRosterError",
    "InvalidConfigurationError",
    "Selection",
    "SelectionOutcome",
    "StreakEngine",
    "SurvivalEngine",
]

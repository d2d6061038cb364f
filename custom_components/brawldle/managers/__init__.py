"""Manager modules for Brawldle integration.

Managers are stateful, own one store each and coordinate through
instance-scoped dispatcher signals:
- daily_manager: Daily challenge progress and rollover
- survival_manager: Survival game state machine and round timer
- streak_manager: Completion streak and remote profile sync
"""

from .base_manager import BaseManager, get_event_signal
from .daily_manager import DailyManager
from .streak_manager import StreakManager
from .survival_manager import SurvivalManager

__all__ = [
    "BaseManager",
    "DailyManager",
    "StreakManager",
    "SurvivalManager",
    "get_event_signal",
]

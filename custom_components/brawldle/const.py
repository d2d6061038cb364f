# File: const.py
"""Constants for the Brawldle integration.

This file centralizes configuration keys, defaults, storage keys, game tuning
values, service names and signal suffixes for consistency across the
integration.
"""

import logging

from homeassistant.const import Platform

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
BRAWLDLE_TITLE = "Brawldle"

# Integration Domain
DOMAIN = "brawldle"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.SENSOR,
]

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Update Interval (minutes) - drives daily rollover and streak expiry checks
DEFAULT_UPDATE_INTERVAL = 1

# ------------------------------------------------------------------------------------------------
# Storage and Versioning
# ------------------------------------------------------------------------------------------------
# Each record lives in its own Store so schema changes stay independent.
STORAGE_KEY_DAILY = "brawldle_daily"
STORAGE_KEY_SURVIVAL = "brawldle_survival"
STORAGE_KEY_STREAK = "brawldle_streak"
STORAGE_KEY_SURVIVAL_SETTINGS = "brawldle_survival_settings"

STORAGE_VERSION_DAILY = 1
STORAGE_VERSION_SURVIVAL = 1
STORAGE_VERSION_STREAK = 1
STORAGE_VERSION_SURVIVAL_SETTINGS = 1

# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_API_URL = "api_url"
CONF_API_KEY = "api_key"
CONF_USER_ID = "user_id"
CONF_ACCESS_TOKEN = "access_token"

CONFIG_FLOW_STEP_USER = "user"
OPTIONS_FLOW_STEP_INIT = "init"

# ------------------------------------------------------------------------------------------------
# Remote Backend
# ------------------------------------------------------------------------------------------------
API_TIMEOUT_SECONDS = 10
API_PATH_DAILY_CHALLENGES = "/rest/v1/daily_challenges"
API_PATH_PROFILES = "/rest/v1/profiles"

API_FIELD_CHALLENGE_DATA = "challenge_data"
API_FIELD_MODE = "mode"
API_FIELD_DATE = "date"
API_FIELD_PROFILE_ID = "id"
API_FIELD_CURRENT_STREAK = "current_streak"
API_FIELD_LAST_COMPLETED_DATE = "last_completed_date"

# Keys a challenge payload may carry its target under (newest first)
CHALLENGE_PAYLOAD_TARGET_KEYS = ("target_name", "brawler", "brawlerName")

# ------------------------------------------------------------------------------------------------
# Game Modes
# ------------------------------------------------------------------------------------------------
MODE_CLASSIC = "classic"
MODE_GADGET = "gadget"
MODE_STARPOWER = "starpower"
MODE_AUDIO = "audio"
MODE_PIXELS = "pixels"

DAILY_MODES = [MODE_CLASSIC, MODE_GADGET, MODE_STARPOWER, MODE_AUDIO, MODE_PIXELS]
SURVIVAL_MODES = DAILY_MODES

DEFAULT_SURVIVAL_MODES = [MODE_CLASSIC, MODE_GADGET, MODE_STARPOWER, MODE_AUDIO]

# Target used when the daily challenge cannot be fetched
DEFAULT_FALLBACK_TARGET = "Spike"
FALLBACK_TARGETS = {
    MODE_CLASSIC: "Spike",
    MODE_GADGET: "Spike",
    MODE_STARPOWER: "Bo",
    MODE_AUDIO: "Spike",
    MODE_PIXELS: "Spike",
}

# ------------------------------------------------------------------------------------------------
# Daily Reset
# ------------------------------------------------------------------------------------------------
# Every player sees the daily target change at midnight UTC+2.
DAILY_RESET_UTC_OFFSET_HOURS = 2

# ------------------------------------------------------------------------------------------------
# Survival Tuning
# ------------------------------------------------------------------------------------------------
ROTATION_CYCLE = "cycle"
ROTATION_REPEAT = "repeat"
ROTATION_POLICIES = [ROTATION_CYCLE, ROTATION_REPEAT]
DEFAULT_ROTATION = ROTATION_REPEAT

DEFAULT_ROUND_TIMER_SECONDS = 150

# Character cooldown: ids picked in the last N rounds are skipped
COOLDOWN_WINDOW = 2

# (last round of the band, guesses allowed); rounds past the last band get the floor
GUESS_QUOTA_TABLE = [
    (3, 9),
    (6, 8),
    (9, 7),
    (12, 6),
    (15, 5),
    (18, 4),
]
GUESS_QUOTA_FLOOR = 3

# Scoring
SCORE_BASE_POINTS = 100
SCORE_GUESS_BONUS_START = 55
SCORE_GUESS_BONUS_STEP = 5
SCORE_TIME_BONUS_START = 30
SCORE_TIME_BONUS_INTERVAL_SECONDS = 5

# Survival status values
SURVIVAL_STATUS_SETUP = "setup"
SURVIVAL_STATUS_PLAYING = "playing"
SURVIVAL_STATUS_PAUSED = "paused"
SURVIVAL_STATUS_GAMEOVER = "gameover"

# Selection outcomes
SELECTION_STATUS_OK = "ok"
SELECTION_STATUS_DEGRADED = "degraded"
SELECTION_STATUS_ERROR = "error"

# ------------------------------------------------------------------------------------------------
# Data Keys (storage records)
# ------------------------------------------------------------------------------------------------
# Daily
DATA_DAILY_CURRENT_DATE = "current_date"
DATA_DAILY_MODES = "modes"
DATA_DAILY_LAST_FETCH_DATE = "last_fetch_date"
DATA_DAILY_TIME_UNTIL_NEXT = "time_until_next"
DATA_DAILY_YESTERDAY_TARGETS = "yesterday_targets"

DATA_MODE_TARGET_NAME = "target_name"
DATA_MODE_PAYLOAD = "mode_payload"
DATA_MODE_GUESS_COUNT = "guess_count"
DATA_MODE_IS_COMPLETED = "is_completed"
DATA_MODE_LAST_COMPLETED_DATE = "last_completed_date"
DATA_MODE_GUESSES = "guesses"

DATA_TIME_HOURS = "hours"
DATA_TIME_MINUTES = "minutes"

# Character
DATA_CHARACTER_ID = "id"
DATA_CHARACTER_NAME = "name"

# Survival settings
DATA_SETTINGS_ENABLED_MODES = "enabled_modes"
DATA_SETTINGS_ROTATION = "rotation"
DATA_SETTINGS_ROUND_TIMER_SECONDS = "round_timer_seconds"

# Survival game
DATA_SURVIVAL_SETTINGS = "settings"
DATA_SURVIVAL_CURRENT_ROUND = "current_round"
DATA_SURVIVAL_STATUS = "status"
DATA_SURVIVAL_ACTIVE_ROUND = "active_round"
DATA_SURVIVAL_RECENTLY_USED = "recently_used"
DATA_SURVIVAL_PREVIOUS_MODE = "previous_mode"
DATA_SURVIVAL_TOTAL_SCORE = "total_score"
DATA_SURVIVAL_LAST_ROUND_POINTS = "last_round_points"

# Survival round
DATA_ROUND_NUMBER = "round_number"
DATA_ROUND_CHARACTER_ID = "current_character_id"
DATA_ROUND_MODE = "current_mode"
DATA_ROUND_GUESS_QUOTA = "guess_quota"
DATA_ROUND_GUESSES_LEFT = "guesses_left"
DATA_ROUND_TIMER_LEFT = "timer_left"
DATA_ROUND_TIMER_SECONDS = "round_timer_seconds"
DATA_ROUND_IS_ACTIVE = "is_active"

# Streak
DATA_STREAK_COUNT = "count"
DATA_STREAK_LAST_COMPLETED_DATE = "last_completed_date"

# Roster file
ROSTER_FILENAME = "roster.json"
ROSTER_DIRECTORY = "data"

# ------------------------------------------------------------------------------------------------
# Event Signals (instance-scoped dispatcher suffixes)
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_MODE_COMPLETED = "mode_completed"
SIGNAL_SUFFIX_ALL_MODES_COMPLETED = "all_modes_completed"
SIGNAL_SUFFIX_DAILY_ROLLOVER = "daily_rollover"
SIGNAL_SUFFIX_SURVIVAL_GAME_OVER = "survival_game_over"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_SUBMIT_GUESS = "submit_guess"
SERVICE_COMPLETE_MODE = "complete_mode"
SERVICE_RESET_MODE = "reset_mode"
SERVICE_REFRESH_DAILY = "refresh_daily"
SERVICE_START_SURVIVAL = "start_survival"
SERVICE_NEXT_ROUND = "next_round"
SERVICE_SURVIVAL_GUESS = "survival_guess"
SERVICE_PAUSE_SURVIVAL = "pause_survival"
SERVICE_RESUME_SURVIVAL = "resume_survival"
SERVICE_QUIT_SURVIVAL = "quit_survival"
SERVICE_UPDATE_SURVIVAL_SETTINGS = "update_survival_settings"
SERVICE_RESET_SURVIVAL = "reset_survival"

SERVICES = [
    SERVICE_SUBMIT_GUESS,
    SERVICE_COMPLETE_MODE,
    SERVICE_RESET_MODE,
    SERVICE_REFRESH_DAILY,
    SERVICE_START_SURVIVAL,
    SERVICE_NEXT_ROUND,
    SERVICE_SURVIVAL_GUESS,
    SERVICE_PAUSE_SURVIVAL,
    SERVICE_RESUME_SURVIVAL,
    SERVICE_QUIT_SURVIVAL,
    SERVICE_UPDATE_SURVIVAL_SETTINGS,
    SERVICE_RESET_SURVIVAL,
]

# Service fields
FIELD_MODE = "mode"
FIELD_CHARACTER_NAME = "character_name"
FIELD_ENABLED_MODES = "enabled_modes"
FIELD_ROTATION = "rotation"
FIELD_ROUND_TIMER_SECONDS = "round_timer_seconds"

# Service response keys
RESPONSE_ACCEPTED = "accepted"
RESPONSE_CORRECT = "correct"
RESPONSE_COMPLETED = "completed"
RESPONSE_POINTS = "points"
RESPONSE_GUESSES_LEFT = "guesses_left"
RESPONSE_STATUS = "status"
RESPONSE_ROUND = "round"

# ------------------------------------------------------------------------------------------------
# Sensors
# ------------------------------------------------------------------------------------------------
SENSOR_KEY_DAILY_PROGRESS = "daily_progress"
SENSOR_KEY_STREAK = "streak"
SENSOR_KEY_SURVIVAL = "survival"

ATTR_MODES = "modes"
ATTR_TOTAL = "total"
ATTR_ALL_COMPLETED = "all_completed"
ATTR_TIME_UNTIL_NEXT = "time_until_next"
ATTR_CURRENT_DATE = "current_date"
ATTR_YESTERDAY_TARGETS = "yesterday_targets"
ATTR_LAST_COMPLETED_DATE = "last_completed_date"

# ------------------------------------------------------------------------------------------------
# Translation Keys / Errors
# ------------------------------------------------------------------------------------------------
TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"
TRANS_KEY_ERROR_INVALID_URL = "invalid_url"
TRANS_KEY_ERROR_CANNOT_CONNECT = "cannot_connect"
TRANS_KEY_ERROR_BASE = "base"

ERROR_NO_ENTRY_FOUND = "No Brawldle entry found"
ERROR_CHARACTER_NOT_FOUND_FMT = "Character '{}' not found"
ERROR_TARGET_NOT_GUESSED_FMT = "Today's {} target has not been guessed yet"
ERROR_GAME_NOT_STARTED = "No survival game in progress"
ERROR_CANNOT_START_ROUND_FMT = "Cannot start survival round: {}"
ERROR_NO_ACTIVE_ROUND = "No active survival round"

from enum import StrEnum


class Defaults:
    """Default link lifecycle settings."""

    BASE_URL = 'http://localhost:3000/'
    TOKEN_LENGTH = 6
    # Attempts at minting a token before giving up on repeated collisions
    TOKEN_GENERATION_ATTEMPTS = 10
    # Maximum link lifetime (24 hours in seconds)
    MAX_EXPIRY_SECONDS = 86_400  # 60 * 60 * 24
    # Minimum visit limit for quota-limited links
    VISIT_FLOOR = 1
    # Connect/read timeout for destination reachability checks (seconds)
    REACHABILITY_TIMEOUT = 5
    SNAPSHOT_PATH = 'user_data.json'
    LOCK_STRIPES = 64
    # Seconds an expired link hash outlives its expiry before the Redis TTL drops it
    REDIS_EXPIRY_GRACE = 3_600


class Backend(StrEnum):
    MEMORY = 'memory'
    REDIS = 'redis'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        CONFIG_FILE = 'LINKSHORTENER_CONFIG_FILE'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'


# Configuration document section read by the link service
CONFIG_SECTION = 'link_service'

# Snapshot schema version written by the JSON snapshot store
SNAPSHOT_VERSION = 1

# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'

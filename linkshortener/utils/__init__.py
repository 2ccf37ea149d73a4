from linkshortener.utils.config import app_env, app_name, app_prefix, load_config, build_config, LinkShortenerConfig
from linkshortener.utils.helpers import utcnow, get_short_url, token_from_short_url, require_environment, guarantee_500_response
from linkshortener.utils.shortener import generate_token
from linkshortener.utils.durations import parse_duration, ParsedDuration
from linkshortener.utils.reachability import is_reachable
from linkshortener.utils.logging import initialize_logging


__all__ = [
    'generate_token',
    'parse_duration',
    'ParsedDuration',
    'is_reachable',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'build_config',
    'LinkShortenerConfig',
    'utcnow',
    'get_short_url',
    'token_from_short_url',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]

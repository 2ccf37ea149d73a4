"""Utility functions for application configuration management.

The link service reads a single configuration section (`link_service`) from a
configuration document. The document is stored in **AWS AppConfig**: each
environment (`APP_ENV`) has a dedicated AppConfig *Environment* within the
shared AppConfig *Application*. For local development the very same document
may be kept in a YAML file pointed to by `LINKSHORTENER_CONFIG_FILE`.

The configuration document follows this structure:

    build: 42
    link_service:
      base_url: https://sho.rt/
      max_expiry_duration: 1d           # duration text or seconds
      default_visit_floor: 5
      active_backend: redis
      redis:
        host: localhost
        port: 6379

Every key is optional; see `LinkShortenerConfig` for the defaults.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return the key prefix for DAOs, or None if `APP_NAME` is not set.

    load_config(section: str) -> AppConfig
        Load a configuration section from a local YAML file or AWS AppConfig.

    build_config(raw: Mapping | None) -> LinkShortenerConfig
        Validate a raw configuration section into a LinkShortenerConfig.

Example:
    >>> from linkshortener.utils.config import load_config, build_config
    >>> config = build_config(load_config('link_service'))
    >>> config.max_expiry_duration
    datetime.timedelta(days=1)
"""

import os
import json
import logging
import functools
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

import boto3
import yaml

from linkshortener.constants import CONFIG_SECTION, ENV, Backend, Defaults
from linkshortener.exceptions import BadConfigurationError
from linkshortener.utils.durations import parse_duration
from linkshortener.utils.helpers import require_environment
from linkshortener.types import AppConfig


logger = logging.getLogger(__name__)


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Returns:
        str:
            Value of `APP_NAME` environment variable.
            None if variable is not set.
    """
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'linkshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'linkshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


@dataclass(frozen=True)
class LinkShortenerConfig:
    """Validated link service configuration.

    Attributes:
        base_url (str):
            Public prefix of short links.
        max_expiry_duration (timedelta):
            Cap on link lifetimes. Longer durations are silently clamped.
        default_visit_floor (int):
            Minimum visit limit. Smaller limits are silently raised.
        token_length (int):
            Length of generated tokens.
        token_salt (str | None):
            Optional salt offsetting the token space.
        eager_sweep (bool):
            Run a full eviction sweep before listing, resolving and editing.
        sweep_interval (float):
            Seconds between periodic sweeps, 0 disables them.
        check_reachability (bool):
            Probe destination URLs on create/edit.
        reachability_timeout (float):
            Timeout of a reachability probe in seconds.
        active_backend (Backend):
            Link store backend ('memory' or 'redis').
        snapshot_path (str):
            JSON snapshot file of the memory backend.
        redis (dict):
            Redis connection parameters (host, port, db, username, password).
    """

    base_url: str = Defaults.BASE_URL
    max_expiry_duration: timedelta = timedelta(seconds=Defaults.MAX_EXPIRY_SECONDS)
    default_visit_floor: int = Defaults.VISIT_FLOOR
    token_length: int = Defaults.TOKEN_LENGTH
    token_salt: str | None = None
    eager_sweep: bool = True
    sweep_interval: float = 0
    check_reachability: bool = True
    reachability_timeout: float = Defaults.REACHABILITY_TIMEOUT
    active_backend: Backend = Backend.MEMORY
    snapshot_path: str = Defaults.SNAPSHOT_PATH
    redis: dict[str, Any] = field(default_factory=dict)


def _duration_setting(key: str, value: Any) -> timedelta:
    if isinstance(value, bool):
        raise BadConfigurationError(f"'{key}' must be a duration text or a number of seconds (given value: {value!r}).")
    if isinstance(value, (int, float)):
        duration = timedelta(seconds=value)
    elif isinstance(value, str):
        parsed = parse_duration(value)
        if parsed.warnings:
            raise BadConfigurationError(f"'{key}' is not a valid duration (given value: {value!r}).")
        duration = parsed.total
    else:
        raise BadConfigurationError(f"'{key}' must be a duration text or a number of seconds (given value: {value!r}).")

    if duration <= timedelta(0):
        raise BadConfigurationError(f"'{key}' must be positive (given value: {value!r}).")
    return duration


def _positive_int_setting(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise BadConfigurationError(f"'{key}' must be a positive integer (given value: {value!r}).")
    return value


def build_config(raw: Mapping[str, Any] | None = None) -> LinkShortenerConfig:
    """Validate a raw configuration section and fill in defaults

    Args:
        raw (Mapping[str, Any] | None):
            Configuration section, e.g. the output of `load_config()`.

    Returns:
        LinkShortenerConfig: the validated configuration.

    Raises:
        BadConfigurationError:
            If any recognized option holds an invalid value.
    """
    raw = dict(raw or {})
    known = LinkShortenerConfig.__dataclass_fields__.keys()
    unknown = sorted(set(raw) - known)
    if unknown:
        logger.warning('Ignoring unknown configuration keys.', extra={'keys': unknown})

    options: dict[str, Any] = {key: value for key, value in raw.items() if key in known}

    if 'base_url' in options and (not isinstance(options['base_url'], str) or not options['base_url']):
        raise BadConfigurationError(f"'base_url' must be a non-empty string (given value: {options['base_url']!r}).")
    if 'max_expiry_duration' in options:
        options['max_expiry_duration'] = _duration_setting('max_expiry_duration', options['max_expiry_duration'])
    for key in ('default_visit_floor', 'token_length'):
        if key in options:
            options[key] = _positive_int_setting(key, options[key])
    if 'active_backend' in options:
        try:
            options['active_backend'] = Backend(str(options['active_backend']).lower())
        except ValueError as e:
            raise BadConfigurationError(f"Unsupported backend {options['active_backend']!r}.") from e
    for key in ('sweep_interval', 'reachability_timeout'):
        if key in options and (isinstance(options[key], bool) or not isinstance(options[key], (int, float)) or options[key] < 0):
            raise BadConfigurationError(f"'{key}' must be a non-negative number (given value: {options[key]!r}).")
    if options.get('token_salt') is not None and (not isinstance(options['token_salt'], str) or not options['token_salt']):
        raise BadConfigurationError("'token_salt' must be a non-empty string.")
    if 'redis' in options:
        if not isinstance(options['redis'], Mapping):
            raise BadConfigurationError(f"'redis' must be a mapping (given value: {options['redis']!r}).")
        options['redis'] = dict(options['redis'])

    return LinkShortenerConfig(**options)


def _load_local_config(func: Callable[[str], AppConfig]) -> Callable[[str], AppConfig]:
    """Decorator: load configuration from a local YAML file when one is configured

    Behavior:
        - If `LINKSHORTENER_CONFIG_FILE` is set, read the YAML document from that
          path and return the requested section.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).
    """

    @functools.wraps(func)
    def wrapper(section: str = CONFIG_SECTION, *args, **kwargs) -> AppConfig:
        path = os.getenv(ENV.App.CONFIG_FILE)
        if not path:
            return func(section, *args, **kwargs)

        logger.debug('Trying to load configuration from local file.', extra={'path': path, 'section': section})
        with open(path, encoding='utf-8') as f:
            document = yaml.safe_load(f) or {}

        data = document.get(section) or {}
        logger.debug('Loaded configuration from local file.', extra={'path': path, 'section': section})
        return dict(data)

    return wrapper


@_load_local_config
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(section: str = CONFIG_SECTION) -> AppConfig:
    """Load a configuration section from AWS AppConfig

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        section (str):
            Name of the configuration section. Defaults to 'link_service'.

    Returns:
        dict: The section as a Python dictionary (empty if the document lacks it).
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'section': section})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    document = json.loads(content.decode('utf-8'))

    data = document.get(section) or {}
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'section': section, 'build': document.get('build')})
    return dict(data)

"""
Configuration management
"""

import copy
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional, Union

import yaml

from ..core import ConfigError, QuerySubmission

DEFAULT_CONFIG_PATH = Path.home() / '.config' / 'athena-query' / 'config.yaml'

DEFAULT_CONFIG: Dict[str, Any] = {
    'aws': {
        'region': 'eu-west-1',
        'workgroup': 'primary',
        'output_location': 's3://athena-query-results/',
        'catalog': 'AwsDataCatalog',
        'database': None,
        'profile': None
    },
    'app': {
        'query_reuse_time': '60m',
        'download_dir': '.',
        'page_size': 100,
        'poll_interval': 1.0
    }
}

# Setting -> environment variables, first match wins
ENV_VARS = {
    'profile': ('AWS_PROFILE', 'AWS_DEFAULT_PROFILE'),
    'region': ('AWS_REGION',),
    'database': ('AWS_ATHENA_DATABASE',),
    'workgroup': ('AWS_ATHENA_WORKGROUP',),
    'catalog': ('AWS_ATHENA_CATALOG',),
    'output_location': ('AWS_ATHENA_OUTPUT_LOCATION',)
}

_DURATION_UNITS = {
    's': 1, 'sec': 1, 'secs': 1,
    'm': 60, 'min': 60, 'mins': 60,
    'h': 3600, 'hr': 3600, 'hrs': 3600,
    'd': 86400, 'day': 86400, 'days': 86400
}
_DURATION_PART = re.compile(r'(\d+(?:\.\d+)?)\s*([a-z]+)')


def parse_duration(value: Union[str, int, float]) -> float:
    """
    Parse a duration into seconds

    Accepts bare numbers (seconds) and unit strings such as '30m', '2h' or
    '1h30m'.

    Raises:
        ConfigError: Unparseable or negative duration
    """
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = value.strip().lower()
        if re.fullmatch(r'\d+(?:\.\d+)?', text):
            seconds = float(text)
        else:
            compact = text.replace(' ', '')
            parts = _DURATION_PART.findall(compact)
            if not parts or ''.join(n + u for n, u in parts) != compact:
                raise ConfigError(f"Invalid duration: '{value}'")
            seconds = 0.0
            for number, unit in parts:
                if unit not in _DURATION_UNITS:
                    raise ConfigError(f"Invalid duration unit '{unit}' in '{value}'")
                seconds += float(number) * _DURATION_UNITS[unit]

    if seconds < 0:
        raise ConfigError(f"Duration must not be negative: '{value}'")
    return seconds


def _deep_merge(base: Dict, override: Dict) -> Dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@dataclass(frozen=True)
class Settings:
    """
    Resolved settings for one invocation

    Attributes:
        profile: AWS profile (None for the default credential chain)
        region: AWS region
        database: Target database (None if never configured)
        workgroup: Athena workgroup
        catalog: Data catalog
        output_location: S3 prefix for results
        reuse_seconds: Default result reuse window
        download_dir: Default download directory
        page_size: Rows per result page
        poll_interval: Seconds between status checks
    """
    profile: Optional[str]
    region: str
    database: Optional[str]
    workgroup: str
    catalog: str
    output_location: str
    reuse_seconds: float
    download_dir: str
    page_size: int
    poll_interval: float

    def submission(self, statement: str,
                   reuse_time: Union[str, int, float, None] = None) -> QuerySubmission:
        """
        Build a QuerySubmission from these settings

        Args:
            statement: SQL text
            reuse_time: Override for the reuse window ('10m', 3600, ...)
        """
        reuse_seconds = self.reuse_seconds if reuse_time is None else parse_duration(reuse_time)
        return QuerySubmission(
            statement=statement,
            database=self.database,
            workgroup=self.workgroup,
            reuse_seconds=reuse_seconds,
            output_location=self.output_location,
            catalog=self.catalog
        )


class Config:
    """
    Unified configuration manager

    Loads a YAML file over built-in defaults and resolves the settings for an
    invocation from explicit overrides, environment variables, the file and
    the defaults, in that order.
    """

    def __init__(self, config_path: Union[str, Path, None] = None,
                 environ: Optional[Dict[str, str]] = None):
        """
        Initialize configuration

        Args:
            config_path: YAML file (defaults to ~/.config/athena-query/config.yaml)
            environ: Environment mapping (defaults to os.environ)
        """
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self.environ = os.environ if environ is None else environ
        self._config = self._load_config()

    def _load_config(self) -> Dict:
        """Load the config file if present and merge it over the defaults"""
        if not self.config_path.exists():
            return copy.deepcopy(DEFAULT_CONFIG)

        try:
            with open(self.config_path, 'r') as f:
                config_data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config file {self.config_path}: {e}") from e

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ConfigError(f"Config file {self.config_path} must contain a mapping")
        return _deep_merge(DEFAULT_CONFIG, config_data)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            key: Configuration key (supports nested keys like 'aws.region')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_all(self) -> Dict:
        """Get all configuration"""
        return copy.deepcopy(self._config)

    def _lookup(self, name: str, overrides: Dict[str, Any]) -> Any:
        if overrides.get(name) is not None:
            return overrides[name]
        for var in ENV_VARS.get(name, ()):
            if self.environ.get(var):
                return self.environ[var]
        return self.get(f'aws.{name}')

    def resolve(self, **overrides) -> Settings:
        """
        Resolve settings for one invocation

        Args:
            **overrides: Explicit values (e.g. from command-line flags); None
                means "not given"

        Returns:
            Settings

        Raises:
            ConfigError: Invalid value
        """
        reuse = overrides.get('reuse_time')
        if reuse is None:
            reuse = self.get('app.query_reuse_time')

        page_size = overrides.get('page_size')
        if page_size is None:
            page_size = self.get('app.page_size')
        poll_interval = overrides.get('poll_interval')
        if poll_interval is None:
            poll_interval = self.get('app.poll_interval')
        try:
            page_size = int(page_size)
            poll_interval = float(poll_interval)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e
        if page_size < 1:
            raise ConfigError(f"Page size must be positive: {page_size}")
        if poll_interval < 0:
            raise ConfigError(f"Poll interval must not be negative: {poll_interval:g}")

        return Settings(
            profile=self._lookup('profile', overrides),
            region=self._lookup('region', overrides),
            database=self._lookup('database', overrides),
            workgroup=self._lookup('workgroup', overrides),
            catalog=self._lookup('catalog', overrides),
            output_location=self._lookup('output_location', overrides),
            reuse_seconds=parse_duration(reuse),
            download_dir=str(overrides.get('download_dir') or self.get('app.download_dir')),
            page_size=page_size,
            poll_interval=poll_interval
        )

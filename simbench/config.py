"""
Benchmark configuration: built-in defaults, YAML file, CLI overrides
"""
import logging

import yaml

from .exceptions import ConfigError

logger = logging.getLogger('simbench.config')

# Public solana mainnet beta endpoint
MAINNET_BETA_ENDPOINT = "https://api.mainnet-beta.solana.com"

# Number of transactions to simulate per strategy
DEFAULT_TX_SIMS = 16
DEFAULT_WORKERS = 1
# Seconds between batches, tuned against mainnet-beta rate limits
DEFAULT_COOLDOWN = 20.0
DEFAULT_TIMEOUT = 30.0
DEFAULT_LOCALE = 'en'


def _is_int(value):
    # bool is an int subclass; YAML "yes" must not count as 1
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value):
    return _is_int(value) or isinstance(value, float)


class BenchmarkConfig:
    """Configuration for one benchmark run"""

    FIELDS = ('endpoint', 'tx_sims', 'workers', 'cooldown', 'timeout',
              'locale', 'output_file', 'commitment')

    def __init__(self, endpoint=MAINNET_BETA_ENDPOINT, tx_sims=DEFAULT_TX_SIMS,
                 workers=DEFAULT_WORKERS, cooldown=DEFAULT_COOLDOWN,
                 timeout=DEFAULT_TIMEOUT, locale=DEFAULT_LOCALE,
                 output_file=None, commitment=None):
        """
        Args:
            endpoint: JSON-RPC URL shared by both strategies
            tx_sims: Simulations issued per strategy
            workers: Thread pool size for the synchronous strategy
            cooldown: Seconds to sleep between the two batches
            timeout: Per-request transport timeout in seconds, None for none
            locale: Locale used to group digits in the report
            output_file: Optional path for a JSON summary
            commitment: Optional commitment level sent with each simulation
        """
        self.endpoint = endpoint
        self.tx_sims = tx_sims
        self.workers = workers
        self.cooldown = cooldown
        self.timeout = timeout
        self.locale = locale
        self.output_file = output_file
        self.commitment = commitment
        self.validate()

    def validate(self):
        if not isinstance(self.endpoint, str) or not self.endpoint:
            raise ConfigError("endpoint must be a non-empty URL")
        if not _is_int(self.tx_sims) or self.tx_sims < 0:
            raise ConfigError(f"tx_sims must be a non-negative integer, got {self.tx_sims!r}")
        if not _is_int(self.workers) or self.workers < 1:
            raise ConfigError(f"workers must be a positive integer, got {self.workers!r}")
        if not _is_number(self.cooldown) or self.cooldown < 0:
            raise ConfigError(f"cooldown must be >= 0 seconds, got {self.cooldown!r}")
        if self.timeout is not None and (not _is_number(self.timeout) or self.timeout <= 0):
            raise ConfigError(f"timeout must be > 0 seconds or null, got {self.timeout!r}")
        return self

    def updated(self, **overrides):
        """Return a copy with every non-None override applied"""
        values = {name: getattr(self, name) for name in self.FIELDS}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return BenchmarkConfig(**values)

    def as_dict(self):
        return {name: getattr(self, name) for name in self.FIELDS}

    def __repr__(self):
        return f"BenchmarkConfig({self.as_dict()!r})"


def load_config(path):
    """Read a YAML mapping of BenchmarkConfig fields; empty file means defaults"""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse config file {path}: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    unknown = sorted(set(data) - set(BenchmarkConfig.FIELDS))
    if unknown:
        raise ConfigError(f"Unknown config keys in {path}: {', '.join(map(str, unknown))}")

    logger.debug(f"Loaded config from {path}: {data}")
    return BenchmarkConfig(**data)

"""
Sigma+ verifier configuration
Default protocol parameters, backend and batch-weight mode, read from the environment
"""

import logging
import os
from enum import Enum


class WeightMode(Enum):
    """How ``batchverify`` draws its per-proof weights."""

    RANDOM = "random"
    DETERMINISTIC = "deterministic"


# Default configuration
DEFAULT_CURVE = os.getenv('SIGMA_CURVE', 'secp256k1')

# Lelantus parameters: N = 16^4 = 65536
DEFAULT_N = int(os.getenv('SIGMA_N', 16))
DEFAULT_M = int(os.getenv('SIGMA_M', 4))

# random: local pre-filter; deterministic: results must agree across nodes
DEFAULT_WEIGHT_MODE = os.getenv('SIGMA_WEIGHT_MODE', WeightMode.RANDOM.value).lower()

DEFAULT_LOG_LEVEL = os.getenv('SIGMA_LOG_LEVEL', 'WARNING').upper()

# Domain separation seed for generator derivation
DEFAULT_GENERATOR_SEED = os.getenv('SIGMA_GENERATOR_SEED', 'sigma-plus/generators').encode('utf-8')


class Config:
    """Configuration class"""

    def __init__(self):
        self.curve = DEFAULT_CURVE
        self.n = DEFAULT_N
        self.m = DEFAULT_M
        self.weight_mode = WeightMode(DEFAULT_WEIGHT_MODE)
        self.log_level = DEFAULT_LOG_LEVEL
        self.generator_seed = DEFAULT_GENERATOR_SEED

    @property
    def anonymity_set_size(self):
        return self.n ** self.m

    @property
    def deterministic_weights(self):
        return self.weight_mode is WeightMode.DETERMINISTIC


def configure_logging(level=None):
    """Attach a basic handler to the package logger at ``level`` (default from config)."""
    logger = logging.getLogger('sigma_plus')
    logger.setLevel(level or config.log_level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(asctime)s %(name)s %(levelname)s %(message)s'))
        logger.addHandler(handler)
    return logger


# Global configuration instance
config = Config()

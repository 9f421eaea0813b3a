"""
Deployment Configuration
Loads config/deploy_config.json and applies .env overrides
"""

import os
import copy
import json
from typing import Dict, Optional
from loguru import logger
from dotenv import load_dotenv

from .errors import ConfigurationError

DEFAULT_CONFIG_PATH = "config/deploy_config.json"
DEFAULT_RPC_URL = "http://127.0.0.1:8545"
SECTIONS = ('gas_settings', 'confirmation', 'network')

DEFAULT_CONFIG = {
    'contract_name': 'DAOVoting',
    'artifacts_dir': 'artifacts',
    'constructor_args': [],
    'gas_settings': {
        'gas_limit_buffer': 1.2,
        'gas_limit': None,
        'max_gas_price_gwei': 500,
        'priority_fee_gwei': 1.5
    },
    'confirmation': {
        'poll_interval_seconds': 1.0
    },
    'network': {
        'rpc_url': DEFAULT_RPC_URL,
        'chain_id': None,
        'poa': False,
        'request_timeout_seconds': 30
    },
    'deployer_private_key': None
}


def _merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge override into a copy of base"""
    merged = copy.deepcopy(base)

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value

    return merged


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def load_config(config_path: Optional[str] = None) -> Dict:
    """
    Load deployment configuration

    Args:
        config_path: JSON config file (None = DEPLOY_CONFIG or default path)

    Returns:
        Validated configuration dict
    """
    load_dotenv()

    path = config_path or os.getenv('DEPLOY_CONFIG') or DEFAULT_CONFIG_PATH

    if os.path.exists(path):
        try:
            with open(path, 'r') as f:
                file_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object")

        config = _merge(DEFAULT_CONFIG, file_config)
        _check_sections(config)
        logger.debug(f"Loaded configuration from {path}")
    else:
        logger.warning(f"Config file {path} not found, using defaults")
        config = copy.deepcopy(DEFAULT_CONFIG)

    # Environment overrides
    if os.getenv('RPC_URL'):
        config['network']['rpc_url'] = os.getenv('RPC_URL')

    if os.getenv('CHAIN_ID'):
        try:
            config['network']['chain_id'] = int(os.getenv('CHAIN_ID'))
        except ValueError as e:
            raise ConfigurationError(f"CHAIN_ID must be an integer: {e}") from e

    if os.getenv('POA_CHAIN'):
        config['network']['poa'] = _env_flag(os.getenv('POA_CHAIN'))

    if os.getenv('CONTRACT_NAME'):
        config['contract_name'] = os.getenv('CONTRACT_NAME')

    if os.getenv('DEPLOYER_PRIVATE_KEY'):
        config['deployer_private_key'] = os.getenv('DEPLOYER_PRIVATE_KEY')

    validate_config(config)
    return config


def _check_sections(config: Dict):
    for section in SECTIONS:
        if not isinstance(config.get(section), dict):
            raise ConfigurationError(f"{section} must be a JSON object")


def _number(section: Dict, key: str, allow_none: bool = False):
    value = section.get(key)

    if value is None and allow_none:
        return None

    # bool is an int subclass but never a valid setting here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{key} must be a number, got {value!r}")

    return value


def validate_config(config: Dict):
    """Raise ConfigurationError for values the deployment cannot use"""
    if not config.get('contract_name') or not isinstance(config['contract_name'], str):
        raise ConfigurationError("contract_name must be set")

    if not isinstance(config.get('constructor_args'), list):
        raise ConfigurationError("constructor_args must be a list")

    _check_sections(config)
    gas = config['gas_settings']

    if _number(gas, 'gas_limit_buffer') < 1:
        raise ConfigurationError("gas_limit_buffer must be at least 1")

    gas_limit = _number(gas, 'gas_limit', allow_none=True)
    if gas_limit is not None and int(gas_limit) < 21000:
        raise ConfigurationError("gas_limit must be at least 21000")

    if _number(gas, 'max_gas_price_gwei') <= 0 or _number(gas, 'priority_fee_gwei') < 0:
        raise ConfigurationError("Gas price settings must be positive")

    if _number(config['confirmation'], 'poll_interval_seconds') <= 0:
        raise ConfigurationError("poll_interval_seconds must be positive")

    if _number(config['network'], 'request_timeout_seconds') <= 0:
        raise ConfigurationError("request_timeout_seconds must be positive")

    chain_id = config['network'].get('chain_id')
    if chain_id is not None and (isinstance(chain_id, bool) or not isinstance(chain_id, int)):
        raise ConfigurationError(f"chain_id must be an integer, got {chain_id!r}")

    if not config['network'].get('rpc_url') or not isinstance(config['network']['rpc_url'], str):
        raise ConfigurationError("RPC_URL must be set")

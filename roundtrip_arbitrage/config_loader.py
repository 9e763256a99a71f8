"""
Configuration loading and normalization for the round-trip arbitrage scanner.

Provides a centralized way to load, validate, and normalize configuration
files with proper defaults and read-only access. Values from the environment
(and a ``.env`` file) override the YAML file.
"""

import os
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml
from dotenv import load_dotenv
from web3 import Web3

from dex.types import Token

from .config_schema import DEFAULT_API_URL, ScannerConfig, validate_scanner_config
from .exceptions import ConfigurationError, ValidationError

# Environment variable -> config key
ENV_OVERRIDES = {
    "QUOTE_API_URL": "api_base_url",
    "CHAIN_ID": "network",
    "LOAN_AMOUNT": "loan_amount",
    "MARGIN_AMOUNT": "margin_amount",
}


@dataclass(frozen=True)
class QuoteApiConfig:
    """Normalized quote provider configuration."""

    base_url: str = DEFAULT_API_URL
    protocols: Tuple[str, ...] = ()
    main_route_parts: int = 50
    timeout_sec: float = 10.0


@dataclass(frozen=True)
class ScannerRuntimeConfig:
    """Immutable runtime configuration object."""

    network: int
    loan_amount: Decimal
    margin_amount: Decimal
    tokens: Mapping[str, Token]
    pairs: Tuple[Tuple[str, str], ...]
    quote_api: QuoteApiConfig = field(default_factory=QuoteApiConfig)
    normalizations: Mapping[str, str] = field(default_factory=dict)
    poll_sec: float = 30.0
    once: bool = False
    max_concurrency: int = 1

    def token(self, symbol: str) -> Token:
        """Look up a registry token by symbol."""
        try:
            return self.tokens[symbol]
        except KeyError:
            raise ConfigurationError(f"Unknown token symbol: {symbol}")

    @property
    def symbol_of(self) -> Dict[str, str]:
        """Address -> symbol lookup for log output."""
        return {token.address: symbol for symbol, token in self.tokens.items()}


def load_yaml_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load and parse YAML configuration file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Failed to load config {config_path}: {e}")

    if config_dict is None:
        raise ConfigurationError(f"Empty configuration file: {config_path}")
    if not isinstance(config_dict, dict):
        raise ConfigurationError(f"Config file must contain a YAML mapping: {config_path}")

    return config_dict


def apply_env_overrides(
    config_dict: Dict[str, Any], environ: Optional[Mapping[str, str]] = None
) -> Dict[str, Any]:
    """Return a copy of config_dict with environment overrides applied."""
    environ = os.environ if environ is None else environ
    result = dict(config_dict)
    for env_name, key in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            result[key] = value
    return result


def _resolve_address(ref: str, tokens: Mapping[str, Token]) -> str:
    if ref in tokens:
        return tokens[ref].address
    return Web3.to_checksum_address(ref)


def _normalize_tokens(schema: ScannerConfig) -> Dict[str, Token]:
    return {
        symbol: Token(
            symbol=symbol,
            address=Web3.to_checksum_address(info.address),
            decimals=info.decimals,
        )
        for symbol, info in schema.tokens.items()
    }


def build_runtime_config(config_dict: Dict[str, Any]) -> ScannerRuntimeConfig:
    """
    Validate a raw config mapping and freeze it into a runtime config.

    Raises:
        ValidationError: If the configuration fails schema validation
    """
    try:
        schema = validate_scanner_config(config_dict)
    except Exception as e:
        raise ValidationError(f"Configuration validation failed: {e}")

    tokens = _normalize_tokens(schema)
    normalizations = {
        _resolve_address(entry.native, tokens): _resolve_address(entry.wrapped, tokens)
        for entry in schema.address_normalization
    }

    return ScannerRuntimeConfig(
        network=schema.network,
        loan_amount=schema.loan_amount,
        margin_amount=schema.margin_amount,
        tokens=tokens,
        pairs=tuple((a, b) for a, b in schema.pairs),
        quote_api=QuoteApiConfig(
            base_url=schema.api_base_url,
            protocols=tuple(schema.protocols),
            main_route_parts=schema.main_route_parts,
            timeout_sec=schema.request_timeout_sec,
        ),
        normalizations=normalizations,
        poll_sec=schema.poll_sec,
        once=schema.once,
        max_concurrency=schema.max_concurrency,
    )


def load_scanner_config(
    config_path: Union[str, Path], use_env: bool = True
) -> ScannerRuntimeConfig:
    """
    Load and normalize a scanner configuration file.

    Args:
        config_path: Path to the YAML configuration file
        use_env: Apply .env / environment overrides

    Returns:
        Normalized and frozen scanner configuration

    Raises:
        ConfigurationError: If the configuration cannot be loaded
        ValidationError: If the configuration fails schema validation
    """
    config_dict = load_yaml_config(config_path)

    if use_env:
        load_dotenv()
        config_dict = apply_env_overrides(config_dict)

    return build_runtime_config(config_dict)

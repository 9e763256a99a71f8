"""
Configuration schema validation using Pydantic
"""

from decimal import Decimal
from typing import Dict, List, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator
from web3 import Web3

DEFAULT_API_URL = "https://api.1inch.exchange/v4.0"


def _decimal_from_yaml(v):
    # YAML floats go through str() so 0.1 stays 0.1
    if isinstance(v, float):
        return str(v)
    return v


class TokenModel(BaseModel):
    """Registry entry for a single token"""

    address: str
    decimals: int = Field(ge=0, le=77, description="Token decimal precision")

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        if not Web3.is_address(v):
            raise ValueError(f"Invalid token address: {v}")
        return v

    model_config = {"extra": "forbid"}


class AddressNormalizationModel(BaseModel):
    """Native coin and its wrapped token, as symbols or addresses"""

    native: str
    wrapped: str

    model_config = {"extra": "forbid"}


class ScannerConfig(BaseModel):
    """Round-trip arbitrage scanner configuration"""

    network: int = Field(gt=0, description="Chain id used in the quote API path")
    api_base_url: str = DEFAULT_API_URL
    protocols: List[str] = Field(default_factory=list)
    main_route_parts: int = Field(default=50, ge=1)

    loan_amount: Decimal = Field(gt=0, description="Amount borrowed per round trip")
    margin_amount: Decimal = Field(
        default=Decimal("0"), ge=0, description="Minimum gain in source token"
    )

    poll_sec: float = Field(default=30.0, gt=0)
    once: bool = False
    max_concurrency: int = Field(default=1, ge=1, le=64)
    request_timeout_sec: float = Field(default=10.0, gt=0)

    tokens: Dict[str, TokenModel]
    pairs: List[Tuple[str, str]] = Field(min_length=1)
    address_normalization: List[AddressNormalizationModel] = Field(
        default_factory=list
    )

    @field_validator("loan_amount", "margin_amount", mode="before")
    @classmethod
    def parse_amount(cls, v):
        return _decimal_from_yaml(v)

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid API URL format: {v}")
        return v.rstrip("/")

    @field_validator("protocols")
    @classmethod
    def validate_protocols(cls, v):
        if any(not p.strip() for p in v):
            raise ValueError("Protocol names cannot be empty")
        return [p.strip() for p in v]

    @model_validator(mode="after")
    def validate_pairs_against_registry(self):
        for from_symbol, to_symbol in self.pairs:
            for symbol in (from_symbol, to_symbol):
                if symbol not in self.tokens:
                    raise ValueError(f"Pair token '{symbol}' not found in tokens")
            if from_symbol == to_symbol:
                raise ValueError(f"Pair must use two different tokens: {from_symbol}")
        return self

    @model_validator(mode="after")
    def validate_normalization_references(self):
        for entry in self.address_normalization:
            for ref in (entry.native, entry.wrapped):
                if ref not in self.tokens and not Web3.is_address(ref):
                    raise ValueError(
                        f"Address normalization entry '{ref}' is neither a token "
                        f"symbol nor an address"
                    )
        return self

    model_config = {
        "extra": "forbid",  # Disallow extra fields
        "validate_assignment": True,
    }


def validate_scanner_config(config_dict: Dict) -> ScannerConfig:
    """
    Validate a scanner configuration dictionary

    Args:
        config_dict: Dictionary representation of scanner config

    Returns:
        Validated ScannerConfig object

    Raises:
        pydantic.ValidationError: If configuration is invalid
    """
    return ScannerConfig(**config_dict)


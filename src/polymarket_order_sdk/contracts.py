"""Exchange contract addresses per chain.

Neg-risk markets settle through a separate exchange contract, so the
lookup is keyed on ``(chain_id, neg_risk)``.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Tuple

from .errors import ConfigError

POLYGON_CHAIN_ID = 137
AMOY_CHAIN_ID = 80002


@dataclass(frozen=True)
class ContractConfig:
    """Contracts an order on one exchange interacts with."""

    exchange: str
    """Exchange contract, the EIP-712 verifying contract."""

    collateral: str
    """Collateral token (USDC)."""

    conditional_tokens: str
    """CTF conditional tokens contract."""


ContractLookup = Callable[[int, bool], ContractConfig]

CONTRACT_CONFIG: Mapping[Tuple[int, bool], ContractConfig] = MappingProxyType(
    {
        (POLYGON_CHAIN_ID, False): ContractConfig(
            exchange="0x4bfb41d5b3570defd03c39a9a4d8de6bd8b8982e",
            collateral="0x2791bca1f2de4661ed88a30c99a7a9449aa84174",
            conditional_tokens="0x4d97dcd97ec945f40cf65f87097ace5ea0476045",
        ),
        (POLYGON_CHAIN_ID, True): ContractConfig(
            exchange="0xc5d563a36ae78145c45a50134d48a1215220f80a",
            collateral="0x2791bca1f2de4661ed88a30c99a7a9449aa84174",
            conditional_tokens="0x4d97dcd97ec945f40cf65f87097ace5ea0476045",
        ),
        (AMOY_CHAIN_ID, False): ContractConfig(
            exchange="0xdfe02eb6733538f8ea35d585af8de5958ad99e40",
            collateral="0x9c4e1703476e875070ee25b56a58b008cfb8fa78",
            conditional_tokens="0x69308fb512518e39f9b16112fa8d994f4e2bf8bb",
        ),
        (AMOY_CHAIN_ID, True): ContractConfig(
            exchange="0xd91e80cf2e7be2e162c6513ced06f1dd0da35296",
            collateral="0x9c4e1703476e875070ee25b56a58b008cfb8fa78",
            conditional_tokens="0x69308fb512518e39f9b16112fa8d994f4e2bf8bb",
        ),
    }
)


def get_contract_config(chain_id: int, neg_risk: bool = False) -> ContractConfig:
    """Get the contract configuration for a chain.

    Args:
        chain_id: Chain ID (137 for Polygon, 80002 for Amoy)
        neg_risk: Whether the market is a negative-risk market

    Returns:
        ContractConfig for the chain and market variant

    Raises:
        ConfigError: If the chain is not supported
    """
    config = CONTRACT_CONFIG.get((chain_id, bool(neg_risk)))
    if config is None:
        raise ConfigError(
            f"No contract configuration for chain_id={chain_id}, neg_risk={neg_risk}"
        )
    return config


__all__ = [
    "POLYGON_CHAIN_ID",
    "AMOY_CHAIN_ID",
    "ContractConfig",
    "ContractLookup",
    "CONTRACT_CONFIG",
    "get_contract_config",
]

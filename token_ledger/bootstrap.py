"""
Token Bootstrap

Builds a ready-to-use Token from configuration: fresh state store, fresh
event log, metadata and initial supply taken from TokenConfig unless
overridden by keyword. The package logger is configured from the same
settings before the token is built.
"""

from typing import Optional

from .config import TokenConfig, get_config
from .storage import InMemoryStateStore
from .events import EventEmitter
from .token import Token, MintPolicy
from .logging_config import setup_logging, get_logger, log_action


def deploy_token(deployer: str, config: Optional[TokenConfig] = None, **overrides) -> Token:
    """
    Construct a token for ``deployer`` and hand it to the caller

    Args:
        deployer: Address that receives the initial supply and ownership
        config: Configuration to read defaults from, global config if omitted
        **overrides: Any of name, symbol, decimals, initial_supply_units,
            mint_policy, store, emitter

    Returns:
        The constructed Token
    """
    if config is None:
        config = get_config()
    setup_logging(config.log_level, log_format=config.log_format, log_file=config.log_file)
    logger = get_logger("token_ledger.bootstrap")

    unknown = set(overrides) - {
        "name", "symbol", "decimals", "initial_supply_units",
        "mint_policy", "store", "emitter"
    }
    if unknown:
        raise TypeError(f"Unknown deploy_token() arguments: {sorted(unknown)}")

    store = overrides.get("store")
    emitter = overrides.get("emitter")

    token = Token(
        name=overrides.get("name", config.token_name),
        symbol=overrides.get("symbol", config.token_symbol),
        decimals=overrides.get("decimals", config.token_decimals),
        initial_supply_units=overrides.get("initial_supply_units", config.initial_supply_units),
        deployer=deployer,
        store=store if store is not None else InMemoryStateStore(),
        emitter=emitter if emitter is not None else EventEmitter(enable_hashing=config.enable_event_hashing),
        mint_policy=MintPolicy(overrides.get("mint_policy", config.mint_policy))
    )

    log_action(
        logger, "info", f"Token {token.symbol} deployed",
        user_id=deployer, action="deploy_token", resource=f"token:{token.symbol}",
        extra={
            "name": token.name,
            "decimals": token.decimals,
            "total_supply": str(token.total_supply()),
            "mint_policy": token.mint_policy.value
        }
    )
    return token

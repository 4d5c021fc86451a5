"""Static registry of supported crypto assets.

Lookups are case-insensitive.  resolve_oracle_id() is deliberately lenient:
a symbol with no table entry resolves to its own lower-cased form so that an
unregistered symbol can still attempt a price lookup.  The write path already
rejects unsupported symbols through is_supported(), so the fallback only
matters for records that predate a registry change.
"""

from __future__ import annotations

from src.domain.models.symbols import SymbolEntry

SEARCH_LIMIT = 5

SUPPORTED_SYMBOLS: tuple[SymbolEntry, ...] = tuple(
    SymbolEntry(symbol=symbol, oracle_id=oracle_id, name=name)
    for symbol, oracle_id, name in (
        ("BTC", "bitcoin", "Bitcoin"),
        ("ETH", "ethereum", "Ethereum"),
        ("USDT", "tether", "Tether"),
        ("BNB", "binancecoin", "BNB"),
        ("SOL", "solana", "Solana"),
        ("XRP", "ripple", "XRP"),
        ("USDC", "usd-coin", "USD Coin"),
        ("ADA", "cardano", "Cardano"),
        ("DOGE", "dogecoin", "Dogecoin"),
        ("TRX", "tron", "TRON"),
        ("AVAX", "avalanche-2", "Avalanche"),
        ("DOT", "polkadot", "Polkadot"),
        ("MATIC", "matic-network", "Polygon"),
        ("LTC", "litecoin", "Litecoin"),
        ("LINK", "chainlink", "Chainlink"),
        ("ATOM", "cosmos", "Cosmos"),
        ("UNI", "uniswap", "Uniswap"),
        ("XLM", "stellar", "Stellar"),
        ("ALGO", "algorand", "Algorand"),
        ("FIL", "filecoin", "Filecoin"),
        ("SUI", "sui", "Sui"),
        ("APT", "aptos", "Aptos"),
        ("ARB", "arbitrum", "Arbitrum"),
        ("OP", "optimism", "Optimism"),
        ("INJ", "injective-protocol", "Injective"),
        ("TIA", "celestia", "Celestia"),
        ("SEI", "sei-network", "Sei"),
        ("STX", "blockstack", "Stacks"),
        ("NEAR", "near", "NEAR Protocol"),
        ("ICP", "internet-computer", "Internet Computer"),
        ("IOTEX", "iotex", "IoTeX"),
        ("HBAR", "hedera-hashgraph", "Hedera"),
        ("VET", "vechain", "VeChain"),
        ("FTM", "fantom", "Fantom"),
        ("SAND", "the-sandbox", "The Sandbox"),
        ("MANA", "decentraland", "Decentraland"),
        ("AXS", "axie-infinity", "Axie Infinity"),
        ("GALA", "gala", "Gala"),
        ("THETA", "theta-token", "Theta Network"),
        ("XTZ", "tezos", "Tezos"),
    )
)


class SymbolRegistry:
    """Validation, search, and oracle-id resolution over a fixed symbol table."""

    def __init__(self, entries: tuple[SymbolEntry, ...] = SUPPORTED_SYMBOLS) -> None:
        self._entries = entries
        self._by_symbol = {e.symbol.upper(): e for e in entries}

    @property
    def entries(self) -> tuple[SymbolEntry, ...]:
        return self._entries

    def get(self, symbol: str) -> SymbolEntry | None:
        return self._by_symbol.get(symbol.upper())

    def is_supported(self, symbol: str) -> bool:
        return symbol.upper() in self._by_symbol

    def search(self, query: str) -> list[SymbolEntry]:
        """Return up to five entries whose symbol or name contains query.

        Matching is case-insensitive and keeps table order.  An empty query
        returns an empty list rather than the whole table.
        """
        if not query:
            return []
        needle = query.upper()
        matches = [
            e for e in self._entries
            if needle in e.symbol.upper() or needle in e.name.upper()
        ]
        return matches[:SEARCH_LIMIT]

    def resolve_oracle_id(self, symbol: str) -> str:
        entry = self.get(symbol)
        return entry.oracle_id if entry else symbol.lower()

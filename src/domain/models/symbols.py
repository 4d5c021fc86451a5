"""Symbol registry entry model."""

from pydantic import BaseModel, ConfigDict


class SymbolEntry(BaseModel):
    """A supported asset: user-facing ticker, oracle identifier, display name."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    oracle_id: str
    name: str

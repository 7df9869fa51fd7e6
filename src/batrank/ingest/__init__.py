"""Input adapters that normalize raw batter stat files."""

from .batters import (
    DEFAULT_BATTER_MAPPING,
    BatterParseError,
    BatterRow,
    load_batter_csv,
    load_records_from_csv,
    parse_batter_csv,
    resolve_mapping,
    rows_to_records,
)

__all__ = [
    "DEFAULT_BATTER_MAPPING",
    "BatterParseError",
    "BatterRow",
    "load_batter_csv",
    "load_records_from_csv",
    "parse_batter_csv",
    "resolve_mapping",
    "rows_to_records",
]

"""Process-wide defaults applied when curves are constructed."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .errors import IndexConfigError
from .index import DEFAULT_SPREAD, IndexType, validate_spread


@dataclass
class IndexConfig:
    """Defaults for curves built without an explicit spread or index type."""

    spread: int = DEFAULT_SPREAD
    default_index: IndexType = IndexType.NATURAL


_INDEX_CONFIG = IndexConfig()


def get_index_config() -> IndexConfig:
    return copy.deepcopy(_INDEX_CONFIG)


def set_index_config(config: IndexConfig) -> None:
    global _INDEX_CONFIG
    spread = validate_spread(config.spread)
    default_index = IndexType.coerce(config.default_index)
    if default_index is IndexType.DEFAULT:
        raise IndexConfigError("default_index cannot itself be IndexType.DEFAULT")
    _INDEX_CONFIG = IndexConfig(spread=spread, default_index=default_index)


def resolve_index(
    index: Union[IndexType, str, None] = None, spread: Optional[int] = None
) -> Tuple[IndexType, int]:
    """Resolve a requested index type and spread against the current config."""

    index_type = IndexType.DEFAULT if index is None else IndexType.coerce(index)
    if index_type is IndexType.DEFAULT:
        index_type = _INDEX_CONFIG.default_index
    resolved_spread = _INDEX_CONFIG.spread if spread is None else validate_spread(spread)
    return index_type, resolved_spread


__all__ = ["IndexConfig", "get_index_config", "resolve_index", "set_index_config"]

from typing import Hashable, Mapping, Optional

from ..config.config_loader import get_reporting_config


def unknown_name() -> str:
    return get_reporting_config()["unknown_name"]


def resolve_name(entity_id: Optional[Hashable], lookup: Mapping[Hashable, object], fallback: Optional[str] = None) -> str:
    """Name of the entity with entity_id in lookup, else fallback (the configured placeholder by default)."""
    entity = lookup.get(entity_id) if entity_id is not None else None
    name = getattr(entity, "name", None)
    if name:
        return name
    return fallback if fallback is not None else unknown_name()

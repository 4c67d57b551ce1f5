"""Loaders for declarative configuration (JSON catalogs, admin payloads)."""

from .json_loader import (
    load_catalog_from_json,
    pack_to_dict,
    parse_catalog_dict,
    parse_pack_patch,
    parse_pack_payload,
    validate_catalog_dict,
    validate_catalog_file,
)

__all__ = [
    "load_catalog_from_json",
    "pack_to_dict",
    "parse_catalog_dict",
    "parse_pack_patch",
    "parse_pack_payload",
    "validate_catalog_dict",
    "validate_catalog_file",
]

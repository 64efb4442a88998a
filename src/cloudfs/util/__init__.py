from .paths import (
    ROOT_ADDRESS,
    compute_address,
    normalize_destination,
    parent_address,
    resolve_folder_address,
    resolve_item_address,
    split_named_path,
)
from .time import from_timestamp, normalize_dt, now_utc, to_signature_date, to_timestamp

__all__ = [
    "ROOT_ADDRESS",
    "compute_address",
    "parent_address",
    "resolve_folder_address",
    "resolve_item_address",
    "normalize_destination",
    "split_named_path",
    "now_utc",
    "from_timestamp",
    "to_timestamp",
    "to_signature_date",
    "normalize_dt",
]

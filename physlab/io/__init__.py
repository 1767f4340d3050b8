"""Parameter files and snapshots."""

from physlab.io.serializers import (
    load_config,
    load_params,
    load_snapshot,
    params_from_dict,
    save_config,
    save_params,
    save_snapshot,
)

__all__ = [
    "save_config",
    "load_config",
    "save_params",
    "load_params",
    "params_from_dict",
    "save_snapshot",
    "load_snapshot",
]

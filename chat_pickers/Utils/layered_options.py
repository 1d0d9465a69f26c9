# layered_options.py
# Layered resolution of widget options (labels, extra CSS classes).
#
# A frozen dataclass supplies the defaults and fixes the key set. Each later
# layer (per-instance, then per-call) overrides individual keys; unknown keys
# are rejected rather than silently carried along.
#
from dataclasses import fields, replace
from typing import Any, Mapping, Optional, TypeVar

T = TypeVar('T')


def resolve_layers(base: T, *layers: Optional[Mapping[str, Any]]) -> T:
    """
    Apply override layers to a dataclass instance, later layers winning per key.

    Args:
        base: Dataclass instance holding the defaults
        *layers: Mappings of field name to value; None layers are skipped.
            A value of None means "not overridden" and keeps the lower layer.

    Returns:
        A new instance of the same dataclass

    Raises:
        TypeError: If a layer names a field the dataclass does not have
    """
    known = {f.name for f in fields(base)}
    resolved = base
    for layer in layers:
        if not layer:
            continue
        unknown = set(layer) - known
        if unknown:
            raise TypeError(f"Unknown option(s) for {type(base).__name__}: {', '.join(sorted(unknown))}")
        overrides = {key: value for key, value in layer.items() if value is not None}
        resolved = replace(resolved, **overrides)
    return resolved


def join_classes(*class_names: Optional[str]) -> str:
    """Space-joined CSS class string, skipping empty entries."""
    return " ".join(name for name in class_names if name)

"""
Mask list builder.

Reduces a base mask list plus an ordered list of override operations into the
final list handed to the encoder. Missing targets are tolerated so that the
same scripted edit can be replayed safely.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .mask_types import GENERIC_KEY, mask_label
from .models import (
    ColorRecipe,
    LocalMask,
    MaskOperation,
    MaskOverrideOp,
    flatten_geometry,
    normalize_adjustments,
)

logger = logging.getLogger(__name__)

NAME_PREFIX = "name:"


def selector_name(selector: str) -> str:
    """Mask name a selector refers to, without the ``name:`` prefix."""
    return selector[len(NAME_PREFIX):] if selector.startswith(NAME_PREFIX) else selector


def find_mask(masks: Sequence[LocalMask], selector: Optional[str]) -> Optional[int]:
    """Index of the first mask matching ``selector`` by name or id, or None."""
    if not selector:
        return None
    clean = selector_name(selector)
    for index, mask in enumerate(masks):
        if mask.name == clean or mask.name == selector or (mask.id is not None and mask.id == selector):
            return index
    return None


def merge_mask(mask: LocalMask, payload: Mapping[str, Any]) -> LocalMask:
    """
    Apply an update payload to an existing mask.

    Top-level fields are replaced, nested geometry is flattened first, and the
    adjustments map is unioned with the payload winning per key.
    """
    flat = flatten_geometry(payload)
    merged: Dict[str, Any] = mask.to_dict()
    merged.update({k: v for k, v in flat.items() if k != "adjustments"})

    adjustments = dict(mask.adjustments)
    adjustments.update(normalize_adjustments(flat.get("adjustments")))
    merged["adjustments"] = adjustments

    return LocalMask.from_dict(merged, default_name=mask.name)


def new_mask(payload: Mapping[str, Any], position: int) -> LocalMask:
    """Create a mask from an add payload; ``position`` is the current list length."""
    flat = flatten_geometry(payload)
    kind = flat.get("type") or GENERIC_KEY
    name = flat.get("name") or mask_label(kind, position)
    return LocalMask.from_dict({**flat, "type": kind, "name": name})


def build_masks(base: Iterable[LocalMask], ops: Iterable[MaskOverrideOp]) -> List[LocalMask]:
    """
    Reduce ``base`` through ``ops`` in order.

    Args:
        base: Starting masks (usually the recipe's own)
        ops: Override operations; unknown operations behave as ``add``

    Returns:
        The resulting mask list, in order
    """
    working = list(base)
    for op in ops:
        if op.operation in (MaskOperation.REMOVE_ALL, MaskOperation.CLEAR):
            logger.debug(f"Clearing {len(working)} masks")
            working = []
            continue

        if op.operation is MaskOperation.REMOVE:
            index = find_mask(working, op.target)
            if index is None:
                logger.debug(f"Remove target {op.target!r} not found")
            else:
                del working[index]
            continue

        if op.operation is MaskOperation.UPDATE:
            index = find_mask(working, op.target)
            if index is not None:
                working[index] = merge_mask(working[index], op.payload)
                continue
            logger.debug(f"Update target {op.target!r} not found, adding instead")
            payload = op.payload
            if op.target and not payload.get("name"):
                payload = {**payload, "name": selector_name(op.target)}
            working.append(new_mask(payload, len(working)))
            continue

        working.append(new_mask(op.payload, len(working)))
    return working


def parse_overrides(items: Any) -> List[MaskOverrideOp]:
    """Read override operations from a list of mappings (other entries are skipped)."""
    if not isinstance(items, (list, tuple)):
        return []
    return [MaskOverrideOp.from_dict(item) for item in items if isinstance(item, Mapping)]


def apply_overrides(recipe: ColorRecipe, ops: Iterable[MaskOverrideOp]) -> ColorRecipe:
    """Recipe whose mask list is ``build_masks(recipe.masks, ops)``."""
    return recipe.with_masks(build_masks(recipe.masks, ops))

"""
Mask encoding for Camera Raw presets.

Each LocalMask becomes one ``MaskGroupBasedCorrections`` entry: a Correction
carrying the local adjustments, with a single mask shape underneath. The shape
depends on the mask kind (gradient, circular gradient, AI image mask or range
mask). Kinds the registry does not know are written as a generic subject mask
so no mask is lost.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Iterable, Optional

from ..recipe.fields import clamp, round_half_up
from ..recipe.geometry import (
    ColorRangeGeometry,
    LinearGeometry,
    LuminanceRangeGeometry,
    RadialGeometry,
    ReferencePointGeometry,
    geometry_class_for,
    geometry_from_fields,
    geometry_to_fields,
)
from ..recipe.mask_types import GENERIC_KEY, MASK_TYPES, lookup
from ..recipe.models import LocalMask
from .ids import IdGenerator
from .namespaces import rdf, crs, set_crs, seq_element
from .tags import (
    LOCAL_ADJUSTMENT_TAGS,
    RANGE_TYPE_COLOR,
    RANGE_TYPE_LUMINANCE,
    STATIC_LOCAL_ATTRIBUTES,
    WHAT_IMAGE,
    WHAT_LINEAR,
    WHAT_RADIAL,
    WHAT_RANGE,
)

logger = logging.getLogger(__name__)


def f3(value: float) -> str:
    return f"{value:.3f}"


def unit(value: float) -> str:
    """Normalized coordinate, bounded to [0, 1], three decimals."""
    return f3(clamp(value, 0.0, 1.0))


def local_value(value: float) -> Optional[str]:
    """Local adjustment, bounded to [-1, 1], three decimals; None when unusable."""
    bounded = clamp(value, -1.0, 1.0)
    return f3(bounded) if bounded is not None else None


def resolve_geometry(mask: LocalMask):
    """The mask's geometry as the variant its kind requires."""
    cls = geometry_class_for(mask.type)
    if isinstance(mask.geometry, cls):
        return mask.geometry
    return geometry_from_fields(mask.type, geometry_to_fields(mask.geometry))


def _mask_attributes(li: ET.Element, what: str, mask: LocalMask, sync_id: str):
    set_crs(li, "What", what)
    set_crs(li, "MaskActive", True)
    set_crs(li, "MaskName", mask.name)
    set_crs(li, "MaskBlendMode", 0)
    set_crs(li, "MaskInverted", bool(mask.inverted))
    set_crs(li, "MaskSyncID", sync_id)
    set_crs(li, "MaskValue", 1)


def _write_linear(li: ET.Element, mask: LocalMask, geometry: LinearGeometry, sync_id: str):
    _mask_attributes(li, WHAT_LINEAR, mask, sync_id)
    set_crs(li, "ZeroX", unit(geometry.zero_x))
    set_crs(li, "ZeroY", unit(geometry.zero_y))
    set_crs(li, "FullX", unit(geometry.full_x))
    set_crs(li, "FullY", unit(geometry.full_y))


def _write_radial(li: ET.Element, mask: LocalMask, geometry: RadialGeometry, sync_id: str):
    _mask_attributes(li, WHAT_RADIAL, mask, sync_id)
    set_crs(li, "Top", unit(geometry.top))
    set_crs(li, "Left", unit(geometry.left))
    set_crs(li, "Bottom", unit(geometry.bottom))
    set_crs(li, "Right", unit(geometry.right))
    set_crs(li, "Angle", f3(clamp(geometry.angle, -360.0, 360.0)))
    set_crs(li, "Midpoint", round_half_up(clamp(geometry.midpoint, 0, 100)))
    set_crs(li, "Roundness", round_half_up(clamp(geometry.roundness, -100, 100)))
    set_crs(li, "Feather", round_half_up(clamp(geometry.feather, 0, 100)))
    set_crs(li, "Flipped", bool(geometry.flipped))
    set_crs(li, "Version", 2)


def _write_image(li: ET.Element, mask: LocalMask, geometry: ReferencePointGeometry, sync_id: str):
    info = lookup(mask.type)
    if info is None:
        logger.debug(f"Unknown mask type {mask.type!r}, writing mask '{mask.name}' as {GENERIC_KEY}")
        info = MASK_TYPES[GENERIC_KEY]
    _mask_attributes(li, WHAT_IMAGE, mask, sync_id)
    set_crs(li, "MaskVersion", 1)
    set_crs(li, "MaskSubType", info.primary_code)
    if info.secondary_code is not None:
        set_crs(li, "MaskSubCategoryID", info.secondary_code)
    set_crs(li, "ReferencePoint", f"{unit(geometry.reference_x)} {unit(geometry.reference_y)}")
    set_crs(li, "ErrorReason", 0)


def _write_range(li: ET.Element, mask: LocalMask, geometry, sync_id: str):
    description = ET.SubElement(li, rdf('Description'))
    _mask_attributes(description, WHAT_RANGE, mask, sync_id)
    range_mask = ET.SubElement(description, crs('CorrectionRangeMask'))

    if isinstance(geometry, ColorRangeGeometry):
        settings = ET.SubElement(range_mask, rdf('Description'))
        set_crs(settings, "Version", 3)
        set_crs(settings, "Type", RANGE_TYPE_COLOR)
        set_crs(settings, "ColorAmount", unit(geometry.color_amount))
        set_crs(settings, "Invert", bool(geometry.invert))
        set_crs(settings, "SampleType", 0)
        if geometry.point_models:
            seq = seq_element(settings, "PointModels")
            for model in geometry.point_models:
                ET.SubElement(seq, rdf('li')).text = " ".join(f"{v:.6f}" for v in model)
    else:
        set_crs(range_mask, "Version", 3)
        set_crs(range_mask, "Type", RANGE_TYPE_LUMINANCE)
        set_crs(range_mask, "Invert", bool(geometry.invert))
        set_crs(range_mask, "SampleType", 0)
        set_crs(range_mask, "LumRange", " ".join(f3(v) for v in geometry.lum_range))
        set_crs(range_mask, "LuminanceDepthSampleInfo",
                " ".join(f3(v) for v in geometry.depth_sample_info))


def write_mask_shape(li: ET.Element, mask: LocalMask, sync_id: str):
    """Write the shape of ``mask`` onto a CorrectionMasks entry."""
    geometry = resolve_geometry(mask)
    if isinstance(geometry, LinearGeometry):
        _write_linear(li, mask, geometry, sync_id)
    elif isinstance(geometry, RadialGeometry):
        _write_radial(li, mask, geometry, sync_id)
    elif isinstance(geometry, (ColorRangeGeometry, LuminanceRangeGeometry)):
        _write_range(li, mask, geometry, sync_id)
    else:
        _write_image(li, mask, geometry, sync_id)


def write_correction(seq: ET.Element, mask: LocalMask, ids: IdGenerator) -> ET.Element:
    """Append one Correction entry for ``mask`` to the corrections Seq."""
    correction_id = ids.sync_id()
    mask_id = ids.sync_id()

    li = ET.SubElement(seq, rdf('li'))
    correction = ET.SubElement(li, rdf('Description'))
    set_crs(correction, "What", "Correction")
    set_crs(correction, "CorrectionAmount", 1)
    set_crs(correction, "CorrectionActive", True)
    set_crs(correction, "CorrectionName", mask.name)
    set_crs(correction, "CorrectionSyncID", correction_id)

    for key, tag in LOCAL_ADJUSTMENT_TAGS:
        if key not in mask.adjustments:
            continue
        text = local_value(mask.adjustments[key])
        if text is not None:
            set_crs(correction, tag, text)
    for tag, value in STATIC_LOCAL_ATTRIBUTES:
        set_crs(correction, tag, value)

    shapes = seq_element(correction, "CorrectionMasks")
    write_mask_shape(ET.SubElement(shapes, rdf('li')), mask, mask_id)
    return correction


def write_masks(description: ET.Element, masks: Iterable[LocalMask], ids: IdGenerator) -> int:
    """
    Append ``crs:MaskGroupBasedCorrections`` for ``masks`` in list order.

    Returns:
        Number of corrections written (nothing is appended for an empty list)
    """
    masks = list(masks)
    if not masks:
        return 0
    seq = seq_element(description, "MaskGroupBasedCorrections")
    for mask in masks:
        write_correction(seq, mask, ids)
    logger.debug(f"Wrote {len(masks)} mask corrections")
    return len(masks)

"""
Camera Raw preset reader.

Extracts a ColorRecipe from a preset document with a sequence of independent
pattern extractors, one per field, each with its own default. This is not a
general XMP parser: it understands documents written by ``PresetEncoder`` and
presets saved by Lightroom / Camera Raw (which use the attribute form for most
settings), and nothing else. A field that cannot be read falls back to its
default instead of failing the whole decode.
"""

import html
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..recipe.fields import SCALAR_FIELDS, Section, clamp
from ..recipe.mask_types import GENERIC_KEY, type_for_codes
from ..recipe.models import CURVE_NAMES, ColorRecipe, LocalMask, Treatment, parse_curve
from .errors import InvalidFormatError
from .tags import CURVE_TAGS, LOCAL_ADJUSTMENT_TAGS

logger = logging.getLogger(__name__)

REQUIRED_MARKERS = ("crs:", "rdf:RDF")

DEFAULT_PRESET_NAME = "Imported Preset"

# Fallback when a MaskSubType/MaskSubCategoryID pair is not in the registry
SUBTYPE_TYPES = {
    0: "background",
    1: "subject",
    2: "sky",
    3: "face_skin",
    4: "mountains",
}

_MASK_GROUP = re.compile(
    r'<crs:MaskGroupBasedCorrections>(.*?)</crs:MaskGroupBasedCorrections>', re.DOTALL
)
_CORRECTION_START = re.compile(r'<rdf:li>\s*<rdf:Description\b[^>]*?crs:What="Correction"')
_MASK_WHAT = re.compile(r'crs:What="Mask/([^"]*)"')
_LIST_ITEM = re.compile(r'<rdf:li[^>]*>([^<]*)</rdf:li>')
_POINT_COLOR = re.compile(r'<crs:PointColor(\d+)>([^<]*)</crs:PointColor\1>')
_POINT_MODELS = re.compile(r'<crs:PointModels>(.*?)</crs:PointModels>', re.DOTALL)


@dataclass(frozen=True)
class DecodedPreset:
    """Result of reading a preset document."""
    preset_name: str
    description: Optional[str]
    recipe: ColorRecipe
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'preset_name': self.preset_name,
            'description': self.description,
            'recipe': self.recipe.to_dict(),
            'metadata': dict(self.metadata),
        }


def to_number(text: Optional[str]) -> Optional[float]:
    """Parse a finite number, or None."""
    if text is None:
        return None
    try:
        value = float(text.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def to_bool(text: Optional[str]) -> Optional[bool]:
    if text is None:
        return None
    return text.strip().lower() in ("true", "1", "yes")


def attribute(text: str, name: str) -> Optional[str]:
    """Value of the first ``crs:name="..."`` attribute in ``text``."""
    match = re.search(rf'\bcrs:{name}\s*=\s*"([^"]*)"', text)
    return html.unescape(match.group(1)) if match else None


def element(text: str, name: str) -> Optional[str]:
    """Text of the first ``<crs:name>...</crs:name>`` element in ``text``."""
    match = re.search(rf'<crs:{name}>([^<]*)</crs:{name}>', text)
    return html.unescape(match.group(1)).strip() if match else None


def setting(text: str, name: str) -> Optional[str]:
    """A setting written either as a child element or as an attribute."""
    value = element(text, name)
    return value if value is not None else attribute(text, name)


def alt_text(text: str, name: str) -> Optional[str]:
    """The x-default entry of a ``<crs:name><rdf:Alt>`` container."""
    match = re.search(rf'<crs:{name}>\s*<rdf:Alt>\s*<rdf:li[^>]*>([^<]*)</rdf:li>', text)
    if not match:
        return None
    value = html.unescape(match.group(1)).strip()
    return value or None


def _numbers(text: Optional[str], separator: Optional[str] = None) -> List[float]:
    if not text:
        return []
    values = [to_number(part) for part in text.split(separator)]
    return [v for v in values if v is not None]


def _read_curve(text: str, tag: str) -> Optional[Tuple[Tuple[int, int], ...]]:
    match = re.search(rf'<crs:{tag}>\s*<rdf:Seq>(.*?)</rdf:Seq>\s*</crs:{tag}>', text, re.DOTALL)
    if not match:
        return None
    points = []
    for item in _LIST_ITEM.findall(match.group(1)):
        parts = item.split(',')
        if len(parts) != 2:
            logger.debug(f"Dropping malformed curve point {item!r} in {tag}")
            continue
        x_in, y_out = to_number(parts[0]), to_number(parts[1])
        if x_in is None or y_out is None:
            logger.debug(f"Dropping malformed curve point {item!r} in {tag}")
            continue
        points.append((x_in, y_out))
    return parse_curve(points)


def _read_point_colors(text: str) -> Tuple[Tuple[float, ...], ...]:
    samples = sorted(
        (int(index), tuple(_numbers(body, ',')))
        for index, body in _POINT_COLOR.findall(text)
    )
    return tuple(values for _, values in samples if values)


def _mask_kind(entry: str) -> Optional[str]:
    what = _MASK_WHAT.search(entry)
    if not what:
        return None
    shape = what.group(1)
    if shape == "Gradient":
        return "linear"
    if shape == "CircularGradient":
        return "radial"
    if shape == "RangeMask":
        return "range_luminance" if to_number(attribute(entry, "Type")) == 2 else "range_color"
    if shape != "Image":
        logger.debug(f"Reading unsupported mask shape {shape!r} as a generic {GENERIC_KEY} mask")
        return GENERIC_KEY

    subtype = to_number(attribute(entry, "MaskSubType"))
    if subtype is None:
        return GENERIC_KEY
    subcategory = to_number(attribute(entry, "MaskSubCategoryID"))
    registered = type_for_codes(int(subtype), int(subcategory) if subcategory is not None else None)
    if registered:
        return registered
    return SUBTYPE_TYPES.get(int(subtype), GENERIC_KEY)


def _mask_geometry(entry: str, kind: str) -> Dict[str, Any]:
    if kind == "linear":
        keys = (("ZeroX", "zero_x"), ("ZeroY", "zero_y"), ("FullX", "full_x"), ("FullY", "full_y"))
        return {key: to_number(attribute(entry, tag)) for tag, key in keys}

    if kind == "radial":
        keys = (("Top", "top"), ("Left", "left"), ("Bottom", "bottom"), ("Right", "right"),
                ("Angle", "angle"), ("Midpoint", "midpoint"), ("Feather", "feather"),
                ("Roundness", "roundness"))
        geometry: Dict[str, Any] = {key: to_number(attribute(entry, tag)) for tag, key in keys}
        geometry["flipped"] = to_bool(attribute(entry, "Flipped"))
        return geometry

    if kind == "range_color":
        models_block = _POINT_MODELS.search(entry)
        models = [_numbers(item) for item in _LIST_ITEM.findall(models_block.group(1))] if models_block else []
        return {
            "color_amount": to_number(attribute(entry, "ColorAmount")),
            "invert": to_bool(attribute(entry, "Invert")),
            "point_models": [m for m in models if m],
        }

    if kind == "range_luminance":
        return {
            "lum_range": _numbers(attribute(entry, "LumRange")) or None,
            "depth_sample_info": _numbers(attribute(entry, "LuminanceDepthSampleInfo")) or None,
            "invert": to_bool(attribute(entry, "Invert")),
        }

    reference = _numbers(attribute(entry, "ReferencePoint"))
    if len(reference) == 2:
        return {"reference_x": reference[0], "reference_y": reference[1]}
    return {}


def _parse_correction(entry: str, index: int) -> Optional[LocalMask]:
    name = attribute(entry, "CorrectionName") or attribute(entry, "MaskName")
    kind = _mask_kind(entry)
    geometry = _mask_geometry(entry, kind) if kind else {}
    has_point = "reference_x" in geometry

    adjustments = {}
    for key, tag in LOCAL_ADJUSTMENT_TAGS:
        value = to_number(attribute(entry, tag))
        if value is not None:
            adjustments[key] = value

    if not (name or kind or has_point or adjustments):
        logger.debug(f"Dropping mask correction {index + 1}: no recognised fields")
        return None

    data = {k: v for k, v in geometry.items() if v is not None}
    data.update({
        "name": name,
        "type": kind or GENERIC_KEY,
        "inverted": bool(to_bool(attribute(entry, "MaskInverted"))),
        "adjustments": adjustments,
    })
    return LocalMask.from_dict(data, default_name=f"Mask {index + 1}")


def split_corrections(group: str) -> List[str]:
    """Split a MaskGroupBasedCorrections body into one chunk per Correction."""
    starts = [m.start() for m in _CORRECTION_START.finditer(group)]
    return [group[start:end] for start, end in zip(starts, starts[1:] + [len(group)])]


def decode_masks(text: str) -> Tuple[LocalMask, ...]:
    """All readable masks of a document, in document order."""
    group = _MASK_GROUP.search(text)
    if not group:
        return ()
    masks = []
    for index, entry in enumerate(split_corrections(group.group(1))):
        mask = _parse_correction(entry, index)
        if mask is not None:
            masks.append(mask)
    return tuple(masks)


def _check_format(text: Any):
    if not isinstance(text, str):
        raise InvalidFormatError(f"Expected preset text, got {type(text).__name__}")
    missing = [marker for marker in REQUIRED_MARKERS if marker not in text]
    if missing:
        raise InvalidFormatError(f"Not a Camera Raw preset: missing {', '.join(missing)}")


def decode_preset(text: str, fill_defaults: bool = True) -> DecodedPreset:
    """
    Read a preset document.

    Args:
        text: Preset document
        fill_defaults: Give every scalar missing from the document its default
            value; when False, missing scalars stay absent

    Returns:
        The decoded preset

    Raises:
        InvalidFormatError: If the document lacks the Camera Raw markers
    """
    _check_format(text)

    group = _MASK_GROUP.search(text)
    body = text[:group.start()] + text[group.end():] if group else text

    values: Dict[str, Any] = {}
    for scalar in SCALAR_FIELDS:
        value = clamp(to_number(setting(body, scalar.tag)), scalar.minimum, scalar.maximum)
        if value is None and fill_defaults:
            value = float(scalar.default)
        values[scalar.name] = value

    treatment_text = setting(body, "Treatment") or ""
    monochrome = "black" in treatment_text.lower() or bool(to_bool(setting(body, "ConvertToGrayscale")))

    for name in CURVE_NAMES:
        values[name] = _read_curve(body, CURVE_TAGS[name])

    preset_name = alt_text(body, "Name") or attribute(body, "Name") or DEFAULT_PRESET_NAME
    description = alt_text(body, "Description")
    masks = decode_masks(text)

    recipe = ColorRecipe(
        preset_name=preset_name,
        description=description,
        camera_profile=setting(body, "ProfileName") or None,
        monochrome=monochrome,
        treatment=Treatment.BLACK_AND_WHITE if monochrome else Treatment.COLOR,
        point_colors=_read_point_colors(body),
        masks=masks,
        **values,
    )

    hsl_tags = [f.tag for f in SCALAR_FIELDS if f.section in (Section.HSL, Section.MIXER)]
    metadata = {
        'preset_type': attribute(body, "PresetType"),
        'version': attribute(body, "Version"),
        'process_version': attribute(body, "ProcessVersion"),
        'has_masks': bool(masks),
        'has_hsl': any(f"crs:{tag}" in body for tag in hsl_tags),
        'has_color_grading': "crs:ColorGrade" in body,
        'has_curves': any(values[name] for name in CURVE_NAMES),
    }
    logger.debug(f"Decoded preset '{preset_name}' with {len(masks)} masks")
    return DecodedPreset(preset_name, description, recipe, metadata)

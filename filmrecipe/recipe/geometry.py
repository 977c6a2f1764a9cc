"""
Mask geometry variants.

Each mask kind carries a differently shaped geometry payload. Payloads arrive
from the analysis step as flat keys on the mask (camelCase or snake_case);
``geometry_from_fields`` picks the variant for a kind and reads its keys.
"""

from dataclasses import dataclass, fields as dataclass_fields, asdict
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .fields import coerce_number


@dataclass(frozen=True)
class LinearGeometry:
    """Linear gradient defined by a zero point and a full-strength point (normalized 0-1)."""
    zero_x: float = 0.5
    zero_y: float = 0.5
    full_x: float = 0.5
    full_y: float = 0.8


@dataclass(frozen=True)
class RadialGeometry:
    """Radial gradient bounding box (normalized 0-1) plus shape controls."""
    top: float = 0.2
    left: float = 0.2
    bottom: float = 0.8
    right: float = 0.8
    angle: float = 0.0
    midpoint: float = 50.0
    feather: float = 75.0
    roundness: float = 0.0
    flipped: bool = False


@dataclass(frozen=True)
class ReferencePointGeometry:
    """Reference point used by AI (registry-backed) masks."""
    reference_x: float = 0.5
    reference_y: float = 0.5


@dataclass(frozen=True)
class ColorRangeGeometry:
    """Colour range mask: sampled colour models plus selection amount."""
    color_amount: float = 0.5
    invert: bool = False
    point_models: Tuple[Tuple[float, ...], ...] = ()


@dataclass(frozen=True)
class LuminanceRangeGeometry:
    """Luminance range mask."""
    lum_range: Tuple[float, ...] = (0.0, 1.0, 1.0, 1.0)
    depth_sample_info: Tuple[float, ...] = (0.0, 0.5, 0.5)
    invert: bool = False


MaskGeometry = Union[
    LinearGeometry,
    RadialGeometry,
    ReferencePointGeometry,
    ColorRangeGeometry,
    LuminanceRangeGeometry,
]

_KIND_TO_GEOMETRY = {
    "linear": LinearGeometry,
    "radial": RadialGeometry,
    "range_color": ColorRangeGeometry,
    "range_luminance": LuminanceRangeGeometry,
}

# Accepted spellings for each geometry key
GEOMETRY_ALIASES: Mapping[str, str] = {
    "zeroX": "zero_x",
    "zeroY": "zero_y",
    "fullX": "full_x",
    "fullY": "full_y",
    "referenceX": "reference_x",
    "referenceY": "reference_y",
    "colorAmount": "color_amount",
    "pointModels": "point_models",
    "lumRange": "lum_range",
    "luminanceDepthSampleInfo": "depth_sample_info",
    "luminance_depth_sample_info": "depth_sample_info",
}


def _all_geometry_keys():
    keys = set()
    for cls in (LinearGeometry, RadialGeometry, ReferencePointGeometry,
                ColorRangeGeometry, LuminanceRangeGeometry):
        keys.update(f.name for f in dataclass_fields(cls))
    return frozenset(keys)


GEOMETRY_KEYS = _all_geometry_keys()


def canonical_geometry_key(key: str) -> str:
    """Map an alias (e.g. ``referenceX``) to its snake_case geometry key."""
    return GEOMETRY_ALIASES.get(key, key)


def geometry_class_for(kind: Optional[str]):
    """Geometry variant used for a mask kind; anything non-geometric uses a reference point."""
    return _KIND_TO_GEOMETRY.get(kind or "", ReferencePointGeometry)


def _vector(value: Any) -> Optional[Tuple[float, ...]]:
    if not isinstance(value, (list, tuple)):
        return None
    numbers = [coerce_number(v) for v in value]
    return tuple(n for n in numbers if n is not None)


def _read(name: str, value: Any) -> Any:
    if name in ("flipped", "invert"):
        return bool(value)
    if name == "point_models":
        if not isinstance(value, (list, tuple)):
            return None
        models = [_vector(model) for model in value]
        return tuple(m for m in models if m)
    if name in ("lum_range", "depth_sample_info"):
        vector = _vector(value)
        expected = 4 if name == "lum_range" else 3
        if vector is None or len(vector) != expected:
            return None
        return vector
    return coerce_number(value)


def geometry_from_fields(kind: Optional[str], data: Mapping[str, Any]) -> MaskGeometry:
    """
    Build the geometry variant for ``kind`` from flat mask keys.

    Keys that do not belong to the variant are ignored; unusable values fall
    back to the variant's defaults.
    """
    cls = geometry_class_for(kind)
    normalized = {canonical_geometry_key(k): v for k, v in data.items()}
    values: Dict[str, Any] = {}
    for f in dataclass_fields(cls):
        if f.name not in normalized or normalized[f.name] is None:
            continue
        value = _read(f.name, normalized[f.name])
        if value is not None:
            values[f.name] = value
    return cls(**values)


def geometry_to_fields(geometry: MaskGeometry) -> Dict[str, Any]:
    """Flatten a geometry variant into plain keys (tuples become lists)."""
    data = asdict(geometry)
    for key, value in data.items():
        if isinstance(value, tuple):
            data[key] = [list(v) if isinstance(v, tuple) else v for v in value]
    return data

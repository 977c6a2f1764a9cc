"""
Data models for colour recipes.

A recipe arrives from the analysis service as a loosely shaped dictionary.
``ColorRecipe.from_dict`` validates it once at ingress; everything downstream
works on the frozen, fully typed value.
"""

from dataclasses import dataclass, field, fields as dataclass_fields, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import logging

from .fields import SCALAR_FIELDS, clamp, coerce_number, round_half_up
from .geometry import (
    MaskGeometry,
    geometry_from_fields,
    geometry_to_fields,
)
from .mask_types import GENERIC_KEY

logger = logging.getLogger(__name__)

CurvePoint = Tuple[int, int]
Curve = Tuple[CurvePoint, ...]

CURVE_NAMES: Tuple[str, ...] = ("tone_curve", "tone_curve_red", "tone_curve_green", "tone_curve_blue")

LOCAL_ADJUSTMENT_KEYS: Tuple[str, ...] = (
    "exposure", "contrast", "highlights", "shadows", "whites", "blacks",
    "clarity", "dehaze", "texture", "saturation", "temperature", "tint",
)

MAX_POINT_COLORS = 4


class Treatment(Enum):
    """Colour treatment of the preset."""
    COLOR = "color"
    BLACK_AND_WHITE = "black_and_white"

    @classmethod
    def parse(cls, value: Any) -> 'Treatment':
        """Read a treatment from loose text; anything unrecognised is colour."""
        if isinstance(value, Treatment):
            return value
        if isinstance(value, str):
            text = value.strip().lower().replace("&", "and").replace("-", "_").replace(" ", "_")
            if text in ("black_and_white", "bw", "b_and_w", "monochrome", "grayscale", "greyscale"):
                return cls.BLACK_AND_WHITE
        return cls.COLOR


class MaskOperation(Enum):
    """Override operations understood by the mask list builder."""
    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"
    REMOVE_ALL = "remove_all"
    CLEAR = "clear"

    @classmethod
    def parse(cls, value: Any) -> 'MaskOperation':
        """Unrecognised or missing operations are treated as ``add``."""
        if isinstance(value, MaskOperation):
            return value
        if isinstance(value, str):
            text = value.strip().lower().replace("-", "_")
            for op in cls:
                if op.value == text:
                    return op
        logger.debug(f"Unrecognised mask operation {value!r}, treating as add")
        return cls.ADD


def parse_curve(points: Any) -> Optional[Curve]:
    """
    Validate a tone curve.

    Accepts ``{"input": x, "output": y}`` mappings or ``(x, y)`` pairs. Points
    whose coordinates are not both numbers are dropped; surviving coordinates
    are clamped to 0-255 and rounded. A curve with no valid point is absent.
    """
    if not isinstance(points, (list, tuple)):
        return None
    result: List[CurvePoint] = []
    for point in points:
        if isinstance(point, Mapping):
            x, y = point.get("input"), point.get("output")
        elif isinstance(point, (list, tuple)) and len(point) >= 2:
            x, y = point[0], point[1]
        else:
            x = y = None
        x, y = clamp(x, 0, 255), clamp(y, 0, 255)
        if x is None or y is None:
            logger.debug(f"Dropping invalid tone curve point {point!r}")
            continue
        result.append((round_half_up(x), round_half_up(y)))
    return tuple(result) or None


def parse_point_colors(value: Any) -> Tuple[Tuple[float, ...], ...]:
    """Keep at most four colour-sample vectors of numeric components."""
    if not isinstance(value, (list, tuple)):
        return ()
    vectors = []
    for sample in value:
        if not isinstance(sample, (list, tuple)):
            continue
        numbers = tuple(n for n in (coerce_number(v) for v in sample) if n is not None)
        if numbers:
            vectors.append(numbers)
    return tuple(vectors[:MAX_POINT_COLORS])


def canonical_adjustment_key(key: str) -> str:
    """``local_exposure`` and ``exposure`` name the same local adjustment."""
    return key[len("local_"):] if key.startswith("local_") else key


def normalize_adjustments(data: Any) -> Dict[str, float]:
    """Keep known local adjustment keys with numeric values; drop the rest."""
    if not isinstance(data, Mapping):
        return {}
    result: Dict[str, float] = {}
    for key, value in data.items():
        name = canonical_adjustment_key(str(key))
        if name not in LOCAL_ADJUSTMENT_KEYS:
            logger.debug(f"Ignoring unknown local adjustment {key!r}")
            continue
        number = coerce_number(value)
        if number is not None:
            result[name] = number
    return result


def flatten_geometry(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Lift a nested ``geometry`` mapping onto the top level of a mask payload."""
    flat = {k: v for k, v in data.items() if k != "geometry"}
    nested = data.get("geometry")
    if isinstance(nested, Mapping):
        flat.update(nested)
    elif nested is not None and hasattr(nested, "__dataclass_fields__"):
        flat.update(geometry_to_fields(nested))
    return flat


@dataclass(frozen=True)
class LocalMask:
    """A region-limited group of local adjustments."""
    name: str
    type: str = GENERIC_KEY
    inverted: bool = False
    geometry: Optional[MaskGeometry] = None
    adjustments: Dict[str, float] = field(default_factory=dict)
    id: Optional[str] = None

    def __post_init__(self):
        if self.geometry is None:
            object.__setattr__(self, "geometry", geometry_from_fields(self.type, {}))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], default_name: Optional[str] = None) -> 'LocalMask':
        """
        Build a mask from an analysis-service payload.

        Geometry may be given as flat keys or as a nested ``geometry`` mapping.
        Local adjustments may be given under ``adjustments`` or as top-level
        ``local_*`` keys.
        """
        flat = flatten_geometry(data)
        kind = flat.get("type") if isinstance(flat.get("type"), str) and flat.get("type") else GENERIC_KEY

        adjustments = normalize_adjustments(flat.get("adjustments"))
        for key, value in flat.items():
            if isinstance(key, str) and key.startswith("local_"):
                extra = normalize_adjustments({key: value})
                adjustments.update(extra)

        name = flat.get("name")
        if not isinstance(name, str) or not name:
            name = default_name or "Mask"

        mask_id = flat.get("id")
        return cls(
            name=name,
            type=kind,
            inverted=bool(flat.get("inverted", flat.get("mask_inverted", False))),
            geometry=geometry_from_fields(kind, flat),
            adjustments=adjustments,
            id=str(mask_id) if mask_id is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Flat dictionary form (geometry keys at the top level)."""
        data: Dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "inverted": self.inverted,
        }
        if self.id is not None:
            data["id"] = self.id
        data.update(geometry_to_fields(self.geometry))
        data["adjustments"] = dict(self.adjustments)
        return data


@dataclass(frozen=True)
class MaskOverrideOp:
    """One scripted edit applied by the mask list builder."""
    operation: MaskOperation = MaskOperation.ADD
    target: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'MaskOverrideOp':
        op = MaskOperation.parse(data.get("op", data.get("operation")))
        target = data.get("target", data.get("id", data.get("name")))
        payload = {k: v for k, v in data.items() if k not in ("op", "operation", "target")}
        return cls(op, str(target) if target is not None else None, payload)

    @classmethod
    def add(cls, payload: Mapping[str, Any]) -> 'MaskOverrideOp':
        return cls(MaskOperation.ADD, None, dict(payload))

    @classmethod
    def update(cls, target: str, payload: Mapping[str, Any]) -> 'MaskOverrideOp':
        return cls(MaskOperation.UPDATE, target, dict(payload))

    @classmethod
    def remove(cls, target: str) -> 'MaskOverrideOp':
        return cls(MaskOperation.REMOVE, target)

    @classmethod
    def clear(cls) -> 'MaskOverrideOp':
        return cls(MaskOperation.CLEAR)


# Recipe keys accepted from the analysis service under a different spelling
_RECIPE_ALIASES = {
    "presetName": "preset_name",
    "cameraProfile": "camera_profile",
    "toneCurve": "tone_curve",
    "toneCurveRed": "tone_curve_red",
    "toneCurveGreen": "tone_curve_green",
    "toneCurveBlue": "tone_curve_blue",
    "pointColors": "point_colors",
    "localAdjustments": "masks",
}


@dataclass(frozen=True)
class ColorRecipe:
    """
    Semantic model of a preset.

    Scalar adjustments are ``None`` when absent ("do not touch"); a value of 0
    is an explicit reset. Ranges live in ``fields.SCALAR_FIELDS``.
    """
    preset_name: Optional[str] = None
    description: Optional[str] = None
    camera_profile: Optional[str] = None
    monochrome: bool = False
    treatment: Treatment = Treatment.COLOR

    # Basic tone
    exposure: Optional[float] = None  # EV, -5 to +5
    contrast: Optional[float] = None
    highlights: Optional[float] = None
    shadows: Optional[float] = None
    whites: Optional[float] = None
    blacks: Optional[float] = None
    clarity: Optional[float] = None
    vibrance: Optional[float] = None
    saturation: Optional[float] = None

    # White balance
    temperature: Optional[float] = None  # Kelvin
    tint: Optional[float] = None

    # Parametric tone curve
    parametric_shadows: Optional[float] = None
    parametric_darks: Optional[float] = None
    parametric_lights: Optional[float] = None
    parametric_highlights: Optional[float] = None
    parametric_shadow_split: Optional[float] = None
    parametric_midtone_split: Optional[float] = None
    parametric_highlight_split: Optional[float] = None

    # HSL
    hue_red: Optional[float] = None
    hue_orange: Optional[float] = None
    hue_yellow: Optional[float] = None
    hue_green: Optional[float] = None
    hue_aqua: Optional[float] = None
    hue_blue: Optional[float] = None
    hue_purple: Optional[float] = None
    hue_magenta: Optional[float] = None
    sat_red: Optional[float] = None
    sat_orange: Optional[float] = None
    sat_yellow: Optional[float] = None
    sat_green: Optional[float] = None
    sat_aqua: Optional[float] = None
    sat_blue: Optional[float] = None
    sat_purple: Optional[float] = None
    sat_magenta: Optional[float] = None
    lum_red: Optional[float] = None
    lum_orange: Optional[float] = None
    lum_yellow: Optional[float] = None
    lum_green: Optional[float] = None
    lum_aqua: Optional[float] = None
    lum_blue: Optional[float] = None
    lum_purple: Optional[float] = None
    lum_magenta: Optional[float] = None

    # Black & white mixer
    gray_red: Optional[float] = None
    gray_orange: Optional[float] = None
    gray_yellow: Optional[float] = None
    gray_green: Optional[float] = None
    gray_aqua: Optional[float] = None
    gray_blue: Optional[float] = None
    gray_purple: Optional[float] = None
    gray_magenta: Optional[float] = None

    # Color grading
    color_grade_shadow_hue: Optional[float] = None
    color_grade_shadow_sat: Optional[float] = None
    color_grade_shadow_lum: Optional[float] = None
    color_grade_midtone_hue: Optional[float] = None
    color_grade_midtone_sat: Optional[float] = None
    color_grade_midtone_lum: Optional[float] = None
    color_grade_highlight_hue: Optional[float] = None
    color_grade_highlight_sat: Optional[float] = None
    color_grade_highlight_lum: Optional[float] = None
    color_grade_global_hue: Optional[float] = None
    color_grade_global_sat: Optional[float] = None
    color_grade_global_lum: Optional[float] = None
    color_grade_blending: Optional[float] = None
    color_grade_balance: Optional[float] = None

    # Grain
    grain_amount: Optional[float] = None
    grain_size: Optional[float] = None
    grain_frequency: Optional[float] = None

    # Vignette
    vignette_amount: Optional[float] = None
    vignette_midpoint: Optional[float] = None
    vignette_feather: Optional[float] = None
    vignette_roundness: Optional[float] = None
    vignette_style: Optional[float] = None
    vignette_highlight_contrast: Optional[float] = None

    point_colors: Tuple[Tuple[float, ...], ...] = ()

    tone_curve: Optional[Curve] = None
    tone_curve_red: Optional[Curve] = None
    tone_curve_green: Optional[Curve] = None
    tone_curve_blue: Optional[Curve] = None

    masks: Tuple[LocalMask, ...] = ()

    # Analysis metadata, opaque to the codec
    confidence: Optional[float] = None
    reasoning: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ColorRecipe':
        """Validate an analysis-service dictionary into a recipe."""
        source = {_RECIPE_ALIASES.get(k, k): v for k, v in data.items()}
        values: Dict[str, Any] = {}

        for scalar in SCALAR_FIELDS:
            number = coerce_number(source.get(scalar.name))
            if number is not None:
                values[scalar.name] = number

        for name in ("preset_name", "description", "camera_profile", "reasoning"):
            text = source.get(name)
            if isinstance(text, str) and text.strip():
                values[name] = text

        values["monochrome"] = bool(source.get("monochrome", False))
        values["treatment"] = Treatment.parse(source.get("treatment"))
        values["confidence"] = coerce_number(source.get("confidence"))

        for name in CURVE_NAMES:
            values[name] = parse_curve(source.get(name))

        values["point_colors"] = parse_point_colors(source.get("point_colors"))

        raw_masks = source.get("masks")
        masks: List[LocalMask] = []
        if isinstance(raw_masks, (list, tuple)):
            for index, item in enumerate(raw_masks):
                if isinstance(item, LocalMask):
                    masks.append(item)
                elif isinstance(item, Mapping):
                    masks.append(LocalMask.from_dict(item, default_name=f"Mask {index + 1}"))
                else:
                    logger.debug(f"Skipping mask entry of type {type(item).__name__}")
        values["masks"] = tuple(masks)

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Analysis-service shaped dictionary; absent values are left out."""
        data: Dict[str, Any] = {}
        for name in ("preset_name", "description", "camera_profile"):
            if getattr(self, name) is not None:
                data[name] = getattr(self, name)
        data["monochrome"] = self.monochrome
        data["treatment"] = self.treatment.value

        for scalar in SCALAR_FIELDS:
            value = getattr(self, scalar.name)
            if value is not None:
                data[scalar.name] = value

        if self.point_colors:
            data["point_colors"] = [list(v) for v in self.point_colors]
        for name in CURVE_NAMES:
            curve = getattr(self, name)
            if curve:
                data[name] = [{"input": x, "output": y} for x, y in curve]
        if self.masks:
            data["masks"] = [m.to_dict() for m in self.masks]
        if self.confidence is not None:
            data["confidence"] = self.confidence
        if self.reasoning is not None:
            data["reasoning"] = self.reasoning
        return data

    def with_masks(self, masks: Iterable[LocalMask]) -> 'ColorRecipe':
        """Copy of this recipe carrying a different mask list."""
        return replace(self, masks=tuple(masks))


_SECTION_FLAG_ALIASES = {
    "wbBasic": "basic",
    "wb_basic": "basic",
    "colorGrading": "color_grading",
    "pointColor": "point_color",
}


@dataclass(frozen=True)
class InclusionFlags:
    """Per-section switches; a disabled section contributes nothing to the output."""
    basic: bool = True
    hsl: bool = True
    color_grading: bool = True
    curves: bool = True
    point_color: bool = True
    grain: bool = True
    vignette: bool = True
    masks: bool = True

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'InclusionFlags':
        """Read flags from a mapping; missing or unknown keys keep their defaults."""
        if not data:
            return cls()
        known = {f.name for f in dataclass_fields(cls)}
        values = {}
        for key, value in data.items():
            name = _SECTION_FLAG_ALIASES.get(key, key)
            if name in known:
                values[name] = bool(value)
        return cls(**values)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'InclusionFlags':
        include = config.get("export", {}).get("include", {}) if config else {}
        return cls.from_dict(include)

    def excluding(self, *sections: str) -> 'InclusionFlags':
        """Copy with the named sections switched off."""
        return replace(self, **{_SECTION_FLAG_ALIASES.get(s, s): False for s in sections})

    def to_dict(self) -> Dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in dataclass_fields(self)}

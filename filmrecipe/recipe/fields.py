"""
Scalar field table for colour recipes.

Every global scalar adjustment is described once here: the recipe attribute
name, the Camera Raw tag it maps to, its valid range, its default and the
preset section it belongs to. The encoder, the decoder and recipe ingress all
iterate this table instead of repeating per-field code.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Section(Enum):
    """Preset sections, in document order."""
    BASIC = "basic"
    WHITE_BALANCE = "white_balance"
    PARAMETRIC_CURVE = "parametric_curve"
    HSL = "hsl"
    MIXER = "mixer"
    COLOR_GRADING = "color_grading"
    GRAIN = "grain"
    VIGNETTE = "vignette"


@dataclass(frozen=True)
class ScalarField:
    """A single bounded scalar adjustment."""
    name: str
    tag: str
    minimum: float
    maximum: float
    default: float
    section: Section
    decimals: int = 0  # 0 means round to the nearest integer


HSL_COLORS: Tuple[str, ...] = (
    "red", "orange", "yellow", "green", "aqua", "blue", "purple", "magenta",
)

COLOR_GRADE_ZONES: Tuple[str, ...] = ("shadow", "midtone", "highlight", "global")


def _build_fields() -> List[ScalarField]:
    fields = [
        ScalarField("exposure", "Exposure2012", -5, 5, 0, Section.BASIC, decimals=2),
        ScalarField("contrast", "Contrast2012", -100, 100, 0, Section.BASIC),
        ScalarField("highlights", "Highlights2012", -100, 100, 0, Section.BASIC),
        ScalarField("shadows", "Shadows2012", -100, 100, 0, Section.BASIC),
        ScalarField("whites", "Whites2012", -100, 100, 0, Section.BASIC),
        ScalarField("blacks", "Blacks2012", -100, 100, 0, Section.BASIC),
        ScalarField("clarity", "Clarity2012", -100, 100, 0, Section.BASIC),
        ScalarField("vibrance", "Vibrance", -100, 100, 0, Section.BASIC),
        ScalarField("saturation", "Saturation", -100, 100, 0, Section.BASIC),
        ScalarField("temperature", "Temperature", 2000, 50000, 6500, Section.WHITE_BALANCE),
        ScalarField("tint", "Tint", -150, 150, 0, Section.WHITE_BALANCE),
        ScalarField("parametric_shadows", "ParametricShadows", -100, 100, 0, Section.PARAMETRIC_CURVE),
        ScalarField("parametric_darks", "ParametricDarks", -100, 100, 0, Section.PARAMETRIC_CURVE),
        ScalarField("parametric_lights", "ParametricLights", -100, 100, 0, Section.PARAMETRIC_CURVE),
        ScalarField("parametric_highlights", "ParametricHighlights", -100, 100, 0, Section.PARAMETRIC_CURVE),
        ScalarField("parametric_shadow_split", "ParametricShadowSplit", 0, 100, 25, Section.PARAMETRIC_CURVE),
        ScalarField("parametric_midtone_split", "ParametricMidtoneSplit", 0, 100, 50, Section.PARAMETRIC_CURVE),
        ScalarField("parametric_highlight_split", "ParametricHighlightSplit", 0, 100, 75, Section.PARAMETRIC_CURVE),
    ]

    for prefix, tag_prefix in (("hue", "HueAdjustment"),
                               ("sat", "SaturationAdjustment"),
                               ("lum", "LuminanceAdjustment")):
        for color in HSL_COLORS:
            fields.append(ScalarField(
                f"{prefix}_{color}", f"{tag_prefix}{color.capitalize()}",
                -100, 100, 0, Section.HSL,
            ))

    for color in HSL_COLORS:
        fields.append(ScalarField(
            f"gray_{color}", f"GrayMixer{color.capitalize()}", -100, 100, 0, Section.MIXER,
        ))

    for zone in COLOR_GRADE_ZONES:
        tag_zone = zone.capitalize()
        fields.extend([
            ScalarField(f"color_grade_{zone}_hue", f"ColorGrade{tag_zone}Hue", 0, 360, 0, Section.COLOR_GRADING),
            ScalarField(f"color_grade_{zone}_sat", f"ColorGrade{tag_zone}Sat", 0, 100, 0, Section.COLOR_GRADING),
            ScalarField(f"color_grade_{zone}_lum", f"ColorGrade{tag_zone}Lum", -100, 100, 0, Section.COLOR_GRADING),
        ])
    fields.extend([
        ScalarField("color_grade_blending", "ColorGradeBlending", 0, 100, 50, Section.COLOR_GRADING),
        ScalarField("color_grade_balance", "ColorGradeBalance", -100, 100, 0, Section.COLOR_GRADING),
        ScalarField("grain_amount", "GrainAmount", 0, 100, 0, Section.GRAIN),
        ScalarField("grain_size", "GrainSize", 0, 100, 25, Section.GRAIN),
        ScalarField("grain_frequency", "GrainFrequency", 0, 100, 50, Section.GRAIN),
        ScalarField("vignette_amount", "PostCropVignetteAmount", -100, 100, 0, Section.VIGNETTE),
        ScalarField("vignette_midpoint", "PostCropVignetteMidpoint", 0, 100, 50, Section.VIGNETTE),
        ScalarField("vignette_feather", "PostCropVignetteFeather", 0, 100, 50, Section.VIGNETTE),
        ScalarField("vignette_roundness", "PostCropVignetteRoundness", -100, 100, 0, Section.VIGNETTE),
        ScalarField("vignette_style", "PostCropVignetteStyle", 0, 2, 1, Section.VIGNETTE),
        ScalarField("vignette_highlight_contrast", "PostCropVignetteHighlightContrast", 0, 100, 0, Section.VIGNETTE),
    ])
    return fields


SCALAR_FIELDS: Tuple[ScalarField, ...] = tuple(_build_fields())
FIELDS_BY_NAME: Dict[str, ScalarField] = {f.name: f for f in SCALAR_FIELDS}


def fields_in(section: Section) -> List[ScalarField]:
    """Return the fields of one section in document order."""
    return [f for f in SCALAR_FIELDS if f.section is section]


def coerce_number(value: Any) -> Optional[float]:
    """Return value as a finite float, or None if it is not a usable number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return value


def clamp(value: Any, minimum: float, maximum: float) -> Optional[float]:
    """Bound a numeric value to [minimum, maximum]; non-numeric input yields None."""
    number = coerce_number(value)
    if number is None:
        return None
    return max(minimum, min(maximum, number))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))

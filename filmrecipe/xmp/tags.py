"""
Camera Raw tag names shared by the preset writer and reader.
"""

from typing import Dict, Tuple

CURVE_TAGS: Dict[str, str] = {
    "tone_curve": "ToneCurvePV2012",
    "tone_curve_red": "ToneCurvePV2012Red",
    "tone_curve_green": "ToneCurvePV2012Green",
    "tone_curve_blue": "ToneCurvePV2012Blue",
}

# Local adjustment key -> correction attribute, in document order
LOCAL_ADJUSTMENT_TAGS: Tuple[Tuple[str, str], ...] = (
    ("exposure", "LocalExposure2012"),
    ("contrast", "LocalContrast2012"),
    ("highlights", "LocalHighlights2012"),
    ("shadows", "LocalShadows2012"),
    ("whites", "LocalWhites2012"),
    ("blacks", "LocalBlacks2012"),
    ("clarity", "LocalClarity2012"),
    ("dehaze", "LocalDehaze"),
    ("texture", "LocalTexture"),
    ("saturation", "LocalSaturation"),
    ("temperature", "LocalTemperature"),
    ("tint", "LocalTint"),
)

# Written on every correction with fixed values
STATIC_LOCAL_ATTRIBUTES: Tuple[Tuple[str, str], ...] = (
    ("LocalHue", "0"),
    ("LocalSharpness", "0"),
    ("LocalBrightness", "0"),
    ("LocalToningHue", "0"),
    ("LocalToningSaturation", "0"),
    ("LocalLuminanceNoise", "0"),
    ("LocalMoire", "0"),
    ("LocalDefringe", "0"),
    ("LocalGrain", "0"),
    ("LocalCurveRefineSaturation", "100"),
)

WHAT_LINEAR = "Mask/Gradient"
WHAT_RADIAL = "Mask/CircularGradient"
WHAT_IMAGE = "Mask/Image"
WHAT_RANGE = "Mask/RangeMask"

RANGE_TYPE_COLOR = 1
RANGE_TYPE_LUMINANCE = 2

TREATMENT_BLACK_AND_WHITE = "Black & White"
TREATMENT_COLOR = "Color"

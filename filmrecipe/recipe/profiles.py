"""
Camera profile selection.

Derives one of the four canonical Adobe profiles from the recipe: monochrome
treatment wins, then an explicit hint, then a heuristic over the mask list.
"""

import re
from enum import Enum
from typing import Any, Iterable, Optional

from .fields import coerce_number
from .mask_types import GEOMETRIC_KINDS, MaskCategory, canonical_key, category_of
from .models import ColorRecipe, LocalMask, Treatment


class CameraProfile(Enum):
    """Canonical profile names."""
    COLOR = "Color"
    MONOCHROME = "Monochrome"
    PORTRAIT = "Portrait"
    LANDSCAPE = "Landscape"

    @property
    def adobe_name(self) -> str:
        """Name as written to ``crs:ProfileName``."""
        return f"Adobe {self.value}"


# Checked in order; the first matching pattern wins
_HINT_PATTERNS = (
    (re.compile(r"mono|black\s*&?\s*(and\s*)?white|b\s*&\s*w|gr[ae]yscale", re.I), CameraProfile.MONOCHROME),
    (re.compile(r"portrait|people|skin", re.I), CameraProfile.PORTRAIT),
    (re.compile(r"landscape|sky|mountain|nature", re.I), CameraProfile.LANDSCAPE),
    (re.compile(r"color|colour|standard|default|auto", re.I), CameraProfile.COLOR),
)

_MONOCHROME_HINT = re.compile(r"monochrome", re.I)

# Generic people masks count as faces for profile selection
PEOPLE_KINDS = frozenset({"subject", "person"})


def is_people_mask(kind: Optional[str]) -> bool:
    """True for subject/person masks, including unknown kinds (they are written as subject)."""
    if kind in GEOMETRIC_KINDS:
        return False
    canonical = canonical_key(kind)
    return canonical is None or canonical in PEOPLE_KINDS


def is_monochrome(recipe: ColorRecipe) -> bool:
    """True when the recipe asks for a black & white rendition in any of the supported ways."""
    if recipe.monochrome or recipe.treatment is Treatment.BLACK_AND_WHITE:
        return True
    if recipe.camera_profile and _MONOCHROME_HINT.search(recipe.camera_profile):
        return True
    saturation = coerce_number(recipe.saturation)
    return saturation is not None and saturation <= -100


def normalize_profile(hint: Any) -> Optional[CameraProfile]:
    """
    Map a free-text profile hint to a canonical profile.

    Returns None only for a missing or blank hint; any other text that matches
    nothing is treated as Color.
    """
    if not isinstance(hint, str) or not hint.strip():
        return None
    for pattern, profile in _HINT_PATTERNS:
        if pattern.search(hint):
            return profile
    return CameraProfile.COLOR


def auto_select_profile(masks: Iterable[LocalMask]) -> CameraProfile:
    """Pick a profile from mask contents: faces and people suggest Portrait, scenery Landscape."""
    face_count = 0
    landscape_like = 0
    has_sky = False
    for mask in masks:
        category = category_of(mask.type)
        if category is MaskCategory.FACE or is_people_mask(mask.type):
            face_count += 1
        elif category in (MaskCategory.LANDSCAPE, MaskCategory.BACKGROUND):
            landscape_like += 1
        if mask.type == "sky":
            has_sky = True

    if face_count > 0:
        return CameraProfile.PORTRAIT
    if has_sky or landscape_like > 0:
        return CameraProfile.LANDSCAPE
    return CameraProfile.COLOR


def select_profile(recipe: ColorRecipe) -> CameraProfile:
    """Final profile for a recipe."""
    if is_monochrome(recipe):
        return CameraProfile.MONOCHROME
    hinted = normalize_profile(recipe.camera_profile)
    if hinted is not None:
        return hinted
    return auto_select_profile(recipe.masks)

"""
Mask type registry.

Maps semantic mask kinds (as named by the analysis step) to Lightroom's
AI mask classification codes (MaskSubType / MaskSubCategoryID) and to a
coarse category used by the camera-profile heuristics.

The table is static and read-only; all helpers are pure lookups.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple


class MaskCategory(Enum):
    """Coarse grouping of mask kinds"""
    FACE = "face"
    LANDSCAPE = "landscape"
    BACKGROUND = "background"
    NONE = "none"


@dataclass(frozen=True)
class MaskTypeInfo:
    """Registry entry for one AI mask kind"""
    key: str
    primary_code: int  # MaskSubType
    secondary_code: Optional[int]  # MaskSubCategoryID, omitted when None
    category: MaskCategory
    label: str


# Geometric / range kinds are encoded by shape, not by registry codes
GEOMETRIC_KINDS = frozenset({"linear", "radial", "range_color", "range_luminance"})

GENERIC_KEY = "subject"

_ENTRIES: Tuple[MaskTypeInfo, ...] = (
    # Face and body regions (MaskSubType 3)
    MaskTypeInfo("face_skin", 3, 2, MaskCategory.FACE, "Face Skin"),
    MaskTypeInfo("iris_pupil", 3, 3, MaskCategory.FACE, "Eye Pop"),
    MaskTypeInfo("body_skin", 3, 4, MaskCategory.FACE, "Body Skin"),
    MaskTypeInfo("hair", 3, 5, MaskCategory.FACE, "Hair"),
    MaskTypeInfo("lips", 3, 6, MaskCategory.FACE, "Lips"),
    MaskTypeInfo("eye_whites", 3, 8, MaskCategory.FACE, "Eye Whites"),
    MaskTypeInfo("eyebrows", 3, 9, MaskCategory.FACE, "Eyebrows"),
    MaskTypeInfo("clothing", 3, 11, MaskCategory.FACE, "Clothing"),
    MaskTypeInfo("teeth", 3, 12, MaskCategory.FACE, "Teeth"),
    MaskTypeInfo("facial_hair", 3, 13, MaskCategory.FACE, "Facial Hair"),
    # Scene regions (MaskSubType 0)
    MaskTypeInfo("background", 0, 22, MaskCategory.BACKGROUND, "Background"),
    MaskTypeInfo("architecture", 0, 50001, MaskCategory.LANDSCAPE, "Architecture"),
    MaskTypeInfo("mountains", 0, 50002, MaskCategory.LANDSCAPE, "Mountains"),
    MaskTypeInfo("artificial_ground", 0, 50003, MaskCategory.LANDSCAPE, "Ground"),
    MaskTypeInfo("natural_ground", 0, 50004, MaskCategory.LANDSCAPE, "Ground"),
    MaskTypeInfo("vegetation", 0, 50005, MaskCategory.LANDSCAPE, "Vegetation"),
    MaskTypeInfo("sky", 0, 50006, MaskCategory.LANDSCAPE, "Sky"),
    MaskTypeInfo("water", 0, 50007, MaskCategory.LANDSCAPE, "Water"),
    # Generic (MaskSubType 1)
    MaskTypeInfo("subject", 1, 0, MaskCategory.NONE, "Subject"),
    MaskTypeInfo("person", 1, 0, MaskCategory.NONE, "Person"),
)

MASK_TYPES: Mapping[str, MaskTypeInfo] = MappingProxyType({e.key: e for e in _ENTRIES})

# Loose names the analysis step tends to produce
_SYNONYMS: Mapping[str, str] = MappingProxyType({
    "face": "face_skin",
    "skin": "face_skin",
    "facial_skin": "face_skin",
    "face skin": "face_skin",
    "eye": "iris_pupil",
    "eyes": "iris_pupil",
    "iris": "iris_pupil",
    "pupil": "iris_pupil",
    "eye_white": "eye_whites",
    "sclera": "eye_whites",
    "tooth": "teeth",
    "beard": "facial_hair",
    "people": "subject",
    "landscape": "background",
    "mountain": "mountains",
    "building": "architecture",
    "buildings": "architecture",
    "ground": "natural_ground",
    "trees": "vegetation",
})

# First registration wins, so "subject" owns (1, None) over "person"
_BY_CODES: Dict[Tuple[int, Optional[int]], str] = {}
for _entry in _ENTRIES:
    _BY_CODES.setdefault((_entry.primary_code, _entry.secondary_code), _entry.key)


def canonical_key(key: Optional[str]) -> Optional[str]:
    """Resolve a mask kind (or a known synonym) to its registry key."""
    if not isinstance(key, str):
        return None
    normalized = key.strip().lower()
    if normalized in MASK_TYPES:
        return normalized
    return _SYNONYMS.get(normalized)


def lookup(key: Optional[str]) -> Optional[MaskTypeInfo]:
    """Return the registry entry for a mask kind, or None when not found."""
    canonical = canonical_key(key)
    if canonical is None:
        return None
    return MASK_TYPES[canonical]


def category_of(key: Optional[str]) -> MaskCategory:
    """Return the heuristic category of a mask kind (NONE for unknown kinds)."""
    info = lookup(key)
    return info.category if info else MaskCategory.NONE


def type_for_codes(primary_code: int, secondary_code: Optional[int]) -> Optional[str]:
    """Reverse lookup used when reading presets back."""
    return _BY_CODES.get((primary_code, secondary_code))


def keys_in(category: MaskCategory) -> List[str]:
    """All registry keys belonging to a category."""
    return [e.key for e in _ENTRIES if e.category is category]


def all_mask_types() -> List[MaskTypeInfo]:
    """All registry entries in declaration order."""
    return list(_ENTRIES)


GEOMETRIC_LABELS: Mapping[str, str] = MappingProxyType({
    "radial": "Radial Mask",
    "linear": "Linear Mask",
    "range_color": "Color Range",
    "range_luminance": "Luminance Range",
})


def mask_label(kind: Optional[str], index: int) -> str:
    """Human-readable default name for a new mask at list position ``index``."""
    if isinstance(kind, str) and kind in GEOMETRIC_LABELS:
        return GEOMETRIC_LABELS[kind]
    info = lookup(kind)
    if info is not None:
        return info.label
    return f"Mask {index + 1}"

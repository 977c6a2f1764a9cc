"""
Colour recipe model, mask handling and profile selection.
"""

from .models import ColorRecipe, LocalMask, MaskOverrideOp, MaskOperation, InclusionFlags, Treatment
from .masks import build_masks, apply_overrides
from .profiles import CameraProfile, select_profile

__all__ = [
    'ColorRecipe',
    'LocalMask',
    'MaskOverrideOp',
    'MaskOperation',
    'InclusionFlags',
    'Treatment',
    'build_masks',
    'apply_overrides',
    'CameraProfile',
    'select_profile',
]

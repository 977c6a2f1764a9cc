"""
FilmRecipe: colour recipe to Lightroom preset codec

Turns a semantic colour recipe (as produced by an AI analysis step) into a
Camera Raw / Lightroom XMP preset, and reads such presets back into the same
recipe model.
"""

__version__ = "0.1.0"

from .config import load_config
from .recipe.models import ColorRecipe, LocalMask, MaskOverrideOp, InclusionFlags
from .xmp.encoder import encode_preset
from .xmp.decoder import decode_preset

__all__ = [
    "load_config",
    "ColorRecipe",
    "LocalMask",
    "MaskOverrideOp",
    "InclusionFlags",
    "encode_preset",
    "decode_preset",
]

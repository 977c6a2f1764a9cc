"""
Camera Raw (XMP) preset encoding and decoding.
"""

from .encoder import PresetEncoder, EncoderSettings, encode_preset
from .decoder import DecodedPreset, decode_preset
from .errors import PresetError, PresetParseError, InvalidFormatError, PresetFileError
from .ids import IdGenerator

__all__ = [
    'PresetEncoder',
    'EncoderSettings',
    'encode_preset',
    'DecodedPreset',
    'decode_preset',
    'PresetError',
    'PresetParseError',
    'InvalidFormatError',
    'PresetFileError',
    'IdGenerator',
]

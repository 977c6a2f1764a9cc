"""
Preset and recipe file helpers.

Recipes are read from YAML or JSON (YAML is a superset, so one loader covers
both). Presets are written as UTF-8 ``.xmp`` files named after the preset.
"""

import re
from dataclasses import replace
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

import yaml

from ..recipe.masks import apply_overrides, parse_overrides
from ..recipe.models import ColorRecipe, InclusionFlags, MaskOverrideOp
from ..utils.logging import StructuredLogger
from ..xmp.decoder import DecodedPreset, decode_preset
from ..xmp.encoder import PresetEncoder
from ..xmp.errors import PresetFileError

logger = StructuredLogger(__name__)

PRESET_EXTENSION = ".xmp"

PathLike = Union[str, Path]


def preset_filename(name: Optional[str], extension: str = PRESET_EXTENSION) -> str:
    """
    Filesystem-safe file name for a preset

    Args:
        name: Preset name (anything outside letters, digits, space, dot,
            underscore and dash is dropped)
        extension: File extension including the dot

    Returns:
        File name such as ``Warm-Film.xmp``
    """
    cleaned = re.sub(r'[^\w .-]+', '', name or '').strip(' .')
    cleaned = re.sub(r'\s+', '-', cleaned)
    return f"{cleaned or 'preset'}{extension}"


def write_preset(path: PathLike, text: str) -> Path:
    """Write a preset document, creating parent directories as needed."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding='utf-8')
    except OSError as e:
        raise PresetFileError(path, f"cannot write preset: {e}") from e
    logger.info("Wrote preset", path=str(path), size=len(text))
    return path


def read_preset(path: PathLike, fill_defaults: bool = True) -> DecodedPreset:
    """
    Read and decode a preset file

    Raises:
        PresetFileError: If the file cannot be read
        InvalidFormatError: If the file is not a Camera Raw preset
    """
    path = Path(path)
    try:
        text = path.read_text(encoding='utf-8-sig')
    except (OSError, UnicodeDecodeError) as e:
        raise PresetFileError(path, f"cannot read preset: {e}") from e
    decoded = decode_preset(text, fill_defaults=fill_defaults)
    logger.debug("Read preset", path=str(path), name=decoded.preset_name)
    return decoded


def read_recipe(path: PathLike) -> Tuple[ColorRecipe, List[MaskOverrideOp]]:
    """
    Load a recipe file

    The file holds the analysis-service dictionary, optionally with a
    ``mask_overrides`` (or ``maskOverrides``) list of override operations.

    Returns:
        The validated recipe and its override operations (not yet applied)
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data: Any = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise PresetFileError(path, f"cannot read recipe: {e}") from e
    except yaml.YAMLError as e:
        raise PresetFileError(path, f"invalid recipe file: {e}") from e

    if not isinstance(data, dict):
        raise PresetFileError(path, "recipe file must contain a mapping")

    ops = parse_overrides(data.get('mask_overrides', data.get('maskOverrides')))
    return ColorRecipe.from_dict(data), ops


def export_recipe(recipe: ColorRecipe, destination: PathLike,
                  flags: Optional[InclusionFlags] = None,
                  encoder: Optional[PresetEncoder] = None,
                  ops: Optional[List[MaskOverrideOp]] = None) -> Path:
    """
    Encode a recipe and write it as a preset

    Args:
        recipe: Recipe to export
        destination: Target file, or a directory to place ``<name>.xmp`` in
        flags: Sections to include
        encoder: Encoder to use (a default one when None)
        ops: Mask override operations applied before encoding

    Returns:
        Path of the written preset
    """
    encoder = encoder or PresetEncoder()
    if ops:
        recipe = apply_overrides(recipe, ops)
    name = encoder.preset_name(recipe)
    text = encoder.encode(replace(recipe, preset_name=name), flags)
    logger.bind(preset=name).debug("Encoded preset", masks=len(recipe.masks), size=len(text))

    destination = Path(destination)
    if destination.is_dir() or not destination.suffix:
        destination = destination / preset_filename(name)
    return write_preset(destination, text)


def find_presets(directory: PathLike, recursive: bool = False) -> List[Path]:
    """All ``.xmp`` files in a directory, sorted by path."""
    directory = Path(directory)
    pattern = f"**/*{PRESET_EXTENSION}" if recursive else f"*{PRESET_EXTENSION}"
    return sorted(p for p in directory.glob(pattern) if p.is_file())

"""
Reading and writing preset and recipe files.
"""

from .preset_files import (
    preset_filename,
    write_preset,
    read_preset,
    read_recipe,
    export_recipe,
    find_presets,
)

__all__ = [
    'preset_filename',
    'write_preset',
    'read_preset',
    'read_recipe',
    'export_recipe',
    'find_presets',
]

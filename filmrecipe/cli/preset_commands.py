"""
Preset CLI commands for FilmRecipe

Provides command-line interface for encoding and decoding presets.
"""

import json
import logging
import time
from pathlib import Path

import click
import yaml
from tqdm import tqdm

from ..io.preset_files import export_recipe, find_presets, read_preset, read_recipe
from ..recipe.mask_types import MaskCategory, all_mask_types, keys_in
from ..recipe.masks import apply_overrides
from ..recipe.models import InclusionFlags
from ..recipe.profiles import is_monochrome, select_profile
from ..utils.logging import ConversionStats
from ..xmp.encoder import EncoderSettings, PresetEncoder
from ..xmp.errors import PresetError
from ..xmp.ids import IdGenerator

logger = logging.getLogger(__name__)

SECTION_NAMES = sorted(InclusionFlags().to_dict())


def _dump(data, fmt: str) -> str:
    if fmt == 'json':
        return json.dumps(data, indent=2)
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


def _load_recipe(ctx, recipe_file: Path):
    try:
        return read_recipe(recipe_file)
    except PresetError as e:
        click.echo(f"✗ {e}", err=True)
        ctx.exit(1)


@click.command()
@click.argument('recipe_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--output', '-o', type=click.Path(path_type=Path),
              help='Preset file or directory (prints to stdout when omitted)')
@click.option('--exclude', '-x', multiple=True, type=click.Choice(SECTION_NAMES),
              help='Section to leave out of the preset (repeatable)')
@click.option('--seed', type=int, help='Seed for reproducible sync ids and UUID')
@click.pass_context
def encode(ctx, recipe_file, output, exclude, seed):
    """Encode a recipe file as a Camera Raw preset"""
    config = ctx.obj['config']
    recipe, ops = _load_recipe(ctx, recipe_file)

    flags = InclusionFlags.from_config(config).excluding(*exclude)
    ids = IdGenerator.seeded(seed) if seed is not None else IdGenerator()
    encoder = PresetEncoder(EncoderSettings.from_config(config), ids)

    if output is None:
        click.echo(encoder.encode(apply_overrides(recipe, ops), flags))
        return

    try:
        path = export_recipe(recipe, output, flags, encoder, ops)
    except PresetError as e:
        click.echo(f"✗ {e}", err=True)
        ctx.exit(1)
    if not ctx.obj.get('quiet'):
        click.echo(f"✓ Preset written to {path}")


@click.command()
@click.argument('preset_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--format', '-f', 'fmt', type=click.Choice(['yaml', 'json']), default='yaml',
              help='Output format')
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Write the recipe to a file instead of stdout')
@click.option('--keep-missing', is_flag=True,
              help='Leave settings absent from the preset unset instead of using defaults')
@click.pass_context
def decode(ctx, preset_file, fmt, output, keep_missing):
    """Decode a Camera Raw preset into a recipe"""
    try:
        decoded = read_preset(preset_file, fill_defaults=not keep_missing)
    except PresetError as e:
        click.echo(f"✗ {e}", err=True)
        ctx.exit(1)

    text = _dump(decoded.to_dict(), fmt)
    if output is None:
        click.echo(text)
        return
    output.write_text(text, encoding='utf-8')
    if not ctx.obj.get('quiet'):
        click.echo(f"✓ Recipe '{decoded.preset_name}' written to {output}")


@click.command('batch-decode')
@click.argument('directory', type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option('--output-dir', '-o', type=click.Path(file_okay=False, path_type=Path),
              help='Directory for decoded recipes (one YAML file per preset)')
@click.option('--recursive', '-r', is_flag=True, help='Include subdirectories')
@click.pass_context
def batch_decode(ctx, directory, output_dir, recursive):
    """Decode every preset in a directory"""
    quiet = ctx.obj.get('quiet', False)
    presets = find_presets(directory, recursive=recursive)
    if not presets:
        click.echo(f"No presets found in {directory}")
        return

    stats = ConversionStats()
    stats.set_total(len(presets))
    if output_dir:
        output_dir.mkdir(parents=True, exist_ok=True)

    for path in tqdm(presets, desc="Decoding presets", unit="preset", disable=quiet):
        started = time.time()
        try:
            decoded = read_preset(path)
            if output_dir:
                target = output_dir / f"{path.stem}.yaml"
                target.write_text(_dump(decoded.to_dict(), 'yaml'), encoding='utf-8')
        except (PresetError, OSError) as e:
            logger.warning(f"Failed to decode {path}: {e}")
            stats.add_result(False, type(e).__name__, time.time() - started)
            stats.add_error(str(path), str(e))
            continue
        stats.add_result(True, processing_time=time.time() - started)

    if not quiet:
        stats.print_summary()
    if stats.failed_files:
        ctx.exit(1)


@click.command()
@click.argument('recipe_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def profile(ctx, recipe_file):
    """Show the camera profile a recipe would be exported with"""
    recipe, ops = _load_recipe(ctx, recipe_file)
    recipe = apply_overrides(recipe, ops)
    selected = select_profile(recipe)
    click.echo(selected.adobe_name)
    if ctx.obj.get('verbose'):
        click.echo(f"  Monochrome: {is_monochrome(recipe)}")
        click.echo(f"  Hint:       {recipe.camera_profile or '-'}")
        click.echo(f"  Masks:      {len(recipe.masks)}")


@click.command('mask-types')
@click.option('--category', type=click.Choice([c.value for c in MaskCategory]),
              help='Only list one category')
def mask_types(category):
    """List the AI mask types and their Lightroom codes"""
    click.echo(f"{'Key':<20} {'SubType':>7} {'SubCategory':>11}  {'Category':<10} Label")
    click.echo("-" * 70)
    wanted = set(keys_in(MaskCategory(category))) if category else None
    for info in all_mask_types():
        if wanted is not None and info.key not in wanted:
            continue
        secondary = '-' if info.secondary_code is None else str(info.secondary_code)
        click.echo(f"{info.key:<20} {info.primary_code:>7} {secondary:>11}  "
                   f"{info.category.value:<10} {info.label}")

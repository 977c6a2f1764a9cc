"""
FilmRecipe Command Line Interface

Converts colour recipes to Camera Raw presets and reads presets back.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from ..config import get_config_value, load_config
from ..utils.logging import setup_console_logging
from .preset_commands import encode, decode, batch_decode, profile, mask_types

logger = logging.getLogger(__name__)


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, config: Optional[Path] = None, verbose: bool = False, quiet: bool = False):
    """
    FilmRecipe - colour recipe to Lightroom preset converter

    Encodes analysis-service recipes (YAML or JSON) as Camera Raw XMP
    presets, and decodes existing presets back into recipes.
    """
    if ctx.obj is None:
        ctx.obj = {}

    ctx.obj['config'] = load_config(config)

    if verbose:
        level = 'DEBUG'
    elif quiet:
        level = 'ERROR'
    else:
        level = get_config_value(ctx.obj['config'], 'logging.level', 'INFO')
    setup_console_logging(
        level=level,
        color=bool(get_config_value(ctx.obj['config'], 'logging.color', True)),
        fmt=get_config_value(ctx.obj['config'], 'logging.format',
                             '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
    )

    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet


main.add_command(encode)
main.add_command(decode)
main.add_command(batch_decode)
main.add_command(profile)
main.add_command(mask_types)


if __name__ == '__main__':
    main()

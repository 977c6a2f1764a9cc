"""
Shared fixtures for the FilmRecipe test suite.
"""

from datetime import datetime

import pytest

from filmrecipe.recipe.fields import SCALAR_FIELDS, round_half_up
from filmrecipe.recipe.models import ColorRecipe, InclusionFlags, LocalMask
from filmrecipe.recipe.geometry import LinearGeometry, RadialGeometry, ReferencePointGeometry
from filmrecipe.xmp.encoder import PresetEncoder
from filmrecipe.xmp.ids import IdGenerator

FIXED_TIME = datetime(2024, 5, 17, 9, 30, 0)


def non_default_values():
    """An in-range, non-default value for every scalar field."""
    values = {}
    for scalar in SCALAR_FIELDS:
        value = scalar.minimum + (scalar.maximum - scalar.minimum) * 0.3
        value = round(value, scalar.decimals) if scalar.decimals else round_half_up(value)
        if value == scalar.default:
            value += 1
        values[scalar.name] = value
    return values


@pytest.fixture
def ids():
    """Seeded identifier source."""
    return IdGenerator.seeded(1234)


@pytest.fixture
def all_flags():
    return InclusionFlags()


@pytest.fixture
def encoder(ids):
    """Encoder with reproducible identifiers and a fixed clock."""
    return PresetEncoder(ids=ids, clock=lambda: FIXED_TIME)


@pytest.fixture
def sample_masks():
    return (
        LocalMask(
            name="Sky Darken",
            type="sky",
            geometry=ReferencePointGeometry(0.4, 0.2),
            adjustments={"exposure": -0.35, "dehaze": 0.2},
        ),
        LocalMask(
            name="Ground Fade",
            type="linear",
            geometry=LinearGeometry(0.5, 0.9, 0.5, 0.6),
            adjustments={"highlights": -0.25},
        ),
        LocalMask(
            name="Vignette Lift",
            type="radial",
            inverted=True,
            geometry=RadialGeometry(top=0.1, left=0.15, bottom=0.85, right=0.9,
                                    angle=12.5, midpoint=40, feather=60, roundness=-10,
                                    flipped=True),
            adjustments={"shadows": 0.4, "clarity": -0.1},
        ),
    )


@pytest.fixture
def full_recipe(sample_masks):
    """Recipe with every scalar set to an in-range, non-default value."""
    return ColorRecipe(
        preset_name="Golden Hour Film",
        description="Warm highlights & soft greens",
        camera_profile="Landscape",
        tone_curve=((0, 10), (128, 140), (255, 245)),
        tone_curve_red=((0, 0), (255, 250)),
        tone_curve_green=((0, 5), (255, 255)),
        tone_curve_blue=((0, 12), (200, 190), (255, 240)),
        point_colors=((10, -20, 5, 0, 30, 15, -5, 0), (-40, 25, 0, 10)),
        masks=sample_masks,
        **non_default_values(),
    )


@pytest.fixture
def recipe_dict():
    """Recipe as the analysis service sends it."""
    return {
        "preset_name": "Faded Portra",
        "description": "Soft pastel film look",
        "camera_profile": "portrait",
        "treatment": "color",
        "exposure": 0.25,
        "contrast": -12,
        "highlights": -30,
        "shadows": 25,
        "temperature": 5600,
        "tint": 8,
        "hue_red": 4,
        "sat_orange": -8,
        "lum_blue": 12,
        "color_grade_shadow_hue": 210,
        "color_grade_shadow_sat": 15,
        "grain_amount": 20,
        "tone_curve": [
            {"input": 0, "output": 18},
            {"input": 128, "output": 132},
            {"input": 255, "output": 240},
        ],
        "point_colors": [[12.5, -8, 3]],
        "masks": [
            {"name": "Face", "type": "face_skin", "referenceX": 0.45, "referenceY": 0.35,
             "adjustments": {"local_exposure": 0.15, "local_texture": -0.2}},
        ],
        "mask_overrides": [
            {"op": "update", "name": "Face", "adjustments": {"clarity": -0.1}},
            {"op": "add", "type": "background", "adjustments": {"saturation": -0.3}},
        ],
        "confidence": 0.82,
        "reasoning": "Warm skin tones with lifted blacks",
    }

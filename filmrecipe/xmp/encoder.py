"""
Camera Raw preset writer.

Renders a ColorRecipe into an XMP preset document that Lightroom and Camera
Raw import directly. Sections are written in a fixed order and each one is
gated by its inclusion flag.

Scalars follow a single presence rule: a value of 0 is always written (an
explicit reset), a missing or non-numeric value is left out (untouched).
White balance is the exception and falls back to a neutral 6500K / 0 tint.
"""

import logging
import math
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Optional
from xml.dom import minidom

from ..recipe.fields import ScalarField, Section, clamp, fields_in, round_half_up
from ..recipe.models import CURVE_NAMES, ColorRecipe, InclusionFlags, parse_curve, parse_point_colors
from ..recipe.profiles import is_monochrome, select_profile
from .ids import IdGenerator
from .mask_encoder import write_masks
from .namespaces import alt_element, crs_element, rdf, seq_element, set_crs, x
from .tags import CURVE_TAGS, TREATMENT_BLACK_AND_WHITE, TREATMENT_COLOR

logger = logging.getLogger(__name__)

XPACKET_HEADER = '<?xpacket begin="\ufeff" id="W5M0MpCehiHzreSzNTczkc9d"?>\n'
XPACKET_FOOTER = '\n<?xpacket end="w"?>'


@dataclass(frozen=True)
class EncoderSettings:
    """Document-level constants written into every preset."""
    group: str = "Film Recipe Wizard"
    cluster: str = "film-recipe-wizard"
    version: str = "17.5"
    process_version: str = "15.4"
    name_prefix: str = "Preset"

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]]) -> 'EncoderSettings':
        preset = (config or {}).get("preset") or {}
        defaults = cls()
        return cls(
            group=str(preset.get("group", defaults.group)),
            cluster=str(preset.get("cluster", defaults.cluster)),
            version=str(preset.get("version", defaults.version)),
            process_version=str(preset.get("process_version", defaults.process_version)),
            name_prefix=str(preset.get("name_prefix", defaults.name_prefix)),
        )


def is_emittable(value: Any) -> bool:
    """
    Presence rule for scalar output.

    Zero is always written; None, NaN and False are never written; anything
    else is written when truthy.
    """
    if value is None or value is False:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    if value == 0:
        return True
    return bool(value)


def format_scalar(scalar: ScalarField, value: float) -> str:
    if scalar.decimals:
        return f"{value:.{scalar.decimals}f}"
    return str(round_half_up(value))


def scalar_text(scalar: ScalarField, raw: Any) -> Optional[str]:
    """Clamped, formatted value of a field, or None when it must be left out."""
    value = clamp(raw, scalar.minimum, scalar.maximum)
    if not is_emittable(value):
        return None
    return format_scalar(scalar, value)


def emit_element(parent: ET.Element, scalar: ScalarField, raw: Any) -> bool:
    """Write ``<crs:Tag>value</crs:Tag>`` when the value passes the presence rule."""
    text = scalar_text(scalar, raw)
    if text is None:
        return False
    crs_element(parent, scalar.tag, text)
    return True


def emit_attribute(element: ET.Element, scalar: ScalarField, raw: Any) -> bool:
    """Write ``crs:Tag="value"`` when the value passes the presence rule."""
    text = scalar_text(scalar, raw)
    if text is None:
        return False
    set_crs(element, scalar.tag, text)
    return True


def prettify(root: ET.Element) -> str:
    """Pretty-print the tree inside an XMP packet wrapper."""
    rough_string = ET.tostring(root, encoding='unicode')
    reparsed = minidom.parseString(rough_string)
    pretty_xml = reparsed.toprettyxml(indent=' ')
    lines = [
        line for line in pretty_xml.split('\n')
        if line.strip() and not line.startswith('<?xml')
    ]
    return XPACKET_HEADER + '\n'.join(lines) + XPACKET_FOOTER


class PresetEncoder:
    """Writes ColorRecipes as Camera Raw presets."""

    def __init__(self, settings: Optional[EncoderSettings] = None,
                 ids: Optional[IdGenerator] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.settings = settings or EncoderSettings()
        self.ids = ids or IdGenerator()
        self.clock = clock or datetime.now

    def preset_name(self, recipe: ColorRecipe) -> str:
        """The recipe's name, or a timestamped placeholder when it has none."""
        if recipe.preset_name and recipe.preset_name.strip():
            return recipe.preset_name.strip()
        return f"{self.settings.name_prefix}-{self.clock():%Y-%m-%dT%H-%M-%S}"

    def encode(self, recipe: ColorRecipe, flags: Optional[InclusionFlags] = None) -> str:
        """
        Render a recipe as a preset document.

        Args:
            recipe: Recipe to write
            flags: Sections to include; all sections when None

        Returns:
            The XMP document text
        """
        root = self.build_tree(recipe, flags or InclusionFlags())
        return prettify(root)

    def build_tree(self, recipe: ColorRecipe, flags: InclusionFlags) -> ET.Element:
        preset_uuid = self.ids.preset_uuid()
        monochrome = is_monochrome(recipe)
        profile = select_profile(recipe)
        name = self.preset_name(recipe)
        logger.debug(f"Encoding preset '{name}' with profile {profile.value}")

        root = ET.Element(x('xmpmeta'))
        rdf_root = ET.SubElement(root, rdf('RDF'))
        description = ET.SubElement(rdf_root, rdf('Description'))
        description.set(rdf('about'), '')
        self._write_header(description, profile.adobe_name, preset_uuid)

        alt_element(description, "Name", name)
        alt_element(description, "Group", self.settings.group)
        if recipe.description:
            alt_element(description, "Description", recipe.description)

        if flags.basic:
            self._write_basic(description, recipe, monochrome)
            self._write_white_balance(description, recipe)
        self._write_treatment(description, monochrome)
        if flags.curves:
            self._write_section(description, recipe, Section.PARAMETRIC_CURVE)
        if flags.hsl:
            if monochrome:
                self._write_section(description, recipe, Section.MIXER)
            else:
                self._write_hsl(description, recipe)
        if flags.color_grading:
            self._write_section(description, recipe, Section.COLOR_GRADING)
        if flags.grain:
            self._write_section(description, recipe, Section.GRAIN)
        if flags.vignette:
            self._write_section(description, recipe, Section.VIGNETTE)
        if flags.point_color:
            self._write_point_colors(description, recipe)
        if flags.curves:
            self._write_tone_curves(description, recipe)
        if flags.masks:
            write_masks(description, recipe.masks, self.ids)
        return root

    def _write_header(self, description: ET.Element, profile_name: str, preset_uuid: str):
        s = self.settings
        for key, value in (
            ("Version", s.version),
            ("ProcessVersion", s.process_version),
            ("ProfileName", profile_name),
            ("Look", ""),
            ("HasSettings", "True"),
            ("PresetType", "Normal"),
            ("Cluster", s.cluster),
            ("ClusterGroup", s.cluster),
            ("PresetSubtype", "Normal"),
            ("SupportsAmount", "True"),
            ("SupportsAmount2", "True"),
            ("SupportsColor", "True"),
            ("SupportsMonochrome", "True"),
            ("UUID", preset_uuid),
        ):
            set_crs(description, key, value)

    def _write_section(self, description: ET.Element, recipe: ColorRecipe, section: Section):
        for scalar in fields_in(section):
            emit_element(description, scalar, getattr(recipe, scalar.name))

    def _write_basic(self, description: ET.Element, recipe: ColorRecipe, monochrome: bool):
        for scalar in fields_in(Section.BASIC):
            value = getattr(recipe, scalar.name)
            if scalar.name == "saturation" and monochrome:
                value = 0
            emit_element(description, scalar, value)

    def _write_white_balance(self, description: ET.Element, recipe: ColorRecipe):
        for scalar in fields_in(Section.WHITE_BALANCE):
            value = clamp(getattr(recipe, scalar.name), scalar.minimum, scalar.maximum)
            emit_element(description, scalar, scalar.default if value is None else value)

    def _write_treatment(self, description: ET.Element, monochrome: bool):
        if monochrome:
            crs_element(description, "Treatment", TREATMENT_BLACK_AND_WHITE)
            crs_element(description, "ConvertToGrayscale", "True")
        else:
            crs_element(description, "Treatment", TREATMENT_COLOR)

    def _write_hsl(self, description: ET.Element, recipe: ColorRecipe):
        for scalar in fields_in(Section.HSL):
            emit_attribute(description, scalar, getattr(recipe, scalar.name))

    def _write_point_colors(self, description: ET.Element, recipe: ColorRecipe):
        for index, sample in enumerate(parse_point_colors(recipe.point_colors), start=1):
            values = [round_half_up(clamp(v, -100, 100)) for v in sample]
            crs_element(description, f"PointColor{index}", ",".join(str(v) for v in values))

    def _write_tone_curves(self, description: ET.Element, recipe: ColorRecipe):
        for name in CURVE_NAMES:
            points = parse_curve(getattr(recipe, name))
            if not points:
                continue
            seq = seq_element(description, CURVE_TAGS[name])
            for x_in, y_out in points:
                ET.SubElement(seq, rdf('li')).text = f"{x_in}, {y_out}"


def encode_preset(recipe: ColorRecipe, flags: Optional[InclusionFlags] = None,
                  ids: Optional[IdGenerator] = None,
                  settings: Optional[EncoderSettings] = None) -> str:
    """Encode a recipe with a one-off encoder."""
    return PresetEncoder(settings=settings, ids=ids).encode(recipe, flags)

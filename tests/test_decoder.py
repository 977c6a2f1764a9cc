"""
Tests for the Camera Raw preset decoder.
"""

import logging

import pytest

from filmrecipe.recipe.fields import FIELDS_BY_NAME, SCALAR_FIELDS
from filmrecipe.recipe.geometry import LinearGeometry, RadialGeometry, ReferencePointGeometry
from filmrecipe.recipe.models import ColorRecipe, LocalMask, Treatment
from filmrecipe.xmp.decoder import DEFAULT_PRESET_NAME, decode_masks, decode_preset
from filmrecipe.xmp.errors import InvalidFormatError, PresetError, PresetParseError

# Written the way Lightroom saves presets: settings as attributes
ATTRIBUTE_PRESET = """<x:xmpmeta xmlns:x="adobe:ns:meta/" x:xmptk="Adobe XMP Core 7.0">
 <rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">
  <rdf:Description rdf:about=""
    xmlns:crs="http://ns.adobe.com/camera-raw-settings/1.0/"
   crs:PresetType="Normal"
   crs:Version="16.0"
   crs:ProcessVersion="15.4"
   crs:Exposure2012="+0.50"
   crs:Contrast2012="+12"
   crs:Temperature="5200"
   crs:Vibrance="250"
   crs:HueAdjustmentRed="-6"
   crs:ColorGradeMidtoneHue="40"
   crs:Treatment="Color"
   crs:ProfileName="Adobe Portrait">
   <crs:Name>
    <rdf:Alt>
     <rdf:li xml:lang="x-default">Attribute Style &amp; Co</rdf:li>
    </rdf:Alt>
   </crs:Name>
   <crs:ToneCurvePV2012>
    <rdf:Seq>
     <rdf:li>0, 0</rdf:li>
     <rdf:li>128, x</rdf:li>
     <rdf:li>255, 255</rdf:li>
    </rdf:Seq>
   </crs:ToneCurvePV2012>
   <crs:ToneCurvePV2012Red>
    <rdf:Seq>
     <rdf:li>bad</rdf:li>
    </rdf:Seq>
   </crs:ToneCurvePV2012Red>
  </rdf:Description>
 </rdf:RDF>
</x:xmpmeta>
"""

MASK_PRESET = """<x:xmpmeta xmlns:x="adobe:ns:meta/">
 <rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">
  <rdf:Description rdf:about="" xmlns:crs="http://ns.adobe.com/camera-raw-settings/1.0/">
   <crs:Exposure2012>-0.30</crs:Exposure2012>
   <crs:MaskGroupBasedCorrections>
    <rdf:Seq>
     <rdf:li>
      <rdf:Description crs:What="Correction" crs:CorrectionName="Skin" crs:LocalExposure2012="0.150">
       <crs:CorrectionMasks>
        <rdf:Seq>
         <rdf:li crs:What="Mask/Image" crs:MaskSubType="3" crs:MaskSubCategoryID="2" crs:ReferencePoint="0.450 0.350"/>
        </rdf:Seq>
       </crs:CorrectionMasks>
      </rdf:Description>
     </rdf:li>
     <rdf:li>
      <rdf:Description crs:What="Correction" crs:CorrectionAmount="1"/>
     </rdf:li>
     <rdf:li>
      <rdf:Description crs:What="Correction" crs:CorrectionName="Upper">
       <crs:CorrectionMasks>
        <rdf:Seq>
         <rdf:li crs:What="Mask/Image" crs:MaskSubType="2" crs:MaskInverted="true"/>
        </rdf:Seq>
       </crs:CorrectionMasks>
      </rdf:Description>
     </rdf:li>
     <rdf:li>
      <rdf:Description crs:What="Correction" crs:LocalExposure2012="-0.200">
       <crs:CorrectionMasks>
        <rdf:Seq>
         <rdf:li crs:What="Mask/Image" crs:MaskSubType="4" crs:MaskSubCategoryID="777"/>
        </rdf:Seq>
       </crs:CorrectionMasks>
      </rdf:Description>
     </rdf:li>
    </rdf:Seq>
   </crs:MaskGroupBasedCorrections>
  </rdf:Description>
 </rdf:RDF>
</x:xmpmeta>
"""


class TestFormatSniff:
    """Structural markers."""

    @pytest.mark.parametrize("text", [
        "",
        "hello world",
        "<rdf:RDF></rdf:RDF>",
        "<crs:Exposure2012>1</crs:Exposure2012>",
    ])
    def test_missing_markers(self, text):
        with pytest.raises(InvalidFormatError):
            decode_preset(text)

    def test_non_text_input(self):
        with pytest.raises(InvalidFormatError):
            decode_preset(None)

    def test_error_hierarchy(self):
        with pytest.raises(PresetParseError) as exc_info:
            decode_preset("nope")
        assert isinstance(exc_info.value, PresetError)
        assert exc_info.value.kind == "InvalidFormat"

    def test_minimal_document_decodes_to_defaults(self):
        """A document with only the markers decodes to best-effort defaults."""
        decoded = decode_preset('<rdf:RDF crs:Unused="1"></rdf:RDF>')
        assert decoded.preset_name == DEFAULT_PRESET_NAME
        for scalar in SCALAR_FIELDS:
            assert getattr(decoded.recipe, scalar.name) == scalar.default, scalar.name
        assert decoded.recipe.masks == ()
        assert decoded.recipe.treatment is Treatment.COLOR


class TestAttributeForm:
    """Presets saved by Lightroom itself."""

    @pytest.fixture
    def decoded(self):
        return decode_preset(ATTRIBUTE_PRESET)

    def test_scalars(self, decoded):
        assert decoded.recipe.exposure == 0.5
        assert decoded.recipe.contrast == 12
        assert decoded.recipe.temperature == 5200
        assert decoded.recipe.hue_red == -6
        assert decoded.recipe.color_grade_midtone_hue == 40

    def test_out_of_range_clamped(self, decoded):
        assert decoded.recipe.vibrance == 100

    def test_missing_scalars_default(self, decoded):
        assert decoded.recipe.highlights == 0
        assert decoded.recipe.color_grade_blending == 50
        assert decoded.recipe.grain_size == 25

    def test_name_unescaped(self, decoded):
        assert decoded.preset_name == "Attribute Style & Co"
        assert decoded.recipe.preset_name == "Attribute Style & Co"
        assert decoded.description is None

    def test_curve_drops_malformed_pair(self, decoded):
        """(128, "x") is discarded, leaving a 2-point curve."""
        assert decoded.recipe.tone_curve == ((0, 0), (255, 255))

    def test_curve_without_valid_pairs_is_absent(self, decoded):
        assert decoded.recipe.tone_curve_red is None
        assert decoded.recipe.tone_curve_blue is None

    def test_profile_and_metadata(self, decoded):
        assert decoded.recipe.camera_profile == "Adobe Portrait"
        assert decoded.metadata["preset_type"] == "Normal"
        assert decoded.metadata["version"] == "16.0"
        assert decoded.metadata["process_version"] == "15.4"
        assert decoded.metadata["has_hsl"] is True
        assert decoded.metadata["has_color_grading"] is True
        assert decoded.metadata["has_curves"] is True
        assert decoded.metadata["has_masks"] is False

    def test_keep_missing(self):
        decoded = decode_preset(ATTRIBUTE_PRESET, fill_defaults=False)
        assert decoded.recipe.highlights is None
        assert decoded.recipe.contrast == 12

    def test_to_dict(self, decoded):
        data = decoded.to_dict()
        assert data["preset_name"] == "Attribute Style & Co"
        assert data["recipe"]["tone_curve"] == [{"input": 0, "output": 0}, {"input": 255, "output": 255}]
        assert data["metadata"]["version"] == "16.0"


class TestMonochrome:
    """Treatment detection."""

    def test_black_and_white_treatment(self):
        text = '<rdf:RDF><crs:Treatment>Black &amp; White</crs:Treatment></rdf:RDF>'
        recipe = decode_preset(text).recipe
        assert recipe.monochrome is True
        assert recipe.treatment is Treatment.BLACK_AND_WHITE

    def test_convert_to_grayscale(self):
        text = '<rdf:RDF crs:ConvertToGrayscale="True"></rdf:RDF>'
        assert decode_preset(text).recipe.treatment is Treatment.BLACK_AND_WHITE

    def test_color(self):
        text = '<rdf:RDF><crs:Treatment>Color</crs:Treatment></rdf:RDF>'
        assert decode_preset(text).recipe.monochrome is False


class TestMasks:
    """Mask group extraction."""

    @pytest.fixture
    def masks(self):
        return decode_preset(MASK_PRESET).recipe.masks

    def test_registry_codes(self, masks):
        assert masks[0].name == "Skin"
        assert masks[0].type == "face_skin"
        assert masks[0].geometry == ReferencePointGeometry(0.45, 0.35)
        assert masks[0].adjustments == {"exposure": 0.15}

    def test_empty_correction_is_dropped(self, masks):
        """
        Current behaviour: a correction with no recognised field is dropped.

        The encoder always writes every mask, so this is an asymmetry between
        the two directions that callers should be aware of.
        """
        assert len(masks) == 3
        assert [m.name for m in masks] == ["Skin", "Upper", "Mask 4"]

    def test_subtype_table_fallback(self, masks):
        assert masks[1].type == "sky"
        assert masks[1].inverted is True
        assert masks[2].type == "mountains"

    def test_unnamed_correction_gets_position_name(self, masks):
        assert masks[2].name == "Mask 4"
        assert masks[2].adjustments == {"exposure": -0.2}

    def test_mask_scalars_do_not_leak(self):
        """Local adjustments inside the mask group never read as global values."""
        recipe = decode_preset(MASK_PRESET).recipe
        assert recipe.exposure == -0.3

    def test_no_group(self):
        assert decode_masks('<rdf:RDF crs:Exposure2012="1"/>') == ()

    def test_encoded_geometry(self, encoder):
        recipe = ColorRecipe(preset_name="Shapes", masks=(
            LocalMask(name="Lin", type="linear", geometry=LinearGeometry(0.1, 0.2, 0.3, 0.4)),
            LocalMask(name="Rad", type="radial", inverted=True,
                      geometry=RadialGeometry(top=0.3, angle=-45, flipped=True)),
            LocalMask(name="Lum", type="range_luminance"),
            LocalMask(name="Col", type="range_color"),
        ))
        masks = decode_preset(encoder.encode(recipe)).recipe.masks
        assert [m.type for m in masks] == ["linear", "radial", "range_luminance", "range_color"]
        assert masks[0].geometry == LinearGeometry(0.1, 0.2, 0.3, 0.4)
        assert masks[1].geometry == RadialGeometry(top=0.3, angle=-45, flipped=True)
        assert masks[1].inverted is True
        assert masks[2].geometry.lum_range == (0.0, 1.0, 1.0, 1.0)
        assert masks[3].geometry.color_amount == 0.5

    def test_brush_mask_reads_as_subject(self, caplog):
        """Shapes with no geometry mapping keep their correction as a generic mask and say so."""
        text = MASK_PRESET.replace(
            'crs:What="Mask/Image" crs:MaskSubType="2" crs:MaskInverted="true"',
            'crs:What="Mask/Brush" crs:SizeX="30" crs:Flow="50"',
        )
        with caplog.at_level(logging.DEBUG, logger="filmrecipe.xmp.decoder"):
            masks = decode_preset(text).recipe.masks
        assert masks[1].name == "Upper"
        assert masks[1].type == "subject"
        assert any("'Brush'" in record.getMessage() for record in caplog.records)

    def test_image_mask_logs_nothing_about_shape(self, caplog):
        """Supported shapes decode without the fallback message."""
        with caplog.at_level(logging.DEBUG, logger="filmrecipe.xmp.decoder"):
            decode_preset(MASK_PRESET)
        assert not any("unsupported mask shape" in record.getMessage() for record in caplog.records)


class TestMetadataDefaults:
    """Field table lookups used by the decoder."""

    def test_blending_default(self):
        assert FIELDS_BY_NAME["color_grade_blending"].default == 50

"""
Tests for the filmrecipe command line interface.
"""

import json
import logging

import pytest
import yaml
from click.testing import CliRunner

from filmrecipe.cli import main
from filmrecipe.utils.logging import HANDLER_NAME
from filmrecipe.xmp.decoder import decode_preset


@pytest.fixture(autouse=True)
def detach_console_handler():
    """The CLI installs a root handler bound to the runner's stream."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def recipe_file(tmp_path, recipe_dict):
    path = tmp_path / "recipe.yaml"
    path.write_text(yaml.safe_dump(recipe_dict))
    return path


@pytest.fixture
def preset_file(tmp_path, encoder, full_recipe):
    path = tmp_path / "presets" / "golden.xmp"
    path.parent.mkdir()
    path.write_text(encoder.encode(full_recipe), encoding="utf-8")
    return path


class TestEncodeCommand:
    """filmrecipe encode"""

    def test_encode_to_file(self, runner, recipe_file, tmp_path):
        output = tmp_path / "out.xmp"
        result = runner.invoke(main, ["encode", str(recipe_file), "-o", str(output), "--seed", "3"])
        assert result.exit_code == 0, result.output
        assert "Preset written to" in result.output

        decoded = decode_preset(output.read_text(encoding="utf-8"))
        assert decoded.preset_name == "Faded Portra"
        assert decoded.recipe.camera_profile == "Adobe Portrait"
        assert [m.name for m in decoded.recipe.masks] == ["Face", "Background"]
        assert decoded.recipe.masks[0].adjustments["clarity"] == -0.1

    def test_encode_to_directory(self, runner, recipe_file, tmp_path):
        out_dir = tmp_path / "exports"
        out_dir.mkdir()
        result = runner.invoke(main, ["-q", "encode", str(recipe_file), "-o", str(out_dir)])
        assert result.exit_code == 0, result.output
        assert (out_dir / "Faded-Portra.xmp").exists()
        assert result.output == ""

    def test_encode_to_stdout_is_reproducible(self, runner, recipe_file):
        first = runner.invoke(main, ["-q", "encode", str(recipe_file), "--seed", "11"])
        second = runner.invoke(main, ["-q", "encode", str(recipe_file), "--seed", "11"])
        assert first.exit_code == 0, first.output
        assert first.output == second.output
        assert first.output.startswith('<?xpacket begin=')

    def test_exclude_sections(self, runner, recipe_file, tmp_path):
        output = tmp_path / "out.xmp"
        result = runner.invoke(main, ["encode", str(recipe_file), "-o", str(output),
                                      "-x", "masks", "-x", "curves"])
        assert result.exit_code == 0, result.output
        text = output.read_text(encoding="utf-8")
        assert "MaskGroupBasedCorrections" not in text
        assert "ToneCurvePV2012" not in text
        assert "<crs:Contrast2012>-12</crs:Contrast2012>" in text

    def test_unknown_section_rejected(self, runner, recipe_file):
        result = runner.invoke(main, ["encode", str(recipe_file), "-x", "sharpening"])
        assert result.exit_code == 2

    def test_config_excludes_sections(self, runner, recipe_file, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("export:\n  include:\n    hsl: false\npreset:\n  group: Client Looks\n")
        output = tmp_path / "out.xmp"
        result = runner.invoke(main, ["-c", str(config), "encode", str(recipe_file), "-o", str(output)])
        assert result.exit_code == 0, result.output
        text = output.read_text(encoding="utf-8")
        assert "HueAdjustmentRed" not in text
        assert "Client Looks" in text

    def test_invalid_recipe(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- not\n- a mapping\n")
        result = runner.invoke(main, ["encode", str(path)])
        assert result.exit_code == 1


class TestDecodeCommand:
    """filmrecipe decode"""

    def test_decode_yaml_to_file(self, runner, preset_file, tmp_path):
        output = tmp_path / "recipe.yaml"
        result = runner.invoke(main, ["decode", str(preset_file), "-o", str(output)])
        assert result.exit_code == 0, result.output
        data = yaml.safe_load(output.read_text(encoding="utf-8"))
        assert data["preset_name"] == "Golden Hour Film"
        assert data["recipe"]["treatment"] == "color"
        assert len(data["recipe"]["masks"]) == 3

    def test_decode_json_to_stdout(self, runner, preset_file):
        result = runner.invoke(main, ["-q", "decode", str(preset_file), "-f", "json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["metadata"]["has_masks"] is True

    def test_keep_missing(self, runner, tmp_path):
        path = tmp_path / "sparse.xmp"
        path.write_text('<rdf:RDF crs:Contrast2012="7"></rdf:RDF>')
        output = tmp_path / "sparse.json"
        result = runner.invoke(main, ["decode", str(path), "--keep-missing", "-f", "json",
                                      "-o", str(output)])
        assert result.exit_code == 0, result.output
        recipe = json.loads(output.read_text())["recipe"]
        assert recipe["contrast"] == 7
        assert "highlights" not in recipe

    def test_not_a_preset(self, runner, tmp_path):
        path = tmp_path / "notes.xmp"
        path.write_text("hello")
        result = runner.invoke(main, ["decode", str(path)])
        assert result.exit_code == 1


class TestBatchDecodeCommand:
    """filmrecipe batch-decode"""

    def test_batch(self, runner, preset_file, tmp_path):
        (preset_file.parent / "second.xmp").write_text(preset_file.read_text(encoding="utf-8"),
                                                       encoding="utf-8")
        out_dir = tmp_path / "recipes"
        result = runner.invoke(main, ["batch-decode", str(preset_file.parent), "-o", str(out_dir)])
        assert result.exit_code == 0, result.output
        assert "CONVERSION SUMMARY" in result.output
        assert sorted(p.name for p in out_dir.iterdir()) == ["golden.yaml", "second.yaml"]

    def test_batch_with_failures(self, runner, preset_file):
        (preset_file.parent / "broken.xmp").write_text("not xmp")
        result = runner.invoke(main, ["batch-decode", str(preset_file.parent)])
        assert result.exit_code == 1
        assert "InvalidFormatError: 1" in result.output

    def test_empty_directory(self, runner, tmp_path):
        result = runner.invoke(main, ["batch-decode", str(tmp_path)])
        assert result.exit_code == 0
        assert "No presets found" in result.output


class TestInfoCommands:
    """filmrecipe profile / mask-types"""

    def test_profile(self, runner, recipe_file):
        result = runner.invoke(main, ["-q", "profile", str(recipe_file)])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Adobe Portrait"

    def test_profile_verbose(self, runner, tmp_path):
        path = tmp_path / "sky.yaml"
        path.write_text("masks:\n  - type: sky\n")
        result = runner.invoke(main, ["-v", "profile", str(path)])
        assert result.exit_code == 0, result.output
        assert "Adobe Landscape" in result.output
        assert "Masks:      1" in result.output

    def test_mask_types(self, runner):
        result = runner.invoke(main, ["mask-types"])
        assert result.exit_code == 0
        assert "face_skin" in result.output
        assert "50006" in result.output

    def test_mask_types_category(self, runner):
        result = runner.invoke(main, ["mask-types", "--category", "landscape"])
        assert result.exit_code == 0
        assert "sky" in result.output
        assert "face_skin" not in result.output

    def test_mask_types_face_category(self, runner):
        """The face listing holds every face part and nothing from the landscape group."""
        result = runner.invoke(main, ["mask-types", "--category", "face"])
        assert result.exit_code == 0
        assert "iris_pupil" in result.output
        assert "facial_hair" in result.output
        assert "50006" not in result.output

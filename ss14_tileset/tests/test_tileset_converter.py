#!/usr/bin/env python3
"""
Tests for tileset_converter module
Runs whole conversions on synthetic SS13 tilesets
"""

import json

import numpy as np
import pytest
from PIL import Image

from ss14_tileset.exceptions import DimensionValidationError, ImageLoadError
from ss14_tileset.tileset_converter import (
    OUTPUT_GROUPS,
    TilesetConverter,
    convert_tileset,
    find_base_names,
    load_source,
    main,
    match_base_name,
    output_geometry,
    validate_dimensions,
)
from ss14_tileset.tests.conftest import GREEN, RED, make_pattern, write_tileset

EXPECTED_IMAGES = {"full.png"} | {f"wall{n}.png" for n in range(8)}


def cell(array, dest_x, dest_y, quad_size=16, offset=16):
    x = dest_x * quad_size + offset
    y = dest_y * quad_size
    return array[y:y + quad_size, x:x + quad_size]


@pytest.mark.unit
class TestHelpers:
    """Test naming and geometry helpers"""

    @pytest.mark.parametrize("filename,expected", [
        ("wall0.png", "wall"),
        ("reinforced_wall0.png", "reinforced_wall"),
        ("wall10.png", None),
        ("wall7.png", None),
        ("a1b0.png", None),
        ("0.png", None),
        ("wall0.PNG", None),
    ])
    def test_match_base_name(self, filename, expected):
        assert match_base_name(filename) == expected

    def test_output_geometry(self):
        assert output_geometry(32, 1) == (16, 32, 64)
        assert output_geometry(64, 2) == (32, 128, 256)

    @pytest.mark.parametrize("size", [(32, 32), (8, 16), (64, 4)])
    def test_valid_dimensions(self, size):
        validate_dimensions(*size)

    @pytest.mark.parametrize("size", [(30, 32), (32, 30), (2, 2), (0, 0)])
    def test_invalid_dimensions(self, size):
        with pytest.raises(DimensionValidationError):
            validate_dimensions(*size)

    def test_find_base_names(self, input_dir):
        write_tileset(input_dir, "wall")
        write_tileset(input_dir, "floor")
        (input_dir / "nested0.png").mkdir()
        assert find_base_names(input_dir) == ["floor", "wall"]

    def test_mapping_tables_are_complete(self):
        states = sorted(n for group in OUTPUT_GROUPS for n in group.outputs)
        assert states == list(range(8))
        for group in OUTPUT_GROUPS:
            assert len(group.mapping) == 4
            assert group.source in ("0", "7", "15")


@pytest.mark.unit
class TestLoadSource:
    """Test source image loading"""

    def test_converts_to_rgba(self, tmp_path):
        path = tmp_path / "wall0.png"
        Image.new("P", (8, 8)).save(path)
        with load_source(path) as image:
            assert image.mode == "RGBA"

    def test_missing_file(self, tmp_path):
        path = tmp_path / "wall0.png"
        with pytest.raises(ImageLoadError, match="wall0.png"):
            load_source(path)

    def test_not_an_image(self, tmp_path):
        path = tmp_path / "wall0.png"
        path.write_bytes(b"definitely not a png")
        with pytest.raises(ImageLoadError, match="Failed to load image"):
            load_source(path)


@pytest.mark.integration
class TestConvertTileset:
    """Test a full image conversion"""

    def test_writes_all_states(self, solid_tileset, input_dir, output_dir):
        written = convert_tileset("wall", input_dir, output_dir)

        assert written[0] == "full.png"
        assert set(written) == EXPECTED_IMAGES
        assert {p.name for p in output_dir.iterdir()} == EXPECTED_IMAGES

    def test_full_is_verbatim_copy(self, solid_tileset, input_dir, output_dir):
        convert_tileset("wall", input_dir, output_dir)
        assert (output_dir / "full.png").read_bytes() == solid_tileset["0"].read_bytes()

    def test_state_dimensions(self, solid_tileset, input_dir, output_dir):
        convert_tileset("wall", input_dir, output_dir)
        for n in range(8):
            with Image.open(output_dir / f"wall{n}.png") as image:
                assert image.size == (64, 64)
                assert image.mode == "RGBA"

    def test_scaled_state_dimensions(self, solid_tileset, input_dir, output_dir):
        convert_tileset("wall", input_dir, output_dir, scale_factor=2)
        with Image.open(output_dir / "wall3.png") as image:
            assert image.size == (128, 128)

    def test_states_use_their_source(self, solid_tileset, input_dir, output_dir):
        convert_tileset("wall", input_dir, output_dir)

        with Image.open(output_dir / "wall0.png") as image:
            array = np.array(image)
        for dest in [(1, 0), (0, 1), (0, 2), (1, 3)]:
            assert (cell(array, *dest) == RED).all()
        for dest in [(0, 0), (1, 1), (1, 2), (0, 3)]:
            assert cell(array, *dest)[..., 3].max() == 0
        # Padding columns stay transparent
        assert array[:, 0:16, 3].max() == 0
        assert array[:, 48:64, 3].max() == 0

        with Image.open(output_dir / "wall5.png") as image:
            assert image.getpixel((32, 0)) == GREEN
        with Image.open(output_dir / "wall7.png") as image:
            assert image.getpixel((32, 0)) == (0, 0, 255, 255)

    def test_duplicate_states_are_identical(self, solid_tileset, input_dir, output_dir):
        convert_tileset("wall", input_dir, output_dir)
        for first, second in [(0, 2), (1, 3), (4, 6)]:
            with Image.open(output_dir / f"wall{first}.png") as a, \
                    Image.open(output_dir / f"wall{second}.png") as b:
                assert np.array_equal(np.array(a), np.array(b))

    def test_rotated_quadrant_placement(self, input_dir, output_dir):
        write_tileset(input_dir)
        source = make_pattern(32, 32)
        source.save(input_dir / "wall7.png")

        convert_tileset("wall", input_dir, output_dir)

        with Image.open(output_dir / "wall1.png") as image:
            array = np.array(image)
        top_left = np.array(source)[0:16, 0:16]
        assert np.array_equal(cell(array, 1, 0), np.rot90(top_left, 1))
        assert np.array_equal(cell(array, 0, 1), np.rot90(top_left, 3))
        assert np.array_equal(cell(array, 1, 3), np.rot90(top_left[:, ::-1], 2))

    def test_bad_dimensions_write_nothing(self, input_dir, output_dir):
        write_tileset(input_dir, size=(30, 32))
        with pytest.raises(DimensionValidationError):
            convert_tileset("wall", input_dir, output_dir)
        assert list(output_dir.iterdir()) == []

    def test_missing_source_writes_nothing(self, input_dir, output_dir):
        write_tileset(input_dir)
        (input_dir / "wall15.png").unlink()
        with pytest.raises(ImageLoadError, match="wall15.png"):
            convert_tileset("wall", input_dir, output_dir)
        assert list(output_dir.iterdir()) == []

    @pytest.mark.parametrize("scale", [0, -1, 1.5])
    def test_invalid_scale(self, solid_tileset, input_dir, output_dir, scale):
        with pytest.raises(ValueError):
            convert_tileset("wall", input_dir, output_dir, scale_factor=scale)


@pytest.mark.integration
class TestTilesetConverter:
    """Test conversion plus metadata"""

    def test_run_writes_images_and_meta(self, solid_tileset, input_dir, output_dir):
        TilesetConverter("wall", input_dir, output_dir).run()

        assert {p.name for p in output_dir.iterdir()} == EXPECTED_IMAGES | {"meta.json"}
        meta = json.loads((output_dir / "meta.json").read_text())
        assert len(meta["states"]) == 9
        assert meta["states"][0] == {"name": "full"}
        for n, state in enumerate(meta["states"][1:]):
            assert state == {"name": f"wall{n}", "directions": 4}


@pytest.mark.integration
class TestMain:
    """Test the conversion command line"""

    def test_converts_detected_base(self, solid_tileset, input_dir, tmp_path):
        out = tmp_path / "created" / "out"
        assert main(["-I", str(input_dir), "-O", str(out)]) == 0
        assert (out / "meta.json").exists()
        assert (out / "wall7.png").exists()

    def test_explicit_base(self, input_dir, output_dir):
        write_tileset(input_dir, "floor")
        assert main(["-I", str(input_dir), "-O", str(output_dir), "-b", "floor"]) == 0
        assert (output_dir / "floor0.png").exists()

    def test_several_detected_bases_get_own_folders(self, input_dir, output_dir):
        write_tileset(input_dir, "wall")
        write_tileset(input_dir, "floor")

        assert main(["-I", str(input_dir), "-O", str(output_dir)]) == 0

        assert {p.name for p in output_dir.iterdir()} == {"floor", "wall"}
        for base in ("floor", "wall"):
            meta = json.loads((output_dir / base / "meta.json").read_text())
            assert meta["states"][1] == {"name": f"{base}0", "directions": 4}
            assert (output_dir / base / f"{base}7.png").exists()
            assert (output_dir / base / "full.png").read_bytes() == \
                (input_dir / f"{base}0.png").read_bytes()

    def test_verbose_reports_files(self, solid_tileset, input_dir, output_dir, capsys):
        assert main(["-I", str(input_dir), "-O", str(output_dir), "-v"]) == 0
        out = capsys.readouterr().out
        assert "Image saved as: full.png" in out
        assert "Image saved as: wall6.png" in out
        assert "Meta file saved as: meta.json" in out

    def test_missing_output_flag(self, input_dir, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-I", str(input_dir)])
        assert exc_info.value.code != 0
        assert "usage" in capsys.readouterr().err

    def test_same_directories(self, solid_tileset, input_dir, capsys):
        assert main(["-I", str(input_dir), "-O", str(input_dir)]) == 1
        assert "must not be the same" in capsys.readouterr().err

    def test_missing_input_directory(self, tmp_path, capsys):
        assert main(["-I", str(tmp_path / "nope"), "-O", str(tmp_path / "out")]) == 1
        assert "Input directory does not exist" in capsys.readouterr().err

    def test_no_tileset_found(self, input_dir, output_dir, capsys):
        assert main(["-I", str(input_dir), "-O", str(output_dir)]) == 1
        assert "not found" in capsys.readouterr().err

    def test_bad_image_reports_error(self, input_dir, output_dir, capsys):
        write_tileset(input_dir, size=(30, 32))
        assert main(["-I", str(input_dir), "-O", str(output_dir)]) == 1
        assert "divisible by 4" in capsys.readouterr().err

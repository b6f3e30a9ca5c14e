"""Tests for the quantize_image command line."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

import quantize_image as cli


def _write_png(path: Path, rgba: np.ndarray) -> Path:
    Image.fromarray(rgba).save(path)
    return path


def test_single_file(tmp_path, distinct_image, capsys):
    src = _write_png(tmp_path / "sprite.png", distinct_image)
    assert cli.main([str(src), "--colors", "16"]) == 0

    out_path = tmp_path / "sprite_wu.png"
    assert out_path.exists()
    with Image.open(out_path) as im:
        assert im.mode == "P"
        back = np.array(im.convert("RGBA"))
    np.testing.assert_array_equal(back, distinct_image)

    out = capsys.readouterr().out
    assert "[quantize] Colors: 16" in out
    assert "Wrote sprite_wu.png" in out
    assert "Colours used:" in out


def test_outdir_and_nearest_mapper(tmp_path, random_image):
    src = _write_png(tmp_path / "noise.png", random_image)
    outdir = tmp_path / "out"
    assert cli.main([str(src), "--outdir", str(outdir), "--mapper", "nearest", "--colors", "8"]) == 0
    with Image.open(outdir / "noise_wu.png") as im:
        assert im.size == (32, 24)
        used = set(np.unique(np.array(im)).tolist())
    assert len(used) <= 8


def test_folder_mode_skips_outputs(tmp_path, distinct_image, capsys):
    for name in ("b.png", "a.png"):
        _write_png(tmp_path / name, distinct_image)
    _write_png(tmp_path / "old_wu.png", distinct_image)
    (tmp_path / "readme.txt").write_text("ignored")

    assert cli.main([str(tmp_path), "--jobs", "2"]) == 0
    out = capsys.readouterr().out
    assert out.index("=== a.png ===") < out.index("=== b.png ===")
    assert (tmp_path / "a_wu.png").exists()
    assert (tmp_path / "b_wu.png").exists()
    assert not (tmp_path / "old_wu_wu.png").exists()


def test_missing_path(tmp_path, capsys):
    assert cli.main([str(tmp_path / "nope.png")]) == 2
    assert "not found" in capsys.readouterr().err


def test_broken_file_reports_failure(tmp_path, capsys):
    bad = tmp_path / "broken.png"
    bad.write_bytes(b"not really a png")
    assert cli.main([str(bad)]) == 1
    assert "[error] broken.png" in capsys.readouterr().err


def test_bad_options_exit(tmp_path):
    with pytest.raises(SystemExit):
        cli.parse_cli_args([str(tmp_path), "--colors", "300"])
    assert cli.main([str(tmp_path), "--alpha-fader", "0"]) == 2


def test_output_path_for(tmp_path):
    assert cli.output_path_for(Path("x/photo.jpg"), None) == Path("x/photo_wu.png")
    assert cli.output_path_for(Path("x/photo.jpg"), tmp_path) == tmp_path / "photo_wu.png"


def test_folder_mode_skips_unreadable_images(tmp_path, distinct_image, capsys):
    _write_png(tmp_path / "good.png", distinct_image)
    (tmp_path / "fake.png").write_bytes(b"plain text")
    assert cli.main([str(tmp_path), "--jobs", "1"]) == 0
    out = capsys.readouterr().out
    assert "[warn] skipping unreadable image fake.png" in out
    assert (tmp_path / "good_wu.png").exists()
    assert not (tmp_path / "fake_wu.png").exists()

"""Command-line round trip through real PNG files."""

import json

import numpy as np
from PIL import Image

from percepta.cli import main
from tests.conftest import WHITE_32_COMPACT_PAYLOAD, solid, with_square


def _write_png(path, arr):
    Image.fromarray(arr[..., :3]).save(path)
    return str(path)


def test_encode_then_decode(tmp_path, capsys):
    path = _write_png(tmp_path / "white.png", solid(32, 32))
    assert main(["encode", path, "--mode", "compact"]) == 0
    encoded = json.loads(capsys.readouterr().out)
    assert encoded["code"][:-1] == WHITE_32_COMPACT_PAYLOAD

    assert main(["decode", encoded["code"]]) == 0
    decoded = json.loads(capsys.readouterr().out)
    assert decoded["experience"]["scene"]["category"] == "minimal"
    assert decoded["metadata"]["confidence"] > 0


def test_process_with_context(tmp_path, capsys):
    arr = with_square(solid(48, 48), 12, 12, 20)
    path = _write_png(tmp_path / "square.png", arr)
    assert main(["--valence", "0.8", "--arousal", "0.3", "process", path]) == 0
    result = json.loads(capsys.readouterr().out)
    assert set(result) == {"encoded", "decoded", "is_reliable"}


def test_bad_code_still_prints_fallback(capsys):
    assert main(["decode", "???"]) == 0
    decoded = json.loads(capsys.readouterr().out)
    assert decoded["metadata"]["confidence"] == 0.0


def test_missing_file_fails(tmp_path):
    assert main(["encode", str(tmp_path / "nope.png")]) == 1


def test_undersized_image_fails(tmp_path):
    path = _write_png(tmp_path / "tiny.png", np.zeros((8, 8, 4), dtype=np.uint8))
    assert main(["encode", path]) == 1

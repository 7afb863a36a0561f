"""
Tests for the Model Studio CLI.
"""

from io import BytesIO
from unittest.mock import patch

import pytest
from PIL import Image

from cli_app import ModelStudioCLI, default_output_path


@pytest.fixture
def cli():
    return ModelStudioCLI()


@pytest.fixture
def source_png(tmp_path, noise_image_factory):
    path = tmp_path / "saree.png"
    noise_image_factory(96, 128).save(path, format="PNG")
    return path


@pytest.fixture
def small_size_lock(monkeypatch):
    monkeypatch.setenv("SIZE_LOCK_START_WIDTH", "300")
    monkeypatch.setenv("SIZE_LOCK_WIDTH_FLOOR", "100")


def test_default_output_path(tmp_path):
    assert default_output_path(tmp_path / "front.png") == tmp_path / "front_locked.jpg"


def test_size_lock_writes_jpeg(cli, source_png, tmp_path, small_size_lock, capsys):
    out = tmp_path / "out.jpg"

    code = cli.run(["size-lock", str(source_png), "-o", str(out), "--min-bytes", "1", "--max-bytes", "50000000"])

    assert code == 0
    with Image.open(BytesIO(out.read_bytes())) as image:
        assert image.format == "JPEG"
        assert image.size == (300, 400)
    assert "width=300px quality=94" in capsys.readouterr().out


def test_size_lock_default_output(cli, source_png, small_size_lock):
    code = cli.run(["size-lock", str(source_png), "--min-bytes", "1", "--max-bytes", "50000000"])

    assert code == 0
    assert default_output_path(source_png).exists()


def test_size_lock_unreachable_target(cli, source_png, tmp_path, small_size_lock, capsys):
    out = tmp_path / "out.jpg"

    code = cli.run(["size-lock", str(source_png), "-o", str(out), "--min-bytes", "1", "--max-bytes", "10"])

    assert code == 1
    assert not out.exists()
    assert "No encoding within" in capsys.readouterr().err


def test_size_lock_inverted_range(cli, source_png, capsys):
    code = cli.run(["size-lock", str(source_png), "--min-bytes", "10", "--max-bytes", "5"])

    assert code == 1
    assert "inverted" in capsys.readouterr().err


def test_size_lock_missing_file(cli, tmp_path, capsys):
    code = cli.run(["size-lock", str(tmp_path / "missing.png")])

    assert code == 1
    assert "Cannot read" in capsys.readouterr().err


def test_size_lock_not_an_image(cli, tmp_path, capsys):
    path = tmp_path / "notes.txt"
    path.write_text("hello")

    code = cli.run(["size-lock", str(path)])

    assert code == 1
    assert "invalid source image" in capsys.readouterr().err


def test_serve_uses_settings(cli, monkeypatch):
    monkeypatch.setenv("PORT", "5055")
    with patch("uvicorn.run") as mock_run:
        code = cli.run(["serve"])

    assert code == 0
    mock_run.assert_called_once_with("main:app", host="0.0.0.0", port=5055, reload=False)


def test_no_command_serves(cli):
    with patch("uvicorn.run") as mock_run:
        assert cli.run([]) == 0
    mock_run.assert_called_once()

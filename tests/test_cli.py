"""Tests for the command line entry point."""

import pytest

from gallery_builder.cli import main


@pytest.fixture
def gallery_dir(tmp_path):
    """An empty gallery album directory."""
    album = tmp_path / "barcelona"
    album.mkdir()
    return album


@pytest.fixture
def add_images(gallery_dir):
    """Create empty image files in the gallery directory."""

    def _add(*names):
        for name in names:
            (gallery_dir / name).write_bytes(b"")
        return gallery_dir

    return _add


def test_usage_without_arguments(capsys):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2
    assert "usage: gallery-builder" in capsys.readouterr().err


def test_usage_with_two_directories(capsys, tmp_path):
    with pytest.raises(SystemExit):
        main([str(tmp_path), str(tmp_path)])
    assert "usage:" in capsys.readouterr().err


def test_missing_directory(capsys, tmp_path):
    assert main([str(tmp_path / "missing")]) == 1
    assert "does not exist" in capsys.readouterr().out


def test_not_a_directory(capsys, tmp_path):
    path = tmp_path / "photos.dat"
    path.write_text("")
    assert main([str(path)]) == 1
    assert "should be a directory" in capsys.readouterr().out


def test_invalid_page_size(capsys, gallery_dir):
    assert main([str(gallery_dir), "--photos-per-page", "0"]) == 1
    assert "Invalid settings" in capsys.readouterr().out


def test_builds_pages(capsys, add_images):
    gallery = add_images("A.jpg", "A.thumb.jpg", "B.jpg", "B.thumb.jpg")

    assert main([str(gallery), "--photos-per-page", "1"]) == 0

    assert (gallery / "gallery_01").is_file()
    assert (gallery / "gallery_02").is_file()
    out = capsys.readouterr().out
    assert "Build status: completed" in out
    assert "pages: 2" in out


def test_strict_pairing_flag(capsys, add_images):
    gallery = add_images("A.jpg", "B.jpg", "B.thumb.jpg")

    assert main([str(gallery), "--strict-pairing"]) == 0

    assert "image pairs: 1" in capsys.readouterr().out


def test_os_error_does_not_escape(capsys, gallery_dir, monkeypatch):
    def _vanished(*args, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", str(gallery_dir))

    monkeypatch.setattr("gallery_builder.cli.run_build", _vanished)

    assert main([str(gallery_dir)]) == 1
    assert "Error reading gallery" in capsys.readouterr().out

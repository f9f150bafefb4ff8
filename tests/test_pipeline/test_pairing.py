"""Tests for image/thumbnail pairing."""

from pathlib import Path

import pytest

from gallery_builder.diagnostics import DiagnosticsCollector
from gallery_builder.pipeline.pairing import (
    build_image_pairs,
    filter_display_names,
    list_image_files,
    pair_images,
)


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


def _names(pairs):
    return [(p.main_image, p.thumbnail) for p in pairs]


class TestListImageFiles:
    def test_filters_extensions_case_insensitive(self, add_images):
        gallery = add_images(
            "IMG_0001.jpg", "IMG_0001.thumb.jpg", "a.JPEG", "b.PNG",
            "notes.txt", "photos.dat", "movie.mov",
        )
        (gallery / "folder.jpg").mkdir()

        assert list_image_files(gallery) == [
            "IMG_0001.jpg", "IMG_0001.thumb.jpg", "a.JPEG", "b.PNG",
        ]

    def test_empty_directory(self, gallery_dir):
        assert list_image_files(gallery_dir) == []


def test_filter_drops_sized_and_highlight():
    names = [
        "IMG_0001.jpg", "IMG_0001.sized.jpg", "IMG_0001.thumb.jpg",
        "Highlight.jpg", "IMG_0002.SIZED.jpg",
    ]
    assert filter_display_names(names) == ["IMG_0001.jpg", "IMG_0001.thumb.jpg"]


class TestPairImages:
    def test_pairs_in_order(self):
        names = ["A.jpg", "A.thumb.jpg", "B.jpg", "B.thumb.jpg"]
        pairs = pair_images(names, DiagnosticsCollector())
        assert _names(pairs) == [("A.jpg", "A.thumb.jpg"), ("B.jpg", "B.thumb.jpg")]

    def test_empty(self):
        assert pair_images([], DiagnosticsCollector()) == []

    def test_missing_thumbnail_reported(self):
        diagnostics = DiagnosticsCollector()
        pairs = pair_images(["A.jpg", "B.jpg"], diagnostics)
        assert pairs == []
        missing = diagnostics.query(action="missing_thumbnail")
        assert missing[0].details == {"image": "A.jpg", "found": "B.jpg"}

    def test_trailing_image_reported(self):
        diagnostics = DiagnosticsCollector()
        pairs = pair_images(["A.jpg", "A.thumb.jpg", "B.jpg"], diagnostics)
        assert _names(pairs) == [("A.jpg", "A.thumb.jpg")]
        assert diagnostics.query(action="missing_thumbnail")[0].details == {
            "image": "B.jpg",
            "found": None,
        }

    def test_stray_file_shifts_later_pairs(self):
        """Legacy mode: one orphan image breaks every pairing after it."""
        names = [
            "A.jpg", "A.thumb.jpg", "B.jpg",
            "C.jpg", "C.thumb.jpg", "D.jpg", "D.thumb.jpg",
        ]
        diagnostics = DiagnosticsCollector()
        pairs = pair_images(names, diagnostics)

        assert _names(pairs) == [("A.jpg", "A.thumb.jpg")]
        assert len(diagnostics.failures()) == 3

    def test_strict_mode_resynchronises(self):
        names = [
            "A.jpg", "A.thumb.jpg", "B.jpg",
            "C.jpg", "C.thumb.jpg", "D.jpg", "D.thumb.jpg",
        ]
        diagnostics = DiagnosticsCollector()
        pairs = pair_images(names, diagnostics, strict=True)

        assert _names(pairs) == [
            ("A.jpg", "A.thumb.jpg"),
            ("C.jpg", "C.thumb.jpg"),
            ("D.jpg", "D.thumb.jpg"),
        ]
        assert [d.details["image"] for d in diagnostics.failures()] == ["B.jpg"]

    def test_strict_mode_drops_orphan_thumbnail(self):
        names = ["A.thumb.jpg", "B.jpg", "B.thumb.jpg"]
        diagnostics = DiagnosticsCollector()
        pairs = pair_images(names, diagnostics, strict=True)

        assert _names(pairs) == [("B.jpg", "B.thumb.jpg")]
        assert len(diagnostics.query(action="orphan_thumbnail")) == 1

    def test_legacy_mode_loses_pair_after_orphan_thumbnail(self):
        names = ["A.thumb.jpg", "B.jpg", "B.thumb.jpg"]
        pairs = pair_images(names, DiagnosticsCollector())
        assert pairs == []

    def test_thumbnail_marker_case_insensitive(self):
        pairs = pair_images(["A.jpg", "A.Thumb.JPG"], DiagnosticsCollector())
        assert _names(pairs) == [("A.jpg", "A.Thumb.JPG")]

    def test_every_pair_has_a_thumbnail(self):
        names = ["A.jpg", "B.jpg", "C.jpg", "C.thumb.jpg", "D.png", "E.png"]
        for strict in (False, True):
            for pair in pair_images(names, DiagnosticsCollector(), strict=strict):
                assert "thumb" in pair.thumbnail.lower()


def test_build_image_pairs_from_directory(add_images):
    gallery = add_images(
        "IMG_0001.jpg", "IMG_0001.sized.jpg", "IMG_0001.thumb.jpg",
        "IMG_0002.jpg", "IMG_0002.thumb.jpg",
        "highlight.jpg", "photos.dat",
    )
    pairs = build_image_pairs(gallery, DiagnosticsCollector())
    assert _names(pairs) == [
        ("IMG_0001.jpg", "IMG_0001.thumb.jpg"),
        ("IMG_0002.jpg", "IMG_0002.thumb.jpg"),
    ]
    for pair in pairs:
        for name in (pair.main_image, pair.thumbnail):
            assert "sized" not in name and "highlight" not in name


def test_unlistable_directory_reported(gallery_dir, monkeypatch):
    """A listing error becomes a diagnostic instead of escaping the stage."""

    def _denied(self):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "iterdir", _denied)
    diagnostics = DiagnosticsCollector()

    assert build_image_pairs(gallery_dir, diagnostics) == []
    failed = diagnostics.query(action="listing_failed")
    assert len(failed) == 1
    assert "Permission denied" in failed[0].details["error"]

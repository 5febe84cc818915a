"""Unit tests for registry augmentation."""

from pathlib import Path
from unittest.mock import Mock

from PIL import Image

from assetsmith.config import HighlightConfig
from assetsmith.core.augmenter import Augmenter
from assetsmith.domain import AssetEntry, Registry
from assetsmith.exceptions import DecodeError, MissingSourceFileError


class TestDimensions:
    """Tests for dimension refresh."""

    def test_measures_existing_images(self, make_png, images_root: Path) -> None:
        """Test that stored dimensions are replaced by measured ones."""
        make_png("images/ui/play.png", size=16)
        registry = Registry([AssetEntry("ui/play.png", "1", 1, 1)])

        result = Augmenter().augment(registry, images_root)

        assert (registry["ui/play.png"].width, registry["ui/play.png"].height) == (16, 16)
        assert result.warnings == []

    def test_missing_file_keeps_dimensions(self, images_root: Path) -> None:
        """Test that a deleted image keeps its previous size and warns."""
        registry = Registry([AssetEntry("gone.png", "1", 20, 10)])

        result = Augmenter().augment(registry, images_root)

        entry = registry["gone.png"]
        assert (entry.width, entry.height) == (20, 10)
        assert len(result.missing) == 1
        assert isinstance(result.warnings[0], MissingSourceFileError)
        assert result.warnings[0].key == "gone.png"
        assert result.failed_count == 0

    def test_unreadable_file_keeps_dimensions(self, images_root: Path) -> None:
        """Test that a corrupt image is a warning, not an error."""
        (images_root / "bad.png").write_bytes(b"nope")
        registry = Registry([AssetEntry("bad.png", "1", 3, 3)])

        result = Augmenter().augment(registry, images_root)

        assert (registry["bad.png"].width, registry["bad.png"].height) == (3, 3)
        assert isinstance(result.warnings[0], DecodeError)

    def test_entries_never_added_or_removed(self, make_png, images_root: Path) -> None:
        """Test that unregistered images stay unregistered."""
        make_png("images/a.png")
        make_png("images/extra.png")
        registry = Registry([AssetEntry("a.png", "1")])

        Augmenter().augment(registry, images_root)

        assert registry.keys() == ["a.png"]

    def test_uses_injected_probe(self, make_png, images_root: Path) -> None:
        """Test that the probe is a replaceable collaborator."""
        make_png("images/a.png")
        probe = Mock()
        probe.probe.return_value = (99, 42)
        registry = Registry([AssetEntry("a.png", "1")])

        Augmenter(probe=probe).augment(registry, images_root)

        assert (registry["a.png"].width, registry["a.png"].height) == (99, 42)
        probe.probe.assert_called_once_with(images_root / "a.png")


class TestHighlightLinks:
    """Tests for highlight id linking."""

    def test_links_registered_highlight(self, make_png, images_root: Path) -> None:
        """Test that the highlight entry's id is linked."""
        make_png("images/ui/play.png")
        make_png("images/ui/play-highlight.png")
        registry = Registry(
            [
                AssetEntry("ui/play.png", "rbxassetid://1"),
                AssetEntry("ui/play-highlight.png", "rbxassetid://2"),
            ]
        )

        Augmenter().augment(registry, images_root)

        assert registry["ui/play.png"].highlight_id == "rbxassetid://2"
        assert registry["ui/play-highlight.png"].highlight_id is None

    def test_clears_stale_link(self, make_png, images_root: Path) -> None:
        """Test that a link is dropped once the highlight file is gone."""
        make_png("images/play.png")
        registry = Registry(
            [
                AssetEntry("play.png", "1", highlight_id="2"),
                AssetEntry("play-highlight.png", "2"),
            ]
        )

        Augmenter().augment(registry, images_root)

        assert registry["play.png"].highlight_id is None

    def test_pending_highlight(self, make_png, images_root: Path) -> None:
        """Test a highlight file that has no registry entry yet."""
        make_png("images/play.png")
        make_png("images/play-highlight.png")
        registry = Registry([AssetEntry("play.png", "1", highlight_id="old")])

        result = Augmenter().augment(registry, images_root)

        assert registry["play.png"].highlight_id is None
        assert result.pending_highlights == ["play.png"]
        assert result.warnings == []

    def test_links_even_when_source_missing(self, make_png, images_root: Path) -> None:
        """Test that linking only looks at the highlight file."""
        make_png("images/play-highlight.png")
        registry = Registry(
            [
                AssetEntry("play.png", "1"),
                AssetEntry("play-highlight.png", "2"),
            ]
        )

        result = Augmenter().augment(registry, images_root)

        assert registry["play.png"].highlight_id == "2"
        assert len(result.missing) == 1


class TestAutoHighlight:
    """Tests for highlight generation during augmentation."""

    def test_generates_missing_highlights(self, make_png, images_root: Path) -> None:
        """Test that highlights are created for non-highlight entries only."""
        make_png("images/play.png")
        registry = Registry([AssetEntry("play.png", "1")])

        result = Augmenter(HighlightConfig(auto_highlight=True)).augment(registry, images_root)

        assert (images_root / "play-highlight.png").exists()
        assert result.highlight_stats.created_count == 1
        # Generated but not registered yet, so nothing to link
        assert result.pending_highlights == ["play.png"]

    def test_thickness_applied(self, make_png, images_root: Path) -> None:
        """Test that the configured thickness reaches the outline engine."""
        make_png("images/play.png", size=12, box=(4, 4, 8, 8))
        registry = Registry([AssetEntry("play.png", "1")])

        Augmenter(HighlightConfig(auto_highlight=True, thickness=2)).augment(registry, images_root)

        with Image.open(images_root / "play-highlight.png") as image:
            alpha = image.getchannel("A")
            assert alpha.getbbox() == (2, 2, 10, 10)

    def test_failure_counted(self, make_png, images_root: Path) -> None:
        """Test that a failed highlight is counted but augmentation completes."""
        make_png("images/empty.png", box=None)
        registry = Registry([AssetEntry("empty.png", "1")])

        result = Augmenter(HighlightConfig(auto_highlight=True)).augment(registry, images_root)

        assert result.failed_count == 1
        assert registry["empty.png"].width == 10

    def test_disabled_by_default(self, make_png, images_root: Path) -> None:
        """Test that nothing is generated without auto_highlight."""
        make_png("images/play.png")
        registry = Registry([AssetEntry("play.png", "1")])

        result = Augmenter().augment(registry, images_root)

        assert not (images_root / "play-highlight.png").exists()
        assert result.highlight_stats.total == 0

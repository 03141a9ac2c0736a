"""
Tests for the editing session controller.

Tests cover:
- Loading sources and the resulting defaults
- Aspect-locked width/height updates
- History descriptions, undo/redo and truncation
- Failed renders leaving the session untouched
- Histogram and export through the session
"""

import io

import pytest
from PIL import Image

from OD_Libs.errors import InvalidGeometry, MissingSourceImage
from OD_Libs.ImageEditingLib.image_models import DEFAULT_SETTINGS
from OD_Libs.SessionLib.edit_session import EditSession, default_export_name


@pytest.fixture
def session(encoder, wide_source):
    session = EditSession(encoder=encoder)
    session.load_image(wide_source)
    return session


def descriptions(session):
    return [entry.description for entry in session.history.entries]


class TestDefaultExportName:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("holiday.jpg", "holiday-edited"),
            ("archive.tar.gz", "archive.tar-edited"),
            ("", "edited-image"),
            ("<memory>", "edited-image"),
        ],
    )
    def test_names(self, name, expected):
        assert default_export_name(name) == expected


class TestLoadImage:
    def test_load_resets_state(self, session, wide_source):
        assert session.source is wide_source
        assert (session.settings.width, session.settings.height) == (100, 50)
        assert session.surface.size == (100, 50)
        assert session.download_settings.filename == "holiday-edited"
        assert descriptions(session) == ["Image loaded"]

    def test_load_from_bytes(self, encoder):
        buffer = io.BytesIO()
        Image.new("RGB", (8, 6), "green").save(buffer, format="PNG")

        session = EditSession(encoder=encoder)
        surface = session.load_image(buffer.getvalue(), name="leaf.png")

        assert surface.size == (8, 6)
        assert session.download_settings.filename == "leaf-edited"

    def test_reload_clears_history(self, session, gray_source):
        session.update_settings(brightness=130)
        session.load_image(gray_source)

        assert descriptions(session) == ["Image loaded"]
        assert session.settings.brightness == 100

    def test_identity_surface_matches_source(self, session, wide_source):
        assert session.surface.tobytes() == wide_source.image.tobytes()


class TestUpdateSettings:
    def test_width_change_keeps_ratio(self, session):
        session.update_settings(width=50)

        assert (session.settings.width, session.settings.height) == (50, 25)
        assert session.surface.size == (50, 25)

    def test_height_change_keeps_ratio(self, session):
        session.update_settings(height=10)
        assert (session.settings.width, session.settings.height) == (20, 10)

    def test_width_change_is_not_fitted_to_old_box(self, session):
        session.update_settings(width=200)

        assert (session.settings.width, session.settings.height) == (200, 100)
        assert session.surface.size == (200, 100)

    def test_width_wins_when_both_change(self, session):
        session.update_settings(width=60, height=10)
        assert (session.settings.width, session.settings.height) == (60, 30)

    def test_unlocked_ratio(self, session):
        session.update_settings(maintain_aspect_ratio=False)
        session.update_settings(width=30)

        assert (session.settings.width, session.settings.height) == (30, 50)

    def test_history_description(self, session):
        session.update_settings({"contrast": 120}, brightness=110)

        assert descriptions(session)[-1] == "Adjusted brightness, contrast"
        assert session.settings.contrast == 120

    def test_custom_description(self, session):
        session.update_settings(hue=30, description="Hue tweak")
        assert descriptions(session)[-1] == "Hue tweak"

    def test_failed_render_is_not_committed(self, session):
        before = session.settings
        surface = session.surface

        with pytest.raises(InvalidGeometry):
            session.update_settings(width=0)

        assert session.settings is before
        assert session.surface is surface
        assert len(session.history) == 1

    def test_unknown_field(self, session):
        with pytest.raises(KeyError):
            session.update_settings(glow=4)

    def test_requires_source(self, encoder):
        with pytest.raises(MissingSourceImage):
            EditSession(encoder=encoder).update_settings(brightness=120)


class TestPresetsAndReset:
    def test_apply_preset(self, session):
        session.apply_preset("vintage")

        assert descriptions(session)[-1] == "Applied preset: Vintage"
        assert session.settings.sepia == 30
        assert session.settings.width == 100

    def test_reset(self, session):
        session.apply_preset("dramatic")
        session.reset()

        assert descriptions(session)[-1] == "Reset to defaults"
        assert session.settings == DEFAULT_SETTINGS.merge(width=100, height=50)


class TestUndoRedo:
    def test_undo_restores_settings_and_surface(self, session, wide_source):
        session.update_settings(brightness=150)
        entry = session.undo()

        assert entry.description == "Image loaded"
        assert session.settings.brightness == 100
        assert session.surface.tobytes() == wide_source.image.tobytes()

    def test_redo(self, session):
        session.update_settings(brightness=150)
        session.undo()
        entry = session.redo()

        assert entry.settings.brightness == 150
        assert session.settings.brightness == 150

    def test_undo_at_start(self, session):
        assert session.undo() is None
        assert session.settings.brightness == 100

    def test_new_edit_truncates_redo(self, session):
        session.update_settings(brightness=150)
        session.update_settings(brightness=160)
        session.undo()
        session.update_settings(contrast=90)

        assert descriptions(session) == [
            "Image loaded",
            "Adjusted brightness",
            "Adjusted contrast",
        ]
        assert session.redo() is None


class TestOutputs:
    def test_histogram(self, session):
        assert session.histogram().total() == 100 * 50

    def test_export_png(self, session):
        session.update_download_settings(format="png")
        encoded = session.export()

        assert encoded.filename == "holiday-edited.png"
        with Image.open(io.BytesIO(encoded.data)) as decoded:
            assert decoded.size == (100, 50)

    def test_save(self, session, temp_output_dir):
        session.update_download_settings(format="png", filename="final")
        path = session.save(temp_output_dir)

        assert path == temp_output_dir / "final.png"
        assert path.exists()

    def test_outputs_require_source(self, encoder):
        session = EditSession(encoder=encoder)

        with pytest.raises(MissingSourceImage):
            session.histogram()
        with pytest.raises(MissingSourceImage):
            session.export()

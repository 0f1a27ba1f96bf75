"""
Tests for the GUI handlers (no server is launched).

Run with: pytest tests/test_gradio_app.py -v
"""

import base64

import gradio as gr
import pytest

from gui import gradio_app
from mockup_types import ColorPalette, GenerateAppScreensResult, GeneratedScreen, MockupResult, ScreenCode
from orchestrator.orchestrator_client import GenerationError
from tests.helpers import PNG_B64, PNG_DATA_URL


def make_result():
    screen = GeneratedScreen("Login", PNG_DATA_URL, ScreenCode("react code", "flutter code"))
    return MockupResult(screens=GenerateAppScreensResult([screen], ["Failed to generate UI for Cart."]), logo_url=None)


class TestHandlers:
    def test_generate_passes_style_and_palette(self, monkeypatch):
        seen = {}

        def fake_run(prompt, style, palette):
            seen.update(prompt=prompt, style=style, palette=palette)
            return make_result()

        monkeypatch.setattr(gradio_app, "run_generate_mockups", fake_run)
        palette = {"primary": "#111111", "secondary": "#222222", "accent": "#333333"}
        gallery, logo, result, dropdown = gradio_app.handle_generate("notes app", "iOS Style", palette)

        assert seen["style"].value == "iOS Style"
        assert seen["palette"] == ColorPalette("#111111", "#222222", "#333333")
        assert [caption for _, caption in gallery] == ["Login"]
        assert gallery[0][0].size == (1, 1)
        assert logo is None
        assert result.screens.successful_screens[0].title == "Login"

    def test_generate_error_becomes_gradio_error(self, monkeypatch):
        def fake_run(prompt, style, palette):
            raise GenerationError("Failed to generate any screens. Please try refining your prompt.")

        monkeypatch.setattr(gradio_app, "run_generate_mockups", fake_run)
        with pytest.raises(gr.Error):
            gradio_app.handle_generate("notes app", "Minimal", None)

    def test_select_screen_code_by_index(self):
        result = make_result()
        assert gradio_app.handle_select_screen(0, result) == ("react code", "flutter code")
        assert gradio_app.handle_select_screen(5, result) == ("", "")
        assert gradio_app.handle_select_screen(None, None) == ("", "")

    def test_equal_titles_stay_selectable(self, monkeypatch):
        screens = [
            GeneratedScreen("Login", PNG_DATA_URL, ScreenCode("react one", "flutter one")),
            GeneratedScreen("Login", PNG_DATA_URL, ScreenCode("react two", "flutter two")),
        ]
        result = MockupResult(screens=GenerateAppScreensResult(screens), logo_url=None)
        monkeypatch.setattr(gradio_app, "run_generate_mockups", lambda prompt, style, palette: result)

        _, _, state, dropdown = gradio_app.handle_generate("notes app", "Minimal", None)

        assert dropdown["choices"] == [("Login", 0), ("Login", 1)]
        assert dropdown["value"] == 0
        assert gradio_app.handle_select_screen(1, state) == ("react two", "flutter two")

    def test_failed_batch_shows_the_screen_reasons(self, monkeypatch):
        def fake_run(prompt, style, palette):
            raise GenerationError(
                "Failed to generate any screens. Please try refining your prompt. "
                "Could not generate some screens: Failed to generate UI for Cart.",
                reasons=["Failed to generate UI for Cart."],
            )

        monkeypatch.setattr(gradio_app, "run_generate_mockups", fake_run)
        with pytest.raises(gr.Error) as excinfo:
            gradio_app.handle_generate("notes app", "Minimal", None)
        assert "Failed to generate UI for Cart." in excinfo.value.message

    def test_unexpected_errors_become_gradio_errors(self, monkeypatch):
        def fake_run(prompt, style, palette):
            raise ValueError("Tool 'extract_screen_names' not found on server")

        monkeypatch.setattr(gradio_app, "run_generate_mockups", fake_run)
        with pytest.raises(gr.Error) as excinfo:
            gradio_app.handle_generate("notes app", "Minimal", None)
        assert excinfo.value.message == "Generation failed: Tool 'extract_screen_names' not found on server"

    def test_corrupt_image_data_becomes_gradio_error(self, monkeypatch):
        broken = MockupResult(
            screens=GenerateAppScreensResult(
                [GeneratedScreen("Login", "data:image/png;base64,@@not-base64@@", ScreenCode("r", "f"))]
            ),
            logo_url=None,
        )
        monkeypatch.setattr(gradio_app, "run_generate_mockups", lambda prompt, style, palette: broken)
        with pytest.raises(gr.Error) as excinfo:
            gradio_app.handle_generate("notes app", "Minimal", None)
        assert excinfo.value.message.startswith("Generation failed:")

    def test_palette_transport_failure_becomes_gradio_error(self, monkeypatch):
        def fake_run(base_color):
            raise OSError("could not start server")

        monkeypatch.setattr(gradio_app, "run_generate_palette", fake_run)
        with pytest.raises(gr.Error) as excinfo:
            gradio_app.handle_generate_palette("#A78BFA")
        assert "could not start server" in excinfo.value.message

    def test_edit_transport_failure_becomes_gradio_error(self, monkeypatch, tmp_path):
        path = tmp_path / "photo.png"
        path.write_bytes(base64.b64decode(PNG_B64))

        def fake_run(data_url, mime_type, prompt):
            raise RuntimeError("session closed")

        monkeypatch.setattr(gradio_app, "run_edit_image", fake_run)
        with pytest.raises(gr.Error) as excinfo:
            gradio_app.handle_edit(str(path), "make it blue")
        assert excinfo.value.message == "Editing failed: session closed"

    def test_export_requires_screens(self):
        with pytest.raises(gr.Error):
            gradio_app.handle_export("react", None, "notes app")

    def test_edit_requires_image_and_prompt(self):
        with pytest.raises(gr.Error):
            gradio_app.handle_edit(None, "make it blue")


class TestImageHelpers:
    def test_file_to_data_url(self, tmp_path):
        path = tmp_path / "photo.png"
        path.write_bytes(base64.b64decode(PNG_B64))
        data_url, mime_type = gradio_app.file_to_data_url(str(path))
        assert mime_type == "image/png"
        assert data_url == PNG_DATA_URL

    def test_non_image_file_is_rejected(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        with pytest.raises(gr.Error):
            gradio_app.file_to_data_url(str(path))

    def test_palette_html_shows_every_color(self):
        html = gradio_app.palette_html({"primary": "#111111", "secondary": "#222222", "accent": "#333333"})
        assert "#111111" in html and "#222222" in html and "#333333" in html

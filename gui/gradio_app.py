
"""
Gradio GUI application for Mockup Studio.

Two tabs:
- UI Mockup Generator: describe an app, pick a style and a palette, and get
  one mockup image plus React and Flutter code per screen, a logo, and ZIP
  exports of the result.
- AI Image Editor: upload an image and describe an edit.
"""

import base64
import io
import logging
import mimetypes
import os
from pathlib import Path
from typing import Optional

# Disable Gradio telemetry / analytics
os.environ.setdefault("GRADIO_ANALYTICS_ENABLED", "False")

import gradio as gr
from PIL import Image

from mockup_types import DEFAULT_BASE_COLOR, DEFAULT_PALETTE, ColorPalette, DesignStyle, MockupResult
from model_tracker import configure_logging
from orchestrator.orchestrator_client import (
    GenerationError,
    run_edit_image,
    run_generate_mockups,
    run_generate_palette,
    summarize_result,
)
from orchestrator.zip_util import create_project_zip
from response_utils import split_data_url, to_data_url

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = (
    "A food delivery app with splash screen, login, menu, food details, cart, and checkout page."
)
EXAMPLE_PROMPTS = [
    "A language learning app with lesson selection and interactive flashcards.",
    "A recipe app with quick search, a shopping list, and user profiles.",
    "An e-commerce app for handmade jewelry with a product gallery and secure checkout.",
    "A personal finance tracker with a dashboard and expense charts.",
]
IMAGE_EDIT_EXAMPLE_PROMPTS = [
    "Add a retro, vintage filter.",
    "Make this look like a watercolor painting.",
    "Change the background to a sunny beach.",
    "Add a cat wearing sunglasses.",
    "Give it a cyberpunk, neon aesthetic.",
]


def data_url_to_image(data_url: str) -> Image.Image:
    _, payload = split_data_url(data_url)
    return Image.open(io.BytesIO(base64.b64decode(payload)))


def file_to_data_url(path: str):
    """
    Read an uploaded file into a data URL.

    Returns:
        Tuple of (data_url, mime_type)

    Raises:
        gr.Error: If the file is not an image
    """
    mime_type, _ = mimetypes.guess_type(path)
    if not mime_type or not mime_type.startswith("image/"):
        raise gr.Error("Please select a valid image file.")
    b64 = base64.b64encode(Path(path).read_bytes()).decode("ascii")
    return to_data_url(b64, mime_type), mime_type


def palette_html(palette: Optional[dict]) -> str:
    if not palette:
        return "<p>No palette yet.</p>"
    swatches = "".join(
        f'<div style="flex:1;text-align:center">'
        f'<div style="height:48px;border-radius:8px;background:{hex_code}"></div>'
        f"<small>{label.capitalize()}<br><code>{hex_code}</code></small></div>"
        for label, hex_code in palette.items()
    )
    return f'<div style="display:flex;gap:8px">{swatches}</div>'


def handle_generate_palette(base_color: str):
    """Generate a palette from the picked base color; returns (state, html)."""
    try:
        palette = run_generate_palette(base_color)
    except GenerationError as e:
        raise gr.Error(str(e))
    except Exception as e:
        # Surface a friendly error in the UI instead of a giant traceback
        logger.exception("Palette generation failed")
        raise gr.Error(f"Palette generation failed: {e}")
    gr.Info("Color palette generated successfully!")
    return palette.to_dict(), palette_html(palette.to_dict())


def handle_generate(prompt: str, style_label: str, palette: Optional[dict]):
    """
    Main handler for the generator tab.

    Returns:
        Tuple of (gallery items, logo image, result state, screen dropdown update).
        Dropdown choices are (title, index) pairs so equal titles stay selectable.

    Raises:
        gr.Error: If generation failed as a whole; a failed batch lists its reasons
    """
    try:
        result = run_generate_mockups(
            prompt,
            DesignStyle.from_label(style_label),
            ColorPalette(**palette) if palette else None,
        )
        screens = result.screens.successful_screens
        gallery = [(data_url_to_image(s.image_url), s.title) for s in screens]
        logo = data_url_to_image(result.logo_url) if result.logo_url else None
    except GenerationError as e:
        raise gr.Error(str(e))
    except Exception as e:
        logger.exception("Mockup generation failed")
        raise gr.Error(f"Generation failed: {e}")

    notes = summarize_result(result.screens)
    if notes["success"]:
        gr.Info(notes["success"])
    if notes["error"]:
        gr.Warning(notes["error"])

    choices = [(s.title, index) for index, s in enumerate(screens)]
    return (
        gallery,
        logo,
        result,
        gr.update(choices=choices, value=0 if choices else None),
    )


def handle_select_screen(index: Optional[int], result: Optional[MockupResult]):
    """Show the React and Flutter code of the selected screen."""
    if not result or index is None:
        return "", ""
    screens = result.screens.successful_screens
    if not 0 <= index < len(screens):
        return "", ""
    return screens[index].code.react, screens[index].code.flutter


def handle_export(framework: str, result: Optional[MockupResult], prompt: str) -> str:
    if not result or not result.screens.successful_screens:
        raise gr.Error("Generate some screens before exporting.")
    try:
        zip_path = create_project_zip(result, framework, prompt)
    except Exception as e:
        logger.exception("Export failed")
        raise gr.Error(f"Export failed: {e}")
    gr.Info(f"Started packaging your {framework.capitalize()} project!")
    return str(zip_path)


def handle_edit(image_path: Optional[str], edit_prompt: str):
    if not image_path or not edit_prompt or not edit_prompt.strip():
        raise gr.Error("Please upload an image and provide an edit prompt.")
    data_url, mime_type = file_to_data_url(image_path)
    try:
        edited = data_url_to_image(run_edit_image(data_url, mime_type, edit_prompt))
    except GenerationError as e:
        raise gr.Error(str(e))
    except Exception as e:
        logger.exception("Image edit failed")
        raise gr.Error(f"Editing failed: {e}")
    gr.Info("Image successfully edited!")
    return edited


def build_demo() -> gr.Blocks:
    """
    Build the Gradio interface.

    Generator tab: description, examples, style, palette, results and exports.
    Editor tab: upload, edit prompt with examples, original and edited images.
    """
    with gr.Blocks(analytics_enabled=False, title="AI Creative Suite") as demo:
        gr.Markdown("# AI Creative Suite")

        with gr.Tab("UI Mockup Generator"):
            result_state = gr.State(None)
            palette_state = gr.State(DEFAULT_PALETTE.to_dict())

            with gr.Row():
                with gr.Column():
                    prompt_box = gr.Textbox(
                        label="Describe your app idea",
                        value=DEFAULT_PROMPT,
                        lines=6,
                        placeholder=(
                            "e.g., A fitness tracker app with login, dashboard, "
                            "workout tracker, and progress page"
                        ),
                    )
                    gr.Examples(examples=EXAMPLE_PROMPTS, inputs=prompt_box, label="Or try an example")
                with gr.Column():
                    style_radio = gr.Radio(
                        choices=[s.value for s in DesignStyle],
                        value=DesignStyle.MODERN.value,
                        label="Design style",
                    )
                    base_color = gr.ColorPicker(label="Base color", value=DEFAULT_BASE_COLOR)
                    palette_btn = gr.Button("Generate Palette")
                    palette_view = gr.HTML(palette_html(DEFAULT_PALETTE.to_dict()))

            generate_btn = gr.Button("Generate UI Mockups", variant="primary")

            with gr.Row():
                logo_output = gr.Image(label="App logo", type="pil", height=160)
                gallery = gr.Gallery(label="Generated screens", columns=4)

            screen_select = gr.Dropdown(label="Screen code", choices=[])
            with gr.Row():
                react_code = gr.Code(label="React", language="javascript")
                flutter_code = gr.Code(label="Flutter")

            with gr.Row():
                export_react_btn = gr.Button("Export React project")
                export_flutter_btn = gr.Button("Export Flutter project")
            export_file = gr.File(label="Download project ZIP")

            palette_btn.click(
                fn=handle_generate_palette,
                inputs=base_color,
                outputs=[palette_state, palette_view],
            )
            generate_btn.click(
                fn=handle_generate,
                inputs=[prompt_box, style_radio, palette_state],
                outputs=[gallery, logo_output, result_state, screen_select],
            )
            screen_select.change(
                fn=handle_select_screen,
                inputs=[screen_select, result_state],
                outputs=[react_code, flutter_code],
            )
            export_react_btn.click(
                fn=lambda result, prompt: handle_export("react", result, prompt),
                inputs=[result_state, prompt_box],
                outputs=export_file,
            )
            export_flutter_btn.click(
                fn=lambda result, prompt: handle_export("flutter", result, prompt),
                inputs=[result_state, prompt_box],
                outputs=export_file,
            )

        with gr.Tab("AI Image Editor"):
            with gr.Row():
                original_image = gr.Image(label="Original", type="filepath")
                edited_image = gr.Image(label="Edited", type="pil")
            edit_prompt = gr.Textbox(label="Describe your edit", lines=2)
            gr.Examples(examples=IMAGE_EDIT_EXAMPLE_PROMPTS, inputs=edit_prompt, label="Or try an example")
            edit_btn = gr.Button("Edit Image", variant="primary")

            edit_btn.click(
                fn=handle_edit,
                inputs=[original_image, edit_prompt],
                outputs=edited_image,
            )

    return demo


def main():
    """Initialize and launch the Gradio web interface."""
    configure_logging()
    build_demo().launch()


if __name__ == "__main__":
    main()

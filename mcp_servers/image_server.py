
"""
MCP server for image generation and editing.

Tools:
1. generate_screen_image: Renders a mockup of one app screen
2. edit_image: Applies a free-text edit to an uploaded image

Both tools return a data:image/png;base64 URL on success.
"""

from mcp.server.fastmcp import FastMCP
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from model_tracker import (  # type: ignore
    IMAGE_GENERATION_CONFIG,
    IMAGE_MODEL,
    TrackingChatGoogleGenerativeAI,
    _extract_image,
    configure_logging,
)
from response_utils import split_data_url, to_data_url  # type: ignore

logger = logging.getLogger(__name__)

mcp = FastMCP("ImageAgent")

_llm = None


def _get_llm() -> Tuple[Optional[TrackingChatGoogleGenerativeAI], Optional[str]]:
    global _llm
    if _llm is not None:
        return _llm, None
    try:
        _llm = TrackingChatGoogleGenerativeAI(model=IMAGE_MODEL)
        return _llm, None
    except Exception as e:
        logger.exception("LLM initialization failed")
        return None, f"LLM initialization failed: {e}"


def _invoke_for_image(llm: TrackingChatGoogleGenerativeAI, content, agent_name: str) -> Optional[str]:
    """Send one user message to the image model and return the image payload, if any."""
    result = llm.invoke(
        [{"role": "user", "content": content}],
        generation_config=IMAGE_GENERATION_CONFIG,
        agent_name=agent_name,
    )
    return _extract_image(result)


@mcp.tool()
def generate_screen_image(
    screen_name: str,
    description: str,
    style: str,
    primary_color: str,
    secondary_color: str,
) -> str:
    """
    Generate a polished mockup image for a single app screen.

    Args:
        screen_name: Name of the screen (e.g., "Login Screen")
        description: The whole app description, for context
        style: Design style label
        primary_color: Primary theme color (hex)
        secondary_color: Secondary theme color (hex)

    Returns:
        PNG data URL, or "ERROR: Failed to generate UI for <screen>."
    """
    failure = f"ERROR: Failed to generate UI for {screen_name}."
    llm, err = _get_llm()
    if err or llm is None:
        return failure

    prompt = f"""Generate a high-quality mobile app UI mockup for a '{screen_name}'.
The app is a '{description.strip()}'.
The design style must be '{style}'.
The primary color for the theme should be {primary_color} and the secondary color should be {secondary_color}.
The screen should look complete, polished, and professional, including relevant UI elements like buttons, text fields, icons, and placeholder content.
Ensure the visual design is modern, aesthetically pleasing, and consistent with the requested style and colors.
Do not include any text labels like "UI design" or "mockup" on the image itself. The image should only be the app screen."""
    try:
        image_b64 = _invoke_for_image(llm, prompt, "ScreenRenderer")
    except Exception:
        logger.exception("Error generating image for %s", screen_name)
        return failure
    if not image_b64:
        logger.warning("No image data found in response for %s", screen_name)
        return failure
    return to_data_url(image_b64)


@mcp.tool()
def edit_image(image_data_url: str, mime_type: str, prompt: str) -> str:
    """
    Edit an uploaded image according to a text instruction.

    Args:
        image_data_url: The source image as a data URL
        mime_type: MIME type of the source image (falls back to the data URL header)
        prompt: The edit instruction

    Returns:
        PNG data URL of the edited image, or an "ERROR: ..." string
    """
    try:
        header_mime, payload = split_data_url(image_data_url)
    except ValueError as e:
        return f"ERROR: {e}"

    failure = "ERROR: Failed to edit the image with the provided prompt."
    llm, err = _get_llm()
    if err or llm is None:
        return failure

    content = [
        {"type": "image_url", "image_url": to_data_url(payload, mime_type or header_mime or "image/png")},
        {"type": "text", "text": prompt},
    ]
    try:
        image_b64 = _invoke_for_image(llm, content, "ImageEditor")
    except Exception:
        logger.exception("Error editing image")
        return failure
    if not image_b64:
        logger.warning("No edited image data found in response")
        return failure
    return to_data_url(image_b64)


if __name__ == "__main__":
    configure_logging()
    mcp.run(transport="stdio")

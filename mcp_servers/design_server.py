
"""
MCP server for app-level design decisions.

This server provides three tools:
1. generate_color_palette: Derives a primary/secondary/accent palette from a base color
2. extract_screen_names: Splits a free-text app description into named screens
3. generate_logo: Produces an app icon image for the described app

Expected failures are returned as "ERROR: <message>" strings so the
orchestrator can attribute them to the operation that produced them.
"""

from mcp.server.fastmcp import FastMCP
import json
import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

# Ensure project root is on sys.path so we can import the shared modules
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from model_tracker import (  # type: ignore
    IMAGE_GENERATION_CONFIG,
    IMAGE_MODEL,
    TEXT_MODEL,
    TrackingChatGoogleGenerativeAI,
    _extract_image,
    _extract_text,
    configure_logging,
)
from response_utils import parse_palette, parse_screen_names, to_data_url  # type: ignore

logger = logging.getLogger(__name__)

mcp = FastMCP("DesignAgent")

# Lazy-initialized LLM instances keyed by purpose ("json", "image")
_llms: Dict[str, TrackingChatGoogleGenerativeAI] = {}


def _get_llm(kind: str) -> Tuple[Optional[TrackingChatGoogleGenerativeAI], Optional[str]]:
    """
    Lazy-initialize the LLM instance for one kind of request.

    Args:
        kind: "json" for structured text answers, "image" for image output

    Returns:
        Tuple of (llm_instance, error_message). If successful, error_message is None.
    """
    if kind in _llms:
        return _llms[kind], None
    try:
        if kind == "json":
            llm = TrackingChatGoogleGenerativeAI(
                model=TEXT_MODEL, response_mime_type="application/json"
            )
        else:
            llm = TrackingChatGoogleGenerativeAI(model=IMAGE_MODEL)
    except Exception as e:
        logger.exception("LLM initialization failed")
        return None, f"LLM initialization failed: {e}"
    _llms[kind] = llm
    return llm, None


@mcp.tool()
def generate_color_palette(base_color: str) -> str:
    """
    Generate a harmonious palette around a base color.

    Args:
        base_color: Hex color the user picked; becomes the primary color

    Returns:
        JSON object string with "primary", "secondary" and "accent" hex codes,
        or an "ERROR: ..." string if the AI answer is unusable
    """
    failure = "ERROR: Failed to generate a valid color palette from the AI."
    llm, err = _get_llm("json")
    if err or llm is None:
        return failure

    prompt = f"""
Given a base color of {base_color}, generate a harmonious color palette suitable for a modern mobile app UI.
- The primary color should be the provided base color.
- The secondary color should complement the primary color.
- The accent color should be a vibrant color that stands out for calls-to-action.

Return the result as a JSON object with three keys: "primary", "secondary", and "accent".
Each key's value must be a 7-character hex color code string (e.g., "#RRGGBB").
"""
    try:
        result = llm.invoke(prompt.strip(), agent_name="PaletteDesigner")
        palette = parse_palette(_extract_text(result))
    except ValueError as e:
        logger.warning("Rejected palette for %s: %s", base_color, e)
        return failure
    except Exception:
        logger.exception("Error generating color palette")
        return failure
    return json.dumps(palette.to_dict())


@mcp.tool()
def extract_screen_names(description: str) -> str:
    """
    Identify the distinct user-facing screens in an app description.

    Args:
        description: User-provided description of the app

    Returns:
        JSON string of the form {"screens": [...]}; the list may be empty
    """
    failure = "ERROR: Failed to parse app description. Please try rephrasing your idea."
    llm, err = _get_llm("json")
    if err or llm is None:
        return failure

    prompt = f"""Based on the following app description, identify the distinct user-facing screens or pages.
Description: "{description.strip()}"
Return your answer as a JSON object with a single key "screens" holding an array of strings,
where each string is a concise name for a screen (e.g., "Login Screen", "User Dashboard", "Settings Page")."""
    try:
        result = llm.invoke(prompt, agent_name="ScreenPlanner")
        screens = parse_screen_names(_extract_text(result))
    except Exception:
        logger.exception("Error extracting screen names")
        return failure
    logger.info("Identified %d screen(s): %s", len(screens), screens)
    return json.dumps({"screens": screens})


@mcp.tool()
def generate_logo(description: str, style: str, primary_color: str, secondary_color: str) -> str:
    """
    Generate an app icon for the described app.

    Returns:
        A data:image/png;base64 URL, or an "ERROR: ..." string
    """
    failure = "ERROR: Failed to generate a logo for the app."
    llm, err = _get_llm("image")
    if err or llm is None:
        return failure

    prompt = f"""Generate a clean, modern, and simple logo for a mobile app.
The app is a '{description.strip()}'.
The design style should be consistent with a '{style}' theme.
The logo should be iconic, easily recognizable, and suitable for a small app icon.
It should be a vector-style graphic. The primary color should be {primary_color} and secondary color {secondary_color}.
The background should be transparent.
Do not include any text in the logo itself."""
    try:
        result = llm.invoke(
            [{"role": "user", "content": prompt}],
            generation_config=IMAGE_GENERATION_CONFIG,
            agent_name="LogoDesigner",
        )
    except Exception:
        logger.exception("Error generating logo")
        return failure
    image_b64 = _extract_image(result)
    if not image_b64:
        logger.warning("No image data found for logo in response")
        return failure
    return to_data_url(image_b64)


if __name__ == "__main__":
    configure_logging()
    mcp.run(transport="stdio")

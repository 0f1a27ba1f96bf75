
"""
MCP server for screen code generation.

This server exposes two tools that turn a screen name plus the app's style
and colors into source code:
- generate_react_code: a React functional component styled with Tailwind CSS
- generate_flutter_code: a Material Flutter widget

The model is asked for a bare body; fences are stripped, the result is
length-checked and then wrapped into a complete source file here.
"""

from mcp.server.fastmcp import FastMCP
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

# Ensure project root is on sys.path so we can import the shared modules
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from model_tracker import CODE_MODEL, TrackingChatGoogleGenerativeAI, _extract_text, configure_logging  # type: ignore
from response_utils import ensure_code, wrap_flutter_widget, wrap_react_component  # type: ignore

logger = logging.getLogger(__name__)

# Initialize the MCP server
mcp = FastMCP("CodeGenerator")

# Lazy-initialized LLM instance (created on first use)
_llm = None


def _get_llm() -> Tuple[Optional[TrackingChatGoogleGenerativeAI], Optional[str]]:
    """
    Lazy-initialize the LLM instance.

    Creates the LLM on first call and reuses it for subsequent calls.

    Returns:
        Tuple of (llm_instance, error_message). If successful, error_message is None.
    """
    global _llm
    if _llm is not None:
        return _llm, None
    try:
        _llm = TrackingChatGoogleGenerativeAI(model=CODE_MODEL, temperature=0)
        return _llm, None
    except Exception as e:
        logger.exception("LLM initialization failed")
        return None, f"LLM initialization failed: {e}"


@mcp.tool()
def generate_react_code(
    screen_name: str,
    description: str,
    style: str,
    primary_color: str,
    secondary_color: str,
) -> str:
    """
    Generate a React component for one screen.

    Args:
        screen_name: Name of the screen; also the component name (alphanumerics only)
        description: The whole app description, for context
        style: Design style label
        primary_color: Primary brand color (hex)
        secondary_color: Secondary brand color (hex)

    Returns:
        Complete React module source, or an "ERROR: ..." string
    """
    failure = f'ERROR: Failed to generate React code for "{screen_name}".'
    llm, err = _get_llm()
    if err or llm is None:
        return failure

    prompt = f"""Generate a single React functional component for a '{screen_name}' using JSX.
The app is a '{description.strip()}'.
The design style must be '{style}'.
The primary color is {primary_color} and the secondary color is {secondary_color}. Use these colors for branding elements like buttons, headers, and highlights.
Use Tailwind CSS for all styling. Do not use custom CSS, styled-components, or inline style objects.
The component should be self-contained and use placeholder data. For icons, use an SVG string directly inside the JSX.
Return ONLY the raw JSX code for the component's body, without any surrounding text, explanations, import statements, or markdown fences like ```jsx.
The root element should be a div with appropriate background and layout classes, styled to look like a mobile screen."""
    try:
        result = llm.invoke(prompt, agent_name="ReactCoder")
        body = ensure_code(_extract_text(result), "jsx")
    except ValueError as e:
        logger.warning("Rejected React code for %s: %s", screen_name, e)
        return failure
    except Exception:
        logger.exception("Error generating React code for %s", screen_name)
        return failure
    return wrap_react_component(screen_name, body)


@mcp.tool()
def generate_flutter_code(
    screen_name: str,
    description: str,
    style: str,
    primary_color: str,
    secondary_color: str,
) -> str:
    """
    Generate a Flutter widget for one screen.

    Returns:
        Dart source with the Material import, or an "ERROR: ..." string
    """
    failure = f'ERROR: Failed to generate Flutter code for "{screen_name}".'
    llm, err = _get_llm()
    if err or llm is None:
        return failure

    prompt = f"""Generate a single, self-contained Flutter widget for a '{screen_name}'.
The app is a '{description.strip()}'.
The design style must be '{style}'.
The primary color is {primary_color} and the secondary color is {secondary_color}. Use these hex colors for branding elements like buttons, headers, and highlights by converting them to Flutter Color objects (e.g., Color(0xFF8B5CF6)).
Use the Material library for UI components (e.g., Scaffold, AppBar, Text, ElevatedButton).
The widget should be a StatelessWidget or StatefulWidget, be well-structured, and use placeholder data. For icons, use standard Material icons (e.g., Icons.home).
Return ONLY the raw Dart code for the widget class, without any surrounding text, explanations, import statements, or markdown fences like ```dart."""
    try:
        result = llm.invoke(prompt, agent_name="FlutterCoder")
        body = ensure_code(_extract_text(result), "dart")
    except ValueError as e:
        logger.warning("Rejected Flutter code for %s: %s", screen_name, e)
        return failure
    except Exception:
        logger.exception("Error generating Flutter code for %s", screen_name)
        return failure
    return wrap_flutter_widget(body)


if __name__ == "__main__":
    configure_logging()
    mcp.run(transport="stdio")

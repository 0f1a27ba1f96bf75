
"""
Orchestrator client for the mockup generation pipeline.

This module coordinates every generation workflow the GUI offers:
1. Derive a color palette from a base color
2. Split an app description into named screens
3. Fan out per-screen requests (mockup image, React code, Flutter code)
4. Collect successful screens and failure reasons without letting one
   failure abort the batch
5. Generate an app logo alongside the screens
6. Edit an uploaded image with a text prompt

All MCP servers are invoked as separate processes via stdio communication.
Every tool call goes through a pluggable caller so the fan-out/fan-in logic
can run without spawning processes.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from langchain_mcp_adapters.tools import load_mcp_tools

from mockup_types import (
    ColorPalette,
    DesignStyle,
    GeneratedScreen,
    GenerateAppScreensResult,
    MockupResult,
    ScreenCode,
)
from response_utils import parse_palette, parse_screen_names

logger = logging.getLogger(__name__)

# Project root directory (parent of orchestrator/)
BASE_DIR = Path(__file__).resolve().parents[1]

DESIGN_SERVER = BASE_DIR / "mcp_servers" / "design_server.py"
IMAGE_SERVER = BASE_DIR / "mcp_servers" / "image_server.py"
CODEGEN_SERVER = BASE_DIR / "mcp_servers" / "codegen_server.py"

ERROR_PREFIX = "ERROR:"
UNKNOWN_SCREEN_ERROR = "An unknown screen generation error occurred."
NO_SCREENS_MESSAGE = (
    "Could not identify any screens from your description. Please be more specific "
    "about the pages you need, e.g., 'login page', 'dashboard'."
)
ALL_SCREENS_FAILED_MESSAGE = "Failed to generate any screens. Please try refining your prompt."

ToolCaller = Callable[[Path, str, Dict[str, Any]], Awaitable[Any]]


class GenerationError(Exception):
    """
    An operation failed; the message is meant to be shown to the user.

    For a failed batch, ``reasons`` holds the per-screen failure messages.
    """

    def __init__(self, message: str, reasons: Optional[List[str]] = None):
        super().__init__(message)
        self.reasons = list(reasons or [])


async def _call_mcp_tool(
    server_script: Path,
    tool_name: str,
    arguments: Dict[str, Any],
) -> Any:
    """
    Start an MCP server process and invoke a specific tool.

    This function spawns a new Python process running the MCP server script,
    establishes stdio communication, discovers available tools, and invokes
    the requested tool with the provided arguments.

    Args:
        server_script: Path to the Python script that implements the MCP server
        tool_name: Name of the tool to invoke (must be exposed by the server)
        arguments: Dictionary of arguments to pass to the tool

    Returns:
        The result returned by the tool

    Raises:
        ValueError: If the requested tool is not found on the server
    """
    server_params = StdioServerParameters(
        command="python3",
        args=[str(server_script)],
    )

    async with stdio_client(server_params) as (read, write):
        async with ClientSession(read, write) as session:
            await session.initialize()
            tools = await load_mcp_tools(session)

            target_tool = None
            for tool in tools:
                if tool.name == tool_name:
                    target_tool = tool
                    break

            if target_tool is None:
                available = [t.name for t in tools]
                raise ValueError(
                    f"Tool '{tool_name}' not found on server '{server_script}'. "
                    f"Available tools: {available}"
                )

            return await target_tool.ainvoke(arguments)


def _tool_text(result: Any) -> str:
    """Flatten a tool result (plain string or list of content blocks) into text."""
    if isinstance(result, str):
        return result
    if isinstance(result, (list, tuple)):
        parts = []
        for block in result:
            if isinstance(block, dict) and "text" in block:
                parts.append(block["text"])
            elif hasattr(block, "text"):
                parts.append(block.text)
            else:
                parts.append(str(block))
        return "".join(parts)
    return str(result)


async def _run_tool(
    call_tool: ToolCaller,
    server_script: Path,
    tool_name: str,
    arguments: Dict[str, Any],
) -> str:
    """
    Invoke a tool and turn an "ERROR: ..." answer into a GenerationError.

    Raises:
        GenerationError: If the tool reported a failure
    """
    text = _tool_text(await call_tool(server_script, tool_name, arguments)).strip()
    if text.startswith(ERROR_PREFIX):
        raise GenerationError(text[len(ERROR_PREFIX):].strip())
    return text


def _style_label(style) -> str:
    return style.value if isinstance(style, DesignStyle) else str(style)


async def generate_color_palette(
    base_color: str,
    call_tool: ToolCaller = _call_mcp_tool,
) -> ColorPalette:
    """
    Ask the design agent for a palette and validate it.

    Raises:
        GenerationError: If the agent fails or returns any invalid hex code
    """
    text = await _run_tool(
        call_tool, DESIGN_SERVER, "generate_color_palette", {"base_color": base_color}
    )
    try:
        return parse_palette(text)
    except ValueError as e:
        logger.warning("Discarding invalid palette: %s", e)
        raise GenerationError("Failed to generate a valid color palette from the AI.") from e


async def extract_screen_names(prompt: str, call_tool: ToolCaller = _call_mcp_tool) -> List[str]:
    text = await _run_tool(call_tool, DESIGN_SERVER, "extract_screen_names", {"description": prompt})
    try:
        return parse_screen_names(text)
    except ValueError as e:
        raise GenerationError(
            "Failed to parse app description. Please try rephrasing your idea."
        ) from e


async def _generate_screen(
    call_tool: ToolCaller,
    screen_name: str,
    arguments: Dict[str, Any],
) -> GeneratedScreen:
    """
    Request the image and both code variants of one screen concurrently.

    The first failure propagates; the sibling requests keep running to
    completion and their results are discarded.
    """
    image_url, react_code, flutter_code = await asyncio.gather(
        _run_tool(call_tool, IMAGE_SERVER, "generate_screen_image", arguments),
        _run_tool(call_tool, CODEGEN_SERVER, "generate_react_code", arguments),
        _run_tool(call_tool, CODEGEN_SERVER, "generate_flutter_code", arguments),
    )
    return GeneratedScreen(
        title=screen_name,
        image_url=image_url,
        code=ScreenCode(react=react_code, flutter=flutter_code),
    )


async def generate_app_screens(
    prompt: str,
    style,
    primary_color: str,
    secondary_color: str,
    call_tool: ToolCaller = _call_mcp_tool,
) -> GenerateAppScreensResult:
    """
    Generate every screen of the described app.

    Args:
        prompt: Free-text app description
        style: DesignStyle (or its label)
        primary_color: Primary theme color (hex)
        secondary_color: Secondary theme color (hex)
        call_tool: Coroutine used to invoke MCP tools

    Returns:
        Successful screens in extraction order plus one reason per failed screen

    Raises:
        GenerationError: If the description cannot be parsed or yields no screens
    """
    screen_names = await extract_screen_names(prompt, call_tool)
    if not screen_names:
        raise GenerationError(NO_SCREENS_MESSAGE)

    common = {
        "description": prompt,
        "style": _style_label(style),
        "primary_color": primary_color,
        "secondary_color": secondary_color,
    }
    outcomes = await asyncio.gather(
        *(
            _generate_screen(call_tool, name, {"screen_name": name, **common})
            for name in screen_names
        ),
        return_exceptions=True,
    )

    result = GenerateAppScreensResult()
    for name, outcome in zip(screen_names, outcomes):
        if isinstance(outcome, GeneratedScreen):
            result.successful_screens.append(outcome)
        elif isinstance(outcome, Exception):
            logger.warning("Screen %r failed: %s", name, outcome)
            result.failed_screen_reasons.append(str(outcome) or UNKNOWN_SCREEN_ERROR)
        else:
            # BaseException (e.g. cancellation) is not a screen failure
            raise outcome

    logger.info(
        "Batch finished: %d screen(s) generated, %d failed",
        len(result.successful_screens),
        len(result.failed_screen_reasons),
    )
    return result


async def generate_logo(
    prompt: str,
    style,
    primary_color: str,
    secondary_color: str,
    call_tool: ToolCaller = _call_mcp_tool,
) -> str:
    return await _run_tool(
        call_tool,
        DESIGN_SERVER,
        "generate_logo",
        {
            "description": prompt,
            "style": _style_label(style),
            "primary_color": primary_color,
            "secondary_color": secondary_color,
        },
    )


async def generate_mockups(
    prompt: str,
    style,
    palette: Optional[ColorPalette],
    call_tool: ToolCaller = _call_mcp_tool,
) -> MockupResult:
    """
    Generate all screens and the logo for one app description.

    Screens and logo are requested concurrently. Partial screen failures are
    returned in the result; a batch without a single successful screen fails.

    Raises:
        GenerationError: On missing input, a failed logo, or zero generated screens
    """
    if not prompt or not prompt.strip():
        raise GenerationError("Please enter an app description.")
    if palette is None:
        raise GenerationError("Please generate a color palette first.")

    prompt = prompt.strip()
    screens, logo_url = await asyncio.gather(
        generate_app_screens(prompt, style, palette.primary, palette.secondary, call_tool),
        generate_logo(prompt, style, palette.primary, palette.secondary, call_tool),
    )
    if not screens.successful_screens and screens.failed_screen_reasons:
        details = summarize_result(screens)["error"]
        raise GenerationError(
            f"{ALL_SCREENS_FAILED_MESSAGE} {details}",
            reasons=screens.failed_screen_reasons,
        )
    return MockupResult(screens=screens, logo_url=logo_url)


async def edit_image(
    image_data_url: Optional[str],
    mime_type: str,
    prompt: str,
    call_tool: ToolCaller = _call_mcp_tool,
) -> str:
    if not image_data_url or not prompt or not prompt.strip():
        raise GenerationError("Please upload an image and provide an edit prompt.")
    return await _run_tool(
        call_tool,
        IMAGE_SERVER,
        "edit_image",
        {"image_data_url": image_data_url, "mime_type": mime_type, "prompt": prompt.strip()},
    )


def summarize_result(result: GenerateAppScreensResult) -> Dict[str, Optional[str]]:
    """
    Build the user-facing notifications for a batch.

    Returns:
        {"success": message or None, "error": message or None}; the error lists
        at most two failure reasons
    """
    success = None
    error = None
    if result.successful_screens:
        success = f"Successfully generated {len(result.successful_screens)} screen(s)!"
    if result.failed_screen_reasons:
        error = "Could not generate some screens: " + ", ".join(result.failed_screen_reasons[:2])
    return {"success": success, "error": error}


def run_generate_palette(base_color: str) -> ColorPalette:
    """Synchronous entry point for the GUI."""
    return asyncio.run(generate_color_palette(base_color))


def run_generate_mockups(prompt: str, style, palette: Optional[ColorPalette]) -> MockupResult:
    """Synchronous entry point for the GUI."""
    return asyncio.run(generate_mockups(prompt, style, palette))


def run_edit_image(image_data_url: Optional[str], mime_type: str, prompt: str) -> str:
    """Synchronous entry point for the GUI."""
    return asyncio.run(edit_image(image_data_url, mime_type, prompt))


if __name__ == "__main__":
    from model_tracker import configure_logging, get_model_usage
    from mockup_types import DEFAULT_PALETTE

    configure_logging()
    sample_prompt = (
        "A food delivery app with splash screen, login, menu, food details, cart, "
        "and checkout page."
    )
    mockups = run_generate_mockups(sample_prompt, DesignStyle.MODERN, DEFAULT_PALETTE)
    for screen in mockups.screens.successful_screens:
        print("Generated:", screen.title)
    for reason in mockups.screens.failed_screen_reasons:
        print("Failed:", reason)
    print("Model usage:", get_model_usage())

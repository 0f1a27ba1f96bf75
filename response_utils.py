
"""
Validation and normalization of generative model output.

Everything the model returns passes through here before it reaches the
orchestrator or the GUI:
- JSON payloads (palette, screen list) are parsed and shape-checked
- hex colors are validated
- code responses are stripped of markdown fences and length-checked
- inline image bytes are turned into data URLs
"""

import json
import re
from typing import List, Tuple

from mockup_types import ColorPalette

HEX_COLOR_RE = re.compile(r"#[0-9A-F]{6}", re.IGNORECASE)

# Code shorter than this is treated as an empty or refused answer
MIN_CODE_LENGTH = 50

_JSON_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)


def is_valid_hex(color) -> bool:
    """Return True for a 7-character ``#RRGGBB`` string."""
    return isinstance(color, str) and bool(HEX_COLOR_RE.fullmatch(color))


def parse_json_object(text: str) -> dict:
    """
    Parse model text as a JSON object.

    Models in JSON mode normally return bare JSON, but a surrounding
    ```json fence is tolerated.

    Raises:
        ValueError: If the text is not valid JSON or not a JSON object
    """
    if not text or not text.strip():
        raise ValueError("AI returned an empty response.")
    match = _JSON_FENCE_RE.match(text)
    if match:
        text = match.group(1)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"AI returned malformed JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("AI returned JSON that is not an object.")
    return data


def parse_palette(text: str) -> ColorPalette:
    """
    Parse and validate a palette response.

    A single invalid field fails the whole palette; nothing malformed is
    ever returned.

    Raises:
        ValueError: If a key is missing or any color is not a valid hex code
    """
    data = parse_json_object(text)
    colors = {key: data.get(key) for key in ("primary", "secondary", "accent")}
    invalid = [key for key, value in colors.items() if not is_valid_hex(value)]
    if invalid:
        raise ValueError(f"AI returned invalid hex codes for: {', '.join(invalid)}")
    return ColorPalette(**colors)


def parse_screen_names(text: str) -> List[str]:
    """Read the ``screens`` list from a JSON response; missing key means no screens."""
    data = parse_json_object(text)
    screens = data.get("screens") or []
    if not isinstance(screens, list):
        raise ValueError("AI returned 'screens' that is not a list.")
    return [name.strip() for name in screens if isinstance(name, str) and name.strip()]


def strip_code_fences(text: str, language: str) -> str:
    """Remove ```<language> and bare ``` fences from a code answer."""
    if not text:
        return ""
    pattern = r"```" + re.escape(language) + r"|```"
    return re.sub(pattern, "", text).strip()


def ensure_code(text: str, language: str) -> str:
    code = strip_code_fences(text, language)
    if len(code) < MIN_CODE_LENGTH:
        raise ValueError("AI returned empty or invalid code.")
    return code


def component_name(screen_name: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]", "", screen_name)


def wrap_react_component(screen_name: str, body: str) -> str:
    """
    Wrap a raw JSX body into a complete React module.

    Args:
        screen_name: Screen title, reduced to alphanumerics for the component name
        body: JSX returned by the model (already fence-stripped)

    Returns:
        Source of a default-exported functional component
    """
    name = component_name(screen_name)
    indented = "\n".join(f"    {line}" for line in body.split("\n"))
    return (
        "import React from 'react';\n"
        "\n"
        f"const {name} = () => {{\n"
        "  return (\n"
        f"{indented}\n"
        "  );\n"
        "};\n"
        "\n"
        f"export default {name};\n"
    )


def wrap_flutter_widget(body: str) -> str:
    return f"import 'package:flutter/material.dart';\n\n{body}\n"


def to_data_url(b64_data: str, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{b64_data}"


def split_data_url(data_url: str) -> Tuple[str, str]:
    """
    Split a ``data:<mime>;base64,<payload>`` URL.

    Returns:
        Tuple of (mime_type, base64_payload). The mime type is empty when the
        header does not carry one.

    Raises:
        ValueError: If there is no payload after the comma
    """
    header, _, payload = (data_url or "").partition(",")
    if not payload:
        raise ValueError("Invalid base64 image data provided.")
    mime_type = ""
    if header.startswith("data:"):
        mime_type = header[len("data:"):].split(";", 1)[0]
    return mime_type, payload


"""
Model configuration and usage tracking.

This module provides a wrapper around LangChain's ChatGoogleGenerativeAI that
automatically tracks API calls and token usage per agent/model combination.
Usage statistics are persisted to a JSON file for reporting purposes.

It is also the single place where the model names and the API key are read
from the environment (or a .env file at the project root).
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from langchain_google_genai import ChatGoogleGenerativeAI

logger = logging.getLogger(__name__)

# Base dir (project root)
BASE_DIR = Path(__file__).resolve().parent

# Load .env if present (non-fatal if missing)
load_dotenv(BASE_DIR / ".env", override=False)

# Models used for each kind of request
TEXT_MODEL = os.getenv("MOCKUP_TEXT_MODEL", "gemini-2.5-flash")
CODE_MODEL = os.getenv("MOCKUP_CODE_MODEL", "gemini-2.5-pro")
IMAGE_MODEL = os.getenv("MOCKUP_IMAGE_MODEL", "gemini-2.5-flash-image")

# Passed to invoke() to ask an image model for inline image bytes
IMAGE_GENERATION_CONFIG = {"response_modalities": ["TEXT", "IMAGE"]}

LOG_LEVEL = os.getenv("MOCKUP_LOG_LEVEL", "INFO")

# File where model usage is aggregated across processes
# Format: {agent_name: {model_name: {"numApiCalls": int, "totalTokens": int}}}
_USAGE_FILE = Path(os.getenv("MOCKUP_USAGE_FILE", str(BASE_DIR / "model_usage.json")))


def configure_logging() -> None:
    """Set up root logging for an entry point (stderr, so stdio transports stay clean)."""
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_usage() -> Dict[str, Dict[str, Dict[str, int]]]:
    """
    Load usage statistics from the JSON file.

    Returns:
        Dictionary mapping agent names to their model usage stats.
        Returns empty dict if file doesn't exist or is corrupted.
    """
    if _USAGE_FILE.exists():
        try:
            return json.loads(_USAGE_FILE.read_text())
        except json.JSONDecodeError:
            # Corrupted file gets overwritten on the next update
            logger.warning("Ignoring corrupted usage file %s", _USAGE_FILE)
            return {}
    return {}


def _save_usage(data: Dict[str, Dict[str, Dict[str, int]]]) -> None:
    _USAGE_FILE.write_text(json.dumps(data, indent=2))


def _estimate_tokens(text: str) -> int:
    """
    Very rough token estimate using word count.

    Real tokenization would require the model's tokenizer.

    Args:
        text: Input text to estimate tokens for

    Returns:
        Estimated token count (at least 1)
    """
    words = text.split()
    return max(len(words), 1)


def _extract_text(result: Any) -> str:
    """
    Try to extract a text string from a LangChain AIMessage or any model response.

    Handles various response formats:
    - String content directly
    - List of content parts (image parts are skipped)
    - Other object types (converted to string)

    Args:
        result: The result object from an LLM invocation

    Returns:
        Extracted text as a string
    """
    content = getattr(result, "content", None)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, dict):
                if "text" in part:
                    parts.append(part["text"])
            else:
                parts.append(str(part))
        return "\n".join(parts)
    if content is not None:
        return str(content)
    return str(result)


def _extract_image(result: Any) -> Optional[str]:
    """
    Return the base64 payload of the first inline image in a model response.

    Image models answer with a list of content parts; image parts look like
    ``{"type": "image_url", "image_url": {"url": "data:image/png;base64,..."}}``.

    Returns:
        The base64 string, or None if the response carries no image
    """
    content = getattr(result, "content", None)
    if not isinstance(content, list):
        return None
    for part in content:
        if not isinstance(part, dict) or not part.get("image_url"):
            continue
        image_url = part["image_url"]
        url = image_url.get("url") if isinstance(image_url, dict) else image_url
        if isinstance(url, str) and url:
            payload = url.split(",")[-1]
            if payload:
                return payload
    return None


def _update_usage(agent_name: str, model_name: str, num_tokens: int) -> None:
    """
    Update usage statistics for a specific agent and model.

    Increments the API call count and adds to the total token count.
    Concurrent writers from different server processes may lose an update;
    the numbers are a report, not an invoice.

    Args:
        agent_name: Name of the agent making the call (e.g., "ReactCoder")
        model_name: Name of the model being used (e.g., "gemini-2.5-pro")
        num_tokens: Number of tokens used in this call
    """
    usage = _load_usage()

    if agent_name not in usage:
        usage[agent_name] = {}

    model_stats = usage[agent_name].get(model_name, {"numApiCalls": 0, "totalTokens": 0})
    model_stats["numApiCalls"] += 1
    model_stats["totalTokens"] += int(num_tokens)

    usage[agent_name][model_name] = model_stats
    _save_usage(usage)


class TrackingChatGoogleGenerativeAI(ChatGoogleGenerativeAI):
    """
    Subclass of ChatGoogleGenerativeAI that tracks usage stats and handles API key.

    This wrapper automatically tracks all LLM invocations, recording:
    - Number of API calls per agent/model
    - Total tokens used per agent/model

    The agent_name parameter allows different parts of the system to be tracked separately.
    """

    def __init__(self, *args, **kwargs):
        """
        Initialize the tracking LLM wrapper.

        Automatically handles API key lookup from environment variables if not
        explicitly provided. Checks GOOGLE_API_KEY and GEMINI_API_KEY env vars.
        """
        google_key = (
            kwargs.get("google_api_key")
            or os.getenv("GOOGLE_API_KEY")
            or os.getenv("GEMINI_API_KEY")
        )
        if google_key:
            kwargs["google_api_key"] = google_key
        # If no key, super() will raise a clear error which we catch in the tools
        super().__init__(*args, **kwargs)

    def invoke(self, *args, agent_name="UnknownAgent", **kwargs):
        """
        Synchronous invocation with usage tracking.

        Args:
            *args: Arguments passed to the parent invoke method
            agent_name: Name of the agent making this call (for tracking)
            **kwargs: Keyword arguments passed to the parent invoke method

        Returns:
            The result from the LLM invocation
        """
        result = super().invoke(*args, **kwargs)
        _update_usage(agent_name, self.model, _estimate_tokens(_extract_text(result)))
        return result

    async def ainvoke(self, *args, agent_name="UnknownAgent", **kwargs):
        result = await super().ainvoke(*args, **kwargs)
        _update_usage(agent_name, self.model, _estimate_tokens(_extract_text(result)))
        return result


def get_model_usage() -> Dict[str, Dict[str, Dict[str, int]]]:
    """Public accessor to model usage JSON."""
    return _load_usage()


def reset_model_usage() -> None:
    if _USAGE_FILE.exists():
        _USAGE_FILE.unlink()

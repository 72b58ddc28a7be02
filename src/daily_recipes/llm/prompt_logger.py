"""
Daily Recipes - Prompt Logger.

Writes every provider exchange (prompt and raw answer) to a markdown
file, one file per call, grouped by CLI session. Useful when tuning the
prompt against different providers.
Enabled via DAILY_RECIPES_LOG_PROMPTS=1 or the --log-prompts CLI flag.
"""

import json
import logging
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

LOG_DIR = Path("prompt_logs")

_enabled: bool = False
_session_id: str | None = None
_call_counter: int = 0


def enable_prompt_logging(enabled: bool = True) -> None:
    global _enabled
    _enabled = enabled


def is_enabled() -> bool:
    return _enabled


def _session_dir() -> Path:
    global _session_id
    if _session_id is None:
        _session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    directory = LOG_DIR / _session_id
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def _format_answer(response: str) -> str:
    # Recipes are JSON; pretty-print when the provider sent valid JSON
    try:
        return f"```json\n{json.dumps(json.loads(response), indent=2, ensure_ascii=False)}\n```\n"
    except ValueError:
        return f"```\n{response}\n```\n"


def log_exchange(
    *,
    provider: str,
    model: str,
    url: str,
    prompt: str,
    response: str | None = None,
    error: str | None = None,
) -> Path | None:
    """
    Write one prompt/answer pair.

    Args:
        provider: Provider identifier
        model: Model name sent in the request
        url: Endpoint the request went to
        prompt: Full generation prompt
        response: Provider's text content, if the call succeeded
        error: Error message, if it failed

    Returns:
        Path to the log file, or None if logging is disabled or the write failed
    """
    if not _enabled:
        return None

    global _call_counter
    _call_counter += 1
    sections = [
        f"# Recipe request #{_call_counter}: {provider}",
        f"**Time:** {datetime.now().isoformat()}  \n**Model:** {model}  \n**Endpoint:** {url}",
        f"## Prompt\n\n```\n{prompt}\n```",
    ]
    if error:
        sections.append(f"## Error\n\n{error}")
    elif response is not None:
        sections.append("## Answer\n\n" + _format_answer(response))

    # Write failures are logged, never raised
    try:
        filepath = _session_dir() / f"{_call_counter:02d}_{provider}.md"
        filepath.write_text("\n\n---\n\n".join(sections) + "\n", encoding="utf-8")
    except OSError as e:
        logger.warning(f"Could not write prompt log: {e}")
        return None
    return filepath


def get_session_log_dir() -> Path | None:
    """The current session's log directory, if logging is enabled."""
    if not _enabled:
        return None
    try:
        return _session_dir()
    except OSError as e:
        logger.warning(f"Could not create prompt log directory: {e}")
        return None


def reset_session() -> None:
    global _session_id, _call_counter
    _session_id = None
    _call_counter = 0

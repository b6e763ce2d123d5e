# xcollab/presentation.py
"""Page state for the server-rendered hackathon pages.

Holds what the detail page shows between form posts (error string, idea
cards, proposal text, suggested teams), the idea-output normalisation that
turns whatever the model produced into cards, and the per-client proposal
cooldown.
"""

from __future__ import annotations

import json
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from xcollab.config import PROPOSAL_COOLDOWN_SECONDS
from xcollab.errors import (
    DataStoreError,
    LLMConfigError,
    LLMConnectionError,
    LLMResponseError,
    LLMUpstreamError,
)
from xcollab.llm_client.models import Idea, IdeaCard, Team


@dataclass
class PageState:
    error: Optional[str] = None
    ideas: Optional[List[Idea]] = None
    ideas_raw: str = ""
    proposal_input: str = ""
    proposal_output: str = ""
    match_input: str = ""
    teams: Optional[List[Team]] = None
    skills: str = "react, python"
    interests: str = "AI, collaboration"

    def as_context(self) -> Dict[str, Any]:
        return {
            "error": self.error,
            "ideas": self.ideas,
            "ideas_raw": self.ideas_raw,
            "proposal_input": self.proposal_input,
            "proposal_output": self.proposal_output,
            "match_input": self.match_input,
            "teams": self.teams,
            "skills": self.skills,
            "interests": self.interests,
        }


# ---------------------------------------------------------------------
# Idea output -> cards
# ---------------------------------------------------------------------
def _choices_content(obj: Any) -> Optional[str]:
    """Pull choices[0].message.content out of a raw completion object."""
    try:
        content = obj["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content or None


def _to_card(item: Any) -> Idea:
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        try:
            return IdeaCard(**item)
        except ValidationError:
            pass
    return json.dumps(item, ensure_ascii=False, indent=2)


def normalize_ideas(output: Any) -> Tuple[Optional[List[Idea]], str]:
    """
    Turn the idea endpoint `output` into (cards, raw_text).

    cards is None when nothing could be parsed; the page then shows
    raw_text as a single preformatted block.
    """
    raw = ""
    parsed: Any

    if isinstance(output, str):
        raw = output
        try:
            decoded = json.loads(output)
        except ValueError:
            parsed = None
        else:
            parsed = decoded if isinstance(decoded, list) else _choices_content(decoded)
    else:
        parsed = output

    if parsed is None:
        return None, raw

    if isinstance(parsed, str):
        try:
            parsed = json.loads(parsed)
        except ValueError:
            parsed = [parsed]

    if not isinstance(parsed, list):
        parsed = [parsed]

    return [_to_card(item) for item in parsed], raw


def proposal_seed(card: Idea) -> str:
    """Text posted by the "Draft Proposal from this idea" button."""
    if isinstance(card, str):
        return card
    return card.short_desc or card.title or ""


# ---------------------------------------------------------------------
# Errors -> page message
# ---------------------------------------------------------------------
def error_message(exc: Exception, fallback: str) -> str:
    if isinstance(exc, LLMUpstreamError):
        return f"LLM API returned error (status {exc.status_code})"
    if isinstance(exc, (LLMConfigError, LLMConnectionError, LLMResponseError, DataStoreError)):
        return str(exc) or fallback
    return fallback


# ---------------------------------------------------------------------
# Proposal cooldown
# ---------------------------------------------------------------------
class ProposalThrottle:
    """
    One proposal per client every `cooldown` seconds.

    In-process only: a restart (or a second worker) starts from scratch.
    """

    def __init__(self, cooldown: float = PROPOSAL_COOLDOWN_SECONDS) -> None:
        self.cooldown = cooldown
        self._last: Dict[str, float] = {}
        self._lock = threading.Lock()

    @property
    def message(self) -> str:
        return f"Wait at least {self.cooldown:g} seconds before requesting another proposal."

    def allow(self, client_key: str, now: Optional[float] = None) -> bool:
        """Record and allow the request unless the client is still cooling down."""
        now = time.monotonic() if now is None else now
        with self._lock:
            last = self._last.get(client_key)
            if last is not None and now - last < self.cooldown:
                return False
            self._last[client_key] = now
            return True

    def reset(self) -> None:
        with self._lock:
            self._last.clear()


__all__ = [
    "PageState",
    "ProposalThrottle",
    "normalize_ideas",
    "proposal_seed",
    "error_message",
]

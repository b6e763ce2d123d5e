import json
import logging
import re
from typing import Any, List, Optional

from pydantic import ValidationError

from .llm_client import LLMClient
from .models import (
    IdeaRequest,
    MatchRequest,
    MatchResult,
    ProposalRequest,
    Team,
)

logger = logging.getLogger("xcollab.llm_agent")

_llm: Optional[LLMClient] = None


def _get_llm() -> LLMClient:
    global _llm
    if _llm is None:
        _llm = LLMClient()
    return _llm


# ---------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------
IDEA_PROMPT = """
You are an expert hackathon mentor.
Generate exactly 5 creative and feasible project ideas for the hackathon track "{track}".

Each idea must be in valid JSON format inside a JSON array.
Do NOT include explanations, notes, or markdown, only pure JSON.

Each object must look like this:
{{
  "title": "short project title",
  "short_desc": "one-line summary of what it does",
  "stack": ["tech1", "tech2", "tech3"],
  "roadmap": ["step 1", "step 2", "step 3"]
}}

Base your ideas on participant skills: {skills}, and interests: {interests}.
""".strip()

PROPOSAL_PROMPT = """
You are an expert hackathon mentor. Write a detailed but concise project proposal based on this idea:

Idea: {idea}

Include:
1. Problem Statement
2. Proposed Solution
3. Tech Stack
4. Implementation Plan
5. Expected Impact

Team: {team}
""".strip()

MATCH_PROMPT = """
You are an expert hackathon organiser forming balanced teams.
Split the following participants into teams of at most {team_size} members.

Participant user ids: {user_ids}

Answer with pure JSON only, no markdown. Use a JSON array where each object looks like this:
{{
  "members": ["user_id_1", "user_id_2"],
  "reason": "one sentence explaining why these people work well together"
}}
""".strip()


def _build_idea_prompt(req: IdeaRequest) -> str:
    return IDEA_PROMPT.format(
        track=req.track,
        skills=", ".join(req.skills),
        interests=", ".join(req.interests),
    )


def _build_proposal_prompt(req: ProposalRequest) -> str:
    return PROPOSAL_PROMPT.format(idea=req.idea or "", team=json.dumps(req.team))


def _build_match_prompt(req: MatchRequest) -> str:
    return MATCH_PROMPT.format(
        team_size=req.team_size,
        user_ids=", ".join(req.pool_user_ids),
    )


# ---------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------
_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


def parse_llm_json(content: str) -> Any:
    """
    Best-effort decode of a model answer.

    Pure JSON first, then the outermost [...] span (models like to wrap
    arrays in ``` fences or prose), then the text itself.
    """
    content = (content or "").strip()
    try:
        return json.loads(content)
    except ValueError:
        pass

    match = _JSON_ARRAY.search(content)
    if match:
        try:
            return json.loads(match.group(0))
        except ValueError:
            logger.warning("LLM output contains a bracketed span that is not valid JSON")
    return content


def _coerce_teams(parsed: Any) -> Optional[List[Team]]:
    """Return teams when `parsed` looks like a team list, else None."""
    if isinstance(parsed, dict) and isinstance(parsed.get("teams"), list):
        parsed = parsed["teams"]
    if not isinstance(parsed, list):
        return None

    teams: List[Team] = []
    for item in parsed:
        if not isinstance(item, dict):
            continue
        try:
            teams.append(Team(**item))
        except (ValidationError, TypeError) as exc:
            logger.warning(f"Skipping malformed team entry: {exc}")
    return teams


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------
async def generate_ideas(req: IdeaRequest) -> Any:
    """
    Ask for five project ideas; returns the parsed output (list, object or raw text).
    """
    llm = _get_llm()
    content = await llm.chat(
        [{"role": "user", "content": _build_idea_prompt(req)}],
        temperature=0.7,
        max_tokens=800,
    )
    return parse_llm_json(content)


async def draft_proposal(req: ProposalRequest) -> str:
    llm = _get_llm()
    return await llm.chat(
        [{"role": "user", "content": _build_proposal_prompt(req)}],
        temperature=0.7,
        max_tokens=600,
    )


async def match_teams(req: MatchRequest) -> MatchResult:
    llm = _get_llm()
    content = await llm.chat(
        [{"role": "user", "content": _build_match_prompt(req)}],
        temperature=0.5,
        max_tokens=700,
    )

    teams = _coerce_teams(parse_llm_json(content))
    if teams is None:
        logger.warning("LLM team answer is not a JSON team list")
        return MatchResult(teams=[], raw=content)
    return MatchResult(teams=teams)

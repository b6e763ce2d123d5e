# xcollab/routes/page_routes.py
"""Server-rendered pages: hackathon list and hackathon detail.

The detail page posts its three forms (ideas, proposal, team match) back
to itself; every post re-reads the hackathon and re-renders the page with
the new PageState. The AI helpers are called in-process rather than
through the JSON proxy.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from fastapi import APIRouter, Form, Request
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from xcollab.data_client.hackathon_client import get_hackathon, list_hackathons
from xcollab.errors import (
    DataStoreError,
    LLMConfigError,
    LLMConnectionError,
    LLMResponseError,
    LLMUpstreamError,
)
from xcollab.llm_client.llm_agent import draft_proposal, generate_ideas, match_teams
from xcollab.llm_client.models import Hackathon, IdeaRequest, MatchRequest, ProposalRequest
from xcollab.presentation import (
    PageState,
    ProposalThrottle,
    error_message,
    normalize_ideas,
    proposal_seed,
)
from xcollab.utils import TEMPLATES_DIR, format_date, split_csv

logger = logging.getLogger("xcollab.routes.pages")

router = APIRouter(tags=["pages"])

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["date"] = format_date
templates.env.globals["proposal_seed"] = proposal_seed

proposal_throttle = ProposalThrottle()

_AI_ERRORS = (LLMConfigError, LLMConnectionError, LLMResponseError, LLMUpstreamError)


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "anonymous"


Loaded = Tuple[Optional[Hackathon], Optional[str], int]


def _load(hackathon_id: str) -> Loaded:
    """Return (hackathon, error, status) for the detail page."""
    try:
        row = get_hackathon(hackathon_id)
    except DataStoreError as exc:
        logger.error(f"Failed to load hackathon {hackathon_id!r}: {exc}")
        return None, "Failed to load hackathon.", 500
    if row is None:
        return None, None, 404
    try:
        return Hackathon.from_row(row), None, 200
    except ValidationError as exc:
        logger.error(f"Unreadable hackathon row {hackathon_id!r}: {exc}")
        return None, "Failed to load hackathon.", 500


def _render_detail(request: Request, loaded: Loaded, state: PageState):
    hackathon, load_error, status = loaded
    if hackathon is None:
        return templates.TemplateResponse(
            request,
            "hackathon.html",
            {"hackathon": None, "load_error": load_error},
            status_code=status,
        )
    return templates.TemplateResponse(
        request,
        "hackathon.html",
        {"hackathon": hackathon, "load_error": None, **state.as_context()},
    )


# ----------------------------------------------------------------------
# List
# ----------------------------------------------------------------------
@router.get("/")
def index(request: Request):
    try:
        rows = list_hackathons()
    except DataStoreError as exc:
        logger.error(f"Failed to load hackathons: {exc}")
        rows = []

    hackathons = []
    for row in rows:
        try:
            hackathons.append(Hackathon.from_row(row))
        except ValidationError as exc:
            logger.warning(f"Skipping unreadable hackathon row: {exc}")

    return templates.TemplateResponse(request, "index.html", {"hackathons": hackathons})


# ----------------------------------------------------------------------
# Detail + AI forms
#
# The form handlers are async (LLM calls); the Supabase read is blocking,
# so it goes through the threadpool and happens before any LLM call.
# ----------------------------------------------------------------------
@router.get("/hackathon/{hackathon_id}")
def hackathon_page(request: Request, hackathon_id: str):
    return _render_detail(request, _load(hackathon_id), PageState())


@router.post("/hackathon/{hackathon_id}/ideas")
async def hackathon_ideas(
    request: Request,
    hackathon_id: str,
    skills: str = Form("react, python"),
    interests: str = Form("AI, collaboration"),
):
    state = PageState(skills=skills, interests=interests)
    loaded = await run_in_threadpool(_load, hackathon_id)
    hackathon = loaded[0]
    if hackathon is None:
        return _render_detail(request, loaded, state)

    req = IdeaRequest(
        track=hackathon.tracks[0] if hackathon.tracks else "General",
        skills=split_csv(skills),
        interests=split_csv(interests),
    )
    try:
        output = await generate_ideas(req)
    except _AI_ERRORS as exc:
        logger.error(f"[ideas] generation failed for {hackathon_id!r}: {exc}")
        state.error = error_message(exc, "Idea generation failed")
    else:
        state.ideas, state.ideas_raw = normalize_ideas(output)

    return _render_detail(request, loaded, state)


@router.post("/hackathon/{hackathon_id}/proposal")
async def hackathon_proposal(request: Request, hackathon_id: str, idea: str = Form("")):
    state = PageState(proposal_input=idea)
    loaded = await run_in_threadpool(_load, hackathon_id)
    if loaded[0] is None:
        return _render_detail(request, loaded, state)

    if not proposal_throttle.allow(_client_key(request)):
        state.error = proposal_throttle.message
        return _render_detail(request, loaded, state)

    if not idea.strip():
        state.error = "Provide an idea or paste idea text to draft a proposal."
        return _render_detail(request, loaded, state)

    try:
        state.proposal_output = await draft_proposal(ProposalRequest(idea=idea, team=[]))
    except _AI_ERRORS as exc:
        logger.error(f"[proposal] drafting failed for {hackathon_id!r}: {exc}")
        state.error = error_message(exc, "Proposal generation failed")

    return _render_detail(request, loaded, state)


@router.post("/hackathon/{hackathon_id}/match")
async def hackathon_match(request: Request, hackathon_id: str, user_ids: str = Form("")):
    state = PageState(match_input=user_ids)
    loaded = await run_in_threadpool(_load, hackathon_id)
    hackathon = loaded[0]
    if hackathon is None:
        return _render_detail(request, loaded, state)

    if not user_ids.strip():
        state.error = "Enter comma-separated student user_ids."
        return _render_detail(request, loaded, state)
    ids = split_csv(user_ids)
    if not ids:
        state.error = "No valid user ids provided."
        return _render_detail(request, loaded, state)

    try:
        result = await match_teams(MatchRequest(pool_user_ids=ids, team_size=hackathon.max_team_size or 3))
    except _AI_ERRORS as exc:
        logger.error(f"[match] team match failed for {hackathon_id!r}: {exc}")
        state.error = error_message(exc, "Team match failed")
    else:
        state.teams = result.teams

    return _render_detail(request, loaded, state)

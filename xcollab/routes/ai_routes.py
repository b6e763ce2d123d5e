# xcollab/routes/ai_routes.py
"""LLM proxy endpoints.

Each handler builds one fixed prompt from the JSON body, makes one LLM call
and reshapes the answer. Failures propagate as the typed errors from
xcollab.errors; the handlers registered in main.py turn them into JSON.
"""

import logging
from typing import Optional

from fastapi import APIRouter

from xcollab.llm_client.llm_agent import draft_proposal, generate_ideas, match_teams
from xcollab.llm_client.models import IdeaRequest, MatchRequest, ProposalRequest

logger = logging.getLogger("xcollab.routes.ai")

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/idea")
async def idea(req: Optional[IdeaRequest] = None):
    """
    Five project ideas for a track. `output` is parsed JSON when the model
    complied, the raw text otherwise.
    """
    req = req or IdeaRequest()
    logger.info(f"[idea] track={req.track!r} skills={len(req.skills)} interests={len(req.interests)}")
    output = await generate_ideas(req)
    return {"output": output}


@router.post("/proposal")
async def proposal(req: Optional[ProposalRequest] = None):
    req = req or ProposalRequest()
    logger.info(f"[proposal] idea_chars={len(req.idea or '')} team={len(req.team)}")
    text = await draft_proposal(req)
    return {"proposal": text}


@router.post("/match")
async def match(req: Optional[MatchRequest] = None):
    """
    Team suggestions for a pool of user ids. Composition is whatever the
    model proposed.
    """
    req = req or MatchRequest()
    logger.info(f"[match] pool={len(req.pool_user_ids)} team_size={req.team_size}")
    result = await match_teams(req)
    return result.model_dump(exclude_none=True)

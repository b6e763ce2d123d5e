# xcollab/llm_client/__init__.py
from .llm_client import LLMClient
from .llm_agent import draft_proposal, generate_ideas, match_teams

__all__ = ["LLMClient", "generate_ideas", "draft_proposal", "match_teams"]

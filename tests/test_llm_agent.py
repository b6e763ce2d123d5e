from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from xcollab.llm_client.llm_agent import (
    _build_idea_prompt,
    _build_match_prompt,
    _build_proposal_prompt,
    draft_proposal,
    generate_ideas,
    match_teams,
    parse_llm_json,
)
from xcollab.llm_client.models import IdeaRequest, MatchRequest, ProposalRequest

from conftest import completion

IDEAS = [
    {"title": "Carbon Lens", "short_desc": "Estimate CI emissions", "stack": ["python"], "roadmap": ["collect", "ship"]},
    {"title": "Grid Whisper", "short_desc": "Schedule jobs on green hours", "stack": ["go"], "roadmap": ["plan"]},
]


# ---------------------------------------------------------------------
# Parse cascade
# ---------------------------------------------------------------------
def test_parse_pure_json_array():
    assert parse_llm_json(json.dumps(IDEAS)) == IDEAS


def test_parse_json_object_is_returned_as_is():
    assert parse_llm_json('{"ideas": 3}') == {"ideas": 3}


def test_parse_array_wrapped_in_fences_and_prose():
    content = "Here you go:\n```json\n" + json.dumps(IDEAS) + "\n```\nGood luck!"
    assert parse_llm_json(content) == IDEAS


def test_parse_broken_array_falls_back_to_text():
    content = "Ideas: [first idea, second idea]"
    assert parse_llm_json(content) == content


def test_parse_plain_text_is_kept():
    assert parse_llm_json("  1. Build a bot\n2. Build a map  ") == "1. Build a bot\n2. Build a map"


# ---------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------
def test_idea_prompt_mentions_track_skills_and_interests():
    prompt = _build_idea_prompt(IdeaRequest(track="Climate", skills=["react", "python"], interests="AI, maps"))
    assert 'hackathon track "Climate"' in prompt
    assert "skills: react, python" in prompt
    assert "interests: AI, maps" in prompt
    assert '"short_desc"' in prompt


def test_idea_request_defaults_to_general_track():
    assert IdeaRequest().track == "General"
    assert IdeaRequest(track="").track == "General"


def test_proposal_prompt_serialises_team():
    prompt = _build_proposal_prompt(ProposalRequest(idea="Solar map", team=["ana", {"id": 2}]))
    assert "Idea: Solar map" in prompt
    assert 'Team: ["ana", {"id": 2}]' in prompt
    assert "Expected Impact" in prompt


def test_match_prompt_lists_pool_and_size():
    prompt = _build_match_prompt(MatchRequest(poolUserIds=["u1", 2], teamSize=4))
    assert "at most 4 members" in prompt
    assert "u1, 2" in prompt


# ---------------------------------------------------------------------
# Calls through the mocked wire
# ---------------------------------------------------------------------
def test_generate_ideas_parses_array(install_llm):
    seen = install_llm(lambda r: httpx.Response(200, json=completion(json.dumps(IDEAS))))

    output = asyncio.run(generate_ideas(IdeaRequest(track="Climate")))

    assert output == IDEAS
    assert seen[0]["temperature"] == 0.7
    assert seen[0]["max_tokens"] == 800


def test_draft_proposal_returns_text(install_llm):
    seen = install_llm(lambda r: httpx.Response(200, json=completion("## Problem Statement\nToo much CO2")))

    text = asyncio.run(draft_proposal(ProposalRequest(idea="Carbon Lens")))

    assert text.startswith("## Problem Statement")
    assert seen[0]["max_tokens"] == 600


@pytest.mark.parametrize(
    "content",
    [
        json.dumps([{"members": ["u1", 2], "reason": "mixed skills"}, "stray text"]),
        json.dumps({"teams": [{"members": ["u1", 2], "reason": "mixed skills"}]}),
        "Sure!\n[{\"members\": [\"u1\", 2], \"reason\": \"mixed skills\"}]",
    ],
)
def test_match_teams_accepts_list_wrapped_or_fenced(install_llm, content):
    install_llm(lambda r: httpx.Response(200, json=completion(content)))

    result = asyncio.run(match_teams(MatchRequest(poolUserIds=["u1", "2"], teamSize=2)))

    assert result.raw is None
    assert [t.members for t in result.teams] == [["u1", "2"]]
    assert result.teams[0].reason == "mixed skills"


def test_match_teams_keeps_raw_text_when_unparsable(install_llm):
    install_llm(lambda r: httpx.Response(200, json=completion("Team A: u1 and u2")))

    result = asyncio.run(match_teams(MatchRequest(poolUserIds=["u1", "u2"])))

    assert result.teams == []
    assert result.raw == "Team A: u1 and u2"


def test_match_teams_skips_malformed_entries(install_llm):
    content = json.dumps([{"members": "not-a-list"}, {"members": ["u3"]}])
    install_llm(lambda r: httpx.Response(200, json=completion(content)))

    result = asyncio.run(match_teams(MatchRequest(poolUserIds=["u3"])))

    assert [t.members for t in result.teams] == [["u3"]]

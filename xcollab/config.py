# xcollab/config.py
"""
Central configuration for the XCollab service.

Design goals:
- Always load .env from the repository root in a deterministic way
- Support switching LLM providers (mock / openai) via LLM_PROVIDER
- Keep secrets out of logs (provide "safe" diagnostics)
- Avoid URL confusion: base URL vs endpoint path (OpenAI returns 404 if misused)
"""

from __future__ import annotations

import os
from pathlib import Path
from dotenv import load_dotenv

from xcollab.errors import LLMConfigError


# ---------------------------------------------------------------------
# 1) Repo root discovery + .env loading
# ---------------------------------------------------------------------
def _find_repo_root(start: Path) -> Path:
    """
    Walk upwards until we find a folder that looks like the repository root.
    Markers: .env, pyproject.toml
    """
    markers = (".env", "pyproject.toml")
    for p in [start, *start.parents]:
        if any((p / m).exists() for m in markers):
            return p
    # Fallback: assume xcollab/ is directly under repo root
    return start.parents[1]


REPO_ROOT = _find_repo_root(Path(__file__).resolve().parent)
load_dotenv(dotenv_path=REPO_ROOT / ".env", override=False)


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key, "").strip()
    return int(raw) if raw else default


# ---------------------------------------------------------------------
# 2) LLM provider switch
# ---------------------------------------------------------------------
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai").strip().lower()
# Allowed: openai | mock
if LLM_PROVIDER not in {"openai", "mock"}:
    raise RuntimeError(
        f"Invalid LLM_PROVIDER='{LLM_PROVIDER}'. Expected openai|mock."
    )

LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini").strip()
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))


# ---------------------------------------------------------------------
# 3) OpenAI-compatible endpoint
#
# IMPORTANT:
# - OPENAI_BASE_URL must be the BASE (e.g. https://api.openai.com/v1)
# - OPENAI_CHAT_PATH must be the PATH (e.g. /chat/completions)
# ---------------------------------------------------------------------
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "").strip()
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").strip()
OPENAI_CHAT_PATH = os.getenv("OPENAI_CHAT_PATH", "/chat/completions").strip()

if OPENAI_CHAT_PATH and not OPENAI_CHAT_PATH.startswith("/"):
    OPENAI_CHAT_PATH = f"/{OPENAI_CHAT_PATH}"


# ---------------------------------------------------------------------
# 4) Supabase (hackathon catalogue, read-only)
# ---------------------------------------------------------------------
SUPABASE_URL = os.getenv("SUPABASE_URL", "").strip()
SUPABASE_KEY = os.getenv("SUPABASE_KEY", "").strip()
# Service key bypasses RLS; preferred when present
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY", "").strip()
HACKATHONS_TABLE = os.getenv("HACKATHONS_TABLE", "hackathons").strip() or "hackathons"
HACKATHON_LIST_LIMIT = _env_int("HACKATHON_LIST_LIMIT", 5)


# ---------------------------------------------------------------------
# 5) UI behaviour + logging
# ---------------------------------------------------------------------
PROPOSAL_COOLDOWN_SECONDS = float(os.getenv("PROPOSAL_COOLDOWN_SECONDS", "25"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"


# ---------------------------------------------------------------------
# 6) Provider validation helpers (used by LLMClient)
# ---------------------------------------------------------------------
def validate_llm_config(provider: str = LLM_PROVIDER, api_key: str = OPENAI_API_KEY) -> None:
    """
    Validate required settings for the selected provider.
    - mock: no requirements
    - openai: requires OPENAI_API_KEY and OPENAI_BASE_URL
    """
    if provider == "openai":
        if not api_key:
            raise LLMConfigError("Missing OPENAI_API_KEY on server")
        if not OPENAI_BASE_URL:
            raise LLMConfigError("OPENAI_BASE_URL is empty (LLM_PROVIDER=openai).")


def config_diag_safe() -> dict:
    """
    Safe diagnostics (no secrets).
    Served by /api/diag/config.
    """
    return {
        "repo_root": str(REPO_ROOT),
        "llm_provider": LLM_PROVIDER,
        "llm_model": LLM_MODEL,
        "llm_timeout_seconds": LLM_TIMEOUT_SECONDS,
        "openai_base_url": OPENAI_BASE_URL if LLM_PROVIDER == "openai" else None,
        "openai_chat_path": OPENAI_CHAT_PATH if LLM_PROVIDER == "openai" else None,
        "has_openai_key": bool(OPENAI_API_KEY),
        "supabase_url": SUPABASE_URL or None,
        "has_supabase_key": bool(SUPABASE_KEY),
        "has_supabase_service_key": bool(SUPABASE_SERVICE_KEY),
        "hackathons_table": HACKATHONS_TABLE,
        "hackathon_list_limit": HACKATHON_LIST_LIMIT,
        "proposal_cooldown_seconds": PROPOSAL_COOLDOWN_SECONDS,
    }

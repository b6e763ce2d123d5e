from fastapi import APIRouter

from xcollab.config import config_diag_safe
from xcollab.llm_client.llm_client import LLMClient

router = APIRouter(tags=["diag"])


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/api/diag/config")
def diag_config():
    return config_diag_safe()


@router.get("/api/diag/llm")
async def diag_llm():
    llm = LLMClient()
    content = await llm.chat(
        [
            {"role": "system", "content": "You are a diagnostic bot."},
            {"role": "user", "content": "Reply with: OK"},
        ],
        max_tokens=5,
    )
    return {"ok": True, "provider": llm.provider, "reply": content[:200]}

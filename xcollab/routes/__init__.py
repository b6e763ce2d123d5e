"""Router registry.

Single source of truth for FastAPI route inclusion.

Guidelines:
- Keep this list deterministic and explicit.
- Each router must be mounted exactly once (no duplicates).
"""

from __future__ import annotations

from xcollab.routes.ai_routes import router as ai_router
from xcollab.routes.diag_routes import router as diag_router
from xcollab.routes.hackathon_routes import router as hackathon_router
from xcollab.routes.page_routes import router as page_router

# Deterministic inclusion order:
# 1) Diagnostics
# 2) JSON API (data pass-through, LLM proxies)
# 3) HTML pages
routers = [
    diag_router,
    hackathon_router,
    ai_router,
    page_router,
]

__all__ = ["routers"]

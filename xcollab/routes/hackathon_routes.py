# xcollab/routes/hackathon_routes.py
"""Pass-through reads of the hackathon table.

Rows go out exactly as the data store returns them. DataStoreError is
mapped to {"ok": false, "error": ...} by the handler in main.py.
"""

from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from xcollab.data_client.hackathon_client import get_hackathon, list_hackathons

router = APIRouter(prefix="/api", tags=["hackathons"])


@router.get("/hackathons")
@router.get("/test-supabase")
def hackathon_rows(limit: Optional[int] = Query(None, ge=1, le=100)):
    rows = list_hackathons(limit)
    return {"ok": True, "rows": rows}


@router.get("/hackathons/{hackathon_id}")
def hackathon_detail(hackathon_id: str):
    if not hackathon_id.strip():
        return JSONResponse(status_code=400, content={"error": "Missing id"})

    row = get_hackathon(hackathon_id)
    if row is None:
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return {"ok": True, "hackathon": row}

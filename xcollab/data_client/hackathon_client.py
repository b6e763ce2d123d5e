# xcollab/data_client/hackathon_client.py
"""Hackathon catalogue reads.

Two queries only, both select-only:
- list the first N hackathons
- fetch one hackathon by id

Rows are returned verbatim (dicts as PostgREST sends them); callers that
need typed access wrap them with `Hackathon.from_row`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from xcollab.config import HACKATHON_LIST_LIMIT, HACKATHONS_TABLE
from xcollab.data_client.supabase_client import get_supabase
from xcollab.errors import DataStoreError
from xcollab.metrics import DB_LATENCY, DB_QUERIES

logger = logging.getLogger("xcollab.data_client")


def _run(query_name: str, build) -> List[Dict[str, Any]]:
    """Execute a query builder callback with metrics and uniform errors."""
    with DB_LATENCY.labels(query=query_name).time():
        try:
            response = build(get_supabase().table(HACKATHONS_TABLE)).execute()
        except DataStoreError:
            DB_QUERIES.labels(query=query_name, outcome="failure").inc()
            raise
        except Exception as exc:
            DB_QUERIES.labels(query=query_name, outcome="failure").inc()
            logger.error(f"[{query_name}] query on '{HACKATHONS_TABLE}' failed: {exc}")
            raise DataStoreError(getattr(exc, "message", None) or str(exc))

    DB_QUERIES.labels(query=query_name, outcome="success").inc()
    rows = getattr(response, "data", None)
    return [r for r in rows if isinstance(r, dict)] if isinstance(rows, list) else []


def list_hackathons(limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Public API: first `limit` hackathons (default HACKATHON_LIST_LIMIT).
    """
    n = limit if limit is not None else HACKATHON_LIST_LIMIT
    return _run("list_hackathons", lambda t: t.select("*").limit(n))


def get_hackathon(hackathon_id: str) -> Optional[Dict[str, Any]]:
    """
    Public API: a single hackathon row, or None when the id is unknown.
    """
    hackathon_id = (hackathon_id or "").strip()
    if not hackathon_id:
        return None

    rows = _run("get_hackathon", lambda t: t.select("*").eq("id", hackathon_id).limit(1))
    return rows[0] if rows else None

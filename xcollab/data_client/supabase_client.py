# xcollab/data_client/supabase_client.py
"""Supabase connection shared by the read-only data clients.

The client is created lazily so the service (and its tests) can start
without credentials; the first query reports what is missing.
"""

from __future__ import annotations

import logging
from typing import Optional

from supabase import Client, create_client

from xcollab.config import SUPABASE_KEY, SUPABASE_SERVICE_KEY, SUPABASE_URL
from xcollab.errors import DataStoreError

logger = logging.getLogger("xcollab.data_client")

_client: Optional[Client] = None


def connect_to_supabase() -> Client:
    """Connect to Supabase, preferring the service key when configured."""
    if not SUPABASE_URL:
        raise DataStoreError("Missing SUPABASE_URL on server")

    key_to_use = SUPABASE_SERVICE_KEY or SUPABASE_KEY
    if not key_to_use:
        raise DataStoreError("Missing SUPABASE_KEY or SUPABASE_SERVICE_KEY on server")

    if not SUPABASE_SERVICE_KEY:
        logger.info("Using anon key; rows may be filtered by Row Level Security policies")

    try:
        return create_client(SUPABASE_URL, key_to_use)
    except Exception as exc:
        logger.error(f"Supabase client creation failed: {exc}")
        raise DataStoreError(f"Supabase client creation failed: {exc}")


def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = connect_to_supabase()
    return _client

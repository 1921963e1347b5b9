"""wiki_shared.aws_clients — Lazy-singleton DynamoDB client.

Creates the boto3 DynamoDB client on first call and caches it for the
lifetime of the process. boto3 low-level clients are safe to share across
threads, so one handle serves every concurrent request.

Region and endpoint come from the calling Lambda's configuration; this
module reads no environment of its own.
"""

from __future__ import annotations

from typing import Optional

import boto3
from botocore.config import Config

# ---------------------------------------------------------------------------
# Client singleton
# ---------------------------------------------------------------------------

_ddb = None


def _get_ddb(region: str, endpoint_url: Optional[str] = None):
    """Get (or create) the DynamoDB client singleton.

    ``endpoint_url`` points the client at DynamoDB Local when set.
    """
    global _ddb
    if _ddb is None:
        kwargs = {
            "region_name": region,
            "config": Config(retries={"max_attempts": 3, "mode": "standard"}),
        }
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        _ddb = boto3.client("dynamodb", **kwargs)
    return _ddb


def _reset_ddb() -> None:
    """Drop the cached client so the next call rebuilds it."""
    global _ddb
    _ddb = None

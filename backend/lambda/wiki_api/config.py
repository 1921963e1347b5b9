"""config.py — Central configuration — environment variables, constants, logging.

Environment variables:
    WIKI_TABLE             default: wiki
    WIKI_OWNER_INDEX       default: owner
    DYNAMODB_REGION        default: ap-northeast-1
    DYNAMODB_ENDPOINT_URL  optional, DynamoDB Local endpoint
"""
from __future__ import annotations

import logging
import os

__all__ = [
    "COMPONENT_NAME",
    "DYNAMODB_ENDPOINT_URL",
    "DYNAMODB_REGION",
    "PATCHABLE_FIELDS",
    "WIKI_OWNER_INDEX",
    "WIKI_TABLE",
    "logger",
]

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

WIKI_TABLE = os.environ.get("WIKI_TABLE", "wiki")
WIKI_OWNER_INDEX = os.environ.get("WIKI_OWNER_INDEX", "owner")
DYNAMODB_REGION = os.environ.get("DYNAMODB_REGION", "ap-northeast-1")
DYNAMODB_ENDPOINT_URL = os.environ.get("DYNAMODB_ENDPOINT_URL", "")

COMPONENT_NAME = "wiki_api"

# id is the partition key and owner is never rewritten.
PATCHABLE_FIELDS = ("title", "text", "category")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logger = logging.getLogger()
logger.setLevel(logging.INFO)

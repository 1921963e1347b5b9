"""persistence.py — Wiki DynamoDB persistence helpers.

The only module that speaks DynamoDB: key addressing, the owner index, and
key-condition / filter / update expression syntax. Every function takes the
shared DynamoDB client as its first argument and keeps no state.

Table layout:
    partition key  id
    GSI            owner (hash key: owner)
"""
from __future__ import annotations

import uuid
from typing import Any, Dict, List, Mapping, Optional

from botocore.exceptions import BotoCoreError, ClientError

from config import PATCHABLE_FIELDS, WIKI_OWNER_INDEX, WIKI_TABLE, logger
from errors import StoreQueryError, StoreUnavailable, StoreWriteError
from models import WikiDraft, WikiRecord
from wiki_shared.serialization import _deserialize, _serialize

__all__ = [
    "_build_update_expression",
    "_create_wiki",
    "_delete_wiki",
    "_get_wiki",
    "_new_wiki_id",
    "_query_by_owner",
    "_update_wiki",
    "_wiki_key",
]

# Client error codes that mean "try again later" rather than "bad request".
_UNAVAILABLE_CODES = {
    "InternalServerError",
    "LimitExceededException",
    "ProvisionedThroughputExceededException",
    "RequestLimitExceeded",
    "ServiceUnavailable",
    "ThrottlingException",
}

# ---------------------------------------------------------------------------
# Key / expression helpers
# ---------------------------------------------------------------------------


def _new_wiki_id() -> str:
    return uuid.uuid4().hex


def _wiki_key(wiki_id: str) -> Dict[str, Any]:
    return {"id": _serialize(wiki_id)}


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code") or "")


def _is_conditional_check_failed(exc: Exception) -> bool:
    if not isinstance(exc, ClientError):
        return False
    return _error_code(exc) == "ConditionalCheckFailedException"


def _store_fault(exc: Exception, action: str, fault_cls: type) -> Exception:
    """Map a botocore exception onto the store fault taxonomy."""
    if isinstance(exc, BotoCoreError):
        return StoreUnavailable(f"{action} failed: {exc}")
    if isinstance(exc, ClientError) and _error_code(exc) in _UNAVAILABLE_CODES:
        return StoreUnavailable(f"{action} failed: {_error_code(exc)}")
    return fault_cls(f"{action} failed: {exc}")


def _build_update_expression(patch: Mapping[str, str]) -> Dict[str, Any]:
    """Build UpdateItem expression parameters from a field -> value patch.

    One ``SET #field = :field`` clause per patch key. Each clause targets a
    distinct attribute, so patch ordering has no effect on the stored item.
    """
    clauses: List[str] = []
    names: Dict[str, str] = {"#id": "id"}
    values: Dict[str, Any] = {}
    for field, value in patch.items():
        if field not in PATCHABLE_FIELDS:
            raise ValueError(f"Field '{field}' is not patchable")
        clauses.append(f"#{field} = :{field}")
        names[f"#{field}"] = field
        values[f":{field}"] = _serialize(value)
    return {
        "UpdateExpression": "SET " + ", ".join(clauses),
        "ConditionExpression": "attribute_exists(#id)",
        "ExpressionAttributeNames": names,
        "ExpressionAttributeValues": values,
    }


# ---------------------------------------------------------------------------
# Store operations
# ---------------------------------------------------------------------------


def _query_by_owner(ddb, owner: str, category: Optional[str] = None) -> List[WikiRecord]:
    """Return the owner's records in index order, optionally filtered by category.

    The category predicate is a FilterExpression, applied by DynamoDB after
    the index lookup; it trims the result, not the read capacity consumed.
    """
    if not owner:
        # An empty string is not a valid index key value, so nothing can match.
        return []
    params: Dict[str, Any] = {
        "TableName": WIKI_TABLE,
        "IndexName": WIKI_OWNER_INDEX,
        "KeyConditionExpression": "#owner = :owner",
        "ExpressionAttributeNames": {"#owner": "owner"},
        "ExpressionAttributeValues": {":owner": _serialize(owner)},
    }
    if category is not None:
        params["FilterExpression"] = "#category = :category"
        params["ExpressionAttributeNames"]["#category"] = "category"
        params["ExpressionAttributeValues"][":category"] = _serialize(category)

    out: List[WikiRecord] = []
    while True:
        try:
            resp = ddb.query(**params)
        except (BotoCoreError, ClientError) as exc:
            logger.error("query failed (owner=%s category=%s): %s", owner, category, exc)
            raise _store_fault(exc, "Query", StoreQueryError) from exc
        out.extend(WikiRecord.from_item(_deserialize(item)) for item in resp.get("Items", []))
        lek = resp.get("LastEvaluatedKey")
        if not lek:
            break
        params["ExclusiveStartKey"] = lek
    return out


def _create_wiki(ddb, draft: WikiDraft) -> WikiRecord:
    """Assign a fresh id and write the record."""
    record = WikiRecord.from_draft(_new_wiki_id(), draft)
    try:
        ddb.put_item(
            TableName=WIKI_TABLE,
            Item={k: _serialize(v) for k, v in record.to_item().items()},
        )
    except (BotoCoreError, ClientError) as exc:
        logger.error("put_item failed (owner=%s): %s", draft.owner, exc)
        raise _store_fault(exc, "PutItem", StoreWriteError) from exc
    logger.info("wiki created: %s (owner=%s)", record.id, record.owner)
    return record


def _get_wiki(ddb, wiki_id: str) -> Optional[WikiRecord]:
    if not wiki_id:
        return None
    try:
        resp = ddb.get_item(TableName=WIKI_TABLE, Key=_wiki_key(wiki_id), ConsistentRead=True)
    except (BotoCoreError, ClientError) as exc:
        logger.error("get_item failed (id=%s): %s", wiki_id, exc)
        raise _store_fault(exc, "GetItem", StoreQueryError) from exc
    raw = resp.get("Item")
    if not raw:
        return None
    return WikiRecord.from_item(_deserialize(raw))


def _update_wiki(ddb, wiki_id: str, patch: Mapping[str, str]) -> Optional[WikiRecord]:
    """Apply a field-level patch and return the post-update record.

    Returns None when no item has this id, including the empty id, which
    DynamoDB cannot hold as a key. An empty patch issues a consistent read
    and returns the current state unchanged.
    """
    if not wiki_id:
        return None
    if not patch:
        return _get_wiki(ddb, wiki_id)

    try:
        resp = ddb.update_item(
            TableName=WIKI_TABLE,
            Key=_wiki_key(wiki_id),
            ReturnValues="ALL_NEW",
            **_build_update_expression(patch),
        )
    except ClientError as exc:
        if _is_conditional_check_failed(exc):
            logger.info("update skipped, wiki not found: %s", wiki_id)
            return None
        logger.error("update_item failed (id=%s): %s", wiki_id, exc)
        raise _store_fault(exc, "UpdateItem", StoreWriteError) from exc
    except BotoCoreError as exc:
        logger.error("update_item failed (id=%s): %s", wiki_id, exc)
        raise _store_fault(exc, "UpdateItem", StoreWriteError) from exc

    logger.info("wiki updated: %s fields=%s", wiki_id, sorted(patch))
    return WikiRecord.from_item(_deserialize(resp.get("Attributes") or {}))


def _delete_wiki(ddb, wiki_id: str) -> None:
    """Delete by id. Deleting an id that does not exist is not an error."""
    if not wiki_id:
        return
    try:
        ddb.delete_item(TableName=WIKI_TABLE, Key=_wiki_key(wiki_id))
    except (BotoCoreError, ClientError) as exc:
        logger.error("delete_item failed (id=%s): %s", wiki_id, exc)
        raise _store_fault(exc, "DeleteItem", StoreWriteError) from exc
    logger.info("wiki deleted: %s", wiki_id)

"""resolvers.py — The four wiki API operations.

Each resolver validates the shape of its arguments, delegates to the
persistence layer, and projects the stored record onto ``PublicWiki``.
Validation faults raise ``RequestShapeError`` before the store is touched;
store faults propagate unchanged.

Operations:
    wiki(owner, category?)                         -> [PublicWiki]
    createWiki(input{title, owner, text, category}) -> PublicWiki
    updateWiki(input{id, title?, text?, category?}) -> PublicWiki | None
    deleteWiki(id)                                  -> DeleteWikiResult
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from config import PATCHABLE_FIELDS
from errors import RequestShapeError
from models import DeleteWikiResult, PublicWiki, WikiDraft
from persistence import _create_wiki, _delete_wiki, _query_by_owner, _update_wiki

__all__ = [
    "OPERATIONS",
    "resolve_create_wiki",
    "resolve_delete_wiki",
    "resolve_update_wiki",
    "resolve_wiki",
]

# ---------------------------------------------------------------------------
# Argument validation
# ---------------------------------------------------------------------------


def _as_object(args: Any, name: str) -> Dict[str, Any]:
    if not isinstance(args, dict):
        raise RequestShapeError(f"'{name}' must be an object.", field=name)
    return args


def _required_str(args: Dict[str, Any], field: str) -> str:
    value = args.get(field)
    if value is None:
        raise RequestShapeError(f"Field '{field}' is required.", field=field)
    if not isinstance(value, str):
        raise RequestShapeError(f"Field '{field}' must be a string.", field=field)
    return value


def _required_key(args: Dict[str, Any], field: str) -> str:
    # DynamoDB rejects the empty string as a key attribute value.
    value = _required_str(args, field)
    if not value:
        raise RequestShapeError(f"Field '{field}' must not be empty.", field=field)
    return value


def _optional_str(args: Dict[str, Any], field: str) -> Optional[str]:
    # null is read as "not supplied"; there is no way to clear a field.
    value = args.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise RequestShapeError(f"Field '{field}' must be a string.", field=field)
    return value


def _reject_unknown(args: Dict[str, Any], allowed: tuple, name: str) -> None:
    unknown = sorted(set(args) - set(allowed))
    if unknown:
        raise RequestShapeError(
            f"Unknown field(s) in '{name}': {', '.join(unknown)}.",
            field=unknown[0],
        )


# ---------------------------------------------------------------------------
# Resolvers
# ---------------------------------------------------------------------------


def resolve_wiki(ddb, args: Dict[str, Any]) -> List[PublicWiki]:
    """Records owned by ``owner``, optionally only those in ``category``.

    No matches is an empty list, not an error.
    """
    args = _as_object(args, "arguments")
    _reject_unknown(args, ("owner", "category"), "arguments")
    owner = _required_str(args, "owner")
    category = _optional_str(args, "category")
    records = _query_by_owner(ddb, owner, category)
    return [PublicWiki.from_record(r) for r in records]


def resolve_create_wiki(ddb, args: Dict[str, Any]) -> PublicWiki:
    args = _as_object(args, "arguments")
    payload = _as_object(args.get("input"), "input")
    _reject_unknown(payload, ("title", "owner", "text", "category"), "input")
    draft = WikiDraft(
        title=_required_str(payload, "title"),
        owner=_required_key(payload, "owner"),
        text=_required_str(payload, "text"),
        category=_required_str(payload, "category"),
    )
    return PublicWiki.from_record(_create_wiki(ddb, draft))


def resolve_update_wiki(ddb, args: Dict[str, Any]) -> Optional[PublicWiki]:
    """Patch only the fields the caller supplied.

    Returns None when ``id`` does not resolve to a record.
    """
    args = _as_object(args, "arguments")
    payload = _as_object(args.get("input"), "input")
    _reject_unknown(payload, ("id",) + PATCHABLE_FIELDS, "input")
    wiki_id = _required_str(payload, "id")
    patch: Dict[str, str] = {}
    for field in PATCHABLE_FIELDS:
        value = _optional_str(payload, field)
        if value is not None:
            patch[field] = value
    record = _update_wiki(ddb, wiki_id, patch)
    if record is None:
        return None
    return PublicWiki.from_record(record)


def resolve_delete_wiki(ddb, args: Dict[str, Any]) -> DeleteWikiResult:
    args = _as_object(args, "arguments")
    _reject_unknown(args, ("id",), "arguments")
    wiki_id = _required_str(args, "id")
    _delete_wiki(ddb, wiki_id)
    return DeleteWikiResult(success=True)


# Operation name -> (resolver, argument catalog). Argument names map to
# True when required.
OPERATIONS: Dict[str, tuple[Callable[..., Any], Dict[str, Any]]] = {
    "wiki": (
        resolve_wiki,
        {"owner": True, "category": False},
    ),
    "createWiki": (
        resolve_create_wiki,
        {"input": {"title": True, "owner": True, "text": True, "category": True}},
    ),
    "updateWiki": (
        resolve_update_wiki,
        {"input": {"id": True, "title": False, "text": False, "category": False}},
    ),
    "deleteWiki": (
        resolve_delete_wiki,
        {"id": True},
    ),
}

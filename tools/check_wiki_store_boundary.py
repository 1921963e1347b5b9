#!/usr/bin/env python3
"""Hard gate: only the persistence module may issue DynamoDB calls.

Scans every non-test module of backend/lambda/wiki_api and fails if a module
other than persistence.py calls a DynamoDB primitive (query, put_item,
update_item, ...). Resolvers and the handler must go through persistence so
key, index and expression syntax stay in one place.
"""

from __future__ import annotations

import ast
import pathlib
import sys
from typing import List, Optional


REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
WIKI_API_DIR = REPO_ROOT / "backend" / "lambda" / "wiki_api"
ALLOWED_MODULES = {"persistence.py"}
DYNAMODB_CALLS = {
    "batch_get_item",
    "batch_write_item",
    "delete_item",
    "get_item",
    "put_item",
    "query",
    "scan",
    "transact_write_items",
    "update_item",
}


def _call_name(node: ast.Call) -> str:
    fn = node.func
    if isinstance(fn, ast.Name):
        return fn.id
    if isinstance(fn, ast.Attribute):
        return fn.attr
    return ""


def find_violations(source_dir: pathlib.Path) -> List[str]:
    violations: List[str] = []
    for path in sorted(source_dir.glob("*.py")):
        if path.name in ALLOWED_MODULES or path.name.startswith("test_"):
            continue
        src = path.read_text(encoding="utf-8")
        tree = ast.parse(src, filename=str(path))
        lines = src.splitlines()
        for node in ast.walk(tree):
            if not isinstance(node, ast.Call):
                continue
            call_name = _call_name(node)
            if call_name in DYNAMODB_CALLS:
                lineno = getattr(node, "lineno", 0)
                code_line = lines[lineno - 1].strip() if 0 < lineno <= len(lines) else ""
                violations.append(f"{path}:{lineno} uses DynamoDB call '{call_name}': {code_line}")
    return violations


def main(source_dir: Optional[pathlib.Path] = None) -> int:
    violations = find_violations(source_dir or WIKI_API_DIR)
    if violations:
        print("[ERROR] wiki store boundary violation(s) detected:")
        for v in violations:
            print(f"  - {v}")
        print("[ERROR] Route DynamoDB access through persistence.py.")
        return 1

    print("[OK] wiki store boundary guard passed (DynamoDB calls confined to persistence.py).")
    return 0


if __name__ == "__main__":
    sys.exit(main())

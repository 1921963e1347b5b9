#!/usr/bin/env python3
"""Serve the wiki Lambda handler over plain HTTP for local development.

Each HTTP request is converted into an API Gateway v2 event and passed to
``lambda_handler``; the Lambda response is written back verbatim. Point it
at DynamoDB Local with --endpoint-url (or DYNAMODB_ENDPOINT_URL).

Usage:
    python3 tools/wiki_local_server.py --endpoint-url http://localhost:8001
"""

from __future__ import annotations

import argparse
import os
import pathlib
import sys
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict


REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
WIKI_API_DIR = REPO_ROOT / "backend" / "lambda" / "wiki_api"
SHARED_LAYER_DIR = REPO_ROOT / "backend" / "lambda" / "shared_layer" / "python"


def _load_handler():
    for path in (SHARED_LAYER_DIR, WIKI_API_DIR):
        if str(path) not in sys.path:
            sys.path.insert(0, str(path))
    import lambda_function

    return lambda_function.lambda_handler


def build_event(method: str, path: str, headers: Dict[str, str], body: bytes) -> Dict[str, Any]:
    """Translate a raw HTTP request into an API Gateway v2 proxy event."""
    raw_path, _, raw_query = path.partition("?")
    return {
        "version": "2.0",
        "rawPath": raw_path,
        "rawQueryString": raw_query,
        "headers": {k.lower(): v for k, v in headers.items()},
        "requestContext": {"http": {"method": method.upper(), "path": raw_path}},
        "body": body.decode("utf-8") if body else None,
        "isBase64Encoded": False,
    }


def make_request_handler(handler):
    class WikiRequestHandler(BaseHTTPRequestHandler):
        def _relay(self) -> None:
            length = int(self.headers.get("Content-Length") or 0)
            body = self.rfile.read(length) if length else b""
            event = build_event(self.command, self.path, dict(self.headers.items()), body)
            resp = handler(event, None)
            payload = (resp.get("body") or "").encode("utf-8")
            self.send_response(int(resp.get("statusCode", 500)))
            for key, value in (resp.get("headers") or {}).items():
                self.send_header(key, value)
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            if payload:
                self.wfile.write(payload)

        do_GET = _relay
        do_POST = _relay
        do_OPTIONS = _relay
        do_PUT = _relay
        do_DELETE = _relay

    return WikiRequestHandler


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run the wiki API locally.")
    parser.add_argument("--host", default=os.environ.get("WIKI_LOCAL_HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.environ.get("WIKI_LOCAL_PORT", "8000")))
    parser.add_argument(
        "--endpoint-url",
        default=os.environ.get("DYNAMODB_ENDPOINT_URL", "http://localhost:8001"),
        help="DynamoDB endpoint (default: DynamoDB Local on port 8001).",
    )
    parser.add_argument("--region", default=os.environ.get("DYNAMODB_REGION", "ap-northeast-1"))
    parser.add_argument("--table", default=os.environ.get("WIKI_TABLE", "wiki"))
    args = parser.parse_args(argv)

    # config.py reads these at import time.
    os.environ["DYNAMODB_ENDPOINT_URL"] = args.endpoint_url
    os.environ["DYNAMODB_REGION"] = args.region
    os.environ["WIKI_TABLE"] = args.table

    server = ThreadingHTTPServer((args.host, args.port), make_request_handler(_load_handler()))
    print(f"[INFO] wiki API listening on {args.host}:{args.port} (dynamodb={args.endpoint_url})")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
    return 0


if __name__ == "__main__":
    sys.exit(main())

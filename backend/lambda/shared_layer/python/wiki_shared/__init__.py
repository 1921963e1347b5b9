"""wiki_shared — Shared utilities for the wiki Lambda functions.

Provides:
    - DynamoDB client singleton (optional DynamoDB Local endpoint)
    - HTTP response helpers with CORS
    - DynamoDB serialization/deserialization
    - Structured observability log lines
"""

__version__ = "1.0.0"

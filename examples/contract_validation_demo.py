# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Contract Validation Demo: Rejecting Bad Requests Before They Land.

This demo loads a small contract and runs a handful of requests through the
validator, one per failure kind, to show the diagnostic each one produces.

Run with:
    python examples/contract_validation_demo.py
"""

import os
import tempfile

from reqcheck import HttpRequest, load_validator

CONTRACT = """
metadata:
  name: orders-demo
default_media_types: [application/json]
routes:
  /orders:
    get:
      query:
        status: {required: true, enum: [open, shipped, cancelled]}
        limit: {type: integer, minimum: 1, maximum: 100}
    post:
      body:
        application/json:
          type: object
          properties:
            sku: {type: string, pattern: "^[A-Z]{3}-[0-9]{4}$"}
            quantity: {type: integer, minimum: 1}
          required: [sku, quantity]
      responses:
        201: [application/json]
"""

JSON_HEADERS = {"Accept": "application/json", "Content-Type": "application/json"}

SCENARIOS = [
    ("Conforming request", HttpRequest.from_url("GET", "/orders?status=open&limit=10", headers=JSON_HEADERS)),
    ("No Accept header", HttpRequest.from_url("GET", "/orders?status=open")),
    ("Missing required parameter", HttpRequest.from_url("GET", "/orders?limit=10", headers=JSON_HEADERS)),
    ("Parameter out of range", HttpRequest.from_url("GET", "/orders?status=open&limit=500", headers=JSON_HEADERS)),
    ("Malformed JSON body", HttpRequest("POST", "/orders", headers=JSON_HEADERS, body="{sku: ABC-1234")),
    ("Body violates schema", HttpRequest("POST", "/orders", headers=JSON_HEADERS, body='{"sku": "abc", "quantity": 0}')),
    ("GET ignores the body", HttpRequest("GET", "/orders", headers=JSON_HEADERS, query="status=open", body="???")),
]


def main():
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write(CONTRACT)
        contract_path = f.name

    try:
        validator = load_validator(contract_path)
        for title, request in SCENARIOS:
            print("\n" + "=" * 70)
            print(f"{title}: {request!r}")
            print("=" * 70)
            outcome = validator.check(request)
            if outcome.ok:
                print("  Result: ACCEPTED")
            else:
                print(f"  Result: REJECTED ({outcome.kind})")
                print(f"  Reason: {outcome.failure.message}")
    finally:
        os.unlink(contract_path)


if __name__ == "__main__":
    main()

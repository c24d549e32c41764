#!/usr/bin/env python3
"""
Simulate a GitHub webhook for local testing.

Usage:
    python scripts/simulate_webhook.py push --ref refs/heads/main
    python scripts/simulate_webhook.py release --tag v1.0.0 --name "First release"
    python scripts/simulate_webhook.py ping
"""

import argparse
import json
import os

import httpx

from build_hook.webhook.validator import compute_signature


def build_payload(args: argparse.Namespace) -> dict:
    if args.event == "push":
        return {"ref": args.ref}
    if args.event == "release":
        return {
            "action": args.action,
            "release": {"tag_name": args.tag, "name": args.name},
        }
    return {"zen": "Keep it logically awesome.", "hook_id": 1}


def main():
    parser = argparse.ArgumentParser(description="Simulate GitHub webhook")
    parser.add_argument("event", help="Event type to send (ping, push, release, ...)")
    parser.add_argument("--url", default="http://localhost:8080/webhook/github")
    parser.add_argument("--ref", default="refs/heads/main", help="Pushed ref")
    parser.add_argument("--tag", default="v0.1.0", help="Release tag name")
    parser.add_argument("--name", default=None, help="Release name")
    parser.add_argument("--action", default="published", help="Release action")
    parser.add_argument(
        "--secret", default=None, help="Webhook secret (or use BUILDER_WEBHOOK env)"
    )

    args = parser.parse_args()

    secret = args.secret or os.environ.get("BUILDER_WEBHOOK")
    if not secret:
        print("Error: Webhook secret required (--secret or BUILDER_WEBHOOK)")
        return 1

    payload = build_payload(args)
    payload_bytes = json.dumps(payload).encode()

    print(f"Sending {args.event} webhook to {args.url}")
    print(f"Payload: {json.dumps(payload, indent=2)}")

    response = httpx.post(
        args.url,
        content=payload_bytes,
        headers={
            "Content-Type": "application/json",
            "X-Hub-Signature": compute_signature(payload_bytes, secret),
            "X-GitHub-Event": args.event,
        },
    )

    print(f"\nResponse status: {response.status_code}")
    print(f"Response body: {response.text}")

    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    exit(main())

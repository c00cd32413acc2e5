#!/usr/bin/env python3
"""
Simulate a GitHub issue_comment webhook for local testing.

Usage:
    python scripts/simulate_webhook.py --repo owner/repo --pr 42 --installation-id 123
"""

import argparse
import hashlib
import hmac
import json
import os
import uuid

import httpx


def main():
    parser = argparse.ArgumentParser(description="Simulate GitHub issue_comment webhook")
    parser.add_argument("--url", default="http://localhost:8000/github/webhook")
    parser.add_argument("--repo", required=True, help="Repository (owner/repo)")
    parser.add_argument("--pr", type=int, required=True, help="Pull request number")
    parser.add_argument("--installation-id", type=int, required=True, help="App installation id")
    parser.add_argument("--user", default="octocat", help="Commenting user login")
    parser.add_argument("--comment-id", type=int, default=1, help="Comment id")
    parser.add_argument("--body", default="@ai-review review", help="Comment body")
    parser.add_argument(
        "--secret", default=None, help="Webhook secret (or use GITHUB_WEBHOOK_SECRET env)"
    )

    args = parser.parse_args()

    secret = args.secret or os.environ.get("GITHUB_WEBHOOK_SECRET")
    if not secret:
        print("Error: Webhook secret required (--secret or GITHUB_WEBHOOK_SECRET)")
        return 1

    owner, name = args.repo.split("/", 1)
    payload = {
        "action": "created",
        "issue": {
            "number": args.pr,
            "pull_request": {"url": f"https://api.github.com/repos/{args.repo}/pulls/{args.pr}"},
        },
        "comment": {
            "id": args.comment_id,
            "body": args.body,
            "user": {"login": args.user, "type": "User"},
        },
        "repository": {"name": name, "owner": {"login": owner}},
        "installation": {"id": args.installation_id},
    }

    payload_bytes = json.dumps(payload).encode()
    signature = (
        "sha256="
        + hmac.new(
            secret.encode("utf-8"),
            payload_bytes,
            hashlib.sha256,
        ).hexdigest()
    )

    print(f"Sending webhook to {args.url}")
    print(f"Payload: {json.dumps(payload, indent=2)}")

    response = httpx.post(
        args.url,
        content=payload_bytes,
        headers={
            "Content-Type": "application/json",
            "X-Hub-Signature-256": signature,
            "X-GitHub-Event": "issue_comment",
            "X-GitHub-Delivery": str(uuid.uuid4()),
        },
    )

    print(f"\nResponse status: {response.status_code}")
    print(f"Response body: {response.text}")

    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    exit(main())

#!/usr/bin/env python3
"""ShamirVote command-line recovery.

Usage:
    python -m shamirvote.demo.run_demo testcase1.json testcase2.json
    python -m shamirvote.demo.run_demo testcase1.json --url http://localhost:8000

For each share document the script:
1. Decodes the shares (aborting that file on any bad digit).
2. Enumerates every k-of-n combination and interpolates each at zero.
3. Prints the valid-combination count and every candidate with its votes.
4. Prints the most frequent candidate, or a failure line.

With ``--url`` the documents are posted to a running recovery service
instead of being reconstructed in-process.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from shamirvote.codec.decoder import encode_decimal, load_share_file
from shamirvote.config import DEFAULT_WORKERS, SERVICE_URL
from shamirvote.crypto.reconstruct import reconstruct_parallel
from shamirvote.models import InvalidDigit, InvalidShareSet, SecretNotFound


def banner(msg: str) -> None:
    print(f"\n{'='*60}")
    print(f"  {msg}")
    print(f"{'='*60}")


def _print_event(event: str, data: Dict[str, Any]) -> None:
    if event == "combinations":
        print(f"   n={data['n']}, k={data['k']}")
        print(f"   Generated {data['total']} combinations")
    elif event == "tally":
        print(f"   Valid combinations: {data['valid']}/{data['total']}")
    elif event == "candidate":
        print(f"   Secret candidate: {encode_decimal(data['secret'])} (appears {data['count']} times)")


def find_secret_local(path: Path, workers: int) -> Optional[str]:
    try:
        share_set = load_share_file(path)
    except OSError as exc:
        print(f"   Error reading file {path}: {exc}")
        return None
    except (InvalidDigit, InvalidShareSet) as exc:
        print(f"   Error decoding {path}: {exc}")
        return None

    print(f"   Points: {share_set.n}")
    try:
        result = reconstruct_parallel(share_set, workers, on_event=_print_event)
    except SecretNotFound as exc:
        print(f"   {exc}")
        return None
    return encode_decimal(result.secret)


def _error_detail(resp: httpx.Response) -> str:
    try:
        return str(resp.json().get("detail", resp.text))
    except (ValueError, AttributeError):
        return resp.text


def find_secret_remote(client: httpx.Client, url: str, path: Path) -> Optional[str]:
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"   Error reading file {path}: {exc}")
        return None

    try:
        resp = client.post(f"{url}/recover", json=document)
    except httpx.HTTPError as exc:
        print(f"   Error contacting {url}: {exc}")
        return None
    if resp.status_code != 200:
        print(f"   HTTP {resp.status_code}: {_error_detail(resp)}")
        return None
    try:
        body = resp.json()
    except ValueError:
        print(f"   Unreadable response from {url}: {resp.text[:200]}")
        return None
    print(f"   Generated {body['total_combinations']} combinations")
    print(f"   Valid combinations: {body['valid_combinations']}/{body['total_combinations']}")
    for c in body["candidates"]:
        print(f"   Secret candidate: {c['secret']} (appears {c['count']} times)")
    return body["secret"]


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="shamirvote", description="Recover Shamir secrets by majority vote"
    )
    parser.add_argument("files", nargs="+", type=Path, help="JSON share documents")
    parser.add_argument(
        "--url", nargs="?", const=SERVICE_URL, default=None,
        help=f"post to a recovery service instead of running locally (bare flag: {SERVICE_URL})",
    )
    parser.add_argument("--workers", type=int, default=DEFAULT_WORKERS)
    args = parser.parse_args(argv)

    print("Shamir's Secret Sharing")
    client = httpx.Client(timeout=30.0) if args.url else None
    failures = 0
    try:
        for path in args.files:
            banner(f"Processing {path}")
            if client is not None:
                secret = find_secret_remote(client, args.url.rstrip("/"), path)
            else:
                secret = find_secret_local(path, args.workers)
            if secret is not None:
                print(f"\n   Secret for {path.name}: {secret}")
            else:
                failures += 1
                print(f"\n   Failed to find secret for {path.name}")
    finally:
        if client is not None:
            client.close()

    banner("Processing complete!")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())

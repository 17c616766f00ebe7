#!/usr/bin/env python3
"""Benchmark version capture and diff latency (p50, p95) against a running API.

Diff cost grows with (old lines x new lines); --lines controls letter size.

Usage:
    export API_URL=http://localhost:8000 KEYCLOAK_URL=... KEYCLOAK_CLIENT_SECRET=...
    uv run python scripts/bench_versions.py [--versions 50] [--lines 200]
"""
from __future__ import annotations

import argparse
import os
import statistics
import sys
import time

import httpx


def get_token(
    keycloak_url: str,
    realm: str,
    client_id: str,
    client_secret: str,
    username: str,
    password: str,
) -> str:
    url = f"{keycloak_url.rstrip('/')}/realms/{realm}/protocol/openid-connect/token"
    r = httpx.post(
        url,
        data={
            "grant_type": "password",
            "client_id": client_id,
            "client_secret": client_secret,
            "username": username,
            "password": password,
        },
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        timeout=30.0,
    )
    r.raise_for_status()
    return r.json()["access_token"]


def letter_body(lines: int, revision: int) -> str:
    """Letter text where every tenth paragraph changes per revision."""
    return "\n".join(
        f"Paragraph {i}: revision {revision if i % 10 == 0 else 0} of the demand."
        for i in range(lines)
    )


def percentiles(samples: list[float]) -> tuple[float, float]:
    p50 = statistics.median(samples) * 1000
    p95 = sorted(samples)[int(len(samples) * 0.95) - 1] * 1000 if len(samples) >= 20 else p50
    return p50, p95


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark version capture and diff")
    parser.add_argument("--versions", type=int, default=50, help="Versions to capture")
    parser.add_argument("--lines", type=int, default=200, help="Lines per letter")
    parser.add_argument("--output", type=str, default="/results/bench_versions.txt", help="Output file path")
    args = parser.parse_args()

    api_url = os.environ.get("API_URL", "http://localhost:8000").rstrip("/")
    headers = {"Content-Type": "application/json"}
    client_secret = os.environ.get("KEYCLOAK_CLIENT_SECRET", "")
    if client_secret:
        print("Getting token...")
        token = get_token(
            os.environ.get("KEYCLOAK_URL", "http://localhost:8080"),
            os.environ.get("KEYCLOAK_REALM", "demandflow"),
            os.environ.get("KEYCLOAK_CLIENT_ID", "demandflow-api"),
            client_secret,
            os.environ.get("BENCH_USER", "paralegal"),
            os.environ.get("BENCH_PASSWORD", "testpass"),
        )
        headers["Authorization"] = f"Bearer {token}"

    capture_latencies: list[float] = []
    diff_latencies: list[float] = []
    errors = 0
    with httpx.Client(timeout=60.0) as client:
        r = client.post(
            f"{api_url}/v1/letters",
            json={"content": letter_body(args.lines, 0), "compliance_score": 90},
            headers=headers,
        )
        r.raise_for_status()
        letter_id = r.json()["id"]

        print(f"Capturing {args.versions} versions of {args.lines} lines...")
        for revision in range(1, args.versions + 1):
            t0 = time.perf_counter()
            r = client.post(
                f"{api_url}/v1/letters/{letter_id}/versions",
                json={
                    "content": letter_body(args.lines, revision),
                    "compliance_score": 90,
                    "instruction": f"benchmark revision {revision}",
                },
                headers=headers,
            )
            if r.status_code == 201:
                capture_latencies.append(time.perf_counter() - t0)
            else:
                errors += 1

        print("Diffing first version against each later one...")
        for version in range(2, args.versions + 2):
            t0 = time.perf_counter()
            r = client.get(
                f"{api_url}/v1/letters/{letter_id}/diff",
                params={"from": 1, "to": version},
                headers=headers,
            )
            if r.status_code == 200:
                diff_latencies.append(time.perf_counter() - t0)
            else:
                errors += 1

    if not capture_latencies or not diff_latencies:
        print("No successful requests.")
        return 1

    c50, c95 = percentiles(capture_latencies)
    d50, d95 = percentiles(diff_latencies)
    summary = (
        f"Version benchmark (lines={args.lines}, versions={args.versions}, errors={errors})\n"
        f"  Capture latency: p50={c50:.1f} ms, p95={c95:.1f} ms\n"
        f"  Diff latency:    p50={d50:.1f} ms, p95={d95:.1f} ms\n"
    )
    print(summary)

    try:
        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(summary)
        print(f"Wrote {args.output}")
    except OSError as e:
        print(f"Could not write {args.output}: {e}")

    return 0


if __name__ == "__main__":
    sys.exit(main())

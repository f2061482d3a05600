"""
fetch_load.py — simple async load script for authenticated object reads

Usage:
  python fetch_load.py --base http://127.0.0.1:8080 --keys keys.txt --user mike --password abc123 --count 5000 --concurrency 100

keys.txt holds one object key per line (blank lines and "#" comments ignored).
"""
import argparse
import asyncio
import random
import time
from collections import Counter
from datetime import datetime, timezone

import httpx


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


def _load_keys(path):
    keys = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            key = line.strip()
            if key and not key.startswith("#"):
                keys.append(key)
    return keys


async def _fetch_one(client: httpx.AsyncClient, base: str, key: str):
    try:
        received = 0
        async with client.stream("GET", f"{base}/{key}", timeout=30) as r:
            async for chunk in r.aiter_bytes():
                received += len(chunk)
        return r.status_code, received
    except httpx.HTTPError:
        return None, 0


async def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--base", default="http://127.0.0.1:8080")
    parser.add_argument("--keys", dest="keys_file", default="keys.txt")
    parser.add_argument("--user", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--count", type=int, default=5000)
    parser.add_argument("--concurrency", type=int, default=100)
    args = parser.parse_args()

    keys = _load_keys(args.keys_file)
    if not keys:
        print(f"No keys found in {args.keys_file}.")
        return

    start_iso = _now_iso()
    t0 = time.perf_counter()
    statuses = Counter()
    total_bytes = 0

    limit = httpx.Limits(max_connections=args.concurrency, max_keepalive_connections=args.concurrency)
    auth = httpx.BasicAuth(args.user, args.password)
    async with httpx.AsyncClient(limits=limit, auth=auth) as client:
        sem = asyncio.Semaphore(args.concurrency)

        async def _task(i):
            nonlocal total_bytes
            async with sem:
                status, received = await _fetch_one(client, args.base, random.choice(keys))
                statuses[status or "error"] += 1
                total_bytes += received

        await asyncio.gather(*(_task(i) for i in range(args.count)))

    dt = time.perf_counter() - t0
    end_iso = _now_iso()
    ok = statuses.get(200, 0)
    print(f"START: {start_iso}")
    print(f"END:   {end_iso}")
    print(f"TOTAL: {dt:.3f} s")
    print(f"OPS:   reads={args.count}, ok={ok}, fail={args.count - ok}")
    print(f"CODES: {dict(statuses)}")
    if dt > 0:
        print(f"RPS:   {ok/dt:.1f} req/s, {total_bytes/dt/1024/1024:.2f} MiB/s")

if __name__ == "__main__":
    asyncio.run(main())

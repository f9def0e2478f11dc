import argparse
import json
import sys
from typing import List

import requests


def read_movies(path: str) -> List[dict]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("movies", [])
    return [{key: movie[key] for key in ("title", "year", "runtime", "genres") if key in movie} for movie in data]


def insert_movies(base_url: str, movies: List[dict], dry_run: bool, limit: int, timeout: float) -> int:
    url = base_url.rstrip("/") + "/v1/movies"
    count = 0
    for payload in movies:
        if limit and count >= limit:
            break
        if dry_run:
            count += 1
            continue
        try:
            r = requests.post(url, json=payload, timeout=timeout)
            if r.status_code == 201:
                count += 1
                continue
            print(f"Rejected movie {payload.get('title')!r}: {r.status_code} {r.text.strip()}", file=sys.stderr)
        except requests.RequestException as e:
            print(f"Failed to insert movie {payload.get('title')!r}: {e}", file=sys.stderr)
    return count


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--base_url", type=str, default="http://localhost:4000")
    parser.add_argument("--movies_path", type=str, default="data/movies.json")
    parser.add_argument("--limit", type=int, default=0)
    parser.add_argument("--timeout", type=float, default=10.0)
    parser.add_argument("--dry_run", action="store_true")
    args = parser.parse_args()
    try:
        rows = read_movies(args.movies_path)
    except (OSError, ValueError) as e:
        print(f"Failed to read movies: {e}", file=sys.stderr)
        sys.exit(1)
    inserted = insert_movies(args.base_url, rows, args.dry_run, args.limit, args.timeout)
    print(f"Inserted {inserted} of {len(rows)} movies")


if __name__ == "__main__":
    main()

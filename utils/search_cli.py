"""Page through search results from a running PODSEARCH API.

Usage:
  python utils/search_cli.py "serial" --base-url http://localhost:8000 --pages 3
"""

from __future__ import annotations

import argparse

import httpx

from podsearch.client import SearchClient, SearchClientError


def render(pager) -> str:
    lines = [f"Podcasts ({len(pager.podcasts)}):"]
    lines += [f"  {p.title} - {p.author}" for p in pager.podcasts]
    lines.append(f"Episodes ({len(pager.episodes)}):")
    lines += [f"  {e.title} [{e.podcast.title}]" for e in pager.episodes]
    state = "more available" if pager.has_next_page else "end of results"
    lines.append(f"{pager.total_loaded} items loaded, {state}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Search podcasts through the PODSEARCH API")
    ap.add_argument("term")
    ap.add_argument("--base-url", default="http://localhost:8000")
    ap.add_argument("--pages", type=int, default=1, help="Maximum pages to load")
    args = ap.parse_args(argv)

    with httpx.Client(timeout=30.0) as http:
        pager = SearchClient(http, base_url=args.base_url).pager(args.term)
        if not pager.enabled:
            ap.error("search term must not be blank")
        try:
            for _ in range(max(1, args.pages)):
                if pager.fetch_next_page() is None:
                    break
        except SearchClientError as exc:
            print(f"Error: {exc}")
            return 1
    print(render(pager))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

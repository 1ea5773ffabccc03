"""
Quick dry-run script to check the TV parser against the live site.

Run:
    uv run scripts/dry_run_metadata.py tt0491738
    uv run scripts/dry_run_metadata.py tt0491738 --season 1 --episode 1 --lang de --country DE

Prints the scraped record as JSON. Nothing is written to disk.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging

from imdb_tv import MediaScrapeOptions, MediaType, build_parser
from imdb_tv.models import EPISODE_NR, SEASON_NR


async def _run_for_id(
    imdb_id: str, *, season: int | None, episode: int | None, language: str, country: str
) -> None:
    print("\n===", imdb_id, "===")
    parser = build_parser()

    if season is not None and episode is not None:
        options = MediaScrapeOptions(
            type=MediaType.TV_EPISODE,
            language=language,
            country=country,
            imdb_id=imdb_id,
            ids={SEASON_NR: season, EPISODE_NR: episode},
        )
    else:
        options = MediaScrapeOptions(
            type=MediaType.TV_SHOW, language=language, country=country, imdb_id=imdb_id
        )

    md = await parser.get_metadata(options)
    if md.is_placeholder():
        print("Nothing found (placeholder record returned)")
        return
    print(json.dumps(md.to_dict(), indent=2, ensure_ascii=False))
    for skipped in md.skipped_fields:
        print(f"skipped {skipped.field}: {skipped.reason}")


async def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Dry-run TV show / episode metadata scraping"
    )
    parser.add_argument("ids", nargs="*", help="Show ids to query (e.g. tt0491738)")
    parser.add_argument("--season", type=int, default=None)
    parser.add_argument("--episode", type=int, default=None)
    parser.add_argument("--lang", default="en", help="Preferred language (e.g. de)")
    parser.add_argument("--country", default="US", help="Preferred country (e.g. DE)")
    args = parser.parse_args(argv)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    ids = args.ids or ["tt0491738"]
    for imdb_id in ids:
        try:
            await _run_for_id(
                imdb_id,
                season=args.season,
                episode=args.episode,
                language=args.lang,
                country=args.country,
            )
        except Exception as e:  # noqa: BLE001
            print(f"Error for '{imdb_id}': {e}")


if __name__ == "__main__":
    asyncio.run(main())

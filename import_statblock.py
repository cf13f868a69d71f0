#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys

from dotenv import find_dotenv, load_dotenv

from md_importer import config
from md_importer.exceptions import MalformedStatblockError, StoreError
from md_importer.importer import prepare_import, run_import
from md_importer.store_api import CompendiumAPI, StoreAPI


def _read_input(path: str | None) -> str:
    if path:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    return sys.stdin.read()


def _dry_run_payload(text: str) -> dict:
    prepared = prepare_import(text)
    return {
        "actor": prepared.actor.to_dict(),
        "items": [item.to_dict() for item in prepared.items],
        "spells": prepared.creature.spells,
    }


def main(argv: list[str] | None = None) -> int:
    # Mirror app behavior by loading .env in the current repo/project directory.
    load_dotenv(find_dotenv(usecwd=True), override=False)

    parser = argparse.ArgumentParser(
        description="Import a markdown creature stat block into the document store."
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="Path to a markdown stat block. Reads stdin if omitted.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and print the actor and item JSON. Do not contact the store.",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Document store base URL. Defaults to STORE_API_BASE env var.",
    )
    parser.add_argument(
        "--compendium-url",
        default=None,
        help="Spell compendium base URL. Defaults to COMPENDIUM_API_BASE, then the store base URL.",
    )
    parser.add_argument(
        "--save-key",
        metavar="TOKEN",
        help="Store the API key in the token file used by later runs.",
    )
    args = parser.parse_args(argv)

    if args.save_key:
        config.save_api_key(args.save_key)
        print(f"API key saved to {config.TOKEN_PATH}")
        if not args.input:
            return 0

    raw = _read_input(args.input)

    if args.dry_run:
        try:
            payload = _dry_run_payload(raw)
        except MalformedStatblockError as exc:
            print(str(exc), file=sys.stderr)
            return 1
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    base_url = args.base_url if args.base_url is not None else config.get_store_base_url()
    if not base_url:
        print(
            "No base URL set. Use --base-url or set STORE_API_BASE in your repo .env.",
            file=sys.stderr,
        )
        return 2

    store = StoreAPI(base_url)
    compendium = CompendiumAPI(args.compendium_url or config.get_compendium_base_url(base_url))
    try:
        result = run_import(raw, store, compendium)
    except MalformedStatblockError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except StoreError as exc:
        print(f"Failed to create actor: {exc}", file=sys.stderr)
        return 4

    print(
        f"\nImport complete: actor {result.actor_handle}, "
        f"{len(result.created)} items created, {len(result.errors)} failed."
    )
    return 0 if result.ok else 3


if __name__ == "__main__":
    raise SystemExit(main())

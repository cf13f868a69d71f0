"""
Creation orchestrator: parse → map → create actor → attach items and spells.

Parsing and mapping are synchronous. The only awaits are the calls into the
document store and the compendium, so the core can be exercised without any
host platform.
"""
from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol

from md_importer.actor_mapper import build_actor
from md_importer.config import get_max_lookup_concurrency
from md_importer.item_mapper import build_items
from md_importer.models import CreatureModel
from md_importer.schema import ActorRecord, ItemRecord
from md_importer.statblock_parser import parse_statblock, validate_creature

Notify = Callable[[str, str], None]


class DocumentStore(Protocol):
    async def create_actor(self, actor: Dict[str, Any]) -> str: ...

    async def create_items(self, handle: str, items: List[Dict[str, Any]]) -> List[Any]: ...


class Compendium(Protocol):
    async def find_spell(self, name: str) -> Optional[dict]: ...


def console_notify(level: str, message: str) -> None:
    stream = sys.stdout if level == "info" else sys.stderr
    print(f"[Importer] {level.upper()}: {message}", file=stream)


@dataclass
class PreparedImport:
    creature: CreatureModel
    actor: ActorRecord
    items: List[ItemRecord]


@dataclass
class ImportResult:
    actor_handle: str
    created: List[Any] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def prepare_import(text: str) -> PreparedImport:
    """Parse and map without touching the store.

    Raises MalformedStatblockError before anything is written.
    """
    creature = parse_statblock(text)
    abilities = list(creature.abilities.values()) + list(creature.legendary_actions.values())
    return PreparedImport(
        creature=creature,
        actor=build_actor(creature),
        items=build_items(abilities, creature.stats),
    )


def _spell_names(spells: Dict[str, List[str]]) -> List[str]:
    names: List[str] = []
    for group in spells.values():
        for name in group:
            name = name.strip().casefold()
            if name and name not in names:
                names.append(name)
    return names


class StatblockImporter:
    def __init__(
        self,
        store: DocumentStore,
        compendium: Optional[Compendium] = None,
        notify: Notify = console_notify,
        max_concurrency: Optional[int] = None,
    ) -> None:
        self.store = store
        self.compendium = compendium
        self.notify = notify
        self.max_concurrency = max_concurrency or get_max_lookup_concurrency()

    def _warn(self, result: ImportResult, message: str) -> None:
        result.warnings.append(message)
        self.notify("warn", message)

    def _error(self, result: ImportResult, message: str) -> None:
        result.errors.append(message)
        self.notify("error", message)

    async def import_statblock(self, text: str) -> ImportResult:
        prepared = prepare_import(text)
        warnings = validate_creature(prepared.creature)

        # Items need the actor handle, so the actor is always written first
        handle = await self.store.create_actor(prepared.actor.to_dict())
        result = ImportResult(actor_handle=handle)
        for warning in warnings:
            self._warn(result, warning)

        await self._add_items(handle, prepared.items, result)
        await self._add_spells(handle, prepared.creature.spells, result)

        self.notify(
            "info",
            f"Imported {prepared.creature.name}: {len(result.created)} items, "
            f"{len(result.warnings)} warnings, {len(result.errors)} errors.",
        )
        return result

    async def _add_items(self, handle: str, items: List[ItemRecord], result: ImportResult) -> None:
        for item in items:
            try:
                created = await self.store.create_items(handle, [item.to_dict()])
            except Exception as exc:
                print(f"[Importer] {exc}")
                self._error(result, f"There has been an error while creating {item.name}")
                continue
            result.created.extend(created)

    async def _lookup(
        self, name: str, semaphore: asyncio.Semaphore, result: ImportResult
    ) -> Optional[dict]:
        async with semaphore:
            try:
                record = await self.compendium.find_spell(name)
            except Exception as exc:
                self._warn(result, f"{name} lookup failed: {exc}")
                return None
        if record is None:
            self._warn(result, f"{name} not found")
        return record

    async def _add_spells(
        self, handle: str, spells: Dict[str, List[str]], result: ImportResult
    ) -> None:
        names = _spell_names(spells)
        if not names:
            return
        if self.compendium is None:
            self._warn(result, f"No compendium configured; {len(names)} spells skipped")
            return

        semaphore = asyncio.Semaphore(self.max_concurrency)
        records = await asyncio.gather(
            *(self._lookup(name, semaphore, result) for name in names),
            return_exceptions=True,
        )
        found = []
        for name, record in zip(names, records):
            if isinstance(record, BaseException):
                self._warn(result, f"{name} lookup failed: {record}")
            elif record is not None:
                found.append(record)
        if not found:
            return

        try:
            created = await self.store.create_items(handle, found)
        except Exception as exc:
            print(f"[Importer] {exc}")
            for record in found:
                self._error(result, f"There has been an error while creating {record.get('name')}")
            return
        result.created.extend(created)


def run_import(
    text: str,
    store: DocumentStore,
    compendium: Optional[Compendium] = None,
    notify: Notify = console_notify,
) -> ImportResult:
    """Blocking wrapper for callers without an event loop."""
    importer = StatblockImporter(store, compendium, notify=notify)
    return asyncio.run(importer.import_statblock(text))

"""Detect when the live API has caught up with declared additions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final, Literal, cast

from .types import get_field, is_json_array

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from .model import Addition
    from .types import Entity, JsonValue

_WHITESPACE: Final = re.compile(r"\s+")


class AdditionStatus(StrEnum):
    RESOLVED = "RESOLVED"
    MISSING = "MISSING"
    CHECK = "CHECK"


@dataclass(frozen=True, slots=True)
class AdditionResult:
    key: str
    name: str
    status: AdditionStatus
    message: str

    def to_dict(self) -> dict[str, str]:
        return {
            "key": self.key,
            "name": self.name,
            "status": str(self.status),
            "message": self.message,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class AdditionsReport:
    resolved: tuple[AdditionResult, ...] = ()
    missing: tuple[AdditionResult, ...] = ()
    review: tuple[AdditionResult, ...] = ()


type ReferenceKind = Literal["exclusive", "excluded"]


@dataclass(frozen=True, slots=True, kw_only=True)
class EditionTaskReference:
    """An edition that points at a task ID the live API does not know."""

    edition_id: str
    edition_title: str | None
    task_id: str
    kind: ReferenceKind

    def to_dict(self) -> dict[str, str | None]:
        return {
            "editionId": self.edition_id,
            "editionTitle": self.edition_title,
            "taskId": self.task_id,
            "kind": self.kind,
        }


def normalize_wiki_link(link: str | None) -> str | None:
    if not link:
        return None
    normalized = link.strip().lower()
    return normalized.removesuffix("/")


def normalize_name(name: str) -> str:
    return _WHITESPACE.sub(" ", name.strip().lower())


@dataclass(slots=True)
class _LiveTaskIndex:
    by_wiki_link: dict[str, Entity]
    by_name: dict[str, list[Entity]]

    @classmethod
    def build(cls, live_tasks: Iterable[Entity]) -> _LiveTaskIndex:
        by_wiki_link: dict[str, Entity] = {}
        by_name: dict[str, list[Entity]] = {}
        for task in live_tasks:
            wiki_key = normalize_wiki_link(_text(task, "wikiLink"))
            if wiki_key:
                by_wiki_link[wiki_key] = task
            by_name.setdefault(normalize_name(_text(task, "name") or ""), []).append(task)
        return cls(by_wiki_link=by_wiki_link, by_name=by_name)


def check_task_additions(
    additions: Mapping[str, Addition],
    live_tasks: Iterable[Entity],
) -> list[AdditionResult]:
    """Classify each addition as resolved upstream, still missing, or needing review."""

    index = _LiveTaskIndex.build(live_tasks)
    return [_check_addition(key, addition, index) for key, addition in additions.items()]


def _check_addition(key: str, addition: Addition, index: _LiveTaskIndex) -> AdditionResult:
    wiki_key = normalize_wiki_link(addition.wiki_link)
    wiki_match = index.by_wiki_link.get(wiki_key) if wiki_key else None
    if wiki_match is not None:
        return AdditionResult(
            key=key,
            name=addition.name,
            status=AdditionStatus.RESOLVED,
            message=(
                f"Matched API task '{_text(wiki_match, 'name')}' ({_text(wiki_match, 'id')}) "
                "by wikiLink - RESOLVED"
            ),
        )

    name_matches = index.by_name.get(normalize_name(addition.name), [])
    if len(name_matches) == 1:
        match = name_matches[0]
        return AdditionResult(
            key=key,
            name=addition.name,
            status=AdditionStatus.CHECK,
            message=(
                f"Matched API task '{_text(match, 'name')}' ({_text(match, 'id')}) "
                "by name only - NEEDS REVIEW"
            ),
        )
    if len(name_matches) > 1:
        ids = ", ".join(_text(task, "id") or "" for task in name_matches)
        return AdditionResult(
            key=key,
            name=addition.name,
            status=AdditionStatus.CHECK,
            message=f"Multiple API tasks share this name ({ids}) - NEEDS REVIEW",
        )

    return AdditionResult(
        key=key,
        name=addition.name,
        status=AdditionStatus.MISSING,
        message="Still missing from API - STILL NEEDED",
    )


def categorize_additions(results: Iterable[AdditionResult]) -> AdditionsReport:
    materialized = tuple(results)
    return AdditionsReport(
        resolved=tuple(r for r in materialized if r.status is AdditionStatus.RESOLVED),
        missing=tuple(r for r in materialized if r.status is AdditionStatus.MISSING),
        review=tuple(r for r in materialized if r.status is AdditionStatus.CHECK),
    )


def check_edition_task_references(
    editions: Mapping[str, Addition],
    live_tasks: Iterable[Entity],
) -> list[EditionTaskReference]:
    """List edition task references that point at IDs absent from the live API."""

    live_ids = {task_id for task in live_tasks if (task_id := _text(task, "id")) is not None}
    missing: list[EditionTaskReference] = []
    for edition in editions.values():
        title = edition.record.get("title")
        edition_title = title if isinstance(title, str) else None
        for kind, field_name in (("exclusive", "exclusiveTaskIds"), ("excluded", "excludedTaskIds")):
            for task_id in _string_list(edition.record.get(field_name)):
                if task_id not in live_ids:
                    missing.append(
                        EditionTaskReference(
                            edition_id=edition.id,
                            edition_title=edition_title,
                            task_id=task_id,
                            kind=cast("ReferenceKind", kind),
                        )
                    )
    return missing


def _text(entity: Entity, key: str) -> str | None:
    value = get_field(entity, key)
    return value if isinstance(value, str) else None


def _string_list(value: JsonValue | None) -> list[str]:
    if not is_json_array(value):
        return []
    return [item for item in cast("Sequence[JsonValue]", value) if isinstance(item, str)]

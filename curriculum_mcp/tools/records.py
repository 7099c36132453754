"""Generic list/get/create/update/delete handlers, parameterised by EntityKind."""

from __future__ import annotations

from collections.abc import Callable
import json
import logging
from typing import Any

from curriculum_mcp.errors import NotFoundError
from curriculum_mcp.models import ToolArgs
from curriculum_mcp.store import CollectionStore, Record
from curriculum_mcp.tools.catalog import EntityKind

logger = logging.getLogger("curriculum-mcp.tools")

Handler = Callable[[CollectionStore, EntityKind, ToolArgs], str]


def to_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def project(record: Record, fields: tuple[str, ...]) -> Record:
    """Summary projection: only the listed fields, in order, when present."""
    return {field: record[field] for field in fields if field in record}


def filter_records(records: list[Record], kind: EntityKind, args: ToolArgs) -> list[Record]:
    """
    Apply the kind's filters that were supplied with a non-empty value.

    Supplied filters combine with AND; no filters returns ``records`` as is.
    """
    criteria = {}
    for name in kind.filters:
        value = getattr(args, name, None)
        if value:
            criteria[name] = value
    if not criteria:
        return records
    return [
        record
        for record in records
        if all(record.get(name) == value for name, value in criteria.items())
    ]


def list_records(store: CollectionStore, kind: EntityKind, args: ToolArgs) -> str:
    records = filter_records(store.get_collection(kind.collection), kind, args)
    return to_json([project(record, kind.summary) for record in records])


def get_records(store: CollectionStore, kind: EntityKind, args: ToolArgs) -> str:
    """Full record by id (``null`` when absent), or the whole filtered collection."""
    record_id = getattr(args, "id", None)
    if not kind.filters:
        if record_id:
            return to_json(store.find_by_id(kind.collection, record_id))
        return to_json(store.get_collection(kind.collection))

    records = filter_records(store.get_collection(kind.collection), kind, args)
    if record_id:
        match = next((record for record in records if record.get("id") == record_id), None)
        return to_json(match)
    return to_json(records)


def create_record(store: CollectionStore, kind: EntityKind, args: ToolArgs) -> str:
    record: Record = {"id": store.generate_id(), **args.model_dump(exclude_unset=True)}
    created = store.add(kind.collection, record)
    logger.info(f"Created {kind.label} {created['id']}")
    return f"Created {kind.label}: {to_json(created)}"


def update_record(store: CollectionStore, kind: EntityKind, args: ToolArgs) -> str:
    fields = args.model_dump(exclude_unset=True)
    record_id = fields.pop("id")
    updated = store.update(kind.collection, record_id, fields)
    if updated is None:
        raise NotFoundError(f"{kind.title} with ID {record_id} not found")
    logger.info(f"Updated {kind.label} {record_id} ({', '.join(fields) or 'no fields'})")
    return f"Updated {kind.label}: {to_json(updated)}"


def delete_record(store: CollectionStore, kind: EntityKind, args: ToolArgs) -> str:
    record_id = args.id  # type: ignore[attr-defined]
    if not store.delete(kind.collection, record_id):
        raise NotFoundError(f"{kind.title} with ID {record_id} not found")
    logger.info(f"Deleted {kind.label} {record_id}")
    return f"Deleted {kind.label} with ID: {record_id}"


HANDLERS: dict[str, Handler] = {
    "list": list_records,
    "get": get_records,
    "create": create_record,
    "update": update_record,
    "delete": delete_record,
}

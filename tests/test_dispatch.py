"""Tool dispatch against a real store in a temp directory."""

from __future__ import annotations

import json

import pytest

from curriculum_mcp.dispatch import Dispatcher, resource_collection
from curriculum_mcp.errors import InvalidRequestError, NotFoundError
from curriculum_mcp.models import Collection
from curriculum_mcp.store import CollectionStore
from tests._utils.records import UNIT, lesson_for, payload, task_for


def _create(dispatcher: Dispatcher, tool: str, fields: dict) -> dict:
    return payload(dispatcher.call(tool, fields))


def _get(dispatcher: Dispatcher, tool: str, **arguments):
    return json.loads(dispatcher.call(tool, arguments))


class TestScenarios:
    def test_unit_then_lesson_filtered_by_unit(self, dispatcher):
        text = dispatcher.call("create_unit", UNIT)
        assert text.startswith("Created unit: ")
        unit = payload(text)
        assert unit["id"]
        assert {k: unit[k] for k in UNIT} == UNIT

        lesson = _create(dispatcher, "create_lesson", lesson_for(unit["id"]))
        _create(dispatcher, "create_lesson", lesson_for("another-unit", title="Other"))

        listed = _get(dispatcher, "list_lessons", unitId=unit["id"])
        assert listed == [
            {
                "id": lesson["id"],
                "unitId": unit["id"],
                "title": "Variables",
                "sequence": 1,
                "status": "Draft",
            }
        ]

    def test_deleting_unit_does_not_cascade(self, dispatcher):
        unit = _create(dispatcher, "create_unit", UNIT)
        lesson = _create(dispatcher, "create_lesson", lesson_for(unit["id"]))

        assert dispatcher.call("delete_unit", {"id": unit["id"]}) == (
            f"Deleted unit with ID: {unit['id']}"
        )
        assert _get(dispatcher, "get_lessons", id=lesson["id"]) == lesson


class TestCreate:
    def test_generated_ids_are_unique(self, dispatcher):
        ids = {_create(dispatcher, "create_unit", UNIT)["id"] for _ in range(25)}
        assert len(ids) == 25

    def test_caller_cannot_supply_id(self, dispatcher):
        with pytest.raises(InvalidRequestError, match="id"):
            dispatcher.call("create_unit", {**UNIT, "id": "chosen"})

    def test_get_returns_structurally_equal_record(self, dispatcher):
        created = _create(
            dispatcher,
            "create_api",
            {
                "name": "Users",
                "endpoint": "/api/users",
                "method": "GET",
                "description": "List users",
                "responseBody": {"users": [{"id": "string"}]},
            },
        )
        assert _get(dispatcher, "get_apis", id=created["id"]) == created

    def test_unset_optionals_are_not_materialised(self, dispatcher):
        unit = _create(dispatcher, "create_unit", UNIT)
        assert "dependsOnUnitId" not in unit

    def test_missing_required_field_is_invalid(self, dispatcher, store):
        fields = dict(UNIT)
        del fields["title"]
        with pytest.raises(InvalidRequestError, match="Invalid arguments for create_unit: title"):
            dispatcher.call("create_unit", fields)
        assert store.get_collection(Collection.UNITS) == []

    def test_enum_value_is_checked(self, dispatcher):
        with pytest.raises(InvalidRequestError, match="status"):
            dispatcher.call("create_unit", {**UNIT, "status": "Finished"})

    def test_create_on_list_get_create_kind(self, dispatcher):
        text = dispatcher.call(
            "create_environment",
            {"name": "API_URL", "description": "Backend base URL", "isPublic": True},
        )
        assert text.startswith("Created environment variable: ")


class TestUpdate:
    def test_merges_supplied_fields_only(self, dispatcher):
        unit = _create(dispatcher, "create_unit", UNIT)

        text = dispatcher.call("update_unit", {"id": unit["id"], "status": "Complete"})

        assert text.startswith("Updated unit: ")
        updated = payload(text)
        assert updated == {**unit, "status": "Complete"}
        assert _get(dispatcher, "get_units", id=unit["id"]) == updated

    def test_missing_id_is_not_found_and_collection_unchanged(self, dispatcher, store):
        _create(dispatcher, "create_unit", UNIT)
        before = list(store.get_collection(Collection.UNITS))

        with pytest.raises(NotFoundError, match="Unit with ID nope not found"):
            dispatcher.call("update_unit", {"id": "nope", "title": "x"})

        assert store.get_collection(Collection.UNITS) == before

    def test_id_is_required(self, dispatcher):
        with pytest.raises(InvalidRequestError, match="id"):
            dispatcher.call("update_unit", {"title": "x"})


class TestDelete:
    def test_delete_then_get_is_null(self, dispatcher, store):
        first = _create(dispatcher, "create_component", {
            "name": "Button", "description": "Primary button", "filePath": "src/Button.tsx",
        })
        _create(dispatcher, "create_component", {
            "name": "Card", "description": "Content card", "filePath": "src/Card.tsx",
        })

        dispatcher.call("delete_component", {"id": first["id"]})

        assert _get(dispatcher, "get_components", id=first["id"]) is None
        assert len(store.get_collection(Collection.COMPONENTS)) == 1

    def test_missing_id_is_not_found(self, dispatcher):
        with pytest.raises(NotFoundError, match="Lesson phase with ID gone not found"):
            dispatcher.call("delete_lesson_phase", {"id": "gone"})


class TestFilters:
    def test_task_filters_combine_with_and(self, dispatcher):
        both = _create(dispatcher, "create_task", task_for("L1", "Lesson"))
        _create(dispatcher, "create_task", task_for("L1", "Unit"))
        _create(dispatcher, "create_task", task_for("L2", "Lesson"))

        listed = _get(dispatcher, "list_tasks", relatedEntityId="L1", relatedEntityType="Lesson")

        assert [t["id"] for t in listed] == [both["id"]]
        assert set(listed[0]) == {
            "id", "title", "relatedEntityId", "relatedEntityType", "status", "priority",
        }

    def test_task_status_filter(self, dispatcher):
        _create(dispatcher, "create_task", task_for("L1", "Lesson"))
        done = _create(dispatcher, "create_task", task_for("L1", "Lesson", status="Done"))

        assert [t["id"] for t in _get(dispatcher, "list_tasks", status="Done")] == [done["id"]]

    def test_empty_filter_value_is_ignored(self, dispatcher):
        _create(dispatcher, "create_lesson", lesson_for("U1"))
        _create(dispatcher, "create_lesson", lesson_for("U2"))
        assert len(_get(dispatcher, "list_lessons", unitId="")) == 2

    def test_assessment_parent_filters(self, dispatcher):
        base = {
            "title": "Quiz",
            "type": "Formative",
            "format": "Multiple Choice",
            "description": "Check understanding",
            "evaluationCriteria": ["80% correct"],
        }
        on_lesson = _create(
            dispatcher, "create_assessment", {**base, "parentId": "P1", "parentType": "Lesson"}
        )
        _create(dispatcher, "create_assessment", {**base, "parentId": "P1", "parentType": "Unit"})

        listed = _get(dispatcher, "get_assessments", parentId="P1", parentType="Lesson")
        assert listed == [on_lesson]

    def test_get_with_filter_looks_inside_filtered_set(self, dispatcher):
        lesson = _create(dispatcher, "create_lesson", lesson_for("U1"))

        assert _get(dispatcher, "get_lessons", id=lesson["id"], unitId="U1") == lesson
        assert _get(dispatcher, "get_lessons", id=lesson["id"], unitId="U2") is None

    def test_get_without_id_returns_full_records(self, dispatcher):
        lesson = _create(dispatcher, "create_lesson", lesson_for("U1"))
        assert _get(dispatcher, "get_lessons") == [lesson]


class TestReadOnlyKinds:
    def test_list_projects_preexisting_records(self, db_path):
        db_path.parent.mkdir(parents=True)
        db_path.write_text(
            json.dumps({
                "hooks": [{
                    "id": "h1",
                    "name": "useAuth",
                    "filePath": "src/hooks/useAuth.ts",
                    "description": "Auth state",
                    "usage": "const { user } = useAuth()",
                }],
            }),
            encoding="utf-8",
        )
        dispatcher = Dispatcher(CollectionStore(db_path))

        assert _get(dispatcher, "list_hooks") == [{
            "id": "h1",
            "name": "useAuth",
            "filePath": "src/hooks/useAuth.ts",
            "description": "Auth state",
        }]
        assert _get(dispatcher, "get_hooks", id="h1")["usage"] == "const { user } = useAuth()"
        assert _get(dispatcher, "list_state") == []


class TestRouting:
    def test_unknown_tool(self, dispatcher):
        with pytest.raises(InvalidRequestError, match="Unknown tool: drop_everything"):
            dispatcher.call("drop_everything", {})

    def test_unsupported_operation_is_unknown_tool(self, dispatcher):
        with pytest.raises(InvalidRequestError, match="Unknown tool"):
            dispatcher.call("delete_environment", {"id": "x"})

    def test_unknown_argument_rejected(self, dispatcher):
        with pytest.raises(InvalidRequestError, match="Invalid arguments for list_units"):
            dispatcher.call("list_units", {"limit": 5})

    def test_none_arguments_allowed(self, dispatcher):
        assert json.loads(dispatcher.call("list_units", None)) == []


class TestResources:
    def test_lists_one_resource_per_collection(self, dispatcher):
        resources = dispatcher.list_resources()
        assert len(resources) == 13
        uris = {str(r.uri) for r in resources}
        assert "curriculum-mcp://style-guide" in uris
        assert all(r.mimeType == "application/json" for r in resources)

    def test_read_returns_full_collection(self, dispatcher):
        unit = _create(dispatcher, "create_unit", UNIT)
        assert json.loads(dispatcher.read_resource("curriculum-mcp://units")) == [unit]

    def test_collection_lookup_ignores_case(self):
        assert resource_collection("curriculum-mcp://lessonphases") is Collection.LESSON_PHASES
        assert resource_collection("curriculum-mcp://appConnections/") is Collection.APP_CONNECTIONS

    def test_unknown_resource(self, dispatcher):
        with pytest.raises(NotFoundError, match="Unknown resource"):
            dispatcher.read_resource("curriculum-mcp://grades")

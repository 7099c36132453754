"""
Entity catalogue for the curriculum MCP server.

Each EntityKind declares its collection, labels, summary projection and the
argument models of the operations it supports. The 52-tool surface and the
13 resources are generated from this table.

Operation sets differ per kind:
- Full CRUD: units, lessons, lesson phases, app connections, assessments,
  tasks, components, APIs
- List/get/create: environment variables, style guide patterns
- List/get: state management, custom hooks, conventions
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mcp.types import Tool

from curriculum_mcp.models import (
    ApiCreate,
    ApiUpdate,
    AppConnectionCreate,
    AppConnectionFilter,
    AppConnectionQuery,
    AppConnectionUpdate,
    AssessmentCreate,
    AssessmentFilter,
    AssessmentQuery,
    AssessmentUpdate,
    Collection,
    ComponentCreate,
    ComponentUpdate,
    EnvironmentVariableCreate,
    IdArgs,
    IdQuery,
    LessonCreate,
    LessonFilter,
    LessonPhaseCreate,
    LessonPhaseFilter,
    LessonPhaseQuery,
    LessonPhaseUpdate,
    LessonQuery,
    LessonUpdate,
    NoArgs,
    StyleGuidePatternCreate,
    TaskCreate,
    TaskFilter,
    TaskQuery,
    TaskUpdate,
    ToolArgs,
    UnitCreate,
    UnitUpdate,
)

RESOURCE_SCHEME = "curriculum-mcp://"

OPERATIONS = ("list", "get", "create", "update", "delete")


@dataclass(frozen=True)
class EntityKind:
    """One entity kind and the tools it exposes."""

    collection: Collection
    label: str  # "lesson phase"
    plural_label: str  # "lesson phases"
    plural: str  # tool suffix for list/get
    singular: str | None  # tool suffix for create/update/delete
    summary: tuple[str, ...]
    resource_name: str
    resource_description: str
    list_args: type[ToolArgs] = NoArgs
    get_args: type[ToolArgs] = IdQuery
    create_args: type[ToolArgs] | None = None
    update_args: type[ToolArgs] | None = None
    deletable: bool = False
    article: str = "a"

    @property
    def filters(self) -> tuple[str, ...]:
        """Filter fields accepted by list/get."""
        return tuple(self.list_args.model_fields)

    @property
    def operations(self) -> tuple[str, ...]:
        supported = {
            "list": True,
            "get": True,
            "create": self.create_args is not None,
            "update": self.update_args is not None,
            "delete": self.deletable,
        }
        return tuple(op for op in OPERATIONS if supported[op])

    @property
    def title(self) -> str:
        """Label with the first letter capitalised, for messages."""
        return self.label[0].upper() + self.label[1:]

    @property
    def resource_uri(self) -> str:
        return f"{RESOURCE_SCHEME}{self.collection.value}"

    def args_model(self, operation: str) -> type[ToolArgs]:
        models: dict[str, type[ToolArgs] | None] = {
            "list": self.list_args,
            "get": self.get_args,
            "create": self.create_args,
            "update": self.update_args,
            "delete": IdArgs if self.deletable else None,
        }
        model = models[operation]
        if model is None:
            raise ValueError(f"{self.plural} does not support {operation}")
        return model

    def tool_name(self, operation: str) -> str:
        if operation in ("list", "get"):
            return f"{operation}_{self.plural}"
        return f"{operation}_{self.singular}"

    def tool_description(self, operation: str) -> str:
        if operation == "list":
            return (
                f"List all {self.plural_label} with summary information "
                f"({', '.join(self.summary)})"
            )
        if operation == "get":
            return f"Get all {self.plural_label} or a specific {self.label} by ID"
        if operation == "create":
            return f"Create a new {self.label}"
        if operation == "update":
            return f"Update an existing {self.label}"
        return f"Delete {self.article} {self.label} by ID"


CATALOGUE: tuple[EntityKind, ...] = (
    EntityKind(
        collection=Collection.UNITS,
        label="unit",
        plural_label="units",
        plural="units",
        singular="unit",
        summary=("id", "title", "sequence", "status"),
        resource_name="All units",
        resource_description="All curriculum units",
        create_args=UnitCreate,
        update_args=UnitUpdate,
        deletable=True,
    ),
    EntityKind(
        collection=Collection.LESSONS,
        label="lesson",
        plural_label="lessons",
        plural="lessons",
        singular="lesson",
        summary=("id", "unitId", "title", "sequence", "status"),
        resource_name="All lessons",
        resource_description="All curriculum lessons",
        list_args=LessonFilter,
        get_args=LessonQuery,
        create_args=LessonCreate,
        update_args=LessonUpdate,
        deletable=True,
    ),
    EntityKind(
        collection=Collection.LESSON_PHASES,
        label="lesson phase",
        plural_label="lesson phases",
        plural="lesson_phases",
        singular="lesson_phase",
        summary=("id", "lessonId", "phaseName", "sequence"),
        resource_name="All lesson phases",
        resource_description="All lesson phases",
        list_args=LessonPhaseFilter,
        get_args=LessonPhaseQuery,
        create_args=LessonPhaseCreate,
        update_args=LessonPhaseUpdate,
        deletable=True,
    ),
    EntityKind(
        collection=Collection.APP_CONNECTIONS,
        label="app connection",
        article="an",
        plural_label="app connections",
        plural="app_connections",
        singular="app_connection",
        summary=("id", "lessonPhaseId", "type", "resourceIdentifier"),
        resource_name="All app connections",
        resource_description="All app connections",
        list_args=AppConnectionFilter,
        get_args=AppConnectionQuery,
        create_args=AppConnectionCreate,
        update_args=AppConnectionUpdate,
        deletable=True,
    ),
    EntityKind(
        collection=Collection.ASSESSMENTS,
        label="assessment",
        article="an",
        plural_label="assessments",
        plural="assessments",
        singular="assessment",
        summary=("id", "parentId", "parentType", "title", "type"),
        resource_name="All assessments",
        resource_description="All assessments",
        list_args=AssessmentFilter,
        get_args=AssessmentQuery,
        create_args=AssessmentCreate,
        update_args=AssessmentUpdate,
        deletable=True,
    ),
    EntityKind(
        collection=Collection.TASKS,
        label="task",
        plural_label="tasks",
        plural="tasks",
        singular="task",
        summary=("id", "title", "relatedEntityId", "relatedEntityType", "status", "priority"),
        resource_name="All tasks",
        resource_description="All tasks",
        list_args=TaskFilter,
        get_args=TaskQuery,
        create_args=TaskCreate,
        update_args=TaskUpdate,
        deletable=True,
    ),
    EntityKind(
        collection=Collection.COMPONENTS,
        label="component",
        plural_label="components",
        plural="components",
        singular="component",
        summary=("id", "name", "description", "filePath"),
        resource_name="All components",
        resource_description="All UI components",
        create_args=ComponentCreate,
        update_args=ComponentUpdate,
        deletable=True,
    ),
    EntityKind(
        collection=Collection.APIS,
        label="API",
        article="an",
        plural_label="APIs",
        plural="apis",
        singular="api",
        summary=("id", "name", "endpoint", "method", "description"),
        resource_name="All APIs",
        resource_description="All API endpoints",
        create_args=ApiCreate,
        update_args=ApiUpdate,
        deletable=True,
    ),
    EntityKind(
        collection=Collection.ENVIRONMENT,
        label="environment variable",
        plural_label="environment variables",
        plural="environment",
        singular="environment",
        summary=("id", "name", "description", "isPublic"),
        resource_name="Environment variables",
        resource_description="Environment variable documentation",
        create_args=EnvironmentVariableCreate,
    ),
    EntityKind(
        collection=Collection.STYLE_GUIDE,
        label="style guide pattern",
        plural_label="style guide patterns",
        plural="style_guide",
        singular="style_guide",
        summary=("id", "element", "description", "className"),
        resource_name="Style guide",
        resource_description="Style guide patterns",
        create_args=StyleGuidePatternCreate,
    ),
    EntityKind(
        collection=Collection.STATE,
        label="state management configuration",
        plural_label="state management configurations",
        plural="state",
        singular=None,
        summary=("id", "library", "storeDirectory"),
        resource_name="State management",
        resource_description="State management configurations",
    ),
    EntityKind(
        collection=Collection.HOOKS,
        label="custom hook",
        plural_label="custom hooks",
        plural="hooks",
        singular=None,
        summary=("id", "name", "filePath", "description"),
        resource_name="Custom hooks",
        resource_description="Custom React hooks",
    ),
    EntityKind(
        collection=Collection.CONVENTIONS,
        label="code convention",
        plural_label="code conventions",
        plural="conventions",
        singular=None,
        summary=("id", "rule", "description"),
        resource_name="Code conventions",
        resource_description="Coding standards and conventions",
    ),
)


@dataclass(frozen=True)
class ToolSpec:
    """One tool: its name, entity kind, operation and argument model."""

    name: str
    description: str
    kind: EntityKind
    operation: str
    args_model: type[ToolArgs]

    def to_tool(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=input_schema(self.args_model),
        )


def _clean_property(prop: dict[str, Any]) -> dict[str, Any]:
    """Flatten pydantic's ``anyOf [X, null]`` for optional fields and drop titles."""
    cleaned = dict(prop)
    any_of = cleaned.pop("anyOf", None)
    if any_of is not None:
        options = [option for option in any_of if option.get("type") != "null"]
        if len(options) == 1:
            cleaned.update(options[0])
        else:
            cleaned["anyOf"] = options
    cleaned.pop("title", None)
    if "default" in cleaned and cleaned["default"] is None:
        del cleaned["default"]
    return cleaned


def input_schema(model: type[ToolArgs]) -> dict[str, Any]:
    """JSON schema for a tool's arguments, derived from its argument model."""
    schema = model.model_json_schema()
    result: dict[str, Any] = {
        "type": "object",
        "properties": {
            name: _clean_property(prop) for name, prop in schema.get("properties", {}).items()
        },
    }
    if schema.get("required"):
        result["required"] = list(schema["required"])
    result["additionalProperties"] = False
    return result


def _build_registry() -> dict[str, ToolSpec]:
    registry: dict[str, ToolSpec] = {}
    for kind in CATALOGUE:
        for operation in kind.operations:
            spec = ToolSpec(
                name=kind.tool_name(operation),
                description=kind.tool_description(operation),
                kind=kind,
                operation=operation,
                args_model=kind.args_model(operation),
            )
            if spec.name in registry:
                raise RuntimeError(f"Duplicate tool name in catalogue: {spec.name}")
            registry[spec.name] = spec
    return registry


def _verify_catalogue() -> None:
    """Every collection must have exactly one catalogue entry."""
    seen = [kind.collection for kind in CATALOGUE]
    missing = set(Collection) - set(seen)
    if missing:
        names = sorted(c.value for c in missing)
        raise RuntimeError(f"Collections without a catalogue entry: {names}")
    if len(seen) != len(set(seen)):
        raise RuntimeError("A collection appears more than once in the catalogue")


_verify_catalogue()

TOOL_REGISTRY: dict[str, ToolSpec] = _build_registry()

KINDS_BY_COLLECTION: dict[Collection, EntityKind] = {kind.collection: kind for kind in CATALOGUE}


def get_tool_registry() -> dict[str, ToolSpec]:
    return TOOL_REGISTRY

"""Collection identifiers and typed tool argument models.

Every tool in the catalogue validates its arguments against one of the
models below before a handler runs. Update models are generated from the
create models so both share one field declaration.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, create_model


class Collection(str, Enum):
    """Named collections held in the datastore file."""

    COMPONENTS = "components"
    APIS = "apis"
    ENVIRONMENT = "environment"
    STYLE_GUIDE = "style-guide"
    STATE = "state"
    HOOKS = "hooks"
    CONVENTIONS = "conventions"
    UNITS = "units"
    LESSONS = "lessons"
    LESSON_PHASES = "lessonPhases"
    APP_CONNECTIONS = "appConnections"
    ASSESSMENTS = "assessments"
    TASKS = "tasks"


UnitStatus = Literal["Draft", "In Development", "Complete", "Blocked"]
LessonStatus = Literal["Draft", "Ready for Dev", "In Development", "Needs Review", "Complete"]
PhaseName = Literal[
    "Hook",
    "Introduction",
    "Guided Practice",
    "Independent Practice",
    "Assessment",
    "Closing",
]
ConnectionType = Literal["Page", "Component", "API Endpoint"]
ParentType = Literal["Lesson", "Unit"]
AssessmentType = Literal["Formative", "Summative", "Diagnostic"]
AssessmentFormat = Literal["Multiple Choice", "Code Challenge", "Short Answer", "Project"]
RelatedEntityType = Literal["Unit", "Lesson", "LessonPhase", "Assessment"]
TaskStatus = Literal["Todo", "In Progress", "Blocked", "In Review", "Done"]
TaskPriority = Literal["Low", "Medium", "High", "Critical"]
HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]


class ToolArgs(BaseModel):
    """Base for tool argument models. Unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")


class NoArgs(ToolArgs):
    """Arguments for list tools without filters."""


class IdQuery(ToolArgs):
    id: str | None = Field(None, description="Optional record ID")


class IdArgs(ToolArgs):
    id: str = Field(description="ID of the record")


# --- Filters (list) and queries (get) ---


class LessonFilter(ToolArgs):
    unitId: str | None = Field(None, description="Optional unit ID to filter lessons")


class LessonQuery(LessonFilter):
    id: str | None = Field(None, description="Optional lesson ID")


class LessonPhaseFilter(ToolArgs):
    lessonId: str | None = Field(None, description="Optional lesson ID to filter phases")


class LessonPhaseQuery(LessonPhaseFilter):
    id: str | None = Field(None, description="Optional lesson phase ID")


class AppConnectionFilter(ToolArgs):
    lessonPhaseId: str | None = Field(
        None, description="Optional lesson phase ID to filter connections"
    )


class AppConnectionQuery(AppConnectionFilter):
    id: str | None = Field(None, description="Optional app connection ID")


class AssessmentFilter(ToolArgs):
    parentId: str | None = Field(None, description="Optional parent ID to filter assessments")
    parentType: ParentType | None = Field(
        None, description="Optional parent type to filter assessments"
    )


class AssessmentQuery(AssessmentFilter):
    id: str | None = Field(None, description="Optional assessment ID")


class TaskFilter(ToolArgs):
    relatedEntityId: str | None = Field(
        None, description="Optional related entity ID to filter tasks"
    )
    relatedEntityType: RelatedEntityType | None = Field(
        None, description="Optional related entity type to filter tasks"
    )
    status: TaskStatus | None = Field(None, description="Optional status to filter tasks")


class TaskQuery(TaskFilter):
    id: str | None = Field(None, description="Optional task ID")


# --- Create payloads ---


class UnitCreate(ToolArgs):
    title: str = Field(description="Unit title")
    sequence: int = Field(description="Position of the unit in the curriculum")
    description: str = Field(description="What the unit covers")
    rationale: str = Field(description="Why the unit exists and where it fits")
    status: UnitStatus = Field(description="Development status")
    dependsOnUnitId: str | None = Field(None, description="ID of a prerequisite unit")


class LessonCreate(ToolArgs):
    unitId: str = Field(description="ID of the unit this lesson belongs to")
    title: str = Field(description="Lesson title")
    sequence: int = Field(description="Position of the lesson within its unit")
    status: LessonStatus = Field(description="Development status")
    learningObjectives: list[str] = Field(description="What learners should be able to do")
    keyConcepts: list[str] = Field(description="Concepts introduced by the lesson")
    pedagogicalApproach: str = Field(description="How the lesson is taught")
    rationale: str = Field(description="Why the lesson exists and where it fits")
    durationEstimateMinutes: int = Field(description="Estimated duration in minutes")
    dependsOnLessonIds: list[str] | None = Field(
        None, description="IDs of prerequisite lessons"
    )


class LessonPhaseCreate(ToolArgs):
    lessonId: str = Field(description="ID of the lesson this phase belongs to")
    phaseName: PhaseName = Field(description="Phase of the lesson")
    sequence: int = Field(description="Position of the phase within its lesson")
    description: str = Field(description="What happens during the phase")
    developerNotes: str | None = Field(None, description="Implementation notes for developers")


class AppConnectionCreate(ToolArgs):
    lessonPhaseId: str = Field(description="ID of the lesson phase using the resource")
    type: ConnectionType = Field(description="Kind of app resource")
    resourceIdentifier: str = Field(description="Route, component name, or endpoint path")
    usageDescription: str = Field(description="How the phase uses the resource")


class AssessmentCreate(ToolArgs):
    parentId: str = Field(description="ID of the lesson or unit being assessed")
    parentType: ParentType = Field(description="Whether the parent is a lesson or a unit")
    title: str = Field(description="Assessment title")
    type: AssessmentType = Field(description="Assessment purpose")
    format: AssessmentFormat = Field(description="Assessment format")
    description: str = Field(description="What the assessment asks of learners")
    evaluationCriteria: list[str] = Field(description="Criteria used to evaluate responses")


class TaskCreate(ToolArgs):
    title: str = Field(description="Task title")
    description: str = Field(description="What needs to be done")
    relatedEntityId: str = Field(description="ID of the entity the task relates to")
    relatedEntityType: RelatedEntityType = Field(description="Kind of the related entity")
    assigneeId: str | None = Field(None, description="ID of the person assigned")
    status: TaskStatus = Field(description="Workflow status")
    priority: TaskPriority = Field(description="Task priority")
    blockerDescription: str | None = Field(None, description="What is blocking the task")


class ComponentCreate(ToolArgs):
    name: str = Field(description="Component name")
    description: str = Field(description="What the component renders or does")
    filePath: str = Field(description="Source file path")
    usageExample: str | None = Field(None, description="Example usage snippet")


class ApiCreate(ToolArgs):
    name: str = Field(description="API name")
    endpoint: str = Field(description="Endpoint path")
    method: HttpMethod = Field(description="HTTP method")
    description: str = Field(description="What the endpoint does")
    requestBody: dict[str, Any] | None = Field(
        None, description="Example or schema of the request body"
    )
    responseBody: dict[str, Any] | None = Field(
        None, description="Example or schema of the response body"
    )


class EnvironmentVariableCreate(ToolArgs):
    name: str = Field(description="Variable name")
    description: str = Field(description="What the variable configures")
    isPublic: bool = Field(description="Whether the variable is exposed to the client")


class StyleGuidePatternCreate(ToolArgs):
    element: str = Field(description="UI element the pattern applies to")
    description: str = Field(description="How the element should look and behave")
    className: str = Field(description="CSS class names implementing the pattern")
    usageExample: str | None = Field(None, description="Example usage snippet")


def partial_model(model: type[ToolArgs], name: str, id_description: str) -> type[ToolArgs]:
    """Build an update model: required ``id`` plus every field of ``model`` made optional."""
    fields: dict[str, Any] = {"id": (str, Field(description=id_description))}
    for field_name, info in model.model_fields.items():
        fields[field_name] = (info.annotation | None, Field(None, description=info.description))
    return create_model(name, __base__=ToolArgs, __module__=__name__, **fields)


UnitUpdate = partial_model(UnitCreate, "UnitUpdate", "ID of the unit to update")
LessonUpdate = partial_model(LessonCreate, "LessonUpdate", "ID of the lesson to update")
LessonPhaseUpdate = partial_model(
    LessonPhaseCreate, "LessonPhaseUpdate", "ID of the lesson phase to update"
)
AppConnectionUpdate = partial_model(
    AppConnectionCreate, "AppConnectionUpdate", "ID of the app connection to update"
)
AssessmentUpdate = partial_model(
    AssessmentCreate, "AssessmentUpdate", "ID of the assessment to update"
)
TaskUpdate = partial_model(TaskCreate, "TaskUpdate", "ID of the task to update")
ComponentUpdate = partial_model(ComponentCreate, "ComponentUpdate", "ID of the component to update")
ApiUpdate = partial_model(ApiCreate, "ApiUpdate", "ID of the API to update")

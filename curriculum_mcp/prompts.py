"""
Server instructions sent during the MCP handshake.
"""

INSTRUCTIONS = """
Curriculum MCP server connected. It stores a curriculum plan and the app
documentation that supports it in one JSON datastore.

## Curriculum (full CRUD)
- Units: list_units, get_units, create_unit, update_unit, delete_unit
- Lessons belong to a unit (unitId): list_lessons(unitId?), get_lessons(id?, unitId?), ...
- Lesson phases belong to a lesson (lessonId): list_lesson_phases(lessonId?), ...
- App connections link a phase to a page, component or endpoint (lessonPhaseId)
- Assessments attach to a lesson or a unit (parentId + parentType)
- Tasks track work on a unit, lesson, phase or assessment
  (relatedEntityId + relatedEntityType, filter by status)

## App documentation
- Components and APIs: full CRUD
- Environment variables and style guide patterns: list, get, create
- State management, custom hooks and conventions: list and get only

## Working rules
- list_* returns summaries; get_* returns full records
- IDs are generated on create; never pass one to create_*
- update_* replaces only the fields you send
- Deleting a record never deletes records that reference it; clean up
  children (lessons, phases, assessments, tasks) yourself
- Each collection is also readable as a resource: curriculum-mcp://<collection>
"""

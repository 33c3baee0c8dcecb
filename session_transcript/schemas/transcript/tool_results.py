"""
Tool use result shapes (the `toolUseResult` field of tool result records).

Results do not carry the tool name (it lives on the assistant's tool_use block),
so they are matched through an ordered union: every built-in shape is closed and
tried first, most specific first; the plain string (error text), the MCP
content-block array and the open ExternalToolUseResult catch-all come last.
A catch-all placed earlier would accept a malformed built-in result.

Observability of catch-all matches is provided by find_fallbacks() in
session_transcript.reporting.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Annotated, Literal

import pydantic

from session_transcript.schemas.transcript.base import PermissiveModel, StrictModel
from session_transcript.schemas.transcript.content import McpContentBlock, TextBlock, Usage
from session_transcript.schemas.transcript.tool_inputs import TodoItem
from session_transcript.schemas.types import EmptyDict, PathStr

# ==============================================================================
# Shell & Filesystem
# ==============================================================================


class BashToolUseResult(StrictModel):
    """Result from Bash tool."""

    stdout: str
    stderr: str
    interrupted: bool
    isImage: bool
    returnCodeInterpretation: str | None = None  # e.g. "No matches found"
    backgroundTaskId: str | None = None  # Present when run_in_background=True


class ReadFileText(StrictModel):
    """File information from a text Read."""

    filePath: PathStr
    content: str
    numLines: int
    startLine: int
    totalLines: int


class ReadTextToolUseResult(StrictModel):
    """Result from Read tool on a text file."""

    type: Literal['text']
    file: ReadFileText


class ReadFileImage(StrictModel):
    """File information from an image Read."""

    base64: str


class ReadImageToolUseResult(StrictModel):
    """Result from Read tool on an image file."""

    type: Literal['image']
    file: ReadFileImage


class GlobToolUseResult(StrictModel):
    """Result from Glob tool."""

    filenames: Sequence[PathStr]
    durationMs: int | float
    numFiles: int
    truncated: bool


class GrepToolUseResult(StrictModel):
    """Result from Grep tool. Fields beyond filenames/mode/numFiles depend on output_mode."""

    filenames: Sequence[PathStr]
    mode: str  # content | files_with_matches | count
    numFiles: int
    content: str | None = None
    numLines: int | None = None
    numMatches: int | None = None
    appliedLimit: int | None = None


class PatchHunk(StrictModel):
    """A single hunk in a git-style patch."""

    oldStart: int
    oldLines: int
    newStart: int
    newLines: int
    lines: Sequence[str]


class EditToolUseResult(StrictModel):
    """Result from Edit tool."""

    filePath: PathStr
    oldString: str
    newString: str
    originalFile: str
    replaceAll: bool
    structuredPatch: Sequence[PatchHunk]
    userModified: bool


class WriteToolUseResult(StrictModel):
    """Result from Write tool. originalFile is null when the file was created."""

    type: Literal['create', 'update']
    filePath: PathStr
    content: str
    originalFile: str | None
    structuredPatch: Sequence[PatchHunk]


# ==============================================================================
# Task Management
# ==============================================================================


class TaskSyncToolUseResult(StrictModel):
    """Result from a Task (subagent) run that completed synchronously."""

    status: Literal['completed']
    prompt: str
    agentId: str
    content: Sequence[TextBlock]
    totalDurationMs: int | float
    totalTokens: int
    totalToolUseCount: int
    usage: Usage


class TaskAsyncToolUseResult(StrictModel):
    """Result from a Task launched in the background."""

    isAsync: Literal[True]
    status: Literal['async_launched']
    agentId: str
    description: str
    prompt: str
    outputFile: PathStr


class AgentTaskInfo(StrictModel):
    """Task entry for a background agent, as returned by TaskOutput."""

    task_id: str
    task_type: str
    status: str
    description: str
    output: str
    prompt: str
    result: str


class BackgroundTaskInfo(StrictModel):
    """Task entry for a background shell, as returned by TaskOutput."""

    task_id: str
    task_type: str
    status: str
    description: str
    output: str
    exitCode: int | None


class TaskOutputToolUseResult(StrictModel):
    """Result from TaskOutput tool."""

    retrieval_status: str  # e.g. 'success', 'timeout'
    task: AgentTaskInfo | BackgroundTaskInfo


class CreatedTask(StrictModel):
    """Task reference returned by TaskCreate."""

    id: str
    subject: str


class TaskCreateToolUseResult(StrictModel):
    """Result from TaskCreate tool."""

    task: CreatedTask


class StatusChange(StrictModel):
    """Status transition reported by TaskUpdate."""

    model_config = pydantic.ConfigDict(
        extra='forbid',
        strict=True,
        frozen=True,
        populate_by_name=True,
    )

    from_: str = pydantic.Field(alias='from')
    to: str


class TaskUpdateToolUseResult(StrictModel):
    """Result from TaskUpdate tool."""

    success: bool
    taskId: str
    updatedFields: Sequence[str]
    statusChange: StatusChange | None = None


class TaskListEntry(StrictModel):
    """A single task in a TaskList result."""

    id: str
    subject: str
    status: str
    blockedBy: Sequence[str]


class TaskListToolUseResult(StrictModel):
    """Result from TaskList tool."""

    tasks: Sequence[TaskListEntry]


class TaskStopToolUseResult(StrictModel):
    """Result from TaskStop tool."""

    message: str
    task_id: str
    task_type: str


class TodoWriteToolUseResult(StrictModel):
    """Result from TodoWrite tool. Legacy, replaced by TaskCreate/TaskUpdate/TaskList."""

    oldTodos: Sequence[TodoItem]
    newTodos: Sequence[TodoItem]


# ==============================================================================
# Web
# ==============================================================================


class WebFetchToolUseResult(StrictModel):
    """Result from WebFetch tool."""

    bytes: int
    code: int  # HTTP status code
    codeText: str
    durationMs: int | float
    result: str
    url: str


class WebSearchResultLink(StrictModel):
    """A single link returned by WebSearch."""

    title: str
    url: str


class WebSearchStructuredResult(StrictModel):
    """Structured WebSearch result batch."""

    tool_use_id: str
    content: Sequence[WebSearchResultLink]


class WebSearchToolUseResult(StrictModel):
    """Result from WebSearch tool. Results mix commentary strings and link batches."""

    durationSeconds: int | float
    query: str
    results: Sequence[str | WebSearchStructuredResult]


# ==============================================================================
# Interactive
# ==============================================================================


class QuestionOption(StrictModel):
    """An option shown for a question."""

    label: str
    description: str


class QuestionSpec(StrictModel):
    """A question as presented to the user."""

    question: str
    header: str
    multiSelect: bool
    options: Sequence[QuestionOption]


class AskUserQuestionToolUseResult(StrictModel):
    """Result from AskUserQuestion tool. answers maps question text to the chosen label(s)."""

    questions: Sequence[QuestionSpec]
    answers: Mapping[str, str]


class SkillToolUseResult(StrictModel):
    """Result from Skill tool."""

    success: bool
    commandName: str
    allowedTools: Sequence[str] | None = None


class ExitPlanModeToolUseResult(StrictModel):
    """Result from ExitPlanMode tool."""

    filePath: PathStr
    isAgent: bool
    plan: str


class KillShellToolUseResult(StrictModel):
    """Result from KillShell tool. Legacy, replaced by TaskStop."""

    message: str
    shell_id: str


# ==============================================================================
# External Tools (MCP servers, plugins)
# ==============================================================================


class ExternalToolUseResult(PermissiveModel):
    """Open catch-all for results of MCP server and plugin tools (object form).

    Results do not carry the tool name, so nothing restricts this fallback to
    external tools; a built-in result that fails its closed shape lands here
    too. find_fallbacks() reports every such match.
    """

    pass


class McpStructuredContent(PermissiveModel):
    """Structured content an MCP tool returned as JSON (open; schemas are per server)."""

    pass


class McpMeta(StrictModel):
    """MCP tool metadata on tool result records.

    The same data also appears in the tool_result content as a JSON string. Only
    populated for MCP tools that return valid JSON.
    """

    model_config = pydantic.ConfigDict(
        extra='forbid',
        strict=True,
        frozen=True,
        populate_by_name=True,  # Allow field access by both name and alias
    )

    meta: EmptyDict | None = pydantic.Field(None, alias='_meta')  # Always {} when present
    structuredContent: McpStructuredContent | None = None


# ==============================================================================
# Ordered Union
# ==============================================================================

# Validated left-to-right. Built-in shapes first, catch-alls last.
ToolUseResult = Annotated[
    # Shell & filesystem
    BashToolUseResult
    | ReadTextToolUseResult
    | ReadImageToolUseResult
    | GlobToolUseResult
    | GrepToolUseResult
    | EditToolUseResult
    | WriteToolUseResult
    # Task management
    | TaskSyncToolUseResult
    | TaskAsyncToolUseResult
    | TaskOutputToolUseResult
    | TaskCreateToolUseResult
    | TaskUpdateToolUseResult
    | TaskListToolUseResult
    | TaskStopToolUseResult
    | TodoWriteToolUseResult
    # Web
    | WebFetchToolUseResult
    | WebSearchToolUseResult
    # Interactive
    | AskUserQuestionToolUseResult
    | SkillToolUseResult
    | ExitPlanModeToolUseResult
    # Legacy
    | KillShellToolUseResult
    # Error text
    | str
    # MCP / plugin tools (content-block array, then any object; must stay last)
    | Sequence[McpContentBlock]
    | ExternalToolUseResult,
    pydantic.Field(union_mode='left_to_right'),
]

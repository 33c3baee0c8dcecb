"""
Tool use input shapes for built-in tools.

Each built-in tool has a closed input model keyed by its tool name in
TOOL_INPUT_MODELS. ToolUseBlock looks the model up by `name` and validates
`input` against it; names missing from the table (MCP servers, plugins) get
ExternalToolInput, which accepts any object.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any, Literal

import pydantic

from session_transcript.schemas.transcript.base import PermissiveModel, StrictModel
from session_transcript.schemas.types import PathStr

# ==============================================================================
# Shared
# ==============================================================================


class TodoItem(StrictModel):
    """Todo list entry (TodoWrite input/result and human prompt snapshots)."""

    content: str
    status: str  # pending | in_progress | completed
    activeForm: str


# ==============================================================================
# File Tools
# ==============================================================================


class SimulatedSedEdit(StrictModel):
    """Pre-computed file edit attached to sed-style Bash commands."""

    filePath: PathStr
    newContent: str


class BashToolInput(StrictModel):
    """Input for Bash tool - executes shell commands.

    Fields:
        command: The shell command to execute (required)
        description: Human-readable description in 5-10 words
        timeout: Timeout in milliseconds (max 600000, default 120000)
        run_in_background: Run command asynchronously
        dangerouslyDisableSandbox: Bypass sandbox protection
        simulatedSedEdit: Edit preview carried on the wire as _simulatedSedEdit
    """

    model_config = pydantic.ConfigDict(
        extra='forbid',
        strict=True,
        frozen=True,
        populate_by_name=True,
    )

    command: str
    description: str | None = None
    timeout: int | float | None = None
    run_in_background: bool | None = None
    dangerouslyDisableSandbox: bool | None = None
    simulatedSedEdit: SimulatedSedEdit | None = pydantic.Field(None, alias='_simulatedSedEdit')


class ReadToolInput(StrictModel):
    """Input for Read tool.

    Fields:
        file_path: Absolute path to the file to read
        offset: Line number to start reading from (1-indexed)
        limit: Maximum number of lines to read
        pages: Page range for PDFs (e.g. "1-5")
    """

    file_path: PathStr
    offset: int | None = None
    limit: int | None = None
    pages: str | None = None


class WriteToolInput(StrictModel):
    """Input for Write tool."""

    file_path: PathStr
    content: str


class EditToolInput(StrictModel):
    """Input for Edit tool."""

    file_path: PathStr
    old_string: str
    new_string: str
    replace_all: bool | None = None


class NotebookEditToolInput(StrictModel):
    """Input for NotebookEdit tool - edits Jupyter notebook cells."""

    notebook_path: PathStr
    new_source: str
    cell_number: int | None = None
    cell_type: Literal['code', 'markdown'] | None = None
    edit_mode: Literal['replace', 'insert', 'delete'] | None = None
    cell_id: str | None = None


# ==============================================================================
# Search Tools
# ==============================================================================


class GlobToolInput(StrictModel):
    """Input for Glob tool - fast file pattern matching."""

    pattern: str
    path: PathStr | None = None


class GrepToolInput(StrictModel):
    """Input for Grep tool - searches file contents using ripgrep.

    Hyphenated ripgrep flags (-A/-B/-C context, -i case insensitive, -n line
    numbers) are stored under dash_* attributes and keep their flag spelling
    on the wire.
    """

    model_config = pydantic.ConfigDict(
        extra='forbid',
        strict=True,
        frozen=True,
        populate_by_name=True,  # Allow both alias and field name
    )

    pattern: str
    path: PathStr | None = None
    glob: str | None = None
    type: str | None = None  # noqa: A003 - matches ripgrep's --type flag
    output_mode: Literal['content', 'files_with_matches', 'count'] | None = None
    multiline: bool | None = None
    head_limit: int | None = None
    offset: int | None = None
    context: int | None = None
    dash_A: int | None = pydantic.Field(None, alias='-A')
    dash_B: int | None = pydantic.Field(None, alias='-B')
    dash_C: int | None = pydantic.Field(None, alias='-C')
    dash_i: bool | None = pydantic.Field(None, alias='-i')
    dash_n: bool | None = pydantic.Field(None, alias='-n')


class WebFetchToolInput(StrictModel):
    """Input for WebFetch tool."""

    url: str
    prompt: str


class WebSearchToolInput(StrictModel):
    """Input for WebSearch tool."""

    query: str
    allowed_domains: Sequence[str] | None = None
    blocked_domains: Sequence[str] | None = None


# ==============================================================================
# Task / Agent Tools
# ==============================================================================


class TaskToolInput(StrictModel):
    """Input for Task tool - launches a subagent."""

    prompt: str
    subagent_type: str
    description: str
    model: Literal['sonnet', 'opus', 'haiku'] | None = None
    run_in_background: bool | None = None
    resume: str | None = None  # Agent ID to resume
    max_turns: int | None = None


class TaskOutputToolInput(StrictModel):
    """Input for TaskOutput tool - retrieves output from running/completed tasks."""

    task_id: str
    block: bool | None = None  # Whether to block waiting for task completion
    timeout: int | float | None = None  # Milliseconds


class TaskCreateToolInput(StrictModel):
    """Input for TaskCreate tool."""

    subject: str
    description: str
    activeForm: str | None = None
    metadata: Mapping[str, Any] | None = None


class TaskGetToolInput(StrictModel):
    """Input for TaskGet tool."""

    taskId: str


class TaskUpdateToolInput(StrictModel):
    """Input for TaskUpdate tool. Only taskId is required; every other field is a partial update."""

    taskId: str
    status: str | None = None
    subject: str | None = None
    description: str | None = None
    activeForm: str | None = None
    owner: str | None = None
    metadata: Mapping[str, Any] | None = None
    addBlocks: Sequence[str] | None = None
    addBlockedBy: Sequence[str] | None = None


class TaskListToolInput(StrictModel):
    """Input for TaskList tool (no parameters)."""

    pass


class TaskStopToolInput(StrictModel):
    """Input for TaskStop tool. Background tasks are addressed by task_id, shells by shell_id."""

    task_id: str | None = None
    shell_id: str | None = None


# ==============================================================================
# Interaction Tools
# ==============================================================================


class AskUserQuestionInputOption(StrictModel):
    """One selectable option in an AskUserQuestion question."""

    label: str
    description: str | None = None


class AskUserQuestionInputItem(StrictModel):
    """A single question asked through AskUserQuestion."""

    question: str
    header: str | None = None
    options: Sequence[AskUserQuestionInputOption]
    multiSelect: bool | None = None


class AskUserQuestionMetadata(StrictModel):
    """Metadata attached to an AskUserQuestion call."""

    source: str | None = None


class AskUserQuestionToolInput(StrictModel):
    """Input for AskUserQuestion tool."""

    questions: Sequence[AskUserQuestionInputItem]
    answers: Mapping[str, str] | None = None
    metadata: AskUserQuestionMetadata | None = None


class SkillToolInput(StrictModel):
    """Input for Skill tool.

    Fields:
        skill: Skill name to invoke (e.g., 'handoff', 'commit')
        args: Optional arguments for the skill
    """

    skill: str
    args: str | None = None


class ExitPlanModeAllowedPrompt(StrictModel):
    """A prompt pre-approved when leaving plan mode."""

    tool: str
    prompt: str


class ExitPlanModeToolInput(StrictModel):
    """Input for ExitPlanMode tool."""

    allowedPrompts: Sequence[ExitPlanModeAllowedPrompt] | None = None
    pushToRemote: bool | None = None
    remoteSessionId: str | None = None
    remoteSessionUrl: str | None = None
    remoteSessionTitle: str | None = None


class EnterPlanModeToolInput(StrictModel):
    """Input for EnterPlanMode tool (no parameters)."""

    pass


# ==============================================================================
# Legacy Tools
# ==============================================================================


class TodoWriteToolInput(StrictModel):
    """Input for TodoWrite tool. Legacy, replaced by TaskCreate/TaskUpdate/TaskList."""

    todos: Sequence[TodoItem]


class KillShellToolInput(StrictModel):
    """Input for KillShell tool. Legacy, replaced by TaskStop."""

    shell_id: str | None = None


# ==============================================================================
# External Tools (MCP servers, plugins)
# ==============================================================================


class ExternalToolInput(PermissiveModel):
    """
    Input for a tool with no declared input shape (MCP server or plugin tool).

    Open: any object is accepted and kept as extra fields. Use get_extra_fields()
    to read the arguments back.
    """

    pass


# ==============================================================================
# Name -> Input Model
# ==============================================================================

TOOL_INPUT_MODELS: Mapping[str, type[pydantic.BaseModel]] = MappingProxyType(
    {
        'Bash': BashToolInput,
        'Read': ReadToolInput,
        'Write': WriteToolInput,
        'Edit': EditToolInput,
        'NotebookEdit': NotebookEditToolInput,
        'Glob': GlobToolInput,
        'Grep': GrepToolInput,
        'Task': TaskToolInput,
        'TaskOutput': TaskOutputToolInput,
        'TaskCreate': TaskCreateToolInput,
        'TaskGet': TaskGetToolInput,
        'TaskUpdate': TaskUpdateToolInput,
        'TaskList': TaskListToolInput,
        'TaskStop': TaskStopToolInput,
        'WebFetch': WebFetchToolInput,
        'WebSearch': WebSearchToolInput,
        'AskUserQuestion': AskUserQuestionToolInput,
        'Skill': SkillToolInput,
        'ExitPlanMode': ExitPlanModeToolInput,
        'EnterPlanMode': EnterPlanModeToolInput,
        'TodoWrite': TodoWriteToolInput,
        'KillShell': KillShellToolInput,
    }
)

# Schema-facing union of every input shape. Validation never walks this union;
# ToolUseBlock picks the member by tool name.
ToolInput = (
    BashToolInput
    | ReadToolInput
    | WriteToolInput
    | EditToolInput
    | NotebookEditToolInput
    | GlobToolInput
    | GrepToolInput
    | TaskToolInput
    | TaskOutputToolInput
    | TaskCreateToolInput
    | TaskGetToolInput
    | TaskUpdateToolInput
    | TaskListToolInput
    | TaskStopToolInput
    | WebFetchToolInput
    | WebSearchToolInput
    | AskUserQuestionToolInput
    | SkillToolInput
    | ExitPlanModeToolInput
    | EnterPlanModeToolInput
    | TodoWriteToolInput
    | KillShellToolInput
    | ExternalToolInput
)

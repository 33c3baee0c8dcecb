"""
Record shapes for session transcript JSONL lines.

Each line of a transcript is one record of 7 top-level kinds, tagged on `type`:

    summary                 SummaryRecord
    file-history-snapshot   FileHistorySnapshotRecord
    user                    HumanPromptRecord | ToolResultRecord | RichContentRecord
    assistant               AssistantRecord
    system                  TurnDuration | ApiError | CompactBoundary | MicrocompactBoundary
                            | LocalCommand | GenericSystemRecord (unknown subtypes)
    progress                ProgressRecord (data keyed on data.type)
    queue-operation         QueueOperationRecord

User and system records share a tag with their siblings, so they are never
validated as a union; session_transcript.dispatch picks exactly one shape from
observable features of the line. TranscriptLine below is the schema-facing union.

Every shape here is closed, except GenericSystemRecord (the forward-compatibility
valve for system subtypes) and the network error shapes nested in api_error
records, which carry vendor-added fields.

Round-trip serialization:
- Use model_dump(mode='json', by_alias=True, exclude_unset=True) to get back the
  original JSON structure (aliased keys such as '_meta', '-A' keep their spelling)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Annotated, Any, Literal

import pydantic

from session_transcript.schemas.transcript.base import PermissiveModel, StrictModel
from session_transcript.schemas.transcript.content import (
    ContentBlock,
    ToolResultBlock,
    Usage,
    UserContentBlock,
)
from session_transcript.schemas.transcript.tool_inputs import TodoItem
from session_transcript.schemas.transcript.tool_results import McpMeta, ToolUseResult
from session_transcript.schemas.types import EmptyDict, PathStr, tag_dispatch

# Schema version (bump on any shape change)
SCHEMA_VERSION = '0.3.0'
CLAUDE_CODE_MIN_VERSION = '2.0.35'
CLAUDE_CODE_MAX_VERSION = '2.1.25'


# ==============================================================================
# Summary Record
# ==============================================================================


class SummaryRecord(StrictModel):
    """Conversation summary record (no envelope: no uuid, timestamp or sessionId)."""

    type: Literal['summary']
    summary: str
    leafUuid: str  # UUID of the last record the summary covers


# ==============================================================================
# File History Snapshot Record
# ==============================================================================


class FileBackupEntry(StrictModel):
    """Backup of a single tracked file."""

    backupFileName: str | None  # null when the file did not exist yet
    backupTime: str
    version: int


class FileHistorySnapshot(StrictModel):
    """Snapshot of tracked file backups for one message."""

    messageId: str
    trackedFileBackups: Mapping[PathStr, FileBackupEntry]
    timestamp: str


class FileHistorySnapshotRecord(StrictModel):
    """File history snapshot record."""

    type: Literal['file-history-snapshot']
    messageId: str
    snapshot: FileHistorySnapshot
    isSnapshotUpdate: bool


# ==============================================================================
# Record Envelope
# ==============================================================================


class TranscriptRecord(StrictModel):
    """Envelope shared by user, assistant and system records."""

    type: str
    parentUuid: str | None  # Required; null only on the first record of a chain
    isSidechain: bool
    userType: Literal['external']
    cwd: PathStr
    sessionId: str
    version: str  # Claude Code version that wrote the record
    gitBranch: str
    uuid: str
    timestamp: str  # ISO-8601
    slug: str | None = None  # Human-readable session slug (adjective-verb-animal)
    agentId: str | None = None  # Present in agent subfiles


# ==============================================================================
# User Records
# ==============================================================================


class ThinkingTrigger(StrictModel):
    """Span of a prompt that triggered extended thinking (e.g. 'ultrathink')."""

    start: int
    end: int
    text: str


class SimpleThinkingMetadata(StrictModel):
    """Thinking configuration as a plain token budget."""

    maxThinkingTokens: int


class ThinkingLevelMetadata(StrictModel):
    """Thinking configuration as a level with its triggers."""

    level: str
    disabled: bool
    triggers: Sequence[ThinkingTrigger]


ThinkingMetadata = SimpleThinkingMetadata | ThinkingLevelMetadata


class UserRecord(TranscriptRecord):
    """Fields shared by the three user record shapes."""

    type: Literal['user']
    isMeta: bool | None = None
    sourceToolUseID: str | None = None  # Tool use that generated this message
    isVisibleInTranscriptOnly: bool | None = None
    isCompactSummary: bool | None = None


class HumanPromptMessage(StrictModel):
    """Message of a typed prompt."""

    role: Literal['user']
    content: str


class HumanPromptRecord(UserRecord):
    """A prompt typed by the user (message.content is plain text)."""

    message: HumanPromptMessage
    thinkingMetadata: ThinkingMetadata | None = None
    todos: Sequence[TodoItem] | None = None  # Todo list state at prompt time
    permissionMode: str | None = None  # e.g. 'default', 'acceptEdits', 'plan'
    planContent: str | None = None


class ToolResultMessage(StrictModel):
    """Message carrying tool_result blocks."""

    role: Literal['user']
    content: Sequence[ToolResultBlock]


class ToolResultRecord(UserRecord):
    """
    Response to an assistant tool call.

    toolUseResult holds the tool's full structured output (never truncated,
    unlike a persisted tool_result block).
    """

    message: ToolResultMessage
    toolUseResult: ToolUseResult
    sourceToolAssistantUUID: str  # Assistant record that issued the call
    mcpMeta: McpMeta | None = None


class RichContentMessage(StrictModel):
    """Message with array content that is not a tool response."""

    role: Literal['user']
    content: Sequence[UserContentBlock]


class RichContentRecord(UserRecord):
    """Pasted or multipart user content (text blocks, images, documents)."""

    message: RichContentMessage
    sourceToolAssistantUUID: str | None = None
    thinkingMetadata: ThinkingMetadata | None = None
    todos: Sequence[TodoItem] | None = None
    permissionMode: str | None = None
    imagePasteIds: Sequence[int] | None = None  # IDs of pasted images in this message


# ==============================================================================
# Assistant Record
# ==============================================================================


class ClearThinkingEdit(StrictModel):
    """Applied context edit for clearing thinking blocks."""

    type: Literal['clear_thinking_20251015']
    cleared_thinking_turns: int
    cleared_input_tokens: int


class ContextManagement(StrictModel):
    """Context management metadata for message responses."""

    applied_edits: Sequence[ClearThinkingEdit]  # Can be empty


class AssistantMessage(StrictModel):
    """API response message stored on an assistant record."""

    model: str  # e.g. claude-sonnet-4-5-20250929, or '<synthetic>'
    id: str
    type: Literal['message']
    role: Literal['assistant']
    content: Sequence[ContentBlock]
    stop_reason: str | None
    stop_sequence: str | None
    usage: Usage
    container: None = pydantic.Field(
        None, description='Reserved for future use', json_schema_extra={'status': 'reserved'}
    )
    context_management: ContextManagement | None = None


class AssistantRecord(TranscriptRecord):
    """Assistant message record."""

    type: Literal['assistant']
    message: AssistantMessage
    requestId: str | None = None
    error: str | None = None  # e.g. 'rate_limit', 'authentication_failed'
    isApiErrorMessage: bool | None = None
    apiError: str | None = None


# ==============================================================================
# System Records
# ==============================================================================


class SystemRecord(TranscriptRecord):
    """Fields shared by every system subtype."""

    type: Literal['system']
    subtype: str
    level: str | None = None  # e.g. 'info', 'warning', 'error', 'suggestion'
    isMeta: bool | None = None
    content: str | None = None


class TurnDurationSystemRecord(SystemRecord):
    """Wall-clock duration of a completed turn."""

    subtype: Literal['turn_duration']
    durationMs: int | float
    isMeta: bool


# -- Network error causes (undici / Node.js), vendor fields pass through --


class SocketInfo(PermissiveModel):
    """Socket details attached to a socket error."""

    localAddress: str
    localPort: int
    bytesWritten: int
    bytesRead: int


class SocketErrorCause(PermissiveModel):
    """Socket-level failure (e.g. UND_ERR_SOCKET)."""

    name: str
    code: str
    socket: SocketInfo


class SyscallErrorCause(PermissiveModel):
    """Failed system call (e.g. ECONNRESET, ETIMEDOUT)."""

    code: str
    errno: int
    syscall: str


class TlsErrorCause(PermissiveModel):
    """TLS handshake or certificate failure."""

    code: str
    library: str
    reason: str


NetworkErrorCause = Annotated[
    SocketErrorCause | SyscallErrorCause | TlsErrorCause,
    pydantic.Field(union_mode='left_to_right'),
]


class NetworkErrorWrapper(PermissiveModel):
    """Outer network error wrapping an optional inner cause."""

    cause: NetworkErrorCause | None = None


class NetworkApiError(PermissiveModel):
    """API error raised by the network layer."""

    cause: NetworkErrorWrapper


# -- Anthropic API errors --


class ApiErrorBody(StrictModel):
    """Error type and message from an API error response."""

    type: str  # e.g. 'overloaded_error', 'rate_limit_error'
    message: str


class AnthropicApiErrorDetail(StrictModel):
    """Error response body from the Anthropic API."""

    type: Literal['error']
    error: ApiErrorBody
    request_id: str


class AnthropicApiError(StrictModel):
    """HTTP error returned by the Anthropic API."""

    status: int
    headers: Mapping[str, Any]
    requestID: str
    error: AnthropicApiErrorDetail


ApiError = Annotated[
    NetworkApiError | AnthropicApiError | EmptyDict,
    pydantic.Field(union_mode='left_to_right'),
]


class ApiErrorNetworkCause(PermissiveModel):
    """Top-level cause of an api_error record when the network failed."""

    cause: NetworkErrorCause


ApiErrorCause = Annotated[
    ApiErrorNetworkCause | EmptyDict,
    pydantic.Field(union_mode='left_to_right'),
]


class ApiErrorSystemRecord(SystemRecord):
    """API call failure, with retry bookkeeping when Claude Code retries."""

    subtype: Literal['api_error']
    error: ApiError | None = None
    cause: ApiErrorCause | None = None
    retryInMs: int | float | None = None
    retryAttempt: int | None = None
    maxRetries: int | None = None


class CompactMetadata(StrictModel):
    """Metadata for a conversation compaction."""

    trigger: str  # 'manual' | 'auto'
    preTokens: int


class CompactBoundarySystemRecord(SystemRecord):
    """Marks where a conversation was compacted."""

    subtype: Literal['compact_boundary']
    compactMetadata: CompactMetadata | None = None
    logicalParentUuid: str | None = None


class MicrocompactMetadata(StrictModel):
    """Metadata for a microcompaction (old tool results cleared in place)."""

    trigger: str
    preTokens: int
    tokensSaved: int
    compactedToolIds: Sequence[str]
    clearedAttachmentUUIDs: Sequence[str]


class MicrocompactBoundarySystemRecord(SystemRecord):
    """Marks where old tool results were cleared from context."""

    subtype: Literal['microcompact_boundary']
    microcompactMetadata: MicrocompactMetadata | None = None


class LocalCommandSystemRecord(SystemRecord):
    """Output of a local slash command."""

    subtype: Literal['local_command']


class GenericSystemRecord(SystemRecord, PermissiveModel):
    """
    System record with an unrecognized subtype.

    Envelope fields are still checked; any other field passes through. New
    subtypes land here until they get a closed shape of their own.
    """

    model_config = pydantic.ConfigDict(
        extra='allow',
        strict=True,
        frozen=True,
    )


# ==============================================================================
# Progress Record
# ==============================================================================


class HookProgressData(StrictModel):
    """Progress data for hook execution."""

    type: Literal['hook_progress']
    hookEvent: str  # e.g., "SessionStart"
    hookName: str  # e.g., "SessionStart:startup"
    command: str


class WaitingForTaskData(StrictModel):
    """Progress data for waiting on a task."""

    type: Literal['waiting_for_task']
    taskDescription: str
    taskType: str  # e.g. 'local_bash', 'local_agent'


class QueryUpdateData(StrictModel):
    """Progress data for search query update."""

    type: Literal['query_update']
    query: str


class BashProgressData(StrictModel):
    """Progress data for bash command execution."""

    type: Literal['bash_progress']
    output: str
    fullOutput: str
    elapsedTimeSeconds: int | float
    totalLines: int
    timeoutMs: int | None = None  # Present when command has explicit timeout


class AgentProgressData(StrictModel):
    """Progress data for agent/subagent execution."""

    type: Literal['agent_progress']
    agentId: str
    prompt: str
    message: Mapping[str, Any]  # Subagent message, same structure as a user/assistant record
    normalizedMessages: Sequence[Mapping[str, Any]] | None = None
    resume: str | None = None  # Agent resume ID


class SearchResultsReceivedData(StrictModel):
    """Progress data for web search results received."""

    type: Literal['search_results_received']
    resultCount: int
    query: str


class McpProgressData(StrictModel):
    """Progress data for an MCP tool call (started, completed, failed)."""

    type: Literal['mcp_progress']
    serverName: str
    toolName: str
    status: str
    elapsedTimeMs: int | float | None = None  # Absent on 'started'


ProgressData = Annotated[
    Annotated[HookProgressData, pydantic.Tag('HookProgressData')]
    | Annotated[WaitingForTaskData, pydantic.Tag('WaitingForTaskData')]
    | Annotated[QueryUpdateData, pydantic.Tag('QueryUpdateData')]
    | Annotated[BashProgressData, pydantic.Tag('BashProgressData')]
    | Annotated[AgentProgressData, pydantic.Tag('AgentProgressData')]
    | Annotated[SearchResultsReceivedData, pydantic.Tag('SearchResultsReceivedData')]
    | Annotated[McpProgressData, pydantic.Tag('McpProgressData')],
    tag_dispatch(
        'type',
        {
            'hook_progress': 'HookProgressData',
            'waiting_for_task': 'WaitingForTaskData',
            'query_update': 'QueryUpdateData',
            'bash_progress': 'BashProgressData',
            'agent_progress': 'AgentProgressData',
            'search_results_received': 'SearchResultsReceivedData',
            'mcp_progress': 'McpProgressData',
        },
    ),
]


class ProgressRecord(StrictModel):
    """Progress record for tracking long-running operations (hooks, shells, agents, MCP calls)."""

    type: Literal['progress']
    parentUuid: str | None = None
    isSidechain: bool | None = None
    data: ProgressData
    toolUseID: str
    parentToolUseID: str
    timestamp: str
    uuid: str
    cwd: PathStr
    gitBranch: str
    sessionId: str
    slug: str | None = None  # Missing on first record before slug assigned
    userType: Literal['external']
    version: str
    agentId: str | None = None


# ==============================================================================
# Queue Operation Record
# ==============================================================================


class QueueOperationRecord(StrictModel):
    """Prompt queue operation (user typed while the assistant was busy)."""

    type: Literal['queue-operation']
    operation: str  # e.g. 'enqueue', 'dequeue', 'remove'
    timestamp: str
    sessionId: str
    content: str | None = None


# ==============================================================================
# Transcript Line
# ==============================================================================

SystemRecordShape = (
    TurnDurationSystemRecord
    | ApiErrorSystemRecord
    | CompactBoundarySystemRecord
    | MicrocompactBoundarySystemRecord
    | LocalCommandSystemRecord
    | GenericSystemRecord
)

UserRecordShape = HumanPromptRecord | ToolResultRecord | RichContentRecord

# Schema-facing union of every record shape. Validation goes through
# session_transcript.dispatch, which selects one member per line.
TranscriptLine = (
    SummaryRecord
    | FileHistorySnapshotRecord
    | UserRecordShape
    | AssistantRecord
    | SystemRecordShape
    | ProgressRecord
    | QueueOperationRecord
)

"""
Session transcript shape catalog.

Pydantic models for every line kind of a session transcript and the nested
shapes they carry. Layout:

- records.py: the 7 record kinds and their sub-variants
- content.py: message content blocks, tool_result block variants, usage, MCP blocks
- tool_inputs.py: built-in tool inputs and the name -> input model table
- tool_results.py: toolUseResult shapes and their ordered union
- persisted_output.py: the <persisted-output> wrapper transform
- auxiliary.py: sessions-index.json and history.jsonl shapes
- catalog.py: derived registry of every shape with its field policy
"""

from __future__ import annotations

from session_transcript.schemas.transcript.auxiliary import (
    AUXILIARY_MODELS,
    HashedPastedContent,
    HistoryEntry,
    InlinePastedContent,
    SessionIndex,
    SessionIndexEntry,
)
from session_transcript.schemas.transcript.base import PermissiveModel, StrictModel
from session_transcript.schemas.transcript.catalog import (
    SHAPES,
    ShapeInfo,
    describe_shape,
    get_shape,
    list_shapes,
)
from session_transcript.schemas.transcript.content import (
    # Tool result blocks
    ArrayToolResultBlock,
    # Usage
    CacheCreation,
    # Assistant content
    ContentBlock,
    # User content
    DocumentBlock,
    DocumentSource,
    ImageBlock,
    ImageSource,
    InlineToolResultBlock,
    # MCP content
    McpAnnotations,
    McpAudioContent,
    McpContentBlock,
    McpEmbeddedResource,
    McpImageContent,
    McpResourceContents,
    McpResourceLink,
    McpTextContent,
    PersistedToolResultBlock,
    RedactedThinkingBlock,
    ServerToolUse,
    TextBlock,
    ThinkingBlock,
    ToolReferenceBlock,
    ToolResultBlock,
    ToolResultItem,
    ToolUseBlock,
    ToolUseCaller,
    Usage,
    UserContentBlock,
)
from session_transcript.schemas.transcript.persisted_output import (
    PERSISTED_OUTPUT_CLOSE_TAG,
    PERSISTED_OUTPUT_OPEN_TAG,
    PERSISTED_OUTPUT_JSON_PATTERN,
    PERSISTED_OUTPUT_PATTERN,
    PersistedOutput,
    is_persisted_output,
    parse_persisted_output,
    render_persisted_output,
)
from session_transcript.schemas.transcript.records import (
    CLAUDE_CODE_MAX_VERSION,
    CLAUDE_CODE_MIN_VERSION,
    # Schema version
    SCHEMA_VERSION,
    # Progress data
    AgentProgressData,
    # System
    AnthropicApiError,
    AnthropicApiErrorDetail,
    ApiError,
    ApiErrorBody,
    ApiErrorCause,
    ApiErrorNetworkCause,
    ApiErrorSystemRecord,
    # Assistant
    AssistantMessage,
    AssistantRecord,
    BashProgressData,
    ClearThinkingEdit,
    CompactBoundarySystemRecord,
    CompactMetadata,
    ContextManagement,
    # File history
    FileBackupEntry,
    FileHistorySnapshot,
    FileHistorySnapshotRecord,
    GenericSystemRecord,
    HookProgressData,
    # User
    HumanPromptMessage,
    HumanPromptRecord,
    LocalCommandSystemRecord,
    McpProgressData,
    MicrocompactBoundarySystemRecord,
    MicrocompactMetadata,
    NetworkApiError,
    NetworkErrorCause,
    NetworkErrorWrapper,
    ProgressData,
    ProgressRecord,
    QueryUpdateData,
    QueueOperationRecord,
    RichContentMessage,
    RichContentRecord,
    SearchResultsReceivedData,
    SimpleThinkingMetadata,
    SocketErrorCause,
    SocketInfo,
    # Summary
    SummaryRecord,
    SyscallErrorCause,
    SystemRecord,
    SystemRecordShape,
    ThinkingLevelMetadata,
    ThinkingMetadata,
    ThinkingTrigger,
    TlsErrorCause,
    ToolResultMessage,
    ToolResultRecord,
    # Envelope
    TranscriptLine,
    TranscriptRecord,
    TurnDurationSystemRecord,
    UserRecord,
    UserRecordShape,
    WaitingForTaskData,
)
from session_transcript.schemas.transcript.tool_inputs import (
    TOOL_INPUT_MODELS,
    AskUserQuestionInputItem,
    AskUserQuestionInputOption,
    AskUserQuestionMetadata,
    AskUserQuestionToolInput,
    BashToolInput,
    EditToolInput,
    EnterPlanModeToolInput,
    ExitPlanModeAllowedPrompt,
    ExitPlanModeToolInput,
    ExternalToolInput,
    GlobToolInput,
    GrepToolInput,
    KillShellToolInput,
    NotebookEditToolInput,
    ReadToolInput,
    SimulatedSedEdit,
    SkillToolInput,
    TaskCreateToolInput,
    TaskGetToolInput,
    TaskListToolInput,
    TaskOutputToolInput,
    TaskStopToolInput,
    TaskToolInput,
    TaskUpdateToolInput,
    TodoItem,
    TodoWriteToolInput,
    ToolInput,
    WebFetchToolInput,
    WebSearchToolInput,
    WriteToolInput,
)
from session_transcript.schemas.transcript.tool_results import (
    AgentTaskInfo,
    AskUserQuestionToolUseResult,
    BackgroundTaskInfo,
    BashToolUseResult,
    CreatedTask,
    EditToolUseResult,
    ExitPlanModeToolUseResult,
    ExternalToolUseResult,
    GlobToolUseResult,
    GrepToolUseResult,
    KillShellToolUseResult,
    McpMeta,
    McpStructuredContent,
    PatchHunk,
    QuestionOption,
    QuestionSpec,
    ReadFileImage,
    ReadFileText,
    ReadImageToolUseResult,
    ReadTextToolUseResult,
    SkillToolUseResult,
    StatusChange,
    TaskAsyncToolUseResult,
    TaskCreateToolUseResult,
    TaskListEntry,
    TaskListToolUseResult,
    TaskOutputToolUseResult,
    TaskStopToolUseResult,
    TaskSyncToolUseResult,
    TaskUpdateToolUseResult,
    TodoWriteToolUseResult,
    ToolUseResult,
    WebFetchToolUseResult,
    WebSearchResultLink,
    WebSearchStructuredResult,
    WebSearchToolUseResult,
    WriteToolUseResult,
)

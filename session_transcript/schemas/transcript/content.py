"""
Content block shapes for user and assistant messages.

User message content:
- tool_result blocks in three variants (persisted, inline, array), tried in that order
- text, image and document blocks for pasted / multipart prompts

Assistant message content:
- text, thinking, tool_use, redacted_thinking (tagged on 'type')

Tool use blocks validate their `input` against the declared input shape for the
tool name. Unknown names (MCP servers, plugins) accept any object.

Also home to the token usage shapes shared by assistant messages and Task results,
and the MCP content blocks returned verbatim by external tool servers.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated, Any, Literal

import pydantic
from pydantic_core import PydanticCustomError

from session_transcript.schemas.transcript.base import PermissiveModel, StrictModel
from session_transcript.schemas.transcript.persisted_output import (
    PERSISTED_OUTPUT_JSON_PATTERN,
    PersistedOutput,
    parse_persisted_output,
)
from session_transcript.schemas.transcript.tool_inputs import (
    TOOL_INPUT_MODELS,
    ExternalToolInput,
    ToolInput,
)
from session_transcript.schemas.types import tag_dispatch

# ==============================================================================
# Text / Image / Document Blocks
# ==============================================================================


class TextBlock(StrictModel):
    """Text content block from user or assistant messages."""

    type: Literal['text']
    text: str


class ImageSource(StrictModel):
    """Image source data for image content."""

    type: str  # 'base64' in every observed record
    media_type: str  # e.g. 'image/png'
    data: str  # Base64 encoded image data


class ImageBlock(StrictModel):
    """Image content block from user messages (pasted screenshots, Read of image files)."""

    type: Literal['image']
    source: ImageSource


class DocumentSource(StrictModel):
    """Document source data for document content (PDFs, etc.)."""

    type: str
    media_type: str  # e.g. 'application/pdf'
    data: str


class DocumentBlock(StrictModel):
    """Document content block from user messages (PDF uploads, etc.)."""

    type: Literal['document']
    source: DocumentSource


class ToolReferenceBlock(StrictModel):
    """Tool reference inside tool_result content (tool search results)."""

    type: Literal['tool_reference']
    tool_name: str


ToolResultItem = Annotated[
    Annotated[TextBlock, pydantic.Tag('TextBlock')]
    | Annotated[ImageBlock, pydantic.Tag('ImageBlock')]
    | Annotated[ToolReferenceBlock, pydantic.Tag('ToolReferenceBlock')],
    tag_dispatch('type', {'text': 'TextBlock', 'image': 'ImageBlock', 'tool_reference': 'ToolReferenceBlock'}),
]


# ==============================================================================
# Tool Result Blocks (three variants, ordered)
# ==============================================================================


class PersistedToolResultBlock(StrictModel):
    """
    Tool result whose content was replaced with a <persisted-output> wrapper.

    The content field is TRANSFORMED on validation: the wrapper string becomes a
    structured PersistedOutput (sizeDescription, filePath, preview). A string that
    starts like a wrapper but does not match the full template is rejected, so the
    ordered union moves on to InlineToolResultBlock.
    """

    type: Literal['tool_result']
    tool_use_id: str
    content: Annotated[
        PersistedOutput,
        pydantic.WithJsonSchema(
            {'type': 'string', 'pattern': PERSISTED_OUTPUT_JSON_PATTERN},
            mode='validation',
        ),
    ]
    is_error: bool | None = None

    @pydantic.field_validator('content', mode='before')
    @classmethod
    def parse_wrapper(cls, value: Any) -> Any:
        """Transform the wrapper string into its parsed components."""
        if isinstance(value, PersistedOutput):
            return value
        if not isinstance(value, str):
            raise PydanticCustomError('transform_rejected', 'Persisted output content must be a string')
        parsed = parse_persisted_output(value)
        if parsed is None:
            raise PydanticCustomError(
                'transform_rejected',
                'Content does not match the <persisted-output> template',
            )
        return parsed


class InlineToolResultBlock(StrictModel):
    """Tool result with inline string content (output small enough to keep in the JSONL line)."""

    type: Literal['tool_result']
    tool_use_id: str
    content: str
    is_error: bool | None = None


class ArrayToolResultBlock(StrictModel):
    """Tool result with structured array content (subagent text, images, tool references)."""

    type: Literal['tool_result']
    tool_use_id: str
    content: Sequence[ToolResultItem]
    is_error: bool | None = None


# Order matters: PersistedToolResultBlock first (its transform rejects non-wrapper
# strings), then InlineToolResultBlock (any string), then ArrayToolResultBlock.
ToolResultBlock = Annotated[
    PersistedToolResultBlock | InlineToolResultBlock | ArrayToolResultBlock,
    pydantic.Field(union_mode='left_to_right'),
]

# Content of a user message that carries an array (rich content records)
UserContentBlock = Annotated[
    Annotated[ToolResultBlock, pydantic.Tag('ToolResultBlock')]
    | Annotated[TextBlock, pydantic.Tag('TextBlock')]
    | Annotated[ImageBlock, pydantic.Tag('ImageBlock')]
    | Annotated[DocumentBlock, pydantic.Tag('DocumentBlock')],
    tag_dispatch(
        'type',
        {
            'tool_result': 'ToolResultBlock',
            'text': 'TextBlock',
            'image': 'ImageBlock',
            'document': 'DocumentBlock',
        },
    ),
]


# ==============================================================================
# Assistant Content Blocks
# ==============================================================================


class ThinkingBlock(StrictModel):
    """Thinking content block from assistant messages."""

    type: Literal['thinking']
    thinking: str
    signature: str


class RedactedThinkingBlock(StrictModel):
    """Thinking block whose contents were redacted by the API."""

    type: Literal['redacted_thinking']
    data: str


class ToolUseCaller(StrictModel):
    """Caller metadata for tool use."""

    type: str  # 'direct' in every observed record


class ToolUseBlock(StrictModel):
    """
    Tool use content block from assistant messages.

    `input` is checked against the declared input shape for `name`. A name with no
    declared shape (MCP server or plugin tool) accepts any object unchecked, so
    third-party tools never fail validation while built-in tools are held exactly.
    """

    type: Literal['tool_use']
    id: str
    name: str
    input: ToolInput
    caller: ToolUseCaller | None = None

    @pydantic.field_validator('input', mode='wrap')
    @classmethod
    def validate_tool_input(
        cls,
        value: Any,
        handler: pydantic.ValidatorFunctionWrapHandler,
        info: pydantic.ValidationInfo,
    ) -> Any:
        """Validate input against the model registered for the tool name.

        Errors from the tool's model keep their own locations, so a bad field
        surfaces as input.<field> on the enclosing block.
        """
        model = TOOL_INPUT_MODELS.get(info.data.get('name', ''))
        if model is None:
            return ExternalToolInput.model_validate(value)
        return model.model_validate(value)


ContentBlock = Annotated[
    Annotated[TextBlock, pydantic.Tag('TextBlock')]
    | Annotated[ThinkingBlock, pydantic.Tag('ThinkingBlock')]
    | Annotated[ToolUseBlock, pydantic.Tag('ToolUseBlock')]
    | Annotated[RedactedThinkingBlock, pydantic.Tag('RedactedThinkingBlock')],
    tag_dispatch(
        'type',
        {
            'text': 'TextBlock',
            'thinking': 'ThinkingBlock',
            'tool_use': 'ToolUseBlock',
            'redacted_thinking': 'RedactedThinkingBlock',
        },
    ),
]


# ==============================================================================
# Token Usage
# ==============================================================================


class CacheCreation(StrictModel):
    """Cache creation token breakdown."""

    ephemeral_5m_input_tokens: int
    ephemeral_1h_input_tokens: int


class ServerToolUse(StrictModel):
    """Server-side tool use tracking."""

    web_search_requests: int
    web_fetch_requests: int


class Usage(StrictModel):
    """Token usage information for assistant messages and Task results."""

    input_tokens: int
    cache_creation_input_tokens: int
    cache_read_input_tokens: int
    cache_creation: CacheCreation | None = None
    output_tokens: int
    service_tier: str | None = None  # null for synthetic messages
    inference_geo: str | None = None
    server_tool_use: ServerToolUse | None = None


# ==============================================================================
# MCP Content Blocks (raw MCP server responses)
# ==============================================================================


class McpAnnotations(PermissiveModel):
    """Optional annotations on MCP content blocks and resources.

    Passthrough: servers are free to attach vendor keys next to the standard ones.
    """

    audience: Sequence[Literal['user', 'assistant']] | None = None
    priority: int | float | None = None
    lastModified: str | None = None


class McpTextContent(StrictModel):
    """MCP text content block."""

    type: Literal['text']
    text: str
    annotations: McpAnnotations | None = None


class McpImageContent(StrictModel):
    """MCP image content block."""

    type: Literal['image']
    data: str
    mimeType: str
    annotations: McpAnnotations | None = None


class McpAudioContent(StrictModel):
    """MCP audio content block."""

    type: Literal['audio']
    data: str
    mimeType: str
    annotations: McpAnnotations | None = None


class McpResourceLink(StrictModel):
    """MCP link to a resource the client may fetch."""

    type: Literal['resource_link']
    uri: str
    name: str
    description: str | None = None
    mimeType: str | None = None
    annotations: McpAnnotations | None = None


class McpResourceContents(StrictModel):
    """Contents of an embedded MCP resource (text or blob)."""

    uri: str
    mimeType: str | None = None
    text: str | None = None
    blob: str | None = None
    annotations: McpAnnotations | None = None


class McpEmbeddedResource(StrictModel):
    """MCP resource embedded in a tool result."""

    type: Literal['resource']
    resource: McpResourceContents
    annotations: McpAnnotations | None = None


McpContentBlock = Annotated[
    Annotated[McpTextContent, pydantic.Tag('McpTextContent')]
    | Annotated[McpImageContent, pydantic.Tag('McpImageContent')]
    | Annotated[McpAudioContent, pydantic.Tag('McpAudioContent')]
    | Annotated[McpResourceLink, pydantic.Tag('McpResourceLink')]
    | Annotated[McpEmbeddedResource, pydantic.Tag('McpEmbeddedResource')],
    tag_dispatch(
        'type',
        {
            'text': 'McpTextContent',
            'image': 'McpImageContent',
            'audio': 'McpAudioContent',
            'resource_link': 'McpResourceLink',
            'resource': 'McpEmbeddedResource',
        },
    ),
]

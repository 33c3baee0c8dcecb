"""Shared transcript line builders."""

from __future__ import annotations

import copy
from typing import Any

import pytest

SESSION_ID = '5f0c2a9e-1b7d-4c6a-9e3f-2d8b1a4c7e01'


@pytest.fixture
def envelope() -> dict[str, Any]:
    """Envelope fields shared by user, assistant and system records."""
    return {
        'parentUuid': 'a-001',
        'isSidechain': False,
        'userType': 'external',
        'cwd': '/home/dev/project',
        'sessionId': SESSION_ID,
        'version': '2.1.20',
        'gitBranch': 'main',
        'uuid': 'u-002',
        'timestamp': '2026-01-20T10:00:01.000Z',
    }


@pytest.fixture
def tool_result_line(envelope: dict[str, Any]) -> dict[str, Any]:
    """A Bash tool result record that validates as-is."""
    return {
        **copy.deepcopy(envelope),
        'type': 'user',
        'toolUseResult': {'stdout': 'ok', 'stderr': '', 'interrupted': False, 'isImage': False},
        'message': {
            'role': 'user',
            'content': [{'type': 'tool_result', 'tool_use_id': 'toolu_1', 'content': 'ok'}],
        },
        'sourceToolAssistantUUID': 'abc',
    }


@pytest.fixture
def usage() -> dict[str, Any]:
    return {
        'input_tokens': 10,
        'cache_creation_input_tokens': 0,
        'cache_read_input_tokens': 1200,
        'output_tokens': 42,
        'service_tier': 'standard',
    }


@pytest.fixture
def make_assistant_line(envelope: dict[str, Any], usage: dict[str, Any]):
    """Factory: assistant record carrying the given content blocks."""

    def make(*content: dict[str, Any]) -> dict[str, Any]:
        return {
            **copy.deepcopy(envelope),
            'type': 'assistant',
            'uuid': 'a-002',
            'requestId': 'req_01',
            'message': {
                'model': 'claude-sonnet-4-5-20250929',
                'id': 'msg_01',
                'type': 'message',
                'role': 'assistant',
                'content': list(content),
                'stop_reason': 'tool_use',
                'stop_sequence': None,
                'usage': copy.deepcopy(usage),
            },
        }

    return make


@pytest.fixture
def make_tool_use():
    """Factory: tool_use content block."""

    def make(name: str, tool_input: Any) -> dict[str, Any]:
        return {'type': 'tool_use', 'id': 'toolu_01', 'name': name, 'input': tool_input}

    return make

"""
Tests for the protocol server wiring.
"""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from mcp import types

from trellomcp.config import load_settings
from trellomcp.integrations.trello import BoardList
from trellomcp.server import SERVER_NAME, build_registry, create_server, main
from trellomcp.tools import ToolRegistry, ToolResult
from trellomcp.tools.trello import GetListsTool

ENV = {"TRELLO_API_KEY": "key-123", "TRELLO_TOKEN": "token-456"}


class TestBuildRegistry:
    def test_without_attachment_dir(self):
        registry = build_registry(load_settings(ENV), MagicMock())

        assert "trello_watch_board" in registry
        assert "trello_delete_local_attachment" not in registry

    def test_with_attachment_dir(self, tmp_path):
        settings = load_settings({**ENV, "TRELLO_ATTACHMENT_DIR": str(tmp_path)})

        registry = build_registry(settings, MagicMock())

        assert "trello_delete_local_attachment" in registry
        tool = registry.get("trello_delete_local_attachment")
        assert tool._storage.root == Path(tmp_path).resolve()


class TestCreateServer:
    def test_server_name(self):
        server = create_server(ToolRegistry())

        assert server.name == SERVER_NAME

    @pytest.mark.asyncio
    async def test_list_tools_handler(self):
        registry = ToolRegistry()
        registry.register(GetListsTool(MagicMock()))
        server = create_server(registry)

        handler = server.request_handlers[types.ListToolsRequest]
        response = await handler(types.ListToolsRequest(method="tools/list"))

        tools = response.root.tools
        assert [tool.name for tool in tools] == ["trello_get_lists"]
        assert tools[0].inputSchema["required"] == ["boardId"]

    @pytest.mark.asyncio
    async def test_call_tool_handler(self):
        client = MagicMock()
        client.get_lists = AsyncMock(return_value=[BoardList(id="L1", name="To Do")])
        registry = ToolRegistry()
        registry.register(GetListsTool(client))
        server = create_server(registry)

        handler = server.request_handlers[types.CallToolRequest]
        response = await handler(
            types.CallToolRequest(
                method="tools/call",
                params=types.CallToolRequestParams(name="trello_get_lists", arguments={"boardId": "B1"}),
            )
        )

        result = response.root
        assert result.isError is False
        assert json.loads(result.content[0].text) == [
            {"id": "L1", "name": "To Do", "closed": False, "idBoard": None, "pos": None}
        ]
        client.get_lists.assert_awaited_once_with("B1")


class TestMain:
    def test_missing_credentials_exit(self, monkeypatch):
        monkeypatch.delenv("TRELLO_API_KEY", raising=False)
        monkeypatch.delenv("TRELLO_TOKEN", raising=False)
        monkeypatch.setattr("trellomcp.server.get_settings", lambda: load_settings({}))

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1


def test_error_result_text_is_json():
    assert ToolResult.error("boom").text == '{"error": "boom"}'

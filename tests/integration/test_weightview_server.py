"""Integration tests for the Weightview MCP server."""

from __future__ import annotations

import asyncio
import json

import pytest
from fastmcp import Client

from weightview.core.server.app import create_app
from weightview.domains.weight.connectors.memory_store import InMemoryReadingsStore
from weightview.domains.weight.connectors.permissions import StaticPermissionGate


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio required)."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def _payload(result) -> dict:
    """Decode the JSON text a tool returned."""
    content = getattr(result, "content", result)
    return json.loads(content[0].text)


ALL_EXPECTED_TOOLS = [
    "health_check",
    "load_weight_readings",
    "add_weight_reading",
    "delete_weight_reading",
    "request_weight_permissions",
]


@pytest.fixture
def client():
    """MCP client for a server with an empty in-memory store and no grants."""
    mcp = create_app(
        store_override=InMemoryReadingsStore(),
        permission_gate_override=StaticPermissionGate(),
    )
    return Client(mcp)


@pytest.fixture
def sqlite_client(weight_repository, audit_logger):
    """MCP client for a server backed by the encrypted data bank."""
    mcp = create_app(
        repository_override=weight_repository,
        audit_logger_override=audit_logger,
    )
    return Client(mcp)


def test_server_lists_tools(client):
    async def _check():
        async with client:
            tools = await client.list_tools()
            names = [t.name for t in tools]
            for expected in ALL_EXPECTED_TOOLS:
                assert expected in names, f"Missing tool: {expected}"
            assert "audit_summary" not in names
    _run(_check())


def test_health_check_returns_ok(client):
    async def _check():
        async with client:
            result = await client.call_tool("health_check", {})
            assert "ok" in str(result)
            assert "InMemoryReadingsStore" in str(result)
    _run(_check())


def test_load_without_permissions(client):
    async def _check():
        async with client:
            screen = _payload(await client.call_tool("load_weight_readings", {}))
            assert screen["status"] == "done"
            assert screen["permissions_granted"] is False
            assert screen["readings"] == []
            assert screen["weekly_average_kg"] == 0.0
    _run(_check())


def test_add_readings_flow(client):
    async def _check():
        async with client:
            screen = _payload(await client.call_tool("request_weight_permissions", {}))
            assert screen["permissions_granted"] is True

            for weight in ("50", "51", "52"):
                screen = _payload(
                    await client.call_tool("add_weight_reading", {"weight": weight})
                )
            assert [r["weight_kg"] for r in screen["readings"]] == [50.0, 51.0, 52.0]
            assert screen["projected_weight_kg"] == 53.0
            assert screen["weekly_average_kg"] == 51.0

            first_id = screen["readings"][0]["id"]
            screen = _payload(
                await client.call_tool("delete_weight_reading", {"sample_id": first_id})
            )
            assert len(screen["readings"]) == 2
            assert "projected_weight_kg" not in screen
    _run(_check())


def test_invalid_weight_rejected_before_controller(client):
    async def _check():
        async with client:
            await client.call_tool("request_weight_permissions", {})
            for weight in ("abc", "1000.5", "nan"):
                result = _payload(await client.call_tool("add_weight_reading", {"weight": weight}))
                assert result["status"] == "error"
            screen = _payload(await client.call_tool("load_weight_readings", {}))
            assert screen["readings"] == []
    _run(_check())


def test_delete_missing_notifies_once(client):
    async def _check():
        async with client:
            await client.call_tool("request_weight_permissions", {})
            screen = _payload(
                await client.call_tool("delete_weight_reading", {"sample_id": "missing-id"})
            )
            assert screen["status"] == "error"
            assert screen["notification"]["error_type"] == "SampleNotFoundError"

            again = _payload(await client.call_tool("load_weight_readings", {}))
            assert again["status"] == "done"
            assert "notification" not in again
    _run(_check())


def test_sqlite_backend_and_audit(sqlite_client, weight_repository):
    async def _check():
        async with sqlite_client:
            names = [t.name for t in await sqlite_client.list_tools()]
            assert "audit_summary" in names

            await sqlite_client.call_tool("request_weight_permissions", {})
            await sqlite_client.call_tool("add_weight_reading", {"weight": "72.4"})
            summary = _payload(await sqlite_client.call_tool("audit_summary", {}))
            assert summary["total_events"] >= 2
            assert summary["failures"] == 0
            assert all("72.4" not in json.dumps(e) for e in summary["recent_events"])
    _run(_check())
    assert weight_repository.count_samples() == 1

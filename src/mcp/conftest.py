"""Pytest fixtures for MCP server tests."""

from __future__ import annotations

from typing import AsyncGenerator, Generator

import pytest
from fastmcp import Client, FastMCP

from src.persistence import InMemoryFormStore

from . import tools


@pytest.fixture
def store() -> Generator[InMemoryFormStore, None, None]:
    """Fresh in-memory persistence installed for the tools.

    Yields:
        The store backing every tool call in the test.
    """
    backend = InMemoryFormStore()
    tools.set_persistence(backend)
    yield backend
    tools.set_persistence(None)


@pytest.fixture
def mcp_server() -> FastMCP:
    """Create MCP server instance for testing.

    Returns:
        Configured FastMCP server instance.
    """
    from .server import create_server

    return create_server()


@pytest.fixture
async def mcp_client(mcp_server: FastMCP) -> AsyncGenerator[Client, None]:
    """Create connected in-memory MCP client for testing.

    Args:
        mcp_server: The MCP server instance.

    Yields:
        Connected Client instance for testing.
    """
    async with Client(mcp_server) as client:
        yield client

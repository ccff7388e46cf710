"""Weightview MCP Server — application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from weightview.core.audit.logger import AuditLogger
from weightview.core.config.settings import get_settings
from weightview.core.storage.database import ReadingsDatabase
from weightview.core.storage.encryption import EncryptionError, FieldEncryptor
from weightview.core.storage.repository import WeightRepository
from weightview.domains.weight.connectors import PermissionGate, ReadingsStore
from weightview.domains.weight.connectors.memory_store import InMemoryReadingsStore
from weightview.domains.weight.connectors.mock_data import get_mock_readings
from weightview.domains.weight.connectors.permissions import (
    StaticPermissionGate,
    StoredPermissionGate,
)
from weightview.domains.weight.connectors.sqlite_store import SQLiteReadingsStore
from weightview.domains.weight.controller import ReadingsController, local_now
from weightview.domains.weight.tools.readings_tools import register_readings_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "Weightview"
SERVER_VERSION = "0.1.0"


def create_app(
    *,
    store_override: ReadingsStore | None = None,
    permission_gate_override: PermissionGate | None = None,
    repository_override: WeightRepository | None = None,
    audit_logger_override: AuditLogger | None = None,
) -> FastMCP:
    """Create and configure the Weightview MCP server.

    This is the main application factory. It:
    1. Creates the FastMCP server instance
    2. Initializes the encrypted storage layer when a key is configured
    3. Picks the readings store and permission gate
    4. Builds the ReadingsController for the readings screen
    5. Registers all tools
    """
    settings = get_settings()

    server = FastMCP(
        SERVER_NAME,
        instructions=(
            "Body-weight readings screen. Record readings, list today's readings, "
            "and see the weekly average and a short-horizon weight projection. "
            "Weight data is permission-gated: request permissions when "
            "'permissions_granted' is false."
        ),
    )

    # --- Initialize encrypted storage (readings data bank) ---
    repository: WeightRepository | None = repository_override
    audit_logger: AuditLogger | None = audit_logger_override
    if repository is None and settings.store_backend == "sqlite":
        if settings.encryption_key:
            try:
                encryptor = FieldEncryptor(settings.encryption_key)
                readings_db = ReadingsDatabase(settings.db_path)
                readings_db.initialize()
                repository = WeightRepository(readings_db, encryptor)
                if audit_logger is None:
                    audit_logger = AuditLogger(readings_db)
                logger.info(
                    "Readings data bank initialized: %s (schema v%d)",
                    settings.db_path,
                    readings_db.get_schema_version(),
                )
            except EncryptionError as exc:
                logger.error("Failed to initialize storage: %s", exc)
                logger.warning("Continuing with in-memory readings — data will not be stored")
        else:
            logger.info(
                "No ENCRYPTION_KEY configured — running with in-memory readings. "
                "Set ENCRYPTION_KEY to enable the readings data bank."
            )

    # --- Readings store ---
    if store_override is not None:
        store = store_override
    elif repository is not None:
        store = SQLiteReadingsStore(repository)
    else:
        seed = get_mock_readings(local_now()) if settings.seed_mock_readings else []
        store = InMemoryReadingsStore(seed)
        logger.info("Using in-memory readings store (%d mock readings)", len(seed))

    # --- Permission gate ---
    if permission_gate_override is not None:
        gate = permission_gate_override
    elif repository is not None:
        gate = StoredPermissionGate(repository, auto_grant=settings.auto_grant_permissions)
    else:
        gate = StaticPermissionGate(grant_on_request=settings.auto_grant_permissions)

    controller = ReadingsController(store, gate, audit_logger=audit_logger)

    # --- Register tools ---
    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        status = {
            "status": "ok",
            "server": SERVER_NAME,
            "version": SERVER_VERSION,
            "store": type(store).__name__,
            "storage_enabled": repository is not None,
        }
        if repository is not None:
            status["samples_stored"] = repository.count_samples()
        return status

    register_readings_tools(server, controller)
    logger.info("Readings tools registered")

    if audit_logger is not None:
        from weightview.domains.weight.tools.audit_tools import register_audit_tools

        register_audit_tools(server, audit_logger)
        logger.info("Audit tools registered")

    return server


# Module-level instance for FastMCP discovery.
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

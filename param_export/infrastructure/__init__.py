"""
Infrastructure package for the export job.

Centralizes database connectivity concerns (driver loading, connection
factory, statement timeout). Keep this layer focused on I/O and resource
management, decoupled from stage/orchestrator logic.
"""

from param_export.infrastructure.db_factory import (
    Connector,
    apply_statement_timeout,
    load_driver,
    make_connector,
)

__all__ = [
    "Connector",
    "apply_statement_timeout",
    "load_driver",
    "make_connector",
]

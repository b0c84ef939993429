"""Log formatting for kcluster."""

from __future__ import annotations

from kcluster.logging.json_formatter import JSONFormatter

__all__ = ["JSONFormatter"]

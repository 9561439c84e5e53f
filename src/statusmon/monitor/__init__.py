"""Monitoring run orchestration."""

from .orchestrator import MonitorRun
from .types import RunSummary

__all__ = ["MonitorRun", "RunSummary"]

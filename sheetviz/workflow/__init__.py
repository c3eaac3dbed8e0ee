from __future__ import annotations

from .base import BaseWorkflow, WorkflowResult
from .dashboard import DashboardSummary, summarize
from .report_workflow import ReportWorkflow

__all__ = ["BaseWorkflow", "DashboardSummary", "ReportWorkflow", "WorkflowResult", "summarize"]

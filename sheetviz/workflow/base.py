from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class WorkflowResult:
    """Result returned by a workflow execution."""
    success: bool
    data: dict[str, Any]
    message: str


class BaseWorkflow(ABC):
    """Base class for workflows that chain upload, chart and export steps."""

    @abstractmethod
    def execute(self, context: dict[str, Any]) -> WorkflowResult:
        """Execute the workflow.

        Args:
            context: Input parameters dictionary. Required keys depend on
                the workflow implementation.

        Returns:
            WorkflowResult with:
                - success (bool): Whether execution succeeded
                - data (dict): Workflow-specific output data
                - message (str): Human-readable status message
        """

    def validate_context(self, context: dict[str, Any]) -> tuple[bool, str]:
        """Validate required context parameters.

        Returns:
            Tuple of (is_valid, error_message)
        """
        return True, ""

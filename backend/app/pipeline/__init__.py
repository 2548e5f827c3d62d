"""Edit orchestration for SquareEdit."""

from .orchestrator import EditOrchestrator
from .strategies import STRATEGIES, OperationStrategy

__all__ = ["EditOrchestrator", "OperationStrategy", "STRATEGIES"]

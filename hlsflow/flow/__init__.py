"""
Bambu flow: stage registry, command building and execution.
"""

from .executor import ExecutionResult, Executor, SubprocessExecutor
from .orchestrator import FlowOrchestrator
from .stages import STAGES, StageDescriptor, get_stage, place_mode_flag, route_mode_flag
from .toolchain import Toolchain

__all__ = [
    "STAGES",
    "StageDescriptor",
    "get_stage",
    "place_mode_flag",
    "route_mode_flag",
    "FlowOrchestrator",
    "Toolchain",
    "Executor",
    "ExecutionResult",
    "SubprocessExecutor",
]

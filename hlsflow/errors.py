"""Flow exceptions.

Every error carries the stage or sub-operation it was raised from, so a
caller can report it and re-run just that stage.
"""

from typing import Optional


class FlowError(Exception):
    """Error while preparing a stage command."""

    def __init__(self, message: str, stage: Optional[str] = None):
        self.stage = stage
        self.message = message
        super().__init__(self._format_message(message))

    def _format_message(self, message: str) -> str:
        """Format error message with the originating stage."""
        if self.stage:
            return f"{self.stage} | {message}"
        return message


class UnknownStageError(FlowError):
    """No stage registered under the requested id."""


class MissingSourceError(FlowError):
    """The project has no C/C++ source for high-level synthesis."""


class MissingModuleError(FlowError):
    """The top function was not found in the generated hardware description."""


class MissingConstraintError(FlowError):
    """No constraint file was declared and none could be generated."""


class PinExhaustionError(FlowError):
    """The device has fewer pins of a direction than the design needs."""

    def __init__(self, direction: str, port_name: str, stage: Optional[str] = "constraints"):
        self.direction = direction
        self.port_name = port_name
        super().__init__(
            f"Not enough {direction} pins for the design (ran out at '{port_name}')", stage
        )


class ArtifactIOError(FlowError, IOError):
    """An expected artifact is absent or unreadable."""

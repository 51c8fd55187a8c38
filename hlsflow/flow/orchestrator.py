"""
Flow orchestrator.

Turns a project and a stage id into the command line of the stage binary.
Building a command never runs it; the only side effect is the creation of
the constraint file for placement when the project does not declare one.
"""

import logging
from pathlib import Path
from typing import Optional

from hlsflow.constraints.autogen import constraint_path, generate_constraint_file
from hlsflow.devices.pin_library import DEFAULT_DEVICE, get_pin_library
from hlsflow.errors import FlowError, MissingConstraintError
from hlsflow.generator.constraint_generator import ConstraintGenerator
from hlsflow.model import CommandDescriptor, PinCatalog, Project

from .executor import ExecutionResult, Executor
from .stages import (
    BITSTREAM_STAGE,
    BuildContext,
    ConstraintPolicy,
    StageDescriptor,
    artifact_name,
    get_stage,
    input_name,
)
from .toolchain import Toolchain

logger = logging.getLogger(__name__)


class FlowOrchestrator:
    """
    Builds stage commands for projects.

    Holds configuration only (toolchain layout, pin catalog, constraint
    generator); no state is kept between calls.
    """

    def __init__(
        self,
        toolchain: Optional[Toolchain] = None,
        catalog: Optional[PinCatalog] = None,
        generator: Optional[ConstraintGenerator] = None,
    ):
        """
        Args:
            toolchain: Binary and resource layout (from the environment if omitted)
            catalog: Pins for constraint generation (default device if omitted)
            generator: Constraint file generator
        """
        self.toolchain = toolchain or Toolchain.from_env()
        self._catalog = catalog
        self.generator = generator or ConstraintGenerator()

    @property
    def catalog(self) -> PinCatalog:
        """Pin catalog, loaded on first use."""
        if self._catalog is None:
            catalog = get_pin_library().get_catalog(DEFAULT_DEVICE)
            if catalog is None:
                raise FlowError(f"Pin catalog for device '{DEFAULT_DEVICE}' not found")
            self._catalog = catalog
        return self._catalog

    def build_command(self, stage_id: str, project: Project) -> CommandDescriptor:
        """
        Build the command line of a stage.

        Args:
            stage_id: Stage id, e.g. ``bambu.place``
            project: Project to build for

        Returns:
            CommandDescriptor running in the project directory

        Raises:
            UnknownStageError: No such stage
            MissingSourceError: The stage needs C/C++ sources and there are none
            MissingConstraintError: Placement or routing has no constraint file
        """
        stage = get_stage(stage_id)
        ctx = BuildContext(
            project=project,
            toolchain=self.toolchain,
            output_name=artifact_name(stage, project),
            input_name=input_name(stage, project),
            constraint=self._resolve_constraint(stage, project),
        )
        descriptor = CommandDescriptor(
            executable=self.toolchain.sidecar(stage.tool),
            arguments=tuple(stage.build(ctx)),
            working_directory=project.root_dir,
        )
        logger.debug("%s: %s", stage.id, descriptor)
        return descriptor

    def dispatch(self, stage_id: str, project: Project, executor: Executor) -> ExecutionResult:
        """Build the stage command and hand it to ``executor``."""
        return executor.run(self.build_command(stage_id, project))

    def target_path(self, stage_id: str, project: Project) -> Path:
        """Absolute path of the artifact a stage writes."""
        return project.root_dir / artifact_name(get_stage(stage_id), project)

    def bitstream_path(self, project: Project) -> Path:
        return self.target_path(BITSTREAM_STAGE, project)

    def _resolve_constraint(self, stage: StageDescriptor, project: Project) -> Optional[str]:
        if stage.constraint == ConstraintPolicy.NONE:
            return None

        declared = project.constraint_files
        if declared:
            return declared[0].path

        if stage.constraint == ConstraintPolicy.EXISTING:
            generated = constraint_path(project)
            if generated.exists():
                return str(generated)
            raise MissingConstraintError(
                f"Constraint file not found: declare one or run placement first ({generated.name})",
                stage.id,
            )

        try:
            return str(generate_constraint_file(project, self.catalog, self.generator))
        except FlowError as e:
            raise MissingConstraintError(
                f"Failed to generate constraint file ({e}); add a constraint file to the project",
                stage.id,
            ) from e

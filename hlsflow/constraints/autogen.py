"""
Constraint file auto-generation for the placement stage.

Ties together port extraction, pin allocation and constraint synthesis:

    <root>/<source-base>.v  ->  HdlModule  ->  PinAssignment[]  ->  <root>/<project>_bambu_cons.xml

The generated file doubles as a cache. Once it exists it is used as is,
even if the design has changed since.
"""

import logging
from pathlib import Path
from typing import Optional

from hlsflow.errors import ArtifactIOError, MissingModuleError, MissingSourceError
from hlsflow.generator.constraint_generator import ConstraintGenerator
from hlsflow.model import PinCatalog, Project
from hlsflow.parser.hdl.verilog_parser import VerilogPortExtractor

from .allocator import assign_pins

logger = logging.getLogger(__name__)

CONSTRAINT_SUFFIX = "_bambu_cons.xml"
STAGE = "constraints"


def constraint_path(project: Project) -> Path:
    """Location of the auto-generated constraint file of a project."""
    return project.root_dir / f"{project.name}{CONSTRAINT_SUFFIX}"


def hls_output_path(project: Project) -> Path:
    """
    Verilog written by the HLS stage for the first compilable source.

    Raises:
        MissingSourceError: The project has no C/C++ source
    """
    name = project.hls_output_name
    if name is None:
        raise MissingSourceError("No C/C++ source files in project", STAGE)
    return project.root_dir / name


def generate_constraint_file(
    project: Project,
    catalog: PinCatalog,
    generator: Optional[ConstraintGenerator] = None,
    extractor: Optional[VerilogPortExtractor] = None,
) -> Path:
    """
    Make sure a constraint file exists for the project and return its path.

    Args:
        project: Project whose HLS output is constrained
        catalog: Device pins to allocate from
        generator: Constraint generator (a default one is created if omitted)
        extractor: Verilog port extractor (non-strict if omitted)

    Returns:
        Path of the constraint file

    Raises:
        MissingSourceError: No compilable source to derive the HLS output from
        ArtifactIOError: The HLS output is missing or unreadable
        MissingModuleError: No module in the HLS output matches the top function
        PinExhaustionError: The design needs more pins than the device offers
    """
    destination = constraint_path(project)
    if destination.exists():
        logger.warning("Using existing constraint file %s", destination)
        return destination

    hdl_path = hls_output_path(project)
    if not hdl_path.is_file():
        raise ArtifactIOError(f"HLS output not found: {hdl_path}", STAGE)

    extractor = extractor or VerilogPortExtractor()
    top_function = project.settings.hls.top_function
    try:
        module = extractor.parse_file(hdl_path, top_function)
    except (OSError, UnicodeDecodeError) as e:
        raise ArtifactIOError(f"Cannot read HLS output {hdl_path}: {e}", STAGE) from e
    if module is None:
        raise MissingModuleError(
            f"No module for top function '{top_function}' in {hdl_path.name}", STAGE
        )

    assignments = assign_pins(module.ports, catalog)

    generator = generator or ConstraintGenerator()
    return generator.synthesize(module.name, assignments, destination)

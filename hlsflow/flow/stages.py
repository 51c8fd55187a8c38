"""
Stage registry of the Bambu flow.

Each stage is described once, as data: the binary it runs, the artifact it
writes, the stage whose artifact it reads and how its arguments are
assembled. Artifact names depend only on the project name, except the HLS
output, which the HLS tool names after the first source (``foo.cpp`` ->
``foo.v``).

    bambu.hls -> bambu.synth -> bambu.map -> bambu.pack -> bambu.place -> bambu.route -> bambu.genbit
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Type

from hlsflow.errors import MissingSourceError, UnknownStageError
from hlsflow.model import (
    HlsSettings,
    PlaceMode,
    PlaceSettings,
    Project,
    RouteMode,
    RouteSettings,
)
from hlsflow.model.base import FrozenModel
from hlsflow.utils import enum_value

from .toolchain import Toolchain

ARTIFACT_INFIX = "_bambu_"

# FPGA family passed to the packer
PACK_FAMILY = "fdp3"


class ConstraintPolicy(str, Enum):
    """How a stage obtains its pin constraint file."""

    NONE = "none"
    # Declared file, else generate one from the HLS output
    GENERATE = "generate"
    # Declared file, else a previously generated one
    EXISTING = "existing"


@dataclass(frozen=True)
class BuildContext:
    """Everything a stage needs to assemble its arguments."""

    project: Project
    toolchain: Toolchain
    output_name: str
    input_name: Optional[str] = None
    constraint: Optional[str] = None

    @property
    def root_dir(self) -> Path:
        return self.project.root_dir


@dataclass(frozen=True)
class StageDescriptor:
    """One step of the flow."""

    id: str
    label: str
    tool: str  # binary path relative to the toolchain binaries directory
    build: Callable[[BuildContext], List[str]]
    target_suffix: Optional[str] = None  # None: named after the source file
    input_stage: Optional[str] = None
    constraint: ConstraintPolicy = ConstraintPolicy.NONE
    settings_model: Optional[Type[FrozenModel]] = None


def place_mode_flag(mode) -> str:
    """Placer switch for a placement mode; unknown modes fall back to timing driven."""
    if enum_value(mode) == PlaceMode.BOUNDING_BOX.value:
        return "-b"
    return "-t"


def route_mode_flag(mode) -> str:
    """Router switch for a routing mode; unknown modes fall back to timing driven."""
    flags = {
        RouteMode.DIRECT_SEARCH.value: "-d",
        RouteMode.BREATH_FIRST.value: "-b",
    }
    return flags.get(enum_value(mode), "-t")


def _build_hls(ctx: BuildContext) -> List[str]:
    hls = ctx.project.settings.hls
    return [
        f"--top-fname={hls.top_function}",
        f"--clock-period={hls.clock_period}",
        # No BRAM inference, so no .mem files are generated
        "--memory-allocation-policy=NO_BRAM",
        *(f.path for f in ctx.project.compilable_sources),
    ]


def _build_synth(ctx: BuildContext) -> List[str]:
    tc = ctx.toolchain
    script = (
        f"tcl {tc.yosys_resource('yosys_fde.tcl')}"
        f" -l {tc.yosys_resource('fdesimlib.v')}"
        f" -m {tc.yosys_resource('techmap.v')}"
        f" -c {tc.yosys_resource('cells_map.v')}"
        f" -o {ctx.output_name}"
    )
    return ["-p", script, str(ctx.root_dir / ctx.input_name)]


def _build_map(ctx: BuildContext) -> List[str]:
    return [
        "-y",
        "-i", ctx.input_name,
        "-o", ctx.output_name,
        "-c", str(ctx.toolchain.hw_lib("dc_cell.xml")),
        "-e",
    ]


def _build_pack(ctx: BuildContext) -> List[str]:
    tc = ctx.toolchain
    return [
        "-c", PACK_FAMILY,
        "-n", ctx.input_name,
        "-l", str(tc.hw_lib("fdp3_cell.xml")),
        "-r", str(tc.hw_lib("fdp3_dcplib.xml")),
        "-o", ctx.output_name,
        "-g", str(tc.hw_lib("fdp3_config.xml")),
        "-e",
    ]


def _build_place(ctx: BuildContext) -> List[str]:
    tc = ctx.toolchain
    return [
        "-a", str(tc.hw_lib("fdp3p7_arch.xml")),
        "-d", str(tc.hw_lib("fdp3p7_dly.xml")),
        "-i", ctx.input_name,
        "-o", ctx.output_name,
        "-c", ctx.constraint,
        place_mode_flag(ctx.project.settings.place.mode),
        "-e",
    ]


def _build_route(ctx: BuildContext) -> List[str]:
    return [
        "-a", str(ctx.toolchain.hw_lib("fdp3p7_arch.xml")),
        "-n", ctx.input_name,
        "-o", ctx.output_name,
        route_mode_flag(ctx.project.settings.route.mode),
        "-c", ctx.constraint,
        "-e",
    ]


def _build_genbit(ctx: BuildContext) -> List[str]:
    tc = ctx.toolchain
    return [
        "-a", str(tc.hw_lib("fdp3p7_arch.xml")),
        "-c", str(tc.hw_lib("fdp3p7_cil.xml")),
        "-n", ctx.input_name,
        "-b", ctx.output_name,
        "-e",
    ]


STAGES: Tuple[StageDescriptor, ...] = (
    StageDescriptor(
        id="bambu.hls",
        label="High-level synthesis",
        tool="bambu",
        build=_build_hls,
        settings_model=HlsSettings,
    ),
    StageDescriptor(
        id="bambu.synth",
        label="Logic synthesis",
        tool="yosys",
        build=_build_synth,
        target_suffix="syn.edf",
        input_stage="bambu.hls",
    ),
    StageDescriptor(
        id="bambu.map",
        label="Technology mapping",
        tool="fde-cli/map",
        build=_build_map,
        target_suffix="map.xml",
        input_stage="bambu.synth",
    ),
    StageDescriptor(
        id="bambu.pack",
        label="Packing",
        tool="fde-cli/pack",
        build=_build_pack,
        target_suffix="pack.xml",
        input_stage="bambu.map",
    ),
    StageDescriptor(
        id="bambu.place",
        label="Placement",
        tool="fde-cli/place",
        build=_build_place,
        target_suffix="place.xml",
        input_stage="bambu.pack",
        constraint=ConstraintPolicy.GENERATE,
        settings_model=PlaceSettings,
    ),
    StageDescriptor(
        id="bambu.route",
        label="Routing",
        tool="fde-cli/route",
        build=_build_route,
        target_suffix="route.xml",
        input_stage="bambu.place",
        constraint=ConstraintPolicy.EXISTING,
        settings_model=RouteSettings,
    ),
    StageDescriptor(
        id="bambu.genbit",
        label="Bitstream generation",
        tool="fde-cli/bitgen",
        build=_build_genbit,
        target_suffix="bit.bit",
        input_stage="bambu.route",
    ),
)

_STAGES_BY_ID: Dict[str, StageDescriptor] = {s.id: s for s in STAGES}

BITSTREAM_STAGE = "bambu.genbit"


def stage_ids() -> List[str]:
    return [s.id for s in STAGES]


def get_stage(stage_id: str) -> StageDescriptor:
    """
    Look up a stage by id.

    Raises:
        UnknownStageError: No stage with that id
    """
    try:
        return _STAGES_BY_ID[stage_id]
    except KeyError:
        raise UnknownStageError(
            f"Unknown stage '{stage_id}'. Available stages: {', '.join(stage_ids())}"
        ) from None


def artifact_name(stage: StageDescriptor, project: Project) -> str:
    """
    File name of the artifact a stage writes into the project directory.

    Raises:
        MissingSourceError: HLS output requested for a project without C/C++ sources
    """
    if stage.target_suffix is not None:
        return f"{project.name}{ARTIFACT_INFIX}{stage.target_suffix}"

    name = project.hls_output_name
    if name is None:
        raise MissingSourceError("No C/C++ source files in project", stage.id)
    return name


def input_name(stage: StageDescriptor, project: Project) -> Optional[str]:
    """
    File name of the artifact a stage reads, None for the first stage.

    Raises:
        MissingSourceError: The input is the HLS output and the project has no sources
    """
    if stage.input_stage is None:
        return None
    try:
        return artifact_name(get_stage(stage.input_stage), project)
    except MissingSourceError as e:
        raise MissingSourceError(e.message, stage.id) from None

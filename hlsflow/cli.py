"""
hlsflow - command line front end of the Bambu HLS-to-bitstream flow.

Usage:
    hlsflow stages
    hlsflow command project.yml bambu.place --json
    hlsflow run project.yml bambu.hls --progress
    hlsflow constraints project.yml --device FDP3P7
    hlsflow ports adder.v add --strict
    hlsflow set project.yml place mode "Bounding Box"

Subcommands:
    stages       List flow stages and the artifacts they write
    command      Show the command line of a stage
    run          Build and run a stage
    constraints  Generate the pin constraint file of a project
    ports        List the ports of the HLS top module in a Verilog file
    set          Change one project setting and save the project
    devices      List devices of the pin catalog
    schema       Write the JSON schema of the project file
"""

import argparse
import json
import logging
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from hlsflow.constraints.autogen import generate_constraint_file
from hlsflow.devices.pin_library import DEFAULT_DEVICE, get_pin_library
from hlsflow.errors import FlowError
from hlsflow.flow.executor import SubprocessExecutor
from hlsflow.flow.orchestrator import FlowOrchestrator
from hlsflow.flow.stages import STAGES
from hlsflow.model import ProjectSettings, SettingsUpdate, SourceFile
from hlsflow.parser import ParseError, YamlProjectParser
from hlsflow.parser.hdl.verilog_parser import VerilogPortExtractor
from hlsflow.session import ProjectSession

logger = logging.getLogger(__name__)

# Errors reported to the user instead of a traceback
USER_ERRORS = (FlowError, ParseError, ValueError, OSError)

SCHEMA_FILE = "hlsflow_project.schema.json"


def log(msg: str, use_progress: bool, use_json: bool):
    """Output progress message if enabled."""
    if use_progress and use_json:
        print(f"PROGRESS: {msg}", flush=True)
    elif use_progress:
        print(msg)


def fail(error: Exception, use_json: bool):
    """Report an error and exit with status 1."""
    if use_json:
        print(json.dumps({"success": False, "error": str(error)}))
    else:
        print(f"Error: {error}")
    sys.exit(1)


def cmd_stages(args):
    """List the flow stages."""
    if args.json:
        stages = [
            {
                "id": s.id,
                "label": s.label,
                "tool": s.tool,
                "input": s.input_stage,
                "target": f"<project>_bambu_{s.target_suffix}" if s.target_suffix else "<source>.v",
            }
            for s in STAGES
        ]
        print(json.dumps({"success": True, "stages": stages}))
        return

    print("\nFlow stages:")
    for s in STAGES:
        target = f"<project>_bambu_{s.target_suffix}" if s.target_suffix else "<source>.v"
        print(f"  {s.id:14} {s.label:22} -> {target}")


def cmd_command(args):
    """Print the command line of a stage."""
    try:
        project = YamlProjectParser().parse_file(args.project)
        descriptor = FlowOrchestrator().build_command(args.stage, project)
    except USER_ERRORS as e:
        fail(e, args.json)

    if args.json:
        print(
            json.dumps(
                {
                    "success": True,
                    "stage": args.stage,
                    "executable": descriptor.executable,
                    "arguments": list(descriptor.arguments),
                    "workingDirectory": str(descriptor.working_directory),
                }
            )
        )
    else:
        print(f"cd {descriptor.working_directory}")
        print(descriptor)


def cmd_run(args):
    """Build a stage command and run it."""
    try:
        log("Loading project...", args.progress, args.json)
        project = YamlProjectParser().parse_file(args.project)

        orchestrator = FlowOrchestrator()
        log(f"Running {args.stage}...", args.progress, args.json)
        result = orchestrator.dispatch(args.stage, project, SubprocessExecutor(args.timeout))
        target = orchestrator.target_path(args.stage, project)
    except subprocess.TimeoutExpired as e:
        fail(FlowError(f"Timed out after {e.timeout:g} s: {e.cmd}", args.stage), args.json)
    except USER_ERRORS as e:
        fail(e, args.json)

    if args.json:
        print(
            json.dumps(
                {
                    "success": result.success,
                    "returncode": result.returncode,
                    "stdout": result.stdout,
                    "stderr": result.stderr,
                    "target": str(target),
                }
            )
        )
    else:
        sys.stdout.write(result.stdout)
        sys.stderr.write(result.stderr)
        if result.success:
            print(f"✓ {args.stage} finished: {target}")
        else:
            print(f"✗ {args.stage} failed with exit code {result.returncode}")

    if not result.success:
        sys.exit(1)


def cmd_constraints(args):
    """Generate the pin constraint file of a project."""
    try:
        project = YamlProjectParser().parse_file(args.project)
        catalog = get_pin_library().get_catalog(args.device)
        if catalog is None:
            raise ValueError(f"Unknown device: {args.device}")
        path = generate_constraint_file(project, catalog)
    except USER_ERRORS as e:
        fail(e, args.json)

    if args.json:
        print(json.dumps({"success": True, "output": str(path)}))
    else:
        print(f"✓ Constraint file: {path}")


def cmd_ports(args):
    """List the ports of the top module."""
    try:
        module = VerilogPortExtractor(strict=args.strict).parse_file(args.verilog, args.top)
        if module is None:
            raise ValueError(f"No module matching '{args.top}' in {args.verilog}")
    except USER_ERRORS as e:
        fail(e, args.json)

    if args.json:
        print(
            json.dumps(
                {
                    "success": True,
                    "module": module.name,
                    "ports": [p.model_dump(by_alias=True, mode="json") for p in module.ports],
                }
            )
        )
        return

    print(f"\nModule {module.name} ({len(module.ports)} ports):")
    for port in module.ports:
        print(f"  {port.name:20} {port.direction.value:6} {port.range_string}")


def cmd_set(args):
    """Change one setting and save the project."""
    try:
        session = ProjectSession.open(args.project)
        session.dispatch(SettingsUpdate(args.section, args.field, args.value))
        path = session.save()
    except USER_ERRORS as e:
        fail(e, args.json)

    if args.json:
        print(json.dumps({"success": True, "output": str(path)}))
    else:
        print(f"✓ {args.section}.{args.field} = {args.value} ({path})")


def cmd_devices(args):
    """List devices of the pin catalog."""
    try:
        library = get_pin_library()
    except USER_ERRORS as e:
        fail(e, args.json)

    devices = library.list_devices()
    if args.json:
        print(
            json.dumps(
                {"success": True, "devices": [library.get_device_info(d) for d in devices]}
            )
        )
        return

    print("\nAvailable devices:")
    for device in devices:
        info = library.get_device_info(device)
        default = " (default)" if device == DEFAULT_DEVICE else ""
        print(
            f"  {device:10} {info['inputPins']:3} in / {info['outputPins']:3} out"
            f"  {info['description']}{default}"
        )


def project_file_schema() -> Dict[str, Any]:
    """JSON schema of the project YAML file."""
    files = SourceFile.model_json_schema(by_alias=True)
    settings = ProjectSettings.model_json_schema(by_alias=True)
    defs = {**files.pop("$defs", {}), **settings.pop("$defs", {})}
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "title": "hlsflow project",
        "type": "object",
        "properties": {
            "name": {"type": "string", "description": "Project name"},
            "files": {"type": "array", "items": files},
            "settings": settings,
        },
        "required": ["name"],
        "$defs": defs,
    }


def cmd_schema(args):
    """Write the JSON schema of the project file."""
    output_dir = Path(args.output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / SCHEMA_FILE
        with open(path, "w", encoding="utf-8") as f:
            json.dump(project_file_schema(), f, indent=2)
            f.write("\n")
    except OSError as e:
        fail(e, args.json)

    if args.json:
        print(json.dumps({"success": True, "output": str(path)}))
    else:
        print(f"Generated {path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hlsflow", description="Bambu HLS-to-bitstream flow for FDE devices"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_json(sub):
        sub.add_argument("--json", action="store_true", help="JSON output")

    stages_parser = subparsers.add_parser("stages", help="List flow stages")
    add_json(stages_parser)
    stages_parser.set_defaults(func=cmd_stages)

    command_parser = subparsers.add_parser("command", help="Show the command line of a stage")
    command_parser.add_argument("project", help="Project YAML file")
    command_parser.add_argument("stage", help="Stage id, e.g. bambu.place")
    add_json(command_parser)
    command_parser.set_defaults(func=cmd_command)

    run_parser = subparsers.add_parser("run", help="Build and run a stage")
    run_parser.add_argument("project", help="Project YAML file")
    run_parser.add_argument("stage", help="Stage id, e.g. bambu.hls")
    run_parser.add_argument("--timeout", type=float, help="Seconds before the stage is killed")
    add_json(run_parser)
    run_parser.add_argument("--progress", action="store_true", help="Enable progress output")
    run_parser.set_defaults(func=cmd_run)

    cons_parser = subparsers.add_parser("constraints", help="Generate the pin constraint file")
    cons_parser.add_argument("project", help="Project YAML file")
    cons_parser.add_argument(
        "--device", default=DEFAULT_DEVICE, help=f"Pin catalog device (default: {DEFAULT_DEVICE})"
    )
    add_json(cons_parser)
    cons_parser.set_defaults(func=cmd_constraints)

    ports_parser = subparsers.add_parser("ports", help="List ports of the HLS top module")
    ports_parser.add_argument("verilog", help="Verilog file written by the HLS stage")
    ports_parser.add_argument("top", help="Top function name")
    ports_parser.add_argument(
        "--strict", action="store_true", help="Fail on unrecognized port declarations"
    )
    add_json(ports_parser)
    ports_parser.set_defaults(func=cmd_ports)

    set_parser = subparsers.add_parser("set", help="Change a project setting")
    set_parser.add_argument("project", help="Project YAML file")
    set_parser.add_argument("section", help="Settings section: hls, place or route")
    set_parser.add_argument("field", help="Field name, e.g. clockPeriod")
    set_parser.add_argument("value", help="New value")
    add_json(set_parser)
    set_parser.set_defaults(func=cmd_set)

    devices_parser = subparsers.add_parser("devices", help="List pin catalog devices")
    add_json(devices_parser)
    devices_parser.set_defaults(func=cmd_devices)

    schema_parser = subparsers.add_parser("schema", help="Write the project file JSON schema")
    schema_parser.add_argument("output_dir", help="Output directory")
    add_json(schema_parser)
    schema_parser.set_defaults(func=cmd_schema)

    return parser


def main(argv: Optional[Sequence[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    args.func(args)


if __name__ == "__main__":
    main()

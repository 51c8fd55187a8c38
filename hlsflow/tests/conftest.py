import os
import sys
from pathlib import Path

import pytest

# Add the project root to sys.path so that hlsflow is importable
# This is needed because of the flat layout structure
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from hlsflow.flow.toolchain import Toolchain  # noqa: E402
from hlsflow.model import PinCatalog  # noqa: E402

# Trimmed-down HLS output: a helper module followed by the top module
ADDER_VERILOG = """\
// Generated by the HLS tool
`timescale 1ns / 1ps
module plus_expr_FU_8_8_8(in1, in2, out1);
  input [7:0] in1;
  input [7:0] in2;
  output [7:0] out1;
  assign out1 = in1 + in2;
endmodule

module _Z3addhh(clock, reset, start_port, done_port, a, b, return_port);
  // IN
  input clock;
  input reset;
  input start_port;
  input [7:0] a;
  input [7:0] b;
  // OUT
  output done_port;
  output [7:0] return_port;
  // Component and signal declarations
  wire [7:0] out_plus_expr_FU_8_8_8_3_i0;
  plus_expr_FU_8_8_8 fu_add (.in1(a), .in2(b), .out1(out_plus_expr_FU_8_8_8_3_i0));
  assign return_port = out_plus_expr_FU_8_8_8_3_i0;
endmodule
"""

PROJECT_YAML = """\
name: adder
files:
  - path: add.cpp
    type: cpp
  - path: notes.txt
    type: other
settings:
  hls:
    topFunction: add
    clockPeriod: 5
  place:
    mode: Timing Driven
  route:
    mode: Direct Search
"""


@pytest.fixture
def adder_verilog():
    return ADDER_VERILOG


@pytest.fixture
def small_catalog():
    """Catalog with enough pins for the adder design and nothing more."""
    return PinCatalog(
        device="TEST",
        input_pins=[f"I{i}" for i in range(18)],
        output_pins=[f"O{i}" for i in range(9)],
    )


@pytest.fixture
def toolchain(tmp_path):
    return Toolchain(
        resource_dir=tmp_path / "resource",
        binaries_dir=tmp_path / "binaries",
        target_triple="x86_64-unknown-linux-gnu",
    )


@pytest.fixture
def project_dir(tmp_path) -> Path:
    """Project directory holding the project file, the C++ source and the HLS output."""
    root = tmp_path / "proj"
    root.mkdir()
    (root / "adder.yml").write_text(PROJECT_YAML)
    (root / "add.cpp").write_text("unsigned char add(unsigned char a, unsigned char b) { return a + b; }\n")
    (root / "add.v").write_text(ADDER_VERILOG)
    return root

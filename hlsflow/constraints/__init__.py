"""
Automatic pin constraint generation.
"""

from .allocator import CLOCK_PORT_NAME, assign_pins, expand_port
from .autogen import constraint_path, generate_constraint_file, hls_output_path

__all__ = [
    "assign_pins",
    "expand_port",
    "CLOCK_PORT_NAME",
    "constraint_path",
    "generate_constraint_file",
    "hls_output_path",
]

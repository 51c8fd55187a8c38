"""
Verilog port extraction for HLS-generated modules.

This is a deliberately small recognizer for the Verilog emitted by the HLS
tool, not a general Verilog parser. Module blocks are located with a regular
expression; port declarations are matched line by line with a pyparsing
grammar of the shape ``input|output [msb:lsb]? name;``. Lines that do not
match are skipped, unless the extractor runs in strict mode.

Callers should only rely on ``extract_top_module`` / ``parse_file`` so the
recognizer can be replaced by a real tokenizer later.
"""

import logging
import re
from pathlib import Path
from typing import List, NamedTuple, Optional, Tuple, Union

from pyparsing import Keyword, MatchFirst
from pyparsing import Optional as Opt
from pyparsing import ParseBaseException, Suppress, Word, alphanums, alphas, nums

from hlsflow.model import HdlModule, Port, PortDirection
from hlsflow.parser.yaml.errors import ParseError

logger = logging.getLogger(__name__)

# module <name> ( <port names> ); <body> endmodule
MODULE_PATTERN = re.compile(
    r"\bmodule\s+([A-Za-z_][\w$]*)\s*\(([\s\S]*?)\)\s*;([\s\S]*?)\bendmodule\b"
)
# // and /* */ comments; whichever opens first wins
COMMENT = re.compile(r"/\*[\s\S]*?\*/|//[^\n]*")
LINE_COMMENT = re.compile(r"//.*$")
DIRECTION_START = re.compile(r"(input|output|inout)\b")


class ModuleBlock(NamedTuple):
    """Raw module block located in HDL text."""

    name: str
    body: str
    body_line: int  # 1-based line number where the body starts


class PortDeclarationError(ParseError):
    """Strict mode found lines in the port section it could not recognize."""

    def __init__(
        self,
        module_name: str,
        lines: List[Tuple[int, str]],
        file_path: Optional[Path] = None,
    ):
        self.module_name = module_name
        self.lines = lines
        details = "\n  ".join(f"line {num}: {text}" for num, text in lines)
        super().__init__(
            f"Unrecognized port declarations in module '{module_name}':\n  {details}",
            file_path,
            lines[0][0] if lines else None,
        )


class VerilogPortExtractor:
    """Extracts the port list of the module implementing an HLS top function."""

    def __init__(self, strict: bool = False):
        """
        Initialize the extractor with its declaration grammar.

        Args:
            strict: Report unrecognized lines in the port section instead of
                skipping them.
        """
        self.strict = strict

        self.identifier = Word(alphas + "_", alphanums + "_$")
        self.number = Word(nums)
        self.direction = MatchFirst([Keyword("input"), Keyword("output")])
        self.bit_range = (
            Suppress("[") + self.number("msb") + Suppress(":") + self.number("lsb") + Suppress("]")
        )
        self.port_decl = (
            self.direction("direction")
            + Opt(self.bit_range)
            + self.identifier("name")
            + Suppress(";")
        )

    def find_modules(self, hdl_text: str) -> List[ModuleBlock]:
        """Locate every module block in declaration order."""
        text = self._strip_comments(hdl_text)
        blocks = []
        for match in MODULE_PATTERN.finditer(text):
            body_line = text.count("\n", 0, match.start(3)) + 1
            blocks.append(ModuleBlock(match.group(1), match.group(3), body_line))
        return blocks

    def parse_port_line(self, line: str) -> Optional[Port]:
        """
        Parse a single declaration line.

        Args:
            line: Source line, comments allowed

        Returns:
            Port, or None when the line is not a recognized declaration
        """
        code = LINE_COMMENT.sub("", line).strip()
        if not code:
            return None
        try:
            result = self.port_decl.parse_string(code, parse_all=True)
        except ParseBaseException:
            return None

        msb = int(result["msb"]) if "msb" in result else 0
        lsb = int(result["lsb"]) if "lsb" in result else 0
        return Port(
            name=result["name"],
            direction=PortDirection.from_string(result["direction"]),
            msb=msb,
            lsb=lsb,
        )

    def extract_top_module(
        self, hdl_text: str, target_function_name: str, file_path: Optional[Path] = None
    ) -> Optional[HdlModule]:
        """
        Find the module implementing ``target_function_name`` and list its ports.

        The first module whose name contains the function name
        (case-insensitive) wins; HLS tools embed the C/C++ name in mangled
        module names such as ``_Z3addii``.

        Args:
            hdl_text: Generated Verilog
            target_function_name: Top function name from the HLS settings
            file_path: Source of ``hdl_text``, used in error messages

        Returns:
            HdlModule, or None if no module name matches

        Raises:
            PortDeclarationError: In strict mode, if the port section of the
                selected module contains unrecognized lines
        """
        target = target_function_name.lower()
        for block in self.find_modules(hdl_text):
            if target not in block.name.lower():
                logger.debug("Skipping module %s", block.name)
                continue

            ports, unrecognized = self._parse_body(block)
            if unrecognized and self.strict:
                raise PortDeclarationError(block.name, unrecognized, file_path)
            for num, text in unrecognized:
                logger.debug("Skipped line %d in module %s: %s", num, block.name, text)

            logger.debug("Module %s: %d port(s)", block.name, len(ports))
            return HdlModule(name=block.name, ports=ports)

        logger.debug("No module matching '%s' found", target_function_name)
        return None

    def parse_file(
        self, file_path: Union[str, Path], target_function_name: str
    ) -> Optional[HdlModule]:
        """
        Read a Verilog file and extract the top module.

        Raises:
            OSError: If the file cannot be read
        """
        file_path = Path(file_path)
        content = file_path.read_text(encoding="utf-8")
        return self.extract_top_module(content, target_function_name, file_path)

    def _parse_body(self, block: ModuleBlock) -> Tuple[List[Port], List[Tuple[int, str]]]:
        """Collect declared ports and the unrecognized lines of the port section."""
        lines = block.body.splitlines()
        ports: List[Port] = []
        candidates: List[Tuple[int, str]] = []
        section_end = -1

        for idx, line in enumerate(lines):
            code = LINE_COMMENT.sub("", line).strip()
            if not code:
                continue
            if DIRECTION_START.match(code):
                section_end = idx
            port = self.parse_port_line(code)
            if port is not None:
                ports.append(port)
            else:
                candidates.append((idx, code))

        # Port section runs from the body start to the last direction keyword
        unrecognized = [
            (block.body_line + idx, code) for idx, code in candidates if idx <= section_end
        ]
        return ports, unrecognized

    @staticmethod
    def _strip_comments(text: str) -> str:
        """Drop // and /* */ comments but keep their newlines so line numbers hold."""
        return COMMENT.sub(lambda m: "\n" * m.group(0).count("\n"), text)


def extract_top_module(
    hdl_text: str, target_function_name: str, strict: bool = False
) -> Optional[HdlModule]:
    """Convenience wrapper around ``VerilogPortExtractor.extract_top_module``."""
    return VerilogPortExtractor(strict=strict).extract_top_module(hdl_text, target_function_name)

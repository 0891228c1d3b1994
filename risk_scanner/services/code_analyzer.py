"""
Solidity code analyzer.

Line-oriented helpers shared by the detectors: function segmentation by
brace depth, pragma parsing and comment handling. None of these build a
syntax tree; malformed input degrades to fewer records instead of errors.
"""
import re
import logging
from typing import List, Optional, Tuple

from risk_scanner.models.function_record import FunctionRecord

logger = logging.getLogger(__name__)

FUNCTION_HEADER_PATTERN = re.compile(r'\bfunction\s+(\w+)\s*\(')
FUNCTION_DECLARATION_PATTERN = re.compile(r'\bfunction\s+\w+')
VISIBILITY_PATTERN = re.compile(r'\b(public|external|internal|private)\b')
MUTABILITY_PATTERN = re.compile(r'\b(pure|view|payable)\b')
RETURNS_PATTERN = re.compile(r'\breturns\b')
PRAGMA_PATTERN = re.compile(r'pragma\s+solidity\s+([^;]+);?')
VERSION_PATTERN = re.compile(r'(\d+)\.(\d+)(?:\.(\d+))?')

VISIBILITIES = ("public", "external", "internal", "private")


def split_lines(code: str) -> List[str]:
    """Split source into lines without losing trailing empty lines."""
    return code.replace('\r\n', '\n').split('\n')


def is_comment_line(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith(('//', '/*', '*'))


def strip_line_comment(line: str) -> str:
    """Drop a trailing `//` comment."""
    index = line.find('//')
    return line if index == -1 else line[:index]


def count_function_declarations(code: str) -> int:
    """Count `function <name>` occurrences over the raw source."""
    return len(FUNCTION_DECLARATION_PATTERN.findall(code))


def parse_pragma_version(code: str) -> Optional[Tuple[int, int, int]]:
    """
    Return the first version named by the `pragma solidity` directive.

    `^0.7.6`, `>=0.6.0 <0.9.0` and `0.8` yield (0, 7, 6), (0, 6, 0) and
    (0, 8, 0). Sources without a pragma yield None.
    """
    pragma = PRAGMA_PATTERN.search(code)
    if not pragma:
        return None

    version = VERSION_PATTERN.search(pragma.group(1))
    if not version:
        return None

    return (int(version.group(1)), int(version.group(2)), int(version.group(3) or 0))


def parse_version(text: str) -> Tuple[int, int, int]:
    """Parse a dotted version string such as "0.8.0"."""
    match = VERSION_PATTERN.search(text)
    if not match:
        raise ValueError(f"Invalid version: {text!r}")
    return (int(match.group(1)), int(match.group(2)), int(match.group(3) or 0))


def _qualifiers(signature: str) -> str:
    """
    Return the text between the parameter list and `returns`/`{`.

    The parameter list is skipped by paren matching so that parameters such
    as `address payable to` do not count as qualifiers.
    """
    start = signature.find('(')
    if start == -1:
        return ''

    depth = 0
    end = len(signature)
    for i in range(start, len(signature)):
        if signature[i] == '(':
            depth += 1
        elif signature[i] == ')':
            depth -= 1
            if depth == 0:
                end = i + 1
                break

    tail = signature[end:].split('{', 1)[0]
    returns = RETURNS_PATTERN.search(tail)
    if returns:
        tail = tail[:returns.start()]
    return tail


def _make_record(name: str, signature: str, body_lines: List[str], line_start: int,
                 line_end: int, default_visibility: str) -> FunctionRecord:
    qualifiers = _qualifiers(signature)

    visibility_match = VISIBILITY_PATTERN.search(qualifiers)
    visibility = visibility_match.group(1) if visibility_match else default_visibility

    mutability_match = MUTABILITY_PATTERN.search(qualifiers)
    mutability = mutability_match.group(1) if mutability_match else "nonpayable"

    return FunctionRecord(
        name=name,
        visibility=visibility,
        payable=mutability == "payable",
        mutability=mutability,
        body='\n'.join(body_lines),
        line_start=line_start,
        line_end=line_end
    )


def segment_functions(code: str, default_visibility: str = "public") -> List[FunctionRecord]:
    """
    Split Solidity code into function records.

    Args:
        code: Solidity code to analyze
        default_visibility: Visibility assumed when a declaration names none

    Returns:
        List of functions in source order
    """
    if default_visibility not in VISIBILITIES:
        raise ValueError(f"Unknown visibility: {default_visibility!r}")

    functions = []
    lines = split_lines(code)

    current_function = None
    current_function_start = 0
    body_lines: List[str] = []
    signature = ""
    brace_count = 0
    opened = False

    for i, line in enumerate(lines):
        line_number = i + 1
        code_part = strip_line_comment(line)

        # Check for function definition
        if current_function is None:
            if is_comment_line(line):
                continue
            function_match = FUNCTION_HEADER_PATTERN.search(code_part)
            if not function_match:
                continue

            current_function = function_match.group(1)
            current_function_start = line_number
            body_lines = []
            signature = ""
            brace_count = 0
            opened = False
            # Braces before the keyword belong to the enclosing contract
            code_part = code_part[function_match.start():]

        body_lines.append(line)

        if not opened:
            head = code_part.split('{', 1)[0]
            signature += " " + head
            if ';' in head:
                # Declaration without a body (interface or abstract function)
                logger.debug(f"Skipping bodiless declaration of {current_function} at line {current_function_start}")
                current_function = None
                continue

        opens = code_part.count('{')
        closes = code_part.count('}')
        if opens:
            opened = True
        brace_count += opens - closes

        # Count braces to track function body
        if opened and closes and brace_count <= 0:
            functions.append(_make_record(
                current_function, signature, body_lines,
                current_function_start, line_number, default_visibility
            ))
            current_function = None

    if current_function is not None:
        logger.debug(f"Function {current_function} at line {current_function_start} never closes; dropped")

    return functions

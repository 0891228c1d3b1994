"""
Heuristic vulnerability detectors.

Every detector takes the raw source and the segmented functions and returns
a list of finding drafts (plain dicts). Detectors share no state; the
auditor merges, deduplicates and numbers their output.
"""
import re
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from risk_scanner.data.vulnerability_catalog import (
    ACCESS_CONTROL, OVERFLOW, REENTRANCY, UNCHECKED_CALL
)
from risk_scanner.models.function_record import FunctionRecord
from risk_scanner.services.code_analyzer import (
    PRAGMA_PATTERN, is_comment_line, parse_pragma_version, split_lines, strip_line_comment
)

logger = logging.getLogger(__name__)

Finding = Dict[str, Any]
Detector = Callable[[str, Sequence[FunctionRecord]], List[Finding]]

# Call options may open on the call line and close further down
_CALL_TARGET = (
    r'\.(?:call|delegatecall|staticcall)\s*(?:\{[^}]*\}\s*\(|\{[^}]*$|\()'
    r'|\.call(?:\.(?:value|gas)\s*\([^)]*\))+\s*\('
)

# External calls of any kind (value transfers included)
EXTERNAL_CALL_PATTERN = re.compile(_CALL_TARGET + r'|\.(?:send|transfer)\s*\(')
# Calls whose failure is reported through a return value
LOW_LEVEL_CALL_PATTERN = re.compile(_CALL_TARGET + r'|\.send\s*\(')

SUCCESS_CHECK_PATTERNS = [
    re.compile(r'\b(?:require|assert|if)\s*\(\s*!?\s*\(?\s*(?:\w*[Ss]uccess\w*|sent|ok)\b'),
    re.compile(r'\b(?:require|assert|if)\s*\(.*\.(?:call|delegatecall|staticcall|send)\b'),
]
# Only meaningful on the call line itself
INLINE_CHECK_PATTERNS = [
    re.compile(r'\(\s*bool\s+\w+\s*,'),
    re.compile(r'\bbool\s+\w+\s*=\s*[^=]'),
]

ASSIGNMENT_PATTERN = re.compile(r'(?<![=!<>+\-*/%&|^])(?:[+\-*/%&|^]|<<|>>)?=(?![=>])')
INCREMENT_PATTERN = re.compile(r'\+\+|--')
MAPPING_ASSIGNMENT_PATTERN = re.compile(r'\w+\s*\[[^\]]*\]\s*(?:[+\-*/]?=)(?!=)')
SCOPED_VARIABLE_PATTERN = re.compile(r'\b(?:memory|calldata)\b')
LOCAL_DECLARATION_PATTERN = re.compile(
    r'^\s*\(?\s*(?:u?int\d*|bool|address(?:\s+payable)?|bytes\d*|string|var)\s+\w+\s*[,=)]'
)
FOR_HEADER_PATTERN = re.compile(r'^\s*for\s*\(')

GUARD_PATTERN = re.compile(r'\bnonReentrant\b|\bReentrancyGuard\w*\b')

ARITHMETIC_PATTERN = re.compile(r'\+\+|--|\+=|-=|\*=|(?<![=!<>])=(?![=>])[^=;]*\*')

SENSITIVE_NAME_PATTERN = re.compile(r'transfer|mint|burn', re.IGNORECASE)
ACCESS_CONTROL_PATTERNS = [
    re.compile(r'\bonly[A-Z_]\w*\b'),
    re.compile(r'\bhasRole\s*\('),
    re.compile(r'\b_check(?:Owner|Role)\s*\('),
    re.compile(r'msg\.sender\s*[!=]=|[!=]=\s*msg\.sender'),
]


def is_state_mutation(line: str) -> bool:
    """
    Decide whether a line looks like it writes contract state.

    Assignments to memory/calldata variables, local value-type declarations
    and `for` loop headers are treated as local.
    """
    if is_comment_line(line):
        return False

    code = strip_line_comment(line)
    if not code.strip():
        return False

    if MAPPING_ASSIGNMENT_PATTERN.search(code) and not LOCAL_DECLARATION_PATTERN.search(code):
        return True

    if FOR_HEADER_PATTERN.search(code):
        return False

    if INCREMENT_PATTERN.search(code):
        return True

    if not ASSIGNMENT_PATTERN.search(code):
        return False

    if SCOPED_VARIABLE_PATTERN.search(code) or LOCAL_DECLARATION_PATTERN.search(code):
        return False

    return True


def _code_lines(function: FunctionRecord) -> List[Tuple[int, str]]:
    return [
        (number, line) for number, line in function.numbered_lines()
        if not is_comment_line(line)
    ]


def detect_reentrancy(code: str, functions: Sequence[FunctionRecord]) -> List[Finding]:
    """
    Flag functions where an external call precedes a state update.

    One finding per function, located at the first call that has a state
    update after it. Guarded code is reported as medium instead of high.
    """
    results = []
    source_guarded = bool(GUARD_PATTERN.search(code))

    for function in functions:
        lines = _code_lines(function)
        call_lines = [
            (number, line) for number, line in lines
            if EXTERNAL_CALL_PATTERN.search(strip_line_comment(line))
        ]
        if not call_lines:
            continue

        update_lines = [(number, line) for number, line in lines if is_state_mutation(line)]

        for call_number, call_line in call_lines:
            later_updates = [(number, line) for number, line in update_lines if number > call_number]
            if not later_updates:
                continue

            update_number, update_line = later_updates[0]
            guarded = bool(GUARD_PATTERN.search(function.body)) or source_guarded
            results.append({
                'category': REENTRANCY,
                'severity': 'medium' if guarded else 'high',
                'line_start': call_number,
                'line_end': update_number,
                'snippet': f"{call_line.strip()}\n...\n{update_line.strip()}",
                'note': (
                    f"In {function.name}(), the external call on line {call_number} happens "
                    f"before the state update on line {update_number}."
                    + (" A reentrancy guard is present, which lowers but does not remove the risk."
                       if guarded else "")
                )
            })
            break

    return results


def detect_unchecked_calls(code: str, functions: Sequence[FunctionRecord],
                           window: int = 5) -> List[Finding]:
    """Flag low-level calls with no success check on the same or the next `window` lines."""
    results = []
    lines = split_lines(code)

    for i, line in enumerate(lines):
        if is_comment_line(line) or not LOW_LEVEL_CALL_PATTERN.search(strip_line_comment(line)):
            continue

        call_code = strip_line_comment(line)
        scope = [strip_line_comment(text) for text in lines[i:i + window + 1]]
        checked = any(pattern.search(call_code) for pattern in INLINE_CHECK_PATTERNS) or any(
            pattern.search(text) for text in scope for pattern in SUCCESS_CHECK_PATTERNS
        )
        if checked:
            continue

        results.append({
            'category': UNCHECKED_CALL,
            'severity': 'high',
            'line_start': i + 1,
            'line_end': i + 1,
            'snippet': line.strip()
        })

    return results


def detect_overflow(code: str, functions: Sequence[FunctionRecord],
                    safe_version: Tuple[int, int, int] = (0, 8, 0)) -> List[Finding]:
    """Flag the first arithmetic mutation when the pragma predates checked arithmetic."""
    version = parse_pragma_version(code)
    if version is None:
        logger.debug("No pragma solidity directive; skipping overflow check")
        return []
    if version >= safe_version:
        return []

    for i, line in enumerate(split_lines(code)):
        if is_comment_line(line) or line.strip().startswith('import'):
            continue

        text = PRAGMA_PATTERN.sub('', strip_line_comment(line))
        if ARITHMETIC_PATTERN.search(text):
            pragma = '.'.join(str(part) for part in version)
            return [{
                'category': OVERFLOW,
                'severity': 'low',
                'line_start': i + 1,
                'line_end': i + 1,
                'snippet': line.strip(),
                'note': f"The pragma targets Solidity {pragma}; this is the first unchecked arithmetic operation."
            }]

    return []


def _has_access_control(function: FunctionRecord) -> bool:
    return any(pattern.search(function.body) for pattern in ACCESS_CONTROL_PATTERNS)


def _is_state_changing(function: FunctionRecord) -> bool:
    if SENSITIVE_NAME_PATTERN.search(function.name):
        return True
    return any(is_state_mutation(line) for _, line in _code_lines(function))


def detect_missing_access_control(code: str, functions: Sequence[FunctionRecord]) -> List[Finding]:
    """Flag public functions that move value or change state with no access check."""
    results = []

    for function in functions:
        if not function.is_externally_callable or function.is_read_only:
            continue
        if not (function.payable or _is_state_changing(function)):
            continue
        if _has_access_control(function):
            continue

        header = function.body.split('\n', 1)[0]
        results.append({
            'category': ACCESS_CONTROL,
            'severity': 'high' if function.payable else 'medium',
            'line_start': function.line_start,
            'line_end': function.line_end,
            'snippet': header.strip(),
            'note': (
                f"{function.name}() is {function.visibility}"
                + (" and payable" if function.payable else "")
                + " but has no owner or role check."
            )
        })

    return results


def default_detectors(call_check_window: int = 5,
                      safe_version: Optional[Tuple[int, int, int]] = None) -> List[Tuple[str, Detector]]:
    """
    Return the detector battery in execution order.

    The fallback informational finding is not a detector; the auditor adds
    it when the battery produces nothing.
    """
    safe_version = safe_version or (0, 8, 0)
    return [
        (REENTRANCY, detect_reentrancy),
        (UNCHECKED_CALL, lambda code, functions: detect_unchecked_calls(code, functions, call_check_window)),
        (OVERFLOW, lambda code, functions: detect_overflow(code, functions, safe_version)),
        (ACCESS_CONTROL, detect_missing_access_control),
    ]

"""
Parse free-form recipe steps into Instruction records.

Leading step numbers ("1.", "2)", "Step 3:") and bullets ("-", "•", "*")
are stripped and whitespace is collapsed.
"""

import re
from typing import Any, List, Optional

from ..data.models import Instruction, new_id
from . import diagnostics as diag
from .diagnostics import Diagnostic
from .normalizer import decode_entries

STEP_MARKER = re.compile(r"^(?:step\s*)?\d+[.):\-]+\s*", re.IGNORECASE)
BULLET = re.compile(r"^[-•*]\s*")
WHITESPACE = re.compile(r"\s+")

TEXT_KEYS = ("text", "instruction", "step")


def parse_instruction_text(instruction_text: Any) -> Optional[Instruction]:
    """
    Parse instruction text into a structured Instruction.

    Args:
        instruction_text: Raw step like "1. Preheat oven"

    Returns:
        Instruction with a fresh id, or None if no text remains
    """
    if not isinstance(instruction_text, str):
        return None

    text = instruction_text.strip()
    if not text:
        return None

    text = STEP_MARKER.sub("", text)
    text = BULLET.sub("", text)
    text = WHITESPACE.sub(" ", text).strip()

    if not text:
        return None

    return Instruction(text=text)


def parse_instruction_list(instruction_texts: Any) -> List[Instruction]:
    """Parse a list of step strings, dropping empty ones."""
    if not isinstance(instruction_texts, list):
        return []

    parsed = (parse_instruction_text(text) for text in instruction_texts)
    return [instruction for instruction in parsed if instruction is not None]


def instruction_to_text(instruction: Any) -> str:
    """Convert a structured instruction back to plain text."""
    if isinstance(instruction, str):
        return instruction
    if isinstance(instruction, Instruction):
        return instruction.text.strip()
    if isinstance(instruction, dict) and isinstance(instruction.get("text"), str):
        return instruction["text"].strip()
    return ""


def validate_instruction(
    instruction: Any,
    context_label: str = "",
    index: int = 0,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> Optional[Instruction]:
    """Validate a partially structured step (``text``, ``instruction`` or ``step`` key)."""
    if not isinstance(instruction, dict):
        diag.record(diagnostics, context_label, "Invalid instruction", diag.INVALID_ITEM, index)
        return None

    text = None
    for key in TEXT_KEYS:
        if instruction.get(key):
            text = instruction[key]
            break

    if not isinstance(text, str) or not text.strip():
        diag.record(
            diagnostics, context_label, "Missing or invalid instruction text", diag.INVALID_ITEM, index
        )
        return None

    return Instruction(text=text.strip(), id=str(instruction.get("id") or new_id()))


def normalize_instructions(
    instructions: Any,
    context_label: str = "",
    diagnostics: Optional[List[Diagnostic]] = None,
) -> List[Instruction]:
    """
    Normalize instructions from storage, handling old and new formats.

    Same tolerance rules as ingredient normalization: strings are parsed,
    dicts validated, anything else dropped.
    """
    entries = decode_entries(instructions, context_label, "instructions", diagnostics)
    if entries is None:
        return []

    normalized = []
    for index, entry in enumerate(entries):
        if isinstance(entry, str):
            instruction = parse_instruction_text(entry)
        elif isinstance(entry, Instruction):
            instruction = entry
        elif isinstance(entry, dict):
            instruction = validate_instruction(entry, context_label, index, diagnostics)
        else:
            instruction = None

        if instruction is not None:
            normalized.append(instruction)

    return normalized

"""
Unit tests for recipe step parsing.
"""

import pytest

from recipe_shopper.data.models import Instruction
from recipe_shopper.parsing import diagnostics as diag
from recipe_shopper.parsing.instruction_parser import (
    instruction_to_text,
    normalize_instructions,
    parse_instruction_list,
    parse_instruction_text,
    validate_instruction,
)


class TestParseInstructionText:
    """Test step marker and bullet stripping."""

    @pytest.mark.parametrize("text,expected", [
        ("1. Preheat oven", "Preheat oven"),
        ("2) Mix the batter", "Mix the batter"),
        ("Step 3: Bake for 20 minutes", "Bake for 20 minutes"),
        ("step 4- Let cool", "Let cool"),
        ("- Mix well", "Mix well"),
        ("• Stir gently", "Stir gently"),
        ("*  Serve   hot ", "Serve hot"),
    ])
    def test_strips_markers(self, text, expected):
        instruction = parse_instruction_text(text)

        assert instruction.text == expected
        assert instruction.id

    def test_number_without_punctuation_is_kept(self):
        """Test that a leading number that is not a step marker survives."""
        instruction = parse_instruction_text("350 degrees is hot enough")

        assert instruction.text == "350 degrees is hot enough"

    @pytest.mark.parametrize("value", [None, "", "   ", "1.", "- ", 7])
    def test_nothing_left_returns_none(self, value):
        assert parse_instruction_text(value) is None

    def test_fresh_id_per_parse(self):
        """Test that re-parsing identical text gives a new id."""
        first = parse_instruction_text("Mix well")
        second = parse_instruction_text("Mix well")

        assert first.text == second.text
        assert first.id != second.id


class TestNormalizeInstructions:
    """Test tolerant normalization of stored steps."""

    def test_json_string(self):
        instructions = normalize_instructions('["1. Boil water", "2. Add pasta"]', "Pasta")

        assert [i.text for i in instructions] == ["Boil water", "Add pasta"]

    def test_mixed_entries(self):
        diagnostics = []
        instructions = normalize_instructions(
            [{"step": "Chop onions", "id": "s1"}, {"text": ""}, "- Fry", 3],
            "Soup",
            diagnostics,
        )

        assert [i.text for i in instructions] == ["Chop onions", "Fry"]
        assert instructions[0].id == "s1"
        assert diag.count_invalid(diagnostics) == 1

    def test_unparseable_string(self):
        diagnostics = []

        assert normalize_instructions("not json", "Soup", diagnostics) == []
        assert diagnostics[0].kind == diag.UNPARSEABLE

    def test_validate_instruction_requires_dict(self):
        assert validate_instruction("Mix", "Soup") is None


class TestInstructionHelpers:

    def test_parse_instruction_list(self):
        instructions = parse_instruction_list(["1. Mix", "", "2. Bake"])

        assert [i.text for i in instructions] == ["Mix", "Bake"]
        assert parse_instruction_list(None) == []

    def test_instruction_to_text(self):
        assert instruction_to_text(Instruction(text=" Bake ")) == "Bake"
        assert instruction_to_text({"text": "Stir"}) == "Stir"
        assert instruction_to_text("Serve") == "Serve"
        assert instruction_to_text(None) == ""

"""
Tests for prompt construction.
"""

from contentizer.core.prompts import (
    OUTPUT_CONSTRAINT,
    ROLE_STATEMENT,
    TASK_STATEMENT,
    OptimizeRequest,
    build_request,
    build_system_prompt,
    build_user_message,
)

BASE = "\n".join([ROLE_STATEMENT, TASK_STATEMENT, OUTPUT_CONSTRAINT])


class TestSystemPrompt:
    """Test system prompt clauses and their order."""

    def test_no_optional_clauses(self):
        """Only the fixed lines when nothing is configured."""
        assert build_system_prompt() == BASE

    def test_all_clauses_in_order(self):
        """Language, length ceiling and global instructions follow the fixed lines."""
        prompt = build_system_prompt(
            global_prompt="  Avoid jargon.  ",
            language=" Spanish ",
            output_max_chars=1200,
        )
        assert prompt == "\n".join([
            BASE,
            "Write the output in Spanish.",
            "Keep the output concise and under 1200 characters.",
            "Global instructions: Avoid jargon.",
        ])

    def test_blank_values_omit_clauses(self):
        """Whitespace-only values behave like unset ones, with no stray newlines."""
        prompt = build_system_prompt(global_prompt="   ", language="", output_max_chars=None)
        assert prompt == BASE
        assert not prompt.endswith("\n")

    def test_only_length_clause(self):
        """Omitting one clause leaves the others intact."""
        prompt = build_system_prompt(output_max_chars=500)
        assert prompt == BASE + "\nKeep the output concise and under 500 characters."

    def test_deterministic(self):
        """Identical arguments give identical strings."""
        args = ("Be brief.", "English", 800)
        assert build_system_prompt(*args) == build_system_prompt(*args)


class TestUserMessage:
    """Test user message layout."""

    def test_without_extra_instructions(self):
        """Blank extra instructions are left out entirely."""
        message = build_user_message("Email", "Formal", "  ", "  pls fix my txt \n")
        assert message == (
            "Category: Email\n\n"
            "Style: Formal\n\n"
            "---\n\n"
            "Original text to optimize:\n\n"
            "pls fix my txt"
        )

    def test_with_extra_instructions(self):
        """Extra instructions are trimmed and placed before the separator."""
        message = build_user_message("SEO", "Concise", " Keep the brand name. ", "text")
        assert message.split("\n\n") == [
            "Category: SEO",
            "Style: Concise",
            "Extra instructions: Keep the brand name.",
            "---",
            "Original text to optimize:",
            "text",
        ]


class TestBuildRequest:
    """Test the combined request builder."""

    def test_pairs_both_prompts(self):
        request = build_request("Email", "Formal", "", "hello", language="English")
        assert request == OptimizeRequest(
            system_prompt=build_system_prompt(None, "English", None),
            user_message=build_user_message("Email", "Formal", "", "hello"),
        )

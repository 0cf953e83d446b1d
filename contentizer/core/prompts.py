"""
Prompt construction for the copy editor.

Pure functions: the same arguments always produce the same strings.
"""

from dataclasses import dataclass
from typing import Optional

ROLE_STATEMENT = "You are a professional copy editor."
TASK_STATEMENT = "Improve the user's text according to the selected category and style."
OUTPUT_CONSTRAINT = (
    "Return ONLY the improved text. Do not add explanations, preamble, "
    "or markdown unless the input already uses markdown."
)


@dataclass(frozen=True)
class OptimizeRequest:
    """System prompt and user message for one completion."""
    system_prompt: str
    user_message: str


def build_system_prompt(
    global_prompt: Optional[str] = None,
    language: Optional[str] = None,
    output_max_chars: Optional[int] = None,
) -> str:
    """Build the system prompt.
    
    Optional clauses appear in a fixed order (language, length ceiling,
    global instructions) and only when their value is set.
    """
    parts = [ROLE_STATEMENT, TASK_STATEMENT, OUTPUT_CONSTRAINT]

    if language and language.strip():
        parts.append(f"Write the output in {language.strip()}.")

    if output_max_chars:
        parts.append(f"Keep the output concise and under {output_max_chars} characters.")

    if global_prompt and global_prompt.strip():
        parts.append(f"Global instructions: {global_prompt.strip()}")

    return "\n".join(parts)


def build_user_message(
    category: str,
    style: str,
    extra_instructions: str,
    original_text: str,
) -> str:
    """Build the user message from category, style, extra instructions and text."""
    parts = [
        f"Category: {category}",
        f"Style: {style}",
    ]
    if extra_instructions and extra_instructions.strip():
        parts.append(f"Extra instructions: {extra_instructions.strip()}")
    parts.append("---")
    parts.append("Original text to optimize:")
    parts.append(original_text.strip())
    return "\n\n".join(parts)


def build_request(
    category: str,
    style: str,
    extra_instructions: str,
    original_text: str,
    global_prompt: Optional[str] = None,
    language: Optional[str] = None,
    output_max_chars: Optional[int] = None,
) -> OptimizeRequest:
    """Build the (system prompt, user message) pair for one optimize call."""
    return OptimizeRequest(
        system_prompt=build_system_prompt(global_prompt, language, output_max_chars),
        user_message=build_user_message(category, style, extra_instructions, original_text),
    )

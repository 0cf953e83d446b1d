"""
Category and style presets offered to the user.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Presets:
    categories: List[str] = field(default_factory=list)
    styles: List[str] = field(default_factory=list)


def default_presets() -> Presets:
    """Presets bundled with the app."""
    return Presets(
        categories=[
            "Email",
            "LinkedIn",
            "SEO",
            "Support",
            "Product description",
            "Resume/CV",
        ],
        styles=[
            "Formal",
            "Friendly",
            "Concise",
            "Persuasive",
            "Technical",
            "Casual",
        ],
    )

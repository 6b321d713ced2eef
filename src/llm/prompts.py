from typing import Iterable

from src.db import CategoryRecord


MAX_CATEGORIES_PER_CLIP = 3


def classification_system_prompt(categories: Iterable[CategoryRecord]) -> str:
    """
    Returns the system prompt asking the model to pick categories for a clip.

    Args:
        categories: The whole taxonomy

    Returns:
        Prompt string listing every "- name: description" line
    """
    category_list = "\n".join(
        f"- {category.name}: {category.description}"
        if category.description
        else f"- {category.name}"
        for category in categories
    )
    return (
        "You are an F1 radio expert. Analyze radio transcripts and assign "
        "appropriate categories.\n\n"
        f"Available categories:\n{category_list}\n\n"
        "Return ONLY a JSON array of category names that apply. "
        'Example: ["Rage", "Complaint"]\n'
        "Be selective - only choose categories that clearly apply. "
        f"Maximum {MAX_CATEGORIES_PER_CLIP} categories per clip."
    )


def build_classification_messages(
    system_prompt: str, transcript: str
) -> list[dict[str, str]]:
    """Chat messages for one clip: fixed system prompt, transcript as user input."""
    return [
        {"role": "system", "content": system_prompt},
        {
            "role": "user",
            "content": f'Categorize this F1 radio message: "{transcript}"',
        },
    ]

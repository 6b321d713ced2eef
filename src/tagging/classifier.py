"""
Clip classification with an OpenAI chat model.

The model must answer with a JSON array of category names and nothing else.
Anything else (empty answer, prose, an object, an array holding non-strings)
raises CategoryParseError: the answer is validated, never coerced.
"""

import logging

from openai import OpenAI
from pydantic import StrictStr, TypeAdapter, ValidationError

from src.errors import CategoryParseError
from src.llm import build_classification_messages


logger = logging.getLogger("auto_tag")

CATEGORY_NAMES_ADAPTER = TypeAdapter(list[StrictStr])


def parse_category_names(raw_response: str) -> list[str]:
    """
    Validate a model answer as a JSON array of strings.

    Args:
        raw_response: Raw completion text, e.g. '["Rage", "Complaint"]'

    Returns:
        Category names in the order given by the model

    Raises:
        CategoryParseError: If the text is empty or not a JSON array of strings
    """
    if not raw_response or not raw_response.strip():
        raise CategoryParseError("No response from AI", raw_response or "")
    try:
        return CATEGORY_NAMES_ADAPTER.validate_json(raw_response.strip())
    except ValidationError as e:
        raise CategoryParseError(
            f"Invalid JSON response: {raw_response.strip()}", raw_response
        ) from e


class OpenAIClassifier:
    """
    Picks categories for a transcript with a chat completion.

    Args:
        client: OpenAI client
        model: Chat model name
        temperature: Sampling temperature (low for stable labels)
        max_tokens: Output budget; a short JSON array fits easily
    """

    def __init__(
        self,
        client: OpenAI,
        model: str = "gpt-4o-mini",
        temperature: float = 0.3,
        max_tokens: int = 100,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def classify(self, system_prompt: str, transcript: str) -> list[str]:
        """
        Ask the model which categories apply to transcript.

        Raises:
            CategoryParseError: If the answer is not a JSON array of strings
            OpenAIError: If the API call fails
        """
        completion = self.client.chat.completions.create(
            model=self.model,
            messages=build_classification_messages(system_prompt, transcript),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        content = completion.choices[0].message.content if completion.choices else None
        logger.debug(f"Model answer: {content!r}")
        return parse_category_names(content or "")

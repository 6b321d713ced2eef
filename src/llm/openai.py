from typing import Optional

from openai import OpenAI

from src.errors import ConfigurationError


def init_llm_openai(api_key: Optional[str], timeout: float = 60.0) -> OpenAI:
    """
    Initialize the OpenAI client used for transcription and classification.

    Args:
        api_key: OpenAI API key (from OPENAI_API_KEY)
        timeout: Request timeout in seconds

    Returns:
        OpenAI client instance

    Raises:
        ConfigurationError: If the API key is missing
    """
    if not api_key:
        raise ConfigurationError("OPENAI_API_KEY not found in environment variables.")
    return OpenAI(api_key=api_key, timeout=timeout)

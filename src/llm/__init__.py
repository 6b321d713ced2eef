"""This package contains modules related to the OpenAI models.
prompts.py : Classification prompt builders
openai.py : OpenAI client initialization
"""

from .prompts import build_classification_messages, classification_system_prompt
from .openai import init_llm_openai


__all__ = [
    "build_classification_messages",
    "classification_system_prompt",
    "init_llm_openai",
]

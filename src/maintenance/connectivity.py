"""Connectivity checks for the catalog database and the OpenAI API."""

import logging

from openai import OpenAI
from sqlalchemy.engine import Engine

from src.db import check_database_connection
from src.logger import log_function


logger = logging.getLogger("maintenance")

MODEL_SAMPLE_SIZE = 5


def check_database(engine: Engine) -> bool:
    """Run a trivial query and report the outcome."""
    ok = check_database_connection(engine)
    if ok:
        print("✓ Database connection successful!")
    else:
        print("✗ Database connection failed (see logs/database.log)")
    return ok


@log_function(logger_name="maintenance", log_execution_time=True)
def check_openai(client: OpenAI, sample_size: int = MODEL_SAMPLE_SIZE) -> list[str]:
    """
    List the models visible to the API key.

    Returns:
        Ids of every available model

    Raises:
        OpenAIError: If the API cannot be reached or rejects the key
    """
    print("Attempting to list models...")
    model_ids = [model.id for model in client.models.list()]
    print("✓ Connection successful!")
    print(f"Found {len(model_ids)} models")
    if model_ids:
        print("\nFirst few models:")
        for model_id in model_ids[:sample_size]:
            print(f"  - {model_id}")
    logger.info(f"OpenAI connection ok, {len(model_ids)} models available")
    return model_ids

"""Model access for the program generator."""

import os

from pydantic_ai.models import Model
from pydantic_ai.models.openai import OpenAIModel
from pydantic_ai.models.test import TestModel

from companion.config.settings import settings
from companion.upload.plan_parser import SAMPLE_CSV


def get_model(provider: str, model_name: str) -> Model:
    """Build the pydantic-ai model for a provider.

    The "test" provider answers with the built-in sample program and never
    touches the network; `model_name` is ignored for it.

    Raises:
        ValueError: If the provider is not supported
    """
    if provider == "openai":
        # pydantic_ai reads the key from the environment
        if settings.openai_api_key and not os.getenv("OPENAI_API_KEY"):
            os.environ["OPENAI_API_KEY"] = settings.openai_api_key
        return OpenAIModel(model_name)

    if provider == "test":
        return TestModel(custom_output_text=SAMPLE_CSV)

    raise ValueError(f"Unsupported LLM provider: {provider}")

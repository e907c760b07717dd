"""Workout program generation using an LLM.

Turns a free-text goal ("prise de masse sur 3 jours", "cardio vélo
débutant", ...) into program text in the exact positional format accepted by
the plan parser. The output is not parsed here: callers feed it to
`parse_plan_csv` like a manual import.
"""

from __future__ import annotations

import os
import re

from loguru import logger
from pydantic_ai import Agent

from companion.config.settings import settings
from companion.services.llm.model import get_model
from companion.upload.plan_parser import CSV_HEADER

CODE_FENCE_PATTERN = re.compile(r"^```[a-zA-Z]*\s*$", re.MULTILINE)
MISSING_KEY_MESSAGE = "Clé API manquante. Configurez OPENAI_API_KEY pour générer un programme."


class PlanGeneratorError(Exception):
    """Base exception for program generation failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class PlanGeneratorConfigError(PlanGeneratorError):
    """Raised when the generator is not configured (missing key, unknown provider)."""

    def __init__(self, message: str = MISSING_KEY_MESSAGE):
        super().__init__(message)


class PlanGenerationError(PlanGeneratorError):
    """Raised when the model call fails or returns nothing usable."""


def build_prompt(goal: str) -> str:
    """Build the generation prompt for a user goal."""
    return f"""Génère un programme sportif au format CSV correspondant à cette demande : "{goal}".

RÈGLES STRICTES :
1. Le CSV DOIT avoir exactement ces colonnes, séparées par des virgules : {CSV_HEADER}
2. Ne mets PAS de code block markdown (pas de ```). Renvoie UNIQUEMENT le texte CSV brut.
3. Langue : Français.
4. Inclus au moins un échauffement, 3 à 6 exercices, et des abdos.
5. Pour les séries (Colonnes "Série Ex X"), utilise le format : "3 séries de 10 répétitions" ou "3 séries de 10 reps (1min récup)".
6. Si c'est du vélo, utilise dans le titre (Colonne "Type") le mot "Vélo" ou "Hometrainer".
"""


def clean_generated_text(text: str) -> str:
    """Strip markdown code fences the model may add despite the rules."""
    return CODE_FENCE_PATTERN.sub("", text).strip()


def _has_api_key() -> bool:
    if settings.plan_generator_provider != "openai":
        return True
    return bool(settings.openai_api_key or os.getenv("OPENAI_API_KEY"))


async def generate_plan_csv(goal: str) -> str:
    """Generate program text for a free-text goal.

    Args:
        goal: What the user wants to train for

    Returns:
        Program text in the importer's column format

    Raises:
        ValueError: If the goal is empty
        PlanGeneratorConfigError: If no API key is configured or the provider is unknown
        PlanGenerationError: If the model call fails or returns empty text
    """
    if not goal.strip():
        raise ValueError("goal must not be empty")
    if not _has_api_key():
        raise PlanGeneratorConfigError()

    provider = settings.plan_generator_provider
    logger.info(f"Generating program via LLM (provider={provider}, model={settings.plan_generator_model})")
    try:
        model = get_model(provider, settings.plan_generator_model)
    except ValueError as e:
        raise PlanGeneratorConfigError(e.args[0]) from e
    agent = Agent(model=model, output_type=str)

    try:
        result = await agent.run(build_prompt(goal.strip()))
    except Exception as e:
        logger.error(f"Program generation failed: {e}")
        raise PlanGenerationError("Erreur lors de la génération. Veuillez réessayer.") from e

    text = clean_generated_text(result.output)
    if not text:
        raise PlanGenerationError("Le modèle n'a renvoyé aucun programme.")

    logger.info(f"Generated program text ({len(text.splitlines())} lines)")
    return text

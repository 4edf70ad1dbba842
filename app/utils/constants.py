"""Shared regex patterns and user-facing messages."""

import re

# Line that opens a top-level plan section: "1. IDENTIFICACIÓN ...".
# Used by the section splitter as a positive lookahead split point.
SECTION_SPLIT_RE = re.compile(r"\n(?=\d+\.[ \t]+)")
SECTION_TITLE_RE = re.compile(r"^\d+\.[ \t]+\S")

# First fenced block in a model answer, any language tag.
FENCED_BLOCK_RE = re.compile(r"```(\w*)?[ \t]*\r?\n(.*?)```", re.DOTALL)

# Fenced block tagged as the plan-document language in a refinement reply.
PLAN_FENCE_RE = re.compile(r"```markdown[ \t]*\r?\n(.*?)```", re.DOTALL)

# Proposal blocks run from a PROPUESTA marker to the next "---" line or end of text.
PROPOSAL_BLOCK_RE = re.compile(
    r"^[ \t*#]*PROPUESTA[ \t]*\d*[ \t]*:\**(.*?)(?=^[ \t]*---|\Z)",
    re.IGNORECASE | re.DOTALL | re.MULTILINE,
)
PROPOSAL_NAME_RE = re.compile(r"^[ \t*-]*Nombre:\**[ \t]*(.*)$", re.IGNORECASE | re.MULTILINE)
PROPOSAL_SUMMARY_RE = re.compile(r"^[ \t*-]*Resumen Clave:\**[ \t]*(.*)$", re.IGNORECASE | re.MULTILINE)
PROPOSAL_RESOURCES_RE = re.compile(r"^[ \t*-]*Nivel de Recursos:\**[ \t]*(.*)$", re.IGNORECASE | re.MULTILINE)

# Sentences for narration: text ending in terminal punctuation, or a trailing remainder.
SENTENCE_RE = re.compile(r"[^.!?]+(?:[.!?]+|$)")

MISSING_SUMMARY = "No se encontró resumen."
MISSING_RESOURCE_LEVEL = "No se especificó nivel."

EMPTY_PROPOSALS_MESSAGE = "El asistente no generó propuestas. Por favor, intenta de nuevo."
LONG_UNPARSEABLE_MESSAGE = (
    "El asistente respondió, pero no se pudieron extraer propuestas en el formato esperado. "
    "Por favor, revisa la consola o intenta de nuevo."
)
SHORT_UNPARSEABLE_MESSAGE = 'No se pudieron extraer propuestas. Respuesta recibida: "{preview}..."'

FORM_INCOMPLETE_MESSAGE = "Por favor, completa todos los campos del formulario."
PROPOSALS_ERROR_MESSAGE = "Hubo un error al contactar al asistente. Por favor, inténtalo de nuevo más tarde."
PLAN_ERROR_MESSAGE = "Hubo un error al generar el plan detallado. Por favor, inténtalo de nuevo."
REFINEMENT_START_ERROR_MESSAGE = "Hubo un error al iniciar el asistente. Por favor, intenta de nuevo."
REFINEMENT_ERROR_MESSAGE = "Lo siento, ocurrió un error. Por favor, intenta de nuevo."
REFINEMENT_GREETING = (
    "¡Hola! Soy InspiraTEC. Estoy aquí para ayudarte a refinar este plan. "
    "¿Qué te gustaría cambiar o sobre qué necesitas más detalles?"
)
REFINEMENT_APPLIED_MESSAGE = "¡Listo! He actualizado el plan con tus cambios. Puedes seguir pidiéndome ajustes."
PODCAST_ERROR_MESSAGE = "Hubo un error al generar el guion para el podcast. Por favor, intenta de nuevo."
PDF_ERROR_MESSAGE = "Hubo un error al generar el PDF."

# Resource tiers offered by the form, A (most basic) to F (most advanced).
RESOURCE_TIERS: dict[str, str] = {
    "A": "Aula Tradicional",
    "B": "Materiales Reciclables",
    "C": "Kit Básico de Ciencias",
    "D": "Computadores sin Internet",
    "E": "Computadores con Internet",
    "F": "Laboratorio STEM",
}

MODEL_UNAVAILABLE_MESSAGE = (
    "Error al inicializar el modelo de lenguaje. Asegúrate de que el servidor de Ollama "
    "esté configurado correctamente."
)
UNKNOWN_PROPOSAL_MESSAGE = "La propuesta seleccionada no está entre las propuestas actuales."
NO_PLAN_MESSAGE = "No hay un plan de proyecto abierto."
EDIT_MODE_MESSAGE = "Guarde los cambios primero para poder continuar."
PROJECT_NOT_FOUND_MESSAGE = "No se encontró el proyecto en el historial."
NOTHING_TO_SAVE_MESSAGE = "Solo se pueden guardar planes recién generados."
ALREADY_SAVED_MESSAGE = "Este plan ya está guardado en el historial."
DOCUMENT_BUSY_MESSAGE = "Hay una modificación del plan en curso. Espera a que termine."
REFINEMENT_INACTIVE_MESSAGE = "El asistente de refinamiento no está activo."
NO_PODCAST_MESSAGE = "No hay un podcast generado para este plan."
PODCAST_CLIP_MISSING_MESSAGE = "Ese fragmento del podcast aún no está disponible."
SECTION_NOT_FOUND_MESSAGE = "No existe esa sección en el plan."
PODCAST_SCRIPT_FILENAME = "guion-podcast.txt"

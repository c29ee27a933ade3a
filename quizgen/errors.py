"""Exceptions raised by the quiz generation engine."""


class QuizGenerationError(Exception):
    """Base class for quiz generation failures."""


class EmptyCatalogError(QuizGenerationError):
    """Raised when generation is requested for a catalog with no products."""

    def __init__(self, message: str = "No products found. Please add products to your store first."):
        super().__init__(message)


class GenerationError(QuizGenerationError):
    """The generative service failed or returned an unusable payload.

    Always recoverable: the orchestrator falls back to rule-based questions.
    """

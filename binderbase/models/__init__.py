from binderbase.models.card import COLOR_ORDER, CommanderSummary, NormalizedCard, sort_colors
from binderbase.models.failure import (
    ErrorResponse,
    FailureKind,
    KnownError,
    NotFoundError,
    ProviderError,
    StoreError,
    ValidationError,
)
from binderbase.models.recommendations import (
    ColorRecommendations,
    CommanderRecommendations,
    RecommendationCategory,
    RecommendationEntry,
)

__all__ = [
    "COLOR_ORDER",
    "ColorRecommendations",
    "CommanderRecommendations",
    "CommanderSummary",
    "ErrorResponse",
    "FailureKind",
    "KnownError",
    "NormalizedCard",
    "NotFoundError",
    "ProviderError",
    "RecommendationCategory",
    "RecommendationEntry",
    "StoreError",
    "ValidationError",
    "sort_colors",
]

"""
Intent-based model selection.

Maps a free-text query to one of the Sonar models by counting which model's
keywords appear in it. The catalog order doubles as the tie-break priority.
"""

from typing import Dict, List

from models import DEFAULT_MODEL, ModelCriteria, ModelScore

__all__ = [
    "MODEL_SELECTION_MAP",
    "score_models",
    "select_model",
]

# Declaration order matters: on equal scores the earlier model wins.
MODEL_SELECTION_MAP: Dict[str, ModelCriteria] = {
    "sonar-deep-research": ModelCriteria(
        keywords=(
            "deep research",
            "comprehensive",
            "thorough",
            "detailed analysis",
            "expert",
            "in-depth",
        ),
        description="specialized for extensive research and expert-level analysis across domains",
    ),
    "sonar-reasoning-pro": ModelCriteria(
        keywords=(
            "reasoning",
            "logic",
            "solve",
            "mathematical",
            "technical",
            "complex problem",
            "figure out",
        ),
        description="optimized for advanced logical reasoning and complex problem-solving",
    ),
    "sonar-reasoning": ModelCriteria(
        keywords=("reason", "think", "analyze", "deduce", "evaluate"),
        description="designed for reasoning tasks with balanced performance",
    ),
    "sonar-pro": ModelCriteria(
        keywords=(
            "search",
            "find",
            "lookup",
            "information",
            "facts",
            "details",
            "latest",
        ),
        description="general-purpose model with excellent search capabilities and citation density",
    ),
    "sonar": ModelCriteria(
        keywords=("quick", "simple", "basic", "brief", "short"),
        description="fast and efficient for straightforward queries",
    ),
}


def score_models(query: str) -> List[ModelScore]:
    """Score every model against the query, in catalog order.

    Each keyword counts once if it occurs anywhere in the lower-cased query.
    """
    text = query.lower()
    return [
        ModelScore(
            model=model,
            score=sum(1 for keyword in criteria.keywords if keyword.lower() in text),
            description=criteria.description,
        )
        for model, criteria in MODEL_SELECTION_MAP.items()
    ]


def select_model(query: str, default_model: str = DEFAULT_MODEL) -> ModelScore:
    """Pick the model whose keywords best match the query.

    Falls back to ``default_model`` with a score of 0 when nothing matches.
    """
    # max() keeps the first of equal candidates, i.e. catalog priority.
    best = max(score_models(query), key=lambda candidate: candidate.score)

    if best.score == 0:
        return ModelScore(
            model=default_model,
            score=0,
            description=MODEL_SELECTION_MAP[default_model].description,
        )

    return best

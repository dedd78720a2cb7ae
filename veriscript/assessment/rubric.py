"""Rubric helpers: default rubric, validation and point totals."""

from typing import List, Sequence

from veriscript.errors import RubricValidationError
from .models import RubricCriterion


DEFAULT_RUBRIC: List[RubricCriterion] = [
    RubricCriterion(id='1', category='Grammar & Mechanics',
                    description='Accuracy of grammar, spelling, and punctuation.', max_points=20),
    RubricCriterion(id='2', category='Clarity & Flow',
                    description='Logical progression of ideas and readability.', max_points=20),
    RubricCriterion(id='3', category='Technical Accuracy/Research',
                    description='Correctness of facts or technical concepts.', max_points=30),
    RubricCriterion(id='4', category='Voice & Tone',
                    description='Appropriateness of tone for the target audience.', max_points=15),
    RubricCriterion(id='5', category='Adherence to Prompt',
                    description='How well the submission addresses the requirements.', max_points=15),
]


def total_points(rubric: Sequence[RubricCriterion]) -> int:
    """Sum of the maximum points of every criterion."""
    return sum(c.max_points for c in rubric)


def validate_rubric(rubric: Sequence[RubricCriterion]) -> List[RubricCriterion]:
    """
    Check a rubric before it is saved.

    Args:
        rubric: Criteria in display order

    Returns:
        The criteria as a list

    Raises:
        RubricValidationError: If the rubric is empty, has duplicate ids,
            or a criterion has non-positive max points
    """
    criteria = list(rubric)
    if not criteria:
        raise RubricValidationError("Rubric must contain at least one criterion")

    seen = set()
    for criterion in criteria:
        if criterion.id in seen:
            raise RubricValidationError(f"Duplicate rubric criterion id: {criterion.id!r}")
        seen.add(criterion.id)
        # model_construct() skips field validation, so check again here
        if criterion.max_points <= 0:
            raise RubricValidationError(
                f"Criterion {criterion.id!r} must have positive max points, got {criterion.max_points}"
            )
    return criteria


def new_criterion_id(rubric: Sequence[RubricCriterion]) -> str:
    """Next free numeric id for a criterion added to the rubric."""
    numeric_ids = [int(c.id) for c in rubric if c.id.isdigit()]
    return str(max(numeric_ids, default=0) + 1)

"""Loading the candidate catalog and answer files.

Files are validated with the pydantic models at this boundary; the
engine itself trusts whatever it is handed.
"""

import json
import logging
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from .rules import QuestionId
from .schema import AnswerSet, CandidateCatalog, build_answer_set

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "platforms.json"


class CatalogLoadError(Exception):
    """Raised when a catalog or answer file cannot be loaded."""


def _read_json(path: Union[str, Path]) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise CatalogLoadError(f"File not found: {path}") from e
    except json.JSONDecodeError as e:
        raise CatalogLoadError(f"Invalid JSON in {path}: {e}") from e


def parse_catalog(data: Any) -> CandidateCatalog:
    """Validate raw catalog data.

    Accepts either ``{"version": ..., "candidates": [...]}`` or a bare
    list of candidates.
    """
    if isinstance(data, list):
        data = {"candidates": data}
    if not isinstance(data, dict):
        raise CatalogLoadError("Catalog must be a JSON object or array")
    try:
        return CandidateCatalog.model_validate(data)
    except ValidationError as e:
        raise CatalogLoadError(f"Invalid catalog: {e}") from e


def load_catalog(path: Union[str, Path]) -> CandidateCatalog:
    """Load and validate a candidate catalog JSON file."""
    catalog = parse_catalog(_read_json(path))
    logger.info("Loaded %d candidates from %s", catalog.total_candidates, path)
    return catalog


def load_default_catalog() -> CandidateCatalog:
    """Load the catalog bundled with the package."""
    return load_catalog(DEFAULT_CATALOG_PATH)


def load_answers(path: Union[str, Path]) -> AnswerSet:
    """Load an answer file mapping question ids to answer values."""
    data = _read_json(path)
    if not isinstance(data, dict):
        raise CatalogLoadError("Answers must be a JSON object of question_id -> value")
    answers = build_answer_set(data)
    logger.info("Loaded %d answers from %s", len(answers), path)
    return answers


def validate_catalog(path: Union[str, Path]) -> tuple[bool, list[str]]:
    """Validate a catalog file.

    Returns:
        Tuple of (is_valid, issues).
    """
    try:
        catalog = load_catalog(path)
    except CatalogLoadError as e:
        return False, [str(e)]

    issues = []
    if not catalog.candidates:
        issues.append("Catalog contains no candidates")

    seen = set()
    for candidate in catalog.candidates:
        if candidate.id in seen:
            issues.append(f"Duplicate candidate id: {candidate.id}")
        seen.add(candidate.id)
        for name, score in candidate.scores.items():
            if not 0 <= score <= 10:
                issues.append(f"{candidate.id}: capability {name} out of range (0-10): {score}")

    return len(issues) == 0, issues


def validate_answers(path: Union[str, Path]) -> tuple[bool, list[str]]:
    """Validate an answer file.

    Unrecognized question ids are reported but do not fail validation;
    the engine ignores them.
    """
    try:
        answers = load_answers(path)
    except CatalogLoadError as e:
        return False, [str(e)]

    warnings = [
        f"Unrecognized question id (ignored): {key}"
        for key in answers
        if QuestionId.from_string(key) is None
    ]
    return True, warnings

"""
Load test cases from JSON or JSONL files.

A `.json` file holds a list of test case objects; a `.jsonl` file holds one
object per line. Both use the TestCase field names (`id`, `query`,
`expected_output`), `expectedOutput` is accepted as an alias.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from models.schemas import TestCase

logger = logging.getLogger(__name__)


def _to_test_case(obj: Dict[str, Any]) -> TestCase:
    if "expected_output" not in obj and "expectedOutput" in obj:
        obj = {**obj, "expected_output": obj["expectedOutput"]}
        obj.pop("expectedOutput")
    return TestCase.model_validate(obj)


def load_test_cases(path: Union[str, Path]) -> List[TestCase]:
    """
    Read test cases from `path`.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the JSON document is not a list of objects
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Test case file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        if path.suffix == ".jsonl":
            raw = [json.loads(line) for line in f if line.strip()]
        else:
            raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError(f"Expected a list of test cases in {path}, got {type(raw).__name__}")

    test_cases = [_to_test_case(obj) for obj in raw]
    logger.info(f"Loaded {len(test_cases)} test cases from {path}")
    return test_cases

# Model comparison harness

from .accuracy import calculate_accuracy, calculate_list_accuracy, deep_equal
from .pricing import PROVIDERS_MODELS_COSTS, calculate_token_cost
from .runner import (
    average_test_results,
    generate_model_summary,
    run_all_tests,
)
from .dataset import load_test_cases

__all__ = [
    "calculate_accuracy",
    "calculate_list_accuracy",
    "deep_equal",
    "PROVIDERS_MODELS_COSTS",
    "calculate_token_cost",
    "average_test_results",
    "generate_model_summary",
    "run_all_tests",
    "load_test_cases",
]

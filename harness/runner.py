"""
Trial runner and aggregator.

Runs every test case against every model, repeating each (model, test case)
pair several times, averages the trials and builds per-model and overall
summaries. Execution is strictly sequential: one unit of work is in flight
at any time.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple

from rich.console import Console

from harness.exceptions import NoResultsToAverageError
from harness.reporting import (
    create_console,
    print_model_header,
    print_model_summary,
    print_overall_comparison,
    print_runner_header,
    print_test_case_error,
    print_test_case_result,
    print_test_case_start,
)
from models.schemas import (
    ComparisonReport,
    ModelConfig,
    ModelTestSummary,
    Recommendations,
    TestCase,
    TestResult,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMES_PER_TEST = 3

TestAction = Callable[[TestCase, ModelConfig], Awaitable[TestResult]]


@dataclass
class TrialOutcome:
    """Either the trials of one test case, or the reason they were cut short."""
    results: List[TestResult] = field(default_factory=list)
    error: Optional[str] = None
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


async def run_trials(
    test_case: TestCase,
    model_config: ModelConfig,
    test_action: TestAction,
    times_per_test: int = DEFAULT_TIMES_PER_TEST,
    delay_ms: int = 0
) -> TrialOutcome:
    """
    Run the unit of work `times_per_test` times for one test case.

    The first exception stops the sequence; it is logged and returned as
    the outcome's error instead of being raised.
    """
    outcome = TrialOutcome()
    for trial in range(times_per_test):
        start = time.perf_counter()
        try:
            result = await test_action(test_case, model_config)
        except Exception as e:
            outcome.elapsed_ms = (time.perf_counter() - start) * 1000
            outcome.error = f"{type(e).__name__}: {e}"
            logger.error(
                "Trial %d/%d of '%s' on %s failed: %s",
                trial + 1, times_per_test, test_case.id, model_config.label, e,
                exc_info=True
            )
            return outcome

        outcome.results.append(result)
        if delay_ms > 0:
            await asyncio.sleep(delay_ms / 1000)

    return outcome


def average_test_results(results: Sequence[TestResult]) -> TestResult:
    """
    Fold repeated trials into one result.

    Accuracy, execution time and token cost are arithmetic means; errors are
    unioned keeping first-seen order. The payload comes from the first trial,
    unless the mean accuracy is below 1, in which case the first trial with
    accuracy below 1 supplies it.

    Raises:
        NoResultsToAverageError: If `results` is empty
    """
    total = len(results)
    if total == 0:
        raise NoResultsToAverageError()

    accuracy = sum(r.accuracy for r in results) / total
    execution_time_ms = sum(r.execution_time_ms for r in results) / total
    token_cost = sum(r.token_cost for r in results) / total

    errors: List[str] = []
    for r in results:
        for error in r.errors:
            if error not in errors:
                errors.append(error)

    representative = results[0]
    if accuracy < 1:
        first_failed = next((r for r in results if r.accuracy < 1), None)
        if first_failed is not None:
            representative = first_failed

    return results[0].model_copy(update={
        "result": representative.result,
        "accuracy": accuracy,
        "execution_time_ms": execution_time_ms,
        "token_cost": token_cost,
        "errors": errors,
    })


def failed_test_result(
    test_case: TestCase,
    model_config: ModelConfig,
    reason: str,
    execution_time_ms: float = 0.0
) -> TestResult:
    """Zero-accuracy entry standing in for a test case whose unit of work raised."""
    return TestResult(
        test_case=test_case,
        provider_name=model_config.provider.name,
        model_name=model_config.model.name,
        result=None,
        accuracy=0.0,
        execution_time_ms=execution_time_ms,
        token_cost=0.0,
        errors=[reason],
        failed=True,
    )


def generate_model_summary(
    provider_name: str,
    model_name: str,
    results: Sequence[TestResult]
) -> ModelTestSummary:
    """
    Summarize the averaged results of one model.

    A model without results gets an all-zero summary.
    """
    total_tests = len(results)
    if total_tests == 0:
        return ModelTestSummary(model_name=model_name, provider_name=provider_name)

    successful_tests = sum(1 for r in results if r.success)
    errors = [error for r in results for error in r.errors]

    return ModelTestSummary(
        model_name=model_name,
        provider_name=provider_name,
        total_tests=total_tests,
        successful_tests=successful_tests,
        average_accuracy=sum(r.accuracy for r in results) / total_tests,
        average_execution_time_ms=sum(r.execution_time_ms for r in results) / total_tests,
        total_token_cost=sum(r.token_cost for r in results),
        error_rate=(total_tests - successful_tests) / total_tests,
        errors=errors,
    )


def build_overall_comparison(
    all_results: Sequence[TestResult],
    models: Sequence[ModelConfig]
) -> Tuple[List[ModelTestSummary], Optional[Recommendations]]:
    """
    Summaries for every configured model, best accuracy first, plus picks.

    Fastest and cheapest are the first minimum found in accuracy order.
    """
    summaries = []
    for config in models:
        provider_name = config.provider.name
        model_name = config.model.name
        model_results = [
            r for r in all_results
            if r.provider_name == provider_name and r.model_name == model_name
        ]
        summaries.append(generate_model_summary(provider_name, model_name, model_results))

    summaries.sort(key=lambda s: s.average_accuracy, reverse=True)

    if not summaries:
        return summaries, None

    recommendations = Recommendations(
        best_accuracy=summaries[0],
        fastest=min(summaries, key=lambda s: s.average_execution_time_ms),
        cheapest=min(summaries, key=lambda s: s.total_token_cost),
    )
    return summaries, recommendations


async def run_all_tests(
    *,
    models: Sequence[ModelConfig],
    test_cases: Sequence[TestCase],
    test_action: TestAction,
    runner_name: str = "Universal Test Runner",
    times_per_test: int = DEFAULT_TIMES_PER_TEST,
    delay_ms: int = 0,
    get_result_output: Optional[Callable[[Any], Any]] = None,
    console: Optional[Console] = None
) -> ComparisonReport:
    """
    Compare models on a set of test cases.

    Args:
        models: Model configurations to compare
        test_cases: Test cases run against every model
        test_action: Async unit of work producing a TestResult per call
        runner_name: Name shown in the report header
        times_per_test: Trials per (model, test case), averaged
        delay_ms: Pause after each trial
        get_result_output: Extracts the comparable output from a result
            payload, used to show expected/got for imperfect results
        console: Rich console to report to (stdout when omitted)

    Returns:
        ComparisonReport with summaries sorted by accuracy and recommendations

    Raises:
        ValueError: If times_per_test is lower than 1
    """
    if times_per_test < 1:
        raise ValueError(f"times_per_test must be at least 1, got {times_per_test}")

    console = console or create_console()
    print_runner_header(console, runner_name)
    logger.info(
        f"Running {len(test_cases)} test cases x {times_per_test} trials "
        f"against {len(models)} models"
    )

    all_results: List[TestResult] = []

    for model_config in models:
        print_model_header(console, model_config.label)
        model_results: List[TestResult] = []

        for test_case in test_cases:
            print_test_case_start(console, test_case)

            outcome = await run_trials(
                test_case, model_config, test_action, times_per_test, delay_ms
            )

            if outcome.ok:
                entry = average_test_results(outcome.results)
                print_test_case_result(console, entry, get_result_output)
            else:
                entry = failed_test_result(
                    test_case, model_config, outcome.error, outcome.elapsed_ms
                )
                print_test_case_error(console, outcome.error)

            model_results.append(entry)
            all_results.append(entry)

        summary = generate_model_summary(
            model_config.provider.name, model_config.model.name, model_results
        )
        print_model_summary(console, summary)
        logger.info(
            f"{model_config.label}: accuracy {summary.average_accuracy:.3f}, "
            f"{summary.successful_tests}/{summary.total_tests} successful"
        )

    summaries, recommendations = build_overall_comparison(all_results, models)
    print_overall_comparison(console, summaries, recommendations)

    return ComparisonReport(
        summaries=summaries,
        results=all_results,
        recommendations=recommendations,
    )

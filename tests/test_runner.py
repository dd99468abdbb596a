"""
Tests for the trial runner and aggregator.

Units of work are plain async functions, no model is called.
"""

import pytest

from factories import make_model_config, make_result, make_test_case
from harness.exceptions import NoResultsToAverageError
from harness.runner import (
    average_test_results,
    build_overall_comparison,
    failed_test_result,
    generate_model_summary,
    run_all_tests,
    run_trials,
)
from models.schemas import UnitOfWorkResult


class PayloadResult(UnitOfWorkResult):
    tag: str


def scripted_action(accuracies, times=None, costs=None, fail_on=None):
    """Unit of work returning the scripted accuracies in order, one per call."""
    calls = []

    async def action(test_case, model_config):
        index = len(calls)
        calls.append((test_case.id, model_config.label))
        if fail_on is not None and index == fail_on:
            raise RuntimeError("provider exploded")
        return make_result(
            accuracies[index % len(accuracies)],
            execution_time_ms=(times or [100.0])[index % len(times or [100.0])],
            token_cost=(costs or [0.001])[index % len(costs or [0.001])],
            test_case=test_case,
            model_config=model_config,
            payload=PayloadResult(success=True, tag=f"trial-{index}"),
        )

    action.calls = calls
    return action


def test_means_and_first_failing_representative():
    results = [
        make_result(1.0, 100, 0.003, payload=PayloadResult(success=True, tag="first")),
        make_result(1.0, 200, 0.003, payload=PayloadResult(success=True, tag="second")),
        make_result(0.5, 300, 0.003, payload=PayloadResult(success=True, tag="third")),
    ]
    averaged = average_test_results(results)

    assert averaged.accuracy == pytest.approx(0.8333, abs=1e-4)
    assert averaged.execution_time_ms == pytest.approx(200)
    assert averaged.token_cost == pytest.approx(0.003)
    assert averaged.result.tag == "third"


def test_perfect_trials_keep_first_payload():
    results = [
        make_result(1.0, payload=PayloadResult(success=True, tag="first")),
        make_result(1.0, payload=PayloadResult(success=True, tag="second")),
    ]
    averaged = average_test_results(results)
    assert averaged.accuracy == 1.0
    assert averaged.result.tag == "first"


def test_errors_are_unioned_in_first_seen_order():
    results = [
        make_result(0.0, errors=["timeout"]),
        make_result(0.0, errors=["bad json", "timeout"]),
        make_result(0.0, errors=[]),
    ]
    assert average_test_results(results).errors == ["timeout", "bad json"]


def test_average_of_single_result_is_unchanged():
    result = make_result(0.75, 42.0, 0.01, errors=["x"])
    averaged = average_test_results([result])
    assert averaged.accuracy == 0.75
    assert averaged.execution_time_ms == 42.0
    assert averaged.token_cost == 0.01
    assert averaged.errors == ["x"]


def test_average_of_no_results_raises():
    with pytest.raises(NoResultsToAverageError, match="No results to average"):
        average_test_results([])


def test_inputs_are_not_mutated():
    first = make_result(1.0, 100)
    second = make_result(0.0, 300)
    average_test_results([first, second])
    assert first.accuracy == 1.0
    assert first.execution_time_ms == 100


def test_model_summary_counts_and_averages():
    results = [
        make_result(1.0, 100, 0.01),
        make_result(0.5, 300, 0.02, errors=["partial"]),
        make_result(0.0, 200, 0.03, success=False, errors=["parse error"]),
    ]
    summary = generate_model_summary("openai", "gpt-4o-mini", results)

    assert summary.total_tests == 3
    assert summary.successful_tests == 2
    assert summary.average_accuracy == pytest.approx(0.5)
    assert summary.average_execution_time_ms == pytest.approx(200)
    assert summary.total_token_cost == pytest.approx(0.06)
    assert summary.error_rate == pytest.approx(1 / 3)
    assert summary.errors == ["partial", "parse error"]
    assert summary.label == "openai:gpt-4o-mini"


def test_model_summary_of_empty_model_is_all_zero():
    summary = generate_model_summary("groq", "llama", [])
    assert summary.total_tests == 0
    assert summary.successful_tests == 0
    assert summary.average_accuracy == 0
    assert summary.error_rate == 0
    assert summary.success_rate == 0


def test_sorted_by_accuracy_with_recommendations():
    slow_accurate = make_model_config("openai", "gpt-4o")
    fast_cheap = make_model_config("groq", "llama-3.1-8b-instant")
    results = [
        make_result(0.9, 900, 0.05, model_config=slow_accurate),
        make_result(0.6, 100, 0.001, model_config=fast_cheap),
    ]
    summaries, recommendations = build_overall_comparison(
        results, [fast_cheap, slow_accurate]
    )

    assert [s.label for s in summaries] == ["openai:gpt-4o", "groq:llama-3.1-8b-instant"]
    assert recommendations.best_accuracy.label == "openai:gpt-4o"
    assert recommendations.fastest.label == "groq:llama-3.1-8b-instant"
    assert recommendations.cheapest.label == "groq:llama-3.1-8b-instant"


def test_ties_keep_the_first_in_accuracy_order():
    first = make_model_config("openai", "a")
    second = make_model_config("openai", "b")
    results = [
        make_result(0.5, 100, 0.01, model_config=first),
        make_result(0.9, 100, 0.01, model_config=second),
    ]
    summaries, recommendations = build_overall_comparison(results, [first, second])

    assert summaries[0].model_name == "b"
    assert recommendations.fastest.model_name == "b"
    assert recommendations.cheapest.model_name == "b"


def test_comparison_without_models():
    summaries, recommendations = build_overall_comparison([], [])
    assert summaries == []
    assert recommendations is None


@pytest.mark.asyncio
async def test_runs_requested_number_of_trials(model_config):
    action = scripted_action([1.0])
    outcome = await run_trials(make_test_case(), model_config, action, times_per_test=4)

    assert outcome.ok
    assert len(outcome.results) == 4
    assert len(action.calls) == 4


@pytest.mark.asyncio
async def test_first_exception_stops_the_sequence(model_config):
    action = scripted_action([1.0], fail_on=1)
    outcome = await run_trials(make_test_case(), model_config, action, times_per_test=3)

    assert not outcome.ok
    assert outcome.error == "RuntimeError: provider exploded"
    assert len(action.calls) == 2
    assert outcome.elapsed_ms >= 0


@pytest.mark.asyncio
async def test_delay_is_applied_after_each_trial(monkeypatch, model_config):
    sleeps = []

    async def record_sleep(seconds):
        sleeps.append(seconds)

    monkeypatch.setattr("harness.runner.asyncio.sleep", record_sleep)

    await run_trials(
        make_test_case(), model_config, scripted_action([1.0]), times_per_test=3, delay_ms=250
    )
    assert sleeps == [0.25, 0.25, 0.25]

    sleeps.clear()
    await run_trials(
        make_test_case(), model_config, scripted_action([1.0]), times_per_test=3, delay_ms=0
    )
    assert sleeps == []


@pytest.mark.asyncio
async def test_recommendations_are_stable_across_identical_runs(console):
    models = [
        make_model_config("openai", "gpt-4o"),
        make_model_config("groq", "llama-3.1-8b-instant"),
        make_model_config("fireworks", "llama-v3p1-8b-instruct"),
    ]
    cases = [make_test_case("c1"), make_test_case("c2")]
    timings = {"gpt-4o": (0.9, 800.0, 0.02), "llama-3.1-8b-instant": (0.7, 150.0, 0.001)}

    async def action(test_case, model_config):
        accuracy, time_ms, cost = timings.get(model_config.model.name, (0.7, 150.0, 0.001))
        return make_result(
            accuracy, time_ms, cost, test_case=test_case, model_config=model_config
        )

    first = await run_all_tests(
        models=models, test_cases=cases, test_action=action, console=console
    )
    second = await run_all_tests(
        models=models, test_cases=cases, test_action=action, console=console
    )

    assert first.recommendations == second.recommendations
    assert first.recommendations.fastest.label == "groq:llama-3.1-8b-instant"
    assert first.recommendations.cheapest.label == "groq:llama-3.1-8b-instant"


@pytest.mark.asyncio
async def test_averages_each_case_per_model(console):
    models = [make_model_config("openai", "gpt-4o-mini")]
    cases = [make_test_case("case-1")]
    action = scripted_action([1.0, 1.0, 0.5])

    report = await run_all_tests(
        models=models,
        test_cases=cases,
        test_action=action,
        times_per_test=3,
        console=console,
    )

    assert len(report.results) == 1
    averaged = report.results[0]
    assert averaged.accuracy == pytest.approx(0.8333, abs=1e-4)
    assert averaged.result.tag == "trial-2"
    assert report.summaries[0].average_accuracy == pytest.approx(0.8333, abs=1e-4)
    assert report.recommendations.best_accuracy.label == "openai:gpt-4o-mini"


@pytest.mark.asyncio
async def test_runs_sequentially_model_by_model(console):
    models = [make_model_config("openai", "a"), make_model_config("groq", "b")]
    cases = [make_test_case("c1"), make_test_case("c2")]
    action = scripted_action([1.0])

    await run_all_tests(
        models=models, test_cases=cases, test_action=action,
        times_per_test=2, console=console,
    )

    assert action.calls == [
        ("c1", "openai:a"), ("c1", "openai:a"),
        ("c2", "openai:a"), ("c2", "openai:a"),
        ("c1", "groq:b"), ("c1", "groq:b"),
        ("c2", "groq:b"), ("c2", "groq:b"),
    ]


@pytest.mark.asyncio
async def test_raising_case_is_folded_into_the_summary(console):
    models = [make_model_config("openai", "gpt-4o-mini")]
    cases = [make_test_case("ok"), make_test_case("boom")]

    async def action(test_case, model_config):
        if test_case.id == "boom":
            raise TimeoutError("request timed out")
        return make_result(1.0, 50, 0.002, test_case=test_case, model_config=model_config)

    report = await run_all_tests(
        models=models, test_cases=cases, test_action=action,
        times_per_test=2, console=console,
    )

    assert len(report.results) == 2
    failed = report.results[1]
    assert failed.failed
    assert failed.accuracy == 0
    assert failed.token_cost == 0
    assert failed.errors == ["TimeoutError: request timed out"]

    summary = report.summaries[0]
    assert summary.total_tests == 2
    assert summary.successful_tests == 1
    assert summary.average_accuracy == pytest.approx(0.5)
    assert summary.error_rate == pytest.approx(0.5)
    assert "❌ Error: TimeoutError: request timed out" in console.export_text()


@pytest.mark.asyncio
async def test_rejects_zero_trials(console):
    with pytest.raises(ValueError):
        await run_all_tests(
            models=[make_model_config()],
            test_cases=[make_test_case()],
            test_action=scripted_action([1.0]),
            times_per_test=0,
            console=console,
        )


@pytest.mark.asyncio
async def test_no_test_cases_gives_empty_summaries(console):
    report = await run_all_tests(
        models=[make_model_config()],
        test_cases=[],
        test_action=scripted_action([1.0]),
        console=console,
    )
    assert report.results == []
    assert report.summaries[0].total_tests == 0


@pytest.mark.asyncio
async def test_prints_expected_and_got_for_imperfect_results(console):
    case = make_test_case("case-1", expected_output=["a", "b"])

    async def action(test_case, model_config):
        return make_result(
            0.5, test_case=test_case, model_config=model_config,
            payload=PayloadResult(success=True, tag="a"),
        )

    await run_all_tests(
        models=[make_model_config()],
        test_cases=[case],
        test_action=action,
        times_per_test=1,
        get_result_output=lambda payload: [payload.tag],
        console=console,
    )

    output = console.export_text()
    assert 'Expected: ["a", "b"]' in output
    assert 'Got:      ["a"]' in output


def test_failed_test_result_shape(model_config):
    entry = failed_test_result(make_test_case(), model_config, "Boom: no", 12.5)
    assert entry.failed
    assert entry.result is None
    assert not entry.success
    assert entry.execution_time_ms == 12.5
    assert entry.errors == ["Boom: no"]

"""
Console reporting for comparison runs.

Renders progress lines, per-model summaries, the overall comparison table
and the recommendations block with Rich.
"""

import json
from typing import Any, Callable, List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from models.schemas import ModelTestSummary, Recommendations, TestCase, TestResult

GOOD_ACCURACY = 0.8
FAIR_ACCURACY = 0.5
MAX_QUERY_PREVIEW = 100


def create_console(**kwargs) -> Console:
    """Console used for reports; highlighting off so numbers keep our colors."""
    kwargs.setdefault("highlight", False)
    return Console(**kwargs)


def status_icon(accuracy: float) -> str:
    if accuracy >= GOOD_ACCURACY:
        return "✅"
    if accuracy >= FAIR_ACCURACY:
        return "⚠️"
    return "❌"


def format_percent(value: float) -> str:
    return f"{value * 100:.1f}"


def _to_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def print_runner_header(console: Console, runner_name: str) -> None:
    console.print(Text(f"🧪 Starting {runner_name}\n", style="bold blue"))


def print_model_header(console: Console, label: str) -> None:
    console.print(Text(f"\n📊 Testing Model: {label}", style="bold yellow"))
    console.print(Text("─" * 50, style="bright_black"))


def print_test_case_start(console: Console, test_case: TestCase) -> None:
    preview = test_case.query[:MAX_QUERY_PREVIEW] if test_case.query else test_case.id
    console.print(Text(f"Running {preview}... ", style="bright_black"))


def print_test_case_result(
    console: Console,
    averaged: TestResult,
    get_result_output: Optional[Callable[[Any], Any]] = None
) -> None:
    """Print the status line of an averaged result, plus expected/got when imperfect."""
    console.print(
        Text(
            f"{status_icon(averaged.accuracy)} {format_percent(averaged.accuracy)}% "
            f"({averaged.execution_time_ms:.0f}ms)"
        )
    )
    if averaged.accuracy < 1 and get_result_output and averaged.result is not None:
        console.print(
            Text(f"   Expected: {_to_json(averaged.test_case.expected_output)}", style="red")
        )
        console.print(
            Text(f"   Got:      {_to_json(get_result_output(averaged.result))}", style="red")
        )


def print_test_case_error(console: Console, reason: str) -> None:
    console.print(Text(f"❌ Error: {reason}", style="red"))


def print_model_summary(console: Console, summary: ModelTestSummary) -> None:
    console.print(Text(f"\n📋 {summary.label} Summary:", style="bold cyan"))
    console.print(Text.assemble(
        "   Success Rate: ", (f"{format_percent(summary.success_rate)}%", "green")
    ))
    console.print(Text.assemble(
        "   Average Accuracy: ", (f"{format_percent(summary.average_accuracy)}%", "blue")
    ))
    console.print(Text.assemble(
        "   Average Time: ", (f"{summary.average_execution_time_ms:.0f}ms", "yellow")
    ))
    console.print(Text.assemble(
        "   Total Cost: ", (f"${summary.total_token_cost:.4f}", "magenta")
    ))
    if summary.errors:
        console.print(Text(f"   Errors: {len(summary.errors)}", style="red"))


def build_comparison_table(summaries: List[ModelTestSummary]) -> Table:
    """Tabular view of the (already sorted) model summaries."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Model", no_wrap=True)
    table.add_column("Success %", justify="right")
    table.add_column("Accuracy %", justify="right")
    table.add_column("Avg Time (ms)", justify="right")
    table.add_column("Total Cost ($)", justify="right")
    table.add_column("Errors", justify="right")

    for summary in summaries:
        table.add_row(
            summary.label,
            format_percent(summary.success_rate),
            format_percent(summary.average_accuracy),
            f"{summary.average_execution_time_ms:.0f}",
            f"{summary.total_token_cost:.4f}",
            str(len(summary.errors)),
        )
    return table


def print_overall_comparison(
    console: Console,
    summaries: List[ModelTestSummary],
    recommendations: Optional[Recommendations]
) -> None:
    console.print(Text("\n📈 Overall Comparison", style="bold blue"))
    console.print(Text("=" * 70, style="bright_black"))
    console.print(build_comparison_table(summaries))

    if recommendations is None:
        return

    best = recommendations.best_accuracy
    fastest = recommendations.fastest
    cheapest = recommendations.cheapest

    console.print(Text("\n🏆 Recommendations:", style="bold green"))
    console.print(Text.assemble(
        "   🎯 Best Accuracy: ", (best.label, "yellow"),
        f" ({format_percent(best.average_accuracy)}%)"
    ))
    console.print(Text.assemble(
        "   ⚡ Fastest: ", (fastest.label, "yellow"),
        f" ({fastest.average_execution_time_ms:.0f}ms avg)"
    ))
    console.print(Text.assemble(
        "   💰 Most Cost-Effective: ", (cheapest.label, "yellow"),
        f" (${cheapest.total_token_cost:.4f})"
    ))

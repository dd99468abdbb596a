#!/usr/bin/env python3
"""
LLM model comparison for car keywords extraction.

Runs every configured model (BENCHMARK_MODELS) on the car description test
cases, measuring keyword accuracy, speed and cost.

Usage:
    python scripts/run_car_keywords_benchmark.py [--cases FILE] [--times N] [--delay-ms MS]
"""

import argparse
import asyncio
import sys
import logging
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from agents.keywords_extractor import build_keywords_test_action, keywords_output
from config.database import close_connections
from config.logging_setup import configure_logging
from config.settings import load_settings
from harness.dataset import load_test_cases
from harness.runner import run_all_tests
from utils.cache import build_llm_cache

logger = logging.getLogger(__name__)

DEFAULT_CASES_FILE = Path(__file__).parent / "data" / "car_keywords_cases.json"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Compare LLM models on car keywords extraction")
    parser.add_argument("--cases", type=Path, default=DEFAULT_CASES_FILE, help="JSON/JSONL test cases")
    parser.add_argument("--times", type=int, default=None, help="Trials per test case (default: TIMES_PER_TEST)")
    parser.add_argument("--delay-ms", type=int, default=None, help="Pause after each trial (default: TRIAL_DELAY_MS)")
    return parser.parse_args(argv)


async def main(argv=None):
    """Run the car keywords extraction comparison."""
    args = parse_args(argv)
    settings = load_settings()
    configure_logging(settings)

    models = settings.build_model_configs()
    test_cases = load_test_cases(args.cases)
    cache = build_llm_cache(settings)

    try:
        await run_all_tests(
            models=models,
            test_cases=test_cases,
            test_action=build_keywords_test_action(settings, cache=cache),
            runner_name="Car Keywords Extraction Test Runner",
            times_per_test=args.times if args.times is not None else settings.TIMES_PER_TEST,
            delay_ms=args.delay_ms if args.delay_ms is not None else settings.TRIAL_DELAY_MS,
            get_result_output=keywords_output,
        )
    finally:
        close_connections()


if __name__ == "__main__":
    asyncio.run(main())

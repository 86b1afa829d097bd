#!/usr/bin/env python3
"""Command-line interface for the surplus food matcher."""

import argparse
import sys
from pathlib import Path

from surplus_match.app_logging import configure_logging
from surplus_match.data_layer.dataset_loader import DatasetLoader
from surplus_match.data_layer.exceptions import (
    InvalidDatasetError,
    InvalidSettingsError,
    MissingFieldError,
)
from surplus_match.data_layer.settings import AppSettings, SettingsLoader
from surplus_match.matching.matcher import FoodMatcher
from surplus_match.matching.session import MatchingSession
from surplus_match.output.formatters import format_result_json_string, format_result_markdown
from surplus_match.scoring.safety_scorer import SafetyScoreCalculator


def build_session(settings: AppSettings) -> MatchingSession:
    """Create an empty session wired with the given settings."""
    return MatchingSession(
        calculator=SafetyScoreCalculator(),
        matcher=FoodMatcher(settings.matcher),
        handling=settings.handling,
        storage=settings.storage,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Match surplus restaurant food with people looking for a meal"
    )
    parser.add_argument(
        "--dataset",
        type=str,
        default="data/dataset.json",
        help="Path to JSON file with food and people records (default: data/dataset.json)"
    )
    parser.add_argument(
        "--settings",
        type=str,
        help="Optional path to settings YAML file (default: built-in settings)"
    )
    parser.add_argument(
        "--output",
        type=str,
        choices=["markdown", "json", "both"],
        default="markdown",
        help="Output format: markdown (default), json, or both"
    )
    parser.add_argument(
        "--output-file",
        type=str,
        help="Optional file path to save output (default: print to stdout)"
    )
    parser.add_argument(
        "--claim",
        action="store_true",
        help="Mark matched food as claimed after matching"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)

    dataset_path = Path(args.dataset)
    if not dataset_path.exists():
        print(f"Error: Dataset file not found: {dataset_path}", file=sys.stderr)
        sys.exit(1)

    if args.settings:
        settings_path = Path(args.settings)
        if not settings_path.exists():
            print(f"Error: Settings file not found: {settings_path}", file=sys.stderr)
            print("Hint: Copy config/settings.yaml.example and customize it", file=sys.stderr)
            sys.exit(1)
        try:
            settings = SettingsLoader(str(settings_path)).load()
        except InvalidSettingsError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        settings = AppSettings()

    session = build_session(settings)

    print(f"Loading dataset from {dataset_path}...", file=sys.stderr)
    try:
        food_count, people_count = DatasetLoader(str(dataset_path)).load_into(
            session.food_registry, session.person_registry
        )
    except (MissingFieldError, InvalidDatasetError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Found {food_count} food items and {people_count} people", file=sys.stderr)

    print("Matching...", file=sys.stderr)
    result = session.run(claim=args.claim)

    outputs = []
    if args.output in ["markdown", "both"]:
        outputs.append((".md", format_result_markdown(result)))
    if args.output in ["json", "both"]:
        outputs.append((".json", format_result_json_string(result, indent=2)))

    for suffix, text in outputs:
        if args.output_file:
            output_path = Path(args.output_file)
            if args.output == "both":
                output_path = output_path.with_suffix(suffix)
            output_path.write_text(text)
            print(f"Output saved to {output_path}", file=sys.stderr)
        else:
            print(text)

    if result.success:
        print(f"\n✅ {len(result.matches)} matches found", file=sys.stderr)
    else:
        print("\n⚠️  No matches found", file=sys.stderr)
    for warning in result.warnings:
        print(f"   - {warning}", file=sys.stderr)


if __name__ == "__main__":
    main()

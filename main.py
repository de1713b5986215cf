#!/usr/bin/env python3
"""
Race Preparation Calculator - CLI Entry Point

Usage:
    python main.py set FIELD VALUE
    python main.py show
    python main.py analyze [--pdf PATH]
    python main.py post-race TIME
    python main.py batch RECORDS_CSV [--out CSV]
    python main.py reset

Global options:
    --store PATH     JSON store for input fields and the last report
    --params PATH    JSON file with AnalysisParams overrides
    --verbose        Print progress
"""

import sys
import argparse
import json
from typing import Optional

from core.engine import RaceAnalysisEngine
from core.models import InvalidInputError
from core.params import AnalysisParams
from data.masks import mask_field
from data.records import INPUT_FIELDS, load_records_csv, iter_input_records, parse_input_record
from data.storage import AppData, KeyValueStore
from analysis.reports import (
    generate_race_report_text,
    generate_post_race_text,
    summarize_reports,
)

DEFAULT_STORE = 'race_analysis_store.json'


def load_params(path: Optional[str]) -> AnalysisParams:
    """Load parameter overrides from JSON (defaults if no path)."""
    if not path:
        return AnalysisParams()
    with open(path) as f:
        return AnalysisParams.from_dict(json.load(f))


def run_set(app: AppData, field: str, value: str, verbose: bool = False):
    """Store one input field (masked)."""
    if field not in INPUT_FIELDS:
        raise InvalidInputError(
            f"Unknown field '{field}'. Valid fields: {', '.join(INPUT_FIELDS)}"
        )
    masked = mask_field(field, value)
    app.set(field, masked)
    if verbose and masked != value:
        print(f"  '{value}' masked to '{masked}'")
    print(f"{field} = {masked}")


def run_show(app: AppData):
    """Print stored inputs and completeness."""
    for field in INPUT_FIELDS:
        print(f"  {field:<18} {app.get(field) or ''}")

    summary = app.get_data_summary()
    print(f"\nCompleteness: {summary['completeness']}%")
    if summary['empty']:
        print(f"Missing: {', '.join(summary['empty'])}")
    print(f"Saved analysis: {'yes' if app.load_report() else 'no'}")


def run_analyze(
    app: AppData,
    engine: RaceAnalysisEngine,
    pdf_path: Optional[str] = None,
    verbose: bool = False
):
    """Generate, print and save a report from the stored inputs."""
    validation = app.validate_required_data()
    if not validation['is_valid']:
        raise InvalidInputError('; '.join(validation['errors']))

    inputs = app.get_inputs()
    if verbose:
        print(f"Analyzing {inputs.race.distance_km} km with "
              f"{len(inputs.personal_bests)} personal best(s)...")

    report = engine.generate_report(inputs.profile, inputs.race, inputs.personal_bests)
    app.save_report(report)
    print(generate_race_report_text(report, inputs))

    if pdf_path:
        from analysis.visualizations import export_report_pdf
        written = export_report_pdf(report, pdf_path, inputs)
        print(f"PDF saved to: {written}")

    return report


def run_post_race(app: AppData, engine: RaceAnalysisEngine, actual_time: str):
    """Compare an actual time with the saved report."""
    result = engine.generate_post_race_result(app.load_report(), actual_time)
    print(generate_post_race_text(result))
    return result


def run_batch(
    engine: RaceAnalysisEngine,
    records_path: str,
    out_path: Optional[str] = None,
    verbose: bool = False
):
    """Analyze every record in a CSV and print a summary table."""
    df = load_records_csv(records_path)
    if verbose:
        print(f"Loaded {len(df)} records from {records_path}")

    reports = []
    names = []
    for i, record in enumerate(iter_input_records(df)):
        inputs = parse_input_record(record)
        name = inputs.race_name or f"record_{i + 1}"
        try:
            report = engine.generate_report(inputs.profile, inputs.race, inputs.personal_bests)
        except InvalidInputError as e:
            print(f"  Skipping {name}: {e}")
            continue
        reports.append(report)
        names.append(name)
        if verbose:
            print(f"  {name}: realistic {report.time_estimate.realistic}, "
                  f"risk {report.health_analysis.risk_level.value}")

    summary = summarize_reports(reports, names)
    print(summary.to_string())

    if out_path:
        summary.to_csv(out_path)
        print(f"\nSummary saved to: {out_path}")

    return summary


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Race Preparation Calculator')
    parser.add_argument('--store', default=DEFAULT_STORE, help='JSON store path')
    parser.add_argument('--params', default=None, help='AnalysisParams JSON overrides')
    parser.add_argument('--verbose', action='store_true', help='Print progress')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Set command
    set_parser = subparsers.add_parser('set', help='Store an input field')
    set_parser.add_argument('field', help='Field name (e.g. raceDistance, pb10k)')
    set_parser.add_argument('value', help='Field value')

    # Show command
    subparsers.add_parser('show', help='Show stored inputs')

    # Analyze command
    an_parser = subparsers.add_parser('analyze', help='Generate race report')
    an_parser.add_argument('--pdf', default=None, help='Also export the report as PDF')

    # Post-race command
    pr_parser = subparsers.add_parser('post-race', help='Compare actual time with saved report')
    pr_parser.add_argument('time', help='Actual finish time (h:mm:ss or mm:ss)')

    # Batch command
    bt_parser = subparsers.add_parser('batch', help='Analyze a CSV of input records')
    bt_parser.add_argument('records', help='CSV file of input records')
    bt_parser.add_argument('--out', default=None, help='Write summary CSV')

    # Reset command
    subparsers.add_parser('reset', help='Clear stored inputs and report')

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    engine = RaceAnalysisEngine(load_params(args.params))
    app = AppData(KeyValueStore(args.store))

    try:
        if args.command == 'set':
            run_set(app, args.field, args.value, args.verbose)
        elif args.command == 'show':
            run_show(app)
        elif args.command == 'analyze':
            run_analyze(app, engine, args.pdf, args.verbose)
        elif args.command == 'post-race':
            run_post_race(app, engine, args.time)
        elif args.command == 'batch':
            run_batch(engine, args.records, args.out, args.verbose)
        elif args.command == 'reset':
            app.reset()
            print("Stored inputs cleared.")
    except InvalidInputError as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())

"""
Day report entry point.
Reads a JSON export ({"events": [...], "tasks": [...], "categories": {...}})
and prints the analysis of one day.

    python scripts/analyze.py export.json --date 2024-03-11 [--json]
"""

import argparse
import datetime
import json
import sys
import time
from pathlib import Path

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from daypilot.core.config_manager import Config
from daypilot.core.orchestrator import AnalyzerFactory
from daypilot.models import DayReport, parse_iso_date
from daypilot.services.data_collector import DataCollector
from daypilot.services.stores import JsonExportStore
from daypilot.utils.logger import setup_logger

logger = setup_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Analyse one day of a calendar export.")
    parser.add_argument("export", type=Path, help="JSON file with events, tasks and categories")
    parser.add_argument("--date", help="Day to analyse (YYYY-MM-DD, default: today)")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    return parser.parse_args(argv)


def print_report(report: DayReport) -> None:
    overview = report.overview
    insights = report.insights

    print("=" * 60)
    print(f"DAY REPORT {report.day.isoformat()}")
    print("=" * 60)
    print(f"Scheduled: {overview.total_scheduled_minutes} min "
          f"({insights.busy_ratio:.0%} of working hours)")
    print(f"Free:      {overview.free_time_minutes} min, average gap {insights.avg_gap_minutes} min")
    print(f"Meetings:  {insights.meeting_minutes} min   Focus: {insights.focus_time_minutes} min")
    print(f"Events:    {overview.number_of_events}   Tasks due: {overview.number_of_tasks}")

    print("\nRisks:")
    if not report.risks:
        print("  none")
    for risk in report.risks:
        print(f"  [{risk.severity.value.upper():6}] {risk.type.value} "
              f"({', '.join(risk.affected_ids) or '-'})")

    print("\nTop priorities:")
    for priority in report.priorities:
        print(f"  {priority.priority_score:5.0f}  {priority.task.title} ({priority.reason.value})")

    print("\nSuggestions:")
    for suggestion in report.suggestions:
        start = suggestion.suggested_start.strftime("%H:%M")
        end = suggestion.suggested_end.strftime("%H:%M")
        label = suggestion.task.title if suggestion.task else "Break"
        print(f"  {start}-{end}  {label}: {suggestion.reason}")
    print("=" * 60)


def main(argv=None) -> int:
    """
    Main execution function.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = parse_args(argv)
    start_time = time.time()

    try:
        with open(args.export, 'r', encoding='utf-8') as f:
            export = json.load(f)

        day = parse_iso_date(args.date) if args.date else datetime.datetime.now(Config.timezone()).date()
        if day is None:
            logger.error(f"Invalid --date value: {args.date}")
            return 1

        store = JsonExportStore(export)
        analyzer = AnalyzerFactory.create(data_collector=DataCollector(store, store))
        report = analyzer.analyze_day(day)

        if args.json:
            print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
        else:
            print_report(report)
        return 0

    except FileNotFoundError as e:
        logger.error(f"Could not find: {e.filename}")
        return 1

    except json.JSONDecodeError as e:
        logger.error(f"Export is not valid JSON: {e}")
        return 1

    except ValueError as e:
        logger.error(str(e))
        return 1

    finally:
        elapsed = time.time() - start_time
        logger.debug(f"Total execution time: {elapsed:.2f} seconds")


if __name__ == "__main__":
    sys.exit(main())

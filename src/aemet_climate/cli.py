# Project: aemet-climate
# Owner: GreenUnicorn
"""
cli.py — Command-line interface for aemet-climate.

We use argparse (stdlib) rather than click because:
- No extra dependency to install
- Sufficient for 4 simple subcommands

Commands:
  aemet-climate extract             — download stations, write daily/monthly/yearly CSVs
  aemet-climate summer DAILY_CSV    — summer analyses: console tables + CSVs
  aemet-climate viz DAILY_CSV       — JSON datasets for the charts
  aemet-climate status              — last run info
"""

import argparse
from datetime import date
from pathlib import Path

from aemet_climate.chart import render_summer_report
from aemet_climate.config import DEFAULT_CONFIG_PATH, get_api_key, load_config
from aemet_climate.export import load_daily_csv, station_id_from_path, write_summer_results
from aemet_climate.extract import process_station
from aemet_climate.summer import NoDataError, NoSummerDataError, analyze_summer
from aemet_climate.utils import fmt_day, parse_day, read_last_run, write_last_run
from aemet_climate.viz import write_datasets


def _parse_stations(text: str) -> list[str]:
    return [s.strip() for s in text.split(",") if s.strip()]


def cmd_extract(args) -> None:
    """Download every configured station sequentially and write its CSVs."""
    config = load_config(Path(args.config))
    log_dir = Path(config["log"]["path"]).parent

    try:
        api_key = get_api_key()
        stations = _parse_stations(args.stations) if args.stations else config["aemet"]["stations"]
        try:
            start = parse_day(args.start or config["aemet"]["start_date"])
            end = parse_day(args.end) if args.end else date.today()
        except ValueError:
            print("[error] Unrecognised date format. Use DD/MM/YYYY.")
            raise SystemExit(1)
        if start > end:
            print(f"[error] Start date {fmt_day(start)} must not be after end date {fmt_day(end)}.")
            raise SystemExit(1)

        output_dir = Path(config["output"]["dir"])
        print(f"Processing {len(stations)} station(s) from {fmt_day(start)} to {fmt_day(end)}...")

        failures = []
        total = 0
        for station_id in stations:
            result = process_station(station_id, start, end, api_key, output_dir=output_dir)
            total += result.record_count
            if not result.ok:
                failures.append(f"{station_id} ({len(result.failed_ranges)} range(s) failed)")

        if failures:
            detail = "Incomplete: " + ", ".join(failures)
            print(f"⚠️  {detail}")
            write_last_run("ERROR", detail, log_dir=log_dir)
            raise SystemExit(1)
        print(f"✅ Done: {total} daily records across {len(stations)} station(s).")
        write_last_run("OK", f"{total} records, stations {','.join(stations)}", log_dir=log_dir)

    except RuntimeError as e:
        print(f"[error] {e}")
        write_last_run("ERROR", str(e), log_dir=log_dir)
        raise SystemExit(1)


def _load_records(path_str: str):
    path = Path(path_str).resolve()
    try:
        return path, load_daily_csv(path)
    except (FileNotFoundError, NoDataError) as e:
        print(f"[error] {e}")
        raise SystemExit(1)


def cmd_summer(args) -> None:
    """Run the summer analyses over a daily CSV."""
    path, records = _load_records(args.daily_csv)
    station_id = station_id_from_path(path)
    print(f"🔎 {len(records)} daily records loaded from {path.name}")

    try:
        results = analyze_summer(records)
    except NoSummerDataError:
        print("No data: no summer records in this file. Nothing written.")
        raise SystemExit(1)

    print()
    print(render_summer_report(results, station_id, color=not args.no_color))

    output_dir = Path(args.output_dir) if args.output_dir else Path(f"analysis_{station_id}")
    written = write_summer_results(results, station_id, output_dir)
    print(f"\n✅ {len(written)} CSV file(s) written to {output_dir}")


def cmd_viz(args) -> None:
    """Write the chart datasets for a daily CSV."""
    path, records = _load_records(args.daily_csv)
    output_dir = Path(args.output_dir)
    try:
        written = write_datasets(records, output_dir)
    except NoSummerDataError:
        print("No data: no summer records in this file. Nothing written.")
        raise SystemExit(1)
    for p in written:
        print(f"✅ {p}")


def cmd_status(args) -> None:
    """Show the last run record."""
    log_dir = Path(args.log_dir)
    last = read_last_run(log_dir)
    sep = "─" * 45
    print("\n🔧 AEMET Climate — Status")
    print(sep)
    if last:
        marker = "✅" if last["status"] == "OK" else "❌"
        print(f"  Last run:    {last['timestamp']}")
        print(f"  Last result: {marker} {last['detail']}")
    else:
        print("  Last run:    Never")
    print(sep)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="aemet-climate",
        description="Download AEMET daily climate data and analyse how summers are changing",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    p_extract = subparsers.add_parser("extract", help="Download station data and write daily/monthly/yearly CSVs")
    p_extract.add_argument("--stations", metavar="IDS", default=None,
                           help='Comma-separated station codes, e.g. "5530E,9434". Default: from config')
    p_extract.add_argument("--start", metavar="DD/MM/YYYY", default=None,
                           help="First day to download. Default: [aemet].start_date from config")
    p_extract.add_argument("--end", metavar="DD/MM/YYYY", default=None,
                           help="Last day to download. Default: today")
    p_extract.add_argument("--config", metavar="PATH", default=str(DEFAULT_CONFIG_PATH),
                           help="Path to config.toml")

    p_summer = subparsers.add_parser("summer", help="Summer analyses for a daily CSV")
    p_summer.add_argument("daily_csv", help="Daily CSV written by the extract command")
    p_summer.add_argument("--output-dir", metavar="DIR", default=None,
                          help="Where to write CSVs. Default: analysis_<station>")
    p_summer.add_argument("--no-color", action="store_true", help="Disable coloured tables")

    p_viz = subparsers.add_parser("viz", help="Write JSON datasets for the charts")
    p_viz.add_argument("daily_csv", help="Daily CSV written by the extract command")
    p_viz.add_argument("--output-dir", metavar="DIR", default="visualization")

    p_status = subparsers.add_parser("status", help="Show last run info")
    p_status.add_argument("--log-dir", metavar="DIR", default="logs")

    args = parser.parse_args()

    commands = {
        "extract": cmd_extract,
        "summer": cmd_summer,
        "viz": cmd_viz,
        "status": cmd_status,
    }
    commands[args.command](args)


if __name__ == "__main__":
    main()

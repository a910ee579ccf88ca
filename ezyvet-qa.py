#!/usr/bin/env python3
import argparse
import asyncio
import os
import sys
import traceback

import yaml
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from ezyvet_qa.config import load_settings
from ezyvet_qa.executor import (
    SCENARIOS,
    ParallelScenarioExecutor,
    build_configured_scenario,
    generate_json_report,
    validate_scenario_names,
)
from ezyvet_qa.utils.get_log import GetLog


def find_config_file(args_config=None):
    """Find the configuration file, or return None to run from environment variables only."""
    if args_config:
        if os.path.isfile(args_config):
            print(f"✅ Using specified config file: {args_config}")
            return args_config
        raise FileNotFoundError(f"❌ Specified config file not found: {args_config}")

    current_dir = os.getcwd()
    script_dir = os.path.dirname(os.path.abspath(__file__))

    default_paths = [
        os.path.join(current_dir, "config", "config.yaml"),
        os.path.join(script_dir, "config", "config.yaml"),
        os.path.join(current_dir, "config.yaml"),
        os.path.join(script_dir, "config.yaml"),
        "/app/config/config.yaml",
    ]

    for path in default_paths:
        if os.path.isfile(path):
            print(f"✅ Auto-discovered config file: {path}")
            return path

    print("⚠️  No config file found, using environment variables and defaults")
    return None


def load_yaml(path):
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except Exception as e:
        print(f"[ERROR] Failed to read YAML: {e}", file=sys.stderr)
        sys.exit(1)


async def check_playwright_browsers_async():
    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=True)
            await browser.close()
        print("✅ Playwright browsers available")
        return True
    except PlaywrightError as e:
        print(f"⚠️ Playwright browsers unavailable: {e}")
        return False


async def run_scenarios(settings, scenario_names):
    print(f"🌐 Target: {settings.base_url}")
    print(f"📋 Scenarios: {', '.join(scenario_names)}")

    print("🔍 Checking Playwright browsers...")
    if not await check_playwright_browsers_async():
        print("Please manually run: `playwright install chromium`, then retry.", file=sys.stderr)
        sys.exit(1)

    GetLog.get_log(log_level=settings.log_level)
    scenarios = [build_configured_scenario(name, settings) for name in scenario_names]

    print(f"⚙️ Concurrency: {settings.max_concurrent_scenarios}")
    executor = ParallelScenarioExecutor(settings)
    results = await executor.run(scenarios)
    report_path = generate_json_report(results, GetLog.log_folder)

    passed = sum(1 for result in results if result.passed)
    print(f"🔢 Total scenarios: {len(results)}")
    print(f"✅ Passed: {passed}")
    print(f"❌ Failed: {len(results) - passed}")
    for result in results:
        if not result.passed:
            print(f"   - {result.scenario_name}: {result.error_message}")
    print("JSON report path: ", report_path)
    return passed == len(results)


def parse_args():
    parser = argparse.ArgumentParser(description="ezyVet end-to-end scenario runner")
    parser.add_argument("--config", "-c", help="YAML configuration file path (optional, default auto-search config/config.yaml)")
    parser.add_argument(
        "--scenario",
        "-s",
        action="append",
        choices=sorted(SCENARIOS),
        help="Scenario to run; repeat for several (default: scenarios from config, else all)",
    )
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    return parser.parse_args()


def main():
    args = parse_args()

    try:
        cfg = load_yaml(find_config_file(args.config))
        settings = load_settings(cfg)
    except (FileNotFoundError, ValueError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        sys.exit(1)

    if args.headed:
        settings.headless = False

    try:
        scenario_names = validate_scenario_names(args.scenario or settings.scenarios or sorted(SCENARIOS))
    except ValueError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        sys.exit(1)

    try:
        ok = asyncio.run(run_scenarios(settings, scenario_names))
    except Exception:
        print("Scenario execution failed, stack trace:", file=sys.stderr)
        traceback.print_exc()
        sys.exit(1)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()

"""Command line helpers for BoosterForge."""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path
from random import Random

from rich.console import Console
from rich.table import Table

from .app import BoosterApp
from .config import BoosterForgeConfig
from .diagnostics.checklist import run_checklist as checklist_run
from .diagnostics.economy_simulator import EconomySimulator
from .loaders import load_catalog_from_json, validate_catalog_file
from .validators import validate_app

console = Console()


def run_simulator() -> None:
    parser = argparse.ArgumentParser(description="BoosterForge pack simulator")
    parser.add_argument("pack_id", help="Pack identifier to simulate")
    _add_source_arguments(parser)
    parser.add_argument("--opens", type=int, default=1000, help="Number of pack openings to simulate")
    parser.add_argument("--spins", type=int, default=0, help="Also simulate this many wheel spins")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible runs")
    args = parser.parse_args()

    app = _build_app(args)
    simulator = EconomySimulator(app, rng=Random(args.seed))
    result = simulator.simulate(args.pack_id, opens=args.opens)

    table = Table(title=f"{args.pack_id}: {result.opens} openings")
    table.add_column("Slot type")
    table.add_column("Cards", justify="right")
    table.add_column("Per pack", justify="right")
    for slot_type, count in sorted(result.slot_types.items()):
        table.add_row(slot_type, str(count), f"{count / result.opens:.2f}")
    console.print(table)
    console.print(f"Average cards per pack: {result.average_cards:.2f}")
    console.print(f"Holo rate: {result.holo_rate:.2%}")
    console.print(f"Unique cards seen: {len(result.unique_cards)}")
    console.print(f"Coins spent: {result.coins_spent}")
    if result.skipped:
        console.print(f"[yellow]Skipped draws (empty pools): {result.skipped}[/yellow]")

    if args.spins:
        wheel = simulator.simulate_wheel(spins=args.spins)
        console.print(f"\nWheel: {wheel.spins} spins, {wheel.return_rate:.2%} coin return")
        for kind, count in sorted(wheel.prizes.items()):
            console.print(f"  {kind}: {count}")


def run_checklist() -> None:
    parser = argparse.ArgumentParser(description="BoosterForge sanity checks")
    _add_source_arguments(parser)
    args = parser.parse_args()

    app = _build_app(args)
    issues = checklist_run(app)
    if not issues:
        console.print("[green]No issues found.[/green]")
        return
    for issue in issues:
        console.print(f"[{issue.severity.upper()}] {issue.message}", markup=False)
    if any(issue.severity == "error" for issue in issues):
        sys.exit(1)


def run_validate() -> None:
    parser = argparse.ArgumentParser(description="BoosterForge validator")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--catalog",
        help="Path to catalog JSON file for validation",
    )
    group.add_argument(
        "--module",
        help="Python module with register(app) function to validate",
    )
    args = parser.parse_args()

    if args.catalog:
        errors = validate_catalog_file(Path(args.catalog))
        if errors:
            console.print("[red]Catalog errors:[/red]")
            for err in errors:
                console.print(f"- {err}", markup=False)
            sys.exit(1)
        console.print("[green]Catalog is valid.[/green]")
        return

    app = BoosterApp(BoosterForgeConfig.from_env())
    _load_module(args.module, app)
    issues = validate_app(app)
    if issues:
        console.print("[red]Configuration errors:[/red]")
        for issue in issues:
            console.print(f"- {issue}", markup=False)
        sys.exit(1)
    console.print("[green]Configuration is valid.[/green]")


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--catalog", help="Path to catalog JSON file")
    group.add_argument("--module", help="Python module with register(app) function")


def _build_app(args: argparse.Namespace) -> BoosterApp:
    app = BoosterApp(BoosterForgeConfig.from_env())
    if args.catalog:
        load_catalog_from_json(app, Path(args.catalog))
    else:
        _load_module(args.module, app)
    return app


def _load_module(path: str, app: BoosterApp) -> None:
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)
    module = importlib.import_module(path)
    if hasattr(module, "register"):
        module.register(app)
    else:
        raise RuntimeError(f"Module {path} does not define register(app).")

#!/usr/bin/env python3
"""
Command Line Interface for the ModelRoute LLM router.

MODES:
- Route (default): send a prompt through the router and show content + telemetry
- Health (--health): show per-model circuit status from a running API
- Classify (--classify): show the task class a prompt would be routed as
- Redact (--redact): show the prompt exactly as it would leave the process

Classify and redact run offline; no API key needed.
"""
import sys
import argparse
import asyncio
from typing import List

import httpx
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from backend.llm_router import (
    ROUTER_MODES,
    TASK_CLASSES,
    ModelHealth,
    ModelRouter,
    RouterResult,
    classify_task,
    redact_secrets,
)
from backend.api.deps import setup_logging
from configs import ConfigurationError, validate_configuration

console = Console()

API_BASE_URL = "http://localhost:8000"


def print_telemetry(result: RouterResult):
    """Print routing telemetry for one request."""
    telemetry = result.telemetry
    status = "[green]✓ success[/green]" if telemetry.success else "[red]✗ degraded[/red]"

    info = Table.grid(padding=(0, 2))
    info.add_column(style="cyan", justify="right")
    info.add_column(style="white")
    info.add_row("Status:", status)
    info.add_row("Task class:", telemetry.task_class)
    info.add_row("Model used:", f"[bold]{telemetry.model_used}[/bold]")
    info.add_row("Latency:", f"{telemetry.latency_ms}ms")
    info.add_row("Fallback chain:", " → ".join(telemetry.fallback_chain) or "[dim](no candidates)[/dim]")

    console.print(Panel(info, title="Telemetry", border_style="blue", padding=(1, 2)))


def print_health(health: List[ModelHealth]):
    """Print the circuit status table."""
    table = Table(box=box.SIMPLE, show_header=True)
    table.add_column("Model", style="cyan")
    table.add_column("Circuit")
    table.add_column("Failures", justify="right")
    table.add_column("Cooldown", justify="right")

    for h in health:
        circuit = "[red]OPEN[/red]" if h.circuit_open else "[green]closed[/green]"
        cooldown = f"{h.cooldown_remaining_ms / 1000:.0f}s" if h.cooldown_remaining_ms else "-"
        table.add_row(h.id, circuit, str(h.failures), cooldown)

    console.print(table)


def fetch_health(api_url: str) -> List[ModelHealth]:
    """Read circuit status from a running API (circuit state lives in that process)."""
    with httpx.Client(timeout=10.0) as client:
        response = client.get(f"{api_url.rstrip('/')}/ai/health")
        response.raise_for_status()
        return [ModelHealth(**m) for m in response.json().get("models", [])]


def main():
    parser = argparse.ArgumentParser(
        description="ModelRoute - Multi-model LLM router",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py "Fix this SQL bug in my query"
  python cli.py --mode best "Summarize the weekly incident report"
  python cli.py --classify "Give me a TLDR of this"
  python cli.py --redact "Contact me at jane@example.com"
  python cli.py --health --api-url http://localhost:8000
        """
    )
    parser.add_argument("prompt", nargs="?", help="Prompt to route")
    parser.add_argument("--mode", "-m", choices=ROUTER_MODES, default="fast",
                        help="fast = up to 3 candidates, best = all candidates")
    parser.add_argument("--task", "-t", choices=TASK_CLASSES, default=None,
                        help="Route as this task class instead of classifying")
    parser.add_argument("--health", action="store_true", help="Show model circuit status of a running API")
    parser.add_argument("--api-url", default=API_BASE_URL, help="API server for --health")
    parser.add_argument("--classify", action="store_true", help="Only classify the prompt")
    parser.add_argument("--redact", action="store_true", help="Only redact the prompt")

    args = parser.parse_args()
    setup_logging()

    if args.health:
        try:
            print_health(fetch_health(args.api_url))
        except httpx.HTTPError as e:
            console.print(f"[red]Cannot read model health from {args.api_url}: {e}[/red]")
            sys.exit(1)
        return

    if not args.prompt:
        parser.print_help()
        console.print("\n[red]Error: Please provide a prompt[/red]")
        sys.exit(1)

    if args.classify:
        console.print(f"Task class: [bold]{classify_task(args.prompt)}[/bold]")
        return

    if args.redact:
        console.print(redact_secrets(args.prompt), markup=False)
        return

    try:
        validate_configuration()
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]", markup=True)
        sys.exit(1)

    router = ModelRouter()
    result = asyncio.run(router.route_request(args.prompt, mode=args.mode, task_class=args.task))

    console.print(Panel(Text(result.content), title="Response", border_style="green", padding=(1, 2)))
    print_telemetry(result)
    print_health(router.get_model_health())

    if not result.telemetry.success:
        sys.exit(2)


if __name__ == "__main__":
    main()

"""Main CLI entry point for Step Progress."""

import sys
import json
import time
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from step_progress import __version__
from step_progress.core.errors import ConfigurationError, ProgressError
from step_progress.ui.bar import Fidelity, render_bar
from step_progress.ui.output import ConsoleSink, detect_fidelity
from step_progress.ui.progress import Mode, ProgressTracker
from step_progress.utils.config import Config

# Configure logging
logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

console = Console()

MODE_CHOICES = [mode.value for mode in Mode]


def setup_config(config_path: Optional[Path] = None) -> Config:
    """Setup and return configuration instance.

    Args:
        config_path: Optional path to config file

    Returns:
        Configuration instance
    """
    return Config(config_path)


def resolve_fidelity(coarse: bool, config: Config) -> Fidelity:
    """Pick bar fidelity from the command line, the config and the terminal.

    Args:
        coarse: Whether --coarse was given
        config: Loaded configuration

    Returns:
        Fidelity to render with
    """
    if coarse or not config.get("smooth", True):
        return Fidelity.COARSE
    return detect_fidelity(console)


def parse_value(raw: str):
    """Decode a command line value as JSON, falling back to the raw string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to JSON config file")
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Optional[str]) -> None:
    """Step Progress - terminal progress bars for step-driven operations."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    if verbose:
        console.print(f"[bold green]Step Progress v{__version__}[/bold green]")
        console.print("Verbose mode enabled")
        logging.getLogger().setLevel(logging.INFO)


@main.command("demo")
@click.option("--steps", default=100, show_default=True, help="Number of simulated steps")
@click.option("--delay", type=float, help="Seconds spent on each step")
@click.option("--mode", type=click.Choice(MODE_CHOICES), help="Tracker display mode")
@click.option("--label", help="Tracker label")
@click.option("--blocks", type=int, help="Width of the bar body in characters")
@click.option("--coarse", is_flag=True, help="Render whole blocks only")
@click.pass_context
def demo_command(
    ctx: click.Context,
    steps: int,
    delay: Optional[float],
    mode: Optional[str],
    label: Optional[str],
    blocks: Optional[int],
    coarse: bool
) -> None:
    """Run a tracker over a simulated operation."""
    try:
        config = setup_config(ctx.obj.get("config_path"))

        delay = delay if delay is not None else config.get("delay", 0.05)
        if isinstance(delay, bool) or not isinstance(delay, (int, float)) or delay < 0:
            raise ConfigurationError(f"Delay must be a non-negative number of seconds, got {delay!r}")
        mode = mode or config.get("mode", Mode.REGULAR.value)
        label = label if label is not None else config.get("label", "Progress")
        blocks = blocks if blocks is not None else config.get("block_count", 30)

        logger.info(f"Running demo: {steps} steps, {delay}s per step, mode={mode}")

        with ProgressTracker(
            steps,
            label=label,
            block_count=blocks,
            mode=mode,
            sink=ConsoleSink(console),
            fidelity=resolve_fidelity(coarse, config)
        ) as tracker:
            for _ in range(steps):
                time.sleep(delay)
                tracker.advance()

        console.print(f"[bold green]Completed {tracker.current_step}/{tracker.total_steps} steps[/bold green]")

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user.[/yellow]")
        sys.exit(1)
    except ProgressError as e:
        console.print(f"[red]Error: {str(e)}[/red]")
        logger.exception("Demo failed")
        sys.exit(1)


@main.command("bar")
@click.argument("current", type=int)
@click.argument("total", type=int)
@click.option("--blocks", default=30, show_default=True, help="Width of the bar body in characters")
@click.option("--coarse", is_flag=True, help="Render whole blocks only")
def bar_command(current: int, total: int, blocks: int, coarse: bool) -> None:
    """Print a single bar for CURRENT of TOTAL steps."""
    try:
        fidelity = Fidelity.COARSE if coarse else detect_fidelity(console)
        console.print(render_bar(current, total, blocks, fidelity), markup=False, highlight=False)
    except ProgressError as e:
        console.print(f"[red]Error: {str(e)}[/red]")
        logger.exception("Bar rendering failed")
        sys.exit(1)


@main.group("config")
def config_group() -> None:
    """Show or change tracker defaults."""


@config_group.command("show")
@click.pass_context
def config_show_command(ctx: click.Context) -> None:
    """Show effective configuration values."""
    config = setup_config(ctx.obj.get("config_path"))

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Key", style="cyan")
    table.add_column("Value", justify="right")

    for key, value in sorted(config.items().items()):
        table.add_row(key, json.dumps(value))

    console.print(f"[bold blue]Configuration ({config.config_file}):[/bold blue]")
    console.print(table)


@config_group.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set_command(ctx: click.Context, key: str, value: str) -> None:
    """Store KEY=VALUE in the configuration file."""
    config = setup_config(ctx.obj.get("config_path"))
    config.set(key, parse_value(value))

    try:
        config.save()
    except IOError as e:
        console.print(f"[red]Error saving config: {str(e)}[/red]")
        sys.exit(1)

    console.print(f"[green]✓ {key} = {json.dumps(config.get(key))}[/green]")


if __name__ == "__main__":
    main()

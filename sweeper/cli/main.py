"""Main CLI entry point using Typer."""

import logging
import signal
import sys
import threading
from concurrent.futures import wait
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..errors import SweeperError
from ..utils.logging import setup_logging
from ..utils.timestamps import to_iso
from .config import Config
from .runtime import Runtime, build_runtime

logger = logging.getLogger(__name__)

# Create Typer app
app = typer.Typer(
    name="sweeper",
    help="Cloud Sweeper - mark, notify and clean unused cloud resources",
    add_completion=False,
)

# Create Rich console for output
console = Console()

# Global config
config: Optional[Config] = None


def _runtime() -> Runtime:
    """Build the runtime or exit with a readable error."""
    try:
        return build_runtime(config or Config.load())
    except SweeperError as e:
        console.print(f"✗ Error: {e}", style="bold red")
        raise typer.Exit(code=1)


@app.callback()
def main(
    config_file: Optional[str] = typer.Option(None, "--config", "-c", help="Sweeper config file"),
    work_config: Optional[str] = typer.Option(
        None, "--namespaces", "-n", help="Work configuration YAML (default: ~/.sweeper/namespaces.yaml)"
    ),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="AWS profile name"),
    storage_path: Optional[str] = typer.Option(
        None,
        "--storage-path",
        help="Custom path for tracking and audit storage (default: ~/.sweeper or $SWEEPER_STORAGE_PATH)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output except errors"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
):
    """Cloud Sweeper - mark, notify and clean unused cloud resources."""
    global config

    try:
        config = Config.load(config_file)
    except SweeperError as e:
        console.print(f"✗ Error: {e}", style="bold red")
        raise typer.Exit(code=1)

    # Override with CLI options
    if profile:
        config.aws_profile = profile
    if storage_path:
        config.storage_path = storage_path
    if work_config:
        config.work_config_path = work_config

    log_level = "ERROR" if quiet else ("DEBUG" if verbose else config.log_level)
    setup_logging(level=log_level, verbose=verbose)

    if no_color:
        console.no_color = True


@app.command()
def version():
    """Show version information."""
    import boto3

    from .. import __version__

    console.print(f"cloud-sweeper version {__version__}")
    console.print(f"Python {sys.version.split()[0]}")
    console.print(f"boto3 {boto3.__version__}")


@app.command()
def namespaces():
    """List configured namespaces."""
    runtime = _runtime()
    try:
        table = Table(title="Configured Namespaces")
        table.add_column("Namespace", style="cyan")
        table.add_column("Account")
        table.add_column("Retention (days)", justify="right")
        table.add_column("Dry Run")
        table.add_column("Exclusions", justify="right")

        for wc in runtime.configurator.list():
            table.add_row(
                wc.namespace,
                wc.account_id,
                str(wc.retention_days),
                "yes" if wc.dry_run else "[bold red]no[/bold red]",
                str(len(wc.exclusions)),
            )

        console.print()
        console.print(table)
        console.print()
    finally:
        runtime.shutdown()


@app.command()
def mark(
    namespace: Optional[str] = typer.Option(None, "--namespace", help="Only mark this namespace"),
):
    """Run one mark pass and report what was found."""
    runtime = _runtime()
    try:
        configurations = runtime.configurator.list()
        if namespace:
            configurations = [wc for wc in configurations if wc.namespace == namespace]
            if not configurations:
                console.print(f"✗ Error: Namespace '{namespace}' is not configured", style="bold red")
                raise typer.Exit(code=1)

        futures = [
            runtime.executor.submit(
                runtime.registry.find(wc.resource_type, wc.cloud_provider).mark, wc
            )
            for wc in configurations
        ]
        wait(futures)

        table = Table(title="Mark Results")
        table.add_column("Namespace", style="cyan")
        table.add_column("Dry Run")
        table.add_column("Fetched", justify="right")
        table.add_column("Excluded", justify="right")
        table.add_column("Candidates", justify="right")
        table.add_column("Marked", justify="right", style="yellow")
        table.add_column("Unmarked", justify="right", style="green")
        table.add_column("Failed", justify="right", style="red")

        for future in futures:
            result = future.result()
            table.add_row(
                result.namespace,
                "yes" if result.dry_run else "no",
                str(result.fetched),
                str(result.excluded),
                str(result.candidates),
                str(result.marked),
                str(result.unmarked),
                str(result.failed) if not result.error else f"{result.failed} ({result.error})",
            )

        console.print()
        console.print(table)
        console.print()
    finally:
        runtime.shutdown()


@app.command()
def notify():
    """Notify owners of newly marked resources."""
    runtime = _runtime()
    try:
        futures = runtime.notifier.execute()
        wait(futures)
        updated = sum(f.result() for f in futures)
        console.print(f"✓ Notified {len(futures)} owner(s) about {updated} resource(s)", style="green")
    finally:
        runtime.shutdown()


@app.command()
def clean():
    """Run one clean pass over deletion-eligible resources."""
    runtime = _runtime()
    try:
        eligible = len(runtime.store.list_clean_eligible())
        if eligible == 0:
            console.print("No resources are eligible for deletion.", style="yellow")
            return

        futures = runtime.cleaner.execute()
        wait(futures)

        counts: dict = {}
        for future in futures:
            outcome = future.result().value
            counts[outcome] = counts.get(outcome, 0) + 1

        table = Table(title=f"Clean Results ({eligible} eligible)")
        table.add_column("Outcome", style="cyan")
        table.add_column("Resources", justify="right")
        for outcome, count in sorted(counts.items()):
            table.add_row(outcome, str(count))

        console.print()
        console.print(table)
        console.print()
    finally:
        runtime.shutdown()


@app.command("list")
def list_marked(
    namespace: Optional[str] = typer.Option(None, "--namespace", help="Only list this namespace"),
):
    """List tracked (marked) resources."""
    runtime = _runtime()
    try:
        entries = runtime.store.list_marked(namespace)
        if not entries:
            console.print("No marked resources.", style="yellow")
            return

        table = Table(title="Marked Resources")
        table.add_column("Resource", style="cyan")
        table.add_column("Namespace")
        table.add_column("Owner")
        table.add_column("Violations")
        table.add_column("Projected Deletion")
        table.add_column("Notified")
        table.add_column("Adjusted Deletion")

        for entry in entries:
            table.add_row(
                entry.resource_id,
                entry.namespace,
                entry.resource_owner or "(unknown)",
                "\n".join(s.rule_id for s in entry.summaries),
                to_iso(entry.projected_deletion_stamp) or "",
                to_iso(entry.notification_info.notification_stamp) or "-",
                to_iso(entry.adjusted_deletion_stamp) or "-",
            )

        console.print()
        console.print(table)
        console.print(f"Total: {len(entries)}")
        console.print()
    finally:
        runtime.shutdown()


@app.command()
def run():
    """Run the marker, notifier and cleaner agents until interrupted."""
    runtime = _runtime()
    scheduler = runtime.scheduler()
    stopped = threading.Event()

    def _handle_signal(signum, frame):
        stopped.set()

    signal.signal(signal.SIGTERM, _handle_signal)

    console.print(f"🧹 Sweeping {len(runtime.configurator.list())} namespace(s). Press Ctrl+C to stop.")
    scheduler.start()
    try:
        while not stopped.wait(1.0):
            pass
    except KeyboardInterrupt:
        pass
    finally:
        console.print("Stopping agents...")
        scheduler.stop()
        runtime.shutdown()


def cli_main():
    """Console script entry point."""
    app()


if __name__ == "__main__":
    cli_main()

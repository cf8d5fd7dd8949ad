"""CLI entrypoint for kci cluster insights."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as package_version

import typer
from rich.console import Console
from rich.markup import escape

from kci.application import (
    NoMatchingPodsError,
    RunResult,
    execute_cluster_capacity,
    execute_namespace_usage,
    execute_node_breakdown,
    execute_pod_resource_stats,
    execute_replica_capacity,
    execute_resource_fit,
)
from kci.config import load_config
from kci.logging_config import configure_logging

app = typer.Typer(
    name="kci",
    help=(
        "Kubernetes cluster insights from declared requests and capacity.\n\n"
        "capacity - total capacity, allocated resources and availability; "
        "fit - check whether given resources fit; "
        "nodes - per-node breakdown; "
        "namespaces - requests and limits per namespace; "
        "pods - top pods by CPU requests; "
        "replicas - check room for more replicas of an application. "
        "All commands query the live cluster through kubectl."
    ),
    no_args_is_help=True,
    add_completion=False,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()

_REPORT_HELP = (
    "Persist report files under this directory. If omitted, prints stdout only."
)


def _resolve_version() -> str:
    """Return installed package version or local fallback."""
    try:
        return package_version("cluster-insights")
    except PackageNotFoundError:
        return "0.1.0"


@app.callback()
def callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging on stderr.",
    ),
) -> None:
    """Handle global CLI options."""
    if version:
        console.print(f"cluster-insights {_resolve_version()}")
        raise typer.Exit(code=0)
    configure_logging("DEBUG" if verbose else load_config().log_level)
    if ctx.invoked_subcommand is None:
        raise typer.Exit(code=0)


def _handle_error(exc: Exception, failure: str) -> None:
    """Convert domain exceptions to CLI exit codes."""
    console.print(f"[red]ERROR:[/red] {escape(f'{failure}: {exc}')}")
    if isinstance(exc, ValueError):
        raise typer.Exit(code=1) from exc
    if isinstance(exc, NoMatchingPodsError):
        raise typer.Exit(code=3) from exc
    raise typer.Exit(code=2) from exc


def _print_run(run: RunResult | None) -> None:
    if run is not None:
        console.print(f"[green]Run:[/green] {run.output_dir}")


@app.command("capacity")
def capacity_command(
    report: str | None = typer.Option(
        None,
        "--report",
        "-r",
        help=_REPORT_HELP,
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the response as JSON.",
    ),
) -> None:
    """Show total capacity, allocated requests and availability."""
    try:
        _print_run(execute_cluster_capacity(reports_root=report, as_json=as_json))
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc, "Failed to get cluster capacity")


@app.command("fit")
def fit_command(
    cpu: float = typer.Option(..., "--cpu", help="Required CPU in cores."),
    memory: float = typer.Option(..., "--memory", help="Required memory in GiB."),
    report: str | None = typer.Option(
        None,
        "--report",
        "-r",
        help=_REPORT_HELP,
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the response as JSON.",
    ),
) -> None:
    """Check whether CPU and memory fit into available capacity.

    Example: `kci fit --cpu 4 --memory 16`.
    """
    try:
        _print_run(
            execute_resource_fit(cpu, memory, reports_root=report, as_json=as_json)
        )
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc, "Failed to check resource fit")


@app.command("nodes")
def nodes_command(
    report: str | None = typer.Option(
        None,
        "--report",
        "-r",
        help=_REPORT_HELP,
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the response as JSON.",
    ),
) -> None:
    """Show capacity, requests, availability and pod count per node."""
    try:
        _print_run(execute_node_breakdown(reports_root=report, as_json=as_json))
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc, "Failed to get node breakdown")


@app.command("namespaces")
def namespaces_command(
    report: str | None = typer.Option(
        None,
        "--report",
        "-r",
        help=_REPORT_HELP,
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the response as JSON.",
    ),
) -> None:
    """Show requests and limits per namespace, by CPU requests."""
    try:
        _print_run(execute_namespace_usage(reports_root=report, as_json=as_json))
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc, "Failed to get namespace usage")


@app.command("pods")
def pods_command(
    report: str | None = typer.Option(
        None,
        "--report",
        "-r",
        help=_REPORT_HELP,
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the response as JSON.",
    ),
) -> None:
    """Show top pods by CPU requests."""
    try:
        _print_run(execute_pod_resource_stats(reports_root=report, as_json=as_json))
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc, "Failed to get pod resource stats")


@app.command("replicas")
def replicas_command(
    app_name: str = typer.Option(
        ..., "--app", "-a", help="Application or pod name pattern to find."
    ),
    namespace: str = typer.Option(
        ..., "--namespace", "-n", help="Namespace to search in."
    ),
    count: int = typer.Option(
        ..., "--count", "-c", help="Number of additional replicas needed."
    ),
    strategy: str = typer.Option(
        "first",
        "--strategy",
        help="Per-replica cost inference: 'first' matching pod or 'average'.",
    ),
    report: str | None = typer.Option(
        None,
        "--report",
        "-r",
        help=_REPORT_HELP,
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the response as JSON.",
    ),
) -> None:
    """Check whether more replicas of an application fit.

    Example: `kci replicas --app my-application -n default --count 10`.
    """
    try:
        _print_run(
            execute_replica_capacity(
                app_name,
                namespace,
                count,
                strategy=strategy,
                reports_root=report,
                as_json=as_json,
            )
        )
    except (ValueError, RuntimeError, NoMatchingPodsError) as exc:
        _handle_error(exc, "Failed to check replica capacity")


def main() -> None:
    """Project entrypoint for `kci` script."""
    app()


if __name__ == "__main__":
    main()

"""Command line interface for the memory benchmark harness."""

import sys
from typing import Optional
import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.config import ConfigLoader, load_env_config, merge_configs
from .core.comparison import TIMED_METRICS, ComparisonEngine, ComparisonReport
from .core.errors import MembenchError
from .core.results import ResultRecord, ResultStore
from .core.runner import ScenarioRunner
from .core.scenarios import ScenarioResolver
from .utils.logging import setup_logging


console = Console()


def _fmt_seconds(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.4f}s"


def _fmt_count(value: Optional[int]) -> str:
    return "n/a" if value is None else f"{value:,}"


def _fail(message: str) -> None:
    console.print(f"[red]✗ {escape(message)}[/red]")
    sys.exit(1)


@click.group()
@click.option('--log-level', default=None, help='Logging level')
@click.option('--log-file', help='Log file path')
@click.pass_context
def cli(ctx, log_level, log_file):
    """Cross-runtime memory benchmark CLI."""
    ctx.ensure_object(dict)
    try:
        config = merge_configs(load_env_config(), {'log_level': log_level, 'log_file': log_file})
        setup_logging(level=config.log_level, log_file=config.log_file)
    except ValueError as e:
        _fail(f"Invalid configuration: {e}")
    ctx.obj['config'] = config


@cli.command()
@click.option('--config', 'config_file', help='Scenario file (YAML or JSON)')
@click.option('--sizes', help='Comma-separated sizes in MB; runs ad-hoc scenarios')
@click.option('--iterations', type=int, help='Iterations for ad-hoc scenarios')
@click.option('--scenarios', help='Comma-separated scenario ids to run')
@click.option('--output', '-o', help='Result file name or path')
@click.option('--reports-dir', help='Directory for result files')
@click.option('--csv', 'export_csv', is_flag=True, help='Also export results as CSV')
@click.pass_context
def run(ctx, config_file, sizes, iterations, scenarios, output, reports_dir, export_csv):
    """Run the memory benchmark scenarios."""
    config = merge_configs(ctx.obj['config'], {
        'scenarios_file': config_file,
        'reports_dir': reports_dir,
    })
    try:
        configured = [] if sizes else ConfigLoader.load_scenarios(config.scenarios_file)
        resolved = ScenarioResolver(config.default_iterations).resolve(
            configured, sizes=sizes, iterations=iterations, scenarios=scenarios
        )

        console.print(f"[bold blue]Running {len(resolved)} scenario(s)...[/bold blue]")
        runner = ScenarioRunner()
        records = []
        for scenario in resolved:
            record = runner.run(scenario)
            _display_record(record)
            records.append(record)

        store = ResultStore(config.reports_dir)
        results_file = store.save(records, output)
        if export_csv:
            store.export_csv(records, results_file.with_suffix('.csv'))

        console.print(f"\n[green]✓ Benchmark completed successfully![/green]")
        console.print(f"Results saved to: {results_file}")

    except MembenchError as e:
        _fail(f"Benchmark failed: {e}")


def _display_record(record: ResultRecord):
    """Display the metrics of one scenario."""
    table = Table(title=f"{record.scenario_id} ({record.size_mb} MB x {record.iterations})",
                  show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")

    for metric, label in TIMED_METRICS.items():
        table.add_row(label, _fmt_seconds(getattr(record.metrics, metric)))
    table.add_row("Page faults (minor)", _fmt_count(record.metrics.page_faults_minor))
    table.add_row("Page faults (major)", _fmt_count(record.metrics.page_faults_major))

    console.print(table)


@cli.command()
@click.argument('result_a')
@click.argument('result_b')
@click.option('--label-a', help='Name of the first runtime (default: its runtime label)')
@click.option('--label-b', help='Name of the second runtime (default: its runtime label)')
@click.option('--truncate', is_flag=True, help='Compare up to the shorter result set instead of failing')
@click.option('--reports-dir', help='Directory to look up relative result files in')
@click.option('--csv', 'csv_file', help='Export the comparison as CSV')
@click.pass_context
def compare(ctx, result_a, result_b, label_a, label_b, truncate, reports_dir, csv_file):
    """Compare two result files scenario by scenario."""
    config = merge_configs(ctx.obj['config'], {'reports_dir': reports_dir})
    store = ResultStore(config.reports_dir)
    try:
        results_a = store.load(result_a)
        results_b = store.load(result_b)

        engine = ComparisonEngine(
            label_a=label_a or (results_a[0].runtime_label if results_a else "A"),
            label_b=label_b or (results_b[0].runtime_label if results_b else "B"),
            truncate=truncate,
        )
        report = engine.compare(results_a, results_b)
    except MembenchError as e:
        _fail(f"Comparison failed: {e}")

    _display_comparison(report)
    _display_summary(report)
    _display_page_faults(report)

    if csv_file:
        report.to_frame().to_csv(csv_file, index=False)
        console.print(f"Comparison exported to: {csv_file}")


def _display_comparison(report: ComparisonReport):
    """Display one table per scenario."""
    console.print(f"\n[bold]Versions[/bold]: {report.label_a} {report.version_a or 'n/a'}, "
                  f"{report.label_b} {report.version_b or 'n/a'}")

    for row in report.rows:
        table = Table(title=f"{row.scenario_id} ({row.size_mb} MB x {row.iterations})",
                      show_header=True, header_style="bold magenta")
        table.add_column("Metric", style="cyan")
        table.add_column(report.label_a, justify="right")
        table.add_column(report.label_b, justify="right")
        table.add_column("Comparison", style="green")

        for comparison in row.metrics.values():
            table.add_row(comparison.label, _fmt_seconds(comparison.value_a),
                          _fmt_seconds(comparison.value_b), comparison.description)
        table.add_row("Page faults (minor)", _fmt_count(row.page_faults.minor_a),
                      _fmt_count(row.page_faults.minor_b), "")
        table.add_row("Page faults (major)", _fmt_count(row.page_faults.major_a),
                      _fmt_count(row.page_faults.major_b), "")

        console.print(table)


def _display_summary(report: ComparisonReport):
    """Display mean-based comparison and the final tally."""
    summary = report.summary
    console.print(f"\n[bold]Performance summary (means)[/bold]")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan")
    table.add_column(f"{report.label_a} mean", justify="right")
    table.add_column(f"{report.label_b} mean", justify="right")
    table.add_column("Comparison", style="green")
    table.add_column("Winner", style="bold")

    for metric, label in TIMED_METRICS.items():
        comparison = summary.metrics.get(metric)
        table.add_row(
            label,
            _fmt_seconds(summary.mean_a.get(metric)),
            _fmt_seconds(summary.mean_b.get(metric)),
            comparison.description if comparison else "n/a",
            summary.winners.get(metric, ""),
        )
    console.print(table)

    console.print(f"Final score: {report.label_a} {summary.wins_a} x {summary.wins_b} {report.label_b}")
    if summary.leader:
        console.print(f"[green]{summary.leader} was faster in most tests[/green]")
    else:
        console.print("[yellow]Draw: both runtimes performed similarly[/yellow]")


def _display_page_faults(report: ComparisonReport):
    """Display raw page-fault counts per scenario."""
    console.print(f"\n[bold]Page faults by scenario[/bold]")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Scenario", style="cyan")
    table.add_column("Size (MB)", justify="right")
    table.add_column(f"{report.label_a} minor", justify="right")
    table.add_column(f"{report.label_a} major", justify="right")
    table.add_column(f"{report.label_b} minor", justify="right")
    table.add_column(f"{report.label_b} major", justify="right")

    for row in report.rows:
        faults = row.page_faults
        table.add_row(row.scenario_id, str(row.size_mb),
                      _fmt_count(faults.minor_a), _fmt_count(faults.major_a),
                      _fmt_count(faults.minor_b), _fmt_count(faults.major_b))
    console.print(table)


@cli.command()
@click.option('--config', 'config_file', help='Scenario file (YAML or JSON)')
@click.pass_context
def scenarios(ctx, config_file):
    """Validate and list the configured scenarios."""
    config = merge_configs(ctx.obj['config'], {'scenarios_file': config_file})
    try:
        configured = ConfigLoader.load_scenarios(config.scenarios_file)
        if not configured:
            raise MembenchError(f"No scenarios configured in {config.scenarios_file}")
    except MembenchError as e:
        _fail(f"Validation failed: {e}")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Id", style="cyan")
    table.add_column("Size (MB)", justify="right")
    table.add_column("Iterations", justify="right")
    for scenario in configured:
        table.add_row(scenario.id, str(scenario.size_mb), str(scenario.iterations))

    console.print(table)


def main():
    """Entry point for the membench CLI."""
    cli()


if __name__ == '__main__':
    main()

"""CLI commands for statewalk."""

from __future__ import annotations

import logging
import sys

import click
from rich.console import Console
from rich.table import Table

from statewalk.config import load_config
from statewalk.core.plan import save_plan
from statewalk.core.task import OperatorCost, load_task
from statewalk.errors import StatewalkError
from statewalk.reporters import ConsoleReporter, JSONReporter
from statewalk.search import SearchStatus, default_registry

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ERROR = 2


def setup_logging(level: str | int) -> None:
    """Configure logging for the given level."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _fail(error: StatewalkError, verbose: bool) -> None:
    click.echo(error.format_verbose() if verbose else f"Error: {error}", err=True)
    sys.exit(EXIT_ERROR)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--config", "-c", type=click.Path(exists=True), help="Path to config file")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str | None) -> None:
    """statewalk - random walks over finite-domain transition systems."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose
    ctx.obj["registry"] = default_registry()


@cli.command()
@click.argument("task_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--engine", default="random_walk", show_default=True, help="Search engine name")
@click.option("--eval", "-e", "evals", multiple=True, help="Evaluator for the open list (repeatable)")
@click.option("--preferred", "-p", multiple=True, help="Evaluator providing preferred operators (repeatable)")
@click.option("--boost", type=int, default=None, help="Preferred-queue boost on progress")
@click.option("--bound", type=int, default=None, help="Real-cost bound")
@click.option("--seed", "random_seed", type=int, default=None, help="Random seed")
@click.option(
    "--cost-type",
    type=click.Choice([c.value for c in OperatorCost]),
    default=None,
    help="Adjusted cost semantics",
)
@click.option("--successors-per-step", type=int, default=None, help="Operators sampled per expansion")
@click.option("--randomize-successors", is_flag=True, help="Shuffle applicable operators")
@click.option("--preferred-successors-first", is_flag=True, help="Queue preferred edges first")
@click.option("--max-steps", type=int, default=None, help="Stop after this many steps")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.option("--plan-file", type=click.Path(dir_okay=False), default=None, help="Write the plan here")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.pass_context
def walk(
    ctx: click.Context,
    task_file: str,
    engine: str,
    evals: tuple[str, ...],
    preferred: tuple[str, ...],
    boost: int | None,
    bound: int | None,
    random_seed: int | None,
    cost_type: str | None,
    successors_per_step: int | None,
    randomize_successors: bool,
    preferred_successors_first: bool,
    max_steps: int | None,
    output_format: str,
    plan_file: str | None,
    no_color: bool,
) -> None:
    """Run a random walk on TASK_FILE and report the outcome.

    Exits 0 when the walk ends on its own (goal, no more edges, or bound),
    1 when it was stopped by --max-steps, 2 on configuration or task errors.
    """
    verbose: bool = ctx.obj["verbose"]
    try:
        config = load_config(
            ctx.obj["config_path"],
            evals=list(evals) or None,
            preferred=list(preferred) or None,
            boost=boost,
            bound=bound,
            random_seed=random_seed,
            cost_type=cost_type,
            successors_per_step=successors_per_step,
            randomize_successors=randomize_successors or None,
            preferred_successors_first=preferred_successors_first or None,
            max_steps=max_steps,
        )
    except StatewalkError as e:
        _fail(e, verbose)
        return

    setup_logging(logging.DEBUG if verbose else config.log_level)
    logger.debug(f"Running {engine} on {task_file} with evals={config.evals}")

    try:
        task = load_task(task_file)
        search_engine = ctx.obj["registry"].create(engine, task, config)
        result = search_engine.search(max_steps=config.max_steps)
    except StatewalkError as e:
        _fail(e, verbose)
        return

    search_engine.print_statistics()

    if plan_file and result.status is SearchStatus.SOLVED:
        save_plan(task, result.plan, plan_file)

    if output_format == "json":
        click.echo(JSONReporter().report(result))
    else:
        ConsoleReporter(color=not no_color).report(result)

    sys.exit(EXIT_OK if result.status is SearchStatus.SOLVED else EXIT_FAILED)


@cli.command()
@click.argument("task_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def validate(ctx: click.Context, task_file: str) -> None:
    """Check that TASK_FILE is a well-formed task."""
    try:
        task = load_task(task_file)
    except StatewalkError as e:
        _fail(e, ctx.obj["verbose"])
        return

    click.echo(
        f"✓ {task.name}: {len(task.variables)} variables, "
        f"{len(task.operators)} operators, {len(task.goal)} goal facts"
    )
    if task.is_unit_cost:
        click.echo("  unit-cost task")


@cli.command()
@click.pass_context
def engines(ctx: click.Context) -> None:
    """List registered search engines and evaluators."""
    registry = ctx.obj["registry"]
    console = Console()

    table = Table(title="Search engines")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for name in registry.names():
        table.add_row(name, registry.describe(name))
    console.print(table)

    table = Table(title="Evaluators")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for name in registry.evaluators.names():
        table.add_row(name, registry.evaluators.describe(name))
    console.print(table)

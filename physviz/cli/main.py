"""Main CLI entry point for PhysViz."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import structlog
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from physviz.errors import PhysVizError
from physviz.models.frame import FrameState
from physviz.models.scenario import Scenario
from physviz.simulation.stepper import SimulationConfig, TerminalPolicy

app = typer.Typer(
    name="physviz",
    help="PhysViz - Simulate and visualize physics word problems",
    add_completion=False,
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Load .env and configure logging."""
    load_dotenv()
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))


def _build_engine(provider: str, offline: bool, policy: Optional[TerminalPolicy] = None):
    from physviz.engine import VisualizationEngine
    
    config = SimulationConfig.from_env()
    if policy is not None:
        config.terminal_policy = policy
    
    try:
        return VisualizationEngine(provider=None if offline else provider, config=config)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print(
            f"[yellow]Set {provider.upper()}_API_KEY environment variable or pass --offline[/yellow]"
        )
        raise typer.Exit(1)


def _load(engine, problem: str) -> Scenario:
    """Load a scenario from a JSON file or by analyzing problem text."""
    path = Path(problem)
    try:
        if path.suffix == ".json" and path.is_file():
            return engine.load_scenario(json.loads(path.read_text()))
        return asyncio.run(engine.analyze_problem(problem))
    except (PhysVizError, json.JSONDecodeError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def _apply_overrides(engine, overrides: Optional[list[str]]) -> None:
    for item in overrides or []:
        name, sep, value = item.partition("=")
        if not sep:
            console.print(f"[red]Invalid --set value '{item}', expected name=value[/red]")
            raise typer.Exit(1)
        try:
            engine.session.set_parameter(name.strip(), float(value))
        except (PhysVizError, ValueError) as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)


def _display_scenario(scenario: Scenario) -> None:
    console.print(Panel.fit(
        f"[bold blue]{scenario.motion_family.value.title()} motion[/bold blue]\n"
        f"{scenario.description or 'No description'}",
        border_style="blue",
    ))
    
    table = Table(show_header=True)
    table.add_column("Parameter")
    table.add_column("Value", justify="right")
    table.add_column("Unit")
    table.add_column("Adjustable")
    for name, value in sorted(scenario.parameters.items()):
        table.add_row(
            name,
            f"{value:g}",
            scenario.unit_for(name),
            "yes" if name in scenario.adjustable_parameters else "",
        )
    console.print(table)
    
    entities = ", ".join(f"{e.name} ({e.id})" for e in scenario.entities)
    console.print(f"Entities: {entities}")


def _frame_table(frames: list[FrameState]) -> Table:
    table = Table(show_header=True)
    table.add_column("t (s)", justify="right")
    table.add_column("Entity")
    table.add_column("x (m)", justify="right")
    table.add_column("y (m)", justify="right")
    table.add_column("vx (m/s)", justify="right")
    table.add_column("vy (m/s)", justify="right")
    table.add_column("Speed", justify="right")
    for frame in frames:
        for ef in frame.entities:
            table.add_row(
                f"{frame.sim_time:.3f}",
                ef.entity_id,
                f"{ef.position.x:.3f}",
                f"{ef.position.y:.3f}",
                f"{ef.velocity.x:.3f}",
                f"{ef.velocity.y:.3f}",
                f"{ef.speed:.3f}",
            )
    return table


@app.command()
def analyze(
    problem: str = typer.Argument(..., help="Physics word problem text"),
    provider: str = typer.Option(
        "anthropic",
        "--provider", "-p",
        help="LLM provider (anthropic, openai)",
    ),
    offline: bool = typer.Option(
        False,
        "--offline",
        help="Use the keyword analyzer instead of an LLM",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output file for the scenario (JSON)",
    ),
):
    """Analyze a word problem and show the extracted scenario."""
    engine = _build_engine(provider, offline)
    scenario = _load(engine, problem)
    _display_scenario(scenario)
    
    if output:
        output.write_text(json.dumps(scenario.to_raw(), indent=2))
        console.print(f"\n[green]Scenario saved to {output}[/green]")
    engine.close()


@app.command()
def simulate(
    problem: str = typer.Argument(..., help="Problem text or a scenario JSON file"),
    provider: str = typer.Option("anthropic", "--provider", "-p"),
    offline: bool = typer.Option(False, "--offline"),
    ticks: int = typer.Option(120, "--ticks", "-n", help="Number of ticks to run"),
    every: int = typer.Option(15, "--every", "-e", help="Show every Nth frame"),
    overrides: Optional[list[str]] = typer.Option(
        None,
        "--set", "-s",
        help="Parameter override as name=value (repeatable)",
    ),
    policy: Optional[TerminalPolicy] = typer.Option(
        None,
        "--policy",
        help="What happens when the motion ends (loop, halt)",
    ),
    svg: Optional[Path] = typer.Option(None, "--svg", help="Write the last frame as SVG"),
):
    """Step a scenario headlessly and print sampled frames."""
    engine = _build_engine(provider, offline, policy)
    _load(engine, problem)
    _apply_overrides(engine, overrides)
    
    frames: list[FrameState] = []
    errors = []
    engine.session.subscribe_errors(errors.append)
    for i in range(ticks):
        frame = engine.session.tick()
        if frame is not None and i % max(every, 1) == 0:
            frames.append(frame)
    
    console.print(_frame_table(frames))
    if errors:
        console.print(f"[yellow]{len(errors)} tick(s) skipped: {errors[-1]}[/yellow]")
    
    if svg and engine.session.current_frame is not None:
        from physviz.rendering.svg import SVGRenderer
        
        SVGRenderer().render_to_file(engine.session.current_frame, engine.scenario, svg)
        console.print(f"\n[green]Frame written to {svg}[/green]")
    engine.close()


@app.command()
def frame(
    problem: str = typer.Argument(..., help="Problem text or a scenario JSON file"),
    at: float = typer.Option(0.0, "--at", "-t", help="Simulation time in seconds"),
    provider: str = typer.Option("anthropic", "--provider", "-p"),
    offline: bool = typer.Option(False, "--offline"),
    overrides: Optional[list[str]] = typer.Option(None, "--set", "-s"),
    svg: Optional[Path] = typer.Option(None, "--svg"),
):
    """Evaluate a single instant of a scenario."""
    engine = _build_engine(provider, offline)
    _load(engine, problem)
    _apply_overrides(engine, overrides)
    
    try:
        state = engine.session.frame_at(at)
    except PhysVizError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    
    console.print(_frame_table([state]))
    if svg:
        from physviz.rendering.svg import SVGRenderer
        
        SVGRenderer().render_to_file(state, engine.scenario, svg)
        console.print(f"\n[green]Frame written to {svg}[/green]")
    engine.close()


@app.command()
def play(
    problem: str = typer.Argument(..., help="Problem text or a scenario JSON file"),
    provider: str = typer.Option("anthropic", "--provider", "-p"),
    offline: bool = typer.Option(False, "--offline"),
    seconds: float = typer.Option(5.0, "--seconds", help="Wall-clock duration"),
    overrides: Optional[list[str]] = typer.Option(None, "--set", "-s"),
    policy: Optional[TerminalPolicy] = typer.Option(None, "--policy"),
):
    """Animate a scenario live in the terminal."""
    engine = _build_engine(provider, offline, policy)
    scenario = _load(engine, problem)
    _apply_overrides(engine, overrides)
    _display_scenario(scenario)
    
    asyncio.run(_play(engine, seconds))
    engine.close()


async def _play(engine, seconds: float) -> None:
    """Drive the session from the event loop and redraw on every frame."""
    with Live(_frame_table([]), console=console, refresh_per_second=20) as live:
        unsubscribe = engine.session.subscribe(lambda f: live.update(_frame_table([f])))
        try:
            ticks = await engine.session.drive().run(duration=seconds)
        finally:
            unsubscribe()
    console.print(f"[dim]{ticks} ticks[/dim]")


@app.command()
def version():
    """Show version information."""
    from physviz import __version__
    
    console.print(f"PhysViz v{__version__}")


if __name__ == "__main__":
    app()

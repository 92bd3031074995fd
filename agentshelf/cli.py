"""agentshelf CLI entry point."""
import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from agentshelf.commands import CommandRegistry, render_command
from agentshelf.config import Config, load_config
from agentshelf.exceptions import AgentShelfError
from agentshelf.skills import SkillRegistry
from agentshelf.validation import ValidationReport, validate_path

APP_HELP = "Load, validate and render agent skill and command documents."

app = typer.Typer(add_completion=False, help=APP_HELP)
console = Console()

SEVERITY_STYLES = {"error": "red", "warning": "yellow"}


def _load(config_path: Path | None, project: Path | None) -> Config:
    try:
        config = load_config(config_path)
    except AgentShelfError as e:
        console.print(f"❌ {e}", style="red")
        raise typer.Exit(code=1)
    if project is not None:
        config.project_path = str(project.resolve())
    return config


ProjectOption = typer.Option(None, "--project", "-p", help="Project directory with a .claude folder")
ConfigOption = typer.Option(None, "--config", help="Path to config.yaml")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    from agentshelf.main import setup_logging

    setup_logging(logging.DEBUG if verbose else logging.WARNING)


@app.command("list")
def list_documents(
    kind: str = typer.Option("all", "--kind", "-k", help="commands, skills or all"),
    project: Path | None = ProjectOption,
    config_path: Path | None = ConfigOption,
) -> None:
    """List discovered commands and skills."""
    if kind not in ("all", "commands", "skills"):
        console.print(f"❌ Unknown kind: {kind}", style="red")
        raise typer.Exit(code=2)

    config = _load(config_path, project)

    if kind in ("all", "commands"):
        registry = CommandRegistry(config)
        registry.refresh()
        console.print(f"Commands ({len(registry.commands)})", style="bold cyan")
        for cmd in sorted(registry.commands, key=lambda c: c.qualified_name):
            hint = f" {cmd.argument_hint}" if cmd.argument_hint else ""
            console.print(
                escape(f"  /{cmd.qualified_name}{hint}  ") + f"[dim]{escape(cmd.description)} ({cmd.source})[/dim]",
                highlight=False,
            )

    if kind in ("all", "skills"):
        skills = SkillRegistry(config)
        skills.refresh()
        console.print(f"Skills ({len(skills.skills)})", style="bold cyan")
        for skill in sorted(skills.skills, key=lambda s: s.qualified_name):
            console.print(
                f"  {escape(skill.qualified_name)}  [dim]{escape(skill.description)} ({skill.source})[/dim]",
                highlight=False,
            )


@app.command()
def show(
    name: str = typer.Argument(..., help="Command or skill name"),
    project: Path | None = ProjectOption,
    config_path: Path | None = ConfigOption,
) -> None:
    """Print a command or skill document."""
    config = _load(config_path, project)
    name = name.lstrip("/")

    registry = CommandRegistry(config)
    registry.refresh()
    cmd = registry.get(name)
    if cmd is not None:
        console.print(f"/{cmd.qualified_name}", style="bold cyan")
        console.print(f"{escape(cmd.description)}  [dim]({cmd.source}: {escape(str(cmd.path))})[/dim]", highlight=False)
        if cmd.allowed_tools:
            console.print("allowed-tools: " + ", ".join(str(r) for r in cmd.allowed_tools), style="dim", markup=False)
        console.print()
        console.print(cmd.prompt, markup=False, highlight=False)
        return

    skills = SkillRegistry(config)
    skills.refresh()
    skill = skills.get(name)
    if skill is not None:
        console.print(skill.qualified_name, style="bold cyan")
        console.print(f"{escape(skill.description)}  [dim]({skill.source}: {escape(str(skill.path))})[/dim]", highlight=False)
        for ref in skill.references:
            mark = "✅" if ref.exists else "❌"
            console.print(f"  {mark} {ref.target}", style="dim", markup=False)
        console.print()
        console.print(skill.body, markup=False, highlight=False)
        return

    console.print(f"❌ Not found: {name}", style="red")
    raise typer.Exit(code=1)


@app.command()
def validate(
    paths: list[Path] = typer.Argument(None, help="Files or directories (default: discovered locations)"),
    strict: bool = typer.Option(False, "--strict", help="Fail on warnings too"),
    project: Path | None = ProjectOption,
    config_path: Path | None = ConfigOption,
) -> None:
    """Validate documents; exit code 1 on failure."""
    config = _load(config_path, project)
    strict = strict or config.validation.strict

    if not paths:
        paths = [config.discovery.home_path]
        if config.project_path:
            paths.append(Path(config.project_path) / ".claude")
        paths = [p for p in paths if p.is_dir()]

    report = ValidationReport()
    for path in paths:
        report.merge(validate_path(path, project_path=config.project_path, config=config))

    for issue in report.issues:
        console.print(str(issue), style=SEVERITY_STYLES.get(issue.severity), markup=False, highlight=False)

    summary = (
        f"{report.checked} document(s): "
        f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)"
    )
    if report.failed(strict):
        console.print(f"❌ {summary}", style="bold red")
        raise typer.Exit(code=1)
    console.print(f"✅ {summary}", style="bold green")


@app.command()
def render(
    name: str = typer.Argument(..., help="Command name"),
    args: list[str] = typer.Argument(None, help="Arguments for $ARGUMENTS / $1..$9"),
    run_shell: bool = typer.Option(False, "--run-shell", help="Execute permitted !`cmd` placeholders"),
    project: Path | None = ProjectOption,
    config_path: Path | None = ConfigOption,
) -> None:
    """Print the prompt a command expands to."""
    config = _load(config_path, project)

    registry = CommandRegistry(config)
    registry.refresh()
    cmd = registry.get(name)
    if cmd is None:
        console.print(f"❌ Unknown command: /{name.lstrip('/')}", style="red")
        raise typer.Exit(code=1)

    cwd = config.project_path or str(Path.cwd())
    try:
        rendered = asyncio.run(
            render_command(
                cmd,
                " ".join(args or []),
                cwd=cwd,
                run_shell=run_shell or config.render.run_shell,
                timeout=config.render.shell_timeout,
            )
        )
    except AgentShelfError as e:
        console.print(f"❌ {e}", style="red")
        raise typer.Exit(code=1)

    console.print(rendered.prompt, markup=False, highlight=False)


@app.command()
def find(
    query: list[str] = typer.Argument(..., help="Task description"),
    limit: int = typer.Option(5, "--limit", "-n"),
    project: Path | None = ProjectOption,
    config_path: Path | None = ConfigOption,
) -> None:
    """Find skills whose trigger description matches a task."""
    config = _load(config_path, project)
    skills = SkillRegistry(config)
    skills.refresh()

    matches = skills.find(" ".join(query), limit=limit)
    if not matches:
        console.print("No matching skills.", style="yellow")
        raise typer.Exit(code=1)

    for skill in matches:
        console.print(
            f"{escape(skill.qualified_name)}  [dim]{escape(skill.description)}[/dim]", highlight=False
        )


@app.command()
def bot(config_path: Path | None = ConfigOption) -> None:
    """Run the Telegram catalog bot."""
    from agentshelf.main import main as run_bot

    run_bot(config_path)


if __name__ == "__main__":
    app()

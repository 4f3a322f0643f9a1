#!/usr/bin/env python3
"""
Sandcraft CLI

Usage:
    sandcraft generate "a todo app"             # Call providers, print files + report
    sandcraft generate "a todo app" --out app/  # ...and write the project to disk
    sandcraft process response.md               # Normalize a saved LLM response
    sandcraft validate ./my-app                 # Validate a project directory
    sandcraft health                            # Provider health
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sandcraft.core.exceptions import SandcraftError
from sandcraft.models.generated_file import GeneratedFile, GenerationType
from sandcraft.models.validation import ValidationReport
from sandcraft.services.generation_pipeline import GenerationPipeline, GenerationResult
from sandcraft.services.template_validator import TemplateValidator
from sandcraft.utils.languages import resolve

# Directories never read by `validate`
SKIP_DIRS = {"node_modules", ".git", "build", "dist", "__pycache__"}


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI"""
    parser = argparse.ArgumentParser(
        prog="sandcraft",
        description="Sandcraft - turn LLM responses into runnable Sandpack React projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sandcraft generate "create a counter app"          Generate a project
  sandcraft generate "a modal" --type component      Generate a single component
  sandcraft process saved_response.md --out app/     Re-run the pipeline offline
  sandcraft validate ./app                           Score an existing project
  sandcraft health                                   Check provider keys and quotas

Providers are configured through environment variables or .env
(PRIMARY_AI_PROVIDER, FALLBACK_AI_PROVIDER, GROQ_API_KEY, GOOGLE_API_KEY, ...).
        """
    )
    parser.add_argument("--json", action="store_true", help="Print machine-readable JSON instead of tables")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    generate_parser = subparsers.add_parser("generate", help="Generate a project from a prompt")
    generate_parser.add_argument("prompt", help="What to build")
    generate_parser.add_argument(
        "--type", "-t",
        dest="generation_type",
        choices=[t.value for t in GenerationType],
        default=GenerationType.REACT.value,
        help="Generation type (selects the system prompt)"
    )
    generate_parser.add_argument("--out", "-o", help="Write the final files under this directory")

    process_parser = subparsers.add_parser("process", help="Run the pipeline on a saved LLM response")
    process_parser.add_argument("file", help="Text/markdown file holding the raw completion ('-' for stdin)")
    process_parser.add_argument("--out", "-o", help="Write the final files under this directory")

    validate_parser = subparsers.add_parser("validate", help="Validate a project directory")
    validate_parser.add_argument("directory", help="Project root (contains package.json, src/, public/)")

    subparsers.add_parser("health", help="Show provider health")

    return parser


def read_project(directory: Path) -> List[GeneratedFile]:
    """Load a project directory as Sandpack-style files (/src/App.js)"""
    files: List[GeneratedFile] = []
    for path in sorted(directory.rglob("*")):
        if not path.is_file() or SKIP_DIRS.intersection(path.relative_to(directory).parts):
            continue
        relative = "/" + path.relative_to(directory).as_posix()
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            continue
        files.append(GeneratedFile(path=relative, content=content, language=resolve(relative)))
    return files


def write_project(files: List[GeneratedFile], out_dir: Path) -> None:
    """
    Write files under `out_dir`.

    Raises:
        SandcraftError: a file path resolves outside `out_dir`
    """
    root = out_dir.resolve()
    for f in files:
        target = (root / f.path.lstrip("/")).resolve()
        if root not in target.parents:
            raise SandcraftError(f"Refusing to write outside {out_dir}: {f.path}", code="UNSAFE_PATH")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f.content, encoding="utf-8")


def render_report(console: Console, report: ValidationReport) -> None:
    status = "[green]VALID[/green]" if report.is_valid else "[red]INVALID[/red]"
    console.print(f"\nStatus: {status}   Score: [bold]{report.score}[/bold]/100")

    for error in report.initial_errors:
        marker = "[red]✗[/red]" if error in report.errors else "[yellow]~[/yellow]"
        console.print(f"  {marker} {error}")
    for error in report.errors:
        if error not in report.initial_errors:
            console.print(f"  [red]✗[/red] {error}")
    for warning in report.warnings:
        console.print(f"  [yellow]![/yellow] {warning}")
    for recommendation in report.recommendations:
        console.print(f"  {recommendation}")


def render_files(console: Console, files: List[GeneratedFile]) -> None:
    table = Table(title="Files")
    table.add_column("Path", style="cyan")
    table.add_column("Language")
    table.add_column("Lines", justify="right")
    for f in files:
        table.add_row(f.path, f.language.value, str(f.content.count("\n") + 1))
    console.print(table)


def render_result(console: Console, result: GenerationResult, as_json: bool, out: Optional[str]) -> int:
    if as_json:
        console.print_json(json.dumps(result.to_dict()))
    else:
        if result.provider:
            console.print(f"[dim]Provider: {result.provider} ({result.model}), "
                          f"tokens: {result.usage.total_tokens}[/dim]")
        render_files(console, result.files)
        render_report(console, result.report)

    if out:
        write_project(result.files, Path(out))
        if not as_json:
            console.print(f"\n[green]✓ Wrote {len(result.files)} files to {out}[/green]")

    return 0 if result.report.is_valid else 1


async def run_generate(console: Console, args: argparse.Namespace) -> int:
    from sandcraft.providers.registry import build_gateway

    pipeline = GenerationPipeline(build_gateway())
    with console.status("Generating..."):
        result = await pipeline.generate_project(args.prompt, args.generation_type)
    return render_result(console, result, args.json, args.out)


async def run_health(console: Console, as_json: bool) -> int:
    from sandcraft.providers.registry import build_gateway

    health = await build_gateway().health()
    if as_json:
        console.print_json(json.dumps(health))
    else:
        table = Table(title="Providers")
        table.add_column("Role")
        table.add_column("Provider", style="cyan")
        table.add_column("Model")
        table.add_column("Status")
        table.add_column("Requests this minute", justify="right")
        for role, status in health.items():
            if status is None:
                table.add_row(role, "-", "-", "[dim]disabled[/dim]", "-")
                continue
            colour = "green" if status["available"] else "red"
            label = status["status"] + (f": {status['error']}" if status.get("error") else "")
            window = status["rate_limit"]
            table.add_row(role, status["provider"], status["model"],
                          f"[{colour}]{label}[/{colour}]", f"{window['requests']}/{window['max']}")
        console.print(table)

    return 0 if health["primary"]["available"] else 1


def main():
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args()
    console = Console()

    if not args.command:
        parser.print_help()
        sys.exit(2)

    try:
        if args.command == "generate":
            code = asyncio.run(run_generate(console, args))

        elif args.command == "process":
            raw = sys.stdin.read() if args.file == "-" else Path(args.file).read_text(encoding="utf-8")
            result = GenerationPipeline().process_response(raw)
            code = render_result(console, result, args.json, args.out)

        elif args.command == "validate":
            directory = Path(args.directory)
            if not directory.is_dir():
                console.print(f"[red]✗ Not a directory: {directory}[/red]")
                sys.exit(2)
            files = read_project(directory)
            if args.json:
                report = TemplateValidator.generate_report(files)
                console.print_json(json.dumps(report))
                code = 0 if report["status"] == "VALID" else 1
            else:
                report = TemplateValidator.validate(files)
                console.print(f"[dim]{len(files)} files checked in {directory}[/dim]")
                render_report(console, report)
                code = 0 if report.is_valid else 1

        else:
            code = asyncio.run(run_health(console, args.json))

    except KeyboardInterrupt:
        console.print("\n\nCancelled.")
        sys.exit(130)
    except SandcraftError as e:
        console.print(f"\n[red]✗ {e.message}[/red]")
        sys.exit(1)
    except OSError as e:
        console.print(f"\n[red]✗ {escape(str(e))}[/red]")
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()

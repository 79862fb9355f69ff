"""Command-line interface for gitlogjson."""

import sys
import time
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console

from gitlogjson.__version__ import __version__
from gitlogjson.exceptions import GitLogJSONError, MalformedInputError
from gitlogjson.extractor import CommitStreamExtractor, build_log_format, repository_name
from gitlogjson.models import ExportResult, TagToken
from gitlogjson.reporters import JSONReporter, default_report_name
from gitlogjson.serializer import TaggedStreamSerializer
from gitlogjson.utils.config import Config, MERGE_VIEWS
from gitlogjson.utils.logging import setup_logger


console = Console()
logger = None


@click.group()
@click.version_option(version=__version__, prog_name="gitlogjson")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--json-logs", is_flag=True, help="Use structured JSON logging (for automation)"
)
@click.pass_context
def cli(ctx, verbose, json_logs):
    """gitlogjson - Export git commit history as JSON."""
    global logger
    logger = setup_logger(verbose=verbose, json_format=json_logs)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["json_logs"] = json_logs


@cli.command()
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to configuration file (.yml, .yaml, or .json)",
)
@click.option("--repo", "-r", help="Path to the git repository (default: current directory)")
@click.option("--output", "-d", help="Output directory for the report (default: ./reports)")
@click.option("--name", "-n", "output_name", help="Report filename without extension")
@click.option("--branch", "-b", help="Branch or revision to export (default: HEAD)")
@click.option("--since", help="Only commits more recent than this date")
@click.option("--until", help="Only commits older than this date")
@click.option("--limit", "-l", type=int, help="Maximum number of commits to export")
@click.option("--path", "-p", "paths", multiple=True, help="Limit to commits touching this path")
@click.option(
    "--merges",
    "merge_view",
    type=click.Choice(MERGE_VIEWS),
    help="Include, exclude, or only export merge commits",
)
@click.option("--no-mailmap", is_flag=True, help="Do not apply .mailmap to names and emails")
@click.option("--stdout", "to_stdout", is_flag=True, help="Write JSON to stdout instead of a file")
@click.pass_context
def export(
    ctx,
    config: Optional[str],
    repo: Optional[str],
    output: Optional[str],
    output_name: Optional[str],
    branch: Optional[str],
    since: Optional[str],
    until: Optional[str],
    limit: Optional[int],
    paths: Tuple[str, ...],
    merge_view: Optional[str],
    no_mailmap: bool,
    to_stdout: bool,
):
    """
    Export commit history of a repository as a JSON array.

    Examples:

      # Export the current repository to ./reports
      gitlogjson export

      # Export one branch of another repository
      gitlogjson export --repo ../project --branch develop

      # Last 100 non-merge commits since January
      gitlogjson export --since 2024-01-01 --limit 100 --merges exclude

      # Pipe into jq
      gitlogjson export --stdout | jq '.[].subject'
    """
    try:
        if config:
            try:
                cfg = Config.from_file(config)
                if not to_stdout:
                    console.print(f"[dim]Loaded configuration from: {config}[/dim]\n")
            except (FileNotFoundError, ValueError) as e:
                console.print(f"[red]Error loading config file: {e}[/red]")
                sys.exit(2)
        else:
            try:
                cfg = Config()
            except ValueError as e:
                console.print(f"[red]Error: {e}[/red]")
                sys.exit(2)

        # CLI arguments take precedence over the config file
        if repo:
            cfg.repo_path = repo
        if output:
            cfg.output_dir = output
        if output_name:
            cfg.output_name = output_name
        if branch:
            cfg.branch = branch
        if since:
            cfg.since = since
        if until:
            cfg.until = until
        if limit is not None:
            cfg.limit = limit
        if paths:
            cfg.pathspec = list(paths)
        if merge_view:
            cfg.merge_view = merge_view
        if no_mailmap:
            cfg.use_mailmap = False

        cfg.verbose = ctx.obj["verbose"]
        cfg.json_logs = ctx.obj["json_logs"]

        try:
            cfg.validate()
        except ValueError as e:
            console.print(f"[red]Error: {e}[/red]")
            sys.exit(2)

        if not to_stdout:
            console.print("\n[bold blue]gitlogjson[/bold blue]\n")
            console.print(f"[bold]Exporting repository:[/bold] {cfg.repo_path}\n")

        result, document = _run_export(cfg)

        if to_stdout:
            click.echo(document, nl=False)
            return

        reporter = JSONReporter(cfg.output_dir)
        filename = cfg.output_name or default_report_name(result.repo_name, cfg.branch)
        result.output_path = reporter.generate_report(document, filename)
        logger.info("Export finished", extra={"export": result.to_dict()})

        _display_summary(result)
        console.print("\n[green]✅ Export complete![/green]\n")

    except KeyboardInterrupt:
        console.print("\n[yellow]Export cancelled by user[/yellow]")
        sys.exit(130)

    except MalformedInputError as e:
        logger.error(f"Malformed git log stream: {e}", extra={"line_number": e.line_number})
        console.print(f"\n[red]Error: Malformed input - {e}[/red]")
        sys.exit(2)

    except GitLogJSONError as e:
        console.print(f"\n[red]Error: {e}[/red]")
        if ctx.obj["verbose"]:
            console.print_exception()
        sys.exit(2)


def _run_export(cfg: Config) -> Tuple[ExportResult, str]:
    """Extract and serialize; nothing is written if either step fails."""
    start = time.monotonic()
    tag = TagToken.generate()

    extractor = CommitStreamExtractor(cfg)
    stream = extractor.extract(tag)

    serializer = TaggedStreamSerializer(tag)
    document = serializer.serialize(stream)

    duration = time.monotonic() - start
    logger.debug(
        f"Exported {serializer.commit_count} commits in {duration:.2f}s",
        extra={
            "repo_path": cfg.repo_path,
            "commit_count": serializer.commit_count,
            "duration": round(duration * 1000),
        },
    )

    result = ExportResult(
        repo_name=repository_name(cfg.repo_path),
        commit_count=serializer.commit_count,
        branch=cfg.branch,
        duration=duration,
    )
    return result, document


def _display_summary(result: ExportResult):
    """Display export summary."""
    console.print("\n[bold]📊 Export Summary[/bold]\n")

    console.print(f"  Repository:  {result.repo_name}")
    if result.branch:
        console.print(f"  Branch:      {result.branch}")
    console.print(f"  Commits:     {result.commit_count}")
    if result.duration is not None:
        console.print(f"  Duration:    {result.duration:.1f}s")
    console.print(f"  Output:      {result.output_path}")


@cli.command()
@click.argument("tagged_stream", type=click.File("rb"))
@click.option("--tag", "-t", required=True, help="Delimiter the stream was produced with")
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False), help="Output file (default: stdout)"
)
def convert(tagged_stream, tag, output):
    """
    Convert a saved tagged git log stream into a JSON array.

    Use '-' to read from stdin. The stream must have been produced with
    the template printed by 'gitlogjson template' for the same tag.

    Examples:

      git log --pretty="$(gitlogjson template --tag @@T@@)" > log.txt
      gitlogjson convert log.txt --tag @@T@@ --output log.json
    """
    try:
        text = tagged_stream.read().decode("utf-8", errors="replace")
        serializer = TaggedStreamSerializer(TagToken(tag))
        document = serializer.serialize(text)
    except MalformedInputError as e:
        logger.error(f"Malformed tagged stream: {e}", extra={"line_number": e.line_number})
        console.print(f"[red]Error: Malformed input - {e}[/red]")
        sys.exit(2)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(2)

    if output:
        with open(output, "w", encoding="utf-8", newline="\n") as f:
            f.write(document)
        console.print(
            f"[green]✓[/green] Wrote {serializer.commit_count} commits to {Path(output)}"
        )
    else:
        click.echo(document, nl=False)


@cli.command()
@click.option("--tag", "-t", help="Delimiter to embed (default: a random token)")
def template(tag):
    """Print the git --pretty template used for exports."""
    try:
        token = TagToken(tag) if tag else TagToken.generate()
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(2)
    click.echo(build_log_format(token))


if __name__ == "__main__":
    cli(obj={})

#!/usr/bin/env python3
"""
Command-line interface for docsflow.
"""

import click
import sys
from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import Config
from .errors import DocsflowError
from .generator import GeneratorSettings
from .pipeline import PipelineContext, build_docs_pipeline
from .project import inspect_project
from .utils import logger, set_log_level

console = Console()


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True), help='Config file path')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Quiet output')
@click.version_option(__version__, '--version', '-V', prog_name='docsflow')
@click.pass_context
def cli(ctx, config, verbose, quiet):
    """docsflow - Generate and publish API documentation"""
    ctx.ensure_object(dict)
    try:
        ctx.obj['config'] = Config(config)
    except DocsflowError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet

    if verbose:
        set_log_level('DEBUG')
    elif quiet:
        set_log_level('ERROR')
    else:
        set_log_level(ctx.obj['config'].config.logging.level)


@cli.command(context_settings={'ignore_unknown_options': True})
@click.option('--publish/--no-publish', default=None,
              help='Push the generated docs to GitHub Pages (needs GITHUB_TOKEN and GITHUB_REPOSITORY)')
@click.option('--user', help='Commit author name for the published docs')
@click.option('--email', help='Commit author email for the published docs')
@click.option('--message', '-m', help='Commit message for the published docs')
@click.option('--directory', '-d', type=click.Path(file_okay=False), help='Project directory')
@click.argument('forwarded', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def docs(ctx, publish, user, email, message, directory, forwarded):
    """Generate API documentation with typedoc.

    Arguments after -- are passed to typedoc unchanged.
    """
    config = ctx.obj['config']
    config.merge_cli_options({
        'publish.enabled': publish,
        'publish.user': user,
        'publish.email': email,
        'publish.message': message,
    })
    settings = config.config

    try:
        preconditions = inspect_project(directory)
        context = PipelineContext(
            preconditions=preconditions,
            forwarded_flags=list(forwarded),
            publish=settings.publish.enabled,
            publish_settings=settings.publish,
            settings=GeneratorSettings.from_config(settings.docs),
        )
        pipeline = build_docs_pipeline(settings.docs.output_dir, console=console)
        pipeline.run(context)
    except (DocsflowError, OSError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        logger.debug("Documentation pipeline failed", exc_info=True)
        sys.exit(1)

    console.print(f"[green]✓[/green] Documentation written to [blue]{escape(str(context.output_path))}[/blue]")


@cli.command()
def version():
    """Show version information."""
    console.print(f"docsflow {__version__}")


def main():
    """Main entry point."""
    try:
        cli(obj={})
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)


if __name__ == "__main__":
    main()

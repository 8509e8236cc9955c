# === FILE: lesson_scout/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point of LessonScout.

Commands:
  crawl     Run one incremental crawl and store a new snapshot
  config    Show the effective configuration
  snapshot  Summarise (or export) the latest stored snapshot

Global options:
  --config PATH       Path to the YAML/JSON config (default: configs/default.yaml)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only when omitted)
  --log-format FORMAT Logging format string
  --debug-logger NAME DEBUG output for one stage, e.g. crawler.fetcher (repeatable)

Example:
  lesson_scout --config configs/default.yaml crawl --retries 5
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from lesson_scout import __version__
from lesson_scout.config import load_config
from lesson_scout.logger import DEFAULT_FORMAT, configure
from lesson_scout.report import render_json, select_records, summarize
from lesson_scout.runner import start_crawl
from lesson_scout.storage import LocalSnapshotStore

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='LessonScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default='configs/default.yaml',
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Path to the YAML or JSON config file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stdout when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.option(
    '--debug-logger', 'debug_loggers',
    multiple=True,
    metavar='NAME',
    help='Log one stage at DEBUG, e.g. crawler.resource_policy (repeatable)'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format, debug_loggers):
    """LessonScout command group."""
    configure(
        level=log_level,
        log_file=log_file,
        log_format=log_format,
        debug_loggers=debug_loggers
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Cannot load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option('--retries', '-r', type=click.IntRange(min=1), default=None,
              help='Attempts per URL (overrides config)')
@click.option('--headed', is_flag=True, help='Show the browser window')
@click.pass_context
def crawl(ctx, retries, headed):
    """Run one incremental crawl."""
    cfg = ctx.obj['config']
    update = {}
    if retries is not None:
        update['retries'] = retries
    if headed:
        update['headless'] = False
    if update:
        cfg = cfg.model_copy(update=update)

    click.echo(f'Starting crawl of {cfg.subject_key}: {cfg.root_url}')
    result = asyncio.run(start_crawl(cfg))

    click.echo(
        f'state={result.state.value} prior={result.prior_count} new={len(result.new_records)} '
        f'skipped={result.skipped} failed_items={len(result.failed_items)} '
        f'failed_pages={len(result.failed_pages)}'
    )
    if not result.ok:
        print_error(f'Crawl failed: {result.error}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the current configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


@cli.command('snapshot', context_settings=CONTEXT_SETTINGS)
@click.option('--invalid', 'only_invalid', is_flag=True, help='Only records whose page could not be parsed')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Export the records to a JSON file'
)
@click.pass_context
def show_snapshot(ctx, only_invalid, json_output):
    """Summarise the latest stored snapshot."""
    cfg = ctx.obj['config']
    store = LocalSnapshotStore(cfg.storage_dir)
    try:
        snapshot = asyncio.run(store.get_last_snapshot(cfg.subject_key))
    except Exception as e:
        print_error(f'Cannot read snapshot: {e}')

    if json_output:
        saved = render_json(snapshot, json_output, only_invalid=only_invalid)
        click.echo(f'JSON export: {saved}')
        return

    click.echo(json.dumps(summarize(snapshot), ensure_ascii=False, indent=2))
    if only_invalid:
        for record in select_records(snapshot, only_invalid=True):
            click.echo(f'{record.id}\t{record.url}')


if __name__ == "__main__":
    cli()

"""
Simple CLI to load articles manually and inspect the curated related set.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from typing import Optional

import click
from dotenv import load_dotenv

from wikifeed.errors import ExhaustedRetries
from wikifeed.export import view_model_to_dict
from wikifeed.feed import ArticleFeed
from wikifeed.models import ArticleViewModel
from wikifeed.settings import load_settings
from wikifeed.status import build_status


def _emit(view: Optional[ArticleViewModel]) -> None:
    if view is None:
        click.echo("No article found.", err=True)
        sys.exit(1)
    click.echo(json.dumps(view_model_to_dict(view), ensure_ascii=False, indent=2))


@click.group()
@click.option("--config", "config_path", default=None, help="Path to a wikifeed.yaml file.")
@click.option("--verbose", is_flag=True, help="Log retries and enrichment details.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], verbose: bool):
    load_dotenv(os.getenv("WIKIFEED_DOTENV", ".env"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.obj = ArticleFeed(load_settings(config_path))


@cli.command()
@click.argument("title")
@click.pass_obj
def show(feed: ArticleFeed, title: str):
    """Load TITLE and print its view-model as JSON."""
    try:
        _emit(feed.load_title(title))
    except ExhaustedRetries as exc:
        raise click.ClickException(str(exc))


@cli.command()
@click.pass_obj
def random(feed: ArticleFeed):
    """Load a random article."""
    try:
        _emit(feed.load_random())
    except ExhaustedRetries as exc:
        raise click.ClickException(str(exc))


@cli.command()
@click.argument("query")
@click.pass_obj
def search(feed: ArticleFeed, query: str):
    """Load the best full-text match for QUERY."""
    try:
        _emit(feed.load_query(query))
    except ExhaustedRetries as exc:
        raise click.ClickException(str(exc))


@cli.command()
@click.pass_obj
def status(feed: ArticleFeed):
    """Print upstream health and cache usage."""
    click.echo(json.dumps(build_status(feed), indent=2))


if __name__ == "__main__":  # pragma: no cover
    cli()

"""``contractorcli records`` commands."""

from __future__ import annotations

import json
from typing import Optional

import click

from contractorcli.commands.common import CLIState, pass_state
from contractorcli.core.exceptions import ArgumentError
from contractorcli.resources import catalog


def parse_query(text: str) -> dict:
    try:
        query = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ArgumentError(f"--query is not valid JSON: {exc}") from exc
    if not isinstance(query, dict):
        raise ArgumentError("--query must be a JSON object")
    return query


@click.group("records")
def records() -> None:
    """Work with Records."""


@records.command("query")
@click.option("--group", "-g", required=True, help="Record group to search, ie: Structure or Foundation.")
@click.option("--query", "-q", "query_text", required=True, help='Query as a JSON object, ie: {"hostname": "web01"}.')
@click.option("--fields", "-f", default=None, help="Comma delimited list of fields to return.")
@click.option("--max-results", "-m", type=int, default=100, show_default=True, help="Maximum records to return.")
@pass_state
def records_query(
    state: CLIState, group: str, query_text: str, fields: Optional[str], max_results: int
) -> None:
    """Query the Recorder."""
    query = parse_query(query_text)
    field_list = [name.strip() for name in fields.split(",") if name.strip()] if fields else None
    result = state.contractor.accessor(catalog.RECORDER).call(
        "query", group=group, query=query, fields=field_list, max_results=max_results
    )
    state.renderer.records(result or [])

"""Output rendering for CLI commands.

Everything a command prints goes through a Renderer: JSON (indented one space
per level) when --json is given, otherwise a jinja2 text template.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable, Mapping, Union

import click
from jinja2 import Environment

from contractorcli.cinp.uri import extract_id, extract_id_list
from contractorcli.resources.binding import Resource

Renderable = Union[Resource, Mapping[str, Any]]


def _build_environment() -> Environment:
    env = Environment(
        autoescape=False,
        keep_trailing_newline=True,
    )
    env.filters["extract_id"] = extract_id
    env.filters["extract_id_list"] = extract_id_list
    return env


def template_context(value: Renderable) -> dict[str, Any]:
    """Template variables: the field values plus ``uri`` and ``id``."""
    if isinstance(value, Resource):
        return {**value.values, "uri": value.uri, "id": value.id}
    context = dict(value)
    uri = context.get("uri")
    if isinstance(uri, str):
        context.setdefault("id", extract_id(uri))
    return context


def to_jsonable(value: Any) -> Any:
    if isinstance(value, Resource):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def format_table(header: list[str], rows: list[list[str]]) -> list[str]:
    """Lay out rows as aligned text columns under a header."""
    column_count = max([len(header)] + [len(row) for row in rows])
    header = header + [""] * (column_count - len(header))
    rows = [row + [""] * (column_count - len(row)) for row in rows]
    widths = [max(len(line[index]) for line in [header] + rows) for index in range(column_count)]

    def _line(cells: list[str]) -> str:
        return "  ".join(cell.ljust(widths[index]) for index, cell in enumerate(cells)).rstrip()

    lines = [_line(header), _line(["-" * width for width in widths])]
    lines.extend(_line(row) for row in rows)
    return lines


class Renderer:
    def __init__(self, as_json: bool = False, echo: Callable[[str], None] = click.echo):
        self.as_json = as_json
        self._echo = echo
        self._env = _build_environment()

    def _dump(self, value: Any) -> None:
        self._echo(json.dumps(to_jsonable(value), indent=1, default=str))

    def render_template(self, template: str, value: Renderable) -> str:
        return self._env.from_string(template).render(template_context(value))

    def detail(self, value: Renderable, template: str) -> None:
        if self.as_json:
            self._dump(value)
            return
        self._echo(self.render_template(template, value).rstrip("\n"))

    def list(self, items: Iterable[Renderable], header: list[str], row_template: str) -> None:
        items = list(items)
        if self.as_json:
            self._dump(items)
            return
        compiled = self._env.from_string(row_template)
        rows = [compiled.render(template_context(item)).rstrip("\n").split("\t") for item in items]
        for line in format_table(header, rows):
            self._echo(line)

    def kv(self, values: Mapping[str, Any]) -> None:
        if self.as_json:
            self._dump(dict(values))
            return
        for key in sorted(values):
            self._echo(f"{key}:\t{values[key]}")

    def records(self, items: Iterable[Any]) -> None:
        """One line per record; mappings are written as compact JSON."""
        items = list(items)
        if self.as_json:
            self._dump(items)
            return
        for item in items:
            self._echo(item if isinstance(item, str) else json.dumps(item, sort_keys=True, default=str))

    def message(self, text: str) -> None:
        """Status line; suppressed in JSON mode so output stays parseable."""
        if not self.as_json:
            self._echo(text)

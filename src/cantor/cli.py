from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional
import importlib
import itertools
import json

import typer

from cantor.config import OUTPUT_FORMATS, cli_defaults, max_bits, output_format
from cantor.derive import resolve_domain
from cantor.exceptions import CantorError
from cantor.finite import Finite
from cantor.runtime.policy_runtime import runtime_policy_from_config, runtime_policy_scope
from cantor.schema import CountWidthDTO, WidthEntryDTO, WidthLadderDTO
from cantor.uint import MAX_BITS, bits_for_count, uint_for_bits, width_for_count

app = typer.Typer(add_completion=False)

_FORMAT_HELP = f"Output format: {' or '.join(OUTPUT_FORMATS)} (defaults to [cli] format)."


@contextmanager
def _cli_policy_scope(config_path: Optional[Path]) -> Iterator[None]:
    with runtime_policy_scope(runtime_policy_from_config(config_path=config_path)):
        yield


def _resolve_format(requested: Optional[str], config_path: Optional[Path]) -> str:
    if requested is not None:
        normalized = requested.strip().lower()
        if normalized not in OUTPUT_FORMATS:
            raise typer.BadParameter(f"Unknown format: {requested}")
        return normalized
    return output_format(cli_defaults(config_path=config_path))


def _emit_json(payload: object) -> None:
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))


def _count_width(count: int) -> CountWidthDTO:
    width = width_for_count(count)
    bitmap_width: str | None = None
    if count <= MAX_BITS:
        bitmap_width = uint_for_bits(count).name
    return CountWidthDTO(
        count=count,
        bits=bits_for_count(count),
        width=width.name,
        byte_size=width.byte_size,
        bitmap_width=bitmap_width,
    )


def _load_domain(target: str) -> Finite[object]:
    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise typer.BadParameter("Target must look like 'package.module:Name'.")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise typer.BadParameter(f"Cannot import {module_name}: {exc}") from exc
    obj: object = module
    for part in attribute.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise typer.BadParameter(f"{module_name} has no attribute {attribute}") from exc
    try:
        return resolve_domain(obj)  # type: ignore[arg-type]
    except CantorError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command("widths")
def widths(
    limit: Optional[int] = typer.Option(None, "--max-bits", min=0),
    fmt: Optional[str] = typer.Option(None, "--format", help=_FORMAT_HELP),
    config_path: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Print the bit count -> unsigned width registry."""
    resolved_format = _resolve_format(fmt, config_path)
    top = limit if limit is not None else max_bits(cli_defaults(config_path=config_path))
    try:
        entries = [
            WidthEntryDTO(
                bits=bits,
                width=uint_for_bits(bits).name,
                width_bits=uint_for_bits(bits).bits,
                byte_size=uint_for_bits(bits).byte_size,
            )
            for bits in range(top + 1)
        ]
    except CantorError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if resolved_format == "json":
        _emit_json(WidthLadderDTO(entries=entries).model_dump())
        return
    for entry in entries:
        typer.echo(f"{entry.bits:>3}  {entry.width:<5} {entry.byte_size:>2} bytes")


@app.command("width")
def width(
    count: int = typer.Argument(..., min=0, help="Number of values in the domain."),
    fmt: Optional[str] = typer.Option(None, "--format", help=_FORMAT_HELP),
    config_path: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Print the bits and widths needed for a domain of COUNT values."""
    resolved_format = _resolve_format(fmt, config_path)
    try:
        result = _count_width(count)
    except CantorError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if resolved_format == "json":
        _emit_json(result.model_dump())
        return
    typer.echo(f"count:  {result.count}")
    typer.echo(f"bits:   {result.bits}")
    typer.echo(f"width:  {result.width} ({result.byte_size} bytes)")
    typer.echo(f"bitmap: {result.bitmap_width or 'unsupported'}")


@app.command("inspect")
def inspect_domain(
    target: str = typer.Argument(..., help="Registered type as 'package.module:Name'."),
    show: int = typer.Option(8, "--values", min=0, help="How many values to list."),
    fmt: Optional[str] = typer.Option(None, "--format", help=_FORMAT_HELP),
    config_path: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Describe the finite domain registered for a type."""
    resolved_format = _resolve_format(fmt, config_path)
    with _cli_policy_scope(config_path):
        domain = _load_domain(target)
        try:
            summary = _count_width(domain.count)
        except CantorError as exc:
            raise typer.BadParameter(str(exc)) from exc
        listed = [repr(value) for value in itertools.islice(domain.values(), show)]
    if resolved_format == "json":
        payload = summary.model_dump()
        payload["domain"] = repr(domain)
        payload["values"] = listed
        _emit_json(payload)
        return
    typer.echo(f"domain: {domain!r}")
    typer.echo(f"count:  {summary.count}")
    typer.echo(f"width:  {summary.width} ({summary.byte_size} bytes)")
    typer.echo(f"bitmap: {summary.bitmap_width or 'unsupported'}")
    for index, value in enumerate(listed):
        typer.echo(f"  {index:>4}  {value}")


def main() -> None:
    app()

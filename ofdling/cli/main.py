import logging
import time
from pathlib import Path
from typing import Annotated, Optional

import rich.table
import typer
from rich.console import Console

from ofdling.datamodel.backend_options import OfdBackendOptions
from ofdling.datamodel.document import OfdDocument, OfdlingVersion
from ofdling.exceptions import OfdError

_log = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)


app = typer.Typer(
    name="ofdling",
    no_args_is_help=True,
    add_completion=False,
    pretty_exceptions_enable=False,
)


def version_callback(value: bool):
    if value:
        v = OfdlingVersion()
        print(f"ofdling version: {v.ofdling_version}")
        print(f"pydantic version: {v.pydantic_version}")
        print(f"lxml version: {v.lxml_version}")
        print(f"Python: {v.py_impl_version} ({v.py_lang_version})")
        print(f"Platform: {v.platform_str}")
        raise typer.Exit()


def _print_pages(doc: OfdDocument) -> None:
    table = rich.table.Table(title=f"Pages of {doc.doc_root_path}")
    table.add_column("#", justify="right")
    table.add_column("ID")
    table.add_column("Entry")
    for page in doc.page_refs():
        table.add_row(str(page.index), page.page_id, page.entry)
    err_console.print(table)


@app.command(no_args_is_help=True)
def info(
    source: Annotated[
        Path,
        typer.Argument(
            ...,
            metavar="source",
            help="Path to the OFD file.",
        ),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Write the metadata JSON to this file instead of stdout.",
        ),
    ] = None,
    indent: Annotated[
        Optional[int],
        typer.Option(..., help="Indentation of the JSON output."),
    ] = 2,
    pages: Annotated[
        bool,
        typer.Option(..., help="Also list the pages of the document on stderr."),
    ] = False,
    max_entry_size: Annotated[
        Optional[int],
        typer.Option(..., help="Largest archive entry to read, in bytes."),
    ] = OfdBackendOptions().max_entry_size,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Set the verbosity level. -v for info logging, -vv for debug logging.",
        ),
    ] = 0,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version information.",
        ),
    ] = None,
):
    log_format = "%(asctime)s\t%(levelname)s\t%(name)s: %(message)s"

    if verbose == 0:
        logging.basicConfig(level=logging.WARNING, format=log_format)
    elif verbose == 1:
        logging.basicConfig(level=logging.INFO, format=log_format)
    else:
        logging.basicConfig(level=logging.DEBUG, format=log_format)

    if not source.exists():
        err_console.print(f"[red]Error: The input file {source} does not exist.[/red]")
        raise typer.Abort()

    options = OfdBackendOptions(max_entry_size=max_entry_size)
    start_time = time.time()
    try:
        with OfdDocument.open(source, options=options) as doc:
            snapshot = doc.snapshot(indent=indent)
            if pages:
                _print_pages(doc)
    except OfdError as err:
        err_console.print(f"[red]Error: Cannot read the OFD file {source}.[/red]")
        err_console.print(f"[red]{err}[/red]")
        raise typer.Abort()
    end_time = time.time() - start_time

    if output is not None:
        output.write_text(snapshot + "\n", encoding="utf-8")
        _log.info(f"Metadata written to {output}")
    else:
        print(snapshot)

    _log.info(f"Document read in {end_time:.2f} seconds.")


click_app = typer.main.get_command(app)

if __name__ == "__main__":
    app()

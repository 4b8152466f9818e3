"""CLI for reflex-edit-grid -- browse and edit tabular files in the browser.

Usage::

    # View a CSV / TSV / Parquet file in an editable, paginated grid
    reflex-edit-grid view contacts.csv

    # Read-only, 25 rows per page, first 5000 rows
    reflex-edit-grid view big_file.parquet --read-only --page-size 25 --limit 5000

    # Print the pager window for page 11 of 20
    reflex-edit-grid pages 20 10

Edits made in the viewer stay in memory; the file on disk is never written.
"""

import os
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Annotated, Optional

import typer

from reflex_edit_grid.pagination import (
    _DEFAULT_MAX_PAGE_BUTTONS,
    _DEFAULT_PAGE_SIZE,
    ELLIPSIS,
    page_window,
)

app = typer.Typer(
    name="reflex-edit-grid",
    help="Browse and edit tabular data files in an interactive browser grid.",
    no_args_is_help=True,
)

_SUPPORTED_SUFFIXES: set[str] = {
    ".csv", ".tsv", ".parquet", ".pq", ".json", ".ndjson", ".jsonl",
    ".ipc", ".arrow", ".feather",
}


def _build_app_code(
    file_path: Path,
    page_size: int,
    limit: int | None,
    editable: bool,
    title: str,
) -> str:
    """Generate the Reflex app module source code for the viewer."""
    abs_path = str(file_path.resolve())
    # Escape backslashes and quotes for embedding in Python string literal
    safe_path = abs_path.replace("\\", "\\\\").replace('"', '\\"')

    template = _APP_TEMPLATE
    template = template.replace("__FILENAME__", file_path.name)
    template = template.replace("__SAFE_PATH__", safe_path)
    template = template.replace("__LIMIT__", repr(limit))
    template = template.replace("__EDITABLE__", repr(editable))
    template = template.replace("__PAGE_SIZE__", str(page_size))
    template = template.replace("__TITLE__", title)
    return template


# ---------------------------------------------------------------------------
# App template -- uses __PLACEHOLDER__ tokens for dynamic parts.
# ---------------------------------------------------------------------------

_APP_TEMPLATE = '''"""Auto-generated viewer app for: __FILENAME__"""

from pathlib import Path

import reflex as rx

from reflex_edit_grid import (
    EditableGridMixin,
    editable_grid,
    editable_grid_detail_box,
    editable_grid_stats_bar,
    frame_to_grid,
    scan_file,
)


class ViewerState(EditableGridMixin, rx.State):
    """Viewer state using EditableGridMixin for in-memory editing."""

    def load_data(self):
        rows, columns = frame_to_grid(
            scan_file(Path("__SAFE_PATH__")),
            limit=__LIMIT__,
            editable=__EDITABLE__,
        )
        self.set_grid(rows, columns, page_size=__PAGE_SIZE__)


def index() -> rx.Component:
    return rx.box(
        rx.heading("__TITLE__", size="6", margin_bottom="0.5em"),
        rx.cond(
            ViewerState.eg_grid_loaded,
            rx.fragment(
                editable_grid_stats_bar(ViewerState),
                editable_grid(ViewerState, height="calc(100vh - 260px)"),
            ),
            rx.text("Loading...", color="var(--gray-9)"),
        ),
        editable_grid_detail_box(ViewerState),
        padding="2em",
        max_width="1400px",
        margin="0 auto",
    )


app = rx.App()
app.add_page(index, on_load=ViewerState.load_data)
'''


def format_page_window(items: list[int | str]) -> str:
    """Render page indicators as one-based labels, e.g. ``"1 … 9 10 11 … 20"``."""
    return " ".join(ELLIPSIS if item == ELLIPSIS else str(int(item) + 1) for item in items)


@app.command()
def view(
    file: Annotated[Path, typer.Argument(help="Path to the data file (CSV, TSV, Parquet, JSON, etc.)")],
    page_size: Annotated[int, typer.Option("--page-size", "-s", help="Rows per page")] = _DEFAULT_PAGE_SIZE,
    limit: Annotated[Optional[int], typer.Option("--limit", "-n", help="Maximum number of rows to load")] = None,
    read_only: Annotated[bool, typer.Option("--read-only", help="Disable inline cell editing")] = False,
    port: Annotated[int, typer.Option("--port", "-p", help="Port for the Reflex frontend")] = 3000,
    title: Annotated[Optional[str], typer.Option("--title", "-t", help="Page title")] = None,
) -> None:
    """View a data file in an editable, sortable, paginated browser grid."""
    file = file.resolve()
    if not file.exists():
        typer.echo(f"Error: file not found: {file}", err=True)
        raise typer.Exit(code=1)
    if file.suffix.lower() not in _SUPPORTED_SUFFIXES:
        typer.echo(f"Error: unsupported file extension: {file.suffix!r}", err=True)
        raise typer.Exit(code=1)
    if page_size <= 0:
        typer.echo(f"Error: --page-size must be positive, got {page_size}", err=True)
        raise typer.Exit(code=1)

    if title is None:
        title = f"{file.name} -- Editable Grid"

    app_code = _build_app_code(file, page_size, limit, not read_only, title)

    # Create a temporary Reflex app directory.
    tmp_dir = Path(tempfile.mkdtemp(prefix="edit_grid_viewer_"))
    app_name = "viewer_app"
    app_pkg = tmp_dir / app_name
    app_pkg.mkdir()
    (app_pkg / "__init__.py").write_text("")
    (app_pkg / f"{app_name}.py").write_text(app_code)

    rxconfig_code = f"""import reflex as rx
config = rx.Config(app_name="{app_name}", frontend_port={port})
"""
    (tmp_dir / "rxconfig.py").write_text(rxconfig_code)

    typer.echo(f"Launching viewer for: {file}")
    typer.echo(f"Page size: {page_size} | Limit: {limit or 'all'} | Editable: {not read_only} | Port: {port}")

    os.chdir(tmp_dir)

    # Step 1: initialise the Reflex project (creates .web/ with node_modules).
    # We use subprocess because reflex's CLI calls sys.exit() on completion.
    typer.echo("Initializing Reflex project...")
    subprocess.run(
        [sys.executable, "-m", "reflex", "init"],
        cwd=str(tmp_dir),
        check=True,
    )

    # Step 2: run the app via exec (replaces this process).
    typer.echo("Starting viewer...")
    os.execvp(sys.executable, [sys.executable, "-m", "reflex", "run"])


@app.command()
def pages(
    page_count: Annotated[int, typer.Argument(help="Total number of pages")],
    page_index: Annotated[int, typer.Argument(help="Current zero-based page index")] = 0,
    max_buttons: Annotated[int, typer.Option("--max-buttons", "-m", help="Maximum numbered buttons")] = _DEFAULT_MAX_PAGE_BUTTONS,
) -> None:
    """Print the pager window shown for a page of a grid."""
    if page_count < 1:
        typer.echo(f"Error: page count must be at least 1, got {page_count}", err=True)
        raise typer.Exit(code=1)
    if max_buttons < 3:
        typer.echo(f"Error: --max-buttons must be at least 3, got {max_buttons}", err=True)
        raise typer.Exit(code=1)
    clamped = max(0, min(page_index, page_count - 1))
    typer.echo(format_page_window(page_window(clamped, page_count, max_buttons)))


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

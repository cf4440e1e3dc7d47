"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdworkspace.cli.commands import (
    delete_cmd, duplicate_cmd, export_cmd, import_cmd, list_cmd, new_cmd,
    outline_cmd, rename_cmd, render_cmd, search_cmd, select_cmd, show_cmd, stats_cmd,
)


app = typer.Typer(name="mdws", no_args_is_help=True, help="Markdown document workspace")

app.command(name="list")(list_cmd)
app.command(name="new")(new_cmd)
app.command(name="show")(show_cmd)
app.command(name="rename")(rename_cmd)
app.command(name="delete")(delete_cmd)
app.command(name="duplicate")(duplicate_cmd)
app.command(name="select")(select_cmd)
app.command(name="search")(search_cmd)
app.command(name="import")(import_cmd)
app.command(name="export")(export_cmd)
app.command(name="outline")(outline_cmd)
app.command(name="render")(render_cmd)
app.command(name="stats")(stats_cmd)

import typer

from vite_mini.cli.modules import prebundle, resolve, rewrite
from vite_mini.cli.serve import serve

app = typer.Typer(
    name="vite-mini",
    help="No-bundle development server for ES module projects.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("serve")(serve)
app.command("rewrite")(rewrite)
app.command("resolve")(resolve)
app.command("prebundle")(prebundle)


def main() -> None:
    app()

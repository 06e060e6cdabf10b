"""
httpdiag command line.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import click
from rich.console import Console
from rich.markup import escape
from rich.text import Text

from httpdiag import __version__
from httpdiag.config import Settings, VisitConfig
from httpdiag.http.client import parse_headers, visit
from httpdiag.http.errors import FatalConnectError, HTTPDiagError
from httpdiag.http.events import EventKind, OutputEvent, Style
from httpdiag.logging_config import configure_logging

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

# (label style, value style)
STYLE_COLORS = {
    Style.SUCCESS: ("green", "cyan"),
    Style.INFO: ("grey62", "cyan"),
    Style.NEUTRAL: ("grey62", "grey62"),
}


def print_event(event: OutputEvent) -> None:
    """Write one output event to the terminal."""
    if event.kind in (EventKind.CONNECT, EventKind.TLS):
        console.print()

    label_style, value_style = STYLE_COLORS[event.style]
    if event.data is not None:
        console.print(Text(event.label, style=label_style), end=" ")
        console.file.flush()
        click.echo(event.data)
        return

    parts = []
    if event.label:
        parts.append((event.label, label_style))
    if event.label and event.value:
        parts.append(" ")
    if event.value:
        parts.append((event.value, value_style))
    console.print(Text.assemble(*parts), soft_wrap=True)


@click.command()
@click.argument("url")
@click.option("-X", "--method", default="GET", help="HTTP method (GET, POST, PUT, DELETE, etc.)")
@click.option("-d", "--data", default="", help="Request body data")
@click.option("-H", "--header", multiple=True, help="Headers in 'Name: Value' format")
@click.option("-i", "--connect-info", is_flag=True, help="Show request details before the response")
@click.option("-f", "--full", is_flag=True, help="Show the full response body")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write a rotating debug log")
@click.version_option(__version__, prog_name="httpdiag")
def main(url: str, method: str, data: str, header: tuple, connect_info: bool,
         full: bool, debug: bool, log_file: str | None):
    """Send one HTTP request and show how it was answered.

    Reports the peer address and negotiated TLS version, then prints the
    response headers (Server first, hop-by-hop headers last) and the body.
    By default only the first 5 and last 3 lines of the body are shown.

    \b
    Examples:
        httpdiag https://example.com
        httpdiag -i https://example.com
        httpdiag -f -X POST -d 'name=test' -H 'Content-Type: application/x-www-form-urlencoded' https://httpbin.org/post
    """
    settings = Settings.from_env()
    configure_logging(debug=debug, level=settings.log_level, log_file=log_file or settings.log_file)

    try:
        config = VisitConfig(
            url=url,
            method=method.upper(),
            body=data,
            headers=parse_headers(header),
            show_connect_info=connect_info,
            show_full_body=full,
        )
        visit(config, print_event)
    except FatalConnectError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)
    except HTTPDiagError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()

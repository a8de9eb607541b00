"""
httpsupport CLI commands.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import json

import click
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from httpsupport import __version__
from httpsupport.exceptions import HTTPSupportError
from httpsupport.http.client import HTTPClient, parse_headers, parse_params
from httpsupport.http.formats import XML, decode
from httpsupport.http.response import HTTPResponse
from httpsupport.logging_config import configure_logging


@click.group()
@click.version_option(__version__, prog_name="httpsupport")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", help="Also write logs to this file")
@click.pass_context
def main(ctx, debug: bool, log_file: str | None):
    """HTTP client convenience commands."""
    ctx.ensure_object(dict)
    configure_logging(debug=debug, log_file=log_file)


def _make_client(ctx, base_uri: str | None, timeout: float | None, insecure: bool) -> HTTPClient:
    # ctx.obj may carry a transport, used by tests
    return HTTPClient(
        base_uri=base_uri,
        timeout=timeout,
        verify_ssl=False if insecure else None,
        transport=ctx.obj.get("transport"),
    )


def _load_json(console: Console, json_data: str):
    try:
        return json.loads(json_data)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error:[/red] Invalid JSON: {e}")
        raise SystemExit(1)


def _print_response(console: Console, resp: HTTPResponse, verbose: bool, raw: bool) -> None:
    if resp.is_ok:
        status_color = "green"
    elif resp.is_redirection:
        status_color = "yellow"
    elif resp.is_client_error:
        status_color = "red"
    else:
        status_color = "red bold"

    console.print(f"[{status_color}]{resp.status_code} {resp.reason_phrase}[/{status_color}]")

    if verbose:
        table = Table(box=None, show_header=False)
        table.add_column("Header", style="cyan")
        table.add_column("Value", style="white")
        for name, value in resp.headers.multi_items():
            table.add_row(name, value)
        console.print(table)

    if resp.content and not resp.is_empty:
        console.print()
        data = None
        if not raw:
            try:
                data = resp.data
            except HTTPSupportError as e:
                console.print(f"[yellow]Warning:[/yellow] {e}")

        if data is None or isinstance(data, str):
            console.print(resp.text, markup=False, highlight=False)
        elif resp.format == XML:
            syntax = Syntax(resp.text, "xml", theme="monokai", line_numbers=False)
            console.print(syntax)
        else:
            syntax = Syntax(json.dumps(data, indent=2, default=str), "json",
                            theme="monokai", line_numbers=False)
            console.print(syntax)

    console.print(f"\n[dim]Content-Type: {resp.content_type or 'N/A'} | "
                  f"Server: {resp.server} | Size: {len(resp.content):,} bytes[/dim]")


def _send_and_print(ctx, method: str, url: str, header: tuple, param: tuple,
                    data: str | None, json_data: str | None, xml_data: str | None,
                    base_uri: str | None, timeout: float | None, insecure: bool,
                    verbose: bool, raw: bool) -> None:
    console = Console()
    headers = parse_headers(list(header))
    params = parse_params(list(param))

    client = _make_client(ctx, base_uri, timeout, insecure)
    try:
        if method == "GET":
            if json_data is not None:
                resp = client.get_json(url, params, headers)
            else:
                resp = client.get(url, params, headers)
        elif json_data is not None:
            payload = _load_json(console, json_data)
            send_json = client.post_json if method == "POST" else client.put_json
            resp = send_json(url, payload, headers)
        elif xml_data is not None and method == "POST":
            # JSON input is converted, anything else is posted verbatim
            try:
                payload = decode("json", xml_data)
            except HTTPSupportError:
                payload = None
            if not isinstance(payload, (dict, list)):
                payload = xml_data
            resp = client.post_xml(url, payload, headers)
        else:
            body = data if data is not None else params
            send = client.post if method == "POST" else client.put
            resp = send(url, body, headers)
    except HTTPSupportError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)
    finally:
        client.close()

    _print_response(console, resp, verbose, raw)


_common_options = [
    click.option("-H", "--header", multiple=True, help="Headers in 'Name: Value' format"),
    click.option("-p", "--param", multiple=True, help="Params in 'name=value' format"),
    click.option("--base-uri", help="Base URI for relative endpoints"),
    click.option("-t", "--timeout", type=float, help="Request timeout in seconds"),
    click.option("-k", "--insecure", is_flag=True, help="Disable SSL verification"),
    click.option("-v", "--verbose", is_flag=True, help="Show response headers"),
    click.option("--raw", is_flag=True, help="Show raw body without decoding"),
]


def common_options(func):
    for option in reversed(_common_options):
        func = option(func)
    return func


@main.command("get")
@click.argument("url")
@click.option("--json", "json_accept", is_flag=True, help="Ask for JSON (Accept header)")
@common_options
@click.pass_context
def get_cmd(ctx, url: str, json_accept: bool, header: tuple, param: tuple,
            base_uri: str | None, timeout: float | None, insecure: bool,
            verbose: bool, raw: bool):
    """Make a GET request; params go to the query string.

    Examples:
        httpsupport get https://api.example.com/users -p page=2
        httpsupport get /users --base-uri https://api.example.com --json
    """
    _send_and_print(ctx, "GET", url, header, param, None, "" if json_accept else None, None,
                    base_uri, timeout, insecure, verbose, raw)


@main.command("post")
@click.argument("url")
@click.option("-d", "--data", help="Raw request body")
@click.option("--json", "json_data", help="JSON request body")
@click.option("--xml", "xml_data", help="XML body, or JSON converted to XML")
@common_options
@click.pass_context
def post_cmd(ctx, url: str, data: str | None, json_data: str | None, xml_data: str | None,
             header: tuple, param: tuple, base_uri: str | None, timeout: float | None,
             insecure: bool, verbose: bool, raw: bool):
    """Make a POST request; params are sent as a form.

    Examples:
        httpsupport post https://api.example.com/form -p name=test -p value=123
        httpsupport post https://api.example.com/users --json '{"name": "test"}'
        httpsupport post https://api.example.com/pay --xml '{"amount": 100}'
    """
    _send_and_print(ctx, "POST", url, header, param, data, json_data, xml_data,
                    base_uri, timeout, insecure, verbose, raw)


@main.command("put")
@click.argument("url")
@click.option("-d", "--data", help="Raw request body")
@click.option("--json", "json_data", help="JSON request body")
@common_options
@click.pass_context
def put_cmd(ctx, url: str, data: str | None, json_data: str | None, header: tuple,
            param: tuple, base_uri: str | None, timeout: float | None, insecure: bool,
            verbose: bool, raw: bool):
    """Make a PUT request; params are sent as a form.

    Examples:
        httpsupport put https://api.example.com/users/1 --json '{"name": "new"}'
    """
    _send_and_print(ctx, "PUT", url, header, param, data, json_data, None,
                    base_uri, timeout, insecure, verbose, raw)


@main.command("download")
@click.argument("url")
@click.argument("directory", type=click.Path(file_okay=False))
@click.option("-f", "--filename", default="", help="File name (default: from headers or MD5)")
@click.option("--no-suffix", is_flag=True, help="Do not append a sniffed extension")
@common_options
@click.pass_context
def download_cmd(ctx, url: str, directory: str, filename: str, no_suffix: bool,
                 header: tuple, param: tuple, base_uri: str | None,
                 timeout: float | None, insecure: bool, verbose: bool, raw: bool):
    """Download a media file into DIRECTORY.

    Examples:
        httpsupport download https://example.com/logo ./media
        httpsupport download https://example.com/report ./out -f report.pdf
    """
    console = Console()
    headers = parse_headers(list(header))
    params = parse_params(list(param))

    client = _make_client(ctx, base_uri, timeout, insecure)
    try:
        resp = client.get(url, params, headers)
        if not resp.is_ok:
            console.print(f"[red]Error:[/red] {resp.status_code} {resp.reason_phrase}")
            raise SystemExit(1)
        written = resp.save(directory, filename, append_suffix=not no_suffix)
    except HTTPSupportError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)
    finally:
        client.close()

    console.print(f"[green]Saved {len(resp.content):,} bytes to {directory.rstrip('/')}/{written}[/green]")
    if verbose:
        console.print(f"[dim]Content-Type: {resp.content_type or 'N/A'}[/dim]")


if __name__ == "__main__":
    main()

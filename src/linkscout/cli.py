"""
linkscout CLI - Command Line Interface

Entry point for link discovery against a Crawl4AI server, server health
checks, and exporting discovered links.
"""

import asyncio
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from linkscout import __version__
from linkscout.core.constants import BrowserType, CacheMode, LinkType, OutputFormat


# Create CLI app
app = typer.Typer(
    name="linkscout",
    help="linkscout - Discover and filter links through a Crawl4AI server",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for output
console = Console()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr; DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def _set(target: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        target[key] = value


# ============================================================================
# Main Commands
# ============================================================================

@app.command()
def discover(
    urls: List[str] = typer.Argument(..., help="Page URL(s) to discover links on"),
    link_types: Optional[List[LinkType]] = typer.Option(
        None,
        "--type",
        "-t",
        help="Link type to keep (repeatable; default: internal and external)",
        case_sensitive=False,
    ),
    include: Optional[str] = typer.Option(
        None, "--include", help="Only keep URLs matching these wildcards (comma-separated)",
    ),
    exclude: Optional[str] = typer.Option(
        None, "--exclude", help="Drop URLs matching these wildcards (comma-separated)",
    ),
    exclude_types: Optional[str] = typer.Option(
        None, "--exclude-types", help="Drop links to these file extensions, e.g. 'pdf,zip'",
    ),
    exclude_social: Optional[bool] = typer.Option(
        None, "--exclude-social/--allow-social", help="Drop links to social media platforms",
    ),
    require_text: Optional[bool] = typer.Option(
        None, "--require-text/--allow-empty-text", help="Only keep links with visible anchor text",
    ),
    dedupe: Optional[bool] = typer.Option(
        None, "--dedupe/--no-dedupe", help="Remove duplicate URLs (default: on)",
    ),
    metadata: Optional[bool] = typer.Option(
        None, "--metadata/--no-metadata", help="Include link text and title (default: on)",
    ),
    output_format: Optional[OutputFormat] = typer.Option(
        None, "--format", "-f", help="Output format (default: grouped)", case_sensitive=False,
    ),
    cache_mode: Optional[CacheMode] = typer.Option(
        None, "--cache-mode", help="Crawl cache mode (default: ENABLED)", case_sensitive=False,
    ),
    browser_type: Optional[BrowserType] = typer.Option(
        None, "--browser", help="Browser engine", case_sensitive=False,
    ),
    timeout: Optional[int] = typer.Option(
        None, "--timeout", help="Page load timeout in milliseconds",
    ),
    wait_for: Optional[str] = typer.Option(
        None, "--wait-for", help="CSS selector to wait for before extracting links",
    ),
    js_code: Optional[str] = typer.Option(
        None, "--js-code", help="JavaScript to run before extracting links",
    ),
    stealth: Optional[bool] = typer.Option(
        None, "--stealth/--no-stealth", help="Enable stealth mode",
    ),
    score_links: Optional[bool] = typer.Option(
        None, "--score/--no-score", help="Let the server score links (default: on)",
    ),
    continue_on_fail: bool = typer.Option(
        False, "--continue-on-fail", help="Record failing pages and keep going",
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Server configuration file", exists=True,
    ),
    options: Optional[Path] = typer.Option(
        None, "--options", "-O", help="Discover options file (flags take precedence)", exists=True,
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write records to a .json or .jsonl file",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Verbose output",
    ),
) -> None:
    """
    Crawl page(s) and list the links found on them.
    """
    from linkscout.client.api import Crawl4aiClient
    from linkscout.client.payloads import BrowserOptions
    from linkscout.core.config import load_discover_options, load_server_config
    from linkscout.core.exceptions import LinkScoutError
    from linkscout.orchestrator.discover import (
        DiscoverLinksOperation,
        DiscoverRequest,
        FilterOptions,
        OutputOptions,
    )
    from linkscout.reporting.exporters.json import JSONExporter

    configure_logging(verbose)

    try:
        server = load_server_config(config)
        defaults = load_discover_options(options)

        filters = dict(defaults["filters"])
        _set(filters, "include_patterns", include)
        _set(filters, "exclude_patterns", exclude)
        _set(filters, "exclude_file_types", exclude_types)
        _set(filters, "exclude_social_media", exclude_social)
        _set(filters, "require_text", require_text)

        browser = dict(defaults["browser"])
        _set(browser, "browser_type", browser_type.value if browser_type else None)
        _set(browser, "timeout_ms", timeout)
        _set(browser, "wait_for", wait_for)
        _set(browser, "js_code", js_code)
        _set(browser, "enable_stealth", stealth)

        output_options = dict(defaults["output"])
        _set(output_options, "deduplicate", dedupe)
        _set(output_options, "include_metadata", metadata)
        _set(output_options, "output_format", output_format.value if output_format else None)
        _set(output_options, "cache_mode", cache_mode.value if cache_mode else None)
        _set(output_options, "score_links", score_links)

        if link_types:
            selected_types = [t.value for t in link_types]
        else:
            # An empty list from the options file is passed on and rejected
            selected_types = defaults["link_types"]

        requests = [
            DiscoverRequest(
                url=url,
                link_types=selected_types,
                filters=FilterOptions.from_dict(filters),
                browser=BrowserOptions.from_dict(browser),
                output=OutputOptions.from_dict(output_options),
            )
            for url in urls
        ]

        async def run_discovery():
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                progress.add_task(f"[cyan]Discovering links on {len(requests)} page(s)...", total=None)
                async with Crawl4aiClient(server) as client:
                    operation = DiscoverLinksOperation(client, continue_on_fail=continue_on_fail)
                    return await operation.run(requests)

        items = asyncio.run(run_discovery())

        records = [item.json for item in items]
        failed = [item for item in items if item.error]

        if output:
            count = JSONExporter().export(records, output, source_urls=list(urls))
            console.print(f"[green]✓[/green] {count} record(s) written to: {output}")
        else:
            _print_records(records)

        for item in failed:
            console.print(f"[red]Error:[/red] item {item.paired_item}: {item.error}")

        if failed and len(failed) == len(requests):
            raise typer.Exit(code=1)

    except typer.Exit:
        raise
    except LinkScoutError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


def _print_records(records: list[dict[str, Any]]) -> None:
    table = Table(title="Discovered Links")
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("URL", style="green")
    table.add_column("Text", style="dim")

    total = 0
    for record in records:
        if "internalLinks" in record:
            for link_type, key in (("internal", "internalLinks"), ("external", "externalLinks")):
                for link in record[key]:
                    table.add_row(link_type, link["href"], link.get("text", ""))
                    total += 1
        elif "type" in record:
            table.add_row(record["type"], record["url"], record.get("text", ""))
            total += 1
        elif "message" in record:
            console.print(f"[yellow]{record['sourceUrl']}:[/yellow] {record['message']}")

    if total:
        console.print(table)
    console.print(f"[blue]Total links:[/blue] {total}")


@app.command()
def health(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Server configuration file", exists=True,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Verbose output",
    ),
) -> None:
    """
    Check the Crawl4AI server health and endpoint statistics.
    """
    from linkscout.client.api import Crawl4aiClient
    from linkscout.core.config import load_server_config
    from linkscout.core.exceptions import CrawlerAPIError, LinkScoutError

    configure_logging(verbose)

    try:
        server = load_server_config(config)
    except LinkScoutError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    async def check() -> dict[str, Any]:
        record: dict[str, Any] = {
            "serverUrl": server.url,
            "checkedAt": datetime.now(timezone.utc).isoformat(),
        }
        async with Crawl4aiClient(server) as client:
            try:
                data = await client.get_monitor_health()
                record.update({
                    "status": data.get("status"),
                    "memoryPercent": data.get("memory_percent"),
                    "cpuPercent": data.get("cpu_percent"),
                    "uptimeSeconds": data.get("uptime_seconds"),
                    "activeRequests": data.get("active_requests"),
                })
                if data.get("pool_info"):
                    record["poolInfo"] = data["pool_info"]
            except CrawlerAPIError as e:
                record["healthError"] = str(e)

            try:
                record["endpointStats"] = await client.get_endpoint_stats()
            except CrawlerAPIError as e:
                record["endpointStats"] = {}
                record["statsError"] = str(e)

        return record

    record = asyncio.run(check())
    console.print(Panel.fit(
        f"Server: [yellow]{record['serverUrl']}[/yellow]\n"
        f"Status: [green]{record.get('status') or 'unknown'}[/green]",
        title="Crawl4AI Health",
    ))
    console.print_json(data=record)

    if "healthError" in record:
        raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold cyan]linkscout[/bold cyan] version [yellow]{__version__}[/yellow]")


# ============================================================================
# Entry Point
# ============================================================================

def main() -> None:
    """Main entry point for CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()

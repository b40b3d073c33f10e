"""CLI interface for the domain availability checker."""

import asyncio
import json
import logging
from pathlib import Path
from typing import List

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .checkers import AvailabilityService
from .config import DEFAULT_CONFIG_PATH
from .errors import DomainCheckError, ValidationError
from .models import Availability, CheckResult, validate_domain


console = Console()

STATUS_STYLES = {
    Availability.AVAILABLE: "green",
    Availability.PREMIUM: "yellow",
    Availability.TAKEN: "red",
    Availability.ERROR: "magenta",
}


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True
    )
    # Suppress noisy library logging (socket, whois, dns)
    logging.getLogger("whois").setLevel(logging.CRITICAL)
    logging.getLogger("dns").setLevel(logging.CRITICAL)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def collect_domains(entries: List[str], tlds: List[str]) -> List[str]:
    """Expand bare words over the TLD list and validate every domain."""
    domains = []
    for entry in entries:
        entry = entry.strip()
        if not entry:
            continue
        if '.' in entry:
            domains.append(validate_domain(entry))
        else:
            domains.extend(validate_domain(f"{entry}.{tld}") for tld in tlds)
    return domains


def read_wordlist(path: str) -> List[str]:
    with open(path) as f:
        content = f.read()
    try:
        return [str(w) for w in json.loads(content)]
    except json.JSONDecodeError:
        return [line.strip() for line in content.splitlines() if line.strip()]


def render_results(results: List[CheckResult]) -> Table:
    table = Table(title="Domain Availability")
    table.add_column("Domain", style="cyan")
    table.add_column("Status")
    table.add_column("Price", justify="right")
    table.add_column("Method", style="dim")

    for r in results:
        style = STATUS_STYLES[r.availability]
        status = r.availability.value
        if r.is_error and r.error_detail:
            status = f"{status}: {r.error_detail}"
        price = f"{r.price.amount:.2f} {r.price.currency}" if r.price else "-"
        method = f"{r.method} (cached)" if r.cached else r.method
        table.add_row(r.domain, f"[{style}]{status}[/{style}]", price, method)
    return table


@click.group()
@click.version_option(version=__version__)
def cli():
    """Check whether domain names are available to register."""
    pass


@cli.command()
@click.argument('entries', nargs=-1)
@click.option('--wordlist', '-w', default=None, help='Path to wordlist file (JSON list or one per line)')
@click.option('--tlds', '-t', default='com,io,ai', help='TLDs for bare words (comma-separated)')
@click.option('--output', '-o', default=None, help='Output file (JSON)')
@click.option('--config', '-c', 'config_path', default=DEFAULT_CONFIG_PATH, help='Config file (YAML)')
@click.option('--stats', is_flag=True, help='Print cache statistics after checking')
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
def check(entries, wordlist, tlds, output, config_path, stats, verbose):
    """Check availability of domains, or of words across TLDs."""
    setup_logging(verbose)
    tld_list = [t.strip().lstrip('.') for t in tlds.split(',') if t.strip()]

    entry_list = list(entries)
    if wordlist:
        entry_list.extend(read_wordlist(wordlist))

    try:
        domains = collect_domains(entry_list, tld_list)
    except ValidationError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    if not domains:
        console.print("[red]No domains provided. Use arguments or --wordlist[/red]")
        raise SystemExit(1)

    try:
        service = AvailabilityService.from_config(config_path)
    except DomainCheckError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    with console.status(f"[bold green]Checking {len(domains)} domains..."):
        results = service.check_batch(domains)

    console.print(render_results(results))

    available = [r for r in results if r.availability in (Availability.AVAILABLE, Availability.PREMIUM)]
    errors = [r for r in results if r.is_error]
    console.print(f"\n[bold green]Available: {len(available)}[/bold green]  [magenta]Unverified: {len(errors)}[/magenta]")

    if stats:
        for key, value in service.get_cache_stats().items():
            console.print(f"  {key}: {value}")

    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump([r.to_dict() for r in results], f, indent=2)
        console.print(f"[green]Saved to {output}[/green]")


@cli.command()
@click.argument('tld')
@click.option('--config', '-c', 'config_path', default=DEFAULT_CONFIG_PATH, help='Config file (YAML)')
def pricing(tld, config_path):
    """Show registrar pricing for a TLD."""
    setup_logging(False)
    try:
        service = AvailabilityService.from_config(config_path)
        result = asyncio.run(service.get_tld_pricing(tld))
    except DomainCheckError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    console.print(f"\n[bold]TLD:[/bold] .{result.tld}")
    for label, value in (
        ("Registration", result.registration),
        ("Renewal", result.renewal),
        ("Transfer", result.transfer),
    ):
        shown = f"{value:.2f} {result.currency}" if value is not None else "-"
        console.print(f"  {label + ':':<14}{shown}")


def main():
    cli()


if __name__ == '__main__':
    main()

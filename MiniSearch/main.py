#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
MiniSearch - Command-line interface
Interactive menu and one-shot commands for the MiniSearch engine
"""

import argparse
import logging
import os
import time

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from MiniSearch.config import load_config, resolve_package_path
from MiniSearch.engine import SearchEngine, SearchPage

# Initialize rich console
console = Console()


def setup_logging(verbose: bool = False):
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


class MiniSearchCLI:
    def __init__(self, config=None):
        """Initialize the CLI interface"""
        self.config = config or load_config()
        self.preview_length = self.config.get("display", {}).get("preview_length", 80)
        self.crawl_wait = self.config.get("cli", {}).get("crawl_wait_seconds", 4.0)
        self.engine = SearchEngine(
            config=self.config,
            on_indexed=self.report_indexed,
            on_failure=self.report_failure,
        )

    def report_indexed(self, document):
        console.print(f"  [green]\\[Crawler] Indexed:[/green] {escape(document.title)}")

    def report_failure(self, locator, reason):
        console.print(f"  [bold red]\\[Crawler] Failed:[/bold red] {escape(locator)} ({escape(reason)})")

    def print_header(self):
        """Display the application header"""
        console.print(Panel(
            "[bold blue]MiniSearch[/bold blue] [yellow]Search Engine[/yellow]",
            border_style="blue",
            subtitle="Multi-threaded | TF-IDF | Inverted Index",
            width=80
        ))

    def load_documents(self, documents_path: str) -> bool:
        """Load documents from a JSON file"""
        try:
            console.print(f"Loading documents from: [cyan]{escape(documents_path)}[/cyan]")
            count = self.engine.load_documents(documents_path)
            console.print(f"[green]Successfully loaded [bold]{count}[/bold] documents[/green]")
            return True
        except (OSError, ValueError) as e:
            console.print(f"[bold red]Error loading documents:[/bold red] {escape(str(e))}")
            return False

    def load_sample_documents(self) -> bool:
        sample_path = resolve_package_path(self.config.get("sample_documents", ""))
        if not os.path.exists(sample_path):
            console.print("[yellow]No sample documents found, starting with an empty index.[/yellow]")
            return False
        return self.load_documents(sample_path)

    def search(self, query: str, page: int = 1) -> SearchPage:
        """Perform a search and display one page of results"""
        console.rule(f"[bold yellow]SEARCH: \"{escape(query)}\" (Page {page})[/bold yellow]", style="yellow")
        result_page = self.engine.search(query, page)
        self.display_results(result_page)
        return result_page

    def display_results(self, result_page: SearchPage):
        """Display search results in a formatted way"""
        if result_page.total_results == 0:
            console.print(f"[yellow]No results found for: {escape(result_page.query)}[/yellow]")
            return

        if result_page.no_more_results:
            console.print(f"[yellow]No more results. Total pages: {result_page.total_pages}[/yellow]")
            return

        table = Table(
            box=box.HEAVY_EDGE,
            show_header=True,
            header_style="bold magenta",
            title=(f"[bold]Found {result_page.total_results} results | "
                   f"Page {result_page.page} of {result_page.total_pages}[/bold]"),
            title_style="yellow"
        )
        table.add_column("#", style="dim", width=4)
        table.add_column("Document", style="cyan bold")
        table.add_column("Score", style="yellow", width=10)
        table.add_column("Preview", style="green", no_wrap=False)

        for i, (doc, score) in enumerate(result_page.results, start=result_page.start + 1):
            table.add_row(
                str(i),
                f"\\[Doc {doc.id}] {escape(doc.title or '<No title>')}\n[dim]{escape(doc.source)}[/dim]",
                f"{score:.4f}",
                escape(doc.preview(self.preview_length)),
            )

        console.print(table)

    def crawl(self, url: str, wait: bool = True):
        """Submit a URL and give the crawler a moment to work"""
        if not self.engine.crawl(url):
            console.print(f"[yellow]Already crawled or queued: {escape(url)}[/yellow]")
            return

        console.print("[cyan]Crawling started in background thread...[/cyan]")
        if not wait or self.crawl_wait <= 0:
            return

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
            transient=True
        ) as progress:
            progress.add_task(f"Fetching {escape(url)}...", total=None)
            time.sleep(self.crawl_wait)

    def show_stats(self):
        stats = self.engine.stats()
        table = Table(title="[bold]Index Statistics[/bold]", box=box.ROUNDED, show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green", justify="right")
        table.add_row("Documents", str(stats["total_documents"]))
        table.add_row("Distinct terms", str(stats["total_terms"]))
        for state, count in stats["crawler"].items():
            table.add_row(f"Crawl {state.replace('_', ' ')}", str(count))
        console.print(table)

    def shutdown(self):
        abandoned = self.engine.shutdown()
        if abandoned:
            console.print(f"[yellow]Abandoned {abandoned} unfinished fetch(es).[/yellow]")

    def search_menu(self):
        query = console.input("\n[bold cyan]Enter search query: [/bold cyan]").strip()
        page_input = console.input("[bold cyan]Page number (default 1): [/bold cyan]").strip()

        page = 1
        if page_input:
            try:
                page = int(page_input)
            except ValueError:
                console.print("[yellow]Invalid number. Using default: 1[/yellow]")
            if page < 1:
                console.print("[yellow]Page numbers start at 1. Using default: 1[/yellow]")
                page = 1

        self.search(query, page)

    def add_document_menu(self):
        console.print("\n[bold cyan]--- Add Document ---[/bold cyan]")
        url = console.input("URL    : ").strip()
        title = console.input("Title  : ").strip()
        content = console.input("Content: ").strip()
        doc = self.engine.add_document(url, title, content)
        console.print(f"[green]Document {doc.id} added and indexed![/green]")

    def crawl_menu(self):
        url = console.input("\n[bold cyan]Enter URL to crawl: [/bold cyan]").strip()
        if not url:
            console.print("[bold red]Empty URL. Please try again.[/bold red]")
            return
        self.crawl(url)

    def interactive_mode(self):
        """Run the application in interactive mode"""
        while True:
            console.rule("[bold blue]MiniSearch[/bold blue]")

            menu_table = Table(show_header=False, box=box.SIMPLE)
            menu_table.add_column("Option", style="dim")
            menu_table.add_column("Description", style="yellow")

            menu_table.add_row("1", "Search")
            menu_table.add_row("2", "Add Document Manually")
            menu_table.add_row("3", "Crawl a URL")
            menu_table.add_row("4", "View Total Indexed Documents")
            menu_table.add_row("5", "Show Statistics")
            menu_table.add_row("0", "Exit")

            console.print("\n[bold cyan]Available Actions:[/bold cyan]")
            console.print(menu_table)

            choice = console.input("\n[bold cyan]Enter your choice: [/bold cyan]").strip()

            if choice == "1":
                self.search_menu()
            elif choice == "2":
                self.add_document_menu()
            elif choice == "3":
                self.crawl_menu()
            elif choice == "4":
                console.print(f"\n[bold]Total documents indexed:[/bold] {self.engine.total_documents()}")
            elif choice == "5":
                self.show_stats()
            elif choice == "0" or choice.lower() == "quit":
                break
            else:
                console.print("[bold red]Invalid choice![/bold red]")

        self.shutdown()
        console.print("\n[bold green]Goodbye![/bold green]")


def main(argv=None):
    """Main entry point for the CLI application"""
    parser = argparse.ArgumentParser(
        description='MiniSearch - Multi-threaded TF-IDF Search Engine'
    )
    parser.add_argument('--config', help='Path to a JSON configuration file')
    parser.add_argument('--documents', help='Path to a documents JSON file to index')
    parser.add_argument('--no-samples', action='store_true',
                        help='Do not load the bundled sample documents')
    parser.add_argument('--crawl', action='append', default=[], metavar='URL',
                        help='URL to crawl before searching (repeatable)')
    parser.add_argument('--query', help='Query string to search for')
    parser.add_argument('--page', type=int, default=1,
                        help='Result page to display')
    parser.add_argument('--interactive', action='store_true',
                        help='Run in interactive mode')
    parser.add_argument('--verbose', action='store_true',
                        help='Show debug logging')
    args = parser.parse_args(argv)

    if args.page < 1:
        parser.error("--page must be 1 or greater")

    setup_logging(args.verbose)

    cli = MiniSearchCLI(load_config(args.config))

    console.print("\n")
    console.rule("[bold blue]✦ ✦ ✦ MiniSearch ✦ ✦ ✦[/bold blue]", style="blue")
    cli.print_header()
    console.rule(style="blue")

    if not args.no_samples:
        cli.load_sample_documents()

    if args.documents and not cli.load_documents(args.documents):
        cli.shutdown()
        return 1

    for url in args.crawl:
        cli.crawl(url, wait=False)

    # Run in interactive mode if asked or if there is nothing else to do
    if args.interactive or not args.query:
        cli.interactive_mode()
        return 0

    # Let queued crawls land before a one-shot query
    cli.shutdown()
    cli.search(args.query, args.page)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

#!/usr/bin/env python3
import sys
import shutil
import asyncio
import logging
import subprocess
from typing import List, Optional

from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from .config import __version__, USER_AGENT, load_settings, Settings
from .errors import ConfigurationError
from .models import Lookup, SearchHit, Episode, StreamSource
from .scraper import FaselScraper

CONSOLE = Console()


class FaselCLI:
    def __init__(self, settings: Optional[Settings] = None, scraper: Optional[FaselScraper] = None):
        self.settings = settings or Settings()
        self.scraper = scraper or FaselScraper(self.settings)
        self.player = shutil.which("mpv")

    @property
    def theme(self) -> dict:
        return self.settings.get_theme()

    def log(self, emoji: str, message: str, style: str = "dim"):
        CONSOLE.print(f"[{style}]{emoji} {message}[/{style}]")

    def report_miss(self, lookup: Lookup, empty_message: str):
        if lookup.is_error:
            self.log("✗", f"Site unreachable: {escape(lookup.error or '')}", self.theme["error"])
        else:
            self.log("•", empty_message)

    def banner(self):
        theme = self.theme
        CONSOLE.print(Panel(
            f"[bold {theme['primary']}]fasel-cli[/bold {theme['primary']}] [dim]v{__version__}[/dim]\n"
            f"[{theme['secondary']}]{self.scraper.base_url}[/{theme['secondary']}]",
            border_style=theme["accent"],
            padding=(0, 2),
        ))

    def pick(self, count: int, prompt: str) -> Optional[int]:
        """Ask for a 1-based index; empty answer or 'q' means back."""
        choices = [str(i) for i in range(1, count + 1)] + ["q", ""]
        answer = Prompt.ask(prompt, choices=choices, default="", show_choices=False)
        if answer in ("", "q"):
            return None
        return int(answer) - 1

    def show_hits(self, hits: List[SearchHit]):
        theme = self.theme
        table = Table(title="Results", border_style=theme["accent"], header_style=f"bold {theme['primary']}")
        table.add_column("#", justify="right")
        table.add_column("Title")
        table.add_column("URL", style="dim", overflow="fold")
        for i, hit in enumerate(hits, 1):
            table.add_row(str(i), escape(hit.title), escape(hit.href))
        CONSOLE.print(table)

    def show_episodes(self, episodes: List[Episode]):
        table = Table(title="Episodes", border_style=self.theme["accent"])
        table.add_column("#", justify="right")
        table.add_column("Episode")
        for i, ep in enumerate(episodes, 1):
            table.add_row(str(i), escape(ep.number))
        CONSOLE.print(table)

    async def search_flow(self, query: Optional[str] = None):
        self.banner()
        while True:
            query = query or Prompt.ask(f"[bold {self.theme['primary']}]Search[/bold {self.theme['primary']}]", default="")
            if not query.strip():
                return

            with CONSOLE.status("Searching..."):
                lookup = await asyncio.to_thread(self.scraper.lookup_search, query)
            query = None

            hits = lookup.value or []
            if not hits:
                self.report_miss(lookup, "No results")
                continue

            self.show_hits(hits)
            idx = self.pick(len(hits), "Pick a title")
            if idx is not None:
                await self.title_flow(hits[idx])

    async def title_flow(self, hit: SearchHit):
        theme = self.theme
        with CONSOLE.status("Loading details..."):
            details_lookup = await asyncio.to_thread(self.scraper.lookup_details, hit.href)
            episodes_lookup = await asyncio.to_thread(self.scraper.lookup_episodes, hit.href)

        details = details_lookup.value
        if details:
            body = escape(details.description or "No description")
            meta = " • ".join(x for x in (details.airdate, details.aliases) if x)
            if meta:
                body += f"\n\n[dim]{escape(meta)}[/dim]"
            CONSOLE.print(Panel(body, title=f"[bold {theme['primary']}]{escape(details.title or hit.title)}[/bold {theme['primary']}]", border_style=theme["primary"]))
        else:
            self.report_miss(details_lookup, "No details available")

        episodes = episodes_lookup.value or []
        if not episodes:
            await self.stream_flow(hit.href, hit.title)
            return

        while True:
            self.show_episodes(episodes)
            idx = self.pick(len(episodes), "Pick an episode")
            if idx is None:
                return
            ep = episodes[idx]
            await self.stream_flow(ep.href, f"{hit.title} - {ep.number}")

    async def stream_flow(self, url: str, title: str):
        with CONSOLE.status("Resolving stream..."):
            lookup = await asyncio.to_thread(self.scraper.lookup_stream, url)

        sources: List[StreamSource] = lookup.value or []
        if not sources:
            self.report_miss(lookup, "No playable stream found")
            return

        source = sources[0]
        kind = "HLS" if source.is_m3u8 else "video"
        self.log("✓", f"{kind} stream: {escape(source.url)}", f"bold {self.theme['primary']}")
        if self.player:
            self.play_video(source.url, title)

    def play_video(self, url: str, title: str = ""):
        cmd = [
            self.player,
            url,
            f"--referrer={self.scraper.base_url}/",
            f"--user-agent={USER_AGENT}",
            f"--force-media-title={title}",
            "--really-quiet",
        ]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
            if result.returncode == 0:
                self.log("✓", "Playback finished", f"bold {self.theme['primary']}")
            else:
                self.log("✗", f"Player exited with code {result.returncode}", self.theme["error"])
        except OSError as e:
            self.log("✗", f"Player error: {e}", self.theme["error"])


def main(argv: Optional[List[str]] = None):
    args = list(sys.argv[1:] if argv is None else argv)
    debug = "--debug" in args
    args = [a for a in args if a != "--debug"]

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.ERROR,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = load_settings()
    except ConfigurationError as e:
        CONSOLE.print(f"[bold red]✗ {escape(str(e))}[/bold red]")
        sys.exit(1)

    cli = FaselCLI(settings)
    try:
        asyncio.run(cli.search_flow(" ".join(args) or None))
    except KeyboardInterrupt:
        CONSOLE.print("\n[dim]bye![/dim]")
        sys.exit(0)


if __name__ == "__main__":
    main()

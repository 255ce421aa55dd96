import asyncio
import logging
import time
from typing import List, Optional

import typer
from tqdm import tqdm

from sync_client.config.client import ClientConfig
from sync_client.core.dependencies import DependencyContainer
from sync_client.data.models import DirectoryEntry, JobState, JobStatus
from sync_client.data.services.job_metrics import JobMetrics, derive_metrics, format_progress
from sync_client.data.services.sync_job_service import suggest_chunk_size
from sync_client.ui.notifications import AlertLevel, Notification
from sync_client.ui.remote_browser import ListingOutcome
from sync_client.utils.formatting import format_bytes

app = typer.Typer(
    name="sync-client",
    help="Browse local and remote trees and run transfer jobs on a sync backend.",
    add_completion=False,
)

_ALERT_COLORS = {
    AlertLevel.SUCCESS: typer.colors.GREEN,
    AlertLevel.INFO: typer.colors.BLUE,
    AlertLevel.ERROR: typer.colors.RED,
}


def _echo_notification(notification: Notification) -> None:
    typer.secho(notification.message, fg=_ALERT_COLORS[notification.level], err=True)


def _container(ctx: typer.Context) -> DependencyContainer:
    options = ctx.obj or {}
    container = DependencyContainer(
        base_url=options.get("server"),
        persistent=options.get("persist", True),
        log_level=logging.DEBUG if options.get("verbose") else logging.WARNING,
    )
    container.notifications.subscribe(_echo_notification)
    return container


def _echo_entries(entries: List[DirectoryEntry]) -> None:
    if not entries:
        typer.echo("No files found.")
        return
    for entry in entries:
        marker = "d" if entry.is_directory else "-"
        size = format_bytes(entry.size) if entry.size is not None else ""
        typer.echo(f"{marker} {size:>10}  {entry.name}")


def _echo_jobs(jobs: List[JobStatus]) -> None:
    if not jobs:
        typer.echo("No sync jobs found.")
        return
    for job in jobs:
        typer.echo(f"{job.id}  {job.status_label:<12} {job.progress_percent:5.1f}%  {job.source_name}")


class _ProgressBar:
    """tqdm bar fed by job monitor updates."""

    def __init__(self, job_id: str):
        self._bar = tqdm(total=100, desc=f"Job {job_id[:8]}", unit="%", bar_format="{l_bar}{bar}| {postfix}")

    def update(self, status: JobStatus, metrics: JobMetrics) -> None:
        self._bar.n = status.progress_percent
        self._bar.set_postfix_str(format_progress(status, metrics), refresh=False)
        self._bar.refresh()

    def close(self) -> None:
        self._bar.close()


async def _watch_job(container: DependencyContainer, job_id: str) -> Optional[JobStatus]:
    bar = _ProgressBar(job_id)
    try:
        handle = container.job_monitor.start(job_id, bar.update)
        await container.job_monitor.wait(handle)
    finally:
        bar.close()
    entry = container.registry.get(job_id)
    return entry.last_snapshot if entry else None


def _finish(snapshot: Optional[JobStatus]) -> None:
    if snapshot is None:
        raise typer.Exit(code=1)
    typer.echo(format_progress(snapshot, derive_metrics(snapshot, time.time())))
    if snapshot.state != JobState.COMPLETED:
        raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    server: Optional[str] = typer.Option(None, "--server", "-s", help="Backend base URL (default: $SYNC_CLIENT_BASE_URL)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
    persist: bool = typer.Option(True, "--persist/--no-persist", help="Keep cached listings and selections between runs."),
):
    """Client for a remote-file-sync backend."""
    ctx.obj = {"server": server, "verbose": verbose, "persist": persist}


@app.command()
def remotes(ctx: typer.Context):
    """List configured remotes."""
    async def run():
        container = _container(ctx)
        try:
            return await container.remote_configs.refresh()
        finally:
            await container.aclose()

    configs = asyncio.run(run())
    if not configs:
        typer.echo("No configurations found.")
    for config in configs:
        typer.echo(f"{config.name}  ({config.config_type})")


@app.command("add-remote")
def add_remote(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Remote name."),
    config_type: str = typer.Argument(..., help="Backend type, e.g. webdav or s3."),
    url: Optional[str] = typer.Option(None, "--url"),
    username: Optional[str] = typer.Option(None, "--username"),
    password: Optional[str] = typer.Option(None, "--password", hide_input=True),
):
    """Create a remote configuration."""
    async def run() -> bool:
        container = _container(ctx)
        try:
            return await container.remote_configs.create(name, config_type, url, username, password)
        finally:
            await container.aclose()

    if not asyncio.run(run()):
        raise typer.Exit(code=1)


@app.command("delete-remote")
def delete_remote(ctx: typer.Context, name: str = typer.Argument(..., help="Remote name.")):
    """Delete a remote configuration and its cached listings."""
    async def run() -> bool:
        container = _container(ctx)
        try:
            return await container.remote_configs.delete(name)
        finally:
            await container.aclose()

    if not asyncio.run(run()):
        raise typer.Exit(code=1)


@app.command("persist-remotes")
def persist_remotes(ctx: typer.Context):
    """Ask the backend to write its in-memory configurations to disk."""
    async def run() -> bool:
        container = _container(ctx)
        try:
            return await container.remote_configs.persist()
        finally:
            await container.aclose()

    if not asyncio.run(run()):
        raise typer.Exit(code=1)


@app.command("ls-local")
def ls_local(ctx: typer.Context, path: Optional[str] = typer.Argument(None, help="Directory to list.")):
    """List a directory of the backend host's local tree."""
    async def run():
        container = _container(ctx)
        try:
            return await container.local_browser.navigate(path)
        finally:
            await container.aclose()

    entries = asyncio.run(run())
    if entries is None:
        raise typer.Exit(code=1)
    _echo_entries(entries)


@app.command("ls-remote")
def ls_remote(
    ctx: typer.Context,
    remote: str = typer.Argument(..., help="Remote name."),
    path: str = typer.Argument("/", help="Directory to list."),
    refresh: bool = typer.Option(False, "--refresh", help="Ignore the cached listing."),
):
    """List the folders of a remote directory (cached for five minutes)."""
    async def run() -> ListingOutcome:
        container = _container(ctx)
        browser = container.remote_browser
        try:
            outcome = await browser.select_remote(remote, path)
            if refresh and outcome == ListingOutcome.FRESH_HIT:
                outcome = await browser.refresh()
            if outcome == ListingOutcome.STALE_HIT:
                typer.secho("(cached listing, revalidating)", fg=typer.colors.YELLOW, err=True)
                await browser.wait_idle()
        finally:
            await container.aclose()

        if browser.rendered is not None and not browser.rendered.loading and browser.rendered.error is None:
            typer.echo(" / ".join(label for label, _ in browser.breadcrumbs()))
            _echo_entries(list(browser.rendered.entries))
        return outcome

    if asyncio.run(run()) == ListingOutcome.FAILED:
        raise typer.Exit(code=1)


@app.command()
def sync(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Local source path."),
    remote: str = typer.Argument(..., help="Destination remote."),
    dest: str = typer.Argument("/", help="Destination path on the remote."),
    parallel: bool = typer.Option(False, "--parallel/--no-parallel", help="Use multi-stream chunked transfers."),
    chunk_size: Optional[str] = typer.Option(None, "--chunk-size", help="Chunk size for parallel transfers."),
    watch: bool = typer.Option(True, "--watch/--no-watch", help="Follow the job until it finishes."),
):
    """Start a transfer job."""
    if chunk_size is not None and chunk_size not in ClientConfig.get_chunk_sizes():
        typer.secho(f"Unsupported chunk size {chunk_size}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    if parallel and chunk_size is None:
        chunk_size, hint = suggest_chunk_size(source)
        if hint:
            typer.secho(hint, fg=typer.colors.GREEN, err=True)

    async def run() -> Optional[JobStatus]:
        container = _container(ctx)
        try:
            job_id = await container.sync_jobs.start_sync(source, remote, dest, parallel, chunk_size)
            if job_id is None:
                raise typer.Exit(code=1)
            typer.echo(job_id)
            if not watch:
                container.sync_jobs.close_progress()
                return None
            return await _watch_job(container, job_id)
        finally:
            await container.aclose()

    snapshot = asyncio.run(run())
    if watch:
        _finish(snapshot)


@app.command("watch")
def watch_job(ctx: typer.Context, job_id: str = typer.Argument(..., help="Job id.")):
    """Follow a running job until it finishes."""
    async def run() -> Optional[JobStatus]:
        container = _container(ctx)
        try:
            return await _watch_job(container, job_id)
        finally:
            await container.aclose()

    _finish(asyncio.run(run()))


@app.command()
def jobs(
    ctx: typer.Context,
    follow: bool = typer.Option(False, "--watch", "-w", help="Keep refreshing the list."),
):
    """List sync jobs."""
    async def run() -> bool:
        container = _container(ctx)
        poller = container.job_list_poller(on_update=_redraw if follow else None)
        try:
            if not follow:
                ok = await poller.poll_once()
                if ok:
                    _echo_jobs(poller.jobs)
                return ok
            await poller.start()
            return True
        finally:
            poller.stop()
            await container.aclose()

    def _redraw(job_list: List[JobStatus]) -> None:
        typer.clear()
        _echo_jobs(job_list)

    try:
        ok = asyncio.run(run())
    except KeyboardInterrupt:
        return
    if not ok:
        typer.secho("Error loading sync jobs", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command("log")
def job_log(ctx: typer.Context, job_id: str = typer.Argument(..., help="Job id.")):
    """Print a job's transfer log."""
    async def run() -> Optional[str]:
        container = _container(ctx)
        try:
            return await container.sync_jobs.fetch_log(job_id)
        finally:
            await container.aclose()

    text = asyncio.run(run())
    if text is None:
        raise typer.Exit(code=1)
    typer.echo(text)


@app.command("delete-job")
def delete_job(ctx: typer.Context, job_id: str = typer.Argument(..., help="Job id.")):
    """Delete a finished job and its log."""
    async def run() -> bool:
        container = _container(ctx)
        try:
            return await container.sync_jobs.delete_job(job_id)
        finally:
            await container.aclose()

    if not asyncio.run(run()):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()

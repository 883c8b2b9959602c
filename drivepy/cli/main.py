"""Drive CLI - Main commands."""
import asyncio
from pathlib import Path
from typing import List, Optional

import aiohttp
import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table

from drivepy.core.logging import get_logger

app = typer.Typer(
    name="drive",
    help="Drive storage batch upload CLI",
    add_completion=False
)
console = Console()
logger = get_logger('drivepy.cli')

DEFAULT_API_URL = 'https://api.mosaia.ai'

ApiKeyOption = typer.Option(None, "--api-key", envvar="DRIVE_API_KEY", help="API key")
ApiUrlOption = typer.Option(DEFAULT_API_URL, "--api-url", envvar="DRIVE_API_URL", help="Platform URL")
DriveOption = typer.Option(..., "--drive", "-D", envvar="DRIVE_ID", help="Drive ID")


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def build_client(api_key: Optional[str], api_url: str):
    """Create a DriveClient from command line options."""
    from drivepy import DriveClient

    if not api_key:
        console.print("[red]No API key. Pass --api-key or set DRIVE_API_KEY.[/red]")
        raise typer.Exit(1)
    config = DriveClient.create_config(api_url=api_url, api_key=api_key)
    return DriveClient(config=config)


def fail(message: str) -> None:
    """Print an error and exit with status 1."""
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


async def transfer_files(items, sources, result) -> int:
    """
    PUT each file's bytes to its direct-upload target.

    Failed or expired transfers are reported back to the platform.

    Returns:
        Number of failed transfers
    """
    from drivepy import DriveException
    from drivepy.core.upload.services import AsyncFileReader

    reader = AsyncFileReader()
    failures = 0
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console
    ) as progress:
        task = progress.add_task("Transferring", total=len(result.files))
        async with aiohttp.ClientSession() as http:
            for source, grant in zip(sources, result.files):
                error = None
                if grant.is_expired():
                    error = "Upload grant expired before transfer"
                else:
                    data = await reader.read_source(source)
                    try:
                        async with http.put(
                            grant.target.url,
                            data=data,
                            headers={'Content-Type': grant.mime_type}
                        ) as response:
                            if response.status >= 300:
                                error = f"Transfer rejected with HTTP {response.status}"
                    except aiohttp.ClientError as e:
                        error = f"Transfer failed: {e}"

                if error:
                    failures += 1
                    logger.warning(f"{grant.filename}: {error}")
                    progress.console.print(f"[red]{grant.filename}: {error}[/red]")
                    try:
                        await items.report_failed_grant(grant, error)
                    except DriveException as e:
                        logger.error(f"{grant.filename}: could not report failure: {e}")
                        progress.console.print(f"[red]{grant.filename}: failure not reported: {e}[/red]")
                progress.advance(task)
    return failures


@app.command()
def upload(
    files: List[Path] = typer.Argument(..., help="Local files to upload", exists=True, dir_okay=False),
    path: str = typer.Option(None, "--path", "-p", help="Destination directory"),
    relative_path: List[str] = typer.Option(None, "--relative-path", "-r", help="Sub-path per file, in order"),
    preserve_structure: Optional[bool] = typer.Option(
        None, "--preserve-structure/--flat", help="Place files under their relative paths"
    ),
    transfer: bool = typer.Option(False, "--transfer", "-t", help="Also send the bytes to each upload target"),
    drive: str = DriveOption,
    api_key: str = ApiKeyOption,
    api_url: str = ApiUrlOption,
):
    """Submit files as one batch upload."""
    from drivepy import DriveException, PlacementOptions, UploadSource

    async def do_upload():
        sources = [UploadSource.from_path(f) for f in files]
        options = PlacementOptions(
            path=path,
            relative_paths=list(relative_path) if relative_path else None,
            preserve_structure=preserve_structure,
        )
        async with build_client(api_key, api_url) as client:
            items = client.items(drive)
            try:
                result = await items.upload_many(sources, options)
            except (DriveException, FileNotFoundError) as e:
                fail(f"Upload failed: {e}")

            console.print(f"[green]{result.message or 'Upload accepted'}[/green]")
            for job_id in result.job_ids:
                console.print(f"Job: {job_id}")

            table = Table()
            table.add_column("File ID", style="dim")
            table.add_column("Name")
            table.add_column("Path", style="cyan")
            table.add_column("Size", justify="right")
            table.add_column("Expires")
            for grant in result.files:
                expires = grant.target.expires_at.isoformat() if grant.target.expires_at else "-"
                table.add_row(grant.file_id, grant.filename, grant.path or "-", f"{grant.size:,}", expires)
            console.print(table)

            if transfer:
                failures = await transfer_files(items, sources, result)
                if failures:
                    fail(f"{failures} of {len(result.files)} transfers failed")
                console.print("[green]All files transferred[/green]")

    run_async(do_upload())


@app.command()
def status(
    job_id: str = typer.Argument(..., help="Upload job ID"),
    drive: str = DriveOption,
    api_key: str = ApiKeyOption,
    api_url: str = ApiUrlOption,
):
    """Show the current state of an upload job."""
    from drivepy import DriveException

    async def show_status():
        async with build_client(api_key, api_url) as client:
            try:
                job = await client.items(drive).get_upload_status(job_id)
            except DriveException as e:
                fail(f"Status lookup failed: {e}")

            color = "red" if job.has_errors else ("green" if job.is_terminal else "yellow")
            progress = job.progress
            console.print(f"[bold]Job:[/bold] {job.id}")
            console.print(f"[bold]Status:[/bold] [{color}]{job.status.value}[/{color}]")
            console.print(
                f"[bold]Files:[/bold] {progress.processed}/{progress.total} processed, "
                f"{progress.successful} ok, {progress.failed} failed"
            )
            if job.size_progress.total:
                console.print(
                    f"[bold]Bytes:[/bold] {job.size_progress.uploaded:,}/{job.size_progress.total:,}"
                )
            if job.completed_at:
                console.print(f"[bold]Completed:[/bold] {job.completed_at.isoformat()}")

            if isinstance(job.error_summary, dict) and job.error_summary:
                table = Table(title="Errors")
                table.add_column("File ID", style="dim")
                table.add_column("Error", style="red")
                for file_id, message in job.error_summary.items():
                    table.add_row(file_id, str(message))
                console.print(table)
            elif job.error_summary:
                console.print(f"[red]{job.error_summary}[/red]")

    run_async(show_status())


@app.command("fail")
def fail_command(
    file_id: str = typer.Argument(..., help="File ID from the upload manifest"),
    error: str = typer.Option(None, "--error", "-e", help="Error description"),
    drive: str = DriveOption,
    api_key: str = ApiKeyOption,
    api_url: str = ApiUrlOption,
):
    """Report that a file's transfer failed."""
    from drivepy import DriveException

    async def do_fail():
        async with build_client(api_key, api_url) as client:
            try:
                ack = await client.items(drive).mark_upload_failed(file_id, error=error)
            except DriveException as e:
                fail(f"Report failed: {e}")
            console.print(f"[yellow]Reported failure of {ack.file_id}[/yellow]")
            if ack.upload_status:
                console.print(f"Upload status: {ack.upload_status}")

    run_async(do_fail())


@app.command()
def find(
    path: str = typer.Argument(..., help="Item path"),
    ignore_case: bool = typer.Option(False, "--ignore-case", "-i", help="Case-insensitive match"),
    drive: str = DriveOption,
    api_key: str = ApiKeyOption,
    api_url: str = ApiUrlOption,
):
    """Show the file or directory at a path."""
    from drivepy import DriveException

    async def do_find():
        async with build_client(api_key, api_url) as client:
            try:
                found = await client.items(drive).find_by_path(path, case_sensitive=not ignore_case)
            except DriveException as e:
                fail(f"Lookup failed: {e}")

            if found is None:
                fail(f"Not found: {path}")

            if found.kind == 'file':
                item = found.item
                console.print(f"[bold]Name:[/bold] {item.name}")
                console.print(f"[bold]ID:[/bold] {item.id}")
                console.print(f"[bold]Path:[/bold] {item.path}")
                console.print(f"[bold]Type:[/bold] {item.item_type.value}")
                console.print(f"[bold]Size:[/bold] {item.size:,} bytes")
                if item.mime_type:
                    console.print(f"[bold]MIME:[/bold] {item.mime_type}")
                return

            if not found.items:
                console.print("[dim](empty directory)[/dim]")
                return

            table = Table()
            table.add_column("Type", style="cyan")
            table.add_column("Size", justify="right")
            table.add_column("Name")
            table.add_column("ID", style="dim")
            for item in found.items:
                type_str = "D" if item.is_folder else "F"
                size_str = "-" if item.is_folder else f"{item.size:,}"
                table.add_row(type_str, size_str, item.name, item.id or "-")
            console.print(table)

    run_async(do_find())


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()

"""youtube-up CLI - Main commands."""
import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn
)

from youtubeup import setup_logging
from youtubeup.client import YouTubeUploader
from youtubeup.core.api import (
    BearerCredentials,
    Credentials,
    DEFAULT_TOKEN_FILE,
    RetryConfig,
    UploaderConfig
)
from youtubeup.core.exceptions import UploaderException
from youtubeup.core.upload import UploadProgress, VideoMetadata
from youtubeup.core.upload.models import PRIVACY_STATUSES

app = typer.Typer(
    name="youtube-up",
    help="Resumable YouTube uploads",
    add_completion=False
)
console = Console()


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def load_credentials(access_token: Optional[str], token_file: Path) -> Credentials:
    """Use an explicit token if given, otherwise the cached token file."""
    if access_token:
        return BearerCredentials(access_token)
    return BearerCredentials.from_token_file(token_file)


def create_uploader(credentials: Credentials, config: UploaderConfig, progress_callback=None) -> YouTubeUploader:
    return YouTubeUploader(credentials, config=config, progress_callback=progress_callback)


async def add_to_playlist(uploader: YouTubeUploader, playlist: str, video_id: str) -> None:
    """Add a finished upload to a playlist; failures only warn."""
    try:
        found = await uploader.find_playlist(playlist)
        if found is None:
            console.print(f"[yellow]Playlist not found: {escape(playlist)}[/yellow]")
            return
        await uploader.add_to_playlist(found.id, video_id)
    except UploaderException as e:
        console.print(
            f"[yellow]Could not add {video_id} to playlist {escape(playlist)}: {escape(str(e))}[/yellow]"
        )
        return
    console.print(f"Added to playlist '{escape(found.title)}'")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)]
    )
    setup_logging(logging.DEBUG if verbose else logging.INFO)
    logging.getLogger('aiohttp').setLevel(logging.WARNING)


ACCESS_TOKEN = typer.Option(
    None, "--access-token", envvar="YOUTUBE_UP_ACCESS_TOKEN", help="OAuth access token"
)
TOKEN_FILE = typer.Option(
    DEFAULT_TOKEN_FILE, "--token-file", help="Cached OAuth token JSON"
)


@app.command()
def upload(
    file_path: Path = typer.Argument(..., help="Video file to upload", exists=True, dir_okay=False),
    title: str = typer.Option("", "--title", help="Title of the video"),
    description: str = typer.Option("", "--description", help="Description of the video"),
    tags: List[str] = typer.Option([], "--tags", help="Tags for the video (repeatable)"),
    privacy: str = typer.Option("public", "--privacy", help="Privacy settings [public, unlisted, private]"),
    playlist: str = typer.Option(None, "--playlist", help="Playlist to add the video to"),
    poll_interval: float = typer.Option(10.0, "--poll-interval", help="Seconds between progress checks"),
    retry_delay: float = typer.Option(60.0, "--retry-delay", help="Seconds to wait after a dropped connection"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    access_token: Optional[str] = ACCESS_TOKEN,
    token_file: Path = TOKEN_FILE,
):
    """Upload a video, resuming a previous session if one exists."""
    if privacy not in PRIVACY_STATUSES:
        raise typer.BadParameter(
            f"must be one of {', '.join(PRIVACY_STATUSES)}", param_hint="--privacy"
        )

    configure_logging(verbose)
    metadata = VideoMetadata(
        title=title or file_path.stem,
        description=description,
        tags=list(tags),
        privacy_status=privacy
    )
    config = UploaderConfig(retry=RetryConfig(poll_interval=poll_interval, retry_delay=retry_delay))

    async def do_upload():
        credentials = load_credentials(access_token, token_file)

        with Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=console
        ) as progress:
            task = progress.add_task(file_path.name, total=file_path.stat().st_size)

            def on_progress(p: UploadProgress):
                progress.update(task, completed=p.bytes_confirmed, total=p.total_bytes)

            async with create_uploader(credentials, config, on_progress) as uploader:
                result = await uploader.upload(file_path, metadata)

                if result.video_id and playlist:
                    await add_to_playlist(uploader, playlist, result.video_id)

        if result.already_complete:
            console.print("[green]Upload was already complete[/green]")
        else:
            console.print(f"[green]Upload Successful[/green] (video id: {result.video_id})")

    try:
        run_async(do_upload())
    except UploaderException as e:
        console.print(f"[red]Error uploading video: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def check(
    file_path: Path = typer.Argument(..., help="Video file whose upload should be checked"),
    access_token: Optional[str] = ACCESS_TOKEN,
    token_file: Path = TOKEN_FILE,
):
    """Check progress of an interrupted upload."""
    async def do_check():
        credentials = load_credentials(access_token, token_file)
        async with create_uploader(credentials, UploaderConfig.default()) as uploader:
            progress = await uploader.check(file_path)
            if progress is None:
                console.print(f"[yellow]No upload session for {escape(str(file_path))}[/yellow]")
                raise typer.Exit(1)

            if progress.is_complete:
                console.print("[green]Upload complete[/green]")
            else:
                console.print(
                    f"Progress: {progress.bytes_confirmed}/{progress.total_bytes} bytes "
                    f"({progress.percentage:.0f}%)"
                )

    try:
        run_async(do_check())
    except UploaderException as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command("find-playlist")
def find_playlist(
    title: str = typer.Argument(..., help="Playlist title"),
    access_token: Optional[str] = ACCESS_TOKEN,
    token_file: Path = TOKEN_FILE,
):
    """Find a playlist by title."""
    async def do_find():
        credentials = load_credentials(access_token, token_file)
        async with create_uploader(credentials, UploaderConfig.default()) as uploader:
            found = await uploader.find_playlist(title)

        if found is None:
            console.print(f"[red]Error finding playlist: no playlist titled '{escape(title)}'[/red]")
            raise typer.Exit(1)
        console.print(f"Found '{found.title}', id: {found.id}")

    try:
        run_async(do_find())
    except UploaderException as e:
        console.print(f"[red]Error finding playlist: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def main():
    app()


if __name__ == "__main__":
    main()

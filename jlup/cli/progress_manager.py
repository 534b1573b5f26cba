"""
Manages the Rich progress display shown while Julia archives are downloaded.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)


class ProgressManager:
    """A thin wrapper around a transient Rich progress bar for downloads."""

    def __init__(self, console: Console):
        self.console = console
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold cyan]{task.description}", justify="left"),
            BarColumn(bar_width=30),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "•",
            DownloadColumn(),
            "•",
            TransferSpeedColumn(),
            "•",
            TimeRemainingColumn(),
            console=console,
            transient=True,
        )

    def add_download_task(self, description: str, total: int | None = None) -> TaskID:
        return self.progress.add_task(description, total=total)

    def update_task_progress(self, task_id: TaskID | None, completed: int):
        if task_id is not None:
            self.progress.update(task_id, completed=completed)

    def remove_task(self, task_id: TaskID | None):
        if task_id is None:
            return
        try:
            self.progress.remove_task(task_id)
        except KeyError:
            pass

    def __enter__(self):
        self.progress.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.progress.stop()

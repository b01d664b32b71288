"""Utilitários para spofileget."""

import json
from typing import Any

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

OUTPUT_FORMATS = ("text", "json")


def format_size(size_bytes: int) -> str:
    """
    Formata tamanho em bytes para formato legível.

    Args:
        size_bytes: Tamanho em bytes

    Returns:
        String formatada (ex: "1.5 MB")
    """
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if abs(size_bytes) < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} PB"


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    if value is None:
        return ""
    return str(value)


def format_output(data: Any, output: str = "text") -> str:
    """
    Formata um objeto retornado pela API para exibição.

    No formato texto, dicionários viram uma listagem "chave  valor" alinhada;
    valores aninhados são mostrados como JSON numa linha só.

    Args:
        data: Objeto a formatar
        output: "text" ou "json"

    Returns:
        String pronta para imprimir
    """
    if output == "json":
        return json.dumps(data, indent=2, ensure_ascii=False)

    if not isinstance(data, dict):
        return _format_value(data)

    if not data:
        return ""

    width = max(len(str(key)) for key in data)
    return "\n".join(f"{key:<{width}}  {_format_value(value)}" for key, value in data.items())


def create_rich_progress() -> Progress:
    """
    Cria uma barra de progresso rica usando a biblioteca rich.

    Returns:
        Instância de Progress do rich
    """
    return Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        "[progress.percentage]{task.percentage:>3.1f}%",
        "•",
        DownloadColumn(),
        "•",
        TransferSpeedColumn(),
        "•",
        TimeRemainingColumn(),
        console=Console(stderr=True),
        transient=True,
    )


class RichProgressCallback:
    """Adapta um Progress do rich ao callback (current, total) do download."""

    def __init__(self, progress: Progress, task_id: TaskID):
        self.progress = progress
        self.task_id = task_id
        self._last_current = 0

    def __call__(self, current: int, total: int) -> None:
        self.progress.update(self.task_id, total=total, advance=current - self._last_current)
        self._last_current = current

"""
logger.py — Logging para ghdeploy usando Rich + archivo opcional.

Dual output:
- Rich console: colores en la terminal
- Archivo rotativo (opcional): se activa con logging.file en ghdeploy.yaml

Un deploy exitoso no imprime nada: info/success/step solo se muestran
en modo verbose. Warnings y errores siempre van a stderr.

Uso:
    from ghdeploy.utils.logger import get_logger, set_verbose
    logger = get_logger("ghdeploy.publishing")
    logger.info("Publicando dist/...")
    logger.success("Push completado")
    logger.error("git push falló")
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

# En pytest no se escriben archivos de log
_in_pytest = "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ

ghdeploy_theme = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "step": "bold magenta",
})

console = Console(theme=ghdeploy_theme)
err_console = Console(theme=ghdeploy_theme, stderr=True)

_verbose = False
_file_logger: logging.Logger | None = None


def set_verbose(enabled: bool) -> None:
    """Activa o desactiva los mensajes info/success/step en consola."""
    global _verbose
    _verbose = enabled


def is_verbose() -> bool:
    return _verbose


def configure_file_logging(path: str | Path | None) -> logging.Logger:
    """
    Configura el logger de archivo con rotación.

    Si path está vacío (o estamos en pytest) se usa un NullHandler,
    así el resto del código no tiene que preguntar si hay archivo.

    Args:
        path: Ruta del archivo de log, ej: "logs/ghdeploy.log".

    Returns:
        El logging.Logger que recibe las copias de cada mensaje.
    """
    global _file_logger

    if not path or _in_pytest:
        _file_logger = logging.getLogger("ghdeploy.null")
        if not _file_logger.handlers:
            _file_logger.addHandler(logging.NullHandler())
        return _file_logger

    log_path = Path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    _file_logger = logging.getLogger("ghdeploy.file")
    _file_logger.setLevel(logging.DEBUG)

    # Misma ruta: se reusa el handler. Ruta nueva: se cambia.
    destino = os.path.abspath(log_path)
    for viejo in list(_file_logger.handlers):
        if getattr(viejo, "baseFilename", None) != destino:
            _file_logger.removeHandler(viejo)
            viejo.close()

    if not _file_logger.handlers:
        handler = RotatingFileHandler(
            log_path,
            maxBytes=1024 * 1024,  # 1 MB
            backupCount=3,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        _file_logger.addHandler(handler)

    return _file_logger


def _get_file_logger() -> logging.Logger:
    if _file_logger is None:
        return configure_file_logging(None)
    return _file_logger


class DeployLogger:
    """
    Logger con nombre que escribe a Rich y al archivo de log.

    Cada módulo crea el suyo para saber de dónde viene cada mensaje.

    Args:
        name: Nombre del módulo (ej: "ghdeploy.publishing")
    """

    def __init__(self, name: str):
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def info(self, message: str) -> None:
        """Mensaje informativo (cyan, solo en verbose)."""
        if _verbose:
            console.print(f"[info]i  {escape(message)}[/info]", highlight=False)
        _get_file_logger().info(f"[{self._name}] {message}")

    def success(self, message: str) -> None:
        """Mensaje de éxito (verde, solo en verbose)."""
        if _verbose:
            console.print(f"[success][OK] {escape(message)}[/success]", highlight=False)
        _get_file_logger().info(f"[{self._name}] OK: {message}")

    def warning(self, message: str) -> None:
        """Mensaje de advertencia (amarillo, siempre a stderr)."""
        err_console.print(f"[warning][!] {escape(message)}[/warning]", highlight=False)
        _get_file_logger().warning(f"[{self._name}] {message}")

    def error(self, message: str) -> None:
        """Mensaje de error (rojo, siempre a stderr)."""
        err_console.print(f"[error][X] {escape(message)}[/error]", highlight=False)
        _get_file_logger().error(f"[{self._name}] {message}")

    def step(self, number: int, total: int, message: str) -> None:
        """Mensaje de paso en un proceso (magenta, solo en verbose)."""
        if _verbose:
            console.print(f"[step]  [{number}/{total}] {escape(message)}[/step]", highlight=False)
        _get_file_logger().info(f"[{self._name}] [{number}/{total}] {message}")


def get_logger(name: str = "ghdeploy") -> DeployLogger:
    """
    Obtiene un logger para el módulo especificado.

    Ejemplo:
        logger = get_logger("ghdeploy.pipeline")
        logger.info("Resolviendo origin...")
    """
    return DeployLogger(name)

"""
asset_rewriter.py — Ajusta las rutas de assets del index.html.

GitHub Pages sirve un repo de proyecto bajo /<repo>/, pero el build
genera referencias como src="app.js" o href="/assets/...". Este módulo
antepone "<repo>/" a cada referencia.

¿Cómo sabe qué es un asset?
    Usa los nombres del primer nivel de dist/ como candidatos. Para cada
    línea del entry file y cada candidato, si el nombre aparece en la
    línea se inserta el prefijo antes de su PRIMERA aparición.

Comportamiento heurístico que se conserva a propósito:
    - Búsqueda de substring pura, sensible a mayúsculas, sin entender HTML.
      Un nombre dentro de otra palabra también se reescribe.
    - Si un candidato aparece dos veces en una línea, solo cambia la primera.
    - Varios candidatos en una línea se acumulan en orden de listado,
      cada uno buscado sobre la línea ya modificada.
    - NO es idempotente: correrlo dos veces duplica el prefijo.

Uso:
    from ghdeploy.publishing.asset_rewriter import rewrite_entry_file
    report = rewrite_entry_file(Path("dist"), "https://github.com/u/site.git")
    report.insertions  # cuántos prefijos se insertaron
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from ghdeploy.publishing.origin import repository_name
from ghdeploy.utils.logger import get_logger

logger = get_logger("ghdeploy.rewriter")

DEFAULT_ENTRY_FILE = "index.html"


@dataclass
class RewriteReport:
    """
    Resultado de reescribir el entry file.

    Attributes:
        repo_name: Nombre usado como prefijo (sin la "/").
        entry_path: Archivo reescrito.
        candidates: Nombres de dist/ que se buscaron, en orden.
        lines_changed: Líneas con al menos una inserción.
        insertions: Total de prefijos insertados.
        written: False en dry-run.
    """
    repo_name: str
    entry_path: Path
    candidates: list[str] = field(default_factory=list)
    lines_changed: int = 0
    insertions: int = 0
    written: bool = False


def list_candidates(dist_dir: str | Path) -> list[str]:
    """
    Nombres de archivos y carpetas del primer nivel de dist_dir.

    Se ordenan para que el orden de inserción no dependa del
    sistema de archivos.

    Raises:
        FileNotFoundError: Si dist_dir no existe.
        NotADirectoryError: Si dist_dir es un archivo.
    """
    return sorted(os.listdir(dist_dir))


def rewrite_line(line: str, candidates: list[str], prefix: str) -> tuple[str, int]:
    """
    Inserta prefix antes de la primera aparición de cada candidato.

    Returns:
        (línea nueva, número de inserciones)
    """
    insertions = 0
    for name in candidates:
        idx = line.find(name)
        if idx == -1:
            continue
        line = line[:idx] + prefix + line[idx:]
        insertions += 1
    return line, insertions


def rewrite_entry_file(
    dist_dir: str | Path,
    remote_url: str,
    entry_file: str = DEFAULT_ENTRY_FILE,
    dry_run: bool = False,
) -> RewriteReport:
    """
    Reescribe <dist_dir>/<entry_file> en el lugar.

    El archivo se abre en modo lectura/escritura, se procesa completo en
    memoria y luego se trunca y se escribe desde el inicio. Si el proceso
    muere a mitad de la escritura el archivo puede quedar corrupto: no hay
    archivo temporal ni recuperación. En dry-run se abre solo para lectura.

    Args:
        dist_dir: Directorio de salida del build.
        remote_url: URL del origin (de ahí sale el nombre del repo).
        entry_file: Nombre del HTML raíz dentro de dist_dir.
        dry_run: Si True, calcula el reporte sin tocar el archivo.

    Returns:
        RewriteReport con el detalle de las inserciones.

    Raises:
        FileNotFoundError: Si falta dist_dir o el entry file.
        OSError: Cualquier otro error de I/O.
    """
    dist_path = Path(dist_dir)
    repo_name = repository_name(remote_url)
    prefix = f"{repo_name}/"
    candidates = list_candidates(dist_path)
    entry_path = dist_path / entry_file

    report = RewriteReport(
        repo_name=repo_name,
        entry_path=entry_path,
        candidates=candidates,
    )

    # surrogateescape: páginas que no son UTF-8 (ej: Latin-1) pasan byte a byte
    modo = "r" if dry_run else "r+"
    with open(entry_path, modo, encoding="utf-8", errors="surrogateescape") as f:
        lineas = f.read().split("\n")

        nuevas = []
        for linea in lineas:
            nueva, n = rewrite_line(linea, candidates, prefix)
            if n:
                report.lines_changed += 1
                report.insertions += n
            nuevas.append(nueva)

        if not dry_run:
            f.seek(0)
            f.truncate()
            f.write("\n".join(nuevas))
            report.written = True

    logger.info(
        f"{entry_path}: {report.insertions} referencias con prefijo '{prefix}' "
        f"en {report.lines_changed} líneas"
        + (" (dry-run)" if dry_run else "")
    )
    return report

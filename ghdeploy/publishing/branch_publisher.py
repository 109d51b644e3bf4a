"""
branch_publisher.py — Publica un directorio como rama del remote.

Convierte dist/ en un repo nuevo, hace un único commit y lo sube con
force push a la rama destino (gh-pages por defecto). Al terminar borra
dist/.git: el directorio vuelve a ser solo archivos.

Flujo:
    1. git init
    2. git remote add origin <url>
    3. git add .
    4. git commit -am "Update <branch>"
    5. git checkout -B <branch>
    6. git push -uf origin <branch>
    7. rm -rf <dir>/.git

Cada paso depende del anterior. El primero que falle detiene todo con
PublishError; los pasos ya hechos NO se deshacen. Es destructivo a
propósito: está pensado para correr una vez sobre un build efímero,
nunca sobre un working tree con historia que importe.

¿Por qué GitPython con execute() y no Repo.index?
    Queremos exactamente los comandos de git (incluido el push forzado
    con upstream) y su exit code. Git.execute() bloquea hasta que el
    proceso termina y lanza GitCommandError si el status no es 0.

Uso:
    from ghdeploy.publishing.branch_publisher import BranchPublisher
    publisher = BranchPublisher(Path("dist"))
    publisher.publish("https://github.com/u/site.git", "gh-pages")
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable

# Sin git en PATH, GitPython falla al importar; así el error llega
# como GitCommandNotFound al ejecutar el primer paso.
os.environ.setdefault("GIT_PYTHON_REFRESH", "quiet")

import git as gitpython  # noqa: E402

from ghdeploy.utils.logger import get_logger

logger = get_logger("ghdeploy.publisher")

DEFAULT_COMMIT_MESSAGE = "Update {branch}"

# Recibe ["git", ...] y devuelve stdout; lanza GitCommandError si falla
GitRunner = Callable[[list[str]], str]


class PublishStep(Enum):
    """Pasos del publish, en orden de ejecución."""
    INIT = "init"
    REMOTE = "remote"
    ADD = "add"
    COMMIT = "commit"
    BRANCH = "branch"
    PUSH = "push"
    CLEANUP = "cleanup"


class PublishError(RuntimeError):
    """
    Un paso de git terminó con status distinto de 0.

    Attributes:
        step: PublishStep que falló.
        status: Exit code del proceso (None si git no se pudo ejecutar).
        detail: Descripción textual del fallo (incluye stderr).
    """

    def __init__(self, step: PublishStep, status: int | None, detail: str):
        self.step = step
        self.status = status
        self.detail = detail
        estado = f"exit code {status}" if status is not None else "no se pudo ejecutar"
        super().__init__(f"Paso '{step.value}' falló ({estado}): {detail}")


@dataclass
class PublishResult:
    """Resumen de un publish terminado (o simulado en dry-run)."""
    directory: Path
    remote_url: str
    branch: str
    steps_run: list[PublishStep] = field(default_factory=list)
    dry_run: bool = False


def render_commit_message(template: str, branch: str) -> str:
    """
    Aplica {branch} al template del mensaje de commit.

    Raises:
        ValueError: Si el template usa otro placeholder o está mal formado.
    """
    try:
        return template.format(branch=branch)
    except (KeyError, IndexError, ValueError) as e:
        raise ValueError(
            f"commit_message inválido {template!r}: solo se admite {{branch}} ({e!r})"
        ) from e


def publish_steps(
    remote_url: str,
    branch: str,
    message: str,
) -> list[tuple[PublishStep, list[str]]]:
    """Plan ordenado de comandos git (sin el "git" inicial)."""
    return [
        (PublishStep.INIT, ["init"]),
        (PublishStep.REMOTE, ["remote", "add", "origin", remote_url]),
        (PublishStep.ADD, ["add", "."]),
        (PublishStep.COMMIT, ["commit", "-am", message]),
        (PublishStep.BRANCH, ["checkout", "-B", branch]),
        (PublishStep.PUSH, ["push", "-uf", "origin", branch]),
    ]


class BranchPublisher:
    """
    Publica el contenido de un directorio en una rama del remote.

    Args:
        directory: Directorio a publicar (ej: dist/). Se usa como
            working directory de todos los comandos git.
        runner: Ejecutor de comandos git. Por defecto
            git.Git(directory).execute.
    """

    def __init__(self, directory: str | Path, runner: GitRunner | None = None):
        self._directory = Path(directory)
        self._runner = runner

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def git_dir(self) -> Path:
        return self._directory / ".git"

    def publish(
        self,
        remote_url: str,
        branch: str,
        message_template: str = DEFAULT_COMMIT_MESSAGE,
        dry_run: bool = False,
    ) -> PublishResult:
        """
        Ejecuta la secuencia completa y limpia dist/.git al final.

        Args:
            remote_url: URL que se registra como origin.
            branch: Rama destino (se sobreescribe con force push).
            message_template: Mensaje de commit; acepta {branch}.
            dry_run: Si True, solo registra el plan en el log.

        Returns:
            PublishResult con los pasos ejecutados.

        Raises:
            FileNotFoundError: Si el directorio no existe.
            ValueError: Si message_template usa otro placeholder.
            PublishError: En el primer paso de git que falle.
            OSError: Si falla el borrado final de .git (el push ya se hizo).
        """
        if not self._directory.is_dir():
            raise FileNotFoundError(
                f"No existe el directorio a publicar: {self._directory}"
            )

        message = render_commit_message(message_template, branch)
        plan = publish_steps(remote_url, branch, message)
        result = PublishResult(
            directory=self._directory,
            remote_url=remote_url,
            branch=branch,
            dry_run=dry_run,
        )
        total = len(plan) + 1

        if dry_run:
            for numero, (step, args) in enumerate(plan, start=1):
                logger.step(numero, total, f"(dry-run) git {' '.join(args)}")
            logger.step(total, total, f"(dry-run) borrar {self.git_dir}")
            return result

        if self.git_dir.exists():
            logger.warning(f"{self.git_dir} ya existía, se borra antes de git init")
            shutil.rmtree(self.git_dir)

        run = self._runner or gitpython.Git(str(self._directory)).execute

        for numero, (step, args) in enumerate(plan, start=1):
            logger.step(numero, total, f"git {' '.join(args)}")
            self._run(run, step, args)
            result.steps_run.append(step)

        logger.step(total, total, f"Borrando {self.git_dir}")
        shutil.rmtree(self.git_dir)
        result.steps_run.append(PublishStep.CLEANUP)

        logger.success(f"Publicado {self._directory} en origin/{branch}")
        return result

    def _run(self, run: GitRunner, step: PublishStep, args: list[str]) -> str:
        """Ejecuta un comando git y traduce el fallo a PublishError."""
        try:
            return run(["git", *args])
        except gitpython.GitCommandNotFound as e:
            raise PublishError(step, None, "git no encontrado en PATH") from e
        except gitpython.GitCommandError as e:
            raise PublishError(step, e.status, str(e).strip()) from e

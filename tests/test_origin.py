"""
test_origin.py — Tests para la lectura del remote origin.

Verificamos que:
1. La url se lee de la sección [remote "origin"] y se recorta
2. Sin sección origin → OriginNotFoundError
3. Otra sección antes de la url → OriginNotFoundError
4. El nombre del repo se deriva bien de la URL
"""

from __future__ import annotations

import pytest

from ghdeploy.publishing.origin import (
    OriginNotFoundError,
    get_remote_origin,
    repository_name,
)


def _write_git_config(root, contenido: str) -> None:
    git_dir = root / ".git"
    git_dir.mkdir()
    (git_dir / "config").write_text(contenido, encoding="utf-8")


GIT_CONFIG_TIPICO = """\
[core]
\trepositoryformatversion = 0
\tfilemode = true
\tbare = false
[remote "origin"]
\turl = https://github.com/someone/site.git
\tfetch = +refs/heads/*:refs/remotes/origin/*
[branch "main"]
\tremote = origin
\tmerge = refs/heads/main
"""


class TestGetRemoteOrigin:
    """Tests para get_remote_origin."""

    def test_config_tipico(self, tmp_path):
        """Un .git/config normal devuelve la url del origin."""
        _write_git_config(tmp_path, GIT_CONFIG_TIPICO)
        assert get_remote_origin(tmp_path) == "https://github.com/someone/site.git"

    def test_recorta_espacios(self, tmp_path):
        """La url se devuelve sin espacios alrededor."""
        _write_git_config(tmp_path, '[remote "origin"]\n  url =    git@host:g/x.git   \n')
        assert get_remote_origin(tmp_path) == "git@host:g/x.git"

    def test_divide_en_el_primer_igual(self, tmp_path):
        """Solo se divide en el primer '=': el resto es parte de la url."""
        _write_git_config(
            tmp_path,
            '[remote "origin"]\n\turl = https://host/repo?a=1&b=2\n',
        )
        assert get_remote_origin(tmp_path) == "https://host/repo?a=1&b=2"

    def test_ignora_otros_remotes(self, tmp_path):
        """La url de otro remote anterior no cuenta."""
        _write_git_config(
            tmp_path,
            '[remote "upstream"]\n\turl = https://host/upstream.git\n'
            '[remote "origin"]\n\turl = https://host/mine.git\n',
        )
        assert get_remote_origin(tmp_path) == "https://host/mine.git"

    def test_sin_origin(self, tmp_path):
        """Sin [remote "origin"] debe fallar con not-found."""
        _write_git_config(tmp_path, '[core]\n\tbare = false\n[remote "upstream"]\n\turl = x\n')
        with pytest.raises(OriginNotFoundError):
            get_remote_origin(tmp_path)

    def test_seccion_antes_de_url(self, tmp_path):
        """Si aparece otra sección antes de la url, falla."""
        _write_git_config(
            tmp_path,
            '[remote "origin"]\n\tfetch = +refs/heads/*\n'
            '[branch "main"]\n\turl = https://host/wrong.git\n',
        )
        with pytest.raises(OriginNotFoundError):
            get_remote_origin(tmp_path)

    def test_fin_de_archivo_sin_url(self, tmp_path):
        """Origin al final del archivo sin url → not-found."""
        _write_git_config(tmp_path, '[core]\n\tbare = false\n[remote "origin"]\n')
        with pytest.raises(OriginNotFoundError):
            get_remote_origin(tmp_path)

    def test_url_sin_igual(self, tmp_path):
        """Una línea con 'url' pero sin '=' no es válida."""
        _write_git_config(tmp_path, '[remote "origin"]\n\turl https://host/x.git\n')
        with pytest.raises(OriginNotFoundError):
            get_remote_origin(tmp_path)

    def test_sin_archivo(self, tmp_path):
        """Sin .git/config el error de I/O se propaga."""
        with pytest.raises(FileNotFoundError):
            get_remote_origin(tmp_path)

    def test_not_found_es_lookup_error(self):
        """OriginNotFoundError se puede atrapar como LookupError."""
        assert issubclass(OriginNotFoundError, LookupError)


class TestRepositoryName:
    """Tests para repository_name."""

    def test_con_sufijo_git(self):
        assert repository_name("https://host/group/Name.git") == "Name"

    def test_sin_sufijo(self):
        assert repository_name("https://host/group/Name") == "Name"

    def test_sin_barra(self):
        """Sin '/' se devuelve todo el string."""
        assert repository_name("Name") == "Name"

    def test_ssh(self):
        assert repository_name("git@github.com:someone/site.git") == "site"

    def test_solo_quita_un_sufijo(self):
        """Solo se quita el '.git' final, no otros."""
        assert repository_name("https://host/a/my.git.io.git") == "my.git.io"

"""
test_config.py — Tests para el módulo de configuración.

Verificamos que:
1. Las variables de entorno se resuelven en los valores del YAML
2. Los valores por defecto funcionan cuando no hay archivo
3. ghdeploy.yaml y .env se cargan y se mapean a dataclasses
4. GHDEPLOY_REMOTE_URL / GHDEPLOY_BRANCH tienen prioridad
"""

from unittest.mock import patch

import pytest
import yaml

from ghdeploy.config import (
    AppConfig,
    DeployConfig,
    load_config,
    _find_config_dir,
    _resolve_env_recursive,
    _resolve_env_vars,
)


class TestResolveEnvVars:
    """Tests para la resolución de variables de entorno."""

    def test_resuelve_variable_existente(self):
        with patch.dict("os.environ", {"MI_VAR": "hola"}):
            assert _resolve_env_vars("${MI_VAR}/path") == "hola/path"

    def test_mantiene_variable_inexistente(self):
        """Si la variable no existe, debe mantener el placeholder."""
        with patch.dict("os.environ", {}, clear=True):
            assert _resolve_env_vars("${NO_EXISTE}") == "${NO_EXISTE}"

    def test_resuelve_en_dict_anidado(self):
        with patch.dict("os.environ", {"PATH_VAR": "/mi/path"}):
            datos = {"nivel1": {"nivel2": "${PATH_VAR}"}, "lista": ["${PATH_VAR}"]}
            resultado = _resolve_env_recursive(datos)
            assert resultado["nivel1"]["nivel2"] == "/mi/path"
            assert resultado["lista"] == ["/mi/path"]

    def test_no_modifica_booleanos(self):
        assert _resolve_env_recursive(True) is True


class TestAppConfig:
    def test_valores_por_defecto(self):
        config = AppConfig()
        assert config.deploy.dist_dir == "dist"
        assert config.deploy.branch == "gh-pages"
        assert config.deploy.entry_file == "index.html"
        assert config.deploy.rewrite_assets is True
        assert config.deploy.commit_message == "Update {branch}"
        assert config.deploy.remote_url == ""
        assert config.logging.file == ""


class TestLoadConfig:
    """Tests para load_config."""

    def test_carga_sin_archivo(self, tmp_path):
        """Sin ghdeploy.yaml se usan los valores por defecto."""
        with patch.dict("os.environ", {}, clear=True):
            with patch("ghdeploy.config._find_config_dir", return_value=tmp_path):
                config = load_config()
        assert isinstance(config, AppConfig)
        assert config.deploy == DeployConfig()

    def test_carga_yaml(self, tmp_path):
        (tmp_path / "ghdeploy.yaml").write_text(
            "deploy:\n"
            "  dist_dir: build\n"
            "  branch: pages\n"
            "  rewrite_assets: false\n"
            "  clave_desconocida: 1\n"
            "logging:\n"
            "  verbose: true\n",
            encoding="utf-8",
        )
        with patch.dict("os.environ", {}, clear=True):
            with patch("ghdeploy.config._find_config_dir", return_value=tmp_path):
                config = load_config()

        assert config.deploy.dist_dir == "build"
        assert config.deploy.branch == "pages"
        assert config.deploy.rewrite_assets is False
        assert config.deploy.entry_file == "index.html"
        assert config.logging.verbose is True

    def test_env_y_dotenv(self, tmp_path):
        """${VAR} del YAML se resuelve con lo que trae .env."""
        (tmp_path / "ghdeploy.yaml").write_text(
            "deploy:\n  remote_url: ${DEPLOY_REMOTE}\n", encoding="utf-8"
        )
        (tmp_path / ".env").write_text(
            "DEPLOY_REMOTE=https://host/u/site.git\n", encoding="utf-8"
        )
        with patch.dict("os.environ", {}, clear=True):
            config = load_config(tmp_path / "ghdeploy.yaml")

        assert config.deploy.remote_url == "https://host/u/site.git"

    def test_overrides_de_entorno(self, tmp_path):
        (tmp_path / "ghdeploy.yaml").write_text(
            "deploy:\n  branch: pages\n", encoding="utf-8"
        )
        env = {"GHDEPLOY_REMOTE_URL": "git@h:x/y.git", "GHDEPLOY_BRANCH": "site"}
        with patch.dict("os.environ", env, clear=True):
            config = load_config(tmp_path / "ghdeploy.yaml")

        assert config.deploy.remote_url == "git@h:x/y.git"
        assert config.deploy.branch == "site"

    def test_yaml_invalido(self, tmp_path):
        (tmp_path / "ghdeploy.yaml").write_text("deploy: [sin cerrar\n", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            load_config(tmp_path / "ghdeploy.yaml")


class TestFindConfigDir:
    def test_busca_hacia_arriba(self, tmp_path):
        (tmp_path / "ghdeploy.yaml").write_text("", encoding="utf-8")
        sub = tmp_path / "a" / "b"
        sub.mkdir(parents=True)
        assert _find_config_dir(sub) == tmp_path.resolve()

    def test_sin_archivo_devuelve_inicio(self, tmp_path):
        sub = tmp_path / "x"
        sub.mkdir()
        # Puede haber un ghdeploy.yaml más arriba en el host; solo
        # verificamos que el resultado sea sub o uno de sus padres.
        resultado = _find_config_dir(sub)
        assert resultado == sub.resolve() or resultado in sub.resolve().parents

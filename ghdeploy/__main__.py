"""
__main__.py — Permite ejecutar ghdeploy como módulo.

    python -m ghdeploy deploy
"""

from ghdeploy.cli import main

if __name__ == "__main__":
    main()

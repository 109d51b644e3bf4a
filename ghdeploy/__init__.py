"""
ghdeploy — Publica un build estático en la rama gh-pages del origin.

Este paquete contiene:
- publishing/ → Resolver el origin, reescribir assets y publicar la rama
- pipeline.py → Encadena los tres pasos
- cli.py      → Comandos de línea (deploy, origin, rewrite, config, health)
- utils/      → Logging compartido

Uso:
    python -m ghdeploy deploy
    python -m ghdeploy deploy --dist build --branch gh-pages -v
    python -m ghdeploy health
"""

__version__ = "0.3.0"

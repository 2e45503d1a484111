"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Los diagnósticos van a stderr para que stdout solo lleve resultados.
"""

from __future__ import annotations

from rich.console import Console
from rich.text import Text


def build_error_console() -> Console:
    return Console(stderr=True, highlight=False)


def print_usage_error(console: Console, message: str, help_text: str) -> None:
    """Imprime un diagnóstico de validación seguido de la ayuda del comando."""

    console.print(Text.assemble(("error: ", "bold red"), message))
    if help_text:
        console.print(Text(help_text))

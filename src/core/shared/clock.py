"""
Relógio do domínio.

Todos os horários do Core são timezone-aware em UTC. Services recebem
um callable `relogio` para permitir congelar ou avançar o tempo em testes.
"""

from datetime import datetime, timezone
from typing import Callable


Relogio = Callable[[], datetime]


def utc_agora() -> datetime:
    """Retorna o instante atual em UTC (aware)."""
    return datetime.now(timezone.utc)


def garantir_utc(valor: datetime) -> datetime:
    """
    Normaliza datetime para UTC aware.

    Datetimes naive são interpretados como UTC.
    """
    if valor.tzinfo is None:
        return valor.replace(tzinfo=timezone.utc)
    return valor.astimezone(timezone.utc)

"""
Parâmetros do monitor de expiração.
"""

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class PoliticaExpiracao:
    """
    Attributes:
        janela_expirando_horas: Antecedência para alertar "expiring_soon"
        janela_deduplicacao_horas: Intervalo mínimo entre alertas "expiring_soon" do mesmo ticket
        intervalo_segundos: Período entre verificações agendadas
        tentativas_store: Tentativas por ticket em falhas de armazenamento
    """

    janela_expirando_horas: int = 48
    janela_deduplicacao_horas: int = 24
    intervalo_segundos: int = 30 * 60
    tentativas_store: int = 2

    def __post_init__(self):
        if self.janela_expirando_horas <= 0:
            raise ValueError("janela_expirando_horas deve ser positiva")
        if self.janela_deduplicacao_horas < 0:
            raise ValueError("janela_deduplicacao_horas não pode ser negativa")
        if self.intervalo_segundos <= 0:
            raise ValueError("intervalo_segundos deve ser positivo")
        if self.tentativas_store < 1:
            raise ValueError("tentativas_store deve ser pelo menos 1")

    @property
    def janela_expirando(self) -> timedelta:
        return timedelta(hours=self.janela_expirando_horas)

    @property
    def janela_deduplicacao(self) -> timedelta:
        return timedelta(hours=self.janela_deduplicacao_horas)

"""
Monitor de Expiração - reconciliação periódica de tickets.

Uma verificação (`executar`) tem duas etapas, sempre nesta ordem:

    A. Tickets ABERTOS que expiram nas próximas 48h recebem um alerta
       "expiring_soon", a menos que já exista um criado nas últimas 24h.
    B. Tickets ABERTOS com prazo vencido passam para EXPIRADO e recebem
       um alerta "expired" (estado gravado antes do alerta).

Falhas são isoladas por ticket: um ticket com erro é registrado no
resultado e retomado na próxima verificação. Nada propaga para fora
de `executar()` exceto erros de programação do próprio monitor.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from src.core.alerts.entities import AlertEntity, AlertType
from src.core.alerts.ports import AlertRepository
from src.core.shared.clock import Relogio, utc_agora
from src.core.shared.exceptions import ConcurrencyError, StoreError
from src.core.shared.interfaces import EventPublisher
from src.core.tickets.entities import TicketEntity, TicketStatus
from src.core.tickets.events import TicketExpiradoEvent
from src.core.tickets.ports import TicketRepository

from .policy import PoliticaExpiracao

logger = logging.getLogger(__name__)


@dataclass
class ResultadoVerificacao:
    """
    Resumo de uma verificação.

    Attributes:
        iniciado_em: Instante de referência da verificação
        alertas_criados: Alertas criados (expiring_soon + expired)
        tickets_expirados: Tickets que passaram para EXPIRADO
        expirados_sem_alerta: IDs expirados cujo alerta não foi gravado
        falhas: (ticket_id, mensagem) de tickets pulados
        concluido_em: Fim da verificação (mesmo relógio de iniciado_em)
    """

    iniciado_em: datetime
    alertas_criados: int = 0
    tickets_expirados: int = 0
    tickets_verificados: int = 0
    expirados_sem_alerta: List[str] = field(default_factory=list)
    falhas: List[Tuple[str, str]] = field(default_factory=list)
    concluido_em: Optional[datetime] = None

    @property
    def duracao_segundos(self) -> Optional[float]:
        if self.concluido_em is None:
            return None
        return (self.concluido_em - self.iniciado_em).total_seconds()

    @property
    def sucesso(self) -> bool:
        return not self.falhas and not self.expirados_sem_alerta

    def to_dict(self) -> dict:
        return {
            "startedAt": self.iniciado_em.isoformat(),
            "finishedAt": self.concluido_em.isoformat() if self.concluido_em else None,
            "durationSeconds": self.duracao_segundos,
            "ticketsChecked": self.tickets_verificados,
            "alertsCreated": self.alertas_criados,
            "ticketsExpired": self.tickets_expirados,
            "expiredWithoutAlert": list(self.expirados_sem_alerta),
            "failures": [{"ticketId": t, "error": e} for t, e in self.falhas],
        }


class ExpirationMonitorService:
    """
    Serviço de reconciliação de expiração.

    Recebe explicitamente os repositórios, a política e o relógio.
    Não guarda estado entre verificações.

    Example:
        monitor = ExpirationMonitorService(ticket_repo, alert_repo)
        resultado = monitor.executar()
        print(resultado.tickets_expirados)
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        alert_repo: AlertRepository,
        politica: Optional[PoliticaExpiracao] = None,
        relogio: Relogio = utc_agora,
        event_publisher: Optional[EventPublisher] = None,
    ):
        self.ticket_repo = ticket_repo
        self.alert_repo = alert_repo
        self.politica = politica or PoliticaExpiracao()
        self.relogio = relogio
        self.event_publisher = event_publisher

    def executar(self) -> ResultadoVerificacao:
        """Executa uma verificação completa (etapa A, depois etapa B)."""
        agora = self.relogio()
        resultado = ResultadoVerificacao(iniciado_em=agora)

        logger.info(f"Verificação de expiração iniciada (referência {agora.isoformat()})")

        self._verificar_expirando(agora, resultado)
        self._expirar_vencidos(agora, resultado)

        resultado.concluido_em = self.relogio()
        logger.info(
            f"Verificação de expiração concluída: "
            f"{resultado.alertas_criados} alertas, "
            f"{resultado.tickets_expirados} expirados, "
            f"{len(resultado.falhas)} falhas"
        )
        return resultado

    # =========================================================================
    # Etapa A - expirando em breve
    # =========================================================================

    def _verificar_expirando(self, agora: datetime, resultado: ResultadoVerificacao) -> None:
        try:
            tickets = self.ticket_repo.list_expirando(agora, agora + self.politica.janela_expirando)
        except Exception as e:
            logger.exception("Falha ao consultar tickets expirando em breve")
            resultado.falhas.append(("*", str(e)))
            return

        logger.info(f"{len(tickets)} tickets expirando nas próximas {self.politica.janela_expirando_horas}h")

        for ticket in tickets:
            resultado.tickets_verificados += 1
            criado = self._com_isolamento(
                ticket,
                resultado,
                lambda t=ticket: self._alertar_expirando(t, agora),
            )
            if criado:
                resultado.alertas_criados += 1

    def _alertar_expirando(self, ticket: TicketEntity, agora: datetime) -> bool:
        desde = agora - self.politica.janela_deduplicacao
        if self.alert_repo.exists_recent(ticket.id, AlertType.EXPIRANDO, desde):
            logger.debug(f"Ticket {ticket.numero} já alertado desde {desde.isoformat()}")
            return False

        horas = ticket.horas_ate_expiracao(agora)
        alerta = AlertEntity.para_expiracao(ticket.id, horas, agora)
        self.alert_repo.add(alerta)

        logger.info(f"Alerta criado para ticket {ticket.numero}: {alerta.mensagem}")
        return True

    # =========================================================================
    # Etapa B - vencidos
    # =========================================================================

    def _expirar_vencidos(self, agora: datetime, resultado: ResultadoVerificacao) -> None:
        try:
            tickets = self.ticket_repo.list_expirados(agora)
        except Exception as e:
            logger.exception("Falha ao consultar tickets vencidos")
            resultado.falhas.append(("*", str(e)))
            return

        logger.info(f"{len(tickets)} tickets vencidos para expirar")

        for ticket in tickets:
            resultado.tickets_verificados += 1
            expirado = self._com_isolamento(
                ticket,
                resultado,
                lambda t=ticket: self._expirar_ticket(t.id, agora),
            )
            if not expirado:
                continue

            resultado.tickets_expirados += 1
            logger.warning(f"Ticket {expirado.numero} expirado automaticamente")
            self._publicar_expiracao(expirado)

            alerta_gravado = self._com_isolamento(
                expirado,
                resultado,
                lambda t=expirado: self._alertar_expirado(t, agora),
                registrar_falha=False,
            )
            if alerta_gravado:
                resultado.alertas_criados += 1
            else:
                logger.error(f"Ticket {expirado.numero} expirado mas sem alerta")
                resultado.expirados_sem_alerta.append(expirado.id)

    def _expirar_ticket(self, ticket_id: str, agora: datetime) -> Optional[TicketEntity]:
        """
        Relê o ticket e grava a expiração.

        Retorna None se o ticket não precisa mais expirar (removido,
        fechado ou renovado desde a consulta).
        """
        ticket = self.ticket_repo.get_by_id(ticket_id)
        if ticket is None or ticket.status != TicketStatus.ABERTO or ticket.data_expiracao >= agora:
            return None

        ticket.expirar(agora)
        self.ticket_repo.save(ticket)
        return ticket

    def _alertar_expirado(self, ticket: TicketEntity, agora: datetime) -> bool:
        self.alert_repo.add(AlertEntity.para_expiracao(ticket.id, 0, agora))
        return True

    def _publicar_expiracao(self, ticket: TicketEntity) -> None:
        if self.event_publisher is None:
            return
        try:
            self.event_publisher.publish(
                TicketExpiradoEvent(
                    aggregate_id=ticket.id,
                    numero=ticket.numero,
                    data_expiracao=ticket.data_expiracao,
                    atribuido_a_id=ticket.atribuido_a_id,
                )
            )
        except Exception:
            logger.exception(f"Falha ao publicar expiração do ticket {ticket.numero}")

    # =========================================================================
    # Isolamento de falhas
    # =========================================================================

    def _com_isolamento(
        self,
        ticket: TicketEntity,
        resultado: ResultadoVerificacao,
        operacao: Callable[[], object],
        registrar_falha: bool = True,
    ):
        """
        Executa operação de um ticket sem deixar a falha abortar o lote.

        StoreError é repetido até `politica.tentativas_store` vezes.
        Demais erros (inclusive ConcurrencyError de uma renovação
        simultânea) pulam o ticket até a próxima verificação.

        Returns:
            Retorno da operação, ou None em caso de falha
        """
        for tentativa in range(1, self.politica.tentativas_store + 1):
            try:
                return operacao()
            except StoreError as e:
                if tentativa < self.politica.tentativas_store:
                    logger.warning(f"Erro de armazenamento no ticket {ticket.numero}, repetindo: {e}")
                    continue
                logger.error(f"Erro de armazenamento no ticket {ticket.numero}, pulando: {e}")
                erro = e
            except ConcurrencyError as e:
                logger.warning(f"Ticket {ticket.numero} alterado concorrentemente, pulando: {e}")
                erro = e
            except Exception as e:
                logger.exception(f"Erro inesperado no ticket {ticket.numero}")
                erro = e

            if registrar_falha:
                resultado.falhas.append((ticket.id, str(erro)))
            return None

        return None

"""
Use Cases do Domínio de Alertas.

Use Cases implementados:
- ListarAlertasService: Lista alertas (mais recentes primeiro)
- ObterAlertaService: Obtém alerta específico
- AtualizarAlertaService: Marca como lido/não lido
- MarcarTodosComoLidosService: Marca todos do escopo como lidos
- ExcluirAlertaService: Exclui alerta (admin)
- EstatisticasAlertasService: Contagens por severidade

Escopo:
    Contratados só enxergam alertas de tickets atribuídos a eles.
    O escopo é resolvido via TicketRepository, já que o alerta
    referencia o ticket apenas por ID.
"""

from typing import Dict, List, Optional

from src.core.shared.exceptions import EntityNotFoundError, ForbiddenError
from src.core.shared.interfaces import UnitOfWork
from src.core.tickets.dtos import PaginatedResultDTO
from src.core.tickets.ports import TicketRepository
from src.core.users.entities import UsuarioAtual
from src.core.users.policies import exigir_admin

from .dtos import AlertOutputDTO, EstatisticasAlertasDTO, ListarAlertasQueryDTO
from .ports import AlertRepository


def _escopo_ticket_ids(ticket_repo: TicketRepository, usuario: UsuarioAtual) -> Optional[List[str]]:
    """None para admin (todos), IDs dos tickets próprios para contratado."""
    if usuario.e_admin:
        return None
    return ticket_repo.list_ids_by_atribuido(usuario.id)


def _resumo_ticket(ticket) -> Optional[Dict]:
    if ticket is None:
        return None
    return {
        "id": ticket.id,
        "ticketNumber": ticket.numero,
        "organization": ticket.organizacao,
        "status": ticket.status.value,
        "expirationDate": ticket.data_expiracao.isoformat(),
        "assignedTo": ticket.atribuido_a_id,
    }


class _AlertaComEscopo:
    """Base dos use cases que operam sobre um único alerta."""

    def __init__(self, alert_repo: AlertRepository, ticket_repo: TicketRepository):
        self.alert_repo = alert_repo
        self.ticket_repo = ticket_repo

    def _buscar_com_acesso(self, alert_id: str, usuario: UsuarioAtual, acao: str):
        """
        Raises:
            EntityNotFoundError: Se alerta não existe
            ForbiddenError: Se contratado e ticket de outro responsável
        """
        alerta = self.alert_repo.get_by_id(alert_id)
        if not alerta:
            raise EntityNotFoundError("Alert not found", entity_type="Alert", entity_id=alert_id)

        ticket = self.ticket_repo.get_by_id(alerta.ticket_id)
        if usuario.e_contratado and (ticket is None or ticket.atribuido_a_id != usuario.id):
            raise ForbiddenError(f"You can only {acao} alerts for tickets assigned to you")

        return alerta, ticket


class ListarAlertasService:
    """
    Use Case: Listar alertas do escopo do usuário.

    Example:
        service = ListarAlertasService(alert_repo, ticket_repo)
        resultado = service.execute(ListarAlertasQueryDTO(apenas_nao_lidos=True), usuario)
    """

    def __init__(self, alert_repo: AlertRepository, ticket_repo: TicketRepository):
        self.alert_repo = alert_repo
        self.ticket_repo = ticket_repo

    def execute(self, query: ListarAlertasQueryDTO, usuario: UsuarioAtual) -> PaginatedResultDTO:
        query = query.normalizar()
        ticket_ids = _escopo_ticket_ids(self.ticket_repo, usuario)

        alertas, total = self.alert_repo.list_paginated(query, ticket_ids)

        tickets = {}
        for ticket_id in {a.ticket_id for a in alertas}:
            tickets[ticket_id] = _resumo_ticket(self.ticket_repo.get_by_id(ticket_id))

        return PaginatedResultDTO(
            items=[AlertOutputDTO.from_entity(a, tickets.get(a.ticket_id)) for a in alertas],
            total=total,
            pagina=query.pagina,
            por_pagina=query.por_pagina,
        )


class ObterAlertaService(_AlertaComEscopo):
    """Use Case: Obter um alerta."""

    def execute(self, alert_id: str, usuario: UsuarioAtual) -> AlertOutputDTO:
        alerta, ticket = self._buscar_com_acesso(alert_id, usuario, "access")
        return AlertOutputDTO.from_entity(alerta, _resumo_ticket(ticket))


class AtualizarAlertaService(_AlertaComEscopo):
    """
    Use Case: Marcar alerta como lido ou não lido.

    `lido=None` mantém o valor atual (resposta sem alteração).
    """

    def __init__(
        self,
        alert_repo: AlertRepository,
        ticket_repo: TicketRepository,
        uow: UnitOfWork,
    ):
        super().__init__(alert_repo, ticket_repo)
        self.uow = uow

    def execute(
        self,
        alert_id: str,
        usuario: UsuarioAtual,
        lido: Optional[bool] = None,
    ) -> AlertOutputDTO:
        with self.uow:
            alerta, ticket = self._buscar_com_acesso(alert_id, usuario, "update")

            if lido is not None and alerta.marcar_lido(lido):
                self.alert_repo.save(alerta)

        return AlertOutputDTO.from_entity(alerta, _resumo_ticket(ticket))


class MarcarTodosComoLidosService:
    """Use Case: Marcar todos os alertas do escopo como lidos."""

    def __init__(
        self,
        alert_repo: AlertRepository,
        ticket_repo: TicketRepository,
        uow: UnitOfWork,
    ):
        self.alert_repo = alert_repo
        self.ticket_repo = ticket_repo
        self.uow = uow

    def execute(self, usuario: UsuarioAtual) -> int:
        """
        Returns:
            Quantidade de alertas alterados
        """
        with self.uow:
            ticket_ids = _escopo_ticket_ids(self.ticket_repo, usuario)
            return self.alert_repo.mark_all_read(ticket_ids)


class ExcluirAlertaService:
    """Use Case: Excluir alerta (apenas administradores)."""

    def __init__(self, alert_repo: AlertRepository, uow: UnitOfWork):
        self.alert_repo = alert_repo
        self.uow = uow

    def execute(self, alert_id: str, usuario: UsuarioAtual) -> None:
        """
        Raises:
            ForbiddenError: Se usuário não é admin
            EntityNotFoundError: Se alerta não existe
        """
        exigir_admin(usuario, "delete alerts")

        with self.uow:
            if not self.alert_repo.delete(alert_id):
                raise EntityNotFoundError("Alert not found", entity_type="Alert", entity_id=alert_id)


class EstatisticasAlertasService:
    """Use Case: total, não lidos e contagem por severidade."""

    def __init__(self, alert_repo: AlertRepository, ticket_repo: TicketRepository):
        self.alert_repo = alert_repo
        self.ticket_repo = ticket_repo

    def execute(self, usuario: UsuarioAtual) -> EstatisticasAlertasDTO:
        return self.alert_repo.stats(_escopo_ticket_ids(self.ticket_repo, usuario))

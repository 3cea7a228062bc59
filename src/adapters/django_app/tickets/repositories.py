"""
Repositórios Django para persistência de Tickets, Alertas e
consulta ao diretório de usuários.

Implementam as interfaces (Ports) definidas no Core.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Implementar TicketRepository, AlertRepository e UserDirectory
- Mapear entities para models e vice-versa
- Executar queries no banco via ORM
- Lock otimista de tickets (coluna `versao`)
"""

from datetime import datetime
from typing import Collection, Dict, List, Optional, Tuple
import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Count, F, Q

from src.core.alerts.dtos import EstatisticasAlertasDTO, ListarAlertasQueryDTO
from src.core.alerts.entities import AlertEntity, AlertType
from src.core.shared.exceptions import ConcurrencyError, EntityNotFoundError
from src.core.tickets.dtos import ListarTicketsQueryDTO
from src.core.tickets.entities import TicketEntity, TicketStatus
from src.core.users.entities import UserRole, UsuarioInfo

from ..shared.repository import BaseRepository
from .mappers import AlertMapper, TicketMapper
from .models import AlertModel, TicketModel

logger = logging.getLogger(__name__)


class DjangoTicketRepository(BaseRepository[TicketEntity, TicketModel]):
    """
    Implementação Django do TicketRepository.

    Example:
        repo = DjangoTicketRepository()
        repo.add(ticket)                 # ConflictError se número existe
        ticket = repo.get_by_id(ticket.id)
        ticket.renovar(15)
        repo.save(ticket)                # ConcurrencyError se versão mudou
    """

    model_class = TicketModel
    conflict_field = "ticketNumber"

    def to_entity(self, model: TicketModel) -> TicketEntity:
        return TicketMapper.to_entity(model)

    def to_model(self, entity: TicketEntity) -> TicketModel:
        return TicketMapper.to_model(entity)

    def add(self, ticket: TicketEntity) -> None:
        """
        Insere ticket novo com versão 1.

        Raises:
            ConflictError: Se número já existe
            StoreError: Em falha do banco
        """
        ticket.versao = 1
        try:
            self._inserir(ticket)
        except Exception:
            ticket.versao = 0
            raise
        logger.info(f"Ticket created: {ticket.numero}")

    def save(self, ticket: TicketEntity) -> None:
        """
        Atualiza ticket com lock otimista.

        UPDATE ... WHERE id = %s AND versao = %s; nenhuma linha afetada
        significa que o ticket foi removido ou alterado por outro processo.

        Raises:
            ConcurrencyError: Se versão armazenada difere
            EntityNotFoundError: Se ticket não existe
            StoreError: Em falha do banco
        """
        with self._erros_de_armazenamento("update"):
            atualizados = (
                TicketModel.objects
                .filter(id=ticket.id, versao=ticket.versao)
                .update(versao=F("versao") + 1, **TicketMapper.campos_atualizaveis(ticket))
            )

        if atualizados == 0:
            if not self.exists(ticket.id):
                raise EntityNotFoundError("Ticket not found", entity_type="Ticket", entity_id=ticket.id)
            raise ConcurrencyError(
                f"Ticket {ticket.numero} was modified concurrently (expected version {ticket.versao})"
            )

        ticket.versao += 1
        logger.debug(f"Ticket saved: {ticket.numero} v{ticket.versao}")

    def get_by_numero(self, numero: str) -> Optional[TicketEntity]:
        numero = (numero or "").strip().upper()
        with self._erros_de_armazenamento("get"):
            model = TicketModel.objects.filter(numero=numero).first()
        return self.to_entity(model) if model else None

    def get_ultimo_numero(self, prefixo: str) -> Optional[str]:
        with self._erros_de_armazenamento("get"):
            return (
                TicketModel.objects
                .filter(numero__startswith=f"{prefixo}-")
                .order_by("-numero")
                .values_list("numero", flat=True)
                .first()
            )

    def list_paginated(self, query: ListarTicketsQueryDTO) -> Tuple[List[TicketEntity], int]:
        queryset = TicketModel.objects.all()

        if query.status:
            queryset = queryset.filter(status=query.status)
        if query.organizacao:
            queryset = queryset.filter(organizacao__icontains=query.organizacao)
        if query.numero:
            queryset = queryset.filter(numero__icontains=query.numero)
        if query.atribuido_a_id:
            queryset = queryset.filter(atribuido_a_id=query.atribuido_a_id)

        prefixo = "-" if query.ordem == "desc" else ""
        queryset = queryset.order_by(f"{prefixo}{query.ordenar_por}", f"{prefixo}id")

        with self._erros_de_armazenamento("list"):
            total = queryset.count()
            models = list(queryset[query.offset:query.offset + query.por_pagina])

        return TicketMapper.to_entity_list(models), total

    def list_ids_by_atribuido(self, atribuido_a_id: str) -> List[str]:
        with self._erros_de_armazenamento("list"):
            return list(
                TicketModel.objects
                .filter(atribuido_a_id=atribuido_a_id)
                .values_list("id", flat=True)
            )

    def count_by_status(self, atribuido_a_id: Optional[str] = None) -> Dict[TicketStatus, int]:
        queryset = TicketModel.objects.all()
        if atribuido_a_id is not None:
            queryset = queryset.filter(atribuido_a_id=atribuido_a_id)

        contagem = {status: 0 for status in TicketStatus}
        with self._erros_de_armazenamento("count"):
            for item in queryset.values("status").annotate(total=Count("id")).order_by():
                contagem[TicketStatus(item["status"])] = item["total"]
        return contagem

    def count_expirando(
        self,
        inicio: datetime,
        fim: datetime,
        atribuido_a_id: Optional[str] = None,
    ) -> int:
        queryset = self._expirando(inicio, fim)
        if atribuido_a_id is not None:
            queryset = queryset.filter(atribuido_a_id=atribuido_a_id)
        with self._erros_de_armazenamento("count"):
            return queryset.count()

    def list_expirando(self, inicio: datetime, fim: datetime) -> List[TicketEntity]:
        return self._to_entity_list(self._expirando(inicio, fim).order_by("data_expiracao"))

    def list_expirados(self, agora: datetime) -> List[TicketEntity]:
        queryset = TicketModel.objects.filter(
            status=TicketStatus.ABERTO.value,
            data_expiracao__lt=agora,
        ).order_by("data_expiracao")
        return self._to_entity_list(queryset)

    def _expirando(self, inicio: datetime, fim: datetime):
        return TicketModel.objects.filter(
            status=TicketStatus.ABERTO.value,
            data_expiracao__gt=inicio,
            data_expiracao__lte=fim,
        )


class DjangoAlertRepository(BaseRepository[AlertEntity, AlertModel]):
    """Implementação Django do AlertRepository."""

    model_class = AlertModel

    def to_entity(self, model: AlertModel) -> AlertEntity:
        return AlertMapper.to_entity(model)

    def to_model(self, entity: AlertEntity) -> AlertModel:
        return AlertMapper.to_model(entity)

    def add(self, alerta: AlertEntity) -> None:
        self._inserir(alerta)
        logger.debug(f"Alert created: {alerta.tipo.value} for ticket {alerta.ticket_id}")

    def save(self, alerta: AlertEntity) -> None:
        """Apenas o indicador de leitura é mutável."""
        with self._erros_de_armazenamento("update"):
            atualizados = AlertModel.objects.filter(id=alerta.id).update(lido=alerta.lido)
        if atualizados == 0:
            raise EntityNotFoundError("Alert not found", entity_type="Alert", entity_id=alerta.id)

    def delete_by_ticket(self, ticket_id: str) -> int:
        with self._erros_de_armazenamento("delete"):
            removidos, _ = AlertModel.objects.filter(ticket_id=ticket_id).delete()
        return removidos

    def exists_recent(self, ticket_id: str, tipo: AlertType, desde: datetime) -> bool:
        with self._erros_de_armazenamento("get"):
            return AlertModel.objects.filter(
                ticket_id=ticket_id,
                tipo=tipo.value,
                criado_em__gte=desde,
            ).exists()

    def list_paginated(
        self,
        query: ListarAlertasQueryDTO,
        ticket_ids: Optional[Collection[str]] = None,
    ) -> Tuple[List[AlertEntity], int]:
        queryset = self._escopo(ticket_ids)

        if query.tipo:
            queryset = queryset.filter(tipo=query.tipo)
        if query.apenas_nao_lidos:
            queryset = queryset.filter(lido=False)
        if query.ticket_id:
            queryset = queryset.filter(ticket_id=query.ticket_id)

        queryset = queryset.order_by("-criado_em", "-id")

        with self._erros_de_armazenamento("list"):
            total = queryset.count()
            models = list(queryset[query.offset:query.offset + query.por_pagina])

        return [self.to_entity(m) for m in models], total

    def mark_all_read(self, ticket_ids: Optional[Collection[str]] = None) -> int:
        with self._erros_de_armazenamento("update"):
            return self._escopo(ticket_ids).filter(lido=False).update(lido=True)

    def stats(self, ticket_ids: Optional[Collection[str]] = None) -> EstatisticasAlertasDTO:
        with self._erros_de_armazenamento("count"):
            resultado = self._escopo(ticket_ids).aggregate(
                total=Count("id"),
                nao_lidos=Count("id", filter=Q(lido=False)),
                critical=Count("id", filter=Q(severidade="critical")),
                high=Count("id", filter=Q(severidade="high")),
                medium=Count("id", filter=Q(severidade="medium")),
                low=Count("id", filter=Q(severidade="low")),
            )
        return EstatisticasAlertasDTO(**{chave: valor or 0 for chave, valor in resultado.items()})

    def _escopo(self, ticket_ids: Optional[Collection[str]]):
        queryset = AlertModel.objects.all()
        if ticket_ids is not None:
            queryset = queryset.filter(ticket_id__in=list(ticket_ids))
        return queryset


def papel_do_usuario(user) -> UserRole:
    """`is_staff` → Admin, demais → Contractor."""
    return UserRole.ADMIN if user.is_staff else UserRole.CONTRATADO


class DjangoUserDirectory:
    """
    Diretório de usuários sobre django.contrib.auth.

    Mapeamento de papéis: `is_staff` → Admin, demais → Contractor.
    """

    def _to_info(self, user) -> UsuarioInfo:
        return UsuarioInfo(
            id=str(user.pk),
            email=user.email or user.get_username(),
            role=papel_do_usuario(user),
            ativo=user.is_active,
        )

    def get_by_id(self, user_id: str) -> Optional[UsuarioInfo]:
        User = get_user_model()
        try:
            return self._to_info(User.objects.get(pk=user_id))
        except (User.DoesNotExist, ValueError, DjangoValidationError):
            return None

    def get_by_email(self, email: str) -> Optional[UsuarioInfo]:
        User = get_user_model()
        user = User.objects.filter(email__iexact=(email or "").strip()).first()
        return self._to_info(user) if user else None

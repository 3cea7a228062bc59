"""
Use Cases (Application Services) do Domínio de Tickets.

Este módulo contém os casos de uso da aplicação, que orquestram
a lógica de negócio coordenando entidades, repositórios e eventos.

Use Cases implementados:
- CriarTicketService: Cria novo ticket (gera número se ausente)
- AtualizarTicketService: Atualiza campos, status e responsável
- RenovarTicketService: Estende o prazo e registra alerta
- FecharTicketService: Fecha ticket e registra alerta
- ExcluirTicketService: Exclui ticket e seus alertas (admin)
- ObterTicketService: Obtém ticket específico
- ListarTicketsService: Lista tickets com filtros e paginação
- EstatisticasTicketsService: Contagens por status
- GerarNumeroTicketService / VerificarNumeroTicketService

Princípios:
- Um Use Case = Uma operação de negócio
- Dependências injetadas (DI), incluindo o relógio
- Todo use case recebe o usuário autenticado (UsuarioAtual)
"""

import logging
from dataclasses import replace
from datetime import timedelta
from typing import Optional

from src.core.alerts.entities import AlertEntity
from src.core.alerts.ports import AlertRepository
from src.core.shared.clock import Relogio, utc_agora
from src.core.shared.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ValidationError,
)
from src.core.shared.interfaces import UnitOfWork
from src.core.users.entities import UsuarioAtual
from src.core.users.policies import (
    exigir_admin,
    resolver_responsavel,
    validar_responsavel,
    verificar_acesso_ticket,
)
from src.core.users.ports import UserDirectory

from .dtos import (
    AtualizarTicketInputDTO,
    CriarTicketInputDTO,
    EstatisticasTicketsDTO,
    ListarTicketsQueryDTO,
    NumeroTicketDTO,
    PaginatedResultDTO,
    TicketOutputDTO,
)
from .entities import (
    DIAS_RENOVACAO_PADRAO,
    TicketEntity,
    TicketStatus,
    gerar_numero_ticket,
    prefixo_do_ano,
)
from .events import (
    TicketAtualizadoEvent,
    TicketCriadoEvent,
    TicketExcluidoEvent,
    TicketFechadoEvent,
    TicketRenovadoEvent,
)
from .ports import TicketRepository

logger = logging.getLogger(__name__)

MAX_TENTATIVAS_NUMERO = 5
JANELA_EXPIRANDO_HORAS = 48


def _buscar_ticket(ticket_repo: TicketRepository, ticket_id: str) -> TicketEntity:
    ticket = ticket_repo.get_by_id(ticket_id)

    if not ticket:
        raise EntityNotFoundError(
            "Ticket not found",
            entity_type="Ticket",
            entity_id=ticket_id,
        )

    return ticket


class CriarTicketService:
    """
    Use Case: Criar um novo ticket.

    Fluxo:
    1. Resolver responsável (contratado = ele mesmo; admin = validado)
    2. Gerar número TKT-<ano>-NNNN se não informado
    3. Criar entidade (validações na entidade)
    4. Persistir e disparar TicketCriadoEvent

    Números gerados que colidem (criação concorrente) são recalculados
    até MAX_TENTATIVAS_NUMERO vezes. Número informado pelo chamador que
    já existe gera ConflictError imediatamente.

    Example:
        service = CriarTicketService(ticket_repo, uow, diretorio)
        output = service.execute(
            CriarTicketInputDTO(
                organizacao="City Water",
                localizacao="123 Main St",
                data_expiracao=agora + timedelta(days=10),
            ),
            usuario,
        )
        print(output.numero)  # TKT-2024-0001
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        uow: UnitOfWork,
        diretorio: UserDirectory,
        relogio: Relogio = utc_agora,
        max_tentativas: int = MAX_TENTATIVAS_NUMERO,
    ):
        """
        Inicializa service com dependências injetadas.

        Args:
            ticket_repo: Repositório para persistência
            uow: Unit of Work para transação atômica
            diretorio: Diretório de usuários (validação do responsável)
            relogio: Fonte do instante atual
            max_tentativas: Tentativas de geração de número
        """
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.diretorio = diretorio
        self.relogio = relogio
        self.max_tentativas = max_tentativas

    def execute(self, input_dto: CriarTicketInputDTO, usuario: UsuarioAtual) -> TicketOutputDTO:
        """
        Executa criação de ticket em transação atômica.

        Raises:
            ValidationError: Se dados inválidos
            InvalidAssigneeError: Se responsável inexistente/inativo
            ConflictError: Se número já existe
        """
        responsavel_id = resolver_responsavel(
            usuario.role,
            input_dto.atribuido_a_id,
            usuario.id,
            self.diretorio,
        )
        gerar_numero = input_dto.numero is None or (
            isinstance(input_dto.numero, str) and not input_dto.numero.strip()
        )

        for tentativa in range(1, self.max_tentativas + 1):
            agora = self.relogio()
            try:
                with self.uow:
                    numero = self._proximo_numero(agora.year) if gerar_numero else input_dto.numero

                    ticket = TicketEntity.criar(
                        numero=numero,
                        organizacao=input_dto.organizacao,
                        localizacao=input_dto.localizacao,
                        data_expiracao=input_dto.data_expiracao,
                        atribuido_a_id=responsavel_id,
                        observacoes=input_dto.observacoes,
                        coordenadas=input_dto.coordenadas,
                        endereco=input_dto.endereco,
                        agora=agora,
                    )

                    self.ticket_repo.add(ticket)

                    self.uow.publish_event(
                        TicketCriadoEvent(
                            aggregate_id=ticket.id,
                            numero=ticket.numero,
                            criado_por_id=usuario.id,
                            atribuido_a_id=ticket.atribuido_a_id,
                            organizacao=ticket.organizacao,
                            data_expiracao=ticket.data_expiracao,
                        )
                    )
            except ConflictError:
                if not gerar_numero or tentativa == self.max_tentativas:
                    raise
                logger.warning(f"Número {numero} já utilizado, nova tentativa ({tentativa}/{self.max_tentativas})")
                continue

            return TicketOutputDTO.from_entity(ticket, agora)

        raise ConflictError("Could not generate a unique ticket number", field="ticketNumber")

    def _proximo_numero(self, ano: int) -> str:
        ultimo = self.ticket_repo.get_ultimo_numero(prefixo_do_ano(ano))
        return gerar_numero_ticket(ultimo, ano)


class AtualizarTicketService:
    """
    Use Case: Atualizar um ticket.

    Regras:
    - Contratado só atualiza tickets próprios
    - Apenas admin pode reatribuir (responsável validado)
    - Mudança de status obedece a máquina de estados da entidade
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        uow: UnitOfWork,
        diretorio: UserDirectory,
        relogio: Relogio = utc_agora,
    ):
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.diretorio = diretorio
        self.relogio = relogio

    def execute(
        self,
        ticket_id: str,
        input_dto: AtualizarTicketInputDTO,
        usuario: UsuarioAtual,
    ) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se ticket não existe
            ForbiddenError: Se contratado e ticket de outro
            ValidationError: Se dados ou status inválidos
            InvalidAssigneeError: Se novo responsável inválido
            BusinessRuleViolationError: Se transição de status proibida
            ConcurrencyError: Se o ticket mudou desde a leitura
        """
        agora = self.relogio()

        with self.uow:
            ticket = _buscar_ticket(self.ticket_repo, ticket_id)
            verificar_acesso_ticket(usuario, ticket, "update")

            campos = ticket.atualizar_dados(
                organizacao=input_dto.organizacao,
                localizacao=input_dto.localizacao,
                observacoes=input_dto.observacoes,
                data_expiracao=input_dto.data_expiracao,
                coordenadas=input_dto.coordenadas,
                endereco=input_dto.endereco,
                agora=agora,
            )

            novo_responsavel = input_dto.atribuido_a_id
            if usuario.e_admin and novo_responsavel and novo_responsavel != ticket.atribuido_a_id:
                validar_responsavel(novo_responsavel, self.diretorio)
                ticket.reatribuir(novo_responsavel, agora)
                campos.append("assignedTo")

            status_anterior = None
            if input_dto.status:
                novo_status = self._converter_status(input_dto.status)
                if novo_status != ticket.status:
                    status_anterior = ticket.status.value
                    ticket.alterar_status(novo_status, agora)
                    campos.append("status")

            if campos:
                self.ticket_repo.save(ticket)
                self.uow.publish_event(
                    TicketAtualizadoEvent(
                        aggregate_id=ticket.id,
                        numero=ticket.numero,
                        alterado_por_id=usuario.id,
                        campos=campos,
                        status_anterior=status_anterior,
                    )
                )

        return TicketOutputDTO.from_entity(ticket, agora)

    @staticmethod
    def _converter_status(valor: str) -> TicketStatus:
        try:
            return TicketStatus.from_string(valor)
        except (AttributeError, ValueError):
            raise ValidationError(
                "Invalid status. Must be one of: Open, Closed, Expired",
                field="status",
            )


class RenovarTicketService:
    """
    Use Case: Renovar um ticket.

    Fluxo:
    1. Buscar ticket e verificar propriedade
    2. Estender prazo a partir da expiração atual
    3. Persistir ticket, depois registrar alerta "renewed"
    4. Disparar TicketRenovadoEvent
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        alert_repo: AlertRepository,
        uow: UnitOfWork,
        relogio: Relogio = utc_agora,
        dias_padrao: int = DIAS_RENOVACAO_PADRAO,
    ):
        self.ticket_repo = ticket_repo
        self.alert_repo = alert_repo
        self.uow = uow
        self.relogio = relogio
        self.dias_padrao = dias_padrao

    def execute(
        self,
        ticket_id: str,
        usuario: UsuarioAtual,
        dias: Optional[int] = None,
    ) -> TicketOutputDTO:
        """
        Args:
            ticket_id: ID do ticket
            usuario: Usuário autenticado
            dias: Dias a estender (default configurado, 15)

        Raises:
            EntityNotFoundError: Se ticket não existe
            ForbiddenError: Se contratado e ticket de outro
            ValidationError: Se dias inválido
            BusinessRuleViolationError: Se ticket fechado
        """
        dias = self.dias_padrao if dias is None else dias
        agora = self.relogio()

        with self.uow:
            ticket = _buscar_ticket(self.ticket_repo, ticket_id)
            verificar_acesso_ticket(usuario, ticket, "renew")

            ticket.renovar(dias, agora)
            self.ticket_repo.save(ticket)

            self.alert_repo.add(
                AlertEntity.para_renovacao(ticket.id, dias, ticket.data_expiracao, agora)
            )

            self.uow.publish_event(
                TicketRenovadoEvent(
                    aggregate_id=ticket.id,
                    numero=ticket.numero,
                    renovado_por_id=usuario.id,
                    dias=dias,
                    nova_expiracao=ticket.data_expiracao,
                )
            )

        return TicketOutputDTO.from_entity(ticket, agora)


class FecharTicketService:
    """
    Use Case: Fechar um ticket.

    Fechar um ticket já fechado não gera escrita, alerta nem evento.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        alert_repo: AlertRepository,
        uow: UnitOfWork,
        relogio: Relogio = utc_agora,
    ):
        self.ticket_repo = ticket_repo
        self.alert_repo = alert_repo
        self.uow = uow
        self.relogio = relogio

    def execute(self, ticket_id: str, usuario: UsuarioAtual) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se ticket não existe
            ForbiddenError: Se contratado e ticket de outro
        """
        agora = self.relogio()

        with self.uow:
            ticket = _buscar_ticket(self.ticket_repo, ticket_id)
            verificar_acesso_ticket(usuario, ticket, "close")

            if ticket.fechar(agora):
                self.ticket_repo.save(ticket)
                self.alert_repo.add(AlertEntity.para_fechamento(ticket.id, agora))
                self.uow.publish_event(
                    TicketFechadoEvent(
                        aggregate_id=ticket.id,
                        numero=ticket.numero,
                        fechado_por_id=usuario.id,
                    )
                )

        return TicketOutputDTO.from_entity(ticket, agora)


class ExcluirTicketService:
    """
    Use Case: Excluir ticket (apenas administradores).

    Os alertas do ticket são removidos na mesma transação.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        alert_repo: AlertRepository,
        uow: UnitOfWork,
    ):
        self.ticket_repo = ticket_repo
        self.alert_repo = alert_repo
        self.uow = uow

    def execute(self, ticket_id: str, usuario: UsuarioAtual) -> int:
        """
        Returns:
            Quantidade de alertas removidos junto com o ticket

        Raises:
            ForbiddenError: Se usuário não é admin
            EntityNotFoundError: Se ticket não existe
        """
        exigir_admin(usuario, "delete tickets")

        with self.uow:
            ticket = _buscar_ticket(self.ticket_repo, ticket_id)

            removidos = self.alert_repo.delete_by_ticket(ticket.id)
            self.ticket_repo.delete(ticket.id)

            self.uow.publish_event(
                TicketExcluidoEvent(
                    aggregate_id=ticket.id,
                    numero=ticket.numero,
                    excluido_por_id=usuario.id,
                    alertas_removidos=removidos,
                )
            )

        return removidos


class ObterTicketService:
    """
    Use Case: Obter detalhes de um ticket específico.
    """

    def __init__(self, ticket_repo: TicketRepository, relogio: Relogio = utc_agora):
        self.ticket_repo = ticket_repo
        self.relogio = relogio

    def execute(self, ticket_id: str, usuario: UsuarioAtual) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se ticket não existe
            ForbiddenError: Se contratado e ticket de outro
        """
        ticket = _buscar_ticket(self.ticket_repo, ticket_id)
        verificar_acesso_ticket(usuario, ticket, "access")
        return TicketOutputDTO.from_entity(ticket, self.relogio())


class ListarTicketsService:
    """
    Use Case: Listar tickets com filtros, ordenação e paginação.

    Contratados veem apenas os próprios tickets: o filtro de
    responsável é sempre forçado para o ID do contratado.
    """

    def __init__(self, ticket_repo: TicketRepository, relogio: Relogio = utc_agora):
        self.ticket_repo = ticket_repo
        self.relogio = relogio

    def execute(
        self,
        query: ListarTicketsQueryDTO,
        usuario: UsuarioAtual,
    ) -> PaginatedResultDTO:
        """
        Raises:
            ValidationError: Se ordenação ou status inválidos
        """
        if usuario.e_contratado:
            query = replace(query, atribuido_a_id=usuario.id)

        query = query.normalizar()
        tickets, total = self.ticket_repo.list_paginated(query)

        agora = self.relogio()
        return PaginatedResultDTO(
            items=[TicketOutputDTO.from_entity(t, agora) for t in tickets],
            total=total,
            pagina=query.pagina,
            por_pagina=query.por_pagina,
        )


class EstatisticasTicketsService:
    """
    Use Case: Estatísticas de tickets para o painel.

    expirando_em_breve = ABERTOS com agora < expiração <= agora + 48h.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        relogio: Relogio = utc_agora,
        janela_horas: int = JANELA_EXPIRANDO_HORAS,
    ):
        self.ticket_repo = ticket_repo
        self.relogio = relogio
        self.janela_horas = janela_horas

    def execute(self, usuario: UsuarioAtual) -> EstatisticasTicketsDTO:
        escopo = usuario.id if usuario.e_contratado else None
        agora = self.relogio()

        por_status = self.ticket_repo.count_by_status(escopo)
        expirando = self.ticket_repo.count_expirando(
            agora,
            agora + timedelta(hours=self.janela_horas),
            escopo,
        )

        return EstatisticasTicketsDTO(
            total=sum(por_status.values()),
            abertos=por_status.get(TicketStatus.ABERTO, 0),
            fechados=por_status.get(TicketStatus.FECHADO, 0),
            expirados=por_status.get(TicketStatus.EXPIRADO, 0),
            expirando_em_breve=expirando,
        )


class GerarNumeroTicketService:
    """
    Use Case: Sugerir o próximo número de ticket do ano.

    Apenas prévia; a unicidade é garantida na criação.
    """

    def __init__(self, ticket_repo: TicketRepository, relogio: Relogio = utc_agora):
        self.ticket_repo = ticket_repo
        self.relogio = relogio

    def execute(self) -> NumeroTicketDTO:
        ano = self.relogio().year
        ultimo = self.ticket_repo.get_ultimo_numero(prefixo_do_ano(ano))
        return NumeroTicketDTO(numero=gerar_numero_ticket(ultimo, ano))


class VerificarNumeroTicketService:
    """Use Case: Verificar se um número de ticket está disponível."""

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo

    def execute(self, numero: str) -> NumeroTicketDTO:
        """
        Raises:
            ValidationError: Se número vazio
        """
        numero_normalizado = (numero or "").strip().upper()
        if not numero_normalizado:
            raise ValidationError("Ticket number is required", field="ticketNumber")

        existente = self.ticket_repo.get_by_numero(numero_normalizado)
        return NumeroTicketDTO(numero=numero_normalizado, disponivel=existente is None)

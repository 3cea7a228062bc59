"""
Testes Unitários para Use Cases do Domínio de Tickets.

Testa os serviços de aplicação (use cases) que orquestram
a lógica de negócio do domínio de tickets.

Estratégia de Teste:
- Usa InMemoryTicketRepository / InMemoryAlertRepository (fakes)
- Usa FakeUnitOfWork (conftest) para testar transações
- Relógio fixo para resultados determinísticos
- Verifica eventos publicados e alertas gravados

Coverage:
- CriarTicketService (inclusive nova tentativa de número gerado)
- AtualizarTicketService
- RenovarTicketService / FecharTicketService / ExcluirTicketService
- ObterTicketService / ListarTicketsService
- EstatisticasTicketsService
- GerarNumeroTicketService / VerificarNumeroTicketService
"""

import pytest
from datetime import timedelta

from src.core.alerts.entities import AlertEntity, AlertSeverity, AlertType
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    ConcurrencyError,
    ConflictError,
    EntityNotFoundError,
    ForbiddenError,
    InvalidAssigneeError,
    ValidationError,
)
from src.core.tickets.dtos import (
    AtualizarTicketInputDTO,
    CriarTicketInputDTO,
    ListarTicketsQueryDTO,
)
from src.core.tickets.entities import TicketEntity
from src.core.tickets.events import (
    TicketAtualizadoEvent,
    TicketCriadoEvent,
    TicketExcluidoEvent,
    TicketFechadoEvent,
    TicketRenovadoEvent,
)
from src.core.tickets.ports import InMemoryTicketRepository
from src.core.tickets.use_cases import (
    AtualizarTicketService,
    CriarTicketService,
    EstatisticasTicketsService,
    ExcluirTicketService,
    FecharTicketService,
    GerarNumeroTicketService,
    ListarTicketsService,
    ObterTicketService,
    RenovarTicketService,
    VerificarNumeroTicketService,
)


# =============================================================================
# CriarTicketService
# =============================================================================

class TestCriarTicketService:
    """Testes para CriarTicketService."""

    @pytest.fixture
    def service(self, ticket_repo, uow, diretorio, relogio):
        return CriarTicketService(ticket_repo, uow, diretorio, relogio)

    @pytest.fixture
    def input_dto(self, agora):
        return CriarTicketInputDTO(
            organizacao="City Water",
            localizacao="123 Main St",
            data_expiracao=agora + timedelta(days=10),
        )

    def test_criar_ticket_com_numero_gerado(self, service, input_dto, contratado, ticket_repo, uow):
        """Deve gerar TKT-<ano>-0001 e atribuir ao contratado."""
        output = service.execute(input_dto, contratado)

        assert output.numero == "TKT-2024-0001"
        assert output.status == "Open"
        assert output.atribuido_a_id == "user-1"
        assert output.dias_ate_expiracao == 10
        assert ticket_repo.count() == 1

        assert uow.committed
        assert len(uow.published_events) == 1
        evento = uow.published_events[0]
        assert isinstance(evento, TicketCriadoEvent)
        assert evento.aggregate_id == output.id
        assert evento.criado_por_id == "user-1"

    def test_numeros_gerados_sao_sequenciais(self, service, input_dto, contratado):
        primeiro = service.execute(input_dto, contratado)
        segundo = service.execute(input_dto, contratado)

        assert primeiro.numero == "TKT-2024-0001"
        assert segundo.numero == "TKT-2024-0002"

    def test_contratado_sempre_e_o_responsavel(self, service, agora, contratado):
        """assignedTo enviado por contratado é ignorado."""
        dto = CriarTicketInputDTO(
            organizacao="City Water",
            localizacao="123 Main St",
            data_expiracao=agora + timedelta(days=10),
            atribuido_a_id="user-2",
        )

        output = service.execute(dto, contratado)

        assert output.atribuido_a_id == "user-1"

    def test_admin_atribui_a_contratado(self, service, agora, admin):
        dto = CriarTicketInputDTO(
            organizacao="City Water",
            localizacao="123 Main St",
            data_expiracao=agora + timedelta(days=10),
            atribuido_a_id="user-2",
        )

        output = service.execute(dto, admin)

        assert output.atribuido_a_id == "user-2"

    def test_admin_sem_responsavel_assume_ticket(self, service, input_dto, admin):
        output = service.execute(input_dto, admin)

        assert output.atribuido_a_id == "admin-1"

    @pytest.mark.parametrize("responsavel", ["user-3", "nao-existe"])
    def test_admin_atribui_a_usuario_invalido(self, service, agora, admin, ticket_repo, responsavel):
        """Usuário inexistente ou inativo não pode receber tickets."""
        dto = CriarTicketInputDTO(
            organizacao="City Water",
            localizacao="123 Main St",
            data_expiracao=agora + timedelta(days=10),
            atribuido_a_id=responsavel,
        )

        with pytest.raises(InvalidAssigneeError):
            service.execute(dto, admin)

        assert ticket_repo.count() == 0

    def test_numero_informado_normalizado(self, service, agora, contratado):
        dto = CriarTicketInputDTO(
            organizacao="City Water",
            localizacao="123 Main St",
            data_expiracao=agora + timedelta(days=10),
            numero=" loc-123 ",
        )

        output = service.execute(dto, contratado)

        assert output.numero == "LOC-123"

    def test_numero_informado_duplicado(self, service, agora, contratado, criar_ticket, uow):
        """Número informado já existente gera conflito sem nova tentativa."""
        criar_ticket(numero="LOC-123")
        dto = CriarTicketInputDTO(
            organizacao="City Water",
            localizacao="123 Main St",
            data_expiracao=agora + timedelta(days=10),
            numero="loc-123",
        )

        with pytest.raises(ConflictError) as exc_info:
            service.execute(dto, contratado)

        assert exc_info.value.field == "ticketNumber"
        assert uow.rolled_back
        assert uow.published_events == []

    def test_numero_gerado_repetido_e_recalculado(self, uow, diretorio, relogio, input_dto, contratado, agora):
        """Colisão de número gerado (criação concorrente) gera nova tentativa."""

        class RepoComCorrida(InMemoryTicketRepository):
            leituras = 0

            def get_ultimo_numero(self, prefixo):
                self.leituras += 1
                if self.leituras == 1:
                    return None
                return super().get_ultimo_numero(prefixo)

        repo = RepoComCorrida()
        repo.add(TicketEntity.criar(
            numero="TKT-2024-0001",
            organizacao="Gas Co",
            localizacao="1 Elm St",
            data_expiracao=agora + timedelta(days=3),
            atribuido_a_id="user-2",
            agora=agora,
        ))

        output = CriarTicketService(repo, uow, diretorio, relogio).execute(input_dto, contratado)

        assert output.numero == "TKT-2024-0002"
        assert repo.leituras == 2

    def test_esgota_tentativas(self, uow, diretorio, relogio, input_dto, contratado, agora):
        """Após max_tentativas colisões o conflito é propagado."""

        class RepoSempreDesatualizado(InMemoryTicketRepository):
            def get_ultimo_numero(self, prefixo):
                return None

        repo = RepoSempreDesatualizado()
        service = CriarTicketService(repo, uow, diretorio, relogio, max_tentativas=3)
        service.execute(input_dto, contratado)

        with pytest.raises(ConflictError):
            service.execute(input_dto, contratado)

        assert repo.count() == 1

    def test_expiracao_no_passado(self, service, agora, contratado, ticket_repo):
        dto = CriarTicketInputDTO(
            organizacao="City Water",
            localizacao="123 Main St",
            data_expiracao=agora - timedelta(minutes=1),
        )

        with pytest.raises(ValidationError) as exc_info:
            service.execute(dto, contratado)

        assert exc_info.value.field == "expirationDate"
        assert ticket_repo.count() == 0


# =============================================================================
# AtualizarTicketService
# =============================================================================

class TestAtualizarTicketService:
    """Testes para AtualizarTicketService."""

    @pytest.fixture
    def service(self, ticket_repo, uow, diretorio, relogio):
        return AtualizarTicketService(ticket_repo, uow, diretorio, relogio)

    def test_atualizar_campos(self, service, criar_ticket, contratado, ticket_repo, uow):
        ticket = criar_ticket()

        output = service.execute(
            ticket.id,
            AtualizarTicketInputDTO(localizacao="456 Oak Ave", observacoes="Dig site B"),
            contratado,
        )

        assert output.localizacao == "456 Oak Ave"
        assert output.observacoes == "Dig site B"
        assert ticket_repo.get_by_id(ticket.id).versao == 2

        evento = uow.published_events[0]
        assert isinstance(evento, TicketAtualizadoEvent)
        assert evento.campos == ["location", "notes"]

    def test_sem_alteracoes_nao_grava(self, service, criar_ticket, contratado, ticket_repo, uow):
        ticket = criar_ticket()

        service.execute(ticket.id, AtualizarTicketInputDTO(), contratado)

        assert ticket_repo.get_by_id(ticket.id).versao == 1
        assert uow.published_events == []

    def test_contratado_nao_atualiza_ticket_de_outro(self, service, criar_ticket, outro_contratado):
        ticket = criar_ticket()

        with pytest.raises(ForbiddenError) as exc_info:
            service.execute(ticket.id, AtualizarTicketInputDTO(organizacao="X"), outro_contratado)

        assert exc_info.value.message == "You can only update tickets assigned to you"

    def test_admin_reatribui(self, service, criar_ticket, admin, uow):
        ticket = criar_ticket()

        output = service.execute(ticket.id, AtualizarTicketInputDTO(atribuido_a_id="user-2"), admin)

        assert output.atribuido_a_id == "user-2"
        assert uow.published_events[0].campos == ["assignedTo"]

    def test_admin_reatribui_a_inativo(self, service, criar_ticket, admin):
        ticket = criar_ticket()

        with pytest.raises(InvalidAssigneeError):
            service.execute(ticket.id, AtualizarTicketInputDTO(atribuido_a_id="user-3"), admin)

    def test_contratado_nao_reatribui(self, service, criar_ticket, contratado):
        """assignedTo de contratado é ignorado."""
        ticket = criar_ticket()

        output = service.execute(ticket.id, AtualizarTicketInputDTO(atribuido_a_id="user-2"), contratado)

        assert output.atribuido_a_id == "user-1"

    def test_alterar_status(self, service, criar_ticket, contratado, uow):
        ticket = criar_ticket()

        output = service.execute(ticket.id, AtualizarTicketInputDTO(status="Closed"), contratado)

        assert output.status == "Closed"
        assert uow.published_events[0].status_anterior == "Open"

    def test_status_invalido(self, service, criar_ticket, contratado):
        ticket = criar_ticket()

        with pytest.raises(ValidationError) as exc_info:
            service.execute(ticket.id, AtualizarTicketInputDTO(status="Pending"), contratado)

        assert exc_info.value.field == "status"

    def test_reabrir_ticket_fechado(self, service, criar_ticket, contratado, ticket_repo):
        ticket = criar_ticket()
        ticket.fechar()
        ticket_repo.save(ticket)

        with pytest.raises(BusinessRuleViolationError):
            service.execute(ticket.id, AtualizarTicketInputDTO(status="Open"), contratado)

    def test_ticket_inexistente(self, service, contratado):
        with pytest.raises(EntityNotFoundError):
            service.execute("nao-existe", AtualizarTicketInputDTO(organizacao="X"), contratado)

    def test_alteracao_concorrente(self, contratado, uow, diretorio, relogio, agora):
        """Ticket alterado entre a leitura e a gravação gera ConcurrencyError."""

        class RepoComEscritaConcorrente(InMemoryTicketRepository):
            interferiu = False

            def get_by_id(self, ticket_id):
                lido = super().get_by_id(ticket_id)
                if lido and not self.interferiu:
                    self.interferiu = True
                    outro = super().get_by_id(ticket_id)
                    outro.renovar(5, agora)
                    self.save(outro)
                return lido

        repo = RepoComEscritaConcorrente()
        ticket = TicketEntity.criar(
            numero="TKT-2024-0001",
            organizacao="City Water",
            localizacao="123 Main St",
            data_expiracao=agora + timedelta(days=3),
            atribuido_a_id="user-1",
            agora=agora,
        )
        repo.add(ticket)
        service = AtualizarTicketService(repo, uow, diretorio, relogio)

        with pytest.raises(ConcurrencyError):
            service.execute(ticket.id, AtualizarTicketInputDTO(organizacao="Gas Co"), contratado)

        assert uow.rolled_back
        assert uow.published_events == []
        assert repo.get_by_id(ticket.id).organizacao == "City Water"


# =============================================================================
# RenovarTicketService
# =============================================================================

class TestRenovarTicketService:
    """Testes para RenovarTicketService."""

    @pytest.fixture
    def service(self, ticket_repo, alert_repo, uow, relogio):
        return RenovarTicketService(ticket_repo, alert_repo, uow, relogio)

    def test_renovar_padrao_15_dias(self, service, criar_ticket, contratado, alert_repo, uow, agora):
        ticket = criar_ticket(expira_em=timedelta(days=3))

        output = service.execute(ticket.id, contratado)

        assert output.data_expiracao == agora + timedelta(days=18)
        assert output.dias_ate_expiracao == 18
        assert output.renovacoes == [{"date": agora.isoformat(), "extendedBy": 15}]

        alertas = alert_repo.list_all()
        assert len(alertas) == 1
        assert alertas[0].tipo == AlertType.RENOVADO
        assert alertas[0].severidade == AlertSeverity.BAIXA
        expira = (agora + timedelta(days=18)).date().isoformat()
        assert alertas[0].mensagem == f"Ticket renewed for 15 days. New expiration: {expira}"

        evento = uow.published_events[0]
        assert isinstance(evento, TicketRenovadoEvent)
        assert evento.dias == 15

    def test_renovar_ticket_expirado(self, service, criar_ticket, contratado, ticket_repo, agora):
        """Ticket EXPIRADO renovado volta a ABERTO."""
        ticket = criar_ticket(expira_em=timedelta(days=-2))
        ticket.expirar(agora)
        ticket_repo.save(ticket)

        output = service.execute(ticket.id, contratado, dias=30)

        assert output.status == "Open"
        assert output.data_expiracao == agora + timedelta(days=28)

    def test_dias_padrao_configuravel(self, ticket_repo, alert_repo, uow, relogio, criar_ticket, admin, agora):
        ticket = criar_ticket()
        service = RenovarTicketService(ticket_repo, alert_repo, uow, relogio, dias_padrao=7)

        output = service.execute(ticket.id, admin)

        assert output.data_expiracao == agora + timedelta(days=17)

    def test_dias_invalidos_nao_gravam(self, service, criar_ticket, contratado, ticket_repo, alert_repo):
        ticket = criar_ticket()

        with pytest.raises(ValidationError):
            service.execute(ticket.id, contratado, dias=400)

        assert ticket_repo.get_by_id(ticket.id).renovacoes == []
        assert alert_repo.list_all() == []

    def test_renovar_ticket_fechado(self, service, criar_ticket, contratado, ticket_repo, alert_repo):
        ticket = criar_ticket()
        ticket.fechar()
        ticket_repo.save(ticket)

        with pytest.raises(BusinessRuleViolationError):
            service.execute(ticket.id, contratado)

        assert alert_repo.list_all() == []

    def test_contratado_nao_renova_ticket_de_outro(self, service, criar_ticket, outro_contratado):
        ticket = criar_ticket()

        with pytest.raises(ForbiddenError):
            service.execute(ticket.id, outro_contratado)

    def test_ticket_inexistente(self, service, admin):
        with pytest.raises(EntityNotFoundError):
            service.execute("nao-existe", admin)


# =============================================================================
# FecharTicketService
# =============================================================================

class TestFecharTicketService:
    """Testes para FecharTicketService."""

    @pytest.fixture
    def service(self, ticket_repo, alert_repo, uow, relogio):
        return FecharTicketService(ticket_repo, alert_repo, uow, relogio)

    def test_fechar_ticket(self, service, criar_ticket, contratado, alert_repo, uow):
        ticket = criar_ticket()

        output = service.execute(ticket.id, contratado)

        assert output.status == "Closed"
        alertas = alert_repo.list_all()
        assert [a.tipo for a in alertas] == [AlertType.FECHADO]
        assert alertas[0].mensagem == "Ticket has been closed"
        assert isinstance(uow.published_events[0], TicketFechadoEvent)

    def test_fechar_duas_vezes_nao_duplica_alerta(self, service, criar_ticket, contratado, alert_repo, uow):
        ticket = criar_ticket()

        service.execute(ticket.id, contratado)
        output = service.execute(ticket.id, contratado)

        assert output.status == "Closed"
        assert len(alert_repo.list_all()) == 1
        assert len(uow.published_events) == 1

    def test_fechar_ticket_expirado(self, service, criar_ticket, contratado, ticket_repo, agora):
        ticket = criar_ticket(expira_em=timedelta(hours=-1))
        ticket.expirar(agora)
        ticket_repo.save(ticket)

        output = service.execute(ticket.id, contratado)

        assert output.status == "Closed"

    def test_contratado_nao_fecha_ticket_de_outro(self, service, criar_ticket, outro_contratado):
        ticket = criar_ticket()

        with pytest.raises(ForbiddenError) as exc_info:
            service.execute(ticket.id, outro_contratado)

        assert "close" in exc_info.value.message


# =============================================================================
# ExcluirTicketService
# =============================================================================

class TestExcluirTicketService:
    """Testes para ExcluirTicketService."""

    @pytest.fixture
    def service(self, ticket_repo, alert_repo, uow):
        return ExcluirTicketService(ticket_repo, alert_repo, uow)

    def test_excluir_remove_alertas(self, service, criar_ticket, admin, ticket_repo, alert_repo, uow, agora):
        ticket = criar_ticket()
        outro = criar_ticket(numero="TKT-2024-0002")
        alert_repo.add(AlertEntity.para_fechamento(ticket.id, agora))
        alert_repo.add(AlertEntity.para_expiracao(ticket.id, 10, agora))
        alert_repo.add(AlertEntity.para_fechamento(outro.id, agora))

        removidos = service.execute(ticket.id, admin)

        assert removidos == 2
        assert ticket_repo.get_by_id(ticket.id) is None
        assert [a.ticket_id for a in alert_repo.list_all()] == [outro.id]

        evento = uow.published_events[0]
        assert isinstance(evento, TicketExcluidoEvent)
        assert evento.alertas_removidos == 2

    def test_apenas_admin_exclui(self, service, criar_ticket, contratado, ticket_repo):
        ticket = criar_ticket()

        with pytest.raises(ForbiddenError) as exc_info:
            service.execute(ticket.id, contratado)

        assert exc_info.value.message == "Only administrators can delete tickets"
        assert ticket_repo.count() == 1

    def test_ticket_inexistente(self, service, admin):
        with pytest.raises(EntityNotFoundError):
            service.execute("nao-existe", admin)


# =============================================================================
# Consultas
# =============================================================================

class TestObterTicketService:
    """Testes para ObterTicketService."""

    def test_obter_ticket(self, ticket_repo, relogio, criar_ticket, contratado):
        ticket = criar_ticket()

        output = ObterTicketService(ticket_repo, relogio).execute(ticket.id, contratado)

        assert output.id == ticket.id
        assert output.to_dict()["ticketNumber"] == "TKT-2024-0001"
        assert output.to_dict()["isExpired"] is False

    def test_prazo_vencido_reportado_como_expirado(self, ticket_repo, relogio, criar_ticket, admin):
        """Antes do monitor rodar, o ticket já aparece como expirado."""
        ticket = criar_ticket(expira_em=timedelta(hours=-3))

        output = ObterTicketService(ticket_repo, relogio).execute(ticket.id, admin)

        assert output.status == "Open"
        assert output.esta_expirado is True
        assert output.dias_ate_expiracao == 0

    def test_contratado_nao_ve_ticket_de_outro(self, ticket_repo, relogio, criar_ticket, outro_contratado):
        ticket = criar_ticket()

        with pytest.raises(ForbiddenError):
            ObterTicketService(ticket_repo, relogio).execute(ticket.id, outro_contratado)


class TestListarTicketsService:
    """Testes para ListarTicketsService."""

    @pytest.fixture
    def service(self, ticket_repo, relogio):
        return ListarTicketsService(ticket_repo, relogio)

    @pytest.fixture
    def tickets(self, criar_ticket):
        return [
            criar_ticket(numero="TKT-2024-0001", expira_em=timedelta(days=5), organizacao="City Water"),
            criar_ticket(numero="TKT-2024-0002", expira_em=timedelta(days=1), organizacao="Gas Co"),
            criar_ticket(numero="TKT-2024-0003", expira_em=timedelta(days=9), atribuido_a_id="user-2"),
        ]

    def test_contratado_ve_apenas_os_seus(self, service, tickets, contratado):
        """Filtro assignedTo de contratado é sempre forçado."""
        resultado = service.execute(ListarTicketsQueryDTO(atribuido_a_id="user-2"), contratado)

        assert resultado.total == 2
        assert {t.atribuido_a_id for t in resultado.items} == {"user-1"}

    def test_admin_ve_todos(self, service, tickets, admin):
        resultado = service.execute(ListarTicketsQueryDTO(), admin)

        assert resultado.total == 3

    def test_ordenar_por_expiracao(self, service, tickets, admin):
        resultado = service.execute(
            ListarTicketsQueryDTO(ordenar_por="expirationDate", ordem="asc"),
            admin,
        )

        assert [t.numero for t in resultado.items] == ["TKT-2024-0002", "TKT-2024-0001", "TKT-2024-0003"]

    def test_filtrar_por_organizacao_parcial(self, service, tickets, admin):
        resultado = service.execute(ListarTicketsQueryDTO(organizacao="gas"), admin)

        assert [t.numero for t in resultado.items] == ["TKT-2024-0002"]

    def test_filtrar_por_status(self, service, tickets, admin, ticket_repo):
        fechado = ticket_repo.get_by_id(tickets[0].id)
        fechado.fechar()
        ticket_repo.save(fechado)

        resultado = service.execute(ListarTicketsQueryDTO(status="closed"), admin)

        assert [t.id for t in resultado.items] == [tickets[0].id]

    def test_paginacao(self, service, tickets, admin):
        resultado = service.execute(
            ListarTicketsQueryDTO(ordenar_por="ticketNumber", ordem="asc", pagina=2, por_pagina=2),
            admin,
        )

        assert [t.numero for t in resultado.items] == ["TKT-2024-0003"]
        assert resultado.pagination_dict() == {
            "current": 2,
            "pages": 2,
            "total": 3,
            "limit": 2,
            "hasNext": False,
            "hasPrevious": True,
        }

    def test_limite_maximo_por_pagina(self, service, tickets, admin):
        resultado = service.execute(ListarTicketsQueryDTO(por_pagina=500), admin)

        assert resultado.por_pagina == 100

    @pytest.mark.parametrize("query,campo", [
        (ListarTicketsQueryDTO(ordenar_por="organization"), "sortBy"),
        (ListarTicketsQueryDTO(ordem="up"), "sortOrder"),
        (ListarTicketsQueryDTO(status="Pending"), "status"),
    ])
    def test_parametros_invalidos(self, service, admin, query, campo):
        with pytest.raises(ValidationError) as exc_info:
            service.execute(query, admin)

        assert exc_info.value.field == campo


class TestEstatisticasTicketsService:
    """Testes para EstatisticasTicketsService."""

    def test_contagens(self, ticket_repo, relogio, criar_ticket, admin, contratado, agora):
        criar_ticket(numero="A-1", expira_em=timedelta(hours=47))
        criar_ticket(numero="A-2", expira_em=timedelta(hours=49))
        criar_ticket(numero="A-3", expira_em=timedelta(hours=-1))
        fechado = criar_ticket(numero="A-4", expira_em=timedelta(hours=10), atribuido_a_id="user-2")
        fechado.fechar(agora)
        ticket_repo.save(fechado)

        service = EstatisticasTicketsService(ticket_repo, relogio)

        geral = service.execute(admin)
        assert geral.to_dict() == {
            "total": 4,
            "open": 3,
            "closed": 1,
            "expired": 0,
            "expiringSoon": 1,
        }

        proprio = service.execute(contratado)
        assert proprio.total == 3
        assert proprio.fechados == 0


class TestNumeroTicket:
    """Testes para GerarNumeroTicketService e VerificarNumeroTicketService."""

    def test_gerar_primeiro_numero(self, ticket_repo, relogio):
        assert GerarNumeroTicketService(ticket_repo, relogio).execute().numero == "TKT-2024-0001"

    def test_gerar_proximo_numero(self, ticket_repo, relogio, criar_ticket):
        criar_ticket(numero="TKT-2024-0015")
        criar_ticket(numero="TKT-2023-0099")

        assert GerarNumeroTicketService(ticket_repo, relogio).execute().numero == "TKT-2024-0016"

    def test_verificar_disponivel(self, ticket_repo, criar_ticket):
        criar_ticket(numero="LOC-1")
        service = VerificarNumeroTicketService(ticket_repo)

        assert service.execute("loc-1").to_dict() == {
            "ticketNumber": "LOC-1",
            "exists": True,
            "available": False,
        }
        assert service.execute("LOC-2").disponivel is True

    def test_verificar_vazio(self, ticket_repo):
        with pytest.raises(ValidationError):
            VerificarNumeroTicketService(ticket_repo).execute("  ")

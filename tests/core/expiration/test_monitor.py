"""
Testes Unitários para o Monitor de Expiração.

Coverage:
- Etapa A: alertas "expiring_soon" com deduplicação de 24h
- Etapa B: tickets vencidos passam para EXPIRADO com alerta "expired"
- Isolamento de falhas por ticket (StoreError repetido, ConcurrencyError pulado)
- ResultadoVerificacao.to_dict()
"""

import pytest
from datetime import timedelta

from src.core.alerts.entities import AlertSeverity, AlertType
from src.core.alerts.ports import InMemoryAlertRepository
from src.core.expiration import ExpirationMonitorService, PoliticaExpiracao
from src.core.shared.exceptions import ConcurrencyError, StoreError
from src.core.shared.interfaces import EventPublisher
from src.core.tickets.entities import TicketEntity, TicketStatus
from src.core.tickets.events import TicketExpiradoEvent
from src.core.tickets.ports import InMemoryTicketRepository


class FakeEventPublisher(EventPublisher):

    def __init__(self):
        self.events = []

    def publish(self, event):
        self.events.append(event)

    def publish_batch(self, events):
        self.events.extend(events)


@pytest.fixture
def publisher():
    return FakeEventPublisher()


@pytest.fixture
def monitor(ticket_repo, alert_repo, relogio, publisher):
    return ExpirationMonitorService(ticket_repo, alert_repo, relogio=relogio, event_publisher=publisher)


class TestEtapaExpirandoEmBreve:
    """Alertas para tickets que expiram nas próximas 48h."""

    def test_cria_alerta_para_ticket_expirando(self, monitor, criar_ticket, alert_repo):
        ticket = criar_ticket(expira_em=timedelta(hours=5, minutes=30))

        resultado = monitor.executar()

        alertas = alert_repo.list_all()
        assert resultado.alertas_criados == 1
        assert len(alertas) == 1
        assert alertas[0].ticket_id == ticket.id
        assert alertas[0].tipo == AlertType.EXPIRANDO
        assert alertas[0].severidade == AlertSeverity.ALTA
        assert alertas[0].mensagem == "Ticket will expire in 6 hours"

    def test_fora_da_janela_nao_alerta(self, monitor, criar_ticket, alert_repo):
        criar_ticket(expira_em=timedelta(hours=49))

        resultado = monitor.executar()

        assert resultado.alertas_criados == 0
        assert alert_repo.list_all() == []

    def test_limites_da_janela(self, monitor, criar_ticket, ticket_repo, alert_repo):
        """Fim da janela (agora + 48h) é incluído; prazo igual a agora não entra em nenhuma etapa."""
        no_limite = criar_ticket(numero="B-1", expira_em=timedelta(hours=48))
        vence_agora = criar_ticket(numero="B-2", expira_em=timedelta(0))

        resultado = monitor.executar()

        alertas = alert_repo.list_all()
        assert [a.ticket_id for a in alertas] == [no_limite.id]
        assert alertas[0].mensagem == "Ticket will expire in 2 days"
        assert resultado.tickets_expirados == 0
        assert ticket_repo.get_by_id(vence_agora.id).status == TicketStatus.ABERTO

    def test_segunda_verificacao_em_seguida_nao_duplica(self, monitor, criar_ticket, alert_repo, relogio):
        criar_ticket(expira_em=timedelta(hours=30))

        primeira = monitor.executar()
        relogio.avancar(minutes=10)
        segunda = monitor.executar()

        alertas = alert_repo.list_all()
        assert primeira.alertas_criados == 1
        assert segunda.alertas_criados == 0
        assert len(alertas) == 1
        assert alertas[0].mensagem == "Ticket will expire in 2 days"
        assert alertas[0].severidade == AlertSeverity.MEDIA

    def test_deduplicacao_24h(self, monitor, criar_ticket, alert_repo, relogio):
        """Segunda verificação dentro de 24h não repete o alerta."""
        criar_ticket(expira_em=timedelta(hours=47))

        monitor.executar()
        relogio.avancar(hours=23)
        segunda = monitor.executar()

        assert segunda.alertas_criados == 0
        assert len(alert_repo.list_all()) == 1

    def test_novo_alerta_apos_janela_de_deduplicacao(self, monitor, criar_ticket, alert_repo, relogio):
        criar_ticket(expira_em=timedelta(hours=47))

        monitor.executar()
        relogio.avancar(hours=25)
        monitor.executar()

        mensagens = [a.mensagem for a in alert_repo.list_all()]
        assert mensagens == ["Ticket will expire in 2 days", "Ticket will expire in 22 hours"]

    def test_ticket_fechado_ignorado(self, monitor, criar_ticket, ticket_repo, alert_repo):
        ticket = criar_ticket(expira_em=timedelta(hours=3))
        ticket.fechar()
        ticket_repo.save(ticket)

        resultado = monitor.executar()

        assert resultado.tickets_verificados == 0
        assert alert_repo.list_all() == []


class TestEtapaVencidos:
    """Tickets ABERTOS com prazo vencido."""

    def test_expira_ticket_vencido(self, monitor, criar_ticket, ticket_repo, alert_repo, publisher):
        ticket = criar_ticket(expira_em=timedelta(minutes=-1))

        resultado = monitor.executar()

        assert resultado.tickets_expirados == 1
        assert resultado.alertas_criados == 1
        assert resultado.sucesso
        assert ticket_repo.get_by_id(ticket.id).status == TicketStatus.EXPIRADO

        alertas = alert_repo.list_all()
        assert [a.tipo for a in alertas] == [AlertType.EXPIRADO]
        assert alertas[0].severidade == AlertSeverity.CRITICA

        assert len(publisher.events) == 1
        assert isinstance(publisher.events[0], TicketExpiradoEvent)
        assert publisher.events[0].atribuido_a_id == "user-1"

    def test_segunda_verificacao_nao_repete(self, monitor, criar_ticket, alert_repo):
        criar_ticket(expira_em=timedelta(hours=-2))

        monitor.executar()
        segunda = monitor.executar()

        assert segunda.tickets_expirados == 0
        assert len(alert_repo.list_all()) == 1

    def test_ticket_expirado_nao_e_alertado_como_expirando(self, monitor, criar_ticket, alert_repo):
        criar_ticket(numero="A-1", expira_em=timedelta(hours=-1))
        criar_ticket(numero="A-2", expira_em=timedelta(hours=30))

        resultado = monitor.executar()

        assert resultado.tickets_verificados == 2
        assert sorted(a.tipo.value for a in alert_repo.list_all()) == ["expired", "expiring_soon"]

    def test_ticket_renovado_apos_consulta_nao_expira(self, criar_ticket, alert_repo, relogio, agora):
        """Ticket relido antes da gravação: renovação concorrente vence."""

        class RepoRenovadoNoMeio(InMemoryTicketRepository):
            def list_expirados(self, agora):
                vencidos = super().list_expirados(agora)
                for ticket in vencidos:
                    atual = self.get_by_id(ticket.id)
                    atual.renovar(15, agora)
                    self.save(atual)
                return vencidos

        repo = RepoRenovadoNoMeio()
        ticket = TicketEntity.criar(
            numero="A-1",
            organizacao="City Water",
            localizacao="123 Main St",
            data_expiracao=agora + timedelta(days=1),
            atribuido_a_id="user-1",
            agora=agora,
        )
        ticket.data_expiracao = agora - timedelta(hours=1)
        repo.add(ticket)

        resultado = ExpirationMonitorService(repo, alert_repo, relogio=relogio).executar()

        assert resultado.tickets_expirados == 0
        assert repo.get_by_id(ticket.id).status == TicketStatus.ABERTO


class TestIsolamentoDeFalhas:
    """Falha em um ticket não aborta a verificação."""

    def test_store_error_repetido_uma_vez(self, criar_ticket, ticket_repo, alert_repo, relogio):
        ticket = criar_ticket(expira_em=timedelta(hours=-1))

        original_save = ticket_repo.save
        chamadas = []

        def save_instavel(t):
            chamadas.append(t.id)
            if len(chamadas) == 1:
                raise StoreError("database unavailable")
            original_save(t)

        ticket_repo.save = save_instavel

        resultado = ExpirationMonitorService(ticket_repo, alert_repo, relogio=relogio).executar()

        assert len(chamadas) == 2
        assert resultado.tickets_expirados == 1
        assert resultado.falhas == []
        assert ticket_repo.get_by_id(ticket.id).status == TicketStatus.EXPIRADO

    def test_store_error_persistente_pula_ticket(self, criar_ticket, ticket_repo, alert_repo, relogio):
        ruim = criar_ticket(numero="A-1", expira_em=timedelta(hours=-1))
        bom = criar_ticket(numero="A-2", expira_em=timedelta(hours=-2))
        original_save = ticket_repo.save

        def save_falha_para_ruim(t):
            if t.id == ruim.id:
                raise StoreError("database unavailable")
            original_save(t)

        ticket_repo.save = save_falha_para_ruim

        resultado = ExpirationMonitorService(ticket_repo, alert_repo, relogio=relogio).executar()

        assert resultado.tickets_expirados == 1
        assert [t for t, _ in resultado.falhas] == [ruim.id]
        assert not resultado.sucesso
        assert ticket_repo.get_by_id(bom.id).status == TicketStatus.EXPIRADO
        assert ticket_repo.get_by_id(ruim.id).status == TicketStatus.ABERTO

    def test_concurrency_error_nao_e_repetido(self, criar_ticket, ticket_repo, alert_repo, relogio):
        criar_ticket(expira_em=timedelta(hours=-1))
        chamadas = []

        def save_concorrente(t):
            chamadas.append(t.id)
            raise ConcurrencyError("version mismatch")

        ticket_repo.save = save_concorrente

        resultado = ExpirationMonitorService(ticket_repo, alert_repo, relogio=relogio).executar()

        assert len(chamadas) == 1
        assert resultado.tickets_expirados == 0
        assert len(resultado.falhas) == 1

    def test_expirado_sem_alerta_registrado(self, criar_ticket, ticket_repo, relogio):
        """Estado é gravado antes do alerta: falha no alerta fica no resultado."""
        ticket = criar_ticket(expira_em=timedelta(hours=-1))

        class AlertRepoQuebrado(InMemoryAlertRepository):
            def add(self, alerta):
                raise StoreError("alerts table locked")

        resultado = ExpirationMonitorService(ticket_repo, AlertRepoQuebrado(), relogio=relogio).executar()

        assert resultado.tickets_expirados == 1
        assert resultado.alertas_criados == 0
        assert resultado.expirados_sem_alerta == [ticket.id]
        assert ticket_repo.get_by_id(ticket.id).status == TicketStatus.EXPIRADO

    def test_falha_na_consulta_nao_propaga(self, alert_repo, relogio):
        class RepoForaDoAr(InMemoryTicketRepository):
            def list_expirando(self, inicio, fim):
                raise StoreError("connection refused")

            def list_expirados(self, agora):
                raise StoreError("connection refused")

        resultado = ExpirationMonitorService(RepoForaDoAr(), alert_repo, relogio=relogio).executar()

        assert [t for t, _ in resultado.falhas] == ["*", "*"]


class TestResultadoVerificacao:

    def test_to_dict(self, monitor, criar_ticket, agora):
        criar_ticket(numero="A-1", expira_em=timedelta(hours=-1))
        criar_ticket(numero="A-2", expira_em=timedelta(hours=12))

        dados = monitor.executar().to_dict()

        assert dados["startedAt"] == agora.isoformat()
        assert dados["ticketsChecked"] == 2
        assert dados["alertsCreated"] == 2
        assert dados["ticketsExpired"] == 1
        assert dados["expiredWithoutAlert"] == []
        assert dados["failures"] == []
        assert dados["finishedAt"] is not None

    def test_duracao_usa_o_relogio_injetado(self, monitor, agora):
        """Com relógio fixo, início e fim coincidem."""
        dados = monitor.executar().to_dict()

        assert dados["finishedAt"] == agora.isoformat()
        assert dados["durationSeconds"] == 0.0

    def test_duracao_acompanha_o_relogio(self, ticket_repo, alert_repo, agora):
        instantes = iter([agora, agora + timedelta(seconds=3)])
        monitor = ExpirationMonitorService(ticket_repo, alert_repo, relogio=lambda: next(instantes))

        resultado = monitor.executar()

        assert resultado.concluido_em == agora + timedelta(seconds=3)
        assert resultado.duracao_segundos == 3.0


class TestPoliticaExpiracao:

    def test_valores_padrao(self):
        politica = PoliticaExpiracao()

        assert politica.janela_expirando == timedelta(hours=48)
        assert politica.janela_deduplicacao == timedelta(hours=24)
        assert politica.intervalo_segundos == 1800

    @pytest.mark.parametrize("kwargs", [
        {"janela_expirando_horas": 0},
        {"janela_deduplicacao_horas": -1},
        {"intervalo_segundos": 0},
        {"tentativas_store": 0},
    ])
    def test_valores_invalidos(self, kwargs):
        with pytest.raises(ValueError):
            PoliticaExpiracao(**kwargs)

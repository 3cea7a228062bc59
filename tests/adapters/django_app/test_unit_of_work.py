"""
Testes para as implementações de Unit of Work.
"""

from unittest.mock import Mock

import pytest

from src.adapters.django_app.events.publishers import InMemoryEventPublisher
from src.adapters.django_app.shared.unit_of_work import DjangoUnitOfWork, InMemoryUnitOfWork
from src.core.alerts.entities import AlertEntity
from src.core.tickets.events import TicketFechadoEvent


@pytest.fixture
def evento():
    return TicketFechadoEvent(aggregate_id="t1", numero="TKT-2024-0001", fechado_por_id="1")


@pytest.mark.django_db
class TestDjangoUnitOfWork:

    def test_commit_grava_e_publica(self, repo_alertas, evento):
        publisher = InMemoryEventPublisher()
        alerta = AlertEntity.para_fechamento("t1")

        with DjangoUnitOfWork(publisher) as uow:
            repo_alertas.add(alerta)
            uow.publish_event(evento)
            assert publisher.published_events == []

        assert uow.is_committed
        assert publisher.published_events == [evento]
        assert repo_alertas.get_by_id(alerta.id) is not None

    def test_rollback_desfaz_e_descarta_eventos(self, repo_alertas, evento):
        publisher = InMemoryEventPublisher()
        alerta = AlertEntity.para_fechamento("t1")
        uow = DjangoUnitOfWork(publisher)

        with pytest.raises(RuntimeError):
            with uow:
                repo_alertas.add(alerta)
                uow.publish_event(evento)
                raise RuntimeError("falha no meio da operação")

        assert uow.is_rolled_back
        assert not uow.is_committed
        assert publisher.published_events == []
        assert repo_alertas.get_by_id(alerta.id) is None

    def test_instancia_reutilizavel(self, repo_alertas, evento):
        publisher = InMemoryEventPublisher()
        uow = DjangoUnitOfWork(publisher)

        with pytest.raises(RuntimeError):
            with uow:
                uow.publish_event(evento)
                raise RuntimeError("primeira tentativa")

        with uow:
            repo_alertas.add(AlertEntity.para_fechamento("t1"))
            uow.publish_event(evento)

        assert uow.is_committed
        assert not uow.is_rolled_back
        assert publisher.published_events == [evento]

    def test_falha_ao_publicar_nao_desfaz_escrita(self, repo_alertas, evento):
        publisher = Mock()
        publisher.publish.side_effect = ConnectionError("broker down")
        alerta = AlertEntity.para_fechamento("t1")

        with DjangoUnitOfWork(publisher) as uow:
            repo_alertas.add(alerta)
            uow.publish_event(evento)

        assert uow.is_committed
        assert repo_alertas.get_by_id(alerta.id) is not None

    def test_sem_publisher(self, evento):
        with DjangoUnitOfWork() as uow:
            uow.publish_event(evento)

        assert uow.collect_events() == []


class TestInMemoryUnitOfWork:

    def test_commit_publica_em_lote(self, evento):
        publisher = InMemoryEventPublisher()
        uow = InMemoryUnitOfWork(event_publisher=publisher)

        with uow:
            uow.publish_event(evento)

        assert uow.committed
        assert uow.published_events == [evento]
        assert publisher.get_events_by_type("TicketFechadoEvent") == [evento]

    def test_rollback(self, evento):
        uow = InMemoryUnitOfWork()

        with pytest.raises(ValueError):
            with uow:
                uow.publish_event(evento)
                raise ValueError("inválido")

        assert uow.rolled_back
        assert uow.published_events == []

    def test_reset(self, evento):
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(evento)

        uow.reset()

        assert not uow.committed
        assert uow.published_events == []

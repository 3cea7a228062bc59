"""
Testes para o container de Dependency Injection.
"""

import pytest
from django.test import override_settings

from src.adapters.django_app.events.publishers import CeleryEventPublisher, LoggingEventPublisher
from src.adapters.django_app.shared.unit_of_work import DjangoUnitOfWork
from src.adapters.django_app.tickets.repositories import DjangoTicketRepository
from src.config.container import get_container, reset_container
from src.core.expiration import ExpirationMonitorService, ExpirationScheduler
from src.core.tickets.use_cases import CriarTicketService, RenovarTicketService


class TestContainer:

    def test_container_global_e_singleton(self):
        assert get_container() is get_container()

    def test_reset_cria_novo_container(self):
        antigo = get_container()

        reset_container()

        assert get_container() is not antigo

    def test_repositorios_singleton(self):
        container = get_container()

        assert isinstance(container.ticket_repository(), DjangoTicketRepository)
        assert container.ticket_repository() is container.ticket_repository()

    def test_unit_of_work_nova_por_chamada(self):
        container = get_container()

        assert isinstance(container.unit_of_work(), DjangoUnitOfWork)
        assert container.unit_of_work() is not container.unit_of_work()

    def test_services_resolvem_dependencias(self):
        container = get_container()

        criar = container.criar_ticket_service()
        renovar = container.renovar_ticket_service()

        assert isinstance(criar, CriarTicketService)
        assert criar.max_tentativas == 5
        assert isinstance(renovar, RenovarTicketService)
        assert renovar.dias_padrao == 15
        assert renovar.ticket_repo is criar.ticket_repo

    def test_monitor_e_scheduler(self):
        container = get_container()

        monitor = container.expiration_monitor()
        scheduler = container.expiration_scheduler()

        assert isinstance(monitor, ExpirationMonitorService)
        assert isinstance(scheduler, ExpirationScheduler)
        assert scheduler is container.expiration_scheduler()
        assert not scheduler.is_running
        assert callable(scheduler.manutencao)
        assert callable(scheduler.ao_concluir)

    def test_publisher_padrao(self):
        assert isinstance(get_container().event_publisher(), LoggingEventPublisher)

    @override_settings(
        EVENT_PUBLISHER_MODE="celery",
        DEFAULT_RENEWAL_DAYS=30,
        EXPIRATION_CHECK_INTERVAL_SECONDS=600,
    )
    def test_configuracao_lida_das_settings(self):
        container = get_container()

        assert isinstance(container.event_publisher(), CeleryEventPublisher)
        assert container.renovar_ticket_service().dias_padrao == 30
        assert container.expiration_scheduler().intervalo_segundos == 600

    @override_settings(EVENT_PUBLISHER_MODE="kafka")
    def test_modo_de_publisher_invalido(self):
        with pytest.raises(ValueError):
            get_container().event_publisher()

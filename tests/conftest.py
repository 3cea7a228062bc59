"""
Configurações globais do Pytest para o Utility Ticket Tracker.

Este arquivo é carregado automaticamente pelo pytest e
fornece fixtures e configurações compartilhadas.

Django é configurado por pytest-django (DJANGO_SETTINGS_MODULE em
pyproject.toml); os testes de Core não tocam no banco.
"""

from datetime import datetime, timedelta, timezone

import pytest

from src.core.alerts.ports import InMemoryAlertRepository
from src.core.tickets.entities import TicketEntity
from src.core.tickets.ports import InMemoryTicketRepository
from src.core.users.entities import UserRole, UsuarioAtual, UsuarioInfo
from src.core.users.ports import InMemoryUserDirectory


AGORA = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    """Configuração do pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


# =============================================================================
# Relógio e Unit of Work
# =============================================================================

class RelogioFixo:
    """Relógio controlável: chamável como `utc_agora`."""

    def __init__(self, agora: datetime):
        self.agora = agora

    def __call__(self) -> datetime:
        return self.agora

    def avancar(self, **delta) -> datetime:
        self.agora = self.agora + timedelta(**delta)
        return self.agora


class FakeUnitOfWork:
    """
    Fake Unit of Work para testes.

    Simula comportamento de transação sem banco de dados.
    """

    def __init__(self):
        self._committed = False
        self._rolled_back = False
        self._events = []
        self.published_events = []

    def __enter__(self):
        self._committed = False
        self._rolled_back = False
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    def commit(self):
        self._committed = True
        self.published_events.extend(self._events)
        self._events = []

    def rollback(self):
        self._rolled_back = True
        self._events = []

    def publish_event(self, event):
        self._events.append(event)

    def collect_events(self):
        events = self._events.copy()
        self._events = []
        return events

    @property
    def committed(self):
        return self._committed

    @property
    def rolled_back(self):
        return self._rolled_back


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def agora():
    return AGORA


@pytest.fixture
def relogio():
    return RelogioFixo(AGORA)


@pytest.fixture
def uow():
    return FakeUnitOfWork()


@pytest.fixture
def ticket_repo():
    return InMemoryTicketRepository()


@pytest.fixture
def alert_repo():
    return InMemoryAlertRepository()


@pytest.fixture
def admin():
    return UsuarioAtual(id="admin-1", role=UserRole.ADMIN, email="admin@example.com")


@pytest.fixture
def contratado():
    return UsuarioAtual(id="user-1", role=UserRole.CONTRATADO, email="joe@example.com")


@pytest.fixture
def outro_contratado():
    return UsuarioAtual(id="user-2", role=UserRole.CONTRATADO, email="ann@example.com")


@pytest.fixture
def diretorio():
    """Diretório com admin, dois contratados ativos e um inativo."""
    diretorio = InMemoryUserDirectory()
    diretorio.add(UsuarioInfo(id="admin-1", email="admin@example.com", role=UserRole.ADMIN))
    diretorio.add(UsuarioInfo(id="user-1", email="joe@example.com", role=UserRole.CONTRATADO))
    diretorio.add(UsuarioInfo(id="user-2", email="ann@example.com", role=UserRole.CONTRATADO))
    diretorio.add(UsuarioInfo(id="user-3", email="old@example.com", role=UserRole.CONTRATADO, ativo=False))
    return diretorio


@pytest.fixture
def criar_ticket(ticket_repo, agora):
    """
    Factory: cria e persiste um ticket ABERTO no repositório em memória.

    `expira_em` pode ser negativo (prazo já vencido, como se o tempo
    tivesse passado desde a criação).
    """

    def _criar(numero="TKT-2024-0001", atribuido_a_id="user-1", expira_em=timedelta(days=10), **kwargs):
        ticket = TicketEntity.criar(
            numero=numero,
            organizacao=kwargs.pop("organizacao", "City Water"),
            localizacao=kwargs.pop("localizacao", "123 Main St"),
            data_expiracao=agora + timedelta(days=1),
            atribuido_a_id=atribuido_a_id,
            agora=agora,
            **kwargs,
        )
        ticket.data_expiracao = agora + expira_em
        ticket_repo.add(ticket)
        return ticket

    return _criar

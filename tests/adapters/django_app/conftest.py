"""
Fixtures para testes dos adapters Django.

O Django é configurado pelo pytest-django a partir de
DJANGO_SETTINGS_MODULE (pyproject.toml); sem variáveis de ambiente
as settings usam SQLite e cache local.
"""

from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import Client

from src.adapters.django_app.tickets.repositories import (
    DjangoAlertRepository,
    DjangoTicketRepository,
    DjangoUserDirectory,
)
from src.config.container import reset_container
from src.core.shared.clock import utc_agora
from src.core.tickets.entities import TicketEntity


@pytest.fixture(autouse=True)
def container_limpo():
    """Cada teste recebe um container DI novo e cache vazio."""
    reset_container()
    cache.clear()
    yield
    reset_container()
    cache.clear()


# =============================================================================
# Usuários
# =============================================================================

@pytest.fixture
def usuario_admin(db):
    return get_user_model().objects.create_user(
        username="dispatch",
        email="dispatch@example.com",
        password="senha-admin-123",
        is_staff=True,
    )


@pytest.fixture
def usuario_contratado(db):
    return get_user_model().objects.create_user(
        username="joe",
        email="joe@example.com",
        password="senha-joe-123",
    )


@pytest.fixture
def outro_usuario(db):
    return get_user_model().objects.create_user(
        username="ann",
        email="ann@example.com",
        password="senha-ann-123",
    )


@pytest.fixture
def usuario_inativo(db):
    return get_user_model().objects.create_user(
        username="old",
        email="old@example.com",
        password="senha-old-123",
        is_active=False,
    )


@pytest.fixture
def client_admin(usuario_admin):
    client = Client()
    client.force_login(usuario_admin)
    return client


@pytest.fixture
def client_contratado(usuario_contratado):
    client = Client()
    client.force_login(usuario_contratado)
    return client


# =============================================================================
# Repositórios
# =============================================================================

@pytest.fixture
def repo_tickets(db):
    return DjangoTicketRepository()


@pytest.fixture
def repo_alertas(db):
    return DjangoAlertRepository()


@pytest.fixture
def diretorio_django(db):
    return DjangoUserDirectory()


@pytest.fixture
def salvar_ticket(repo_tickets):
    """
    Factory que grava um ticket ABERTO direto no banco.

    `expira_em` pode ser negativo para simular ticket vencido.
    """
    def _salvar(numero="TKT-2024-0001", atribuido_a_id="1", expira_em=timedelta(days=10),
                organizacao="City Water", agora=None):
        agora = agora or utc_agora()
        ticket = TicketEntity.criar(
            numero=numero,
            organizacao=organizacao,
            localizacao="123 Main St",
            data_expiracao=agora + timedelta(days=1),
            atribuido_a_id=str(atribuido_a_id),
            agora=agora,
        )
        ticket.data_expiracao = agora + expira_em
        repo_tickets.add(ticket)
        return ticket

    return _salvar

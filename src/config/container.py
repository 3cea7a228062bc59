"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para toda app (repositories, publisher, scheduler)
- Factory: Nova instância por chamada (services, UoW, monitor)
- Configuration: valores de domínio lidos de django.conf.settings

Adapters Django são importados sob demanda: o container pode ser
importado antes de django.setup().
"""

from importlib import import_module
from typing import Any, Callable, Dict, Optional

from dependency_injector import containers, providers

from src.core.alerts.use_cases import (
    AtualizarAlertaService,
    EstatisticasAlertasService,
    ExcluirAlertaService,
    ListarAlertasService,
    MarcarTodosComoLidosService,
    ObterAlertaService,
)
from src.core.expiration import (
    ExpirationMonitorService,
    ExpirationScheduler,
    PoliticaExpiracao,
)
from src.core.shared.clock import utc_agora
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


def _adapter(caminho: str) -> Callable[..., Any]:
    """Callable que importa `modulo.Nome` apenas na primeira construção."""
    modulo, nome = caminho.rsplit(".", 1)

    def _construir(*args, **kwargs):
        return getattr(import_module(modulo), nome)(*args, **kwargs)

    _construir.__name__ = nome
    return _construir


CONFIG_PADRAO: Dict[str, Any] = {
    "default_renewal_days": 15,
    "ticket_number_max_attempts": 5,
    "expiring_soon_window_hours": 48,
    "alert_dedup_window_hours": 24,
    "expiration_check_interval_seconds": 1800,
    "event_publisher_mode": "sync",
}


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: valores de domínio (settings)
    - Infrastructure: relógio, publisher de eventos
    - Repositories: persistência (Django ORM)
    - Unit of Work: transações
    - Services: Use Cases
    - Expiration: monitor e scheduler

    Example:
        container = get_container()
        service = container.renovar_ticket_service()
        ticket = service.execute(ticket_id, usuario)
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    config = providers.Configuration(default=CONFIG_PADRAO)

    # =========================================================================
    # Infrastructure
    # =========================================================================

    relogio = providers.Object(utc_agora)

    event_publisher = providers.Singleton(
        _adapter("src.adapters.django_app.events.publishers.get_event_publisher"),
        mode=config.event_publisher_mode,
    )

    # =========================================================================
    # Repositories (Singleton - stateless)
    # =========================================================================

    ticket_repository = providers.Singleton(
        _adapter("src.adapters.django_app.tickets.repositories.DjangoTicketRepository")
    )

    alert_repository = providers.Singleton(
        _adapter("src.adapters.django_app.tickets.repositories.DjangoAlertRepository")
    )

    user_directory = providers.Singleton(
        _adapter("src.adapters.django_app.tickets.repositories.DjangoUserDirectory")
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        _adapter("src.adapters.django_app.shared.unit_of_work.DjangoUnitOfWork"),
        event_publisher=event_publisher,
    )

    # =========================================================================
    # Services - Tickets
    # =========================================================================

    criar_ticket_service = providers.Factory(
        CriarTicketService,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
        diretorio=user_directory,
        relogio=relogio,
        max_tentativas=config.ticket_number_max_attempts.as_int(),
    )

    atualizar_ticket_service = providers.Factory(
        AtualizarTicketService,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
        diretorio=user_directory,
        relogio=relogio,
    )

    renovar_ticket_service = providers.Factory(
        RenovarTicketService,
        ticket_repo=ticket_repository,
        alert_repo=alert_repository,
        uow=unit_of_work,
        relogio=relogio,
        dias_padrao=config.default_renewal_days.as_int(),
    )

    fechar_ticket_service = providers.Factory(
        FecharTicketService,
        ticket_repo=ticket_repository,
        alert_repo=alert_repository,
        uow=unit_of_work,
        relogio=relogio,
    )

    excluir_ticket_service = providers.Factory(
        ExcluirTicketService,
        ticket_repo=ticket_repository,
        alert_repo=alert_repository,
        uow=unit_of_work,
    )

    # Leitura (sem UoW)
    obter_ticket_service = providers.Factory(
        ObterTicketService,
        ticket_repo=ticket_repository,
        relogio=relogio,
    )

    listar_tickets_service = providers.Factory(
        ListarTicketsService,
        ticket_repo=ticket_repository,
        relogio=relogio,
    )

    estatisticas_tickets_service = providers.Factory(
        EstatisticasTicketsService,
        ticket_repo=ticket_repository,
        relogio=relogio,
        janela_horas=config.expiring_soon_window_hours.as_int(),
    )

    gerar_numero_ticket_service = providers.Factory(
        GerarNumeroTicketService,
        ticket_repo=ticket_repository,
        relogio=relogio,
    )

    verificar_numero_ticket_service = providers.Factory(
        VerificarNumeroTicketService,
        ticket_repo=ticket_repository,
    )

    # =========================================================================
    # Services - Alertas
    # =========================================================================

    listar_alertas_service = providers.Factory(
        ListarAlertasService,
        alert_repo=alert_repository,
        ticket_repo=ticket_repository,
    )

    obter_alerta_service = providers.Factory(
        ObterAlertaService,
        alert_repo=alert_repository,
        ticket_repo=ticket_repository,
    )

    atualizar_alerta_service = providers.Factory(
        AtualizarAlertaService,
        alert_repo=alert_repository,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
    )

    marcar_todos_lidos_service = providers.Factory(
        MarcarTodosComoLidosService,
        alert_repo=alert_repository,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
    )

    excluir_alerta_service = providers.Factory(
        ExcluirAlertaService,
        alert_repo=alert_repository,
        uow=unit_of_work,
    )

    estatisticas_alertas_service = providers.Factory(
        EstatisticasAlertasService,
        alert_repo=alert_repository,
        ticket_repo=ticket_repository,
    )

    # =========================================================================
    # Expiration
    # =========================================================================

    politica_expiracao = providers.Singleton(
        PoliticaExpiracao,
        janela_expirando_horas=config.expiring_soon_window_hours.as_int(),
        janela_deduplicacao_horas=config.alert_dedup_window_hours.as_int(),
        intervalo_segundos=config.expiration_check_interval_seconds.as_int(),
    )

    expiration_monitor = providers.Factory(
        ExpirationMonitorService,
        ticket_repo=ticket_repository,
        alert_repo=alert_repository,
        politica=politica_expiracao,
        relogio=relogio,
        event_publisher=event_publisher,
    )

    expiration_scheduler = providers.Singleton(
        ExpirationScheduler,
        monitor=expiration_monitor,
        intervalo_segundos=config.expiration_check_interval_seconds.as_int(),
        manutencao=providers.Object(
            _adapter("src.adapters.django_app.shared.scheduler_hooks.reciclar_conexoes")
        ),
        ao_concluir=providers.Object(
            _adapter("src.adapters.django_app.shared.scheduler_hooks.registrar_verificacao")
        ),
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def _config_from_settings() -> Dict[str, Any]:
    from django.conf import settings

    return {
        chave: getattr(settings, chave.upper(), padrao)
        for chave, padrao in CONFIG_PADRAO.items()
    }


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir, com a configuração lida de django.conf.settings.
    """
    global _container

    if _container is None:
        container = Container()
        container.config.from_dict(_config_from_settings())
        _container = container

    return _container


def reset_container() -> None:
    """
    Reset do container (para testes).

    Permite criar novo container limpo.
    """
    global _container
    _container = None

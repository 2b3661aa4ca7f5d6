"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para toda app (repositories, publisher)
- Factory: Nova instância por chamada (services, UoW)

Os adapters Django são importados sob demanda (lambda + __import__)
para que o container possa ser carregado antes de django.setup().
"""

from dependency_injector import containers, providers
from typing import Optional


def _adapter(modulo: str, nome: str):
    """Resolve uma classe/função de adapter no momento do uso."""
    return getattr(__import__(modulo, fromlist=[nome]), nome)


def _setting(nome: str, padrao=None):
    from django.conf import settings
    return getattr(settings, nome, padrao)


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Infrastructure: publisher de eventos, storage, email, relógio
    - Repositories: Persistência
    - Unit of Work: Transações
    - Services: Use Cases

    Example:
        from sevenboard.config.container import get_container

        service = get_container().criar_solicitacao_service()
        output = service.execute(input_dto)
    """

    # =========================================================================
    # Infrastructure
    # =========================================================================

    event_publisher = providers.Singleton(
        lambda: _adapter(
            'sevenboard.adapters.django_app.events.publishers', 'get_event_publisher'
        )(_setting('EVENT_PUBLISHER_MODE', 'sync'))
    )

    arquivo_storage = providers.Singleton(
        lambda: _adapter(
            'sevenboard.adapters.django_app.solicitacoes.storage', 'DjangoArquivoStorage'
        )()
    )

    notificador = providers.Singleton(
        lambda: _adapter(
            'sevenboard.adapters.django_app.notifications.email', 'DjangoEmailNotificador'
        )()
    )

    relogio = providers.Object(
        lambda: _adapter('sevenboard.adapters.django_app.shared.relogio', 'agora_local')()
    )

    notificacao_deriver = providers.Singleton(
        lambda: __import__(
            'sevenboard.core.notificacoes.deriver', fromlist=['NotificacaoDeriver']
        ).NotificacaoDeriver(
            alerta_horas=_setting('PRAZO_ALERTA_HORAS', 24),
            atraso_max_horas=_setting('PRAZO_ATRASO_MAX_HORAS', 48),
        )
    )

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    solicitacao_repository = providers.Singleton(
        lambda: _adapter(
            'sevenboard.adapters.django_app.solicitacoes.repositories',
            'DjangoSolicitacaoRepository',
        )()
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        lambda event_publisher: _adapter(
            'sevenboard.adapters.django_app.shared.unit_of_work', 'DjangoUnitOfWork'
        )(event_publisher=event_publisher),
        event_publisher=event_publisher,
    )

    # =========================================================================
    # Services / Use Cases (Factory - nova instância por chamada)
    # =========================================================================

    criar_solicitacao_service = providers.Factory(
        lambda repo, uow, storage, relogio: __import__(
            'sevenboard.core.solicitacoes.use_cases', fromlist=['CriarSolicitacaoService']
        ).CriarSolicitacaoService(
            solicitacao_repo=repo,
            uow=uow,
            arquivo_storage=storage,
            relogio=relogio,
        ),
        repo=solicitacao_repository,
        uow=unit_of_work,
        storage=arquivo_storage,
        relogio=relogio,
    )

    alterar_status_service = providers.Factory(
        lambda repo, uow, relogio: __import__(
            'sevenboard.core.solicitacoes.use_cases', fromlist=['AlterarStatusService']
        ).AlterarStatusService(solicitacao_repo=repo, uow=uow, relogio=relogio),
        repo=solicitacao_repository,
        uow=unit_of_work,
        relogio=relogio,
    )

    # Leitura (sem UoW)
    listar_solicitacoes_service = providers.Factory(
        lambda repo: __import__(
            'sevenboard.core.solicitacoes.use_cases', fromlist=['ListarSolicitacoesService']
        ).ListarSolicitacoesService(solicitacao_repo=repo),
        repo=solicitacao_repository,
    )

    obter_solicitacao_service = providers.Factory(
        lambda repo: __import__(
            'sevenboard.core.solicitacoes.use_cases', fromlist=['ObterSolicitacaoService']
        ).ObterSolicitacaoService(solicitacao_repo=repo),
        repo=solicitacao_repository,
    )

    linha_do_tempo_service = providers.Factory(
        lambda repo: __import__(
            'sevenboard.core.solicitacoes.use_cases', fromlist=['LinhaDoTempoService']
        ).LinhaDoTempoService(solicitacao_repo=repo),
        repo=solicitacao_repository,
    )

    # Notificações
    listar_notificacoes_service = providers.Factory(
        lambda repo, deriver, relogio: __import__(
            'sevenboard.core.notificacoes.use_cases', fromlist=['ListarNotificacoesService']
        ).ListarNotificacoesService(
            solicitacao_repo=repo, deriver=deriver, relogio=relogio
        ),
        repo=solicitacao_repository,
        deriver=notificacao_deriver,
        relogio=relogio,
    )

    marcar_como_lida_service = providers.Factory(
        lambda: __import__(
            'sevenboard.core.notificacoes.use_cases', fromlist=['MarcarComoLidaService']
        ).MarcarComoLidaService()
    )

    marcar_todas_como_lidas_service = providers.Factory(
        lambda listar: __import__(
            'sevenboard.core.notificacoes.use_cases', fromlist=['MarcarTodasComoLidasService']
        ).MarcarTodasComoLidasService(listar_service=listar),
        listar=listar_notificacoes_service,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization).
    """
    global _container

    if _container is None:
        _container = Container()

    return _container


def reset_container() -> None:
    """
    Reset do container (para testes).

    Permite criar novo container limpo.
    """
    global _container
    _container = None


# =============================================================================
# Testing Container
# =============================================================================

def create_testing_container() -> Container:
    """
    Container para testes.

    Sobrescreve persistência, storage, email e eventos com implementações
    em memória; os services continuam os mesmos do Container principal.

    Example:
        container = create_testing_container()
        container.criar_solicitacao_service().execute(input_dto)
        container.event_publisher().published_events
    """
    from sevenboard.core.solicitacoes.ports import (
        InMemoryArquivoStorage,
        InMemoryNotificador,
        InMemorySolicitacaoRepository,
    )
    from sevenboard.adapters.django_app.events.publishers import InMemoryEventPublisher
    from sevenboard.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork

    container = Container()
    container.event_publisher.override(providers.Singleton(InMemoryEventPublisher))
    container.solicitacao_repository.override(providers.Singleton(InMemorySolicitacaoRepository))
    container.arquivo_storage.override(providers.Singleton(InMemoryArquivoStorage))
    container.notificador.override(providers.Singleton(InMemoryNotificador))
    container.unit_of_work.override(
        providers.Factory(InMemoryUnitOfWork, event_publisher=container.event_publisher)
    )
    return container

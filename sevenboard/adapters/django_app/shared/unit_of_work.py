"""
Unit of Work - Implementação Django.

Gerencia a transação de cada operação sobre solicitações e a
publicação dos eventos de domínio depois do commit.

Responsabilidades:
- Iniciar/finalizar transações (django.db.transaction.atomic)
- Commit/Rollback coordenado
- Publicar eventos após commit bem-sucedido
- Converter falhas de banco em PersistenceError

Falhas na publicação de eventos são apenas registradas em log:
a operação já foi gravada e não é desfeita.
"""

from typing import List, Optional
import logging

from django.db import DatabaseError, transaction

from sevenboard.core.shared.events import DomainEvent
from sevenboard.core.shared.exceptions import PersistenceError
from sevenboard.core.shared.interfaces import EventPublisher, UnitOfWork

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Usa um bloco transaction.atomic() aberto em __enter__ e fechado
    em commit/rollback, o que permite aninhar dentro de outras
    transações (savepoint).

    Example:
        with DjangoUnitOfWork(event_publisher) as uow:
            repo.save(solicitacao)
            uow.publish_event(SolicitacaoCriadaEvent(...))
        # Commit automático + eventos publicados

    Example com rollback:
        with DjangoUnitOfWork() as uow:
            repo.save(solicitacao)
            raise ValidationError("...")
        # Rollback automático, eventos descartados
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._atomic = None
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False
        self.clear_events()
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Persiste as mudanças e publica eventos.

        Raises:
            PersistenceError: Se o commit no banco falhar
        """
        if self._committed or self._rolled_back:
            logger.warning("Transaction already finalized")
            return

        atomic, self._atomic = self._atomic, None
        try:
            if atomic is not None:
                atomic.__exit__(None, None, None)
                logger.debug("Transaction committed")
        except DatabaseError as e:
            logger.error(f"Commit failed: {e}")
            self._rolled_back = True
            self.clear_events()
            raise PersistenceError() from e

        self._committed = True
        if self._events:
            self._publish_events()

    def rollback(self) -> None:
        """Desfaz as mudanças e descarta eventos."""
        if self._committed or self._rolled_back:
            return

        atomic, self._atomic = self._atomic, None
        try:
            if atomic is not None:
                # Força o rollback do bloco atomic
                atomic.__exit__(RuntimeError, RuntimeError("rollback"), None)
                logger.debug("Transaction rolled back")
        except DatabaseError as e:
            logger.error(f"Rollback failed: {e}")
        finally:
            self._rolled_back = True
            self.clear_events()

    def _publish_events(self) -> None:
        """
        Publica eventos após commit.

        Se event_publisher não estiver configurado, apenas loga.
        """
        for event in self._events:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )

            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    # Operação já gravada: falha de entrega não a desfaz
                    logger.error(f"Failed to publish event {event.event_type}: {e}")

        self.clear_events()

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Não persiste nada; guarda os eventos "publicados" e, se houver
    publisher, repassa a ele como o DjangoUnitOfWork faria.

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False

    def commit(self) -> None:
        self._committed = True
        self._published_events.extend(self._events)
        if self._event_publisher:
            self._event_publisher.publish_batch(list(self._events))
        self.clear_events()

    def rollback(self) -> None:
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events

    def reset(self) -> None:
        """Reset para próximo teste."""
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()

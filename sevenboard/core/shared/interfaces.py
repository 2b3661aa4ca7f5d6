"""
Interfaces (Ports) - Contratos entre Core e Adapters.

São os "Ports" da Arquitetura Hexagonal que não pertencem a um
domínio específico:
- UnitOfWork: transação + fila de eventos pós-commit
- EventPublisher: entrega de eventos aos handlers

Princípio: Core define interfaces; Adapters implementam.
"""

from abc import ABC, abstractmethod
from typing import List

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - Coordena a gravação de uma operação.
    
    Pattern: Context Manager
        with uow:
            repo.save(solicitacao)
            uow.publish_event(event)
        # Commit automático ao sair sem erro
        # Rollback automático se exceção
    
    Eventos enfileirados só são publicados após commit
    bem-sucedido. Falhas na publicação nunca desfazem a operação.
    """
    
    def __init__(self):
        self._events: List[DomainEvent] = []
    
    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False  # Não suprime exceções
    
    @abstractmethod
    def _begin_transaction(self) -> None:
        raise NotImplementedError
    
    @abstractmethod
    def commit(self) -> None:
        """
        Persiste mudanças e publica eventos.
        
        Ordem de execução:
        1. Commit da transação
        2. Publicação de eventos enfileirados
        3. Limpeza de estado interno
        """
        raise NotImplementedError
    
    @abstractmethod
    def rollback(self) -> None:
        """Desfaz mudanças e descarta eventos."""
        raise NotImplementedError
    
    def publish_event(self, event: DomainEvent) -> None:
        """
        Enfileira evento para publicação após commit.
        
        Args:
            event: Evento de domínio a ser publicado
        """
        self._events.append(event)
    
    def collect_events(self) -> List[DomainEvent]:
        """Retorna eventos enfileirados (para testing/debugging)."""
        return list(self._events)
    
    def clear_events(self) -> None:
        """Limpa fila de eventos."""
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.
    
    Adapters implementam para entregar eventos em processo
    (desenvolvimento) ou via Celery (produção).
    
    Example:
        class CeleryEventPublisher(EventPublisher):
            def publish(self, event):
                dispatch_domain_event.delay(event.event_type, event.to_dict())
    """
    
    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        raise NotImplementedError
    
    def publish_batch(self, events: List[DomainEvent]) -> None:
        """Publica múltiplos eventos, na ordem recebida."""
        for event in events:
            self.publish(event)

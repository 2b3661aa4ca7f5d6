"""
Event Publishers - Publicadores de Eventos de Domínio.

Responsável por entregar eventos aos handlers.
Implementações:
- LoggingEventPublisher: Loga e executa handlers no processo (modo "sync")
- CeleryEventPublisher: Envia ao Celery (modo "celery")
- InMemoryEventPublisher: Para testes

Em nenhum caso uma falha de entrega é propagada: a operação que
gerou o evento já foi gravada.
"""

from typing import Callable, Dict, List
import json
import logging

from sevenboard.core.shared.events import DomainEvent
from sevenboard.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)

Handler = Callable[[DomainEvent], None]


class _HandlerRegistry:
    """Handlers síncronos por tipo de evento."""
    
    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = {}
    
    def register_handler(self, event_type: str, handler: Handler) -> None:
        """Registra handler para tipo de evento (ignora duplicatas)."""
        handlers = self._handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)
    
    def _dispatch_to_handlers(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Erro em handler para {event.event_type}: {e}", exc_info=True
                )


class LoggingEventPublisher(_HandlerRegistry, EventPublisher):
    """
    Publisher que loga eventos e executa handlers locais.
    
    Usado em desenvolvimento (EVENT_PUBLISHER_MODE=sync), sem
    necessidade de broker.
    """
    
    def __init__(self, log_level: int = logging.INFO):
        super().__init__()
        self._log_level = log_level
    
    def publish(self, event: DomainEvent) -> None:
        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event.to_dict(), default=str)}"
        )
        self._dispatch_to_handlers(event)


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para Celery.
    
    Usado em produção (EVENT_PUBLISHER_MODE=celery).
    """
    
    def __init__(self, also_log: bool = True):
        self._also_log = also_log
    
    def publish(self, event: DomainEvent) -> None:
        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )
        
        try:
            from sevenboard.adapters.django_app.events.handlers import dispatch_domain_event
            dispatch_domain_event.delay(event.event_type, event.to_dict())
        except Exception as e:
            # Broker indisponível: evento perdido, fluxo principal segue
            logger.error(f"Falha ao publicar evento no Celery: {e}", exc_info=True)


class InMemoryEventPublisher(_HandlerRegistry, EventPublisher):
    """
    Publisher em memória para testes.
    
    Armazena eventos publicados para verificação em testes.
    """
    
    def __init__(self):
        super().__init__()
        self._published_events: List[DomainEvent] = []
    
    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        self._dispatch_to_handlers(event)
    
    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()
    
    def clear(self) -> None:
        self._published_events.clear()
    
    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self._published_events if e.event_type == event_type]


def get_event_publisher(mode: str = "sync") -> EventPublisher:
    """
    Factory para obter publisher apropriado.
    
    Args:
        mode: "sync" (handlers no processo) ou "celery"
        
    Returns:
        Publisher configurado
    """
    if mode == "celery":
        return CeleryEventPublisher()
    
    from sevenboard.adapters.django_app.events.handlers import registrar_handlers_locais
    
    publisher = LoggingEventPublisher()
    registrar_handlers_locais(publisher)
    return publisher

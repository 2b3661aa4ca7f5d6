"""
Event Handlers - Processadores de Eventos de Domínio.

Os emails ao solicitante saem daqui, nunca do fluxo da requisição:

- SolicitacaoCriadaEvent     → bilhete de confirmação
- SolicitacaoConcluidaEvent  → aviso de conclusão
- SolicitacaoReabertaEvent   → aviso de reabertura

Modos (settings.EVENT_PUBLISHER_MODE):
- sync: LoggingEventPublisher chama tratar_evento_local no processo,
  que dispara o SMTP numa thread daemon; falhas de envio são
  registradas em log e descartadas
- celery: dispatch_domain_event roteia para enviar_email_solicitacao,
  que re-tenta com backoff exponencial

Padrão:
    @shared_task(bind=True, ...)
    def <tarefa>(self, ...) -> ...:
"""

import logging
import threading
from typing import Any, Dict

from celery import shared_task

from sevenboard.core.notificacoes.entities import EstadoLeitura
from sevenboard.core.shared.events import DomainEvent
from sevenboard.core.shared.exceptions import NotificationDispatchError
from sevenboard.core.solicitacoes.ports import TipoNotificacaoEmail
from sevenboard.adapters.django_app.shared.relogio import agora_local

logger = logging.getLogger(__name__)


EMAIL_POR_EVENTO = {
    'SolicitacaoCriadaEvent': TipoNotificacaoEmail.CONFIRMACAO,
    'SolicitacaoConcluidaEvent': TipoNotificacaoEmail.CONCLUSAO,
    'SolicitacaoReabertaEvent': TipoNotificacaoEmail.REABERTURA,
}


def _carregar_para_envio(solicitacao_id: str, tipo: str):
    """Solicitação com email para envio, ou None se não há o que enviar."""
    # Importação tardia para evitar circular import
    from sevenboard.config.container import get_container
    
    solicitacao = get_container().solicitacao_repository().get_by_id(solicitacao_id)
    
    if solicitacao is None:
        logger.warning(f"[EMAIL] Solicitação {solicitacao_id} não encontrada, email '{tipo}' descartado")
        return None
    
    if not solicitacao.possui_email:
        logger.debug(f"[EMAIL] Solicitação {solicitacao.protocolo} sem email, envio ignorado")
        return None
    
    return solicitacao


def enviar_email(solicitacao_id: str, tipo: str) -> bool:
    """
    Carrega a solicitação e envia o email do tipo indicado.
    
    Returns:
        True se enviado; False se a solicitação não existe ou não tem email
        
    Raises:
        NotificationDispatchError: Se o envio falhar
    """
    from sevenboard.config.container import get_container
    
    solicitacao = _carregar_para_envio(solicitacao_id, tipo)
    if solicitacao is None:
        return False
    
    get_container().notificador().notificar(
        solicitacao.email, TipoNotificacaoEmail(tipo), solicitacao
    )
    return True


# =============================================================================
# Modo sync
# =============================================================================

def _notificar_sem_propagar(notificador, solicitacao, tipo: TipoNotificacaoEmail) -> None:
    try:
        notificador.notificar(solicitacao.email, tipo, solicitacao)
    except NotificationDispatchError as e:
        logger.error(f"[HANDLER] Email '{tipo.value}' não enviado para {solicitacao.id}: {e}")


def tratar_evento_local(event: DomainEvent) -> None:
    """
    Handler síncrono (LoggingEventPublisher).
    
    Fire-and-forget: a solicitação é lida no processo da requisição e o
    envio SMTP segue numa thread daemon (settings.EMAIL_EM_SEGUNDO_PLANO),
    de modo que a resposta não espera o servidor de email. Falha no envio
    nunca chega ao chamador.
    """
    from django.conf import settings
    from sevenboard.config.container import get_container
    
    tipo = EMAIL_POR_EVENTO.get(event.event_type)
    if tipo is None or not getattr(event, 'email', None):
        return
    
    solicitacao = _carregar_para_envio(event.aggregate_id, tipo.value)
    if solicitacao is None:
        return
    
    notificador = get_container().notificador()
    
    if not getattr(settings, 'EMAIL_EM_SEGUNDO_PLANO', True):
        _notificar_sem_propagar(notificador, solicitacao, tipo)
        return
    
    thread = threading.Thread(
        target=_notificar_sem_propagar,
        args=(notificador, solicitacao, tipo),
        name=f"email-{tipo.value}-{solicitacao.id}",
        daemon=True,
    )
    thread.start()
    logger.info(f"[HANDLER] Envio de '{tipo.value}' para {solicitacao.protocolo} iniciado em segundo plano")


def registrar_handlers_locais(publisher) -> None:
    """Registra tratar_evento_local para os eventos que geram email."""
    for event_type in EMAIL_POR_EVENTO:
        publisher.register_handler(event_type, tratar_evento_local)


# =============================================================================
# Modo celery
# =============================================================================

@shared_task(
    bind=True,
    autoretry_for=(NotificationDispatchError,),
    retry_backoff=True,
    retry_backoff_max=600,
    retry_jitter=True,
    max_retries=5,
    acks_late=True,
)
def enviar_email_solicitacao(self, solicitacao_id: str, tipo: str) -> bool:
    """
    Envia email ao solicitante, com retry e backoff exponencial.
    
    Args:
        solicitacao_id: ID da solicitação
        tipo: Valor de TipoNotificacaoEmail
    """
    logger.info(
        f"[TASK] Email '{tipo}' para solicitação {solicitacao_id} "
        f"(tentativa {self.request.retries + 1})"
    )
    return enviar_email(solicitacao_id, tipo)


@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> None:
    """
    Dispatcher central para Domain Events.
    
    Args:
        event_type: Tipo do evento (ex: 'SolicitacaoCriadaEvent')
        event_data: Evento serializado por DomainEvent.to_dict()
    """
    tipo = EMAIL_POR_EVENTO.get(event_type)
    
    if tipo is None:
        logger.debug(f"[DISPATCHER] Nenhum handler para {event_type}")
        return
    
    dados = event_data.get('data', {})
    if not dados.get('email'):
        logger.debug(f"[DISPATCHER] {event_type} sem email, nada a enviar")
        return
    
    logger.info(f"[DISPATCHER] Roteando {event_type} para enviar_email_solicitacao")
    enviar_email_solicitacao.delay(event_data['aggregate_id'], tipo.value)


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

@shared_task(bind=True)
def verificar_prazos(self) -> Dict[str, int]:
    """
    Conta solicitações com prazo próximo ou vencido.
    
    Executada periodicamente pelo Celery Beat; usa a mesma janela
    das notificações do quadro.
    
    Returns:
        {"proximas": n, "atrasadas": m}
    """
    from sevenboard.config.container import get_container
    
    container = get_container()
    solicitacoes = container.solicitacao_repository().list_em_aberto()
    alertas = container.notificacao_deriver().prazos(
        solicitacoes, EstadoLeitura(), agora_local()
    )
    
    atrasadas = [a for a in alertas if a.atrasada]
    for alerta in atrasadas:
        logger.warning(f"[SCHEDULED] Solicitação atrasada: {alerta.mensagem}")
    
    resumo = {'proximas': len(alertas) - len(atrasadas), 'atrasadas': len(atrasadas)}
    logger.info(f"[SCHEDULED] Prazos verificados: {resumo}")
    return resumo

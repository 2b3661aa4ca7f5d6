"""
Envio de emails ao solicitante.

Implementa o port Notificador do Core usando o framework de email
do Django (SMTP configurado via SMTP_HOST/SMTP_PORT/SMTP_USER/...).

Modelos:
- CONFIRMACAO: "Bilhete de Solicitação: <protocolo>"
- CONCLUSAO: "Solicitação Concluída: <protocolo>"
- REABERTURA: "Solicitação Reaberta: <protocolo>"
"""

import logging
from html import escape

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.utils.html import strip_tags

from sevenboard.core.shared.exceptions import NotificationDispatchError
from sevenboard.core.solicitacoes.audit_log import notas_livres
from sevenboard.core.solicitacoes.entities import SolicitacaoEntity
from sevenboard.core.solicitacoes.ports import TipoNotificacaoEmail

logger = logging.getLogger(__name__)


ASSUNTOS = {
    TipoNotificacaoEmail.CONFIRMACAO: "Bilhete de Solicitação: {protocolo}",
    TipoNotificacaoEmail.CONCLUSAO: "Solicitação Concluída: {protocolo}",
    TipoNotificacaoEmail.REABERTURA: "Solicitação Reaberta: {protocolo}",
}

INTRODUCOES = {
    TipoNotificacaoEmail.CONFIRMACAO: (
        "Recebemos sua solicitação. Guarde o protocolo abaixo para acompanhamento."
    ),
    TipoNotificacaoEmail.CONCLUSAO: (
        "Sua solicitação foi concluída pela equipe de marketing."
    ),
    TipoNotificacaoEmail.REABERTURA: (
        "Sua solicitação foi reaberta e voltou para a fila de produção."
    ),
}


def _gerar_html_email(tipo: TipoNotificacaoEmail, solicitacao: SolicitacaoEntity) -> str:
    """Monta o bilhete em HTML simples."""
    linhas = [
        ("Protocolo", solicitacao.protocolo),
        ("Departamento", solicitacao.departamento),
        ("Tipo", solicitacao.tipo_solicitacao or "-"),
        ("Veiculação", ", ".join(solicitacao.veiculacao) or "-"),
        ("Entrega", solicitacao.prazo.strftime("%d/%m/%Y %H:%M") if solicitacao.prazo else "-"),
        ("Status", solicitacao.status.rotulo),
    ]
    tabela = "".join(
        f"<tr><th align=\"left\">{escape(rotulo)}</th><td>{escape(valor)}</td></tr>"
        for rotulo, valor in linhas
    )
    notas = notas_livres(solicitacao.observacoes)
    bloco_notas = f"<p><em>{escape(notas)}</em></p>" if notas else ""
    
    return f"""
    <!DOCTYPE html>
    <html lang="pt-BR">
    <head><meta charset="UTF-8"></head>
    <body style="font-family: Arial, sans-serif; color: #374151;">
        <h1 style="font-size: 18px;">{escape(ASSUNTOS[tipo].format(protocolo=solicitacao.protocolo))}</h1>
        <p>{escape(INTRODUCOES[tipo])}</p>
        <table cellpadding="4">{tabela}</table>
        <p>{escape(solicitacao.descricao)}</p>
        {bloco_notas}
        <p style="font-size: 12px; color: #6b7280;">Seven Board</p>
    </body>
    </html>
    """


class DjangoEmailNotificador:
    """
    Notificador via django.core.mail.
    
    Example:
        notificador = DjangoEmailNotificador()
        notificador.notificar("ana@exemplo.org", TipoNotificacaoEmail.CONCLUSAO, solicitacao)
    """
    
    def __init__(self, remetente: str = None):
        self.remetente = remetente or settings.DEFAULT_FROM_EMAIL
    
    def notificar(
        self,
        destinatario: str,
        tipo: TipoNotificacaoEmail,
        solicitacao: SolicitacaoEntity,
    ) -> None:
        """
        Envia o email.
        
        Raises:
            NotificationDispatchError: Se o backend de email falhar
        """
        assunto = ASSUNTOS[tipo].format(protocolo=solicitacao.protocolo)
        html = _gerar_html_email(tipo, solicitacao)
        
        email = EmailMultiAlternatives(
            subject=assunto,
            body=strip_tags(html),
            from_email=self.remetente,
            to=[destinatario],
        )
        email.attach_alternative(html, "text/html")
        
        try:
            email.send(fail_silently=False)
        except Exception as e:
            logger.error(f"Falha ao enviar email '{assunto}' para {destinatario}: {e}")
            raise NotificationDispatchError(
                f"Falha ao enviar email para {destinatario}",
                destinatario=destinatario,
            ) from e
        
        logger.info(f"Email '{assunto}' enviado para {destinatario}")

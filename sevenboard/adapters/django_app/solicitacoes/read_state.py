"""
Estado de leitura das notificações na sessão do Django.

Cada sessão de navegador mantém seu próprio conjunto de IDs lidos,
sem sincronização entre clientes.
"""

from sevenboard.core.notificacoes.entities import EstadoLeitura

SESSION_KEY = "sevenboard_read_notifications"


class SessionEstadoLeituraRepository:
    """
    EstadoLeituraRepository sobre request.session.
    
    Example:
        repo = SessionEstadoLeituraRepository(request.session)
        estado = repo.carregar()
    """
    
    def __init__(self, session):
        self.session = session
    
    def carregar(self) -> EstadoLeitura:
        return EstadoLeitura.from_list(self.session.get(SESSION_KEY, []))
    
    def salvar(self, estado: EstadoLeitura) -> None:
        self.session[SESSION_KEY] = estado.to_list()
        self.session.modified = True

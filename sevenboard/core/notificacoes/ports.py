"""
Ports do Domínio de Notificações.

O estado de leitura pertence à sessão do navegador; o core só o
recebe e devolve através deste contrato.
"""

from typing import Protocol, runtime_checkable

from .entities import EstadoLeitura


@runtime_checkable
class EstadoLeituraRepository(Protocol):
    """
    Interface para carregar/guardar o estado de leitura.

    Implementações:
    - SessionEstadoLeituraRepository (sessão Django)
    - InMemoryEstadoLeituraRepository (para testes)
    """

    def carregar(self) -> EstadoLeitura:
        ...

    def salvar(self, estado: EstadoLeitura) -> None:
        ...


class InMemoryEstadoLeituraRepository:
    """Estado de leitura em memória. Não usar em produção!"""

    def __init__(self):
        self._ids = []

    def carregar(self) -> EstadoLeitura:
        return EstadoLeitura.from_list(self._ids)

    def salvar(self, estado: EstadoLeitura) -> None:
        self._ids = estado.to_list()

"""
Testes dos Use Cases de Notificações.
"""

from datetime import datetime, timedelta

import pytest

from sevenboard.core.notificacoes.deriver import NotificacaoDeriver
from sevenboard.core.notificacoes.ports import InMemoryEstadoLeituraRepository
from sevenboard.core.notificacoes.use_cases import (
    ListarNotificacoesService,
    MarcarComoLidaService,
    MarcarTodasComoLidasService,
)
from sevenboard.core.solicitacoes.entities import SolicitacaoEntity, SolicitacaoStatus
from sevenboard.core.solicitacoes.ports import InMemorySolicitacaoRepository

AGORA = datetime(2023, 12, 20, 10, 0)


@pytest.fixture
def repo():
    repo = InMemorySolicitacaoRepository()
    prazo = AGORA + timedelta(hours=6)
    for status in (SolicitacaoStatus.TODO, SolicitacaoStatus.FAZENDO):
        solicitacao = SolicitacaoEntity.criar(
            departamento="MCA",
            descricao="Cobertura do evento",
            data_entrega=prazo.date(),
            horario_entrega=prazo.time(),
            agora=AGORA - timedelta(hours=1),
        )
        solicitacao.status = status
        repo.save(solicitacao)
    return repo


@pytest.fixture
def listar(repo):
    return ListarNotificacoesService(repo, NotificacaoDeriver(), relogio=lambda: AGORA)


@pytest.fixture
def estado_repo():
    return InMemoryEstadoLeituraRepository()


class TestListarNotificacoes:
    
    def test_contagem_de_nao_lidas(self, listar, estado_repo):
        resultado = listar.execute(estado_repo)
        
        # 1 nova + 2 prazos
        assert len(resultado.notificacoes) == 3
        assert resultado.nao_lidas == 3
        assert resultado.to_dict()["nao_lidas"] == 3


class TestMarcarComoLida:
    
    def test_marca_uma(self, listar, estado_repo):
        alvo = listar.execute(estado_repo).notificacoes[0]
        
        assert MarcarComoLidaService().execute(estado_repo, alvo.id) is True
        assert listar.execute(estado_repo).nao_lidas == 2
    
    def test_idempotente(self, listar, estado_repo):
        alvo = listar.execute(estado_repo).notificacoes[0]
        service = MarcarComoLidaService()
        
        service.execute(estado_repo, alvo.id)
        assert service.execute(estado_repo, alvo.id) is False
        assert estado_repo.carregar().to_list() == [alvo.id]
    
    def test_marcar_todas(self, listar, estado_repo):
        service = MarcarTodasComoLidasService(listar)
        
        assert service.execute(estado_repo) == 3
        assert service.execute(estado_repo) == 0
        assert listar.execute(estado_repo).nao_lidas == 0

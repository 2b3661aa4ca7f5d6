"""
Fixtures para testes dos adapters Django.

Django já é configurado em tests/conftest.py (SQLite em memória,
email locmem, eventos síncronos).
"""

from datetime import datetime, timedelta

import pytest


@pytest.fixture
def agora_local():
    from sevenboard.adapters.django_app.shared.relogio import agora_local
    return agora_local()


@pytest.fixture
def solicitacao_factory():
    """Cria SolicitacaoEntity válida (não persiste)."""
    from sevenboard.core.solicitacoes.entities import SolicitacaoEntity

    def criar(**kwargs):
        dados = dict(
            departamento="Marketing",
            descricao="Arte para o congresso jovem",
            data_entrega="2023-12-25",
            veiculacao=["Digital"],
            email="ana@exemplo.org",
            agora=datetime(2023, 12, 20, 9, 0),
        )
        dados.update(kwargs)
        return SolicitacaoEntity.criar(**dados)

    return criar


@pytest.fixture
def django_repo():
    from sevenboard.adapters.django_app.solicitacoes.repositories import DjangoSolicitacaoRepository
    return DjangoSolicitacaoRepository()


@pytest.fixture
def solicitacao_com_prazo(solicitacao_factory, django_repo, agora_local):
    """Persiste uma solicitação com prazo `horas` a partir de agora."""
    from sevenboard.core.solicitacoes.entities import SolicitacaoStatus

    def criar(horas: float, status=SolicitacaoStatus.TODO, **kwargs):
        prazo = (agora_local + timedelta(hours=horas)).replace(second=0, microsecond=0)
        solicitacao = solicitacao_factory(
            data_entrega=prazo.date(),
            horario_entrega=prazo.time(),
            agora=agora_local,
            **kwargs,
        )
        solicitacao.status = status
        django_repo.save(solicitacao)
        return solicitacao

    return criar


@pytest.fixture
def inmemory_uow():
    """Unit of Work em memória para testes unitários."""
    from sevenboard.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
    return InMemoryUnitOfWork()

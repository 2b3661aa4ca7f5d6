"""
Testes do NotificacaoDeriver.

Coverage:
- Novas solicitações (apenas Pendente, mais recentes primeiro)
- Alertas de prazo (janela -48h < restante < 24h)
- Estado de leitura
"""

from datetime import datetime, timedelta

import pytest

from sevenboard.core.notificacoes.deriver import (
    NotificacaoDeriver,
    id_notificacao_prazo,
    tempo_relativo,
)
from sevenboard.core.notificacoes.entities import CategoriaNotificacao, EstadoLeitura
from sevenboard.core.solicitacoes.entities import SolicitacaoEntity, SolicitacaoStatus

AGORA = datetime(2023, 12, 20, 10, 0)


def solicitacao_com_prazo(horas: float, status=SolicitacaoStatus.ARTE, **kwargs) -> SolicitacaoEntity:
    prazo = AGORA + timedelta(hours=horas)
    solicitacao = SolicitacaoEntity.criar(
        departamento=kwargs.pop("departamento", "Marketing"),
        descricao="Arte",
        data_entrega=prazo.date(),
        horario_entrega=prazo.time(),
        agora=kwargs.pop("criado_em", AGORA - timedelta(days=3)),
    )
    solicitacao.status = status
    return solicitacao


@pytest.fixture
def deriver():
    return NotificacaoDeriver()


class TestTempoRelativo:
    
    @pytest.mark.parametrize("delta,texto", [
        (timedelta(seconds=30), "agora mesmo"),
        (timedelta(minutes=1), "há 1 minuto"),
        (timedelta(minutes=5), "há 5 minutos"),
        (timedelta(hours=1), "há 1 hora"),
        (timedelta(hours=3, minutes=59), "há 3 horas"),
        (timedelta(days=1), "há 1 dia"),
        (timedelta(days=4), "há 4 dias"),
    ])
    def test_textos(self, delta, texto):
        assert tempo_relativo(AGORA - delta, AGORA) == texto


class TestNovasSolicitacoes:
    
    def test_apenas_pendentes_mais_recentes_primeiro(self, deriver):
        antiga = solicitacao_com_prazo(200, SolicitacaoStatus.TODO, criado_em=AGORA - timedelta(days=2))
        recente = solicitacao_com_prazo(200, SolicitacaoStatus.TODO, criado_em=AGORA - timedelta(minutes=5))
        em_producao = solicitacao_com_prazo(200, SolicitacaoStatus.ARTE)
        
        novas = deriver.derivar([antiga, em_producao, recente], agora=AGORA)
        
        assert [n.id for n in novas] == [recente.id, antiga.id]
        assert novas[0].categoria == CategoriaNotificacao.NOVA_SOLICITACAO
        assert novas[0].tempo == "há 5 minutos"
        assert novas[0].hoje is True
        assert novas[1].hoje is False
        assert novas[0].mensagem == f"{recente.protocolo} - Marketing"


class TestPrazos:
    
    def test_prazo_em_10h_gera_um_alerta(self, deriver):
        solicitacao = solicitacao_com_prazo(10)
        
        alertas = deriver.derivar([solicitacao], agora=AGORA)
        
        assert len(alertas) == 1
        assert alertas[0].id == f"deadline-{solicitacao.id}"
        assert alertas[0].tempo == "Vence em 10h"
        assert alertas[0].titulo == "Prazo próximo"
        assert not alertas[0].atrasada
    
    def test_horas_arredondadas_para_cima(self, deriver):
        alertas = deriver.prazos([solicitacao_com_prazo(2.5)], EstadoLeitura(), AGORA)
        assert alertas[0].tempo == "Vence em 3h"
    
    def test_atrasada_dentro_da_janela(self, deriver):
        alertas = deriver.derivar([solicitacao_com_prazo(-5)], agora=AGORA)
        
        assert alertas[0].tempo == "Atrasada"
        assert alertas[0].titulo == "Prazo vencido"
        assert alertas[0].atrasada
    
    @pytest.mark.parametrize("horas", [-72, -48, 24, 100])
    def test_fora_da_janela(self, deriver, horas):
        assert deriver.derivar([solicitacao_com_prazo(horas)], agora=AGORA) == []
    
    @pytest.mark.parametrize("status", [SolicitacaoStatus.DONE, SolicitacaoStatus.ARCHIVED])
    def test_concluidas_e_arquivadas_nao_alertam(self, deriver, status):
        assert deriver.derivar([solicitacao_com_prazo(5, status)], agora=AGORA) == []
    
    def test_pendente_perto_do_prazo_gera_duas(self, deriver):
        solicitacao = solicitacao_com_prazo(5, SolicitacaoStatus.TODO)
        
        notificacoes = deriver.derivar([solicitacao], agora=AGORA)
        
        assert [n.categoria for n in notificacoes] == [
            CategoriaNotificacao.NOVA_SOLICITACAO, CategoriaNotificacao.PRAZO,
        ]
    
    def test_janela_configuravel(self):
        deriver = NotificacaoDeriver(alerta_horas=72, atraso_max_horas=1)
        
        assert len(deriver.derivar([solicitacao_com_prazo(48)], agora=AGORA)) == 1
        assert deriver.derivar([solicitacao_com_prazo(-5)], agora=AGORA) == []


class TestEstadoLeitura:
    
    def test_marca_lida(self, deriver):
        solicitacao = solicitacao_com_prazo(10)
        estado = EstadoLeitura()
        estado.marcar_como_lida(id_notificacao_prazo(solicitacao.id))
        
        alertas = deriver.derivar([solicitacao], estado, AGORA)
        
        assert alertas[0].lida
    
    def test_marcar_e_idempotente(self):
        estado = EstadoLeitura()
        
        assert estado.marcar_como_lida("abc") is True
        assert estado.marcar_como_lida("abc") is False
        assert estado.to_list() == ["abc"]
    
    def test_marcar_todas_conta_apenas_novas(self):
        estado = EstadoLeitura.from_list(["a"])
        
        assert estado.marcar_todas(["a", "b", "c"]) == 2
        assert estado.to_list() == ["a", "b", "c"]
    
    def test_derivar_nao_altera_solicitacoes(self, deriver):
        solicitacao = solicitacao_com_prazo(10)
        antes = (solicitacao.status, solicitacao.observacoes, len(solicitacao.historico))
        
        deriver.derivar([solicitacao], EstadoLeitura(), AGORA)
        
        assert (solicitacao.status, solicitacao.observacoes, len(solicitacao.historico)) == antes

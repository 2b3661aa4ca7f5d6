"""
Testes Unitários para SolicitacaoEntity.

Coverage:
- Abertura e validações
- Transições de status e carimbos de data
- Reabertura (log nas observações)
- Prazo e horas restantes
"""

from datetime import date, datetime, time, timedelta

import pytest

from sevenboard.core.shared.exceptions import InvalidTransitionError, ValidationError
from sevenboard.core.solicitacoes.audit_log import decodificar
from sevenboard.core.solicitacoes.entities import (
    SolicitacaoEntity,
    SolicitacaoStatus,
    TipoEvento,
    EventoHistorico,
    prazo_estimado_dias,
)


def nova_solicitacao(**kwargs) -> SolicitacaoEntity:
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


class TestSolicitacaoCriacao:
    
    def test_criar_valida(self):
        solicitacao = nova_solicitacao()
        
        assert solicitacao.id
        assert solicitacao.protocolo == "7BD-D-MAR-25122023"
        assert solicitacao.status == SolicitacaoStatus.TODO
        assert solicitacao.data_entrega == date(2023, 12, 25)
        assert solicitacao.iniciado_em is None
        assert solicitacao.concluido_em is None
        assert solicitacao.arquivado_em is None
        assert solicitacao.historico[0].tipo == TipoEvento.CRIADA
    
    def test_remove_espacos_e_email_vazio(self):
        solicitacao = nova_solicitacao(departamento="  Marketing ", email="  ")
        
        assert solicitacao.departamento == "Marketing"
        assert solicitacao.email is None
        assert not solicitacao.possui_email
    
    def test_horario_opcional(self):
        assert nova_solicitacao().horario_entrega is None
        assert nova_solicitacao(horario_entrega="14:30").horario_entrega == time(14, 30)
    
    @pytest.mark.parametrize("campo,valor", [
        ("departamento", ""),
        ("departamento", "   "),
        ("descricao", ""),
        ("data_entrega", ""),
        ("data_entrega", "25/12/2023"),
        ("horario_entrega", "meio-dia"),
    ])
    def test_campos_invalidos(self, campo, valor):
        with pytest.raises(ValidationError) as exc_info:
            nova_solicitacao(**{campo: valor})
        
        assert exc_info.value.field == campo
    
    def test_prazo_estimado_pelo_tipo(self):
        solicitacao = nova_solicitacao(tipo_solicitacao="Vídeo (30 dias)")
        
        assert solicitacao.prazo_estimado_dias == 30
        assert prazo_estimado_dias("Outro") is None


class TestSolicitacaoStatus:
    
    def test_from_string_valor_e_nome(self):
        assert SolicitacaoStatus.from_string("in-progress") == SolicitacaoStatus.IN_PROGRESS
        assert SolicitacaoStatus.from_string("VIDEO_MATERIAIS") == SolicitacaoStatus.VIDEO_MATERIAIS
    
    def test_from_string_desconhecido(self):
        with pytest.raises(InvalidTransitionError):
            SolicitacaoStatus.from_string("em-analise")
    
    @pytest.mark.parametrize("valor", [5, ["done"], {"status": "done"}])
    def test_from_string_rejeita_valor_que_nao_e_texto(self, valor):
        with pytest.raises(InvalidTransitionError):
            SolicitacaoStatus.from_string(valor)
    
    def test_rotulos(self):
        assert SolicitacaoStatus.TODO.rotulo == "Pendente"
        assert SolicitacaoStatus.DONE.rotulo == "Concluído"
    
    @pytest.mark.parametrize("status", [
        "in-progress", "video-materiais", "cobertura-eventos",
        "arte", "fazendo", "aprovacao", "parado",
    ])
    def test_colunas_de_producao(self, status):
        assert SolicitacaoStatus(status).em_producao


class TestTransicoes:
    
    def test_producao_carimba_inicio_uma_vez(self):
        solicitacao = nova_solicitacao()
        t1 = datetime(2023, 12, 21, 8, 0)
        t2 = datetime(2023, 12, 22, 8, 0)
        
        solicitacao.alterar_status(SolicitacaoStatus.ARTE, agora=t1)
        solicitacao.alterar_status(SolicitacaoStatus.APROVACAO, agora=t2)
        
        assert solicitacao.iniciado_em == t1
        assert solicitacao.status == SolicitacaoStatus.APROVACAO
        assert solicitacao.atualizado_em == t2
    
    def test_concluir_e_arquivar(self):
        solicitacao = nova_solicitacao()
        t1 = datetime(2023, 12, 21, 8, 0)
        t2 = datetime(2023, 12, 22, 8, 0)
        
        resultado = solicitacao.alterar_status(SolicitacaoStatus.DONE, agora=t1)
        solicitacao.alterar_status(SolicitacaoStatus.ARCHIVED, agora=t2)
        
        assert resultado.concluida
        assert solicitacao.concluido_em == t1
        assert solicitacao.arquivado_em == t2
        assert solicitacao.iniciado_em is None
    
    def test_qualquer_coluna_conhecida_e_aceita(self):
        solicitacao = nova_solicitacao()
        
        solicitacao.alterar_status(SolicitacaoStatus.ARCHIVED)
        solicitacao.alterar_status(SolicitacaoStatus.PARADO)
        
        assert solicitacao.status == SolicitacaoStatus.PARADO
    
    def test_aceita_string(self):
        solicitacao = nova_solicitacao()
        solicitacao.alterar_status("fazendo")
        
        assert solicitacao.status == SolicitacaoStatus.FAZENDO
    
    def test_status_desconhecido_nao_altera(self):
        solicitacao = nova_solicitacao()
        
        with pytest.raises(InvalidTransitionError):
            solicitacao.alterar_status("lixeira")
        
        assert solicitacao.status == SolicitacaoStatus.TODO
    
    def test_historico_registra_cada_transicao(self):
        solicitacao = nova_solicitacao()
        solicitacao.alterar_status(SolicitacaoStatus.ARTE)
        solicitacao.alterar_status(SolicitacaoStatus.DONE)
        
        alteracoes = [e for e in solicitacao.historico if e.tipo == TipoEvento.STATUS_ALTERADO]
        assert [(e.payload["de"], e.payload["para"]) for e in alteracoes] == [
            ("todo", "arte"), ("arte", "done"),
        ]
    
    def test_evento_historico_serializavel(self):
        evento = EventoHistorico(
            ocorrido_em=datetime(2023, 12, 21, 8, 0),
            tipo=TipoEvento.REABERTA,
            payload={"de": "done"},
        )
        assert EventoHistorico.from_dict(evento.to_dict()) == evento


class TestReabertura:
    
    def test_done_para_todo_anexa_uma_linha(self):
        solicitacao = nova_solicitacao(observacoes="Usar as cores do evento.")
        concluida_em = datetime(2023, 12, 22, 8, 0)
        reaberta_em = datetime(2023, 12, 23, 9, 15, 30)
        solicitacao.alterar_status(SolicitacaoStatus.DONE, agora=concluida_em)
        antes = solicitacao.observacoes
        
        resultado = solicitacao.alterar_status(SolicitacaoStatus.TODO, agora=reaberta_em)
        
        assert resultado.reaberta
        assert solicitacao.observacoes.startswith(antes)
        assert solicitacao.observacoes[len(antes):] == "\n[23/12/2023, 09:15:30] Solicitação reaberta."
        assert solicitacao.concluido_em == concluida_em
        assert solicitacao.status == SolicitacaoStatus.TODO
    
    def test_outras_transicoes_nao_alteram_observacoes(self):
        solicitacao = nova_solicitacao(observacoes="nota")
        solicitacao.alterar_status(SolicitacaoStatus.ARTE)
        solicitacao.alterar_status(SolicitacaoStatus.TODO)
        solicitacao.alterar_status(SolicitacaoStatus.ARCHIVED)
        
        assert solicitacao.observacoes == "nota"
    
    def test_reaberturas_sucessivas_acumulam(self):
        solicitacao = nova_solicitacao()
        for dia in (21, 22):
            solicitacao.alterar_status(SolicitacaoStatus.DONE, agora=datetime(2023, 12, dia, 8))
            solicitacao.alterar_status(SolicitacaoStatus.TODO, agora=datetime(2023, 12, dia, 9))
        
        assert len(list(decodificar(solicitacao.observacoes))) == 2
        assert solicitacao.concluido_em == datetime(2023, 12, 21, 8)
        assert [e.tipo for e in solicitacao.historico].count(TipoEvento.REABERTA) == 2


class TestPrazo:
    
    def test_sem_horario_vence_no_fim_do_dia(self):
        solicitacao = nova_solicitacao()
        assert solicitacao.prazo == datetime(2023, 12, 25, 23, 59, 59)
    
    def test_horas_restantes(self):
        solicitacao = nova_solicitacao(horario_entrega="12:00")
        agora = datetime(2023, 12, 25, 2, 0)
        
        assert solicitacao.horas_restantes(agora) == pytest.approx(10)
        assert solicitacao.horas_restantes(agora + timedelta(hours=12)) == pytest.approx(-2)

"""
Testes da API JSON (/api/...).

Fluxo real: Client → View → Container → Use Case → Django ORM,
com eventos síncronos e email no backend locmem.
"""

import json
import threading

import pytest
from django.core import mail
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import Client

from sevenboard.adapters.django_app.notifications.email import DjangoEmailNotificador
from sevenboard.adapters.django_app.solicitacoes.forms import parse_veiculacao
from sevenboard.adapters.django_app.solicitacoes.repositories import DjangoSolicitacaoRepository
from sevenboard.core.shared.exceptions import NotificationDispatchError, PersistenceError
from sevenboard.core.solicitacoes.entities import SolicitacaoStatus

pytestmark = pytest.mark.django_db


@pytest.fixture
def client():
    return Client()


@pytest.fixture
def dados_formulario():
    return {
        'departamento': 'Marketing',
        'email': 'ana@exemplo.org',
        'tipoSolicitacao': 'Vídeo (30 dias)',
        'descricao': 'Vídeo institucional',
        'veiculacao': '["Digital"]',
        'dataEntrega': '2023-12-25',
    }


def criar(client, dados):
    response = client.post('/api/cards', data=dados)
    assert response.status_code == 201, response.content
    return response.json()['data']


def mover(client, pk, status):
    return client.put(
        f'/api/cards/{pk}/status',
        data=json.dumps({'status': status}),
        content_type='application/json',
    )


# =============================================================================
# Abertura
# =============================================================================

class TestCriarCard:
    
    def test_multipart_cria_com_protocolo(self, client, dados_formulario):
        data = criar(client, dados_formulario)
        
        assert data['protocolo'] == '7BD-D-MAR-25122023'
        assert data['status'] == 'todo'
        assert data['prazo_estimado_dias'] == 30
        assert data['arquivo_url'] is None
    
    def test_envia_bilhete_de_confirmacao(self, client, dados_formulario):
        criar(client, dados_formulario)
        
        assert len(mail.outbox) == 1
        assert mail.outbox[0].subject == 'Bilhete de Solicitação: 7BD-D-MAR-25122023'
        assert mail.outbox[0].to == ['ana@exemplo.org']
    
    def test_sem_email_nao_envia(self, client, dados_formulario):
        dados_formulario.pop('email')
        criar(client, dados_formulario)
        
        assert mail.outbox == []
    
    def test_falha_no_email_nao_impede_criacao(self, client, dados_formulario, monkeypatch):
        def falha(self, destinatario, tipo, solicitacao):
            raise NotificationDispatchError("SMTP fora", destinatario=destinatario)
        
        monkeypatch.setattr(DjangoEmailNotificador, 'notificar', falha)
        
        data = criar(client, dados_formulario)
        
        assert DjangoSolicitacaoRepository().get_by_id(data['id']) is not None
    
    def test_anexo(self, client, dados_formulario):
        dados_formulario['arquivo'] = SimpleUploadedFile('briefing.pdf', b'%PDF-1.4', 'application/pdf')
        
        data = criar(client, dados_formulario)
        
        assert data['arquivo_url'].startswith('/uploads/')
        assert data['arquivo_url'].endswith('.pdf')
    
    def test_varias_veiculacoes_e_horario(self, client, dados_formulario):
        dados_formulario.update(veiculacao='["Digital", "Impresso"]', horarioEntrega='14:30')
        
        data = criar(client, dados_formulario)
        
        assert data['protocolo'] == '7BD-DI-MAR-25122023'
        assert data['horario_entrega'] == '14:30'
    
    def test_veiculacao_malformada_vira_lista_vazia(self, client, dados_formulario):
        dados_formulario['veiculacao'] = '["Digital"'
        
        assert criar(client, dados_formulario)['protocolo'] == '7BD-X-MAR-25122023'
    
    def test_json(self, client):
        response = client.post(
            '/api/cards',
            data=json.dumps({
                'departamento': 'Educação',
                'descricao': 'Arte',
                'dataEntrega': '2024-01-15',
                'veiculacao': ['Impresso'],
            }),
            content_type='application/json',
        )
        
        assert response.status_code == 201
        assert response.json()['data']['protocolo'] == '7BD-I-EDU-15012024'
    
    @pytest.mark.parametrize('campo', ['departamento', 'descricao', 'dataEntrega'])
    def test_campo_obrigatorio(self, client, dados_formulario, campo):
        dados_formulario.pop(campo)
        
        response = client.post('/api/cards', data=dados_formulario)
        
        assert response.status_code == 400
        body = response.json()
        assert body['success'] is False
        assert body['meta']['field'] == campo
    
    def test_data_em_formato_errado(self, client, dados_formulario):
        dados_formulario['dataEntrega'] = '25/12/2023'
        
        response = client.post('/api/cards', data=dados_formulario)
        
        assert response.status_code == 400
        assert response.json()['meta']['field'] == 'dataEntrega'


class TestParseVeiculacao:
    
    @pytest.mark.parametrize('valor,esperado', [
        ('["Digital","Impresso"]', ['Digital', 'Impresso']),
        ('Digital', ['Digital']),
        ('', []),
        (None, []),
        ('[1, "x"', []),
    ])
    def test_valores(self, valor, esperado):
        assert parse_veiculacao(valor) == esperado


# =============================================================================
# Consulta
# =============================================================================

class TestConsultarCards:
    
    def test_listar(self, client, dados_formulario):
        primeira = criar(client, dados_formulario)
        segunda = criar(client, dados_formulario)
        
        response = client.get('/api/cards')
        
        body = response.json()
        assert response.status_code == 200
        assert body['meta']['total'] == 2
        assert {c['id'] for c in body['data']} == {primeira['id'], segunda['id']}
    
    def test_listar_por_status(self, client, dados_formulario):
        card = criar(client, dados_formulario)
        criar(client, dados_formulario)
        mover(client, card['id'], 'arte')
        
        body = client.get('/api/cards?status=arte').json()
        
        assert [c['id'] for c in body['data']] == [card['id']]
    
    def test_detalhe(self, client, dados_formulario):
        card = criar(client, dados_formulario)
        
        response = client.get(f"/api/cards/{card['id']}")
        
        assert response.status_code == 200
        assert response.json()['data']['protocolo'] == card['protocolo']
    
    def test_detalhe_inexistente(self, client):
        response = client.get('/api/cards/nao-existe')
        
        assert response.status_code == 404
        assert response.json()['success'] is False
    
    def test_banco_indisponivel_responde_503(self, client, monkeypatch):
        def falha(self):
            raise PersistenceError()
        
        monkeypatch.setattr(DjangoSolicitacaoRepository, 'list_all', falha)
        
        response = client.get('/api/cards')
        
        assert response.status_code == 503
        assert 'Tente novamente' in response.json()['error']
    
    def test_catalogo(self, client):
        data = client.get('/api/catalogo').json()['data']
        
        assert 'Educação' in data['departamentos']
        assert data['veiculacoes'] == ['Digital', 'Impresso']
        assert {'valor': 'aprovacao', 'rotulo': 'A Aprovar', 'em_producao': True} in data['status']
        assert {'tipo': 'Vídeo (30 dias)', 'prazo_estimado_dias': 30} in data['tipos_solicitacao']


# =============================================================================
# Status
# =============================================================================

class TestAlterarStatus:
    
    def test_mover_para_producao(self, client, dados_formulario):
        card = criar(client, dados_formulario)
        
        response = mover(client, card['id'], 'video-materiais')
        
        data = response.json()['data']
        assert response.status_code == 200
        assert data['status'] == 'video-materiais'
        assert data['iniciado_em'] is not None
    
    def test_concluir_envia_email(self, client, dados_formulario):
        card = criar(client, dados_formulario)
        mail.outbox.clear()
        
        data = mover(client, card['id'], 'done').json()['data']
        
        assert data['concluido_em'] is not None
        assert [m.subject for m in mail.outbox] == ['Solicitação Concluída: 7BD-D-MAR-25122023']
    
    def test_resposta_nao_espera_o_envio_do_email(
        self, client, dados_formulario, settings, monkeypatch
    ):
        card = criar(client, dados_formulario)
        settings.EMAIL_EM_SEGUNDO_PLANO = True
        liberar = threading.Event()
        enviado = threading.Event()
        
        def smtp_lento(self, destinatario, tipo, solicitacao):
            liberar.wait(timeout=5)
            enviado.set()
        
        monkeypatch.setattr(DjangoEmailNotificador, "notificar", smtp_lento)
        
        response = mover(client, card['id'], 'done')
        
        assert response.status_code == 200
        assert not enviado.is_set()
        liberar.set()
        assert enviado.wait(timeout=5)
    
    def test_reabrir(self, client, dados_formulario):
        dados_formulario['observacoes'] = 'Usar a paleta do congresso.'
        card = criar(client, dados_formulario)
        concluida = mover(client, card['id'], 'done').json()['data']
        mail.outbox.clear()
        
        data = mover(client, card['id'], 'todo').json()['data']
        
        assert data['status'] == 'todo'
        assert data['observacoes'].startswith('Usar a paleta do congresso.\n[')
        assert data['observacoes'].endswith('] Solicitação reaberta.')
        assert data['observacoes'].count('\n[') == 1
        assert data['concluido_em'] == concluida['concluido_em']
        assert [m.subject for m in mail.outbox] == ['Solicitação Reaberta: 7BD-D-MAR-25122023']
    
    def test_status_desconhecido_responde_422(self, client, dados_formulario):
        card = criar(client, dados_formulario)
        
        response = mover(client, card['id'], 'lixeira')
        
        assert response.status_code == 422
        assert DjangoSolicitacaoRepository().get_by_id(card['id']).status == SolicitacaoStatus.TODO
    
    def test_sem_status_responde_400(self, client, dados_formulario):
        card = criar(client, dados_formulario)
        
        response = client.put(
            f"/api/cards/{card['id']}/status", data='{}', content_type='application/json'
        )
        
        assert response.status_code == 400
    
    @pytest.mark.parametrize("status", [5, ["done"], {"para": "done"}])
    def test_status_que_nao_e_texto_responde_400(self, client, dados_formulario, status):
        card = criar(client, dados_formulario)
        
        response = mover(client, card['id'], status)
        
        assert response.status_code == 400
        assert DjangoSolicitacaoRepository().get_by_id(card['id']).status == SolicitacaoStatus.TODO
    
    def test_json_invalido_responde_400(self, client, dados_formulario):
        card = criar(client, dados_formulario)
        
        response = client.put(
            f"/api/cards/{card['id']}/status", data='{status', content_type='application/json'
        )
        
        assert response.status_code == 400
    
    def test_card_inexistente_responde_404(self, client):
        assert mover(client, 'nao-existe', 'done').status_code == 404
    
    def test_linha_do_tempo(self, client, dados_formulario):
        card = criar(client, dados_formulario)
        for status in ('arte', 'done', 'todo'):
            mover(client, card['id'], status)
        
        body = client.get(f"/api/cards/{card['id']}/timeline").json()
        
        assert [e['categoria'] for e in body['data']] == [
            'criada', 'em-producao', 'concluida', 'reaberta',
        ]


# =============================================================================
# Notificações
# =============================================================================

class TestNotificacoes:
    
    def test_prazo_proximo_gera_alerta(self, client, solicitacao_com_prazo):
        solicitacao = solicitacao_com_prazo(10, SolicitacaoStatus.ARTE)
        
        body = client.get('/api/notificacoes').json()
        
        notificacoes = body['data']['notificacoes']
        assert [n['id'] for n in notificacoes] == [f'deadline-{solicitacao.id}']
        assert notificacoes[0]['categoria'] == 'prazo'
        assert body['data']['nao_lidas'] == 1
        assert body['meta']['poll_segundos'] == 10
    
    def test_prazo_muito_vencido_nao_alerta(self, client, solicitacao_com_prazo):
        solicitacao_com_prazo(-72, SolicitacaoStatus.ARTE)
        
        assert client.get('/api/notificacoes').json()['data']['notificacoes'] == []
    
    def test_marcar_como_lida_e_idempotente(self, client, solicitacao_com_prazo):
        solicitacao = solicitacao_com_prazo(10, SolicitacaoStatus.ARTE)
        notificacao_id = f'deadline-{solicitacao.id}'
        
        primeira = client.post(f'/api/notificacoes/{notificacao_id}/lida').json()['data']
        segunda = client.post(f'/api/notificacoes/{notificacao_id}/lida').json()['data']
        
        assert primeira['alterado'] is True
        assert segunda['alterado'] is False
        body = client.get('/api/notificacoes').json()['data']
        assert body['nao_lidas'] == 0
        assert body['notificacoes'][0]['lida'] is True
    
    def test_marcar_todas(self, client, solicitacao_com_prazo):
        solicitacao_com_prazo(10)
        solicitacao_com_prazo(5, SolicitacaoStatus.PARADO)
        
        marcadas = client.post('/api/notificacoes/lidas').json()['data']['marcadas']
        
        # pendente: nova + prazo; parado: prazo
        assert marcadas == 3
        assert client.get('/api/notificacoes').json()['data']['nao_lidas'] == 0
    
    def test_estado_de_leitura_e_por_sessao(self, client, solicitacao_com_prazo):
        solicitacao = solicitacao_com_prazo(10, SolicitacaoStatus.ARTE)
        client.post(f'/api/notificacoes/deadline-{solicitacao.id}/lida')
        
        outro = Client()
        
        assert outro.get('/api/notificacoes').json()['data']['nao_lidas'] == 1
    
    def test_leitura_nao_altera_solicitacao(self, client, solicitacao_com_prazo, django_repo):
        solicitacao = solicitacao_com_prazo(10, SolicitacaoStatus.ARTE)
        client.post('/api/notificacoes/lidas')
        
        recarregada = django_repo.get_by_id(solicitacao.id)
        assert recarregada.status == SolicitacaoStatus.ARTE
        assert recarregada.observacoes == solicitacao.observacoes


def test_health(client):
    response = client.get('/health')
    
    assert response.status_code == 200
    assert response.json() == {'status': 'ok'}

"""
API Views JSON para o domínio de Solicitações.

Endpoints (prefixo /api/):
- GET  cards                      - Listar solicitações (mais recentes primeiro)
- POST cards                      - Abrir solicitação (multipart, anexo "arquivo")
- GET  cards/<id>                 - Obter solicitação
- PUT  cards/<id>/status          - Mover no quadro ({"status": "..."})
- GET  cards/<id>/timeline        - Linha do tempo
- GET  catalogo                   - Departamentos, tipos, veiculações e status
- GET  notificacoes               - Notificações derivadas + não lidas
- POST notificacoes/<id>/lida     - Marcar uma como lida
- POST notificacoes/lidas         - Marcar todas como lidas

Formato:
- Saída: JSON com estrutura {success, data/error, meta}
"""

import json
import logging
from typing import Any, Dict

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from sevenboard.config.container import get_container
from sevenboard.core.shared.exceptions import (
    BusinessRuleViolationError,
    DomainException,
    EntityNotFoundError,
    PersistenceError,
    ValidationError,
)
from sevenboard.core.solicitacoes.dtos import AlterarStatusInputDTO
from sevenboard.core.solicitacoes.entities import (
    DEPARTAMENTOS,
    TIPOS_SOLICITACAO,
    VEICULACOES,
    SolicitacaoStatus,
    prazo_estimado_dias,
)

from .forms import SolicitacaoCreateForm
from .read_state import SessionEstadoLeituraRepository

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """Cria resposta JSON padronizada."""
    response = {'success': success}
    
    if data is not None:
        response['data'] = data
    
    if error is not None:
        response['error'] = error
    
    if meta is not None:
        response['meta'] = meta
    
    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Raises:
        ValidationError: Se JSON inválido
    """
    if not request.body:
        return {}
    
    try:
        data = json.loads(request.body)
    except json.JSONDecodeError as e:
        raise ValidationError(f"JSON inválido: {e}")
    if not isinstance(data, dict):
        raise ValidationError("Corpo da requisição deve ser um objeto JSON")
    return data


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.
    
    Fornece:
    - Acesso ao container DI
    - Tratamento de erros padronizado
    """
    
    def get_container(self):
        return get_container()
    
    def get_service(self, service_name: str):
        """Obtém service do container."""
        return getattr(self.get_container(), service_name)()
    
    def handle_exception(self, e: Exception) -> JsonResponse:
        """Mapeia exceções de domínio para status HTTP."""
        if isinstance(e, ValidationError):
            return json_response(
                success=False,
                error=e.message,
                status=400,
                meta={'code': e.code, 'field': e.field}
            )
        
        if isinstance(e, EntityNotFoundError):
            return json_response(
                success=False,
                error=e.message,
                status=404,
                meta={'code': e.code}
            )
        
        if isinstance(e, BusinessRuleViolationError):
            return json_response(
                success=False,
                error=e.message,
                status=422,
                meta={'code': e.code, 'rule': e.rule}
            )
        
        if isinstance(e, PersistenceError):
            logger.error(f"Falha de persistência na API: {e}")
            return json_response(
                success=False,
                error="Não foi possível salvar agora. Tente novamente em instantes.",
                status=503,
                meta={'code': e.code}
            )
        
        if isinstance(e, DomainException):
            return json_response(
                success=False,
                error=e.message,
                status=400,
                meta={'code': e.code}
            )
        
        # Erro inesperado
        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Erro interno do servidor. Tente novamente.",
            status=500
        )


# =============================================================================
# Solicitações
# =============================================================================

class CardsAPIView(BaseAPIView):
    """
    GET /api/cards - Lista solicitações
    POST /api/cards - Abre solicitação
    """
    
    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Query params:
        - status: Filtrar por coluna (opcional)
        """
        try:
            listar_service = self.get_service('listar_solicitacoes_service')
            solicitacoes = listar_service.execute(status=request.GET.get('status') or None)
            
            return json_response(
                success=True,
                data=[s.to_dict() for s in solicitacoes],
                meta={'total': len(solicitacoes)}
            )
            
        except Exception as e:
            return self.handle_exception(e)
    
    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Campos (multipart ou JSON):
            departamento, email, tipoSolicitacao, descricao,
            veiculacao (array JSON ou valor solto), dataEntrega (AAAA-MM-DD),
            horarioEntrega, observacoes, arquivo (multipart)
        """
        try:
            if request.content_type == 'application/json':
                dados = parse_json_body(request)
                if isinstance(dados.get('veiculacao'), list):
                    dados['veiculacao'] = json.dumps(dados['veiculacao'])
                form = SolicitacaoCreateForm(dados)
            else:
                form = SolicitacaoCreateForm(request.POST, request.FILES)
            
            criar_service = self.get_service('criar_solicitacao_service')
            output = criar_service.execute(form.to_input_dto())
            
            logger.info(f"API: Solicitação criada: {output.protocolo}")
            
            return json_response(
                success=True,
                data=output.to_dict(),
                status=201
            )
            
        except Exception as e:
            return self.handle_exception(e)


class CardDetailAPIView(BaseAPIView):
    """GET /api/cards/<id>"""
    
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            solicitacao = self.get_service('obter_solicitacao_service').execute(pk)
            return json_response(success=True, data=solicitacao.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class CardStatusAPIView(BaseAPIView):
    """
    PUT /api/cards/<id>/status
    
    Body JSON:
    {
        "status": "todo|in-progress|...|done|archived"
    }
    """
    
    def put(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = parse_json_body(request)
            status = data.get('status')
            if not status:
                raise ValidationError("status é obrigatório", field="status")
            if not isinstance(status, str):
                raise ValidationError("status deve ser texto", field="status")
            
            alterar_service = self.get_service('alterar_status_service')
            output = alterar_service.execute(
                AlterarStatusInputDTO(solicitacao_id=pk, status=status)
            )
            
            return json_response(success=True, data=output.to_dict())
            
        except Exception as e:
            return self.handle_exception(e)


class CardTimelineAPIView(BaseAPIView):
    """GET /api/cards/<id>/timeline"""
    
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            entradas = self.get_service('linha_do_tempo_service').execute(pk)
            return json_response(
                success=True,
                data=[e.to_dict() for e in entradas],
                meta={'total': len(entradas)}
            )
        except Exception as e:
            return self.handle_exception(e)


class CatalogoAPIView(BaseAPIView):
    """GET /api/catalogo - Opções do formulário e colunas do quadro."""
    
    def get(self, request: HttpRequest) -> JsonResponse:
        return json_response(
            success=True,
            data={
                'departamentos': DEPARTAMENTOS,
                'tipos_solicitacao': [
                    {'tipo': tipo, 'prazo_estimado_dias': prazo_estimado_dias(tipo)}
                    for tipo in TIPOS_SOLICITACAO
                ],
                'veiculacoes': VEICULACOES,
                'status': [
                    {'valor': s.value, 'rotulo': s.rotulo, 'em_producao': s.em_producao}
                    for s in SolicitacaoStatus
                ],
            }
        )


# =============================================================================
# Notificações
# =============================================================================

class NotificacoesAPIView(BaseAPIView):
    """GET /api/notificacoes"""
    
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            resultado = self.get_service('listar_notificacoes_service').execute(
                SessionEstadoLeituraRepository(request.session)
            )
            return json_response(
                success=True,
                data=resultado.to_dict(),
                meta={'poll_segundos': settings.NOTIFICACOES_POLL_SEGUNDOS}
            )
        except Exception as e:
            return self.handle_exception(e)


class NotificacaoLidaAPIView(BaseAPIView):
    """POST /api/notificacoes/<id>/lida"""
    
    def post(self, request: HttpRequest, notificacao_id: str) -> JsonResponse:
        try:
            alterado = self.get_service('marcar_como_lida_service').execute(
                SessionEstadoLeituraRepository(request.session), notificacao_id
            )
            return json_response(
                success=True,
                data={'id': notificacao_id, 'lida': True, 'alterado': alterado}
            )
        except Exception as e:
            return self.handle_exception(e)


class NotificacoesLidasAPIView(BaseAPIView):
    """POST /api/notificacoes/lidas"""
    
    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            marcadas = self.get_service('marcar_todas_como_lidas_service').execute(
                SessionEstadoLeituraRepository(request.session)
            )
            return json_response(success=True, data={'marcadas': marcadas})
        except Exception as e:
            return self.handle_exception(e)

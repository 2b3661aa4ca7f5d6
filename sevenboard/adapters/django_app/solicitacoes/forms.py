"""
Django Forms para validação da abertura de solicitações.

Forms são DRIVING ADAPTERS que validam dados antes de
passar para os Use Cases.

Os nomes dos campos seguem o formulário multipart do quadro
(dataEntrega, tipoSolicitacao, ...).
"""

import json
import logging
from typing import List, Optional

from django import forms

from sevenboard.core.shared.exceptions import ValidationError as DomainValidationError
from sevenboard.core.solicitacoes.dtos import ArquivoInputDTO, CriarSolicitacaoInputDTO

logger = logging.getLogger(__name__)


def parse_veiculacao(valor: Optional[str]) -> List[str]:
    """
    Interpreta o campo veiculacao.
    
    Aceita um array JSON ('["Digital","Impresso"]') ou um valor
    solto ("Digital"). JSON malformado resulta em lista vazia.
    """
    if valor is None:
        return []
    if isinstance(valor, (list, tuple)):
        return [str(v) for v in valor if v]
    
    texto = str(valor).strip()
    if not texto:
        return []
    if not texto.startswith("["):
        return [texto]
    
    try:
        itens = json.loads(texto)
    except json.JSONDecodeError:
        logger.warning(f"Veiculação malformada ignorada: {texto!r}")
        return []
    if not isinstance(itens, list):
        return []
    return [str(item) for item in itens if item]


class SolicitacaoCreateForm(forms.Form):
    """
    Form para abertura de solicitação.
    
    Valida estrutura básica; regras de negócio ficam na entidade.
    """
    
    departamento = forms.CharField(
        max_length=100,
        error_messages={'required': 'Departamento é obrigatório'},
    )
    email = forms.EmailField(required=False)
    tipoSolicitacao = forms.CharField(max_length=200, required=False)
    descricao = forms.CharField(
        error_messages={'required': 'Descrição é obrigatória'},
    )
    veiculacao = forms.CharField(required=False)
    dataEntrega = forms.DateField(
        input_formats=['%Y-%m-%d'],
        error_messages={
            'required': 'Data de entrega é obrigatória',
            'invalid': 'Data de entrega deve estar no formato AAAA-MM-DD',
        },
    )
    horarioEntrega = forms.TimeField(
        required=False,
        input_formats=['%H:%M', '%H:%M:%S'],
        error_messages={'invalid': 'Horário de entrega deve estar no formato HH:MM'},
    )
    observacoes = forms.CharField(required=False)
    arquivo = forms.FileField(required=False)
    
    def clean_departamento(self):
        return self.cleaned_data['departamento'].strip()
    
    def clean_descricao(self):
        return self.cleaned_data['descricao'].strip()
    
    def clean_veiculacao(self):
        return parse_veiculacao(self.cleaned_data.get('veiculacao'))
    
    def raise_first_error(self) -> None:
        """Converte o primeiro erro do form em ValidationError de domínio."""
        for campo, erros in self.errors.items():
            raise DomainValidationError(str(erros[0]), field=campo)
    
    def to_input_dto(self) -> CriarSolicitacaoInputDTO:
        """
        Raises:
            ValidationError: Se o form for inválido
        """
        if not self.is_valid():
            self.raise_first_error()
        
        dados = self.cleaned_data
        arquivo = dados.get('arquivo')
        horario = dados.get('horarioEntrega')
        
        return CriarSolicitacaoInputDTO(
            departamento=dados['departamento'],
            descricao=dados['descricao'],
            data_entrega=dados['dataEntrega'].isoformat(),
            tipo_solicitacao=dados.get('tipoSolicitacao') or '',
            email=dados.get('email') or None,
            veiculacao=tuple(dados.get('veiculacao') or ()),
            horario_entrega=horario.strftime('%H:%M:%S') if horario else None,
            observacoes=dados.get('observacoes') or '',
            arquivo=ArquivoInputDTO(nome=arquivo.name, conteudo=arquivo) if arquivo else None,
        )

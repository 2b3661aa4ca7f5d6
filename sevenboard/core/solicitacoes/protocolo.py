"""
Gerador de Código de Protocolo.

O protocolo é o identificador legível impresso no bilhete da
solicitação. É calculado uma única vez, na abertura:

    7BD-<iniciais da veiculação>-<departamento>-<DDMMYYYY>

Example:
    gerar_protocolo(["Digital", "Impresso"], "Marketing", "2023-12-25")
    # "7BD-DI-MAR-25122023"

Não há garantia de unicidade: entradas iguais geram o mesmo código.
"""

from datetime import date, datetime
from typing import Iterable, Optional, Union
import re

PREFIXO = "7BD"
SEM_VEICULACAO = "X"
SEM_DEPARTAMENTO = "XXX"

_DATA_ISO = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_NAO_DIGITO = re.compile(r"\D")


def _segmento_veiculacao(veiculacao: Iterable[str]) -> str:
    iniciais = "".join(tag[0].upper() for tag in veiculacao if tag)
    return iniciais or SEM_VEICULACAO


def _segmento_departamento(departamento: Optional[str]) -> str:
    if not departamento:
        return SEM_DEPARTAMENTO
    return departamento[:3].upper()


def _segmento_data(
    data_entrega: Union[str, date, None],
    hoje: Optional[date] = None,
) -> str:
    if isinstance(data_entrega, date):
        return data_entrega.strftime("%d%m%Y")
    
    if not data_entrega:
        hoje = hoje or date.today()
        return hoje.strftime("%d%m%Y")
    
    if _DATA_ISO.match(data_entrega):
        try:
            return datetime.strptime(data_entrega, "%Y-%m-%d").strftime("%d%m%Y")
        except ValueError:
            # Formato certo, data impossível (ex: 2023-02-30)
            pass
    
    return _NAO_DIGITO.sub("", data_entrega)


def gerar_protocolo(
    veiculacao: Iterable[str],
    departamento: Optional[str],
    data_entrega: Union[str, date, None],
    hoje: Optional[date] = None,
) -> str:
    """
    Gera o código de protocolo de uma solicitação.
    
    Função pura: mesmas entradas produzem sempre o mesmo código.
    
    Args:
        veiculacao: Canais de veiculação, na ordem informada
        departamento: Departamento solicitante
        data_entrega: Data de entrega (YYYY-MM-DD ou date)
        hoje: Data usada quando não há data de entrega (default: hoje)
        
    Returns:
        Código no formato 7BD-<canais>-<dep>-<data>
    """
    return "-".join([
        PREFIXO,
        _segmento_veiculacao(veiculacao or []),
        _segmento_departamento(departamento),
        _segmento_data(data_entrega, hoje),
    ])

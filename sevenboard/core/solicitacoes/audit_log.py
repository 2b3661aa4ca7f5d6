"""
Registro de Eventos nas Observações.

As observações de uma solicitação guardam, além das notas livres do
solicitante, um log cronológico de eventos. Cada evento é uma linha:

    \n[25/12/2023, 14:30:00] Solicitação reaberta.

Responsabilidades:
- Anexar eventos sem jamais alterar o texto existente
- Decodificar o log em registros estruturados (lazy e reiniciável)
- Interpretar timestamps em mais de um formato
- Classificar mensagens em categorias da linha do tempo

Linhas que não começam com "[" são notas livres: preservadas no
texto, mas fora da sequência de eventos.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterator, Optional
import re

FORMATO_TIMESTAMP = "%d/%m/%Y, %H:%M:%S"

_LINHA_EVENTO = re.compile(r"^\[([^\]]+)\]\s*(.*)$")
_STATUS_ALTERADO = re.compile(
    r"(?:status alterado|status changed)\s*:\s*(.+?)\s*(?:→|->)\s*(.+)$",
    re.IGNORECASE,
)
_DATA_POR_EXTENSO = re.compile(
    r"^(\d{1,2})\s+de\s+([a-zç.]+)\s+de\s+(\d{4})"
    r"(?:[,\s]+(?:às\s+)?(\d{1,2}):(\d{2})(?::(\d{2}))?)?$",
    re.IGNORECASE,
)

_FORMATOS_NUMERICOS = (
    "%d/%m/%Y, %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y, %H:%M",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y",
)

MESES = {
    "janeiro": 1, "jan": 1,
    "fevereiro": 2, "fev": 2,
    "março": 3, "marco": 3, "mar": 3,
    "abril": 4, "abr": 4,
    "maio": 5, "mai": 5,
    "junho": 6, "jun": 6,
    "julho": 7, "jul": 7,
    "agosto": 8, "ago": 8,
    "setembro": 9, "set": 9,
    "outubro": 10, "out": 10,
    "novembro": 11, "nov": 11,
    "dezembro": 12, "dez": 12,
}


class CategoriaTimeline(Enum):
    """Categorias canônicas exibidas na linha do tempo."""
    
    CRIADA = "criada"
    EM_PRODUCAO = "em-producao"
    CONCLUIDA = "concluida"
    ARQUIVADA = "arquivada"
    REABERTA = "reaberta"


@dataclass(frozen=True)
class RegistroLog:
    """
    Evento decodificado das observações.
    
    Attributes:
        timestamp_bruto: Conteúdo original entre colchetes
        mensagem: Texto após o timestamp
        quando: Timestamp interpretado (None se nenhum formato casou)
    """
    
    timestamp_bruto: str
    mensagem: str
    quando: Optional[datetime] = None
    
    @property
    def exibicao(self) -> str:
        """Timestamp para exibição; cai no texto bruto se não interpretado."""
        if self.quando is None:
            return self.timestamp_bruto
        return formatar_timestamp(self.quando)
    
    @property
    def categoria(self) -> Optional["CategoriaTimeline"]:
        return classificar(self.mensagem)


def formatar_timestamp(quando: datetime) -> str:
    """Formata no padrão pt-BR usado pelo quadro (25/12/2023, 14:30:00)."""
    return quando.strftime(FORMATO_TIMESTAMP)


def anexar_registro(texto: Optional[str], mensagem: str, quando: datetime) -> str:
    """
    Anexa um evento ao final do texto.
    
    O conteúdo existente é mantido intacto; o novo evento é
    sempre concatenado como última linha.
    
    Args:
        texto: Observações atuais (pode ser vazio/None)
        mensagem: Descrição do evento
        quando: Momento do evento
        
    Returns:
        Novo texto das observações
    """
    return f"{texto or ''}\n[{formatar_timestamp(quando)}] {mensagem}"


def parse_timestamp(bruto: str) -> Optional[datetime]:
    """
    Interpreta o timestamp de uma linha de log.
    
    Formatos aceitos:
        25/12/2023, 14:30:00
        25/12/2023 14:30
        25/12/2023
        25 de dezembro de 2023 14:30
        25 de dez. de 2023, 14:30:00
    
    Returns:
        datetime correspondente, ou None se nenhum formato casar
    """
    valor = bruto.strip()
    
    for formato in _FORMATOS_NUMERICOS:
        try:
            return datetime.strptime(valor, formato)
        except ValueError:
            continue
    
    match = _DATA_POR_EXTENSO.match(valor)
    if not match:
        return None
    
    dia, nome_mes, ano, hora, minuto, segundo = match.groups()
    mes = MESES.get(nome_mes.lower().rstrip("."))
    if mes is None:
        return None
    
    try:
        return datetime(
            int(ano), mes, int(dia),
            int(hora or 0), int(minuto or 0), int(segundo or 0),
        )
    except ValueError:
        return None


class LogDecodificado:
    """
    Sequência de eventos contida em um texto.
    
    A varredura acontece a cada iteração, então a mesma
    instância pode ser percorrida quantas vezes for preciso.
    
    Example:
        log = decodificar(solicitacao.observacoes)
        for registro in log:
            print(registro.exibicao, registro.mensagem)
    """
    
    def __init__(self, texto: Optional[str]):
        self._texto = texto or ""
    
    def __iter__(self) -> Iterator[RegistroLog]:
        for linha in self._texto.splitlines():
            linha = linha.strip()
            if not linha.startswith("["):
                continue
            
            match = _LINHA_EVENTO.match(linha)
            if not match:
                continue
            
            bruto, mensagem = match.groups()
            yield RegistroLog(
                timestamp_bruto=bruto,
                mensagem=mensagem.strip(),
                quando=parse_timestamp(bruto),
            )
    
    def __repr__(self) -> str:
        return f"LogDecodificado({len(self._texto)} caracteres)"


def decodificar(texto: Optional[str]) -> LogDecodificado:
    """Decodifica os eventos registrados em um texto de observações."""
    return LogDecodificado(texto)


def notas_livres(texto: Optional[str]) -> str:
    """Retorna apenas as notas do solicitante, sem as linhas de evento."""
    linhas = [
        linha for linha in (texto or "").splitlines()
        if not _LINHA_EVENTO.match(linha.strip())
    ]
    return "\n".join(linhas).strip()


def classificar(mensagem: str) -> Optional[CategoriaTimeline]:
    """
    Mapeia a mensagem de um evento para uma categoria da linha do tempo.
    
    Reconhece "Status alterado: <de> → <para>" (classificado pelo
    destino) e frases soltas como "reaberta", "em produção",
    "concluída", "arquivada" (e equivalentes em inglês).
    
    Returns:
        Categoria, ou None se a mensagem não for reconhecida
    """
    match = _STATUS_ALTERADO.search(mensagem)
    if match:
        return _categoria_por_status(match.group(2))
    
    texto = mensagem.lower()
    for frases, categoria in _FRASES:
        if any(frase in texto for frase in frases):
            return categoria
    return None


_FRASES = (
    (("reaberta", "reaberto", "reopened"), CategoriaTimeline.REABERTA),
    (("em produção", "em producao", "in production"), CategoriaTimeline.EM_PRODUCAO),
    (("concluída", "concluida", "completed"), CategoriaTimeline.CONCLUIDA),
    (("arquivada", "arquivado", "archived"), CategoriaTimeline.ARQUIVADA),
    (("criada", "created"), CategoriaTimeline.CRIADA),
)


def _categoria_por_status(destino: str) -> Optional[CategoriaTimeline]:
    destino = destino.strip().lower()
    if destino in ("done", "concluído", "concluido", "concluída"):
        return CategoriaTimeline.CONCLUIDA
    if destino in ("archived", "arquivado", "arquivada"):
        return CategoriaTimeline.ARQUIVADA
    if destino in ("todo", "pendente"):
        return CategoriaTimeline.REABERTA
    if destino:
        return CategoriaTimeline.EM_PRODUCAO
    return None
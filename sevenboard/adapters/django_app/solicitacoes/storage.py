"""
Armazenamento de anexos.

Implementa o port ArquivoStorage do Core sobre o default_storage
do Django (MEDIA_ROOT, servido em MEDIA_URL).

Nome gerado: <epoch em ms>-<aleatório até 1e9><extensão original>
"""

import logging
import os
import random
import time
from typing import BinaryIO

from django.core.files import File
from django.core.files.storage import Storage, default_storage

logger = logging.getLogger(__name__)


def gerar_nome_arquivo(nome_original: str) -> str:
    """
    Example:
        gerar_nome_arquivo("briefing.PDF")  # "1703512200000-482913004.PDF"
    """
    _, extensao = os.path.splitext(nome_original or "")
    return f"{int(time.time() * 1000)}-{random.randint(0, 10 ** 9 - 1)}{extensao}"


class DjangoArquivoStorage:
    """ArquivoStorage sobre um Storage do Django."""
    
    def __init__(self, storage: Storage = None):
        self.storage = storage or default_storage
    
    def salvar(self, nome_original: str, conteudo: BinaryIO) -> str:
        nome = self.storage.save(gerar_nome_arquivo(nome_original), File(conteudo))
        url = self.storage.url(nome)
        logger.info(f"Anexo '{nome_original}' armazenado em {url}")
        return url

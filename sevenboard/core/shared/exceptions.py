"""
Exceções de Domínio do SevenBoard.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Hierarquia:
    DomainException (base)
    ├── ValidationError (validação de entrada)
    ├── EntityNotFoundError (solicitação não existe)
    ├── BusinessRuleViolationError (regra de negócio violada)
    │   └── InvalidTransitionError (status desconhecido)
    ├── PersistenceError (falha no armazenamento)
    └── NotificationDispatchError (falha no envio de email)
"""


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.
    
    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.
    
    Example:
        try:
            solicitacao.alterar_status(SolicitacaoStatus.DONE)
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """
    
    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)
    
    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"
    
    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.
    
    Lançada quando dados fornecidos na abertura da solicitação
    não atendem aos requisitos mínimos.
    
    Example:
        if not descricao:
            raise ValidationError("Descrição é obrigatória", field="descricao")
    """
    
    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)
    
    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.
    
    Lançada quando uma busca por ID não retorna resultado.
    
    Example:
        solicitacao = repo.get_by_id(solicitacao_id)
        if not solicitacao:
            raise EntityNotFoundError(f"Solicitação {solicitacao_id} não encontrada")
    """
    
    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")
    
    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


# Alias curto
NotFoundError = EntityNotFoundError


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.
    
    Lançada quando uma operação viola uma regra de negócio
    estabelecida no domínio.
    """
    
    def __init__(self, message: str, rule: str = None, code: str = "BUSINESS_RULE_VIOLATION"):
        self.rule = rule
        super().__init__(message, code)
    
    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class InvalidTransitionError(BusinessRuleViolationError):
    """
    Status solicitado não pertence ao fluxo do quadro.
    
    Example:
        SolicitacaoStatus.from_string("inexistente")
        # InvalidTransitionError: Status inválido: inexistente
    """
    
    def __init__(self, message: str, status: str = None):
        self.status = status
        super().__init__(message, rule="status_desconhecido", code="INVALID_TRANSITION")


class PersistenceError(DomainException):
    """
    Falha ao ler ou gravar no armazenamento de solicitações.
    
    A mensagem exposta ao usuário é genérica; o detalhe técnico
    fica no log.
    """
    
    def __init__(self, message: str = "Falha ao acessar o armazenamento"):
        super().__init__(message, "PERSISTENCE_ERROR")


class NotificationDispatchError(DomainException):
    """
    Falha no envio de uma notificação por email.
    
    Nunca interrompe a operação que originou o envio: é apenas
    registrada em log (e re-tentada quando o envio roda no Celery).
    """
    
    def __init__(self, message: str, destinatario: str = None):
        self.destinatario = destinatario
        super().__init__(message, "NOTIFICATION_DISPATCH_ERROR")

"""
Exceções de Domínio do Utility Ticket Tracker.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Hierarquia:
    DomainException (base)
    ├── ValidationError (validação de entrada)
    ├── EntityNotFoundError (entidade não existe)
    ├── ForbiddenError (papel/propriedade não permite a operação)
    ├── InvalidAssigneeError (responsável inexistente ou inativo)
    ├── ConflictError (número de ticket duplicado)
    ├── ConcurrencyError (versão alterada por outro processo)
    ├── StoreError (falha da camada de persistência)
    └── BusinessRuleViolationError (regra de negócio violada)
"""


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            ticket.renovar(15)
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

    Lançada quando dados fornecidos não atendem aos requisitos
    mínimos para processamento (campo obrigatório ausente, enum
    inválido, data de expiração no passado na criação).

    Example:
        if not organizacao:
            raise ValidationError("Organização é obrigatória", field="organizacao")
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

    Lançada quando uma busca por ID não retorna resultado
    (ticket, alerta ou usuário).

    Example:
        ticket = repo.get_by_id(ticket_id)
        if not ticket:
            raise EntityNotFoundError(f"Ticket {ticket_id} não encontrado")
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


class ForbiddenError(DomainException):
    """
    Operação não permitida para o usuário atual.

    Lançada quando a verificação de papel ou de propriedade falha,
    por exemplo um contratado agindo sobre ticket de outro contratado.
    """

    def __init__(self, message: str):
        super().__init__(message, "FORBIDDEN")


class InvalidAssigneeError(DomainException):
    """
    Responsável inválido para o ticket.

    Lançada quando um administrador tenta atribuir ticket a um
    usuário inexistente ou inativo.

    Attributes:
        assignee_id: ID solicitado como responsável
    """

    def __init__(self, message: str, assignee_id: str = None):
        self.assignee_id = assignee_id
        super().__init__(message, "INVALID_ASSIGNEE")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.assignee_id:
            result["assignee_id"] = self.assignee_id
        return result


class ConflictError(DomainException):
    """
    Conflito de unicidade no repositório.

    Lançada quando o número do ticket já existe. Na geração automática
    o conflito vem da corrida entre duas criações simultâneas.
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message, "CONFLICT")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.

    Lançada quando uma operação viola uma regra de negócio
    estabelecida no domínio.

    Example:
        if ticket.status == TicketStatus.FECHADO:
            raise BusinessRuleViolationError(
                "Não é possível renovar ticket fechado"
            )
    """

    def __init__(self, message: str, rule: str = None):
        self.rule = rule
        super().__init__(message, "BUSINESS_RULE_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class ConcurrencyError(DomainException):
    """
    Erro de concorrência/conflito de versão.

    Lançada quando uma operação falha devido a modificação
    concorrente da entidade.

    Example:
        if entity.versao != versao_armazenada:
            raise ConcurrencyError("Entidade foi modificada por outro processo")
    """

    def __init__(self, message: str):
        super().__init__(message, "CONCURRENCY_ERROR")


class StoreError(DomainException):
    """
    Falha da camada de persistência.

    Comandos interativos propagam imediatamente. A verificação de
    expiração tenta novamente uma vez por ticket antes de desistir.
    """

    def __init__(self, message: str):
        super().__init__(message, "STORE_ERROR")

"""
Políticas de autorização baseadas em papel.

Regras que não são mera validação de dados:
- Contratado sempre é o responsável pelos tickets que cria
- Administrador pode atribuir a qualquer usuário ativo
- Contratado só age sobre tickets atribuídos a ele

Mantidas como funções puras para serem testadas sem HTTP
e sem persistência.
"""

import logging
from typing import Optional

from src.core.shared.exceptions import ForbiddenError, InvalidAssigneeError

from .entities import UserRole, UsuarioAtual
from .ports import UserDirectory

logger = logging.getLogger(__name__)


def resolver_responsavel(
    papel: UserRole,
    responsavel_solicitado: Optional[str],
    usuario_atual_id: str,
    diretorio: UserDirectory,
) -> str:
    """
    Decide o responsável (assignedTo) de um ticket.

    Regras:
    - Contratado: sempre ele mesmo, ignorando o valor solicitado
    - Admin com responsável solicitado: usuário deve existir e estar ativo
    - Nenhum responsável resolvido: o próprio usuário atual

    Args:
        papel: Papel do usuário que executa a operação
        responsavel_solicitado: ID enviado pelo chamador (pode ser None)
        usuario_atual_id: ID do usuário que executa a operação
        diretorio: Diretório de usuários para validação

    Returns:
        ID do usuário responsável

    Raises:
        InvalidAssigneeError: Se admin indicar usuário inexistente ou inativo
    """
    if papel == UserRole.CONTRATADO:
        return usuario_atual_id

    if responsavel_solicitado:
        validar_responsavel(responsavel_solicitado, diretorio)
        return responsavel_solicitado

    return usuario_atual_id


def validar_responsavel(responsavel_id: str, diretorio: UserDirectory) -> None:
    """
    Garante que o usuário indicado existe e está ativo.

    Raises:
        InvalidAssigneeError: Se inexistente ou inativo
    """
    usuario = diretorio.get_by_id(responsavel_id)

    if usuario is None:
        logger.warning(f"Atribuição rejeitada - usuário não encontrado: {responsavel_id}")
        raise InvalidAssigneeError(
            "Assigned user not found",
            assignee_id=responsavel_id,
        )

    if not usuario.ativo:
        logger.warning(f"Atribuição rejeitada - usuário inativo: {usuario.email}")
        raise InvalidAssigneeError(
            "Cannot assign ticket to inactive user",
            assignee_id=responsavel_id,
        )


def verificar_propriedade(
    usuario: UsuarioAtual,
    atribuido_a_id: str,
    acao: str = "access",
) -> None:
    """
    Contratados só podem agir sobre tickets atribuídos a eles.

    Args:
        usuario: Usuário que executa a operação
        atribuido_a_id: Responsável atual do ticket
        acao: Verbo usado na mensagem de erro (access, update, renew, close)

    Raises:
        ForbiddenError: Se contratado e ticket de outro usuário
    """
    if usuario.e_contratado and atribuido_a_id != usuario.id:
        logger.warning(f"Acesso negado a {usuario} - ação '{acao}' em ticket de outro responsável")
        raise ForbiddenError(f"You can only {acao} tickets assigned to you")


def exigir_admin(usuario: UsuarioAtual, acao: str) -> None:
    """
    Operações administrativas (excluir ticket/alerta, disparo manual).

    Raises:
        ForbiddenError: Se usuário não é admin
    """
    if not usuario.e_admin:
        raise ForbiddenError(f"Only administrators can {acao}")


def verificar_acesso_ticket(usuario: UsuarioAtual, ticket, acao: str = "access") -> None:
    """
    Atalho de verificar_propriedade para uma entidade de ticket.

    Example:
        >>> verificar_acesso_ticket(usuario, ticket, "renew")
    """
    verificar_propriedade(usuario, ticket.atribuido_a_id, acao)

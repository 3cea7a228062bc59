"""
Usuários vistos pelo domínio.

Contexto do usuário autenticado, papéis e as políticas de
atribuição/propriedade de tickets.
"""

from .entities import UserRole, UsuarioAtual, UsuarioInfo
from .ports import UserDirectory, InMemoryUserDirectory
from .policies import (
    resolver_responsavel,
    validar_responsavel,
    verificar_propriedade,
    verificar_acesso_ticket,
    exigir_admin,
)

__all__ = [
    "UserRole",
    "UsuarioAtual",
    "UsuarioInfo",
    "UserDirectory",
    "InMemoryUserDirectory",
    "resolver_responsavel",
    "validar_responsavel",
    "verificar_propriedade",
    "verificar_acesso_ticket",
    "exigir_admin",
]

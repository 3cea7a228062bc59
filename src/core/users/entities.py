"""
Entidades de Usuário vistas pelo domínio de tickets.

O diretório de usuários (cadastro, senha, JWT) é externo. O Core só
precisa do contexto do usuário autenticado e de um registro mínimo
para validar atribuições.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class UserRole(Enum):
    """Papéis reconhecidos pelo domínio."""

    ADMIN = "Admin"
    CONTRATADO = "Contractor"

    @classmethod
    def from_string(cls, value: str) -> "UserRole":
        """
        Converte string para enum (nome ou valor).

        Raises:
            ValueError: Se valor inválido
        """
        try:
            return cls[value.upper()]
        except KeyError:
            pass

        for role in cls:
            if role.value.lower() == value.lower():
                return role

        raise ValueError(f"Papel inválido: {value}")


@dataclass(frozen=True)
class UsuarioAtual:
    """
    Contexto do usuário autenticado (fornecido pela camada de auth).

    Attributes:
        id: Identificador do usuário
        role: Papel (Admin ou Contractor)
        email: Email para logging (opcional)
    """

    id: str
    role: UserRole
    email: Optional[str] = None

    @property
    def e_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def e_contratado(self) -> bool:
        return self.role == UserRole.CONTRATADO

    def __str__(self) -> str:
        return self.email or self.id


@dataclass(frozen=True)
class UsuarioInfo:
    """Registro do diretório de usuários usado na validação de responsável."""

    id: str
    email: str
    role: UserRole
    ativo: bool = True

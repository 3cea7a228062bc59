"""
Ports do diretório de usuários.

O diretório é um colaborador externo: o Core apenas consulta
usuários por ID/email para validar atribuições de tickets.
"""

from typing import Dict, Optional, Protocol, runtime_checkable

from .entities import UsuarioInfo


@runtime_checkable
class UserDirectory(Protocol):
    """
    Interface de consulta ao diretório de usuários.

    Implementações:
    - DjangoUserDirectory (django.contrib.auth)
    - InMemoryUserDirectory (para testes)
    """

    def get_by_id(self, user_id: str) -> Optional[UsuarioInfo]:
        """Busca usuário por ID. Retorna None se não existir."""
        ...

    def get_by_email(self, email: str) -> Optional[UsuarioInfo]:
        """Busca usuário por email (case-insensitive)."""
        ...


class InMemoryUserDirectory:
    """
    Diretório de usuários em memória.

    Útil para testes unitários e prototipagem.
    """

    def __init__(self):
        self._usuarios: Dict[str, UsuarioInfo] = {}

    def add(self, usuario: UsuarioInfo) -> None:
        self._usuarios[usuario.id] = usuario

    def get_by_id(self, user_id: str) -> Optional[UsuarioInfo]:
        return self._usuarios.get(user_id)

    def get_by_email(self, email: str) -> Optional[UsuarioInfo]:
        email_normalizado = email.strip().lower()
        for usuario in self._usuarios.values():
            if usuario.email.lower() == email_normalizado:
                return usuario
        return None

    def clear(self) -> None:
        self._usuarios.clear()

"""
Repository Base - Implementação base de repositórios com Django ORM.

Fornece funcionalidades comuns para os repositórios:
- Busca por ID, remoção, existência e contagem
- Conversão de erros do banco para exceções de domínio

Princípios:
- Repositórios são stateless
- Não contêm lógica de negócio
- Apenas persistência e queries
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Generic, List, Optional, Type, TypeVar
import logging

from django.db import DatabaseError, IntegrityError, models, transaction
from django.db.models import QuerySet

from src.core.shared.exceptions import ConflictError, StoreError

logger = logging.getLogger(__name__)

# Type variables
T = TypeVar("T")  # Entity type
M = TypeVar("M", bound=models.Model)  # Model type


class BaseRepository(ABC, Generic[T, M]):
    """
    Classe base abstrata para repositórios Django.

    Type Parameters:
        T: Tipo da entidade de domínio
        M: Tipo do Model Django

    Example:
        class DjangoAlertRepository(BaseRepository[AlertEntity, AlertModel]):
            model_class = AlertModel

            def to_entity(self, model):
                return AlertMapper.to_entity(model)

            def to_model(self, entity):
                return AlertMapper.to_model(entity)
    """

    # Classe do model Django (definir na subclasse)
    model_class: Type[M]

    # Campo usado na mensagem de ConflictError
    conflict_field: Optional[str] = None

    @abstractmethod
    def to_entity(self, model: M) -> T:
        """Converte Model Django para Entity de domínio."""
        raise NotImplementedError

    @abstractmethod
    def to_model(self, entity: T) -> M:
        """Converte Entity de domínio para Model Django (não salvo)."""
        raise NotImplementedError

    @contextmanager
    def _erros_de_armazenamento(self, operacao: str):
        """
        Traduz erros do banco para exceções de domínio.

        - IntegrityError → ConflictError
        - DatabaseError → StoreError
        """
        try:
            yield
        except IntegrityError as e:
            logger.warning(f"{self.model_class.__name__} {operacao}: conflito de integridade: {e}")
            raise ConflictError(
                f"{self.model_class.__name__} {operacao} violates a uniqueness constraint",
                field=self.conflict_field,
            ) from e
        except DatabaseError as e:
            logger.error(f"{self.model_class.__name__} {operacao} falhou: {e}")
            raise StoreError(f"Storage failure during {operacao}") from e

    def _get_base_queryset(self) -> QuerySet[M]:
        return self.model_class.objects.all()

    def _inserir(self, entity: T) -> None:
        """
        Insere nova linha em um savepoint próprio, para que um conflito
        não invalide a transação externa.
        """
        model = self.to_model(entity)
        with self._erros_de_armazenamento("insert"):
            with transaction.atomic():
                model.save(force_insert=True)

        logger.debug(f"{self.model_class.__name__} inserted: {model.pk}")

    def get_by_id(self, entity_id: str) -> Optional[T]:
        """
        Busca entidade por ID.

        Returns:
            Entidade encontrada ou None
        """
        with self._erros_de_armazenamento("get"):
            try:
                model = self._get_base_queryset().get(id=entity_id)
            except self.model_class.DoesNotExist:
                return None
        return self.to_entity(model)

    def delete(self, entity_id: str) -> bool:
        """
        Remove entidade.

        Returns:
            True se removido, False se não existia
        """
        with self._erros_de_armazenamento("delete"):
            deleted_count, _ = self.model_class.objects.filter(id=entity_id).delete()

        if deleted_count > 0:
            logger.info(f"{self.model_class.__name__} deleted: {entity_id}")
        return deleted_count > 0

    def exists(self, entity_id: str) -> bool:
        return self.model_class.objects.filter(id=entity_id).exists()

    def count(self) -> int:
        return self.model_class.objects.count()

    def _to_entity_list(self, models: QuerySet[M]) -> List[T]:
        with self._erros_de_armazenamento("list"):
            return [self.to_entity(m) for m in models]

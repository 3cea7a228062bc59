"""
Core Domain Layer - O Hexágono.

Este pacote contém a lógica de negócio pura, sem dependências de frameworks:
tickets de escavação com prazo de expiração, alertas derivados do ciclo
de vida e a verificação periódica de expiração.

Características:
- Zero dependências externas (Django, Celery, etc.)
- 100% testável sem banco de dados
- Agnóstico a infraestrutura
"""

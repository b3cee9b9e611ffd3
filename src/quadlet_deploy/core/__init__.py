# src/quadlet_deploy/core/__init__.py
"""
Core do quadlet-deploy.

Componentes principais:
    - config       → carregamento, merge em camadas, hashing e settings
    - pipeline     → DeployContext e tipos canônicos (RenderedFile, status)
    - engine       → planner de serviços e orquestrador de deploy
    - traceability → manifest de integridade dos artefatos
    - errors / exceptions → payload de erro e exceções tipadas

Princípios fundamentais:
    - Nenhuma decisão silenciosa: warnings e falhas ficam no event log
    - Estado de um deploy vive no seu DeployContext, nunca em globais
"""

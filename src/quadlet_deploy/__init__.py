# src/quadlet_deploy/__init__.py
"""
quadlet-deploy — compilador e orquestrador de deployments Podman Quadlet.

Um usuário declara um deployment (features, providers, modelos, secrets).
Este pacote compila a declaração em um conjunto versionado de units
Quadlet + manifest de integridade, publica tudo em blob storage e
acompanha o deployment por um ciclo de status explícito.

Arquitetura em alto nível:
    - catalog           → registry imutável de defaults (imagens, providers, modelos)
    - release           → snapshots de release, configuração salva e settings
    - resolve           → camadas nomeadas → UnifiedDeploymentConfig
    - graph             → ServiceSet (modo declarativo ou inferido)
    - units             → builder estruturado + renderer de units
    - core.traceability → manifest com checksums
    - storage           → artifact store local e S3/R2
    - persistence       → máquina de estados e colaboradores
    - core.engine       → planner e orquestrador

Limites explícitos:
    - Não inicia containers nem provisiona redes
    - Não valida material criptográfico
"""

__version__ = "0.2.0"

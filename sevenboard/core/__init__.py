"""
Core Domain Layer - O Hexágono.

Lógica de negócio pura do SevenBoard, sem dependências de frameworks:
- solicitacoes: ciclo de vida das solicitações (protocolo, status, histórico)
- notificacoes: alertas derivados do estado das solicitações
"""

"""
Django App de Solicitações.

Adapters de persistência, API JSON, anexos, emails e estado de
leitura das notificações.
"""

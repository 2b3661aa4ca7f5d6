"""
Adapters de notificação (email ao solicitante).
"""

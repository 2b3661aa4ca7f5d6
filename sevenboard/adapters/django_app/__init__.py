"""
Adapters Django: persistência, API JSON, eventos e notificações.
"""

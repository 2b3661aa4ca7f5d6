"""
Publicação e tratamento de Domain Events (síncrono ou via Celery).
"""

"""
Componentes compartilhados dos adapters Django (Unit of Work, relógio).
"""

"""
Adapters Layer - implementações dos Ports do Core.
"""

"""Connectors por canal: adapters de borda para APIs externas.

Estrutura:
- discord/: Interações (Ed25519) e webhook de follow-up
"""

__all__: list[str] = []

"""API: camada de borda do webhook de interações.

Responsabilidades:
- Receber interações do Discord (ping e slash commands)
- Verificar assinatura Ed25519 antes de qualquer parsing
- Entregar follow-ups pelo webhook da interação

Subpastas:
- connectors/: adapters HTTP do Discord (assinatura, parse, follow-up)
- routes/: endpoints HTTP (interactions, health)

NÃO PODE conter: FSM, resolução de comandos, chamadas à Directory API.
"""

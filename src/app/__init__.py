"""App: dispatch de comandos, serviços e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: interação, comandos resolvidos, credenciais, respostas
- services/: dispatcher, executor de comandos, formatação de erros
- infra/: HTTP, OAuth de service account e Directory API
- protocols/: contratos/interfaces
- observability/: correlation_id e métricas via logs

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""

"""Exceções de domínio partilhadas pelos serviços.

Validação continua a usar ``ValueError``; estas classes cobrem os casos em que
as rotas precisam de um status HTTP diferente de 400.
"""


class RegistoNaoEncontrado(LookupError):
    """Linha inexistente (404)."""


class RegistoDuplicado(ValueError):
    """Conflito de ORC/FO/palete já existente (409)."""

    def __init__(self, mensagem: str, existente=None):
        super().__init__(mensagem)
        self.existente = existente

"""Base text-completion interface used by the conversation core, with an Echo implementation."""


class TextCompletion:
    """Abstract capability: complete a text prompt with a generative model."""

    def complete(self, prompt: str) -> str:
        """
        Gera o texto de continuação para um prompt único.

        Args:
            prompt (str): Prompt completo já montado (instrução de sistema, histórico
                e a última mensagem do usuário).

        Returns:
            str: Texto gerado pelo modelo, sem pós-processamento.

        Raises:
            CompletionUnavailable: a capacidade não está configurada (sem credencial).
            CompletionError: a chamada foi feita e falhou (rede, rate limit, modelo).
        """
        raise NotImplementedError

    def is_configured(self) -> bool:
        """Return whether a credential/configuration is available for calls."""
        return True


class EchoCompletion(TextCompletion):
    """Completion de teste (não chama APIs)."""

    def complete(self, prompt: str) -> str:
        """Echo the last "User:" line of the prompt to simulate a model response."""
        last_user = next(
            (
                line[len("User:"):].strip()
                for line in reversed(prompt.splitlines())
                if line.startswith("User:")
            ),
            "",
        )
        return f"[EchoCompletion] You said: {last_user}"

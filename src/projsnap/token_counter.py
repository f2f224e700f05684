"""Line, character and optional token counting for snapshot summaries.

Token counting relies on the optional ``tiktoken`` package, installed with the
``token_counting`` extra. Line and character counts are always available.
"""

import importlib.util
from collections import namedtuple
from typing import Any, Optional

from projsnap.exceptions import TokenizationError, TokenizerNotAvailableError

CountResult = namedtuple("CountResult", ["lines", "tokens", "characters"])


class TokenCounter:
    """Accumulates counts over every piece of text it is shown.

    Attributes:
        model (Optional[str]): Model whose tokenizer is used, or None to
            disable token counting.
        tiktoken_available (bool): Whether tiktoken can be imported.
        encoder (Optional[Any]): The tiktoken encoding, when token counting is on.

    Example:
        >>> counter = TokenCounter()
        >>> result = counter.count("Hello\\nworld!")
        >>> result.lines, result.characters
        (1, 12)
        >>> print(counter.get_total_tokens())
        None
    """

    def __init__(self, model: Optional[str] = None) -> None:
        """Initialize the counter.

        Args:
            model: Model name understood by ``tiktoken.encoding_for_model``
                (e.g. "gpt-4"). None disables token counting.

        Raises:
            TokenizerNotAvailableError: If a model is given but tiktoken is not installed.
            ValueError: If tiktoken does not know the model.
        """
        self.model = model
        self.tiktoken_available = importlib.util.find_spec("tiktoken") is not None
        self.encoder: Optional[Any] = None

        if self.model is not None:
            if not self.tiktoken_available:
                raise TokenizerNotAvailableError()
            self.encoder = self._get_encoder(self.model)

        self._total_tokens: Optional[int] = 0 if self.encoder is not None else None
        self._total_lines = 0
        self._total_characters = 0

    @staticmethod
    def _get_encoder(model: str) -> Any:
        import tiktoken

        try:
            return tiktoken.encoding_for_model(model)
        except KeyError:
            raise ValueError(
                f"Could not load tokenizer for model '{model}'. Consider using a "
                "well-supported model like 'gpt-4' (cl100k_base encoding) for an approximate count."
            )

    def count(self, text: str) -> CountResult:
        """Count lines, characters and, if enabled, tokens in text.

        All counts are added to the running totals and also returned.

        Raises:
            TokenizationError: If token counting is enabled but fails. Line
                and character totals are updated regardless.
        """
        lines = text.count("\n")
        chars = len(text)
        tokens = None

        self._total_lines += lines
        self._total_characters += chars

        if self.encoder is not None:
            try:
                tokens = len(self.encoder.encode(text))
            except Exception as e:
                raise TokenizationError(f"Failed to tokenize text: {str(e)}")
            self._total_tokens = (self._total_tokens or 0) + tokens

        return CountResult(lines=lines, tokens=tokens, characters=chars)

    def get_total_tokens(self) -> Optional[int]:
        """Total tokens so far, or None when token counting is disabled."""
        return self._total_tokens

    def get_total_lines(self) -> int:
        return self._total_lines

    def get_total_characters(self) -> int:
        return self._total_characters

class InvalidRootError(ValueError):
    """
    Exception raised when the scan root does not exist or is not a directory.

    This is one of the few boundary failures that are escalated to the caller.
    Everything that goes wrong below the root (unreadable entries, broken
    symlinks, undecodable files) is absorbed by the scanner instead.

    Attributes:
        root_path (str): The offending root path as given by the caller.

    Example:
        >>> error = InvalidRootError("/no/such/dir")
        >>> str(error)
        "'/no/such/dir' is not a valid directory"
    """

    def __init__(self, root_path: str) -> None:
        """
        Initialize the exception with the rejected root path.

        Args:
            root_path (str): Path that could not be used as a scan root.
        """
        self.root_path = root_path
        super().__init__(f"'{root_path}' is not a valid directory")


class TokenizerNotAvailableError(Exception):
    """
    Exception raised when token counting is requested without the required tokenizer package.

    The `tiktoken` package is an optional dependency that must be explicitly
    installed using the 'token_counting' extra.

    Attributes:
        message (str): Detailed error message including installation instructions.

    Example:
        >>> error = TokenizerNotAvailableError()
        >>> str(error).startswith('Tokenizer (tiktoken) is not installed')
        True
    """

    def __init__(self, message: str = "Tokenizer (tiktoken) is not installed.") -> None:
        self.message = (
            f"{message} To enable token counting, install projsnap with the 'token_counting' "
            "extra: 'pip install projsnap[token_counting]'."
        )
        super().__init__(self.message)


class TokenizationError(Exception):
    """
    Exception raised when token counting fails during execution.

    Example:
        >>> error = TokenizationError("Failed to tokenize: invalid input")
        >>> str(error)
        'Failed to tokenize: invalid input'
    """

    pass

from unittest.mock import MagicMock, patch

import pytest

from projsnap.exceptions import TokenizationError, TokenizerNotAvailableError
from projsnap.token_counter import CountResult, TokenCounter


@pytest.fixture
def mock_tiktoken_available():
    with patch("importlib.util.find_spec", return_value=True):
        yield


@pytest.fixture
def mock_tiktoken_unavailable():
    with patch("importlib.util.find_spec", return_value=None):
        yield


@pytest.fixture
def mock_encoder():
    encoder = MagicMock()
    encoder.encode.side_effect = lambda text: [0] * len(text)  # One token per character
    return encoder


@pytest.fixture
def patched_encoder(mock_tiktoken_available, mock_encoder):
    with patch.object(TokenCounter, "_get_encoder", return_value=mock_encoder):
        yield mock_encoder


def test_token_counter_initialization(patched_encoder):
    counter = TokenCounter(model="gpt-4")
    assert counter.tiktoken_available
    assert counter.encoder is patched_encoder
    assert counter.get_total_tokens() == 0

    counter_no_model = TokenCounter()
    assert counter_no_model.tiktoken_available
    assert counter_no_model.encoder is None
    assert counter_no_model.get_total_tokens() is None


def test_token_counter_initialization_tiktoken_unavailable(mock_tiktoken_unavailable):
    counter = TokenCounter()
    assert not counter.tiktoken_available
    assert counter.encoder is None

    with pytest.raises(TokenizerNotAvailableError):
        TokenCounter(model="gpt-4")


def test_count_with_tokens(patched_encoder):
    counter = TokenCounter(model="gpt-4")
    result = counter.count("Hello, world!")

    assert isinstance(result, CountResult)
    assert result == CountResult(lines=0, tokens=13, characters=13)


def test_count_without_tokens():
    counter = TokenCounter()
    result = counter.count("one\ntwo\nthree\n")
    assert result == CountResult(lines=3, tokens=None, characters=14)


def test_totals_accumulate(patched_encoder):
    counter = TokenCounter(model="gpt-4")
    counter.count("ab\n")
    counter.count("cde\nfg\n")

    assert counter.get_total_lines() == 3
    assert counter.get_total_characters() == 10
    assert counter.get_total_tokens() == 10


def test_tokenization_failure_keeps_line_and_character_totals(patched_encoder):
    counter = TokenCounter(model="gpt-4")
    patched_encoder.encode.side_effect = RuntimeError("encoder exploded")

    with pytest.raises(TokenizationError, match="encoder exploded"):
        counter.count("abc\n")
    assert counter.get_total_lines() == 1
    assert counter.get_total_characters() == 4
    assert counter.get_total_tokens() == 0


def test_unknown_model(mock_tiktoken_available):
    tiktoken = pytest.importorskip("tiktoken")
    with patch.object(tiktoken, "encoding_for_model", side_effect=KeyError("nope")):
        with pytest.raises(ValueError, match="Could not load tokenizer"):
            TokenCounter(model="no-such-model")


def test_empty_text():
    counter = TokenCounter()
    assert counter.count("") == CountResult(lines=0, tokens=None, characters=0)

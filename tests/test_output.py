import pytest

from dreview.cli.common.output import Out, format_score


class _Prompt:
    def __init__(self, answer):
        self.answer = answer

    def ask(self):
        return self.answer


def test_ask_prefixes_message_and_forwards_kwargs():
    calls = []

    def prompt_fn(message, **kwargs):
        calls.append((message, kwargs))
        return _Prompt("picked")

    answer = Out()._ask(prompt_fn, "Select a design review:", pointer="❯")

    assert answer == "picked"
    assert calls == [("[DREVIEW] Select a design review:", {"pointer": "❯"})]


def test_ask_does_not_swallow_prompt_errors():
    calls = []

    def prompt_fn(message, **kwargs):
        calls.append(kwargs)
        raise TypeError("unexpected keyword argument 'pointer'")

    with pytest.raises(TypeError):
        Out()._ask(prompt_fn, "Pick one", pointer="❯")

    assert len(calls) == 1


def test_select_one_without_choices_skips_the_prompt():
    assert Out().select_one("Select a design review:", []) is None


def test_format_score_bands():
    assert format_score(None) == "[meta]N/A[/]"
    assert format_score(4.5) == "[score.high]4.5/5[/score.high]"
    assert format_score(2.0) == "[score.low]2.0/5[/score.low]"

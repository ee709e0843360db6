"""Questionary / prompt_toolkit styles for the dreview prompts.

Questionary renders through prompt_toolkit, so prompt colours are defined
here once and shared by the review picker and the confirmation prompts.
They mirror the Rich theme in ``output.py`` (cyan titles, green choices,
red for destructive or costly confirmations).
"""

from __future__ import annotations

from prompt_toolkit.styles import Style

_BASE = {
    "separator": "ansibrightblack",
    "instruction": "ansibrightblack",
    "error": "bold ansired",
    "disabled": "ansibrightblack italic",
}

QUESTIONARY_STYLE_SELECT = Style.from_dict(
    {
        **_BASE,
        "qmark": "bold ansicyan",
        "question": "bold ansicyan",
        "answer": "bold ansigreen",
        "pointer": "bold ansigreen",
        "highlighted": "bold ansigreen",
        "selected": "ansigreen",
    }
)

# Triggering an evaluation costs backend time; the prompt stands out in red.
QUESTIONARY_STYLE_CONFIRM = Style.from_dict(
    {
        **_BASE,
        "qmark": "bold ansired",
        "question": "bold ansired",
        "answer": "bold ansiyellow",
        "pointer": "bold ansiyellow",
        "highlighted": "bold ansiyellow",
    }
)

from __future__ import annotations

import sys
from pathlib import Path

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

import pytest  # noqa: E402

from dreview.core.probes import NotFound  # noqa: E402


class ScriptedProbe:
    """Fake probe returning canned results in order.

    Exceptions in the script are raised instead of returned. Once the
    script is exhausted ``default`` is returned for every further call.
    """

    def __init__(self, results=(), default=None):
        self.results = list(results)
        self.default = default if default is not None else NotFound()
        self.calls: list[object] = []

    async def __call__(self, job_id):
        self.calls.append(job_id)
        result = self.results.pop(0) if self.results else self.default
        if isinstance(result, Exception):
            raise result
        return result


class FakeReviewProbes:
    """Adapter stand-in exposing scripted question and evaluation probes."""

    def __init__(self, questions=(), evaluation=(), default=None):
        self.questions = ScriptedProbe(questions, default)
        self.evaluation = ScriptedProbe(evaluation, default)

    async def probe_questions(self, review_id):
        return await self.questions(review_id)

    async def probe_evaluation(self, review_id):
        return await self.evaluation(review_id)


@pytest.fixture
def scripted_probe():
    return ScriptedProbe


@pytest.fixture
def fake_probes():
    return FakeReviewProbes

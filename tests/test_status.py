import pytest

from dreview.core.probes import NotFound, Ok, TransportError
from dreview.core.reviews import EvaluationScore
from dreview.core.status import (
    JobState,
    infer_evaluation_status,
    infer_job_status,
    infer_questions_status,
)

QUESTIONS = [
    {"id": 1, "question": "How does it scale?", "difficulty": 7, "answer": None},
    {"id": 2, "question": "Why Kafka?", "difficulty": 5},
]


@pytest.mark.parametrize("rule", [infer_questions_status, infer_job_status])
def test_question_rules_not_found_is_pending(rule):
    inference = rule(NotFound())

    assert inference.state == JobState.PENDING
    assert inference.progress == 0
    assert "waiting for processing" in inference.message


@pytest.mark.parametrize("payload", [{"questions": []}, [], {}, None, "garbage"])
def test_questions_rule_empty_payload_is_processing(payload):
    inference = infer_questions_status(Ok(payload))

    assert inference.state == JobState.PROCESSING
    assert inference.progress == 50


@pytest.mark.parametrize("payload", [{"questions": QUESTIONS}, QUESTIONS])
def test_questions_rule_populated_list_completes(payload):
    inference = infer_questions_status(Ok(payload))

    assert inference.state == JobState.COMPLETED
    assert inference.progress == 100
    assert inference.aux_count == 2
    assert "2 questions" in inference.message
    assert [q.difficulty for q in inference.data] == [7, 5]


def test_questions_rule_transport_error_is_transient():
    inference = infer_questions_status(TransportError("HTTP 502: Bad Gateway"))

    assert inference.transient is True
    assert inference.state is None
    assert inference.error == "HTTP 502: Bad Gateway"


def test_questions_rule_explicit_failure_is_terminal():
    inference = infer_questions_status(Ok({"status": "FAILED", "error": "LLM quota exceeded"}))

    assert inference.state == JobState.FAILED
    assert inference.state.is_terminal
    assert inference.error == "LLM quota exceeded"


def test_evaluation_rule_not_found_is_pending():
    assert infer_evaluation_status(NotFound()).state == JobState.PENDING


def test_evaluation_rule_without_score_is_processing():
    inference = infer_evaluation_status(Ok({"status": "Pending", "overallscore": None}))

    assert inference.state == JobState.PROCESSING


def test_evaluation_rule_completes_on_score():
    payload = {
        "overallscore": 8,
        "technicalDepth": 4,
        "systemDesign": 3.5,
        "tradeoff": 4,
        "ownership": 5,
        "feedbackSummary": "Solid design.",
    }

    inference = infer_evaluation_status(Ok(payload))

    assert inference.state == JobState.COMPLETED
    assert isinstance(inference.data, EvaluationScore)
    assert inference.data.overall_score == 8
    assert inference.data.feedback_summary == "Solid design."
    assert "4.0/5" in inference.message


def test_evaluation_rule_completes_on_status_marker():
    inference = infer_evaluation_status(Ok({"status": "Completed"}))

    assert inference.state == JobState.COMPLETED
    assert inference.data.overall_score is None


def test_evaluation_rule_zero_score_completes():
    assert infer_evaluation_status(Ok({"overallscore": 0})).state == JobState.COMPLETED


def test_evaluation_rule_transport_error_is_transient():
    assert infer_evaluation_status(TransportError("timeout")).transient is True


def test_job_state_terminality():
    assert JobState.COMPLETED.is_terminal
    assert JobState.FAILED.is_terminal
    assert not JobState.PENDING.is_terminal
    assert not JobState.PROCESSING.is_terminal

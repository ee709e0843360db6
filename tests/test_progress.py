from dreview.cli.common.progress import _MAX_MESSAGE_WIDTH, _status_label, _truncate
from dreview.core.status import JobState, PollSnapshot


def test_status_label_shows_message():
    snapshot = PollSnapshot(state=JobState.PROCESSING, progress=50, message="Generating questions...")

    assert _status_label(snapshot) == "Generating questions..."


def test_status_label_prefers_error_over_message():
    snapshot = PollSnapshot(message="Generating questions...", error="Questions timed out")

    assert _status_label(snapshot) == "! Questions timed out"


def test_status_label_before_first_probe():
    assert _status_label(PollSnapshot()) == "Waiting to start..."


def test_status_label_is_truncated():
    label = _status_label(PollSnapshot(message="x" * (_MAX_MESSAGE_WIDTH + 20)))

    assert len(label) == _MAX_MESSAGE_WIDTH
    assert label.endswith("...")
    assert _truncate("short", 10) == "short"

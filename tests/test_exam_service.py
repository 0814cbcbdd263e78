import random

import pytest

from conftest import SCENARIO_QUESTIONS, ListSource
from timed_exam.models.session_state import SessionPhase
from timed_exam.services.clock import CooperativeScheduler
from timed_exam.services.exam_service import calculate_percentage, format_time
from timed_exam.services.question_loader import GENERIC_LOAD_ERROR, fisher_yates_shuffle


def _check_invariants(exam_session):
    state = exam_session.state
    assert 0 <= state.score <= len(state.answers) <= len(state.questions)
    if exam_session.is_active:
        assert 0 <= state.current_index < len(state.questions)


# ── helpers ──────────────────────────────────────────────────────────────────

def test_percentage_counts_only_answered_questions():
    assert calculate_percentage(2, 3) == 67
    assert calculate_percentage(1, 1) == 100
    assert calculate_percentage(1, 2) == 50
    assert calculate_percentage(1, 8) == 13  # 12.5 rounds half up
    assert calculate_percentage(0, 0) == 0


def test_format_time():
    assert format_time(1800) == "30:00"
    assert format_time(65) == "01:05"
    assert format_time(0) == "00:00"


# ── loading ──────────────────────────────────────────────────────────────────

def test_load_activates_session(loaded_session):
    state = loaded_session.state
    assert state.phase is SessionPhase.ANSWERING
    assert state.title == "Exam: SCENARIO"
    assert [q.id for q in state.questions] == ["q1", "q2", "q3"]
    assert state.current_index == 0
    assert state.score == 0
    assert state.answers == []
    assert state.exam_clock_remaining == 1800
    assert state.feedback_clock_remaining == 30
    assert loaded_session.exam_clock.running
    assert not loaded_session.feedback_clock.running


def test_load_failure_enters_error_phase(make_session, not_found):
    exam_session = make_session(source=not_found)
    exam_session.load()
    assert exam_session.phase is SessionPhase.ERROR
    assert exam_session.state.error_message == "Failed to load exam: 404"
    assert exam_session.load_failure.status_code == 404
    assert not exam_session.exam_clock.running
    assert exam_session.select_option("A") is False


def test_empty_question_set_is_a_load_failure(make_session):
    exam_session = make_session(source=ListSource([]))
    exam_session.load()
    assert exam_session.phase is SessionPhase.ERROR
    assert exam_session.state.error_message == GENERIC_LOAD_ERROR


# ── answering ────────────────────────────────────────────────────────────────

def test_correct_answer_scores(loaded_session):
    assert loaded_session.select_option("B") is True
    state = loaded_session.state
    assert state.score == 1
    assert len(state.answers) == 1
    record = state.answers[0]
    assert (record.question_id, record.selected, record.correct, record.is_correct) == ("q1", "B", "B", True)
    assert state.phase is SessionPhase.SHOWING_FEEDBACK
    assert state.feedback_active
    assert state.selected_option == "B"
    assert loaded_session.feedback_clock.running


def test_wrong_answer_does_not_score(loaded_session):
    loaded_session.select_option("C")
    state = loaded_session.state
    assert state.score == 0
    assert state.answers[0].is_correct is False
    assert state.answers[0].correct == "B"


def test_second_selection_is_ignored(loaded_session):
    loaded_session.select_option("A")
    assert loaded_session.select_option("B") is False
    assert len(loaded_session.state.answers) == 1
    assert loaded_session.state.score == 0
    assert loaded_session.state.selected_option == "A"


def test_unknown_option_is_rejected(loaded_session):
    with pytest.raises(ValueError):
        loaded_session.select_option("Z")
    assert loaded_session.state.answers == []


def test_advance_moves_to_next_question(loaded_session):
    loaded_session.select_option("B")
    assert loaded_session.advance() is True
    state = loaded_session.state
    assert state.current_index == 1
    assert state.selected_option is None
    assert not state.feedback_active
    assert state.phase is SessionPhase.ANSWERING
    assert not loaded_session.feedback_clock.running


def test_advance_requires_feedback(loaded_session):
    assert loaded_session.advance() is False
    assert loaded_session.state.current_index == 0


# ── scenarios ────────────────────────────────────────────────────────────────

def test_full_run_scoring(loaded_session):
    for option in ["B", "Y", "2"]:
        loaded_session.select_option(option)
        _check_invariants(loaded_session)
        loaded_session.advance()
        _check_invariants(loaded_session)

    state = loaded_session.state
    assert state.phase is SessionPhase.COMPLETE
    assert state.session_complete
    assert state.score == 2
    assert len(state.answers) == 3
    assert loaded_session.percentage == 67


def test_end_early_counts_attempted_only(loaded_session):
    loaded_session.select_option("B")
    assert loaded_session.end_test() is True
    state = loaded_session.state
    assert state.phase is SessionPhase.COMPLETE
    assert state.score == 1
    assert len(state.answers) == 1
    assert loaded_session.percentage == 100


def test_advancing_past_last_question_completes_without_duplicate(loaded_session):
    for option in ["A", "X", "1"]:
        loaded_session.select_option(option)
        loaded_session.advance()
    assert loaded_session.phase is SessionPhase.COMPLETE
    assert [a.question_id for a in loaded_session.state.answers] == ["q1", "q2", "q3"]
    assert loaded_session.advance() is False
    assert len(loaded_session.state.answers) == 3


def test_end_test_is_idempotent(loaded_session):
    assert loaded_session.end_test() is True
    assert loaded_session.end_test() is False
    assert loaded_session.select_option("B") is False
    assert loaded_session.state.answers == []


def test_random_play_keeps_invariants(make_session):
    rng = random.Random(99)
    questions = [
        {"id": f"q{i}", "question": f"Q{i}?", "options": ["a", "b", "c"], "correctAnswer": "b"}
        for i in range(25)
    ]
    exam_session = make_session(
        source=ListSource(questions),
        shuffle=lambda qs: fisher_yates_shuffle(qs, rng),
        exam_duration=200,
        feedback_duration=5,
    )
    exam_session.load()
    while exam_session.is_active:
        action = rng.random()
        if action < 0.5:
            exam_session.select_option(rng.choice(["a", "b", "c"]))
        elif action < 0.8:
            exam_session.advance()
        else:
            exam_session.scheduler.advance(rng.choice([1, 3, 7]))
        _check_invariants(exam_session)
    assert exam_session.phase is SessionPhase.COMPLETE
    assert len(exam_session.state.answers) == len({a.question_id for a in exam_session.state.answers})


# ── clocks ───────────────────────────────────────────────────────────────────

def test_exam_clock_ticks(loaded_session, scheduler):
    scheduler.advance(10)
    assert loaded_session.state.exam_clock_remaining == 1790


def test_exam_clock_expiry_forces_completion(make_session, scheduler):
    exam_session = make_session(exam_duration=5)
    exam_session.load()
    exam_session.select_option("B")
    exam_session.advance()
    scheduler.advance(5)

    state = exam_session.state
    assert state.phase is SessionPhase.COMPLETE
    assert state.exam_clock_remaining == 0
    assert state.current_index == 1
    assert exam_session.select_option("X") is False
    assert len(state.answers) == 1
    assert scheduler.pending() == 0


def test_exam_clock_expiry_during_feedback(make_session, scheduler):
    exam_session = make_session(exam_duration=5, feedback_duration=30)
    exam_session.load()
    scheduler.advance(3)
    exam_session.select_option("B")
    scheduler.advance(2)
    assert exam_session.phase is SessionPhase.COMPLETE
    assert not exam_session.state.feedback_active
    assert not exam_session.feedback_clock.running


def test_feedback_expiry_advances_once(make_session, scheduler):
    exam_session = make_session(feedback_duration=3)
    exam_session.load()
    exam_session.select_option("B")
    scheduler.advance(2)
    assert exam_session.state.feedback_clock_remaining == 1
    assert exam_session.state.current_index == 0

    scheduler.advance(1)
    assert exam_session.state.current_index == 1
    assert exam_session.phase is SessionPhase.ANSWERING

    scheduler.advance(60)
    assert exam_session.state.current_index == 1


def test_feedback_expiry_on_last_question_completes(make_session, scheduler):
    exam_session = make_session(feedback_duration=3)
    exam_session.load()
    for option in ["B", "Y", "2"]:
        exam_session.select_option(option)
        scheduler.advance(3)
    assert exam_session.phase is SessionPhase.COMPLETE
    assert exam_session.state.score == 2


def test_manual_next_cancels_feedback_clock(make_session, scheduler):
    exam_session = make_session(feedback_duration=3)
    exam_session.load()
    exam_session.select_option("B")
    exam_session.advance()
    scheduler.advance(10)
    assert exam_session.state.current_index == 1
    assert exam_session.phase is SessionPhase.ANSWERING


def test_clocks_stop_when_complete(loaded_session, scheduler):
    loaded_session.select_option("B")
    loaded_session.end_test()
    scheduler.advance(100)
    assert loaded_session.state.exam_clock_remaining == 1800
    assert scheduler.pending() == 0


# ── restart / disposal ───────────────────────────────────────────────────────

def test_restart_resets_and_reshuffles(make_session, scheduler):
    exam_session = make_session(shuffle=lambda qs: list(reversed(qs)))
    exam_session.load()
    before = [q.id for q in exam_session.state.questions]
    exam_session.select_option(exam_session.state.current_question.correct_answer)
    scheduler.advance(12)
    exam_session.end_test()

    exam_session.restart()
    state = exam_session.state
    assert [q.id for q in state.questions] == list(reversed(before))
    assert state.phase is SessionPhase.ANSWERING
    assert state.answers == []
    assert state.score == 0
    assert state.current_index == 0
    assert state.exam_clock_remaining == 1800
    assert state.feedback_clock_remaining == 30
    assert not state.session_complete
    assert exam_session.exam_clock.running


def test_restart_does_not_refetch(make_session, source):
    exam_session = make_session()
    exam_session.load()
    exam_session.end_test()
    exam_session.restart()
    assert source.fetches == 1
    assert len(exam_session.state.questions) == len(SCENARIO_QUESTIONS)


def test_restart_requires_completion(loaded_session):
    with pytest.raises(ValueError):
        loaded_session.restart()


def test_back_to_catalog_disposes_and_navigates(make_session, scheduler):
    routes = []
    exam_session = make_session(navigate=routes.append)
    exam_session.load()
    exam_session.select_option("B")
    exam_session.back_to_catalog()

    assert routes == ["catalog"]
    assert scheduler.pending() == 0
    assert not exam_session.is_active
    assert exam_session.pump() == 0
    assert exam_session.advance() is False


def test_restart_after_idle_result_page_starts_with_full_clock(make_session):
    now = [0.0]
    exam_session = make_session(scheduler=CooperativeScheduler(clock=lambda: now[0]))
    exam_session.load()
    now[0] += 5
    exam_session.pump()
    exam_session.end_test()

    now[0] += 600  # reading the results
    exam_session.restart()
    exam_session.pump()
    assert exam_session.state.exam_clock_remaining == 1800
    assert exam_session.phase is SessionPhase.ANSWERING

    now[0] += 3
    exam_session.pump()
    assert exam_session.state.exam_clock_remaining == 1797


def test_restart_after_longer_than_exam_does_not_complete(make_session):
    now = [0.0]
    exam_session = make_session(
        scheduler=CooperativeScheduler(clock=lambda: now[0]), exam_duration=60,
    )
    exam_session.load()
    exam_session.end_test()
    now[0] += 3600
    exam_session.restart()
    exam_session.pump()
    assert exam_session.phase is SessionPhase.ANSWERING
    assert exam_session.state.exam_clock_remaining == 60

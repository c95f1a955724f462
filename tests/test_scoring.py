import pytest

from utils.scoring import grade_question, grade_by_question_number, grade_positional, max_marks


QUIZ_QUESTIONS = [
    {"questionNumber": 1, "question": "q1", "options": ["A", "B"], "answer": "A", "marks": 2},
    {"questionNumber": 2, "question": "q2", "options": ["B", "C"], "answer": "B", "marks": 3},
    {"questionNumber": 3, "question": "q3", "options": ["C", "D"], "answer": "D", "marks": 1},
]


def test_grade_question_is_all_or_nothing():
    assert grade_question("A", "A", 4) == (True, 4)
    assert grade_question("B", "A", 4) == (False, 0)
    assert grade_question(None, "A", 4) == (False, 0)


def test_grade_question_is_exact_string_match():
    assert grade_question("a", "A", 1) == (False, 0)
    assert grade_question("A ", "A", 1) == (False, 0)


def test_grade_by_question_number_totals_scores():
    attempt_questions = [
        {"questionNumber": 1, "markedOption": "A", "answer": "A", "marks": 2},
        {"questionNumber": 2, "markedOption": "C", "answer": "B", "marks": 3},
        {"questionNumber": 3, "markedOption": None, "answer": "D", "marks": 1},
    ]

    graded, total = grade_by_question_number(attempt_questions, QUIZ_QUESTIONS)

    assert total == sum(q["score"] for q in graded) == 2
    assert [q["isCorrect"] for q in graded] == [True, False, False]
    assert [q["score"] for q in graded] == [2, 0, 0]


def test_grade_by_question_number_uses_live_answer_key():
    # the snapshot still says "A"; the quiz now says "B"
    attempt_questions = [{"questionNumber": 1, "markedOption": "A", "answer": "A", "marks": 2}]
    live = [{"questionNumber": 1, "answer": "B", "marks": 5}]

    graded, total = grade_by_question_number(attempt_questions, live)

    assert total == 0
    assert graded[0]["answer"] == "B"
    assert graded[0]["marks"] == 5


def test_grade_by_question_number_matches_numbers_across_types():
    attempt_questions = [{"questionNumber": "2", "markedOption": "B"}]

    graded, total = grade_by_question_number(attempt_questions, QUIZ_QUESTIONS)

    assert total == 3
    assert graded[0]["isCorrect"] is True


def test_grade_by_question_number_scores_removed_questions_zero():
    attempt_questions = [{"questionNumber": 9, "markedOption": "A", "answer": "A", "marks": 1}]

    graded, total = grade_by_question_number(attempt_questions, QUIZ_QUESTIONS)

    assert total == 0
    assert graded[0]["isCorrect"] is False


def test_grade_by_question_number_does_not_mutate_input():
    attempt_questions = [{"questionNumber": 1, "markedOption": "A"}]

    grade_by_question_number(attempt_questions, QUIZ_QUESTIONS)

    assert "score" not in attempt_questions[0]


def test_grade_positional_scenario():
    quiz = [
        {"questionNumber": 1, "question": "q1", "options": ["A", "Z"], "answer": "A", "marks": 1},
        {"questionNumber": 2, "question": "q2", "options": ["B", "X"], "answer": "B", "marks": 1},
    ]

    graded, total = grade_positional(quiz, ["A", "X"])

    assert total == 1
    assert graded[0]["isCorrect"] is True
    assert graded[1]["isCorrect"] is False
    assert graded[1]["markedOption"] == "X"


def test_grade_positional_rejects_length_mismatch():
    with pytest.raises(ValueError):
        grade_positional(QUIZ_QUESTIONS, ["A"])


def test_max_marks_defaults_to_one_per_question():
    assert max_marks(QUIZ_QUESTIONS) == 6
    assert max_marks([{"question": "no marks"}]) == 1

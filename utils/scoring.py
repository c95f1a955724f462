"""
Grading rules for quiz attempts.

Pure functions only: callers load the attempt and the live quiz and persist
whatever comes back. A question scores either 0 or exactly its marks.
"""
from typing import Dict, List, Optional, Tuple


def grade_question(marked: Optional[str], answer: str, marks: int) -> Tuple[bool, int]:
    """Exact string match, no partial credit."""
    is_correct = marked is not None and marked == answer
    return is_correct, (marks if is_correct else 0)


def _question_key(number) -> str:
    # numbers may come back from the store as int or str
    return str(number)


def grade_by_question_number(
    attempt_questions: List[Dict], quiz_questions: List[Dict]
) -> Tuple[List[Dict], int]:
    """
    Grade an attempt's marked options against the quiz's current answer key,
    matching questions on questionNumber.

    Questions that no longer exist in the quiz score 0.
    """
    key = {_question_key(q.get("questionNumber")): q for q in quiz_questions}

    graded = []
    total = 0
    for q in attempt_questions:
        item = dict(q)
        source = key.get(_question_key(q.get("questionNumber")))
        if source is None:
            item["isCorrect"], item["score"] = False, 0
        else:
            item["answer"] = source.get("answer")
            item["marks"] = source.get("marks", 1)
            item["isCorrect"], item["score"] = grade_question(
                q.get("markedOption"), item["answer"], item["marks"]
            )
        total += item["score"]
        graded.append(item)

    return graded, total


def grade_positional(
    quiz_questions: List[Dict], answers: List[Optional[str]]
) -> Tuple[List[Dict], int]:
    """Grade a bulk submission where answers[i] belongs to quiz_questions[i]."""
    if len(answers) != len(quiz_questions):
        raise ValueError(
            f"Expected {len(quiz_questions)} answers, got {len(answers)}"
        )

    graded = []
    total = 0
    for index, (q, marked) in enumerate(zip(quiz_questions, answers), start=1):
        marks = q.get("marks", 1)
        is_correct, score = grade_question(marked, q.get("answer"), marks)
        graded.append({
            "questionNumber": q.get("questionNumber", index),
            "question": q.get("question"),
            "options": list(q.get("options", [])),
            "answer": q.get("answer"),
            "markedOption": marked,
            "isCorrect": is_correct,
            "marks": marks,
            "score": score,
        })
        total += score

    return graded, total


def max_marks(questions: List[Dict]) -> int:
    return sum(q.get("marks", 1) for q in questions)

"""
Scoring helpers for candidate submissions.

All functions are pure so the same code scores websocket sessions and HTTP
submissions on the server.
"""
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional

from quizlink.schemas.assessment_schema import Question
from quizlink.schemas.result_schema import CandidateAnswer, UNANSWERED


def score_answers(questions: Iterable[Question], answers: Mapping[str, int]) -> int:
    """Count questions whose selected option equals the correct one.

    Missing answers default to UNANSWERED, which never equals a valid index.
    """
    return sum(
        1 for q in questions
        if answers.get(q.id, UNANSWERED) == q.correct_answer
    )


def elapsed_minutes(started_at: datetime, finished_at: datetime) -> int:
    """Wall-clock elapsed time rounded half up to whole minutes"""
    seconds = max(0.0, (finished_at - started_at).total_seconds())
    return int(seconds / 60 + 0.5)


def even_time_split(elapsed_seconds: float, question_count: int) -> int:
    """Average seconds per question, for submissions that carry no dwell times"""
    if question_count <= 0:
        return 0
    return int(round(max(0.0, elapsed_seconds) / question_count))


def build_answers(
    questions: List[Question],
    selections: Mapping[str, int],
    time_spent: Optional[Mapping[str, int]] = None,
    default_time_spent: int = 0
) -> List[CandidateAnswer]:
    """One CandidateAnswer per question, in assessment order"""
    time_spent = time_spent or {}
    return [
        CandidateAnswer(
            question_id=q.id,
            selected_answer=selections.get(q.id, UNANSWERED),
            time_spent=int(time_spent.get(q.id, default_time_spent)),
        )
        for q in questions
    ]


def selections_from_answers(questions: List[Question], answers: Iterable[CandidateAnswer]) -> Dict[str, int]:
    """Keep only answers that point at a real question and a real option.

    Anything else is treated as unanswered.
    """
    by_id = {q.id: q for q in questions}
    selections: Dict[str, int] = {}
    for answer in answers:
        question = by_id.get(answer.question_id)
        if question is None:
            continue
        if 0 <= answer.selected_answer < len(question.options):
            selections[answer.question_id] = answer.selected_answer
    return selections

"""
This graph generates multiple choice questions and keeps only well-formed ones
"""
import logging
from langgraph.graph import StateGraph, END
from langchain_openai import ChatOpenAI
from quizlink.core.config import settings
from quizlink.schemas.assessment_schema import OPTIONS_PER_QUESTION, Question
from quizlink.services.prompts import QUESTION_GENERATION_SYSTEM_PROMPT, QUESTION_GENERATION_USER_PROMPT
from quizlink.services.question_generation.state import State, GeneratedQuestionSet

logger = logging.getLogger(__name__)


def get_llm():
    """Get LLM instance lazily to avoid initialization issues during import."""
    return ChatOpenAI(
        model=settings.OPENAI_MODEL,
        temperature=0.7,
        api_key=settings.OPENAI_API_KEY or None,
    )


def generate_questions(state: State) -> dict:
    """Ask the LLM for a structured set of questions."""
    try:
        llm = get_llm().with_structured_output(GeneratedQuestionSet)
        messages = [
            {"role": "system", "content": QUESTION_GENERATION_SYSTEM_PROMPT},
            {"role": "user", "content": QUESTION_GENERATION_USER_PROMPT.format(
                count=state.count,
                job_role=state.job_role,
                category=state.category,
                difficulty=state.difficulty,
            )}
        ]
        result = llm.invoke(messages)

        if isinstance(result, dict):
            result = GeneratedQuestionSet(**result)

        return {"raw_questions": result.questions, "error": None}

    except Exception as e:
        logger.error(f"Question generation failed: {str(e)}")
        return {"raw_questions": [], "error": str(e)}


def validate_questions(state: State) -> dict:
    """Drop malformed questions and stamp the requested category and difficulty."""
    if state.error:
        return {"questions": []}

    questions = []
    for raw in state.raw_questions:
        options = [o.strip() for o in raw.options if o and o.strip()]
        if not raw.question.strip() or len(options) != OPTIONS_PER_QUESTION:
            continue
        if not 0 <= raw.correct_answer < len(options):
            continue
        questions.append(Question(
            text=raw.question.strip(),
            options=options,
            correct_answer=raw.correct_answer,
            category=state.category,
            difficulty=state.difficulty,
            explanation=raw.explanation or None,
        ))

    dropped = len(state.raw_questions) - len(questions)
    if dropped:
        logger.warning(f"Dropped {dropped} malformed generated questions")
    if not questions:
        return {"questions": [], "error": "No valid questions were generated"}
    return {"questions": questions[:state.count]}


def create_graph():
    """Create and return the question generation graph."""
    workflow = StateGraph(State)

    workflow.add_node("generate_questions", generate_questions)
    workflow.add_node("validate_questions", validate_questions)

    workflow.set_entry_point("generate_questions")

    workflow.add_edge("generate_questions", "validate_questions")
    workflow.add_edge("validate_questions", END)

    return workflow.compile()


# Create the graph instance
graph = create_graph()

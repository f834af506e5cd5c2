from fastapi import APIRouter
from quizlink.controllers import auth_controller
from quizlink.controllers import assessment_controller
from quizlink.controllers import question_bank_controller
from quizlink.controllers import ai_controller
from quizlink.controllers import candidate_controller
from quizlink.controllers import dashboard_controller
from quizlink.controllers import websocket_controller


router = APIRouter()
api_router = APIRouter()

api_router.include_router(auth_controller.router, prefix="/auth", tags=["Auth"])
api_router.include_router(assessment_controller.router, prefix="/assessments", tags=["Assessments"])
api_router.include_router(question_bank_controller.router, prefix="/questions", tags=["Question Bank"])
api_router.include_router(ai_controller.router, prefix="/ai", tags=["AI"])
api_router.include_router(candidate_controller.router, prefix="/take", tags=["Candidate"])
api_router.include_router(dashboard_controller.router, prefix="", tags=["Dashboard"])

router.include_router(api_router, prefix="/api")
router.include_router(websocket_controller.router, tags=["WebSocket"])

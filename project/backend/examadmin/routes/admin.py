import logging
from datetime import datetime, timezone

from bson import ObjectId
from fastapi import APIRouter, Depends

from ..errors import DuplicateTest, NotFound, ValidationError
from ..models.admin import AdminIdentity
from ..models.test import PHASE_LABELS, CreateTestRequest, CreateTestResponse
from ..services.store import TestStore, get_store
from ..services.test_builder import (
    build_question_documents,
    build_test_document,
    normalize_create_request,
)
from ..utils.security import get_current_admin
from ..utils.timeutils import to_ist_iso, to_utc_iso

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def parse_object_id(value: str, label: str) -> ObjectId:
    if not ObjectId.is_valid(value):
        raise ValidationError(f"Invalid {label} ID format")
    return ObjectId(value)


def serialize_test(doc: dict) -> dict:
    phase = doc.get("phase")
    return {
        "id": str(doc["_id"]),
        "title": doc.get("title"),
        "date": doc.get("date"),
        "testType": doc.get("testType"),
        "phase": phase,
        "phaseLabel": PHASE_LABELS.get(phase, "Unassigned"),
        "totalQuestions": doc.get("totalQuestions", 0),
        "isActive": doc.get("isActive", False),
        "startTime": to_utc_iso(doc.get("startTime")),
        "endTime": to_utc_iso(doc.get("endTime")),
        "startTimeIST": to_ist_iso(doc.get("startTime")),
        "endTimeIST": to_ist_iso(doc.get("endTime")),
        "createdAt": to_utc_iso(doc.get("createdAt")),
    }


def serialize_question(doc: dict) -> dict:
    return {
        "id": str(doc["_id"]),
        "testId": str(doc["testId"]),
        "questionNumber": doc.get("questionNumber"),
        "questionStatement": doc.get("questionStatement"),
        "options": doc.get("options", {}),
        "correctOption": doc.get("correctOption"),
        "phase": doc.get("phase"),
    }


@router.post("/create-test-with-questions", response_model=CreateTestResponse)
async def create_test_with_questions(
    payload: CreateTestRequest,
    current_admin: AdminIdentity = Depends(get_current_admin),
    store: TestStore = Depends(get_store)
):
    """
    Create a dated test and all of its questions in one request
    """
    normalized = normalize_create_request(payload)

    test_id = ObjectId()
    now = datetime.now(timezone.utc)
    question_docs = build_question_documents(
        test_id, normalized.questions, normalized.question_phase, now
    )

    key = normalized.key
    if await store.find_test_by_key(key["date"], key["testType"], key["phase"]):
        raise DuplicateTest(
            f"A {key['testType']} {key['phase']} test already exists for {key['date']}"
        )

    test_doc = build_test_document(test_id, normalized, now)
    await store.create_test_with_questions(test_doc, question_docs)
    logger.info(
        f"Admin {current_admin.id} created test {test_id} for {normalized.date} "
        f"({normalized.test_type.value}/{normalized.phase.value}, {len(question_docs)} questions)"
    )

    return {
        "success": True,
        "testId": str(test_id),
        "date": normalized.date,
        "totalQuestions": len(question_docs),
        "testType": normalized.test_type,
        "phase": normalized.phase,
        "startTimeIST": to_ist_iso(normalized.start_utc),
        "endTimeIST": to_ist_iso(normalized.end_utc),
        "message": "Test and questions created successfully",
    }


@router.get("/tests")
async def list_tests(
    current_admin: AdminIdentity = Depends(get_current_admin),
    store: TestStore = Depends(get_store)
):
    tests = await store.list_tests()
    return {"success": True, "tests": [serialize_test(doc) for doc in tests]}


@router.get("/tests/{test_id}/questions")
async def list_test_questions(
    test_id: str,
    current_admin: AdminIdentity = Depends(get_current_admin),
    store: TestStore = Depends(get_store)
):
    oid = parse_object_id(test_id, "test")
    test = await store.get_test(oid)
    if not test:
        raise NotFound("Test not found")

    questions = await store.list_questions(oid)
    return {
        "success": True,
        "test": serialize_test(test),
        "questions": [serialize_question(doc) for doc in questions],
    }


@router.delete("/delete-test/{test_id}")
async def delete_test(
    test_id: str,
    current_admin: AdminIdentity = Depends(get_current_admin),
    store: TestStore = Depends(get_store)
):
    """
    Delete a test together with all of its questions
    """
    oid = parse_object_id(test_id, "test")
    if not await store.delete_test_cascade(oid):
        raise NotFound("Test not found")
    return {"success": True, "message": "Test and its questions deleted successfully"}


@router.delete("/delete-question/{question_id}")
async def delete_question(
    question_id: str,
    current_admin: AdminIdentity = Depends(get_current_admin),
    store: TestStore = Depends(get_store)
):
    oid = parse_object_id(question_id, "question")
    if not await store.delete_question(oid):
        raise NotFound("Question not found")
    return {"success": True, "message": "Question deleted successfully"}

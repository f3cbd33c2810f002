from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class TestType(str, Enum):
    PAID = "paid"
    FREE = "free"


class TestPhase(str, Enum):
    DAILY = "daily"
    GS = "gs"
    CSAT = "csat"


PHASE_LABELS = {
    TestPhase.DAILY.value: "Daily Test",
    TestPhase.GS.value: "GS Test",
    TestPhase.CSAT.value: "CSAT Test",
}


class CreateTestRequest(BaseModel):
    # Checked field by field, in order, by services.test_builder
    title: Any = None
    date: Any = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    questions: Any = None
    testType: Any = None


class CreateTestResponse(BaseModel):
    success: bool = True
    testId: str
    date: str
    totalQuestions: int
    testType: TestType
    phase: TestPhase
    startTimeIST: str
    endTimeIST: str
    message: str

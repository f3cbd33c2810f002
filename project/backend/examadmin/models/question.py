from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class OptionName(str, Enum):
    OPTION1 = "option1"
    OPTION2 = "option2"
    OPTION3 = "option3"
    OPTION4 = "option4"


class QuestionPhase(str, Enum):
    GS = "GS"
    CSAT = "CSAT"


class QuestionOptions(BaseModel):
    option1: str
    option2: str
    option3: str
    option4: str


class QuestionIn(BaseModel):
    questionNumber: Optional[int] = Field(None, gt=0)
    questionStatement: str
    options: QuestionOptions
    correctOption: OptionName

from pydantic import BaseModel, EmailStr, Field, AfterValidator, field_validator, model_validator
from typing import List, Optional, Literal, Annotated

from config.settings import DEFAULT_QUIZ_TIME, DEFAULT_MARKS, DEFAULT_DIFFICULTY

Difficulty = Literal["Easy", "Medium", "Hard"]


class QuizQuestion(BaseModel):
    questionNumber: Optional[int] = Field(None, ge=1)
    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=2)
    answer: str
    marks: int = Field(DEFAULT_MARKS, gt=0)

    @model_validator(mode="after")
    def check_answer_key(self):
        if len(set(self.options)) != len(self.options):
            raise ValueError("Options must be distinct")
        if self.answer not in self.options:
            raise ValueError("Answer should be one of the options")
        return self


def number_questions(questions: List[QuizQuestion]) -> List[QuizQuestion]:
    """Fill in missing question numbers densely from 1; explicit numbers must already be 1..N."""
    if any(q.questionNumber is None for q in questions):
        for index, q in enumerate(questions, start=1):
            q.questionNumber = index

    numbers = [q.questionNumber for q in questions]
    if len(set(numbers)) != len(numbers):
        raise ValueError("Question numbers must be unique")
    if sorted(numbers) != list(range(1, len(numbers) + 1)):
        raise ValueError("Question numbers must run from 1 without gaps")
    return questions


def check_title(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Title is required")
    return value


Title = Annotated[str, AfterValidator(check_title)]


class QuizCreate(BaseModel):
    title: Title
    description: str = ""
    questions: List[QuizQuestion] = Field(..., min_length=1)
    time: int = Field(DEFAULT_QUIZ_TIME, gt=0)
    difficultyLevel: Difficulty = DEFAULT_DIFFICULTY
    isPublic: bool = True

    @field_validator("questions")
    @classmethod
    def check_numbers(cls, value: List[QuizQuestion]):
        return number_questions(value)


class QuizUpdate(BaseModel):
    title: Optional[Title] = None
    description: Optional[str] = None
    questions: Optional[List[QuizQuestion]] = Field(None, min_length=1)
    time: Optional[int] = Field(None, gt=0)
    difficultyLevel: Optional[Difficulty] = None
    isPublic: Optional[bool] = None

    @field_validator("questions")
    @classmethod
    def check_numbers(cls, value):
        if value is None:
            return value
        return number_questions(value)


class SaveAnswerRequest(BaseModel):
    questionNumber: int
    answer: str


class FinalizeAttemptRequest(BaseModel):
    parentQuizId: str
    timeLeft: Optional[float] = Field(None, ge=0)


class SubmitQuizRequest(BaseModel):
    answers: List[Optional[str]]
    timeTaken: int = Field(0, ge=0)


class ShareQuizRequest(BaseModel):
    email: EmailStr


class TextGenerateRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    numQuestions: int = Field(5, ge=1, le=50)
    difficulty: Difficulty = DEFAULT_DIFFICULTY

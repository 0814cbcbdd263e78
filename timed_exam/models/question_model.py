from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

class Question(BaseModel):
    """
    Multiple-choice question as stored in an exam's question resource.
    Pydantic v2; the wire name of the correct option is ``correctAnswer``.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Question identifier (unique within an exam)"
    )
    question: str = Field(
        ...,
        min_length=1,
        description="Prompt text"
    )
    description: str = Field(
        "",
        description="Explanation, shown only after the question is answered"
    )
    options: List[str] = Field(
        ...,
        description="Ordered answer options"
    )
    correct_answer: str = Field(
        ...,
        alias="correctAnswer",
        description="Designated correct option, must be one of options"
    )

    @field_validator('options')
    @classmethod
    def validate_options_length(cls, v: List[str]) -> List[str]:
        """
        A question needs at least two options to be multiple choice.
        """
        if len(v) < 2:
            raise ValueError("options must contain at least 2 entries.")
        return v

    @model_validator(mode='after')
    def validate_answer_in_options(self) -> 'Question':
        """
        The correct answer has to be one of the options, compared verbatim.
        """
        if self.correct_answer not in self.options:
            raise ValueError(f"correctAnswer ('{self.correct_answer}') is not one of the options ({self.options}).")
        return self

    def is_correct(self, option: str) -> bool:
        return option == self.correct_answer

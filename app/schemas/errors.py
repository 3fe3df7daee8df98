"""Error response bodies shared by the exception handlers."""

from pydantic import BaseModel, Field


class ProblemResponse(BaseModel):
    """Generic error body (unexpected server errors)."""

    title: str
    status: int


class ValidationProblem(ProblemResponse):
    """400 body: every violated rule, grouped by property name."""

    title: str = "One or more validation errors occurred."
    status: int = 400
    errors: dict[str, list[str]] = Field(default_factory=dict)

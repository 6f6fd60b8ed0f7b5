from pydantic import BaseModel
from typing import List


class SubmissionRecord(BaseModel):
    timestamp: str
    name: str
    email: str
    phone: str
    message: str


class SubmitResponse(BaseModel):
    success: bool = True
    message: str = "Form submitted successfully"


class SubmissionsResponse(BaseModel):
    success: bool = True
    submissions: List[SubmissionRecord] = []


class HealthResponse(BaseModel):
    status: str = "OK"
    timestamp: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str

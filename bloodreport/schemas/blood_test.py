# bloodreport/schemas/blood_test.py
from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import datetime

# ---------- Blood tests ----------
class BloodTestOut(BaseModel):
    id: str
    user_id: str
    file_name: str
    file_type: str
    file_size: int
    created_at: datetime
    processed: bool
    extracted_text: Optional[str] = None

    class Config:
        from_attributes = True

class BloodTestStatusOut(BaseModel):
    id: str
    processed: bool
    created_at: datetime

# ---------- Reports ----------
class MetricOut(BaseModel):
    name: str
    value: float
    unit: str
    status: Literal["normal", "elevated", "low"]

class BloodTestReportOut(BaseModel):
    id: str
    date: str
    name: str
    metrics: list[MetricOut]
    health_score: int = Field(ge=0, le=100)

class AnalysisOut(BaseModel):
    analysis: str
    recommendations: list[str]

class HealthScoreOut(BaseModel):
    test_id: str
    date: str
    score: int = Field(ge=0, le=100)

# ---------- Chat ----------
class ChatIn(BaseModel):
    message: str = Field(max_length=4000)
    test_id: Optional[str] = None

class ChatOut(BaseModel):
    request_id: str
    reply: str
    source: Literal["model", "rules", "fallback"]

class ChatMessageOut(BaseModel):
    role: str
    content: str

class ChatHistoryOut(BaseModel):
    messages: list[ChatMessageOut]

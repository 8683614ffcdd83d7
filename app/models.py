# app/models.py
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

class Strategy(str, Enum):
    MOBILE = "mobile"
    DESKTOP = "desktop"

class AnalysisRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = Field(min_length=1)
    strategy: Strategy = Strategy.MOBILE

class ErrorResponse(BaseModel):
    error: str

class FieldMetric(BaseModel):
    key: str
    label: str
    value: Optional[Union[int, float]] = None
    category: Optional[str] = None

class LabMetrics(BaseModel):
    performance: Optional[int] = None
    seo: Optional[int] = None
    accessibility: Optional[int] = None
    bestPractices: Optional[int] = None
    FCP: Optional[str] = None
    LCP: Optional[str] = None

class Report(BaseModel):
    field: Optional[List[FieldMetric]] = None
    lab: Optional[LabMetrics] = None

    def field_value(self, key: str) -> Optional[Union[int, float]]:
        """Percentile of a field metric by key, or None if the group or value is absent."""
        for metric in self.field or []:
            if metric.key == key:
                return metric.value
        return None

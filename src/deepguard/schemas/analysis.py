from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Literal


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_url: str = Field(alias="fileUrl", min_length=1)
    file_name: str = Field(alias="fileName")
    file_type: str = Field(alias="fileType")
    file_id: str = Field(alias="fileId", min_length=1)


class AnalysisResponse(BaseModel):
    success: Literal[True] = True
    result: Dict[str, Any]
    method: Literal["reality_defender", "fallback"]
    processing_time: int


class AnalysisFailureResponse(BaseModel):
    success: Literal[False] = False
    error: str

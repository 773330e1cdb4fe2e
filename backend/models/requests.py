from pydantic import BaseModel, Field, model_validator

from models.schemas.report import AnalysisConfig, CandidateInput


class QuickAnalyzeRequest(BaseModel):
    resume_text: str = Field(..., min_length=1, max_length=50000, description="Plain text resume content")
    job_description: str = Field(..., min_length=1, max_length=10000, description="Job description text")


class CandidateAnalyzeRequest(BaseModel):
    candidate: CandidateInput
    config: AnalysisConfig = AnalysisConfig()
    job_description: str = Field("", max_length=10000, description="Optional, enables the narrative analysis")


class BatchAnalyzeRequest(BaseModel):
    candidates: list[CandidateInput] = Field(..., min_length=1)
    config: AnalysisConfig = AnalysisConfig()
    job_description: str = Field("", max_length=10000)

    @model_validator(mode="after")
    def unique_names(self):
        names = [c.name for c in self.candidates]
        if len(names) != len(set(names)):
            raise ValueError("candidate names must be unique")
        return self

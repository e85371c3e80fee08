from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_files: int
    deepfakes_detected: int
    quota_used: int
    quota_limit: int
    accuracy_rate: int
    avg_processing_time: int

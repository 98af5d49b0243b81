"""
System API models.
"""

from typing import Any, Dict

from pydantic import BaseModel


class SystemStatus(BaseModel):
    """System status information"""

    status: str
    uptime: float
    memory_usage: Dict[str, float]
    store_usage: Dict[str, Any]
    codec_backend: str


class PerformanceMetrics(BaseModel):
    """Crop throughput information"""

    avg_processing_time: float
    total_crops: int
    operations_per_minute: float

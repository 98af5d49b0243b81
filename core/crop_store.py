"""
Crop Store - Circular buffer of cropped image documents

Stands in for the document database that receives the base64 encoded
cropped image.
"""

import logging
import uuid
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timedelta
from threading import RLock
from typing import Any, Dict, List, Optional

from core.constants import StoreConstants

logger = logging.getLogger(__name__)


@dataclass
class CropRecord:
    """Single stored crop"""

    id: str
    timestamp: datetime
    source_format: str
    output_format: str
    region: Dict[str, int]
    width: int
    height: int
    image_base64: str
    size_bytes: int
    processing_time_ms: int
    metadata: Dict[str, Any]


class CropStore:
    """Circular buffer for maintaining stored crops"""

    def __init__(self, max_size: int = StoreConstants.DEFAULT_MAX_RECORDS):
        """
        Initialize Crop Store

        Args:
            max_size: Maximum number of crops to keep
        """
        self.max_size = max_size
        self.buffer: deque = deque(maxlen=max_size)

        # Statistics
        self.total_crops = 0
        self.total_bytes = 0
        self.total_processing_time = 0
        self.format_counts: Dict[str, int] = {}

        # Thread safety (RLock allows reentrant locking)
        self.lock = RLock()

        logger.info(f"Crop Store initialized with max size: {max_size}")

    def add_crop(
        self,
        source_format: str,
        output_format: str,
        region: Dict[str, int],
        width: int,
        height: int,
        image_base64: str,
        size_bytes: int,
        processing_time_ms: int,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Add crop record to the store

        Args:
            source_format: Container format of the source image
            output_format: Container format of the cropped image
            region: Crop region as {x0, y0, x1, y1}
            width: Cropped width in pixels
            height: Cropped height in pixels
            image_base64: Base64 encoded cropped image
            size_bytes: Size of the encoded cropped image
            processing_time_ms: Processing time in milliseconds
            metadata: Optional metadata

        Returns:
            Crop ID
        """
        with self.lock:
            crop_id = f"{StoreConstants.RECORD_ID_PREFIX}{uuid.uuid4().hex[:8]}"

            record = CropRecord(
                id=crop_id,
                timestamp=datetime.now(),
                source_format=source_format,
                output_format=output_format,
                region=dict(region),
                width=width,
                height=height,
                image_base64=image_base64,
                size_bytes=size_bytes,
                processing_time_ms=processing_time_ms,
                metadata=metadata or {},
            )

            # Oldest record drops out when full
            if len(self.buffer) == self.max_size:
                evicted = self.buffer[0]
                logger.debug(f"Evicting crop {evicted.id}")

            self.buffer.append(record)

            self.total_crops += 1
            self.total_bytes += size_bytes
            self.total_processing_time += processing_time_ms
            self.format_counts[output_format] = self.format_counts.get(output_format, 0) + 1

            logger.debug(f"Added crop {crop_id}: {width}x{height} {output_format}")
            return crop_id

    def get_crop(self, crop_id: str) -> Optional[CropRecord]:
        """Get specific crop by ID"""
        with self.lock:
            for record in self.buffer:
                if record.id == crop_id:
                    return record
        return None

    def delete_crop(self, crop_id: str) -> bool:
        """
        Remove a crop from the store

        Statistics keep counting it; they describe all crops ever stored.

        Returns:
            True if the crop was found and removed
        """
        with self.lock:
            for record in self.buffer:
                if record.id == crop_id:
                    self.buffer.remove(record)
                    logger.debug(f"Deleted crop {crop_id}")
                    return True
        return False

    def get_recent(self, limit: int = 10, format_filter: Optional[str] = None) -> List[CropRecord]:
        """
        Get recent crops

        Args:
            limit: Maximum number of records to return
            format_filter: Only return crops with this output format

        Returns:
            List of crop records, newest first
        """
        with self.lock:
            records = list(self.buffer)

            if format_filter:
                wanted = format_filter.upper()
                records = [r for r in records if r.output_format == wanted]

            # Newest first; appends are in time order
            records.reverse()

            return records[:limit]

    def get_statistics(self) -> Dict[str, Any]:
        """Get crop statistics"""
        with self.lock:
            if self.total_crops == 0:
                return {
                    "total": 0,
                    "formats": {},
                    "total_bytes": 0,
                    "avg_time_ms": 0,
                    "avg_size_bytes": 0,
                    "buffer_usage": 0,
                    "buffer_max": self.max_size,
                    "recent_hour": 0,
                }

            avg_time = self.total_processing_time / self.total_crops
            avg_size = self.total_bytes / self.total_crops

            recent_cutoff = datetime.now() - timedelta(hours=StoreConstants.RECENT_WINDOW_HOURS)
            recent_count = sum(1 for r in self.buffer if r.timestamp > recent_cutoff)

            return {
                "total": self.total_crops,
                "formats": dict(self.format_counts),
                "total_bytes": self.total_bytes,
                "avg_time_ms": round(avg_time, 2),
                "avg_size_bytes": round(avg_size, 2),
                "buffer_usage": len(self.buffer),
                "buffer_max": self.max_size,
                "recent_hour": recent_count,
            }

    def clear(self):
        """Clear all crops"""
        with self.lock:
            self.buffer.clear()
            self.total_crops = 0
            self.total_bytes = 0
            self.total_processing_time = 0
            self.format_counts = {}

            logger.info("Crop store cleared")

    def export_to_dict(self) -> Dict[str, Any]:
        """Export stored crops to dictionary"""
        with self.lock:
            return {
                "crops": [
                    {
                        "id": r.id,
                        "timestamp": r.timestamp.isoformat(),
                        "source_format": r.source_format,
                        "output_format": r.output_format,
                        "region": r.region,
                        "width": r.width,
                        "height": r.height,
                        "image_base64": r.image_base64,
                        "size_bytes": r.size_bytes,
                        "processing_time_ms": r.processing_time_ms,
                        "metadata": r.metadata,
                    }
                    for r in self.buffer
                ],
                "statistics": self.get_statistics(),
            }

    def import_from_dict(self, data: Dict[str, Any]):
        """Import crops from dictionary"""
        with self.lock:
            self.clear()

            for record_data in data.get("crops", []):
                record = CropRecord(
                    id=record_data["id"],
                    timestamp=datetime.fromisoformat(record_data["timestamp"]),
                    source_format=record_data["source_format"],
                    output_format=record_data["output_format"],
                    region=record_data["region"],
                    width=record_data["width"],
                    height=record_data["height"],
                    image_base64=record_data["image_base64"],
                    size_bytes=record_data["size_bytes"],
                    processing_time_ms=record_data["processing_time_ms"],
                    metadata=record_data.get("metadata", {}),
                )

                self.buffer.append(record)

                self.total_crops += 1
                self.total_bytes += record.size_bytes
                self.total_processing_time += record.processing_time_ms
                self.format_counts[record.output_format] = (
                    self.format_counts.get(record.output_format, 0) + 1
                )

            logger.info(f"Imported {len(self.buffer)} crop records")

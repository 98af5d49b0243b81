"""
Configuration for Image Crop Flow.

Settings are pydantic models grouped by concern and filled from
CROP_FLOW_* environment variables, e.g.:

    CROP_FLOW_ENVIRONMENT=production
    CROP_FLOW_API_PORT=9000
    CROP_FLOW_API_CORS_ORIGINS=http://localhost:1880,http://localhost:3000
    CROP_FLOW_IMAGE_CODEC_BACKEND=opencv
    CROP_FLOW_STORAGE_MAX_RECORDS=500
    CROP_FLOW_SYSTEM_LOG_LEVEL=DEBUG
"""

import logging
import os
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from core.constants import (
    APIConstants,
    ImageConstants,
    StoreConstants,
    SystemConstants,
)

logger = logging.getLogger(__name__)


class ApiSettings(BaseModel):
    """HTTP server settings"""

    host: str = APIConstants.DEFAULT_HOST
    port: int = Field(APIConstants.DEFAULT_PORT, ge=1, le=65535)
    cors_enabled: bool = True
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


class ImageSettings(BaseModel):
    """Codec and payload settings"""

    codec_backend: str = ImageConstants.DEFAULT_CODEC_BACKEND
    output_format: str = ImageConstants.DEFAULT_OUTPUT_FORMAT
    jpeg_quality: int = Field(
        ImageConstants.DEFAULT_JPEG_QUALITY,
        ge=ImageConstants.MIN_JPEG_QUALITY,
        le=ImageConstants.MAX_JPEG_QUALITY,
    )
    max_payload_mb: float = Field(ImageConstants.MAX_PAYLOAD_MB, gt=0)

    @field_validator("codec_backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ImageConstants.CODEC_BACKENDS:
            raise ValueError(f"codec_backend must be one of {ImageConstants.CODEC_BACKENDS}")
        return v

    @field_validator("output_format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        v = v.upper()
        v = ImageConstants.FORMAT_ALIASES.get(v, v)
        if v not in ImageConstants.SUPPORTED_OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {ImageConstants.SUPPORTED_OUTPUT_FORMATS}"
            )
        return v


class StorageSettings(BaseModel):
    """Crop store settings"""

    max_records: int = Field(
        StoreConstants.DEFAULT_MAX_RECORDS,
        ge=StoreConstants.MIN_RECORDS,
        le=StoreConstants.MAX_RECORDS,
    )


class SystemSettings(BaseModel):
    """Logging and debug settings"""

    debug: bool = False
    log_level: str = SystemConstants.LOG_LEVEL_DEFAULT

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return v


class Settings(BaseModel):
    """Application settings"""

    environment: str = "development"
    api: ApiSettings = Field(default_factory=ApiSettings)
    image: ImageSettings = Field(default_factory=ImageSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    system: SystemSettings = Field(default_factory=SystemSettings)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Variables are named CROP_FLOW_<SECTION>_<FIELD>; CROP_FLOW_ENVIRONMENT
        sets the top-level environment name. Unknown variables are ignored.

        Raises:
            pydantic.ValidationError: If a value is invalid
        """
        environ = os.environ if environ is None else environ
        prefix = SystemConstants.ENV_PREFIX
        data: Dict[str, Any] = {}

        sections = {
            name: field.annotation for name, field in cls.model_fields.items() if name != "environment"
        }

        for key, value in environ.items():
            if not key.startswith(prefix):
                continue
            name = key[len(prefix) :].lower()

            if name == "environment":
                data["environment"] = value
                continue

            for section, model in sections.items():
                if name.startswith(section + "_"):
                    field_name = name[len(section) + 1 :]
                    if field_name in model.model_fields:
                        data.setdefault(section, {})[field_name] = value
                    else:
                        logger.warning(f"Ignoring unknown setting {key}")
                    break

        return cls.model_validate(data)


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings"""
    return Settings.from_env()

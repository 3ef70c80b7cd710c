"""Configuration API endpoints"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, ValidationError

from services.config_manager import ConfigManager

router = APIRouter()


class DiffSettingsUpdate(BaseModel):
    """Partial update of diff settings"""

    identityFields: list[str] | None = None
    detectMoves: bool | None = None
    indent: int | None = Field(default=None, ge=0, le=8)


class LimitsUpdate(BaseModel):
    """Partial update of input limits"""

    maxDocumentBytes: int | None = Field(default=None, gt=0)


class ConfigUpdateRequest(BaseModel):
    """Request to update configuration"""

    diff: DiffSettingsUpdate | None = None
    limits: LimitsUpdate | None = None


class ConfigResponse(BaseModel):
    """Configuration response"""

    diff: dict
    limits: dict
    server: dict


class ValidateResponse(BaseModel):
    """Validation response"""

    valid: bool
    message: str


@router.get("", response_model=ConfigResponse)
def get_config() -> ConfigResponse:
    """Get current configuration"""
    config = ConfigManager.get_instance().get_config()

    return ConfigResponse(
        diff=config.get("diff", {}),
        limits=config.get("limits", {}),
        server=config.get("server", {}),
    )


@router.put("")
def update_config(request: ConfigUpdateRequest) -> dict[str, Any]:
    """Update configuration"""
    config_manager = ConfigManager.get_instance()
    current_config = config_manager.get_config()

    # Update only provided fields
    if request.diff:
        diff_update = request.diff.model_dump(exclude_none=True)
        if any(not field.strip() for field in diff_update.get("identityFields", [])):
            raise HTTPException(status_code=400, detail="Identity fields must be non-empty names")
        current_config["diff"] = {**current_config.get("diff", {}), **diff_update}
    if request.limits:
        current_config["limits"] = {
            **current_config.get("limits", {}),
            **request.limits.model_dump(exclude_none=True),
        }

    try:
        config_manager.save_config(current_config)
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {"status": "success", "message": "Configuration updated"}


@router.post("/validate", response_model=ValidateResponse)
def validate_config() -> ValidateResponse:
    """Validate the stored diff settings"""
    try:
        options = ConfigManager.get_instance().get_diff_options()
    except (ValidationError, TypeError) as e:
        return ValidateResponse(valid=False, message=f"Invalid diff settings: {e}")

    return ValidateResponse(
        valid=True,
        message=(
            f"Identity fields {list(options.identity_fields)}, "
            f"move detection {'on' if options.detect_moves else 'off'}, indent {options.indent}"
        ),
    )

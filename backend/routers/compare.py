"""Compare mode API endpoints"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from models.diff import DiffResult, LineMark, UnifiedDiffResult
from services.config_manager import ConfigManager
from services.diff_service import DiffService

router = APIRouter()


class CompareRequest(BaseModel):
    """Two documents to compare"""

    left: str
    right: str


class UnifiedRequest(CompareRequest):
    """Request for a unified view; line classifications are computed when omitted"""

    left_lines: list[LineMark] | None = None
    right_lines: list[LineMark] | None = None


class EqualResponse(BaseModel):
    """Semantic equality check result"""

    equal: bool


class FormatRequest(BaseModel):
    """Document to re-render"""

    content: str
    indent: int | None = Field(default=None, ge=0, le=8)


class FormatResponse(BaseModel):
    """Re-rendered document"""

    content: str


def check_document_size(*documents: str) -> None:
    """Reject documents over the configured size limit"""
    max_bytes = ConfigManager.get_instance().get_max_document_bytes()
    for document in documents:
        size = len(document.encode("utf-8"))
        if size > max_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"Document too large: {size} bytes (limit {max_bytes})",
            )


def build_diff_service() -> DiffService:
    return DiffService(ConfigManager.get_instance().get_diff_options())


@router.post("/diff", response_model=DiffResult)
def compare_documents(request: CompareRequest) -> DiffResult:
    """Calculate a side-by-side diff of two JSON documents"""
    check_document_size(request.left, request.right)
    return build_diff_service().calculate_diff(request.left, request.right)


@router.post("/unified", response_model=UnifiedDiffResult)
def unified_diff(request: UnifiedRequest) -> UnifiedDiffResult:
    """Merge both sides of a diff into a single unified view"""
    check_document_size(request.left, request.right)
    diff_service = build_diff_service()

    left_lines = request.left_lines
    right_lines = request.right_lines
    if left_lines is None or right_lines is None:
        result = diff_service.calculate_diff(request.left, request.right)
        left_lines = result.left_lines if left_lines is None else left_lines
        right_lines = result.right_lines if right_lines is None else right_lines

    return diff_service.generate_unified_diff(request.left, request.right, left_lines, right_lines)


@router.post("/equal", response_model=EqualResponse)
def documents_equal(request: CompareRequest) -> EqualResponse:
    """Check whether two documents are semantically equal"""
    check_document_size(request.left, request.right)
    return EqualResponse(equal=build_diff_service().are_equal(request.left, request.right))


@router.post("/format", response_model=FormatResponse)
def format_document(request: FormatRequest) -> FormatResponse:
    """Re-render a document the way the diff views show it"""
    check_document_size(request.content)
    options = ConfigManager.get_instance().get_diff_options()
    if request.indent is not None:
        options = options.model_copy(update={"indent": request.indent})
    return FormatResponse(content=DiffService(options).format_json(request.content))

"""
증빙 문서 관련 API 라우터
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import FileResponse
from kyc_review.api.auth import get_current_user
from kyc_review.api.dependencies import get_document_service
from kyc_review.services.document_intake import DocumentIntakeService
from kyc_review.utils.response import success_response
from kyc_review.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["documents"])


@router.post("/cases/{case_id}/documents", status_code=status.HTTP_201_CREATED)
async def upload_document(
    case_id: str,
    request: Request,
    file: Optional[UploadFile] = File(default=None),
    document_type: Optional[str] = Form(default=None, alias="documentType"),
    _: Dict[str, Any] = Depends(get_current_user),
    service: DocumentIntakeService = Depends(get_document_service)
):
    """문서 업로드 (multipart/form-data: file, documentType)"""
    content = None
    file_name = None
    mime_type = None
    if file is not None:
        # 제한을 넘는지만 판단하면 되므로 최대 크기 + 1 바이트까지만 읽음
        content = await file.read(request.app.state.max_file_size + 1)
        file_name = file.filename
        mime_type = file.content_type
        await file.close()

    document = service.upload_document(
        case_id,
        content=content,
        document_type=document_type,
        file_name=file_name,
        mime_type=mime_type
    )
    return success_response(document, message="문서가 업로드되었습니다.")


@router.get("/cases/{case_id}/documents")
async def list_documents(
    case_id: str,
    _: Dict[str, Any] = Depends(get_current_user),
    service: DocumentIntakeService = Depends(get_document_service)
):
    """케이스 문서 목록"""
    return success_response(service.list_documents(case_id))


def _file_response(service: DocumentIntakeService, document_id: str, disposition: str) -> FileResponse:
    document, path = service.get_document_file(document_id)
    return FileResponse(
        path,
        media_type=document["mimeType"],
        filename=document["fileName"],
        content_disposition_type=disposition
    )


@router.get("/documents/{document_id}")
async def view_document(
    document_id: str,
    _: Dict[str, Any] = Depends(get_current_user),
    service: DocumentIntakeService = Depends(get_document_service)
):
    """문서 파일 보기 (inline)"""
    return _file_response(service, document_id, "inline")


@router.get("/documents/{document_id}/download")
async def download_document(
    document_id: str,
    _: Dict[str, Any] = Depends(get_current_user),
    service: DocumentIntakeService = Depends(get_document_service)
):
    """문서 파일 다운로드 (attachment)"""
    return _file_response(service, document_id, "attachment")


@router.delete("/documents/{document_id}")
async def delete_document(
    document_id: str,
    _: Dict[str, Any] = Depends(get_current_user),
    service: DocumentIntakeService = Depends(get_document_service)
):
    """문서 삭제"""
    service.delete_document(document_id)
    return success_response({"id": document_id}, message="문서가 삭제되었습니다.")

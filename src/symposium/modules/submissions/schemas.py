"""
Submission Schemas
"""

from uuid import UUID

from pydantic import BaseModel

from symposium.modules.submissions.artifacts import Artifact


class UploadResponse(BaseModel):
    student_id: UUID
    artifact: Artifact
    url: str
    size_bytes: int
    signatures_cleared: bool = False

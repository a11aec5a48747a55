"""
Request manifest and response shapes of the order documents upload (OR74).

The documents endpoint answers 200 even when it rejects a document; the real
outcome is the `errors_count` in the body. `classify_upload` turns a decoded
response into either `DocumentUploadOk` or `DocumentUploadPartialFailure`.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from common.exceptions import DecodeError


@dataclass(frozen=True)
class DocumentUploadRequest:
    file_name: str
    type_code: str

    def to_manifest(self):
        """The JSON sent in the `order_documents` part, describing this single file."""
        return {'order_documents': [{'file_name': self.file_name, 'type_code': self.type_code}]}


@dataclass(frozen=True)
class DocumentError:
    code: Optional[str]
    message: Optional[str]
    field: Optional[str]

    def __str__(self):
        return f"{self.code} ({self.field}): {self.message}"


@dataclass(frozen=True)
class DocumentErrors:
    errors: List[DocumentError] = field(default_factory=list)


@dataclass(frozen=True)
class DocumentUploadResult:
    errors_count: Optional[int]
    order_documents: List[DocumentErrors] = field(default_factory=list)

    @property
    def has_errors(self):
        # Absent or zero means success.
        return bool(self.errors_count) and self.errors_count > 0

    @property
    def errors(self):
        return [error for document in self.order_documents for error in document.errors]

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise DecodeError("document upload response", f"expected an object, got {type(data).__name__}")

        errors_count = data.get('errors_count')
        if errors_count is not None and not isinstance(errors_count, int):
            raise DecodeError("document upload response", f"errors_count is not an integer: {errors_count!r}")

        documents = []
        for document in data.get('order_documents') or []:
            errors = [
                DocumentError(code=e.get('code'), message=e.get('message'), field=e.get('field'))
                for e in (document or {}).get('errors') or []
            ]
            documents.append(DocumentErrors(errors=errors))
        return cls(errors_count=errors_count, order_documents=documents)


@dataclass(frozen=True)
class DocumentUploadOk:
    result: DocumentUploadResult


@dataclass(frozen=True)
class DocumentUploadPartialFailure:
    result: DocumentUploadResult

    @property
    def errors(self):
        return self.result.errors


def classify_upload(result):
    if result.has_errors:
        return DocumentUploadPartialFailure(result)
    return DocumentUploadOk(result)

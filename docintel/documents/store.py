import dataclasses
import hashlib
import threading
import uuid
from datetime import datetime, timezone

from docintel.documents.exceptions import AlreadyAnalyzedError, NotFoundError
from docintel.documents.models import (
    Clause,
    Document,
    DocumentProcessing,
    DocumentState,
    Obligation,
    Right,
    Risk,
    Summary,
)
from docintel.logging.logger import Log

_TEST_DOCUMENT_TEXT = (
    "RESIDENTIAL LEASE AGREEMENT\n"
    "1. Rent. The Tenant agrees to pay the Landlord a monthly rent of $1,500, "
    "due on or before the 5th day of each month.\n"
    "2. Late Fee. A late fee of $50 shall be charged if payment is delayed "
    "beyond the due date.\n"
    "3. Termination. Either party may terminate this agreement with a 60-day "
    "written notice."
)


class DocumentStore:
    """In-memory repository of documents keyed by identifier.

    Documents are immutable; every write builds a complete replacement and
    swaps it in under the lock, so a concurrent reader observes either the
    previous or the updated document and never a partial one.
    """

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}
        self._lock = threading.RLock()

    def create(
        self,
        content: bytes,
        filename: str,
        mime_type: str,
        extracted_text: str,
    ) -> str:
        """Store a new document in the 'uploaded' state and return its id."""
        document = Document(
            id="",
            filename=filename,
            mime_type=mime_type,
            size_bytes=len(content),
            raw_content=content,
            extracted_text=extracted_text,
            uploaded_at=datetime.now(timezone.utc),
            file_hash_sha256=hashlib.sha256(content).hexdigest(),
        )
        with self._lock:
            document_id = self._new_id()
            self._documents[document_id] = dataclasses.replace(document, id=document_id)
        Log.info(f"Stored document {document_id} ({filename}, {len(content)} bytes)")
        return document_id

    def get(self, document_id: str) -> Document | None:
        with self._lock:
            return self._documents.get(document_id)

    def find_by_hash(self, file_hash_sha256: str) -> Document | None:
        """Return a stored document with identical content, if any."""
        with self._lock:
            for document in self._documents.values():
                if document.file_hash_sha256 == file_hash_sha256:
                    return document
        return None

    def list_documents(self) -> list[Document]:
        """All documents, newest upload first."""
        with self._lock:
            documents = list(self._documents.values())
        return sorted(documents, key=lambda d: d.uploaded_at, reverse=True)

    def attach_processing(
        self,
        document_id: str,
        processing: DocumentProcessing,
    ) -> Document:
        """Attach analysis results and move the document to 'analyzed'.

        Raises:
            NotFoundError: if the id is unknown.
            AlreadyAnalyzedError: if the document already left 'uploaded'.
        """
        with self._lock:
            current = self._require_pending(document_id)
            updated = dataclasses.replace(
                current,
                state=DocumentState.ANALYZED,
                processing=processing,
            )
            self._documents[document_id] = updated
        Log.info(f"Document {document_id} analyzed as {processing.document_type}")
        return updated

    def mark_failed(self, document_id: str, error_message: str) -> Document:
        """Move the document to 'failed'.

        Raises:
            NotFoundError: if the id is unknown.
            AlreadyAnalyzedError: if the document already left 'uploaded'.
        """
        with self._lock:
            current = self._require_pending(document_id)
            updated = dataclasses.replace(
                current,
                state=DocumentState.FAILED,
                error_message=error_message,
            )
            self._documents[document_id] = updated
        Log.warning(f"Document {document_id} marked as failed: {error_message}")
        return updated

    def create_test_document(self) -> str:
        """Seed a small analyzed lease through the regular state machine."""
        content = _TEST_DOCUMENT_TEXT.encode("utf-8")
        document_id = self.create(
            content,
            filename="test-lease.pdf",
            mime_type="application/pdf",
            extracted_text=_TEST_DOCUMENT_TEXT,
        )
        self.attach_processing(document_id, _test_processing())
        return document_id

    def _require_pending(self, document_id: str) -> Document:
        current = self._documents.get(document_id)
        if current is None:
            raise NotFoundError(f"Document {document_id} not found")
        if current.state is not DocumentState.UPLOADED:
            raise AlreadyAnalyzedError(
                f"Document {document_id} is already {current.state.value}"
            )
        return current

    def _new_id(self) -> str:
        while True:
            candidate = f"doc_{uuid.uuid4().hex[:12]}"
            if candidate not in self._documents:
                return candidate


def _test_processing() -> DocumentProcessing:
    return DocumentProcessing(
        document_type="lease",
        summary=Summary(
            text="A residential lease setting monthly rent, a late fee and a notice period.",
            key_terms=("monthly rent", "late fee", "60-day notice"),
        ),
        clauses=(
            Clause(
                id="clause-1",
                title="Rent",
                original_text="The Tenant agrees to pay the Landlord a monthly rent of $1,500.",
                plain_language="You pay $1,500 every month by the 5th.",
            ),
            Clause(
                id="clause-2",
                title="Late Fee",
                original_text="A late fee of $50 shall be charged if payment is delayed.",
                plain_language="Paying after the 5th costs an extra $50.",
            ),
            Clause(
                id="clause-3",
                title="Termination",
                original_text="Either party may terminate this agreement with a 60-day written notice.",
                plain_language="Either side can end the lease with 60 days written notice.",
            ),
        ),
        risks=(
            Risk(
                id="risk-1",
                title="Late payment penalty",
                severity="medium",
                rationale="A flat $50 fee applies from the first day of delay.",
                recommendation="Set up automatic payment before the 5th.",
            ),
        ),
        obligations=(Obligation(party="Tenant", description="Pay rent by the 5th", deadline="monthly"),),
        rights=(Right(party="Either party", description="Terminate with 60 days notice"),),
        recommendations=("Keep proof of every rent payment",),
        risk_score=35,
        confidence=0.9,
    )

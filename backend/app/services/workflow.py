"""
Record workflow.

Entry point for every operation on clients' financial records: creation,
owner-scoped listings, accountant queues and status transitions. Each
operation checks the caller against the access policy before touching the
store, and reviews notify the record owner.
"""

import logging
from typing import List, Optional, Type, TypeVar

from backend.app.core.exceptions import InvalidInputError, ResourceNotFoundError
from backend.app.core.guards import OwnershipGuard, ensure_accountant, ensure_authenticated
from backend.app.models.enums import InvoiceStatus, ReviewStatus
from backend.app.schemas.document import DocumentCreate, DocumentRecord
from backend.app.schemas.expense import ExpenseCreate, ExpenseRecord
from backend.app.schemas.file import StoredFile
from backend.app.schemas.invoice import InvoiceCreate, InvoiceRecord
from backend.app.schemas.notification import ReviewNotice
from backend.app.schemas.transaction import TransactionCreate, TransactionRecord, TransactionSummary
from backend.app.schemas.user import UserRecord
from backend.app.services.notification_service import NotificationService
from backend.app.store.base import RecordStore

logger = logging.getLogger("finance.workflow")

ownership_guard = OwnershipGuard()

E = TypeVar("E")


def parse_status(enum_cls: Type[E], value) -> E:
    """Coerce a raw status into enum_cls, rejecting unknown values."""
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidInputError(
            f"Invalid status '{value}'",
            details={"allowed": [member.value for member in enum_cls]}
        ) from None


def _verdict(status: ReviewStatus) -> str:
    return "validated" if status == ReviewStatus.PROCESSED else "rejected"


class WorkflowService:
    
    def __init__(self, store: RecordStore, notifications: NotificationService):
        self.store = store
        self.notifications = notifications
    
    # Transactions
    
    async def record_transaction(self, user: Optional[UserRecord], data: TransactionCreate) -> TransactionRecord:
        user = ensure_authenticated(user)
        transaction = await self.store.create_transaction(user.id, data)
        logger.info("Transaction recorded", extra={"transaction_id": transaction.id, "user_id": user.id})
        return transaction
    
    async def list_transactions(self, user: Optional[UserRecord]) -> List[TransactionRecord]:
        user = ensure_authenticated(user)
        return await self.store.transactions_by_user(user.id)
    
    async def transaction_summary(self, user: Optional[UserRecord]) -> TransactionSummary:
        user = ensure_authenticated(user)
        return await self.store.transaction_summary(user.id)
    
    # Invoices
    
    async def create_invoice(self, user: Optional[UserRecord], data: InvoiceCreate) -> InvoiceRecord:
        user = ensure_authenticated(user)
        invoice = await self.store.create_invoice(user.id, data)
        logger.info("Invoice created", extra={"invoice_id": invoice.id, "user_id": user.id})
        return invoice
    
    async def list_invoices(self, user: Optional[UserRecord]) -> List[InvoiceRecord]:
        user = ensure_authenticated(user)
        return await self.store.invoices_by_user(user.id)
    
    async def get_invoice(self, invoice_id: int, user: Optional[UserRecord]) -> InvoiceRecord:
        user = ensure_authenticated(user)
        invoice = await self.store.get_invoice(invoice_id)
        if invoice is None:
            raise ResourceNotFoundError("Invoice", invoice_id)
        ownership_guard.enforce(invoice.user_id, user, "invoice", allow_accountant=True)
        return invoice
    
    async def update_invoice_status(self, invoice_id: int, status, user: Optional[UserRecord]) -> InvoiceRecord:
        """
        Change an invoice's status.
        
        Allowed for the invoice owner and for any accountant. No notification
        is sent and no reviewer is recorded.
        """
        user = ensure_authenticated(user)
        status = parse_status(InvoiceStatus, status)
        invoice = await self.get_invoice(invoice_id, user)
        
        updated = await self.store.update_invoice_status(invoice.id, status)
        if updated is None:
            raise ResourceNotFoundError("Invoice", invoice_id)
        
        logger.info(
            "Invoice status updated",
            extra={"invoice_id": invoice_id, "status": status.value, "actor_id": user.id}
        )
        return updated
    
    # Expenses
    
    async def submit_expense(
        self,
        user: Optional[UserRecord],
        data: ExpenseCreate,
        stored_file: Optional[StoredFile] = None
    ) -> ExpenseRecord:
        """Create a pending expense and let the accountant(s) know."""
        user = ensure_authenticated(user)
        expense = await self.store.create_expense(user.id, data, stored_file)
        logger.info("Expense submitted", extra={"expense_id": expense.id, "user_id": user.id})
        
        await self.notifications.notify_accountants(
            user,
            title="New expense",
            message=f"{user.full_name} added a new purchase invoice",
            link=f"/expenses/{expense.id}"
        )
        return expense
    
    async def list_expenses(self, user: Optional[UserRecord]) -> List[ExpenseRecord]:
        user = ensure_authenticated(user)
        return await self.store.expenses_by_user(user.id)
    
    async def get_expense(self, expense_id: int, user: Optional[UserRecord]) -> ExpenseRecord:
        user = ensure_authenticated(user)
        expense = await self.store.get_expense(expense_id)
        if expense is None:
            raise ResourceNotFoundError("Expense", expense_id)
        ownership_guard.enforce(expense.user_id, user, "expense", allow_accountant=True)
        return expense
    
    async def update_expense_status(self, expense_id: int, status, user: Optional[UserRecord]) -> ExpenseRecord:
        """
        Review an expense (accountant only).
        
        Sets status and the review pair and stores the owner's notification
        in the same step. Repeating a review re-stamps it and notifies again.
        """
        user = ensure_accountant(user)
        status = parse_status(ReviewStatus, status)
        
        notice = ReviewNotice(
            title="Expense status updated",
            message=f"Your purchase invoice has been {_verdict(status)}",
            link=f"/expenses/{expense_id}"
        )
        updated = await self.store.update_expense_status(expense_id, status, user.id, notice)
        if updated is None:
            raise ResourceNotFoundError("Expense", expense_id)
        
        logger.info(
            "Expense reviewed",
            extra={
                "expense_id": expense_id,
                "status": status.value,
                "reviewer_id": user.id,
                "notified_user_id": updated.user_id,
            }
        )
        return updated
    
    # Documents
    
    async def submit_document(
        self,
        user: Optional[UserRecord],
        data: DocumentCreate,
        stored_file: StoredFile
    ) -> DocumentRecord:
        """Create a pending document and let the accountant(s) know."""
        user = ensure_authenticated(user)
        document = await self.store.create_document(user.id, data, stored_file)
        logger.info("Document submitted", extra={"document_id": document.id, "user_id": user.id})
        
        await self.notifications.notify_accountants(
            user,
            title="New document",
            message=f"{user.full_name} added a new document",
            link=f"/documents/{document.id}"
        )
        return document
    
    async def list_documents(self, user: Optional[UserRecord]) -> List[DocumentRecord]:
        user = ensure_authenticated(user)
        return await self.store.documents_by_user(user.id)
    
    async def get_document(self, document_id: int, user: Optional[UserRecord]) -> DocumentRecord:
        user = ensure_authenticated(user)
        document = await self.store.get_document(document_id)
        if document is None:
            raise ResourceNotFoundError("Document", document_id)
        ownership_guard.enforce(document.user_id, user, "document", allow_accountant=True)
        return document
    
    async def update_document_status(self, document_id: int, status, user: Optional[UserRecord]) -> DocumentRecord:
        """
        Review a document (accountant only).
        
        Same contract as update_expense_status.
        """
        user = ensure_accountant(user)
        status = parse_status(ReviewStatus, status)
        
        notice = ReviewNotice(
            title="Document status updated",
            message=f"Your document has been {_verdict(status)}",
            link=f"/documents/{document_id}"
        )
        updated = await self.store.update_document_status(document_id, status, user.id, notice)
        if updated is None:
            raise ResourceNotFoundError("Document", document_id)
        
        logger.info(
            "Document reviewed",
            extra={
                "document_id": document_id,
                "status": status.value,
                "reviewer_id": user.id,
                "notified_user_id": updated.user_id,
            }
        )
        return updated
    
    # Accountant queues
    
    async def list_clients(self, user: Optional[UserRecord]) -> List[UserRecord]:
        ensure_accountant(user)
        return await self.store.client_users()
    
    async def pending_documents(self, user: Optional[UserRecord]) -> List[DocumentRecord]:
        ensure_accountant(user)
        return await self.store.unprocessed_documents()

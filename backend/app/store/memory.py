"""
In-memory record store.

Holds every record in per-kind dictionaries with a per-kind id counter
starting at 1. Records are frozen models: an update builds a copy and
replaces the stored value in one assignment, and mutations are serialized
by a lock, so no reader ever sees a half-applied review.
"""

import asyncio
from typing import Dict, List, Optional

from backend.app.core.exceptions import ConflictError
from backend.app.models.enums import InvoiceStatus, ReviewStatus, UserRole
from backend.app.schemas.document import DocumentCreate, DocumentRecord
from backend.app.schemas.expense import ExpenseCreate, ExpenseRecord
from backend.app.schemas.file import StoredFile
from backend.app.schemas.invoice import InvoiceCreate, InvoiceRecord
from backend.app.schemas.notification import NotificationCreate, NotificationRecord, ReviewNotice
from backend.app.schemas.transaction import TransactionCreate, TransactionRecord
from backend.app.schemas.user import UserCreate, UserRecord
from backend.app.store.base import Clock, RecordStore

KINDS = ("users", "transactions", "invoices", "expenses", "documents", "notifications")


class MemoryRecordStore(RecordStore):
    
    def __init__(self, clock: Optional[Clock] = None):
        super().__init__(clock)
        self._users: Dict[int, UserRecord] = {}
        self._transactions: Dict[int, TransactionRecord] = {}
        self._invoices: Dict[int, InvoiceRecord] = {}
        self._expenses: Dict[int, ExpenseRecord] = {}
        self._documents: Dict[int, DocumentRecord] = {}
        self._notifications: Dict[int, NotificationRecord] = {}
        self._next_id: Dict[str, int] = {kind: 1 for kind in KINDS}
        self._lock = asyncio.Lock()
    
    def _allocate_id(self, kind: str) -> int:
        new_id = self._next_id[kind]
        self._next_id[kind] = new_id + 1
        return new_id
    
    def _build_notification(self, user_id: int, title: str, message: str, link: Optional[str]) -> NotificationRecord:
        # The id is consumed only once the record validates
        notification = NotificationRecord(
            id=self._next_id["notifications"],
            user_id=user_id,
            title=title,
            message=message,
            link=link,
            read=False,
            created_at=self.clock(),
        )
        self._next_id["notifications"] += 1
        return notification
    
    def _review_notification(self, owner_id: int, notice: Optional[ReviewNotice]) -> Optional[NotificationRecord]:
        if notice is None:
            return None
        return self._build_notification(owner_id, notice.title, notice.message, notice.link)
    
    # Users
    
    async def create_user(self, data: UserCreate) -> UserRecord:
        async with self._lock:
            if any(u.username == data.username for u in self._users.values()):
                raise ConflictError(
                    "Username already registered",
                    details={"username": data.username}
                )
            user = UserRecord(
                id=self._allocate_id("users"),
                created_at=self.clock(),
                **data.model_dump(),
            )
            self._users[user.id] = user
            return user
    
    async def get_user(self, user_id: int) -> Optional[UserRecord]:
        return self._users.get(user_id)
    
    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        return next((u for u in self._users.values() if u.username == username), None)
    
    async def users_by_role(self, role: UserRole) -> List[UserRecord]:
        return sorted(
            (u for u in self._users.values() if u.role == role),
            key=lambda u: u.id,
        )
    
    # Transactions
    
    async def create_transaction(self, user_id: int, data: TransactionCreate) -> TransactionRecord:
        async with self._lock:
            transaction = TransactionRecord(
                id=self._allocate_id("transactions"),
                user_id=user_id,
                created_at=self.clock(),
                **data.model_dump(),
            )
            self._transactions[transaction.id] = transaction
            return transaction
    
    async def get_transaction(self, transaction_id: int) -> Optional[TransactionRecord]:
        return self._transactions.get(transaction_id)
    
    async def transactions_by_user(self, user_id: int) -> List[TransactionRecord]:
        return sorted(
            (t for t in self._transactions.values() if t.user_id == user_id),
            key=lambda t: t.date,
            reverse=True,
        )
    
    # Invoices
    
    async def create_invoice(self, user_id: int, data: InvoiceCreate) -> InvoiceRecord:
        async with self._lock:
            invoice = InvoiceRecord(
                id=self._allocate_id("invoices"),
                user_id=user_id,
                created_at=self.clock(),
                **data.model_dump(),
            )
            self._invoices[invoice.id] = invoice
            return invoice
    
    async def get_invoice(self, invoice_id: int) -> Optional[InvoiceRecord]:
        return self._invoices.get(invoice_id)
    
    async def invoices_by_user(self, user_id: int) -> List[InvoiceRecord]:
        return sorted(
            (i for i in self._invoices.values() if i.user_id == user_id),
            key=lambda i: i.issue_date,
            reverse=True,
        )
    
    async def update_invoice_status(self, invoice_id: int, status: InvoiceStatus) -> Optional[InvoiceRecord]:
        async with self._lock:
            invoice = self._invoices.get(invoice_id)
            if invoice is None:
                return None
            updated = invoice.model_copy(update={"status": status})
            self._invoices[invoice_id] = updated
            return updated
    
    # Expenses
    
    async def create_expense(
        self,
        user_id: int,
        data: ExpenseCreate,
        stored_file: Optional[StoredFile] = None,
    ) -> ExpenseRecord:
        async with self._lock:
            expense = ExpenseRecord(
                id=self._allocate_id("expenses"),
                user_id=user_id,
                status=ReviewStatus.PENDING,
                file_url=stored_file.file_url if stored_file else None,
                file_name=stored_file.file_name if stored_file else None,
                created_at=self.clock(),
                reviewed_by=None,
                reviewed_at=None,
                **data.model_dump(),
            )
            self._expenses[expense.id] = expense
            return expense
    
    async def get_expense(self, expense_id: int) -> Optional[ExpenseRecord]:
        return self._expenses.get(expense_id)
    
    async def expenses_by_user(self, user_id: int) -> List[ExpenseRecord]:
        return sorted(
            (e for e in self._expenses.values() if e.user_id == user_id),
            key=lambda e: e.invoice_date,
            reverse=True,
        )
    
    async def update_expense_status(
        self,
        expense_id: int,
        status: ReviewStatus,
        reviewed_by: int,
        notice: Optional[ReviewNotice] = None,
    ) -> Optional[ExpenseRecord]:
        async with self._lock:
            expense = self._expenses.get(expense_id)
            if expense is None:
                return None
            updated = expense.model_copy(update={
                "status": status,
                "reviewed_by": reviewed_by,
                "reviewed_at": self.clock(),
            })
            notification = self._review_notification(updated.user_id, notice)
            self._expenses[expense_id] = updated
            if notification is not None:
                self._notifications[notification.id] = notification
            return updated
    
    # Documents
    
    async def create_document(
        self,
        user_id: int,
        data: DocumentCreate,
        stored_file: StoredFile,
    ) -> DocumentRecord:
        async with self._lock:
            document = DocumentRecord(
                id=self._allocate_id("documents"),
                user_id=user_id,
                file_url=stored_file.file_url,
                file_name=stored_file.file_name,
                upload_date=self.clock(),
                status=ReviewStatus.PENDING,
                reviewed_by=None,
                reviewed_at=None,
                **data.model_dump(),
            )
            self._documents[document.id] = document
            return document
    
    async def get_document(self, document_id: int) -> Optional[DocumentRecord]:
        return self._documents.get(document_id)
    
    async def documents_by_user(self, user_id: int) -> List[DocumentRecord]:
        return sorted(
            (d for d in self._documents.values() if d.user_id == user_id),
            key=lambda d: d.upload_date,
            reverse=True,
        )
    
    async def unprocessed_documents(self) -> List[DocumentRecord]:
        return sorted(
            (d for d in self._documents.values() if d.status == ReviewStatus.PENDING),
            key=lambda d: d.upload_date,
            reverse=True,
        )
    
    async def update_document_status(
        self,
        document_id: int,
        status: ReviewStatus,
        reviewed_by: int,
        notice: Optional[ReviewNotice] = None,
    ) -> Optional[DocumentRecord]:
        async with self._lock:
            document = self._documents.get(document_id)
            if document is None:
                return None
            updated = document.model_copy(update={
                "status": status,
                "reviewed_by": reviewed_by,
                "reviewed_at": self.clock(),
            })
            notification = self._review_notification(updated.user_id, notice)
            self._documents[document_id] = updated
            if notification is not None:
                self._notifications[notification.id] = notification
            return updated
    
    # Notifications
    
    async def create_notification(self, data: NotificationCreate) -> NotificationRecord:
        async with self._lock:
            notification = self._build_notification(data.user_id, data.title, data.message, data.link)
            self._notifications[notification.id] = notification
            return notification
    
    async def get_notification(self, notification_id: int) -> Optional[NotificationRecord]:
        return self._notifications.get(notification_id)
    
    async def notifications_by_user(self, user_id: int) -> List[NotificationRecord]:
        return sorted(
            (n for n in self._notifications.values() if n.user_id == user_id),
            key=lambda n: n.created_at,
            reverse=True,
        )
    
    async def mark_notification_read(self, notification_id: int) -> Optional[NotificationRecord]:
        async with self._lock:
            notification = self._notifications.get(notification_id)
            if notification is None:
                return None
            updated = notification.model_copy(update={"read": True})
            self._notifications[notification_id] = updated
            return updated

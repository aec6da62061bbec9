"""
Record store interface.

The store owns identity allocation and the raw keyed collections for the six
record kinds, plus the owner/role/status queries built on them. Getters
return None for a missing id; raising is left to the workflow layer.
"""

import unicodedata
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, List, Optional

from backend.app.models.enums import InvoiceStatus, ReviewStatus, TransactionType, UserRole
from backend.app.schemas.document import DocumentCreate, DocumentRecord
from backend.app.schemas.expense import ExpenseCreate, ExpenseRecord
from backend.app.schemas.file import StoredFile
from backend.app.schemas.invoice import InvoiceCreate, InvoiceRecord
from backend.app.schemas.notification import NotificationCreate, NotificationRecord, ReviewNotice
from backend.app.schemas.transaction import TransactionCreate, TransactionRecord, TransactionSummary
from backend.app.schemas.user import UserCreate, UserRecord


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def name_sort_key(name: str) -> str:
    """Case- and accent-insensitive key for ordering people by name."""
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


class RecordStore(ABC):
    """Persistence contract for users and their financial records."""
    
    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or utc_now
    
    # Users
    
    @abstractmethod
    async def create_user(self, data: UserCreate) -> UserRecord:
        """Create a user. Raises ConflictError if the username is taken."""
    
    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[UserRecord]:
        ...
    
    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        ...
    
    @abstractmethod
    async def users_by_role(self, role: UserRole) -> List[UserRecord]:
        """Users with role, ordered by id."""
    
    async def client_users(self) -> List[UserRecord]:
        """All clients ordered by full name."""
        clients = await self.users_by_role(UserRole.CLIENT)
        return sorted(clients, key=lambda u: name_sort_key(u.full_name))
    
    # Transactions
    
    @abstractmethod
    async def create_transaction(self, user_id: int, data: TransactionCreate) -> TransactionRecord:
        ...
    
    @abstractmethod
    async def get_transaction(self, transaction_id: int) -> Optional[TransactionRecord]:
        ...
    
    @abstractmethod
    async def transactions_by_user(self, user_id: int) -> List[TransactionRecord]:
        """Transactions of user_id, most recent date first."""
    
    async def transaction_summary(self, user_id: int) -> TransactionSummary:
        transactions = await self.transactions_by_user(user_id)
        income = sum(t.amount for t in transactions if t.type == TransactionType.INCOME)
        expense = sum(t.amount for t in transactions if t.type == TransactionType.EXPENSE)
        return TransactionSummary(
            total_income=income,
            total_expense=expense,
            balance=income - expense,
            count=len(transactions),
        )
    
    # Invoices
    
    @abstractmethod
    async def create_invoice(self, user_id: int, data: InvoiceCreate) -> InvoiceRecord:
        ...
    
    @abstractmethod
    async def get_invoice(self, invoice_id: int) -> Optional[InvoiceRecord]:
        ...
    
    @abstractmethod
    async def invoices_by_user(self, user_id: int) -> List[InvoiceRecord]:
        """Invoices of user_id, most recent issue_date first."""
    
    @abstractmethod
    async def update_invoice_status(self, invoice_id: int, status: InvoiceStatus) -> Optional[InvoiceRecord]:
        ...
    
    # Expenses
    
    @abstractmethod
    async def create_expense(
        self,
        user_id: int,
        data: ExpenseCreate,
        stored_file: Optional[StoredFile] = None,
    ) -> ExpenseRecord:
        """Create a pending expense with an empty review pair."""
    
    @abstractmethod
    async def get_expense(self, expense_id: int) -> Optional[ExpenseRecord]:
        ...
    
    @abstractmethod
    async def expenses_by_user(self, user_id: int) -> List[ExpenseRecord]:
        """Expenses of user_id, most recent invoice_date first."""
    
    @abstractmethod
    async def update_expense_status(
        self,
        expense_id: int,
        status: ReviewStatus,
        reviewed_by: int,
        notice: Optional[ReviewNotice] = None,
    ) -> Optional[ExpenseRecord]:
        """
        Set status, reviewed_by and reviewed_at in one replace.
        
        When notice is given, a notification for the expense owner is stored
        in the same step; if it cannot be stored the expense is left as it was.
        """
    
    # Documents
    
    @abstractmethod
    async def create_document(
        self,
        user_id: int,
        data: DocumentCreate,
        stored_file: StoredFile,
    ) -> DocumentRecord:
        """Create a pending document with an empty review pair."""
    
    @abstractmethod
    async def get_document(self, document_id: int) -> Optional[DocumentRecord]:
        ...
    
    @abstractmethod
    async def documents_by_user(self, user_id: int) -> List[DocumentRecord]:
        """Documents of user_id, most recent upload_date first."""
    
    @abstractmethod
    async def unprocessed_documents(self) -> List[DocumentRecord]:
        """Pending documents of every user, most recent upload_date first."""
    
    @abstractmethod
    async def update_document_status(
        self,
        document_id: int,
        status: ReviewStatus,
        reviewed_by: int,
        notice: Optional[ReviewNotice] = None,
    ) -> Optional[DocumentRecord]:
        """Same contract as update_expense_status, for documents."""
    
    # Notifications
    
    @abstractmethod
    async def create_notification(self, data: NotificationCreate) -> NotificationRecord:
        ...
    
    @abstractmethod
    async def get_notification(self, notification_id: int) -> Optional[NotificationRecord]:
        ...
    
    @abstractmethod
    async def notifications_by_user(self, user_id: int) -> List[NotificationRecord]:
        """Notifications addressed to user_id, newest first."""
    
    @abstractmethod
    async def mark_notification_read(self, notification_id: int) -> Optional[NotificationRecord]:
        ...
    
    async def close(self) -> None:
        """Release any resources held by the store."""

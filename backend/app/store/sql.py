"""
SQLAlchemy-backed record store.

Same contract as the in-memory store, persisted through the async ORM
models. Each mutation runs in its own session transaction, so a review
commits its status, review pair and owner notification together or not at
all.
"""

from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from backend.app.core.exceptions import ConflictError
from backend.app.db.session import Base, build_session_factory
from backend.app.models.document import Document
from backend.app.models.enums import InvoiceStatus, ReviewStatus, UserRole
from backend.app.models.expense import Expense
from backend.app.models.invoice import Invoice
from backend.app.models.notification import Notification
from backend.app.models.transaction import Transaction
from backend.app.models.user import User
from backend.app.schemas.document import DocumentCreate, DocumentRecord
from backend.app.schemas.expense import ExpenseCreate, ExpenseRecord
from backend.app.schemas.file import StoredFile
from backend.app.schemas.invoice import InvoiceCreate, InvoiceRecord
from backend.app.schemas.notification import NotificationCreate, NotificationRecord, ReviewNotice
from backend.app.schemas.transaction import TransactionCreate, TransactionRecord
from backend.app.schemas.user import UserCreate, UserRecord
from backend.app.store.base import Clock, RecordStore


class SqlRecordStore(RecordStore):
    
    def __init__(self, engine: AsyncEngine, clock: Optional[Clock] = None):
        super().__init__(clock)
        self.engine = engine
        self.session_factory: async_sessionmaker = build_session_factory(engine)
    
    async def create_schema(self) -> None:
        """Create all tables (idempotent)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    
    async def close(self) -> None:
        await self.engine.dispose()
    
    async def _add(self, row):
        async with self.session_factory() as session:
            session.add(row)
            await session.commit()
            await session.refresh(row)
            return row
    
    async def _get(self, model, row_id: int):
        async with self.session_factory() as session:
            return await session.get(model, row_id)
    
    async def _all(self, query) -> list:
        async with self.session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())
    
    async def _review(self, model, row_id: int, status: ReviewStatus, reviewed_by: int, notice: Optional[ReviewNotice]):
        """Apply a review and queue the owner notification in one transaction."""
        async with self.session_factory() as session:
            async with session.begin():
                row = await session.get(model, row_id, with_for_update=True)
                if row is None:
                    return None
                reviewed_at = self.clock()
                row.status = status
                row.reviewed_by = reviewed_by
                row.reviewed_at = reviewed_at
                if notice is not None:
                    session.add(Notification(
                        user_id=row.user_id,
                        title=notice.title,
                        message=notice.message,
                        link=notice.link,
                        read=False,
                        created_at=reviewed_at,
                    ))
            await session.refresh(row)
            return row
    
    async def _update(self, model, row_id: int, **values):
        async with self.session_factory() as session:
            async with session.begin():
                row = await session.get(model, row_id, with_for_update=True)
                if row is None:
                    return None
                for field, value in values.items():
                    setattr(row, field, value)
            await session.refresh(row)
            return row
    
    # Users
    
    async def create_user(self, data: UserCreate) -> UserRecord:
        existing = await self.get_user_by_username(data.username)
        if existing:
            raise ConflictError("Username already registered", details={"username": data.username})
        try:
            row = await self._add(User(created_at=self.clock(), **data.model_dump()))
        except IntegrityError as exc:
            raise ConflictError("Username already registered", details={"username": data.username}) from exc
        return UserRecord.model_validate(row)
    
    async def get_user(self, user_id: int) -> Optional[UserRecord]:
        row = await self._get(User, user_id)
        return UserRecord.model_validate(row) if row else None
    
    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        rows = await self._all(select(User).where(User.username == username))
        return UserRecord.model_validate(rows[0]) if rows else None
    
    async def users_by_role(self, role: UserRole) -> List[UserRecord]:
        rows = await self._all(select(User).where(User.role == role).order_by(User.id))
        return [UserRecord.model_validate(r) for r in rows]
    
    # Transactions
    
    async def create_transaction(self, user_id: int, data: TransactionCreate) -> TransactionRecord:
        row = await self._add(Transaction(user_id=user_id, created_at=self.clock(), **data.model_dump()))
        return TransactionRecord.model_validate(row)
    
    async def get_transaction(self, transaction_id: int) -> Optional[TransactionRecord]:
        row = await self._get(Transaction, transaction_id)
        return TransactionRecord.model_validate(row) if row else None
    
    async def transactions_by_user(self, user_id: int) -> List[TransactionRecord]:
        rows = await self._all(
            select(Transaction).where(Transaction.user_id == user_id).order_by(desc(Transaction.date))
        )
        return [TransactionRecord.model_validate(r) for r in rows]
    
    # Invoices
    
    async def create_invoice(self, user_id: int, data: InvoiceCreate) -> InvoiceRecord:
        row = await self._add(Invoice(
            user_id=user_id,
            created_at=self.clock(),
            **data.model_dump(mode="python"),
        ))
        return InvoiceRecord.model_validate(row)
    
    async def get_invoice(self, invoice_id: int) -> Optional[InvoiceRecord]:
        row = await self._get(Invoice, invoice_id)
        return InvoiceRecord.model_validate(row) if row else None
    
    async def invoices_by_user(self, user_id: int) -> List[InvoiceRecord]:
        rows = await self._all(
            select(Invoice).where(Invoice.user_id == user_id).order_by(desc(Invoice.issue_date))
        )
        return [InvoiceRecord.model_validate(r) for r in rows]
    
    async def update_invoice_status(self, invoice_id: int, status: InvoiceStatus) -> Optional[InvoiceRecord]:
        row = await self._update(Invoice, invoice_id, status=status)
        return InvoiceRecord.model_validate(row) if row else None
    
    # Expenses
    
    async def create_expense(
        self,
        user_id: int,
        data: ExpenseCreate,
        stored_file: Optional[StoredFile] = None,
    ) -> ExpenseRecord:
        row = await self._add(Expense(
            user_id=user_id,
            status=ReviewStatus.PENDING,
            file_url=stored_file.file_url if stored_file else None,
            file_name=stored_file.file_name if stored_file else None,
            created_at=self.clock(),
            reviewed_by=None,
            reviewed_at=None,
            **data.model_dump(),
        ))
        return ExpenseRecord.model_validate(row)
    
    async def get_expense(self, expense_id: int) -> Optional[ExpenseRecord]:
        row = await self._get(Expense, expense_id)
        return ExpenseRecord.model_validate(row) if row else None
    
    async def expenses_by_user(self, user_id: int) -> List[ExpenseRecord]:
        rows = await self._all(
            select(Expense).where(Expense.user_id == user_id).order_by(desc(Expense.invoice_date))
        )
        return [ExpenseRecord.model_validate(r) for r in rows]
    
    async def update_expense_status(
        self,
        expense_id: int,
        status: ReviewStatus,
        reviewed_by: int,
        notice: Optional[ReviewNotice] = None,
    ) -> Optional[ExpenseRecord]:
        row = await self._review(Expense, expense_id, status, reviewed_by, notice)
        return ExpenseRecord.model_validate(row) if row else None
    
    # Documents
    
    async def create_document(
        self,
        user_id: int,
        data: DocumentCreate,
        stored_file: StoredFile,
    ) -> DocumentRecord:
        row = await self._add(Document(
            user_id=user_id,
            file_url=stored_file.file_url,
            file_name=stored_file.file_name,
            upload_date=self.clock(),
            status=ReviewStatus.PENDING,
            reviewed_by=None,
            reviewed_at=None,
            **data.model_dump(),
        ))
        return DocumentRecord.model_validate(row)
    
    async def get_document(self, document_id: int) -> Optional[DocumentRecord]:
        row = await self._get(Document, document_id)
        return DocumentRecord.model_validate(row) if row else None
    
    async def documents_by_user(self, user_id: int) -> List[DocumentRecord]:
        rows = await self._all(
            select(Document).where(Document.user_id == user_id).order_by(desc(Document.upload_date))
        )
        return [DocumentRecord.model_validate(r) for r in rows]
    
    async def unprocessed_documents(self) -> List[DocumentRecord]:
        rows = await self._all(
            select(Document)
            .where(Document.status == ReviewStatus.PENDING)
            .order_by(desc(Document.upload_date))
        )
        return [DocumentRecord.model_validate(r) for r in rows]
    
    async def update_document_status(
        self,
        document_id: int,
        status: ReviewStatus,
        reviewed_by: int,
        notice: Optional[ReviewNotice] = None,
    ) -> Optional[DocumentRecord]:
        row = await self._review(Document, document_id, status, reviewed_by, notice)
        return DocumentRecord.model_validate(row) if row else None
    
    # Notifications
    
    async def create_notification(self, data: NotificationCreate) -> NotificationRecord:
        row = await self._add(Notification(read=False, created_at=self.clock(), **data.model_dump()))
        return NotificationRecord.model_validate(row)
    
    async def get_notification(self, notification_id: int) -> Optional[NotificationRecord]:
        row = await self._get(Notification, notification_id)
        return NotificationRecord.model_validate(row) if row else None
    
    async def notifications_by_user(self, user_id: int) -> List[NotificationRecord]:
        rows = await self._all(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(desc(Notification.created_at))
        )
        return [NotificationRecord.model_validate(r) for r in rows]
    
    async def mark_notification_read(self, notification_id: int) -> Optional[NotificationRecord]:
        row = await self._update(Notification, notification_id, read=True)
        return NotificationRecord.model_validate(row) if row else None

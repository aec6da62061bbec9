"""
Workflow tests: access policy, review notifications and recipient policies.
"""

import pytest
from datetime import datetime, timezone

from backend.app.core.exceptions import (
    AuthenticationError,
    InsufficientPermissionsError,
    InvalidInputError,
    ResourceNotFoundError,
)
from backend.app.models.enums import DocumentType, ExpenseType, InvoiceStatus, ReviewStatus, UserRole
from backend.app.schemas.document import DocumentCreate
from backend.app.schemas.expense import ExpenseCreate
from backend.app.schemas.file import StoredFile
from backend.app.schemas.invoice import InvoiceCreate, InvoiceItem
from backend.app.services.notification_service import (
    AllAccountantsPolicy,
    FirstAccountantPolicy,
    NotificationService,
    recipient_policy_from_name,
)
from backend.app.services.workflow import WorkflowService, parse_status


ACME_EXPENSE = ExpenseCreate(
    type=ExpenseType.SUPPLIES,
    amount=5000,
    supplier_name="Acme",
    invoice_date=datetime(2024, 1, 10, tzinfo=timezone.utc),
)

SCAN = StoredFile(file_url="/uploads/scan.pdf", file_name="scan.pdf")


def sample_invoice() -> InvoiceCreate:
    return InvoiceCreate(
        invoice_number="F-2024-001",
        client_name="Boulangerie Martin",
        amount=5000,
        issue_date=datetime(2024, 1, 5, tzinfo=timezone.utc),
        due_date=datetime(2024, 2, 5, tzinfo=timezone.utc),
        items=[InvoiceItem(description="Bread", quantity=10, unit_price=500, total=5000)],
    )


@pytest.fixture
async def people(memory_store, make_user):
    accountant = await make_user(memory_store, "accountant", UserRole.ACCOUNTANT, "Comptable Admin")
    client = await make_user(memory_store, "jdupont", UserRole.CLIENT, "Jean Dupont")
    other = await make_user(memory_store, "mmartin", UserRole.CLIENT, "Marie Martin")
    return accountant, client, other


# Reviews

@pytest.mark.asyncio
async def test_accountant_validates_expense(workflow, memory_store, people):
    accountant, client, _ = people
    assert (accountant.id, client.id) == (1, 2)
    expense = await workflow.submit_expense(client, ACME_EXPENSE)
    before = len(await memory_store.notifications_by_user(client.id))
    
    reviewed = await workflow.update_expense_status(expense.id, "processed", accountant)
    
    assert reviewed.status == ReviewStatus.PROCESSED
    assert reviewed.reviewed_by == 1
    assert reviewed.reviewed_at is not None
    
    notifications = await memory_store.notifications_by_user(client.id)
    assert len(notifications) == before + 1
    assert notifications[0].title == "Expense status updated"
    assert notifications[0].message == "Your purchase invoice has been validated"
    assert notifications[0].link == f"/expenses/{expense.id}"
    assert notifications[0].read is False


@pytest.mark.asyncio
async def test_rejected_document_notifies_owner(workflow, memory_store, people):
    accountant, client, _ = people
    document = await workflow.submit_document(
        client, DocumentCreate(type=DocumentType.RECEIPT, title="Ticket"), SCAN
    )
    
    reviewed = await workflow.update_document_status(document.id, ReviewStatus.REJECTED, accountant)
    
    assert reviewed.status == ReviewStatus.REJECTED
    assert reviewed.reviewed_by == accountant.id
    latest = (await memory_store.notifications_by_user(client.id))[0]
    assert latest.title == "Document status updated"
    assert latest.message == "Your document has been rejected"
    assert latest.link == f"/documents/{document.id}"


@pytest.mark.asyncio
async def test_repeated_review_notifies_each_time(workflow, memory_store, people):
    accountant, client, _ = people
    expense = await workflow.submit_expense(client, ACME_EXPENSE)
    
    first = await workflow.update_expense_status(expense.id, "processed", accountant)
    second = await workflow.update_expense_status(expense.id, "processed", accountant)
    
    assert second.reviewed_at > first.reviewed_at
    assert len(await memory_store.notifications_by_user(client.id)) == 2


@pytest.mark.asyncio
async def test_client_cannot_review_even_own_expense(workflow, memory_store, people):
    _, client, _ = people
    expense = await workflow.submit_expense(client, ACME_EXPENSE)
    
    with pytest.raises(InsufficientPermissionsError):
        await workflow.update_expense_status(expense.id, "processed", client)
    
    unchanged = await memory_store.get_expense(expense.id)
    assert unchanged.status == ReviewStatus.PENDING
    assert unchanged.reviewed_by is None
    assert await memory_store.notifications_by_user(client.id) == []


@pytest.mark.asyncio
async def test_anonymous_review_is_unauthenticated(workflow, people):
    _, client, _ = people
    expense = await workflow.submit_expense(client, ACME_EXPENSE)
    
    with pytest.raises(AuthenticationError):
        await workflow.update_expense_status(expense.id, "processed", None)


@pytest.mark.asyncio
async def test_review_missing_record_is_not_found(workflow, memory_store, people):
    accountant, client, _ = people
    
    with pytest.raises(ResourceNotFoundError):
        await workflow.update_expense_status(999, "processed", accountant)
    with pytest.raises(ResourceNotFoundError):
        await workflow.update_document_status(999, "rejected", accountant)
    
    assert await memory_store.notifications_by_user(client.id) == []


@pytest.mark.asyncio
async def test_unknown_review_status_rejected_without_mutation(workflow, memory_store, people):
    accountant, client, _ = people
    expense = await workflow.submit_expense(client, ACME_EXPENSE)
    
    with pytest.raises(InvalidInputError) as exc_info:
        await workflow.update_expense_status(expense.id, "approved", accountant)
    
    assert exc_info.value.details["allowed"] == ["pending", "processed", "rejected"]
    assert (await memory_store.get_expense(expense.id)).status == ReviewStatus.PENDING
    assert await memory_store.notifications_by_user(client.id) == []


def test_parse_status_accepts_members_and_values():
    assert parse_status(InvoiceStatus, "paid") is InvoiceStatus.PAID
    assert parse_status(InvoiceStatus, InvoiceStatus.SENT) is InvoiceStatus.SENT
    with pytest.raises(InvalidInputError):
        parse_status(InvoiceStatus, "cancelled")


# Invoices

@pytest.mark.asyncio
async def test_invoice_status_by_owner_and_accountant(workflow, memory_store, people):
    accountant, client, _ = people
    invoice = await workflow.create_invoice(client, sample_invoice())
    
    sent = await workflow.update_invoice_status(invoice.id, "sent", client)
    paid = await workflow.update_invoice_status(invoice.id, InvoiceStatus.PAID, accountant)
    
    assert sent.status == InvoiceStatus.SENT
    assert paid.status == InvoiceStatus.PAID
    # Invoice status changes are silent
    assert await memory_store.notifications_by_user(client.id) == []


@pytest.mark.asyncio
async def test_invoice_hidden_from_other_client(workflow, memory_store, people):
    accountant, client, other = people
    invoice = await workflow.create_invoice(client, sample_invoice())
    
    with pytest.raises(InsufficientPermissionsError):
        await workflow.get_invoice(invoice.id, other)
    with pytest.raises(InsufficientPermissionsError):
        await workflow.update_invoice_status(invoice.id, "paid", other)
    
    assert (await workflow.get_invoice(invoice.id, accountant)).id == invoice.id
    assert (await memory_store.get_invoice(invoice.id)).status == InvoiceStatus.DRAFT


@pytest.mark.asyncio
async def test_missing_invoice_is_not_found(workflow, people):
    accountant, _, _ = people
    
    with pytest.raises(ResourceNotFoundError):
        await workflow.update_invoice_status(42, "paid", accountant)


@pytest.mark.asyncio
async def test_unknown_invoice_status_rejected(workflow, memory_store, people):
    _, client, _ = people
    invoice = await workflow.create_invoice(client, sample_invoice())
    
    with pytest.raises(InvalidInputError):
        await workflow.update_invoice_status(invoice.id, "cancelled", client)
    
    assert (await memory_store.get_invoice(invoice.id)).status == InvoiceStatus.DRAFT


# Reads and queues

@pytest.mark.asyncio
async def test_listings_are_owner_scoped(workflow, people):
    _, client, other = people
    await workflow.submit_expense(client, ACME_EXPENSE)
    await workflow.submit_document(client, DocumentCreate(type=DocumentType.OTHER, title="Bail"), SCAN)
    
    assert len(await workflow.list_expenses(client)) == 1
    assert await workflow.list_expenses(other) == []
    assert await workflow.list_documents(other) == []


@pytest.mark.asyncio
async def test_single_record_reads(workflow, people):
    accountant, client, other = people
    expense = await workflow.submit_expense(client, ACME_EXPENSE)
    
    assert (await workflow.get_expense(expense.id, client)).id == expense.id
    assert (await workflow.get_expense(expense.id, accountant)).id == expense.id
    with pytest.raises(InsufficientPermissionsError):
        await workflow.get_expense(expense.id, other)
    with pytest.raises(ResourceNotFoundError):
        await workflow.get_document(7, client)


@pytest.mark.asyncio
async def test_accountant_queues_require_accountant(workflow, people):
    accountant, client, other = people
    await workflow.submit_document(client, DocumentCreate(type=DocumentType.INVOICE, title="A"), SCAN)
    
    clients = await workflow.list_clients(accountant)
    pending = await workflow.pending_documents(accountant)
    
    assert [c.full_name for c in clients] == ["Jean Dupont", "Marie Martin"]
    assert len(pending) == 1
    with pytest.raises(InsufficientPermissionsError):
        await workflow.list_clients(client)
    with pytest.raises(InsufficientPermissionsError):
        await workflow.pending_documents(other)


# Submission notifications

@pytest.mark.asyncio
async def test_submission_notifies_first_accountant(workflow, memory_store, people, make_user):
    accountant, client, _ = people
    late = await make_user(memory_store, "late", UserRole.ACCOUNTANT, "Late Accountant")
    
    expense = await workflow.submit_expense(client, ACME_EXPENSE)
    
    inbox = await memory_store.notifications_by_user(accountant.id)
    assert len(inbox) == 1
    assert inbox[0].title == "New expense"
    assert inbox[0].message == "Jean Dupont added a new purchase invoice"
    assert inbox[0].link == f"/expenses/{expense.id}"
    assert await memory_store.notifications_by_user(late.id) == []


@pytest.mark.asyncio
async def test_submission_notifies_all_accountants(memory_store, people, make_user):
    accountant, client, _ = people
    second = await make_user(memory_store, "second", UserRole.ACCOUNTANT, "Second Accountant")
    workflow = WorkflowService(memory_store, NotificationService(memory_store, AllAccountantsPolicy()))
    
    await workflow.submit_document(client, DocumentCreate(type=DocumentType.OTHER, title="Kbis"), SCAN)
    
    for recipient in (accountant, second):
        inbox = await memory_store.notifications_by_user(recipient.id)
        assert [n.title for n in inbox] == ["New document"]


@pytest.mark.asyncio
async def test_submission_without_accountant_still_succeeds(memory_store, make_user):
    client = await make_user(memory_store, "solo", UserRole.CLIENT, "Solo Client")
    workflow = WorkflowService(memory_store, NotificationService(memory_store))
    
    expense = await workflow.submit_expense(client, ACME_EXPENSE)
    
    assert expense.status == ReviewStatus.PENDING


def test_recipient_policy_from_name():
    assert isinstance(recipient_policy_from_name("first"), FirstAccountantPolicy)
    assert isinstance(recipient_policy_from_name("all"), AllAccountantsPolicy)
    with pytest.raises(ValueError):
        recipient_policy_from_name("round_robin")


# Notification inbox

@pytest.mark.asyncio
async def test_mark_read_only_by_recipient(workflow, memory_store, people):
    accountant, client, _ = people
    await workflow.submit_expense(client, ACME_EXPENSE)
    notification = (await memory_store.notifications_by_user(accountant.id))[0]
    
    with pytest.raises(InsufficientPermissionsError):
        await workflow.notifications.mark_read(notification.id, client)
    with pytest.raises(ResourceNotFoundError):
        await workflow.notifications.mark_read(999, accountant)
    
    updated = await workflow.notifications.mark_read(notification.id, accountant)
    assert updated.read is True


@pytest.mark.asyncio
async def test_mark_all_read_counts_unread(workflow, memory_store, people):
    accountant, client, _ = people
    for _ in range(3):
        await workflow.submit_expense(client, ACME_EXPENSE)
    first = (await memory_store.notifications_by_user(accountant.id))[-1]
    await workflow.notifications.mark_read(first.id, accountant)
    
    assert await workflow.notifications.mark_all_read(accountant) == 2
    assert await workflow.notifications.mark_all_read(accountant) == 0
    assert all(n.read for n in await workflow.notifications.list_for_user(accountant))

"""
Concurrency Tests.

Concurrent reviews of one record by two accountants must leave the status
and review pair from a single call, and notify the owner once per call.
"""

import asyncio
import pytest
from datetime import datetime, timezone

from backend.app.models.enums import DocumentType, ExpenseType, ReviewStatus, UserRole
from backend.app.schemas.document import DocumentCreate
from backend.app.schemas.expense import ExpenseCreate
from backend.app.schemas.file import StoredFile
from backend.app.services.notification_service import NotificationService
from backend.app.services.workflow import WorkflowService

REVIEW_CALLS = 20


@pytest.fixture(params=["memory_store", "sql_file_store"])
def review_store(request):
    return request.getfixturevalue(request.param)


@pytest.fixture
async def reviewers(review_store, make_user):
    first = await make_user(review_store, "accountant", UserRole.ACCOUNTANT, "Comptable Admin")
    second = await make_user(review_store, "accountant2", UserRole.ACCOUNTANT, "Second Comptable")
    owner = await make_user(review_store, "jdupont", UserRole.CLIENT, "Jean Dupont")
    return first, second, owner


def alternating_reviews(first, second):
    """Processed by the first accountant, rejected by the second, in turn."""
    return [
        (ReviewStatus.PROCESSED, first) if i % 2 == 0 else (ReviewStatus.REJECTED, second)
        for i in range(REVIEW_CALLS)
    ]


def assert_single_call_outcome(final, results, reviews):
    allowed_pairs = {(status, reviewer.id) for status, reviewer in reviews}
    
    assert (final.status, final.reviewed_by) in allowed_pairs
    assert final.reviewed_at is not None
    # Every intermediate snapshot is also a whole review, never a mix
    for result in results:
        assert (result.status, result.reviewed_by) in allowed_pairs
        assert result.reviewed_at is not None


@pytest.mark.asyncio
async def test_concurrent_expense_reviews(review_store, reviewers):
    first, second, owner = reviewers
    workflow = WorkflowService(review_store, NotificationService(review_store))
    expense = await workflow.submit_expense(owner, ExpenseCreate(
        type=ExpenseType.SUPPLIES,
        amount=5000,
        supplier_name="Acme",
        invoice_date=datetime(2024, 1, 10, tzinfo=timezone.utc),
    ))
    before = len(await review_store.notifications_by_user(owner.id))
    reviews = alternating_reviews(first, second)
    
    results = await asyncio.gather(*(
        workflow.update_expense_status(expense.id, status, reviewer)
        for status, reviewer in reviews
    ))
    
    final = await review_store.get_expense(expense.id)
    assert_single_call_outcome(final, results, reviews)
    assert len(await review_store.notifications_by_user(owner.id)) == before + REVIEW_CALLS


@pytest.mark.asyncio
async def test_concurrent_document_reviews(review_store, reviewers):
    first, second, owner = reviewers
    workflow = WorkflowService(review_store, NotificationService(review_store))
    document = await workflow.submit_document(
        owner,
        DocumentCreate(type=DocumentType.BANK_STATEMENT, title="Relevé janvier"),
        StoredFile(file_url="/uploads/releve.pdf", file_name="releve.pdf"),
    )
    before = len(await review_store.notifications_by_user(owner.id))
    reviews = alternating_reviews(first, second)
    
    results = await asyncio.gather(*(
        workflow.update_document_status(document.id, status, reviewer)
        for status, reviewer in reviews
    ))
    
    final = await review_store.get_document(document.id)
    assert_single_call_outcome(final, results, reviews)
    assert len(await review_store.notifications_by_user(owner.id)) == before + REVIEW_CALLS
    # Reviewed documents leave the accountant queue
    assert await review_store.unprocessed_documents() == []

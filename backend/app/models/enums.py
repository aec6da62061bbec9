"""
Closed enumerations shared by records, schemas and ORM tables.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.
    
    Roles:
        CLIENT: Small-business owner who records transactions and submits expenses/documents
        ACCOUNTANT: Reviews and validates or rejects client submissions
    """
    CLIENT = "client"
    ACCOUNTANT = "accountant"


class TransactionType(str, enum.Enum):
    """Cash-register movement direction."""
    INCOME = "income"
    EXPENSE = "expense"


class InvoiceStatus(str, enum.Enum):
    """
    Sales invoice lifecycle.
    
    Any status may move to any other; there is no enforced transition graph.
    """
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


class ReviewStatus(str, enum.Enum):
    """
    Review lifecycle for expenses and documents.
    
    Status flow:
        PENDING → PROCESSED | REJECTED
        A reviewed record can be reviewed again.
    """
    PENDING = "pending"
    PROCESSED = "processed"
    REJECTED = "rejected"


# Category vocabularies validated at the API boundary
INCOME_CATEGORIES = frozenset({"sale", "service", "refund", "other_income"})
EXPENSE_CATEGORIES = frozenset({"supplies", "rent", "utilities", "salary", "transport", "other_expense"})

TRANSACTION_CATEGORIES = {
    TransactionType.INCOME: INCOME_CATEGORIES,
    TransactionType.EXPENSE: EXPENSE_CATEGORIES,
}


class ExpenseType(str, enum.Enum):
    SUPPLIES = "supplies"
    SERVICES = "services"
    EQUIPMENT = "equipment"
    TRAVEL = "travel"
    RENT = "rent"
    UTILITIES = "utilities"
    OTHER = "other"


class DocumentType(str, enum.Enum):
    INVOICE = "invoice"
    EXPENSE = "expense"
    BANK_STATEMENT = "bank_statement"
    RECEIPT = "receipt"
    OTHER = "other"

"""SQLAlchemy Repository 구현"""
from infrastructure.persistence.repositories.payment_repository import SqlAlchemyPaymentRepository
from infrastructure.persistence.repositories.credit_ledger import SqlAlchemyCreditLedger

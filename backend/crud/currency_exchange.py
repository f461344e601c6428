from sqlalchemy import and_
from sqlalchemy.orm import Session
from models.account import Account
from models.currency_exchange import CurrencyExchange
from schemas.currency_exchange import CurrencyExchangeCreate
from schemas.journal import JournalPageCreate, JournalPostCreate
from crud.journal import create_journal_page
from utils.errors import NotFoundError
from utils.dates import start_of_day, start_of_next_day
from utils.money import round_money
from datetime import date
from decimal import Decimal
from typing import Optional
import logging

logger = logging.getLogger(__name__)

JOURNAL_SOURCE = "Exchange"
POSITION_ACCOUNT = "Foreign Exchange Position Account"
EQUIVALENCE_POSITION_ACCOUNT = f"Equivalence {POSITION_ACCOUNT}"
CURRENCY_IDS = {"USD": 1, "KHR": 2}


def _currencies(exchange_option: str):
    if exchange_option == "USDtoKHR":
        return "USD", "KHR"
    return "KHR", "USD"


def _find_account(db: Session, *criteria) -> Optional[Account]:
    return db.query(Account).filter(and_(*criteria)).order_by(Account.account_number).first()


def _find_cash_account(db: Session, bank_location: str, currency: str) -> Optional[Account]:
    return _find_account(
        db,
        Account.name.contains(bank_location),
        Account.name.contains(currency),
        ~Account.name.contains(POSITION_ACCOUNT),
    )


def create_exchange(db: Session, exchange: CurrencyExchangeCreate, user_id: Optional[str] = None) -> CurrencyExchange:
    """
    Converts cash between USD and KHR at one bank location. Two journal
    pages are posted: the sold currency leaves its cash account into the
    equivalence position account, and the bought currency enters its cash
    account against the position account.
    """
    from_currency, to_currency = _currencies(exchange.exchange_option)

    from_account = _find_cash_account(db, exchange.bank_location, from_currency)
    to_account = _find_cash_account(db, exchange.bank_location, to_currency)
    if not from_account or not to_account:
        raise NotFoundError(
            f"Could not find one or both cash accounts for '{exchange.bank_location}' "
            f"with currencies {from_currency}/{to_currency}."
        )

    equivalence_account = _find_account(
        db,
        Account.name.contains(EQUIVALENCE_POSITION_ACCOUNT),
        Account.name.contains(from_currency),
    )
    position_account = _find_account(
        db,
        Account.name.startswith(POSITION_ACCOUNT),
        Account.name.contains(to_currency),
    )
    if not equivalence_account or not position_account:
        raise NotFoundError(
            f"FX position accounts not found. Expected '{EQUIVALENCE_POSITION_ACCOUNT} {from_currency}' "
            f"and '{POSITION_ACCOUNT} {to_currency}'."
        )

    from_amount = round_money(exchange.from_amount)
    rate = Decimal(exchange.rate)
    if exchange.exchange_option == "USDtoKHR":
        to_amount = round_money(from_amount * rate)
    else:
        to_amount = round_money(from_amount / rate)

    try:
        db_exchange = CurrencyExchange(
            user_id=user_id,
            exchange_option=exchange.exchange_option,
            from_amount=from_amount,
            to_amount=to_amount,
            rate=rate,
            bank_location=exchange.bank_location,
            description=exchange.description,
            created_by=user_id,
        )
        db.add(db_exchange)
        db.flush()

        note = f" ({exchange.description})" if exchange.description else ""
        create_journal_page(
            db,
            JournalPageCreate(
                currency_id=CURRENCY_IDS[from_currency],
                source=JOURNAL_SOURCE,
                ref=f"FX-{db_exchange.id}",
                description=f"FX Sale: {from_amount} {from_currency} @ {rate}{note}",
                entries=[
                    JournalPostCreate(account_number=from_account.account_number, credit=from_amount),
                    JournalPostCreate(account_number=equivalence_account.account_number, debit=from_amount),
                ],
            ),
            user_id=user_id,
            commit=False,
        )
        create_journal_page(
            db,
            JournalPageCreate(
                currency_id=CURRENCY_IDS[to_currency],
                source=JOURNAL_SOURCE,
                ref=f"FX-{db_exchange.id}",
                description=f"FX Purchase: {to_amount} {to_currency} @ {rate}{note}",
                entries=[
                    JournalPostCreate(account_number=to_account.account_number, debit=to_amount),
                    JournalPostCreate(account_number=position_account.account_number, credit=to_amount),
                ],
            ),
            user_id=user_id,
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_exchange)
    logger.info(
        f"Exchange {db_exchange.id}: {from_amount} {from_currency} -> {to_amount} {to_currency} "
        f"@ {rate} at '{exchange.bank_location}' by {user_id}"
    )
    return db_exchange


def get_exchanges(
    db: Session,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    include_disabled: bool = False,
):
    query = db.query(CurrencyExchange).execution_options(include_disabled=include_disabled)
    if start_date:
        query = query.filter(CurrencyExchange.timestamp >= start_of_day(start_date))
    if end_date:
        query = query.filter(CurrencyExchange.timestamp < start_of_next_day(end_date))
    return query.order_by(CurrencyExchange.timestamp.desc(), CurrencyExchange.id.desc()).all()


def disable_exchange(db: Session, exchange_id: int, user_id: Optional[str] = None) -> bool:
    db_exchange = db.query(CurrencyExchange).filter(CurrencyExchange.id == exchange_id).first()
    if not db_exchange:
        return False

    db_exchange.mark_disabled(user_id)
    db.commit()
    logger.info(f"Currency exchange {exchange_id} disabled by {user_id}")
    return True

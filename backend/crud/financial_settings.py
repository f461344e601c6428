from sqlalchemy.orm import Session
from models.financial_settings import FinancialSettings
from models.account import Account
from schemas.financial_settings import FinancialSettingsUpdate
from crud.account import initialize_default_chart
from utils.errors import ValidationError
from typing import Optional
import logging
import config

logger = logging.getLogger(__name__)

# Categories each posting account must belong to
EXPECTED_CATEGORIES = {
    'cash_account_number': ('Asset',),
    'inventory_account_number': ('Asset',),
    'sales_account_number': ('Revenue',),
    'cogs_account_number': ('COGS', 'Expense'),
}


def get_financial_settings(db: Session) -> FinancialSettings:
    """
    Returns the posting-settings singleton, creating it from configuration
    on first use. The default chart is seeded first so every referenced
    account exists.
    """
    settings = db.query(FinancialSettings).filter(FinancialSettings.id == 1).first()
    if settings:
        return settings

    logger.info("No financial settings found. Initializing defaults.")
    initialize_default_chart(db, commit=False)
    settings = FinancialSettings(
        id=1,
        cash_account_number=config.DEFAULT_CASH_ACCOUNT_NUMBER,
        inventory_account_number=config.DEFAULT_INVENTORY_ACCOUNT_NUMBER,
        sales_account_number=config.DEFAULT_SALES_ACCOUNT_NUMBER,
        cogs_account_number=config.DEFAULT_COGS_ACCOUNT_NUMBER,
    )
    db.add(settings)
    db.commit()
    db.refresh(settings)
    return settings


def update_financial_settings(db: Session, settings_update: FinancialSettingsUpdate, user_id: Optional[str] = None) -> FinancialSettings:
    settings = get_financial_settings(db)
    update_data = settings_update.model_dump(exclude_unset=True, exclude_none=True)

    for field, account_number in update_data.items():
        account = db.query(Account).filter(Account.account_number == account_number).first()
        if not account:
            raise ValidationError(f"Account {account_number} does not exist or is disabled.")

        expected = EXPECTED_CATEGORIES[field]
        if (account.category_name or "").lower() not in [c.lower() for c in expected]:
            raise ValidationError(
                f"Account for '{field}' must be in category {' or '.join(expected)}, but {account_number} is '{account.category_name}'."
            )

    for key, value in update_data.items():
        setattr(settings, key, value)
    settings.updated_by = user_id

    db.commit()
    db.refresh(settings)
    logger.info(f"Financial settings updated by {user_id}: {update_data}")
    return settings

from models.unit import Unit
from models.item import Item
from models.item_detail import ItemDetail
from models.inventory_log import InventoryLog
from models.account_category import AccountCategory, AccountSubCategory
from models.account import Account
from models.journal_page import JournalPage
from models.journal_post import JournalPost
from models.purchase import Purchase, PurchaseDetail
from models.sale import Sale, SaleDetail
from models.currency_exchange import CurrencyExchange
from models.financial_settings import FinancialSettings

__all__ = ['Account', 'AccountCategory', 'AccountSubCategory', 'CurrencyExchange', 'FinancialSettings', 'InventoryLog', 'Item', 'ItemDetail', 'JournalPage', 'JournalPost', 'Purchase', 'PurchaseDetail', 'Sale', 'SaleDetail', 'Unit',]

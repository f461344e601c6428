from pydantic import BaseModel
from typing import List
from decimal import Decimal
from datetime import date


class TrialBalanceLine(BaseModel):
    account_number: str
    account_name: str
    debit: Decimal = Decimal(0)
    credit: Decimal = Decimal(0)

class TrialBalanceReport(BaseModel):
    as_of_date: date
    report_title: str
    report_currency: str
    reporting_currency_symbol: str
    exchange_rate: Decimal
    lines: List[TrialBalanceLine] = []
    total_debits: Decimal = Decimal(0)
    total_credits: Decimal = Decimal(0)
    is_balanced: bool = True


class BalanceSheetAccount(BaseModel):
    account_number: str
    account_name: str
    balance_native: Decimal
    currency_symbol_native: str
    balance_in_report_currency: Decimal

class BalanceSheetSubGroup(BaseModel):
    sub_group_name: str
    accounts: List[BalanceSheetAccount] = []
    sub_group_total_in_report_currency: Decimal = Decimal(0)

class BalanceSheetGroup(BaseModel):
    group_name: str
    sub_groups: List[BalanceSheetSubGroup] = []
    group_total_in_report_currency: Decimal = Decimal(0)

class BalanceSheet(BaseModel):
    as_of_date: date
    report_title: str
    report_currency: str
    reporting_currency_symbol: str
    exchange_rate: Decimal
    asset_groups: List[BalanceSheetGroup] = []
    liability_groups: List[BalanceSheetGroup] = []
    equity_groups: List[BalanceSheetGroup] = []
    income_groups: List[BalanceSheetGroup] = []
    expense_groups: List[BalanceSheetGroup] = []
    total_assets: Decimal = Decimal(0)
    total_liabilities: Decimal = Decimal(0)
    total_equity: Decimal = Decimal(0)
    total_liabilities_and_equity: Decimal = Decimal(0)
    total_income: Decimal = Decimal(0)
    total_expenses: Decimal = Decimal(0)
    net_profit_or_loss: Decimal = Decimal(0)
    is_balanced: bool = True


class ProfitLossAccountLine(BaseModel):
    account_number: str
    account_name: str
    current_month_amount: Decimal = Decimal(0)
    year_to_date_amount: Decimal = Decimal(0)

class ProfitLossSubGroup(BaseModel):
    sub_group_name: str
    accounts: List[ProfitLossAccountLine] = []
    total_current_month: Decimal = Decimal(0)
    total_year_to_date: Decimal = Decimal(0)

class ProfitLossSection(BaseModel):
    section_name: str
    sub_groups: List[ProfitLossSubGroup] = []
    accounts: List[ProfitLossAccountLine] = []
    total_current_month: Decimal = Decimal(0)
    total_year_to_date: Decimal = Decimal(0)

class ProfitAndLoss(BaseModel):
    as_of_date: date
    report_title: str
    report_currency: str
    reporting_currency_symbol: str
    exchange_rate: Decimal
    revenue_section: ProfitLossSection
    cost_of_goods_sold_section: ProfitLossSection
    operating_expense_section: ProfitLossSection
    gross_profit_current_month: Decimal = Decimal(0)
    gross_profit_year_to_date: Decimal = Decimal(0)
    net_income_current_month: Decimal = Decimal(0)
    net_income_year_to_date: Decimal = Decimal(0)

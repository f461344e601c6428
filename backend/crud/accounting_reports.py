"""
Financial statements built from journal posts.

Every report sums the posts of active journal pages created up to the end
of the as-of day (business timezone), converts each account from its native
currency into the report currency and groups the results by category.
"""

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter
from models.account import Account
from models.journal_page import JournalPage
from models.journal_post import JournalPost
from schemas.accounting_reports import (
    TrialBalanceLine,
    TrialBalanceReport,
    BalanceSheetAccount,
    BalanceSheetSubGroup,
    BalanceSheetGroup,
    BalanceSheet,
    ProfitLossAccountLine,
    ProfitLossSubGroup,
    ProfitLossSection,
    ProfitAndLoss,
)
from utils.errors import ValidationError
from utils.dates import end_of_day, start_of_day
from utils.money import round_money, round_native, currency_symbol
from datetime import date
from decimal import Decimal
from io import BytesIO
from typing import Dict, Optional, Tuple
import logging
import config

logger = logging.getLogger(__name__)

BALANCE_TOLERANCE = Decimal("0.015")

ASSET_CATEGORY = "Asset"
LIABILITY_CATEGORY = "Liability"
EQUITY_CATEGORY = "Equity"
INCOME_CATEGORIES = ("Revenue", "Income")
EXPENSE_CATEGORY = "Expense"
COGS_CATEGORY = "COGS"

PROFIT_SUB_GROUP = "Profit or Loss Current Year"
PROFIT_ACCOUNT_NUMBER = "4081020000"
PROFIT_ACCOUNT_NAME = "Profit Current Year"


def resolve_report_currency(report_currency: Optional[str], exchange_rate) -> Tuple[str, Decimal]:
    """Validates the requested currency and KHR-per-USD rate, applying configured defaults."""
    currency = (report_currency or config.DEFAULT_REPORT_CURRENCY).upper()
    if currency not in config.SUPPORTED_CURRENCIES:
        raise ValidationError(
            f"Report currency must be one of {', '.join(config.SUPPORTED_CURRENCIES)}, got '{report_currency}'."
        )
    rate = config.DEFAULT_KHR_EXCHANGE_RATE if exchange_rate is None else Decimal(exchange_rate)
    if rate <= 0:
        raise ValidationError("Exchange rate must be greater than zero.")
    return currency, rate


def native_currency(account: Account) -> str:
    if account.currency_code:
        return account.currency_code.upper()
    name = account.name or ""
    if name.upper().endswith(": KHR") or name.startswith("KHR ") or " KHR " in name:
        return "KHR"
    return "USD"


def convert(amount, native: str, report_currency: str, rate: Decimal) -> Decimal:
    """Converts a native amount into the report currency, rounded to cents."""
    amount = Decimal(amount or 0)
    if native == "KHR" and report_currency == "USD":
        amount = amount / rate
    elif native == "USD" and report_currency == "KHR":
        amount = amount * rate
    return round_money(amount)


def _category_is(account: Account, *names) -> bool:
    category = (account.category_name or "").lower()
    return category in [n.lower() for n in names]


def _accounts(db: Session):
    return db.query(Account).options(
        selectinload(Account.category), selectinload(Account.sub_category)
    ).order_by(Account.account_number).all()


def _posted_totals(db: Session, as_of_date: date, since: Optional[date] = None) -> Dict[str, Tuple[Decimal, Decimal]]:
    """Debit and credit sums per account number over active pages."""
    query = db.query(
        JournalPost.account_number,
        func.coalesce(func.sum(JournalPost.debit), 0),
        func.coalesce(func.sum(JournalPost.credit), 0)
    ).join(
        JournalPage, JournalPage.id == JournalPost.journal_page_id
    ).filter(
        JournalPage.disabled.is_(False),
        JournalPage.created_at <= end_of_day(as_of_date)
    )
    if since is not None:
        query = query.filter(JournalPage.created_at >= start_of_day(since))

    return {
        number: (Decimal(str(debit)), Decimal(str(credit)))
        for number, debit, credit in query.group_by(JournalPost.account_number).all()
    }


# --- Trial balance ---

def compute_trial_balance(
    db: Session,
    as_of_date: date,
    report_currency: Optional[str] = None,
    exchange_rate=None,
) -> TrialBalanceReport:
    currency, rate = resolve_report_currency(report_currency, exchange_rate)
    logger.info(f"Trial balance requested: as_of={as_of_date}, currency={currency}, rate={rate}")

    report = TrialBalanceReport(
        as_of_date=as_of_date,
        report_title=f"Trial Balance as of {as_of_date:%d/%m/%Y}",
        report_currency=currency,
        reporting_currency_symbol=currency_symbol(currency),
        exchange_rate=rate,
    )

    accounts = _accounts(db)
    if not accounts:
        logger.warning("No accounts found for trial balance.")
        report.report_title = f"{report.report_title} - No Account Data"
        return report

    totals = _posted_totals(db, as_of_date)
    total_debits = Decimal(0)
    total_credits = Decimal(0)

    for account in accounts:
        debits, credits = totals.get(account.account_number, (Decimal(0), Decimal(0)))
        native = native_currency(account)
        net = convert(debits, native, currency, rate) - convert(credits, native, currency, rate)

        debit_column = Decimal(0)
        credit_column = Decimal(0)
        if account.normal_balance == "credit":
            net = -net
            if net >= 0:
                credit_column = net
            else:
                debit_column = -net
        else:
            if net >= 0:
                debit_column = net
            else:
                credit_column = -net

        if debit_column == 0 and credit_column == 0:
            continue
        report.lines.append(TrialBalanceLine(
            account_number=account.account_number,
            account_name=account.name,
            debit=debit_column,
            credit=credit_column,
        ))
        total_debits += debit_column
        total_credits += credit_column

    report.total_debits = round_money(total_debits)
    report.total_credits = round_money(total_credits)
    report.is_balanced = abs(report.total_debits - report.total_credits) < BALANCE_TOLERANCE
    if not report.is_balanced:
        logger.warning(f"Trial balance is NOT balanced: debits={report.total_debits} credits={report.total_credits}")
    return report


# --- Balance sheet ---

def _native_balance(account: Account, debits: Decimal, credits: Decimal) -> Decimal:
    if account.normal_balance == "credit":
        return round_native(credits - debits)
    return round_native(debits - credits)


def _build_group(lines, group_name: str) -> BalanceSheetGroup:
    """Groups (account, line) pairs by sub-category; 'General' when unset."""
    sub_groups: Dict[str, list] = {}
    for account, line in lines:
        sub_groups.setdefault(account.sub_category_name or "General", []).append(line)

    group = BalanceSheetGroup(group_name=group_name)
    for name in sorted(sub_groups):
        accounts = sorted(sub_groups[name], key=lambda a: a.account_number)
        group.sub_groups.append(BalanceSheetSubGroup(
            sub_group_name=name,
            accounts=accounts,
            sub_group_total_in_report_currency=round_money(sum((a.balance_in_report_currency for a in accounts), Decimal(0))),
        ))
    group.group_total_in_report_currency = round_money(
        sum((sg.sub_group_total_in_report_currency for sg in group.sub_groups), Decimal(0))
    )
    return group


def compute_balance_sheet(
    db: Session,
    as_of_date: date,
    report_currency: Optional[str] = None,
    exchange_rate=None,
) -> BalanceSheet:
    currency, rate = resolve_report_currency(report_currency, exchange_rate)
    symbol = currency_symbol(currency)
    logger.info(f"Balance sheet requested: as_of={as_of_date}, currency={currency}, rate={rate}")

    accounts = _accounts(db)
    if not accounts:
        logger.warning("No accounts found for balance sheet.")
        return BalanceSheet(
            as_of_date=as_of_date,
            report_title="Balance Sheet - No Account Data",
            report_currency=currency,
            reporting_currency_symbol=symbol,
            exchange_rate=rate,
        )

    totals = _posted_totals(db, as_of_date)
    processed = []
    for account in accounts:
        debits, credits = totals.get(account.account_number, (Decimal(0), Decimal(0)))
        native = native_currency(account)
        balance = _native_balance(account, debits, credits)
        processed.append((account, BalanceSheetAccount(
            account_number=account.account_number,
            account_name=account.name,
            balance_native=balance,
            currency_symbol_native=currency_symbol(native),
            balance_in_report_currency=convert(balance, native, currency, rate),
        )))

    def in_category(*names):
        return [(a, line) for a, line in processed if _category_is(a, *names)]

    report = BalanceSheet(
        as_of_date=as_of_date,
        report_title=f"Balance Sheet as of {as_of_date:%d/%m/%Y}",
        report_currency=currency,
        reporting_currency_symbol=symbol,
        exchange_rate=rate,
        asset_groups=[_build_group(in_category(ASSET_CATEGORY), "Assets")],
        liability_groups=[_build_group(in_category(LIABILITY_CATEGORY), "Liabilities")],
        equity_groups=[_build_group(in_category(EQUITY_CATEGORY), "Equity")],
        income_groups=[_build_group(in_category(*INCOME_CATEGORIES), "Income")],
        expense_groups=[
            _build_group(in_category(EXPENSE_CATEGORY), "Expenses"),
            _build_group(in_category(COGS_CATEGORY), "Cost of Goods Sold"),
        ],
    )

    report.total_assets = round_money(sum((g.group_total_in_report_currency for g in report.asset_groups), Decimal(0)))
    report.total_liabilities = round_money(sum((g.group_total_in_report_currency for g in report.liability_groups), Decimal(0)))
    report.total_income = round_money(sum((g.group_total_in_report_currency for g in report.income_groups), Decimal(0)))
    report.total_expenses = round_money(sum((g.group_total_in_report_currency for g in report.expense_groups), Decimal(0)))
    report.net_profit_or_loss = round_money(report.total_income - report.total_expenses)

    # Current-year result closes into equity
    equity_group = report.equity_groups[0]
    equity_group.sub_groups.append(BalanceSheetSubGroup(
        sub_group_name=PROFIT_SUB_GROUP,
        accounts=[BalanceSheetAccount(
            account_number=PROFIT_ACCOUNT_NUMBER,
            account_name=PROFIT_ACCOUNT_NAME,
            balance_native=report.net_profit_or_loss,
            currency_symbol_native=symbol,
            balance_in_report_currency=report.net_profit_or_loss,
        )],
        sub_group_total_in_report_currency=report.net_profit_or_loss,
    ))
    equity_group.group_total_in_report_currency = round_money(
        sum((sg.sub_group_total_in_report_currency for sg in equity_group.sub_groups), Decimal(0))
    )

    report.total_equity = round_money(sum(
        (sg.sub_group_total_in_report_currency for g in report.equity_groups for sg in g.sub_groups), Decimal(0)
    ))
    report.total_liabilities_and_equity = round_money(report.total_liabilities + report.total_equity)
    report.is_balanced = abs(report.total_assets - report.total_liabilities_and_equity) < BALANCE_TOLERANCE

    if not report.is_balanced:
        logger.warning(
            f"Balance sheet is NOT balanced. Difference: {report.total_assets - report.total_liabilities_and_equity}"
        )
    logger.info(
        f"Balance sheet complete: assets={report.total_assets}, liabilities={report.total_liabilities}, "
        f"equity={report.total_equity}, net={report.net_profit_or_loss}, balanced={report.is_balanced}"
    )
    return report


# --- Profit and loss ---

def _section(accounts, balances, section_name: str, default_sub_group: Optional[str]) -> ProfitLossSection:
    section = ProfitLossSection(section_name=section_name)

    def line(account):
        current_month, year_to_date = balances[account.account_number]
        return ProfitLossAccountLine(
            account_number=account.account_number,
            account_name=account.name,
            current_month_amount=current_month,
            year_to_date_amount=year_to_date,
        )

    if default_sub_group is None:
        section.accounts = [line(a) for a in sorted(accounts, key=lambda a: a.account_number)]
        section.total_current_month = sum((l.current_month_amount for l in section.accounts), Decimal(0))
        section.total_year_to_date = sum((l.year_to_date_amount for l in section.accounts), Decimal(0))
        return section

    grouped: Dict[str, list] = {}
    for account in accounts:
        grouped.setdefault(account.sub_category_name or default_sub_group, []).append(account)
    for name in sorted(grouped):
        lines = [line(a) for a in sorted(grouped[name], key=lambda a: a.account_number)]
        section.sub_groups.append(ProfitLossSubGroup(
            sub_group_name=name,
            accounts=lines,
            total_current_month=sum((l.current_month_amount for l in lines), Decimal(0)),
            total_year_to_date=sum((l.year_to_date_amount for l in lines), Decimal(0)),
        ))
    section.total_current_month = sum((sg.total_current_month for sg in section.sub_groups), Decimal(0))
    section.total_year_to_date = sum((sg.total_year_to_date for sg in section.sub_groups), Decimal(0))
    return section


def compute_profit_and_loss(
    db: Session,
    as_of_date: date,
    report_currency: Optional[str] = None,
    exchange_rate=None,
) -> ProfitAndLoss:
    """
    Current-month and year-to-date net change of every revenue, COGS and
    expense account, with gross profit and net income.
    """
    currency, rate = resolve_report_currency(report_currency, exchange_rate)
    logger.info(f"Profit and loss requested: as_of={as_of_date}, currency={currency}, rate={rate}")

    accounts = [
        a for a in _accounts(db)
        if _category_is(a, *INCOME_CATEGORIES) or _category_is(a, EXPENSE_CATEGORY, COGS_CATEGORY)
    ]
    report = ProfitAndLoss(
        as_of_date=as_of_date,
        report_title=f"Profit & Loss Statement for period ending {as_of_date:%B %d, %Y}",
        report_currency=currency,
        reporting_currency_symbol=currency_symbol(currency),
        exchange_rate=rate,
        revenue_section=ProfitLossSection(section_name="Revenue"),
        cost_of_goods_sold_section=ProfitLossSection(section_name="Cost of Goods Sold"),
        operating_expense_section=ProfitLossSection(section_name="Operating Expenses"),
    )
    if not accounts:
        logger.warning("No revenue, expense or COGS accounts found.")
        report.report_title = "Profit & Loss Statement - No Relevant Accounts"
        return report

    year_totals = _posted_totals(db, as_of_date, since=as_of_date.replace(month=1, day=1))
    month_totals = _posted_totals(db, as_of_date, since=as_of_date.replace(day=1))

    balances = {}
    for account in accounts:
        native = native_currency(account)
        changes = []
        for totals in (month_totals, year_totals):
            debits, credits = totals.get(account.account_number, (Decimal(0), Decimal(0)))
            debits = convert(debits, native, currency, rate)
            credits = convert(credits, native, currency, rate)
            changes.append(credits - debits if _category_is(account, *INCOME_CATEGORIES) else debits - credits)
        balances[account.account_number] = tuple(changes)

    report.revenue_section = _section(
        [a for a in accounts if _category_is(a, *INCOME_CATEGORIES)], balances, "Revenue", "General Revenue"
    )
    report.cost_of_goods_sold_section = _section(
        [a for a in accounts if _category_is(a, COGS_CATEGORY)], balances, "Cost of Goods Sold", None
    )
    report.operating_expense_section = _section(
        [a for a in accounts if _category_is(a, EXPENSE_CATEGORY)], balances, "Operating Expenses", "Other Operating Expenses"
    )

    report.gross_profit_current_month = report.revenue_section.total_current_month - report.cost_of_goods_sold_section.total_current_month
    report.gross_profit_year_to_date = report.revenue_section.total_year_to_date - report.cost_of_goods_sold_section.total_year_to_date
    report.net_income_current_month = report.gross_profit_current_month - report.operating_expense_section.total_current_month
    report.net_income_year_to_date = report.gross_profit_year_to_date - report.operating_expense_section.total_year_to_date

    logger.info(f"Profit and loss generated. Net income YTD: {report.net_income_year_to_date}")
    return report


# --- Excel exports ---

HEADER_FILL = PatternFill(start_color="92D050", end_color="92D050", fill_type="solid")
TOTAL_FILL = PatternFill(start_color="FFFF00", end_color="FFFF00", fill_type="solid")
BOLD_FONT = Font(bold=True)
TITLE_FONT = Font(bold=True, size=14)


def _write_title(ws, title: str, width: int):
    ws.append([title])
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=width)
    title_cell = ws.cell(row=1, column=1)
    title_cell.font = TITLE_FONT
    title_cell.alignment = Alignment(horizontal='center', vertical='center')
    ws.append([])


def _style_row(ws, fill, font=BOLD_FONT):
    for cell in ws[ws.max_row]:
        cell.fill = fill
        cell.font = font


def _save(wb: Workbook) -> BytesIO:
    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output


def export_trial_balance_xlsx(report: TrialBalanceReport) -> BytesIO:
    wb = Workbook()
    ws = wb.active
    ws.title = "Trial Balance"

    headers = ["Account Number", "Account Name", f"Debit ({report.reporting_currency_symbol})", f"Credit ({report.reporting_currency_symbol})"]
    _write_title(ws, report.report_title, len(headers))
    ws.append(headers)
    _style_row(ws, HEADER_FILL)

    for line in report.lines:
        ws.append([line.account_number, line.account_name, float(line.debit), float(line.credit)])

    ws.append(["TOTAL", "", float(report.total_debits), float(report.total_credits)])
    _style_row(ws, TOTAL_FILL)
    ws.append([])
    ws.append(["Balanced" if report.is_balanced else "NOT balanced", f"Exchange rate: {report.exchange_rate} KHR/USD"])

    for col_idx, width in enumerate([18, 45, 18, 18], start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = width
    return _save(wb)


def export_balance_sheet_xlsx(report: BalanceSheet) -> BytesIO:
    wb = Workbook()
    ws = wb.active
    ws.title = "Balance Sheet"

    symbol = report.reporting_currency_symbol
    headers = ["Account Number", "Account Name", "Native Balance", f"Balance ({symbol})"]
    _write_title(ws, report.report_title, len(headers))
    ws.append(headers)
    _style_row(ws, HEADER_FILL)

    sections = [
        (report.asset_groups, "TOTAL ASSETS", report.total_assets),
        (report.liability_groups, "TOTAL LIABILITIES", report.total_liabilities),
        (report.equity_groups, "TOTAL EQUITY", report.total_equity),
    ]
    for groups, total_label, total in sections:
        for group in groups:
            ws.append([group.group_name])
            ws.cell(row=ws.max_row, column=1).font = BOLD_FONT
            for sub_group in group.sub_groups:
                ws.append(["", sub_group.sub_group_name])
                ws.cell(row=ws.max_row, column=2).font = BOLD_FONT
                for account in sub_group.accounts:
                    ws.append([
                        account.account_number,
                        account.account_name,
                        f"{account.currency_symbol_native} {account.balance_native:,.4f}",
                        float(account.balance_in_report_currency),
                    ])
                ws.append(["", f"Total {sub_group.sub_group_name}", "", float(sub_group.sub_group_total_in_report_currency)])
        ws.append([total_label, "", "", float(total)])
        _style_row(ws, TOTAL_FILL)
        ws.append([])

    ws.append(["TOTAL LIABILITIES AND EQUITY", "", "", float(report.total_liabilities_and_equity)])
    _style_row(ws, TOTAL_FILL)
    ws.append(["Balanced" if report.is_balanced else "NOT balanced", f"Exchange rate: {report.exchange_rate} KHR/USD"])

    for col_idx, width in enumerate([18, 45, 22, 18], start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = width
    return _save(wb)

"""
Builders for accounts, vouchers and the sample non-profit books.
"""

from datetime import date
from decimal import Decimal

from ledger_kernel.domain.entities import (
    Account,
    AccountType,
    BalanceSide,
    Entry,
    Voucher,
    VoucherType,
)

OPENING_DATE = date(2024, 4, 1)


# =============================================================================
# Builders
# =============================================================================


def make_account(
    code: str,
    name: str,
    account_type: AccountType,
    opening: str = "0",
    side: BalanceSide | None = None,
    as_on: date = OPENING_DATE,
    is_active: bool = True,
) -> Account:
    return Account(
        account_code=code,
        account_name=name,
        account_type=account_type,
        opening_balance=Decimal(opening),
        opening_balance_type=side or account_type.natural_side,
        opening_balance_as_on_date=as_on,
        is_active=is_active,
    )


def make_voucher(
    voucher_no: str,
    day: date,
    lines: list[tuple[str, str, str]],
    voucher_type: VoucherType = VoucherType.JOURNAL,
    narration: str = "Test voucher",
) -> Voucher:
    """Lines are (account_code, debit, credit)."""
    return Voucher(
        voucher_no=voucher_no,
        voucher_type=voucher_type,
        date=day,
        narration=narration,
        entries=tuple(
            Entry(account_code=code, debit=Decimal(dr), credit=Decimal(cr))
            for code, dr, cr in lines
        ),
    )


def chart_of_accounts() -> list[Account]:
    """Opening balances: Cash 5000 Dr + Bank 20000 Dr = Capital Fund 25000 Cr."""
    return [
        make_account("1001", "Cash in Hand", AccountType.ASSET, "5000"),
        make_account("1002", "Bank Account", AccountType.ASSET, "20000"),
        make_account("2001", "Sundry Creditors", AccountType.LIABILITY),
        make_account("3001", "Capital Fund", AccountType.CAPITAL, "25000"),
        make_account("4001", "Donations Received", AccountType.INCOME),
        make_account("4002", "Membership Fees", AccountType.INCOME),
        make_account("5001", "Salaries", AccountType.EXPENSE),
        make_account("5002", "Rent", AccountType.EXPENSE),
    ]


def voucher_book() -> list[Voucher]:
    return [
        make_voucher(
            "RV-0001", date(2024, 4, 5),
            [("1002", "10000", "0"), ("4001", "0", "10000")],
            VoucherType.RECEIPT, "Donation from trust",
        ),
        make_voucher(
            "PV-0001", date(2024, 4, 10),
            [("5002", "3000", "0"), ("1001", "0", "3000")],
            VoucherType.PAYMENT, "Office rent April",
        ),
        make_voucher(
            "PV-0002", date(2024, 4, 15),
            [("5001", "8000", "0"), ("1002", "0", "8000")],
            VoucherType.PAYMENT, "Staff salaries",
        ),
        make_voucher(
            "RV-0002", date(2024, 5, 2),
            [("1001", "1500", "0"), ("4002", "0", "1500")],
            VoucherType.RECEIPT, "Membership fees collected",
        ),
        make_voucher(
            "JV-0001", date(2024, 5, 20),
            [("5002", "2000", "0"), ("2001", "0", "2000")],
            VoucherType.JOURNAL, "Rent May payable",
        ),
    ]

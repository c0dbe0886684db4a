"""
Ledger Modules.

Thin orchestration layers over the Ledger Kernel.

Modules:
- Reporting: ledger, trial balance, income and expenditure, balance
  sheet, monthly comparison, dashboard, voucher register
- Bookkeeping: chart of accounts maintenance and voucher entry

Actual accounting logic lives in the kernel.
"""
